"""Duplicating templates into a workspace."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .request import Core, HTTPResponse


class TemplateEntityType(str, Enum):
    """Kind of entity a template produces."""

    AGENT = "agent"


@dataclass
class DuplicateTemplateReq:
    """Where to place the copy and, optionally, what to call it."""

    workspace_id: str
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"workspace_id": self.workspace_id}
        if self.name is not None:
            body["name"] = self.name
        return body


@dataclass
class TemplateDuplicateResp:
    """The entity created by duplicating a template."""

    entity_id: str = ""
    entity_type: TemplateEntityType | str = ""
    http_response: HTTPResponse | None = None

    def log_id(self) -> str:
        return self.http_response.log_id() if self.http_response is not None else ""


class Templates:
    """Access to template operations."""

    def __init__(self, core: Core) -> None:
        self.core = core

    def duplicate(self, template_id: str, req: DuplicateTemplateReq) -> TemplateDuplicateResp:
        """Create a copy of template ``template_id``."""
        resp = self.core.request("POST", f"/v1/templates/{template_id}/duplicate", req)
        data = resp.data or {}
        entity_type: Any = data.get("entity_type", "")
        try:
            entity_type = TemplateEntityType(entity_type)
        except ValueError:
            pass
        return TemplateDuplicateResp(
            entity_id=data.get("entity_id", ""),
            entity_type=entity_type,
            http_response=resp.http_response,
        )