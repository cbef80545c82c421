"""Information about the authenticated user."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .request import Core, HTTPResponse


@dataclass
class User:
    """A Coze user."""

    user_id: str = ""
    user_name: str = ""
    nick_name: str = ""
    avatar_url: str = ""
    http_response: HTTPResponse | None = None

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], http_response: HTTPResponse | None = None
    ) -> User:
        return cls(
            user_id=data.get("user_id", ""),
            user_name=data.get("user_name", ""),
            nick_name=data.get("nick_name", ""),
            avatar_url=data.get("avatar_url", ""),
            http_response=http_response,
        )

    def log_id(self) -> str:
        return self.http_response.log_id() if self.http_response is not None else ""


class Users:
    """Access to user information."""

    def __init__(self, core: Core) -> None:
        self.core = core

    def me(self) -> User:
        """Return the user that owns the current credentials."""
        resp = self.core.request("GET", "/v1/users/me")
        return User.from_dict(resp.data or {}, resp.http_response)