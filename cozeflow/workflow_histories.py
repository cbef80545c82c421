"""Looking up the run history of an asynchronously executed workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Mapping, TypeVar

from .request import Core, HTTPResponse

_E = TypeVar("_E", bound=Enum)


class WorkflowRunMode(IntEnum):
    """How a workflow was run."""

    SYNCHRONOUS = 0
    STREAMING = 1
    ASYNCHRONOUS = 2


class WorkflowExecuteStatus(str, Enum):
    """Execution status of a workflow run."""

    SUCCESS = "Success"
    RUNNING = "Running"
    FAIL = "Fail"


def _enum_or_raw(enum_type: type[_E], value: Any) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        return value


@dataclass
class RetrieveWorkflowRunsHistoriesReq:
    """Identifies one execution of one workflow."""

    workflow_id: str
    execute_id: str


@dataclass
class WorkflowRunHistory:
    """One recorded execution of a workflow."""

    execute_id: str = ""
    execute_status: WorkflowExecuteStatus | str = ""
    bot_id: str = ""
    connector_id: str = ""
    connector_uid: str = ""
    run_mode: WorkflowRunMode | int = WorkflowRunMode.SYNCHRONOUS
    log_id: str = ""
    create_time: int = 0
    update_time: int = 0
    output: str = ""
    error_code: str = ""
    error_message: str = ""
    debug_url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkflowRunHistory:
        return cls(
            execute_id=data.get("execute_id", ""),
            execute_status=_enum_or_raw(WorkflowExecuteStatus, data.get("execute_status", "")),
            bot_id=data.get("bot_id", ""),
            connector_id=data.get("connector_id", ""),
            connector_uid=data.get("connector_uid", ""),
            run_mode=_enum_or_raw(WorkflowRunMode, data.get("run_mode", 0)),
            log_id=data.get("logid", ""),
            create_time=data.get("create_time", 0),
            update_time=data.get("update_time", 0),
            output=data.get("output", ""),
            error_code=data.get("error_code", ""),
            error_message=data.get("error_message", ""),
            debug_url=data.get("debug_url", ""),
        )


@dataclass
class RetrieveWorkflowRunsHistoriesResp:
    """The histories returned for one execution."""

    histories: list[WorkflowRunHistory] = field(default_factory=list)
    http_response: HTTPResponse | None = None

    def log_id(self) -> str:
        return self.http_response.log_id() if self.http_response is not None else ""


class WorkflowRunsHistories:
    """Access to workflow run histories."""

    def __init__(self, core: Core) -> None:
        self.core = core

    def retrieve(self, req: RetrieveWorkflowRunsHistoriesReq) -> RetrieveWorkflowRunsHistoriesResp:
        """Fetch the run history of ``req.execute_id`` within ``req.workflow_id``."""
        path = f"/v1/workflows/{req.workflow_id}/run_histories/{req.execute_id}"
        resp = self.core.request("GET", path)
        return RetrieveWorkflowRunsHistoriesResp(
            histories=[WorkflowRunHistory.from_dict(item) for item in resp.data or []],
            http_response=resp.http_response,
        )