"""Running workflows, synchronously or as event streams."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping

from .request import Core, HTTPResponse
from .stream_reader import StreamReader
from .workflow_histories import WorkflowRunsHistories


class WorkflowEventType(str, Enum):
    """Kind of event emitted while a workflow streams its output."""

    MESSAGE = "Message"
    ERROR = "Error"
    DONE = "Done"
    INTERRUPT = "Interrupt"


def _load_object(data: str) -> dict[str, Any]:
    value = json.loads(data)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got: {data!r}")
    return value


@dataclass
class WorkflowEventMessage:
    """Output streamed by a workflow node."""

    content: str = ""
    content_type: str = ""
    cost: str = ""
    node_id: str = ""
    node_title: str = ""
    node_type: str = ""
    node_seq_id: str = ""
    node_is_finish: bool = False
    token: int = 0
    ext: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkflowEventMessage:
        return cls(
            content=data.get("content", ""),
            content_type=data.get("content_type", ""),
            cost=data.get("cost", ""),
            node_id=data.get("node_id", ""),
            node_title=data.get("node_title", ""),
            node_type=data.get("node_type", ""),
            node_seq_id=data.get("node_seq_id", ""),
            node_is_finish=bool(data.get("node_is_finish", False)),
            token=data.get("token", 0),
            ext=data.get("ext"),
        )


@dataclass
class WorkflowEventInterruptData:
    """What must be passed back to resume an interrupted workflow."""

    event_id: str = ""
    type: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkflowEventInterruptData:
        return cls(event_id=data.get("event_id", ""), type=data.get("type", 0))


@dataclass
class WorkflowEventInterrupt:
    """The workflow stopped and waits for input."""

    interrupt_data: WorkflowEventInterruptData | None = None
    node_title: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkflowEventInterrupt:
        raw = data.get("interrupt_data")
        return cls(
            interrupt_data=WorkflowEventInterruptData.from_dict(raw)
            if isinstance(raw, Mapping)
            else None,
            node_title=data.get("node_title", ""),
        )


@dataclass
class WorkflowEventError:
    """An error reported inside the event stream."""

    error_code: int = 0
    error_message: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WorkflowEventError:
        return cls(
            error_code=data.get("error_code", 0),
            error_message=data.get("error_message", ""),
        )


@dataclass
class WorkflowEventDebugURL:
    """Debug page of a finished run."""

    url: str = ""


@dataclass
class WorkflowEvent:
    """One event of a streamed workflow run."""

    id: int = 0
    event: WorkflowEventType = WorkflowEventType.MESSAGE
    message: WorkflowEventMessage | None = None
    interrupt: WorkflowEventInterrupt | None = None
    error: WorkflowEventError | None = None
    debug_url: WorkflowEventDebugURL | None = None

    def is_done(self) -> bool:
        return self.event == WorkflowEventType.DONE


@dataclass
class RunWorkflowsReq:
    """Parameters for running a published workflow."""

    workflow_id: str
    parameters: dict[str, Any] | None = None
    bot_id: str = ""
    ext: dict[str, str] | None = None
    is_async: bool = False
    app_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"workflow_id": self.workflow_id}
        if self.parameters:
            body["parameters"] = self.parameters
        if self.bot_id:
            body["bot_id"] = self.bot_id
        if self.ext:
            body["ext"] = self.ext
        if self.is_async:
            body["is_async"] = True
        if self.app_id:
            body["app_id"] = self.app_id
        return body


@dataclass
class ResumeRunWorkflowsReq:
    """Parameters for resuming an interrupted workflow run."""

    workflow_id: str
    event_id: str
    resume_data: str
    interrupt_type: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "workflow_id": self.workflow_id,
            "event_id": self.event_id,
            "resume_data": self.resume_data,
            "interrupt_type": self.interrupt_type,
        }


@dataclass
class RunWorkflowsResp:
    """Result of a non-streamed workflow run."""

    execute_id: str = ""
    data: str = ""
    debug_url: str = ""
    token: int = 0
    cost: str = ""
    http_response: HTTPResponse | None = field(default=None, repr=False)

    def log_id(self) -> str:
        return self.http_response.log_id() if self.http_response is not None else ""


def parse_workflow_event_error(data: str) -> WorkflowEventError:
    """Decode the JSON body of an error event."""
    return WorkflowEventError.from_dict(_load_object(data))


def parse_workflow_event_interrupt(data: str) -> WorkflowEventInterrupt:
    """Decode the JSON body of an interrupt event."""
    return WorkflowEventInterrupt.from_dict(_load_object(data))


def _build_event(event_id: str, event_type: str, data: str) -> WorkflowEvent:
    try:
        ident = int(event_id)
    except ValueError:
        ident = 0
    if event_type == WorkflowEventType.INTERRUPT.value:
        return WorkflowEvent(
            id=ident,
            event=WorkflowEventType.INTERRUPT,
            interrupt=parse_workflow_event_interrupt(data),
        )
    if event_type == WorkflowEventType.ERROR.value:
        return WorkflowEvent(
            id=ident, event=WorkflowEventType.ERROR, error=parse_workflow_event_error(data)
        )
    if event_type == WorkflowEventType.DONE.value:
        payload = _load_object(data)
        return WorkflowEvent(
            id=ident,
            event=WorkflowEventType.DONE,
            debug_url=WorkflowEventDebugURL(url=payload.get("debug_url", "")),
        )
    return WorkflowEvent(
        id=ident,
        event=WorkflowEventType.MESSAGE,
        message=WorkflowEventMessage.from_dict(_load_object(data)),
    )


def parse_workflow_event(line: str, lines: Iterator[str]) -> tuple[WorkflowEvent | None, bool]:
    """Parse an ``id:`` line and the ``event:`` and ``data:`` lines that follow it.

    Lines that do not start an event yield ``(None, False)``.
    """
    if not line.startswith("id:"):
        return None, False
    event_id = line[3:].strip()
    try:
        event_line = next(lines)
        data_line = next(lines)
    except StopIteration:
        raise EOFError("stream ended inside an event") from None
    event = _build_event(event_id, event_line[6:].strip(), data_line[5:].strip())
    return event, event.is_done()


class WorkflowRuns:
    """Access to workflow runs."""

    def __init__(self, core: Core) -> None:
        self.core = core
        self.histories = WorkflowRunsHistories(core)

    def create(self, req: RunWorkflowsReq) -> RunWorkflowsResp:
        """Run a workflow and wait for its result."""
        resp = self.core.request("POST", "/v1/workflow/run", req)
        payload = resp.payload
        return RunWorkflowsResp(
            execute_id=payload.get("execute_id") or "",
            data=payload.get("data") or "",
            debug_url=payload.get("debug_url") or "",
            token=payload.get("token") or 0,
            cost=payload.get("cost") or "",
            http_response=resp.http_response,
        )

    def stream(self, req: RunWorkflowsReq) -> StreamReader[WorkflowEvent]:
        """Run a workflow and stream its events."""
        response = self.core.stream_request("POST", "/v1/workflow/stream_run", req)
        return StreamReader(response, parse_workflow_event)

    def resume(self, req: ResumeRunWorkflowsReq) -> StreamReader[WorkflowEvent]:
        """Resume an interrupted workflow and stream its events."""
        response = self.core.stream_request("POST", "/v1/workflow/stream_resume", req)
        return StreamReader(response, parse_workflow_event)