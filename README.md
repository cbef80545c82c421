# cozeflow

A small client for the Coze HTTP API. It runs workflows (synchronously or as
event streams), resumes interrupted runs, reads run histories, duplicates
templates and looks up the current user. Requests are sent as JSON over
`httpx`; business and authentication errors are raised as exceptions, and
workflow event streams are parsed into typed events.

## Installation

```
pip install cozeflow
```

For running the test suite:

```
pip install "cozeflow[test]"
pytest
```

## Getting started

Every service object is built on a `cozeflow.request.Core`, which holds the
base URL, the `httpx.Client`, an authentication source and whether a log id
should be forwarded.

```python
from cozeflow.request import Core
from cozeflow.workflow_runs import WorkflowRuns, RunWorkflowsReq


class StaticToken:
    def token(self):
        return "token"


core = Core("https://api.example.com", None, StaticToken(), False)
runs = WorkflowRuns(core)
```

When no client is given, an `httpx.Client` with a five-second timeout is
created. The authentication source is any object with a `token()` method;
its result is sent as `Authorization: Bearer <token>`. With `auth=None` no
`Authorization` header is sent.

Every request also carries a `User-Agent` header and an
`X-Coze-Client-User-Agent` JSON header (see `cozeflow.user_agent`).

### Running a workflow

```python
result = runs.create(RunWorkflowsReq(workflow_id="workflow1", parameters={"param1": "value1"}))
print(result.execute_id, result.data, result.log_id())
```

`RunWorkflowsReq` leaves empty fields (`parameters`, `bot_id`, `ext`,
`is_async`, `app_id`) out of the request body.

### Streaming a workflow

`WorkflowRuns.stream` and `WorkflowRuns.resume` return a
`cozeflow.stream_reader.StreamReader`. It is an iterator of
`WorkflowEvent` objects and a context manager that closes the response:

```python
with runs.stream(RunWorkflowsReq(workflow_id="workflow1")) as reader:
    for event in reader:
        if event.message is not None:
            print(event.message.content, end="")
        elif event.error is not None:
            print("error:", event.error.error_code, event.error.error_message)
        elif event.interrupt is not None:
            print("interrupted at", event.interrupt.node_title)
        if event.is_done():
            break
```

`StreamReader.recv()` returns one event at a time and raises `EOFError` when
the stream is exhausted. An event is `Message`, `Error`, `Interrupt` or
`Done` (`WorkflowEventType`); unknown event types are read as messages. A
`Done` event carries the run's debug page in `event.debug_url.url`.

An interrupted run is continued with `ResumeRunWorkflowsReq`, passing back
the event id and interrupt type from the interrupt event:

```python
from cozeflow.workflow_runs import ResumeRunWorkflowsReq

data = event.interrupt.interrupt_data
reader = runs.resume(
    ResumeRunWorkflowsReq(
        workflow_id="workflow1",
        event_id=data.event_id,
        resume_data="answer",
        interrupt_type=data.type,
    )
)
```

The bodies of error and interrupt events can also be decoded on their own
with `parse_workflow_event_error` and `parse_workflow_event_interrupt`.

`cozeflow.workflows.Workflows(core)` groups the run operations under
`.runs`, and `WorkflowRuns.histories` gives access to run histories.

### Run histories

```python
from cozeflow.workflow_histories import WorkflowRunsHistories, RetrieveWorkflowRunsHistoriesReq

resp = WorkflowRunsHistories(core).retrieve(
    RetrieveWorkflowRunsHistoriesReq(workflow_id="workflow1", execute_id="exec1")
)
for history in resp.histories:
    print(history.execute_status, history.run_mode, history.output)
```

`execute_status` is a `WorkflowExecuteStatus` and `run_mode` a
`WorkflowRunMode` when the server sends a known value; other values are kept
as they came.

### Templates and users

```python
from cozeflow.templates import Templates, DuplicateTemplateReq
from cozeflow.users import Users

copy = Templates(core).duplicate("template1", DuplicateTemplateReq(workspace_id="ws1"))
print(copy.entity_id, copy.entity_type)

me = Users(core).me()
print(me.user_id, me.nick_name)
```

### Lower-level requests

`Core.request` sends a JSON request and returns an `ApiResponse` (`code`,
`msg`, `data`, the full `payload` and the `http_response`).
`Core.raw_request` and `Core.stream_request` return the unread
`httpx.Response`, and `Core.upload_file` sends a file with extra form fields
as multipart data. To forward a log id, create the `Core` with
`enable_log_id=True` and make requests inside `with_log_id("...")`.

## Errors

Both exceptions live in `cozeflow.request`:

- `CozeError` is raised when the API answers with a non-zero business code;
  it carries `code`, `message` and `log_id`. It is also raised, with the HTTP
  status as `code`, when the status is not 200 and the body is not a JSON
  object.
- `CozeAuthError` is raised when the status is not 200 and the body is a JSON
  error document; it carries `error_code`, `error_message`, `status_code`
  and `log_id`.

## Logging

`cozeflow.logger` provides `LevelLogger` and `StdLogger` (which writes
timestamped lines to standard error by default). Use `set_logger` to route
library messages to any object with a `log(level, message, *args)` method,
and `set_level` with a `LogLevel` to change how much is reported (the
default is `INFO`).

## What it does not do

- It has no single client object that bundles all services; build each
  service on a `Core`.
- It ships no authentication flows (personal tokens, OAuth, JWT); supply
  your own object with a `token()` method.
- It covers only workflow runs, run histories, templates and the current
  user. Chat conversations, workspace listing and other API areas are not
  included, and there is no command-line tool.