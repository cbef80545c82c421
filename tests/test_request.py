import io
import json

import httpx
import pytest

from cozeflow.request import (
    LOG_ID_HEADER,
    CozeAuthError,
    CozeError,
    Core,
    HTTPResponse,
    check_response_success,
    with_log_id,
)

BASE_URL = "https://api.test.com"


def make_core(handler, **kwargs):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return Core(BASE_URL, client=client, **kwargs)


def json_response(status, payload, log_id="test-log-id", content_type=None):
    headers = {LOG_ID_HEADER: log_id}
    if content_type:
        headers["Content-Type"] = content_type
    return httpx.Response(status, content=json.dumps(payload).encode(), headers=headers)


class Capture:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def __call__(self, request):
        request.read()
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


class TokenAuth:
    def token(self):
        return "token"


def test_request_success():
    capture = Capture(json_response(200, {"data": {"name": "test"}, "code": 0, "msg": ""}))
    core = make_core(capture)
    resp = core.request("GET", "/test", {"test": "test", "data": "data"}, params={"test": "data"})
    assert resp.code == 0
    assert resp.data["name"] == "test"
    assert resp.http_response.log_id() == "test-log-id"
    sent = capture.requests[0]
    assert sent.url.params["test"] == "data"
    assert json.loads(sent.content) == {"test": "test", "data": "data"}
    assert sent.headers["Content-Type"] == "application/json"


def test_request_network_error():
    core = make_core(Capture(error=httpx.ConnectError("network error")))
    with pytest.raises(httpx.ConnectError, match="network error"):
        core.request("GET", "/test")


def test_request_business_error():
    core = make_core(Capture(json_response(200, {"code": 1001, "msg": "business error"})))
    with pytest.raises(CozeError) as info:
        core.request("GET", "/test")
    assert info.value.code == 1001
    assert info.value.message == "business error"
    assert info.value.log_id == "test-log-id"


def test_request_auth_error():
    payload = {"error_code": "invalid_token", "error_message": "Token is invalid"}
    core = make_core(Capture(json_response(401, payload)))
    with pytest.raises(CozeAuthError) as info:
        core.request("GET", "/test")
    assert info.value.error_code == "invalid_token"
    assert info.value.error_message == "Token is invalid"
    assert info.value.status_code == 401


def test_request_non_json_error_body():
    response = httpx.Response(502, content=b"bad gateway", headers={LOG_ID_HEADER: "lid"})
    core = make_core(Capture(response))
    with pytest.raises(CozeError) as info:
        core.request("GET", "/test")
    assert "bad gateway log_id: lid" in info.value.message


def test_upload_file_success():
    capture = Capture(json_response(200, {"data": {"name": "uploaded.txt"}, "code": 0}))
    core = make_core(capture)
    resp = core.upload_file(
        "/upload",
        io.BytesIO(b"test file content"),
        "test.txt",
        {"field1": "value1", "field2": "value2"},
        headers={"test": "header-value"},
    )
    assert resp.code == 0
    assert resp.data["name"] == "uploaded.txt"
    assert resp.http_response.log_id() == "test-log-id"
    sent = capture.requests[0]
    assert sent.headers["test"] == "header-value"
    assert sent.headers["Content-Type"].startswith("multipart/form-data")
    assert b"test file content" in sent.content
    assert b"value1" in sent.content
    assert b'filename="test.txt"' in sent.content


def test_upload_file_network_error():
    core = make_core(Capture(error=httpx.ConnectError("upload failed")))
    with pytest.raises(httpx.ConnectError, match="upload failed"):
        core.upload_file("/upload", io.BytesIO(b"test"), "test.txt")


def test_upload_file_business_error():
    core = make_core(Capture(json_response(200, {"code": 1002, "msg": "upload business error"})))
    with pytest.raises(CozeError) as info:
        core.upload_file("/upload", io.BytesIO(b"test"), "test.txt")
    assert info.value.code == 1002
    assert info.value.message == "upload business error"


def test_request_headers_option():
    capture = Capture(json_response(200, {"code": 0}))
    core = make_core(capture)
    core.request("GET", "/test", headers={"X-Test": "test-value"})
    assert capture.requests[0].headers["X-Test"] == "test-value"


def test_request_query_option():
    capture = Capture(json_response(200, {"code": 0}))
    core = make_core(capture)
    core.request("GET", "/test", params={"param": "value"})
    assert capture.requests[0].url.params["param"] == "value"


def test_common_headers_and_auth():
    capture = Capture(json_response(200, {"code": 0}))
    core = make_core(capture, auth=TokenAuth(), enable_log_id=True)
    with with_log_id("my-log"):
        core.request("POST", "/test", {})
    sent = capture.requests[0]
    assert sent.headers["Authorization"] == "Bearer token"
    assert sent.headers[LOG_ID_HEADER] == "my-log"
    assert sent.headers["User-Agent"].startswith("cozeflow/")


def test_log_id_not_sent_when_disabled():
    capture = Capture(json_response(200, {"code": 0}))
    core = make_core(capture)
    with with_log_id("my-log"):
        core.request("GET", "/test")
    assert LOG_ID_HEADER not in capture.requests[0].headers


def test_core_with_custom_client():
    client = httpx.Client()
    assert Core(BASE_URL, client=client).client is client


def test_core_default_client():
    core = Core(BASE_URL)
    assert isinstance(core.client, httpx.Client)
    assert core.client.timeout.read == 5.0


def test_stream_request_json_error():
    response = json_response(
        200, {"code": 100, "msg": "Invalid workflow ID"}, "test_log_id", "application/json"
    )
    core = make_core(Capture(response))
    with pytest.raises(CozeError) as info:
        core.stream_request("POST", "/v1/workflows/chat", {"workflow_id": "invalid_workflow"})
    assert info.value.code == 100
    assert info.value.message == "Invalid workflow ID"
    assert info.value.log_id == "test_log_id"


def test_stream_request_returns_event_stream():
    response = httpx.Response(200, content=b"event: done\ndata: {}\n",
                              headers={"Content-Type": "text/event-stream"})
    core = make_core(Capture(response))
    resp = core.stream_request("POST", "/stream")
    assert resp.read() == b"event: done\ndata: {}\n"


def test_check_response_success():
    http_response = HTTPResponse(200, {LOG_ID_HEADER: "abc"})
    result = check_response_success({"code": 0, "data": [1]}, http_response)
    assert result.data == [1]
    assert result.http_response.log_id() == "abc"
    with pytest.raises(CozeError) as info:
        check_response_success({"code": 5, "msg": "m"}, http_response)
    assert info.value.log_id == "abc"