"""HTTP transport shared by all API resources."""

from __future__ import annotations

import json
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Iterator, Mapping

import httpx

from .logger import default_logger
from .user_agent import get_client_user_agent, get_user_agent

LOG_ID_HEADER = "X-Tt-Logid"

_log_id: ContextVar[str] = ContextVar("coze_log_id", default="")


class CozeError(Exception):
    """The API answered with a non-zero business code."""

    def __init__(self, code: int, message: str, log_id: str) -> None:
        super().__init__(f"code={code}, message={message}, logid={log_id}")
        self.code = code
        self.message = message
        self.log_id = log_id


class CozeAuthError(Exception):
    """The API rejected the request at the HTTP level with an error payload."""

    def __init__(self, error_code: str, error_message: str, status_code: int, log_id: str) -> None:
        super().__init__(
            f"status_code={status_code}, error_code={error_code}, "
            f"error_message={error_message}, logid={log_id}"
        )
        self.error_code = error_code
        self.error_message = error_message
        self.status_code = status_code
        self.log_id = log_id


class HTTPResponse:
    """Status and headers of a completed HTTP exchange."""

    def __init__(self, status_code: int, headers: Mapping[str, str] | None = None) -> None:
        self.status_code = status_code
        self.headers = httpx.Headers(headers or {})

    def log_id(self) -> str:
        return self.headers.get(LOG_ID_HEADER, "")


@dataclass
class ApiResponse:
    """A decoded successful API answer."""

    code: int = 0
    msg: str = ""
    data: Any = None
    payload: dict[str, Any] = field(default_factory=dict)
    http_response: HTTPResponse | None = None


@contextmanager
def with_log_id(log_id: str) -> Iterator[None]:
    """Send ``log_id`` with requests made inside the block (when the core enables it)."""
    token = _log_id.set(log_id)
    try:
        yield
    finally:
        _log_id.reset(token)


def _http_response(response: httpx.Response) -> HTTPResponse:
    return HTTPResponse(response.status_code, response.headers)


def check_http_response(response: httpx.Response) -> None:
    """Raise if the HTTP status is not 200."""
    if response.status_code == httpx.codes.OK:
        return
    log_id = response.headers.get(LOG_ID_HEADER, "")
    body = response.read()
    text = body.decode("utf-8", errors="replace")
    try:
        info = json.loads(body)
    except ValueError:
        info = None
    code = info.get("error_code", "") if isinstance(info, dict) else None
    message = info.get("error_message", "") if isinstance(info, dict) else None
    if not isinstance(code, str) or not isinstance(message, str):
        default_logger.error("unmarshal response body: %s", text)
        raise CozeError(response.status_code, f"{text} log_id: {log_id}", log_id)
    raise CozeAuthError(code, message, response.status_code, log_id)


def check_response_success(payload: Mapping[str, Any], http_response: HTTPResponse) -> ApiResponse:
    """Wrap a decoded payload, raising :class:`CozeError` for a non-zero code."""
    code = payload.get("code") or 0
    msg = payload.get("msg") or ""
    if code != 0:
        default_logger.warn(
            "request failed, body=%s, log_id=%s", json.dumps(payload), http_response.log_id()
        )
        raise CozeError(code, msg, http_response.log_id())
    return ApiResponse(
        code=code,
        msg=msg,
        data=payload.get("data"),
        payload=dict(payload),
        http_response=http_response,
    )


def _pack(response: httpx.Response) -> ApiResponse:
    check_http_response(response)
    body = response.read()
    try:
        payload = json.loads(body)
    except ValueError:
        default_logger.error("unmarshal response body: %s", body.decode("utf-8", errors="replace"))
        raise
    if not isinstance(payload, dict):
        raise ValueError(f"unexpected response body: {body!r}")
    return check_response_success(payload, _http_response(response))


def _encode_body(body: Any) -> bytes | None:
    if body is None:
        return None
    if hasattr(body, "to_dict"):
        body = body.to_dict()
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class Core:
    """Sends requests to the API and decodes its answers."""

    def __init__(
        self,
        base_url: str,
        client: httpx.Client | None = None,
        auth: Any = None,
        enable_log_id: bool = False,
    ) -> None:
        self.base_url = base_url
        self.client = client if client is not None else httpx.Client(timeout=5.0)
        self.auth = auth
        self.enable_log_id = enable_log_id

    def _set_common_headers(self, request: httpx.Request) -> None:
        request.headers["User-Agent"] = get_user_agent()
        request.headers["X-Coze-Client-User-Agent"] = get_client_user_agent()
        if self.enable_log_id:
            log_id = _log_id.get()
            if log_id:
                request.headers[LOG_ID_HEADER] = log_id
        if self.auth is not None:
            try:
                access_token = self.auth.token()
            except Exception as exc:
                default_logger.error("failed to get access_token: %s", exc)
                raise
            request.headers["Authorization"] = f"Bearer {access_token}"

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> ApiResponse:
        """Send a JSON request and return the decoded answer."""
        response = self.raw_request(method, path, body, headers, params)
        try:
            return _pack(response)
        finally:
            response.close()

    def raw_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a JSON request and return the unread response once its status is 200."""
        request = self.client.build_request(
            method, f"{self.base_url}{path}", content=_encode_body(body), params=params
        )
        request.headers["Content-Type"] = "application/json"
        request.headers.update(headers or {})
        self._set_common_headers(request)
        response = self.client.send(request, stream=True)
        try:
            check_http_response(response)
        except Exception:
            response.close()
            raise
        return response

    def stream_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request whose answer is an event stream; JSON answers are checked for errors."""
        response = self.raw_request(method, path, body, headers, params)
        if "application/json" in response.headers.get("Content-Type", ""):
            try:
                _pack(response)
            except Exception:
                response.close()
                raise
        return response

    def upload_file(
        self,
        path: str,
        file: BinaryIO | bytes,
        file_name: str,
        fields: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse:
        """Upload ``file`` as multipart form data together with extra ``fields``."""
        request = self.client.build_request(
            "POST",
            f"{self.base_url}{path}",
            files={"file": (file_name, file)},
            data=dict(fields or {}),
        )
        request.headers.update(headers or {})
        self._set_common_headers(request)
        response = self.client.send(request, stream=True)
        try:
            return _pack(response)
        finally:
            response.close()