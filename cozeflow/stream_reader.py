"""Reading server-sent event streams line by line."""

from __future__ import annotations

import json
from typing import Any, Callable, Generic, Iterator, Optional, Tuple, TypeVar

import httpx

from .logger import default_logger
from .request import HTTPResponse, check_response_success

T = TypeVar("T")

Processor = Callable[[str, Iterator[str]], Tuple[Optional[T], bool]]


class StreamReader(Generic[T]):
    """Turns the lines of a streamed response into events via ``processor``.

    ``processor(line, lines)`` returns ``(event_or_None, is_done)`` and may pull
    further lines from ``lines``.
    """

    def __init__(
        self,
        response: httpx.Response,
        processor: Processor,
        http_response: HTTPResponse | None = None,
    ) -> None:
        self.response = response
        self.http_response = (
            http_response
            if http_response is not None
            else HTTPResponse(response.status_code, response.headers)
        )
        self.is_finished = False
        self._processor = processor
        self._lines: Iterator[str] = response.iter_lines()
        self._checked = False

    def _check_error(self) -> None:
        if self._checked:
            return
        self._checked = True
        if "application/json" not in self.response.headers.get("Content-Type", ""):
            return
        body = self.response.read()
        self._lines = iter(())
        try:
            payload: Any = json.loads(body) if body.strip() else None
        except ValueError:
            default_logger.warn("error reading response body: %s", body)
            return
        if isinstance(payload, dict):
            check_response_success(payload, self.http_response)

    def recv(self) -> T:
        """Return the next event; raise :class:`EOFError` when the stream is exhausted."""
        self._check_error()
        for line in self._lines:
            if not line:
                continue
            event, done = self._processor(line, self._lines)
            self.is_finished = done
            if event is not None:
                return event
        self.is_finished = True
        raise EOFError("end of stream")

    def __iter__(self) -> StreamReader[T]:
        return self

    def __next__(self) -> T:
        try:
            return self.recv()
        except EOFError:
            raise StopIteration from None

    def close(self) -> None:
        self.response.close()

    def __enter__(self) -> StreamReader[T]:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()