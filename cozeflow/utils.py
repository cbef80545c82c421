"""Small helpers shared by the client modules."""

from __future__ import annotations

import json
import secrets
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

_auth_context: ContextVar[bool] = ContextVar("auth_context", default=False)


def generate_random_string(length: int) -> str:
    """Return a random lower-case hex string built from ``length // 2`` random bytes."""
    return bytes_to_hex(secrets.token_bytes(length // 2))


def bytes_to_hex(data: bytes) -> str:
    """Return the lower-case hex form of ``data``."""
    return data.hex()


def must_to_json(obj: Any) -> str:
    """Serialise ``obj`` to compact JSON, or ``"{}"`` if it cannot be serialised."""
    try:
        return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return "{}"


@contextmanager
def auth_context() -> Iterator[None]:
    """Mark the enclosed code as running an authentication request."""
    token = _auth_context.set(True)
    try:
        yield
    finally:
        _auth_context.reset(token)


def is_auth_context() -> bool:
    """Whether the current code runs inside :func:`auth_context`."""
    return _auth_context.get()