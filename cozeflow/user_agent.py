"""User agent strings sent with every request."""

from __future__ import annotations

import json
import os
import platform

VERSION = "0.1.0"
SDK_NAME = "cozeflow"
LANGUAGE = "python"


def _os_name() -> str:
    return platform.system().lower()


def _os_version() -> str:
    return os.environ.get("OSVERSION", "")


def get_user_agent() -> str:
    """Return the value of the ``User-Agent`` header."""
    return (
        f"{SDK_NAME}/{VERSION} {LANGUAGE}/{platform.python_version()} "
        f"{_os_name()}/{_os_version()}"
    )


def get_client_user_agent() -> str:
    """Return the JSON value of the ``X-Coze-Client-User-Agent`` header."""
    info = {
        "version": VERSION,
        "lang": SDK_NAME,
        "lang_version": platform.python_version(),
        "os_name": _os_name(),
        "os_version": _os_version(),
    }
    return json.dumps(info, separators=(",", ":"))