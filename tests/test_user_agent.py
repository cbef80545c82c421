import json
import platform

from cozeflow.user_agent import VERSION, get_client_user_agent, get_user_agent


def test_user_agent_parts():
    parts = get_user_agent().split(" ")
    assert len(parts) == 3
    assert parts[0] == f"cozeflow/{VERSION}"
    assert parts[1] == f"python/{platform.python_version()}"


def test_user_agent_os_version_from_environment(monkeypatch):
    monkeypatch.setenv("OSVERSION", "12.3")
    assert get_user_agent().endswith("/12.3")


def test_client_user_agent_fields(monkeypatch):
    monkeypatch.setenv("OSVERSION", "12.3")
    info = json.loads(get_client_user_agent())
    assert info["version"] == VERSION
    assert info["lang"] == "cozeflow"
    assert info["lang_version"] == platform.python_version()
    assert info["os_version"] == "12.3"
    assert set(info) == {"version", "lang", "lang_version", "os_name", "os_version"}


def test_both_agents_agree_on_os():
    info = json.loads(get_client_user_agent())
    os_part = get_user_agent().split(" ")[2]
    assert os_part == f"{info['os_name']}/{info['os_version']}"