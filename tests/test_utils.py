import string

from cozeflow.utils import (
    auth_context,
    bytes_to_hex,
    generate_random_string,
    is_auth_context,
    must_to_json,
)


def test_generate_random_string_differs():
    first = generate_random_string(10)
    second = generate_random_string(10)
    assert first != second
    assert len(first) == 10


def test_generate_random_string_is_hex():
    value = generate_random_string(32)
    assert set(value) <= set(string.hexdigits.lower())


def test_bytes_to_hex():
    assert bytes_to_hex(b"\x00\xff\x10\xab") == "00ff10ab"
    assert bytes_to_hex(b"") == ""


def test_must_to_json():
    assert must_to_json({"test": "test"}) == '{"test":"test"}'


def test_must_to_json_falls_back():
    assert must_to_json(object()) == "{}"


def test_auth_context_scoping():
    assert is_auth_context() is False
    with auth_context():
        assert is_auth_context() is True
    assert is_auth_context() is False