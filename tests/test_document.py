"""
Brief: Tests for weaveproxy.document typed accessors.

Inputs:
  - None

Outputs:
  - None
"""

import pytest

from weaveproxy.document import (
    CommandForm,
    CommandValue,
    lookup_object,
    lookup_string,
    lookup_string_array,
    parse_body,
    require_string,
    serialize_body,
)
from weaveproxy.errors import MalformedBodyError, MissingFieldError, WrongTypeError


def test_lookup_object_missing_attaches_empty_mapping():
    """
    Brief: A missing object key yields {} stored back into the document.

    Inputs:
      - doc without HostConfig

    Outputs:
      - None: Asserts mutation through the returned mapping is visible
    """
    doc = {}
    host_config = lookup_object(doc, "HostConfig")
    assert host_config == {}
    host_config["Binds"] = ["a:/b"]
    assert doc["HostConfig"]["Binds"] == ["a:/b"]


def test_lookup_object_null_is_absent():
    doc = {"Labels": None}
    assert lookup_object(doc, "Labels") == {}
    assert doc["Labels"] == {}


def test_lookup_object_wrong_type_names_field():
    with pytest.raises(WrongTypeError) as excinfo:
        lookup_object({"HostConfig": ["x"]}, "HostConfig")
    err = excinfo.value
    assert err.field == "HostConfig"
    assert err.expected == "object"
    assert err.got == ["x"]
    assert "HostConfig" in str(err)
    assert err.http_status == 400


def test_lookup_string_absent_null_and_present():
    assert lookup_string({}, "Hostname") == ""
    assert lookup_string({"Hostname": None}, "Hostname") == ""
    assert lookup_string({"Hostname": "web"}, "Hostname") == "web"


def test_lookup_string_wrong_type():
    with pytest.raises(WrongTypeError) as excinfo:
        lookup_string({"NetworkMode": 5}, "NetworkMode")
    assert "expected string" in str(excinfo.value)
    assert "int" in str(excinfo.value)


def test_require_string_missing_field():
    with pytest.raises(MissingFieldError) as excinfo:
        require_string({"Image": ""}, "Image")
    assert excinfo.value.field == "Image"
    assert require_string({"Image": "foo"}, "Image") == "foo"


def test_lookup_string_array_shapes():
    """
    Brief: Arrays are copied, strings become one-element lists, absence is [].

    Inputs:
      - documents with list, str, None and missing values

    Outputs:
      - None: Asserts normalized lists
    """
    original = ["A=1", "B=2"]
    doc = {"Env": original}
    result = lookup_string_array(doc, "Env")
    assert result == ["A=1", "B=2"]
    assert result is not original
    assert lookup_string_array({"Cmd": "sh"}, "Cmd") == ["sh"]
    assert lookup_string_array({"Cmd": None}, "Cmd") == []
    assert lookup_string_array({}, "Cmd") == []


@pytest.mark.parametrize("value", [5, {"a": "b"}, ["ok", 3], [None]])
def test_lookup_string_array_wrong_type(value):
    with pytest.raises(WrongTypeError) as excinfo:
        lookup_string_array({"Binds": value}, "Binds")
    assert excinfo.value.field == "Binds"
    assert excinfo.value.expected == "array of strings"


def test_command_value_string_and_array_normalize_identically():
    as_string = CommandValue.parse("Entrypoint", "run.sh")
    as_array = CommandValue.parse("Entrypoint", ["run.sh"])
    assert as_string.args == as_array.args == ("run.sh",)
    assert as_string.form is CommandForm.STRING
    assert as_array.form is CommandForm.ARRAY


def test_command_value_absent_and_empty_are_falsey():
    assert not CommandValue.parse("Entrypoint", None)
    assert not CommandValue.parse("Entrypoint", [])
    assert CommandValue.from_document({}, "Entrypoint").form is CommandForm.ABSENT


@pytest.mark.parametrize("value", [42, {"x": 1}, ["sh", 1], True])
def test_command_value_rejects_unsupported_types(value):
    with pytest.raises(WrongTypeError) as excinfo:
        CommandValue.parse("Entrypoint", value)
    assert excinfo.value.expected == "string or array of strings"


def test_command_value_starts_with():
    value = CommandValue.parse("Entrypoint", ["/w/w", "sh"])
    assert value.starts_with(("/w/w",))
    assert not value.starts_with(("sh",))
    assert not CommandValue.parse("Entrypoint", None).starts_with(("/w/w",))


def test_parse_body_variants():
    assert parse_body(b"") == {}
    assert parse_body(b'{"Image": "foo"}') == {"Image": "foo"}
    with pytest.raises(MalformedBodyError):
        parse_body(b"{not json")
    with pytest.raises(WrongTypeError):
        parse_body(b"[1, 2]")


def test_serialize_body_is_json_bytes():
    body = serialize_body({"Image": "foo", "Cmd": ["run"]})
    assert isinstance(body, bytes)
    assert parse_body(body) == {"Image": "foo", "Cmd": ["run"]}
