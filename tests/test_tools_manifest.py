import pytest

from motherduck_mcp import tools_manifest
from motherduck_mcp.errors import UnknownTool, ValidationError


def test_list_tools_stable_order():
    names = [t["name"] for t in tools_manifest.list_tools()]
    assert names == ["initialize-connection", "read-schemas", "execute-query"]
    assert tools_manifest.list_tools() == tools_manifest.list_tools()


def test_input_schemas_declare_required_fields():
    schemas = {t["name"]: t["inputSchema"] for t in tools_manifest.list_tools()}
    assert schemas["initialize-connection"]["required"] == ["type"]
    assert schemas["read-schemas"]["required"] == ["database_name"]
    assert schemas["execute-query"]["required"] == ["query"]
    assert schemas["execute-query"]["properties"]["query"]["type"] == "string"


def test_validate_accepts_and_ignores_extra_keys():
    args = tools_manifest.validate("execute-query", {"query": "SELECT 1", "extra": True})
    assert args.query == "SELECT 1"


def test_validate_missing_field():
    with pytest.raises(ValidationError) as exc:
        tools_manifest.validate("read-schemas", {})
    assert "database_name" in exc.value.message


def test_validate_wrong_type_is_not_coerced():
    with pytest.raises(ValidationError) as exc:
        tools_manifest.validate("initialize-connection", {"type": 1})
    assert "type" in exc.value.message


@pytest.mark.parametrize("raw", [None, {}])
def test_validate_empty_arguments(raw):
    with pytest.raises(ValidationError):
        tools_manifest.validate("execute-query", raw)


def test_validate_non_object_arguments():
    with pytest.raises(ValidationError):
        tools_manifest.validate("execute-query", ["SELECT 1"])


def test_validate_unknown_tool():
    with pytest.raises(UnknownTool):
        tools_manifest.validate("drop-everything", {})


@pytest.mark.parametrize("name", [["execute-query"], {"name": "x"}, None, 3])
def test_validate_non_string_tool_name(name):
    with pytest.raises(UnknownTool):
        tools_manifest.validate(name, {"query": "SELECT 1"})
