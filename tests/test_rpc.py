import json

from motherduck_mcp.errors import ErrorType


def _call(protocol, method, params=None, request_id=1):
    message = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return protocol.handle_message(message)


def test_initialize_reports_server_and_capabilities(protocol):
    response = _call(protocol, "initialize", {"clientInfo": {"name": "pytest", "version": "1"}})
    result = response["result"]
    assert response["id"] == 1
    assert result["serverInfo"] == {"name": "mcp-server-motherduck", "version": "0.2.2"}
    assert set(result["capabilities"]) == {"tools", "prompts", "resources"}


def test_notifications_get_no_response(protocol):
    assert protocol.handle_message({"jsonrpc": "2.0", "method": "notifications/initialized"}) is None


def test_ping(protocol):
    assert _call(protocol, "ping")["result"] == {}


def test_tools_list(protocol):
    tools = _call(protocol, "tools/list")["result"]["tools"]
    assert [t["name"] for t in tools] == ["initialize-connection", "read-schemas", "execute-query"]


def test_tools_call_round_trip(protocol):
    init = _call(protocol, "tools/call", {"name": "initialize-connection", "arguments": {"type": "duckdb"}})
    assert "result" in init

    response = _call(protocol, "tools/call", {"name": "execute-query", "arguments": {"query": "SELECT 1 AS x"}}, 2)
    content = response["result"]["content"]
    assert json.loads(content[0]["text"]) == [{"x": 1}]


def test_tool_failure_uses_error_channel(protocol):
    response = _call(protocol, "tools/call", {"name": "execute-query", "arguments": {"query": "SELECT 1"}})
    assert "result" not in response
    assert response["error"]["code"] == -32001
    assert response["error"]["data"]["type"] == ErrorType.NO_ACTIVE_SESSION.value
    assert response["error"]["message"]


def test_unknown_tool(protocol):
    response = _call(protocol, "tools/call", {"name": "nope", "arguments": {}})
    assert response["error"]["code"] == -32601
    assert response["error"]["data"]["type"] == "unknown_tool"


def test_validation_error(protocol):
    response = _call(protocol, "tools/call", {"name": "read-schemas", "arguments": {"database_name": 3}})
    assert response["error"]["code"] == -32602
    assert response["error"]["data"]["type"] == "validation_error"


def test_query_failed_message(protocol):
    _call(protocol, "tools/call", {"name": "initialize-connection", "arguments": {"type": "duckdb"}})
    response = _call(protocol, "tools/call", {"name": "execute-query", "arguments": {"query": "SELEC 1"}})
    assert response["error"]["data"]["type"] == "query_failed"
    assert response["error"]["message"].startswith("Error querying the database:")


def test_prompts_and_resources(protocol):
    prompts = _call(protocol, "prompts/list")["result"]["prompts"]
    assert prompts[0]["name"] == "duckdb-motherduck-initial-prompt"

    prompt = _call(protocol, "prompts/get", {"name": "duckdb-motherduck-initial-prompt"})["result"]
    assert prompt["messages"][0]["role"] == "user"

    unknown = _call(protocol, "prompts/get", {"name": "other"})
    assert unknown["error"]["data"]["type"] == "unknown_prompt"

    assert _call(protocol, "resources/list")["result"] == {"resources": []}
    read = _call(protocol, "resources/read", {"uri": "file:///etc/passwd"})
    assert read["error"]["data"]["type"] == "unsupported_resource"
    assert "file:///etc/passwd" in read["error"]["message"]


def test_unknown_method(protocol):
    assert _call(protocol, "sampling/createMessage")["error"]["code"] == -32601


def test_invalid_envelope(protocol):
    assert protocol.handle_message({"id": 3, "method": "ping"})["error"]["code"] == -32600
    assert protocol.handle_message(["not", "an", "object"])["error"]["code"] == -32600


def test_unexpected_exception_is_internal_error(protocol, monkeypatch):
    def boom(name, arguments):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(protocol.dispatcher, "call_tool", boom)
    response = _call(protocol, "tools/call", {"name": "execute-query", "arguments": {"query": "SELECT 1"}})
    assert response["error"]["code"] == -32603
    assert "kaboom" in response["error"]["message"]


def test_non_string_tool_name_is_unknown_tool(protocol):
    response = _call(protocol, "tools/call", {"name": ["x"], "arguments": {}})
    assert response["error"]["code"] == -32601
    assert response["error"]["data"]["type"] == "unknown_tool"
