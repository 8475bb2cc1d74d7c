"""
MCP server tests.

Tests the JSON-RPC method routing of the Model Context Protocol server.
"""

import time
from unittest.mock import patch

import pytest

from adhdone.core.constants import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)
from adhdone.mcp.dispatcher import ToolDispatcher
from adhdone.mcp.registry import ToolRegistry
from adhdone.mcp.server import MCPServer, jsonrpc_error, jsonrpc_result
from adhdone.models.schemas import ToolArguments
from adhdone.services.coaching import CELEBRATIONS


def tool_call(name, arguments=None, request_id=10):
    params = {"name": name}
    if arguments is not None:
        params["arguments"] = arguments
    return {"jsonrpc": "2.0", "id": request_id, "method": "tools/call", "params": params}


def content_text(response):
    content = response["result"]["content"]
    assert len(content) == 1
    assert content[0]["type"] == "text"
    return content[0]["text"]


# =============================================================================
# Initialization
# =============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize("request_id", ["1", 1, 0, "abc-123", 2.5, None])
async def test_initialize_echoes_id(mcp_server, request_id):
    """Test initialize request echoes the id unchanged."""
    request = {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "initialize",
        "params": {},
    }
    response = await mcp_server.handle_message(request)
    assert response["jsonrpc"] == "2.0"
    assert response["id"] == request_id
    assert "error" not in response
    assert response["result"]["protocolVersion"] == "2024-11-05"
    assert response["result"]["serverInfo"]["name"] == "adhdone"
    assert response["result"]["capabilities"] == {"tools": {}}


@pytest.mark.asyncio
async def test_initialize_without_params(mcp_server):
    response = await mcp_server.handle_message({"jsonrpc": "2.0", "id": 7, "method": "initialize"})
    assert response["id"] == 7
    assert "result" in response


@pytest.mark.asyncio
async def test_initialized_notification_has_no_response(mcp_server):
    """A notification (no id key) is never answered."""
    response = await mcp_server.handle_message({"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert response is None


@pytest.mark.asyncio
async def test_initialized_with_id_returns_empty_result(mcp_server):
    response = await mcp_server.handle_message({"jsonrpc": "2.0", "id": 3, "method": "notifications/initialized"})
    assert response == {"jsonrpc": "2.0", "id": 3, "result": {}}


@pytest.mark.asyncio
async def test_null_id_is_not_a_notification(mcp_server):
    response = await mcp_server.handle_message({"jsonrpc": "2.0", "id": None, "method": "notifications/initialized"})
    assert response == {"jsonrpc": "2.0", "id": None, "result": {}}


@pytest.mark.asyncio
async def test_ping(mcp_server):
    response = await mcp_server.handle_message({"jsonrpc": "2.0", "id": "p", "method": "ping"})
    assert response["result"] == {}


# =============================================================================
# Tools
# =============================================================================


@pytest.mark.asyncio
async def test_tools_list(mcp_server):
    """Test tools list returns descriptors in registration order."""
    request = {
        "jsonrpc": "2.0",
        "id": "4",
        "method": "tools/list",
        "params": {},
    }
    response = await mcp_server.handle_message(request)
    tools = response["result"]["tools"]
    assert [tool["name"] for tool in tools] == [
        "help_me_start",
        "break_down_task",
        "start_timer",
        "complete_task",
    ]
    for tool in tools:
        assert set(tool) == {"name", "description", "inputSchema"}
        assert tool["inputSchema"]["type"] == "object"
        assert tool["inputSchema"]["required"] == ["task"]


@pytest.mark.asyncio
async def test_tools_list_is_idempotent(mcp_server):
    request = {"jsonrpc": "2.0", "id": 1, "method": "tools/list"}
    first = await mcp_server.handle_message(request)
    second = await mcp_server.handle_message(request)
    assert first == second


@pytest.mark.asyncio
async def test_break_down_cleaning_task(mcp_server):
    response = await mcp_server.handle_message(tool_call("break_down_task", {"task": "clean my kitchen"}))
    text = content_text(response)
    assert "Stand up and walk to the room" in text
    assert 'Breaking down: "clean my kitchen"' in text


@pytest.mark.asyncio
async def test_complete_task_celebrates(mcp_server):
    response = await mcp_server.handle_message(tool_call("complete_task", {"task": "laundry"}))
    text = content_text(response)
    assert "laundry" in text
    assert any(text.startswith(opener) for opener in CELEBRATIONS)


@pytest.mark.asyncio
async def test_start_timer_defaults_to_five_minutes(mcp_server):
    response = await mcp_server.handle_message(tool_call("start_timer", {"task": "reply to mum"}))
    text = content_text(response)
    assert "Timer Started: 5 minutes" in text
    assert "reply to mum" in text


@pytest.mark.asyncio
async def test_start_timer_uses_given_minutes(mcp_server):
    response = await mcp_server.handle_message(tool_call("start_timer", {"task": "dishes", "minutes": 15}))
    assert "Timer Started: 15 minutes" in content_text(response)


@pytest.mark.asyncio
async def test_help_me_start_includes_caller_prefix(mcp_server):
    response = await mcp_server.handle_message(
        tool_call("help_me_start", {"task": "taxes"}),
        caller_id="user-abcdefghijklmnop",
    )
    text = content_text(response)
    assert '"taxes" feels overwhelming' in text
    assert "User tracking working: user-abc..." in text


@pytest.mark.asyncio
async def test_unknown_tool_is_a_successful_result(mcp_server):
    response = await mcp_server.handle_message(tool_call("make_coffee", {}))
    assert "error" not in response
    assert response["id"] == 10
    assert content_text(response) == "Unknown tool: make_coffee"


@pytest.mark.asyncio
async def test_tool_call_without_name(mcp_server):
    request = {"jsonrpc": "2.0", "id": 11, "method": "tools/call", "params": {"arguments": {"task": "x"}}}
    response = await mcp_server.handle_message(request)
    assert content_text(response) == "Unknown tool: None"


@pytest.mark.asyncio
async def test_tool_call_without_arguments_defaults_to_empty(mcp_server):
    response = await mcp_server.handle_message(tool_call("break_down_task"))
    text = content_text(response)
    assert "What's the very first physical action?" in text


@pytest.mark.asyncio
async def test_tool_call_with_invalid_arguments(mcp_server):
    response = await mcp_server.handle_message(tool_call("start_timer", {"task": "x", "minutes": "soon"}))
    assert response["error"]["code"] == INVALID_PARAMS
    assert response["id"] == 10


# =============================================================================
# Protocol errors
# =============================================================================


@pytest.mark.asyncio
async def test_unknown_method(mcp_server):
    """Test unknown method handling."""
    request = {
        "jsonrpc": "2.0",
        "id": "8",
        "method": "unknown/method",
        "params": {},
    }
    response = await mcp_server.handle_message(request)
    assert response["jsonrpc"] == "2.0"
    assert response["id"] == "8"
    assert response["error"]["code"] == METHOD_NOT_FOUND


@pytest.mark.asyncio
async def test_unknown_method_lenient_mode():
    server = MCPServer(strict=False)
    response = await server.handle_message({"jsonrpc": "2.0", "id": 9, "method": "resources/list"})
    assert response == {"jsonrpc": "2.0", "id": 9, "result": {}}


@pytest.mark.asyncio
async def test_unknown_notification_has_no_response(mcp_server):
    assert await mcp_server.handle_message({"jsonrpc": "2.0", "method": "notifications/cancelled"}) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [[], "tools/list", 42, {"jsonrpc": "2.0", "id": 1}, {"id": 1, "method": 5}])
async def test_invalid_request(mcp_server, payload):
    response = await mcp_server.handle_message(payload)
    assert response["error"]["code"] == INVALID_REQUEST


@pytest.mark.asyncio
async def test_invalid_request_keeps_id(mcp_server):
    response = await mcp_server.handle_message({"jsonrpc": "2.0", "id": "keep-me"})
    assert response["id"] == "keep-me"


@pytest.mark.asyncio
async def test_params_must_be_an_object(mcp_server):
    response = await mcp_server.handle_message({"jsonrpc": "2.0", "id": 1, "method": "tools/list", "params": [1, 2]})
    assert response["error"]["code"] == INVALID_PARAMS


@pytest.mark.asyncio
async def test_parse_error(mcp_server):
    response = await mcp_server.handle_raw("{not json")
    assert response["id"] is None
    assert response["error"]["code"] == PARSE_ERROR


@pytest.mark.asyncio
async def test_handle_raw_decodes_bytes(mcp_server):
    response = await mcp_server.handle_raw(b'{"jsonrpc": "2.0", "id": 5, "method": "ping"}')
    assert response == {"jsonrpc": "2.0", "id": 5, "result": {}}


@pytest.mark.asyncio
async def test_handler_exception_becomes_internal_error(mcp_server):
    with patch.object(mcp_server.dispatcher, "call", side_effect=RuntimeError("secret details")):
        response = await mcp_server.handle_message(tool_call("complete_task", {"task": "x"}))
    assert response["error"]["code"] == INTERNAL_ERROR
    assert "secret" not in response["error"]["message"]


@pytest.mark.asyncio
async def test_tool_timeout_becomes_internal_error():
    registry = ToolRegistry()
    registry.register(
        name="slow",
        description="Sleeps",
        input_schema={"type": "object", "properties": {}},
        arguments_model=ToolArguments,
        handler=lambda args, caller_id: time.sleep(0.5) or "done",
    )
    server = MCPServer(dispatcher=ToolDispatcher(registry=registry, timeout=0.05))
    response = await server.handle_message(tool_call("slow", {}))
    assert response["error"]["code"] == INTERNAL_ERROR


# =============================================================================
# Envelopes
# =============================================================================


def test_result_envelope_has_no_error_key():
    assert jsonrpc_result(1, {"tools": []}) == {"jsonrpc": "2.0", "id": 1, "result": {"tools": []}}


def test_error_envelope_has_no_result_key():
    response = jsonrpc_error("a", METHOD_NOT_FOUND, "Method not found: x")
    assert response == {"jsonrpc": "2.0", "id": "a", "error": {"code": METHOD_NOT_FOUND, "message": "Method not found: x"}}


@pytest.mark.parametrize("bad_id", [[1], {"n": 1}, True])
def test_unechoable_ids_become_null(bad_id):
    assert jsonrpc_error(bad_id, INVALID_REQUEST, "Invalid Request")["id"] is None


@pytest.mark.asyncio
async def test_invalid_request_with_unechoable_id(mcp_server):
    response = await mcp_server.handle_message({"jsonrpc": "2.0", "id": [1, 2], "method": "ping"})
    assert response["id"] is None
    assert response["error"]["code"] == INVALID_REQUEST
