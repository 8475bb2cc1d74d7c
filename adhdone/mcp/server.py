"""
MCP (Model Context Protocol) server implementation.

Routes JSON-RPC 2.0 messages to method handlers and exposes the coaching tools
to AI assistants. Transport-agnostic: the HTTP endpoints and the stdio loop
both feed messages through ``MCPServer.handle_message``.
"""

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from adhdone.core.config import settings
from adhdone.core.constants import INTERNAL_ERROR, MCP_PROTOCOL_VERSION, SERVICE_NAME, VERSION
from adhdone.exceptions import (
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
    ToolTimeoutError,
)
from adhdone.mcp.dispatcher import ToolDispatcher
from adhdone.models.mcp_schemas import JSONRPCError, JSONRPCRequest, JSONRPCResponse

logger = logging.getLogger(__name__)

MethodHandler = Callable[[dict[str, Any], str | None], Awaitable[dict[str, Any]]]


def valid_request_id(value: Any) -> str | int | float | None:
    """Return value if it can be echoed as a JSON-RPC id, else None."""
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return value
    return None


def jsonrpc_result(request_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    """Build a JSON-RPC 2.0 success response."""
    response = JSONRPCResponse(id=valid_request_id(request_id), result=result)
    return response.model_dump(exclude={"error"})


def jsonrpc_error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    """Build a JSON-RPC 2.0 error response."""
    response = JSONRPCResponse(id=valid_request_id(request_id), error=JSONRPCError(code=code, message=message))
    return response.model_dump(exclude={"result"})


class MCPServer:
    """MCP server for ADHDone."""

    def __init__(self, dispatcher: ToolDispatcher | None = None, strict: bool | None = None) -> None:
        self.dispatcher = dispatcher or ToolDispatcher()
        self.strict = settings.STRICT_PROTOCOL if strict is None else strict
        self.methods: dict[str, MethodHandler] = {
            "initialize": self.handle_initialize,
            "notifications/initialized": self.handle_initialized,
            "ping": self.handle_ping,
            "tools/list": self.handle_tools_list,
            "tools/call": self.handle_tool_call,
        }

    async def handle_raw(self, raw: str | bytes, caller_id: str | None = None) -> dict[str, Any] | None:
        """Decode a JSON text frame and handle it."""
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return jsonrpc_error(None, ParseError.code, f"Parse error: {e}")
        return await self.handle_message(payload, caller_id)

    async def handle_message(self, payload: Any, caller_id: str | None = None) -> dict[str, Any] | None:
        """
        Handle one decoded JSON-RPC message.

        Returns the response envelope, or None when the message is a
        notification and nothing must be transmitted.
        """
        try:
            request = self.parse_request(payload)
        except ProtocolError as e:
            request_id = payload.get("id") if isinstance(payload, dict) else None
            return jsonrpc_error(request_id, e.code, e.message)

        try:
            result = await self.route(request, caller_id)
        except ProtocolError as e:
            response = jsonrpc_error(request.id, e.code, e.message)
        except ToolTimeoutError as e:
            logger.error(str(e), extra={"rpc_method": request.method, "tool": e.tool_name})
            response = jsonrpc_error(request.id, INTERNAL_ERROR, "Internal error")
        except Exception as e:
            logger.error(f"Error handling request: {e}", exc_info=True, extra={"rpc_method": request.method})
            response = jsonrpc_error(request.id, INTERNAL_ERROR, "Internal error")
        else:
            response = jsonrpc_result(request.id, result)

        if request.is_notification:
            logger.debug(f"Notification handled: {request.method}", extra={"rpc_method": request.method})
            return None
        return response

    def parse_request(self, payload: Any) -> JSONRPCRequest:
        if not isinstance(payload, dict):
            raise InvalidRequestError("Invalid Request: expected a JSON object")
        try:
            return JSONRPCRequest.model_validate(payload)
        except ValidationError as e:
            if all(error["loc"] and error["loc"][0] == "params" for error in e.errors()):
                raise InvalidParamsError("Invalid params: expected an object") from e
            raise InvalidRequestError("Invalid Request") from e

    async def route(self, request: JSONRPCRequest, caller_id: str | None = None) -> dict[str, Any]:
        """Resolve the method handler and run it."""
        handler = self.methods.get(request.method)
        if handler is None:
            if self.strict:
                raise MethodNotFoundError(f"Method not found: {request.method}")
            return {}
        return await handler(request.params or {}, caller_id)

    async def handle_initialize(self, params: dict[str, Any], caller_id: str | None = None) -> dict[str, Any]:
        """Handle initialize request."""
        return {
            "protocolVersion": MCP_PROTOCOL_VERSION,
            "capabilities": {
                "tools": {},
            },
            "serverInfo": {
                "name": SERVICE_NAME,
                "version": VERSION,
            },
        }

    async def handle_initialized(self, params: dict[str, Any], caller_id: str | None = None) -> dict[str, Any]:
        """Acknowledge the client's initialized notification."""
        return {}

    async def handle_ping(self, params: dict[str, Any], caller_id: str | None = None) -> dict[str, Any]:
        return {}

    async def handle_tools_list(self, params: dict[str, Any], caller_id: str | None = None) -> dict[str, Any]:
        """List available tools."""
        return {"tools": [tool.model_dump() for tool in self.dispatcher.registry.list()]}

    async def handle_tool_call(self, params: dict[str, Any], caller_id: str | None = None) -> dict[str, Any]:
        """Handle tool call."""
        tool_name = params.get("name")
        arguments = params.get("arguments") or {}
        result = await self.dispatcher.call(tool_name, arguments, caller_id=caller_id)
        return {"content": [block.model_dump() for block in result.content]}


async def run_mcp_server(server: MCPServer | None = None, reader=None, writer=None):
    """Run MCP server on stdio: one JSON-RPC message per line."""
    server = server or MCPServer()
    reader = reader or sys.stdin
    writer = writer or sys.stdout

    logger.info("MCP server starting on stdio")

    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, reader.readline)
        if not line:
            break

        line = line.strip()
        if not line:
            continue

        response = await server.handle_raw(line)
        if response is not None:
            print(json.dumps(response), file=writer, flush=True)

    logger.info("MCP server stdin closed, exiting")


def main():
    """Main entry point for the stdio MCP server."""
    from adhdone.core.logging_config import setup_logging

    # stdout carries JSON-RPC frames
    setup_logging(stream=sys.stderr)
    try:
        asyncio.run(run_mcp_server())
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
