"""
MCP (Model Context Protocol) HTTP endpoints.

Exposes the MCP server over plain HTTP POST (synchronous mode) and over
Server-Sent Events (streaming mode).
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse, StreamingResponse

from adhdone.core.config import settings
from adhdone.core.constants import INTERNAL_ERROR, SESSION_HEADER, SESSION_QUERY_PARAM
from adhdone.mcp.server import MCPServer, jsonrpc_error, valid_request_id
from adhdone.mcp.sessions import SessionManager
from adhdone.models.mcp_schemas import JSONRPCRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def get_mcp_server(request: Request) -> MCPServer:
    return request.app.state.mcp_server


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_caller_id(request: Request) -> str | None:
    """Opaque caller identifier supplied by the chat host. Never validated."""
    return request.headers.get(settings.CALLER_ID_HEADER)


def _session_token(request: Request) -> str | None:
    # An empty sessionId still selects streaming mode and is then rejected
    token = request.query_params.get(SESSION_QUERY_PARAM)
    if token is not None:
        return token
    return request.headers.get(SESSION_HEADER)


def _peek_request_id(raw: bytes) -> Any:
    try:
        payload = json.loads(raw)
    except ValueError:
        return None
    return valid_request_id(payload.get("id")) if isinstance(payload, dict) else None


def _internal_error_response(raw: bytes) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=jsonrpc_error(_peek_request_id(raw), INTERNAL_ERROR, "Internal error"),
    )


async def _handle_streaming_post(
    request: Request,
    session_id: str | None,
    mcp_server: MCPServer,
    sessions: SessionManager,
) -> Response:
    raw = await request.body()
    session = sessions.require(session_id, request_id=_peek_request_id(raw))

    async with session.lock:
        try:
            response = await mcp_server.handle_raw(raw, caller_id=get_caller_id(request))
        except Exception as e:
            logger.error(f"Error handling MCP message: {e}", exc_info=True, extra={"session_id": session.id})
            return _internal_error_response(raw)

        if response is not None:
            # The session may have closed while the call ran; the response is then dropped
            sessions.deliver(session.id, response)
    return JSONResponse(content={"status": "accepted"})


def _open_stream(request: Request, post_path: str, sessions: SessionManager) -> StreamingResponse:
    session = sessions.open(caller_id=get_caller_id(request))
    root_path = request.scope.get("root_path", "")
    endpoint = f"{root_path}{post_path}?{SESSION_QUERY_PARAM}={session.id}"
    return StreamingResponse(
        sessions.event_stream(session, endpoint),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
            SESSION_HEADER: session.id,
        },
    )


@router.post(
    "/mcp",
    summary="MCP JSON-RPC endpoint",
    response_description="JSON-RPC 2.0 response with result or error",
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": JSONRPCRequest.model_json_schema()}}}},
)
async def mcp_endpoint(
    request: Request,
    mcp_server: MCPServer = Depends(get_mcp_server),
    sessions: SessionManager = Depends(get_session_manager),
):
    """
    Handle MCP JSON-RPC 2.0 requests over HTTP.

    Without a session token the response is returned synchronously in the HTTP
    body (notifications get an empty 202). With a `sessionId` query parameter or
    `Mcp-Session-Id` header the response is pushed onto that session's event
    stream instead.

    **Available Methods:**
    - `initialize` - Initialize the MCP connection
    - `notifications/initialized` - Client finished initialization
    - `ping` - Liveness check
    - `tools/list` - List available tools
    - `tools/call` - Call a tool (help_me_start, break_down_task, start_timer, complete_task)

    **Example: Break down a task**
    ```json
    {
      "jsonrpc": "2.0",
      "id": 3,
      "method": "tools/call",
      "params": {
        "name": "break_down_task",
        "arguments": {"task": "clean my kitchen"}
      }
    }
    ```
    """
    session_id = _session_token(request)
    if session_id is not None:
        return await _handle_streaming_post(request, session_id, mcp_server, sessions)

    raw = await request.body()
    try:
        response = await mcp_server.handle_raw(raw, caller_id=get_caller_id(request))
    except Exception as e:
        logger.error(f"Error handling MCP request: {e}", exc_info=True)
        return _internal_error_response(raw)

    if response is None:
        return Response(status_code=status.HTTP_202_ACCEPTED)
    return JSONResponse(content=response)


@router.post("/message", summary="Post a JSON-RPC message to an open SSE session")
async def message_endpoint(
    request: Request,
    mcp_server: MCPServer = Depends(get_mcp_server),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Route a message for the session named by `sessionId`; the reply arrives on the stream."""
    return await _handle_streaming_post(request, _session_token(request), mcp_server, sessions)


@router.get("/mcp", summary="Open an MCP event stream", response_class=StreamingResponse)
async def mcp_stream(request: Request, sessions: SessionManager = Depends(get_session_manager)):
    """Open a streaming session whose messages are posted back to `/mcp`."""
    return _open_stream(request, "/mcp", sessions)


@router.get("/sse", summary="Open an MCP event stream", response_class=StreamingResponse)
async def sse_stream(request: Request, sessions: SessionManager = Depends(get_session_manager)):
    """Open a streaming session whose messages are posted to `/message`."""
    return _open_stream(request, "/message", sessions)
