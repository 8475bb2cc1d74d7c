"""
Plain REST access to the coaching tools.

`POST /tools/{tool_name}` takes the tool arguments as the JSON body and returns
the generated text, for hosts that do not speak MCP.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from adhdone.api.endpoints.mcp import get_caller_id, get_mcp_server
from adhdone.exceptions import InvalidParamsError
from adhdone.mcp.server import MCPServer

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{tool_name}", summary="Call a tool directly")
async def call_tool(
    tool_name: str,
    request: Request,
    arguments: dict[str, Any] | None = Body(None, examples=[{"task": "clean my kitchen"}]),
    mcp_server: MCPServer = Depends(get_mcp_server),
):
    """Run one tool and return its message."""
    dispatcher = mcp_server.dispatcher
    if not dispatcher.registry.exists(tool_name):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown tool: {tool_name}")

    try:
        result = await dispatcher.call(tool_name, arguments or {}, caller_id=get_caller_id(request))
    except InvalidParamsError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e

    return {"tool": tool_name, "message": "\n".join(block.text for block in result.content)}
