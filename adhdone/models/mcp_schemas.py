"""
MCP (Model Context Protocol) request and response schemas.

Defines Pydantic models for JSON-RPC 2.0 envelopes, tool descriptors and
tool call results.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Example requests for different methods
EXAMPLE_INITIALIZE = {
    "jsonrpc": "2.0",
    "id": 1,
    "method": "initialize",
    "params": {},
}

EXAMPLE_TOOLS_LIST = {
    "jsonrpc": "2.0",
    "id": 2,
    "method": "tools/list",
    "params": {},
}

EXAMPLE_TOOLS_CALL = {
    "jsonrpc": "2.0",
    "id": 3,
    "method": "tools/call",
    "params": {
        "name": "break_down_task",
        "arguments": {"task": "clean my kitchen"},
    },
}

EXAMPLE_INITIALIZED_NOTIFICATION = {
    "jsonrpc": "2.0",
    "method": "notifications/initialized",
}


class JSONRPCRequest(BaseModel):
    """JSON-RPC 2.0 request model.

    A request whose payload has no ``id`` key is a notification. An explicit
    ``"id": null`` is still a request and gets a response.
    """

    jsonrpc: str = Field("2.0", description="JSON-RPC version (must be '2.0')")
    id: str | int | float | None = Field(None, description="Request ID (string, number or null)")
    method: str = Field(
        ...,
        description="Method name. Available methods: 'initialize', 'notifications/initialized', "
        "'ping', 'tools/list', 'tools/call'",
        examples=["initialize", "tools/list", "tools/call"],
    )
    params: dict[str, Any] | None = Field(
        None,
        description="Method parameters. For 'tools/call', use: {'name': 'tool_name', 'arguments': {...}}",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": EXAMPLE_TOOLS_LIST,
            "examples": [
                EXAMPLE_INITIALIZE,
                EXAMPLE_INITIALIZED_NOTIFICATION,
                EXAMPLE_TOOLS_LIST,
                EXAMPLE_TOOLS_CALL,
            ],
        }
    )

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set


class JSONRPCError(BaseModel):
    """JSON-RPC 2.0 error object."""

    code: int = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")


class JSONRPCResponse(BaseModel):
    """JSON-RPC 2.0 response model."""

    jsonrpc: str = Field("2.0", description="JSON-RPC version")
    id: str | int | float | None = Field(None, description="Request ID")
    result: dict[str, Any] | None = Field(None, description="Result (on success)")
    error: JSONRPCError | None = Field(None, description="Error (on failure)")


class ToolDescriptor(BaseModel):
    """Public description of a tool as returned by ``tools/list``."""

    name: str = Field(..., description="Unique tool name")
    description: str = Field(..., description="What the tool does")
    inputSchema: dict[str, Any] = Field(..., description="JSON Schema of the tool arguments")

    model_config = ConfigDict(frozen=True)


class TextContent(BaseModel):
    """Text content block."""

    type: Literal["text"] = "text"
    text: str


class ToolCallResult(BaseModel):
    """Result of a tool invocation: an ordered list of content blocks."""

    content: list[TextContent] = Field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> "ToolCallResult":
        return cls(content=[TextContent(text=text)])
