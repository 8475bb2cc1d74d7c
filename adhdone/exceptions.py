"""
Custom exceptions for the ADHDone MCP server.

Provides specific exception types for the protocol and transport layers.
"""

from adhdone.core.constants import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)


class ADHDoneError(Exception):
    """Base exception for all ADHDone errors."""

    pass


class ProtocolError(ADHDoneError):
    """Raised when a JSON-RPC message cannot be handled; carries the error code."""

    code = INTERNAL_ERROR

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ParseError(ProtocolError):
    code = PARSE_ERROR


class InvalidRequestError(ProtocolError):
    code = INVALID_REQUEST


class MethodNotFoundError(ProtocolError):
    code = METHOD_NOT_FOUND


class InvalidParamsError(ProtocolError):
    code = INVALID_PARAMS


class ToolTimeoutError(ADHDoneError):
    """Raised when a tool handler does not finish within the configured timeout."""

    def __init__(self, tool_name: str, timeout: float) -> None:
        super().__init__(f"Tool {tool_name!r} timed out after {timeout}s")
        self.tool_name = tool_name
        self.timeout = timeout


class SessionNotFoundError(ADHDoneError):
    """Raised when a message is posted for a session that is not open."""

    def __init__(self, session_id: str | None, request_id: object = None) -> None:
        super().__init__("No active session")
        self.session_id = session_id
        self.request_id = request_id
