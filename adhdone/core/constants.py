"""
Application-wide constants.

Centralizes hardcoded values that should be consistent across the codebase.
"""

# Service identity (reported by /health, / and the MCP initialize handshake)
SERVICE_NAME = "adhdone"
SERVER_DISPLAY_NAME = "ADHDone MCP Server"
SERVER_DESCRIPTION = "AI-powered ADHD task coach for ChatGPT"

# Application version (update this for releases)
VERSION = "0.1.0"

# MCP Protocol version
MCP_PROTOCOL_VERSION = "2024-11-05"

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
# Implementation-defined server error: message posted without an open session
SESSION_NOT_FOUND = -32000

# Fallback caller identifier when the host supplies none
UNKNOWN_CALLER = "unknown"

# Caller identifiers are truncated to this many characters in logs
CALLER_ID_LOG_LENGTH = 20

# Where a posted message names its streaming session
SESSION_QUERY_PARAM = "sessionId"
SESSION_HEADER = "Mcp-Session-Id"
