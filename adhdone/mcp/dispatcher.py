"""
Tool dispatcher: validates a tool call and runs the tool's handler.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from adhdone.core.config import settings
from adhdone.core.logging_config import truncate_caller
from adhdone.exceptions import InvalidParamsError, ToolTimeoutError
from adhdone.mcp.registry import ToolRegistry, default_registry
from adhdone.models.mcp_schemas import ToolCallResult

logger = logging.getLogger(__name__)


def unknown_tool_result(name: Any) -> ToolCallResult:
    """Result returned for names missing from the registry.

    This is a successful call carrying a user-visible message, not an RPC error.
    """
    return ToolCallResult.from_text(f"Unknown tool: {name}")


class ToolDispatcher:
    """Looks up tools in a registry and invokes them with validated arguments."""

    def __init__(self, registry: ToolRegistry | None = None, timeout: float | None = None) -> None:
        self.registry = registry if registry is not None else default_registry
        self.timeout = timeout if timeout is not None else settings.TOOL_CALL_TIMEOUT_SECONDS

    async def call(self, name: Any, arguments: Any = None, caller_id: str | None = None) -> ToolCallResult:
        """
        Invoke a tool by name.

        Unknown names never raise. Arguments that cannot be coerced into the
        tool's argument model raise InvalidParamsError; a handler that runs past
        the timeout raises ToolTimeoutError.
        """
        binding = self.registry.get(name)
        if binding is None:
            logger.warning(f"Unknown tool requested: {name}", extra={"tool": str(name)})
            return unknown_tool_result(name)

        if not isinstance(arguments, Mapping):
            arguments = {}

        try:
            args = binding.arguments_model.model_validate(dict(arguments))
        except ValidationError as e:
            raise InvalidParamsError(f"Invalid arguments for {name}: {e.error_count()} validation error(s)") from e

        logger.info(
            f"[{name}] User: {truncate_caller(caller_id)}... Task: {getattr(args, 'task', None)}",
            extra={"tool": name, "caller": truncate_caller(caller_id)},
        )

        try:
            text = await asyncio.wait_for(
                asyncio.to_thread(binding.handler, args, caller_id),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise ToolTimeoutError(name, self.timeout) from e

        return ToolCallResult.from_text(text)
