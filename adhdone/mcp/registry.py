"""
Static registry of the tools exposed over MCP.

Maps each tool name to its public descriptor, its argument model and the
handler that generates the response text. Built once at import time.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from adhdone.models.mcp_schemas import ToolDescriptor
from adhdone.models.schemas import (
    BreakDownTaskArguments,
    CompleteTaskArguments,
    HelpMeStartArguments,
    StartTimerArguments,
    ToolArguments,
)
from adhdone.services import coaching

ToolHandler = Callable[[Any, str | None], str]


@dataclass(frozen=True)
class ToolBinding:
    descriptor: ToolDescriptor
    arguments_model: type[ToolArguments]
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.descriptor.name


class ToolRegistry:
    """Insertion-ordered name -> ToolBinding mapping."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolBinding] = {}

    def register(
        self,
        name: str,
        description: str,
        input_schema: dict[str, Any],
        arguments_model: type[ToolArguments],
        handler: ToolHandler,
    ) -> ToolBinding:
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        binding = ToolBinding(
            descriptor=ToolDescriptor(name=name, description=description, inputSchema=input_schema),
            arguments_model=arguments_model,
            handler=handler,
        )
        self._tools[name] = binding
        return binding

    def names(self) -> list[str]:
        return list(self._tools)

    def list(self) -> list[ToolDescriptor]:
        return [binding.descriptor for binding in self._tools.values()]

    def exists(self, name: Any) -> bool:
        return isinstance(name, str) and name in self._tools

    def get(self, name: Any) -> ToolBinding | None:
        if not self.exists(name):
            return None
        return self._tools[name]

    def __len__(self) -> int:
        return len(self._tools)


def _string_property(description: str) -> dict[str, str]:
    return {"type": "string", "description": description}


def build_default_registry() -> ToolRegistry:
    """Register the four coaching tools in their published order."""
    registry = ToolRegistry()

    registry.register(
        name="help_me_start",
        description="Use when the user is stuck, overwhelmed or procrastinating on a task. "
        "Offers gentle encouragement and asks for the tiniest possible first step.",
        input_schema={
            "type": "object",
            "properties": {
                "task": _string_property("The task the user is struggling to start"),
                "feeling": _string_property("How the user feels about the task (optional)"),
            },
            "required": ["task"],
        },
        arguments_model=HelpMeStartArguments,
        handler=coaching.help_me_start,
    )
    registry.register(
        name="break_down_task",
        description="Break a task into 5 tiny, ADHD-friendly micro-steps of a few minutes each.",
        input_schema={
            "type": "object",
            "properties": {
                "task": _string_property("The task to break down"),
            },
            "required": ["task"],
        },
        arguments_model=BreakDownTaskArguments,
        handler=coaching.break_down_task,
    )
    registry.register(
        name="start_timer",
        description="Start a short focus timer for a single micro-task.",
        input_schema={
            "type": "object",
            "properties": {
                "task": _string_property("The micro-task to focus on"),
                "minutes": {
                    "type": "number",
                    "description": "Timer duration in minutes (default 5)",
                },
            },
            "required": ["task"],
        },
        arguments_model=StartTimerArguments,
        handler=coaching.start_timer,
    )
    registry.register(
        name="complete_task",
        description="Celebrate a finished task and suggest what to do next.",
        input_schema={
            "type": "object",
            "properties": {
                "task": _string_property("The task the user completed"),
                "how_it_went": _string_property("How it went (optional)"),
            },
            "required": ["task"],
        },
        arguments_model=CompleteTaskArguments,
        handler=coaching.complete_task,
    )

    return registry


default_registry = build_default_registry()
