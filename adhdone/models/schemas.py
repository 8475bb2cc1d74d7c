"""
Typed argument models for each coaching tool.

Arguments arrive as untyped JSON objects. They are validated once at the
dispatcher boundary into one of these models. Every field is optional at the
model level so a missing ``task`` degrades gracefully instead of failing the call.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TIMER_MINUTES = 5


class ToolArguments(BaseModel):
    """Base class for tool arguments: unknown keys are ignored, numbers become strings."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, frozen=True)


class HelpMeStartArguments(ToolArguments):
    task: str | None = Field(None, description="The task the user is struggling to start")
    feeling: str | None = Field(None, description="How the user feels about the task right now")


class BreakDownTaskArguments(ToolArguments):
    task: str | None = Field(None, description="The task to break into micro-steps")


class StartTimerArguments(ToolArguments):
    task: str | None = Field(None, description="The micro-task to focus on")
    minutes: int | float = Field(DEFAULT_TIMER_MINUTES, description="Timer duration in minutes")

    @field_validator("minutes", mode="before")
    @classmethod
    def default_falsy_minutes(cls, value: Any) -> Any:
        # null, 0 and "" all fall back to the default duration
        if not value:
            return DEFAULT_TIMER_MINUTES
        return value


class CompleteTaskArguments(ToolArguments):
    task: str | None = Field(None, description="The task the user just finished")
    how_it_went: str | None = Field(None, description="Optional reflection from the user")
