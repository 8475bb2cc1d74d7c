"""
Tool registry, dispatcher and coaching text tests.
"""

import pytest

from adhdone.exceptions import InvalidParamsError
from adhdone.mcp.dispatcher import ToolDispatcher
from adhdone.mcp.registry import ToolRegistry, build_default_registry
from adhdone.models.schemas import StartTimerArguments, ToolArguments
from adhdone.services import coaching


@pytest.fixture
def dispatcher():
    return ToolDispatcher(registry=build_default_registry(), timeout=5)


# =============================================================================
# Registry
# =============================================================================


def test_registry_preserves_insertion_order():
    registry = ToolRegistry()
    for name in ("zeta", "alpha", "mid"):
        registry.register(name, f"{name} tool", {"type": "object"}, ToolArguments, lambda args, caller: name)
    assert [tool.name for tool in registry.list()] == ["zeta", "alpha", "mid"]
    assert registry.names() == ["zeta", "alpha", "mid"]
    assert len(registry) == 3


def test_registry_rejects_duplicate_names():
    registry = ToolRegistry()
    registry.register("once", "d", {"type": "object"}, ToolArguments, lambda args, caller: "")
    with pytest.raises(ValueError):
        registry.register("once", "d", {"type": "object"}, ToolArguments, lambda args, caller: "")


def test_registry_exists():
    registry = build_default_registry()
    assert registry.exists("start_timer")
    assert not registry.exists("stop_timer")
    assert not registry.exists(None)
    assert not registry.exists(["start_timer"])
    assert registry.get("stop_timer") is None


def test_registry_list_is_stable():
    registry = build_default_registry()
    assert registry.list() == registry.list()


# =============================================================================
# Dispatcher
# =============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["nope", "", "HELP_ME_START", None, 42, "tools/list"])
async def test_unknown_tool_never_raises(dispatcher, name):
    result = await dispatcher.call(name, {"task": "anything"})
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    assert result.content[0].text == f"Unknown tool: {name}"


@pytest.mark.asyncio
async def test_non_mapping_arguments_are_treated_as_empty(dispatcher):
    result = await dispatcher.call("break_down_task", ["clean"])
    assert "What's the very first physical action?" in result.content[0].text


@pytest.mark.asyncio
async def test_missing_task_degrades_gracefully(dispatcher):
    result = await dispatcher.call("complete_task", {})
    assert "You completed: **this task**" in result.content[0].text


@pytest.mark.asyncio
async def test_numbers_are_coerced_to_text(dispatcher):
    result = await dispatcher.call("break_down_task", {"task": 42})
    assert 'Breaking down: "42"' in result.content[0].text


@pytest.mark.asyncio
async def test_invalid_minutes_raise_invalid_params(dispatcher):
    with pytest.raises(InvalidParamsError):
        await dispatcher.call("start_timer", {"task": "x", "minutes": {"value": 3}})


@pytest.mark.asyncio
async def test_caller_id_is_passed_to_handler():
    seen = []
    registry = ToolRegistry()
    registry.register("echo", "d", {"type": "object"}, ToolArguments, lambda args, caller: seen.append(caller) or "ok")
    result = await ToolDispatcher(registry=registry).call("echo", {}, caller_id="subject-1")
    assert result.content[0].text == "ok"
    assert seen == ["subject-1"]


# =============================================================================
# Argument models
# =============================================================================


@pytest.mark.parametrize("minutes", [None, 0, ""])
def test_falsy_minutes_default_to_five(minutes):
    assert StartTimerArguments.model_validate({"task": "t", "minutes": minutes}).minutes == 5


def test_minutes_absent_default_to_five():
    assert StartTimerArguments.model_validate({}).minutes == 5


def test_numeric_minutes_string_is_accepted():
    assert StartTimerArguments.model_validate({"minutes": "10"}).minutes == 10


def test_unknown_argument_keys_are_ignored():
    args = StartTimerArguments.model_validate({"task": "t", "colour": "blue"})
    assert not hasattr(args, "colour")


# =============================================================================
# Coaching text
# =============================================================================


@pytest.mark.parametrize(
    "task, expected_first_step",
    [
        ("clean my kitchen", coaching.CLEANING_STEPS[0]),
        ("Tidy the desk", coaching.CLEANING_STEPS[0]),
        ("clear my INBOX", coaching.EMAIL_STEPS[0]),
        ("answer an email", coaching.EMAIL_STEPS[0]),
        ("maths homework", coaching.STUDY_STEPS[0]),
        ("finish assignment", coaching.STUDY_STEPS[0]),
        ("call the dentist", coaching.GENERIC_STEPS[0]),
        (None, coaching.GENERIC_STEPS[0]),
    ],
)
def test_select_micro_tasks(task, expected_first_step):
    assert coaching.select_micro_tasks(task)[0] == expected_first_step


def test_break_down_task_numbers_steps():
    text = coaching.break_down_task(coaching.BreakDownTaskArguments(task="study for exam"))
    for i, step in enumerate(coaching.STUDY_STEPS, start=1):
        assert f"{i}. {step}" in text


def test_complete_task_includes_reflection():
    text = coaching.complete_task(coaching.CompleteTaskArguments(task="laundry", how_it_went="easier than expected"))
    assert 'You said: "easier than expected"' in text


def test_complete_task_without_reflection():
    text = coaching.complete_task(coaching.CompleteTaskArguments(task="laundry"))
    assert "You said" not in text


def test_help_me_start_unknown_caller():
    text = coaching.help_me_start(coaching.HelpMeStartArguments(task="taxes"))
    assert "User tracking working: unknown..." in text


def test_help_me_start_mentions_feeling():
    text = coaching.help_me_start(coaching.HelpMeStartArguments(task="taxes", feeling="dread"), "abc")
    assert 'You mentioned feeling: "dread"' in text
