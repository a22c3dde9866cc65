"""Unit tests for the assistant tool surface (quest_tracker/agent/)"""
import json

import pytest

from quest_tracker.agent import SYSTEM_PROMPT, build_habits_context, create_quest_agent
from quest_tracker.agent.quest_tools import (
    QuestAgentDeps,
    accept_suggestion,
    dismiss_suggestion,
    dispatch_tool_call,
    dispatch_tool_calls,
)
from quest_tracker.exceptions import SuggestionStateError
from quest_tracker.models.game_state import Habit, TaskPriority
from quest_tracker.models.suggestion import Suggestion, SuggestionStatus, SuggestionType


# ============================================================================
# Dispatch Tests
# ============================================================================

def test_add_task_call(engine):
    """Test add_task adds a task with the priority reward"""
    result = dispatch_tool_call(engine, {"name": "add_task", "arguments": {"title": "Book dentist", "priority": "high"}})

    assert result.success is True
    assert "+50 XP" in result.message
    assert engine.state.tasks[-1].title == "Book dentist"


def test_add_habit_call_with_json_string_arguments(engine):
    """Test chat-completion style JSON-string arguments"""
    raw = {"function": {"name": "add_habit", "arguments": json.dumps({"name": "Walk", "icon": "🚶"})}}

    result = dispatch_tool_call(engine, raw)

    assert result.success is True
    assert engine.state.habits[-1].name == "Walk"


def test_edit_habit_call_camel_case(engine):
    """Test edit_habit accepts habitId/newName"""
    habit = engine.add_habit("Walk", "🚶")

    result = dispatch_tool_call(engine, {"name": "edit_habit", "arguments": {"habitId": habit.id, "newName": "Hike"}})

    assert result.success is True
    assert engine.state.find_habit(habit.id).name == "Hike"
    assert engine.state.find_habit(habit.id).icon == "🚶"


def test_delete_habit_call(engine):
    """Test delete_habit removes the habit"""
    habit = engine.add_habit("Walk", "🚶")

    result = dispatch_tool_call(engine, {"name": "delete_habit", "arguments": {"habitId": habit.id}})

    assert result.success is True
    assert engine.state.habits == []


def test_edit_unknown_habit_reports_failure(engine):
    """Test unknown habit ids are reported, state untouched"""
    before = engine.state

    result = dispatch_tool_call(engine, {"name": "delete_habit", "arguments": {"habitId": "nope"}})

    assert result.success is False
    assert engine.state is before


def test_unknown_tool_is_noop(engine):
    """Test unknown tool names are logged no-ops"""
    before = engine.state

    result = dispatch_tool_call(engine, {"name": "launch_rocket", "arguments": {}})

    assert result.success is False
    assert engine.state is before


def test_invalid_arguments_are_noop(engine):
    """Test missing or invalid arguments are rejected"""
    before = engine.state

    results = dispatch_tool_calls(engine, [
        {"name": "add_task", "arguments": {"title": "No priority"}},
        {"name": "add_task", "arguments": {"title": "Bad", "priority": "urgent"}},
        {"name": "add_habit", "arguments": "{not json"},
        "not a call",
    ])

    assert [r.success for r in results] == [False, False, False, False]
    assert engine.state is before


def test_one_bad_call_does_not_block_others(engine):
    """Test calls are applied independently, in order"""
    results = dispatch_tool_calls(engine, [
        {"name": "add_task", "arguments": {"title": "First", "priority": "low"}},
        {"name": "bogus", "arguments": {}},
        {"name": "add_task", "arguments": {"title": "Second", "priority": "medium"}},
    ])

    assert [r.success for r in results] == [True, False, True]
    assert [t.title for t in engine.state.tasks] == ["First", "Second"]


def test_suggest_items_builds_cards(engine):
    """Test suggestions get message-derived ids and start pending"""
    result = dispatch_tool_call(engine, {
        "name": "suggest_items",
        "arguments": {"suggestions": [
            {"type": "habit", "title": "Stretch", "icon": "🤸", "reason": "Loosens up"},
            {"type": "task", "title": "Plan week", "priority": "high", "reason": "Sets focus"},
        ]},
    }, message_id="msg-7")

    assert [s.id for s in result.suggestions] == ["msg-7-suggestion-0", "msg-7-suggestion-1"]
    assert all(s.status == SuggestionStatus.PENDING for s in result.suggestions)
    assert engine.state.habits == []


# ============================================================================
# Suggestion Lifecycle Tests
# ============================================================================

def test_accept_task_suggestion_defaults_medium(engine):
    """Test accepted task suggestions default to medium priority"""
    suggestion = Suggestion(id="s1", type=SuggestionType.TASK, title="Tidy desk", reason="Clear space")

    accepted = accept_suggestion(engine, suggestion)

    assert accepted.status == SuggestionStatus.ACCEPTED
    assert engine.state.tasks[-1].priority == TaskPriority.MEDIUM


def test_accept_habit_suggestion_default_icon(engine):
    """Test accepted habit suggestions default to the star icon"""
    suggestion = Suggestion(id="s2", type=SuggestionType.HABIT, title="Floss", reason="Teeth")

    accept_suggestion(engine, suggestion)

    assert engine.state.habits[-1].icon == "⭐"


def test_resolved_suggestions_are_terminal(engine):
    """Test accepted or dismissed suggestions cannot transition again"""
    pending = Suggestion(id="s3", type=SuggestionType.HABIT, title="Nap", reason="Rest")
    dismissed = dismiss_suggestion(pending)
    accepted = accept_suggestion(engine, pending)

    with pytest.raises(SuggestionStateError):
        accept_suggestion(engine, dismissed)
    with pytest.raises(SuggestionStateError):
        dismiss_suggestion(accepted)

    assert dismissed.status == SuggestionStatus.DISMISSED
    assert len(engine.state.habits) == 1


# ============================================================================
# Agent Tests
# ============================================================================

def test_habits_context():
    """Test habit context lists ids for the model"""
    habits = [Habit(id="1", name="Exercise", icon="💪"), Habit(id="2", name="Read", icon="📚")]

    assert build_habits_context(habits) == "Current user habits: 💪 Exercise (id: 1), 📚 Read (id: 2)"
    assert build_habits_context([]) == "User has no habits set up yet."


def test_system_prompt_lists_tools():
    """Test the system prompt names every tool"""
    for name in ("add_task", "add_habit", "edit_habit", "delete_habit", "suggest_items"):
        assert name in SYSTEM_PROMPT


@pytest.mark.asyncio
async def test_agent_runs_tools_against_engine(engine):
    """Test the agent's tools mutate the engine (pydantic_ai TestModel)"""
    agent = create_quest_agent(model="test")
    deps = QuestAgentDeps(engine=engine, message_id="msg-1")

    await agent.run("Add a quest to call mom", deps=deps)

    assert engine.state.tasks or engine.state.habits or deps.suggestions
