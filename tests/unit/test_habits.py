"""Unit tests for the habit store (quest_tracker/gamification/habits.py)"""
import pytest

from quest_tracker.exceptions import ValidationError
from quest_tracker.gamification.events import EventType
from quest_tracker.gamification.habits import add_habit, delete_habit, edit_habit, toggle_habit
from quest_tracker.models.game_state import GameState, Habit


def make_state(**kwargs):
    habits = [
        Habit(id="h1", name="Exercise", icon="💪"),
        Habit(id="h2", name="Read", icon="📚"),
    ]
    return GameState(habits=habits, **kwargs)


# ============================================================================
# Add Tests
# ============================================================================

def test_add_habit_appends_with_empty_week():
    """Test new habits start with seven false slots and grant no XP"""
    transition = add_habit(make_state(), "Stretch", "🤸", "h3")

    habit = transition.state.habits[-1]
    assert habit.id == "h3"
    assert habit.completed_days == [False] * 7
    assert transition.state.xp == 0
    assert transition.events == []


# ============================================================================
# Toggle Tests
# ============================================================================

def test_toggle_habit_completes_slot():
    """Test completing a slot awards 15 XP and emits habit_completed"""
    transition = toggle_habit(make_state(), "h1", 2)

    assert transition.state.find_habit("h1").completed_days[2] is True
    assert transition.state.xp == 15
    assert transition.state.total_xp_earned == 15
    assert [e.type for e in transition.events] == [EventType.HABIT_COMPLETED]


def test_toggle_habit_uncompletes_slot_silently():
    """Test un-completing removes 15 XP without events"""
    completed = toggle_habit(make_state(), "h1", 2).state

    transition = toggle_habit(completed, "h1", 2)

    assert transition.state.find_habit("h1").completed_days[2] is False
    assert transition.state.xp == 0
    assert transition.state.total_xp_earned == 15
    assert transition.events == []


def test_toggle_habit_twice_restores_state():
    """Test toggling twice restores completedDays and xp"""
    state = make_state(xp=100, total_xp_earned=100)

    after = toggle_habit(toggle_habit(state, "h2", 5).state, "h2", 5).state

    assert after.find_habit("h2").completed_days == state.find_habit("h2").completed_days
    assert after.xp == state.xp


def test_toggle_habit_uncomplete_clamps_at_zero():
    """Test un-completing with less than 15 XP clamps at 0"""
    days = [False, False, True, False, False, False, False]
    state = GameState(xp=5, habits=[Habit(id="h1", name="Run", icon="🏃", completed_days=days)])

    transition = toggle_habit(state, "h1", 2)

    assert transition.state.xp == 0
    assert transition.state.level == 1


def test_toggle_habit_level_up():
    """Test a habit completion crossing a level boundary"""
    transition = toggle_habit(make_state(xp=490), "h1", 0)

    assert transition.state.level == 2
    assert transition.state.xp == 5
    assert [e.type for e in transition.events] == [EventType.HABIT_COMPLETED, EventType.LEVEL_UP]


@pytest.mark.parametrize("index", [-1, 7, 10])
def test_toggle_habit_rejects_bad_day_index(index):
    """Test day index outside 0..6 raises ValidationError"""
    with pytest.raises(ValidationError) as exc_info:
        toggle_habit(make_state(), "h1", index)

    assert exc_info.value.field == "day_index"


def test_toggle_unknown_habit_is_noop():
    """Test unknown habit ids leave the state untouched"""
    state = make_state()

    transition = toggle_habit(state, "missing", 1)

    assert transition.changed is False
    assert transition.state is state


# ============================================================================
# Edit / Delete Tests
# ============================================================================

def test_edit_habit_name_only():
    """Test editing the name keeps the icon"""
    transition = edit_habit(make_state(), "h1", new_name="Workout")

    habit = transition.state.find_habit("h1")
    assert habit.name == "Workout"
    assert habit.icon == "💪"


def test_edit_habit_blank_values_ignored():
    """Test empty or whitespace arguments keep current values"""
    transition = edit_habit(make_state(), "h1", new_name="   ", new_icon="")

    assert transition.changed is False
    assert transition.state.find_habit("h1").name == "Exercise"


def test_edit_unknown_habit_is_noop():
    """Test editing an unknown habit is a no-op"""
    assert edit_habit(make_state(), "nope", new_name="X").changed is False


def test_delete_habit_keeps_xp():
    """Test deleting a completed habit keeps the XP it granted"""
    completed = toggle_habit(make_state(), "h1", 3).state

    transition = delete_habit(completed, "h1")

    assert transition.state.find_habit("h1") is None
    assert [h.id for h in transition.state.habits] == ["h2"]
    assert transition.state.xp == 15


def test_delete_unknown_habit_is_noop():
    """Test deleting an unknown habit is a no-op"""
    assert delete_habit(make_state(), "nope").changed is False
