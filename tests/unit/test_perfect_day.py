"""Unit tests for perfect-day detection (quest_tracker/gamification/perfect_day.py)"""
import pytest

from quest_tracker.gamification.events import EventType, Transition
from quest_tracker.gamification.perfect_day import (
    completion_counts,
    completion_rate,
    is_perfect_day,
    progress_message,
    record_perfect_day,
)
from quest_tracker.models.game_state import GameState, Habit, Task, TaskPriority

TODAY_INDEX = 2


def week(done_today: bool):
    days = [False] * 7
    days[TODAY_INDEX] = done_today
    return days


def make_state(habits_done=(False, False), tasks_done=(False,)):
    return GameState(
        habits=[Habit(id=f"h{i}", name=f"H{i}", icon="⭐", completed_days=week(d)) for i, d in enumerate(habits_done)],
        tasks=[
            Task(id=f"t{i}", title=f"T{i}", completed=d, priority=TaskPriority.MEDIUM, xp_reward=25)
            for i, d in enumerate(tasks_done)
        ],
    )


# ============================================================================
# Counting Tests
# ============================================================================

def test_completion_counts():
    """Test counts of habits done today, tasks done and total items"""
    assert completion_counts(make_state((True, False), (True,)), TODAY_INDEX) == (1, 1, 3)


def test_completion_counts_ignores_other_days():
    """Test only today's slot counts"""
    state = make_state()
    assert completion_counts(state, 0) == (0, 0, 3)


def test_completion_rate_rounds():
    """Test rounded percentage"""
    assert completion_rate(make_state((True, False), (False,)), TODAY_INDEX) == 33
    assert completion_rate(make_state((True, True), (False,)), TODAY_INDEX) == 67


def test_completion_rate_zero_items():
    """Test zero items means 0%"""
    assert completion_rate(GameState(), TODAY_INDEX) == 0


def test_is_perfect_day():
    """Test perfect only when every item is done"""
    assert is_perfect_day(make_state((True, True), (True,)), TODAY_INDEX) is True
    assert is_perfect_day(make_state((True, True), (False,)), TODAY_INDEX) is False


def test_empty_state_is_not_perfect():
    """Test zero items is never perfect"""
    assert is_perfect_day(GameState(), TODAY_INDEX) is False


# ============================================================================
# Transition Tests
# ============================================================================

def test_record_perfect_day_on_transition():
    """Test not-perfect -> perfect increments the counter and emits perfect_day"""
    before = make_state((True, True), (False,))
    after = Transition(state=make_state((True, True), (True,)))

    result = record_perfect_day(before, after, TODAY_INDEX)

    assert result.state.perfect_days == 1
    assert [e.type for e in result.events] == [EventType.PERFECT_DAY]


def test_record_perfect_day_already_perfect():
    """Test no increment when the day was already perfect"""
    perfect = make_state((True, True), (True,))

    result = record_perfect_day(perfect, Transition(state=perfect), TODAY_INDEX)

    assert result.state.perfect_days == 0
    assert result.events == []


def test_record_perfect_day_still_incomplete():
    """Test no increment while items remain"""
    before = make_state((False, False), (False,))
    after = Transition(state=make_state((True, False), (False,)))

    assert record_perfect_day(before, after, TODAY_INDEX).state.perfect_days == 0


# ============================================================================
# Message Tests
# ============================================================================

@pytest.mark.parametrize("rate,fragment", [
    (100, "Perfect day"),
    (80, "Almost there"),
    (50, "Halfway"),
    (10, "Every task counts"),
])
def test_progress_message(rate, fragment):
    """Test encouragement tiers"""
    assert fragment in progress_message(rate)
