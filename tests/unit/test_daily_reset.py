"""Unit tests for the daily rollover (quest_tracker/gamification/daily_reset.py)"""
from quest_tracker.gamification.daily_reset import apply_daily_rollover, needs_rollover
from quest_tracker.models.game_state import GameState, Habit, Task, TaskPriority

TODAY = "2024-01-10"


def stale_state():
    return GameState(
        level=3,
        xp=120,
        total_xp_earned=1120,
        streak=4,
        habits=[Habit(id="h1", name="Read", icon="📚", completed_days=[True, True, False, False, False, False, False])],
        tasks=[Task(id="t1", title="Plan", completed=True, priority=TaskPriority.LOW, xp_reward=10)],
        last_active_date="2024-01-09",
        unlocked_achievements=["first_habit"],
        perfect_days=2,
        total_tasks_completed=8,
        days_used=["2024-01-08", "2024-01-09"],
    )


# ============================================================================
# Rollover Tests
# ============================================================================

def test_rollover_clears_daily_flags():
    """Test a stale lastActiveDate clears completion vectors and task flags"""
    state = apply_daily_rollover(stale_state(), TODAY)

    assert state.habits[0].completed_days == [False] * 7
    assert state.tasks[0].completed is False
    assert state.last_active_date == TODAY
    assert state.days_used == ["2024-01-08", "2024-01-09", TODAY]


def test_rollover_keeps_progression():
    """Test lifetime progression is untouched"""
    before = stale_state()

    after = apply_daily_rollover(before, TODAY)

    assert (after.level, after.xp, after.total_xp_earned) == (3, 120, 1120)
    assert after.streak == 4
    assert after.unlocked_achievements == ["first_habit"]
    assert after.perfect_days == 2
    assert after.total_tasks_completed == 8


def test_rollover_is_idempotent():
    """Test rolling over twice in a day equals once"""
    once = apply_daily_rollover(stale_state(), TODAY)
    twice = apply_daily_rollover(once, TODAY)

    assert twice == once
    assert twice is once


def test_same_day_records_usage_only():
    """Test same-day load keeps progress and appends today to daysUsed once"""
    state = stale_state().model_copy(update={"last_active_date": TODAY, "days_used": []})

    after = apply_daily_rollover(state, TODAY)

    assert after.habits[0].completed_days[0] is True
    assert after.tasks[0].completed is True
    assert after.days_used == [TODAY]


def test_needs_rollover():
    """Test rollover detection"""
    assert needs_rollover(stale_state(), TODAY) is True
    assert needs_rollover(stale_state(), "2024-01-09") is False
