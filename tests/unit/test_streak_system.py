"""Unit tests for Streak Tracking (quest_tracker/gamification/streak_system.py)"""
import pytest

from quest_tracker.exceptions import ValidationError
from quest_tracker.gamification.streak_system import format_streak_display, next_milestone, set_streak
from quest_tracker.models.game_state import GameState


# ============================================================================
# Set Streak Tests
# ============================================================================

def test_set_streak_updates_state():
    """Test streak is replaced"""
    transition = set_streak(GameState(streak=1), 4)

    assert transition.state.streak == 4
    assert transition.changed is True


def test_set_streak_same_value_unchanged():
    """Test same value is a no-op"""
    assert set_streak(GameState(streak=4), 4).changed is False


def test_set_streak_negative_rejected():
    """Test negative streak raises ValidationError"""
    with pytest.raises(ValidationError):
        set_streak(GameState(), -1)


# ============================================================================
# Display Tests
# ============================================================================

@pytest.mark.parametrize("streak,expected", [(0, 3), (3, 7), (10, 14), (29, 30), (30, None)])
def test_next_milestone(streak, expected):
    """Test next streak badge threshold"""
    assert next_milestone(streak) == expected


def test_format_streak_display():
    """Test display text"""
    assert "No active streak" in format_streak_display(0)
    assert "1 day " in format_streak_display(1)
    assert "5 days (2 to the 7-day badge)" in format_streak_display(5)
    assert "badge" not in format_streak_display(45)
