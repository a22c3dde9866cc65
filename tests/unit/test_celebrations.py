"""Unit tests for celebration delivery (quest_tracker/services/celebrations.py)"""
from unittest.mock import MagicMock

from quest_tracker.gamification.events import GameEvent
from quest_tracker.services.celebrations import (
    CelebrationDispatcher,
    CelebrationSettings,
    LoggingCelebrationSink,
)


# ============================================================================
# Dispatcher Tests
# ============================================================================

def test_dispatch_routes_events():
    """Test each event reaches the matching sink method"""
    sink = MagicMock()
    dispatcher = CelebrationDispatcher(sink)

    dispatcher.dispatch([
        GameEvent.habit_completed(),
        GameEvent.task_completed(),
        GameEvent.level_up(4),
        GameEvent.achievement_unlocked("first_task"),
        GameEvent.perfect_day(),
        GameEvent.challenge_completed("daily_tasks_3"),
    ])

    sink.habit_completed.assert_called_once_with()
    sink.task_completed.assert_called_once_with()
    sink.level_up.assert_called_once_with(4)
    sink.achievement_unlocked.assert_called_once_with("first_task")
    sink.perfect_day.assert_called_once_with()
    sink.challenge_completed.assert_called_once_with("daily_tasks_3")


def test_dispatch_continues_after_sink_error():
    """Test a failing sink call does not stop later events"""
    sink = MagicMock()
    sink.habit_completed.side_effect = RuntimeError("no audio device")

    CelebrationDispatcher(sink).dispatch([GameEvent.habit_completed(), GameEvent.level_up(2)])

    sink.level_up.assert_called_once_with(2)


def test_default_sink_is_logging_sink():
    """Test the dispatcher falls back to the logging sink"""
    assert isinstance(CelebrationDispatcher().sink, LoggingCelebrationSink)


# ============================================================================
# Settings Tests
# ============================================================================

def test_logging_sink_records_effects():
    """Test enabled effects are recorded"""
    sink = LoggingCelebrationSink(CelebrationSettings(sound_enabled=True, confetti_enabled=True))

    sink.level_up(3)

    assert sink.played == [("level_up", "level_up", "side_cannons")]


def test_settings_disable_effects():
    """Test disabled sound and confetti are not played"""
    sink = LoggingCelebrationSink(CelebrationSettings(sound_enabled=False, confetti_enabled=False))

    sink.achievement_unlocked("streak_3")

    assert sink.played == [("achievement_unlocked", None, None)]
