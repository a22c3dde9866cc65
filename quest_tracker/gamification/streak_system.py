"""
Streak Tracking

The streak is maintained outside the engine (it is not recomputed from
history); the engine stores it, keys achievements and challenges on it,
and formats it for display.
"""

import logging
from typing import Optional

from quest_tracker.exceptions import ValidationError
from quest_tracker.gamification.events import Transition
from quest_tracker.models.game_state import GameState

logger = logging.getLogger(__name__)

STREAK_MILESTONES = (3, 7, 14, 30)


def set_streak(state: GameState, streak: int) -> Transition:
    """
    Record an externally computed streak

    Raises:
        ValidationError: streak is negative
    """
    if streak < 0:
        raise ValidationError(
            message="Streak must not be negative",
            field="streak",
            value=streak,
            operation="set_streak",
        )
    if streak == state.streak:
        return Transition.unchanged(state)

    logger.info(f"Streak {state.streak} → {streak} days")
    return Transition(state=state.model_copy(update={"streak": streak}))


def next_milestone(streak: int) -> Optional[int]:
    """Next streak achievement threshold, or None past the last one"""
    return next((m for m in STREAK_MILESTONES if m > streak), None)


def format_streak_display(streak: int) -> str:
    """
    Format the streak for display

    Args:
        streak: Current streak in days

    Returns:
        Formatted string for display
    """
    if streak <= 0:
        return "No active streak yet. Complete something today to start one! 💪"

    line = f"🔥 Streak: {streak} day{'s' if streak != 1 else ''}"
    milestone = next_milestone(streak)
    if milestone:
        line += f" ({milestone - streak} to the {milestone}-day badge)"
    return line
