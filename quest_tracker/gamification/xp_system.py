"""
XP and Leveling System

Manages XP deltas and level calculations.

Leveling Curve:
- Flat 500 XP per level
- xp always stays in [0, 500) after a delta
- No de-leveling: a negative delta clamps xp at 0 and keeps the level

XP Award Rules:
- Habit day completed: +15 XP (un-completing: -15 XP)
- Task completed: +10 / +25 / +50 XP by priority (un-completing: minus the same)

total_xp_earned is a lifetime counter and only grows by the positive part
of a delta.
"""

from typing import Any, Dict, Tuple
import logging

from quest_tracker.gamification.events import GameEvent, Transition
from quest_tracker.models.game_state import GameState
from quest_tracker.observability.metrics import level_ups_total, xp_awarded_total

logger = logging.getLogger(__name__)

XP_PER_LEVEL = 500
HABIT_XP = 15


def calculate_level_after_delta(level: int, xp: int, amount: int) -> Tuple[int, int]:
    """
    Apply the leveling rule to a (level, xp) pair

    Args:
        level: Current level (>= 1)
        xp: XP inside the current level
        amount: Signed XP delta

    Returns:
        (new_level, new_xp)
    """
    new_xp = xp + amount
    new_level = level

    while new_xp >= XP_PER_LEVEL:
        new_xp -= XP_PER_LEVEL
        new_level += 1

    if new_xp < 0:
        new_xp = 0

    return new_level, new_xp


def apply_xp_delta(state: GameState, amount: int) -> Tuple[GameState, Dict[str, Any]]:
    """
    Apply an XP delta to the progression ledger

    Args:
        state: Current game state
        amount: Signed XP delta

    Returns:
        (new_state, {
            'xp_awarded': int,
            'old_level': int,
            'new_level': int,
            'leveled_up': bool,
            'levels_gained': int,
            'xp': int,
            'total_xp_earned': int
        })
    """
    old_level = state.level
    new_level, new_xp = calculate_level_after_delta(state.level, state.xp, amount)
    new_total = state.total_xp_earned + max(amount, 0)

    new_state = state.model_copy(update={
        "level": new_level,
        "xp": new_xp,
        "total_xp_earned": new_total,
    })

    if amount > 0:
        xp_awarded_total.inc(amount)

    leveled_up = new_level > old_level
    if leveled_up:
        level_ups_total.inc()
        logger.info(f"Leveled up from {old_level} to {new_level}!")

    logger.debug(f"XP delta {amount:+d}: level {new_level}, xp {new_xp}, lifetime {new_total}")

    return new_state, {
        "xp_awarded": amount,
        "old_level": old_level,
        "new_level": new_level,
        "leveled_up": leveled_up,
        "levels_gained": new_level - old_level,
        "xp": new_xp,
        "total_xp_earned": new_total,
    }


def xp_transition(state: GameState, amount: int) -> Transition:
    """
    apply_xp_delta as a Transition

    A level increase yields a single level_up event carrying the final
    level, however many boundaries the delta crossed.
    """
    new_state, result = apply_xp_delta(state, amount)
    events = [GameEvent.level_up(result["new_level"])] if result["leveled_up"] else []
    return Transition(state=new_state, events=events)


def get_level_progress(state: GameState) -> Dict[str, Any]:
    """
    Get XP progress inside the current level

    Returns:
        {
            'current_level': int,
            'xp_in_current_level': int,
            'xp_to_next_level': int,
            'xp_per_level': int,
            'progress_percent': int,
            'total_xp_earned': int
        }
    """
    return {
        "current_level": state.level,
        "xp_in_current_level": state.xp,
        "xp_to_next_level": XP_PER_LEVEL - state.xp,
        "xp_per_level": XP_PER_LEVEL,
        "progress_percent": int(state.xp / XP_PER_LEVEL * 100),
        "total_xp_earned": state.total_xp_earned,
    }
