"""
Habit Store

Pure reducers over the ordered habit list. Each habit carries a 7-slot
completion vector (Monday=0). Unknown habit ids are no-ops.
"""

import logging
from typing import Optional

from quest_tracker.exceptions import ValidationError
from quest_tracker.gamification.events import GameEvent, Transition
from quest_tracker.gamification.xp_system import HABIT_XP, xp_transition
from quest_tracker.models.game_state import DAYS_PER_WEEK, GameState, Habit

logger = logging.getLogger(__name__)


def add_habit(state: GameState, name: str, icon: str, habit_id: str) -> Transition:
    """
    Append a habit with an empty week

    Name validation (non-empty after trimming) is the caller's concern.
    """
    habit = Habit(id=habit_id, name=name, icon=icon)
    logger.info(f"Added habit {habit_id}: {icon} {name}")
    return Transition(state=state.model_copy(update={"habits": state.habits + [habit]}))


def toggle_habit(state: GameState, habit_id: str, day_index: int) -> Transition:
    """
    Flip one weekday slot of a habit

    Completing awards HABIT_XP and emits habit_completed; un-completing
    removes HABIT_XP silently.

    Raises:
        ValidationError: day_index outside 0..6
    """
    if not 0 <= day_index < DAYS_PER_WEEK:
        raise ValidationError(
            message=f"Day index must be between 0 and {DAYS_PER_WEEK - 1}",
            field="day_index",
            value=day_index,
            operation="toggle_habit",
        )

    habit = state.find_habit(habit_id)
    if habit is None:
        logger.debug(f"toggle_habit: unknown habit {habit_id}, ignoring")
        return Transition.unchanged(state)

    was_completed = habit.completed_days[day_index]
    days = list(habit.completed_days)
    days[day_index] = not was_completed

    habits = [
        h.model_copy(update={"completed_days": days}) if h.id == habit_id else h
        for h in state.habits
    ]
    toggled = Transition(state=state.model_copy(update={"habits": habits}))

    if was_completed:
        return toggled.then(xp_transition(toggled.state, -HABIT_XP))

    completed = Transition(state=toggled.state, events=[GameEvent.habit_completed()])
    return completed.then(xp_transition(completed.state, HABIT_XP))


def edit_habit(
    state: GameState,
    habit_id: str,
    new_name: Optional[str] = None,
    new_icon: Optional[str] = None,
) -> Transition:
    """Rename and/or re-icon a habit; empty arguments keep the current value"""
    habit = state.find_habit(habit_id)
    if habit is None:
        logger.debug(f"edit_habit: unknown habit {habit_id}, ignoring")
        return Transition.unchanged(state)

    update = {}
    if new_name and new_name.strip():
        update["name"] = new_name
    if new_icon and new_icon.strip():
        update["icon"] = new_icon
    if not update:
        return Transition.unchanged(state)

    habits = [h.model_copy(update=update) if h.id == habit_id else h for h in state.habits]
    logger.info(f"Edited habit {habit_id}: {update}")
    return Transition(state=state.model_copy(update={"habits": habits}))


def delete_habit(state: GameState, habit_id: str) -> Transition:
    """Remove a habit; XP already granted for it is kept"""
    if state.find_habit(habit_id) is None:
        logger.debug(f"delete_habit: unknown habit {habit_id}, ignoring")
        return Transition.unchanged(state)

    habits = [h for h in state.habits if h.id != habit_id]
    logger.info(f"Deleted habit {habit_id}")
    return Transition(state=state.model_copy(update={"habits": habits}))
