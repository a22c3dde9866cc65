"""
Daily Reset Policy

Runs on every state load. A new day clears habit completion vectors and
task completion flags; lifetime progression (xp, level, achievements,
counters, streak) is never touched. Safe to run any number of times a day.
"""

import logging

from quest_tracker.models.game_state import GameState, empty_week

logger = logging.getLogger(__name__)


def needs_rollover(state: GameState, today: str) -> bool:
    return state.last_active_date != today


def apply_daily_rollover(state: GameState, today: str) -> GameState:
    """
    Bring a loaded state up to date for `today`

    Args:
        state: Loaded game state
        today: Today's date (YYYY-MM-DD)

    Returns:
        State with daily flags cleared (if stale) and today recorded in days_used
    """
    update = {}

    if needs_rollover(state, today):
        logger.info(f"New day {today} (last active {state.last_active_date or 'never'}): clearing daily progress")
        update["habits"] = [h.model_copy(update={"completed_days": empty_week()}) for h in state.habits]
        update["tasks"] = [t.model_copy(update={"completed": False}) for t in state.tasks]
        update["last_active_date"] = today

    if today not in state.days_used:
        update["days_used"] = state.days_used + [today]

    if not update:
        return state
    return state.model_copy(update=update)
