"""
Perfect-Day Detection

A day is perfect when there is at least one habit or task and every habit's
slot for today plus every task is complete. The lifetime perfect-day counter
moves only on a toggle that closes the last gap.
"""

import logging
from typing import Tuple

from quest_tracker.gamification.events import GameEvent, Transition
from quest_tracker.models.game_state import GameState
from quest_tracker.observability.metrics import perfect_days_total

logger = logging.getLogger(__name__)


def completion_counts(state: GameState, today_index: int) -> Tuple[int, int, int]:
    """
    Count completed items for today

    Returns:
        (habits_done_today, tasks_done, total_items)
    """
    habits_done = sum(1 for h in state.habits if h.completed_days[today_index])
    tasks_done = sum(1 for t in state.tasks if t.completed)
    total_items = len(state.habits) + len(state.tasks)
    return habits_done, tasks_done, total_items


def is_perfect_day(state: GameState, today_index: int) -> bool:
    habits_done, tasks_done, total_items = completion_counts(state, today_index)
    return total_items > 0 and habits_done + tasks_done == total_items


def completion_rate(state: GameState, today_index: int) -> int:
    """Rounded percentage of today's items completed (0 when there are none)"""
    habits_done, tasks_done, total_items = completion_counts(state, today_index)
    if total_items == 0:
        return 0
    return round((habits_done + tasks_done) / total_items * 100)


def record_perfect_day(before: GameState, after: Transition, today_index: int) -> Transition:
    """
    Count a perfect day if the toggle in `after` closed the last gap

    Args:
        before: State prior to the toggle
        after: Transition produced by the toggle
        today_index: Monday-first index of today

    Returns:
        after, with perfect_days incremented and a perfect_day event
        appended when the day went from not-perfect to perfect
    """
    if is_perfect_day(before, today_index) or not is_perfect_day(after.state, today_index):
        return after

    new_state = after.state.model_copy(update={"perfect_days": after.state.perfect_days + 1})
    perfect_days_total.inc()
    logger.info(f"Perfect day! Lifetime perfect days: {new_state.perfect_days}")
    return Transition(
        state=new_state,
        events=after.events + [GameEvent.perfect_day()],
        changed=True,
    )


def progress_message(rate: int) -> str:
    """Encouragement line for today's completion rate"""
    if rate == 100:
        return "🎉 Perfect day! You're unstoppable!"
    if rate >= 75:
        return "Almost there! Keep pushing! 💪"
    if rate >= 50:
        return "Halfway done! You've got this! 🔥"
    return "Every task counts. Start small! ⭐"
