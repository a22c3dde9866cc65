"""
Gamification Dashboards

Read-only summaries for the presentation layer: this week's habit
completion per weekday, per-habit totals, and a text snapshot of today.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

from quest_tracker.gamification.achievement_system import get_user_achievements
from quest_tracker.gamification.challenges import get_challenges
from quest_tracker.gamification.perfect_day import completion_rate, progress_message
from quest_tracker.gamification.streak_system import format_streak_display
from quest_tracker.gamification.xp_system import get_level_progress
from quest_tracker.models.game_state import DAYS_PER_WEEK, GameState
from quest_tracker.utils.datetime_helpers import day_index

logger = logging.getLogger(__name__)

DAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def get_weekly_breakdown(state: GameState) -> List[Dict[str, Any]]:
    """
    Habit completion for each weekday slot

    Returns:
        [{'day': 'Mon', 'habits_completed': int, 'completion': int (percent)}, ...]
    """
    total_habits = len(state.habits) or 1
    breakdown = []
    for index in range(DAYS_PER_WEEK):
        done = sum(1 for h in state.habits if h.completed_days[index])
        breakdown.append({
            "day": DAY_LABELS[index],
            "habits_completed": done,
            "completion": round(done / total_habits * 100),
        })
    return breakdown


def get_habit_breakdown(state: GameState) -> List[Dict[str, Any]]:
    """Completed slots per habit this week"""
    return [
        {"name": h.name, "icon": h.icon, "value": sum(h.completed_days)}
        for h in state.habits
    ]


def get_weekly_stats(state: GameState) -> Dict[str, Any]:
    """
    Returns:
        {
            'weekly_avg': int,
            'best_day': str,
            'total_xp_earned': int,
            'perfect_days': int
        }
    """
    breakdown = get_weekly_breakdown(state)
    rates = [d["completion"] for d in breakdown]
    best = max(range(DAYS_PER_WEEK), key=lambda i: rates[i])
    return {
        "weekly_avg": round(sum(rates) / DAYS_PER_WEEK),
        "best_day": DAY_LABELS[best],
        "total_xp_earned": state.total_xp_earned,
        "perfect_days": state.perfect_days,
    }


def get_daily_snapshot(state: GameState, now: datetime) -> str:
    """
    Generate the daily progress dashboard

    Args:
        state: Current game state
        now: Current instant

    Returns:
        Formatted dashboard string for display
    """
    level = get_level_progress(state)
    rate = completion_rate(state, day_index(now))
    achievements = get_user_achievements(state, now)

    lines = [
        f"📊 **DAILY SNAPSHOT** - {now.strftime('%A, %B %d')}",
        "",
        f"**Level {level['current_level']}** ({level['xp_in_current_level']}/{level['xp_per_level']} XP)",
        f"Lifetime XP: {level['total_xp_earned']}",
        format_streak_display(state.streak),
        "",
        f"🎯 **TODAY'S PROGRESS**: {rate}%",
        progress_message(rate),
        "",
        "🗓️ **CHALLENGES**",
    ]

    for challenge in get_challenges(state, now):
        mark = "✅" if challenge.completed else challenge.icon
        suffix = "" if challenge.completed else f" · {challenge.time_remaining}"
        lines.append(
            f"{mark} {challenge.title}: {challenge.current}/{challenge.target} (+{challenge.xp_reward} XP){suffix}"
        )

    lines.append("")
    lines.append(
        f"🏆 Achievements: {achievements['total_unlocked']}/{achievements['total_achievements']} unlocked"
    )

    return "\n".join(lines)
