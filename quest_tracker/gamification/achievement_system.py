"""
Achievement System

Declarative catalog of 26 achievements, evaluated against the current game
state after every mutation:
- Firsts (first habit day, first task)
- Consistency (streaks, perfect days, days used)
- Milestones (levels, lifetime XP, habit count, lifetime tasks)
- Moments (early bird / night owl task completions, weekend warrior)

Unlocks are monotonic: evaluation only ever reports ids that are not yet
unlocked, and nothing in the engine removes an id once it is recorded.
"""

from typing import Any, Dict, Iterable, List, Optional
from datetime import datetime
import logging

from quest_tracker.gamification.perfect_day import is_perfect_day
from quest_tracker.models.achievement import (
    Achievement,
    AchievementCategory,
    AchievementProgress,
    AchievementStatus,
)
from quest_tracker.models.game_state import GameState
from quest_tracker.observability.metrics import achievements_unlocked_total
from quest_tracker.utils.datetime_helpers import day_index, is_weekend

logger = logging.getLogger(__name__)

EARLY_BIRD_BEFORE_HOUR = 7
NIGHT_OWL_FROM_HOUR = 23


def _achievement(id, name, description, requirement, icon, category, threshold=None) -> Achievement:
    return Achievement(
        id=id,
        name=name,
        description=description,
        requirement=requirement,
        icon=icon,
        category=category,
        threshold=threshold,
    )


# ============================================
# Achievement Catalog
# ============================================

ACHIEVEMENT_CATALOG: List[Achievement] = [
    _achievement("first_habit", "Getting Started", "Complete your first habit",
                 "Complete 1 habit", "⭐", AchievementCategory.FIRST_HABIT),
    _achievement("first_task", "Quest Beginner", "Complete your first task",
                 "Complete 1 task", "🎯", AchievementCategory.FIRST_TASK),

    _achievement("streak_3", "On Fire", "Maintain a 3-day streak",
                 "3-day streak", "🔥", AchievementCategory.STREAK, 3),
    _achievement("streak_7", "Week Warrior", "Maintain a 7-day streak",
                 "7-day streak", "🔥", AchievementCategory.STREAK, 7),
    _achievement("streak_14", "Fortnight Fighter", "Maintain a 14-day streak",
                 "14-day streak", "🔥", AchievementCategory.STREAK, 14),
    _achievement("streak_30", "Unstoppable", "Maintain a 30-day streak",
                 "30-day streak", "🔥", AchievementCategory.STREAK, 30),

    _achievement("level_5", "Rising Star", "Reach level 5",
                 "Reach Level 5", "⚡", AchievementCategory.LEVEL, 5),
    _achievement("level_10", "Elite Player", "Reach level 10",
                 "Reach Level 10", "👑", AchievementCategory.LEVEL, 10),
    _achievement("level_20", "Champion", "Reach level 20",
                 "Reach Level 20", "🏅", AchievementCategory.LEVEL, 20),
    _achievement("level_50", "Legend", "Reach level 50",
                 "Reach Level 50", "🏆", AchievementCategory.LEVEL, 50),

    _achievement("perfect_day", "Perfect Day", "Complete 100% of habits & tasks in a day",
                 "100% daily completion", "🏆", AchievementCategory.PERFECT_DAY),
    _achievement("perfect_week", "Perfect Week", "Have 7 perfect days",
                 "7 perfect days", "🌟", AchievementCategory.PERFECT_DAYS, 7),
    _achievement("perfect_month", "Perfect Month", "Have 30 perfect days",
                 "30 perfect days", "💫", AchievementCategory.PERFECT_DAYS, 30),

    _achievement("xp_500", "XP Hunter", "Earn 500 total XP",
                 "Earn 500 XP", "🎖️", AchievementCategory.TOTAL_XP, 500),
    _achievement("xp_2000", "XP Master", "Earn 2000 total XP",
                 "Earn 2000 XP", "🏵️", AchievementCategory.TOTAL_XP, 2000),
    _achievement("xp_5000", "XP Legend", "Earn 5000 total XP",
                 "Earn 5000 XP", "💎", AchievementCategory.TOTAL_XP, 5000),
    _achievement("xp_10000", "XP Titan", "Earn 10000 total XP",
                 "Earn 10000 XP", "🌠", AchievementCategory.TOTAL_XP, 10000),

    _achievement("habits_5", "Habit Builder", "Create 5 different habits",
                 "Create 5 habits", "🚀", AchievementCategory.HABIT_COUNT, 5),
    _achievement("habits_10", "Habit Architect", "Create 10 different habits",
                 "Create 10 habits", "🏗️", AchievementCategory.HABIT_COUNT, 10),

    _achievement("tasks_10", "Task Tackler", "Complete 10 tasks",
                 "Complete 10 tasks", "✅", AchievementCategory.TASKS_COMPLETED, 10),
    _achievement("tasks_50", "Quest Hunter", "Complete 50 tasks",
                 "Complete 50 tasks", "⚔️", AchievementCategory.TASKS_COMPLETED, 50),
    _achievement("tasks_100", "Centurion", "Complete 100 tasks",
                 "Complete 100 tasks", "🛡️", AchievementCategory.TASKS_COMPLETED, 100),

    _achievement("early_bird", "Early Bird", "Complete a task before 7 AM",
                 "Task done before 7:00", "🌅", AchievementCategory.EARLY_BIRD),
    _achievement("night_owl", "Night Owl", "Complete a task after 11 PM",
                 "Task done after 23:00", "🦉", AchievementCategory.NIGHT_OWL),
    _achievement("weekend_warrior", "Weekend Warrior", "Complete every habit on a weekend day",
                 "All habits on Sat/Sun", "🎉", AchievementCategory.WEEKEND_WARRIOR),
    _achievement("dedication", "Dedicated", "Use the app on 7 different days",
                 "7 days of use", "📅", AchievementCategory.DAYS_USED, 7),
]

ACHIEVEMENTS_BY_ID: Dict[str, Achievement] = {a.id: a for a in ACHIEVEMENT_CATALOG}


def evaluate_achievements(
    state: GameState,
    now: datetime,
    task_completed: bool = False
) -> List[str]:
    """
    Find achievements whose condition holds and that are not unlocked yet

    Pure: reads the state, never changes it. Every predicate is independent,
    so catalog order only affects the order of the returned ids.

    Args:
        state: Current game state
        now: Current instant (drives today's slot, weekend and hour checks)
        task_completed: True when evaluating right after a task completion;
            early_bird / night_owl are only considered then

    Returns:
        Newly qualifying achievement ids, in catalog order
    """
    already = set(state.unlocked_achievements)
    newly = []

    for achievement in ACHIEVEMENT_CATALOG:
        if achievement.id in already:
            continue
        if _is_unlocked(achievement, state, now, task_completed):
            newly.append(achievement.id)

    return newly


def unlock_achievements(state: GameState, achievement_ids: Iterable[str]) -> GameState:
    """Add ids to the unlocked set (deduplicated, never removes)"""
    unlocked = list(state.unlocked_achievements)
    for achievement_id in achievement_ids:
        if achievement_id in unlocked:
            continue
        unlocked.append(achievement_id)
        achievements_unlocked_total.labels(achievement_id=achievement_id).inc()
        achievement = ACHIEVEMENTS_BY_ID.get(achievement_id)
        logger.info(f"Unlocked achievement: {achievement_id} ({achievement.name if achievement else '?'})")

    if len(unlocked) == len(state.unlocked_achievements):
        return state
    return state.model_copy(update={"unlocked_achievements": unlocked})


def get_user_achievements(state: GameState, now: datetime) -> Dict[str, Any]:
    """
    Get the catalog joined with the player's unlocks

    Returns:
        {
            'unlocked': [AchievementStatus],
            'locked': [AchievementStatus] (closest to completion first),
            'total_unlocked': int,
            'total_achievements': int
        }
    """
    unlocked_ids = set(state.unlocked_achievements)
    unlocked = []
    locked = []

    for achievement in ACHIEVEMENT_CATALOG:
        status = AchievementStatus(
            achievement=achievement,
            unlocked=achievement.id in unlocked_ids,
            progress=_calculate_achievement_progress(achievement, state, now),
        )
        (unlocked if status.unlocked else locked).append(status)

    locked.sort(key=lambda s: s.progress.percentage, reverse=True)

    return {
        "unlocked": unlocked,
        "locked": locked,
        "total_unlocked": len(unlocked),
        "total_achievements": len(ACHIEVEMENT_CATALOG),
    }


# ============================================
# Helper Functions for Achievement Criteria
# ============================================

def _is_unlocked(
    achievement: Achievement,
    state: GameState,
    now: datetime,
    task_completed: bool
) -> bool:
    category = achievement.category
    threshold = achievement.threshold
    today = day_index(now)

    if category == AchievementCategory.FIRST_HABIT:
        return any(any(h.completed_days) for h in state.habits)

    elif category == AchievementCategory.FIRST_TASK:
        return any(t.completed for t in state.tasks)

    elif category == AchievementCategory.STREAK:
        return state.streak >= threshold

    elif category == AchievementCategory.LEVEL:
        return state.level >= threshold

    elif category == AchievementCategory.TOTAL_XP:
        return state.total_xp_earned >= threshold

    elif category == AchievementCategory.HABIT_COUNT:
        return len(state.habits) >= threshold

    elif category == AchievementCategory.TASKS_COMPLETED:
        return state.total_tasks_completed >= threshold

    elif category == AchievementCategory.PERFECT_DAY:
        return is_perfect_day(state, today)

    elif category == AchievementCategory.PERFECT_DAYS:
        return state.perfect_days >= threshold

    elif category == AchievementCategory.EARLY_BIRD:
        return task_completed and now.hour < EARLY_BIRD_BEFORE_HOUR

    elif category == AchievementCategory.NIGHT_OWL:
        return task_completed and now.hour >= NIGHT_OWL_FROM_HOUR

    elif category == AchievementCategory.WEEKEND_WARRIOR:
        return (
            is_weekend(now)
            and len(state.habits) > 0
            and all(h.completed_days[today] for h in state.habits)
        )

    elif category == AchievementCategory.DAYS_USED:
        return len(set(state.days_used)) >= threshold

    logger.warning(f"No predicate for achievement category {category}")
    return False


def _current_value(achievement: Achievement, state: GameState, now: datetime) -> Optional[int]:
    """Counter an achievement is measured against, None for one-shot moments"""
    category = achievement.category
    today = day_index(now)

    if category == AchievementCategory.FIRST_HABIT:
        return sum(1 for h in state.habits if any(h.completed_days))
    elif category == AchievementCategory.FIRST_TASK:
        return sum(1 for t in state.tasks if t.completed)
    elif category == AchievementCategory.STREAK:
        return state.streak
    elif category == AchievementCategory.LEVEL:
        return state.level
    elif category == AchievementCategory.TOTAL_XP:
        return state.total_xp_earned
    elif category == AchievementCategory.HABIT_COUNT:
        return len(state.habits)
    elif category == AchievementCategory.TASKS_COMPLETED:
        return state.total_tasks_completed
    elif category == AchievementCategory.PERFECT_DAYS:
        return state.perfect_days
    elif category == AchievementCategory.DAYS_USED:
        return len(set(state.days_used))
    elif category == AchievementCategory.PERFECT_DAY:
        return int(is_perfect_day(state, today))
    return None


def _calculate_achievement_progress(
    achievement: Achievement,
    state: GameState,
    now: datetime
) -> AchievementProgress:
    """
    Calculate progress toward an achievement

    Unlocked achievements always report 100%.
    """
    required = achievement.threshold or 1

    if achievement.id in state.unlocked_achievements:
        current = required
    else:
        current = _current_value(achievement, state, now) or 0
        if achievement.category == AchievementCategory.WEEKEND_WARRIOR:
            required = max(len(state.habits), 1)
            current = (
                sum(1 for h in state.habits if h.completed_days[day_index(now)])
                if is_weekend(now) else 0
            )

    current = min(current, required)
    percentage = min(100, int(current / required * 100)) if required > 0 else 0

    return AchievementProgress(
        current=current,
        required=required,
        percentage=percentage,
        description=f"{current}/{required}",
    )


def format_achievement_unlock_message(achievement: Achievement) -> str:
    """
    Format achievement unlock message for celebration

    Args:
        achievement: Unlocked achievement definition

    Returns:
        Formatted celebration message
    """
    return f"""🎉 ACHIEVEMENT UNLOCKED! 🎉

{achievement.icon} {achievement.name}

{achievement.description}

Keep up the amazing work! 💪"""
