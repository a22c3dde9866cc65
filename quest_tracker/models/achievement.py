"""Achievement models for gamification"""
from enum import Enum
from pydantic import BaseModel
from typing import Optional


class AchievementCategory(str, Enum):
    """Unlock predicate families"""
    FIRST_HABIT = "first_habit"
    FIRST_TASK = "first_task"
    STREAK = "streak"
    LEVEL = "level"
    PERFECT_DAY = "perfect_day"
    PERFECT_DAYS = "perfect_days"
    TOTAL_XP = "total_xp"
    HABIT_COUNT = "habit_count"
    TASKS_COMPLETED = "tasks_completed"
    EARLY_BIRD = "early_bird"
    NIGHT_OWL = "night_owl"
    WEEKEND_WARRIOR = "weekend_warrior"
    DAYS_USED = "days_used"


class Achievement(BaseModel):
    """Achievement definition"""
    id: str
    name: str
    description: str
    requirement: str
    icon: str
    category: AchievementCategory
    threshold: Optional[int] = None


class AchievementProgress(BaseModel):
    """Progress toward an achievement"""
    current: int
    required: int
    percentage: int
    description: str


class AchievementStatus(BaseModel):
    """Achievement definition joined with the player's unlock state"""
    achievement: Achievement
    unlocked: bool
    progress: AchievementProgress
