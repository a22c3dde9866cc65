"""Challenge models for gamification"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ChallengePeriod(str, Enum):
    """How long a challenge completion stays valid"""
    DAILY = "daily"
    WEEKLY = "weekly"


class ChallengeMetric(str, Enum):
    """Live counter a challenge is measured against"""
    TASKS_TODAY = "tasks_today"
    HABITS_TODAY = "habits_today"
    ALL_HABITS_TODAY = "all_habits_today"
    TASKS_THIS_WEEK = "tasks_this_week"
    STREAK = "streak"


class Challenge(BaseModel):
    """Challenge definition"""
    id: str
    title: str
    description: str
    period: ChallengePeriod
    metric: ChallengeMetric
    target: int
    xp_reward: int
    icon: str


class ChallengeCompletion(BaseModel):
    """A challenge completed within the period identified by anchor (ISO date)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    challenge_id: str
    anchor: str


class WeekTaskBaseline(BaseModel):
    """Lifetime task counter observed at the start of a week"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    week_start: str
    total_tasks_completed: int


class ChallengeProgress(BaseModel):
    """Derived view of a challenge for the current period"""
    id: str
    title: str
    description: str
    period: ChallengePeriod
    target: int
    current: int
    xp_reward: int
    icon: str
    completed: bool
    time_remaining: Optional[str] = None
