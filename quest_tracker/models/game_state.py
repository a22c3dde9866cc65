"""Game state models (the unit of persistence)"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from quest_tracker.models.challenge import ChallengeCompletion, WeekTaskBaseline

DAYS_PER_WEEK = 7


class TaskPriority(str, Enum):
    """Task priority, fixes the XP reward at creation"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


TASK_XP_REWARDS = {
    TaskPriority.LOW: 10,
    TaskPriority.MEDIUM: 25,
    TaskPriority.HIGH: 50,
}


def empty_week() -> List[bool]:
    return [False] * DAYS_PER_WEEK


class StateModel(BaseModel):
    """Immutable model persisted with camelCase keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Habit(StateModel):
    """A habit with one completion slot per weekday (Monday=0)"""
    id: str
    name: str
    icon: str
    completed_days: List[bool] = Field(default_factory=empty_week)

    @field_validator("completed_days")
    @classmethod
    def _seven_slots(cls, value: List[bool]) -> List[bool]:
        if len(value) != DAYS_PER_WEEK:
            raise ValueError(f"completedDays must have {DAYS_PER_WEEK} entries, got {len(value)}")
        return value


class Task(StateModel):
    """A one-off quest; completion is cleared on day rollover"""
    id: str
    title: str
    completed: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    xp_reward: int = Field(ge=0)


class GameState(StateModel):
    """
    Aggregate game state

    level/xp/total_xp_earned/streak form the progression ledger,
    everything else is tracked items plus lifetime counters.
    """
    level: int = Field(default=1, ge=1)
    xp: int = Field(default=0, ge=0)
    total_xp_earned: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    habits: List[Habit] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    last_active_date: str = ""
    unlocked_achievements: List[str] = Field(default_factory=list)
    perfect_days: int = Field(default=0, ge=0)
    total_tasks_completed: int = Field(default=0, ge=0)
    days_used: List[str] = Field(default_factory=list)
    completed_challenges: List[ChallengeCompletion] = Field(default_factory=list)
    week_task_baseline: Optional[WeekTaskBaseline] = None
    updated_at: Optional[str] = None

    def to_document(self) -> dict:
        """JSON-ready dict with persisted (camelCase) keys"""
        return self.model_dump(mode="json", by_alias=True)

    def find_habit(self, habit_id: str) -> Optional[Habit]:
        return next((h for h in self.habits if h.id == habit_id), None)

    def find_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)


DEFAULT_HABITS = [
    ("1", "Exercise", "💪"),
    ("2", "Read", "📚"),
    ("3", "Meditate", "🧘"),
    ("4", "Drink Water", "💧"),
]

DEFAULT_TASKS = [
    ("1", "Complete morning routine", TaskPriority.HIGH),
    ("2", "Work on main project", TaskPriority.HIGH),
    ("3", "Review goals", TaskPriority.LOW),
]


def default_game_state(today: str) -> GameState:
    """First-run state with the starter habits and tasks"""
    return GameState(
        level=1,
        xp=0,
        streak=1,
        habits=[Habit(id=hid, name=name, icon=icon) for hid, name, icon in DEFAULT_HABITS],
        tasks=[
            Task(id=tid, title=title, priority=priority, xp_reward=TASK_XP_REWARDS[priority])
            for tid, title, priority in DEFAULT_TASKS
        ],
        last_active_date=today,
    )
