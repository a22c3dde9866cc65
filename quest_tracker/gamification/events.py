"""
Engine events and reducer transitions

Reducers never call the celebration sink directly. They return a
Transition (next state + events) and the engine delivers the events once
the mutation is complete.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from quest_tracker.models.game_state import GameState


class EventType(Enum):
    """Notifications delivered to the celebration sink"""
    HABIT_COMPLETED = "habit_completed"
    TASK_COMPLETED = "task_completed"
    LEVEL_UP = "level_up"
    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
    PERFECT_DAY = "perfect_day"
    CHALLENGE_COMPLETED = "challenge_completed"


@dataclass(frozen=True)
class GameEvent:
    type: EventType
    level: Optional[int] = None
    achievement_id: Optional[str] = None
    challenge_id: Optional[str] = None

    @classmethod
    def habit_completed(cls) -> "GameEvent":
        return cls(EventType.HABIT_COMPLETED)

    @classmethod
    def task_completed(cls) -> "GameEvent":
        return cls(EventType.TASK_COMPLETED)

    @classmethod
    def level_up(cls, new_level: int) -> "GameEvent":
        return cls(EventType.LEVEL_UP, level=new_level)

    @classmethod
    def achievement_unlocked(cls, achievement_id: str) -> "GameEvent":
        return cls(EventType.ACHIEVEMENT_UNLOCKED, achievement_id=achievement_id)

    @classmethod
    def perfect_day(cls) -> "GameEvent":
        return cls(EventType.PERFECT_DAY)

    @classmethod
    def challenge_completed(cls, challenge_id: str) -> "GameEvent":
        return cls(EventType.CHALLENGE_COMPLETED, challenge_id=challenge_id)


@dataclass
class Transition:
    """Result of a reducer: the next state and the events it produced"""
    state: GameState
    events: List[GameEvent] = field(default_factory=list)
    changed: bool = True

    @classmethod
    def unchanged(cls, state: GameState) -> "Transition":
        return cls(state=state, events=[], changed=False)

    def then(self, other: "Transition") -> "Transition":
        """Chain a follow-up transition computed from self.state"""
        return Transition(
            state=other.state,
            events=self.events + other.events,
            changed=self.changed or other.changed,
        )
