"""
Celebration sink

Receives fire-and-forget notifications for qualifying transitions (habit or
task completed, level up, achievement unlocked, perfect day, challenge
completed). Sinks render effects; they never influence game state.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple

from quest_tracker.config import CONFETTI_ENABLED, SOUND_ENABLED
from quest_tracker.gamification.achievement_system import ACHIEVEMENTS_BY_ID
from quest_tracker.gamification.events import EventType, GameEvent

logger = logging.getLogger(__name__)


class CelebrationSink(Protocol):
    def habit_completed(self) -> None: ...

    def task_completed(self) -> None: ...

    def level_up(self, new_level: int) -> None: ...

    def achievement_unlocked(self, achievement_id: str) -> None: ...

    def perfect_day(self) -> None: ...

    def challenge_completed(self, challenge_id: str) -> None: ...


@dataclass
class CelebrationSettings:
    """User toggles for celebration effects"""
    sound_enabled: bool = SOUND_ENABLED
    confetti_enabled: bool = CONFETTI_ENABLED


# Sound and confetti style per event
EFFECTS = {
    EventType.HABIT_COMPLETED: ("complete", "gentle"),
    EventType.TASK_COMPLETED: ("complete", "burst"),
    EventType.LEVEL_UP: ("level_up", "side_cannons"),
    EventType.ACHIEVEMENT_UNLOCKED: ("achievement", "stars"),
    EventType.PERFECT_DAY: ("level_up", "rainbow"),
    EventType.CHALLENGE_COMPLETED: ("achievement", "burst"),
}


@dataclass
class LoggingCelebrationSink:
    """
    Default sink: logs the celebration and records which effects would play

    `played` holds (event name, sound or None, confetti or None) tuples.
    """
    settings: CelebrationSettings = field(default_factory=CelebrationSettings)
    played: List[Tuple[str, Optional[str], Optional[str]]] = field(default_factory=list)

    def _celebrate(self, event_type: EventType, message: str) -> None:
        sound, confetti = EFFECTS[event_type]
        self.played.append((
            event_type.value,
            sound if self.settings.sound_enabled else None,
            confetti if self.settings.confetti_enabled else None,
        ))
        logger.info(f"🎉 {message}")

    def habit_completed(self) -> None:
        self._celebrate(EventType.HABIT_COMPLETED, "Habit completed! +15 XP")

    def task_completed(self) -> None:
        self._celebrate(EventType.TASK_COMPLETED, "Quest completed!")

    def level_up(self, new_level: int) -> None:
        self._celebrate(EventType.LEVEL_UP, f"LEVEL UP! You reached level {new_level}")

    def achievement_unlocked(self, achievement_id: str) -> None:
        achievement = ACHIEVEMENTS_BY_ID.get(achievement_id)
        name = f"{achievement.icon} {achievement.name}" if achievement else achievement_id
        self._celebrate(EventType.ACHIEVEMENT_UNLOCKED, f"Achievement unlocked: {name}")

    def perfect_day(self) -> None:
        self._celebrate(EventType.PERFECT_DAY, "Perfect day! Everything done!")

    def challenge_completed(self, challenge_id: str) -> None:
        self._celebrate(EventType.CHALLENGE_COMPLETED, f"Challenge complete: {challenge_id}")


class CelebrationDispatcher:
    """Routes engine events to a sink, isolating the engine from sink failures"""

    def __init__(self, sink: Optional[CelebrationSink] = None):
        self.sink = sink if sink is not None else LoggingCelebrationSink()

    def dispatch(self, events: List[GameEvent]) -> None:
        for event in events:
            try:
                self._deliver(event)
            except Exception as e:
                logger.error(f"Celebration sink failed on {event.type.value}: {e}", exc_info=True)

    def _deliver(self, event: GameEvent) -> None:
        if event.type == EventType.HABIT_COMPLETED:
            self.sink.habit_completed()
        elif event.type == EventType.TASK_COMPLETED:
            self.sink.task_completed()
        elif event.type == EventType.LEVEL_UP:
            self.sink.level_up(event.level)
        elif event.type == EventType.ACHIEVEMENT_UNLOCKED:
            self.sink.achievement_unlocked(event.achievement_id)
        elif event.type == EventType.PERFECT_DAY:
            self.sink.perfect_day()
        elif event.type == EventType.CHALLENGE_COMPLETED:
            self.sink.challenge_completed(event.challenge_id)
