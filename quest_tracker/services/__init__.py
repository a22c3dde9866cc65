"""Engine coordinator and celebration delivery"""

from quest_tracker.services.celebrations import (
    CelebrationDispatcher,
    CelebrationSettings,
    CelebrationSink,
    LoggingCelebrationSink,
)
from quest_tracker.services.quest_service import QuestEngine

__all__ = [
    "CelebrationDispatcher",
    "CelebrationSettings",
    "CelebrationSink",
    "LoggingCelebrationSink",
    "QuestEngine",
]
