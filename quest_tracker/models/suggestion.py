"""Assistant suggestion models"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from quest_tracker.models.game_state import TaskPriority


class SuggestionType(str, Enum):
    TASK = "task"
    HABIT = "habit"


class SuggestionStatus(str, Enum):
    """pending -> accepted | dismissed; both outcomes are terminal"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DISMISSED = "dismissed"


class Suggestion(BaseModel):
    """A task or habit proposed by the assistant, shown as an accept/dismiss card"""
    id: str
    type: SuggestionType
    title: str
    reason: str
    icon: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: SuggestionStatus = SuggestionStatus.PENDING
