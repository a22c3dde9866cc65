"""
Gamification engine for Quest Tracker

Pure reducers and evaluators over GameState:
- XP and leveling (flat 500 XP per level)
- Habit and task stores
- Daily rollover and perfect-day detection
- Achievement catalog and unlock evaluation
- Daily/weekly challenges
"""

from quest_tracker.gamification.xp_system import apply_xp_delta, get_level_progress, XP_PER_LEVEL
from quest_tracker.gamification.daily_reset import apply_daily_rollover
from quest_tracker.gamification.achievement_system import evaluate_achievements, unlock_achievements
from quest_tracker.gamification.challenges import get_challenges, refresh_challenges

__all__ = [
    "apply_xp_delta",
    "get_level_progress",
    "XP_PER_LEVEL",
    "apply_daily_rollover",
    "evaluate_achievements",
    "unlock_achievements",
    "get_challenges",
    "refresh_challenges",
]
