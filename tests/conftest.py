"""Global test fixtures and utilities for quest-tracker tests"""
import itertools
from datetime import datetime, timezone

import pytest

from quest_tracker.models.game_state import GameState, default_game_state
from quest_tracker.persistence.local_store import LocalStateStore
from quest_tracker.persistence.remote_store import InMemoryRemoteStore
from quest_tracker.services.celebrations import LoggingCelebrationSink
from quest_tracker.services.quest_service import QuestEngine
from quest_tracker.utils.datetime_helpers import FixedClock

# 2024-01-10 is a Wednesday (day index 2); the week starts Monday 2024-01-08
WEDNESDAY_MORNING = datetime(2024, 1, 10, 10, 0, tzinfo=timezone.utc)
TODAY = "2024-01-10"


# ============================================================================
# Clock Fixtures
# ============================================================================

@pytest.fixture
def clock():
    """Clock pinned to Wednesday morning"""
    return FixedClock(WEDNESDAY_MORNING)


# ============================================================================
# State Fixtures
# ============================================================================

@pytest.fixture
def empty_state():
    """State with no habits or tasks, already rolled over to today"""
    return GameState(last_active_date=TODAY, days_used=[TODAY])


@pytest.fixture
def seeded_state():
    """First-run state with the starter habits and tasks"""
    return default_game_state(TODAY)


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def sink():
    """Celebration sink that records what it was asked to play"""
    return LoggingCelebrationSink()


@pytest.fixture
def id_factory():
    """Deterministic ids: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def engine(empty_state, clock, sink, id_factory):
    """Engine over an empty state, without persistence"""
    return QuestEngine(empty_state, clock=clock, sink=sink, id_factory=id_factory)


# ============================================================================
# Persistence Fixtures
# ============================================================================

@pytest.fixture
def local_store(tmp_path):
    """Local store writing under pytest's tmp_path"""
    return LocalStateStore(tmp_path / "game_state.json")


@pytest.fixture
def remote_store():
    """In-process remote store"""
    return InMemoryRemoteStore()
