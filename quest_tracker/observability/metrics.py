"""
Prometheus metrics definitions for quest-tracker.

This module defines all metrics collected by the engine, organized by category:
- Progression metrics: XP awarded, level-ups
- Achievement and challenge metrics: unlocks, completions, perfect days
- Engine metrics: mutation operations
- Persistence metrics: local/remote writes and loads
- Assistant metrics: tool calls

Metrics live in the default registry; an embedding application exposes
them with prometheus_client's exposition helpers.
"""

import logging
from prometheus_client import Counter

logger = logging.getLogger(__name__)

# =============================================================================
# Progression Metrics
# =============================================================================

xp_awarded_total = Counter(
    "quest_xp_awarded_total",
    "Total positive XP credited to the progression ledger",
)

level_ups_total = Counter(
    "quest_level_ups_total",
    "Total level-up transitions (multi-level jumps count once)",
)

# =============================================================================
# Achievement & Challenge Metrics
# =============================================================================

achievements_unlocked_total = Counter(
    "quest_achievements_unlocked_total",
    "Achievements unlocked",
    ["achievement_id"],
)

challenges_completed_total = Counter(
    "quest_challenges_completed_total",
    "Challenges completed",
    ["challenge_id", "period"],
)

perfect_days_total = Counter(
    "quest_perfect_days_total",
    "Transitions into a perfect day",
)

# =============================================================================
# Engine Metrics
# =============================================================================

engine_mutations_total = Counter(
    "quest_engine_mutations_total",
    "Mutation operations applied to the game state",
    ["operation", "status"],  # status: applied/noop
)

# =============================================================================
# Persistence Metrics
# =============================================================================

persistence_writes_total = Counter(
    "quest_persistence_writes_total",
    "Game state writes",
    ["target", "status"],  # target: local/remote, status: success/error
)

persistence_loads_total = Counter(
    "quest_persistence_loads_total",
    "Game state loads",
    ["source", "status"],  # source: local/remote/seed/document, status: success/missing/error/malformed
)

# =============================================================================
# Assistant Metrics
# =============================================================================

agent_tool_calls_total = Counter(
    "quest_agent_tool_calls_total",
    "Assistant tool calls dispatched",
    ["tool_name", "status"],  # status: success/rejected
)
