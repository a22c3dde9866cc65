"""
Challenge System

Short-lived daily and weekly targets. Progress is always derived live from
the habit/task stores, the lifetime task counter and the streak; only the
completion records are stored, each tagged with the period anchor it was
earned under:
- daily challenges: today's date
- weekly challenges: the Monday that starts the week

A record whose anchor no longer matches is purged, which resets the
challenge for the new period. Completion is one-way within a period.
"""

import logging
from datetime import datetime
from typing import List, Tuple

from quest_tracker.gamification.events import GameEvent, Transition
from quest_tracker.models.challenge import (
    Challenge,
    ChallengeCompletion,
    ChallengeMetric,
    ChallengePeriod,
    ChallengeProgress,
    WeekTaskBaseline,
)
from quest_tracker.models.game_state import GameState
from quest_tracker.observability.metrics import challenges_completed_total
from quest_tracker.utils.datetime_helpers import (
    day_index,
    end_of_day,
    end_of_week,
    today_iso,
    week_start_iso,
)

logger = logging.getLogger(__name__)


# ============================================
# Challenge Library
# ============================================

CHALLENGE_LIBRARY: List[Challenge] = [
    # ========== DAILY ==========
    Challenge(
        id="daily_tasks_3",
        title="Task Master",
        description="Complete 3 tasks today",
        period=ChallengePeriod.DAILY,
        metric=ChallengeMetric.TASKS_TODAY,
        target=3,
        xp_reward=50,
        icon="🎯",
    ),
    Challenge(
        id="daily_habits_2",
        title="Habit Builder",
        description="Complete 2 habits today",
        period=ChallengePeriod.DAILY,
        metric=ChallengeMetric.HABITS_TODAY,
        target=2,
        xp_reward=40,
        icon="🔥",
    ),
    Challenge(
        id="daily_all_habits",
        title="Perfect Routine",
        description="Complete all habits today",
        period=ChallengePeriod.DAILY,
        metric=ChallengeMetric.ALL_HABITS_TODAY,
        target=1,  # replaced by the live habit count
        xp_reward=75,
        icon="⭐",
    ),

    # ========== WEEKLY ==========
    Challenge(
        id="weekly_tasks_15",
        title="Weekly Warrior",
        description="Complete 15 tasks this week",
        period=ChallengePeriod.WEEKLY,
        metric=ChallengeMetric.TASKS_THIS_WEEK,
        target=15,
        xp_reward=200,
        icon="🏆",
    ),
    Challenge(
        id="weekly_streak_5",
        title="Consistency King",
        description="Maintain a 5-day streak",
        period=ChallengePeriod.WEEKLY,
        metric=ChallengeMetric.STREAK,
        target=5,
        xp_reward=150,
        icon="⚡",
    ),
]


def period_anchor(period: ChallengePeriod, now: datetime) -> str:
    """Anchor date a completion in this period is recorded under"""
    if period == ChallengePeriod.DAILY:
        return today_iso(now)
    return week_start_iso(now)


def effective_target(challenge: Challenge, state: GameState) -> int:
    if challenge.metric == ChallengeMetric.ALL_HABITS_TODAY:
        # zero habits can never complete "all habits"
        return max(len(state.habits), 1)
    return challenge.target


def tasks_completed_this_week(state: GameState, now: datetime) -> int:
    """Lifetime task completions since the baseline captured for this week"""
    baseline = state.week_task_baseline
    if baseline is None or baseline.week_start != week_start_iso(now):
        return 0
    return max(state.total_tasks_completed - baseline.total_tasks_completed, 0)


def _metric_value(challenge: Challenge, state: GameState, now: datetime) -> int:
    today = day_index(now)
    metric = challenge.metric

    if metric == ChallengeMetric.TASKS_TODAY:
        return sum(1 for t in state.tasks if t.completed)
    elif metric in (ChallengeMetric.HABITS_TODAY, ChallengeMetric.ALL_HABITS_TODAY):
        return sum(1 for h in state.habits if h.completed_days[today])
    elif metric == ChallengeMetric.TASKS_THIS_WEEK:
        return tasks_completed_this_week(state, now)
    elif metric == ChallengeMetric.STREAK:
        return state.streak

    logger.warning(f"No counter for challenge metric {metric}")
    return 0


def current_progress(challenge: Challenge, state: GameState, now: datetime) -> Tuple[int, int]:
    """
    Returns:
        (current clamped to target, target)
    """
    target = effective_target(challenge, state)
    return min(_metric_value(challenge, state, now), target), target


def _is_recorded(state: GameState, challenge: Challenge, now: datetime) -> bool:
    anchor = period_anchor(challenge.period, now)
    return any(
        c.challenge_id == challenge.id and c.anchor == anchor
        for c in state.completed_challenges
    )


def get_challenges(state: GameState, now: datetime) -> List[ChallengeProgress]:
    """
    Derived view of every challenge for the current periods

    Returns:
        One ChallengeProgress per library entry, daily first
    """
    progress = []
    for challenge in CHALLENGE_LIBRARY:
        current, target = current_progress(challenge, state, now)
        completed = _is_recorded(state, challenge, now)
        progress.append(ChallengeProgress(
            id=challenge.id,
            title=challenge.title,
            description=challenge.description,
            period=challenge.period,
            target=target,
            current=current,
            xp_reward=challenge.xp_reward,
            icon=challenge.icon,
            completed=completed,
            time_remaining=None if completed else time_remaining(challenge.period, now),
        ))
    return progress


def refresh_challenges(state: GameState, now: datetime) -> Transition:
    """
    Bring challenge records up to date

    1. Drop completions whose anchor is not the current one for their period
    2. Capture the weekly task baseline the first time a week is observed
    3. Record (once) every challenge whose live progress reached its target

    Returns:
        Transition with a challenge_completed event per new completion
    """
    periods = {c.id: c.period for c in CHALLENGE_LIBRARY}
    anchors = {period: period_anchor(period, now) for period in ChallengePeriod}

    kept = [
        c for c in state.completed_challenges
        if c.challenge_id in periods and c.anchor == anchors[periods[c.challenge_id]]
    ]
    purged = len(state.completed_challenges) - len(kept)
    if purged:
        logger.info(f"Discarded {purged} challenge completion(s) from previous periods")

    update = {}
    if purged:
        update["completed_challenges"] = kept

    week = anchors[ChallengePeriod.WEEKLY]
    if state.week_task_baseline is None or state.week_task_baseline.week_start != week:
        update["week_task_baseline"] = WeekTaskBaseline(
            week_start=week,
            total_tasks_completed=state.total_tasks_completed,
        )
        logger.debug(f"Weekly task baseline set for week of {week}: {state.total_tasks_completed}")

    working = state.model_copy(update=update) if update else state

    events = []
    recorded = list(working.completed_challenges)
    for challenge in CHALLENGE_LIBRARY:
        if _is_recorded(working, challenge, now):
            continue
        current, target = current_progress(challenge, working, now)
        if current >= target:
            recorded.append(ChallengeCompletion(
                challenge_id=challenge.id,
                anchor=anchors[challenge.period],
            ))
            events.append(GameEvent.challenge_completed(challenge.id))
            challenges_completed_total.labels(
                challenge_id=challenge.id, period=challenge.period.value
            ).inc()
            logger.info(f"Challenge completed: {challenge.id} ({challenge.title}) +{challenge.xp_reward} XP reward")

    if events:
        update["completed_challenges"] = recorded
        working = state.model_copy(update=update)

    if not update:
        return Transition.unchanged(state)
    return Transition(state=working, events=events)


def time_remaining(period: ChallengePeriod, now: datetime) -> str:
    """Whole hours left today, or whole days left this week"""
    if period == ChallengePeriod.DAILY:
        hours = int((end_of_day(now) - now).total_seconds() // 3600)
        return f"{hours}h left"
    days = int((end_of_week(now) - now).total_seconds() // 86400)
    return f"{days}d left"
