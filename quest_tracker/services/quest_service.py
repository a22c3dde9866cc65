"""
Quest Engine

Owns the single in-memory GameState and runs every mutation through the
same pipeline:

    reducer -> perfect-day check (toggles) -> achievements -> challenges
            -> persistence -> celebrations

Reducers are pure; this class is the only place the state is replaced,
persisted and announced.
"""

import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Union

from quest_tracker.exceptions import ValidationError
from quest_tracker.gamification import habits as habit_store
from quest_tracker.gamification import tasks as task_store
from quest_tracker.gamification.achievement_system import (
    evaluate_achievements,
    get_user_achievements,
    unlock_achievements,
)
from quest_tracker.gamification.challenges import get_challenges, refresh_challenges
from quest_tracker.gamification.daily_reset import apply_daily_rollover
from quest_tracker.gamification.dashboards import get_daily_snapshot
from quest_tracker.gamification.events import GameEvent, Transition
from quest_tracker.gamification.perfect_day import completion_rate, is_perfect_day, record_perfect_day
from quest_tracker.gamification.streak_system import set_streak
from quest_tracker.gamification.xp_system import get_level_progress
from quest_tracker.models.challenge import ChallengeProgress
from quest_tracker.models.game_state import GameState, Habit, Task, TaskPriority, default_game_state
from quest_tracker.observability.metrics import engine_mutations_total, persistence_loads_total
from quest_tracker.persistence.gateway import PersistenceGateway, parse_state
from quest_tracker.services.celebrations import CelebrationDispatcher, CelebrationSink
from quest_tracker.utils.datetime_helpers import Clock, SystemClock, day_index, today_iso

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


class QuestEngine:
    def __init__(
        self,
        state: GameState,
        clock: Optional[Clock] = None,
        sink: Optional[CelebrationSink] = None,
        gateway: Optional[PersistenceGateway] = None,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.clock = clock or SystemClock()
        self.celebrations = CelebrationDispatcher(sink)
        self.gateway = gateway
        self._new_id = id_factory
        self._state = state

    # ==========================================
    # Construction
    # ==========================================

    @classmethod
    def from_document(
        cls,
        document: Optional[Dict[str, Any]],
        clock: Optional[Clock] = None,
        **kwargs,
    ) -> "QuestEngine":
        """Engine over a stored document (seed defaults when absent or malformed), rolled over to today"""
        clock = clock or SystemClock()
        state = parse_state(document, "document")
        if state is None:
            state = default_game_state(today_iso(clock.now()))
        engine = cls(state, clock=clock, **kwargs)
        engine.roll_over()
        return engine

    @classmethod
    async def load(
        cls,
        gateway: PersistenceGateway,
        user_id: Optional[str] = None,
        clock: Optional[Clock] = None,
        sink: Optional[CelebrationSink] = None,
        id_factory: Callable[[], str] = _new_id,
    ) -> "QuestEngine":
        """
        Build an engine from storage

        Falls back to seed defaults when nothing usable is stored, then
        applies the daily rollover (which also persists the result).
        """
        clock = clock or SystemClock()
        state = await gateway.load(user_id)
        if state is None:
            logger.info("No stored game state, starting from defaults")
            persistence_loads_total.labels(source="seed", status="missing").inc()
            state = default_game_state(today_iso(clock.now()))

        engine = cls(state, clock=clock, sink=sink, gateway=gateway, id_factory=id_factory)
        engine.roll_over()
        return engine

    # ==========================================
    # Pipeline
    # ==========================================

    @property
    def state(self) -> GameState:
        return self._state

    def _today_index(self) -> int:
        return day_index(self.clock.now())

    def _commit(
        self,
        operation: str,
        transition: Transition,
        toggled_from: Optional[GameState] = None,
        task_completed: bool = False,
    ) -> GameState:
        now = self.clock.now()

        if toggled_from is not None:
            transition = record_perfect_day(toggled_from, transition, day_index(now))

        newly_unlocked = evaluate_achievements(transition.state, now, task_completed=task_completed)
        if newly_unlocked:
            transition = transition.then(Transition(
                state=unlock_achievements(transition.state, newly_unlocked),
                events=[GameEvent.achievement_unlocked(a) for a in newly_unlocked],
            ))

        transition = transition.then(refresh_challenges(transition.state, now))

        if not transition.changed:
            engine_mutations_total.labels(operation=operation, status="noop").inc()
            return self._state

        self._state = transition.state
        engine_mutations_total.labels(operation=operation, status="applied").inc()

        if self.gateway is not None:
            self.gateway.save(self._state)

        self.celebrations.dispatch(transition.events)
        return self._state

    # ==========================================
    # Habits
    # ==========================================

    def add_habit(self, name: str, icon: str) -> Habit:
        """
        Raises:
            ValidationError: name is empty
        """
        if not name or not name.strip():
            raise ValidationError(
                message="Habit name must not be empty",
                field="name",
                value=name,
                operation="add_habit",
            )
        habit_id = self._new_id()
        self._commit("add_habit", habit_store.add_habit(self._state, name.strip(), icon, habit_id))
        return self._state.find_habit(habit_id)

    def toggle_habit(self, habit_id: str, day: Optional[int] = None) -> GameState:
        """Toggle a weekday slot (today's by default)"""
        before = self._state
        index = self._today_index() if day is None else day
        return self._commit(
            "toggle_habit",
            habit_store.toggle_habit(before, habit_id, index),
            toggled_from=before,
        )

    def edit_habit(self, habit_id: str, new_name: Optional[str] = None, new_icon: Optional[str] = None) -> GameState:
        return self._commit("edit_habit", habit_store.edit_habit(self._state, habit_id, new_name, new_icon))

    def delete_habit(self, habit_id: str) -> GameState:
        return self._commit("delete_habit", habit_store.delete_habit(self._state, habit_id))

    # ==========================================
    # Tasks
    # ==========================================

    def add_task(self, title: str, priority: Union[str, TaskPriority] = TaskPriority.MEDIUM) -> Task:
        """
        Raises:
            ValidationError: title is empty or priority unknown
        """
        if not title or not title.strip():
            raise ValidationError(
                message="Task title must not be empty",
                field="title",
                value=title,
                operation="add_task",
            )
        task_id = self._new_id()
        self._commit("add_task", task_store.add_task(self._state, title.strip(), priority, task_id))
        return self._state.find_task(task_id)

    def toggle_task(self, task_id: str) -> GameState:
        before = self._state
        task = before.find_task(task_id)
        completing = task is not None and not task.completed
        return self._commit(
            "toggle_task",
            task_store.toggle_task(before, task_id),
            toggled_from=before,
            task_completed=completing,
        )

    def delete_task(self, task_id: str) -> GameState:
        return self._commit("delete_task", task_store.delete_task(self._state, task_id))

    # ==========================================
    # Streak, rollover, sync
    # ==========================================

    def set_streak(self, streak: int) -> GameState:
        return self._commit("set_streak", set_streak(self._state, streak))

    def roll_over(self) -> GameState:
        """Apply the daily reset for the clock's current date"""
        before = self._state
        rolled = apply_daily_rollover(before, today_iso(self.clock.now()))
        transition = Transition(state=rolled, changed=rolled is not before)
        return self._commit("roll_over", transition)

    def apply_remote_snapshot(self, state: GameState) -> None:
        """Replace the in-memory state with a remote snapshot (last write wins)"""
        logger.info(f"Replacing game state with remote snapshot (level {state.level}, xp {state.xp})")
        self._state = state
        engine_mutations_total.labels(operation="apply_remote_snapshot", status="applied").inc()

    # ==========================================
    # Queries
    # ==========================================

    def completion_rate(self) -> int:
        return completion_rate(self._state, self._today_index())

    def is_perfect_day(self) -> bool:
        return is_perfect_day(self._state, self._today_index())

    def challenges(self) -> List[ChallengeProgress]:
        return get_challenges(self._state, self.clock.now())

    def achievements(self) -> Dict[str, Any]:
        return get_user_achievements(self._state, self.clock.now())

    def level_progress(self) -> Dict[str, Any]:
        return get_level_progress(self._state)

    def snapshot(self) -> Dict[str, Any]:
        """Persisted form of the current state"""
        return self._state.to_document()

    def daily_snapshot(self) -> str:
        return get_daily_snapshot(self._state, self.clock.now())
