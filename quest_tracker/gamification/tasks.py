"""
Task Store

Pure reducers over the ordered task list. The XP reward is fixed from the
priority when a task is created. Unknown task ids are no-ops.
"""

import logging
from typing import Union

from quest_tracker.exceptions import ValidationError
from quest_tracker.gamification.events import GameEvent, Transition
from quest_tracker.gamification.xp_system import xp_transition
from quest_tracker.models.game_state import TASK_XP_REWARDS, GameState, Task, TaskPriority

logger = logging.getLogger(__name__)


def parse_priority(priority: Union[str, TaskPriority]) -> TaskPriority:
    """
    Raises:
        ValidationError: priority is not low/medium/high
    """
    try:
        return TaskPriority(priority)
    except ValueError as e:
        raise ValidationError(
            message="Priority must be one of low, medium, high",
            field="priority",
            value=priority,
            operation="add_task",
            cause=e,
        )


def add_task(state: GameState, title: str, priority: Union[str, TaskPriority], task_id: str) -> Transition:
    """Append an open task whose reward follows its priority"""
    level = parse_priority(priority)
    task = Task(id=task_id, title=title, priority=level, xp_reward=TASK_XP_REWARDS[level])
    logger.info(f"Added task {task_id}: {title!r} ({level.value}, +{task.xp_reward} XP)")
    return Transition(state=state.model_copy(update={"tasks": state.tasks + [task]}))


def toggle_task(state: GameState, task_id: str) -> Transition:
    """
    Complete or re-open a task

    Completing awards xp_reward, bumps the lifetime completed counter and
    emits task_completed. Re-opening removes xp_reward and leaves every
    lifetime counter alone.
    """
    task = state.find_task(task_id)
    if task is None:
        logger.debug(f"toggle_task: unknown task {task_id}, ignoring")
        return Transition.unchanged(state)

    tasks = [
        t.model_copy(update={"completed": not t.completed}) if t.id == task_id else t
        for t in state.tasks
    ]

    if task.completed:
        reopened = Transition(state=state.model_copy(update={"tasks": tasks}))
        return reopened.then(xp_transition(reopened.state, -task.xp_reward))

    completed = Transition(
        state=state.model_copy(update={
            "tasks": tasks,
            "total_tasks_completed": state.total_tasks_completed + 1,
        }),
        events=[GameEvent.task_completed()],
    )
    return completed.then(xp_transition(completed.state, task.xp_reward))


def delete_task(state: GameState, task_id: str) -> Transition:
    """Remove a task; XP already granted for it is kept"""
    if state.find_task(task_id) is None:
        logger.debug(f"delete_task: unknown task {task_id}, ignoring")
        return Transition.unchanged(state)

    tasks = [t for t in state.tasks if t.id != task_id]
    logger.info(f"Deleted task {task_id}")
    return Transition(state=state.model_copy(update={"tasks": tasks}))
