"""
Assistant tools for Quest AI

Tool calls arrive as {name, arguments} payloads (arguments may be a JSON
string, as chat-completion APIs send them). They are validated against a
discriminated union on `name` and applied through the QuestEngine, the same
operations the UI uses. Unknown or invalid calls are logged and skipped.

The pydantic_ai tool functions at the bottom wrap the same handlers for an
in-process agent.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_ai import RunContext

from quest_tracker.exceptions import SuggestionStateError, ToolCallError
from quest_tracker.models.game_state import TaskPriority
from quest_tracker.models.suggestion import Suggestion, SuggestionStatus, SuggestionType
from quest_tracker.observability.metrics import agent_tool_calls_total
from quest_tracker.services.quest_service import QuestEngine

logger = logging.getLogger(__name__)

DEFAULT_HABIT_ICON = "⭐"


# ==========================================
# Tool call payloads
# ==========================================

class ToolArgs(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddTaskArgs(ToolArgs):
    title: str = Field(min_length=1)
    priority: TaskPriority


class AddHabitArgs(ToolArgs):
    name: str = Field(min_length=1)
    icon: str


class EditHabitArgs(ToolArgs):
    habit_id: str
    new_name: Optional[str] = None
    new_icon: Optional[str] = None


class DeleteHabitArgs(ToolArgs):
    habit_id: str


class SuggestionArgs(ToolArgs):
    type: SuggestionType
    title: str = Field(min_length=1)
    reason: str
    icon: Optional[str] = None
    priority: Optional[TaskPriority] = None


class SuggestItemsArgs(ToolArgs):
    suggestions: List[SuggestionArgs]


class AddTaskCall(BaseModel):
    name: Literal["add_task"]
    arguments: AddTaskArgs


class AddHabitCall(BaseModel):
    name: Literal["add_habit"]
    arguments: AddHabitArgs


class EditHabitCall(BaseModel):
    name: Literal["edit_habit"]
    arguments: EditHabitArgs


class DeleteHabitCall(BaseModel):
    name: Literal["delete_habit"]
    arguments: DeleteHabitArgs


class SuggestItemsCall(BaseModel):
    name: Literal["suggest_items"]
    arguments: SuggestItemsArgs


ToolCall = Annotated[
    Union[AddTaskCall, AddHabitCall, EditHabitCall, DeleteHabitCall, SuggestItemsCall],
    Field(discriminator="name"),
]

tool_call_adapter = TypeAdapter(ToolCall)


class ToolResult(BaseModel):
    """Outcome of one tool call, shown to the user and fed back to the model"""
    success: bool
    message: str
    tool_name: Optional[str] = None
    suggestions: List[Suggestion] = Field(default_factory=list)


# ==========================================
# Handlers
# ==========================================

def _add_task(engine: QuestEngine, args: AddTaskArgs) -> ToolResult:
    task = engine.add_task(args.title, args.priority)
    return ToolResult(
        success=True,
        message=f"⚔️ Quest added: \"{task.title}\" (+{task.xp_reward} XP)",
        tool_name="add_task",
    )


def _add_habit(engine: QuestEngine, args: AddHabitArgs) -> ToolResult:
    habit = engine.add_habit(args.name, args.icon)
    return ToolResult(
        success=True,
        message=f"✨ New habit added: {habit.icon} {habit.name}",
        tool_name="add_habit",
    )


def _edit_habit(engine: QuestEngine, args: EditHabitArgs) -> ToolResult:
    if engine.state.find_habit(args.habit_id) is None:
        return ToolResult(success=False, message=f"No habit with id {args.habit_id}", tool_name="edit_habit")
    engine.edit_habit(args.habit_id, args.new_name, args.new_icon)
    habit = engine.state.find_habit(args.habit_id)
    return ToolResult(
        success=True,
        message=f"✏️ Habit updated: {habit.icon} {habit.name}",
        tool_name="edit_habit",
    )


def _delete_habit(engine: QuestEngine, args: DeleteHabitArgs) -> ToolResult:
    habit = engine.state.find_habit(args.habit_id)
    if habit is None:
        return ToolResult(success=False, message=f"No habit with id {args.habit_id}", tool_name="delete_habit")
    engine.delete_habit(args.habit_id)
    return ToolResult(
        success=True,
        message=f"🗑️ Habit removed: {habit.icon} {habit.name}",
        tool_name="delete_habit",
    )


def build_suggestions(args: SuggestItemsArgs, message_id: str) -> List[Suggestion]:
    """Suggestion cards, ids derived from the assistant message id"""
    return [
        Suggestion(
            id=f"{message_id}-suggestion-{index}",
            type=item.type,
            title=item.title,
            reason=item.reason,
            icon=item.icon,
            priority=item.priority,
        )
        for index, item in enumerate(args.suggestions)
    ]


def _suggest_items(args: SuggestItemsArgs, message_id: str) -> ToolResult:
    suggestions = build_suggestions(args, message_id)
    return ToolResult(
        success=True,
        message=f"💡 {len(suggestions)} suggestion{'s' if len(suggestions) != 1 else ''} ready for review",
        tool_name="suggest_items",
        suggestions=suggestions,
    )


def _normalize(raw: Any) -> Any:
    """Accept {name, arguments} or {function: {name, arguments}} with JSON-string arguments"""
    if not isinstance(raw, dict):
        return raw
    if isinstance(raw.get("function"), dict):
        raw = raw["function"]
    arguments = raw.get("arguments")
    if isinstance(arguments, str):
        try:
            arguments = json.loads(arguments) if arguments.strip() else {}
        except json.JSONDecodeError as e:
            raise ToolCallError(
                message=f"Tool arguments are not valid JSON: {e}",
                tool_name=raw.get("name"),
                operation="dispatch_tool_call",
                cause=e,
            )
    return {"name": raw.get("name"), "arguments": arguments}


def dispatch_tool_call(engine: QuestEngine, raw: Any, message_id: str = "message") -> ToolResult:
    """
    Validate and apply one tool call

    Returns:
        ToolResult; success=False for unknown tools, invalid arguments or
        calls the engine rejected
    """
    name = raw.get("name") if isinstance(raw, dict) else None

    try:
        call = tool_call_adapter.validate_python(_normalize(raw))
    except ToolCallError as e:
        agent_tool_calls_total.labels(tool_name=str(name), status="rejected").inc()
        return ToolResult(success=False, message=e.message, tool_name=name)
    except PydanticValidationError as e:
        logger.warning(f"Ignoring tool call {name!r}: {e.error_count()} validation error(s)")
        agent_tool_calls_total.labels(tool_name=str(name), status="rejected").inc()
        return ToolResult(success=False, message=f"Unsupported or invalid tool call: {name}", tool_name=name)

    try:
        if isinstance(call, AddTaskCall):
            result = _add_task(engine, call.arguments)
        elif isinstance(call, AddHabitCall):
            result = _add_habit(engine, call.arguments)
        elif isinstance(call, EditHabitCall):
            result = _edit_habit(engine, call.arguments)
        elif isinstance(call, DeleteHabitCall):
            result = _delete_habit(engine, call.arguments)
        else:
            result = _suggest_items(call.arguments, message_id)
    except Exception as e:
        logger.error(f"Tool call {call.name} failed: {e}", exc_info=True)
        agent_tool_calls_total.labels(tool_name=call.name, status="error").inc()
        return ToolResult(success=False, message=f"Couldn't complete {call.name}: {e}", tool_name=call.name)

    agent_tool_calls_total.labels(
        tool_name=call.name, status="success" if result.success else "rejected"
    ).inc()
    logger.info(f"Tool call {call.name}: {result.message}")
    return result


def dispatch_tool_calls(engine: QuestEngine, raw_calls: List[Any], message_id: str = "message") -> List[ToolResult]:
    """Apply tool calls in order; one bad call never blocks the rest"""
    return [dispatch_tool_call(engine, raw, message_id) for raw in raw_calls]


# ==========================================
# Suggestion lifecycle
# ==========================================

def _ensure_pending(suggestion: Suggestion, action: str) -> None:
    if suggestion.status != SuggestionStatus.PENDING:
        raise SuggestionStateError(
            message=f"Cannot {action} suggestion in state {suggestion.status.value}",
            suggestion_id=suggestion.id,
            status=suggestion.status.value,
            operation=f"{action}_suggestion",
        )


def accept_suggestion(engine: QuestEngine, suggestion: Suggestion) -> Suggestion:
    """
    Add the suggested task or habit and mark the card accepted

    Raises:
        SuggestionStateError: suggestion was already accepted or dismissed
    """
    _ensure_pending(suggestion, "accept")

    if suggestion.type == SuggestionType.TASK:
        engine.add_task(suggestion.title, suggestion.priority or TaskPriority.MEDIUM)
    else:
        engine.add_habit(suggestion.title, suggestion.icon or DEFAULT_HABIT_ICON)

    logger.info(f"Accepted suggestion {suggestion.id}: {suggestion.type.value} {suggestion.title!r}")
    return suggestion.model_copy(update={"status": SuggestionStatus.ACCEPTED})


def dismiss_suggestion(suggestion: Suggestion) -> Suggestion:
    """
    Raises:
        SuggestionStateError: suggestion was already accepted or dismissed
    """
    _ensure_pending(suggestion, "dismiss")
    return suggestion.model_copy(update={"status": SuggestionStatus.DISMISSED})


# ==========================================
# pydantic_ai tools
# ==========================================

@dataclass
class QuestAgentDeps:
    """Dependencies for Quest AI tool calls"""
    engine: QuestEngine
    message_id: str = "message"
    suggestions: List[Suggestion] = field(default_factory=list)


def _call(ctx: RunContext[QuestAgentDeps], name: str, arguments: Dict[str, Any]) -> ToolResult:
    result = dispatch_tool_call(ctx.deps.engine, {"name": name, "arguments": arguments}, ctx.deps.message_id)
    ctx.deps.suggestions.extend(result.suggestions)
    return result


async def add_task_tool(ctx: RunContext[QuestAgentDeps], title: str, priority: TaskPriority) -> ToolResult:
    """
    Add a new task/quest for the user to complete.

    Priority determines the XP reward (low=10, medium=25, high=50). Infer it
    from context: urgent/important = high, normal = medium, minor = low.
    """
    return _call(ctx, "add_task", {"title": title, "priority": priority})


async def add_habit_tool(ctx: RunContext[QuestAgentDeps], name: str, icon: str) -> ToolResult:
    """Add a new daily habit for the user to track, with an emoji icon."""
    return _call(ctx, "add_habit", {"name": name, "icon": icon})


async def edit_habit_tool(
    ctx: RunContext[QuestAgentDeps],
    habit_id: str,
    new_name: Optional[str] = None,
    new_icon: Optional[str] = None,
) -> ToolResult:
    """Edit an existing habit's name or icon. Ask for clarification if the habit is ambiguous."""
    return _call(ctx, "edit_habit", {"habit_id": habit_id, "new_name": new_name, "new_icon": new_icon})


async def delete_habit_tool(ctx: RunContext[QuestAgentDeps], habit_id: str) -> ToolResult:
    """Delete a habit from tracking."""
    return _call(ctx, "delete_habit", {"habit_id": habit_id})


async def suggest_items_tool(ctx: RunContext[QuestAgentDeps], suggestions: List[SuggestionArgs]) -> ToolResult:
    """
    Suggest tasks or habits for the user to review and accept/dismiss.

    Use this when recommending things rather than adding directly.
    """
    return _call(ctx, "suggest_items", {"suggestions": [s.model_dump() for s in suggestions]})



