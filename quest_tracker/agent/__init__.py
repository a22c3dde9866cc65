"""
Quest AI assistant

The agent is built on demand (create_quest_agent) so importing this package
never needs model credentials.
"""

import logging
from typing import List, Optional

from pydantic_ai import Agent, RunContext, Tool

from quest_tracker.agent.quest_tools import (
    QuestAgentDeps,
    ToolResult,
    accept_suggestion,
    add_habit_tool,
    add_task_tool,
    delete_habit_tool,
    dismiss_suggestion,
    dispatch_tool_calls,
    edit_habit_tool,
    suggest_items_tool,
)
from quest_tracker.config import AGENT_MODEL
from quest_tracker.models.game_state import Habit

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are Quest AI, the helpful assistant for Quest Tracker - a gamified habit and task tracking app. You help users level up their lives through productivity!

## About Quest Tracker App:
- Users track daily habits (Exercise, Read, Meditate, Drink Water, etc.)
- Users create and complete tasks/quests with XP rewards
- Completing habits gives +15 XP, tasks give 10-50 XP based on priority
- Users level up every 500 XP
- There are daily challenges (complete 3 tasks, 2 habits) and weekly challenges
- Users earn achievements for streaks, levels, perfect days, etc.
- Settings allow toggling sounds and confetti on/off

## Your Capabilities (Tool Calling):
1. **add_task** - Add a new quest/task for the user to complete
2. **add_habit** - Add a new habit to track
3. **edit_habit** - Modify an existing habit's name or icon
4. **delete_habit** - Remove a habit from tracking
5. **suggest_items** - Suggest tasks or habits for the user to accept or dismiss (use this when giving recommendations)

## Personality:
- Be encouraging and motivational like a game companion
- Use gaming terminology (quests, XP, level up, achievements)
- Keep responses concise but helpful
- When users ask for suggestions or recommendations, use suggest_items to show clickable cards
- When users explicitly ask to add tasks/habits, add them directly
- Celebrate user progress and encourage them

## Guidelines:
- For task priority, infer from context: urgent/important = high, normal = medium, minor = low
- Suggest good habit icons using emojis
- When editing/deleting, ask for clarification if the habit name is ambiguous
- When giving suggestions (e.g. "suggest some habits", "what tasks should I do"), use suggest_items tool
- Always be positive and supportive!"""


def build_habits_context(habits: List[Habit]) -> str:
    """Current habits (with ids) so the model can target edits and deletes"""
    if not habits:
        return "User has no habits set up yet."
    listed = ", ".join(f"{h.icon} {h.name} (id: {h.id})" for h in habits)
    return f"Current user habits: {listed}"


def create_quest_agent(model: Optional[str] = None) -> Agent:
    """
    Build the Quest AI agent

    Args:
        model: pydantic_ai model name (defaults to AGENT_MODEL)
    """
    model = model or AGENT_MODEL
    agent = Agent(
        model=model,
        deps_type=QuestAgentDeps,
        output_type=str,
        system_prompt=SYSTEM_PROMPT,
        tools=[
            Tool(add_task_tool, name="add_task"),
            Tool(add_habit_tool, name="add_habit"),
            Tool(edit_habit_tool, name="edit_habit"),
            Tool(delete_habit_tool, name="delete_habit"),
            Tool(suggest_items_tool, name="suggest_items"),
        ],
    )

    @agent.system_prompt
    def habits_context(ctx: RunContext[QuestAgentDeps]) -> str:
        return build_habits_context(ctx.deps.engine.state.habits)

    logger.info(f"Quest AI agent created with model {model}")
    return agent


__all__ = [
    "SYSTEM_PROMPT",
    "QuestAgentDeps",
    "ToolResult",
    "accept_suggestion",
    "build_habits_context",
    "create_quest_agent",
    "dismiss_suggestion",
    "dispatch_tool_calls",
]
