# src/todo_mcp/mcp/prompts.py

from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

DAILY_REVIEW = """Please help me review my todos for today. Check:
1. Any overdue todos that need immediate attention
2. High priority todos for today
3. Upcoming deadlines this week
4. Provide a summary and recommendations for prioritizing my day

Use the list_todos and get_todo_stats tools to analyze my current todo situation."""

WEEKLY_PLANNING = """Help me plan my week by analyzing my todo list:
1. Show me all pending todos
2. Identify overdue items that need immediate attention
3. Group tasks by priority and estimated time
4. Suggest a weekly schedule
5. Recommend any todos that should be broken down into smaller tasks

Use the available todo tools to gather this information and provide actionable insights."""

PRODUCTIVITY_ANALYSIS = """Analyze my productivity patterns based on my todo data:
1. Show completion statistics
2. Identify patterns in overdue tasks
3. Analyze priority distribution
4. Suggest improvements to my todo management
5. Recommend strategies for better task completion

Use the todo statistics and listing tools to provide insights about my productivity habits."""


def create_todo_text(
    title: str,
    description: str | None = None,
    priority: str | None = None,
    due_date: str | None = None,
) -> str:
    lines = ["Please create a todo with the following details:", f"- Title: {title}"]
    if description:
        lines.append(f"- Description: {description}")
    lines.append(f"- Priority: {priority or 'medium'}")
    if due_date:
        lines.append(f"- Due Date: {due_date}")
    lines += ["", "Use the create_todo tool to add this to the todo list."]
    return "\n".join(lines)


def task_breakdown_text(todo_id: str, context: str | None = None) -> str:
    lines = [
        "I need help breaking down a complex task into smaller, manageable todos.",
        "",
        f"Todo ID: {todo_id}",
    ]
    if context:
        lines.append(f"Additional context: {context}")
    lines += [
        "",
        "Please:",
        "1. First, get the details of this todo using the appropriate tool",
        "2. Analyze the task and suggest 3-5 smaller, actionable subtasks",
        "3. Recommend priorities and estimated timeframes for each subtask",
        "4. Suggest whether the original task should be updated or replaced with the subtasks",
        "",
        "Use the todo tools to examine the task and provide a detailed breakdown plan.",
    ]
    return "\n".join(lines)


def register_prompts(mcp: FastMCP) -> None:
    @mcp.prompt(name="create_todo_prompt", description="Interactive prompt to create a new todo")
    def create_todo_prompt(
        title: Annotated[str, Field(min_length=1, description="Todo title")],
        description: str | None = None,
        priority: Annotated[str | None, Field(description="low, medium or high")] = None,
        due_date: Annotated[str | None, Field(description="Due date (YYYY-MM-DD format)")] = None,
    ) -> str:
        return create_todo_text(title, description, priority, due_date)

    @mcp.prompt(name="daily_review", description="Review today's todos and plan the day")
    def daily_review() -> str:
        return DAILY_REVIEW

    @mcp.prompt(name="weekly_planning", description="Plan the week ahead based on todos")
    def weekly_planning() -> str:
        return WEEKLY_PLANNING

    @mcp.prompt(
        name="productivity_analysis",
        description="Analyze productivity patterns from todo completion data",
    )
    def productivity_analysis() -> str:
        return PRODUCTIVITY_ANALYSIS

    @mcp.prompt(
        name="task_breakdown",
        description="Help break down a complex todo into smaller, manageable tasks",
    )
    def task_breakdown(
        todo_id: Annotated[str, Field(min_length=1, description="Todo ID")],
        context: Annotated[str | None, Field(description="Additional context about the task")] = None,
    ) -> str:
        return task_breakdown_text(todo_id, context)
