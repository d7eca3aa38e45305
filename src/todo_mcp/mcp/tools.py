# src/todo_mcp/mcp/tools.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from typing import Annotated, Any, Literal

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from ..errors import TodoError, ValidationError
from ..tasks.task_models import Priority, TaskCreate, TaskFilter, TaskUpdate
from ..tasks.task_query import DEFAULT_LIMIT, MAX_LIMIT, MIN_LIMIT
from ..tasks.task_service import TaskService
from ..tasks.validation import normalize_due_date
from . import formatting

logger = logging.getLogger(__name__)

PriorityName = Literal["low", "medium", "high"]
Limit = Annotated[
    int,
    Field(ge=MIN_LIMIT, le=MAX_LIMIT, description="Maximum number of todos to return"),
]
DueDate = Annotated[
    str | None,
    Field(description="ISO date string (YYYY-MM-DD or YYYY-MM-DDTHH:mm:ss.sssZ)"),
]


@contextlib.contextmanager
def tool_errors(action: str) -> Iterator[None]:
    """Turn core errors into ToolError so the client gets an isError result."""
    try:
        yield
    except TodoError as e:
        logger.warning("Error %s [%s]: %s details=%s", action, e.code, e.message, e.details)
        raise ToolError(f"Error {action}: {e.message}") from e


def _supplied(**fields: Any) -> dict[str, Any]:
    # MCP arguments left out arrive as None.
    return {k: v for k, v in fields.items() if v is not None}


def register_tools(mcp: FastMCP, service: TaskService) -> None:
    @mcp.tool(name="create_todo", description="Create a new todo item")
    def create_todo(
        title: Annotated[str, Field(min_length=1, description="Todo title")],
        description: str | None = None,
        priority: PriorityName = "medium",
        due_date: DueDate = None,
        tags: list[str] | None = None,
    ) -> str:
        with tool_errors("creating todo"):
            todo = service.create_task(
                TaskCreate(
                    title=title,
                    description=description,
                    priority=priority,
                    due_date=due_date,
                    tags=tags or [],
                )
            )
            return f"Created todo: {todo.title} (ID: {todo.id})"

    @mcp.tool(
        name="update_todo",
        description=(
            "Update an existing todo item. Only the given fields change; "
            "pass an empty string to clear description or due_date."
        ),
    )
    def update_todo(
        id: Annotated[str, Field(min_length=1, description="Todo ID")],
        title: str | None = None,
        description: str | None = None,
        completed: bool | None = None,
        priority: PriorityName | None = None,
        due_date: DueDate = None,
        tags: list[str] | None = None,
    ) -> str:
        changes = _supplied(
            title=title,
            description=description,
            completed=completed,
            priority=priority,
            due_date=due_date,
            tags=tags,
        )
        with tool_errors("updating todo"):
            todo = service.update_task(id, TaskUpdate(**changes))
            return f"Updated todo: {todo.title} (ID: {todo.id})"

    @mcp.tool(name="delete_todo", description="Delete a todo item")
    def delete_todo(id: Annotated[str, Field(min_length=1, description="Todo ID")]) -> str:
        with tool_errors("deleting todo"):
            service.delete_task(id)
            return f"Deleted todo with ID: {id}"

    @mcp.tool(name="complete_todo", description="Mark a todo as completed")
    def complete_todo(id: Annotated[str, Field(min_length=1, description="Todo ID")]) -> str:
        with tool_errors("completing todo"):
            todo = service.complete_task(id)
            return f"Completed todo: {todo.title}"

    @mcp.tool(name="uncomplete_todo", description="Mark a completed todo as pending again")
    def uncomplete_todo(id: Annotated[str, Field(min_length=1, description="Todo ID")]) -> str:
        with tool_errors("reopening todo"):
            todo = service.uncomplete_task(id)
            return f"Reopened todo: {todo.title}"

    @mcp.tool(name="list_todos", description="List todos with optional filtering")
    def list_todos(
        completed: Annotated[bool | None, Field(description="Filter by completion status")] = None,
        priority: Annotated[PriorityName | None, Field(description="Filter by priority")] = None,
        tag: Annotated[str | None, Field(description="Filter by tag")] = None,
        due_before: Annotated[str | None, Field(description="Only todos due on or before this date")] = None,
        due_after: Annotated[str | None, Field(description="Only todos due on or after this date")] = None,
        limit: Limit = DEFAULT_LIMIT,
    ) -> str:
        with tool_errors("listing todos"):
            if tag is not None and not tag.strip():
                raise ValidationError("Tag is required", {"field": "tag"})
            task_filter = TaskFilter(
                completed=completed,
                priority=Priority(priority) if priority else None,
                tag=tag.strip() if tag is not None else None,
                due_before=normalize_due_date(due_before),
                due_after=normalize_due_date(due_after),
            )
            todos = service.list_tasks(task_filter, limit=limit)
            return formatting.list_result_text(todos)

    @mcp.tool(name="search_todos", description="Search todos by title, description, or tags")
    def search_todos(
        query: Annotated[str, Field(min_length=1, description="Search query")],
        limit: Limit = DEFAULT_LIMIT,
    ) -> str:
        with tool_errors("searching todos"):
            todos = service.search_tasks(query, limit=limit)
            return formatting.search_result_text(todos, query)

    @mcp.tool(name="get_todo_stats", description="Get statistics about todos")
    def get_todo_stats() -> str:
        with tool_errors("getting stats"):
            return formatting.stats_text(service.get_stats())
