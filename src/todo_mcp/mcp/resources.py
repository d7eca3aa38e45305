# src/todo_mcp/mcp/resources.py

from __future__ import annotations

import logging

from fastmcp import FastMCP
from fastmcp.exceptions import ResourceError

from ..errors import TodoError, ValidationError
from ..tasks.task_service import TaskService
from . import formatting

logger = logging.getLogger(__name__)

JSON = "application/json"


def register_resources(mcp: FastMCP, service: TaskService) -> None:
    """Read-only JSON projections; none of them touch the store's state."""

    @mcp.resource("todos://all", name="all_todos", description="All todo items in the database", mime_type=JSON)
    def all_todos() -> str:
        return formatting.tasks_json(service.all_tasks())

    @mcp.resource("todos://completed", name="completed_todos", description="All completed todo items", mime_type=JSON)
    def completed_todos() -> str:
        return formatting.tasks_json(service.completed_tasks())

    @mcp.resource("todos://pending", name="pending_todos", description="All pending todo items", mime_type=JSON)
    def pending_todos() -> str:
        return formatting.tasks_json(service.pending_tasks())

    @mcp.resource("todos://overdue", name="overdue_todos", description="All overdue todo items", mime_type=JSON)
    def overdue_todos() -> str:
        return formatting.tasks_json(service.overdue_tasks())

    @mcp.resource("todos://stats", name="todo_stats", description="Statistics about all todos", mime_type=JSON)
    def todo_stats() -> str:
        return formatting.to_json(service.get_stats().to_dict())

    @mcp.resource("todos://tags", name="all_tags", description="All tags used in todos", mime_type=JSON)
    def all_tags() -> str:
        return formatting.to_json(service.all_tags())

    @mcp.resource(
        "todos://todo/{todo_id}",
        name="todo_by_id",
        description="Get a specific todo by its ID",
        mime_type=JSON,
    )
    def todo_by_id(todo_id: str) -> str:
        try:
            return formatting.to_json(service.get_task(todo_id).to_dict())
        except TodoError as e:
            logger.warning("Resource todos://todo/%s failed: %s", todo_id, e.message)
            raise ResourceError(e.message) from e

    @mcp.resource(
        "todos://priority/{priority}",
        name="todos_by_priority",
        description="Get todos filtered by priority level",
        mime_type=JSON,
    )
    def todos_by_priority(priority: str) -> str:
        try:
            return formatting.tasks_json(service.tasks_by_priority(priority))
        except ValidationError as e:
            raise ResourceError(
                f"Invalid priority: {priority}. Must be low, medium, or high"
            ) from e

    @mcp.resource(
        "todos://tag/{tag}",
        name="todos_by_tag",
        description="Get todos filtered by tag",
        mime_type=JSON,
    )
    def todos_by_tag(tag: str) -> str:
        try:
            return formatting.tasks_json(service.tasks_by_tag(tag))
        except ValidationError as e:
            raise ResourceError(e.message) from e
