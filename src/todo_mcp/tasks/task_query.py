# src/todo_mcp/tasks/task_query.py

"""
Query/filter engine.

Pure functions over task sequences. Inputs are expected in store order
(created_at descending); every function except overdue_tasks preserves it.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .task_models import Priority, Task, TaskFilter

DEFAULT_LIMIT = 20
MIN_LIMIT = 1
MAX_LIMIT = 100


def matches(task: Task, task_filter: TaskFilter) -> bool:
    if task_filter.completed is not None and task.completed != task_filter.completed:
        return False
    if task_filter.priority is not None and task.priority != task_filter.priority:
        return False
    if task_filter.tag is not None and task_filter.tag not in task.tags:
        return False
    if task_filter.due_before is not None:
        if task.due_date is None or task.due_date > task_filter.due_before:
            return False
    if task_filter.due_after is not None:
        if task.due_date is None or task.due_date < task_filter.due_after:
            return False
    return True


def apply_filter(tasks: Iterable[Task], task_filter: TaskFilter | None) -> list[Task]:
    if task_filter is None or task_filter.is_empty:
        return list(tasks)
    return [t for t in tasks if matches(t, task_filter)]


def completed_tasks(tasks: Iterable[Task]) -> list[Task]:
    return apply_filter(tasks, TaskFilter(completed=True))


def pending_tasks(tasks: Iterable[Task]) -> list[Task]:
    return apply_filter(tasks, TaskFilter(completed=False))


def tasks_by_priority(tasks: Iterable[Task], priority: Priority) -> list[Task]:
    return apply_filter(tasks, TaskFilter(priority=priority))


def tasks_by_tag(tasks: Iterable[Task], tag: str) -> list[Task]:
    return apply_filter(tasks, TaskFilter(tag=tag))


def is_overdue(task: Task, now: datetime) -> bool:
    return not task.completed and task.due_date is not None and task.due_date < now


def overdue_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """Incomplete tasks due strictly before ``now``, earliest due date first."""
    out = [t for t in tasks if is_overdue(t, now)]
    out.sort(key=lambda t: t.due_date)  # type: ignore[arg-type,return-value]
    return out


def search_tasks(tasks: Iterable[Task], query: str | None) -> list[Task]:
    """
    Case-insensitive substring search over title, description and tags.

    An empty or whitespace-only query returns everything.
    """
    term = (query or "").strip().lower()
    if not term:
        return list(tasks)

    def hit(task: Task) -> bool:
        if term in task.title.lower():
            return True
        if task.description is not None and term in task.description.lower():
            return True
        return any(term in tag.lower() for tag in task.tags)

    return [t for t in tasks if hit(t)]


def distinct_tags(tasks: Iterable[Task]) -> list[str]:
    """Every tag used by any task; case-sensitive, sorted by code point."""
    found: set[str] = set()
    for task in tasks:
        found.update(task.tags)
    return sorted(found)


def paginate(tasks: list[Task], limit: int | None) -> list[Task]:
    if limit is None:
        return tasks
    return tasks[:limit]
