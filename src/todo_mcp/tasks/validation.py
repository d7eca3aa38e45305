# src/todo_mcp/tasks/validation.py

"""
Validation and normalization applied before anything reaches the store.

The same rules run on create and update; update only looks at the fields
the caller actually supplied (TaskUpdate.model_fields_set).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from ..errors import ValidationError
from .task_models import NewTask, Priority, PRIORITY_VALUES, TaskCreate, TaskUpdate, parse_timestamp, to_utc


def require_id(task_id: str | None) -> str:
    if task_id is None or not str(task_id).strip():
        raise ValidationError("Todo ID is required", {"field": "id"})
    return str(task_id).strip()


def normalize_title(title: str | None, *, on_update: bool = False) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        msg = "Todo title cannot be empty" if on_update else "Todo title is required"
        raise ValidationError(msg, {"field": "title"})
    return cleaned


def normalize_description(description: str | None) -> str | None:
    if description is None:
        return None
    cleaned = description.strip()
    return cleaned or None


def normalize_priority(priority: str | Priority | None) -> Priority:
    if isinstance(priority, Priority):
        return priority
    if priority not in PRIORITY_VALUES:
        raise ValidationError(
            "Priority must be low, medium, or high",
            {"field": "priority", "value": priority},
        )
    return Priority(priority)


def normalize_due_date(due_date: str | datetime | None) -> datetime | None:
    if due_date is None:
        return None
    if isinstance(due_date, str) and not due_date.strip():
        return None
    try:
        if isinstance(due_date, datetime):
            return to_utc(due_date)
        return parse_timestamp(due_date)
    except (ValueError, OverflowError) as e:
        # OverflowError: valid offset, but the instant falls outside datetime's range in UTC.
        raise ValidationError(
            "Invalid due date format", {"field": "dueDate", "value": due_date}
        ) from e


def normalize_tags(tags: Iterable[str] | None) -> tuple[str, ...]:
    if not tags:
        return ()
    seen: dict[str, None] = {}
    for tag in tags:
        cleaned = str(tag).strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)


def normalize_create(data: TaskCreate) -> NewTask:
    title = normalize_title(data.title)
    due_date = normalize_due_date(data.due_date)
    priority = Priority.MEDIUM if data.priority is None else normalize_priority(data.priority)
    return NewTask(
        title=title,
        description=normalize_description(data.description),
        priority=priority,
        due_date=due_date,
        tags=normalize_tags(data.tags),
    )


def normalize_update(data: TaskUpdate) -> dict[str, Any]:
    """
    Return only the supplied fields, normalized.

    Keys are Task attribute names. Description/due_date/tags may map to
    None/() meaning "clear".
    """
    supplied = data.model_fields_set
    changes: dict[str, Any] = {}

    if "title" in supplied:
        changes["title"] = normalize_title(data.title, on_update=True)
    if "description" in supplied:
        changes["description"] = normalize_description(data.description)
    if "completed" in supplied:
        if not isinstance(data.completed, bool):
            raise ValidationError("Completed must be true or false", {"field": "completed"})
        changes["completed"] = data.completed
    if "priority" in supplied:
        changes["priority"] = normalize_priority(data.priority)
    if "due_date" in supplied:
        changes["due_date"] = normalize_due_date(data.due_date)
    if "tags" in supplied:
        changes["tags"] = normalize_tags(data.tags)

    return changes
