# src/todo_mcp/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


PRIORITY_VALUES: tuple[str, ...] = tuple(p.value for p in Priority)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(raw: str) -> datetime:
    """
    Parse an ISO 8601 date or datetime into an aware UTC datetime.

    Accepts:
    - YYYY-MM-DD (midnight UTC)
    - YYYY-MM-DDTHH:MM[:SS[.ffffff]][Z|+HH:MM]

    Raises ValueError on anything else.
    """
    text = raw.strip()
    if not text:
        raise ValueError("empty timestamp")
    if len(text) == 10:
        d = date.fromisoformat(text)
        return datetime.combine(d, time.min, tzinfo=timezone.utc)
    return to_utc(datetime.fromisoformat(text))


def format_timestamp(dt: datetime) -> str:
    """Wire form: ISO 8601 UTC with millisecond precision and a trailing Z."""
    return to_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_db_timestamp(dt: datetime) -> str:
    # Fixed-width, lossless: lexicographic order == chronological order.
    return to_utc(dt).isoformat(timespec="microseconds")


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str | None
    completed: bool
    priority: Priority
    due_date: datetime | None
    tags: tuple[str, ...]
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "priority": self.priority.value,
            "dueDate": format_timestamp(self.due_date) if self.due_date else None,
            "tags": list(self.tags),
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }


@dataclass(frozen=True, slots=True)
class NewTask:
    """Normalized create input, ready for the store."""

    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    tags: tuple[str, ...] = ()


class TaskCreate(BaseModel):
    """Raw create request. Values are checked by validation.normalize_create."""

    title: str | None = None
    description: str | None = None
    priority: str | None = None
    due_date: str | datetime | None = None
    tags: list[str] | None = None


class TaskUpdate(BaseModel):
    """
    Raw partial update.

    A field counts as supplied when it is in ``model_fields_set``, so
    ``TaskUpdate()`` changes nothing while ``TaskUpdate(description=None)``
    clears the description.
    """

    title: str | None = None
    description: str | None = None
    completed: bool | None = None
    priority: str | None = None
    due_date: str | datetime | None = None
    tags: list[str] | None = None


@dataclass(frozen=True, slots=True)
class TaskFilter:
    """Conjunction of optional conditions; None means "no constraint"."""

    completed: bool | None = None
    priority: Priority | None = None
    tag: str | None = None
    due_before: datetime | None = None
    due_after: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.completed is None
            and self.priority is None
            and self.tag is None
            and self.due_before is None
            and self.due_after is None
        )


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    by_priority: dict[Priority, int] = field(
        default_factory=lambda: {p: 0 for p in Priority}
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "overdue": self.overdue,
            "byPriority": {p.value: int(self.by_priority.get(p, 0)) for p in Priority},
        }
