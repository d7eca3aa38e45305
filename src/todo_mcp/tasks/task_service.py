# src/todo_mcp/tasks/task_service.py

"""
Command/query facade over the task store.

Commands go through validation into the store; queries go through the
query engine (and the stats aggregator). The service owns the clock so that
"now" is read once per operation and can be replaced in tests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..errors import NotFoundError, ValidationError
from . import task_query
from .task_models import Priority, Task, TaskCreate, TaskFilter, TaskStats, TaskUpdate, utcnow
from .task_stats import compute_stats
from .task_store import TaskStore
from .validation import normalize_create, normalize_priority, normalize_update, require_id

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def check_limit(limit: int | None) -> int:
    if limit is None:
        return task_query.DEFAULT_LIMIT
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValidationError("Limit must be an integer", {"field": "limit"})
    if not task_query.MIN_LIMIT <= limit <= task_query.MAX_LIMIT:
        raise ValidationError(
            f"Limit must be between {task_query.MIN_LIMIT} and {task_query.MAX_LIMIT}",
            {"field": "limit", "value": limit},
        )
    return limit


class TaskService:
    def __init__(self, store: TaskStore, *, clock: Clock = utcnow) -> None:
        self._store = store
        self._clock = clock

    @property
    def store(self) -> TaskStore:
        return self._store

    def now(self) -> datetime:
        return self._clock()

    # ---- commands ----

    def create_task(self, data: TaskCreate) -> Task:
        new = normalize_create(data)
        task = self._store.create(new, now=self.now())
        logger.info("Created todo id=%s title=%r", task.id, task.title)
        return task

    def update_task(self, task_id: str, data: TaskUpdate) -> Task:
        task_id = require_id(task_id)
        if self._store.get_by_id(task_id) is None:
            raise NotFoundError(f"Todo with ID {task_id} not found", {"id": task_id})

        changes = normalize_update(data)
        updated = self._store.update(task_id, changes, now=self.now())
        if updated is None:
            # Deleted between the existence check and the write.
            raise NotFoundError(f"Todo with ID {task_id} not found", {"id": task_id})
        logger.info("Updated todo id=%s fields=%s", task_id, sorted(changes))
        return updated

    def delete_task(self, task_id: str) -> bool:
        task_id = require_id(task_id)
        if not self._store.delete(task_id):
            raise NotFoundError(f"Todo with ID {task_id} not found", {"id": task_id})
        logger.info("Deleted todo id=%s", task_id)
        return True

    def complete_task(self, task_id: str) -> Task:
        return self.update_task(task_id, TaskUpdate(completed=True))

    def uncomplete_task(self, task_id: str) -> Task:
        return self.update_task(task_id, TaskUpdate(completed=False))

    # ---- queries ----

    def get_task(self, task_id: str) -> Task:
        task_id = require_id(task_id)
        task = self._store.get_by_id(task_id)
        if task is None:
            raise NotFoundError(f"Todo with ID {task_id} not found", {"id": task_id})
        return task

    def list_tasks(self, task_filter: TaskFilter | None = None, limit: int | None = None) -> list[Task]:
        n = check_limit(limit)
        return task_query.paginate(self._store.get_all(task_filter), n)

    def all_tasks(self) -> list[Task]:
        return self._store.get_all()

    def search_tasks(self, query: str | None, limit: int | None = None) -> list[Task]:
        n = check_limit(limit)
        return task_query.paginate(task_query.search_tasks(self._store.get_all(), query), n)

    def completed_tasks(self) -> list[Task]:
        return self._store.get_all(TaskFilter(completed=True))

    def pending_tasks(self) -> list[Task]:
        return self._store.get_all(TaskFilter(completed=False))

    def overdue_tasks(self) -> list[Task]:
        return task_query.overdue_tasks(self.pending_tasks(), self.now())

    def tasks_by_priority(self, priority: str | Priority) -> list[Task]:
        return self._store.get_all(TaskFilter(priority=normalize_priority(priority)))

    def tasks_by_tag(self, tag: str | None) -> list[Task]:
        cleaned = (tag or "").strip()
        if not cleaned:
            raise ValidationError("Tag is required", {"field": "tag"})
        return self._store.get_all(TaskFilter(tag=cleaned))

    def all_tags(self) -> list[str]:
        return task_query.distinct_tags(self._store.get_all())

    def get_stats(self) -> TaskStats:
        return compute_stats(self._store.get_all(), self.now())

    # ---- maintenance ----

    def db_stats(self) -> dict[str, Any]:
        return self._store.db_stats()

    def vacuum(self) -> None:
        self._store.vacuum()

    def close(self) -> None:
        self._store.close()
