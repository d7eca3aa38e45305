# src/todo_mcp/tasks/task_stats.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .task_models import Priority, Task, TaskStats
from .task_query import is_overdue


def compute_stats(tasks: Iterable[Task], now: datetime) -> TaskStats:
    """Aggregate counts over the full task set, evaluated at a single instant."""
    total = 0
    completed = 0
    overdue = 0
    by_priority = {p: 0 for p in Priority}

    for task in tasks:
        total += 1
        if task.completed:
            completed += 1
        elif is_overdue(task, now):
            overdue += 1
        by_priority[task.priority] += 1

    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
        by_priority=by_priority,
    )
