# src/todo_mcp/mcp/formatting.py

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from ..tasks.task_models import Task, TaskStats

DONE_MARK = "✅"
OPEN_MARK = "⭕"


def task_line(task: Task) -> str:
    mark = DONE_MARK if task.completed else OPEN_MARK
    line = f"{mark} {task.title} ({task.priority.value}) [{task.id}]"
    if task.due_date is not None:
        line += f" - Due: {task.due_date.date().isoformat()}"
    return line


def task_lines(tasks: Iterable[Task]) -> str:
    return "\n".join(task_line(t) for t in tasks)


def list_result_text(tasks: list[Task]) -> str:
    if not tasks:
        return "No todos found matching the criteria"
    return f"Found {len(tasks)} todos:\n\n{task_lines(tasks)}"


def search_result_text(tasks: list[Task], query: str) -> str:
    if not tasks:
        return f'No todos found matching "{query}"'
    return f'Found {len(tasks)} todos matching "{query}":\n\n{task_lines(tasks)}'


def stats_text(stats: TaskStats) -> str:
    by_priority = stats.to_dict()["byPriority"]
    return "\n".join(
        [
            "📊 Todo Statistics:",
            f"• Total: {stats.total}",
            f"• Completed: {stats.completed}",
            f"• Pending: {stats.pending}",
            f"• Overdue: {stats.overdue}",
            "",
            "📈 By Priority:",
            f"• High: {by_priority['high']}",
            f"• Medium: {by_priority['medium']}",
            f"• Low: {by_priority['low']}",
        ]
    )


def to_json(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def tasks_json(tasks: Iterable[Task]) -> str:
    return to_json([t.to_dict() for t in tasks])
