# src/todo_mcp/errors.py

"""
Error kinds surfaced by the task core.

All of them are recoverable by the caller: the MCP layer turns them into
failed-operation responses and the process keeps running.
"""

from __future__ import annotations

from typing import Any


class TodoError(Exception):
    """Base class for task core errors. Always carries a human-readable message."""

    code = "TODO_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(TodoError):
    """Input was rejected; the store is left unchanged."""

    code = "VALIDATION_ERROR"


class NotFoundError(TodoError):
    """The referenced task id has no matching record."""

    code = "NOT_FOUND"


class StorageError(TodoError):
    """The underlying SQLite database failed (I/O, corruption, locking)."""

    code = "STORAGE_ERROR"
