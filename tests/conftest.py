# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_mcp.tasks.task_service import TaskService
from todo_mcp.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "todos.db"


@pytest.fixture()
def store(db_path: Path) -> TaskStore:
    """Real SQLite store on a per-test file; its behavior is part of what we test."""
    return TaskStore(db_path)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def service(store: TaskStore, clock: FakeClock) -> TaskService:
    return TaskService(store, clock=clock)
