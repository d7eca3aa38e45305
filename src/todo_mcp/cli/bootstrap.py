# src/todo_mcp/cli/bootstrap.py

"""
CLI bootstrap helpers.

Wiring for the CLI:
- ensures local (gitignored) directories exist,
- wires the SQLite store into a TaskService,
- builds the MCP server around it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastmcp import FastMCP

from ..config import Settings, get_settings
from ..mcp.server import create_mcp_server
from ..tasks.task_service import TaskService
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if not settings.in_memory:
        Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)


def create_service(*, settings: Settings | None = None) -> TaskService:
    """
    Create the TaskService for the configured database.

    Tests pass their own Settings; otherwise the process-wide ones are used.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)
    return TaskService(TaskStore(settings.db_path))


def create_server(service: TaskService, *, settings: Settings | None = None) -> FastMCP:
    if settings is None:
        settings = get_settings()
    return create_mcp_server(service, name=settings.app_name)
