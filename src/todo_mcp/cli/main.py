# src/todo_mcp/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the TaskService, then either:
- serves MCP over stdio (default),
- prints statistics as JSON,
- vacuums the database.
"""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
from typing import Optional

from ..config import Settings, get_settings
from ..errors import TodoError
from ..logging_setup import level_from_name, setup_logging
from ..tasks.task_service import TaskService
from .bootstrap import create_server, create_service

logger = logging.getLogger(__name__)


def _shutdown(service: TaskService) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        service.close()
    except Exception:
        logger.exception("Failed to close the task store.")


def _handle_sigterm(signum, _frame) -> None:
    logger.info("Signal %s received, shutting down...", signum)
    raise SystemExit(0)


def cmd_serve(service: TaskService, settings: Settings) -> int:
    server = create_server(service, settings=settings)

    try:
        signal.signal(signal.SIGTERM, _handle_sigterm)
    except (ValueError, OSError):
        # Not on the main thread, or the platform lacks SIGTERM.
        pass

    logger.info("Todo MCP server starting (db=%s)", service.store.location)
    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    return 0


def cmd_stats(service: TaskService, settings: Settings) -> int:
    payload = service.get_stats().to_dict()
    payload["database"] = service.db_stats()
    print(json.dumps(payload, indent=2))
    return 0


def cmd_vacuum(service: TaskService, settings: Settings) -> int:
    service.vacuum()
    print(f"Vacuumed database at: {service.store.location}")
    return 0


COMMANDS = {
    "serve": cmd_serve,
    "stats": cmd_stats,
    "vacuum": cmd_vacuum,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="todo-mcp",
        description="Todo manager exposed over the Model Context Protocol (Python + SQLite).",
    )
    p.add_argument(
        "--db",
        help="Path to SQLite DB or :memory: (default: TODO_DB_PATH or .local/todo-mcp/todos.db)",
    )
    p.add_argument("--log-level", help="Console log level (default: TODO_LOG_LEVEL or INFO)")
    p.add_argument(
        "command",
        nargs="?",
        default="serve",
        choices=sorted(COMMANDS),
        help="serve (default): run the MCP server on stdio; stats: print statistics; vacuum: compact the DB",
    )
    return p


def main(argv: Optional[list[str]] = None) -> int:
    ns = build_parser().parse_args(argv)

    settings = get_settings()
    if ns.db:
        settings = settings.with_db_path(ns.db)

    console_level = level_from_name(ns.log_level or settings.log_level)
    setup_logging(
        log_dir=settings.data_dir if settings.log_to_file else None,
        console_level=console_level,
    )

    try:
        service = create_service(settings=settings)
    except TodoError as e:
        logger.error("Failed to open database %s: %s", settings.db_path, e.message)
        return 1

    try:
        return COMMANDS[ns.command](service, settings)
    except TodoError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        _shutdown(service)
        logger.info("Bye.")


if __name__ == "__main__":
    sys.exit(main())
