# src/todo_mcp/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Components get settings (or plain values) injected; only this module reads os.environ.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: str

    @property
    def in_memory(self) -> bool:
        return self.db_path == ":memory:"

    def with_db_path(self, db_path: str | Path) -> Settings:
        raw = str(db_path)
        if raw != ":memory:":
            raw = str(Path(raw).expanduser())
        return replace(self, db_path=raw)

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "todo-manager").strip() or "todo-manager"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo-mcp"))

        # ":memory:" is passed through untouched; anything else is a filesystem path.
        raw_db = _env(_k("DB_PATH"), "").strip()
        if raw_db == ":memory:":
            db_path = raw_db
        elif raw_db:
            db_path = str(Path(raw_db).expanduser())
        else:
            db_path = str(data_dir / "todos.db")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            data_dir=data_dir,
            db_path=db_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
