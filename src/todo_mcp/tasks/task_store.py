# src/todo_mcp/tasks/task_store.py

from __future__ import annotations

import contextlib
import dataclasses
import json
import logging
import sqlite3
import threading
import uuid
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

from ..errors import StorageError
from .task_models import NewTask, Priority, Task, TaskFilter, to_db_timestamp, to_utc, utcnow
from .task_query import apply_filter

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

_MUTABLE_FIELDS = frozenset({"title", "description", "completed", "priority", "due_date", "tags"})


class TaskStore:
    """
    SQLite task store.

    One table, keyed by a UUID string, ordered by created_at (newest first).

    Thread-safety:
    - file databases: each method opens its own SQLite connection,
      writes are serialized by an instance lock and run as one transaction
    - ":memory:" keeps a single shared connection; every call takes the lock
    """

    def __init__(self, db_path: str | Path = "todos.db") -> None:
        self._memory = str(db_path) == MEMORY_DB
        self._db_path = Path(db_path) if not self._memory else None
        self._lock = threading.Lock()
        self._shared_conn: sqlite3.Connection | None = None

        if self._memory:
            self._shared_conn = sqlite3.connect(MEMORY_DB, check_same_thread=False)
            self._shared_conn.row_factory = sqlite3.Row
        elif self._db_path is not None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)

        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", db_path, self.count_tasks())

    @property
    def location(self) -> str:
        return MEMORY_DB if self._db_path is None else str(self._db_path)

    def close(self) -> None:
        """Only the in-memory database holds a persistent connection."""
        if self._shared_conn is not None:
            with self._lock:
                self._shared_conn.close()
                self._shared_conn = None

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        if self._shared_conn is not None:
            return self._shared_conn
        if self._memory:
            raise StorageError("TaskStore is closed")
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _session(self, *, write: bool = False) -> Iterator[sqlite3.Connection]:
        """
        Yield a connection; commit on success when ``write`` is set.

        sqlite3 errors surface as StorageError; any failure rolls back.
        """
        guard = self._lock if (write or self._memory) else contextlib.nullcontext()
        with guard:
            conn = self._get_conn()
            try:
                yield conn
                if write:
                    conn.commit()
            except sqlite3.Error as e:
                self._rollback(conn)
                logger.error("SQLite failure db=%s: %s", self.location, e)
                raise StorageError(f"Database error: {e}") from e
            except Exception:
                self._rollback(conn)
                raise
            finally:
                if conn is not self._shared_conn:
                    conn.close()

    @staticmethod
    def _rollback(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.rollback()

    def _ensure_schema(self) -> None:
        with self._session(write=True) as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS todos (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT,
                    completed INTEGER NOT NULL DEFAULT 0,
                    priority TEXT NOT NULL DEFAULT 'medium',
                    due_date TEXT,
                    tags TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_todos_completed ON todos(completed)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_todos_priority ON todos(priority)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_todos_due_date ON todos(due_date)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_todos_created_at ON todos(created_at)")

    @staticmethod
    def _tags_to_str(tags: tuple[str, ...]) -> str:
        return json.dumps(list(tags), ensure_ascii=False)

    @staticmethod
    def _str_to_tags(s: str | None) -> tuple[str, ...]:
        if not s:
            return ()
        try:
            val = json.loads(s)
        except json.JSONDecodeError:
            logger.warning("Ignoring undecodable tags column: %r", s)
            return ()
        if not isinstance(val, list):
            return ()
        return tuple(str(t) for t in val)

    @staticmethod
    def _parse_db_timestamp(raw: str | None, *, column: str, task_id: str) -> datetime:
        try:
            return to_utc(datetime.fromisoformat(str(raw)))
        except (TypeError, ValueError) as e:
            raise StorageError(f"Corrupt {column} for todo {task_id}: {raw!r}") from e

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        task_id = str(row["id"])
        due_raw = row["due_date"]
        return Task(
            id=task_id,
            title=str(row["title"]),
            description=row["description"],
            completed=bool(row["completed"]),
            priority=Priority.from_db(row["priority"]),
            due_date=(
                self._parse_db_timestamp(due_raw, column="due_date", task_id=task_id)
                if due_raw
                else None
            ),
            tags=self._str_to_tags(row["tags"]),
            created_at=self._parse_db_timestamp(row["created_at"], column="created_at", task_id=task_id),
            updated_at=self._parse_db_timestamp(row["updated_at"], column="updated_at", task_id=task_id),
        )

    @staticmethod
    def _task_params(task: Task) -> dict[str, Any]:
        return {
            "id": task.id,
            "title": task.title,
            "description": task.description,
            "completed": 1 if task.completed else 0,
            "priority": task.priority.value,
            "due_date": to_db_timestamp(task.due_date) if task.due_date else None,
            "tags": TaskStore._tags_to_str(task.tags),
            "created_at": to_db_timestamp(task.created_at),
            "updated_at": to_db_timestamp(task.updated_at),
        }

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._session() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM todos").fetchone()
            return int(n)

    def create(self, new: NewTask, *, now: datetime | None = None) -> Task:
        stamp = to_utc(now) if now is not None else utcnow()
        task = Task(
            id=str(uuid.uuid4()),
            title=new.title,
            description=new.description,
            completed=False,
            priority=new.priority,
            due_date=new.due_date,
            tags=new.tags,
            created_at=stamp,
            updated_at=stamp,
        )

        with self._session(write=True) as conn:
            conn.execute(
                """
                INSERT INTO todos(
                    id, title, description, completed, priority,
                    due_date, tags, created_at, updated_at
                )
                VALUES (
                    :id, :title, :description, :completed, :priority,
                    :due_date, :tags, :created_at, :updated_at
                )
                """,
                self._task_params(task),
            )

        logger.debug("Todo created id=%s priority=%s", task.id, task.priority.value)
        return task

    def get_by_id(self, task_id: str) -> Task | None:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM todos WHERE id = ?", (task_id,)).fetchone()
            return self._row_to_task(row) if row else None

    def get_all(self, task_filter: TaskFilter | None = None) -> list[Task]:
        """
        All tasks matching ``task_filter``, newest first.

        completed/priority narrow the SQL scan; the full predicate is then
        applied by the query engine.
        """
        where: list[str] = []
        params: list[Any] = []
        if task_filter is not None:
            if task_filter.completed is not None:
                where.append("completed = ?")
                params.append(1 if task_filter.completed else 0)
            if task_filter.priority is not None:
                where.append("priority = ?")
                params.append(task_filter.priority.value)

        sql = "SELECT * FROM todos"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY created_at DESC, rowid DESC"

        with self._session() as conn:
            rows = conn.execute(sql, params).fetchall()
            tasks = [self._row_to_task(r) for r in rows]
        return apply_filter(tasks, task_filter)

    def update(
        self,
        task_id: str,
        changes: dict[str, Any],
        *,
        now: datetime | None = None,
    ) -> Task | None:
        """
        Merge normalized ``changes`` over the stored task and re-stamp updated_at.

        Read and write happen in one IMMEDIATE transaction. Returns None if
        the id does not exist.
        """
        unknown = set(changes) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown todo fields: {', '.join(sorted(unknown))}")

        stamp = to_utc(now) if now is not None else utcnow()

        with self._session(write=True) as conn:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute("SELECT * FROM todos WHERE id = ?", (task_id,)).fetchone()
            if row is None:
                return None
            existing = self._row_to_task(row)
            updated = dataclasses.replace(
                existing,
                **changes,
                updated_at=max(stamp, existing.updated_at),
            )
            conn.execute(
                """
                UPDATE todos
                SET title = :title,
                    description = :description,
                    completed = :completed,
                    priority = :priority,
                    due_date = :due_date,
                    tags = :tags,
                    updated_at = :updated_at
                WHERE id = :id
                """,
                self._task_params(updated),
            )

        logger.debug("Todo updated id=%s fields=%s", task_id, sorted(changes))
        return updated

    def delete(self, task_id: str) -> bool:
        with self._session(write=True) as conn:
            cur = conn.execute("DELETE FROM todos WHERE id = ?", (task_id,))
            deleted = cur.rowcount > 0
        if deleted:
            logger.debug("Todo deleted id=%s", task_id)
        return deleted

    def db_stats(self) -> dict[str, int]:
        with self._session() as conn:
            (count,) = conn.execute("SELECT COUNT(*) FROM todos").fetchone()
            (page_count,) = conn.execute("PRAGMA page_count").fetchone()
            (page_size,) = conn.execute("PRAGMA page_size").fetchone()
        return {"totalTodos": int(count), "dbSize": int(page_count) * int(page_size)}

    def vacuum(self) -> None:
        # VACUUM cannot run inside a transaction; commit anything pending first.
        with self._session(write=True) as conn:
            conn.commit()
            conn.execute("VACUUM")
        logger.info("TaskStore vacuumed db=%s", self.location)
