# src/urgency_ranker/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..core.errors import TaskNotFound
from .task_fields import (
    datetime_to_ts,
    format_id_list,
    format_tags,
    is_valid_tag,
    parse_id_list,
    parse_tags,
    ts_to_datetime,
)
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_TODO_KEYWORDS = ("TODO", "NEXT", "WAITING")
DEFAULT_DONE_KEYWORDS = ("DONE", "CANCELLED")

# Marker for "leave this column alone" in update_task_fields (None clears).
_KEEP: Any = object()


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TaskStore:
    """
    SQLite task store implementing the TaskAccessor port.

    The schema is intentionally simple and migration-safe:
    - create tables if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Named properties (the cached URGENCY among them) live in task_properties.

    Thread-safety:
    - each method opens its own SQLite connection
    - property read-then-write is not atomic; callers serialize per task
    """

    def __init__(
        self,
        db_path: str | Path = "tasks.sqlite3",
        *,
        todo_keywords: Iterable[str] = DEFAULT_TODO_KEYWORDS,
        done_keywords: Iterable[str] = DEFAULT_DONE_KEYWORDS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._todo_keywords = frozenset(k.upper() for k in todo_keywords)
        self._done_keywords = frozenset(k.upper() for k in done_keywords)
        self._clock = clock or _utc_now
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def todo_keywords(self) -> frozenset[str]:
        return self._todo_keywords

    @property
    def done_keywords(self) -> frozenset[str]:
        return self._done_keywords

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    state TEXT,
                    priority TEXT,
                    deadline REAL,
                    created_at REAL,
                    updated_at REAL NOT NULL DEFAULT 0,
                    tags TEXT NOT NULL DEFAULT '',
                    parents TEXT NOT NULL DEFAULT '',
                    children TEXT NOT NULL DEFAULT '',
                    outline_parent_id INTEGER
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("state", "TEXT")
            add_col("priority", "TEXT")
            add_col("deadline", "REAL")
            add_col("created_at", "REAL")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")
            add_col("tags", "TEXT NOT NULL DEFAULT ''")
            add_col("parents", "TEXT NOT NULL DEFAULT ''")
            add_col("children", "TEXT NOT NULL DEFAULT ''")
            add_col("outline_parent_id", "INTEGER")

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS task_properties (
                    task_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    value TEXT NOT NULL,
                    PRIMARY KEY (task_id, name)
                )
                """
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_state ON tasks(state)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_outline ON tasks(outline_parent_id)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_id(task_id: str | int) -> int:
        try:
            return int(str(task_id).strip())
        except ValueError:
            raise TaskNotFound(str(task_id)) from None

    @staticmethod
    def _clean_tags(tags: Iterable[str] | str | None) -> str:
        if tags is None:
            return ""
        items = parse_tags(tags) if isinstance(tags, str) else {t.strip().strip(":") for t in tags}
        bad = [t for t in items if t and not is_valid_tag(t)]
        if bad:
            raise ValueError(f"invalid tag(s): {', '.join(sorted(bad))}")
        return format_tags(items)

    @staticmethod
    def _clean_priority(priority: str | None) -> str | None:
        if priority is None or not priority.strip():
            return None
        return priority.strip().upper()

    @staticmethod
    def _clean_state(state: str | None) -> str | None:
        if state is None or not state.strip():
            return None
        return state.strip().upper()

    def _row_to_task(self, row: sqlite3.Row, properties: dict[str, str] | None = None) -> Task:
        outline_parent = row["outline_parent_id"]
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            state=row["state"],
            priority=row["priority"],
            deadline=ts_to_datetime(row["deadline"]),
            created_at=ts_to_datetime(row["created_at"]),
            tags=parse_tags(row["tags"]),
            parents=parse_id_list(row["parents"]),
            children=parse_id_list(row["children"]),
            outline_parent_id=str(outline_parent) if outline_parent is not None else None,
            properties=dict(properties or {}),
        )

    def _fetch_row(self, conn: sqlite3.Connection, task_id: str | int) -> sqlite3.Row:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (self._row_id(task_id),)).fetchone()
        if row is None:
            raise TaskNotFound(str(task_id))
        return row

    def _link_children(self, conn: sqlite3.Connection, child_id: int, parent_ids: Iterable[str]) -> None:
        """Record child_id in each existing parent's children list."""
        for pid in parent_ids:
            try:
                prow = self._fetch_row(conn, pid)
            except TaskNotFound:
                logger.debug("Blocking parent %s of task %s does not exist (yet)", pid, child_id)
                continue
            children = parse_id_list(prow["children"])
            if str(child_id) in children:
                continue
            conn.execute(
                "UPDATE tasks SET children = ? WHERE id = ?",
                (format_id_list([*children, str(child_id)]), prow["id"]),
            )

    def _unlink_children(self, conn: sqlite3.Connection, child_id: int, parent_ids: Iterable[str]) -> None:
        for pid in parent_ids:
            try:
                prow = self._fetch_row(conn, pid)
            except TaskNotFound:
                continue
            children = [c for c in parse_id_list(prow["children"]) if c != str(child_id)]
            conn.execute(
                "UPDATE tasks SET children = ? WHERE id = ?",
                (format_id_list(children), prow["id"]),
            )

    # ---- host API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(
        self,
        *,
        title: str,
        state: str | None = "TODO",
        priority: str | None = None,
        deadline: datetime | None = None,
        created_at: datetime | None = None,
        tags: Iterable[str] | str | None = None,
        parents: Iterable[str] = (),
        outline_parent_id: str | None = None,
    ) -> str:
        if not title or not title.strip():
            raise ValueError("title is required")

        now = self._clock()
        created = created_at or now
        parent_ids = parse_id_list(" ".join(parents))

        conn = self._get_conn()
        try:
            outline_row: int | None = None
            if outline_parent_id is not None:
                outline_row = int(self._fetch_row(conn, outline_parent_id)["id"])

            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(
                    title, state, priority, deadline, created_at, updated_at,
                    tags, parents, children, outline_parent_id
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, '', ?)
                """,
                (
                    title.strip(),
                    self._clean_state(state),
                    self._clean_priority(priority),
                    datetime_to_ts(deadline),
                    datetime_to_ts(created),
                    datetime_to_ts(now),
                    self._clean_tags(tags),
                    format_id_list(parent_ids),
                    outline_row,
                ),
            )
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
            self._link_children(conn, task_id, parent_ids)
            conn.commit()
            logger.debug(
                "Task added id=%s state=%s priority=%s parents=%s",
                task_id,
                state,
                priority,
                parent_ids,
            )
            return str(task_id)
        finally:
            conn.close()

    def update_task_fields(
        self,
        task_id: str,
        *,
        title: Any = _KEEP,
        state: Any = _KEEP,
        priority: Any = _KEEP,
        deadline: Any = _KEEP,
        tags: Any = _KEEP,
        parents: Any = _KEEP,
        outline_parent_id: Any = _KEEP,
    ) -> None:
        """
        Update the given columns. Omitted arguments are left untouched,
        None clears a nullable column.

        Changing parents keeps the parents' children lists in sync.
        Cached properties (URGENCY) are NOT touched.
        """
        fields: list[str] = []
        params: list[Any] = []

        conn = self._get_conn()
        try:
            row = self._fetch_row(conn, task_id)
            row_id = int(row["id"])

            if title is not _KEEP:
                if not title or not str(title).strip():
                    raise ValueError("title is required")
                fields.append("title = ?")
                params.append(str(title).strip())

            if state is not _KEEP:
                fields.append("state = ?")
                params.append(self._clean_state(state))

            if priority is not _KEEP:
                fields.append("priority = ?")
                params.append(self._clean_priority(priority))

            if deadline is not _KEEP:
                fields.append("deadline = ?")
                params.append(datetime_to_ts(deadline))

            if tags is not _KEEP:
                fields.append("tags = ?")
                params.append(self._clean_tags(tags))

            if outline_parent_id is not _KEEP:
                outline_row = None
                if outline_parent_id is not None:
                    outline_row = int(self._fetch_row(conn, outline_parent_id)["id"])
                    if outline_row == row_id:
                        raise ValueError("a task cannot be its own outline parent")
                fields.append("outline_parent_id = ?")
                params.append(outline_row)

            if parents is not _KEEP:
                old = parse_id_list(row["parents"])
                new = parse_id_list(" ".join(parents or ()))
                if str(row_id) in new:
                    raise ValueError("a task cannot block itself")
                self._unlink_children(conn, row_id, [p for p in old if p not in new])
                self._link_children(conn, row_id, [p for p in new if p not in old])
                fields.append("parents = ?")
                params.append(format_id_list(new))

            if not fields:
                return

            fields.append("updated_at = ?")
            params.append(datetime_to_ts(self._clock()))
            params.append(row_id)

            conn.execute(f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?", params)
            conn.commit()
        finally:
            conn.close()

    def list_tasks(self, *, actionable_only: bool = False) -> list[Task]:
        """All tasks in insertion order; optionally only actionable, not-done ones."""
        conn = self._get_conn()
        try:
            if actionable_only:
                if not self._todo_keywords:
                    return []
                placeholders = ",".join("?" for _ in self._todo_keywords)
                rows = conn.execute(
                    f"SELECT * FROM tasks WHERE UPPER(state) IN ({placeholders}) ORDER BY id ASC",
                    tuple(sorted(self._todo_keywords)),
                ).fetchall()
            else:
                rows = conn.execute("SELECT * FROM tasks ORDER BY id ASC").fetchall()

            props: dict[int, dict[str, str]] = {}
            for prow in conn.execute("SELECT task_id, name, value FROM task_properties"):
                props.setdefault(int(prow["task_id"]), {})[prow["name"]] = prow["value"]

            return [self._row_to_task(r, props.get(int(r["id"]))) for r in rows]
        finally:
            conn.close()

    def delete_property(self, task_id: str, name: str) -> None:
        conn = self._get_conn()
        try:
            row = self._fetch_row(conn, task_id)
            conn.execute(
                "DELETE FROM task_properties WHERE task_id = ? AND name = ?",
                (int(row["id"]), name),
            )
            conn.commit()
        finally:
            conn.close()

    # ---- TaskAccessor ----

    def resolve_task(self, task_id: str) -> Task:
        conn = self._get_conn()
        try:
            row = self._fetch_row(conn, task_id)
            props = {
                p["name"]: p["value"]
                for p in conn.execute(
                    "SELECT name, value FROM task_properties WHERE task_id = ?",
                    (int(row["id"]),),
                )
            }
            return self._row_to_task(row, props)
        finally:
            conn.close()

    def get_property(self, task_id: str, name: str) -> str | None:
        conn = self._get_conn()
        try:
            row = self._fetch_row(conn, task_id)
            prow = conn.execute(
                "SELECT value FROM task_properties WHERE task_id = ? AND name = ?",
                (int(row["id"]), name),
            ).fetchone()
            return None if prow is None else str(prow["value"])
        finally:
            conn.close()

    def set_property(self, task_id: str, name: str, value: str) -> None:
        if not name or not name.strip():
            raise ValueError("property name is required")
        conn = self._get_conn()
        try:
            row = self._fetch_row(conn, task_id)
            conn.execute(
                """
                INSERT INTO task_properties(task_id, name, value)
                VALUES (?, ?, ?)
                ON CONFLICT(task_id, name) DO UPDATE SET value = excluded.value
                """,
                (int(row["id"]), name, str(value)),
            )
            conn.commit()
        finally:
            conn.close()

    def is_actionable_not_done(self, task_id: str) -> bool:
        state = self.resolve_task(task_id).state
        if not state:
            return False
        label = state.upper()
        return label in self._todo_keywords and label not in self._done_keywords

    def get_tags(self, task_id: str, include_inherited: bool = True) -> frozenset[str]:
        conn = self._get_conn()
        try:
            row = self._fetch_row(conn, task_id)
            tags = set(parse_tags(row["tags"]))
            if not include_inherited:
                return frozenset(tags)

            seen = {int(row["id"])}
            parent = row["outline_parent_id"]
            while parent is not None and int(parent) not in seen:
                seen.add(int(parent))
                prow = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(parent),)).fetchone()
                if prow is None:
                    break
                tags.update(parse_tags(prow["tags"]))
                parent = prow["outline_parent_id"]
            return frozenset(tags)
        finally:
            conn.close()

    def now(self) -> datetime:
        return self._clock()
