"""SQLite storage for the tasks collection.

Rows are plain dicts keyed by column name. Timestamps are REAL epoch seconds
and ``is_deleted`` is returned as a bool.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from ..models import TaskPriority, TaskStatus

COLUMNS = (
    "id",
    "title",
    "description",
    "status",
    "priority",
    "due_date",
    "completed_at",
    "is_deleted",
    "deleted_at",
    "created_at",
    "updated_at",
)


def _rank(column: str, members: list) -> str:
    cases = " ".join(f"WHEN '{m.value}' THEN {i}" for i, m in enumerate(members))
    return f"CASE {column} {cases} ELSE {len(members)} END"


# Sort keys accepted by TaskCollection.find; status and priority sort by
# lifecycle/severity order, not alphabetically.
SORT_EXPRESSIONS = {
    "created_at": "created_at",
    "updated_at": "updated_at",
    "due_date": "due_date",
    "title": "title COLLATE NOCASE",
    "status": _rank("status", list(TaskStatus)),
    "priority": _rank("priority", list(TaskPriority)),
}


def _icontains(haystack: str | None, needle: str | None) -> int:
    if haystack is None or needle is None:
        return 0
    return int(needle.casefold() in haystack.casefold())


def get_connection(db_path: Path, timeout: float = 30.0) -> sqlite3.Connection:
    """Get a database connection with WAL mode enabled."""
    conn = sqlite3.connect(db_path, timeout=timeout)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.create_function("icontains", 2, _icontains, deterministic=True)
    return conn


@contextmanager
def get_db(db_path: Path, timeout: float = 30.0) -> Iterator[sqlite3.Connection]:
    """Context manager for database connections."""
    conn = get_connection(db_path, timeout)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: Path, timeout: float = 30.0) -> None:
    """Initialize the database schema."""
    with get_db(db_path, timeout) as conn:
        conn.execute(f"""
            CREATE TABLE IF NOT EXISTS tasks (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                status TEXT NOT NULL DEFAULT '{TaskStatus.TODO.value}',
                priority TEXT NOT NULL DEFAULT '{TaskPriority.MEDIUM.value}',
                due_date REAL,
                completed_at REAL,
                is_deleted INTEGER NOT NULL DEFAULT 0,
                deleted_at REAL,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL
            )
        """)
        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_tasks_deleted_status
            ON tasks(is_deleted, status, created_at)
        """)
        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_tasks_created_at
            ON tasks(created_at)
        """)


def _row_to_dict(row: sqlite3.Row) -> dict:
    doc = dict(row)
    doc["is_deleted"] = bool(doc["is_deleted"])
    return doc


def _check_columns(names) -> None:
    unknown = set(names) - set(COLUMNS)
    if unknown:
        raise ValueError(f"Unknown task columns: {sorted(unknown)}")


class TaskCollection:
    """The ``tasks`` table, addressed by task id.

    Every method opens its own connection, so an instance can be shared
    between threads.
    """

    def __init__(self, db_path: str | Path, timeout: float = 30.0) -> None:
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        init_db(self.db_path, self.timeout)

    def _db(self):
        return get_db(self.db_path, self.timeout)

    def insert(self, doc: dict) -> dict:
        """Insert a new row and return it as stored."""
        _check_columns(doc)
        names = ", ".join(doc)
        marks = ", ".join("?" for _ in doc)
        with self._db() as conn:
            conn.execute(
                f"INSERT INTO tasks ({names}) VALUES ({marks})",
                tuple(doc.values()),
            )
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (doc["id"],)).fetchone()
        return _row_to_dict(row)

    def get(self, task_id: str, *, is_deleted: bool | None = None) -> dict | None:
        """Get a row by id, optionally requiring a delete-flag value."""
        sql = "SELECT * FROM tasks WHERE id = ?"
        params: list[Any] = [task_id]
        if is_deleted is not None:
            sql += " AND is_deleted = ?"
            params.append(int(is_deleted))
        with self._db() as conn:
            row = conn.execute(sql, params).fetchone()
        return _row_to_dict(row) if row else None

    def find(
        self,
        *,
        status: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        include_deleted: bool = False,
        due_from: float | None = None,
        due_to: float | None = None,
        sort: str = "created_at",
        descending: bool = True,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[dict], int]:
        """Return one page of matching rows and the total match count.

        Both reads run inside a single transaction so they see the same
        snapshot.
        """
        clauses = []
        params: list[Any] = []

        if not include_deleted:
            clauses.append("is_deleted = 0")
        if status:
            clauses.append("status = ?")
            params.append(status)
        if priority:
            clauses.append("priority = ?")
            params.append(priority)
        if search:
            clauses.append("(icontains(title, ?) OR icontains(description, ?))")
            params.extend([search, search])
        if due_from is not None:
            clauses.append("due_date >= ?")
            params.append(due_from)
        if due_to is not None:
            clauses.append("due_date <= ?")
            params.append(due_to)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        direction = "DESC" if descending else "ASC"
        order = f"ORDER BY {SORT_EXPRESSIONS[sort]} {direction}, rowid {direction}"

        with self._db() as conn:
            conn.execute("BEGIN")
            total = conn.execute(f"SELECT COUNT(*) FROM tasks {where}", params).fetchone()[0]
            cursor = conn.execute(
                f"SELECT * FROM tasks {where} {order} LIMIT ? OFFSET ?",
                [*params, limit, offset],
            )
            rows = [_row_to_dict(row) for row in cursor.fetchall()]
        return rows, total

    def update(self, task_id: str, fields: dict) -> dict | None:
        """Apply ``fields`` to one row and return it, or None if it is gone."""
        _check_columns(fields)
        if "id" in fields:
            raise ValueError("Task id is immutable")
        assignments = ", ".join(f"{name} = ?" for name in fields)
        with self._db() as conn:
            cursor = conn.execute(
                f"UPDATE tasks SET {assignments} WHERE id = ?",
                [*fields.values(), task_id],
            )
            if cursor.rowcount == 0:
                return None
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_dict(row)

    def delete(self, task_id: str) -> bool:
        """Delete a row by id."""
        with self._db() as conn:
            cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            return cursor.rowcount > 0

    def count(self) -> int:
        with self._db() as conn:
            return conn.execute("SELECT COUNT(*) FROM tasks").fetchone()[0]
