import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from ...domain.errors import EmailAlreadyTaken, StorageError
from ...domain.models import User
from ...domain.ports.persistence import UserDirectory


class SQLiteUserDirectory(UserDirectory):
    """SQLite-backed implementation of the user directory.

    Email uniqueness is enforced by the ``users.email`` UNIQUE constraint, so
    concurrent inserts of the same address cannot both succeed.
    """

    def __init__(self, path: Union[Path, str]) -> None:
        if str(path) != ":memory:":
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        with self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )

    def close(self) -> None:
        self._conn.close()

    # Queries ----------------------------------------------------------------
    def list_all(self) -> List[User]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users ORDER BY id ASC")
            rows = cur.fetchall()
        return [self._row_to_user(row) for row in rows]

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def exists_by_email(self, email: str) -> bool:
        with self._lock:
            cur = self._conn.execute("SELECT 1 FROM users WHERE email = ? LIMIT 1", (email,))
            row = cur.fetchone()
        return row is not None

    # Writes -----------------------------------------------------------------
    def insert(self, name: str, email: str, password_hash: str) -> User:
        now = self._now()
        try:
            with self._lock, self._conn:
                cur = self._conn.execute(
                    """
                    INSERT INTO users (name, email, password_hash, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (name, email, password_hash, now, now),
                )
                user_id = cur.lastrowid
                cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
                row = cur.fetchone()
        except sqlite3.IntegrityError as exc:
            if self._is_email_conflict(exc):
                raise EmailAlreadyTaken() from exc
            raise StorageError(f"Failed to insert user: {exc}") from exc
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to insert user: {exc}") from exc
        if not row:
            raise StorageError("Failed to persist user.")
        return self._row_to_user(row)

    def update_fields(self, user_id: int, name: str, email: str) -> None:
        try:
            with self._lock, self._conn:
                cur = self._conn.execute(
                    "UPDATE users SET name = ?, email = ?, updated_at = ? WHERE id = ?",
                    (name, email, self._now(), user_id),
                )
        except sqlite3.IntegrityError as exc:
            if self._is_email_conflict(exc):
                raise EmailAlreadyTaken() from exc
            raise StorageError(f"Failed to update user {user_id}: {exc}") from exc
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to update user {user_id}: {exc}") from exc
        self._require_changed(cur, user_id)

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        try:
            with self._lock, self._conn:
                cur = self._conn.execute(
                    "UPDATE users SET password_hash = ?, updated_at = ? WHERE id = ?",
                    (password_hash, self._now(), user_id),
                )
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to update password for user {user_id}: {exc}") from exc
        self._require_changed(cur, user_id)

    def delete(self, user_id: int) -> None:
        try:
            with self._lock, self._conn:
                cur = self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to delete user {user_id}: {exc}") from exc
        self._require_changed(cur, user_id)

    # Helpers ----------------------------------------------------------------
    @staticmethod
    def _require_changed(cur: sqlite3.Cursor, user_id: int) -> None:
        if cur.rowcount == 0:
            raise StorageError(f"User {user_id} no longer exists")

    @staticmethod
    def _is_email_conflict(exc: sqlite3.IntegrityError) -> bool:
        return "users.email" in str(exc)

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).replace(microsecond=0).isoformat()

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        result = datetime.fromisoformat(value)
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )
