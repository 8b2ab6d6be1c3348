"""SQLite storage for user accounts."""

from __future__ import annotations

import sqlite3
from typing import Optional

from ..core.db import get_connection
from ..core.exceptions import DuplicateUsernameError, NotFoundError
from ..models import Role, User
from .base import parse_timestamp


class SQLiteUserRepository:
    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def save(self, user: User) -> User:
        conn = get_connection(self.database_url)
        try:
            cursor = conn.cursor()
            if user.id is None:
                cursor.execute(
                    "INSERT INTO users (username, password_hash, role) VALUES (?, ?, ?)",
                    (user.username, user.password_hash, user.role.value),
                )
                user_id = cursor.lastrowid
            else:
                cursor.execute(
                    "UPDATE users SET username = ?, password_hash = ?, role = ?, "
                    "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (user.username, user.password_hash, user.role.value, user.id),
                )
                if cursor.rowcount == 0:
                    raise NotFoundError("User not found")
                user_id = user.id
            conn.commit()
            row = cursor.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            return self._row_to_user(row)
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            if "users.username" in str(exc):
                raise DuplicateUsernameError() from exc
            raise
        finally:
            conn.close()

    def find_by_id(self, user_id: int) -> Optional[User]:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def find_by_username(self, username: str) -> Optional[User]:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def count(self) -> int:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute("SELECT COUNT(*) AS count FROM users").fetchone()
            return row["count"]
        finally:
            conn.close()

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            username=row["username"],
            password_hash=row["password_hash"],
            role=Role(row["role"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )
