"""
SQLite storage for addresses and phones.

Both tables have the same shape (an owning ``person_id`` and one text
column), so a single implementation parameterised by table and column
serves both.
"""

from __future__ import annotations

import sqlite3
from typing import Callable, Generic, List, Optional, TypeVar

from ..core.db import get_connection
from ..core.exceptions import NotFoundError
from ..models import Address, Phone
from .base import parse_timestamp

T = TypeVar("T", Address, Phone)


class _SQLiteContactRepository(Generic[T]):
    table: str
    value_column: str
    factory: Callable[..., T]

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def save(self, item: T) -> T:
        conn = get_connection(self.database_url)
        try:
            cursor = conn.cursor()
            value = getattr(item, self.value_column)
            if item.id is None:
                cursor.execute(
                    f"INSERT INTO {self.table} (person_id, {self.value_column}) VALUES (?, ?)",
                    (item.person_id, value),
                )
                item_id = cursor.lastrowid
            else:
                cursor.execute(
                    f"UPDATE {self.table} SET person_id = ?, {self.value_column} = ?, "
                    "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (item.person_id, value, item.id),
                )
                if cursor.rowcount == 0:
                    raise NotFoundError(f"{self.value_column.capitalize()} not found")
                item_id = item.id
            conn.commit()
            return self._fetch(cursor, item_id)
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            if "FOREIGN KEY" in str(exc):
                raise NotFoundError("Person not found") from exc
            raise
        finally:
            conn.close()

    def insert_below_limit(self, item: T, limit: int) -> Optional[T]:
        # The count runs inside the INSERT statement, which holds the
        # database write lock for its whole duration.
        conn = get_connection(self.database_url)
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"INSERT INTO {self.table} (person_id, {self.value_column}) "
                f"SELECT ?, ? WHERE (SELECT COUNT(*) FROM {self.table} WHERE person_id = ?) < ?",
                (item.person_id, getattr(item, self.value_column), item.person_id, limit),
            )
            if cursor.rowcount == 0:
                conn.rollback()
                return None
            item_id = cursor.lastrowid
            conn.commit()
            return self._fetch(cursor, item_id)
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            if "FOREIGN KEY" in str(exc):
                raise NotFoundError("Person not found") from exc
            raise
        finally:
            conn.close()

    def find_by_id(self, item_id: int) -> Optional[T]:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(f"SELECT * FROM {self.table} WHERE id = ?", (item_id,)).fetchone()
            return self.row_to_item(row) if row else None
        finally:
            conn.close()

    def list_by_person(self, person_id: int) -> List[T]:
        conn = get_connection(self.database_url)
        try:
            rows = conn.execute(
                f"SELECT * FROM {self.table} WHERE person_id = ? ORDER BY id ASC",
                (person_id,),
            ).fetchall()
            return [self.row_to_item(row) for row in rows]
        finally:
            conn.close()

    def count_by_person(self, person_id: int) -> int:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(
                f"SELECT COUNT(*) AS count FROM {self.table} WHERE person_id = ?",
                (person_id,),
            ).fetchone()
            return row["count"]
        finally:
            conn.close()

    def delete(self, item_id: int) -> bool:
        conn = get_connection(self.database_url)
        try:
            cursor = conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (item_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def _fetch(self, cursor: sqlite3.Cursor, item_id: int) -> T:
        row = cursor.execute(f"SELECT * FROM {self.table} WHERE id = ?", (item_id,)).fetchone()
        return self.row_to_item(row)

    @classmethod
    def row_to_item(cls, row: sqlite3.Row) -> T:
        return cls.factory(
            id=row["id"],
            person_id=row["person_id"],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
            **{cls.value_column: row[cls.value_column]},
        )


class SQLiteAddressRepository(_SQLiteContactRepository[Address]):
    table = "addresses"
    value_column = "address"
    factory = Address


class SQLitePhoneRepository(_SQLiteContactRepository[Phone]):
    table = "phones"
    value_column = "phone"
    factory = Phone
