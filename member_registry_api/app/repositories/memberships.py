"""SQLite storage for memberships."""

from __future__ import annotations

import sqlite3
from typing import List, Optional

from ..core.db import get_connection
from ..core.exceptions import AlreadyExistsError, NotFoundError
from ..models import Membership, MembershipState
from .base import format_date, parse_date, parse_timestamp

_COLUMNS = (
    "person_id",
    "started_at",
    "membership_signed",
    "state",
    "transferred",
    "name_last_church",
    "baptized",
    "baptism_date",
)


class SQLiteMembershipRepository:
    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def save(self, membership: Membership) -> Membership:
        values = (
            membership.person_id,
            format_date(membership.started_at),
            int(membership.membership_signed),
            membership.state.value,
            int(membership.transferred),
            membership.name_last_church,
            int(membership.baptized),
            format_date(membership.baptism_date),
        )
        conn = get_connection(self.database_url)
        try:
            cursor = conn.cursor()
            if membership.id is None:
                placeholders = ", ".join("?" for _ in _COLUMNS)
                cursor.execute(
                    f"INSERT INTO memberships ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                    values,
                )
                membership_id = cursor.lastrowid
            else:
                assignments = ", ".join(f"{column} = ?" for column in _COLUMNS)
                cursor.execute(
                    f"UPDATE memberships SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    values + (membership.id,),
                )
                if cursor.rowcount == 0:
                    raise NotFoundError("Membership not found")
                membership_id = membership.id
            conn.commit()
            row = cursor.execute("SELECT * FROM memberships WHERE id = ?", (membership_id,)).fetchone()
            return self.row_to_membership(row)
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            message = str(exc)
            if "memberships.person_id" in message:
                raise AlreadyExistsError("Person already has a membership") from exc
            if "FOREIGN KEY" in message:
                raise NotFoundError("Person not found") from exc
            raise
        finally:
            conn.close()

    def find_by_id(self, membership_id: int) -> Optional[Membership]:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute("SELECT * FROM memberships WHERE id = ?", (membership_id,)).fetchone()
            return self.row_to_membership(row) if row else None
        finally:
            conn.close()

    def find_by_person_id(self, person_id: int) -> Optional[Membership]:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(
                "SELECT * FROM memberships WHERE person_id = ?", (person_id,)
            ).fetchone()
            return self.row_to_membership(row) if row else None
        finally:
            conn.close()

    def list_all(self) -> List[Membership]:
        conn = get_connection(self.database_url)
        try:
            rows = conn.execute("SELECT * FROM memberships ORDER BY id ASC").fetchall()
            return [self.row_to_membership(row) for row in rows]
        finally:
            conn.close()

    def delete(self, membership_id: int) -> bool:
        conn = get_connection(self.database_url)
        try:
            cursor = conn.execute("DELETE FROM memberships WHERE id = ?", (membership_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    @staticmethod
    def row_to_membership(row: sqlite3.Row) -> Membership:
        return Membership(
            id=row["id"],
            person_id=row["person_id"],
            started_at=parse_date(row["started_at"]),
            membership_signed=bool(row["membership_signed"]),
            state=MembershipState(row["state"]),
            transferred=bool(row["transferred"]),
            name_last_church=row["name_last_church"],
            baptized=bool(row["baptized"]),
            baptism_date=parse_date(row["baptism_date"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )
