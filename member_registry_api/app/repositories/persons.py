"""
SQLite storage for persons.

Persons are loaded together with their addresses, phones and
membership.  Children of a batch of persons are fetched with one query
per child table rather than one per person.
"""

from __future__ import annotations

import sqlite3
from typing import Dict, List, Optional

from ..core.db import get_connection
from ..core.exceptions import AlreadyExistsError, DocumentAlreadyExistsError, NotFoundError
from ..models import DocType, Person, Sex
from .base import format_date, parse_date, parse_timestamp
from .contacts import SQLiteAddressRepository, SQLitePhoneRepository
from .memberships import SQLiteMembershipRepository

_COLUMNS = (
    "user_id",
    "name",
    "middle_name",
    "last_name",
    "sex",
    "birthday",
    "doc_type",
    "doc_number",
    "email",
    "photo",
)


def _fold_name(value: Optional[str]) -> Optional[str]:
    """Case-fold ``value`` and collapse whitespace runs to single spaces."""
    return " ".join(value.casefold().split()) if value is not None else None


class SQLitePersonRepository:
    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def save(self, person: Person) -> Person:
        values = (
            person.user_id,
            person.name,
            person.middle_name or "",
            person.last_name,
            person.sex.value,
            format_date(person.birthday),
            person.doc_type.value if person.doc_type else None,
            person.doc_number,
            person.email,
            person.photo,
        )
        conn = get_connection(self.database_url)
        try:
            cursor = conn.cursor()
            if person.id is None:
                placeholders = ", ".join("?" for _ in _COLUMNS)
                cursor.execute(
                    f"INSERT INTO persons ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                    values,
                )
                person_id = cursor.lastrowid
            else:
                assignments = ", ".join(f"{column} = ?" for column in _COLUMNS)
                cursor.execute(
                    f"UPDATE persons SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    values + (person.id,),
                )
                if cursor.rowcount == 0:
                    raise NotFoundError("Person not found")
                person_id = person.id
            conn.commit()
            return self._load_one(conn, "id = ?", (person_id,))
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            message = str(exc)
            if "persons.doc_type" in message:
                raise DocumentAlreadyExistsError() from exc
            if "persons.user_id" in message:
                raise AlreadyExistsError("User already has a person profile") from exc
            raise
        finally:
            conn.close()

    def find_by_id(self, person_id: int) -> Optional[Person]:
        conn = get_connection(self.database_url)
        try:
            return self._load_one(conn, "id = ?", (person_id,))
        finally:
            conn.close()

    def find_by_user_id(self, user_id: int) -> Optional[Person]:
        conn = get_connection(self.database_url)
        try:
            return self._load_one(conn, "user_id = ?", (user_id,))
        finally:
            conn.close()

    def find_by_document(self, doc_type: DocType, doc_number: str) -> Optional[Person]:
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(
                "SELECT * FROM persons WHERE doc_type = ? AND doc_number = ?",
                (doc_type.value, doc_number),
            ).fetchone()
            return self.row_to_person(row) if row else None
        finally:
            conn.close()

    def search(self, term: str, limit: int) -> List[Person]:
        """Match ``term`` against the full name (case-insensitive substring) or the document number."""
        conn = get_connection(self.database_url)
        # SQLite's LIKE and lower() only fold ASCII; names routinely carry accents.
        conn.create_function("fold_name", 1, _fold_name, deterministic=True)
        try:
            rows = conn.execute(
                """
                SELECT * FROM persons
                WHERE instr(fold_name(name || ' ' || middle_name || ' ' || last_name), ?) > 0
                   OR doc_number = ?
                ORDER BY created_at DESC, id DESC
                LIMIT ?
                """,
                (_fold_name(term), term, limit),
            ).fetchall()
            persons = [self.row_to_person(row) for row in rows]
            self._attach_children(conn, persons)
            return persons
        finally:
            conn.close()

    def delete(self, person_id: int) -> bool:
        conn = get_connection(self.database_url)
        try:
            cursor = conn.execute("DELETE FROM persons WHERE id = ?", (person_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def _load_one(self, conn: sqlite3.Connection, where: str, params: tuple) -> Optional[Person]:
        row = conn.execute(f"SELECT * FROM persons WHERE {where}", params).fetchone()
        if not row:
            return None
        person = self.row_to_person(row)
        self._attach_children(conn, [person])
        return person

    @staticmethod
    def _attach_children(conn: sqlite3.Connection, persons: List[Person]) -> None:
        if not persons:
            return
        by_id: Dict[int, Person] = {person.id: person for person in persons}
        placeholders = ", ".join("?" for _ in by_id)
        ids = tuple(by_id)
        for row in conn.execute(
            f"SELECT * FROM addresses WHERE person_id IN ({placeholders}) ORDER BY id ASC", ids
        ):
            by_id[row["person_id"]].addresses.append(SQLiteAddressRepository.row_to_item(row))
        for row in conn.execute(
            f"SELECT * FROM phones WHERE person_id IN ({placeholders}) ORDER BY id ASC", ids
        ):
            by_id[row["person_id"]].phones.append(SQLitePhoneRepository.row_to_item(row))
        for row in conn.execute(
            f"SELECT * FROM memberships WHERE person_id IN ({placeholders})", ids
        ):
            by_id[row["person_id"]].membership = SQLiteMembershipRepository.row_to_membership(row)

    @staticmethod
    def row_to_person(row: sqlite3.Row) -> Person:
        return Person(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            middle_name=row["middle_name"],
            last_name=row["last_name"],
            sex=Sex(row["sex"]),
            birthday=parse_date(row["birthday"]),
            doc_type=DocType(row["doc_type"]) if row["doc_type"] else None,
            doc_number=row["doc_number"],
            email=row["email"],
            photo=row["photo"],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )
