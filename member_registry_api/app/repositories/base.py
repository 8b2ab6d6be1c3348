"""
Repository interfaces.

Services depend on these protocols rather than on SQLite so that they
can be exercised against in-memory fakes.  Lookups return ``None`` when
nothing matches; ``save`` inserts when the entity has no id and updates
otherwise, returning the stored entity with id and timestamps set.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Protocol, TypeVar

from ..models import Address, DocType, Membership, Person, Phone, User

T = TypeVar("T")


class UserRepository(Protocol):
    def save(self, user: User) -> User: ...

    def find_by_id(self, user_id: int) -> Optional[User]: ...

    def find_by_username(self, username: str) -> Optional[User]: ...

    def count(self) -> int: ...


class PersonRepository(Protocol):
    def save(self, person: Person) -> Person: ...

    def find_by_id(self, person_id: int) -> Optional[Person]: ...

    def find_by_user_id(self, user_id: int) -> Optional[Person]: ...

    def find_by_document(self, doc_type: DocType, doc_number: str) -> Optional[Person]: ...

    def search(self, term: str, limit: int) -> List[Person]: ...

    def delete(self, person_id: int) -> bool: ...


class ContactRepository(Protocol[T]):
    """Storage for the capped child collections of a person (addresses, phones)."""

    def save(self, item: T) -> T: ...

    def insert_below_limit(self, item: T, limit: int) -> Optional[T]:
        """Insert ``item`` only if its person has fewer than ``limit`` items.

        Returns ``None`` when the person is already at the limit.  The
        count and the insert happen atomically.
        """
        ...

    def find_by_id(self, item_id: int) -> Optional[T]: ...

    def list_by_person(self, person_id: int) -> List[T]: ...

    def count_by_person(self, person_id: int) -> int: ...

    def delete(self, item_id: int) -> bool: ...


AddressRepository = ContactRepository[Address]
PhoneRepository = ContactRepository[Phone]


class MembershipRepository(Protocol):
    def save(self, membership: Membership) -> Membership: ...

    def find_by_id(self, membership_id: int) -> Optional[Membership]: ...

    def find_by_person_id(self, person_id: int) -> Optional[Membership]: ...

    def list_all(self) -> List[Membership]: ...

    def delete(self, membership_id: int) -> bool: ...


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def parse_date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def format_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None
