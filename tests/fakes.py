"""In-memory repositories and collaborators for service-level tests."""

import copy
from datetime import datetime
from typing import Dict, List, Optional

from member_registry_api.app.core.exceptions import DuplicateUsernameError
from member_registry_api.app.models import DocType, Membership, Person, User


class _Store:
    def __init__(self):
        self.rows: Dict[int, object] = {}
        self.next_id = 1

    def put(self, entity):
        now = datetime.now()
        if entity.id is None:
            entity.id = self.next_id
            self.next_id += 1
            entity.created_at = now
        entity.updated_at = now
        self.rows[entity.id] = copy.deepcopy(entity)
        return copy.deepcopy(entity)

    def get(self, entity_id):
        row = self.rows.get(entity_id)
        return copy.deepcopy(row) if row is not None else None

    def values(self):
        return [copy.deepcopy(row) for row in self.rows.values()]


class FakeUserRepository:
    def __init__(self):
        self.store = _Store()

    def save(self, user: User) -> User:
        for existing in self.store.rows.values():
            if existing.username == user.username and existing.id != user.id:
                raise DuplicateUsernameError()
        return self.store.put(user)

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.store.get(user_id)

    def find_by_username(self, username: str) -> Optional[User]:
        return next((user for user in self.store.values() if user.username == username), None)

    def count(self) -> int:
        return len(self.store.rows)


class FakePersonRepository:
    def __init__(self):
        self.store = _Store()

    def save(self, person: Person) -> Person:
        return self.store.put(person)

    def find_by_id(self, person_id: int) -> Optional[Person]:
        return self.store.get(person_id)

    def find_by_user_id(self, user_id: int) -> Optional[Person]:
        return next((p for p in self.store.values() if p.user_id is not None and p.user_id == user_id), None)

    def find_by_document(self, doc_type: DocType, doc_number: str) -> Optional[Person]:
        return next(
            (p for p in self.store.values() if p.doc_type == doc_type and p.doc_number == doc_number),
            None,
        )

    def search(self, term: str, limit: int) -> List[Person]:
        needle = " ".join(term.casefold().split())
        matches = [
            p
            for p in self.store.values()
            if needle in " ".join(f"{p.name} {p.middle_name} {p.last_name}".casefold().split())
            or p.doc_number == term
        ]
        matches.sort(key=lambda p: p.id, reverse=True)
        return matches[:limit]

    def delete(self, person_id: int) -> bool:
        return self.store.rows.pop(person_id, None) is not None


class FakeContactRepository:
    def __init__(self):
        self.store = _Store()

    def save(self, item):
        return self.store.put(item)

    def insert_below_limit(self, item, limit: int):
        if self.count_by_person(item.person_id) >= limit:
            return None
        return self.store.put(item)

    def find_by_id(self, item_id: int):
        return self.store.get(item_id)

    def list_by_person(self, person_id: int):
        return [item for item in self.store.values() if item.person_id == person_id]

    def count_by_person(self, person_id: int) -> int:
        return len(self.list_by_person(person_id))

    def delete(self, item_id: int) -> bool:
        return self.store.rows.pop(item_id, None) is not None


class FakeAddressRepository(FakeContactRepository):
    pass


class FakePhoneRepository(FakeContactRepository):
    pass


class FakeMembershipRepository:
    def __init__(self):
        self.store = _Store()

    def save(self, membership: Membership) -> Membership:
        return self.store.put(membership)

    def find_by_id(self, membership_id: int) -> Optional[Membership]:
        return self.store.get(membership_id)

    def find_by_person_id(self, person_id: int) -> Optional[Membership]:
        return next((m for m in self.store.values() if m.person_id == person_id), None)

    def list_all(self) -> List[Membership]:
        return self.store.values()

    def delete(self, membership_id: int) -> bool:
        return self.store.rows.pop(membership_id, None) is not None


class StubVerifier:
    """Human verifier that accepts exactly one token value."""

    def __init__(self, accepted: str = "human"):
        self.accepted = accepted
        self.calls: List[str] = []

    def verify(self, token: str) -> bool:
        self.calls.append(token)
        return token == self.accepted
