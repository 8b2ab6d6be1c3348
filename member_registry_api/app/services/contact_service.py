"""
Business logic shared by addresses and phones.

Both are small collections hanging off the caller's own person record.
Every operation first resolves that person; a user without a profile
cannot own contact data.  Each collection has a fixed capacity per
person.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from ..core.exceptions import ForbiddenError, LimitExceededError, NoProfileError, NotFoundError
from ..models import Address, Person, Phone, Principal
from ..repositories.base import ContactRepository, PersonRepository

logger = logging.getLogger(__name__)

T = TypeVar("T", Address, Phone)


class ContactService(Generic[T]):
    """Capacity and ownership rules for one kind of contact record.

    Subclasses name the entity, the attribute carrying its value and
    the per-person limit.
    """

    entity: Callable[..., T]
    value_field: str
    kind: str
    plural: str
    limit: int

    def __init__(self, items: ContactRepository[T], persons: PersonRepository) -> None:
        self.items = items
        self.persons = persons

    async def create_or_update_for_principal(self, data: BaseModel, principal: Principal) -> T:
        """Add a record to the caller's person, or update one when ``data.id`` is set."""
        person = self._resolve_person(principal)
        value = getattr(data, self.value_field)
        item_id: Optional[int] = getattr(data, "id", None)

        if item_id is None:
            if self.items.count_by_person(person.id) >= self.limit:
                raise self._limit_error()
            item = self.entity(person_id=person.id, **{self.value_field: value})
            saved = self.items.insert_below_limit(item, self.limit)
            if saved is None:
                # Lost a race with a concurrent insert for the same person.
                raise self._limit_error()
            logger.info("Created %s %s for person %s", self.kind, saved.id, person.id)
            return saved

        existing = self._load_owned(item_id, person, action="update")
        setattr(existing, self.value_field, value)
        saved = self.items.save(existing)
        logger.info("Updated %s %s for person %s", self.kind, saved.id, person.id)
        return saved

    async def delete_for_principal(self, item_id: int, principal: Principal) -> None:
        person = self._resolve_person(principal)
        self._load_owned(item_id, person, action="delete")
        self.items.delete(item_id)
        logger.info("Deleted %s %s of person %s", self.kind, item_id, person.id)

    async def list_for_principal(self, principal: Principal) -> List[T]:
        person = self._resolve_person(principal)
        return self.items.list_by_person(person.id)

    def _resolve_person(self, principal: Principal) -> Person:
        person = self.persons.find_by_user_id(principal.id)
        if person is None:
            raise NoProfileError()
        return person

    def _load_owned(self, item_id: int, person: Person, action: str) -> T:
        item = self.items.find_by_id(item_id)
        if item is None:
            raise NotFoundError(f"{self.kind.capitalize()} not found")
        if item.person_id != person.id:
            raise ForbiddenError(f"You can only {action} your own {self.plural}")
        return item

    def _limit_error(self) -> LimitExceededError:
        return LimitExceededError(f"A person cannot have more than {self.limit} {self.plural}")
