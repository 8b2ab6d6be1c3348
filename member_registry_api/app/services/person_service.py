"""
Business logic for person records.

A person is either created by its own user through the profile
endpoint, in which case it is bound to that user and only that user
may change it, or created by an administrator without any owner.  In
both paths a complete identity document (type and number) may belong
to a single person only.
"""

from __future__ import annotations

import logging
from typing import List

from ..core.exceptions import (
    AlreadyExistsError,
    DocumentAlreadyExistsError,
    ForbiddenError,
    NoProfileError,
    NotFoundError,
)
from ..models import Person, Principal
from ..repositories.base import PersonRepository
from ..schemas.person import PersonWrite

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 300


def _person_from_payload(data: PersonWrite) -> Person:
    return Person(
        name=data.name,
        middle_name=data.middle_name,
        last_name=data.last_name,
        sex=data.sex,
        birthday=data.birthday,
        doc_type=data.doc_type,
        doc_number=data.doc_number,
        email=data.email,
        photo=data.photo,
    )


class PersonService:
    def __init__(self, persons: PersonRepository) -> None:
        self.persons = persons

    async def create_or_update_for_principal(self, data: PersonWrite, principal: Principal) -> Person:
        """Create the caller's profile, or update it when ``data.id`` is set.

        Raises ``AlreadyExistsError`` when creating a second profile for
        the same user, ``NotFoundError``/``ForbiddenError`` when updating
        a person that does not exist or belongs to someone else, and
        ``DocumentAlreadyExistsError`` when the document is taken.
        """
        if data.id is None:
            if self.persons.find_by_user_id(principal.id) is not None:
                raise AlreadyExistsError("User already has a person profile")
            person = _person_from_payload(data)
            person.user_id = principal.id
            self._check_document_uniqueness(person)
            saved = self.persons.save(person)
            logger.info("Created person %s for user %s", saved.id, principal.id)
            return saved

        existing = self.persons.find_by_id(data.id)
        if existing is None:
            raise NotFoundError("Person not found")
        if existing.user_id is None or existing.user_id != principal.id:
            raise ForbiddenError("You can only update your own person record")

        existing.name = data.name
        existing.middle_name = data.middle_name
        existing.last_name = data.last_name
        existing.sex = data.sex
        existing.birthday = data.birthday
        existing.doc_type = data.doc_type
        existing.doc_number = data.doc_number
        existing.email = data.email
        existing.photo = data.photo

        self._check_document_uniqueness(existing)
        saved = self.persons.save(existing)
        logger.info("Updated person %s for user %s", saved.id, principal.id)
        return saved

    async def create_by_administrator(self, data: PersonWrite) -> Person:
        """Create a person that is not linked to any user."""
        person = _person_from_payload(data)
        self._check_document_uniqueness(person)
        saved = self.persons.save(person)
        logger.info("Administrator created person %s", saved.id)
        return saved

    async def delete(self, person_id: int) -> None:
        if not self.persons.delete(person_id):
            raise NotFoundError("Person not found")
        logger.info("Deleted person %s", person_id)

    async def get(self, person_id: int) -> Person:
        person = self.persons.find_by_id(person_id)
        if person is None:
            raise NotFoundError("Person not found")
        return person

    async def get_for_principal(self, principal: Principal) -> Person:
        person = self.persons.find_by_user_id(principal.id)
        if person is None:
            raise NoProfileError()
        return person

    async def search(self, term: str) -> List[Person]:
        """Find persons by name fragment or exact document number.

        A blank term returns nothing.  Results are newest first and
        capped at ``SEARCH_LIMIT``.
        """
        term = term.strip()
        if not term:
            return []
        return self.persons.search(term, SEARCH_LIMIT)

    def _check_document_uniqueness(self, person: Person) -> None:
        if not person.has_document:
            return
        existing = self.persons.find_by_document(person.doc_type, person.doc_number)
        # ``person.id`` is None on creation, so any match is a conflict.
        if existing is not None and existing.id != person.id:
            raise DocumentAlreadyExistsError()
