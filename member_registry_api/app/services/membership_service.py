"""
Business logic for church memberships.

Each person has at most one membership.  ``state`` is a plain flag:
any update may set any value, with no checks on how the other facts
(signature, baptism) relate to it.
"""

from __future__ import annotations

import logging
from typing import List

from ..core.exceptions import AlreadyExistsError, NotFoundError
from ..models import Membership, MembershipState
from ..repositories.base import MembershipRepository, PersonRepository
from ..schemas.membership import MembershipFields

logger = logging.getLogger(__name__)


class MembershipService:
    def __init__(self, memberships: MembershipRepository, persons: PersonRepository) -> None:
        self.memberships = memberships
        self.persons = persons

    async def create(self, person_id: int, data: MembershipFields) -> Membership:
        """Create the membership of ``person_id``.

        Raises ``NotFoundError`` if the person does not exist and
        ``AlreadyExistsError`` if it already has a membership.  A
        missing state defaults to active.
        """
        if self.persons.find_by_id(person_id) is None:
            raise NotFoundError("Person not found")
        if self.memberships.find_by_person_id(person_id) is not None:
            raise AlreadyExistsError("Person already has a membership")
        membership = Membership(person_id=person_id)
        self._apply(membership, data)
        saved = self.memberships.save(membership)
        logger.info("Created membership %s for person %s", saved.id, person_id)
        return saved

    async def get(self, membership_id: int) -> Membership:
        membership = self.memberships.find_by_id(membership_id)
        if membership is None:
            raise NotFoundError("Membership not found")
        return membership

    async def get_by_person_id(self, person_id: int) -> Membership:
        membership = self.memberships.find_by_person_id(person_id)
        if membership is None:
            raise NotFoundError("Membership not found")
        return membership

    async def list_all(self) -> List[Membership]:
        return self.memberships.list_all()

    async def update(self, membership_id: int, data: MembershipFields) -> Membership:
        """Overwrite every mutable field of an existing membership."""
        membership = await self.get(membership_id)
        self._apply(membership, data)
        saved = self.memberships.save(membership)
        logger.info("Updated membership %s (state=%s)", saved.id, saved.state.value)
        return saved

    async def delete(self, membership_id: int) -> None:
        if not self.memberships.delete(membership_id):
            raise NotFoundError("Membership not found")
        logger.info("Deleted membership %s", membership_id)

    @staticmethod
    def _apply(membership: Membership, data: MembershipFields) -> None:
        membership.started_at = data.started_at
        membership.membership_signed = data.membership_signed
        membership.state = data.state or MembershipState.ACTIVE
        membership.transferred = data.transferred
        membership.name_last_church = data.name_last_church
        membership.baptized = data.baptized
        membership.baptism_date = data.baptism_date
