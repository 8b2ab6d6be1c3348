"""
Membership endpoints for API v1.

Any authenticated user may create, read and update memberships;
listing all of them and deleting one are administrative actions.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from member_registry_api.app.core.security import get_current_principal, require_admin
from member_registry_api.app.dependencies import get_membership_service
from member_registry_api.app.models import Principal
from member_registry_api.app.schemas.membership import MembershipCreate, MembershipFields, MembershipRead
from member_registry_api.app.services.membership_service import MembershipService

router = APIRouter()


@router.post("/", response_model=MembershipRead, status_code=status.HTTP_201_CREATED)
async def create_membership(
    payload: MembershipCreate,
    _: Principal = Depends(get_current_principal),
    memberships: MembershipService = Depends(get_membership_service),
) -> MembershipRead:
    """Create the membership of a person.

    Returns HTTP 404 if the person does not exist and HTTP 409 if it
    already has a membership.  ``state`` defaults to ``A``.
    """
    membership = await memberships.create(payload.person_id, payload)
    return MembershipRead.model_validate(membership)


@router.get("/", response_model=List[MembershipRead])
async def list_memberships(
    _: Principal = Depends(require_admin),
    memberships: MembershipService = Depends(get_membership_service),
) -> List[MembershipRead]:
    return [MembershipRead.model_validate(item) for item in await memberships.list_all()]


@router.get("/person/{person_id}", response_model=MembershipRead)
async def get_membership_by_person(
    person_id: int,
    _: Principal = Depends(get_current_principal),
    memberships: MembershipService = Depends(get_membership_service),
) -> MembershipRead:
    membership = await memberships.get_by_person_id(person_id)
    return MembershipRead.model_validate(membership)


@router.get("/{membership_id}", response_model=MembershipRead)
async def get_membership(
    membership_id: int,
    _: Principal = Depends(get_current_principal),
    memberships: MembershipService = Depends(get_membership_service),
) -> MembershipRead:
    membership = await memberships.get(membership_id)
    return MembershipRead.model_validate(membership)


@router.put("/{membership_id}", response_model=MembershipRead)
async def update_membership(
    membership_id: int,
    payload: MembershipFields,
    _: Principal = Depends(get_current_principal),
    memberships: MembershipService = Depends(get_membership_service),
) -> MembershipRead:
    """Overwrite all fields of a membership; omitted fields are reset."""
    membership = await memberships.update(membership_id, payload)
    return MembershipRead.model_validate(membership)


@router.delete("/{membership_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_membership(
    membership_id: int,
    _: Principal = Depends(require_admin),
    memberships: MembershipService = Depends(get_membership_service),
) -> None:
    await memberships.delete(membership_id)
