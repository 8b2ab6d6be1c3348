"""
Person endpoints for API v1.

Every authenticated user manages their own profile under ``/me``.
Creating unlinked persons, searching, reading arbitrary records and
deleting are reserved for administrators.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from member_registry_api.app.core.security import get_current_principal, require_admin
from member_registry_api.app.dependencies import get_person_service
from member_registry_api.app.models import Principal
from member_registry_api.app.schemas.person import PersonRead, PersonWrite
from member_registry_api.app.services.person_service import PersonService

router = APIRouter()


@router.get("/me", response_model=PersonRead)
async def get_my_person(
    principal: Principal = Depends(get_current_principal),
    persons: PersonService = Depends(get_person_service),
) -> PersonRead:
    """Return the caller's profile, or HTTP 400 if none exists yet."""
    person = await persons.get_for_principal(principal)
    return PersonRead.model_validate(person)


@router.put("/me", response_model=PersonRead)
async def save_my_person(
    payload: PersonWrite,
    principal: Principal = Depends(get_current_principal),
    persons: PersonService = Depends(get_person_service),
) -> PersonRead:
    """Create the caller's profile (no ``id``) or update it (``id`` given)."""
    person = await persons.create_or_update_for_principal(payload, principal)
    return PersonRead.model_validate(person)


@router.post("/", response_model=PersonRead, status_code=status.HTTP_201_CREATED)
async def create_person(
    payload: PersonWrite,
    _: Principal = Depends(require_admin),
    persons: PersonService = Depends(get_person_service),
) -> PersonRead:
    """Create a person that is not linked to any user (admin only)."""
    person = await persons.create_by_administrator(payload)
    return PersonRead.model_validate(person)


@router.get("/search", response_model=List[PersonRead])
async def search_persons(
    q: str = Query("", description="Name fragment or exact document number"),
    _: Principal = Depends(require_admin),
    persons: PersonService = Depends(get_person_service),
) -> List[PersonRead]:
    """Search persons by name or document number (admin only).

    An empty query returns an empty list.
    """
    results = await persons.search(q)
    return [PersonRead.model_validate(person) for person in results]


@router.get("/{person_id}", response_model=PersonRead)
async def get_person(
    person_id: int,
    _: Principal = Depends(require_admin),
    persons: PersonService = Depends(get_person_service),
) -> PersonRead:
    person = await persons.get(person_id)
    return PersonRead.model_validate(person)


@router.delete("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_person(
    person_id: int,
    _: Principal = Depends(require_admin),
    persons: PersonService = Depends(get_person_service),
) -> None:
    """Delete a person with its addresses, phones and membership (admin only)."""
    await persons.delete(person_id)
