"""
Address and phone endpoints for API v1.

Both collections belong to the caller's own person record and are
capped per person.  A ``PUT`` without ``id`` adds a record, with
``id`` it replaces the value of an existing one.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from member_registry_api.app.core.security import get_current_principal
from member_registry_api.app.dependencies import get_address_service, get_phone_service
from member_registry_api.app.models import Principal
from member_registry_api.app.schemas.contact import AddressRead, AddressWrite, PhoneRead, PhoneWrite
from member_registry_api.app.services.address_service import AddressService
from member_registry_api.app.services.phone_service import PhoneService

addresses_router = APIRouter()
phones_router = APIRouter()


@addresses_router.get("/", response_model=List[AddressRead])
async def list_addresses(
    principal: Principal = Depends(get_current_principal),
    addresses: AddressService = Depends(get_address_service),
) -> List[AddressRead]:
    items = await addresses.list_for_principal(principal)
    return [AddressRead.model_validate(item) for item in items]


@addresses_router.put("/", response_model=AddressRead)
async def save_address(
    payload: AddressWrite,
    principal: Principal = Depends(get_current_principal),
    addresses: AddressService = Depends(get_address_service),
) -> AddressRead:
    item = await addresses.create_or_update_for_principal(payload, principal)
    return AddressRead.model_validate(item)


@addresses_router.delete("/{address_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_address(
    address_id: int,
    principal: Principal = Depends(get_current_principal),
    addresses: AddressService = Depends(get_address_service),
) -> None:
    await addresses.delete_for_principal(address_id, principal)


@phones_router.get("/", response_model=List[PhoneRead])
async def list_phones(
    principal: Principal = Depends(get_current_principal),
    phones: PhoneService = Depends(get_phone_service),
) -> List[PhoneRead]:
    items = await phones.list_for_principal(principal)
    return [PhoneRead.model_validate(item) for item in items]


@phones_router.put("/", response_model=PhoneRead)
async def save_phone(
    payload: PhoneWrite,
    principal: Principal = Depends(get_current_principal),
    phones: PhoneService = Depends(get_phone_service),
) -> PhoneRead:
    item = await phones.create_or_update_for_principal(payload, principal)
    return PhoneRead.model_validate(item)


@phones_router.delete("/{phone_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_phone(
    phone_id: int,
    principal: Principal = Depends(get_current_principal),
    phones: PhoneService = Depends(get_phone_service),
) -> None:
    await phones.delete_for_principal(phone_id, principal)
