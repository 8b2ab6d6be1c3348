import pytest

from member_registry_api.app.core.exceptions import (
    ForbiddenError,
    LimitExceededError,
    NoProfileError,
    NotFoundError,
)
from member_registry_api.app.models import Sex
from member_registry_api.app.schemas.contact import AddressWrite, PhoneWrite
from member_registry_api.app.schemas.person import PersonWrite
from member_registry_api.app.services.phone_service import PhoneService

from .fakes import FakePhoneRepository


async def create_profile(person_service, principal, name="Alice"):
    return await person_service.create_or_update_for_principal(
        PersonWrite(name=name, last_name="Quispe", sex=Sex.FEMALE), principal
    )


@pytest.mark.asyncio
async def test_contacts_require_a_profile(phone_service, address_service, alice):
    with pytest.raises(NoProfileError):
        await phone_service.create_or_update_for_principal(PhoneWrite(phone="999"), alice)
    with pytest.raises(NoProfileError):
        await address_service.list_for_principal(alice)


@pytest.mark.asyncio
async def test_third_phone_exceeds_limit(person_service, phone_service, alice):
    person = await create_profile(person_service, alice)

    await phone_service.create_or_update_for_principal(PhoneWrite(phone="111"), alice)
    await phone_service.create_or_update_for_principal(PhoneWrite(phone="222"), alice)
    with pytest.raises(LimitExceededError):
        await phone_service.create_or_update_for_principal(PhoneWrite(phone="333"), alice)

    phones = await phone_service.list_for_principal(alice)
    assert [p.phone for p in phones] == ["111", "222"]
    assert all(p.person_id == person.id for p in phones)


@pytest.mark.asyncio
async def test_third_address_exceeds_limit(person_service, address_service, alice):
    await create_profile(person_service, alice)

    for street in ("Av. Uno 1", "Av. Dos 2"):
        await address_service.create_or_update_for_principal(AddressWrite(address=street), alice)
    with pytest.raises(LimitExceededError):
        await address_service.create_or_update_for_principal(AddressWrite(address="Av. Tres 3"), alice)


@pytest.mark.asyncio
async def test_update_at_limit_is_allowed(person_service, phone_service, alice):
    await create_profile(person_service, alice)
    first = await phone_service.create_or_update_for_principal(PhoneWrite(phone="111"), alice)
    await phone_service.create_or_update_for_principal(PhoneWrite(phone="222"), alice)

    updated = await phone_service.create_or_update_for_principal(PhoneWrite(id=first.id, phone="999"), alice)

    assert updated.id == first.id
    assert updated.phone == "999"


@pytest.mark.asyncio
async def test_delete_frees_a_slot(person_service, phone_service, alice):
    await create_profile(person_service, alice)
    first = await phone_service.create_or_update_for_principal(PhoneWrite(phone="111"), alice)
    await phone_service.create_or_update_for_principal(PhoneWrite(phone="222"), alice)

    await phone_service.delete_for_principal(first.id, alice)
    await phone_service.create_or_update_for_principal(PhoneWrite(phone="333"), alice)

    assert [p.phone for p in await phone_service.list_for_principal(alice)] == ["222", "333"]


@pytest.mark.asyncio
async def test_other_users_contacts_are_off_limits(person_service, phone_service, alice, bob):
    await create_profile(person_service, alice)
    await create_profile(person_service, bob, name="Bob")
    phone = await phone_service.create_or_update_for_principal(PhoneWrite(phone="111"), alice)

    with pytest.raises(ForbiddenError):
        await phone_service.create_or_update_for_principal(PhoneWrite(id=phone.id, phone="666"), bob)
    with pytest.raises(ForbiddenError):
        await phone_service.delete_for_principal(phone.id, bob)
    assert [p.phone for p in await phone_service.list_for_principal(alice)] == ["111"]


@pytest.mark.asyncio
async def test_missing_contact_is_not_found(person_service, address_service, alice):
    await create_profile(person_service, alice)

    with pytest.raises(NotFoundError):
        await address_service.create_or_update_for_principal(AddressWrite(id=99, address="x"), alice)
    with pytest.raises(NotFoundError):
        await address_service.delete_for_principal(99, alice)


class RacingPhoneRepository(FakePhoneRepository):
    """Reports free capacity but loses the insert to a concurrent writer."""

    def count_by_person(self, person_id):
        return 0

    def insert_below_limit(self, item, limit):
        return None


@pytest.mark.asyncio
async def test_lost_insert_race_reports_limit(person_service, person_repo, alice):
    await create_profile(person_service, alice)
    service = PhoneService(RacingPhoneRepository(), person_repo)

    with pytest.raises(LimitExceededError):
        await service.create_or_update_for_principal(PhoneWrite(phone="111"), alice)


@pytest.mark.asyncio
async def test_other_users_addresses_are_left_unchanged(person_service, address_service, alice, bob):
    await create_profile(person_service, alice)
    await create_profile(person_service, bob, name="Bob")
    address = await address_service.create_or_update_for_principal(AddressWrite(address="Av. Uno 1"), alice)

    with pytest.raises(ForbiddenError):
        await address_service.create_or_update_for_principal(
            AddressWrite(id=address.id, address="Av. Falsa 123"), bob
        )
    with pytest.raises(ForbiddenError):
        await address_service.delete_for_principal(address.id, bob)

    stored = await address_service.list_for_principal(alice)
    assert [(a.id, a.address) for a in stored] == [(address.id, "Av. Uno 1")]
