import sqlite3
from datetime import date

import pytest

from member_registry_api.app.core.db import MIGRATIONS, get_connection, init_db
from member_registry_api.app.core.exceptions import (
    AlreadyExistsError,
    DocumentAlreadyExistsError,
    DuplicateUsernameError,
    NotFoundError,
)
from member_registry_api.app.models import (
    Address,
    DocType,
    Membership,
    MembershipState,
    Person,
    Phone,
    Role,
    Sex,
    User,
)
from member_registry_api.app.repositories import (
    SQLiteAddressRepository,
    SQLiteMembershipRepository,
    SQLitePersonRepository,
    SQLitePhoneRepository,
    SQLiteUserRepository,
)


def make_person(**overrides):
    data = {"name": "Alice", "last_name": "Quispe", "sex": Sex.FEMALE}
    data.update(overrides)
    return Person(**data)


def test_init_db_is_idempotent(database_url):
    init_db(database_url)

    conn = get_connection(database_url)
    try:
        versions = [row["version"] for row in conn.execute("SELECT version FROM migrations ORDER BY version")]
    finally:
        conn.close()
    assert versions == [version for version, _ in MIGRATIONS]


def test_user_round_trip_and_unique_username(database_url):
    users = SQLiteUserRepository(database_url)

    saved = users.save(User(username="alice", password_hash="x$y", role=Role.ADMIN))

    assert saved.id is not None
    assert saved.created_at is not None
    assert users.find_by_username("alice") == saved
    assert users.count() == 1
    with pytest.raises(DuplicateUsernameError):
        users.save(User(username="alice", password_hash="x$z"))


def test_person_is_loaded_with_children(database_url):
    persons = SQLitePersonRepository(database_url)
    person = persons.save(make_person(birthday=date(1990, 5, 17), doc_type=DocType.PASSPORT, doc_number="P1"))
    SQLiteAddressRepository(database_url).save(Address(person_id=person.id, address="Av. Uno 1"))
    SQLitePhoneRepository(database_url).save(Phone(person_id=person.id, phone="111"))
    SQLiteMembershipRepository(database_url).save(Membership(person_id=person.id))

    loaded = persons.find_by_id(person.id)

    assert loaded.birthday == date(1990, 5, 17)
    assert loaded.doc_type is DocType.PASSPORT
    assert [a.address for a in loaded.addresses] == ["Av. Uno 1"]
    assert [p.phone for p in loaded.phones] == ["111"]
    assert loaded.membership.state is MembershipState.ACTIVE
    assert persons.find_by_document(DocType.PASSPORT, "P1").id == person.id


def test_document_pair_is_unique_in_storage(database_url):
    persons = SQLitePersonRepository(database_url)
    persons.save(make_person(doc_type=DocType.DNI, doc_number="123"))

    with pytest.raises(DocumentAlreadyExistsError):
        persons.save(make_person(name="Other", doc_type=DocType.DNI, doc_number="123"))

    # Incomplete documents are not constrained.
    persons.save(make_person(doc_type=DocType.DNI))
    persons.save(make_person(doc_type=DocType.DNI))
    persons.save(make_person(doc_type=DocType.CE, doc_number="123"))


def test_one_person_per_user_in_storage(database_url):
    user = SQLiteUserRepository(database_url).save(User(username="alice", password_hash="x$y"))
    persons = SQLitePersonRepository(database_url)
    persons.save(make_person(user_id=user.id))

    with pytest.raises(AlreadyExistsError):
        persons.save(make_person(user_id=user.id))


def test_insert_below_limit_stops_at_limit(database_url):
    person = SQLitePersonRepository(database_url).save(make_person())
    phones = SQLitePhoneRepository(database_url)

    assert phones.insert_below_limit(Phone(person_id=person.id, phone="1"), 2) is not None
    assert phones.insert_below_limit(Phone(person_id=person.id, phone="2"), 2) is not None
    assert phones.insert_below_limit(Phone(person_id=person.id, phone="3"), 2) is None
    assert phones.count_by_person(person.id) == 2


def test_deleting_person_cascades(database_url):
    persons = SQLitePersonRepository(database_url)
    person = persons.save(make_person())
    addresses = SQLiteAddressRepository(database_url)
    memberships = SQLiteMembershipRepository(database_url)
    address = addresses.save(Address(person_id=person.id, address="Av. Uno 1"))
    membership = memberships.save(Membership(person_id=person.id))

    assert persons.delete(person.id) is True

    assert persons.find_by_id(person.id) is None
    assert addresses.find_by_id(address.id) is None
    assert memberships.find_by_id(membership.id) is None
    assert persons.delete(person.id) is False


def test_membership_constraints(database_url):
    person = SQLitePersonRepository(database_url).save(make_person())
    memberships = SQLiteMembershipRepository(database_url)
    memberships.save(Membership(person_id=person.id, state=MembershipState.INACTIVE, baptized=True))

    with pytest.raises(AlreadyExistsError):
        memberships.save(Membership(person_id=person.id))
    with pytest.raises(NotFoundError):
        memberships.save(Membership(person_id=person.id + 100))

    stored = memberships.find_by_person_id(person.id)
    assert stored.state is MembershipState.INACTIVE
    assert stored.baptized is True


def test_invalid_state_is_rejected_by_schema(database_url):
    person = SQLitePersonRepository(database_url).save(make_person())
    conn = get_connection(database_url)
    try:
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO memberships (person_id, state) VALUES (?, 'X')", (person.id,))
    finally:
        conn.close()


def test_search_matches_full_name_case_insensitively(database_url):
    persons = SQLitePersonRepository(database_url)
    maria = persons.save(make_person(name="María", middle_name="José", last_name="Núñez"))
    persons.save(make_person(name="Jorge", last_name="Pérez", doc_type=DocType.DNI, doc_number="4455"))

    assert [p.id for p in persons.search("maría josé", 300)] == [maria.id]
    assert [p.id for p in persons.search("NÚÑEZ", 300)] == [maria.id]
    assert [p.name for p in persons.search("4455", 300)] == ["Jorge"]
    assert persons.search("445", 300) == []


def test_search_returns_newest_first_up_to_limit(database_url):
    persons = SQLitePersonRepository(database_url)
    ids = [persons.save(make_person(name=f"Ana {i}")).id for i in range(3)]

    found = persons.search("ana", 2)

    assert [p.id for p in found] == [ids[2], ids[1]]


def test_updating_a_deleted_record_is_not_found(database_url):
    person = SQLitePersonRepository(database_url).save(make_person())
    phones = SQLitePhoneRepository(database_url)
    addresses = SQLiteAddressRepository(database_url)
    memberships = SQLiteMembershipRepository(database_url)
    phone = phones.save(Phone(person_id=person.id, phone="111"))
    address = addresses.save(Address(person_id=person.id, address="Av. Uno 1"))
    membership = memberships.save(Membership(person_id=person.id))

    phones.delete(phone.id)
    addresses.delete(address.id)
    memberships.delete(membership.id)
    phone.phone = "222"
    address.address = "Av. Dos 2"
    membership.baptized = True

    with pytest.raises(NotFoundError):
        phones.save(phone)
    with pytest.raises(NotFoundError):
        addresses.save(address)
    with pytest.raises(NotFoundError):
        memberships.save(membership)
    assert phones.find_by_id(phone.id) is None
    assert memberships.find_by_person_id(person.id) is None


def test_updating_a_deleted_person_or_missing_user_is_not_found(database_url):
    persons = SQLitePersonRepository(database_url)
    person = persons.save(make_person())
    persons.delete(person.id)
    person.name = "Ghost"

    with pytest.raises(NotFoundError):
        persons.save(person)
    with pytest.raises(NotFoundError):
        SQLiteUserRepository(database_url).save(User(id=999, username="ghost", password_hash="x$y"))
    assert persons.find_by_id(person.id) is None


def test_contact_for_missing_person_is_not_found(database_url):
    phones = SQLitePhoneRepository(database_url)

    with pytest.raises(NotFoundError):
        phones.save(Phone(person_id=999, phone="111"))
    with pytest.raises(NotFoundError):
        phones.insert_below_limit(Phone(person_id=999, phone="111"), 2)
    assert phones.count_by_person(999) == 0


def test_search_ignores_missing_middle_name_and_extra_spaces(database_url):
    persons = SQLitePersonRepository(database_url)
    alice = persons.save(make_person())

    assert [p.id for p in persons.search("alice quispe", 300)] == [alice.id]
    assert [p.id for p in persons.search("ALICE   quispe", 300)] == [alice.id]
