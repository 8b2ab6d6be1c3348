"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from member_registry_api.app.core.config import Settings
from member_registry_api.app.core.db import init_db
from member_registry_api.app.main import create_app
from member_registry_api.app.models import Principal, Role
from member_registry_api.app.services.address_service import AddressService
from member_registry_api.app.services.auth_service import AuthService
from member_registry_api.app.services.membership_service import MembershipService
from member_registry_api.app.services.person_service import PersonService
from member_registry_api.app.services.phone_service import PhoneService

from .fakes import (
    FakeAddressRepository,
    FakeMembershipRepository,
    FakePersonRepository,
    FakePhoneRepository,
    FakeUserRepository,
    StubVerifier,
)


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throw-away database file."""
    return Settings(
        secret_key="test-secret",
        database_url=str(tmp_path / "registry.db"),
        default_admin_user="admin",
        default_admin_password="admin-pass",
        log_level="WARNING",
    )


@pytest.fixture
def database_url(settings):
    init_db(settings.database_url)
    return settings.database_url


@pytest.fixture
def verifier():
    return StubVerifier()


@pytest.fixture
def user_repo():
    return FakeUserRepository()


@pytest.fixture
def person_repo():
    return FakePersonRepository()


@pytest.fixture
def auth_service(user_repo, settings, verifier):
    return AuthService(user_repo, settings, verifier)


@pytest.fixture
def person_service(person_repo):
    return PersonService(person_repo)


@pytest.fixture
def address_service(person_repo):
    return AddressService(FakeAddressRepository(), person_repo)


@pytest.fixture
def phone_service(person_repo):
    return PhoneService(FakePhoneRepository(), person_repo)


@pytest.fixture
def membership_service(person_repo):
    return MembershipService(FakeMembershipRepository(), person_repo)


@pytest.fixture
def alice():
    return Principal(id=1, role=Role.USER)


@pytest.fixture
def bob():
    return Principal(id=2, role=Role.USER)


@pytest.fixture
def client(settings, verifier):
    """Test client for an app backed by a temporary SQLite database.

    Entering the client runs the lifespan, which applies migrations and
    creates the ``admin`` account.
    """
    app = create_app(settings, verifier=verifier)
    with TestClient(app) as test_client:
        yield test_client
