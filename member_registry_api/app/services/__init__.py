"""
Service layer.

Each service encapsulates the business rules of one domain and talks
to storage only through the repository protocols in
``repositories.base``.  ``ServiceContainer`` wires the SQLite
repositories and the services together from a single ``Settings``
instance.
"""

from dataclasses import dataclass
from typing import Optional

from ..core.config import Settings
from ..repositories import (
    SQLiteAddressRepository,
    SQLiteMembershipRepository,
    SQLitePersonRepository,
    SQLitePhoneRepository,
    SQLiteUserRepository,
)
from .address_service import AddressService
from .auth_service import AuthService, HumanVerifier
from .membership_service import MembershipService
from .person_service import PersonService
from .phone_service import PhoneService
from .recaptcha_service import RecaptchaVerifier


@dataclass(frozen=True)
class ServiceContainer:
    auth: AuthService
    persons: PersonService
    addresses: AddressService
    phones: PhoneService
    memberships: MembershipService

    @classmethod
    def build(cls, settings: Settings, verifier: Optional[HumanVerifier] = None) -> "ServiceContainer":
        """Create SQLite-backed services for ``settings``.

        ``verifier`` replaces the reCAPTCHA client, e.g. in tests.
        """
        database_url = settings.database_url
        persons = SQLitePersonRepository(database_url)
        return cls(
            auth=AuthService(
                SQLiteUserRepository(database_url),
                settings,
                verifier if verifier is not None else RecaptchaVerifier.from_settings(settings),
            ),
            persons=PersonService(persons),
            addresses=AddressService(SQLiteAddressRepository(database_url), persons),
            phones=PhoneService(SQLitePhoneRepository(database_url), persons),
            memberships=MembershipService(SQLiteMembershipRepository(database_url), persons),
        )
