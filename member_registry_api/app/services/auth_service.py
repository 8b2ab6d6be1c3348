"""
Business logic for user accounts and authentication.

``AuthService`` registers users, checks credentials and issues access
tokens.  The public login flow (``authenticate``) first asks the
human-verification gate about the client; credentials are only checked
once the gate has accepted the request.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Tuple

from starlette.concurrency import run_in_threadpool

from ..core.config import Settings
from ..core.exceptions import (
    DuplicateUsernameError,
    HumanVerificationFailedError,
    InvalidCredentialsError,
    NotFoundError,
    VerificationNotConfiguredError,
)
from ..core.security import create_access_token, hash_password, verify_password
from ..models import Role, User
from ..repositories.base import UserRepository

logger = logging.getLogger(__name__)

_DUMMY_PASSWORD_HASH = hash_password("not-a-real-password")


class HumanVerifier(Protocol):
    def verify(self, token: str) -> bool: ...


class AuthService:
    """Registration, login and token issuance."""

    def __init__(
        self,
        users: UserRepository,
        settings: Settings,
        verifier: Optional[HumanVerifier] = None,
    ) -> None:
        self.users = users
        self.settings = settings
        self.verifier = verifier

    async def register(self, username: str, password: str, role: Role = Role.USER) -> User:
        """Create a new account.

        Raises ``DuplicateUsernameError`` if the username is taken.  The
        unique index on ``users.username`` backs the check up when two
        registrations race.
        """
        if self.users.find_by_username(username) is not None:
            raise DuplicateUsernameError()
        password_hash = await run_in_threadpool(hash_password, password)
        user = self.users.save(User(username=username, password_hash=password_hash, role=role))
        logger.info("Registered user %s (id=%s, role=%s)", user.username, user.id, user.role.value)
        return user

    async def login(self, username: str, password: str) -> Tuple[str, Role]:
        """Check credentials and return a fresh access token with the user's role."""
        user = self.users.find_by_username(username)
        # Unknown usernames are checked against a dummy hash so both
        # failures cost one PBKDF2 run.
        stored_hash = user.password_hash if user is not None else _DUMMY_PASSWORD_HASH
        valid = await run_in_threadpool(verify_password, password, stored_hash)
        if user is None or not valid:
            logger.info("Failed login for %s", username)
            raise InvalidCredentialsError()
        logger.info("User %s logged in", username)
        return self.issue_token(user), user.role

    async def authenticate(
        self,
        username: str,
        password: str,
        verification_token: Optional[str],
    ) -> Tuple[str, Role]:
        """Run the human-verification gate, then ``login``.

        A missing token or a rejected one fails the request before the
        credentials are looked at.
        """
        if self.verifier is None:
            raise VerificationNotConfiguredError()
        if not verification_token:
            raise HumanVerificationFailedError("Missing human verification token")
        passed = await run_in_threadpool(self.verifier.verify, verification_token)
        if not passed:
            raise HumanVerificationFailedError()
        return await self.login(username, password)

    async def get_user(self, user_id: int) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def bootstrap_admin(self) -> Optional[User]:
        """Create the configured default administrator on an empty database.

        Does nothing when any user exists or when the default admin
        credentials are not both configured.
        """
        if self.users.count() > 0:
            return None
        logger.info("No users found, creating default admin user")
        if not self.settings.default_admin_user or not self.settings.default_admin_password:
            logger.warning("DEFAULT_ADMIN_USER or DEFAULT_ADMIN_PASSWORD not set; skipping creation")
            return None
        return await self.register(
            self.settings.default_admin_user,
            self.settings.default_admin_password,
            role=Role.ADMIN,
        )

    def issue_token(self, user: User) -> str:
        return create_access_token(
            {"sub": user.id, "role": user.role.value},
            self.settings.secret_key,
            self.settings.access_token_expire_minutes * 60,
        )
