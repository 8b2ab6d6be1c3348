"""Error hierarchy for the member registry.

Services raise these errors; the handler registered in ``main`` turns
them into JSON responses with the status code carried by the class.
"""

from __future__ import annotations

from fastapi import status


class MemberRegistryError(Exception):
    """Base application error with HTTP semantics."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "application_error"
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateUsernameError(MemberRegistryError):
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_username"
    default_message = "Username already exists"


class InvalidCredentialsError(MemberRegistryError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class HumanVerificationFailedError(MemberRegistryError):
    """The client did not pass the human-verification gate."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "human_verification_failed"
    default_message = "Human verification failed"


class VerificationNotConfiguredError(MemberRegistryError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "verification_not_configured"
    default_message = "Human verification is not configured"


class VerificationUnavailableError(MemberRegistryError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "verification_unavailable"
    default_message = "Human verification service unavailable"


class NotFoundError(MemberRegistryError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Record not found"


class ForbiddenError(MemberRegistryError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "You can only act on your own records"


class NoProfileError(MemberRegistryError):
    """The principal has no Person linked to its user."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "no_profile"
    default_message = "No person profile found for this user"


class LimitExceededError(MemberRegistryError):
    status_code = status.HTTP_409_CONFLICT
    code = "limit_exceeded"
    default_message = "Maximum number of records reached"


class DocumentAlreadyExistsError(MemberRegistryError):
    status_code = status.HTTP_409_CONFLICT
    code = "document_already_exists"
    default_message = "A person with this document already exists"


class AlreadyExistsError(MemberRegistryError):
    status_code = status.HTTP_409_CONFLICT
    code = "already_exists"
    default_message = "Record already exists"
