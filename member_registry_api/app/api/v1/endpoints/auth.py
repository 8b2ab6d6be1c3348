"""
Authentication endpoints for API v1.

Registration and login are public.  Login requires a reCAPTCHA token in
addition to the credentials; the returned bearer token is valid for
the configured lifetime and cannot be revoked.
"""

from fastapi import APIRouter, Depends, status

from member_registry_api.app.core.security import get_current_principal
from member_registry_api.app.dependencies import get_auth_service
from member_registry_api.app.models import Principal
from member_registry_api.app.schemas.user import (
    LoginRequest,
    LoginResponse,
    LoginUser,
    ProfileRead,
    RegisterRequest,
    UserRead,
)
from member_registry_api.app.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, auth: AuthService = Depends(get_auth_service)) -> UserRead:
    """Create a new account with the ``user`` role.

    Returns HTTP 409 if the username is already taken.
    """
    user = await auth.register(payload.username, payload.password)
    return UserRead.model_validate(user)


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)) -> LoginResponse:
    """Verify the client with reCAPTCHA, check credentials and return a token.

    A failed verification and wrong credentials both yield HTTP 401.
    """
    token, role = await auth.authenticate(payload.username, payload.password, payload.recaptcha_token)
    return LoginResponse(access_token=token, user=LoginUser(username=payload.username, role=role))


@router.get("/profile", response_model=ProfileRead)
async def profile(principal: Principal = Depends(get_current_principal)) -> ProfileRead:
    """Echo the identity carried by the caller's token."""
    return ProfileRead(user_id=principal.id, role=principal.role)
