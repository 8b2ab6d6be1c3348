"""
Pydantic models for registration, login and the caller's profile.

Passwords only ever travel inbound; no read model exposes the stored
hash.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..models import Role


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=150, examples=["newuser"])
    password: str = Field(..., min_length=1, examples=["password123"])


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: int
    username: str
    role: Role
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    """Credentials plus the client's human-verification token.

    The token is optional in the schema so that a missing value is
    reported as a failed verification (401) rather than a validation
    error.
    """

    username: str = Field(..., examples=["testuser"])
    password: str = Field(..., examples=["password123"])
    recaptcha_token: Optional[str] = Field(None, examples=["03AGdBq27..."])


class LoginUser(BaseModel):
    username: str
    role: Role


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: LoginUser


class ProfileRead(BaseModel):
    message: str = "Welcome!"
    user_id: int
    role: Role
