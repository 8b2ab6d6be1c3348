"""Pydantic models for memberships."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..models import MembershipState


class MembershipFields(BaseModel):
    """The mutable facts of a membership.

    Updates overwrite every field, so omitted values are reset to their
    defaults.  A missing ``state`` means active.
    """

    started_at: Optional[date] = Field(None, examples=["2024-01-01"])
    membership_signed: bool = False
    state: Optional[MembershipState] = Field(None, description="A = active, I = inactive")
    transferred: bool = False
    name_last_church: Optional[str] = Field(None, examples=["Iglesia Anterior"])
    baptized: bool = False
    baptism_date: Optional[date] = Field(None, examples=["2024-01-01"])


class MembershipCreate(MembershipFields):
    person_id: int = Field(..., examples=[1])


class MembershipRead(BaseModel):
    id: int
    person_id: int
    started_at: Optional[date] = None
    membership_signed: bool
    state: MembershipState
    transferred: bool
    name_last_church: Optional[str] = None
    baptized: bool
    baptism_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
