"""
Pydantic models for person records.

``PersonWrite`` is accepted both by the self-service profile endpoint
and by the administrative creation endpoint.  Addresses and phones are
managed through their own endpoints and are therefore read-only here.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import DocType, Sex
from .contact import AddressRead, PhoneRead
from .membership import MembershipRead


class PersonWrite(BaseModel):
    id: Optional[int] = Field(None, description="Existing person to update; omit to create")
    name: str = Field(..., examples=["María"])
    middle_name: str = Field("", examples=["Quispe"])
    last_name: str = Field(..., examples=["Huamán"])
    sex: Sex
    birthday: Optional[date] = Field(None, examples=["1990-05-17"])
    doc_type: Optional[DocType] = None
    doc_number: Optional[str] = Field(None, examples=["45678912"])
    email: Optional[str] = None
    photo: Optional[str] = None


class PersonRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    name: str
    middle_name: str
    last_name: str
    sex: Sex
    birthday: Optional[date] = None
    doc_type: Optional[DocType] = None
    doc_number: Optional[str] = None
    email: Optional[str] = None
    photo: Optional[str] = None
    addresses: List[AddressRead] = []
    phones: List[PhoneRead] = []
    membership: Optional[MembershipRead] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
