"""
Pydantic models for addresses and phones.

Write payloads never name the owning person: it is always the person
linked to the authenticated user.  An ``id`` turns the write into an
update of that record.
"""

from typing import Optional

from pydantic import BaseModel, Field


class AddressWrite(BaseModel):
    id: Optional[int] = Field(None, description="Existing address to update; omit to create")
    address: str = Field(..., min_length=1, examples=["Av. Los Pinos 123"])


class AddressRead(BaseModel):
    id: int
    person_id: int
    address: str

    model_config = {"from_attributes": True}


class PhoneWrite(BaseModel):
    id: Optional[int] = Field(None, description="Existing phone to update; omit to create")
    phone: str = Field(..., min_length=1, examples=["+51 987 654 321"])


class PhoneRead(BaseModel):
    id: int
    person_id: int
    phone: str

    model_config = {"from_attributes": True}
