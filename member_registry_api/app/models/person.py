from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .membership import Membership


class Sex(str, Enum):
    FEMALE = "F"
    MALE = "M"


class DocType(str, Enum):
    DNI = "DNI"
    CE = "CE"
    PASSPORT = "passport"


@dataclass
class Address:
    person_id: int
    address: str
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Phone:
    person_id: int
    phone: str
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Person:
    """A member record and the root of its aggregate.

    ``addresses``, ``phones`` and ``membership`` are populated when the
    person is loaded by id or by user; they are never written through
    the person itself.
    """

    name: str
    last_name: str
    sex: Sex
    middle_name: str = ""
    id: Optional[int] = None
    user_id: Optional[int] = None
    birthday: Optional[date] = None
    doc_type: Optional[DocType] = None
    doc_number: Optional[str] = None
    email: Optional[str] = None
    photo: Optional[str] = None
    addresses: List[Address] = field(default_factory=list)
    phones: List[Phone] = field(default_factory=list)
    membership: Optional["Membership"] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_document(self) -> bool:
        return self.doc_type is not None and bool(self.doc_number)
