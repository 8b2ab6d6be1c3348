from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class MembershipState(str, Enum):
    ACTIVE = "A"
    INACTIVE = "I"


@dataclass
class Membership:
    person_id: int
    state: MembershipState = MembershipState.ACTIVE
    started_at: Optional[date] = None
    membership_signed: bool = False
    transferred: bool = False
    name_last_church: Optional[str] = None
    baptized: bool = False
    baptism_date: Optional[date] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
