"""
Domain entities.

These dataclasses are what the repositories load and store and what the
services reason about.  They carry no persistence logic; API payloads
are described separately by the pydantic models in ``schemas``.
"""

from .user import Principal, Role, User
from .person import Address, DocType, Person, Phone, Sex
from .membership import Membership, MembershipState

__all__ = [
    "Address",
    "DocType",
    "Membership",
    "MembershipState",
    "Person",
    "Phone",
    "Principal",
    "Role",
    "Sex",
    "User",
]
