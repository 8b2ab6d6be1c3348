"""
Persistence layer.

``base`` declares the repository protocols the services depend on; the
remaining modules implement them on top of SQLite.
"""

from .contacts import SQLiteAddressRepository, SQLitePhoneRepository
from .memberships import SQLiteMembershipRepository
from .persons import SQLitePersonRepository
from .users import SQLiteUserRepository

__all__ = [
    "SQLiteAddressRepository",
    "SQLiteMembershipRepository",
    "SQLitePersonRepository",
    "SQLitePhoneRepository",
    "SQLiteUserRepository",
]
