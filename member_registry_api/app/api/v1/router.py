"""
Top-level router for version 1 of the API.

Aggregates the domain routers under a single prefix.  When a new domain
is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import auth, contacts, memberships, persons

router = APIRouter()

# Authentication routes sit directly under the version prefix
# (``/api/v1/login``), the rest get a collection prefix.
router.include_router(auth.router, tags=["auth"])
router.include_router(persons.router, prefix="/persons", tags=["persons"])
router.include_router(contacts.addresses_router, prefix="/addresses", tags=["addresses"])
router.include_router(contacts.phones_router, prefix="/phones", tags=["phones"])
router.include_router(memberships.router, prefix="/memberships", tags=["memberships"])
