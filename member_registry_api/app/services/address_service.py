"""Addresses of the caller's person record."""

from ..models import Address
from .contact_service import ContactService

MAX_ADDRESSES_PER_PERSON = 2


class AddressService(ContactService[Address]):
    entity = Address
    value_field = "address"
    kind = "address"
    plural = "addresses"
    limit = MAX_ADDRESSES_PER_PERSON
