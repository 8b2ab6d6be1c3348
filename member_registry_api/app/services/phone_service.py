"""Phone numbers of the caller's person record."""

from ..models import Phone
from .contact_service import ContactService

MAX_PHONES_PER_PERSON = 2


class PhoneService(ContactService[Phone]):
    entity = Phone
    value_field = "phone"
    kind = "phone"
    plural = "phones"
    limit = MAX_PHONES_PER_PERSON
