"""FastAPI dependencies that hand the application's services to the routers."""

from __future__ import annotations

from fastapi import Depends, Request

from .services import ServiceContainer
from .services.address_service import AddressService
from .services.auth_service import AuthService
from .services.membership_service import MembershipService
from .services.person_service import PersonService
from .services.phone_service import PhoneService


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_auth_service(services: ServiceContainer = Depends(get_services)) -> AuthService:
    return services.auth


def get_person_service(services: ServiceContainer = Depends(get_services)) -> PersonService:
    return services.persons


def get_address_service(services: ServiceContainer = Depends(get_services)) -> AddressService:
    return services.addresses


def get_phone_service(services: ServiceContainer = Depends(get_services)) -> PhoneService:
    return services.phones


def get_membership_service(services: ServiceContainer = Depends(get_services)) -> MembershipService:
    return services.memberships
