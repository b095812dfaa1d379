# mr_core/iam/identity.py
"""
Who is calling.

Identity is established by one pluggable provider (settings.MR_IDENTITY_PROVIDER)
so production JWT users and test fixtures resolve through the same seam.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_ipv46_address
from django.utils.module_loading import import_string

from mr_core.common.api.exceptions import AuthenticationRequired
from mr_core.common.middleware import client_ip_from_meta
from mr_core.policy.types import Principal, Role

_PRINCIPAL_ATTR = "_mr_principal"
_UNRESOLVED = object()


class IdentityProvider(Protocol):
    def resolve(self, request) -> Optional[Principal]:
        ...


class ProfileIdentityProvider:
    """
    Authenticated Django user + UserProfile -> Principal.
    Inactive users and users without a profile resolve to None.
    """

    def resolve(self, request) -> Optional[Principal]:
        from mr_core.iam.models import UserProfile
        from mr_core.patients.models import Patient

        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated or not user.is_active:
            return None

        profile = UserProfile.objects.filter(user_id=user.pk).first()
        if profile is None or not profile.is_active:
            return None

        role = Role(profile.role)
        patient_id = None
        if role == Role.PATIENT:
            patient_id = Patient.objects.filter(user_id=user.pk).values_list("id", flat=True).first()

        return Principal(
            user_id=user.pk,
            role=role,
            hospital_id=profile.hospital_id,
            patient_id=patient_id,
        )


def get_identity_provider() -> IdentityProvider:
    return import_string(settings.MR_IDENTITY_PROVIDER)()


def resolve_principal(request) -> Optional[Principal]:
    """
    Resolve once per request and cache on the request object.
    """
    cached = getattr(request, _PRINCIPAL_ATTR, _UNRESOLVED)
    if cached is not _UNRESOLVED:
        return cached
    principal = get_identity_provider().resolve(request)
    setattr(request, _PRINCIPAL_ATTR, principal)
    return principal


def require_principal(request) -> Principal:
    principal = resolve_principal(request)
    if principal is None:
        raise AuthenticationRequired()
    return principal


@dataclass(frozen=True)
class ActorContext:
    """
    Everything a service needs to know about the caller: the principal for
    policy checks, plus client metadata for the audit trail.
    """
    principal: Principal
    ip_address: str | None = None
    user_agent: str = ""

    @property
    def user_id(self) -> int:
        return self.principal.user_id


def _clean_ip(value: str | None) -> str | None:
    if not value:
        return None
    try:
        validate_ipv46_address(value)
    except DjangoValidationError:
        return None
    return value


def actor_from_request(request) -> ActorContext:
    principal = require_principal(request)

    ip = getattr(request, "client_ip", None)
    if ip is None:
        ip = client_ip_from_meta(request.META)

    user_agent = getattr(request, "user_agent", None)
    if user_agent is None:
        user_agent = request.META.get("HTTP_USER_AGENT", "")

    return ActorContext(principal=principal, ip_address=_clean_ip(ip), user_agent=user_agent)
