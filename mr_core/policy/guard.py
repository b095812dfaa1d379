# mr_core/policy/guard.py
"""
Enforcement side of the policy.

`evaluate()` is pure; this module is where a Deny turns into an API error,
where approved access requests are looked up, and where a ReadScope becomes
a queryset filter.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from django.db.models import Q, QuerySet

from mr_core.common.api.exceptions import AuthenticationRequired, AuthorizationDenied
from mr_core.policy.engine import evaluate, read_scope
from mr_core.policy.types import (
    Action,
    Decision,
    DenyReason,
    Principal,
    Resource,
    ResourceType,
)

logger = logging.getLogger(__name__)

# Denials an approved access request can turn into Allow (reads only).
_GRANTABLE = frozenset({DenyReason.WRONG_HOSPITAL_SCOPE, DenyReason.NO_APPROVED_ACCESS})


def _raise_for(principal: Principal | None, action: Action, resource: Resource, decision: Decision):
    logger.warning(
        "authorization denied user=%s role=%s action=%s resource=%s patient=%s reason=%s",
        getattr(principal, "user_id", None),
        getattr(principal, "role", None),
        action,
        resource.type,
        resource.patient_id,
        decision.reason,
    )
    if decision.reason == DenyReason.NOT_AUTHENTICATED:
        raise AuthenticationRequired()
    raise AuthorizationDenied(decision.reason)


def check(principal: Principal | None, action: Action, resource: Resource) -> Decision:
    """
    evaluate() plus the approved-access lookup. Never raises.
    """
    decision = evaluate(principal, action, resource)
    if decision.allowed:
        return decision

    if (
        action == Action.READ
        and decision.reason in _GRANTABLE
        and resource.patient_id is not None
        and not resource.granted
    ):
        from mr_core.access.selectors import has_active_grant

        if has_active_grant(user_id=principal.user_id, patient_id=resource.patient_id):
            return evaluate(principal, action, replace(resource, granted=True))

    return decision


def authorize(principal: Principal | None, action: Action, resource: Resource) -> None:
    """
    Raise AuthenticationRequired / AuthorizationDenied unless allowed.
    Must be called before any mutation.
    """
    decision = check(principal, action, resource)
    if not decision.allowed:
        _raise_for(principal, action, resource, decision)


def scope_queryset(
    qs: QuerySet,
    principal: Principal | None,
    resource_type: ResourceType,
    *,
    hospital_field: str | None = None,
    patient_field: str | None = None,
    owner_field: str | None = None,
) -> QuerySet:
    """
    Filter `qs` down to the rows `principal` may read.

    Field arguments are ORM lookups on `qs.model` (e.g. "medical_record__hospital_id").
    A scope component whose field is not given matches nothing.
    """
    scope = read_scope(principal, resource_type)

    if scope.denied is not None:
        _raise_for(principal, Action.READ, Resource(type=resource_type), Decision(False, scope.denied))

    if scope.unrestricted:
        return qs

    cond = Q()
    matched = False

    def _or(q: Q) -> None:
        nonlocal cond, matched
        cond = q if not matched else cond | q
        matched = True

    if scope.hospital_id is not None and hospital_field:
        _or(Q(**{hospital_field: scope.hospital_id}))
    if scope.patient_id is not None and patient_field:
        _or(Q(**{patient_field: scope.patient_id}))
    if scope.owner_user_id is not None and owner_field:
        _or(Q(**{owner_field: scope.owner_user_id}))
    if scope.include_granted and patient_field:
        from mr_core.access.selectors import granted_patient_ids

        _or(Q(**{f"{patient_field}__in": granted_patient_ids(user_id=principal.user_id)}))

    if not matched:
        return qs.none()
    return qs.filter(cond)
