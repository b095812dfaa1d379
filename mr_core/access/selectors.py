# mr_core/access/selectors.py
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from django.db.models import Q, QuerySet
from django.utils import timezone

from mr_core.access.models import AccessRequest, AccessRequestStatus
from mr_core.policy.guard import scope_queryset
from mr_core.policy.types import Principal, ResourceType


def active_grants(*, user_id: int, now: datetime | None = None) -> QuerySet[AccessRequest]:
    """
    Approved requests by `user_id` that have not expired.
    """
    now = now or timezone.now()
    return AccessRequest.objects.filter(
        Q(expires_at__isnull=True) | Q(expires_at__gt=now),
        requester_id=user_id,
        status=AccessRequestStatus.APPROVED,
    )


def has_active_grant(*, user_id: int, patient_id: UUID, now: datetime | None = None) -> bool:
    return active_grants(user_id=user_id, now=now).filter(patient_id=patient_id).exists()


def granted_patient_ids(*, user_id: int, now: datetime | None = None) -> QuerySet:
    return active_grants(user_id=user_id, now=now).values("patient_id")


def access_requests_visible_to(principal: Principal, *, status: str | None = None) -> QuerySet[AccessRequest]:
    qs = AccessRequest.objects.select_related("requester", "patient", "reviewer")
    qs = scope_queryset(
        qs,
        principal,
        ResourceType.ACCESS_REQUEST,
        hospital_field="patient__hospital_id",
        owner_field="requester_id",
    )
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-requested_at")
