# mr_core/iam/selectors.py
from __future__ import annotations

from uuid import UUID

from django.contrib.auth import get_user_model
from django.db.models import QuerySet

from mr_core.policy.guard import scope_queryset
from mr_core.policy.types import Principal, ResourceType


def users_visible_to(
    principal: Principal,
    *,
    role: str | None = None,
    hospital_id: UUID | None = None,
) -> QuerySet:
    qs = get_user_model().objects.select_related("mr_profile")
    qs = scope_queryset(qs, principal, ResourceType.USER, owner_field="id")

    if role:
        qs = qs.filter(mr_profile__role=role)
    if hospital_id:
        qs = qs.filter(mr_profile__hospital_id=hospital_id)
    return qs.order_by("username")
