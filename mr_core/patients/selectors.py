# mr_core/patients/selectors.py
from __future__ import annotations

from django.db.models import Q, QuerySet

from mr_core.patients.models import Patient
from mr_core.policy.guard import scope_queryset
from mr_core.policy.types import Principal, ResourceType


def patients_visible_to(principal: Principal) -> QuerySet[Patient]:
    qs = Patient.objects.select_related("user", "hospital")
    return scope_queryset(
        qs,
        principal,
        ResourceType.PATIENT,
        hospital_field="hospital_id",
        patient_field="id",
    )


def search_patients(principal: Principal, *, q: str = "", hospital_id=None) -> QuerySet[Patient]:
    qs = patients_visible_to(principal)

    if hospital_id:
        qs = qs.filter(hospital_id=hospital_id)

    q = (q or "").strip()
    if q:
        qs = qs.filter(
            Q(user__first_name__icontains=q)
            | Q(user__last_name__icontains=q)
            | Q(user__username__icontains=q)
            | Q(user__email__icontains=q)
        )

    return qs.order_by("-created_at")
