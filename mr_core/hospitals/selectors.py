# mr_core/hospitals/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from mr_core.hospitals.models import Hospital


def list_hospitals(*, district: str | None = None) -> QuerySet[Hospital]:
    qs = Hospital.objects.all()
    if district:
        qs = qs.filter(district__iexact=district)
    return qs.order_by("name")
