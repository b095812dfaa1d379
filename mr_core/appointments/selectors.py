# mr_core/appointments/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from mr_core.appointments.models import Appointment
from mr_core.policy.guard import scope_queryset
from mr_core.policy.types import Principal, ResourceType


def appointments_visible_to(
    principal: Principal,
    *,
    status: str | None = None,
    doctor_id: int | None = None,
    patient_id=None,
) -> QuerySet[Appointment]:
    qs = Appointment.objects.select_related("patient", "doctor", "hospital")
    qs = scope_queryset(
        qs,
        principal,
        ResourceType.APPOINTMENT,
        hospital_field="hospital_id",
        patient_field="patient_id",
    )
    if status:
        qs = qs.filter(status=status)
    if doctor_id is not None:
        qs = qs.filter(doctor_id=doctor_id)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    return qs.order_by("start_time")
