# mr_core/records/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from mr_core.policy.guard import scope_queryset
from mr_core.policy.types import Principal, ResourceType
from mr_core.records.models import MedicalRecord, VitalSigns


def records_visible_to(principal: Principal) -> QuerySet[MedicalRecord]:
    qs = MedicalRecord.objects.select_related("patient", "doctor", "hospital")
    qs = scope_queryset(
        qs,
        principal,
        ResourceType.MEDICAL_RECORD,
        hospital_field="hospital_id",
        patient_field="patient_id",
    )
    return qs.order_by("-visit_date", "-created_at")


def vitals_visible_to(principal: Principal) -> QuerySet[VitalSigns]:
    qs = VitalSigns.objects.select_related("medical_record", "recorded_by")
    qs = scope_queryset(
        qs,
        principal,
        ResourceType.VITAL_SIGNS,
        hospital_field="medical_record__hospital_id",
        patient_field="medical_record__patient_id",
    )
    return qs.order_by("-recorded_at")


def records_for_patient(*, patient_id: UUID) -> QuerySet[MedicalRecord]:
    return (
        MedicalRecord.objects.select_related("doctor", "hospital")
        .filter(patient_id=patient_id)
        .order_by("-visit_date", "-created_at")
    )


def vitals_for_patient(*, patient_id: UUID) -> QuerySet[VitalSigns]:
    return (
        VitalSigns.objects.select_related("medical_record", "recorded_by")
        .filter(medical_record__patient_id=patient_id)
        .order_by("-recorded_at")
    )


def vitals_for_record(*, medical_record_id: UUID) -> QuerySet[VitalSigns]:
    return VitalSigns.objects.filter(medical_record_id=medical_record_id).order_by("-recorded_at")
