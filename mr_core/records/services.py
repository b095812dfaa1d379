# mr_core/records/services.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional
from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import ValidationError

from mr_core.audit.models import AuditAction
from mr_core.audit.services import AuditService
from mr_core.common.lookups import get_or_not_found
from mr_core.iam.identity import ActorContext
from mr_core.iam.models import UserProfile
from mr_core.patients.models import Patient
from mr_core.policy.guard import authorize
from mr_core.policy.types import Action, Resource, ResourceType, Role
from mr_core.records.models import MedicalRecord, VitalSigns

CLINICAL_FIELDS = (
    "chief_complaint",
    "diagnosis",
    "prescription",
    "lab_results",
    "treatment_plan",
    "notes",
)

BMI_PLACES = Decimal("0.01")
BMI_MAX = Decimal("99.99")


def record_resource(record: MedicalRecord) -> Resource:
    return Resource(
        type=ResourceType.MEDICAL_RECORD,
        hospital_id=record.hospital_id,
        patient_id=record.patient_id,
        owner_user_id=record.doctor_id,
    )


def compute_bmi(weight: Optional[Decimal], height_cm: Optional[Decimal]) -> Optional[Decimal]:
    """
    weight (kg) / height (m)^2, two decimals. None unless both are given.
    """
    if weight is None or height_cm is None:
        return None
    height_cm = Decimal(height_cm)
    if height_cm <= 0:
        return None
    meters = height_cm / Decimal(100)
    return (Decimal(weight) / (meters * meters)).quantize(BMI_PLACES, rounding=ROUND_HALF_UP)


def _resolve_author(actor: ActorContext, doctor_id: int | None, patient: Patient) -> int:
    """
    Doctor user id for a new record.
    Doctors author their own records; admins must name a doctor of the patient's hospital.
    """
    principal = actor.principal
    if not principal.is_admin:
        if doctor_id is not None and doctor_id != principal.user_id:
            raise ValidationError({"doctor_id": "Only an admin may create a record on behalf of another doctor."})
        return principal.user_id

    if doctor_id is None:
        raise ValidationError({"doctor_id": "This field is required when an admin creates a record."})

    profile = get_or_not_found(UserProfile.objects.all(), "Doctor not found.", user_id=doctor_id)
    if profile.role != Role.DOCTOR or not profile.is_active:
        raise ValidationError({"doctor_id": "User is not an active doctor."})
    if profile.hospital_id != patient.hospital_id:
        raise ValidationError({"doctor_id": "Doctor is not affiliated with the patient's hospital."})
    return profile.user_id


class MedicalRecordService:
    @staticmethod
    @transaction.atomic
    def create_record(
        actor: ActorContext,
        *,
        patient_id: UUID,
        visit_date,
        doctor_id: int | None = None,
        **fields: Any,
    ) -> MedicalRecord:
        patient = get_or_not_found(Patient.objects.all(), "Patient not found.", id=patient_id)
        hospital_id = patient.hospital_id

        # scoped by the patient's hospital; an access grant never counts for writes
        authorize(
            actor.principal,
            Action.CREATE,
            Resource(
                type=ResourceType.MEDICAL_RECORD,
                hospital_id=hospital_id,
                patient_id=patient.id,
                owner_user_id=actor.user_id,
            ),
        )
        author_id = _resolve_author(actor, doctor_id, patient)

        record = MedicalRecord.objects.create(
            patient=patient,
            doctor_id=author_id,
            hospital_id=hospital_id,
            visit_date=visit_date,
            **{k: (fields.get(k) or "") for k in CLINICAL_FIELDS},
        )

        AuditService.record(
            actor,
            action=AuditAction.CREATE_MEDICAL_RECORD,
            resource_type=ResourceType.MEDICAL_RECORD,
            resource_id=record.id,
            patient_id=patient.id,
            details={"hospital_id": str(hospital_id), "doctor_id": author_id},
        )
        return record

    @staticmethod
    @transaction.atomic
    def view_record(actor: ActorContext, *, record_id: UUID) -> MedicalRecord:
        record = get_or_not_found(
            MedicalRecord.objects.select_related("patient", "doctor", "hospital"),
            "Medical record not found.",
            id=record_id,
        )
        authorize(actor.principal, Action.READ, record_resource(record))

        AuditService.record(
            actor,
            action=AuditAction.VIEW_MEDICAL_RECORD,
            resource_type=ResourceType.MEDICAL_RECORD,
            resource_id=record.id,
            patient_id=record.patient_id,
        )
        return record

    @staticmethod
    @transaction.atomic
    def update_record(actor: ActorContext, *, record_id: UUID, data: dict) -> MedicalRecord:
        record = get_or_not_found(
            MedicalRecord.objects.select_for_update(),
            "Medical record not found.",
            id=record_id,
        )
        authorize(actor.principal, Action.UPDATE, record_resource(record))

        data = data or {}
        if "visit_date" in data:
            raise ValidationError({"visit_date": "Visit date cannot be changed."})

        updates = {k: (data[k] or "") for k in CLINICAL_FIELDS if k in data}
        if not updates:
            raise ValidationError({"detail": "No updatable fields supplied."})

        for k, v in updates.items():
            setattr(record, k, v)
        record.save(update_fields=[*updates.keys(), "updated_at"])

        AuditService.record(
            actor,
            action=AuditAction.UPDATE_MEDICAL_RECORD,
            resource_type=ResourceType.MEDICAL_RECORD,
            resource_id=record.id,
            patient_id=record.patient_id,
            details={"updated_fields": sorted(updates.keys())},
        )
        return record


class VitalSignsService:
    @staticmethod
    @transaction.atomic
    def record_vitals(
        actor: ActorContext,
        *,
        medical_record_id: UUID,
        temperature: Optional[Decimal] = None,
        blood_pressure: str = "",
        pulse_rate: Optional[int] = None,
        respiratory_rate: Optional[int] = None,
        weight: Optional[Decimal] = None,
        height: Optional[Decimal] = None,
    ) -> VitalSigns:
        record = get_or_not_found(
            MedicalRecord.objects.all(),
            "Medical record not found.",
            id=medical_record_id,
        )
        authorize(
            actor.principal,
            Action.CREATE,
            Resource(
                type=ResourceType.VITAL_SIGNS,
                hospital_id=record.hospital_id,
                patient_id=record.patient_id,
            ),
        )

        bmi = compute_bmi(weight, height)
        if bmi is not None and bmi > BMI_MAX:
            raise ValidationError({"bmi": "Derived BMI is out of range; check weight and height."})

        vitals = VitalSigns.objects.create(
            medical_record=record,
            recorded_by_id=actor.user_id,
            temperature=temperature,
            blood_pressure=blood_pressure or "",
            pulse_rate=pulse_rate,
            respiratory_rate=respiratory_rate,
            weight=weight,
            height=height,
            bmi=bmi,
        )

        AuditService.record(
            actor,
            action=AuditAction.RECORD_VITAL_SIGNS,
            resource_type=ResourceType.VITAL_SIGNS,
            resource_id=vitals.id,
            patient_id=record.patient_id,
            details={"medical_record_id": str(record.id)},
        )
        return vitals
