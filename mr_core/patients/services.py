# mr_core/patients/services.py
from __future__ import annotations

from typing import Any
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from mr_core.audit.models import AuditAction
from mr_core.audit.services import AuditService
from mr_core.common.api.exceptions import ConflictError
from mr_core.common.lookups import get_or_not_found
from mr_core.hospitals.models import Hospital
from mr_core.iam.identity import ActorContext
from mr_core.iam.models import UserProfile
from mr_core.patients.models import Patient
from mr_core.policy.guard import authorize
from mr_core.policy.types import Action, Resource, ResourceType, Role

UPDATABLE_FIELDS = frozenset({
    "date_of_birth",
    "gender",
    "blood_group",
    "address",
    "allergies",
    "guardian_name",
    "guardian_phone",
    "guardian_relation",
    "emergency_contact",
})


def patient_resource(patient: Patient) -> Resource:
    return Resource(type=ResourceType.PATIENT, hospital_id=patient.hospital_id, patient_id=patient.id)


def get_patient_for_read(actor: ActorContext, patient_id: UUID) -> Patient:
    """
    Load a patient and check READ (including approved access). Not audited.
    """
    patient = get_or_not_found(
        Patient.objects.select_related("user", "hospital"),
        "Patient not found.",
        id=patient_id,
    )
    authorize(actor.principal, Action.READ, patient_resource(patient))
    return patient


class PatientService:
    @staticmethod
    @transaction.atomic
    def create_patient(
        actor: ActorContext,
        *,
        user_id: int,
        date_of_birth,
        hospital_id: UUID | None = None,
        **fields: Any,
    ) -> Patient:
        principal = actor.principal
        hospital_id = hospital_id or principal.hospital_id
        if hospital_id is None:
            raise ValidationError({"hospital_id": "This field is required."})

        authorize(principal, Action.CREATE, Resource(type=ResourceType.PATIENT, hospital_id=hospital_id))

        hospital = get_or_not_found(Hospital.objects.all(), "Hospital not found.", id=hospital_id)
        user = get_or_not_found(get_user_model().objects.all(), "User not found.", pk=user_id)

        role = UserProfile.objects.filter(user_id=user.pk).values_list("role", flat=True).first()
        if role != Role.PATIENT:
            raise ValidationError({"user_id": "User must have the patient role."})

        if Patient.objects.filter(user_id=user.pk).exists():
            raise ConflictError("A patient record already exists for this user.")

        extra = {k: (v or "") for k, v in fields.items() if k in UPDATABLE_FIELDS}
        try:
            with transaction.atomic():
                patient = Patient.objects.create(
                    user=user,
                    hospital=hospital,
                    date_of_birth=date_of_birth,
                    **extra,
                )
        except IntegrityError:
            # one-to-one on user, raced by a concurrent create
            raise ConflictError("A patient record already exists for this user.")

        AuditService.record(
            actor,
            action=AuditAction.CREATE_PATIENT,
            resource_type=ResourceType.PATIENT,
            resource_id=patient.id,
            patient_id=patient.id,
        )
        return patient

    @staticmethod
    @transaction.atomic
    def view_patient(actor: ActorContext, *, patient_id: UUID) -> Patient:
        patient = get_patient_for_read(actor, patient_id)

        AuditService.record(
            actor,
            action=AuditAction.VIEW_PATIENT,
            resource_type=ResourceType.PATIENT,
            resource_id=patient.id,
            patient_id=patient.id,
        )
        return patient

    @staticmethod
    @transaction.atomic
    def update_patient(actor: ActorContext, *, patient_id: UUID, data: dict) -> Patient:
        patient = get_or_not_found(
            Patient.objects.select_for_update(),
            "Patient not found.",
            id=patient_id,
        )
        authorize(actor.principal, Action.UPDATE, patient_resource(patient))

        updates = {k: v for k, v in (data or {}).items() if k in UPDATABLE_FIELDS}
        if not updates:
            raise ValidationError({"detail": "No updatable fields supplied."})

        for k, v in updates.items():
            setattr(patient, k, v)
        patient.save()

        AuditService.record(
            actor,
            action=AuditAction.UPDATE_PATIENT,
            resource_type=ResourceType.PATIENT,
            resource_id=patient.id,
            patient_id=patient.id,
            details={"updated_fields": sorted(updates.keys())},
        )
        return patient
