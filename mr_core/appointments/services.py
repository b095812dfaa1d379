# mr_core/appointments/services.py
from __future__ import annotations

from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import ValidationError

from mr_core.appointments.models import APPOINTMENT_TRANSITIONS, Appointment
from mr_core.audit.models import AuditAction
from mr_core.audit.services import AuditService
from mr_core.common.api.exceptions import InvalidStateTransition
from mr_core.common.lookups import get_or_not_found
from mr_core.iam.identity import ActorContext
from mr_core.iam.models import UserProfile
from mr_core.patients.models import Patient
from mr_core.policy.guard import authorize
from mr_core.policy.types import Action, Resource, ResourceType, Role


def appointment_resource(appt: Appointment) -> Resource:
    return Resource(type=ResourceType.APPOINTMENT, hospital_id=appt.hospital_id, patient_id=appt.patient_id)


class AppointmentService:
    @staticmethod
    @transaction.atomic
    def create_appointment(
        actor: ActorContext,
        *,
        patient_id: UUID,
        doctor_id: int,
        start_time,
        end_time,
        reason: str = "",
        notes: str = "",
    ) -> Appointment:
        if end_time <= start_time:
            raise ValidationError({"end_time": "Must be after start_time."})

        patient = get_or_not_found(Patient.objects.all(), "Patient not found.", id=patient_id)
        authorize(
            actor.principal,
            Action.CREATE,
            Resource(type=ResourceType.APPOINTMENT, hospital_id=patient.hospital_id, patient_id=patient.id),
        )

        doctor = get_or_not_found(UserProfile.objects.all(), "Doctor not found.", user_id=doctor_id)
        if doctor.role != Role.DOCTOR or not doctor.is_active:
            raise ValidationError({"doctor_id": "User is not an active doctor."})
        if doctor.hospital_id != patient.hospital_id:
            raise ValidationError({"doctor_id": "Doctor does not practise at the patient's hospital."})

        appt = Appointment.objects.create(
            patient=patient,
            doctor_id=doctor.user_id,
            hospital_id=patient.hospital_id,
            start_time=start_time,
            end_time=end_time,
            reason=reason or "",
            notes=notes or "",
        )

        AuditService.record(
            actor,
            action=AuditAction.CREATE_APPOINTMENT,
            resource_type=ResourceType.APPOINTMENT,
            resource_id=appt.id,
            patient_id=patient.id,
            details={"doctor_id": doctor.user_id, "start_time": appt.start_time},
        )
        return appt

    @staticmethod
    @transaction.atomic
    def update_status(actor: ActorContext, *, appointment_id: UUID, status: str) -> Appointment:
        appt = get_or_not_found(
            Appointment.objects.select_for_update(),
            "Appointment not found.",
            id=appointment_id,
        )
        authorize(actor.principal, Action.UPDATE, appointment_resource(appt))

        allowed = APPOINTMENT_TRANSITIONS.get(appt.status, set())
        if status not in allowed:
            raise InvalidStateTransition(f"Cannot move appointment from {appt.status} to {status}.")

        previous = appt.status
        appt.status = status
        appt.save(update_fields=["status", "updated_at"])

        AuditService.record(
            actor,
            action=AuditAction.UPDATE_APPOINTMENT_STATUS,
            resource_type=ResourceType.APPOINTMENT,
            resource_id=appt.id,
            patient_id=appt.patient_id,
            details={"from": previous, "to": status},
        )
        return appt


def get_appointment_for_read(actor: ActorContext, appointment_id: UUID) -> Appointment:
    appt = get_or_not_found(
        Appointment.objects.select_related("patient", "doctor", "hospital"),
        "Appointment not found.",
        id=appointment_id,
    )
    authorize(actor.principal, Action.READ, appointment_resource(appt))
    return appt

