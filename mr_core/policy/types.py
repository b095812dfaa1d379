# mr_core/policy/types.py
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from django.db import models


class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    DOCTOR = "doctor", "Doctor"
    NURSE = "nurse", "Nurse"
    PATIENT = "patient", "Patient"


STAFF_ROLES = frozenset({Role.DOCTOR, Role.NURSE})


class Action(models.TextChoices):
    READ = "read", "Read"
    CREATE = "create", "Create"
    UPDATE = "update", "Update"
    DELETE = "delete", "Delete"


class ResourceType(models.TextChoices):
    USER = "user", "User"
    HOSPITAL = "hospital", "Hospital"
    PATIENT = "patient", "Patient"
    MEDICAL_RECORD = "medical_record", "Medical record"
    VITAL_SIGNS = "vital_signs", "Vital signs"
    AUDIT_LOG = "audit_log", "Audit log"
    ACCESS_REQUEST = "access_request", "Access request"
    SECURITY_ALERT = "security_alert", "Security alert"
    APPOINTMENT = "appointment", "Appointment"
    STATS = "stats", "Dashboard statistics"


class DenyReason(models.TextChoices):
    NOT_AUTHENTICATED = "not_authenticated", "Not authenticated"
    INSUFFICIENT_ROLE = "insufficient_role", "Insufficient role"
    WRONG_HOSPITAL_SCOPE = "wrong_hospital_scope", "Wrong hospital scope"
    NO_APPROVED_ACCESS = "no_approved_access", "No approved access"


@dataclass(frozen=True)
class Principal:
    """
    The authenticated caller as the policy sees it.
    patient_id is the caller's own Patient row (role patient only).
    """
    user_id: int
    role: Role
    hospital_id: UUID | None = None
    patient_id: UUID | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_staff_member(self) -> bool:
        return self.role in STAFF_ROLES


@dataclass(frozen=True)
class Resource:
    """
    What is being acted on.

    hospital_id: owning hospital (record's hospital, patient's registering hospital)
    patient_id: owning patient for patient-linked resources
    owner_user_id: author / requester / subject user, where the rule cares
    granted: caller holds an approved, unexpired access request for patient_id
    """
    type: ResourceType
    hospital_id: UUID | None = None
    patient_id: UUID | None = None
    owner_user_id: int | None = None
    granted: bool = False


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(allowed=True)


def deny(reason: DenyReason) -> Decision:
    return Decision(allowed=False, reason=reason)


@dataclass(frozen=True)
class ReadScope:
    """
    Row filter for collection reads, expressed without any ORM knowledge.
    A row is visible when ANY of the set criteria matches it.
    """
    unrestricted: bool = False
    hospital_id: UUID | None = None
    patient_id: UUID | None = None
    owner_user_id: int | None = None
    include_granted: bool = False
    denied: DenyReason | None = None
