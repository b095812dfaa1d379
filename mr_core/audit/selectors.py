# mr_core/audit/selectors.py
from __future__ import annotations

from uuid import UUID

from django.conf import settings
from django.db.models import QuerySet

from mr_core.audit.models import AuditLogEntry


def list_audit_entries() -> QuerySet[AuditLogEntry]:
    return AuditLogEntry.objects.select_related("user").order_by("-timestamp", "-id")


def list_audit_entries_for_patient(*, patient_id: UUID) -> QuerySet[AuditLogEntry]:
    """
    The patient's trail ("who accessed my records"), newest first.
    """
    return list_audit_entries().filter(patient_id=patient_id)


def audit_list_limit() -> int:
    return int(getattr(settings, "MR_AUDIT_LIST_LIMIT", 500))
