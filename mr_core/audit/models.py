# mr_core/audit/models.py
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class AuditAction(models.TextChoices):
    """
    Action labels written to the audit trail.
    The column itself is free text so older labels stay readable.
    """
    CREATE_USER = "create_user"
    UPDATE_USER_ROLE = "update_user_role"
    DEACTIVATE_USER = "deactivate_user"
    CREATE_HOSPITAL = "create_hospital"
    CREATE_PATIENT = "create_patient"
    VIEW_PATIENT = "view_patient"
    UPDATE_PATIENT = "update_patient"
    CREATE_MEDICAL_RECORD = "create_medical_record"
    VIEW_MEDICAL_RECORD = "view_medical_record"
    UPDATE_MEDICAL_RECORD = "update_medical_record"
    RECORD_VITAL_SIGNS = "record_vital_signs"
    CREATE_ACCESS_REQUEST = "create_access_request"
    APPROVED_ACCESS_REQUEST = "approved_access_request"
    DENIED_ACCESS_REQUEST = "denied_access_request"
    CREATE_SECURITY_ALERT = "create_security_alert"
    RESOLVE_SECURITY_ALERT = "resolve_security_alert"
    CREATE_APPOINTMENT = "create_appointment"
    UPDATE_APPOINTMENT_STATUS = "update_appointment_status"


class AuditLogQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise ValidationError("Audit log entries are immutable and cannot be updated.")

    def delete(self):
        raise ValidationError("Audit log entries are immutable and cannot be deleted.")


class AuditLogEntry(models.Model):
    """
    Append-only audit trail.
    One row per completed sensitive operation; never modified or removed.
    """
    id = models.BigAutoField(primary_key=True)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="audit_entries",
        null=True,
        blank=True,
    )

    action = models.CharField(max_length=64, db_index=True)
    resource_type = models.CharField(max_length=64, db_index=True)
    resource_id = models.CharField(max_length=64, blank=True, default="")

    patient = models.ForeignKey(
        "patients.Patient",
        on_delete=models.PROTECT,
        related_name="audit_entries",
        null=True,
        blank=True,
    )

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=512, blank=True, default="")

    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)
    details = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        db_table = "audit_log_entry"
        ordering = ("-timestamp", "-id")
        indexes = [
            models.Index(fields=["patient", "timestamp"]),
            models.Index(fields=["user", "timestamp"]),
            models.Index(fields=["resource_type", "resource_id"]),
        ]

    def __str__(self):
        return f"{self.action} {self.resource_type}:{self.resource_id} @ {self.timestamp}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Audit log entries are immutable and cannot be modified once created.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Audit log entries are immutable and cannot be deleted.")
