# mr_core/records/models.py
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models

from mr_core.common.models import UUIDModel

blood_pressure_validator = RegexValidator(
    regex=r"^\d{2,3}/\d{2,3}$",
    message="Blood pressure must look like 120/80.",
)


class MedicalRecord(UUIDModel):
    """
    One visit. `hospital` is the authoring doctor's hospital at creation
    and is never changed afterwards; neither is `visit_date`.
    """
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="medical_records")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="authored_records")
    hospital = models.ForeignKey("hospitals.Hospital", on_delete=models.PROTECT, related_name="medical_records")

    visit_date = models.DateTimeField(db_index=True)

    chief_complaint = models.TextField(blank=True, default="")
    diagnosis = models.TextField(blank=True, default="")
    prescription = models.TextField(blank=True, default="")
    lab_results = models.TextField(blank=True, default="")
    treatment_plan = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "records_medical_record"
        ordering = ("-visit_date", "-created_at")
        indexes = [
            models.Index(fields=["patient", "visit_date"]),
            models.Index(fields=["hospital", "visit_date"]),
            models.Index(fields=["doctor", "visit_date"]),
        ]

    def __str__(self) -> str:
        return f"MedicalRecord {self.id} ({self.visit_date:%Y-%m-%d})"


class VitalSigns(models.Model):
    """
    Measurements taken during a visit. Append-only.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    medical_record = models.ForeignKey(MedicalRecord, on_delete=models.PROTECT, related_name="vital_signs")
    recorded_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="recorded_vitals")

    temperature = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)  # celsius
    blood_pressure = models.CharField(max_length=10, blank=True, default="", validators=[blood_pressure_validator])
    pulse_rate = models.PositiveSmallIntegerField(null=True, blank=True)
    respiratory_rate = models.PositiveSmallIntegerField(null=True, blank=True)
    weight = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)  # kg
    height = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)  # cm
    bmi = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)

    recorded_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "records_vital_signs"
        verbose_name_plural = "vital signs"
        ordering = ("-recorded_at",)
        indexes = [
            models.Index(fields=["medical_record", "recorded_at"]),
        ]

    def __str__(self):
        return f"VitalSigns {self.id} @ {self.recorded_at}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Vital signs are append-only and cannot be modified once recorded.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Vital signs are append-only and cannot be deleted.")
