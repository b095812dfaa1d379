# mr_core/appointments/models.py
from django.conf import settings
from django.db import models
from django.db.models import F, Q

from mr_core.common.models import UUIDModel


class AppointmentStatus(models.TextChoices):
    SCHEDULED = "scheduled", "Scheduled"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"
    NO_SHOW = "no_show", "No show"


# scheduled is the only non-terminal state
APPOINTMENT_TRANSITIONS = {
    AppointmentStatus.SCHEDULED: {
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.NO_SHOW,
    },
}


class Appointment(UUIDModel):
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="appointments")
    doctor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="appointments")
    hospital = models.ForeignKey("hospitals.Hospital", on_delete=models.PROTECT, related_name="appointments")

    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField()

    status = models.CharField(
        max_length=16,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.SCHEDULED,
        db_index=True,
    )
    reason = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "appointments_appointment"
        ordering = ("start_time",)
        constraints = [
            models.CheckConstraint(
                condition=Q(end_time__gt=F("start_time")),
                name="ck_appointment_end_after_start",
            ),
        ]
        indexes = [
            models.Index(fields=["hospital", "start_time"]),
            models.Index(fields=["doctor", "start_time"]),
            models.Index(fields=["patient", "start_time"]),
        ]

    def __str__(self) -> str:
        return f"Appointment {self.id} ({self.status})"
