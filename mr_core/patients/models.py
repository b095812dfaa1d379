# mr_core/patients/models.py
from django.conf import settings
from django.db import models

from mr_core.common.models import UUIDModel


class Gender(models.TextChoices):
    MALE = "male", "Male"
    FEMALE = "female", "Female"
    OTHER = "other", "Other"


class BloodGroup(models.TextChoices):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


class Patient(UUIDModel):
    """
    Demographic and medical-context data for one patient user.
    `hospital` is the registering hospital and the patient's scope for
    staff access.
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="patient")
    hospital = models.ForeignKey("hospitals.Hospital", on_delete=models.PROTECT, related_name="patients")

    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=Gender.choices, blank=True, default="")
    blood_group = models.CharField(max_length=5, choices=BloodGroup.choices, blank=True, default="")
    address = models.CharField(max_length=255, blank=True, default="")
    allergies = models.TextField(blank=True, default="")

    guardian_name = models.CharField(max_length=100, blank=True, default="")
    guardian_phone = models.CharField(max_length=15, blank=True, default="")
    guardian_relation = models.CharField(max_length=50, blank=True, default="")
    emergency_contact = models.CharField(max_length=15, blank=True, default="")

    class Meta:
        db_table = "patients_patient"
        indexes = [
            models.Index(fields=["hospital", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.user.get_full_name() or self.user.get_username()} ({self.id})"
