# mr_core/iam/models.py
import uuid

from django.conf import settings
from django.db import models

from mr_core.policy.types import Role


class UserProfile(models.Model):
    """
    Role and hospital affiliation anchored to Django's AUTH_USER_MODEL.
    Patients usually have no hospital here; theirs comes from the Patient row.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="mr_profile")
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.PATIENT, db_index=True)
    hospital = models.ForeignKey(
        "hospitals.Hospital",
        on_delete=models.PROTECT,
        related_name="staff_profiles",
        null=True,
        blank=True,
    )
    phone = models.CharField(max_length=15, blank=True, default="")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "iam_user_profile"
        indexes = [
            models.Index(fields=["role", "hospital"]),
        ]

    def __str__(self) -> str:
        return f"{self.user.get_username()} ({self.role})"
