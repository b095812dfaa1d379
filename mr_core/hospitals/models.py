# mr_core/hospitals/models.py
from django.db import models

from mr_core.common.models import UUIDModel

DEFAULT_DISTRICT = "Kathmandu"


class Hospital(UUIDModel):
    """
    Reference target for staff, patients and records.
    Created by admins; not edited or deleted through the API.
    """
    name = models.CharField(max_length=100)
    address = models.CharField(max_length=255, blank=True, default="")
    district = models.CharField(max_length=50, blank=True, default=DEFAULT_DISTRICT)
    phone = models.CharField(max_length=15, blank=True, default="")
    email = models.EmailField(max_length=100, blank=True, default="")

    class Meta:
        db_table = "hospitals_hospital"
        ordering = ("name",)
        indexes = [
            models.Index(fields=["name"]),
            models.Index(fields=["district"]),
        ]

    def __str__(self) -> str:
        return self.name
