# mr_core/security/models.py
from __future__ import annotations

import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q


class AlertSeverity(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"
    CRITICAL = "critical", "Critical"


class SecurityAlert(models.Model):
    """
    Flagged event awaiting admin review. Separate from the audit trail.

    anomaly_score is opaque: supplied by whoever raises the alert, never
    computed here.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    alert_type = models.CharField(max_length=50, db_index=True)
    severity = models.CharField(
        max_length=16,
        choices=AlertSeverity.choices,
        default=AlertSeverity.MEDIUM,
        db_index=True,
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="security_alerts",
        null=True,
        blank=True,
    )
    description = models.TextField(blank=True, default="")
    anomaly_score = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(1)],
    )

    raised_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="raised_security_alerts",
        null=True,
        blank=True,
    )

    is_resolved = models.BooleanField(default=False, db_index=True)
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="resolved_security_alerts",
        null=True,
        blank=True,
    )
    resolved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "security_alert"
        ordering = ("-created_at",)
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(is_resolved=False, resolved_at__isnull=True, resolved_by__isnull=True)
                    | Q(is_resolved=True, resolved_at__isnull=False, resolved_by__isnull=False)
                ),
                name="ck_security_alert_resolved_fields",
            ),
        ]
        indexes = [
            models.Index(fields=["is_resolved", "severity"]),
        ]

    def __str__(self) -> str:
        return f"{self.alert_type} [{self.severity}]"
