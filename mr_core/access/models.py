# mr_core/access/models.py
import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q


class AccessRequestStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    DENIED = "denied", "Denied"


TERMINAL_STATUSES = frozenset({AccessRequestStatus.APPROVED, AccessRequestStatus.DENIED})


class AccessRequest(models.Model):
    """
    Request for read access to one patient outside the requester's normal scope.

    pending -> approved | denied, exactly once. Re-requesting means a new row.
    An approval grants READ until expires_at (no expiry when null).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    requester = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="access_requests")
    patient = models.ForeignKey("patients.Patient", on_delete=models.PROTECT, related_name="access_requests")
    reason = models.TextField()

    status = models.CharField(
        max_length=16,
        choices=AccessRequestStatus.choices,
        default=AccessRequestStatus.PENDING,
        db_index=True,
    )

    reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="reviewed_access_requests",
        null=True,
        blank=True,
    )

    requested_at = models.DateTimeField(auto_now_add=True, db_index=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "access_access_request"
        ordering = ("-requested_at",)
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(status=AccessRequestStatus.PENDING, reviewed_at__isnull=True, reviewer__isnull=True)
                    | (
                        ~Q(status=AccessRequestStatus.PENDING)
                        & Q(reviewed_at__isnull=False, reviewer__isnull=False)
                    )
                ),
                name="ck_access_request_reviewed_iff_terminal",
            ),
            models.CheckConstraint(
                condition=~Q(reason=""),
                name="ck_access_request_reason_not_empty",
            ),
        ]
        indexes = [
            models.Index(fields=["requester", "patient", "status"]),
            models.Index(fields=["patient", "status"]),
        ]

    def __str__(self) -> str:
        return f"AccessRequest {self.id} ({self.status})"

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
