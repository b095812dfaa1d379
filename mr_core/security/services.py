# mr_core/security/services.py
from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from mr_core.audit.models import AuditAction
from mr_core.audit.services import AuditService
from mr_core.common.api.exceptions import InvalidStateTransition
from mr_core.common.lookups import get_or_not_found
from mr_core.iam.identity import ActorContext
from mr_core.policy.guard import authorize
from mr_core.policy.types import Action, Resource, ResourceType
from mr_core.security.models import AlertSeverity, SecurityAlert

logger = logging.getLogger(__name__)


class SecurityAlertService:
    @staticmethod
    @transaction.atomic
    def create_alert(
        actor: ActorContext,
        *,
        alert_type: str,
        severity: str = AlertSeverity.MEDIUM,
        user_id: int | None = None,
        description: str = "",
        anomaly_score: Decimal | None = None,
    ) -> SecurityAlert:
        authorize(actor.principal, Action.CREATE, Resource(type=ResourceType.SECURITY_ALERT))

        if user_id is not None:
            get_or_not_found(get_user_model().objects.all(), "User not found.", pk=user_id)

        alert = SecurityAlert.objects.create(
            alert_type=alert_type,
            severity=severity,
            user_id=user_id,
            description=description or "",
            anomaly_score=anomaly_score,
            raised_by_id=actor.user_id,
        )

        AuditService.record(
            actor,
            action=AuditAction.CREATE_SECURITY_ALERT,
            resource_type=ResourceType.SECURITY_ALERT,
            resource_id=alert.id,
            details={"alert_type": alert.alert_type, "severity": alert.severity},
        )
        if alert.severity in (AlertSeverity.HIGH, AlertSeverity.CRITICAL):
            logger.warning("security alert %s raised: %s [%s]", alert.id, alert.alert_type, alert.severity)
        return alert

    @staticmethod
    @transaction.atomic
    def resolve_alert(actor: ActorContext, *, alert_id: UUID) -> SecurityAlert:
        """
        Resolve exactly once; a second attempt is an InvalidStateTransition.
        """
        authorize(actor.principal, Action.UPDATE, Resource(type=ResourceType.SECURITY_ALERT))
        alert = get_or_not_found(
            SecurityAlert.objects.select_for_update(),
            "Security alert not found.",
            id=alert_id,
        )

        if alert.is_resolved:
            raise InvalidStateTransition("Security alert is already resolved.")

        alert.is_resolved = True
        alert.resolved_by_id = actor.user_id
        alert.resolved_at = timezone.now()
        alert.save(update_fields=["is_resolved", "resolved_by", "resolved_at"])

        AuditService.record(
            actor,
            action=AuditAction.RESOLVE_SECURITY_ALERT,
            resource_type=ResourceType.SECURITY_ALERT,
            resource_id=alert.id,
        )
        return alert
