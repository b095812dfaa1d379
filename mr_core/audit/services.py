# mr_core/audit/services.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from django.db import DatabaseError, transaction

from mr_core.audit.models import AuditLogEntry
from mr_core.common.api.exceptions import AuditWriteFailure
from mr_core.iam.identity import ActorContext

logger = logging.getLogger(__name__)


class AuditService:
    """
    Central audit writer.

    Callers invoke record() as the last step inside their own
    transaction.atomic block, after the audited change is persisted.
    A failed write raises AuditWriteFailure, which rolls the caller back.
    """

    @staticmethod
    def record(
        actor: ActorContext,
        *,
        action: str,
        resource_type: str,
        resource_id: Any,
        patient_id: UUID | None = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditLogEntry:
        fields = {
            "user_id": actor.user_id,
            "action": str(action),
            "resource_type": str(resource_type),
            "resource_id": "" if resource_id is None else str(resource_id),
            "patient_id": patient_id,
            "ip_address": actor.ip_address,
            "user_agent": (actor.user_agent or "")[:512],
            "details": details or {},
        }
        try:
            # savepoint: a failed insert leaves the outer transaction usable for rollback
            with transaction.atomic():
                return AuditService._write(**fields)
        except DatabaseError as exc:
            logger.error(
                "audit write failed action=%s resource=%s:%s user=%s",
                fields["action"],
                fields["resource_type"],
                fields["resource_id"],
                fields["user_id"],
                exc_info=exc,
            )
            raise AuditWriteFailure() from exc

    @staticmethod
    def _write(**fields) -> AuditLogEntry:
        return AuditLogEntry.objects.create(**fields)
