# mr_core/access/services.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from mr_core.access.models import AccessRequest, AccessRequestStatus, TERMINAL_STATUSES
from mr_core.audit.models import AuditAction
from mr_core.audit.services import AuditService
from mr_core.common.api.exceptions import InvalidStateTransition
from mr_core.common.lookups import get_or_not_found
from mr_core.iam.identity import ActorContext
from mr_core.patients.models import Patient
from mr_core.policy.guard import authorize
from mr_core.policy.types import Action, Resource, ResourceType

logger = logging.getLogger(__name__)


def access_request_resource(req: AccessRequest) -> Resource:
    return Resource(
        type=ResourceType.ACCESS_REQUEST,
        hospital_id=req.patient.hospital_id,
        patient_id=req.patient_id,
        owner_user_id=req.requester_id,
    )


def grant_expiry(reviewed_at: datetime) -> datetime | None:
    ttl_days = getattr(settings, "MR_ACCESS_GRANT_TTL_DAYS", None)
    if not ttl_days:
        return None
    return reviewed_at + timedelta(days=int(ttl_days))


def get_access_request_for_read(actor: ActorContext, request_id: UUID) -> AccessRequest:
    req = get_or_not_found(
        AccessRequest.objects.select_related("requester", "patient", "reviewer"),
        "Access request not found.",
        id=request_id,
    )
    authorize(actor.principal, Action.READ, access_request_resource(req))
    return req


class AccessRequestService:
    @staticmethod
    @transaction.atomic
    def create_request(actor: ActorContext, *, patient_id: UUID, reason: str) -> AccessRequest:
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError({"reason": "A reason is required."})

        patient = get_or_not_found(Patient.objects.all(), "Patient not found.", id=patient_id)
        authorize(
            actor.principal,
            Action.CREATE,
            Resource(
                type=ResourceType.ACCESS_REQUEST,
                hospital_id=patient.hospital_id,
                patient_id=patient.id,
                owner_user_id=actor.user_id,
            ),
        )

        req = AccessRequest.objects.create(
            requester_id=actor.user_id,
            patient=patient,
            reason=reason,
        )

        AuditService.record(
            actor,
            action=AuditAction.CREATE_ACCESS_REQUEST,
            resource_type=ResourceType.ACCESS_REQUEST,
            resource_id=req.id,
            patient_id=patient.id,
        )
        return req

    @staticmethod
    @transaction.atomic
    def review_request(actor: ActorContext, *, request_id: UUID, decision: str) -> AccessRequest:
        """
        pending -> approved | denied. Any other starting state is an
        InvalidStateTransition and writes nothing.
        """
        if decision not in TERMINAL_STATUSES:
            raise ValidationError({"decision": "Must be 'approved' or 'denied'."})

        req = get_or_not_found(
            AccessRequest.objects.select_for_update(),
            "Access request not found.",
            id=request_id,
        )
        authorize(actor.principal, Action.UPDATE, access_request_resource(req))

        if req.status != AccessRequestStatus.PENDING:
            raise InvalidStateTransition(f"Access request is already {req.status}.")

        now = timezone.now()
        req.status = decision
        req.reviewer_id = actor.user_id
        req.reviewed_at = now
        req.expires_at = grant_expiry(now) if decision == AccessRequestStatus.APPROVED else None
        req.save(update_fields=["status", "reviewer", "reviewed_at", "expires_at"])

        AuditService.record(
            actor,
            action=f"{decision}_access_request",
            resource_type=ResourceType.ACCESS_REQUEST,
            resource_id=req.id,
            patient_id=req.patient_id,
            details={"expires_at": req.expires_at} if req.expires_at else None,
        )
        logger.info("access request %s %s by user=%s", req.id, decision, actor.user_id)
        return req
