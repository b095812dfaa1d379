# mr_core/hospitals/services.py
from __future__ import annotations

from django.db import transaction

from mr_core.audit.models import AuditAction
from mr_core.audit.services import AuditService
from mr_core.hospitals.models import DEFAULT_DISTRICT, Hospital
from mr_core.iam.identity import ActorContext
from mr_core.policy.guard import authorize
from mr_core.policy.types import Action, Resource, ResourceType


class HospitalService:
    @staticmethod
    @transaction.atomic
    def create(
        actor: ActorContext,
        *,
        name: str,
        address: str = "",
        district: str = "",
        phone: str = "",
        email: str = "",
    ) -> Hospital:
        authorize(actor.principal, Action.CREATE, Resource(type=ResourceType.HOSPITAL))

        hospital = Hospital.objects.create(
            name=name,
            address=address or "",
            district=district or DEFAULT_DISTRICT,
            phone=phone or "",
            email=email or "",
        )

        AuditService.record(
            actor,
            action=AuditAction.CREATE_HOSPITAL,
            resource_type=ResourceType.HOSPITAL,
            resource_id=hospital.id,
            details={"name": hospital.name},
        )
        return hospital
