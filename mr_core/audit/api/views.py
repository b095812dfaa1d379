# mr_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from mr_core.audit.api.filters import AuditLogEntryFilter
from mr_core.audit.api.serializers import AuditLogEntrySerializer
from mr_core.audit.models import AuditLogEntry
from mr_core.audit.selectors import (
    audit_list_limit,
    list_audit_entries,
    list_audit_entries_for_patient,
)
from mr_core.common.api.pagination import PaginatedListMixin
from mr_core.iam.identity import require_principal
from mr_core.policy.guard import authorize
from mr_core.policy.types import Action, Resource, ResourceType


class AuditLogEntryViewSet(PaginatedListMixin, viewsets.GenericViewSet):
    """
    Read-only view of the audit trail.

    list: admin, filterable, capped to the newest MR_AUDIT_LIST_LIMIT rows.
    mine: the calling patient's own trail.
    """
    serializer_class = AuditLogEntrySerializer
    queryset = AuditLogEntry.objects.none()
    filterset_class = AuditLogEntryFilter

    def get_queryset(self):
        return list_audit_entries()

    @extend_schema(tags=["Audit"], responses={200: AuditLogEntrySerializer(many=True)})
    def list(self, request):
        principal = require_principal(request)
        authorize(principal, Action.READ, Resource(type=ResourceType.AUDIT_LOG))

        qs = self.filter_queryset(self.get_queryset())[: audit_list_limit()]
        return self.list_response(qs, AuditLogEntrySerializer)

    @extend_schema(tags=["Audit"], responses={200: AuditLogEntrySerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):
        principal = require_principal(request)
        authorize(
            principal,
            Action.READ,
            Resource(type=ResourceType.AUDIT_LOG, patient_id=principal.patient_id),
        )

        if principal.patient_id is None:
            qs = AuditLogEntry.objects.none()
        else:
            qs = list_audit_entries_for_patient(patient_id=principal.patient_id)
        return self.list_response(qs[: audit_list_limit()], AuditLogEntrySerializer)
