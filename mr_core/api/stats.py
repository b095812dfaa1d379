# mr_core/api/stats.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import serializers
from rest_framework.response import Response
from rest_framework.views import APIView

from mr_core.access.models import AccessRequest, AccessRequestStatus
from mr_core.hospitals.models import Hospital
from mr_core.iam.identity import require_principal
from mr_core.patients.models import Patient
from mr_core.policy.guard import authorize
from mr_core.policy.types import Action, Resource, ResourceType
from mr_core.records.models import MedicalRecord
from mr_core.security.models import SecurityAlert


def dashboard_counts() -> dict[str, int]:
    return {
        "total_users": get_user_model().objects.count(),
        "total_hospitals": Hospital.objects.count(),
        "total_patients": Patient.objects.count(),
        "total_records": MedicalRecord.objects.count(),
        "pending_requests": AccessRequest.objects.filter(status=AccessRequestStatus.PENDING).count(),
        "unresolved_alerts": SecurityAlert.objects.filter(is_resolved=False).count(),
    }


class StatsView(APIView):
    @extend_schema(
        tags=["Stats"],
        responses={
            200: inline_serializer(
                name="DashboardStats",
                fields={
                    "total_users": serializers.IntegerField(),
                    "total_hospitals": serializers.IntegerField(),
                    "total_patients": serializers.IntegerField(),
                    "total_records": serializers.IntegerField(),
                    "pending_requests": serializers.IntegerField(),
                    "unresolved_alerts": serializers.IntegerField(),
                },
            )
        },
    )
    def get(self, request):
        authorize(require_principal(request), Action.READ, Resource(type=ResourceType.STATS))
        return Response(dashboard_counts())
