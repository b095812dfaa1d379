# mr_core/security/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from mr_core.iam.identity import actor_from_request, require_principal
from mr_core.policy.guard import authorize
from mr_core.policy.types import Action, Resource, ResourceType
from mr_core.security.api.filters import SecurityAlertFilter
from mr_core.security.api.serializers import SecurityAlertCreateSerializer, SecurityAlertSerializer
from mr_core.security.models import SecurityAlert
from mr_core.security.selectors import list_security_alerts
from mr_core.security.services import SecurityAlertService


@extend_schema(tags=["Security alerts"])
class SecurityAlertViewSet(viewsets.GenericViewSet):
    """
    Anyone may raise an alert; only admins read and resolve them.
    """
    serializer_class = SecurityAlertSerializer
    queryset = SecurityAlert.objects.none()
    filterset_class = SecurityAlertFilter

    def get_queryset(self):
        return list_security_alerts()

    def list(self, request):
        principal = require_principal(request)
        authorize(principal, Action.READ, Resource(type=ResourceType.SECURITY_ALERT))

        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(SecurityAlertSerializer(page, many=True).data)
        return Response(SecurityAlertSerializer(qs, many=True).data)

    def retrieve(self, request, pk=None):
        principal = require_principal(request)
        authorize(principal, Action.READ, Resource(type=ResourceType.SECURITY_ALERT))
        return Response(SecurityAlertSerializer(self.get_object()).data)

    @extend_schema(request=SecurityAlertCreateSerializer, responses={201: SecurityAlertSerializer})
    def create(self, request):
        actor = actor_from_request(request)
        ser = SecurityAlertCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        alert = SecurityAlertService.create_alert(actor, **ser.validated_data)
        return Response(SecurityAlertSerializer(alert).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: SecurityAlertSerializer})
    @action(detail=True, methods=["post"], url_path="resolve")
    def resolve(self, request, pk=None):
        actor = actor_from_request(request)
        alert = SecurityAlertService.resolve_alert(actor, alert_id=pk)
        return Response(SecurityAlertSerializer(alert).data, status=status.HTTP_200_OK)
