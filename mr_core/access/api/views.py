# mr_core/access/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from mr_core.access.api.serializers import (
    AccessRequestCreateSerializer,
    AccessRequestReviewSerializer,
    AccessRequestSerializer,
)
from mr_core.access.models import AccessRequest, AccessRequestStatus
from mr_core.access.selectors import access_requests_visible_to
from mr_core.access.services import AccessRequestService, get_access_request_for_read
from mr_core.iam.identity import actor_from_request, require_principal


@extend_schema(tags=["Access requests"])
class AccessRequestViewSet(viewsets.GenericViewSet):
    serializer_class = AccessRequestSerializer
    queryset = AccessRequest.objects.none()

    def list(self, request):
        principal = require_principal(request)

        status_filter = request.query_params.get("status") or None
        if status_filter and status_filter not in AccessRequestStatus.values:
            raise ValidationError({"status": "Unknown status."})

        qs = access_requests_visible_to(principal, status=status_filter)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(AccessRequestSerializer(page, many=True).data)
        return Response(AccessRequestSerializer(qs, many=True).data)

    def retrieve(self, request, pk=None):
        actor = actor_from_request(request)
        req = get_access_request_for_read(actor, pk)
        return Response(AccessRequestSerializer(req).data, status=status.HTTP_200_OK)

    @extend_schema(request=AccessRequestCreateSerializer, responses={201: AccessRequestSerializer})
    def create(self, request):
        actor = actor_from_request(request)
        ser = AccessRequestCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        req = AccessRequestService.create_request(actor, **ser.validated_data)
        return Response(AccessRequestSerializer(req).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=AccessRequestReviewSerializer, responses={200: AccessRequestSerializer})
    @action(detail=True, methods=["post"], url_path="review")
    def review(self, request, pk=None):
        actor = actor_from_request(request)
        ser = AccessRequestReviewSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        req = AccessRequestService.review_request(
            actor,
            request_id=pk,
            decision=ser.validated_data["decision"],
        )
        return Response(AccessRequestSerializer(req).data, status=status.HTTP_200_OK)
