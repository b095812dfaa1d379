# mr_core/appointments/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from mr_core.appointments.api.serializers import (
    AppointmentCreateSerializer,
    AppointmentSerializer,
    AppointmentStatusSerializer,
)
from mr_core.appointments.models import Appointment, AppointmentStatus
from mr_core.appointments.selectors import appointments_visible_to
from mr_core.appointments.services import AppointmentService, get_appointment_for_read
from mr_core.common.lookups import parse_uuid
from mr_core.iam.identity import actor_from_request, require_principal


@extend_schema(tags=["Appointments"])
class AppointmentViewSet(viewsets.GenericViewSet):
    serializer_class = AppointmentSerializer
    queryset = Appointment.objects.none()

    def list(self, request):
        principal = require_principal(request)

        status_q = request.query_params.get("status") or None
        if status_q and status_q not in AppointmentStatus.values:
            raise ValidationError({"status": "Unknown status."})

        doctor_q = request.query_params.get("doctor_id") or None
        try:
            doctor_id = int(doctor_q) if doctor_q else None
        except ValueError:
            raise ValidationError({"doctor_id": "Invalid doctor_id (int expected)"})

        qs = appointments_visible_to(
            principal,
            status=status_q,
            doctor_id=doctor_id,
            patient_id=parse_uuid(request.query_params.get("patient_id"), "patient_id"),
        )
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(AppointmentSerializer(page, many=True).data)
        return Response(AppointmentSerializer(qs, many=True).data)

    def retrieve(self, request, pk=None):
        actor = actor_from_request(request)
        appt = get_appointment_for_read(actor, pk)
        return Response(AppointmentSerializer(appt).data)

    @extend_schema(request=AppointmentCreateSerializer, responses={201: AppointmentSerializer})
    def create(self, request):
        actor = actor_from_request(request)
        ser = AppointmentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        appt = AppointmentService.create_appointment(actor, **ser.validated_data)
        return Response(AppointmentSerializer(appt).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=AppointmentStatusSerializer, responses={200: AppointmentSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        actor = actor_from_request(request)
        ser = AppointmentStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        appt = AppointmentService.update_status(actor, appointment_id=pk, status=ser.validated_data["status"])
        return Response(AppointmentSerializer(appt).data, status=status.HTTP_200_OK)
