# mr_core/records/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, status, viewsets
from rest_framework.response import Response

from mr_core.common.api.pagination import PaginatedListMixin
from mr_core.common.lookups import parse_uuid
from mr_core.iam.identity import actor_from_request, require_principal
from mr_core.records.api.serializers import (
    MedicalRecordCreateSerializer,
    MedicalRecordSerializer,
    MedicalRecordUpdateSerializer,
    VitalSignsCreateSerializer,
    VitalSignsSerializer,
)
from mr_core.records.models import MedicalRecord, VitalSigns
from mr_core.records.selectors import (
    records_for_patient,
    records_visible_to,
    vitals_for_patient,
    vitals_for_record,
    vitals_visible_to,
)
from mr_core.records.services import MedicalRecordService, VitalSignsService


@extend_schema(tags=["Medical records"])
class MedicalRecordViewSet(PaginatedListMixin, viewsets.GenericViewSet):
    serializer_class = MedicalRecordSerializer
    queryset = MedicalRecord.objects.none()

    @extend_schema(
        parameters=[OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY, required=False)],
    )
    def list(self, request):
        principal = require_principal(request)
        qs = records_visible_to(principal)

        patient_id = parse_uuid(request.query_params.get("patient_id"), "patient_id")
        if patient_id:
            qs = qs.filter(patient_id=patient_id)
        return self.list_response(qs, MedicalRecordSerializer)

    def retrieve(self, request, pk=None):
        actor = actor_from_request(request)
        record = MedicalRecordService.view_record(actor, record_id=pk)

        data = MedicalRecordSerializer(record).data
        data["vital_signs"] = VitalSignsSerializer(vitals_for_record(medical_record_id=record.id), many=True).data
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(request=MedicalRecordCreateSerializer, responses={201: MedicalRecordSerializer})
    def create(self, request):
        actor = actor_from_request(request)
        ser = MedicalRecordCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        record = MedicalRecordService.create_record(actor, **ser.validated_data)
        return Response(MedicalRecordSerializer(record).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=MedicalRecordUpdateSerializer, responses={200: MedicalRecordSerializer})
    def partial_update(self, request, pk=None):
        actor = actor_from_request(request)
        ser = MedicalRecordUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        record = MedicalRecordService.update_record(actor, record_id=pk, data=ser.validated_data)
        return Response(MedicalRecordSerializer(record).data, status=status.HTTP_200_OK)


@extend_schema(tags=["Vital signs"])
class VitalSignsViewSet(PaginatedListMixin, viewsets.GenericViewSet):
    """
    Vital signs are append-only: list and create, nothing else.
    """
    serializer_class = VitalSignsSerializer
    queryset = VitalSigns.objects.none()

    @extend_schema(
        parameters=[OpenApiParameter("medical_record_id", OpenApiTypes.UUID, OpenApiParameter.QUERY, required=False)],
    )
    def list(self, request):
        principal = require_principal(request)
        qs = vitals_visible_to(principal)

        record_id = parse_uuid(request.query_params.get("medical_record_id"), "medical_record_id")
        if record_id:
            qs = qs.filter(medical_record_id=record_id)
        return self.list_response(qs, VitalSignsSerializer)

    @extend_schema(request=VitalSignsCreateSerializer, responses={201: VitalSignsSerializer})
    def create(self, request):
        actor = actor_from_request(request)
        ser = VitalSignsCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        vitals = VitalSignsService.record_vitals(actor, **ser.validated_data)
        return Response(VitalSignsSerializer(vitals).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Medical records"])
class MyRecordsView(PaginatedListMixin, generics.GenericAPIView):
    """
    The calling patient's own records, newest visit first.
    Callers without a patient row get an empty list.
    """
    serializer_class = MedicalRecordSerializer
    queryset = MedicalRecord.objects.none()

    def get(self, request):
        principal = require_principal(request)
        if principal.patient_id is None:
            qs = MedicalRecord.objects.none()
        else:
            qs = records_for_patient(patient_id=principal.patient_id)
        return self.list_response(qs, MedicalRecordSerializer)


@extend_schema(tags=["Vital signs"])
class MyVitalsView(PaginatedListMixin, generics.GenericAPIView):
    serializer_class = VitalSignsSerializer
    queryset = VitalSigns.objects.none()

    def get(self, request):
        principal = require_principal(request)
        if principal.patient_id is None:
            qs = VitalSigns.objects.none()
        else:
            qs = vitals_for_patient(patient_id=principal.patient_id)
        return self.list_response(qs, VitalSignsSerializer)
