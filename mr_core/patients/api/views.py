# mr_core/patients/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.response import Response

from mr_core.common.api.pagination import PaginatedListMixin
from mr_core.common.lookups import parse_uuid
from mr_core.iam.identity import actor_from_request, require_principal
from mr_core.patients.api.serializers import (
    PatientCreateSerializer,
    PatientSerializer,
    PatientUpdateSerializer,
)
from mr_core.patients.models import Patient
from mr_core.patients.selectors import search_patients
from mr_core.patients.services import PatientService
from mr_core.records.api.serializers import MedicalRecordSerializer
from mr_core.records.selectors import records_visible_to


@extend_schema(tags=["Patients"])
class PatientViewSet(PaginatedListMixin, viewsets.GenericViewSet):
    serializer_class = PatientSerializer
    queryset = Patient.objects.none()

    def list(self, request):
        principal = require_principal(request)
        qs = search_patients(
            principal,
            q=request.query_params.get("q", ""),
            hospital_id=parse_uuid(request.query_params.get("hospital_id"), "hospital_id"),
        )

        return self.list_response(qs, PatientSerializer)

    def retrieve(self, request, pk=None):
        actor = actor_from_request(request)
        patient = PatientService.view_patient(actor, patient_id=pk)

        records = records_visible_to(actor.principal).filter(patient_id=patient.id)
        data = PatientSerializer(patient).data
        data["medical_records"] = MedicalRecordSerializer(records, many=True).data
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(request=PatientCreateSerializer, responses={201: PatientSerializer})
    def create(self, request):
        actor = actor_from_request(request)
        ser = PatientCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.create_patient(actor, **ser.validated_data)
        return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=PatientUpdateSerializer, responses={200: PatientSerializer})
    def partial_update(self, request, pk=None):
        actor = actor_from_request(request)
        ser = PatientUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.update_patient(actor, patient_id=pk, data=ser.validated_data)
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)
