# mr_core/hospitals/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.response import Response

from mr_core.hospitals.api.serializers import HospitalCreateSerializer, HospitalSerializer
from mr_core.hospitals.models import Hospital
from mr_core.hospitals.selectors import list_hospitals
from mr_core.hospitals.services import HospitalService
from mr_core.iam.identity import actor_from_request


@extend_schema(tags=["Hospitals"])
class HospitalViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Any principal may read hospitals; only admins create them.
    There is no update or delete.
    """
    serializer_class = HospitalSerializer
    queryset = Hospital.objects.none()

    def get_queryset(self):
        return list_hospitals(district=self.request.query_params.get("district") or None)

    @extend_schema(request=HospitalCreateSerializer, responses={201: HospitalSerializer})
    def create(self, request):
        actor = actor_from_request(request)
        s = HospitalCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        hospital = HospitalService.create(actor, **s.validated_data)
        return Response(HospitalSerializer(hospital).data, status=status.HTTP_201_CREATED)
