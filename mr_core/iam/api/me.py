# mr_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from mr_core.iam.api.schema_serializers import MeResponseSerializer
from mr_core.iam.identity import require_principal


class MeView(APIView):
    """
    Caller identity as the policy sees it.
    """

    @extend_schema(responses={200: MeResponseSerializer}, tags=["Auth"])
    def get(self, request):
        principal = require_principal(request)
        user = request.user
        return Response(
            {
                "id": user.pk,
                "username": user.get_username(),
                "email": getattr(user, "email", "") or "",
                "first_name": getattr(user, "first_name", "") or "",
                "last_name": getattr(user, "last_name", "") or "",
                "role": principal.role.value,
                "hospital_id": principal.hospital_id,
                "patient_id": principal.patient_id,
            },
            status=status.HTTP_200_OK,
        )
