# mr_core/iam/api/views.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response

from mr_core.common.lookups import parse_uuid
from mr_core.iam.api.serializers import UserCreateSerializer, UserRoleUpdateSerializer, UserSerializer
from mr_core.iam.identity import actor_from_request, require_principal
from mr_core.iam.selectors import users_visible_to
from mr_core.iam.services import UserService
from mr_core.policy.types import Role


@extend_schema(tags=["Users"])
class UserViewSet(viewsets.GenericViewSet):
    serializer_class = UserSerializer
    queryset = get_user_model().objects.none()

    def list(self, request):
        principal = require_principal(request)

        role = request.query_params.get("role") or None
        if role and role not in Role.values:
            raise ValidationError({"role": "Unknown role."})

        qs = users_visible_to(
            principal,
            role=role,
            hospital_id=parse_uuid(request.query_params.get("hospital_id"), "hospital_id"),
        )
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(UserSerializer(page, many=True).data)
        return Response(UserSerializer(qs, many=True).data)

    def retrieve(self, request, pk=None):
        user = users_visible_to(require_principal(request)).filter(pk=_int_pk(pk)).first()
        if user is None:
            raise NotFound("User not found.")
        return Response(UserSerializer(user).data)

    @extend_schema(request=UserCreateSerializer, responses={201: UserSerializer})
    def create(self, request):
        actor = actor_from_request(request)
        ser = UserCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        user = UserService.create_user(actor, **ser.validated_data)
        # re-read: the instance returned still caches the signal-built profile
        user = get_user_model().objects.select_related("mr_profile").get(pk=user.pk)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=UserRoleUpdateSerializer, responses={200: UserSerializer})
    @action(detail=True, methods=["patch"], url_path="role")
    def role(self, request, pk=None):
        actor = actor_from_request(request)
        ser = UserRoleUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        profile = UserService.update_role(actor, user_id=_int_pk(pk), **ser.validated_data)
        return Response(UserSerializer(profile.user).data, status=status.HTTP_200_OK)

    @extend_schema(request=None, responses={200: UserSerializer})
    @action(detail=True, methods=["post"], url_path="deactivate")
    def deactivate(self, request, pk=None):
        actor = actor_from_request(request)
        profile = UserService.deactivate(actor, user_id=_int_pk(pk))
        return Response(UserSerializer(profile.user).data, status=status.HTTP_200_OK)


def _int_pk(pk) -> int:
    try:
        return int(pk)
    except (TypeError, ValueError):
        raise NotFound("User not found.")
