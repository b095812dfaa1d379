# mr_core/iam/api/auth.py

from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer

from mr_core.common.api.exceptions import AuthenticationRequired
from mr_core.iam.api.schema_serializers import DetailResponseSerializer, LoginRequestSerializer
from mr_core.iam.models import UserProfile

logger = logging.getLogger(__name__)


def _jwt_cfg() -> dict:
    return getattr(settings, "SIMPLE_JWT", {}) or {}


def _lifetime_seconds(key: str, default: timedelta) -> int:
    value = _jwt_cfg().get(key, default)
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    return int(value)


def _set_auth_cookies(response: Response, *, access: str, refresh: str) -> None:
    cfg = _jwt_cfg()
    common = {
        "httponly": bool(cfg.get("AUTH_COOKIE_HTTP_ONLY", True)),
        "secure": bool(cfg.get("AUTH_COOKIE_SECURE", False)),
        "samesite": cfg.get("AUTH_COOKIE_SAMESITE", "Lax"),
        "path": "/",
    }
    response.set_cookie(
        cfg.get("AUTH_COOKIE", "mr_access"),
        access,
        max_age=_lifetime_seconds("ACCESS_TOKEN_LIFETIME", timedelta(minutes=10)),
        **common,
    )
    response.set_cookie(
        cfg.get("AUTH_COOKIE_REFRESH", "mr_refresh"),
        refresh,
        max_age=_lifetime_seconds("REFRESH_TOKEN_LIFETIME", timedelta(days=14)),
        **common,
    )


def _clear_auth_cookies(response: Response) -> None:
    cfg = _jwt_cfg()
    response.delete_cookie(cfg.get("AUTH_COOKIE", "mr_access"), path="/")
    response.delete_cookie(cfg.get("AUTH_COOKIE_REFRESH", "mr_refresh"), path="/")


class LoginView(APIView):
    """
    Username/password -> JWT pair in HttpOnly cookies.
    Deactivated accounts are refused even if Django still considers them active.
    """
    permission_classes = [AllowAny]

    @extend_schema(request=LoginRequestSerializer, responses={200: DetailResponseSerializer}, tags=["Auth"])
    def post(self, request):
        serializer = TokenObtainPairSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = serializer.user
        if not UserProfile.objects.filter(user_id=user.pk, is_active=True).exists():
            logger.warning("login refused for inactive profile user=%s", user.pk)
            raise AuthenticationRequired("Account is inactive.")

        res = Response({"detail": "login ok"}, status=status.HTTP_200_OK)
        _set_auth_cookies(
            res,
            access=serializer.validated_data["access"],
            refresh=serializer.validated_data["refresh"],
        )
        logger.info("login user=%s", user.pk)
        return res


class RefreshView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(request=None, responses={200: DetailResponseSerializer}, tags=["Auth"])
    def post(self, request):
        refresh = request.data.get("refresh") or request.COOKIES.get(
            _jwt_cfg().get("AUTH_COOKIE_REFRESH", "mr_refresh")
        )

        serializer = TokenRefreshSerializer(data={"refresh": refresh})
        serializer.is_valid(raise_exception=True)

        res = Response({"detail": "refreshed"}, status=status.HTTP_200_OK)
        _set_auth_cookies(
            res,
            access=serializer.validated_data["access"],
            refresh=serializer.validated_data.get("refresh", refresh),
        )
        return res


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: DetailResponseSerializer}, tags=["Auth"])
    def post(self, request):
        res = Response({"detail": "logged out"}, status=status.HTTP_200_OK)
        _clear_auth_cookies(res)
        return res
