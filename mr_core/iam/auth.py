# mr_core/iam/auth.py

from __future__ import annotations

from django.conf import settings
from django.utils.translation import gettext_lazy as _
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed

from mr_core.iam.models import UserProfile


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    Access token from the Authorization header, falling back to the
    HttpOnly access cookie set at login.

    Tokens issued before a user was deactivated stop working immediately:
    simplejwt checks `User.is_active`, and we additionally check the profile.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header:
            return super().authenticate(request)

        raw_token = request.COOKIES.get(settings.SIMPLE_JWT.get("AUTH_COOKIE", "mr_access"))
        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        profile = UserProfile.objects.filter(user_id=user.pk).only("is_active").first()
        if profile is not None and not profile.is_active:
            raise AuthenticationFailed(_("User is inactive"), code="user_inactive")
        return user
