# mr_core/iam/openapi.py
from django.conf import settings
from drf_spectacular.extensions import OpenApiAuthenticationExtension
from drf_spectacular.plumbing import build_bearer_security_scheme_object


class CookieOrHeaderJWTScheme(OpenApiAuthenticationExtension):
    """
    Documents CookieOrHeaderJWTAuthentication as one bearer scheme.
    """
    target_class = "mr_core.iam.auth.CookieOrHeaderJWTAuthentication"
    name = "BearerOrCookieJWT"

    def get_security_definition(self, auto_schema):
        cookie = settings.SIMPLE_JWT.get("AUTH_COOKIE", "mr_access")
        scheme = build_bearer_security_scheme_object(
            header_name="HTTP_AUTHORIZATION",
            token_prefix="Bearer",
            bearer_format="JWT",
        )
        scheme["description"] = (
            f"Access token in `Authorization: Bearer <token>`, or the HttpOnly "
            f"`{cookie}` cookie set by /api/v1/auth/login/."
        )
        return scheme
