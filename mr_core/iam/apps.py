# mr_core/iam/apps.py
from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mr_core.iam"
    verbose_name = "Identity & roles"

    def ready(self) -> None:
        # profile-on-create receiver + OpenAPI auth scheme registration
        from mr_core.iam import openapi, signals  # noqa: F401
