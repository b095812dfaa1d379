# mr_core/security/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from mr_core.security.models import SecurityAlert


def list_security_alerts() -> QuerySet[SecurityAlert]:
    return SecurityAlert.objects.select_related("user", "resolved_by").order_by("-created_at")
