# mr_core/security/admin.py
from django.contrib import admin

from mr_core.security.models import SecurityAlert


@admin.register(SecurityAlert)
class SecurityAlertAdmin(admin.ModelAdmin):
    list_display = ("alert_type", "severity", "user", "anomaly_score", "is_resolved", "created_at")
    list_filter = ("severity", "is_resolved")
    search_fields = ("alert_type", "description")
    readonly_fields = ("is_resolved", "resolved_by", "resolved_at", "created_at")
    ordering = ("-created_at",)
