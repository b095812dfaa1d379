# mr_core/audit/admin.py
from django.contrib import admin

from mr_core.audit.models import AuditLogEntry


@admin.register(AuditLogEntry)
class AuditLogEntryAdmin(admin.ModelAdmin):
    list_display = (
        "timestamp",
        "action",
        "resource_type",
        "resource_id",
        "patient",
        "user",
        "ip_address",
    )
    list_filter = ("action", "resource_type")
    search_fields = ("action", "resource_type", "resource_id")
    ordering = ("-timestamp",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
