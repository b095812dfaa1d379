# mr_core/access/admin.py
from django.contrib import admin

from mr_core.access.models import AccessRequest


@admin.register(AccessRequest)
class AccessRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "requester", "patient", "status", "reviewer", "requested_at", "reviewed_at", "expires_at")
    list_filter = ("status",)
    search_fields = ("requester__username", "patient__user__username", "reason")
    readonly_fields = ("status", "reviewer", "requested_at", "reviewed_at", "expires_at")
    ordering = ("-requested_at",)
