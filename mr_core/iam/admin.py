# mr_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from mr_core.iam.models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "hospital", "is_active", "created_at", "updated_at")
    list_filter = ("role", "hospital", "is_active")
    search_fields = ("user__username", "user__email")
    ordering = ("-created_at",)
