# mr_core/patients/admin.py
from django.contrib import admin

from mr_core.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "hospital", "date_of_birth", "gender", "blood_group", "created_at")
    list_filter = ("hospital", "gender", "blood_group")
    search_fields = ("user__username", "user__first_name", "user__last_name", "user__email")
    ordering = ("-created_at",)
