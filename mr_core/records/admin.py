# mr_core/records/admin.py
from django.contrib import admin

from mr_core.records.models import MedicalRecord, VitalSigns


class VitalSignsInline(admin.TabularInline):
    model = VitalSigns
    extra = 0
    can_delete = False
    readonly_fields = (
        "recorded_by",
        "temperature",
        "blood_pressure",
        "pulse_rate",
        "respiratory_rate",
        "weight",
        "height",
        "bmi",
        "recorded_at",
    )

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "patient", "doctor", "hospital", "visit_date")
    list_filter = ("hospital",)
    search_fields = ("diagnosis", "chief_complaint", "patient__user__username")
    readonly_fields = ("visit_date", "hospital", "created_at", "updated_at")
    ordering = ("-visit_date",)
    inlines = [VitalSignsInline]
