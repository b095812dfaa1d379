# mr_core/hospitals/admin.py
from django.contrib import admin

from mr_core.hospitals.models import Hospital


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    list_display = ("name", "district", "phone", "email", "created_at")
    list_filter = ("district",)
    search_fields = ("name", "district", "email")
    ordering = ("name",)
