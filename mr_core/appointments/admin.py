# mr_core/appointments/admin.py
from django.contrib import admin

from mr_core.appointments.models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("id", "patient", "doctor", "hospital", "start_time", "end_time", "status")
    list_filter = ("hospital", "status")
    search_fields = ("patient__user__username", "doctor__username", "reason")
    ordering = ("-start_time",)
