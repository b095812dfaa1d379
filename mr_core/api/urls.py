# mr_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from mr_core.access.api.views import AccessRequestViewSet
from mr_core.api.stats import StatsView
from mr_core.appointments.api.views import AppointmentViewSet
from mr_core.audit.api.views import AuditLogEntryViewSet
from mr_core.hospitals.api.views import HospitalViewSet
from mr_core.iam.api.auth import LoginView, LogoutView, RefreshView
from mr_core.iam.api.me import MeView
from mr_core.iam.api.views import UserViewSet
from mr_core.patients.api.views import PatientViewSet
from mr_core.records.api.views import MedicalRecordViewSet, MyRecordsView, MyVitalsView, VitalSignsViewSet
from mr_core.security.api.views import SecurityAlertViewSet

router = DefaultRouter()

router.register(r"users", UserViewSet, basename="users")
router.register(r"hospitals", HospitalViewSet, basename="hospitals")
router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"medical-records", MedicalRecordViewSet, basename="medical-records")
router.register(r"vital-signs", VitalSignsViewSet, basename="vital-signs")
router.register(r"appointments", AppointmentViewSet, basename="appointments")
router.register(r"access-requests", AccessRequestViewSet, basename="access-requests")
router.register(r"audit-logs", AuditLogEntryViewSet, basename="audit-logs")
router.register(r"security-alerts", SecurityAlertViewSet, basename="security-alerts")

urlpatterns = [
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),
    path("my-records/", MyRecordsView.as_view(), name="my-records"),
    path("my-vitals/", MyVitalsView.as_view(), name="my-vitals"),
    path("stats/", StatsView.as_view(), name="stats"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
