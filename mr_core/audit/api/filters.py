# mr_core/audit/api/filters.py
import django_filters

from mr_core.audit.models import AuditLogEntry


class AuditLogEntryFilter(django_filters.FilterSet):
    patient_id = django_filters.UUIDFilter(field_name="patient_id")
    user_id = django_filters.NumberFilter(field_name="user_id")
    action = django_filters.CharFilter(field_name="action")
    resource_type = django_filters.CharFilter(field_name="resource_type")
    resource_id = django_filters.CharFilter(field_name="resource_id")
    since = django_filters.IsoDateTimeFilter(field_name="timestamp", lookup_expr="gte")
    until = django_filters.IsoDateTimeFilter(field_name="timestamp", lookup_expr="lt")

    class Meta:
        model = AuditLogEntry
        fields = ["patient_id", "user_id", "action", "resource_type", "resource_id"]
