# mr_core/security/api/filters.py
import django_filters

from mr_core.security.models import AlertSeverity, SecurityAlert


class SecurityAlertFilter(django_filters.FilterSet):
    is_resolved = django_filters.BooleanFilter(field_name="is_resolved")
    severity = django_filters.ChoiceFilter(field_name="severity", choices=AlertSeverity.choices)
    alert_type = django_filters.CharFilter(field_name="alert_type")

    class Meta:
        model = SecurityAlert
        fields = ["is_resolved", "severity", "alert_type"]
