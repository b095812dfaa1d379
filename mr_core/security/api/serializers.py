# mr_core/security/api/serializers.py
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from mr_core.security.models import AlertSeverity, SecurityAlert


class SecurityAlertSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True, allow_null=True)
    raised_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    resolved_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = SecurityAlert
        fields = [
            "id",
            "alert_type",
            "severity",
            "user_id",
            "description",
            "anomaly_score",
            "raised_by_id",
            "is_resolved",
            "resolved_by_id",
            "resolved_at",
            "created_at",
        ]
        read_only_fields = fields


class SecurityAlertCreateSerializer(serializers.Serializer):
    alert_type = serializers.CharField(max_length=50)
    severity = serializers.ChoiceField(choices=AlertSeverity.choices, default=AlertSeverity.MEDIUM)
    user_id = serializers.IntegerField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    anomaly_score = serializers.DecimalField(
        max_digits=5,
        decimal_places=4,
        required=False,
        allow_null=True,
        min_value=Decimal("0"),
        max_value=Decimal("1"),
    )
