# mr_core/audit/api/serializers.py
from rest_framework import serializers

from mr_core.audit.models import AuditLogEntry


class AuditLogEntrySerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True, allow_null=True)
    username = serializers.CharField(source="user.username", read_only=True, default=None)
    patient_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = AuditLogEntry
        fields = [
            "id",
            "user_id",
            "username",
            "action",
            "resource_type",
            "resource_id",
            "patient_id",
            "ip_address",
            "user_agent",
            "timestamp",
            "details",
        ]
        read_only_fields = fields
