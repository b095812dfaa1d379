# mr_core/access/api/serializers.py
from rest_framework import serializers

from mr_core.access.models import AccessRequest, AccessRequestStatus


class AccessRequestSerializer(serializers.ModelSerializer):
    requester_id = serializers.IntegerField(read_only=True)
    patient_id = serializers.UUIDField(read_only=True)
    reviewer_id = serializers.IntegerField(read_only=True, allow_null=True)
    requester_username = serializers.CharField(source="requester.username", read_only=True)

    class Meta:
        model = AccessRequest
        fields = [
            "id",
            "requester_id",
            "requester_username",
            "patient_id",
            "reason",
            "status",
            "reviewer_id",
            "requested_at",
            "reviewed_at",
            "expires_at",
        ]
        read_only_fields = fields


class AccessRequestCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    reason = serializers.CharField(trim_whitespace=True)


class AccessRequestReviewSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(
        choices=[AccessRequestStatus.APPROVED, AccessRequestStatus.DENIED],
    )
