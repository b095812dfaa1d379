# mr_core/iam/api/serializers.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from mr_core.policy.types import Role


class UserSerializer(serializers.ModelSerializer):
    role = serializers.CharField(source="mr_profile.role", read_only=True)
    hospital_id = serializers.UUIDField(source="mr_profile.hospital_id", read_only=True, allow_null=True)
    phone = serializers.CharField(source="mr_profile.phone", read_only=True)
    is_active = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "role",
            "hospital_id",
            "phone",
            "is_active",
            "date_joined",
        ]
        read_only_fields = fields

    def get_is_active(self, obj) -> bool:
        return bool(obj.is_active and obj.mr_profile.is_active)


class UserCreateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, min_length=8)
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=15, required=False, allow_blank=True, default="")
    role = serializers.ChoiceField(choices=Role.choices, default=Role.PATIENT)
    hospital_id = serializers.UUIDField(required=False, allow_null=True, default=None)


class UserRoleUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=Role.choices)
    hospital_id = serializers.UUIDField(required=False, allow_null=True, default=None)
