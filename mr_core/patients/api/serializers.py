# mr_core/patients/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mr_core.patients.models import BloodGroup, Gender, Patient


class PatientCreateSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    hospital_id = serializers.UUIDField(required=False, allow_null=True)
    date_of_birth = serializers.DateField()
    gender = serializers.ChoiceField(choices=Gender.choices, required=False, allow_blank=True, default="")
    blood_group = serializers.ChoiceField(choices=BloodGroup.choices, required=False, allow_blank=True, default="")
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    allergies = serializers.CharField(required=False, allow_blank=True, default="")
    guardian_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    guardian_phone = serializers.CharField(max_length=15, required=False, allow_blank=True, default="")
    guardian_relation = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    emergency_contact = serializers.CharField(max_length=15, required=False, allow_blank=True, default="")


class PatientUpdateSerializer(serializers.Serializer):
    """
    Partial update contract (PATCH). User and hospital are fixed.
    """
    date_of_birth = serializers.DateField(required=False)
    gender = serializers.ChoiceField(choices=Gender.choices, required=False, allow_blank=True)
    blood_group = serializers.ChoiceField(choices=BloodGroup.choices, required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    allergies = serializers.CharField(required=False, allow_blank=True)
    guardian_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    guardian_phone = serializers.CharField(max_length=15, required=False, allow_blank=True)
    guardian_relation = serializers.CharField(max_length=50, required=False, allow_blank=True)
    emergency_contact = serializers.CharField(max_length=15, required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class PatientSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    hospital_id = serializers.UUIDField(read_only=True)
    username = serializers.CharField(source="user.username", read_only=True)
    first_name = serializers.CharField(source="user.first_name", read_only=True)
    last_name = serializers.CharField(source="user.last_name", read_only=True)
    email = serializers.CharField(source="user.email", read_only=True)

    class Meta:
        model = Patient
        fields = [
            "id",
            "user_id",
            "username",
            "first_name",
            "last_name",
            "email",
            "hospital_id",
            "date_of_birth",
            "gender",
            "blood_group",
            "address",
            "allergies",
            "guardian_name",
            "guardian_phone",
            "guardian_relation",
            "emergency_contact",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
