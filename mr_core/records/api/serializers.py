# mr_core/records/api/serializers.py
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from mr_core.records.models import MedicalRecord, VitalSigns, blood_pressure_validator


class VitalSignsSerializer(serializers.ModelSerializer):
    medical_record_id = serializers.UUIDField(read_only=True)
    recorded_by_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = VitalSigns
        fields = [
            "id",
            "medical_record_id",
            "recorded_by_id",
            "temperature",
            "blood_pressure",
            "pulse_rate",
            "respiratory_rate",
            "weight",
            "height",
            "bmi",
            "recorded_at",
        ]
        read_only_fields = fields


class VitalSignsCreateSerializer(serializers.Serializer):
    medical_record_id = serializers.UUIDField()
    temperature = serializers.DecimalField(
        max_digits=4, decimal_places=2, required=False, allow_null=True,
        min_value=Decimal("25"), max_value=Decimal("45"),
    )
    blood_pressure = serializers.CharField(
        max_length=10, required=False, allow_blank=True, default="",
        validators=[blood_pressure_validator],
    )
    pulse_rate = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=300)
    respiratory_rate = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=120)
    weight = serializers.DecimalField(
        max_digits=5, decimal_places=2, required=False, allow_null=True, min_value=Decimal("0.01"),
    )
    height = serializers.DecimalField(
        max_digits=5, decimal_places=2, required=False, allow_null=True, min_value=Decimal("1"),
    )


class MedicalRecordSerializer(serializers.ModelSerializer):
    patient_id = serializers.UUIDField(read_only=True)
    doctor_id = serializers.IntegerField(read_only=True)
    hospital_id = serializers.UUIDField(read_only=True)
    doctor_name = serializers.SerializerMethodField()

    class Meta:
        model = MedicalRecord
        fields = [
            "id",
            "patient_id",
            "doctor_id",
            "doctor_name",
            "hospital_id",
            "visit_date",
            "chief_complaint",
            "diagnosis",
            "prescription",
            "lab_results",
            "treatment_plan",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_doctor_name(self, obj) -> str:
        return obj.doctor.get_full_name() or obj.doctor.get_username()


class MedicalRecordCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    doctor_id = serializers.IntegerField(required=False, allow_null=True)
    visit_date = serializers.DateTimeField()
    chief_complaint = serializers.CharField(required=False, allow_blank=True, default="")
    diagnosis = serializers.CharField(required=False, allow_blank=True, default="")
    prescription = serializers.CharField(required=False, allow_blank=True, default="")
    lab_results = serializers.CharField(required=False, allow_blank=True, default="")
    treatment_plan = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class MedicalRecordUpdateSerializer(serializers.Serializer):
    """
    PATCH contract. visit_date is accepted only so it can be rejected explicitly.
    """
    visit_date = serializers.DateTimeField(required=False)
    chief_complaint = serializers.CharField(required=False, allow_blank=True)
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    prescription = serializers.CharField(required=False, allow_blank=True)
    lab_results = serializers.CharField(required=False, allow_blank=True)
    treatment_plan = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs
