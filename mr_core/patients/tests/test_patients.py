import datetime

import pytest
from django.utils import timezone

from mr_core.audit.models import AuditLogEntry
from mr_core.patients.models import Patient
from mr_core.policy.types import Role
from mr_core.records.services import MedicalRecordService
from mr_core.tests.helpers import actor_for, error_code, make_user

pytestmark = pytest.mark.django_db


def test_nurse_registers_patient_at_own_hospital(nurse_client, nurse, h1):
    user = make_user("sita", Role.PATIENT, first_name="Sita")

    res = nurse_client.post(
        "/api/v1/patients/",
        {"user_id": user.pk, "date_of_birth": "1992-03-04", "blood_group": "O+", "guardian_name": "Hari"},
        format="json",
    )
    assert res.status_code == 201
    body = res.json()
    assert body["hospital_id"] == str(h1.id)
    assert body["first_name"] == "Sita"
    assert body["blood_group"] == "O+"

    entry = AuditLogEntry.objects.get(action="create_patient")
    assert entry.user_id == nurse.pk
    assert str(entry.patient_id) == body["id"]


def test_second_patient_for_same_user_conflicts(nurse_client, patient, patient_user):
    res = nurse_client.post(
        "/api/v1/patients/",
        {"user_id": patient_user.pk, "date_of_birth": "1990-05-17"},
        format="json",
    )
    assert res.status_code == 409
    assert error_code(res) == "conflict"
    assert Patient.objects.filter(user=patient_user).count() == 1
    assert not AuditLogEntry.objects.filter(action="create_patient").exists()


def test_linked_user_must_have_patient_role(nurse_client, doctor):
    res = nurse_client.post(
        "/api/v1/patients/",
        {"user_id": doctor.pk, "date_of_birth": "1980-01-01"},
        format="json",
    )
    assert res.status_code == 400
    assert "user_id" in res.json()["error"]["details"]


def test_unknown_user_is_not_found(nurse_client):
    res = nurse_client.post("/api/v1/patients/", {"user_id": 999999, "date_of_birth": "1980-01-01"}, format="json")
    assert res.status_code == 404
    assert error_code(res) == "not_found"


def test_patient_cannot_register_patients(patient_client):
    user = make_user("other", Role.PATIENT)
    res = patient_client.post("/api/v1/patients/", {"user_id": user.pk, "date_of_birth": "1980-01-01"}, format="json")
    assert res.status_code in (400, 403)
    assert not Patient.objects.filter(user=user).exists()


def test_list_is_scoped_by_hospital(doctor_client, doctor_h2_client, admin_client, patient, patient_h2):
    ids = [p["id"] for p in doctor_client.get("/api/v1/patients/").json()["results"]]
    assert ids == [str(patient.id)]

    ids = [p["id"] for p in doctor_h2_client.get("/api/v1/patients/").json()["results"]]
    assert ids == [str(patient_h2.id)]

    assert admin_client.get("/api/v1/patients/").json()["count"] == 2


def test_list_search(doctor_client, patient):
    assert doctor_client.get("/api/v1/patients/?q=thapa").json()["count"] == 1
    assert doctor_client.get("/api/v1/patients/?q=nobody").json()["count"] == 0


def test_retrieve_is_audited_and_includes_records(doctor_client, doctor, patient):
    record = MedicalRecordService.create_record(actor_for(doctor), patient_id=patient.id, visit_date=timezone.now())

    res = doctor_client.get(f"/api/v1/patients/{patient.id}/")
    assert res.status_code == 200
    assert [r["id"] for r in res.json()["medical_records"]] == [str(record.id)]

    entry = AuditLogEntry.objects.get(action="view_patient")
    assert entry.user_id == doctor.pk
    assert entry.resource_id == str(patient.id)


def test_patient_reads_only_self(patient_client, patient, patient_h2):
    assert patient_client.get(f"/api/v1/patients/{patient.id}/").status_code == 200

    res = patient_client.get(f"/api/v1/patients/{patient_h2.id}/")
    assert res.status_code == 403
    assert res.json()["error"]["details"]["reason"] == "no_approved_access"


def test_cross_hospital_read_denied_without_audit(doctor_h2_client, patient):
    res = doctor_h2_client.get(f"/api/v1/patients/{patient.id}/")
    assert res.status_code == 403
    assert AuditLogEntry.objects.count() == 0


def test_doctor_updates_patient(doctor_client, patient):
    res = doctor_client.patch(
        f"/api/v1/patients/{patient.id}/",
        {"allergies": "Penicillin", "guardian_phone": "9800000000"},
        format="json",
    )
    assert res.status_code == 200
    assert res.json()["allergies"] == "Penicillin"

    entry = AuditLogEntry.objects.get(action="update_patient")
    assert entry.details == {"updated_fields": ["allergies", "guardian_phone"]}


def test_nurse_cannot_update_patient(nurse_client, patient):
    res = nurse_client.patch(f"/api/v1/patients/{patient.id}/", {"allergies": "None"}, format="json")
    assert res.status_code == 403
    patient.refresh_from_db()
    assert patient.allergies == ""


def test_unknown_patient_is_404(doctor_client):
    res = doctor_client.get("/api/v1/patients/00000000-0000-0000-0000-000000000000/")
    assert res.status_code == 404

    res = doctor_client.get("/api/v1/patients/not-a-uuid/")
    assert res.status_code == 404


def test_date_of_birth_round_trip(doctor_client, patient):
    res = doctor_client.patch(f"/api/v1/patients/{patient.id}/", {"date_of_birth": "1991-06-01"}, format="json")
    assert res.status_code == 200
    patient.refresh_from_db()
    assert patient.date_of_birth == datetime.date(1991, 6, 1)
