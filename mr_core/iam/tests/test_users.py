import pytest

from mr_core.audit.models import AuditLogEntry
from mr_core.iam.models import UserProfile
from mr_core.policy.types import Role
from mr_core.tests.helpers import error_code, make_user

pytestmark = pytest.mark.django_db


def test_profile_is_created_with_every_user(db):
    from django.contrib.auth import get_user_model

    User = get_user_model()
    plain = User.objects.create_user(username="plain", password="x")
    boss = User.objects.create_superuser(username="boss", password="x")

    assert UserProfile.objects.get(user=plain).role == Role.PATIENT
    assert UserProfile.objects.get(user=boss).role == Role.ADMIN


def test_admin_creates_staff_user(admin_client, admin_user, h1):
    res = admin_client.post(
        "/api/v1/users/",
        {"username": "dr.kc", "password": "Secret@123", "role": "doctor", "hospital_id": str(h1.id)},
        format="json",
    )
    assert res.status_code == 201
    body = res.json()
    assert body["role"] == "doctor"
    assert body["hospital_id"] == str(h1.id)
    assert "password" not in body

    entry = AuditLogEntry.objects.get(action="create_user")
    assert entry.user_id == admin_user.pk
    assert entry.resource_id == str(body["id"])


def test_staff_role_requires_hospital(admin_client):
    res = admin_client.post(
        "/api/v1/users/",
        {"username": "nurse.x", "password": "Secret@123", "role": "nurse"},
        format="json",
    )
    assert res.status_code == 400
    assert "hospital_id" in res.json()["error"]["details"]


def test_duplicate_username_conflicts(admin_client, doctor):
    res = admin_client.post(
        "/api/v1/users/",
        {"username": "doctor1", "password": "Secret@123"},
        format="json",
    )
    assert res.status_code == 409
    assert error_code(res) == "conflict"


def test_only_admin_creates_users(doctor_client):
    res = doctor_client.post("/api/v1/users/", {"username": "x1", "password": "Secret@123"}, format="json")
    assert res.status_code == 403


def test_admin_changes_role(admin_client, patient_user, h2):
    res = admin_client.patch(
        f"/api/v1/users/{patient_user.pk}/role/",
        {"role": "nurse", "hospital_id": str(h2.id)},
        format="json",
    )
    assert res.status_code == 200
    assert res.json()["role"] == "nurse"

    profile = UserProfile.objects.get(user=patient_user)
    assert profile.role == Role.NURSE
    assert profile.hospital_id == h2.id

    entry = AuditLogEntry.objects.get(action="update_user_role")
    assert entry.details["from"]["role"] == "patient"
    assert entry.details["to"]["role"] == "nurse"


def test_admin_cannot_change_own_role(admin_client, admin_user):
    res = admin_client.patch(f"/api/v1/users/{admin_user.pk}/role/", {"role": "patient"}, format="json")
    assert res.status_code == 400
    assert UserProfile.objects.get(user=admin_user).role == Role.ADMIN


def test_deactivate_user(admin_client, client_for, nurse):
    res = admin_client.post(f"/api/v1/users/{nurse.pk}/deactivate/")
    assert res.status_code == 200
    assert res.json()["is_active"] is False

    nurse.refresh_from_db()
    assert nurse.is_active is False
    assert UserProfile.objects.get(user=nurse).is_active is False
    assert AuditLogEntry.objects.filter(action="deactivate_user", resource_id=str(nurse.pk)).count() == 1

    # never deleted
    assert type(nurse).objects.filter(pk=nurse.pk).exists()

    res = admin_client.post(f"/api/v1/users/{nurse.pk}/deactivate/")
    assert res.status_code == 409


def test_deactivated_profile_cannot_act(client_for, nurse):
    UserProfile.objects.filter(user=nurse).update(is_active=False)

    res = client_for(nurse).get("/api/v1/patients/")
    assert res.status_code in (401, 403)
    assert error_code(res) == "not_authenticated"


def test_admin_cannot_deactivate_self(admin_client, admin_user):
    res = admin_client.post(f"/api/v1/users/{admin_user.pk}/deactivate/")
    assert res.status_code == 400


def test_user_listing_scope(doctor_client, patient_client, patient_user, nurse, h1):
    make_user("clerk", Role.PATIENT)

    res = doctor_client.get("/api/v1/users/?role=nurse")
    assert [u["username"] for u in res.json()["results"]] == ["nurse1"]

    res = patient_client.get("/api/v1/users/")
    assert [u["username"] for u in res.json()["results"]] == ["patient1"]

    assert patient_client.get(f"/api/v1/users/{nurse.pk}/").status_code == 404
    assert patient_client.get(f"/api/v1/users/{patient_user.pk}/").status_code == 200


def test_staff_see_the_whole_directory(doctor_client, doctor_h2, h2):
    res = doctor_client.get("/api/v1/users/?role=doctor")
    assert {u["username"] for u in res.json()["results"]} == {"doctor1", "doctor2"}

    res = doctor_client.get(f"/api/v1/users/?hospital_id={h2.id}")
    assert [u["username"] for u in res.json()["results"]] == ["doctor2"]


def test_unknown_role_filter_is_rejected(doctor_client):
    assert doctor_client.get("/api/v1/users/?role=surgeon").status_code == 400
