# mr_core/iam/tests/test_auth_and_me.py
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from mr_core.iam.models import UserProfile
from mr_core.tests.helpers import PASSWORD, error_code

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    """
    Fresh client: nothing forced, no cookies.
    """
    c = APIClient()
    res = c.get("/api/v1/me/")
    assert res.status_code in (401, 403)
    assert error_code(res) == "not_authenticated"


def test_login_sets_cookies(doctor, settings):
    c = APIClient()
    res = c.post("/api/v1/auth/login/", {"username": "doctor1", "password": PASSWORD}, format="json")
    assert res.status_code == 200

    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies

    # the cookie alone authenticates follow-up calls
    res = c.get("/api/v1/me/")
    assert res.status_code == 200
    assert res.json()["username"] == "doctor1"


def test_login_with_bad_password_fails(doctor):
    res = APIClient().post("/api/v1/auth/login/", {"username": "doctor1", "password": "wrong"}, format="json")
    assert res.status_code == 401


def test_login_refused_for_inactive_profile(nurse):
    UserProfile.objects.filter(user=nurse).update(is_active=False)

    res = APIClient().post("/api/v1/auth/login/", {"username": "nurse1", "password": PASSWORD}, format="json")
    assert res.status_code in (401, 403)
    assert "mr_access" not in res.cookies


def test_bearer_header_authenticates(doctor, h1):
    c = APIClient()
    token = RefreshToken.for_user(doctor).access_token
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    res = c.get("/api/v1/me/")
    assert res.status_code == 200
    body = res.json()
    assert body["role"] == "doctor"
    assert body["hospital_id"] == str(h1.id)
    assert body["patient_id"] is None


def test_token_stops_working_after_profile_deactivation(doctor):
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(doctor).access_token}")
    assert c.get("/api/v1/me/").status_code == 200

    UserProfile.objects.filter(user=doctor).update(is_active=False)

    res = c.get("/api/v1/me/")
    assert res.status_code == 401


def test_me_for_patient_includes_patient_id(patient_client, patient):
    res = patient_client.get("/api/v1/me/")
    assert res.status_code == 200
    assert res.json()["role"] == "patient"
    assert res.json()["patient_id"] == str(patient.id)


def test_refresh_from_cookie_and_logout(doctor):
    c = APIClient()
    c.post("/api/v1/auth/login/", {"username": "doctor1", "password": PASSWORD}, format="json")

    res = c.post("/api/v1/auth/refresh/")
    assert res.status_code == 200
    assert "mr_access" in res.cookies

    res = c.post("/api/v1/auth/logout/")
    assert res.status_code == 200
    assert res.cookies["mr_access"].value == ""
