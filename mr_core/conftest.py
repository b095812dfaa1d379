# mr_core/conftest.py
import datetime

import pytest
from rest_framework.test import APIClient

from mr_core.hospitals.models import Hospital
from mr_core.patients.models import Patient
from mr_core.policy.types import Role
from mr_core.tests.helpers import make_user


@pytest.fixture
def h1(db):
    return Hospital.objects.create(name="Bir Hospital", address="Mahaboudha", district="Kathmandu")


@pytest.fixture
def h2(db):
    return Hospital.objects.create(name="Patan Hospital", address="Lagankhel", district="Lalitpur")


@pytest.fixture
def admin_user(db):
    return make_user("admin1", Role.ADMIN)


@pytest.fixture
def doctor(h1):
    return make_user("doctor1", Role.DOCTOR, h1, first_name="Asha", last_name="Rai")


@pytest.fixture
def nurse(h1):
    return make_user("nurse1", Role.NURSE, h1)


@pytest.fixture
def doctor_h2(h2):
    return make_user("doctor2", Role.DOCTOR, h2)


@pytest.fixture
def patient_user(db):
    return make_user("patient1", Role.PATIENT, first_name="Ram", last_name="Thapa")


@pytest.fixture
def patient(h1, patient_user):
    return Patient.objects.create(user=patient_user, hospital=h1, date_of_birth=datetime.date(1990, 5, 17))


@pytest.fixture
def patient_h2(h2):
    user = make_user("patient2", Role.PATIENT)
    return Patient.objects.create(user=user, hospital=h2, date_of_birth=datetime.date(1985, 1, 2))


@pytest.fixture
def client_for():
    """
    client_for(user) -> APIClient authenticated as `user`.
    force_authenticate bypasses JWT but identity still resolves through the profile.
    """
    def _make(user):
        c = APIClient()
        c.force_authenticate(user=user)
        return c

    return _make


@pytest.fixture
def admin_client(client_for, admin_user):
    return client_for(admin_user)


@pytest.fixture
def doctor_client(client_for, doctor):
    return client_for(doctor)


@pytest.fixture
def nurse_client(client_for, nurse):
    return client_for(nurse)


@pytest.fixture
def doctor_h2_client(client_for, doctor_h2):
    return client_for(doctor_h2)


@pytest.fixture
def patient_client(client_for, patient_user, patient):
    return client_for(patient_user)
