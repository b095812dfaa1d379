import datetime

import pytest
from django.utils import timezone

from mr_core.access.models import AccessRequest, AccessRequestStatus
from mr_core.common.api.exceptions import AuthenticationRequired, AuthorizationDenied
from mr_core.patients.models import Patient
from mr_core.policy.guard import authorize, check, scope_queryset
from mr_core.policy.types import Action, DenyReason, Principal, Resource, ResourceType, Role
from mr_core.tests.helpers import actor_for

pytestmark = pytest.mark.django_db


def _approve(requester, patient, reviewer, *, expires_at=None):
    now = timezone.now()
    return AccessRequest.objects.create(
        requester=requester,
        patient=patient,
        reason="second opinion",
        status=AccessRequestStatus.APPROVED,
        reviewer=reviewer,
        reviewed_at=now,
        expires_at=expires_at,
    )


def _patients(principal):
    return set(
        scope_queryset(
            Patient.objects.all(),
            principal,
            ResourceType.PATIENT,
            hospital_field="hospital_id",
            patient_field="id",
        ).values_list("id", flat=True)
    )


def test_authorize_raises_with_reason(doctor, patient_h2):
    principal = actor_for(doctor).principal
    resource = Resource(type=ResourceType.PATIENT, hospital_id=patient_h2.hospital_id, patient_id=patient_h2.id)

    with pytest.raises(AuthorizationDenied) as exc:
        authorize(principal, Action.READ, resource)
    assert exc.value.reason == DenyReason.WRONG_HOSPITAL_SCOPE


def test_authorize_without_principal_is_authentication_error():
    with pytest.raises(AuthenticationRequired):
        authorize(None, Action.READ, Resource(type=ResourceType.HOSPITAL))


def test_denial_is_logged(caplog, doctor, patient_h2):
    principal = actor_for(doctor).principal
    resource = Resource(type=ResourceType.PATIENT, hospital_id=patient_h2.hospital_id, patient_id=patient_h2.id)

    with caplog.at_level("WARNING", logger="mr_core.policy.guard"):
        with pytest.raises(AuthorizationDenied):
            authorize(principal, Action.READ, resource)

    assert "authorization denied" in caplog.text
    assert "wrong_hospital_scope" in caplog.text


def test_check_consults_approved_access(admin_user, doctor, patient_h2):
    principal = actor_for(doctor).principal
    resource = Resource(type=ResourceType.MEDICAL_RECORD, hospital_id=patient_h2.hospital_id, patient_id=patient_h2.id)

    assert not check(principal, Action.READ, resource)

    _approve(doctor, patient_h2, admin_user)
    assert check(principal, Action.READ, resource)

    # reads only
    assert not check(principal, Action.UPDATE, resource)


def test_expired_grant_is_ignored(admin_user, doctor, patient_h2):
    _approve(doctor, patient_h2, admin_user, expires_at=timezone.now() - datetime.timedelta(hours=1))
    principal = actor_for(doctor).principal
    resource = Resource(type=ResourceType.PATIENT, hospital_id=patient_h2.hospital_id, patient_id=patient_h2.id)

    decision = check(principal, Action.READ, resource)
    assert not decision
    assert decision.reason == DenyReason.WRONG_HOSPITAL_SCOPE


def test_scope_queryset_by_role(admin_user, doctor, doctor_h2, patient_user, patient, patient_h2):
    assert _patients(actor_for(admin_user).principal) == {patient.id, patient_h2.id}
    assert _patients(actor_for(doctor).principal) == {patient.id}
    assert _patients(actor_for(doctor_h2).principal) == {patient_h2.id}
    assert _patients(actor_for(patient_user).principal) == {patient.id}


def test_scope_queryset_includes_granted_patients(admin_user, doctor, patient, patient_h2):
    _approve(doctor, patient_h2, admin_user)
    assert _patients(actor_for(doctor).principal) == {patient.id, patient_h2.id}


def test_scope_queryset_for_unaffiliated_staff_is_empty(patient, patient_h2):
    principal = Principal(user_id=999, role=Role.NURSE, hospital_id=None)
    assert _patients(principal) == set()


def test_scope_queryset_denies_types_without_read(doctor):
    from mr_core.security.models import SecurityAlert

    with pytest.raises(AuthorizationDenied):
        scope_queryset(SecurityAlert.objects.all(), actor_for(doctor).principal, ResourceType.SECURITY_ALERT)
