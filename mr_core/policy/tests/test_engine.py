# mr_core/policy/tests/test_engine.py
import uuid

import pytest

from mr_core.policy.engine import evaluate, read_scope
from mr_core.policy.types import (
    Action,
    DenyReason,
    Principal,
    ReadScope,
    Resource,
    ResourceType,
    Role,
)

H1 = uuid.uuid4()
H2 = uuid.uuid4()
P1 = uuid.uuid4()  # patient registered at H1
P2 = uuid.uuid4()  # patient registered at H2

ADMIN = Principal(user_id=1, role=Role.ADMIN)
DOCTOR = Principal(user_id=2, role=Role.DOCTOR, hospital_id=H1)
NURSE = Principal(user_id=3, role=Role.NURSE, hospital_id=H1)
PATIENT = Principal(user_id=4, role=Role.PATIENT, patient_id=P1)
UNAFFILIATED_DOCTOR = Principal(user_id=5, role=Role.DOCTOR, hospital_id=None)

R, C, U, D = Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE
T = ResourceType

ALLOWED = None
INSUFFICIENT = DenyReason.INSUFFICIENT_ROLE
WRONG_SCOPE = DenyReason.WRONG_HOSPITAL_SCOPE
NO_ACCESS = DenyReason.NO_APPROVED_ACCESS


def own(t, **kw):
    return Resource(type=t, hospital_id=H1, patient_id=P1, **kw)


def other(t, **kw):
    return Resource(type=t, hospital_id=H2, patient_id=P2, **kw)


CASES = [
    # hospitals
    (DOCTOR, R, Resource(T.HOSPITAL, hospital_id=H2), ALLOWED),
    (PATIENT, R, Resource(T.HOSPITAL, hospital_id=H2), ALLOWED),
    (DOCTOR, C, Resource(T.HOSPITAL), INSUFFICIENT),
    (NURSE, U, Resource(T.HOSPITAL, hospital_id=H1), INSUFFICIENT),

    # users
    (NURSE, R, Resource(T.USER, owner_user_id=99), ALLOWED),
    (PATIENT, R, Resource(T.USER, owner_user_id=PATIENT.user_id), ALLOWED),
    (PATIENT, R, Resource(T.USER, owner_user_id=99), INSUFFICIENT),
    (DOCTOR, U, Resource(T.USER, owner_user_id=99), INSUFFICIENT),

    # patients
    (DOCTOR, R, own(T.PATIENT), ALLOWED),
    (NURSE, R, own(T.PATIENT), ALLOWED),
    (DOCTOR, R, other(T.PATIENT), WRONG_SCOPE),
    (DOCTOR, R, other(T.PATIENT, granted=True), ALLOWED),
    (DOCTOR, C, own(T.PATIENT), ALLOWED),
    (NURSE, C, own(T.PATIENT), ALLOWED),
    (NURSE, C, other(T.PATIENT), WRONG_SCOPE),
    (DOCTOR, U, own(T.PATIENT), ALLOWED),
    (DOCTOR, U, other(T.PATIENT, granted=True), WRONG_SCOPE),
    (NURSE, U, own(T.PATIENT), INSUFFICIENT),
    (PATIENT, R, own(T.PATIENT), ALLOWED),
    (PATIENT, R, other(T.PATIENT), NO_ACCESS),
    (PATIENT, R, other(T.PATIENT, granted=True), ALLOWED),
    (PATIENT, C, own(T.PATIENT), INSUFFICIENT),
    (PATIENT, U, own(T.PATIENT), INSUFFICIENT),
    (DOCTOR, D, own(T.PATIENT), INSUFFICIENT),
    (UNAFFILIATED_DOCTOR, R, own(T.PATIENT), WRONG_SCOPE),

    # medical records
    (DOCTOR, R, own(T.MEDICAL_RECORD), ALLOWED),
    (NURSE, R, own(T.MEDICAL_RECORD), ALLOWED),
    (DOCTOR, R, other(T.MEDICAL_RECORD), WRONG_SCOPE),
    (DOCTOR, C, own(T.MEDICAL_RECORD), ALLOWED),
    (DOCTOR, C, other(T.MEDICAL_RECORD, granted=True), WRONG_SCOPE),
    (NURSE, C, own(T.MEDICAL_RECORD), INSUFFICIENT),
    (DOCTOR, U, own(T.MEDICAL_RECORD, owner_user_id=DOCTOR.user_id), ALLOWED),
    (DOCTOR, U, own(T.MEDICAL_RECORD, owner_user_id=99), INSUFFICIENT),
    (NURSE, U, own(T.MEDICAL_RECORD, owner_user_id=NURSE.user_id), INSUFFICIENT),
    (DOCTOR, D, own(T.MEDICAL_RECORD, owner_user_id=DOCTOR.user_id), INSUFFICIENT),
    (PATIENT, R, own(T.MEDICAL_RECORD), ALLOWED),
    (PATIENT, R, other(T.MEDICAL_RECORD), NO_ACCESS),
    (PATIENT, C, own(T.MEDICAL_RECORD), INSUFFICIENT),
    (UNAFFILIATED_DOCTOR, C, Resource(T.MEDICAL_RECORD, patient_id=P1), WRONG_SCOPE),

    # vital signs
    (NURSE, C, own(T.VITAL_SIGNS), ALLOWED),
    (DOCTOR, C, own(T.VITAL_SIGNS), ALLOWED),
    (NURSE, C, other(T.VITAL_SIGNS), WRONG_SCOPE),
    (NURSE, U, own(T.VITAL_SIGNS), INSUFFICIENT),
    (DOCTOR, D, own(T.VITAL_SIGNS), INSUFFICIENT),
    (PATIENT, R, own(T.VITAL_SIGNS), ALLOWED),
    (PATIENT, C, own(T.VITAL_SIGNS), INSUFFICIENT),

    # appointments
    (NURSE, C, own(T.APPOINTMENT), ALLOWED),
    (DOCTOR, U, own(T.APPOINTMENT), ALLOWED),
    (NURSE, C, other(T.APPOINTMENT), WRONG_SCOPE),
    (PATIENT, R, own(T.APPOINTMENT), ALLOWED),
    (PATIENT, C, own(T.APPOINTMENT), INSUFFICIENT),

    # audit trail
    (PATIENT, R, Resource(T.AUDIT_LOG, patient_id=P1), ALLOWED),
    (PATIENT, R, Resource(T.AUDIT_LOG, patient_id=P2), INSUFFICIENT),
    (DOCTOR, R, Resource(T.AUDIT_LOG, patient_id=P1), INSUFFICIENT),
    (NURSE, R, Resource(T.AUDIT_LOG), INSUFFICIENT),
    (PATIENT, U, Resource(T.AUDIT_LOG, patient_id=P1), INSUFFICIENT),
    (PATIENT, D, Resource(T.AUDIT_LOG, patient_id=P1), INSUFFICIENT),

    # access requests
    (NURSE, C, other(T.ACCESS_REQUEST), ALLOWED),
    (PATIENT, C, other(T.ACCESS_REQUEST), ALLOWED),
    (NURSE, R, other(T.ACCESS_REQUEST, owner_user_id=NURSE.user_id), ALLOWED),
    (NURSE, R, own(T.ACCESS_REQUEST, owner_user_id=99), INSUFFICIENT),
    (DOCTOR, R, own(T.ACCESS_REQUEST, owner_user_id=99), ALLOWED),
    (DOCTOR, R, other(T.ACCESS_REQUEST, owner_user_id=99), WRONG_SCOPE),
    (DOCTOR, U, own(T.ACCESS_REQUEST, owner_user_id=99), ALLOWED),
    (DOCTOR, U, other(T.ACCESS_REQUEST, owner_user_id=99), WRONG_SCOPE),
    (DOCTOR, U, own(T.ACCESS_REQUEST, owner_user_id=DOCTOR.user_id), INSUFFICIENT),
    (NURSE, U, own(T.ACCESS_REQUEST, owner_user_id=99), INSUFFICIENT),
    (PATIENT, U, own(T.ACCESS_REQUEST, owner_user_id=99), INSUFFICIENT),

    # security alerts
    (PATIENT, C, Resource(T.SECURITY_ALERT), ALLOWED),
    (DOCTOR, R, Resource(T.SECURITY_ALERT), INSUFFICIENT),
    (DOCTOR, U, Resource(T.SECURITY_ALERT), INSUFFICIENT),

    # stats
    (DOCTOR, R, Resource(T.STATS), INSUFFICIENT),
    (PATIENT, R, Resource(T.STATS), INSUFFICIENT),
]


@pytest.mark.parametrize("principal,action,resource,expected", CASES)
def test_rule_table(principal, action, resource, expected):
    decision = evaluate(principal, action, resource)
    if expected is ALLOWED:
        assert decision.allowed, decision.reason
        assert decision.reason is None
    else:
        assert not decision.allowed
        assert decision.reason == expected


@pytest.mark.parametrize("resource_type", list(ResourceType))
@pytest.mark.parametrize("action", list(Action))
def test_admin_is_allowed_everything(resource_type, action):
    assert evaluate(ADMIN, action, Resource(type=resource_type, hospital_id=H2, patient_id=P2))


@pytest.mark.parametrize("resource_type", list(ResourceType))
@pytest.mark.parametrize("action", list(Action))
def test_anonymous_is_never_allowed(resource_type, action):
    decision = evaluate(None, action, Resource(type=resource_type))
    assert not decision
    assert decision.reason == DenyReason.NOT_AUTHENTICATED


def test_patient_without_patient_row_reads_nothing():
    orphan = Principal(user_id=7, role=Role.PATIENT, patient_id=None)
    decision = evaluate(orphan, R, Resource(T.MEDICAL_RECORD, hospital_id=H1, patient_id=None))
    assert decision.reason == NO_ACCESS


def test_read_scope_admin_and_anonymous():
    assert read_scope(ADMIN, T.AUDIT_LOG) == ReadScope(unrestricted=True)
    assert read_scope(None, T.PATIENT).denied == DenyReason.NOT_AUTHENTICATED


def test_read_scope_clinical_types():
    assert read_scope(DOCTOR, T.MEDICAL_RECORD) == ReadScope(hospital_id=H1, include_granted=True)
    assert read_scope(NURSE, T.VITAL_SIGNS) == ReadScope(hospital_id=H1, include_granted=True)
    assert read_scope(PATIENT, T.PATIENT) == ReadScope(patient_id=P1, include_granted=True)


def test_read_scope_collections_denied_to_non_admins():
    assert read_scope(DOCTOR, T.AUDIT_LOG).denied == INSUFFICIENT
    assert read_scope(NURSE, T.SECURITY_ALERT).denied == INSUFFICIENT
    assert read_scope(PATIENT, T.STATS).denied == INSUFFICIENT


def test_read_scope_access_requests():
    assert read_scope(DOCTOR, T.ACCESS_REQUEST) == ReadScope(hospital_id=H1, owner_user_id=DOCTOR.user_id)
    assert read_scope(NURSE, T.ACCESS_REQUEST) == ReadScope(owner_user_id=NURSE.user_id)


def test_read_scope_users():
    assert read_scope(NURSE, T.USER).unrestricted
    assert read_scope(PATIENT, T.USER) == ReadScope(owner_user_id=PATIENT.user_id)


def test_read_scope_patient_audit_trail_is_own_rows_only():
    assert read_scope(PATIENT, T.AUDIT_LOG) == ReadScope(patient_id=P1)
