# mr_core/policy/engine.py
"""
Authorization policy.

Pure decision functions: no database access, no logging, no exceptions.
Every role rule in the system lives here; callers translate a Deny into
the matching API error (see mr_core.policy.guard).

Rule summary (admin is allowed everything):

  hospital        read: everyone
  user            read: staff; patients only themselves
  patient         read: own hospital, own row (patient), or approved access
                  create: doctor/nurse in hospital; update: doctor in hospital
  medical_record  read: as patient; create: doctor in hospital
                  update: authoring doctor in hospital
  vital_signs     read: as patient; create: doctor/nurse in hospital
  appointment     read: as patient; create/update: doctor/nurse in hospital
  audit_log       read: patients, rows about themselves only
  access_request  create: everyone; read: requester, doctor in hospital
                  update (review): doctor in hospital, never own request
  security_alert  create: everyone
"""
from __future__ import annotations

from typing import Callable

from mr_core.policy.types import (
    ALLOW,
    Action,
    Decision,
    DenyReason,
    Principal,
    ReadScope,
    Resource,
    ResourceType,
    Role,
    deny,
)

Rule = Callable[[Principal, Action, Resource], Decision]

CLINICAL_TYPES = frozenset({
    ResourceType.PATIENT,
    ResourceType.MEDICAL_RECORD,
    ResourceType.VITAL_SIGNS,
    ResourceType.APPOINTMENT,
})


def _in_hospital(p: Principal, r: Resource) -> bool:
    return p.hospital_id is not None and r.hospital_id == p.hospital_id


def _scoped_write(p: Principal, r: Resource) -> Decision:
    return ALLOW if _in_hospital(p, r) else deny(DenyReason.WRONG_HOSPITAL_SCOPE)


def _clinical_read(p: Principal, r: Resource) -> Decision:
    if p.is_staff_member:
        if _in_hospital(p, r) or r.granted:
            return ALLOW
        return deny(DenyReason.WRONG_HOSPITAL_SCOPE)

    # patient role
    if p.patient_id is not None and r.patient_id == p.patient_id:
        return ALLOW
    if r.granted:
        return ALLOW
    return deny(DenyReason.NO_APPROVED_ACCESS)


def _hospital_rule(p: Principal, a: Action, r: Resource) -> Decision:
    if a == Action.READ:
        return ALLOW
    return deny(DenyReason.INSUFFICIENT_ROLE)


def _user_rule(p: Principal, a: Action, r: Resource) -> Decision:
    if a == Action.READ:
        if p.is_staff_member or r.owner_user_id == p.user_id:
            return ALLOW
    return deny(DenyReason.INSUFFICIENT_ROLE)


def _patient_rule(p: Principal, a: Action, r: Resource) -> Decision:
    if a == Action.READ:
        return _clinical_read(p, r)
    if a == Action.CREATE and p.is_staff_member:
        return _scoped_write(p, r)
    if a == Action.UPDATE and p.role == Role.DOCTOR:
        return _scoped_write(p, r)
    return deny(DenyReason.INSUFFICIENT_ROLE)


def _medical_record_rule(p: Principal, a: Action, r: Resource) -> Decision:
    if a == Action.READ:
        return _clinical_read(p, r)
    if p.role != Role.DOCTOR:
        return deny(DenyReason.INSUFFICIENT_ROLE)
    if a == Action.CREATE:
        return _scoped_write(p, r)
    if a == Action.UPDATE:
        if r.owner_user_id != p.user_id:
            return deny(DenyReason.INSUFFICIENT_ROLE)
        return _scoped_write(p, r)
    return deny(DenyReason.INSUFFICIENT_ROLE)


def _vital_signs_rule(p: Principal, a: Action, r: Resource) -> Decision:
    if a == Action.READ:
        return _clinical_read(p, r)
    if a == Action.CREATE and p.is_staff_member:
        return _scoped_write(p, r)
    # append-only
    return deny(DenyReason.INSUFFICIENT_ROLE)


def _appointment_rule(p: Principal, a: Action, r: Resource) -> Decision:
    if a == Action.READ:
        return _clinical_read(p, r)
    if a in (Action.CREATE, Action.UPDATE) and p.is_staff_member:
        return _scoped_write(p, r)
    return deny(DenyReason.INSUFFICIENT_ROLE)


def _audit_log_rule(p: Principal, a: Action, r: Resource) -> Decision:
    if a == Action.READ and p.role == Role.PATIENT:
        if p.patient_id is not None and r.patient_id == p.patient_id:
            return ALLOW
    return deny(DenyReason.INSUFFICIENT_ROLE)


def _access_request_rule(p: Principal, a: Action, r: Resource) -> Decision:
    if a == Action.CREATE:
        return ALLOW
    if a == Action.READ:
        if r.owner_user_id == p.user_id:
            return ALLOW
        if p.role == Role.DOCTOR:
            return _scoped_write(p, r)
        return deny(DenyReason.INSUFFICIENT_ROLE)
    if a == Action.UPDATE and p.role == Role.DOCTOR:
        if r.owner_user_id == p.user_id:
            # no self-approval
            return deny(DenyReason.INSUFFICIENT_ROLE)
        return _scoped_write(p, r)
    return deny(DenyReason.INSUFFICIENT_ROLE)


def _security_alert_rule(p: Principal, a: Action, r: Resource) -> Decision:
    if a == Action.CREATE:
        return ALLOW
    return deny(DenyReason.INSUFFICIENT_ROLE)


_RULES: dict[ResourceType, Rule] = {
    ResourceType.HOSPITAL: _hospital_rule,
    ResourceType.USER: _user_rule,
    ResourceType.PATIENT: _patient_rule,
    ResourceType.MEDICAL_RECORD: _medical_record_rule,
    ResourceType.VITAL_SIGNS: _vital_signs_rule,
    ResourceType.APPOINTMENT: _appointment_rule,
    ResourceType.AUDIT_LOG: _audit_log_rule,
    ResourceType.ACCESS_REQUEST: _access_request_rule,
    ResourceType.SECURITY_ALERT: _security_alert_rule,
}


def evaluate(principal: Principal | None, action: Action, resource: Resource) -> Decision:
    """
    Decide whether `principal` may perform `action` on `resource`.
    Deny is a normal outcome, never an exception.
    """
    if principal is None:
        return deny(DenyReason.NOT_AUTHENTICATED)

    if principal.role == Role.ADMIN:
        return ALLOW

    rule = _RULES.get(resource.type)
    if rule is None:
        return deny(DenyReason.INSUFFICIENT_ROLE)
    return rule(principal, action, resource)


def read_scope(principal: Principal | None, resource_type: ResourceType) -> ReadScope:
    """
    Which rows of `resource_type` a principal may list.
    Must stay consistent with the READ branch of evaluate() for single rows.
    """
    if principal is None:
        return ReadScope(denied=DenyReason.NOT_AUTHENTICATED)

    if principal.role == Role.ADMIN:
        return ReadScope(unrestricted=True)

    if resource_type == ResourceType.HOSPITAL:
        return ReadScope(unrestricted=True)

    if resource_type in CLINICAL_TYPES:
        if principal.is_staff_member:
            return ReadScope(hospital_id=principal.hospital_id, include_granted=True)
        return ReadScope(patient_id=principal.patient_id, include_granted=True)

    if resource_type == ResourceType.USER:
        if principal.is_staff_member:
            return ReadScope(unrestricted=True)
        return ReadScope(owner_user_id=principal.user_id)

    if resource_type == ResourceType.AUDIT_LOG and principal.role == Role.PATIENT:
        return ReadScope(patient_id=principal.patient_id)

    if resource_type == ResourceType.ACCESS_REQUEST:
        if principal.role == Role.DOCTOR:
            return ReadScope(hospital_id=principal.hospital_id, owner_user_id=principal.user_id)
        return ReadScope(owner_user_id=principal.user_id)

    return ReadScope(denied=DenyReason.INSUFFICIENT_ROLE)
