import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.test import RequestFactory
from rest_framework.exceptions import NotFound

from mr_core.common.api.exceptions import (
    AuditWriteFailure,
    AuthorizationDenied,
    ConflictError,
    InvalidStateTransition,
    api_exception_handler,
)
from mr_core.common.middleware import RequestContextMiddleware, client_ip_from_meta


def _handle(exc, request=None):
    return api_exception_handler(exc, {"request": request})


@pytest.mark.parametrize(
    "exc, status, code",
    [
        (NotFound("Patient not found."), 404, "not_found"),
        (ConflictError("duplicate"), 409, "conflict"),
        (InvalidStateTransition("already approved"), 409, "invalid_state_transition"),
        (AuditWriteFailure(), 500, "audit_write_failure"),
        (AuthorizationDenied("wrong_hospital_scope"), 403, "permission_denied"),
    ],
)
def test_domain_errors_map_to_envelope(exc, status, code):
    res = _handle(exc)
    assert res.status_code == status
    assert res.data["error"]["code"] == code
    assert res.data["error"]["request_id"]


def test_denial_reason_is_exposed():
    res = _handle(AuthorizationDenied("no_approved_access"))
    assert res.data["error"]["details"] == {"reason": "no_approved_access"}


def test_model_validation_error_becomes_400():
    res = _handle(DjangoValidationError("Audit log entries are immutable and cannot be deleted."))
    assert res.status_code == 400
    assert res.data["error"]["code"] == "validation_error"


def test_unhandled_error_hides_internals():
    res = _handle(RuntimeError("db password is hunter2"))
    assert res.status_code == 500
    assert res.data["error"]["code"] == "server_error"
    assert "hunter2" not in str(res.data)


def test_request_id_is_shared_with_the_request():
    req = RequestFactory().get("/api/v1/patients/")
    req.request_id = "abc123"
    res = _handle(NotFound(), req)
    assert res.data["error"]["request_id"] == "abc123"


def test_middleware_sets_context_and_echoes_request_id():
    rf = RequestFactory()
    req = rf.get(
        "/api/v1/patients/",
        HTTP_X_REQUEST_ID="upstream-1",
        HTTP_X_FORWARDED_FOR="198.51.100.4, 10.0.0.2",
        HTTP_USER_AGENT="curl/8.0",
    )

    mw = RequestContextMiddleware(get_response=lambda r: None)
    assert mw.process_request(req) is None
    assert req.request_id == "upstream-1"
    assert req.client_ip == "198.51.100.4"
    assert req.user_agent == "curl/8.0"

    from django.http import HttpResponse

    res = mw.process_response(req, HttpResponse())
    assert res["X-Request-Id"] == "upstream-1"


def test_client_ip_falls_back_to_remote_addr():
    assert client_ip_from_meta({"REMOTE_ADDR": "127.0.0.1"}) == "127.0.0.1"
    assert client_ip_from_meta({}) is None


@pytest.mark.django_db
def test_api_errors_carry_the_response_request_id(doctor_client):
    res = doctor_client.get("/api/v1/patients/00000000-0000-0000-0000-000000000000/")
    assert res.status_code == 404
    assert res.json()["error"]["request_id"] == res["X-Request-Id"]
