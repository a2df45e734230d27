import pytest
from django.db import OperationalError
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIRequestFactory

from hr_core.common.api.exceptions import api_exception_handler
from hr_core.common.db import translate_storage_errors
from hr_core.common.errors import (
    DependentsExist,
    IntegrityViolation,
    NotFound,
    StorageUnavailable,
    VersionConflict,
)


def _handle(exc, **headers):
    request = APIRequestFactory().get("/api/v1/employees/", **headers)
    return api_exception_handler(exc, {"request": request})


@pytest.mark.parametrize(
    "exc, status, code",
    [
        (NotFound(), 404, "not_found"),
        (VersionConflict(expected=1, actual=2), 409, "version_conflict"),
        (DependentsExist(count=3), 409, "dependents_exist"),
        (IntegrityViolation(), 500, "integrity_violation"),
        (StorageUnavailable(), 503, "storage_unavailable"),
    ],
)
def test_domain_errors_map_to_status_and_code(exc, status, code):
    res = _handle(exc)
    assert res.status_code == status
    assert res.data["error"]["code"] == code
    assert res.data["error"]["message"] == exc.message


def test_storage_unavailable_sets_retry_after():
    res = _handle(StorageUnavailable())
    assert res["Retry-After"] == "5"


def test_inbound_request_id_is_echoed_in_envelope():
    res = _handle(NotFound(), HTTP_X_REQUEST_ID="req-123")
    assert res.data["error"]["request_id"] == "req-123"


def test_drf_validation_error_is_wrapped():
    res = _handle(ValidationError({"email": ["Enter a valid email address."]}))
    assert res.status_code == 400
    assert res.data["error"]["code"] == "validation_error"
    assert res.data["error"]["details"] == {"email": ["Enter a valid email address."]}


def test_unhandled_error_is_500_server_error():
    res = _handle(RuntimeError("boom"))
    assert res.status_code == 500
    assert res.data["error"]["code"] == "server_error"


def test_storage_errors_are_translated():
    @translate_storage_errors
    def flaky():
        raise OperationalError("connection refused")

    with pytest.raises(StorageUnavailable) as exc:
        flaky()
    assert "connection refused" in exc.value.message
