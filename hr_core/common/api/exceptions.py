# hr_core/common/api/exceptions.py
from __future__ import annotations

import logging
import uuid
from typing import Any

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, NotAuthenticated, PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from hr_core.common.errors import (
    CycleDetected,
    DependentsExist,
    DuplicateKey,
    HRCoreError,
    ImmutableRevisionError,
    IntegrityViolation,
    InvalidChange,
    NotFound,
    StorageUnavailable,
    VersionConflict,
)

logger = logging.getLogger("hr_core.api")

STORAGE_RETRY_AFTER_SECONDS = 5

DOMAIN_STATUS = {
    NotFound: status.HTTP_404_NOT_FOUND,
    DuplicateKey: status.HTTP_409_CONFLICT,
    VersionConflict: status.HTTP_409_CONFLICT,
    CycleDetected: status.HTTP_409_CONFLICT,
    DependentsExist: status.HTTP_409_CONFLICT,
    ImmutableRevisionError: status.HTTP_409_CONFLICT,
    InvalidChange: status.HTTP_400_BAD_REQUEST,
    IntegrityViolation: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StorageUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def ensure_request_id(request) -> str:
    """
    Ensures request has a stable request_id attribute and returns it.
    Honors an inbound X-Request-Id so ids line up across services.
    """
    rid = getattr(request, "request_id", None) if request is not None else None
    if not rid and request is not None:
        rid = (getattr(request, "META", None) or {}).get("HTTP_X_REQUEST_ID")
    if not rid:
        rid = uuid.uuid4().hex
    if request is not None:
        setattr(request, "request_id", rid)
    return rid


def build_error_envelope(*, request=None, code: str, message: str, details: Any = None) -> dict[str, Any]:
    """
    Canonical error envelope.
    Reusable from Django middleware (JsonResponse) and DRF (Response).
    """
    rid = ensure_request_id(request)
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": rid,
        }
    }


class PreconditionRequired(APIException):
    """
    428: a write that needs an expected version was sent without one.
    """
    status_code = 428
    default_detail = "Expected version required. Send If-Match or `version`."
    default_code = "precondition_required"


def _status_for_domain(exc: HRCoreError) -> int:
    for exc_type, http_status in DOMAIN_STATUS.items():
        if isinstance(exc, exc_type):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def _domain_response(exc: HRCoreError, request) -> Response:
    http_status = _status_for_domain(exc)

    if http_status >= 500:
        logger.error(
            "domain error %s: %s (request_id=%s)",
            exc.code,
            exc.message,
            ensure_request_id(request),
        )

    headers = {}
    if isinstance(exc, StorageUnavailable):
        headers["Retry-After"] = str(STORAGE_RETRY_AFTER_SECONDS)

    return Response(
        build_error_envelope(request=request, code=exc.code, message=exc.message, details=exc.details),
        status=http_status,
        headers=headers,
    )


def _code_for(exc: Exception, http_status: int) -> str:
    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, NotAuthenticated):
        return "not_authenticated"
    if isinstance(exc, PermissionDenied):
        return "permission_denied"
    if isinstance(exc, Http404):
        return "not_found"
    if isinstance(exc, APIException):
        return getattr(exc, "default_code", "api_error") or "api_error"
    if http_status >= 500:
        return "server_error"
    return "error"


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")

    if isinstance(exc, HRCoreError):
        return _domain_response(exc, request)

    response = drf_exception_handler(exc, context)

    # Truly unhandled error
    if response is None:
        logger.exception("unhandled error (request_id=%s)", ensure_request_id(request), exc_info=exc)
        return Response(
            build_error_envelope(
                request=request,
                code="server_error",
                message="Unexpected server error.",
                details=None,
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    http_status = response.status_code
    code = _code_for(exc, http_status)

    # DRF standardizes errors into response.data
    data = response.data

    # 1) {"detail": "..."} only -> message=detail, details=None
    # 2) {"detail": "...", ...} -> message=detail, details={...without detail}
    # 3) otherwise -> message="Request failed.", details=data
    message = "Request failed."
    details = data

    if isinstance(data, dict) and "detail" in data:
        message = str(data.get("detail"))
        rest = {k: v for k, v in data.items() if k != "detail"}
        details = rest or None

    return Response(
        build_error_envelope(
            request=request,
            code=code,
            message=message,
            details=details,
        ),
        status=http_status,
        headers=response.headers,
    )
