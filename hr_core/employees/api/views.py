# hr_core/employees/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from hr_core.common.api.exceptions import PreconditionRequired
from hr_core.common.permissions import EmployeePermission
from hr_core.employees.api.filters import filters_from_params
from hr_core.employees.api.pagination import page_request_from_params, paginated_response
from hr_core.employees.api.serializers import (
    EmployeeCreateSerializer,
    EmployeeSerializer,
    EmployeeStatusSerializer,
    EmployeeUpdateSerializer,
    ReportingChainSerializer,
)
from hr_core.employees import hierarchy
from hr_core.employees.models import Employee
from hr_core.employees.selectors import get_employee, list_direct_reports, search_employees
from hr_core.employees.services import EmployeeService
from hr_core.revisions.context import capture_revision_context

IF_MATCH_HEADER = OpenApiParameter(
    name="If-Match",
    type=OpenApiTypes.STR,
    location=OpenApiParameter.HEADER,
    required=False,
    description='Expected employee version, e.g. "3" (as returned in ETag).',
)


def _version_from_if_match(request) -> int | None:
    raw = request.META.get("HTTP_IF_MATCH")
    if not raw:
        return None
    v = raw.strip()
    if v.startswith("W/"):
        v = v[2:]
    v = v.strip('"')
    try:
        return int(v)
    except ValueError:
        raise ValidationError({"If-Match": "Must be an employee version number."})


def _expected_version(request, body_version) -> int | None:
    header_version = _version_from_if_match(request)
    if header_version is not None and body_version is not None and header_version != body_version:
        raise ValidationError({"version": "Conflicts with If-Match header."})
    return header_version if header_version is not None else body_version


def _employee_response(employee: Employee, *, http_status=status.HTTP_200_OK) -> Response:
    res = Response(EmployeeSerializer(employee).data, status=http_status)
    res["ETag"] = f'"{employee.version}"'
    return res


class EmployeeViewSet(viewsets.ViewSet):
    """
    Thin API layer:
    - request parsing + validation
    - revision context captured from the request, passed explicitly
    - selectors for reads, EmployeeService for writes
    """
    permission_classes = [EmployeePermission]

    serializer_class = EmployeeSerializer
    queryset = Employee.objects.none()

    # ----------------------------
    # Reads
    # ----------------------------
    @extend_schema(
        tags=["Employees"],
        parameters=[
            OpenApiParameter("first_name", OpenApiTypes.STR, OpenApiParameter.QUERY, description="Contains (case-insensitive)."),
            OpenApiParameter("last_name", OpenApiTypes.STR, OpenApiParameter.QUERY, description="Contains (case-insensitive)."),
            OpenApiParameter("department", OpenApiTypes.STR, OpenApiParameter.QUERY, description="Exact match."),
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY, enum=["ACTIVE", "INACTIVE", "TERMINATED"]),
            OpenApiParameter("page", OpenApiTypes.INT, OpenApiParameter.QUERY, description="Zero-based page index."),
            OpenApiParameter("page_size", OpenApiTypes.INT, OpenApiParameter.QUERY, description="Default 20, max 200."),
            OpenApiParameter("sort", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("direction", OpenApiTypes.STR, OpenApiParameter.QUERY, enum=["asc", "desc"]),
        ],
        responses={200: EmployeeSerializer(many=True)},
    )
    def list(self, request):
        filters = filters_from_params(request.query_params)
        page_request = page_request_from_params(request.query_params)
        page = search_employees(filters=filters, page=page_request)
        return paginated_response(request, page, EmployeeSerializer)

    @extend_schema(tags=["Employees"], responses={200: EmployeeSerializer})
    def retrieve(self, request, pk=None):
        return _employee_response(get_employee(employee_id=pk))

    @extend_schema(tags=["Employees"], responses={200: EmployeeSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="direct-reports")
    def direct_reports(self, request, pk=None):
        qs = list_direct_reports(employee_id=pk)
        return Response(EmployeeSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Employees"], responses={200: ReportingChainSerializer})
    @action(detail=True, methods=["get"], url_path="reporting-chain")
    def reporting_chain(self, request, pk=None):
        chain = hierarchy.reporting_chain(employee_id=pk)
        return Response({"employee_id": str(pk), "chain": [str(c) for c in chain]}, status=status.HTTP_200_OK)

    # ----------------------------
    # Writes
    # ----------------------------
    @extend_schema(tags=["Employees"], request=EmployeeCreateSerializer, responses={201: EmployeeSerializer})
    def create(self, request):
        ser = EmployeeCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        employee = EmployeeService.create(
            context=capture_revision_context(request),
            **ser.validated_data,
        )
        return _employee_response(employee, http_status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Employees"],
        request=EmployeeUpdateSerializer,
        responses={200: EmployeeSerializer},
        parameters=[IF_MATCH_HEADER],
    )
    def partial_update(self, request, pk=None):
        ser = EmployeeUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        changes = dict(ser.validated_data)
        expected = _expected_version(request, changes.pop("version", None))
        if expected is None:
            raise PreconditionRequired()

        employee = EmployeeService.update(
            context=capture_revision_context(request),
            employee_id=pk,
            expected_version=expected,
            changes=changes,
        )
        return _employee_response(employee)

    @extend_schema(
        tags=["Employees"],
        request=EmployeeStatusSerializer,
        responses={200: EmployeeSerializer},
        parameters=[IF_MATCH_HEADER],
    )
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        ser = EmployeeStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        employee = EmployeeService.set_status(
            context=capture_revision_context(request),
            employee_id=pk,
            status=ser.validated_data["status"],
            expected_version=_expected_version(request, ser.validated_data.get("version")),
        )
        return _employee_response(employee)

    @extend_schema(tags=["Employees"], request=None, responses={204: None}, parameters=[IF_MATCH_HEADER])
    def destroy(self, request, pk=None):
        body_version = request.data.get("version") if hasattr(request.data, "get") else None
        if body_version is not None:
            try:
                body_version = int(body_version)
            except (TypeError, ValueError):
                raise ValidationError({"version": "A valid integer is required."})

        EmployeeService.delete(
            context=capture_revision_context(request),
            employee_id=pk,
            expected_version=_expected_version(request, body_version),
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
