# hr_core/revisions/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response

from hr_core.common.api.params import int_param
from hr_core.common.db import as_uuid
from hr_core.common.permissions import RevisionPermission
from hr_core.revisions.api.serializers import EmployeeRevisionSerializer
from hr_core.revisions.models import EmployeeRevision
from hr_core.revisions.selectors import get_revision, last_revision, list_revisions, list_revisions_by_actor

DEFAULT_LIMIT = 200
MAX_LIMIT = 500


def _limit(request) -> int:
    return min(int_param(request.query_params, "limit", DEFAULT_LIMIT, minimum=1), MAX_LIMIT)


class EmployeeRevisionViewSet(viewsets.GenericViewSet):
    """
    History of one employee. Keeps answering after the employee is deleted.
    """
    permission_classes = [RevisionPermission]
    serializer_class = EmployeeRevisionSerializer
    queryset = EmployeeRevision.objects.none()
    lookup_field = "revision_number"
    lookup_value_regex = "[0-9]+"

    def _employee_id(self):
        return as_uuid(self.kwargs.get("employee_id"))

    @extend_schema(tags=["Revisions"], responses={200: EmployeeRevisionSerializer(many=True)})
    def list(self, request, employee_id=None):
        qs = list_revisions(employee_id=self._employee_id())
        return Response(EmployeeRevisionSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Revisions"], responses={200: EmployeeRevisionSerializer})
    def retrieve(self, request, employee_id=None, revision_number=None):
        rev = get_revision(employee_id=self._employee_id(), revision_number=int(revision_number))
        if rev is None:
            raise NotFound("Revision not found for this employee.")
        return Response(EmployeeRevisionSerializer(rev).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Revisions"], responses={200: EmployeeRevisionSerializer})
    @action(detail=False, methods=["get"])
    def latest(self, request, employee_id=None):
        rev = last_revision(employee_id=self._employee_id())
        if rev is None:
            raise NotFound("No history for this employee.")
        return Response(EmployeeRevisionSerializer(rev).data, status=status.HTTP_200_OK)


class RevisionFeedViewSet(viewsets.GenericViewSet):
    """
    Cross-employee revision feed filtered by actor (who changed what).
    """
    permission_classes = [RevisionPermission]
    serializer_class = EmployeeRevisionSerializer
    queryset = EmployeeRevision.objects.none()

    @extend_schema(
        tags=["Revisions"],
        responses={200: EmployeeRevisionSerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="actor_id",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=True,
                description="Actor identity recorded on the revision.",
            ),
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Max records to return (default 200, capped at 500). Non-integer or < 1 is a 400.",
            ),
        ],
    )
    def list(self, request):
        actor_id = (request.query_params.get("actor_id") or "").strip()
        if not actor_id:
            raise ValidationError({"actor_id": "This field is required."})

        qs = list_revisions_by_actor(actor_id=actor_id)
        return Response(EmployeeRevisionSerializer(qs[:_limit(request)], many=True).data, status=status.HTTP_200_OK)
