# hr_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from hr_core.common.permissions import user_roles
from hr_core.iam.api.schema_serializers import MeResponseSerializer
from hr_core.revisions.context import capture_revision_context


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"])
    def get(self, request):
        """
        Returns user info, resolved roles and the identity that would be
        stamped on revisions written by this request.
        """
        ctx = capture_revision_context(request)
        return Response(
            {
                "user": {
                    "id": request.user.id,
                    "username": getattr(request.user, "username", None),
                    "email": getattr(request.user, "email", None),
                    "is_superuser": bool(getattr(request.user, "is_superuser", False)),
                },
                "roles": sorted(user_roles(request.user)),
                "revision_identity": {
                    "actor_id": ctx.actor_id,
                    "actor_role": ctx.actor_role,
                    "origin_address": ctx.origin_address,
                },
            },
            status=status.HTTP_200_OK,
        )
