# hr_core/common/openapi.py
from __future__ import annotations

from drf_spectacular.openapi import AutoSchema
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter


class HRAutoSchema(AutoSchema):
    """
    Adds the optional request headers every endpoint understands:

    - X-Request-Id: echoed back and included in error envelopes
    - X-Actor-Role: overrides the role recorded on revisions (write endpoints)
    """

    REQUEST_ID_HEADER = OpenApiParameter(
        name="X-Request-Id",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.HEADER,
        required=False,
        description="Correlation id. Generated when absent.",
    )

    ACTOR_ROLE_HEADER = OpenApiParameter(
        name="X-Actor-Role",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.HEADER,
        required=False,
        description="Role recorded on revisions for unauthenticated service callers. Ignored for logged-in users.",
    )

    def _is_write(self) -> bool:
        return self.method.upper() in ("POST", "PUT", "PATCH", "DELETE")

    def _is_auth_endpoint(self) -> bool:
        view = getattr(self, "view", None)
        module = getattr(view.__class__, "__module__", "") if view is not None else ""
        return module.startswith("hr_core.iam.api.")

    def get_override_parameters(self):
        params = list(super().get_override_parameters() or [])
        existing = {p.name.lower() for p in params if isinstance(p, OpenApiParameter)}

        wanted = [self.REQUEST_ID_HEADER]
        if self._is_write() and not self._is_auth_endpoint():
            wanted.append(self.ACTOR_ROLE_HEADER)

        for p in wanted:
            if p.name.lower() not in existing:
                params.append(p)
        return params
