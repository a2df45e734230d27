from __future__ import annotations

import logging
import time

from hr_core.common.api.exceptions import ensure_request_id

logger = logging.getLogger("hr_core.request")


class RequestIdMiddleware:
    """
    Assigns request.request_id (honouring an inbound X-Request-Id) and echoes
    it back on the response so error envelopes and logs can be correlated.
    """

    header = "X-Request-Id"

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        rid = ensure_request_id(request)
        started = time.monotonic()

        response = self.get_response(request)

        response[self.header] = rid
        logger.info(
            "%s %s -> %s (%.1f ms, request_id=%s)",
            request.method,
            request.path,
            response.status_code,
            (time.monotonic() - started) * 1000,
            rid,
        )
        return response
