"""Middleware: request timing and access logging."""

from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from capturespec import __version__

logger = logging.getLogger("capturespec.api")


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Time each request, stamp the service version and log the outcome.

    Registry and persistence round-trips dominate the duration of
    ``/artifacts``, ``/templates`` and ``/specs``, so the debug log line is
    where slow upstreams show up first.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-Duration-Ms"] = f"{duration_ms:.1f}"
        response.headers["X-Capturespec-Version"] = __version__
        logger.debug(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response
