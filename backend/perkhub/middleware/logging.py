"""
PerkHub — Request Logging Middleware
======================================

What:  One access log line per HTTP request with status and duration.
How:   Measures time around call_next and logs through the `perkhub.access`
       logger, with the request ID from RequestIDMiddleware.

Logged:     method, path, query string, status, duration, IP, request ID
Not logged: request bodies, Authorization headers

Typical durations:
    - GET /health:         1-5ms
    - GET /api/perks/all:  5-50ms (one filtered SELECT)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from perkhub.middleware.request_id import request_id_var

logger = logging.getLogger("perkhub.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Level follows the status code: 5xx → ERROR, 4xx → WARNING, else INFO.
    /health is skipped; probes hit it every few seconds.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        query = request.url.query
        rid = request_id_var.get("")

        if path == "/health":
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s%s %d %.1fms [%s] from %s",
            method,
            path,
            f"?{query}" if query else "",
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
