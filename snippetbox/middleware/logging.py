"""
Snippetbox — Access Log Middleware
===================================

What:  One line per request on the `snippetbox.access` logger:

           POST /snippet/create 303 12.4ms [3f9a1c2e] user=7 from 10.0.0.5

       `user` is the authenticated account id set by the `authenticate`
       dependency, or `-` for anonymous requests and routes without it.

Privacy:
    Form bodies (passwords) and cookies (the session) are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from snippetbox.middleware.request_id import request_id_var

logger = logging.getLogger("snippetbox.access")

# Polled every few seconds by load balancers
QUIET_PATHS = frozenset({"/health"})
QUIET_PREFIXES = ("/static/",)


def is_quiet(path: str) -> bool:
    return path in QUIET_PATHS or path.startswith(QUIET_PREFIXES)


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if is_quiet(request.url.path):
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        # request.state shares the ASGI scope with the route, so values set by
        # dependencies are visible here once the response exists
        user_id = getattr(request.state, "user_id", None)
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] user=%s from %s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            rid,
            user_id if user_id is not None else "-",
            client_ip,
            extra={
                "request_id": rid,
                "user_id": user_id,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
