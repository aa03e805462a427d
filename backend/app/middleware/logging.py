"""
Quizo Backend — Access Logging Middleware
==========================================

What:  One access line per request, and the terminal catch for unexpected
       exceptions.
When:  Directly inside RequestIDMiddleware, outside everything else.

Access line:
    "<METHOD> <path> <status> <ms>ms [<request id>] from <ip>"
    plus structured `extra` fields, including the rate-limit outcome
    (remaining quota, or "rate_limited" on a 429).

    Level by outcome: 5xx ERROR, 4xx WARNING, health probes DEBUG (they are
    still rate-counted, so they are logged, just quietly), everything else
    INFO.

Unexpected exceptions:
    Starlette hands an unhandled exception to ServerErrorMiddleware, which
    sits outside every user middleware, so its response would skip the
    security headers and the request ID. Catching it here instead produces
    the same generic 500 body, gives it the security headers, and lets
    RequestIDMiddleware stamp X-Request-ID on the way out.

Privacy:
    Request bodies are never logged; they carry passwords on login.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var
from app.middleware.security_headers import apply_security_headers
from app.responses import unexpected_error

logger = logging.getLogger("quizo.access")

QUIET_PATHS = {"/api/health"}


def access_log_level(path: str, status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    if path in QUIET_PATHS:
        return logging.DEBUG
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unhandled %s on %s %s",
                request_id_var.get(""),
                type(exc).__name__,
                request.method,
                path,
                exc_info=True,
            )
            response = apply_security_headers(unexpected_error(exc), path)

        self._log(request, response, (time.perf_counter() - start_time) * 1000)
        return response

    def _log(self, request: Request, response: Response, duration_ms: float) -> None:
        status = response.status_code
        path = request.url.path
        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"

        if status == 429:
            rate_limit = "rate_limited"
        else:
            rate_limit = response.headers.get("X-RateLimit-Remaining", "uncounted")

        logger.log(
            access_log_level(path, status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "rate_limit": rate_limit,
            },
        )
