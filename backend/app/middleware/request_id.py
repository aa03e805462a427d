"""
Quizo Backend — Request ID Middleware
======================================

What:  Gives each request a correlation ID and returns it as X-Request-ID.
When:  Outermost middleware, so every later log line, error body and
       response (including the terminal 500) carries the ID.

Client-supplied IDs:
    A client may send its own X-Request-ID to trace a call end to end. The
    value ends up in log lines, so it is only reused when it is short and
    made of [A-Za-z0-9._-]; anything else is replaced by a generated ID.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# Coroutine-local storage for the current request ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(supplied: str | None) -> str:
    """The client's ID when it is safe to log, else a fresh 8-char one."""
    if supplied and _CLIENT_ID_PATTERN.match(supplied):
        return supplied
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
