"""
Quizo Backend — HTTP Parameter Pollution Guard
===============================================

What:  Collapses repeated query parameters to a single value.
Why:   `?teacher_id=1&teacher_id=2` would otherwise reach validation as a
       list, or be read inconsistently by different layers. Handlers must
       see exactly one deterministic value.
How:   Rewrites the ASGI scope's query string before routing, keeping the
       LAST occurrence of every key at the position of its first occurrence.

JSON bodies need no rewriting: the body parser decodes duplicate object
keys last-key-wins, the same rule as here.
"""

import logging
from typing import Dict
from urllib.parse import parse_qsl, urlencode

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


def collapse_query_string(query_string: str) -> str:
    """
    Return query_string with every repeated key reduced to its last value.

    >>> collapse_query_string("teacher_id=1&x=a&teacher_id=2")
    'teacher_id=2&x=a'
    """
    collapsed: Dict[str, str] = {}
    for key, value in parse_qsl(query_string, keep_blank_values=True):
        collapsed[key] = value
    return urlencode(collapsed)


class ParameterPollutionMiddleware(BaseHTTPMiddleware):
    """Rewrites scope["query_string"] when any key is repeated."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        raw = request.scope.get("query_string", b"")
        if raw:
            params = parse_qsl(raw.decode("latin-1"), keep_blank_values=True)
            keys = [key for key, _ in params]
            if len(keys) != len(set(keys)):
                repeated = sorted({k for k in keys if keys.count(k) > 1})
                logger.debug("Collapsing repeated query parameters: %s", repeated)
                # call_next forwards this same scope dict downstream
                request.scope["query_string"] = collapse_query_string(
                    raw.decode("latin-1")
                ).encode("latin-1")

        return await call_next(request)
