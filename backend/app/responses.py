"""
Quizo Backend — Error Response Builders
========================================

What:  The JSON error envelope shared by the exception handlers and the
       middleware chain.
Why:   A 500 produced inside the middleware chain must look exactly like
       one produced by an exception handler.

Envelope:
    {"error": <code>, "message": <text>, "details": {...}?, "request_id": <id>}
"""

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from app.middleware.request_id import request_id_var

SERVER_ERROR_MESSAGE = "An unexpected error occurred on the server."


def error_body(
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body


def server_error(error: str, reason: str) -> JSONResponse:
    """Generic 500 body; `reason` is the only failure detail sent to the client."""
    return JSONResponse(
        status_code=500,
        content=error_body(error, SERVER_ERROR_MESSAGE, {"reason": reason}),
    )


def unexpected_error(exc: Exception) -> JSONResponse:
    """
    500 for an exception that is not a QuizoError.

    Only the exception class name is echoed: str(exc) of a foreign
    exception can contain SQL, paths or connection strings.
    """
    return server_error("internal_server_error", type(exc).__name__)
