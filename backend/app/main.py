"""
Quizo Backend — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception
       mapping and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Application Architecture:
    ┌───────────────────────────────────────────────────────────┐
    │                       FastAPI App                         │
    │                                                           │
    │  Middleware Chain (in order):                             │
    │  Request ID → Logging → CORS → Security Headers           │
    │    → Parameter Pollution → Rate Limit → Slow Down         │
    │                                                           │
    │  Routes:                                                  │
    │  POST /api/auth/login                                     │
    │  POST|GET /api/quizzes   GET|PUT|DELETE /api/quizzes/{id} │
    │  GET /api/health                                          │
    │                                                           │
    │  Exception Handlers:                                      │
    │  Validation→400 │ Auth→401 │ NotFound/unmatched→404       │
    │  Store/DB/unexpected→500                                  │
    └───────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  setup logging, validate configuration, probe the database,
              log readiness
    Shutdown: dispose database engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.database import dispose_engine, ping
from app.exceptions import (
    QuizoError,
    ValidationError,
    AuthError,
    NotFoundError,
    StoreUnavailableError,
    DatabaseError,
)
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware
from app.middleware.param_pollution import ParameterPollutionMiddleware
from app.middleware.rate_limit import RateLimitMiddleware, SlowDownMiddleware
from app.responses import error_body, server_error, unexpected_error
from app.routes import auth, quizzes, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Structured Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # containers capture stdout
        ],
        force=True,
    )

    # Our own access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifecycle: startup and shutdown procedures.

    The connection pool is process-wide state: created when app.database is
    imported, disposed here on shutdown.
    """
    setup_logging()
    logger.info("Quizo Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: health checks and error responses still work
        logger.error("Configuration error: %s", str(e))

    if await ping():
        logger.info("Database connected successfully.")
    else:
        logger.error("Database connection failed; requests will fail until it is reachable.")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Quizo Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _describe_validation_errors(exc: RequestValidationError) -> Dict[str, Any]:
    """
    Flatten FastAPI's validation errors into a message and per-field list.

    Only `loc` and `msg` are kept: the raw `input` may echo a password.
    """
    fields = []
    for err in exc.errors():
        if err.get("type") == "json_invalid":
            return {"message": "Malformed JSON body.", "fields": []}
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append({"field": ".".join(loc) or "body", "message": err.get("msg", "")})

    message = "; ".join(f"{f['field']}: {f['message']}" for f in fields)
    return {"message": message or "Validation failed", "fields": fields}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError  → 400 (schema, missing field, malformed JSON)
        ValidationError         → 400
        AuthError               → 401
        NotFoundError           → 404
        HTTPException 404/405   → 404 "Resource not found" (no route matched)
        StoreUnavailableError   → 500
        DatabaseError           → 500
        QuizoError (base)       → 500
        Exception (fallback)    → 500, last resort only

    Unexpected exceptions from the routes are turned into the 500 by
    RequestLoggingMiddleware, inside the chain, so the response keeps the
    security headers and X-Request-ID. The Exception handler below runs in
    ServerErrorMiddleware, outside every middleware, and only sees failures
    of RequestIDMiddleware or RequestLoggingMiddleware themselves.

    500 responses carry a generic message plus a short `reason`; the
    full context and traceback go to the server log only.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body/param failed schema validation, or the JSON did not parse."""
        described = _describe_validation_errors(exc)
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), described["message"])
        return JSONResponse(
            status_code=400,
            content=error_body(
                "validation_error",
                described["message"],
                {"fields": described["fields"]} if described["fields"] else None,
            ),
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", exc.message, exc.context or None),
        )

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError):
        return JSONResponse(
            status_code=401,
            content=error_body("invalid_credentials", exc.message),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=error_body("not_found", exc.message),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """
        Unmatched path or method falls through to a fixed 404.

        405 is folded into 404: a method with no handler on a path is just
        another route that does not exist.
        """
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content=error_body("not_found", "Resource not found"),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body("http_error", str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        logger.error(
            "[%s] Store unavailable: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return server_error("store_unavailable", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return server_error("server_error", exc.message)

    @app.exception_handler(QuizoError)
    async def handle_app_error(request: Request, exc: QuizoError):
        logger.error(
            "[%s] Application error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return server_error("server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Last-resort catch-all; its response carries no middleware headers.
        """
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return unexpected_error(exc)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Each call builds fresh middleware instances, so rate-limit counters are
    per app; tests create one app per test.
    """
    app = FastAPI(
        title="Quizo API",
        description="Teacher login and quiz management.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition, so this list is
    # added innermost-first. Execution order:
    # RequestID → Logging → CORS → SecurityHeaders → ParameterPollution
    #   → RateLimit → SlowDown → router
    app.add_middleware(SlowDownMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(ParameterPollutionMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=[
            "X-Request-ID",
            "Retry-After",
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
        ],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(quizzes.router)
    app.include_router(health.router)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()
