# Middleware package init
"""
Quizo Backend — Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (execution order on the way in):
    Request → [Request ID] → [Logging] → [CORS] → [Security Headers]
            → [Parameter Pollution] → [Rate Limit] → [Slow Down] → Router

    1. Request ID first so every later log line and error body can carry it
    2. Logging wraps everything else, including rejections, to time them;
       it also turns unexpected exceptions into the generic 500
    3. CORS answers preflights before any quota is spent
    4. Security headers are added to every response below this point,
       including 429s
    5. Parameter pollution is stripped before anything reads the query
    6. Rate limit rejects with 429 once the hard cap is exceeded
    7. Slow down delays (never rejects) past the soft threshold

Starlette runs middleware in REVERSE order of add_middleware(); main.py adds
them bottom-up.
"""
