"""
Quizo Backend — Rate Limiting and Slow-Down Middleware
=======================================================

What:  Per-IP fixed-window request accounting with two policies:
       a hard limit (429 once the cap is exceeded) and a soft slow-down
       (growing artificial delay past a lower threshold).
Why:   Protects the API and the database from abusive clients without
       requiring authentication.
How:   Each middleware owns a FixedWindowCounter mapping client IP to
       (count, window start). Thresholds are read from settings per request.
Who:   Applied to every request via Starlette middleware.
When:  After CORS, security headers and parameter-pollution stripping.

Algorithm: Fixed Window Counter (per client)
    1. A client's window opens at its first request and lasts
       rate_limit_window seconds
    2. Every request increments the client's counter, rejected ones included
    3. When the window has elapsed, the next request opens a fresh window

    Rate limit: count > rate_limit_requests → 429 until the window rolls over
    Slow down:  count > slow_down_after → sleep (count - after) * delay_ms

Concurrency:
    The read-and-increment in FixedWindowCounter.hit() contains no await, so
    on the event loop it is atomic with respect to other requests.
    State is per process; multiple workers each keep their own counters.
"""

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.exceptions import RateLimitExceededError
from app.responses import error_body

logger = logging.getLogger(__name__)

# Paths never counted: API documentation should always be reachable
EXCLUDED_PATHS = {"/docs", "/openapi.json", "/redoc"}


def client_address(request: Request) -> str:
    """Client IP as seen by the server (the proxy's IP behind a proxy)."""
    return getattr(request.client, "host", "unknown") if request.client else "unknown"


@dataclass
class _Window:
    count: int
    started_at: float


class FixedWindowCounter:
    """
    In-memory per-key fixed-window hit counter.

    Args:
        clock: Monotonic time source; injectable for tests
    """

    # Purge idle keys every N hits
    CLEANUP_EVERY = 1000

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._hits_since_cleanup = 0

    def hit(self, key: str, window_seconds: float) -> Tuple[int, float]:
        """
        Record one hit for key.

        Returns:
            (count within the current window, seconds until the window resets)
        """
        now = self._clock()
        window = self._windows.get(key)
        if window is None or now - window.started_at >= window_seconds:
            window = _Window(count=0, started_at=now)
            self._windows[key] = window
        window.count += 1

        self._hits_since_cleanup += 1
        if self._hits_since_cleanup >= self.CLEANUP_EVERY:
            self._cleanup(now, window_seconds)

        return window.count, window.started_at + window_seconds - now

    def _cleanup(self, now: float, window_seconds: float) -> None:
        """Drop keys whose window has expired (prevents unbounded growth)."""
        expired = [
            key for key, w in self._windows.items()
            if now - w.started_at >= window_seconds
        ]
        for key in expired:
            del self._windows[key]
        self._hits_since_cleanup = 0
        if expired:
            logger.debug("Cleaned up %d expired rate-limit windows", len(expired))


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Hard per-IP request cap.

    Configuration (from settings):
        rate_limit_requests: Max requests per window (default: 100)
        rate_limit_window: Window duration in seconds (default: 900 = 15 min)

    Response headers on every counted request:
        X-RateLimit-Limit, X-RateLimit-Remaining, X-RateLimit-Reset (seconds)

    Response on rate limit:
        HTTP 429 with a fixed message and a Retry-After header.
    """

    def __init__(self, app, counter: FixedWindowCounter | None = None, **kwargs):
        super().__init__(app, **kwargs)
        self.counter = counter or FixedWindowCounter()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = client_address(request)
        limit = settings.rate_limit_requests
        count, reset_in = self.counter.hit(client_ip, settings.rate_limit_window)
        reset_seconds = max(math.ceil(reset_in), 0)

        headers = {
            "X-RateLimit-Limit": str(limit),
            "X-RateLimit-Remaining": str(max(limit - count, 0)),
            "X-RateLimit-Reset": str(reset_seconds),
        }

        if count > limit:
            exc = RateLimitExceededError(retry_after=reset_seconds)
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                count,
                settings.rate_limit_window,
            )
            return JSONResponse(
                status_code=429,
                content=error_body("rate_limit_exceeded", exc.message),
                headers={**headers, "Retry-After": str(exc.retry_after)},
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response


class SlowDownMiddleware(BaseHTTPMiddleware):
    """
    Soft per-IP backpressure.

    Past slow_down_after requests in the window, each request is held for
    (count - slow_down_after) * slow_down_delay_ms before it continues, so the
    delay grows by one step with every extra request. Nothing is rejected.
    """

    def __init__(self, app, counter: FixedWindowCounter | None = None, **kwargs):
        super().__init__(app, **kwargs)
        self.counter = counter or FixedWindowCounter()

    def delay_for(self, count: int) -> float:
        """Seconds to hold the request whose window count is `count`."""
        overage = count - settings.slow_down_after
        if overage <= 0:
            return 0.0
        return overage * settings.slow_down_delay_ms / 1000

    async def _pause(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = client_address(request)
        count, _ = self.counter.hit(client_ip, settings.rate_limit_window)
        delay = self.delay_for(count)
        if delay > 0:
            logger.debug("Slowing down IP %s by %.3fs (request %d)", client_ip, delay, count)
            await self._pause(delay)

        return await call_next(request)
