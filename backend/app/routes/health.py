"""
Quizo Backend — Health Check Route
===================================

What:  Liveness endpoint for monitoring and load balancer probes.
How:   Always answers 200 with status "ok" while the process is serving;
       the database probe is reported alongside without changing status.
"""

import time

from fastapi import APIRouter

from app import __version__
from app.database import ping
from app.schemas.common import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    database = "connected" if await ping() else "disconnected"
    return HealthResponse(
        status="ok",
        version=__version__,
        database=database,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
