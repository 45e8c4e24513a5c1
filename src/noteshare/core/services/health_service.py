"""Health service implementation."""

import time
from typing import Any, Awaitable, Callable, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ..redis_client import get_redis_client
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService

HEALTHY = "healthy"
DEGRADED = "degraded"
UNHEALTHY = "unhealthy"


async def timed_probe(probe: Callable[[], Awaitable[Any]]) -> Dict[str, Any]:
    """Run one dependency probe and report whether it answered, and how fast."""
    started = time.perf_counter()
    try:
        await probe()
    except Exception as e:
        return {"connected": False, "status": UNHEALTHY, "error": str(e), "response_time_ms": None}
    elapsed_ms = (time.perf_counter() - started) * 1000
    return {"connected": True, "status": HEALTHY, "response_time_ms": round(elapsed_ms, 2)}


class HealthService(IHealthService):
    """Reports on the database (required) and the search index (optional)."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()
        self.redis_client = get_redis_client()

    async def get_health_status(self) -> HealthCheckResponse:
        """Overall status.

        Search falls back to the database, so losing Redis only degrades the
        service; losing the database makes it unhealthy.
        """
        checks = {
            "database": await self.check_database_health(),
            "redis": await self.check_redis_health(),
        }

        if not checks["database"]["connected"]:
            status = UNHEALTHY
        elif not checks["redis"]["connected"]:
            status = DEGRADED
        else:
            status = HEALTHY

        return HealthCheckResponse(status=status, version=self.settings.app_version, checks=checks)

    async def check_database_health(self) -> Dict[str, Any]:
        async def select_one():
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()

        return await timed_probe(select_one)

    async def check_redis_health(self) -> Dict[str, Any]:
        # the app may have started without Redis; don't try to reconnect here
        if not self.redis_client.is_connected:
            return {
                "connected": False,
                "status": "unavailable",
                "error": "not connected",
                "response_time_ms": None,
            }
        return await timed_probe(self.redis_client.ping)
