"""Health endpoints: overall status plus one probe per dependency."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.common import HealthCheckResponse
from ..core.services import HealthService
from ..database import get_db_session

router = APIRouter(prefix="/health", tags=["health"])


def get_health_service(session: AsyncSession = Depends(get_db_session)) -> HealthService:
    return HealthService(session)


@router.get("/", response_model=HealthCheckResponse)
async def overall_health(response: Response, service: HealthService = Depends(get_health_service)):
    """Healthy, degraded (no search index) or unhealthy (no database, answered with 503)."""
    report = await service.get_health_status()
    if report.status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return report


@router.get("/database", response_model=Dict[str, Any])
async def database_probe(service: HealthService = Depends(get_health_service)):
    return await service.check_database_health()


@router.get("/redis", response_model=Dict[str, Any])
async def search_index_probe(service: HealthService = Depends(get_health_service)):
    return await service.check_redis_health()
