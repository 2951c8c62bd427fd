"""Health check and system info routes."""

import redis
from fastapi import APIRouter, Depends, Request
from sqlalchemy import text

from heritage_content.api.deps import get_content_service
from heritage_content.config import get_settings
from heritage_content.middleware.rate_limit import rate_limit_general
from heritage_content.schemas.schemas import HealthResponse, LanguageListResponse
from heritage_content.services.content_service import ContentService
from heritage_content.services.storage import storage_service

router = APIRouter(tags=["System"])

settings = get_settings()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health status of the service and its dependencies.",
)
async def health_check():
    """
    Health check endpoint.

    Returns the status of:
    - Database connection
    - Rate limit store (Redis, when configured)
    - Object storage connection
    """
    # Check rate limit store
    rate_limit_status = "disabled"
    if settings.rate_limit_storage_uri.startswith("redis"):
        rate_limit_status = "ok"
        try:
            r = redis.from_url(settings.rate_limit_storage_uri)
            r.ping()
        except Exception:
            rate_limit_status = "error"
    elif settings.rate_limit_enabled:
        rate_limit_status = "memory"

    # Check storage
    storage_status = "ok" if storage_service.health_check() else "error"

    # Check database
    db_status = "ok"
    try:
        from heritage_content.db.session import engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        db_status = "error"

    overall_status = "healthy"
    if any(s == "error" for s in [rate_limit_status, storage_status, db_status]):
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version="1.0.0",
        database=db_status,
        rate_limit_store=rate_limit_status,
        storage=storage_status,
    )


@router.get(
    "/v1/languages",
    response_model=LanguageListResponse,
    summary="List supported languages",
    description="Get the catalog of active content languages.",
)
@rate_limit_general()
async def list_languages(
    request: Request,
    service: ContentService = Depends(get_content_service),
):
    """Get list of supported languages."""
    return LanguageListResponse(languages=await service.list_languages())


@router.get(
    "/v1/info",
    summary="Service information",
    description="Get general information about the service.",
)
async def service_info():
    """Get service information."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "environment": settings.app_env,
        "default_language": settings.default_language,
        "supported_languages": list(settings.language_names.keys()),
        "stale_seconds": settings.stale_times,
        "documentation": "/docs",
        "redoc": "/redoc",
    }
