"""Shared FastAPI dependencies."""

from functools import lru_cache
from typing import Optional

from fastapi import Header, HTTPException, Query, status

from heritage_content.config import get_settings
from heritage_content.db.models import HeritageCategory, Region
from heritage_content.db.session import async_session_maker
from heritage_content.errors import ValidationError
from heritage_content.schemas.schemas import normalize_language
from heritage_content.services.cache import CacheLayer
from heritage_content.services.content_resolver import content_resolver
from heritage_content.services.content_service import ContentService
from heritage_content.services.image_resolver import image_resolver
from heritage_content.services.image_service import ImageService
from heritage_content.services.storage import storage_service
from heritage_content.services.translation_service import translation_service

settings = get_settings()


@lru_cache
def get_cache() -> CacheLayer:
    """Process-wide cache, built once from settings."""
    return CacheLayer.from_settings(settings)


def get_content_service() -> ContentService:
    return ContentService(
        session_factory=async_session_maker,
        cache=get_cache(),
        resolver=content_resolver,
        translations=translation_service,
    )


def get_image_service() -> ImageService:
    return ImageService(
        session_factory=async_session_maker,
        storage=storage_service,
        resolver=image_resolver,
        translations=translation_service,
        cache=get_cache(),
    )


def get_language(
    language: Optional[str] = Query(
        None, max_length=10, description="Content language code, e.g. hi or en-US"
    ),
    accept_language: Optional[str] = Header(None),
) -> str:
    """
    Resolve the content language of a request.

    Order: ``language`` query parameter, then the first supported entry of
    ``Accept-Language``, then the configured default.
    """
    code = normalize_language(language) if language else None
    if code:
        return code

    if accept_language:
        for part in accept_language.split(","):
            code = normalize_language(part.split(";")[0])
            if code:
                return code

    return settings.default_language


def parse_category(category: Optional[str]) -> Optional[str]:
    if category is None:
        return None
    try:
        return HeritageCategory(category).value
    except ValueError:
        raise ValidationError(f"Unknown heritage category: {category}", field="category")


def parse_region(region: Optional[str]) -> Optional[str]:
    if region is None:
        return None
    try:
        return Region(region).value
    except ValueError:
        raise ValidationError(f"Unknown region: {region}", field="region")


def verify_admin_key(x_admin_key: Optional[str] = Header(None)):
    """Verify admin access using a secret key."""
    if not x_admin_key or x_admin_key != settings.secret_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin key",
        )
    return True
