"""City listing and city heritage routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from heritage_content.api.deps import get_content_service, get_language, parse_category, parse_region
from heritage_content.errors import validate_uuid
from heritage_content.middleware.rate_limit import rate_limit_general
from heritage_content.schemas.schemas import (
    CityHeritageResponse,
    CityListResponse,
    CityOut,
    ErrorResponse,
)
from heritage_content.services.content_service import ContentService

router = APIRouter(prefix="/v1/cities", tags=["Cities"])


@router.get(
    "",
    response_model=CityListResponse,
    summary="List cities",
    description="List cities with localized names, optionally filtered by state, region or name.",
)
@rate_limit_general()
async def list_cities(
    request: Request,
    state: Optional[str] = Query(None, max_length=100),
    region: Optional[str] = Query(None, description="North, South, East, West, Central or Northeast"),
    search: Optional[str] = Query(None, max_length=255, description="Case-insensitive match on the localized name"),
    language: str = Depends(get_language),
    service: ContentService = Depends(get_content_service),
):
    """List all cities in the requested language."""
    cities = await service.list_cities(
        language,
        state=state or None,
        region=parse_region(region or None),
        search_term=search or None,
    )
    return CityListResponse(cities=cities)


@router.get(
    "/{city_id}",
    response_model=CityOut,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Get a city",
)
@rate_limit_general()
async def get_city(
    request: Request,
    city_id: str,
    language: str = Depends(get_language),
    service: ContentService = Depends(get_content_service),
):
    """Get one city in the requested language."""
    return await service.get_city(validate_uuid(city_id, "city_id"), language)


@router.get(
    "/{city_id}/heritage",
    response_model=CityHeritageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="List heritage items of a city",
    description="Heritage items of a city in source order, optionally filtered by category.",
)
@rate_limit_general()
async def get_city_heritage(
    request: Request,
    city_id: str,
    category: Optional[str] = Query(None),
    language: str = Depends(get_language),
    service: ContentService = Depends(get_content_service),
):
    """Get the heritage items of a city."""
    city_id = validate_uuid(city_id, "city_id")
    return await service.get_city_heritage_items(
        city_id, language, category=parse_category(category or None)
    )
