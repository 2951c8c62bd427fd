"""Heritage detail and image routes."""

from fastapi import APIRouter, Depends, Request, Response

from heritage_content.api.deps import get_content_service, get_language
from heritage_content.errors import validate_uuid
from heritage_content.middleware.rate_limit import rate_limit_general
from heritage_content.schemas.schemas import ErrorResponse, HeritageDetailOut, ImageListResponse
from heritage_content.services.content_service import ContentService
from heritage_content.services.image_resolver import ImageResolver

router = APIRouter(prefix="/v1/heritage", tags=["Heritage"])


@router.get(
    "/{heritage_id}",
    response_model=HeritageDetailOut,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Get heritage details",
    description="Full localized heritage item including its ordered images.",
)
@rate_limit_general()
async def get_heritage_detail(
    request: Request,
    heritage_id: str,
    language: str = Depends(get_language),
    service: ContentService = Depends(get_content_service),
):
    """Get a heritage item in the requested language."""
    heritage_id = validate_uuid(heritage_id, "heritage_id")
    return await service.get_heritage_detail(heritage_id, language)


@router.get(
    "/{heritage_id}/images",
    response_model=ImageListResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="List heritage images",
    description="Images of a heritage item by display order. Unknown heritage ids return 404.",
)
@rate_limit_general()
async def get_heritage_images(
    request: Request,
    response: Response,
    heritage_id: str,
    language: str = Depends(get_language),
    service: ContentService = Depends(get_content_service),
):
    """Get the images of a heritage item."""
    heritage_id = validate_uuid(heritage_id, "heritage_id")
    images = await service.get_heritage_images(heritage_id, language, require_heritage=True)

    response.headers.update(ImageResolver.cache_headers())
    return ImageListResponse(images=images)
