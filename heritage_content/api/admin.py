"""Content management routes (admin)."""

from fastapi import APIRouter, Depends, Request, status

from heritage_content.api.deps import get_content_service, get_image_service, verify_admin_key
from heritage_content.errors import validate_uuid
from heritage_content.middleware.rate_limit import rate_limit_admin
from heritage_content.schemas.schemas import (
    ErrorResponse,
    ImageOut,
    ImageUploadRequest,
    TranslationUpsert,
)
from heritage_content.services.content_service import ContentService
from heritage_content.services.image_service import ImageService

router = APIRouter(
    prefix="/v1/admin",
    tags=["Admin - Content"],
    responses={400: {"model": ErrorResponse}, 403: {"description": "Invalid admin key"}},
)


@router.put(
    "/translations",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Create or overwrite a translation",
    description="Upsert one translated field. Cached views that embed the entity are invalidated.",
)
@rate_limit_admin()
async def upsert_translation(
    request: Request,
    body: TranslationUpsert,
    service: ContentService = Depends(get_content_service),
    _: bool = Depends(verify_admin_key),
):
    """Upsert a translation."""
    body = body.model_copy(update={"entity_id": validate_uuid(body.entity_id, "entity_id")})
    await service.upsert_translation(body)


@router.post(
    "/images",
    response_model=ImageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a heritage image",
    description="Store an image and append it to the heritage item's gallery.",
)
@rate_limit_admin()
async def upload_image(
    request: Request,
    body: ImageUploadRequest,
    service: ImageService = Depends(get_image_service),
    _: bool = Depends(verify_admin_key),
):
    """Upload an image for a heritage item."""
    body = body.model_copy(update={"heritage_id": validate_uuid(body.heritage_id, "heritage_id")})
    return await service.upload_image(body)


@router.delete(
    "/images/{image_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a heritage image",
)
@rate_limit_admin()
async def delete_image(
    request: Request,
    image_id: str,
    service: ImageService = Depends(get_image_service),
    _: bool = Depends(verify_admin_key),
):
    """Delete an image with its translations and stored files."""
    await service.delete_image(validate_uuid(image_id, "image_id"))
