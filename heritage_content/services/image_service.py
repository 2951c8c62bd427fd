"""Image upload and deletion for heritage items."""

import asyncio
import logging
from typing import Optional
from uuid import uuid4

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from heritage_content.config import get_settings
from heritage_content.db.models import EntityKind, HeritageItem, Image
from heritage_content.errors import NotFoundError, ValidationError
from heritage_content.schemas.schemas import ImageOut, ImageUploadRequest
from heritage_content.services.cache import CacheLayer
from heritage_content.services.image_resolver import ImageResolver, ImageVariant
from heritage_content.services.storage import StorageService
from heritage_content.services.translation_service import TranslatedField, TranslationService

logger = logging.getLogger(__name__)

settings = get_settings()

# Cache prefix shared by heritage detail and heritage image views
HERITAGE_PREFIX = "heritage"


class ImageService:
    """Service for attaching images to heritage items and removing them."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        storage: StorageService,
        resolver: ImageResolver,
        translations: TranslationService,
        cache: CacheLayer,
    ):
        self._session_factory = session_factory
        self._storage = storage
        self._resolver = resolver
        self._translations = translations
        self._cache = cache

    async def upload_image(self, request: ImageUploadRequest) -> ImageOut:
        """
        Store an image and append it after the heritage item's last image.

        Text fields are written as translations in the request language.
        The stored object is removed again if the database write fails.
        """
        if request.language_code not in settings.supported_languages:
            raise ValidationError(
                f"Unsupported language: {request.language_code}", field="language_code"
            )

        image_id = str(uuid4())

        async with self._session_factory() as db:
            # Row lock serializes display order assignment per heritage item
            heritage = (
                await db.execute(
                    select(HeritageItem)
                    .where(HeritageItem.id == request.heritage_id)
                    .with_for_update()
                )
            ).scalar_one_or_none()
            if heritage is None:
                raise NotFoundError("Heritage item", request.heritage_id)

            # boto3 is blocking
            storage_path = await asyncio.to_thread(
                self._storage.upload_image_from_base64,
                request.image_b64,
                request.heritage_id,
                image_id,
                request.content_type,
            )

            try:
                image = await self._insert_image(db, request, image_id, storage_path)
                await db.commit()
            except Exception:
                await db.rollback()
                logger.warning("Upload of image %s failed, removing stored object", image_id)
                await asyncio.to_thread(
                    self._storage.delete_image_files, request.heritage_id, image_id
                )
                raise

        self._cache.invalidate(HERITAGE_PREFIX)
        logger.info(
            "Uploaded image %s for heritage %s at position %d",
            image_id, request.heritage_id, image.display_order,
        )

        return ImageOut(
            id=image_id,
            url=image.url,
            thumbnail_url=image.thumbnail_url,
            caption=request.caption,
            alt_text=request.alt_text,
            description=request.description or "",
            cultural_context=request.cultural_context or "",
            location=request.location,
            period=request.period,
            display_order=image.display_order,
        )

    async def _insert_image(
        self,
        db: AsyncSession,
        request: ImageUploadRequest,
        image_id: str,
        storage_path: str,
    ) -> Image:
        max_order: Optional[int] = (
            await db.execute(
                select(func.max(Image.display_order)).where(
                    Image.heritage_id == request.heritage_id
                )
            )
        ).scalar()

        image = Image(
            id=image_id,
            heritage_id=request.heritage_id,
            url=self._resolver.get_image_url(image_id, ImageVariant.FULL),
            thumbnail_url=self._resolver.get_image_url(image_id, ImageVariant.THUMBNAIL),
            storage_path=storage_path,
            display_order=0 if max_order is None else max_order + 1,
            location=request.location,
            historical_period=request.period,
        )
        db.add(image)
        await db.flush()

        fields = {
            TranslatedField.CAPTION: request.caption,
            TranslatedField.ALT_TEXT: request.alt_text,
            TranslatedField.DESCRIPTION: request.description,
            TranslatedField.CULTURAL_CONTEXT: request.cultural_context,
        }
        for field, content in fields.items():
            if content:
                await self._translations.upsert_translation(
                    db, EntityKind.IMAGE.value, image_id, request.language_code, field.value, content
                )

        return image

    async def delete_image(self, image_id: str) -> None:
        """Delete an image, its translations and its stored files."""
        async with self._session_factory() as db:
            image = await db.get(Image, image_id)
            if image is None:
                raise NotFoundError("Image", image_id)
            heritage_id = image.heritage_id
            has_files = bool(image.storage_path)

            await self._translations.delete_translations(db, EntityKind.IMAGE, image_id)
            await db.execute(delete(Image).where(Image.id == image_id))
            await db.commit()

        if has_files:
            await asyncio.to_thread(self._storage.delete_image_files, heritage_id, image_id)

        self._cache.invalidate(HERITAGE_PREFIX)
        logger.info("Deleted image %s of heritage %s", image_id, heritage_id)
