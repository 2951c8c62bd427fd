"""Composition of base records, translations and image URLs into localized views."""

import logging
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from heritage_content.config import get_settings
from heritage_content.db.models import City, EntityKind, HeritageItem, Image
from heritage_content.errors import NotFoundError
from heritage_content.schemas.schemas import (
    CityHeritageResponse,
    CityOut,
    CitySummary,
    HeritageDetailOut,
    HeritageItemOut,
    ImageOut,
    LanguageInfo,
)
from heritage_content.services.image_resolver import ImageResolver, image_resolver
from heritage_content.services.translation_service import (
    ENTITY_FIELDS,
    FieldSpec,
    TranslationService,
    translation_service,
)

logger = logging.getLogger(__name__)

settings = get_settings()


def compose_localized(
    base_record: Any,
    translations_for_entity: Mapping[str, Mapping[str, str]],
    language_code: str,
    default_language: str,
    field_spec: Sequence[FieldSpec],
) -> dict[str, str]:
    """
    Resolve every declared field of one entity through the fallback chain.

    Each field is tried, independently, in the requested language, then in
    the default language, then from the field's declared default (a base
    record attribute if one is named and set, else the static default).

    Args:
        base_record: Row or object carrying the untranslated columns
        translations_for_entity: language code -> field name -> content
        language_code: Requested language
        default_language: Configured fallback language
        field_spec: Declared fields of the entity kind

    Returns:
        field name -> resolved string, one entry per declared field
    """
    requested = translations_for_entity.get(language_code) or {}
    fallback = translations_for_entity.get(default_language) or {}

    resolved: dict[str, str] = {}
    for spec in field_spec:
        name = spec.field.value
        value = requested.get(name)
        if value:
            resolved[name] = value
            continue

        value = fallback.get(name)
        if value:
            if language_code != default_language:
                logger.debug(
                    "No %s translation for %s.%s, using %s",
                    language_code, getattr(base_record, "id", "?"), name, default_language,
                )
            resolved[name] = value
            continue

        base_value = getattr(base_record, spec.default_attr, None) if spec.default_attr else None
        resolved[name] = base_value if base_value else spec.default

    return resolved


class ContentResolver:
    """Builds localized view models from the database."""

    def __init__(
        self,
        translations: Optional[TranslationService] = None,
        images: Optional[ImageResolver] = None,
        default_language: Optional[str] = None,
    ):
        self._translations = translations or translation_service
        self._images = images or image_resolver
        self.default_language = default_language or settings.default_language

    async def _localize(
        self,
        db: AsyncSession,
        kind: EntityKind,
        records: Sequence[Any],
        language_code: str,
    ) -> list[dict[str, str]]:
        """Localize records of one kind with a single translations query."""
        if not records:
            return []

        by_language = await self._translations.get_translations_for_languages(
            db,
            kind,
            [r.id for r in records],
            [language_code, self.default_language],
        )
        specs = ENTITY_FIELDS[kind]
        return [
            compose_localized(
                record,
                {lang: entities.get(record.id, {}) for lang, entities in by_language.items()},
                language_code,
                self.default_language,
                specs,
            )
            for record in records
        ]

    # ============== Cities ==============

    async def list_cities(
        self,
        db: AsyncSession,
        language_code: str,
        state: Optional[str] = None,
        region: Optional[str] = None,
        search_term: Optional[str] = None,
    ) -> list[CityOut]:
        """List cities ordered by slug, optionally filtered."""
        query = (
            select(City, func.count(HeritageItem.id).label("heritage_count"))
            .outerjoin(HeritageItem, HeritageItem.city_id == City.id)
            .group_by(City.id)
            .order_by(City.slug)
        )
        if state:
            query = query.where(City.state == state)
        if region:
            query = query.where(City.region == region)

        rows = (await db.execute(query)).all()
        cities = [row[0] for row in rows]
        localized = await self._localize(db, EntityKind.CITY, cities, language_code)

        result = [
            self._city_view(city, fields, heritage_count)
            for (city, heritage_count), fields in zip(rows, localized)
        ]

        # Search runs on translated names, so it filters after localization
        if search_term:
            needle = search_term.lower()
            result = [city for city in result if needle in city.name.lower()]

        return result

    async def get_city(self, db: AsyncSession, city_id: str, language_code: str) -> CityOut:
        """Get one localized city. Raises NotFoundError if it does not exist."""
        row = (
            await db.execute(
                select(City, func.count(HeritageItem.id).label("heritage_count"))
                .outerjoin(HeritageItem, HeritageItem.city_id == City.id)
                .where(City.id == city_id)
                .group_by(City.id)
            )
        ).first()
        if row is None:
            raise NotFoundError("City", city_id)

        city, heritage_count = row
        (fields,) = await self._localize(db, EntityKind.CITY, [city], language_code)
        return self._city_view(city, fields, heritage_count)

    def _city_view(self, city: City, fields: dict[str, str], heritage_count: int) -> CityOut:
        return CityOut(
            id=city.id,
            slug=city.slug,
            name=fields["name"],
            state=fields["state"],
            region=city.region,
            preview_image=self._images.resolve_stored_url(city.preview_image_url),
            heritage_count=int(heritage_count or 0),
        )

    # ============== Heritage ==============

    async def get_city_heritage_items(
        self,
        db: AsyncSession,
        city_id: str,
        language_code: str,
        category: Optional[str] = None,
    ) -> CityHeritageResponse:
        """
        Get the heritage items of a city in source order.

        Raises NotFoundError if the city does not exist; a city without
        heritage items yields an empty list.
        """
        city = await self.get_city(db, city_id, language_code)

        query = select(HeritageItem).where(HeritageItem.city_id == city_id)
        if category:
            query = query.where(HeritageItem.category == category)
        query = query.order_by(HeritageItem.category, HeritageItem.created_at, HeritageItem.id)

        items = list((await db.execute(query)).scalars().all())
        localized = await self._localize(db, EntityKind.HERITAGE, items, language_code)

        return CityHeritageResponse(
            city=CitySummary(id=city.id, name=city.name, state=city.state, region=city.region),
            heritage_items=[
                self._heritage_item_view(item, fields)
                for item, fields in zip(items, localized)
            ],
        )

    async def get_heritage_detail(
        self, db: AsyncSession, heritage_id: str, language_code: str
    ) -> HeritageDetailOut:
        """Get a heritage item with its images. Raises NotFoundError if absent."""
        heritage = await db.get(HeritageItem, heritage_id)
        if heritage is None:
            raise NotFoundError("Heritage item", heritage_id)

        (fields,) = await self._localize(db, EntityKind.HERITAGE, [heritage], language_code)
        images = await self.get_heritage_images(db, heritage_id, language_code)

        return HeritageDetailOut(
            **self._heritage_item_view(heritage, fields).model_dump(),
            detailed_description=fields["detailed_description"],
            historical_period=heritage.historical_period or "",
            significance=fields["significance"],
            images=images,
        )

    def _heritage_item_view(self, item: HeritageItem, fields: dict[str, str]) -> HeritageItemOut:
        return HeritageItemOut(
            id=item.id,
            name=fields["name"],
            category=item.category,
            summary=fields["summary"],
            thumbnail_image=self._images.resolve_stored_url(item.thumbnail_image_url),
        )

    # ============== Images ==============

    async def get_heritage_images(
        self,
        db: AsyncSession,
        heritage_id: str,
        language_code: Optional[str] = None,
        require_heritage: bool = False,
    ) -> list[ImageOut]:
        """
        Get the images of a heritage item by ascending display order.

        Ties in display order are broken by ascending id. A heritage item
        without images, or a heritage id with no record, yields an empty
        list unless ``require_heritage`` is set, in which case a missing
        record raises NotFoundError.
        """
        language_code = language_code or self.default_language

        result = await db.execute(
            select(Image)
            .where(Image.heritage_id == heritage_id)
            .order_by(Image.display_order, Image.id)
        )
        images = list(result.scalars().all())

        if not images:
            if require_heritage and await db.get(HeritageItem, heritage_id) is None:
                raise NotFoundError("Heritage item", heritage_id)
            return []

        localized = await self._localize(db, EntityKind.IMAGE, images, language_code)

        return [
            ImageOut(
                id=image.id,
                url=self._images.resolve_stored_url(image.url),
                thumbnail_url=self._images.resolve_stored_url(image.thumbnail_url),
                caption=fields["caption"],
                alt_text=fields["alt_text"],
                description=fields["description"],
                cultural_context=fields["cultural_context"],
                location=image.location,
                period=image.historical_period,
                display_order=image.display_order,
            )
            for image, fields in zip(images, localized)
        ]

    # ============== Languages ==============

    async def list_languages(self, db: AsyncSession) -> list[LanguageInfo]:
        return await self._translations.list_languages(db)


# Singleton instance
content_resolver = ContentResolver()
