"""Cached read access to localized content, and writes that invalidate it."""

import logging
from typing import Any, Awaitable, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from heritage_content.db.models import EntityKind
from heritage_content.schemas.schemas import (
    CityHeritageResponse,
    CityOut,
    HeritageDetailOut,
    ImageOut,
    LanguageInfo,
    TranslationUpsert,
)
from heritage_content.services.cache import (
    ANY_LANGUAGE,
    CacheLayer,
    ResourceKind,
    make_cache_key,
)
from heritage_content.services.content_resolver import ContentResolver
from heritage_content.services.translation_service import TranslationService, check_field

logger = logging.getLogger(__name__)

# Cached resource kinds that embed fields of each entity kind
INVALIDATED_BY: dict[EntityKind, tuple[ResourceKind, ...]] = {
    EntityKind.CITY: (ResourceKind.CITIES, ResourceKind.CITY_HERITAGE),
    EntityKind.HERITAGE: (ResourceKind.CITY_HERITAGE, ResourceKind.HERITAGE_DETAIL),
    EntityKind.IMAGE: (ResourceKind.HERITAGE_DETAIL, ResourceKind.HERITAGE_IMAGES),
}


class ContentService:
    """
    Entry point for localized content.

    Every read goes through the cache. Resolutions open their own session
    because a coalesced resolution may outlive the request that started it.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        cache: CacheLayer,
        resolver: ContentResolver,
        translations: TranslationService,
    ):
        self._session_factory = session_factory
        self.cache = cache
        self._resolver = resolver
        self._translations = translations

    @property
    def default_language(self) -> str:
        return self._resolver.default_language

    async def _cached(
        self,
        kind: ResourceKind,
        filters: dict[str, Any],
        language_code: str,
        fetch: Callable[[AsyncSession], Awaitable[Any]],
    ) -> Any:
        key = make_cache_key(kind, filters, language_code)

        async def resolve():
            async with self._session_factory() as db:
                return await fetch(db)

        return await self.cache.get(key, resolve)

    async def list_cities(
        self,
        language_code: str,
        state: Optional[str] = None,
        region: Optional[str] = None,
        search_term: Optional[str] = None,
    ) -> list[CityOut]:
        return await self._cached(
            ResourceKind.CITIES,
            {"state": state, "region": region, "search": search_term},
            language_code,
            lambda db: self._resolver.list_cities(db, language_code, state, region, search_term),
        )

    async def get_city(self, city_id: str, language_code: str) -> CityOut:
        return await self._cached(
            ResourceKind.CITIES,
            {"city_id": city_id},
            language_code,
            lambda db: self._resolver.get_city(db, city_id, language_code),
        )

    async def get_city_heritage_items(
        self, city_id: str, language_code: str, category: Optional[str] = None
    ) -> CityHeritageResponse:
        return await self._cached(
            ResourceKind.CITY_HERITAGE,
            {"city_id": city_id, "category": category},
            language_code,
            lambda db: self._resolver.get_city_heritage_items(db, city_id, language_code, category),
        )

    async def get_heritage_detail(self, heritage_id: str, language_code: str) -> HeritageDetailOut:
        return await self._cached(
            ResourceKind.HERITAGE_DETAIL,
            {"heritage_id": heritage_id},
            language_code,
            lambda db: self._resolver.get_heritage_detail(db, heritage_id, language_code),
        )

    async def get_heritage_images(
        self,
        heritage_id: str,
        language_code: Optional[str] = None,
        require_heritage: bool = False,
    ) -> list[ImageOut]:
        language_code = language_code or self.default_language
        return await self._cached(
            ResourceKind.HERITAGE_IMAGES,
            {"heritage_id": heritage_id, "strict": "1" if require_heritage else None},
            language_code,
            lambda db: self._resolver.get_heritage_images(
                db, heritage_id, language_code, require_heritage=require_heritage
            ),
        )

    async def list_languages(self) -> list[LanguageInfo]:
        return await self._cached(
            ResourceKind.LANGUAGES,
            {},
            ANY_LANGUAGE,
            self._resolver.list_languages,
        )

    async def upsert_translation(self, request: TranslationUpsert) -> None:
        """Write one translation, then drop every cached view embedding it."""
        kind, _ = check_field(request.entity_kind, request.field_name)

        async with self._session_factory() as db:
            await self._translations.upsert_translation(
                db,
                request.entity_kind,
                request.entity_id,
                request.language_code,
                request.field_name,
                request.content,
            )
            await db.commit()

        self.invalidate_entity_kind(kind)

    def invalidate_entity_kind(self, kind: EntityKind) -> int:
        evicted = sum(self.cache.invalidate(resource.value) for resource in INVALIDATED_BY[kind])
        logger.debug("Invalidated %d cached views after %s write", evicted, kind.value)
        return evicted
