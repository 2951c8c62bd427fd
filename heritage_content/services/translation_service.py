"""Batched lookup and upsert of translated field values."""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from heritage_content.config import get_settings
from heritage_content.db.models import EntityKind, Language, Translation
from heritage_content.errors import ValidationError
from heritage_content.schemas.schemas import LanguageInfo

logger = logging.getLogger(__name__)

settings = get_settings()


class TranslatedField(str, enum.Enum):
    """Every field name that may be stored in the translations table."""

    NAME = "name"
    STATE = "state"
    SUMMARY = "summary"
    DETAILED_DESCRIPTION = "detailed_description"
    SIGNIFICANCE = "significance"
    CAPTION = "caption"
    ALT_TEXT = "alt_text"
    DESCRIPTION = "description"
    CULTURAL_CONTEXT = "cultural_context"


@dataclass(frozen=True)
class FieldSpec:
    """How one translated field resolves once both languages miss.

    ``default_attr`` names a base-record attribute used before ``default``.
    """

    field: TranslatedField
    default: str = ""
    default_attr: Optional[str] = None


ENTITY_FIELDS: dict[EntityKind, tuple[FieldSpec, ...]] = {
    EntityKind.CITY: (
        FieldSpec(TranslatedField.NAME, default_attr="slug"),
        FieldSpec(TranslatedField.STATE, default_attr="state"),
    ),
    EntityKind.HERITAGE: (
        FieldSpec(TranslatedField.NAME),
        FieldSpec(TranslatedField.SUMMARY),
        FieldSpec(TranslatedField.DETAILED_DESCRIPTION),
        FieldSpec(TranslatedField.SIGNIFICANCE),
    ),
    EntityKind.IMAGE: (
        FieldSpec(TranslatedField.CAPTION),
        FieldSpec(TranslatedField.ALT_TEXT),
        FieldSpec(TranslatedField.DESCRIPTION),
        FieldSpec(TranslatedField.CULTURAL_CONTEXT),
    ),
}


def check_field(entity_kind: str, field_name: str) -> tuple[EntityKind, TranslatedField]:
    """Validate an (entity kind, field) pair against the closed field mapping."""
    try:
        kind = EntityKind(entity_kind)
    except ValueError:
        raise ValidationError(f"Unknown entity kind: {entity_kind}", field="entity_kind")

    allowed = {spec.field.value: spec.field for spec in ENTITY_FIELDS[kind]}
    if field_name not in allowed:
        raise ValidationError(
            f"Field {field_name!r} is not translatable for {kind.value} "
            f"(allowed: {', '.join(sorted(allowed))})",
            field="field_name",
        )
    return kind, allowed[field_name]


# entity id -> field name -> content
EntityTranslations = dict[str, dict[str, str]]


class TranslationService:
    """Service for reading and writing rows of the translations table."""

    async def get_translations(
        self,
        db: AsyncSession,
        entity_kind: EntityKind,
        entity_ids: Iterable[str],
        language_code: str,
    ) -> EntityTranslations:
        """
        Get translations of many entities in one language.

        Every requested id is present in the result; entities without rows
        map to an empty dict.
        """
        by_language = await self.get_translations_for_languages(
            db, entity_kind, entity_ids, [language_code]
        )
        return by_language[language_code]

    async def get_translations_for_languages(
        self,
        db: AsyncSession,
        entity_kind: EntityKind,
        entity_ids: Iterable[str],
        language_codes: Iterable[str],
    ) -> dict[str, EntityTranslations]:
        """
        Get translations of many entities in several languages with one query.

        Returns:
            language code -> entity id -> field name -> content
        """
        ids = list(dict.fromkeys(entity_ids))
        languages = list(dict.fromkeys(language_codes))
        result: dict[str, EntityTranslations] = {
            lang: {entity_id: {} for entity_id in ids} for lang in languages
        }
        if not ids or not languages:
            return result

        rows = await db.execute(
            select(
                Translation.entity_id,
                Translation.language_code,
                Translation.field_name,
                Translation.content,
            ).where(
                Translation.entity_type == EntityKind(entity_kind).value,
                Translation.entity_id.in_(ids),
                Translation.language_code.in_(languages),
            )
        )
        for entity_id, language_code, field_name, content in rows:
            result[language_code].setdefault(entity_id, {})[field_name] = content

        return result

    async def upsert_translation(
        self,
        db: AsyncSession,
        entity_kind: str,
        entity_id: str,
        language_code: str,
        field_name: str,
        content: str,
    ) -> None:
        """Create or overwrite one translation (last write wins)."""
        kind, field = check_field(entity_kind, field_name)
        if language_code not in settings.supported_languages:
            raise ValidationError(
                f"Unsupported language: {language_code}", field="language_code"
            )

        insert = self._insert_for(db)
        now = datetime.now(timezone.utc)
        stmt = insert(Translation).values(
            entity_type=kind.value,
            entity_id=entity_id,
            language_code=language_code,
            field_name=field.value,
            content=content,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["entity_type", "entity_id", "language_code", "field_name"],
            set_={"content": stmt.excluded.content, "updated_at": now},
        )
        await db.execute(stmt)
        logger.debug(
            "Upserted translation %s/%s/%s/%s", kind.value, entity_id, language_code, field.value
        )

    async def delete_translations(
        self,
        db: AsyncSession,
        entity_kind: EntityKind,
        entity_id: str,
    ) -> int:
        """Delete every translation of an entity. Returns rows removed."""
        result = await db.execute(
            delete(Translation).where(
                Translation.entity_type == EntityKind(entity_kind).value,
                Translation.entity_id == entity_id,
            )
        )
        return result.rowcount or 0

    async def list_languages(self, db: AsyncSession) -> list[LanguageInfo]:
        """Active languages ordered by English name."""
        result = await db.execute(
            select(Language)
            .where(Language.is_active.is_(True))
            .order_by(Language.english_name)
        )
        return [
            LanguageInfo(code=lang.code, name=lang.native_name, english_name=lang.english_name)
            for lang in result.scalars().all()
        ]

    @staticmethod
    def _insert_for(db: AsyncSession):
        """Dialect-specific INSERT supporting ON CONFLICT."""
        dialect = db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise NotImplementedError(f"Upsert not supported on {dialect}")


# Singleton instance
translation_service = TranslationService()
