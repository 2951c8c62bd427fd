"""Pydantic schemas for localized views and request validation."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from heritage_content.config import get_settings

settings = get_settings()


# ============== Languages ==============

LANGUAGE_ALIASES = {
    "eng": "en",
    "english": "en",
    "hindi": "hi",
    "bengali": "bn",
    "bangla": "bn",
    "telugu": "te",
    "marathi": "mr",
    "tamil": "ta",
    "gujarati": "gu",
    "kannada": "kn",
    "malayalam": "ml",
    "odia": "or",
    "oriya": "or",
    "punjabi": "pa",
}


def normalize_language(lang: str | None) -> str | None:
    """Normalize a language tag to a supported code, or None if unsupported.

    Region subtags are dropped (``en-US`` -> ``en``).
    """
    if lang is None:
        return None
    lang = lang.lower().strip().replace("_", "-").split("-")[0]
    lang = LANGUAGE_ALIASES.get(lang, lang)
    return lang if lang in settings.supported_languages else None


# ============== Localized views ==============


class ImageOut(BaseModel):
    """A localized image with resolved URLs."""

    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    thumbnail_url: str
    caption: str
    alt_text: str
    description: str
    cultural_context: str
    location: Optional[str] = None
    period: Optional[str] = None
    display_order: int = 0


class HeritageItemOut(BaseModel):
    """Heritage item summary as shown in a city listing."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    summary: str
    thumbnail_image: str


class HeritageDetailOut(HeritageItemOut):
    """Full heritage item with its ordered images."""

    detailed_description: str
    historical_period: str
    significance: str
    images: list[ImageOut] = []


class CityOut(BaseModel):
    """A localized city."""

    model_config = ConfigDict(frozen=True)

    id: str
    slug: str
    name: str
    state: str
    region: str
    preview_image: str
    heritage_count: int = 0


class CitySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    state: str
    region: str


class CityListResponse(BaseModel):
    cities: list[CityOut]


class CityHeritageResponse(BaseModel):
    """Heritage items of a city, in source order."""

    city: CitySummary
    heritage_items: list[HeritageItemOut]


class ImageListResponse(BaseModel):
    images: list[ImageOut]


class LanguageInfo(BaseModel):
    """Information about a supported language."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    english_name: str


class LanguageListResponse(BaseModel):
    languages: list[LanguageInfo]


# ============== Admin requests ==============


class TranslationUpsert(BaseModel):
    """Request to create or overwrite one translated field."""

    entity_kind: str = Field(..., description="city, heritage or image")
    entity_id: str
    language_code: str
    field_name: str
    content: str = Field(..., max_length=20000)

    @field_validator("language_code", mode="before")
    @classmethod
    def normalize_lang(cls, v: str) -> str:
        return normalize_language(v) or v


class ImageUploadRequest(BaseModel):
    """Request to attach a new image to a heritage item."""

    heritage_id: str
    image_b64: str = Field(..., description="Base64-encoded image data")
    content_type: str = Field("image/jpeg", description="MIME type of the image")
    language_code: str = Field(settings.default_language, description="Language of the text fields")
    caption: str = Field(..., min_length=1, max_length=500)
    alt_text: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=5000)
    cultural_context: Optional[str] = Field(None, max_length=5000)
    location: Optional[str] = Field(None, max_length=255)
    period: Optional[str] = Field(None, max_length=100)

    @field_validator("language_code", mode="before")
    @classmethod
    def normalize_lang(cls, v: str) -> str:
        return normalize_language(v) or v


# ============== Health & Misc Schemas ==============


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: str
    rate_limit_store: str
    storage: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: Optional[str] = None
    code: Optional[str] = None
