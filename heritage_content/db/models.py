"""Database models for the heritage content service."""

import enum
from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from heritage_content.db.session import Base


class EntityKind(str, enum.Enum):
    """Kinds of entity that carry translated fields."""

    CITY = "city"
    HERITAGE = "heritage"
    IMAGE = "image"


class HeritageCategory(str, enum.Enum):
    """Categories a heritage item can belong to."""

    MONUMENTS = "monuments"
    TEMPLES = "temples"
    FESTIVALS = "festivals"
    TRADITIONS = "traditions"
    CUISINE = "cuisine"
    ART_FORMS = "art_forms"
    HISTORICAL_EVENTS = "historical_events"
    CUSTOMS = "customs"


class Region(str, enum.Enum):
    """Geographic regions of India used for city filtering."""

    NORTH = "North"
    SOUTH = "South"
    EAST = "East"
    WEST = "West"
    CENTRAL = "Central"
    NORTHEAST = "Northeast"


class Language(Base):
    """Supported content languages."""

    __tablename__ = "languages"

    code: Mapped[str] = mapped_column(String(10), primary_key=True)
    native_name: Mapped[str] = mapped_column(String(100))
    english_name: Mapped[str] = mapped_column(String(100))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class City(Base):
    """A city; display name and state are translated."""

    __tablename__ = "cities"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), primary_key=True, default=lambda: str(uuid4())
    )
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    state: Mapped[str] = mapped_column(String(100), index=True)
    region: Mapped[str] = mapped_column(String(50), index=True)
    preview_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    heritage_items: Mapped[list["HeritageItem"]] = relationship(
        "HeritageItem", back_populates="city", cascade="all, delete-orphan"
    )


class HeritageItem(Base):
    """A heritage item attached to a city."""

    __tablename__ = "heritage_items"
    __table_args__ = (Index("idx_heritage_city_category", "city_id", "category"),)

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), primary_key=True, default=lambda: str(uuid4())
    )
    city_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("cities.id", ondelete="CASCADE"), index=True
    )
    category: Mapped[str] = mapped_column(String(50), index=True)
    historical_period: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    thumbnail_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    city: Mapped["City"] = relationship("City", back_populates="heritage_items")
    images: Mapped[list["Image"]] = relationship(
        "Image", back_populates="heritage", cascade="all, delete-orphan"
    )


class Image(Base):
    """An image of a heritage item. Caption and descriptions are translated."""

    __tablename__ = "images"
    __table_args__ = (
        Index("idx_images_heritage_order", "heritage_id", "display_order"),
        CheckConstraint("display_order >= 0", name="ck_images_display_order_non_negative"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), primary_key=True, default=lambda: str(uuid4())
    )
    heritage_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("heritage_items.id", ondelete="CASCADE"), index=True
    )
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    storage_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    historical_period: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    heritage: Mapped["HeritageItem"] = relationship("HeritageItem", back_populates="images")


class Translation(Base):
    """One translated field value (entity kind, entity id, language, field)."""

    __tablename__ = "translations"
    __table_args__ = (
        UniqueConstraint(
            "entity_type",
            "entity_id",
            "language_code",
            "field_name",
            name="uq_translations_entity_language_field",
        ),
        Index("idx_translations_entity", "entity_type", "entity_id", "language_code"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), primary_key=True, default=lambda: str(uuid4())
    )
    entity_type: Mapped[str] = mapped_column(String(50))
    entity_id: Mapped[str] = mapped_column(Uuid(as_uuid=False))
    language_code: Mapped[str] = mapped_column(
        String(10), ForeignKey("languages.code", ondelete="CASCADE"), index=True
    )
    field_name: Mapped[str] = mapped_column(String(50))
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
