"""Pytest configuration and fixtures."""

import os

# Must be set before the application modules read settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from types import SimpleNamespace
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from heritage_content.api.deps import get_content_service, get_image_service
from heritage_content.config import get_settings
from heritage_content.db.models import City, EntityKind, HeritageItem, Image, Language
from heritage_content.db.session import Base
from heritage_content.main import app
from heritage_content.middleware.rate_limit import limiter
from heritage_content.services.cache import CacheLayer
from heritage_content.services.content_resolver import ContentResolver
from heritage_content.services.content_service import ContentService
from heritage_content.services.image_resolver import image_resolver
from heritage_content.services.image_service import ImageService
from heritage_content.services.translation_service import translation_service

# Test database URL (in-memory SQLite shared through a single connection)
TEST_DATABASE_URL = "sqlite+aiosqlite://"

settings = get_settings()

TEST_LANGUAGES = [
    ("en", "English", "English"),
    ("hi", "हिन्दी", "Hindi"),
    ("mr", "मराठी", "Marathi"),
    ("ta", "தமிழ்", "Tamil"),
]


class FakeStorage:
    """In-memory stand-in for the object storage service."""

    def __init__(self):
        self.uploads: list[tuple[str, str, str]] = []
        self.deleted: list[tuple[str, str]] = []

    def upload_image_from_base64(
        self, image_b64: str, heritage_id: str, image_id: str, content_type: str = "image/jpeg"
    ) -> str:
        self.uploads.append((heritage_id, image_id, content_type))
        return f"heritage/{heritage_id}/images/{image_id}/original.jpg"

    def delete_image_files(self, heritage_id: str, image_id: str):
        self.deleted.append((heritage_id, image_id))

    def health_check(self) -> bool:
        return True


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine, with languages seeded."""
    maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with maker() as session:
        for code, native_name, english_name in TEST_LANGUAGES:
            session.add(Language(code=code, native_name=native_name, english_name=english_name))
        await session.commit()

    return maker


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def cache() -> CacheLayer:
    return CacheLayer.from_settings(settings)


@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def resolver() -> ContentResolver:
    return ContentResolver(default_language="en")


@pytest.fixture
def content_service(session_maker, cache, resolver) -> ContentService:
    return ContentService(
        session_factory=session_maker,
        cache=cache,
        resolver=resolver,
        translations=translation_service,
    )


@pytest.fixture
def image_service(session_maker, cache, fake_storage) -> ImageService:
    return ImageService(
        session_factory=session_maker,
        storage=fake_storage,
        resolver=image_resolver,
        translations=translation_service,
        cache=cache,
    )


@pytest_asyncio.fixture
async def client(content_service, image_service) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    app.dependency_overrides[get_content_service] = lambda: content_service
    app.dependency_overrides[get_image_service] = lambda: image_service
    limiter.reset()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict:
    return {"X-Admin-Key": settings.secret_key}


async def _translate(db: AsyncSession, kind: EntityKind, entity_id: str, lang: str, fields: dict):
    for field_name, content in fields.items():
        await translation_service.upsert_translation(
            db, kind.value, entity_id, lang, field_name, content
        )


@pytest_asyncio.fixture
async def mumbai(session_maker) -> SimpleNamespace:
    """
    Mumbai with two heritage items.

    The Gateway of India has two images (display order 0 and 1, inserted in
    reverse); Elephanta Caves has none.
    """
    async with session_maker() as db:
        city = City(
            slug="mumbai",
            state="Maharashtra",
            region="West",
            preview_image_url="https://example.com/mumbai.jpg",
        )
        db.add(city)
        await db.flush()
        await _translate(db, EntityKind.CITY, city.id, "en", {"name": "Mumbai"})
        await _translate(db, EntityKind.CITY, city.id, "hi", {"name": "मुंबई", "state": "महाराष्ट्र"})

        gateway = HeritageItem(
            city_id=city.id,
            category="monuments",
            historical_period="1924",
            thumbnail_image_url=None,
        )
        caves = HeritageItem(city_id=city.id, category="temples", historical_period="5th century")
        db.add_all([gateway, caves])
        await db.flush()
        await _translate(db, EntityKind.HERITAGE, gateway.id, "en", {
            "name": "Gateway of India",
            "summary": "Arch monument on the Mumbai waterfront.",
            "detailed_description": "Basalt arch built to commemorate a royal visit.",
            "significance": "Icon of the city.",
        })
        await _translate(db, EntityKind.HERITAGE, gateway.id, "hi", {"name": "गेटवे ऑफ़ इंडिया"})
        await _translate(db, EntityKind.HERITAGE, caves.id, "en", {"name": "Elephanta Caves"})

        side = Image(
            heritage_id=gateway.id,
            url="https://example.com/gateway-side.jpg",
            thumbnail_url="https://example.com/gateway-side-thumb.jpg",
            display_order=1,
        )
        front = Image(
            heritage_id=gateway.id,
            url="https://example.com/gateway-front.jpg",
            thumbnail_url="https://example.com/gateway-front-thumb.jpg",
            display_order=0,
        )
        db.add_all([side, front])
        await db.flush()
        await _translate(db, EntityKind.IMAGE, front.id, "en", {
            "caption": "Gateway of India - Front View",
            "alt_text": "Front view of the Gateway of India",
        })
        await _translate(db, EntityKind.IMAGE, side.id, "en", {
            "caption": "Gateway of India - Side View",
            "alt_text": "Side view of the Gateway of India",
        })

        await db.commit()

        return SimpleNamespace(
            city_id=city.id,
            gateway_id=gateway.id,
            caves_id=caves.id,
            front_image_id=front.id,
            side_image_id=side.id,
        )
