"""Tests for localized content composition."""

from types import SimpleNamespace
from uuid import uuid4

import pytest
from sqlalchemy import event

from heritage_content.db.models import EntityKind, HeritageItem, Image
from heritage_content.errors import NotFoundError
from heritage_content.services.content_resolver import compose_localized
from heritage_content.services.image_resolver import image_resolver
from heritage_content.services.translation_service import ENTITY_FIELDS, translation_service


# ============== Fallback chain ==============


CITY_FIELDS = ENTITY_FIELDS[EntityKind.CITY]
HERITAGE_FIELDS = ENTITY_FIELDS[EntityKind.HERITAGE]


def test_requested_language_wins():
    city = SimpleNamespace(id="c1", slug="mumbai", state="Maharashtra")
    fields = compose_localized(
        city,
        {"hi": {"name": "मुंबई"}, "en": {"name": "Mumbai"}},
        "hi",
        "en",
        CITY_FIELDS,
    )
    assert fields["name"] == "मुंबई"


def test_default_language_used_when_requested_missing():
    city = SimpleNamespace(id="c1", slug="mumbai", state="Maharashtra")
    fields = compose_localized(city, {"ta": {}, "en": {"name": "Mumbai"}}, "ta", "en", CITY_FIELDS)
    assert fields["name"] == "Mumbai"


def test_fields_fall_back_independently():
    """Name resolves in Hindi while state falls through to the base column."""
    city = SimpleNamespace(id="c1", slug="mumbai", state="Maharashtra")
    fields = compose_localized(city, {"hi": {"name": "मुंबई"}}, "hi", "en", CITY_FIELDS)
    assert fields == {"name": "मुंबई", "state": "Maharashtra"}


def test_base_attribute_then_static_default():
    city = SimpleNamespace(id="c1", slug="mumbai", state="Maharashtra")
    assert compose_localized(city, {}, "hi", "en", CITY_FIELDS)["name"] == "mumbai"

    heritage = SimpleNamespace(id="h1")
    fields = compose_localized(heritage, {}, "hi", "en", HERITAGE_FIELDS)
    assert fields == {"name": "", "summary": "", "detailed_description": "", "significance": ""}


def test_empty_translation_counts_as_missing():
    heritage = SimpleNamespace(id="h1")
    fields = compose_localized(
        heritage, {"hi": {"name": ""}, "en": {"name": "Red Fort"}}, "hi", "en", HERITAGE_FIELDS
    )
    assert fields["name"] == "Red Fort"


# ============== Images ==============


@pytest.mark.asyncio
async def test_images_ordered_by_display_order(resolver, db_session, mumbai):
    images = await resolver.get_heritage_images(db_session, mumbai.gateway_id, "en")

    assert [image.caption for image in images] == [
        "Gateway of India - Front View",
        "Gateway of India - Side View",
    ]
    assert [image.display_order for image in images] == [0, 1]
    assert images[0].url == "https://example.com/gateway-front.jpg"
    assert images[0].alt_text == "Front view of the Gateway of India"


@pytest.mark.asyncio
async def test_images_default_to_english_captions(resolver, db_session, mumbai):
    images = await resolver.get_heritage_images(db_session, mumbai.gateway_id)
    hindi = await resolver.get_heritage_images(db_session, mumbai.gateway_id, "hi")

    assert [image.caption for image in hindi] == [image.caption for image in images]


@pytest.mark.asyncio
async def test_five_images_keep_display_order(resolver, session_maker, mumbai):
    async with session_maker() as db:
        for order in (3, 0, 4, 1, 2):
            image = Image(heritage_id=mumbai.caves_id, display_order=order)
            db.add(image)
            await db.flush()
            await translation_service.upsert_translation(
                db, "image", image.id, "en", "caption", f"Cave {order}"
            )
        await db.commit()

        images = await resolver.get_heritage_images(db, mumbai.caves_id, "en")

    assert [image.display_order for image in images] == [0, 1, 2, 3, 4]
    assert [image.caption for image in images] == [f"Cave {n}" for n in range(5)]


@pytest.mark.asyncio
async def test_translation_lookups_do_not_grow_with_image_count(resolver, session_maker, test_engine, mumbai):
    """One translations query per resolution whether there is one image or five."""
    async with session_maker() as db:
        single = HeritageItem(city_id=mumbai.city_id, category="cuisine")
        db.add(single)
        await db.flush()
        db.add(Image(heritage_id=single.id, display_order=0))
        for order in range(5):
            db.add(Image(heritage_id=mumbai.caves_id, display_order=order))
        await db.commit()

    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        if "FROM translations" in statement:
            statements.append(statement)

    event.listen(test_engine.sync_engine, "before_cursor_execute", record)
    try:
        async with session_maker() as db:
            assert len(await resolver.get_heritage_images(db, single.id, "hi")) == 1
            one_image = len(statements)
            statements.clear()
            assert len(await resolver.get_heritage_images(db, mumbai.caves_id, "hi")) == 5
            five_images = len(statements)
    finally:
        event.remove(test_engine.sync_engine, "before_cursor_execute", record)

    assert one_image == five_images == 1


@pytest.mark.asyncio
async def test_display_order_ties_broken_by_id(resolver, session_maker, mumbai):
    low, high = "00000000-0000-4000-8000-000000000000", "ffffffff-ffff-4fff-bfff-ffffffffffff"
    async with session_maker() as db:
        db.add(Image(id=high, heritage_id=mumbai.caves_id, display_order=3))
        db.add(Image(id=low, heritage_id=mumbai.caves_id, display_order=3))
        await db.commit()

        images = await resolver.get_heritage_images(db, mumbai.caves_id, "en")

    assert [image.id for image in images] == [low, high]


@pytest.mark.asyncio
async def test_heritage_without_images_yields_empty_list(resolver, db_session, mumbai):
    assert await resolver.get_heritage_images(db_session, mumbai.caves_id, "en") == []


@pytest.mark.asyncio
async def test_unknown_heritage_images(resolver, db_session, mumbai):
    missing = str(uuid4())
    assert await resolver.get_heritage_images(db_session, missing, "en") == []

    with pytest.raises(NotFoundError):
        await resolver.get_heritage_images(db_session, missing, "en", require_heritage=True)


@pytest.mark.asyncio
async def test_null_image_url_resolves_to_placeholder(resolver, session_maker, mumbai):
    async with session_maker() as db:
        db.add(Image(heritage_id=mumbai.caves_id, url=None, thumbnail_url="  ", display_order=0))
        await db.commit()

        (image,) = await resolver.get_heritage_images(db, mumbai.caves_id, "en")

    placeholder = image_resolver.get_placeholder_image_url()
    assert image.url == placeholder
    assert image.thumbnail_url == placeholder
    assert image.caption == ""


# ============== Heritage ==============


@pytest.mark.asyncio
async def test_heritage_detail_embeds_images(resolver, db_session, mumbai):
    detail = await resolver.get_heritage_detail(db_session, mumbai.gateway_id, "hi")

    assert detail.name == "गेटवे ऑफ़ इंडिया"
    assert detail.summary == "Arch monument on the Mumbai waterfront."
    assert detail.historical_period == "1924"
    assert detail.thumbnail_image == image_resolver.get_placeholder_image_url()
    assert [image.id for image in detail.images] == [mumbai.front_image_id, mumbai.side_image_id]


@pytest.mark.asyncio
async def test_heritage_detail_not_found(resolver, db_session, mumbai):
    with pytest.raises(NotFoundError) as exc_info:
        await resolver.get_heritage_detail(db_session, str(uuid4()), "en")
    assert exc_info.value.code == "NOT_FOUND"


@pytest.mark.asyncio
async def test_city_heritage_items(resolver, db_session, mumbai):
    response = await resolver.get_city_heritage_items(db_session, mumbai.city_id, "en")

    assert response.city.name == "Mumbai"
    assert [item.name for item in response.heritage_items] == ["Gateway of India", "Elephanta Caves"]

    temples = await resolver.get_city_heritage_items(db_session, mumbai.city_id, "en", category="temples")
    assert [item.id for item in temples.heritage_items] == [mumbai.caves_id]


@pytest.mark.asyncio
async def test_city_heritage_items_unknown_city(resolver, db_session, mumbai):
    with pytest.raises(NotFoundError):
        await resolver.get_city_heritage_items(db_session, str(uuid4()), "en")


# ============== Cities ==============


@pytest.mark.asyncio
async def test_list_cities_localized(resolver, db_session, mumbai):
    (city,) = await resolver.list_cities(db_session, "hi")

    assert city.name == "मुंबई"
    assert city.state == "महाराष्ट्र"
    assert city.region == "West"
    assert city.heritage_count == 2
    assert city.preview_image == "https://example.com/mumbai.jpg"


@pytest.mark.asyncio
async def test_list_cities_missing_language_falls_back(resolver, db_session, mumbai):
    (city,) = await resolver.list_cities(db_session, "ta")

    assert city.name == "Mumbai"
    assert city.state == "Maharashtra"


@pytest.mark.asyncio
async def test_list_cities_search_matches_localized_name(resolver, db_session, mumbai):
    assert len(await resolver.list_cities(db_session, "hi", search_term="मुं")) == 1
    assert len(await resolver.list_cities(db_session, "en", search_term="MUM")) == 1
    assert await resolver.list_cities(db_session, "en", search_term="delhi") == []


@pytest.mark.asyncio
async def test_list_cities_filters(resolver, db_session, mumbai):
    assert len(await resolver.list_cities(db_session, "en", region="West")) == 1
    assert await resolver.list_cities(db_session, "en", region="South") == []
    assert await resolver.list_cities(db_session, "en", state="Kerala") == []


@pytest.mark.asyncio
async def test_get_city_not_found(resolver, db_session, mumbai):
    with pytest.raises(NotFoundError):
        await resolver.get_city(db_session, str(uuid4()), "en")
