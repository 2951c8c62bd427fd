"""Script to seed sample cities, heritage items and images."""

import asyncio
import sys

sys.path.insert(0, ".")

from sqlalchemy import select

from heritage_content.config import get_settings
from heritage_content.db.models import City, EntityKind, HeritageItem, Image, Language
from heritage_content.db.session import async_session_maker, init_db
from heritage_content.services.translation_service import translation_service

settings = get_settings()

NATIVE_NAMES = {
    "en": "English", "hi": "हिन्दी", "bn": "বাংলা", "te": "తెలుగు", "mr": "मराठी",
    "ta": "தமிழ்", "gu": "ગુજરાતી", "kn": "ಕನ್ನಡ", "ml": "മലയാളം", "or": "ଓଡ଼ିଆ",
    "pa": "ਪੰਜਾਬੀ", "as": "অসমীয়া", "ks": "कॉशुर", "kok": "कोंकणी", "mni": "মৈতৈলোন্",
    "ne": "नेपाली", "sa": "संस्कृतम्", "sd": "سنڌي", "ur": "اردو", "brx": "बड़ो",
    "sat": "ᱥᱟᱱᱛᱟᱲᱤ", "mai": "मैथिली", "doi": "डोगरी",
}

CITIES = [
    {
        "slug": "delhi",
        "state": "Delhi",
        "region": "North",
        "names": {"en": "Delhi", "hi": "दिल्ली"},
        "heritage": [
            {
                "category": "monuments",
                "period": "17th Century",
                "text": {
                    "en": {
                        "name": "Red Fort",
                        "summary": "Mughal fort of red sandstone on the banks of the Yamuna.",
                        "detailed_description": "Built by Shah Jahan as the palace fort of Shahjahanabad.",
                        "significance": "Site of the Independence Day flag hoisting.",
                    },
                    "hi": {"name": "लाल क़िला"},
                },
                "images": [
                    ("Red Fort Main Entrance", "Lahori Gate of the Red Fort"),
                    ("Diwan-i-Aam (Hall of Public Audience)", "Arched hall of public audience"),
                    ("Intricate Marble Work", "Pietra dura inlay in white marble"),
                ],
            },
        ],
    },
    {
        "slug": "mumbai",
        "state": "Maharashtra",
        "region": "West",
        "names": {"en": "Mumbai", "hi": "मुंबई", "mr": "मुंबई"},
        "heritage": [
            {
                "category": "monuments",
                "period": "19th Century",
                "text": {
                    "en": {
                        "name": "Gateway of India",
                        "summary": "Arch monument overlooking the Arabian Sea.",
                        "detailed_description": "Built to commemorate the landing of King George V in 1911.",
                        "significance": "Symbol of Mumbai and of the end of colonial rule.",
                    },
                    "hi": {"name": "गेटवे ऑफ़ इंडिया"},
                },
                "images": [
                    ("Gateway of India - Front View", "Front view of the Gateway of India"),
                    ("Gateway of India - Side View", "Side view of the Gateway of India"),
                ],
            },
        ],
    },
]


async def seed_languages(db):
    existing = set((await db.execute(select(Language.code))).scalars().all())
    for code, english_name in settings.language_names.items():
        if code not in existing:
            db.add(Language(code=code, native_name=NATIVE_NAMES[code], english_name=english_name))
    await db.flush()


async def seed_city(db, data: dict) -> bool:
    if (await db.execute(select(City).where(City.slug == data["slug"]))).scalar_one_or_none():
        print(f"  {data['slug']}: already present, skipping")
        return False

    city = City(
        slug=data["slug"],
        state=data["state"],
        region=data["region"],
        preview_image_url=f"https://source.unsplash.com/800x600/?{data['slug']},india",
    )
    db.add(city)
    await db.flush()

    for lang, name in data["names"].items():
        await translation_service.upsert_translation(db, EntityKind.CITY.value, city.id, lang, "name", name)

    for item in data["heritage"]:
        heritage = HeritageItem(
            city_id=city.id,
            category=item["category"],
            historical_period=item["period"],
            thumbnail_image_url=f"https://source.unsplash.com/400x300/?{data['slug']},{item['category']}",
        )
        db.add(heritage)
        await db.flush()

        for lang, fields in item["text"].items():
            for field, content in fields.items():
                await translation_service.upsert_translation(
                    db, EntityKind.HERITAGE.value, heritage.id, lang, field, content
                )

        for order, (caption, alt_text) in enumerate(item["images"]):
            seed = abs(hash((data["slug"], order))) % 1000
            image = Image(
                heritage_id=heritage.id,
                url=f"https://picsum.photos/800/600?random={seed}",
                thumbnail_url=f"https://picsum.photos/400/300?random={seed}",
                display_order=order,
            )
            db.add(image)
            await db.flush()
            await translation_service.upsert_translation(db, EntityKind.IMAGE.value, image.id, "en", "caption", caption)
            await translation_service.upsert_translation(db, EntityKind.IMAGE.value, image.id, "en", "alt_text", alt_text)

    print(f"  {data['slug']}: {len(data['heritage'])} heritage item(s)")
    return True


async def main():
    """Seed sample content."""
    print("Initializing database...")
    await init_db()

    print("Seeding content...")
    async with async_session_maker() as db:
        await seed_languages(db)
        for data in CITIES:
            await seed_city(db, data)
        await db.commit()

    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
