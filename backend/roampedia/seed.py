"""Seed script for the Roampedia development database."""

import asyncio

from passlib.context import CryptContext
from sqlalchemy import select

from roampedia.config import settings
from roampedia.database import async_session_factory
from roampedia.models.country import Country
from roampedia.models.user import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# ── Countries ──────────────────────────────────────────────────────────────────
# (country, code, capital, currency, region, subregion, climate, best_season, budget, popularity,
#  vibe tags, activity tags, languages)

COUNTRIES = [
    ("Thailand", "THA", "Bangkok", "Thai baht", "Asia", "South-Eastern Asia", "Tropical", "November-March",
     "Budget", 92, ["Tropical", "Lively", "Spiritual", "Warm"],
     ["Beach Leisure", "Temple Visits", "Food Exploration", "Island Hopping", "Market Visits"], ["Thai"]),
    ("Japan", "JPN", "Tokyo", "Japanese yen", "Asia", "Eastern Asia", "Temperate", "March-May",
     "Luxury", 95, ["Futuristic", "Historic", "Serene", "Cultural"],
     ["Temple Visits", "Food Exploration", "Skiing", "Museum Visits", "Shopping"], ["Japanese"]),
    ("Italy", "ITA", "Rome", "Euro", "Europe", "Southern Europe", "Mediterranean", "April-June",
     "Mid-range", 94, ["Romantic", "Historic", "Artistic", "Elegant"],
     ["Museum Visits", "Food Exploration", "Wine Tastings", "Architecture Walks"], ["Italian"]),
    ("Kenya", "KEN", "Nairobi", "Kenyan shilling", "Africa", "Eastern Africa", "Tropical", "July-October",
     "Mid-range", 78, ["Wild", "Adventurous", "Untouched"],
     ["Safari", "Photography", "Hiking", "Camping"], ["English", "Swahili"]),
    ("Iceland", "ISL", "Reykjavik", "Icelandic krona", "Europe", "Northern Europe", "Polar", "June-August",
     "Luxury", 80, ["Remote", "Wild", "Serene"],
     ["Hiking", "Waterfall Visits", "Photography", "Road Trips"], ["Icelandic"]),
    ("Peru", "PER", "Lima", "Peruvian sol", "Americas", "South America", "Temperate", "May-September",
     "Budget", 82, ["Historic", "Adventurous", "Spiritual"],
     ["Hiking", "Cultural Tours", "Food Exploration", "Market Visits"], ["Spanish", "Quechua"]),
    ("Maldives", "MDV", "Male", "Maldivian rufiyaa", "Asia", "Southern Asia", "Tropical", "November-April",
     "Luxury", 85, ["Tropical", "Romantic", "Luxurious", "Peaceful"],
     ["Beach Leisure", "Snorkeling", "Island Hopping"], ["Dhivehi"]),
    ("Morocco", "MAR", "Rabat", "Moroccan dirham", "Africa", "Northern Africa", "Arid", "March-May",
     "Budget", 79, ["Vibrant", "Historic", "Rustic"],
     ["Market Visits", "Cultural Tours", "Camping", "Architecture Walks"], ["Arabic", "Berber"]),
    ("New Zealand", "NZL", "Wellington", "New Zealand dollar", "Oceania", "Australia and New Zealand",
     "Temperate", "December-February", "Mid-range", 86, ["Adventurous", "Untouched", "Peaceful"],
     ["Hiking", "Road Trips", "Skiing", "Photography"], ["English", "Maori"]),
    ("France", "FRA", "Paris", "Euro", "Europe", "Western Europe", "Temperate", "April-June",
     "Luxury", 96, ["Romantic", "Elegant", "Artistic", "Historic"],
     ["Museum Visits", "Wine Tastings", "Shopping", "Architecture Walks"], ["French"]),
    ("Mexico", "MEX", "Mexico City", "Mexican peso", "Americas", "Central America", "Tropical",
     "December-April", "Budget", 88, ["Lively", "Vibrant", "Warm", "Historic"],
     ["Beach Leisure", "Food Exploration", "Festivals", "Snorkeling"], ["Spanish"]),
    ("United Arab Emirates", "ARE", "Abu Dhabi", "UAE dirham", "Asia", "Western Asia", "Arid",
     "November-March", "Luxury", 84, ["Modern", "Luxurious", "Futuristic"],
     ["Shopping", "Sightseeing", "Beach Leisure"], ["Arabic"]),
]


def _country(row: tuple) -> Country:
    (name, code, capital, currency, region, subregion, climate, season, budget, popularity,
     vibes, activities, languages) = row
    return Country(
        country=name,
        code=code,
        capital=capital,
        currency=currency,
        region=region,
        subregion=subregion,
        climate=climate,
        best_season=season,
        budget_level=budget,
        popularity_score=popularity,
        vibe_tags=vibes,
        activity_tags=activities,
        languages=languages,
    )


async def seed():
    async with async_session_factory() as db:
        # Check if already seeded
        result = await db.execute(select(User).where(User.email == settings.admin_email))
        if result.scalar_one_or_none():
            print("Database already seeded. Skipping.")
            return

        # ── Admin ──
        admin = User(
            email=settings.admin_email,
            password_hash=pwd_context.hash(settings.admin_password),
            first_name="Admin",
            last_name="User",
            display_name="Admin",
            role="admin",
            is_active=True,
            preferences={"email_notifications": True, "newsletter": False, "theme": "auto"},
            refresh_tokens=[],
        )
        db.add(admin)
        print(f"Created admin user ({admin.email})")

        # ── Countries ──
        existing = await db.execute(select(Country.country))
        known = set(existing.scalars().all())
        added = [_country(row) for row in COUNTRIES if row[0] not in known]
        db.add_all(added)
        print(f"Created {len(added)} countries")

        await db.commit()
        print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
