"""Attractions router — UNESCO heritage sites by country."""

from fastapi import APIRouter, Depends
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.models.attraction import Attraction

router = APIRouter()


def attraction_to_dict(a: Attraction) -> dict:
    return {
        "id": str(a.id),
        "site_name": a.site_name,
        "country": a.country,
        "country_iso": a.country_iso,
        "category": a.category,
        "year_inscribed": a.year_inscribed,
        "lat": a.lat,
        "lon": a.lon,
    }


@router.get("/country/{country}")
async def attractions_by_country(country: str, db: AsyncSession = Depends(get_db)):
    """Case-insensitive substring match on the country name or ISO code."""
    pattern = f"%{country.strip()}%"
    result = await db.execute(
        select(Attraction)
        .where(or_(Attraction.country.ilike(pattern), Attraction.country_iso.ilike(pattern)))
        .order_by(Attraction.site_name)
    )
    return [attraction_to_dict(a) for a in result.scalars().all()]
