"""Countries router — country names drawn from the heritage-site catalogue."""

import re

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.models.attraction import Attraction

router = APIRouter()

BANNED_NAMES = {"", "-", "undefined", "null"}


def clean_country_names(raw: list[str | None]) -> list[str]:
    """Split comma-separated country fields into unique, tidy, sorted names."""
    names = set()
    for value in raw:
        if not value:
            continue
        for part in value.split(","):
            name = re.sub(r"\s+", " ", part).strip()
            if name.lower() not in BANNED_NAMES:
                names.add(name)
    return sorted(names, key=str.lower)


@router.get("")
async def list_countries(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Attraction.country).distinct())
    return clean_country_names(result.scalars().all())
