"""Itineraries router — generated trip plans owned by the signed-in user."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.dependencies import get_current_user
from roampedia.models.planning import Itinerary
from roampedia.models.user import User
from roampedia.schemas.planning import ItineraryCreate, ItineraryUpdate

router = APIRouter()


def itinerary_to_dict(i: Itinerary) -> dict:
    return {
        "id": str(i.id),
        "home_country": i.home_country,
        "destination": i.destination,
        "departure_date": i.departure_date.isoformat() if i.departure_date else None,
        "return_date": i.return_date.isoformat() if i.return_date else None,
        "travelers": {"adults": i.adults, "children": i.children, "infants": i.infants},
        "budget": {
            "min": float(i.budget_min) if i.budget_min is not None else None,
            "max": float(i.budget_max) if i.budget_max is not None else None,
            "currency": i.currency,
        },
        "created_at": i.created_at.isoformat() if i.created_at else None,
        "updated_at": i.updated_at.isoformat() if i.updated_at else None,
    }


async def get_owned_itinerary(db: AsyncSession, itinerary_id: uuid.UUID, user: User) -> Itinerary:
    result = await db.execute(
        select(Itinerary).where(Itinerary.id == itinerary_id, Itinerary.user_id == user.id)
    )
    itinerary = result.scalar_one_or_none()
    if not itinerary:
        raise HTTPException(status_code=404, detail="Not found")
    return itinerary


def _check_dates(itinerary: Itinerary) -> None:
    if itinerary.departure_date and itinerary.return_date and itinerary.return_date < itinerary.departure_date:
        raise HTTPException(status_code=400, detail="return_date must not be before departure_date")


@router.post("", status_code=201)
async def create_itinerary(
    req: ItineraryCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    itinerary = Itinerary(user_id=user.id, **req.model_dump())
    _check_dates(itinerary)
    db.add(itinerary)
    await db.commit()
    await db.refresh(itinerary)
    return itinerary_to_dict(itinerary)


@router.get("")
async def list_itineraries(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    result = await db.execute(
        select(Itinerary).where(Itinerary.user_id == user.id).order_by(Itinerary.created_at.desc())
    )
    return [itinerary_to_dict(i) for i in result.scalars().all()]


@router.get("/{itinerary_id}")
async def get_itinerary(
    itinerary_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return itinerary_to_dict(await get_owned_itinerary(db, itinerary_id, user))


@router.put("/{itinerary_id}")
async def update_itinerary(
    itinerary_id: uuid.UUID,
    req: ItineraryUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    itinerary = await get_owned_itinerary(db, itinerary_id, user)
    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(itinerary, field, value)
    _check_dates(itinerary)
    await db.commit()
    await db.refresh(itinerary)
    return itinerary_to_dict(itinerary)


@router.delete("/{itinerary_id}")
async def delete_itinerary(
    itinerary_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    itinerary = await get_owned_itinerary(db, itinerary_id, user)
    await db.delete(itinerary)
    await db.commit()
    return {"message": "Itinerary deleted successfully"}
