"""User stats router — travel profile analytics for the signed-in user."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.dependencies import get_current_user
from roampedia.models.experience import UserExperience
from roampedia.models.travel_list import TravelNote, Visited, WishlistItem
from roampedia.models.user import User
from roampedia.routers.experiences import experience_to_dict
from roampedia.routers.lists import list_item_to_dict
from roampedia.routers.travel_notes import note_to_dict
from roampedia.schemas.auth import UserResponse
from roampedia.services.stats_service import stats_service

router = APIRouter()


@router.get("/stats")
async def get_user_stats(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Counts, regional and theme breakdowns, timelines and the travel profile summary."""
    return await stats_service.user_stats(db, user)


@router.get("/visited-map")
async def get_visited_map(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return await stats_service.visited_map(db, user)


@router.get("/profile-data")
async def get_profile_data(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    visited = await db.execute(
        select(Visited).where(Visited.user_id == user.id).order_by(Visited.date_visited.desc())
    )
    wishlist = await db.execute(
        select(WishlistItem).where(WishlistItem.user_id == user.id).order_by(WishlistItem.added_at.desc())
    )
    experiences = await db.execute(
        select(UserExperience).where(UserExperience.user_id == user.id).order_by(UserExperience.created_at.desc())
    )
    notes = await db.execute(select(TravelNote).where(TravelNote.user_id == user.id))

    return {
        "user": UserResponse.model_validate(user),
        "visited": [list_item_to_dict(v) for v in visited.scalars().all()],
        "wishlist": [list_item_to_dict(w) for w in wishlist.scalars().all()],
        "experiences": [experience_to_dict(e) for e in experiences.scalars().all()],
        "notes": [note_to_dict(n) for n in notes.scalars().all()],
    }
