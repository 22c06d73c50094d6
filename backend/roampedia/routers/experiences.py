"""Experiences router — rated travel journal entries."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.dependencies import get_current_user
from roampedia.models.experience import UserExperience
from roampedia.models.user import User
from roampedia.schemas.travel import ExperienceCreate, ExperienceUpdate

router = APIRouter()


def experience_to_dict(e: UserExperience) -> dict:
    return {
        "id": str(e.id),
        "country": e.country,
        "experience": e.experience,
        "themes": list(e.themes or []),
        "rating": e.rating,
        "from_date": e.from_date.isoformat() if e.from_date else None,
        "to_date": e.to_date.isoformat() if e.to_date else None,
        "created_at": e.created_at.isoformat() if e.created_at else None,
        "updated_at": e.updated_at.isoformat() if e.updated_at else None,
    }


async def _get_owned_experience(db: AsyncSession, experience_id: uuid.UUID, user: User) -> UserExperience:
    result = await db.execute(
        select(UserExperience).where(UserExperience.id == experience_id, UserExperience.user_id == user.id)
    )
    experience = result.scalar_one_or_none()
    if not experience:
        raise HTTPException(status_code=404, detail="Experience not found or access denied")
    return experience


@router.post("/add", status_code=201)
async def add_experience(
    req: ExperienceCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    experience = UserExperience(user_id=user.id, user_email=user.email, **req.model_dump())
    db.add(experience)
    await db.commit()
    await db.refresh(experience)
    return {"message": "Experience saved successfully!", "experience": experience_to_dict(experience)}


@router.get("")
async def list_experiences(
    country: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    query = select(UserExperience).where(UserExperience.user_id == user.id)
    if country:
        query = query.where(UserExperience.country == country)
    result = await db.execute(query.order_by(UserExperience.created_at.desc()))
    return [experience_to_dict(e) for e in result.scalars().all()]


@router.put("/{experience_id}")
async def update_experience(
    experience_id: uuid.UUID,
    req: ExperienceUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    experience = await _get_owned_experience(db, experience_id, user)
    for field, value in req.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(experience, field, value)
    if experience.to_date < experience.from_date:
        raise HTTPException(status_code=400, detail="to_date must not be before from_date")
    await db.commit()
    await db.refresh(experience)
    return experience_to_dict(experience)


@router.delete("/{experience_id}")
async def delete_experience(
    experience_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    experience = await _get_owned_experience(db, experience_id, user)
    deleted = experience_to_dict(experience)
    await db.delete(experience)
    await db.commit()
    return {"success": True, "deleted": deleted}
