"""Travel notes router — one note per country per user."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.dependencies import get_current_user
from roampedia.models.travel_list import TravelNote
from roampedia.models.user import User
from roampedia.schemas.travel import TravelNoteCreate, TravelNoteUpdate

router = APIRouter()


def note_to_dict(n: TravelNote) -> dict:
    return {
        "id": str(n.id),
        "country_name": n.country_name,
        "country_code": n.country_code,
        "notes": n.notes,
        "priority": n.priority,
        "flag_url": n.flag_url,
        "region": n.region,
        "created_at": n.created_at.isoformat() if n.created_at else None,
        "updated_at": n.updated_at.isoformat() if n.updated_at else None,
    }


async def _get_owned_note(db: AsyncSession, note_id: uuid.UUID, user: User) -> TravelNote:
    result = await db.execute(
        select(TravelNote).where(TravelNote.id == note_id, TravelNote.user_id == user.id)
    )
    note = result.scalar_one_or_none()
    if not note:
        raise HTTPException(status_code=404, detail="Note not found or access denied")
    return note


@router.post("", status_code=201)
async def create_note(
    req: TravelNoteCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = await db.execute(
        select(TravelNote).where(TravelNote.user_id == user.id, TravelNote.country_code == req.country_code)
    )
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Note already exists for this country")

    note = TravelNote(user_id=user.id, user_email=user.email, **req.model_dump())
    db.add(note)
    await db.commit()
    await db.refresh(note)
    return note_to_dict(note)


@router.get("")
async def list_notes(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    result = await db.execute(
        select(TravelNote).where(TravelNote.user_id == user.id).order_by(TravelNote.updated_at.desc())
    )
    return [note_to_dict(n) for n in result.scalars().all()]


@router.put("/{note_id}")
async def update_note(
    note_id: uuid.UUID,
    req: TravelNoteUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    note = await _get_owned_note(db, note_id, user)
    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(note, field, value)
    await db.commit()
    await db.refresh(note)
    return note_to_dict(note)


@router.delete("/{note_id}")
async def delete_note(
    note_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    note = await _get_owned_note(db, note_id, user)
    deleted = note_to_dict(note)
    await db.delete(note)
    await db.commit()
    return {"message": "Deleted successfully", "deleted": deleted}
