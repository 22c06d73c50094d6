"""Tasks router — checklist items attached to an itinerary."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.dependencies import get_current_user
from roampedia.models.planning import Itinerary, Task
from roampedia.models.user import User
from roampedia.routers.itineraries import get_owned_itinerary
from roampedia.schemas.planning import TaskCreate

router = APIRouter()

DEFAULT_TASKS = ["Book flights", "Arrange accommodation", "Travel insurance", "Confirm visas"]


def task_to_dict(t: Task) -> dict:
    return {
        "id": str(t.id),
        "itinerary_id": str(t.itinerary_id),
        "text": t.text,
        "done": t.done,
        "created_at": t.created_at.isoformat() if t.created_at else None,
        "updated_at": t.updated_at.isoformat() if t.updated_at else None,
    }


@router.get("/{itinerary_id}")
async def list_tasks(
    itinerary_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await get_owned_itinerary(db, itinerary_id, user)
    result = await db.execute(
        select(Task).where(Task.itinerary_id == itinerary_id).order_by(Task.created_at)
    )
    return [task_to_dict(t) for t in result.scalars().all()]


@router.post("")
async def add_task(
    req: TaskCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not req.itinerary_id or not req.text or not req.text.strip():
        raise HTTPException(status_code=400, detail="Missing fields")
    await get_owned_itinerary(db, req.itinerary_id, user)

    task = Task(itinerary_id=req.itinerary_id, text=req.text.strip(), done=False)
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task_to_dict(task)


@router.put("/toggle/{task_id}")
async def toggle_task(
    task_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = await db.execute(
        select(Task)
        .join(Itinerary, Task.itinerary_id == Itinerary.id)
        .where(Task.id == task_id, Itinerary.user_id == user.id)
    )
    task = result.scalar_one_or_none()
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    task.done = not task.done
    await db.commit()
    await db.refresh(task)
    return task_to_dict(task)


@router.post("/defaults/{itinerary_id}")
async def add_default_tasks(
    itinerary_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await get_owned_itinerary(db, itinerary_id, user)
    tasks = [Task(itinerary_id=itinerary_id, text=text, done=False) for text in DEFAULT_TASKS]
    db.add_all(tasks)
    await db.commit()
    for t in tasks:
        await db.refresh(t)
    return [task_to_dict(t) for t in tasks]
