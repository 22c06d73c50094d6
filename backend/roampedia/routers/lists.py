"""Travel lists router — visited countries and wishlist."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.dependencies import get_current_user
from roampedia.models.travel_list import Visited, WishlistItem
from roampedia.models.user import User
from roampedia.schemas.travel import ListItemCreate, ListItemUpdate

router = APIRouter()

ListModel = type[Visited] | type[WishlistItem]


def list_item_to_dict(item: Visited | WishlistItem) -> dict:
    data = {
        "id": str(item.id),
        "user_id": str(item.user_id),
        "user_email": item.user_email,
        "country_code": item.country_code,
        "country_name": item.country_name,
        "region": item.region,
        "flag_url": item.flag_url,
        "created_at": item.created_at.isoformat() if item.created_at else None,
        "updated_at": item.updated_at.isoformat() if item.updated_at else None,
    }
    if isinstance(item, Visited):
        data["date_visited"] = item.date_visited.isoformat() if item.date_visited else None
    else:
        data["added_at"] = item.added_at.isoformat() if item.added_at else None
    return data


async def _list(model: ListModel, db: AsyncSession, user: User) -> list[dict]:
    result = await db.execute(
        select(model).where(model.user_id == user.id).order_by(model.updated_at.desc())
    )
    return [list_item_to_dict(i) for i in result.scalars().all()]


async def _create(model: ListModel, req: ListItemCreate, db: AsyncSession, user: User) -> dict:
    result = await db.execute(
        select(model).where(model.user_id == user.id, model.country_code == req.country_code)
    )
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Item already exists")

    item = model(
        user_id=user.id,
        user_email=user.email,
        country_code=req.country_code,
        country_name=req.country_name,
        region=req.region,
        flag_url=req.flag_url,
    )
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return list_item_to_dict(item)


async def _delete_by_code(model: ListModel, country_code: str, db: AsyncSession, user: User) -> dict:
    result = await db.execute(
        select(model).where(model.user_id == user.id, model.country_code == country_code)
    )
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    deleted = list_item_to_dict(item)
    await db.delete(item)
    await db.commit()
    return {"success": True, "deleted": deleted}


async def _get_owned(model: ListModel, item_id: uuid.UUID, db: AsyncSession, user: User):
    result = await db.execute(select(model).where(model.id == item_id, model.user_id == user.id))
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Item not found or access denied")
    return item


async def _update(model: ListModel, item_id: uuid.UUID, req: ListItemUpdate, db: AsyncSession, user: User) -> dict:
    item = await _get_owned(model, item_id, db, user)
    changes = req.model_dump(exclude_unset=True)
    visited_at = changes.pop("date_visited", None)
    for field, value in changes.items():
        setattr(item, field, value)
    if visited_at is not None and isinstance(item, Visited):
        item.date_visited = visited_at
    await db.commit()
    await db.refresh(item)
    return list_item_to_dict(item)


async def _delete_by_id(model: ListModel, item_id: uuid.UUID, db: AsyncSession, user: User) -> dict:
    item = await _get_owned(model, item_id, db, user)
    deleted = list_item_to_dict(item)
    await db.delete(item)
    await db.commit()
    return {"success": True, "deleted": deleted}


# ─── Visited ───


@router.get("/visited")
async def list_visited(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return await _list(Visited, db, user)


@router.post("/visited", status_code=201)
async def add_visited(
    req: ListItemCreate, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)
):
    return await _create(Visited, req, db, user)


@router.delete("/visited/{country_code}")
async def remove_visited(
    country_code: str, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)
):
    return await _delete_by_code(Visited, country_code, db, user)


@router.put("/visited/{item_id}")
async def update_visited(
    item_id: uuid.UUID,
    req: ListItemUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await _update(Visited, item_id, req, db, user)


@router.delete("/visited/id/{item_id}")
async def remove_visited_by_id(
    item_id: uuid.UUID, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)
):
    return await _delete_by_id(Visited, item_id, db, user)


# ─── Wishlist ───


@router.get("/wishlist")
async def list_wishlist(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return await _list(WishlistItem, db, user)


@router.post("/wishlist", status_code=201)
async def add_wishlist(
    req: ListItemCreate, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)
):
    return await _create(WishlistItem, req, db, user)


@router.delete("/wishlist/{country_code}")
async def remove_wishlist(
    country_code: str, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)
):
    return await _delete_by_code(WishlistItem, country_code, db, user)


@router.put("/wishlist/{item_id}")
async def update_wishlist(
    item_id: uuid.UUID,
    req: ListItemUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await _update(WishlistItem, item_id, req, db, user)


@router.delete("/wishlist/id/{item_id}")
async def remove_wishlist_by_id(
    item_id: uuid.UUID, db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)
):
    return await _delete_by_id(WishlistItem, item_id, db, user)
