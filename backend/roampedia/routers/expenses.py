"""Expenses router — per-category trip budgets against actual spend."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.dependencies import get_current_user
from roampedia.models.planning import Expense
from roampedia.models.user import User
from roampedia.schemas.planning import ExpenseBatchRequest, ExpenseUpdate
from roampedia.services.stats_service import stats_service

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_CATEGORIES = ["Transport", "Accommodation", "Food", "Activities", "Miscellaneous"]


def expense_to_dict(e: Expense) -> dict:
    return {
        "id": str(e.id),
        "trip_id": str(e.trip_id) if e.trip_id else None,
        "category": e.category,
        "budget": float(e.budget or 0),
        "actual": float(e.actual or 0),
        "notes": e.notes,
        "created_at": e.created_at.isoformat() if e.created_at else None,
        "updated_at": e.updated_at.isoformat() if e.updated_at else None,
    }


async def _get_owned_expense(db: AsyncSession, expense_id: uuid.UUID, user: User) -> Expense:
    result = await db.execute(select(Expense).where(Expense.id == expense_id, Expense.user_id == user.id))
    expense = result.scalar_one_or_none()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found or unauthorized")
    return expense


@router.get("")
async def list_expenses(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    result = await db.execute(
        select(Expense).where(Expense.user_id == user.id).order_by(Expense.category)
    )
    return [expense_to_dict(e) for e in result.scalars().all()]


@router.get("/stats")
async def get_expense_stats(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Budget vs actual totals with a per-category variance breakdown."""
    return await stats_service.expense_stats(db, user)


@router.get("/trip/{trip_id}")
async def list_trip_expenses(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    result = await db.execute(
        select(Expense)
        .where(Expense.user_id == user.id, Expense.trip_id == trip_id)
        .order_by(Expense.category)
    )
    return [expense_to_dict(e) for e in result.scalars().all()]


@router.post("/init", status_code=201)
async def init_expenses(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Create the default zero-budget categories unless the user already has expenses."""
    result = await db.execute(select(Expense).where(Expense.user_id == user.id))
    existing = result.scalars().all()
    if existing:
        return JSONResponse(
            status_code=200,
            content={"message": "Already initialized", "count": len(existing)},
        )

    expenses = [Expense(user_id=user.id, category=c, budget=0, actual=0) for c in DEFAULT_CATEGORIES]
    db.add_all(expenses)
    await db.commit()
    for e in expenses:
        await db.refresh(e)
    logger.info(f"Initialized {len(expenses)} expense categories for {user.email}")
    return [expense_to_dict(e) for e in expenses]


@router.post("", status_code=201)
async def replace_expenses(
    req: ExpenseBatchRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Replace the user's expenses (only those of ``trip_id`` when given) with the submitted list."""
    stmt = delete(Expense).where(Expense.user_id == user.id)
    if req.trip_id:
        stmt = stmt.where(Expense.trip_id == req.trip_id)
    await db.execute(stmt)

    expenses = [
        Expense(user_id=user.id, trip_id=req.trip_id, **item.model_dump())
        for item in req.expenses
    ]
    db.add_all(expenses)
    await db.commit()
    for e in expenses:
        await db.refresh(e)
    return [expense_to_dict(e) for e in expenses]


@router.put("/{expense_id}")
async def update_expense(
    expense_id: uuid.UUID,
    req: ExpenseUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    expense = await _get_owned_expense(db, expense_id, user)
    for field, value in req.model_dump(exclude_unset=True).items():
        if value is not None or field == "notes":
            setattr(expense, field, value)
    await db.commit()
    await db.refresh(expense)
    return expense_to_dict(expense)


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    expense = await _get_owned_expense(db, expense_id, user)
    await db.delete(expense)
    await db.commit()
    return {"message": "Deleted successfully"}
