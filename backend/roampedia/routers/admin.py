"""Admin router — system-wide usage analytics (admin only)."""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.dependencies import require_admin
from roampedia.models.user import User
from roampedia.services.stats_service import stats_service

router = APIRouter()


@router.get("/system-stats")
async def get_system_stats(db: AsyncSession = Depends(get_db), admin: User = Depends(require_admin)):
    return await stats_service.system_stats(db)


@router.get("/user-trends")
async def get_user_trends(
    period: Literal["day", "week", "month", "year"] = Query("month"),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Registrations bucketed by day, ISO week, month or year."""
    return await stats_service.user_trends(db, period)


@router.get("/popular-countries")
async def get_popular_countries(
    limit: int = Query(20, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return await stats_service.popular_countries(db, limit)


@router.get("/country-ratings")
async def get_country_ratings(db: AsyncSession = Depends(get_db), admin: User = Depends(require_admin)):
    return await stats_service.country_ratings(db)


@router.get("/theme-popularity")
async def get_theme_popularity(db: AsyncSession = Depends(get_db), admin: User = Depends(require_admin)):
    return await stats_service.theme_popularity(db)


@router.get("/regional-stats")
async def get_regional_stats(db: AsyncSession = Depends(get_db), admin: User = Depends(require_admin)):
    return await stats_service.regional_stats(db)


@router.get("/engagement")
async def get_engagement(db: AsyncSession = Depends(get_db), admin: User = Depends(require_admin)):
    """Per-user activity totals with high (20+), medium (5+) and low levels."""
    return await stats_service.engagement(db)


@router.get("/users")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort_by: str = Query("created_at"),
    order: Literal["asc", "desc"] = Query("desc"),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return await stats_service.users_page(db, page, limit, sort_by, order)
