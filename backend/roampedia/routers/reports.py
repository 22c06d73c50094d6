"""Reports router — PDF downloads for travellers and admins."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.dependencies import get_current_user, require_admin
from roampedia.models.user import User
from roampedia.services.export_service import export_service

router = APIRouter()


def _pdf(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/travel-summary")
async def travel_summary(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    """Visited, wishlist and experience overview."""
    return _pdf(await export_service.travel_summary_pdf(db, user), "travel-summary.pdf")


@router.get("/experience-journal")
async def experience_journal(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return _pdf(await export_service.experience_journal_pdf(db, user), "experience-journal.pdf")


@router.get("/statistics")
async def statistics(db: AsyncSession = Depends(get_db), user: User = Depends(get_current_user)):
    return _pdf(await export_service.statistics_pdf(db, user), "statistics.pdf")


# ─── Admin reports ───


@router.get("/admin-reports/users-summary")
async def users_summary(db: AsyncSession = Depends(get_db), admin: User = Depends(require_admin)):
    return _pdf(await export_service.users_summary_pdf(db), "users-summary.pdf")


@router.get("/admin-reports/country-popularity")
async def country_popularity(db: AsyncSession = Depends(get_db), admin: User = Depends(require_admin)):
    return _pdf(await export_service.country_popularity_pdf(db), "country-popularity.pdf")


@router.get("/admin-reports/engagement")
async def engagement(db: AsyncSession = Depends(get_db), admin: User = Depends(require_admin)):
    return _pdf(await export_service.engagement_pdf(db), "engagement-report.pdf")


@router.get("/admin-reports/system-statistics")
async def system_statistics(db: AsyncSession = Depends(get_db), admin: User = Depends(require_admin)):
    return _pdf(await export_service.system_statistics_pdf(db), "system-statistics.pdf")
