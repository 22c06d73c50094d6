"""Recommendations router — tag-based destination discovery and feedback."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.config import settings
from roampedia.database import get_db
from roampedia.dependencies import get_current_user, get_optional_user
from roampedia.models.user import User
from roampedia.schemas.recommendation import FeedbackRequest, RecommendationRequest
from roampedia.services.recommendation.engine import recommendation_service
from roampedia.services.recommendation.preferences import preference_service

router = APIRouter()


@router.post("")
async def get_recommendations(
    req: RecommendationRequest,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
):
    """Ranked destinations for the requested vibes/activities. Guests get no exclusions."""
    try:
        return await recommendation_service.recommend(db, req, user.id if user else None)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/tags")
async def get_tags(db: AsyncSession = Depends(get_db)):
    """All vibe/activity tags, regions and filter vocabularies."""
    return await recommendation_service.available_tags(db)


@router.get("/similar/{country_name}")
async def get_similar(
    country_name: str,
    limit: int = Query(settings.similar_countries_default_limit, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await recommendation_service.similar(db, country_name, limit)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/feedback")
async def record_feedback(
    req: FeedbackRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await preference_service.record_feedback(db, user.id, req.country_name, req.liked, req.tags)
    return {
        "success": True,
        "message": "Feedback recorded successfully",
        "user_id": str(user.id),
        "country_name": req.country_name,
        "liked": req.liked,
    }


@router.get("/stats")
async def get_catalogue_stats(db: AsyncSession = Depends(get_db)):
    """Tag coverage and most common tags across the country catalogue."""
    return await recommendation_service.catalogue_stats(db)
