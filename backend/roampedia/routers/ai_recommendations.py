"""Personalised recommendations router — preference-aware ranking and implicit learning."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.database import get_db
from roampedia.dependencies import get_current_user
from roampedia.models.user import User
from roampedia.schemas.recommendation import LearnRequest, RecommendationRequest
from roampedia.services.recommendation.engine import recommendation_service
from roampedia.services.recommendation.preferences import preference_service

router = APIRouter()


@router.post("")
async def get_personalized_recommendations(
    req: RecommendationRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        return await recommendation_service.recommend_personalized(db, req, user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/learn")
async def learn_from_action(
    req: LearnRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Learn from browsing actions (view / explore / wishlist)."""
    record = await preference_service.learn(db, user.id, req.action, req.country_name, req.tags)
    return {
        "success": True,
        "message": "Learning recorded",
        "preferred_vibes": list(record.preferred_vibes or []),
    }
