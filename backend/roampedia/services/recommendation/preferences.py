"""Preference aggregator — folds explicit feedback and browsing actions into a user's preference record.

The functions mutate a ``UserPreference`` row by reassigning its JSONB lists
(never appending in place) so SQLAlchemy notices the change on flush.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.config import settings
from roampedia.models.preference import UserPreference
from roampedia.services.recommendation.config import LEARNING_ACTIONS
from roampedia.services.recommendation.tag_matcher import unique_tags

logger = logging.getLogger(__name__)


def new_preference_record(user_id: uuid.UUID) -> UserPreference:
    return UserPreference(
        user_id=user_id,
        preferred_vibes=[],
        preferred_activities=[],
        liked_countries=[],
        disliked_countries=[],
        feedback_history=[],
        preferred_regions=[],
    )


def _merge_into_vibes(record: UserPreference, tags: list[str]) -> None:
    vibes = list(record.preferred_vibes or [])
    activities = set(record.preferred_activities or [])
    for tag in unique_tags(tags):
        if tag not in vibes and tag not in activities:
            vibes.append(tag)
    record.preferred_vibes = vibes


def apply_feedback(
    record: UserPreference,
    country_name: str,
    liked: bool,
    tags: list[str] | None = None,
    now: datetime | None = None,
    history_limit: int | None = None,
) -> UserPreference:
    """Record a like/dislike on the preference row.

    Not idempotent: every call appends one history entry. Liked tags are merged
    into preferred vibes, whichever list they came from on the country.
    """
    tags = list(tags or [])
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    limit = history_limit if history_limit is not None else settings.feedback_history_limit

    if liked:
        record.liked_countries = list(record.liked_countries or []) + [
            {"country_name": country_name, "timestamp": stamp}
        ]
        _merge_into_vibes(record, tags)
    else:
        record.disliked_countries = list(record.disliked_countries or []) + [
            {"country_name": country_name, "timestamp": stamp}
        ]

    history = list(record.feedback_history or []) + [
        {"country_name": country_name, "liked": liked, "tags": tags, "timestamp": stamp}
    ]
    record.feedback_history = history[-limit:] if limit > 0 else []
    return record


def apply_learning_action(record: UserPreference, action: str, tags: list[str] | None = None) -> bool:
    """Fold tags from an implicit signal (view/explore/wishlist) into preferred vibes.

    Returns True when the action is one that teaches preferences.
    """
    if action not in LEARNING_ACTIONS:
        return False
    vibes = list(record.preferred_vibes or [])
    for tag in unique_tags(tags):
        if tag not in vibes:
            vibes.append(tag)
    record.preferred_vibes = vibes
    return True


class PreferenceService:
    """Loads and persists preference records around the aggregator functions."""

    async def get(self, db: AsyncSession, user_id: uuid.UUID) -> UserPreference | None:
        result = await db.execute(select(UserPreference).where(UserPreference.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_or_create(self, db: AsyncSession, user_id: uuid.UUID) -> UserPreference:
        record = await self.get(db, user_id)
        if record is None:
            record = new_preference_record(user_id)
            db.add(record)
            logger.info(f"Created preference record for user {user_id}")
        return record

    async def record_feedback(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        country_name: str,
        liked: bool,
        tags: list[str] | None = None,
    ) -> UserPreference:
        record = await self.get_or_create(db, user_id)
        apply_feedback(record, country_name, liked, tags)
        await db.commit()
        await db.refresh(record)
        logger.info(f"Feedback from {user_id}: {'liked' if liked else 'disliked'} {country_name}")
        return record

    async def learn(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        action: str,
        country_name: str,
        tags: list[str] | None = None,
    ) -> UserPreference:
        record = await self.get_or_create(db, user_id)
        if apply_learning_action(record, action, tags):
            logger.info(f"Learned from {action} on {country_name} for user {user_id}")
        await db.commit()
        await db.refresh(record)
        return record


preference_service = PreferenceService()
