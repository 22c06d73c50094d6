"""Recommendation service — candidate retrieval, scoring and ranking over the country catalogue."""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.config import settings
from roampedia.models.country import Country
from roampedia.models.preference import UserPreference
from roampedia.models.travel_list import Visited, WishlistItem
from roampedia.schemas.recommendation import RecommendationRequest
from roampedia.services.recommendation.config import BUDGET_LEVELS, CLIMATES
from roampedia.services.recommendation.scoring import (
    PreferenceSnapshot,
    calculate_match_score,
    calculate_personalized_score,
    match_reason,
    personalized_reason,
    rank,
    similarity_score,
)
from roampedia.services.recommendation.tag_matcher import matched_tags, shared_tags, unique_tags

logger = logging.getLogger(__name__)

EMPTY_REQUEST_ERROR = "Please select at least one vibe or activity preference"


def country_to_dict(c: Country) -> dict:
    return {
        "id": str(c.id),
        "country": c.country,
        "code": c.code,
        "capital": c.capital,
        "currency": c.currency,
        "vibe_tags": list(c.vibe_tags or []),
        "activity_tags": list(c.activity_tags or []),
        "region": c.region,
        "subregion": c.subregion,
        "climate": c.climate,
        "best_season": c.best_season,
        "description": c.description,
        "image_url": c.image_url,
        "flag_url": c.flag_url,
        "popularity_score": c.popularity_score or 0,
        "budget_level": c.budget_level,
        "languages": list(c.languages or []),
    }


def exclude_countries(countries: list[dict], excluded: set[str]) -> list[dict]:
    """Drop countries whose name or code appears in the excluded identifiers."""
    if not excluded:
        return countries
    return [
        c for c in countries
        if c["country"] not in excluded and (c.get("code") or "") not in excluded
    ]


class RecommendationService:
    """Tag-based destination recommendations, plain and personalised."""

    def _validate(self, req: RecommendationRequest) -> tuple[list[str], list[str]]:
        vibes = unique_tags(req.vibes)
        activities = unique_tags(req.activities)
        if not vibes and not activities:
            raise ValueError(EMPTY_REQUEST_ERROR)
        return vibes, activities

    async def _candidates(
        self, db: AsyncSession, vibes: list[str], activities: list[str], req: RecommendationRequest
    ) -> list[dict]:
        tag_clauses = []
        if vibes:
            tag_clauses.append(Country.vibe_tags.overlap(vibes))
        if activities:
            tag_clauses.append(Country.activity_tags.overlap(activities))

        query = select(Country).where(or_(*tag_clauses))
        filters = req.filters
        if filters.region:
            query = query.where(Country.region == filters.region)
        if filters.climate:
            query = query.where(Country.climate == filters.climate)
        if filters.budget:
            query = query.where(Country.budget_level == filters.budget)

        result = await db.execute(query)
        return [country_to_dict(c) for c in result.scalars().all()]

    async def _excluded_codes(
        self, db: AsyncSession, user_id: uuid.UUID | None, req: RecommendationRequest
    ) -> set[str]:
        if user_id is None:
            return set()
        excluded: set[str] = set()
        if req.filters.exclude_visited:
            result = await db.execute(
                select(Visited.country_code, Visited.country_name).where(Visited.user_id == user_id)
            )
            for code, name in result.all():
                excluded.update(v for v in (code, name) if v)
        if req.filters.exclude_wishlisted:
            result = await db.execute(
                select(WishlistItem.country_code, WishlistItem.country_name).where(WishlistItem.user_id == user_id)
            )
            for code, name in result.all():
                excluded.update(v for v in (code, name) if v)
        return excluded

    async def recommend(
        self, db: AsyncSession, req: RecommendationRequest, user_id: uuid.UUID | None = None
    ) -> dict:
        """Public recommendations; exclusions only apply to signed-in callers."""
        vibes, activities = self._validate(req)
        filters = req.filters.model_dump()

        countries = await self._candidates(db, vibes, activities, req)
        countries = exclude_countries(countries, await self._excluded_codes(db, user_id, req))
        logger.info(f"Found {len(countries)} matching countries for {user_id or 'guest'}")

        scored = []
        for c in countries:
            scored.append({
                **c,
                "match_score": calculate_match_score(c, vibes, activities, filters),
                "reason": match_reason(c, vibes, activities, filters),
                "matched_vibes": matched_tags(vibes, c["vibe_tags"]),
                "matched_activities": matched_tags(activities, c["activity_tags"]),
            })

        recommendations = rank(scored, "match_score")[: req.limit]
        return {
            "success": True,
            "count": len(recommendations),
            "total_matches": len(countries),
            "query": {"vibes": req.vibes, "activities": req.activities, "filters": filters},
            "recommendations": recommendations,
        }

    async def _liked_index(self, db: AsyncSession, prefs: PreferenceSnapshot | None) -> dict[str, dict]:
        if not prefs or not prefs.liked_countries:
            return {}
        result = await db.execute(
            select(Country).where(Country.country.in_(set(prefs.liked_countries)))
        )
        return {c.country: country_to_dict(c) for c in result.scalars().all()}

    async def recommend_personalized(
        self, db: AsyncSession, req: RecommendationRequest, user_id: uuid.UUID
    ) -> dict:
        """Recommendations blended with the caller's learned preferences (cold start without a record)."""
        vibes, activities = self._validate(req)
        filters = req.filters.model_dump()

        result = await db.execute(select(UserPreference).where(UserPreference.user_id == user_id))
        record = result.scalar_one_or_none()
        prefs = PreferenceSnapshot.from_record(record) if record else None
        mode = "personalized" if prefs else "cold_start"
        logger.info(f"Personalised recommendations for {user_id}: mode={mode}")
        if prefs:
            logger.debug(
                f"  preferred vibes={len(prefs.preferred_vibes)} liked countries={len(prefs.liked_countries)}"
            )

        countries = await self._candidates(db, vibes, activities, req)
        countries = exclude_countries(countries, await self._excluded_codes(db, user_id, req))
        liked_index = await self._liked_index(db, prefs)

        scored = []
        for c in countries:
            scored.append({
                **c,
                "match_score": calculate_personalized_score(c, vibes, activities, filters, prefs, liked_index),
                "reason": personalized_reason(c, vibes, activities, prefs),
                "matched_vibes": matched_tags(vibes, c["vibe_tags"]),
                "matched_activities": matched_tags(activities, c["activity_tags"]),
                "is_personalized": prefs is not None,
            })

        if record is not None:
            record.last_query = {
                "vibes": vibes,
                "activities": activities,
                "filters": filters,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
            await db.commit()

        recommendations = rank(scored, "match_score")[: req.limit]
        logger.info(f"Returning {len(recommendations)} recommendations for {user_id}")
        return {
            "success": True,
            "count": len(recommendations),
            "total_matches": len(countries),
            "ai_mode": mode,
            "query": {"vibes": req.vibes, "activities": req.activities, "filters": filters},
            "recommendations": recommendations,
        }

    async def similar(self, db: AsyncSession, country_name: str, limit: int | None = None) -> dict:
        limit = limit or settings.similar_countries_default_limit
        result = await db.execute(select(Country).where(Country.country == country_name))
        source_row = result.scalar_one_or_none()
        if not source_row:
            raise LookupError("Country not found")
        source = country_to_dict(source_row)

        clauses = []
        if source["vibe_tags"]:
            clauses.append(Country.vibe_tags.overlap(source["vibe_tags"]))
        if source["activity_tags"]:
            clauses.append(Country.activity_tags.overlap(source["activity_tags"]))
        if source["region"]:
            clauses.append(Country.region == source["region"])
        if not clauses:
            return {"success": True, "source_country": source["country"], "recommendations": []}

        result = await db.execute(
            select(Country).where(Country.country != country_name, or_(*clauses))
        )
        scored = []
        for row in result.scalars().all():
            c = country_to_dict(row)
            scored.append({
                **c,
                "similarity_score": similarity_score(source, c),
                "shared_vibes": shared_tags(c["vibe_tags"], source["vibe_tags"]),
                "shared_activities": shared_tags(c["activity_tags"], source["activity_tags"]),
            })
        scored.sort(key=lambda c: c["similarity_score"], reverse=True)
        return {
            "success": True,
            "source_country": source["country"],
            "recommendations": scored[:limit],
        }

    async def available_tags(self, db: AsyncSession) -> dict:
        vibe_result = await db.execute(select(func.unnest(Country.vibe_tags)).distinct())
        activity_result = await db.execute(select(func.unnest(Country.activity_tags)).distinct())
        region_result = await db.execute(
            select(Country.region).where(Country.region.isnot(None)).distinct().order_by(Country.region)
        )
        total = (await db.execute(select(func.count(Country.id)))).scalar() or 0

        vibe_tags = sorted(t for t in vibe_result.scalars().all() if t)
        activity_tags = sorted(t for t in activity_result.scalars().all() if t)
        return {
            "vibe_tags": vibe_tags,
            "activity_tags": activity_tags,
            "regions": [r for r in region_result.scalars().all() if r],
            "climates": CLIMATES,
            "budget_levels": BUDGET_LEVELS,
            "stats": {
                "total_countries": total,
                "total_vibe_tags": len(vibe_tags),
                "total_activity_tags": len(activity_tags),
            },
        }

    async def _top_tags(self, db: AsyncSession, column, limit: int = 10) -> list[dict]:
        tag = func.unnest(column).label("tag")
        sub = select(tag).subquery()
        result = await db.execute(
            select(sub.c.tag, func.count().label("count"))
            .group_by(sub.c.tag)
            .order_by(func.count().desc())
            .limit(limit)
        )
        return [{"tag": row.tag, "count": row.count} for row in result.all()]

    async def catalogue_stats(self, db: AsyncSession) -> dict:
        total = (await db.execute(select(func.count(Country.id)))).scalar() or 0
        with_vibes = (await db.execute(
            select(func.count(Country.id)).where(func.cardinality(Country.vibe_tags) > 0)
        )).scalar() or 0
        with_activities = (await db.execute(
            select(func.count(Country.id)).where(func.cardinality(Country.activity_tags) > 0)
        )).scalar() or 0

        return {
            "success": True,
            "stats": {
                "total_countries": total,
                "countries_with_vibes": with_vibes,
                "countries_with_activities": with_activities,
                "coverage": {
                    "vibes": round(with_vibes / total * 100) if total else 0,
                    "activities": round(with_activities / total * 100) if total else 0,
                },
                "top_vibe_tags": await self._top_tags(db, Country.vibe_tags),
                "top_activity_tags": await self._top_tags(db, Country.activity_tags),
            },
        }


recommendation_service = RecommendationService()
