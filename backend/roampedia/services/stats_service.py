"""Stats service — travel profile statistics, expense summaries and admin analytics."""

import logging
import math
import uuid
from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roampedia.models.experience import UserExperience
from roampedia.models.planning import Expense
from roampedia.models.travel_list import TravelNote, Visited, WishlistItem
from roampedia.models.user import User

logger = logging.getLogger(__name__)

TREND_PERIODS = ("day", "week", "month", "year")
ADMIN_USER_SORT_FIELDS = {
    "created_at": User.created_at,
    "last_login": User.last_login,
    "email": User.email,
    "first_name": User.first_name,
    "last_name": User.last_name,
}


# ─── Pure helpers ───


def region_breakdown(regions: Iterable[str | None]) -> dict[str, int]:
    return dict(Counter(r or "Unknown" for r in regions))


def average_rating(ratings: list[int]) -> float:
    if not ratings:
        return 0.0
    return round(sum(r or 0 for r in ratings) / len(ratings), 2)


def rating_distribution(ratings: Iterable[int]) -> dict[int, int]:
    distribution = {score: 0 for score in range(1, 11)}
    for rating in ratings:
        if rating in distribution:
            distribution[rating] += 1
    return distribution


def theme_counts(theme_lists: Iterable[list[str] | None]) -> dict[str, int]:
    counts: Counter[str] = Counter()
    for themes in theme_lists:
        counts.update(themes or [])
    return dict(counts)


def monthly_timeline(dates: Iterable[date | datetime | None]) -> dict[str, int]:
    return dict(Counter(d.strftime("%Y-%m") for d in dates if d is not None))


def top_rated_countries(ratings: Iterable[tuple[str, int]], limit: int = 5) -> list[dict]:
    """Average rating per country from (country, rating) pairs, best first."""
    totals: dict[str, list[int]] = {}
    for country, rating in ratings:
        totals.setdefault(country, []).append(rating)
    rows = [
        {"country": country, "average_rating": average_rating(values), "count": len(values)}
        for country, values in totals.items()
    ]
    rows.sort(key=lambda r: r["average_rating"], reverse=True)
    return rows[:limit]


def favorite_region(breakdown: dict[str, int]) -> str:
    # First region with the highest count wins ties
    best, best_count = "None", 0
    for region, count in breakdown.items():
        if count > best_count:
            best, best_count = region, count
    return best


def top_themes(counts: dict[str, int], limit: int = 3) -> list[str]:
    return [theme for theme, _ in sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]]


def period_key(moment: date | datetime, period: str) -> str:
    """Bucket label for a date: 2025-01-31, 2025-W5, 2025-01 or 2025."""
    if period == "day":
        return moment.strftime("%Y-%m-%d")
    if period == "week":
        iso_year, week, _ = moment.isocalendar()
        return f"{iso_year}-W{week}"
    if period == "year":
        return str(moment.year)
    return moment.strftime("%Y-%m")


def time_trends(dates: Iterable[date | datetime], period: str = "month") -> list[dict]:
    counts = Counter(period_key(d, period) for d in dates if d is not None)
    return [{"period": key, "count": counts[key]} for key in sorted(counts)]


def engagement_level(total_activity: int) -> str:
    if total_activity >= 20:
        return "high"
    if total_activity >= 5:
        return "medium"
    return "low"


def percent_used(actual: float, budget: float) -> float:
    return round(actual / budget * 100, 1) if budget > 0 else 0.0


def expense_summary(expenses: Iterable[dict]) -> dict:
    """Budget vs actual totals plus a per-category breakdown."""
    by_category = []
    total_budget = total_actual = 0.0
    for e in expenses:
        budget, actual = float(e.get("budget") or 0), float(e.get("actual") or 0)
        total_budget += budget
        total_actual += actual
        by_category.append({
            "category": e.get("category"),
            "budget": budget,
            "actual": actual,
            "variance": budget - actual,
            "percent_used": percent_used(actual, budget),
        })
    return {
        "total_budget": total_budget,
        "total_actual": total_actual,
        "total_variance": total_budget - total_actual,
        "percent_used": percent_used(total_actual, total_budget),
        "by_category": by_category,
    }


def user_summary(user: User) -> dict:
    return {
        "id": str(user.id),
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "display_name": user.display_name,
        "role": user.role,
        "last_login": user.last_login.isoformat() if user.last_login else None,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


def _visit_date(v: Visited) -> datetime | None:
    return v.date_visited or v.created_at


class StatsService:
    """Per-user travel statistics."""

    async def _counts_for(self, db: AsyncSession, model, user_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
        if not user_ids:
            return {}
        result = await db.execute(
            select(model.user_id, func.count(model.id))
            .where(model.user_id.in_(user_ids))
            .group_by(model.user_id)
        )
        return {user_id: count for user_id, count in result.all()}

    async def user_stats(self, db: AsyncSession, user: User) -> dict:
        visited = (await db.execute(
            select(Visited).where(Visited.user_id == user.id).order_by(Visited.date_visited.desc())
        )).scalars().all()
        wishlist = (await db.execute(
            select(WishlistItem).where(WishlistItem.user_id == user.id).order_by(WishlistItem.added_at.desc())
        )).scalars().all()
        experiences = (await db.execute(
            select(UserExperience).where(UserExperience.user_id == user.id).order_by(UserExperience.created_at.desc())
        )).scalars().all()
        notes_count = (await db.execute(
            select(func.count(TravelNote.id)).where(TravelNote.user_id == user.id)
        )).scalar() or 0

        ratings = [e.rating for e in experiences]
        themes = theme_counts(e.themes for e in experiences)
        visited_regions = region_breakdown(v.region for v in visited)
        activity = [d for d in (_visit_date(v) for v in visited) if d] + [
            e.created_at for e in experiences if e.created_at
        ]
        last_activity = max(activity) if activity else None

        return {
            "visited_count": len(visited),
            "wishlist_count": len(wishlist),
            "experiences_count": len(experiences),
            "notes_count": notes_count,
            "visited_by_region": visited_regions,
            "wishlist_by_region": region_breakdown(w.region for w in wishlist),
            "average_rating": average_rating(ratings),
            "rating_distribution": rating_distribution(ratings),
            "theme_preferences": themes,
            "visit_timeline": monthly_timeline(_visit_date(v) for v in visited),
            "experience_timeline": monthly_timeline(e.from_date or e.created_at for e in experiences),
            "top_rated_countries": top_rated_countries((e.country, e.rating) for e in experiences),
            "recent_visited": [
                {"country_code": v.country_code, "country_name": v.country_name, "region": v.region}
                for v in visited[:5]
            ],
            "recent_experiences": [
                {"id": str(e.id), "country": e.country, "rating": e.rating} for e in experiences[:5]
            ],
            "travel_profile": {
                "total_countries": len(visited),
                "total_experiences": len(experiences),
                "average_rating": average_rating(ratings),
                "favorite_region": favorite_region(visited_regions),
                "favorite_themes": top_themes(themes, 3),
                "member_since": user.created_at.isoformat() if user.created_at else None,
                "last_activity": last_activity.isoformat() if last_activity else None,
            },
        }

    async def visited_map(self, db: AsyncSession, user: User) -> list[dict]:
        result = await db.execute(select(Visited).where(Visited.user_id == user.id))
        return [
            {
                "country_code": v.country_code,
                "country_name": v.country_name,
                "region": v.region,
                "flag_url": v.flag_url,
                "date_visited": v.date_visited.isoformat() if v.date_visited else None,
            }
            for v in result.scalars().all()
        ]

    async def expense_stats(self, db: AsyncSession, user: User) -> dict:
        result = await db.execute(select(Expense).where(Expense.user_id == user.id))
        return expense_summary(
            {"category": e.category, "budget": e.budget, "actual": e.actual}
            for e in result.scalars().all()
        )

    # ─── Admin analytics ───

    async def system_stats(self, db: AsyncSession) -> dict:
        total_users = (await db.execute(
            select(func.count(User.id)).where(User.is_active.is_(True))
        )).scalar() or 0
        active_since = datetime.now(timezone.utc) - timedelta(days=30)
        active_users = (await db.execute(
            select(func.count(User.id)).where(User.is_active.is_(True), User.last_login >= active_since)
        )).scalar() or 0
        totals = {}
        for key, model in (
            ("total_visited", Visited),
            ("total_wishlist", WishlistItem),
            ("total_experiences", UserExperience),
            ("total_notes", TravelNote),
        ):
            totals[key] = (await db.execute(select(func.count(model.id)))).scalar() or 0
        recent = (await db.execute(
            select(User).where(User.is_active.is_(True)).order_by(User.created_at.desc()).limit(10)
        )).scalars().all()

        return {
            "overview": {
                "total_users": total_users,
                "active_users": active_users,
                **totals,
                "average_visited_per_user": round(totals["total_visited"] / total_users, 2) if total_users else 0,
                "average_experiences_per_user": (
                    round(totals["total_experiences"] / total_users, 2) if total_users else 0
                ),
            },
            "recent_users": [user_summary(u) for u in recent],
        }

    async def user_trends(self, db: AsyncSession, period: str = "month") -> list[dict]:
        result = await db.execute(
            select(User.created_at).where(User.is_active.is_(True)).order_by(User.created_at)
        )
        return time_trends(result.scalars().all(), period)

    async def _popular(self, db: AsyncSession, model, limit: int) -> list[dict]:
        result = await db.execute(
            select(
                model.country_code,
                func.max(model.country_name).label("country_name"),
                func.max(model.region).label("region"),
                func.count(model.id).label("count"),
            )
            .group_by(model.country_code)
            .order_by(func.count(model.id).desc())
            .limit(limit)
        )
        return [
            {"country_code": r.country_code, "country_name": r.country_name, "region": r.region, "count": r.count}
            for r in result.all()
        ]

    async def popular_countries(self, db: AsyncSession, limit: int = 20) -> dict:
        return {
            "most_visited": await self._popular(db, Visited, limit),
            "most_wishlisted": await self._popular(db, WishlistItem, limit),
        }

    async def country_ratings(self, db: AsyncSession, limit: int = 50) -> list[dict]:
        avg = func.avg(UserExperience.rating)
        result = await db.execute(
            select(
                UserExperience.country,
                avg.label("average_rating"),
                func.count(UserExperience.id).label("total_experiences"),
                func.max(UserExperience.rating).label("highest_rating"),
                func.min(UserExperience.rating).label("lowest_rating"),
            )
            .group_by(UserExperience.country)
            .order_by(avg.desc())
            .limit(limit)
        )
        return [
            {
                "country": r.country,
                "average_rating": round(float(r.average_rating), 2),
                "total_experiences": r.total_experiences,
                "highest_rating": r.highest_rating,
                "lowest_rating": r.lowest_rating,
            }
            for r in result.all()
        ]

    async def theme_popularity(self, db: AsyncSession) -> list[dict]:
        result = await db.execute(select(UserExperience.themes))
        counts = theme_counts(result.scalars().all())
        return [
            {"theme": theme, "count": count}
            for theme, count in sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
        ]

    async def regional_stats(self, db: AsyncSession) -> list[dict]:
        result = await db.execute(
            select(
                Visited.region,
                func.count(Visited.id).label("count"),
                func.count(func.distinct(Visited.user_id)).label("unique_users"),
            )
            .group_by(Visited.region)
            .order_by(func.count(Visited.id).desc())
        )
        return [
            {"region": r.region, "count": r.count, "unique_users": r.unique_users}
            for r in result.all()
        ]

    async def engagement_rows(self, db: AsyncSession) -> list[dict]:
        """Activity counts for every active user, busiest first."""
        users = (await db.execute(select(User).where(User.is_active.is_(True)))).scalars().all()
        ids = [u.id for u in users]
        visited = await self._counts_for(db, Visited, ids)
        wishlist = await self._counts_for(db, WishlistItem, ids)
        experiences = await self._counts_for(db, UserExperience, ids)
        notes = await self._counts_for(db, TravelNote, ids)

        rows = []
        for u in users:
            counts = {
                "visited": visited.get(u.id, 0),
                "wishlist": wishlist.get(u.id, 0),
                "experiences": experiences.get(u.id, 0),
                "notes": notes.get(u.id, 0),
            }
            total = sum(counts.values())
            rows.append({
                "user_id": str(u.id),
                "email": u.email,
                **counts,
                "total_activity": total,
                "engagement_level": engagement_level(total),
            })
        rows.sort(key=lambda r: r["total_activity"], reverse=True)
        return rows

    async def engagement(self, db: AsyncSession) -> dict:
        rows = await self.engagement_rows(db)
        levels = Counter(r["engagement_level"] for r in rows)
        total = sum(r["total_activity"] for r in rows)
        return {
            "user_engagement": rows[:50],
            "engagement_distribution": {level: levels.get(level, 0) for level in ("high", "medium", "low")},
            "average_activity": round(total / len(rows), 2) if rows else 0,
        }

    async def users_page(
        self, db: AsyncSession, page: int = 1, limit: int = 20, sort_by: str = "created_at", order: str = "desc"
    ) -> dict:
        column = ADMIN_USER_SORT_FIELDS.get(sort_by, User.created_at)
        ordering = column.asc() if order == "asc" else column.desc()
        total = (await db.execute(
            select(func.count(User.id)).where(User.is_active.is_(True))
        )).scalar() or 0
        users = (await db.execute(
            select(User).where(User.is_active.is_(True)).order_by(ordering).offset((page - 1) * limit).limit(limit)
        )).scalars().all()

        ids = [u.id for u in users]
        visited = await self._counts_for(db, Visited, ids)
        wishlist = await self._counts_for(db, WishlistItem, ids)
        experiences = await self._counts_for(db, UserExperience, ids)

        return {
            "users": [
                {
                    **user_summary(u),
                    "stats": {
                        "visited_count": visited.get(u.id, 0),
                        "wishlist_count": wishlist.get(u.id, 0),
                        "experiences_count": experiences.get(u.id, 0),
                    },
                }
                for u in users
            ],
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        }


stats_service = StatsService()
