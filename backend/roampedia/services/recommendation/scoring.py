"""Scoring — composes tag, preference, feedback and filter criteria into a 0-100 match score.

Every scorer accumulates ``score`` and ``max_score`` criterion by criterion and
normalises at the end, so a criterion that is skipped (e.g. no requested vibes)
does not drag the percentage down. Countries are plain dicts shaped like
``country_to_dict`` output.

Reasons only mention a requested season ("perfect for summer") when it actually
appears in the country's ``best_season``, mirroring how the season criterion scores.
"""

import math
from dataclasses import dataclass, field

from roampedia.services.recommendation.config import recommendation_config
from roampedia.services.recommendation.tag_matcher import (
    has_overlap,
    matched_tags,
    overlap_ratio,
    shared_tags,
    unique_tags,
)


@dataclass
class ScoreAccumulator:
    score: float = 0.0
    max_score: float = 0.0

    def add(self, fraction: float, weight: float) -> None:
        self.score += fraction * weight
        self.max_score += weight

    def percent(self) -> int:
        if self.max_score <= 0:
            return 0
        # Half-up rounding so 42.5 → 43 like the client-side display
        value = math.floor(100 * self.score / self.max_score + 0.5)
        return max(0, min(100, value))


@dataclass
class PreferenceSnapshot:
    """The parts of a user's preference record the scorer reads."""
    preferred_vibes: list[str] = field(default_factory=list)
    preferred_activities: list[str] = field(default_factory=list)
    liked_countries: list[str] = field(default_factory=list)  # names, duplicates kept

    @classmethod
    def from_record(cls, record) -> "PreferenceSnapshot":
        return cls(
            preferred_vibes=list(record.preferred_vibes or []),
            preferred_activities=list(record.preferred_activities or []),
            liked_countries=[
                entry.get("country_name") for entry in (record.liked_countries or [])
                if entry.get("country_name")
            ],
        )


def _filter(filters: dict | None, key: str):
    return (filters or {}).get(key)


def calculate_match_score(
    country: dict,
    vibes: list[str],
    activities: list[str],
    filters: dict | None = None,
) -> int:
    """Plain tag-match score used for public recommendations."""
    weights = recommendation_config.match
    acc = ScoreAccumulator()

    if unique_tags(vibes):
        acc.add(overlap_ratio(vibes, country.get("vibe_tags")), weights.vibes)
    if unique_tags(activities):
        acc.add(overlap_ratio(activities, country.get("activity_tags")), weights.activities)

    region = _filter(filters, "region")
    acc.add(1.0 if region and country.get("region") == region else 0.0, weights.region)

    season = _filter(filters, "season")
    best_season = country.get("best_season") or ""
    acc.add(1.0 if season and season.lower() in best_season.lower() else 0.0, weights.season)

    budget = _filter(filters, "budget")
    acc.add(1.0 if budget and country.get("budget_level") == budget else 0.0, weights.budget)

    return acc.percent()


def preference_alignment(country: dict, prefs: PreferenceSnapshot) -> float:
    """0-1 share of the candidate's tags that fall in the user's preferred tags."""
    country_vibes = unique_tags(country.get("vibe_tags"))
    country_activities = unique_tags(country.get("activity_tags"))
    preferred_vibes = unique_tags(prefs.preferred_vibes)
    preferred_activities = unique_tags(prefs.preferred_activities)

    alignment = 0.0
    if preferred_vibes:
        hits = len(matched_tags(country_vibes, preferred_vibes))
        alignment += min(1.0, hits / max(len(preferred_vibes), 1)) * 0.5
    if preferred_activities:
        hits = len(matched_tags(country_activities, preferred_activities))
        alignment += min(1.0, hits / max(len(preferred_activities), 1)) * 0.5
    return alignment


def feedback_similarity(
    country: dict,
    prefs: PreferenceSnapshot,
    liked_index: dict[str, dict],
) -> float:
    """Credit for resembling liked countries; each liked entry sharing a tag adds a step."""
    cfg = recommendation_config.feedback
    similarity = 0.0
    for name in prefs.liked_countries:
        liked = liked_index.get(name)
        if not liked:
            continue
        if has_overlap(country.get("vibe_tags"), liked.get("vibe_tags")) or has_overlap(
            country.get("activity_tags"), liked.get("activity_tags")
        ):
            similarity = min(cfg.cap, similarity + cfg.per_match)
    return similarity


def diversity_bonus(country: dict, prefs: PreferenceSnapshot | None) -> float:
    """Reward vibes the user has not explored yet, saturating at a few new vibes."""
    if prefs is None:
        return 0.0
    unexplored = [v for v in unique_tags(country.get("vibe_tags")) if v not in set(prefs.preferred_vibes)]
    return min(1.0, len(unexplored) / recommendation_config.diversity.full_credit_vibes)


def calculate_personalized_score(
    country: dict,
    vibes: list[str],
    activities: list[str],
    filters: dict | None,
    prefs: PreferenceSnapshot | None,
    liked_index: dict[str, dict] | None = None,
) -> int:
    """Personalised score blending the request with the user's learned preferences.

    Preference, feedback, diversity and filter criteria are always part of the
    maximum, so cold-start users top out below 100 unless they match everything
    they asked for and the filters.
    """
    weights = recommendation_config.personalized
    acc = ScoreAccumulator()

    if unique_tags(vibes):
        acc.add(overlap_ratio(vibes, country.get("vibe_tags")), weights.vibes)
    if unique_tags(activities):
        acc.add(overlap_ratio(activities, country.get("activity_tags")), weights.activities)

    acc.add(preference_alignment(country, prefs) if prefs else 0.0, weights.preferences)
    acc.add(feedback_similarity(country, prefs, liked_index or {}) if prefs else 0.0, weights.feedback)
    acc.add(diversity_bonus(country, prefs), weights.diversity)

    bonus = 0.0
    region = _filter(filters, "region")
    if region and country.get("region") == region:
        bonus += weights.region_bonus
    budget = _filter(filters, "budget")
    if budget and country.get("budget_level") == budget:
        bonus += weights.budget_bonus
    acc.add(bonus / weights.filters, weights.filters)

    return acc.percent()


def similarity_score(source: dict, candidate: dict) -> int:
    """Shared-tag similarity between two countries (unbounded integer)."""
    cfg = recommendation_config.similarity
    vibes = len(shared_tags(unique_tags(candidate.get("vibe_tags")), source.get("vibe_tags")))
    activities = len(shared_tags(unique_tags(candidate.get("activity_tags")), source.get("activity_tags")))
    same_region = 1 if source.get("region") and candidate.get("region") == source.get("region") else 0
    return vibes * cfg.shared_vibe + activities * cfg.shared_activity + same_region * cfg.same_region


def rank(scored: list[dict], score_key: str) -> list[dict]:
    """Sort by score, then popularity, both descending."""
    return sorted(
        scored,
        key=lambda c: (c.get(score_key, 0), c.get("popularity_score") or 0),
        reverse=True,
    )


# ─── Explanations ───


def match_reason(country: dict, vibes: list[str], activities: list[str], filters: dict | None = None) -> str:
    reasons = []

    vibe_hits = matched_tags(vibes, country.get("vibe_tags"))
    if vibe_hits:
        reasons.append(f"{', '.join(vibe_hits)} vibes")

    activity_hits = matched_tags(activities, country.get("activity_tags"))
    if activity_hits:
        reasons.append(", ".join(activity_hits))

    region = _filter(filters, "region")
    if region and country.get("region") == region:
        reasons.append(f"{region} destination")

    season = _filter(filters, "season")
    if season and season.lower() in (country.get("best_season") or "").lower():
        reasons.append(f"perfect for {season}")

    budget = _filter(filters, "budget")
    if budget and country.get("budget_level") == budget:
        reasons.append(f"{budget.lower()} travel")

    if not reasons:
        return "Popular destination that matches your style"
    return f"Matches your preferences: {' • '.join(reasons)}"


def personalized_reason(
    country: dict,
    vibes: list[str],
    activities: list[str],
    prefs: PreferenceSnapshot | None,
) -> str:
    reasons = []

    vibe_hits = matched_tags(vibes, country.get("vibe_tags"))
    if vibe_hits:
        reasons.append(f"{', '.join(vibe_hits)} vibes")

    activity_hits = matched_tags(activities, country.get("activity_tags"))
    if activity_hits:
        reasons.append(", ".join(activity_hits))

    if prefs:
        taste = matched_tags(country.get("vibe_tags"), prefs.preferred_vibes)
        if taste:
            reasons.append(f"✨ Matches your taste ({', '.join(taste[:2])})")
        if prefs.liked_countries:
            reasons.append("💡 Similar to places you liked")

    return " • ".join(reasons) if reasons else "Recommended for you"
