"""Recommendation engine configuration — single source for all weights and limits."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MatchWeights:
    """Weights for the public tag-match score.
    Tag criteria only count when the matching request list is non-empty."""
    vibes: float = 40.0
    activities: float = 40.0
    region: float = 10.0
    season: float = 5.0
    budget: float = 5.0


@dataclass(frozen=True)
class PersonalizedWeights:
    """Weights for the personalised score.
    Preference, feedback, diversity and filter weights always count toward the maximum."""
    vibes: float = 15.0
    activities: float = 15.0
    preferences: float = 40.0
    feedback: float = 15.0
    diversity: float = 5.0
    region_bonus: float = 5.0
    budget_bonus: float = 5.0

    @property
    def filters(self) -> float:
        return self.region_bonus + self.budget_bonus


@dataclass(frozen=True)
class FeedbackSimilarity:
    """Per-liked-country credit for sharing at least one tag with the candidate."""
    per_match: float = 0.2
    cap: float = 1.0


@dataclass(frozen=True)
class DiversityConfig:
    """Unexplored vibes needed for full diversity credit."""
    full_credit_vibes: int = 3


@dataclass(frozen=True)
class SimilarityWeights:
    """Similar-country scoring."""
    shared_vibe: int = 2
    shared_activity: int = 2
    same_region: int = 1


# Tag vocabulary offered to clients alongside the tags found in the data
CLIMATES = ["Tropical", "Temperate", "Arid", "Continental", "Polar", "Mediterranean"]
BUDGET_LEVELS = ["Budget", "Mid-range", "Luxury"]

# Learning actions that fold a country's tags into preferred vibes
LEARNING_ACTIONS = {"view", "explore", "wishlist"}


@dataclass(frozen=True)
class RecommendationConfig:
    """Top-level config aggregating all sub-configs."""
    match: MatchWeights = field(default_factory=MatchWeights)
    personalized: PersonalizedWeights = field(default_factory=PersonalizedWeights)
    feedback: FeedbackSimilarity = field(default_factory=FeedbackSimilarity)
    diversity: DiversityConfig = field(default_factory=DiversityConfig)
    similarity: SimilarityWeights = field(default_factory=SimilarityWeights)


# Singleton
recommendation_config = RecommendationConfig()
