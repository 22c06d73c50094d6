from pydantic import BaseModel, Field


class RecommendationFilters(BaseModel):
    region: str | None = None
    climate: str | None = None
    budget: str | None = None
    season: str | None = None
    exclude_visited: bool = False
    exclude_wishlisted: bool = False


class RecommendationRequest(BaseModel):
    vibes: list[str] = []
    activities: list[str] = []
    filters: RecommendationFilters = Field(default_factory=RecommendationFilters)
    limit: int = Field(12, ge=1, le=100)


class FeedbackRequest(BaseModel):
    country_name: str = Field(..., min_length=1)
    liked: bool
    tags: list[str] = []


class LearnRequest(BaseModel):
    action: str = Field(..., min_length=1)
    country_name: str = Field(..., min_length=1)
    tags: list[str] = []
