import uuid

import pytest

from roampedia.schemas.recommendation import RecommendationFilters, RecommendationRequest
from roampedia.services.recommendation.engine import RecommendationService
from roampedia.services.recommendation.preferences import PreferenceService, new_preference_record
from roampedia.services.recommendation.scoring import PreferenceSnapshot, calculate_personalized_score


class FakeResult:
    def __init__(self, rows=None, scalar=None):
        self._rows = rows or []
        self._scalar = scalar

    def all(self):
        return list(self._rows)

    def scalar_one_or_none(self):
        return self._scalar

    def scalars(self):
        return self


class FakeSession:
    """Answers execute() calls from a queue of canned results."""

    def __init__(self, *results):
        self.results = list(results)
        self.statements = []
        self.added = []
        self.commits = 0
        self.refreshed = []

    async def execute(self, statement):
        self.statements.append(statement)
        return self.results.pop(0)

    def add(self, obj):
        self.added.append(obj)

    async def commit(self):
        self.commits += 1

    async def refresh(self, obj):
        self.refreshed.append(obj)


@pytest.fixture
def catalogue(make_country):
    return [
        make_country("Japan", code="JPN", vibe_tags=["Serene", "Historic"], popularity_score=95),
        make_country("Thailand", code="THA", vibe_tags=["Tropical", "Historic"], popularity_score=90),
        make_country("Fiji", code="FJI", vibe_tags=["Tropical", "Remote"], popularity_score=40),
    ]


@pytest.fixture
def service(monkeypatch, catalogue):
    svc = RecommendationService()

    async def candidates(db, vibes, activities, req):
        return [dict(c) for c in catalogue]

    async def liked_index(db, prefs):
        return {}

    monkeypatch.setattr(svc, "_candidates", candidates)
    monkeypatch.setattr(svc, "_liked_index", liked_index)
    return svc


def _request(**kwargs):
    filters = kwargs.pop("filters", {})
    return RecommendationRequest(filters=RecommendationFilters(**filters), **kwargs)


async def test_guest_gets_no_exclusions(service):
    db = FakeSession()
    req = _request(vibes=["Tropical"], filters={"exclude_visited": True})

    result = await service.recommend(db, req, None)
    assert result["total_matches"] == 3
    assert db.statements == []


async def test_signed_in_caller_excludes_visited_by_code_or_name(service):
    db = FakeSession(FakeResult(rows=[("JPN", None), (None, "Fiji")]))
    req = _request(vibes=["Tropical"], filters={"exclude_visited": True})

    result = await service.recommend(db, req, uuid.uuid4())
    assert [c["country"] for c in result["recommendations"]] == ["Thailand"]
    assert result["total_matches"] == 1


async def test_limit_applies_after_ranking(service):
    req = _request(vibes=["Tropical", "Historic"], limit=2)

    result = await service.recommend(FakeSession(), req, None)
    names = [c["country"] for c in result["recommendations"]]
    # Thailand matches both vibes; Japan and Fiji tie on one and popularity decides
    assert names == ["Thailand", "Japan"]
    assert result["count"] == 2
    assert result["total_matches"] == 3


async def test_recommend_rejects_empty_request(service):
    with pytest.raises(ValueError):
        await service.recommend(FakeSession(), _request(), None)


async def test_cold_start_without_preference_record(service):
    db = FakeSession(FakeResult(scalar=None))

    result = await service.recommend_personalized(db, _request(vibes=["Tropical"]), uuid.uuid4())
    assert result["ai_mode"] == "cold_start"
    assert db.commits == 0
    assert all(c["is_personalized"] is False for c in result["recommendations"])


async def test_personalized_mode_stores_last_query(service):
    record = new_preference_record(uuid.uuid4())
    record.preferred_vibes = ["Tropical"]
    db = FakeSession(FakeResult(scalar=record))

    result = await service.recommend_personalized(db, _request(vibes=["Tropical", "Tropical"]), record.user_id)
    assert result["ai_mode"] == "personalized"
    assert db.commits == 1
    assert record.last_query["vibes"] == ["Tropical"]
    assert "timestamp" in record.last_query
    assert all(c["is_personalized"] for c in result["recommendations"])


def test_personalized_score_bounds(make_country):
    country = make_country(
        "Kenya",
        vibe_tags=["Tropical", "Historic", "Wild", "Remote", "Serene"],
        activity_tags=["Safari"],
        region="Africa",
        budget_level="Luxury",
    )
    liked = make_country("Tanzania", vibe_tags=["Wild"])
    prefs = PreferenceSnapshot(
        preferred_vibes=["Tropical", "Historic"],
        preferred_activities=["Safari"],
        liked_countries=["Tanzania"] * 5,
    )
    everything = country["vibe_tags"]
    filters = {"region": "Africa", "budget": "Luxury"}

    full = calculate_personalized_score(country, everything, ["Safari"], filters, prefs, {"Tanzania": liked})
    assert full == 100

    cases = [
        (everything, ["Safari"], filters, prefs),
        (["Nope"], ["Nope"], {"region": "Europe"}, prefs),
        ([], ["Safari"], None, None),
        (["Wild"], [], {}, PreferenceSnapshot()),
    ]
    for vibes, activities, case_filters, case_prefs in cases:
        score = calculate_personalized_score(country, vibes, activities, case_filters, case_prefs, {"Tanzania": liked})
        assert isinstance(score, int)
        assert 0 <= score <= 100


async def test_feedback_creates_preference_record_lazily():
    db = FakeSession(FakeResult(scalar=None))
    user_id = uuid.uuid4()

    record = await PreferenceService().record_feedback(db, user_id, "Peru", True, ["Historic"])
    assert db.added == [record]
    assert record.user_id == user_id
    assert record.preferred_vibes == ["Historic"]
    assert db.commits == 1


async def test_feedback_reuses_existing_record():
    existing = new_preference_record(uuid.uuid4())
    db = FakeSession(FakeResult(scalar=existing))

    record = await PreferenceService().record_feedback(db, existing.user_id, "Peru", False)
    assert record is existing
    assert db.added == []
    assert record.disliked_countries[0]["country_name"] == "Peru"


async def test_learn_creates_record_and_ignores_unknown_actions():
    db = FakeSession(FakeResult(scalar=None))
    record = await PreferenceService().learn(db, uuid.uuid4(), "share", "Peru", ["Historic"])
    assert db.added == [record]
    assert record.preferred_vibes == []
