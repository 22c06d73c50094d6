import pytest


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_country():
    def _make(name="Thailand", **overrides):
        country = {
            "country": name,
            "code": name[:3].upper(),
            "vibe_tags": [],
            "activity_tags": [],
            "region": None,
            "climate": None,
            "best_season": None,
            "budget_level": None,
            "popularity_score": 0,
        }
        country.update(overrides)
        return country

    return _make
