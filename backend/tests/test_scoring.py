import pytest

from roampedia.services.recommendation.scoring import (
    PreferenceSnapshot,
    ScoreAccumulator,
    calculate_match_score,
    calculate_personalized_score,
    diversity_bonus,
    feedback_similarity,
    match_reason,
    personalized_reason,
    preference_alignment,
    rank,
    similarity_score,
)


@pytest.fixture
def tropical(make_country):
    return make_country(
        "Thailand",
        vibe_tags=["Tropical", "Historic"],
        activity_tags=["Beach Leisure", "Temple Visits"],
        region="Asia",
        best_season="November-March",
        budget_level="Budget",
        popularity_score=90,
    )


def test_accumulator_rounds_half_up():
    acc = ScoreAccumulator()
    acc.add(1.0, 17)
    acc.add(0.0, 23)
    # 17 / 40 is exactly 42.5%
    assert acc.percent() == 43


def test_accumulator_without_criteria_is_zero():
    assert ScoreAccumulator().percent() == 0


def test_match_score_single_vibe_without_filters(tropical):
    # 40 of a possible 60 (vibes + region + season + budget)
    assert calculate_match_score(tropical, ["Tropical"], [], {}) == 67


def test_match_score_empty_activity_list_is_left_out_of_maximum(tropical):
    with_empty = calculate_match_score(tropical, ["Tropical"], [], {})
    with_miss = calculate_match_score(tropical, ["Tropical"], ["Skiing"], {})
    assert with_empty == 67
    assert with_miss == 40


def test_match_score_perfect_match(tropical):
    filters = {"region": "Asia", "season": "march", "budget": "Budget"}
    assert calculate_match_score(tropical, ["Tropical", "Historic"], ["Temple Visits"], filters) == 100


def test_match_score_stays_in_bounds(tropical, make_country):
    cases = [
        (tropical, [], [], None),
        (tropical, ["Nope"], ["Nope"], {"region": "Europe"}),
        (make_country("Empty"), ["Tropical"], ["Beach Leisure"], {"budget": "Luxury"}),
    ]
    for country, vibes, activities, filters in cases:
        score = calculate_match_score(country, vibes, activities, filters)
        assert isinstance(score, int)
        assert 0 <= score <= 100


def test_personalized_score_with_matching_preferences(tropical):
    prefs = PreferenceSnapshot(preferred_vibes=["Tropical"])
    # 15 (vibes) + 20 (half alignment) + 5/3 (one unexplored vibe) out of 85
    assert calculate_personalized_score(tropical, ["Tropical"], [], {}, prefs, {}) == 43


def test_personalized_score_cold_start_still_counts_preference_weights(tropical):
    assert calculate_personalized_score(tropical, ["Tropical"], [], {}, None, {}) == 18


def test_personalized_filter_bonus(tropical):
    base = calculate_personalized_score(tropical, ["Tropical"], [], {}, None)
    boosted = calculate_personalized_score(tropical, ["Tropical"], [], {"region": "Asia", "budget": "Budget"}, None)
    assert boosted > base


def test_preference_alignment_splits_vibes_and_activities(tropical):
    prefs = PreferenceSnapshot(preferred_vibes=["Tropical"], preferred_activities=["Temple Visits", "Skiing"])
    assert preference_alignment(tropical, prefs) == pytest.approx(0.5 + 0.25)


def test_feedback_similarity_steps_per_liked_entry_and_caps(tropical, make_country):
    liked = make_country("Vietnam", vibe_tags=["Tropical"])
    prefs = PreferenceSnapshot(liked_countries=["Vietnam"] * 7)
    assert feedback_similarity(tropical, prefs, {"Vietnam": liked}) == pytest.approx(1.0)

    prefs = PreferenceSnapshot(liked_countries=["Vietnam", "Unknown"])
    assert feedback_similarity(tropical, prefs, {"Vietnam": liked}) == pytest.approx(0.2)


def test_diversity_bonus_counts_unexplored_vibes(make_country):
    country = make_country(vibe_tags=["A", "B", "C", "D"])
    assert diversity_bonus(country, PreferenceSnapshot(preferred_vibes=["A"])) == 1.0
    assert diversity_bonus(country, PreferenceSnapshot(preferred_vibes=["A", "B", "C"])) == pytest.approx(1 / 3)
    assert diversity_bonus(country, None) == 0.0


def test_similarity_score(tropical, make_country):
    other = make_country("Cambodia", vibe_tags=["Historic"], activity_tags=["Temple Visits"], region="Asia")
    assert similarity_score(tropical, other) == 2 + 2 + 1


def test_rank_breaks_ties_on_popularity(make_country):
    a = {**make_country("A", popularity_score=10), "match_score": 80}
    b = {**make_country("B", popularity_score=50), "match_score": 80}
    c = {**make_country("C", popularity_score=99), "match_score": 60}
    assert [r["country"] for r in rank([a, b, c], "match_score")] == ["B", "A", "C"]


def test_match_reason_lists_hits(tropical):
    reason = match_reason(tropical, ["Tropical"], ["Temple Visits"], {"region": "Asia"})
    assert reason == "Matches your preferences: Tropical vibes • Temple Visits • Asia destination"


def test_match_reason_mentions_season_only_when_it_matches(tropical):
    assert "perfect for" not in match_reason(tropical, ["Tropical"], [], {"season": "July"})
    assert "perfect for March" in match_reason(tropical, ["Tropical"], [], {"season": "March"})


def test_match_reason_default(tropical):
    assert match_reason(tropical, ["Nope"], [], {}) == "Popular destination that matches your style"


def test_personalized_reason(tropical):
    prefs = PreferenceSnapshot(preferred_vibes=["Historic"], liked_countries=["Vietnam"])
    reason = personalized_reason(tropical, ["Tropical"], [], prefs)
    assert reason == "Tropical vibes • ✨ Matches your taste (Historic) • 💡 Similar to places you liked"
    assert personalized_reason(tropical, [], [], None) == "Recommended for you"
