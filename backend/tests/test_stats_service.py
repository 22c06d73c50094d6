from datetime import date, datetime

from roampedia.services.stats_service import (
    average_rating,
    engagement_level,
    expense_summary,
    favorite_region,
    monthly_timeline,
    percent_used,
    period_key,
    rating_distribution,
    region_breakdown,
    theme_counts,
    time_trends,
    top_rated_countries,
    top_themes,
)


def test_region_breakdown_labels_missing_regions():
    assert region_breakdown(["Asia", None, "Asia", ""]) == {"Asia": 2, "Unknown": 2}


def test_average_rating():
    assert average_rating([]) == 0.0
    assert average_rating([7, 8, 8]) == 7.67


def test_rating_distribution_covers_one_to_ten():
    distribution = rating_distribution([10, 10, 3])
    assert list(distribution) == list(range(1, 11))
    assert distribution[10] == 2
    assert distribution[3] == 1
    assert distribution[5] == 0


def test_theme_counts_and_top_themes():
    counts = theme_counts([["Food", "Culture"], None, ["Food"], ["Nature"]])
    assert counts == {"Food": 2, "Culture": 1, "Nature": 1}
    assert top_themes(counts, 2) == ["Food", "Culture"]


def test_monthly_timeline_skips_missing_dates():
    timeline = monthly_timeline([date(2024, 3, 1), datetime(2024, 3, 20, 9), None, date(2024, 4, 2)])
    assert timeline == {"2024-03": 2, "2024-04": 1}


def test_top_rated_countries():
    rows = top_rated_countries([("Japan", 9), ("Peru", 6), ("Japan", 10), ("Chile", 8)], limit=2)
    assert rows == [
        {"country": "Japan", "average_rating": 9.5, "count": 2},
        {"country": "Chile", "average_rating": 8.0, "count": 1},
    ]


def test_favorite_region_first_maximum_wins():
    assert favorite_region({}) == "None"
    assert favorite_region({"Europe": 2, "Asia": 2, "Africa": 1}) == "Europe"


def test_period_keys():
    moment = datetime(2025, 1, 31, 22, 0)
    assert period_key(moment, "day") == "2025-01-31"
    assert period_key(moment, "week") == "2025-W5"
    assert period_key(moment, "month") == "2025-01"
    assert period_key(moment, "year") == "2025"


def test_period_key_week_uses_iso_year():
    assert period_key(date(2024, 12, 30), "week") == "2025-W1"


def test_time_trends_sorted_by_period():
    trends = time_trends([date(2024, 5, 1), date(2023, 1, 1), date(2024, 5, 9)], "month")
    assert trends == [{"period": "2023-01", "count": 1}, {"period": "2024-05", "count": 2}]


def test_engagement_levels():
    assert engagement_level(0) == "low"
    assert engagement_level(4) == "low"
    assert engagement_level(5) == "medium"
    assert engagement_level(19) == "medium"
    assert engagement_level(20) == "high"


def test_percent_used():
    assert percent_used(50, 0) == 0.0
    assert percent_used(1, 3) == 33.3


def test_expense_summary():
    summary = expense_summary([
        {"category": "Flights", "budget": 800, "actual": 650},
        {"category": "Food", "budget": 200, "actual": 260},
        {"category": "Misc", "budget": None, "actual": None},
    ])
    assert summary["total_budget"] == 1000.0
    assert summary["total_actual"] == 910.0
    assert summary["total_variance"] == 90.0
    assert summary["percent_used"] == 91.0
    food = summary["by_category"][1]
    assert food == {"category": "Food", "budget": 200.0, "actual": 260.0, "variance": -60.0, "percent_used": 130.0}
    assert summary["by_category"][2]["percent_used"] == 0.0


def test_expense_summary_empty():
    assert expense_summary([]) == {
        "total_budget": 0.0,
        "total_actual": 0.0,
        "total_variance": 0.0,
        "percent_used": 0.0,
        "by_category": [],
    }
