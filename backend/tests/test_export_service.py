from datetime import date

from roampedia.services.export_service import (
    render_country_popularity,
    render_engagement,
    render_experience_journal,
    render_statistics,
    render_system_statistics,
    render_travel_summary,
    render_users_summary,
)


def _is_pdf(data: bytes) -> bool:
    return data.startswith(b"%PDF") and len(data) > 500


def test_travel_summary():
    visited = [{"country_code": "JP", "country_name": "Japan", "region": "Asia", "date_visited": date(2024, 4, 1)}]
    wishlist = [{"country_code": "PE", "country_name": None, "region": None}]
    assert _is_pdf(render_travel_summary("a@example.com", visited, wishlist, [8, 9]))


def test_travel_summary_empty_profile():
    assert _is_pdf(render_travel_summary("a@example.com", [], [], []))


def test_experience_journal_escapes_markup():
    experiences = [
        {
            "country": "Fish & Chips <Land>",
            "rating": 7,
            "themes": ["Food"],
            "from_date": date(2024, 1, 1),
            "to_date": None,
            "experience": "Loved it <b>a lot</b> & more\nSecond line",
        },
        {"country": "Japan", "rating": 10, "themes": None, "experience": None},
    ]
    assert _is_pdf(render_experience_journal("Ana", experiences))


def test_experience_journal_without_entries():
    assert _is_pdf(render_experience_journal("Ana", []))


def test_statistics():
    assert _is_pdf(render_statistics({"Asia": 2}, {"Food": 3, "Nature": 1}))
    assert _is_pdf(render_statistics({}, {}))


def test_admin_reports():
    users = [{"email": "a@example.com", "created_at": date(2024, 1, 1), "visited": 3, "wishlist": 1, "experiences": 0}]
    assert _is_pdf(render_users_summary(users))
    assert _is_pdf(render_country_popularity([{"country_code": "JP", "country_name": "Japan", "count": 4}]))
    rows = [{"email": "a@example.com", "total": 4, "visited": 3, "wishlist": 1, "experiences": 0}]
    assert _is_pdf(render_engagement(rows))
    assert _is_pdf(render_system_statistics({"users": 0, "visited": 0, "wishlist": 0, "experiences": 0}))
