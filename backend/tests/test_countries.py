from roampedia.routers.countries import clean_country_names
from roampedia.services.recommendation.engine import exclude_countries


def test_clean_country_names():
    raw = ["Japan", "France,  Italy", None, " Japan ", "undefined", " - ", "new   zealand", "Japan"]
    assert clean_country_names(raw) == ["France", "Italy", "Japan", "new zealand"]


def test_exclude_countries_by_name_or_code(make_country):
    countries = [
        make_country("Japan", code="JPN"),
        make_country("Peru", code="PER"),
        make_country("Chile", code=None),
    ]
    kept = exclude_countries(countries, {"JPN", "Chile"})
    assert [c["country"] for c in kept] == ["Peru"]


def test_exclude_nothing(make_country):
    countries = [make_country("Japan")]
    assert exclude_countries(countries, set()) == countries
