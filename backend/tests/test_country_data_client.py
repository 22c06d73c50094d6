import pytest

from roampedia.config import settings
from roampedia.services.country_data_client import (
    CountryDataClient,
    common_names,
    format_local_time,
    parse_country,
)
from roampedia.services.response_cache import ResponseCache

JAPAN = {
    "name": {"common": "Japan"},
    "capital": ["Tokyo"],
    "capitalInfo": {"latlng": [35.68, 139.75]},
    "region": "Asia",
    "subregion": "Eastern Asia",
    "population": 125836021,
    "area": 377930.0,
    "currencies": {"JPY": {"name": "Japanese yen", "symbol": "¥"}},
    "languages": {"jpn": "Japanese"},
    "flag": "🇯🇵",
    "independent": True,
    "timezones": ["UTC+09:00"],
    "tld": [".jp"],
}


class FakeFetcher:
    """Serves canned JSON keyed by (url, frozen params) and records every request."""

    def __init__(self, responses: dict):
        self.responses = responses
        self.calls = []

    async def fetch_json(self, url, params=None):
        key = (url, tuple(sorted((params or {}).items())))
        self.calls.append(key)
        return self.responses.get(key, self.responses.get(url))


@pytest.fixture
def make_client(clock):
    def _make(responses):
        fetcher = FakeFetcher(responses)
        client = CountryDataClient(
            fetcher=fetcher,
            cache=ResponseCache(3600, clock=clock),
            time_cache=ResponseCache(300, clock=clock),
        )
        return client, fetcher

    return _make


def test_parse_country():
    info = parse_country(JAPAN, "japan")
    assert info.name == "Japan"
    assert info.capital == "Tokyo"
    assert info.capital_lat == 35.68
    assert info.currencies == "Japanese yen (JPY) ¥"
    assert info.currency_codes == ["JPY"]
    assert info.languages == "Japanese"
    assert info.tld == ".jp"


def test_parse_country_defaults():
    info = parse_country({}, "Nowhere")
    assert info.name == "Nowhere"
    assert info.capital == "No official capital"
    assert info.languages == "Unknown"
    assert info.independent is False


def test_format_local_time_uses_the_zone_offset():
    assert format_local_time("2025-01-06T15:05:00.123456+09:00") == ("03:05 PM", "Monday, January 6, 2025")


def test_common_names_sorted_and_optionally_independent_only():
    records = [
        {"name": {"common": "Spain"}, "independent": True},
        {"name": {"common": "Aruba"}, "independent": False},
        {"name": {"common": "France"}},
    ]
    assert common_names(records) == ["Aruba", "France", "Spain"]
    assert common_names(records, independent_only=True) == ["France", "Spain"]


async def test_get_country_resolves_alias_and_falls_back_to_partial_search(make_client):
    base = f"{settings.rest_countries_base_url}/name/united%20states"
    usa = {**JAPAN, "name": {"common": "United States"}}
    client, fetcher = make_client({(base, ()): [usa]})

    info = await client.get_country("USA")
    assert info.name == "United States"
    assert fetcher.calls == [(base, (("fullText", "true"),)), (base, ())]


async def test_get_country_prefers_independent_match(make_client):
    base = f"{settings.rest_countries_base_url}/name/guinea"
    territory = {"name": {"common": "Equatorial Guinea Territory"}, "independent": False}
    nation = {"name": {"common": "Guinea"}, "independent": True}
    client, _ = make_client({base: [territory, nation]})

    assert (await client.get_country("Guinea")).name == "Guinea"


async def test_get_country_is_cached(make_client):
    base = f"{settings.rest_countries_base_url}/name/japan"
    client, fetcher = make_client({base: [JAPAN]})

    await client.get_country("Japan")
    await client.get_country("japan ")
    assert len(fetcher.calls) == 1


async def test_get_country_not_found(make_client):
    client, _ = make_client({})
    assert await client.get_country("Atlantis") is None


async def test_get_weather(make_client):
    geo_url = f"{settings.geocoding_base_url}/search"
    forecast_url = f"{settings.forecast_base_url}/forecast"
    client, _ = make_client({
        geo_url: {"results": [{"name": "Paris", "country": "France", "latitude": 48.85, "longitude": 2.35}]},
        forecast_url: {"current": {
            "temperature_2m": 18.5,
            "relative_humidity_2m": 60,
            "precipitation": 0.0,
            "wind_speed_10m": 12.0,
            "weather_code": 2,
        }},
    })

    weather = await client.get_weather("paris")
    assert weather.location == "Paris"
    assert weather.country == "France"
    assert weather.temperature == 18.5
    assert weather.weather_code == 2


async def test_get_weather_unknown_city(make_client):
    client, _ = make_client({f"{settings.geocoding_base_url}/search": {"results": []}})
    assert await client.get_weather("atlantis") is None


async def test_get_exchange_rate(make_client):
    url = f"{settings.exchange_rate_base_url}/latest/USD"
    client, _ = make_client({url: {"rates": {"EUR": 0.92}, "date": "2025-01-06"}})

    rate = await client.get_exchange_rate("usd", "eur")
    assert (rate.from_currency, rate.to_currency, rate.rate, rate.date) == ("USD", "EUR", 0.92, "2025-01-06")
    assert await client.get_exchange_rate("usd", "xyz") is None


async def test_get_time_uses_short_lived_cache(make_client, clock):
    url = f"{settings.world_time_base_url}/timezone/Asia/Tokyo"
    client, fetcher = make_client({url: {"datetime": "2025-01-06T15:05:00+09:00", "timezone": "Asia/Tokyo"}})

    local = await client.get_time("Asia/Tokyo")
    assert local.time == "03:05 PM"
    await client.get_time("Asia/Tokyo")
    assert len(fetcher.calls) == 1

    clock.advance(301)
    await client.get_time("Asia/Tokyo")
    assert len(fetcher.calls) == 2


async def test_wiki_disambiguation_is_not_an_answer(make_client):
    url = f"{settings.wikipedia_base_url}/page/summary/Georgia"
    client, _ = make_client({url: {"type": "disambiguation", "title": "Georgia"}})
    assert await client.get_wiki_summary("Georgia") is None


async def test_wiki_summary(make_client):
    url = f"{settings.wikipedia_base_url}/page/summary/Rome"
    client, _ = make_client({url: {
        "type": "standard",
        "title": "Rome",
        "extract": "Rome is the capital city of Italy.",
        "content_urls": {"desktop": {"page": "https://en.wikipedia.org/wiki/Rome"}},
    }})

    wiki = await client.get_wiki_summary("Rome")
    assert wiki.title == "Rome"
    assert wiki.url == "https://en.wikipedia.org/wiki/Rome"


async def test_region_lists_independent_countries(make_client):
    url = f"{settings.rest_countries_base_url}/region/europe"
    client, _ = make_client({url: [
        {"name": {"common": "Spain"}, "independent": True},
        {"name": {"common": "Gibraltar"}, "independent": False},
    ]})
    assert await client.countries_in_region("europe") == ["Spain"]


async def test_region_lookup_failure_is_none(make_client):
    client, _ = make_client({})
    assert await client.countries_in_region("atlantis") is None


def test_injected_caches_are_used_even_when_empty(clock):
    cache = ResponseCache(3600, clock=clock)
    time_cache = ResponseCache(300, clock=clock)
    fetcher = FakeFetcher({})
    client = CountryDataClient(fetcher=fetcher, cache=cache, time_cache=time_cache)
    assert client.cache is cache
    assert client.time_cache is time_cache
    assert client.fetcher is fetcher
