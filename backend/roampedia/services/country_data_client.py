"""Country data client — REST Countries, Open-Meteo, exchange rates, world time and Wikipedia lookups."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from urllib.parse import quote

from roampedia.config import settings
from roampedia.data.chatbot_content import COUNTRY_ALIASES
from roampedia.services.response_cache import ResponseCache
from roampedia.services.upstream_fetcher import UpstreamFetcher

logger = logging.getLogger(__name__)


@dataclass
class CountryInfo:
    name: str
    capital: str
    capital_lat: float | None
    capital_lng: float | None
    region: str
    subregion: str
    population: int
    area: float
    currencies: str
    currency_codes: list[str]
    languages: str
    flag: str
    independent: bool
    timezones: list[str] = field(default_factory=list)
    borders: list[str] = field(default_factory=list)
    tld: str = "Unknown"


@dataclass
class Weather:
    location: str
    country: str | None
    temperature: float
    humidity: float | None
    precipitation: float | None
    wind_speed: float | None
    weather_code: int | None


@dataclass
class ExchangeRate:
    from_currency: str
    to_currency: str
    rate: float
    date: str | None


@dataclass
class LocalTime:
    timezone: str
    datetime: str
    time: str
    date: str


@dataclass
class WikiSummary:
    title: str
    extract: str
    url: str | None


def parse_country(c: dict, fallback_name: str) -> CountryInfo:
    """Map a REST Countries v3.1 record onto CountryInfo."""
    capital = c.get("capital")
    if isinstance(capital, list):
        capital = capital[0] if capital else None
    latlng = (c.get("capitalInfo") or {}).get("latlng") or []
    currencies = c.get("currencies") or {}
    currency_text = ", ".join(
        f"{cur.get('name')} ({code})" + (f" {cur['symbol']}" if cur.get("symbol") else "")
        for code, cur in currencies.items()
    )
    languages = c.get("languages") or {}
    tld = c.get("tld") or []

    return CountryInfo(
        name=(c.get("name") or {}).get("common") or fallback_name,
        capital=capital or "No official capital",
        capital_lat=latlng[0] if len(latlng) > 0 else None,
        capital_lng=latlng[1] if len(latlng) > 1 else None,
        region=c.get("region") or "Unknown",
        subregion=c.get("subregion") or "Unknown",
        population=c.get("population") or 0,
        area=c.get("area") or 0,
        currencies=currency_text or "Unknown",
        currency_codes=list(currencies.keys()),
        languages=", ".join(languages.values()) if languages else "Unknown",
        flag=c.get("flag") or "🏳️",
        independent=bool(c.get("independent")),
        timezones=c.get("timezones") or [],
        borders=c.get("borders") or [],
        tld=tld[0] if tld else "Unknown",
    )


def format_local_time(raw: str) -> tuple[str, str]:
    """Format an ISO timestamp in its own UTC offset as ("03:05 PM", "Monday, January 6, 2025")."""
    dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    return dt.strftime("%I:%M %p"), f"{dt:%A}, {dt:%B} {dt.day}, {dt.year}"


def common_names(records: list[dict], independent_only: bool = False) -> list[str]:
    names = []
    for c in records:
        if independent_only and c.get("independent") is False:
            continue
        name = (c.get("name") or {}).get("common")
        if name:
            names.append(name)
    return sorted(names)


class CountryDataClient:
    """Adapter over the public data APIs the chatbot answers from.

    Owns its caches: a general one (1 hour) and a short one for time-of-day lookups.
    Every method returns None when the upstream cannot answer.
    """

    def __init__(
        self,
        fetcher: UpstreamFetcher | None = None,
        cache: ResponseCache | None = None,
        time_cache: ResponseCache | None = None,
    ):
        self.fetcher = fetcher if fetcher is not None else UpstreamFetcher()
        self.cache = cache if cache is not None else ResponseCache(settings.response_cache_ttl_seconds)
        self.time_cache = time_cache if time_cache is not None else ResponseCache(settings.time_cache_ttl_seconds)

    async def get_country(self, name: str) -> CountryInfo | None:
        normalized = name.lower().strip()
        search_name = COUNTRY_ALIASES.get(normalized, normalized)
        cache_key = f"country:{search_name}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        base = f"{settings.rest_countries_base_url}/name/{quote(search_name)}"
        data = await self.fetcher.fetch_json(base, params={"fullText": "true"})
        if not isinstance(data, list) or not data:
            data = await self.fetcher.fetch_json(base)
        if not isinstance(data, list) or not data:
            return None

        record = data[0]
        if len(data) > 1:
            independent = [c for c in data if c.get("independent") is True]
            if independent:
                record = independent[0]

        info = parse_country(record, name)
        self.cache.set(cache_key, info)
        return info

    async def get_weather(self, city: str) -> Weather | None:
        cache_key = f"weather:{city.lower()}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        geo = await self.fetcher.fetch_json(
            f"{settings.geocoding_base_url}/search", params={"name": city, "count": 1}
        )
        results = (geo or {}).get("results") if isinstance(geo, dict) else None
        if not results:
            return None
        place = results[0]
        if place.get("latitude") is None or place.get("longitude") is None:
            return None

        forecast = await self.fetcher.fetch_json(
            f"{settings.forecast_base_url}/forecast",
            params={
                "latitude": place["latitude"],
                "longitude": place["longitude"],
                "current": "temperature_2m,relative_humidity_2m,precipitation,weather_code,wind_speed_10m",
                "timezone": "auto",
            },
        )
        current = forecast.get("current") if isinstance(forecast, dict) else None
        if not current or current.get("temperature_2m") is None:
            return None

        weather = Weather(
            location=place.get("name", city),
            country=place.get("country"),
            temperature=current.get("temperature_2m"),
            humidity=current.get("relative_humidity_2m"),
            precipitation=current.get("precipitation"),
            wind_speed=current.get("wind_speed_10m"),
            weather_code=current.get("weather_code"),
        )
        self.cache.set(cache_key, weather)
        return weather

    async def get_exchange_rate(self, from_currency: str, to_currency: str) -> ExchangeRate | None:
        base, target = from_currency.upper(), to_currency.upper()
        cache_key = f"exchange:{base}:{target}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        data = await self.fetcher.fetch_json(f"{settings.exchange_rate_base_url}/latest/{base}")
        rates = data.get("rates") if isinstance(data, dict) else None
        if not rates or rates.get(target) is None:
            return None

        rate = ExchangeRate(from_currency=base, to_currency=target, rate=rates[target], date=data.get("date"))
        self.cache.set(cache_key, rate)
        return rate

    async def get_time(self, timezone: str) -> LocalTime | None:
        cache_key = f"time:{timezone}"
        cached = self.time_cache.get(cache_key)
        if cached is not None:
            return cached

        data = await self.fetcher.fetch_json(f"{settings.world_time_base_url}/timezone/{quote(timezone)}")
        if not isinstance(data, dict) or not data.get("datetime"):
            return None

        try:
            time_text, date_text = format_local_time(data["datetime"])
        except ValueError as e:
            logger.warning(f"Unparseable time for {timezone}: {e}")
            return None

        local = LocalTime(
            timezone=data.get("timezone", timezone),
            datetime=data["datetime"],
            time=time_text,
            date=date_text,
        )
        self.time_cache.set(cache_key, local)
        return local

    async def get_wiki_summary(self, topic: str) -> WikiSummary | None:
        cache_key = f"wiki:{topic.lower()}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        data = await self.fetcher.fetch_json(f"{settings.wikipedia_base_url}/page/summary/{quote(topic)}")
        if not isinstance(data, dict) or data.get("type") == "disambiguation":
            return None

        summary = WikiSummary(
            title=data.get("title", topic),
            extract=data.get("extract", ""),
            url=((data.get("content_urls") or {}).get("desktop") or {}).get("page"),
        )
        self.cache.set(cache_key, summary)
        return summary

    async def _country_list(self, cache_key: str, path: str) -> list[dict] | None:
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached
        data = await self.fetcher.fetch_json(f"{settings.rest_countries_base_url}/{path}")
        if not isinstance(data, list):
            return None
        self.cache.set(cache_key, data)
        return data

    async def countries_in_region(self, region: str) -> list[str] | None:
        data = await self._country_list(f"region:{region}", f"region/{quote(region)}")
        return common_names(data, independent_only=True) if data is not None else None

    async def countries_speaking(self, language: str) -> list[str] | None:
        data = await self._country_list(f"lang:{language}", f"lang/{quote(language)}")
        return common_names(data) if data is not None else None

    async def countries_using_currency(self, currency: str) -> list[str] | None:
        code = currency.lower()
        data = await self._country_list(f"currency:{code}", f"currency/{quote(code)}")
        return common_names(data) if data is not None else None
