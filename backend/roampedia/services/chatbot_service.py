"""Chatbot service — rule-based intent router answering travel questions from public data APIs."""

import logging
import re

from roampedia.data.chatbot_content import FAQ, HELP_TEXT, SMALL_TALK, describe_weather
from roampedia.services.country_data_client import CountryDataClient, CountryInfo

logger = logging.getLogger(__name__)

WEATHER_PATTERNS = [
    re.compile(r"weather (?:in|at|for)\s+([a-z\s]+)"),
    re.compile(r"(?:temperature|climate) (?:in|at|of)\s+([a-z\s]+)"),
    re.compile(r"how'?s? (?:the )?weather in\s+([a-z\s]+)"),
]
EXCHANGE_PATTERNS = [
    re.compile(r"(?:exchange rate|convert|currency)\s+([a-z]{3})\s+(?:to|in)\s+([a-z]{3})\b"),
    re.compile(r"\b([a-z]{3})\s+to\s+([a-z]{3})\s+(?:rate|exchange)"),
]
TIME_PATTERNS = [
    re.compile(r"(?:time|clock) (?:in|at)\s+([a-z\s]+)"),
    re.compile(r"what time is it in\s+([a-z\s]+)"),
]
WIKI_PATTERN = re.compile(r"(?:history of|wiki|wikipedia|tell me about)\s+([a-z\s]+)")
REGION_PATTERN = re.compile(r"countries in ([a-z\s]+)")
LANGUAGE_PATTERN = re.compile(r"(?:speak|spoken|speaks|language:?)\s*([a-z]+)")
EURO_PATTERN = re.compile(r"\b(?:euros?|eur)\b")
COUNTRY_PATTERNS = [
    re.compile(r"(?:capital of|about|tell me about|info on|information about|describe|explain)\s+(.+)"),
    re.compile(r"what is (.+?)(?:'s| capital| currency| language)"),
    re.compile(r"(.+?)(?:'s capital|'s currency|'s language)"),
]

# Words never worth a country lookup in the free-text fallback
FALLBACK_STOP_WORDS = {
    "the", "and", "for", "are", "was", "you", "your", "what", "who", "how", "why", "when",
    "where", "which", "can", "could", "would", "should", "tell", "show", "give", "please",
    "about", "with", "from", "that", "this", "there", "have", "has", "want", "know", "like",
    "visit", "going", "travel", "trip", "some", "any", "info", "is", "it", "me",
}
FALLBACK_MAX_WORDS = 4
WIKI_EXCERPT_LIMIT = 500


def normalize_input(text: str) -> str:
    return re.sub(r"[?!.,']", "", text.lower()).strip()


def _first_match(patterns: list[re.Pattern], text: str) -> re.Match | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None


def extract_country_name(text: str) -> str | None:
    match = _first_match(COUNTRY_PATTERNS, text)
    if not match:
        return None
    name = match.group(1).strip(" ?!.,")
    return name or None


def faq_answer(normalized: str) -> str | None:
    words = set(normalized.split())
    for keyword, answer in FAQ.items():
        if keyword in words:
            return answer
    return None


def fallback_candidates(text: str) -> list[str]:
    """Word n-grams to try as country names, longest first."""
    words = re.findall(r"[a-zA-Z]+", text)
    seen: set[str] = set()
    candidates = []
    for size in range(min(len(words), FALLBACK_MAX_WORDS), 0, -1):
        for start in range(len(words) - size + 1):
            chunk = words[start:start + size]
            candidate = " ".join(chunk)
            key = candidate.lower()
            if len(candidate) < 3 or key in seen:
                continue
            if all(w.lower() in FALLBACK_STOP_WORDS for w in chunk):
                continue
            seen.add(key)
            candidates.append(candidate)
    return candidates


def _format_number(value: float | int) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value:,}"


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def format_country(country: CountryInfo) -> str:
    status = "🗽 Independent nation" if country.independent else "⚠️ Dependent territory"
    return (
        f"{country.flag} **{country.name}**\n\n"
        f"📍 Region: {country.region} ({country.subregion})\n"
        f"🏙️ Capital: {country.capital}\n"
        f"💬 Languages: {country.languages}\n"
        f"💱 Currency: {country.currencies}\n"
        f"👥 Population: {_format_number(country.population)}\n"
        f"📏 Area: {_format_number(country.area)} km²\n"
        f"🌐 Domain: {country.tld}\n"
        f"{status}"
    )


def format_country_brief(country: CountryInfo) -> str:
    return (
        f"{country.flag} **{country.name}** — Capital: {country.capital} | "
        f"Region: {country.region} | Population: {_format_number(country.population)}"
    )


class ChatbotService:
    """Answers one message at a time; the first matching intent wins."""

    def __init__(self, client: CountryDataClient | None = None):
        self.client = client if client is not None else CountryDataClient()

    async def handle_message(self, text: str | None) -> str:
        if not text or not isinstance(text, str) or not text.strip():
            return "Please send a valid message."

        normalized = normalize_input(text)
        lowered = text.lower()

        if normalized in SMALL_TALK:
            return SMALL_TALK[normalized]

        match = _first_match(WEATHER_PATTERNS, lowered)
        if match:
            return await self._weather(match.group(1).strip())

        match = _first_match(EXCHANGE_PATTERNS, lowered)
        if match:
            return await self._exchange(match.group(1), match.group(2))

        match = _first_match(TIME_PATTERNS, lowered)
        if match:
            return await self._time(match.group(1).strip())

        # Live-data intents go first so "weather in paris" is not answered by the weather FAQ
        answer = faq_answer(normalized)
        if answer:
            return answer

        match = WIKI_PATTERN.search(lowered)
        if match and ("history" in lowered or "wiki" in lowered):
            return await self._wiki(match.group(1).strip())

        match = REGION_PATTERN.search(lowered)
        if match:
            return await self._region(match.group(1).strip())

        match = LANGUAGE_PATTERN.search(lowered)
        if match:
            return await self._language(match.group(1).strip())

        if EURO_PATTERN.search(lowered):
            return await self._euro()

        name = extract_country_name(lowered)
        if name:
            country = await self.client.get_country(name)
            if not country:
                return f"Sorry, I couldn't find information for '{name}'. Please check the spelling."
            return format_country(country)

        for candidate in fallback_candidates(text):
            country = await self.client.get_country(candidate)
            if country:
                return format_country_brief(country)

        return HELP_TEXT

    async def _weather(self, location: str) -> str:
        weather = await self.client.get_weather(location)
        if not weather:
            return f"Sorry, I couldn't find weather data for '{location}'. Try a major city name."
        fahrenheit = weather.temperature * 9 / 5 + 32
        return (
            f"🌡️ **Weather in {weather.location}, {weather.country}**\n\n"
            f"{describe_weather(weather.weather_code)}\n"
            f"Temperature: {weather.temperature}°C ({fahrenheit:.1f}°F)\n"
            f"💧 Humidity: {weather.humidity}%\n"
            f"💨 Wind Speed: {weather.wind_speed} km/h\n"
            f"🌧️ Precipitation: {weather.precipitation} mm"
        )

    async def _exchange(self, from_currency: str, to_currency: str) -> str:
        rate = await self.client.get_exchange_rate(from_currency, to_currency)
        if not rate:
            return (
                f"Sorry, I couldn't find the exchange rate for {from_currency.upper()} to "
                f"{to_currency.upper()}. Please check the currency codes."
            )
        return (
            f"💱 **Exchange Rate ({rate.date})**\n\n"
            f"1 {rate.from_currency} = {rate.rate:.4f} {rate.to_currency}\n"
            f"100 {rate.from_currency} = {rate.rate * 100:.2f} {rate.to_currency}\n"
            f"1000 {rate.from_currency} = {rate.rate * 1000:.2f} {rate.to_currency}"
        )

    async def _time(self, location: str) -> str:
        country = await self.client.get_country(location)
        if not country or not country.timezones:
            return f"Sorry, I couldn't find timezone information for '{location}'."
        local = await self.client.get_time(country.timezones[0])
        if not local:
            return f"Sorry, I couldn't fetch the current time for '{location}'."
        return (
            f"🕐 **Time in {country.name}**\n\n"
            f"{local.time}\n"
            f"{local.date}\n"
            f"⏰ Timezone: {local.timezone}"
        )

    async def _wiki(self, topic: str) -> str:
        wiki = await self.client.get_wiki_summary(topic)
        if not wiki:
            return f"Sorry, I couldn't find information about '{topic}' on Wikipedia."
        excerpt = wiki.extract
        if len(excerpt) > WIKI_EXCERPT_LIMIT:
            excerpt = excerpt[: WIKI_EXCERPT_LIMIT - 3] + "..."
        return f"📚 **{wiki.title}**\n\n{excerpt}\n\n🔗 Read more: {wiki.url}"

    async def _region(self, region: str) -> str:
        names = await self.client.countries_in_region(region)
        if names is None:
            return f"Sorry, region '{region}' not found. Try: Africa, Europe, Asia, Americas, or Oceania."
        return f"🌎 **Countries in {_capitalize(region)}** ({len(names)}):\n\n{', '.join(names)}"

    async def _language(self, language: str) -> str:
        names = await self.client.countries_speaking(language)
        if names is None:
            return (
                f"Sorry, couldn't find countries for language '{language}'. "
                "Try full language names like 'spanish' or 'french'."
            )
        return f"💬 **Countries where {_capitalize(language)} is spoken** ({len(names)}):\n\n{', '.join(names)}"

    async def _euro(self) -> str:
        names = await self.client.countries_using_currency("eur")
        if names is None:
            return "Sorry, couldn't fetch Euro-using countries."
        return f"💱 **Countries using EUR** ({len(names)}):\n\n{', '.join(names)}"


chatbot_service = ChatbotService()
