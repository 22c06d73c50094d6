import pytest

from roampedia.data.chatbot_content import FAQ, HELP_TEXT, SMALL_TALK
from roampedia.services.chatbot_service import (
    ChatbotService,
    extract_country_name,
    faq_answer,
    fallback_candidates,
    normalize_input,
)
from roampedia.services.country_data_client import CountryInfo, ExchangeRate, LocalTime, Weather, WikiSummary


def _country(name, **overrides):
    fields = dict(
        name=name,
        capital="Lisbon",
        capital_lat=38.7,
        capital_lng=-9.1,
        region="Europe",
        subregion="Southern Europe",
        population=10_300_000,
        area=92090.0,
        currencies="Euro (EUR) €",
        currency_codes=["EUR"],
        languages="Portuguese",
        flag="🇵🇹",
        independent=True,
        timezones=["Europe/Lisbon"],
        tld=".pt",
    )
    fields.update(overrides)
    return CountryInfo(**fields)


class FakeClient:
    def __init__(self, countries=None):
        self.countries = {k.lower(): v for k, v in (countries or {}).items()}
        self.lookups = []

    async def get_country(self, name):
        self.lookups.append(name)
        return self.countries.get(name.lower().strip())

    async def get_weather(self, city):
        if city != "paris":
            return None
        return Weather("Paris", "France", 20.0, 55, 0.0, 10.5, 0)

    async def get_exchange_rate(self, from_currency, to_currency):
        if (from_currency, to_currency) != ("usd", "eur"):
            return None
        return ExchangeRate("USD", "EUR", 0.9, "2025-01-06")

    async def get_time(self, timezone):
        return LocalTime(timezone, "2025-01-06T15:05:00+00:00", "03:05 PM", "Monday, January 6, 2025")

    async def get_wiki_summary(self, topic):
        return WikiSummary(topic.title(), "x" * 600, "https://en.wikipedia.org/wiki/Rome")

    async def countries_in_region(self, region):
        return ["France", "Spain"] if region == "europe" else None

    async def countries_speaking(self, language):
        return ["Mexico", "Spain"] if language == "spanish" else None

    async def countries_using_currency(self, currency):
        return ["France", "Germany"]


@pytest.fixture
def bot():
    return ChatbotService(client=FakeClient({"portugal": _country("Portugal")}))


def test_normalize_input_strips_punctuation():
    assert normalize_input("  Hello, World?! ") == "hello world"


def test_extract_country_name():
    assert extract_country_name("capital of france") == "france"
    assert extract_country_name("what is japan's currency") == "japan"
    assert extract_country_name("i like trains") is None


def test_faq_matches_whole_words_only():
    assert faq_answer("show me the map") == FAQ["map"]
    assert faq_answer("roadmap for the app") is None


def test_fallback_candidates_longest_first_and_skip_stop_words():
    candidates = fallback_candidates("I love New Zealand")
    assert candidates.index("New Zealand") < candidates.index("Zealand")
    assert "the" not in [c.lower() for c in fallback_candidates("tell me the way")]
    assert all(len(c) >= 3 for c in candidates)


async def test_blank_message(bot):
    assert await bot.handle_message("   ") == "Please send a valid message."
    assert await bot.handle_message(None) == "Please send a valid message."


async def test_small_talk(bot):
    assert await bot.handle_message("Hi!") == SMALL_TALK["hi"]


async def test_weather(bot):
    reply = await bot.handle_message("What's the weather in Paris?")
    assert "Weather in Paris, France" in reply
    assert "20.0°C (68.0°F)" in reply


async def test_weather_not_found(bot):
    reply = await bot.handle_message("weather in atlantis")
    assert reply == "Sorry, I couldn't find weather data for 'atlantis'. Try a major city name."


async def test_exchange_rate(bot):
    reply = await bot.handle_message("convert usd to eur")
    assert "1 USD = 0.9000 EUR" in reply
    assert "100 USD = 90.00 EUR" in reply


async def test_time_uses_country_timezone(bot):
    reply = await bot.handle_message("What time is it in Portugal?")
    assert "Time in Portugal" in reply
    assert "03:05 PM" in reply


async def test_live_weather_wins_over_weather_faq(bot):
    assert await bot.handle_message("weather in paris") != FAQ["weather"]
    assert await bot.handle_message("how do I see the weather") == FAQ["weather"]


async def test_wiki_history_is_truncated(bot):
    reply = await bot.handle_message("history of rome")
    assert reply.startswith("📚 **Rome**")
    assert "x" * 497 + "..." in reply


async def test_region_language_and_euro(bot):
    assert "Countries in Europe** (2)" in await bot.handle_message("countries in europe")
    assert "Countries where Spanish is spoken** (2)" in await bot.handle_message("which countries speak spanish")
    assert "Countries using EUR" in await bot.handle_message("which countries use the euro")


async def test_euro_needs_a_whole_word(bot):
    reply = await bot.handle_message("tell me about europe")
    assert "Countries using EUR" not in reply


async def test_country_info(bot):
    reply = await bot.handle_message("Tell me about Portugal")
    assert "🇵🇹 **Portugal**" in reply
    assert "👥 Population: 10,300,000" in reply
    assert "📏 Area: 92,090 km²" in reply


async def test_country_info_not_found(bot):
    reply = await bot.handle_message("capital of narnia")
    assert reply == "Sorry, I couldn't find information for 'narnia'. Please check the spelling."


async def test_free_text_fallback_finds_country(bot):
    reply = await bot.handle_message("I dream of Portugal")
    assert reply.startswith("🇵🇹 **Portugal** — Capital: Lisbon")


async def test_help_text_when_nothing_matches(bot):
    assert await bot.handle_message("qwerty zxcvb") == HELP_TEXT
