"""Chatbot content — canned answers, country aliases and weather code descriptions."""

FAQ: dict[str, str] = {
    "map": "🗺️ Explore the interactive world map on Roampedia's homepage.",
    "roampedia": "🌍 Roampedia is a travel exploration platform.",
    "trivia": "🎯 Play trivia games to test your knowledge!",
    "login": "🔐 Click the profile icon to sign in.",
    "weather": "☁️ See live weather on country pages.",
}

SMALL_TALK: dict[str, str] = {
    "hi": "Hi! 👋 Ask me about any country!",
    "hello": "Hello! 🌍 Example: 'Capital of India?'",
    "hey": "Hey there! 🌎 Try asking about any country!",
    "how are you": "I'm here to help you explore the world! 🌎",
    "what can you do": (
        "I can tell you about countries, weather, exchange rates, time zones, and more! "
        "Try: 'Weather in Paris' or 'Exchange rate USD to EUR'"
    ),
}

# Colloquial names → names the countries API resolves
COUNTRY_ALIASES: dict[str, str] = {
    "usa": "united states",
    "us": "united states",
    "america": "united states",
    "uk": "united kingdom",
    "britain": "united kingdom",
    "england": "united kingdom",
    "uae": "united arab emirates",
    "korea": "south korea",
    "congo": "democratic republic of the congo",
}

# WMO weather interpretation codes (open-meteo)
WEATHER_CODES: dict[int, str] = {
    0: "Clear sky ☀️",
    1: "Mainly clear 🌤️", 2: "Partly cloudy ⛅", 3: "Overcast ☁️",
    45: "Foggy 🌫️", 48: "Foggy 🌫️",
    51: "Light drizzle 🌦️", 53: "Moderate drizzle 🌦️", 55: "Dense drizzle 🌧️",
    61: "Slight rain 🌧️", 63: "Moderate rain 🌧️", 65: "Heavy rain ⛈️",
    71: "Slight snow 🌨️", 73: "Moderate snow ❄️", 75: "Heavy snow 🌨️",
    80: "Rain showers 🌦️", 81: "Rain showers 🌧️", 82: "Heavy rain showers ⛈️",
    95: "Thunderstorm ⛈️", 96: "Thunderstorm with hail ⛈️",
}

HELP_TEXT = (
    "🤔 I didn't quite understand that. Try asking:\n\n"
    "**Country Info:**\n"
    "• 'What is the capital of India?'\n"
    "• 'Tell me about Japan'\n\n"
    "**Weather:**\n"
    "• 'Weather in Paris'\n"
    "• 'Temperature in Tokyo'\n\n"
    "**Time:**\n"
    "• 'Time in New York'\n"
    "• 'What time is it in London?'\n\n"
    "**Exchange Rates:**\n"
    "• 'Exchange rate USD to EUR'\n"
    "• 'Convert GBP to JPY'\n\n"
    "**Other:**\n"
    "• 'Countries in Europe'\n"
    "• 'Countries that speak Spanish'"
)


def describe_weather(code: int | None) -> str:
    return WEATHER_CODES.get(code, "Unknown")
