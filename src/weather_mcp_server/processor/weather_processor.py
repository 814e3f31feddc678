import logging
import math

from weather_mcp_server.processor.processor import Processor, ProcessorError

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_USER_AGENT = "Python-MCP-Weather-Server/1.0"

CURRENT_FIELDS = [
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "weather_code",
    "wind_speed_10m",
    "wind_direction_10m",
]

COMPASS_DIRECTIONS = ["N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE", "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"]

# WMO weather interpretation codes
WEATHER_CODE_DESCRIPTIONS = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Foggy",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Freezing drizzle",
    57: "Freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Freezing rain",
    67: "Freezing rain",
    71: "Slight snow",
    73: "Moderate snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with hail",
    99: "Thunderstorm with hail",
}


class WeatherApiError(ProcessorError):
    pass


def degrees_to_compass(degrees):
    """Convert a wind direction in degrees to one of 16 compass points (22.5 degrees each)."""
    index = int(math.floor(float(degrees) / 22.5 + 0.5)) % len(COMPASS_DIRECTIONS)
    return COMPASS_DIRECTIONS[index]


def weather_code_to_description(code):
    if isinstance(code, bool):
        return "Unknown"
    if isinstance(code, float) and code.is_integer():
        code = int(code)
    return WEATHER_CODE_DESCRIPTIONS.get(code, "Unknown")


class WeatherApiProcessor(Processor):
    error_class = WeatherApiError

    def __init__(self, geocoding_url=GEOCODING_URL, forecast_url=FORECAST_URL, timeout=10, user_agent=DEFAULT_USER_AGENT, ssl_verify="true"):
        super().__init__(timeout=timeout, user_agent=user_agent, ssl_verify=ssl_verify)
        self.geocoding_url = geocoding_url
        self.forecast_url = forecast_url

    def geocode(self, location):
        """Resolve a location name to the best matching Open-Meteo geocoding result."""
        params = {"name": location, "count": 1, "language": "en", "format": "json"}
        data = self._get_json(self.geocoding_url, params=params)
        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            logger.error(f"Geocoding returned no results for: {location}")
            raise WeatherApiError(f"Location not found: {location}")
        return results[0]

    def fetch_current_weather(self, location):
        """
        Fetch current conditions for a location name.
        Geocodes the name first, then queries the forecast API for the matched coordinates.
        Raises WeatherApiError if the location is unknown or the forecast has no current data.
        """
        coords = self.geocode(location)
        params = {
            "latitude": coords["latitude"],
            "longitude": coords["longitude"],
            "current": ",".join(CURRENT_FIELDS),
            "timezone": "auto",
        }
        data = self._get_json(self.forecast_url, params=params)
        current = data.get("current") if isinstance(data, dict) else None
        if not current:
            logger.error(f"Forecast response has no current conditions for {coords.get('name', location)}: {data}")
            raise WeatherApiError("Failed to fetch weather data")

        return {
            "location": coords.get("name", location),
            "country": coords.get("country", ""),
            "coordinates": {"latitude": coords["latitude"], "longitude": coords["longitude"]},
            "temperature": {
                "current": current["temperature_2m"],
                "feels_like": current["apparent_temperature"],
                "unit": "°C",
            },
            "humidity": f"{current['relative_humidity_2m']}%",
            "wind": {
                "speed": current["wind_speed_10m"],
                "direction": degrees_to_compass(current["wind_direction_10m"]),
                "unit": "km/h",
            },
            "conditions": weather_code_to_description(current["weather_code"]),
            "timestamp": current["time"],
        }
