import json
from unittest.mock import MagicMock

import pytest

from tests.clients.mcp import StdioMCPClient
from weather_mcp_server.mcp_server import McpServer
from weather_mcp_server.processor.weather_processor import WeatherApiProcessor


@pytest.fixture
def server():
    """A dispatcher with no tools registered."""
    return McpServer("test-server", "1.0.0")


@pytest.fixture
def client(server):
    return StdioMCPClient(server)


@pytest.fixture
def weather_processor():
    return WeatherApiProcessor(geocoding_url="https://geo.test/v1/search", forecast_url="https://forecast.test/v1/forecast")


@pytest.fixture
def london_geocoding():
    return {
        "results": [
            {"name": "London", "latitude": 51.5074, "longitude": -0.1278, "country": "United Kingdom"},
        ]
    }


@pytest.fixture
def london_forecast():
    return {
        "current": {
            "time": "2024-01-15T12:00",
            "temperature_2m": 8.5,
            "relative_humidity_2m": 75,
            "apparent_temperature": 6.2,
            "weather_code": 3,
            "wind_speed_10m": 15.5,
            "wind_direction_10m": 225.0,
        }
    }


def make_http_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.text = json.dumps(payload) if not isinstance(payload, str) else payload
    if isinstance(payload, str):
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def http_response():
    """Factory for stubbed requests.Response objects."""
    return make_http_response


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
