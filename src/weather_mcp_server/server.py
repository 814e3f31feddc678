import logging
import sys

from weather_mcp_server.config import load_config
from weather_mcp_server.mcp_server import McpServer
from weather_mcp_server.processor.weather_processor import WeatherApiProcessor

logger = logging.getLogger(__name__)

WEATHER_TOOL = {
    "name": "get_current_weather",
    "description": "Get current weather for a location",
    "inputSchema": {
        "type": "object",
        "properties": {"location": {"type": "string", "description": "City name"}},
        "required": ["location"],
    },
}


def make_weather_handler(weather_processor):
    def get_current_weather(arguments):
        """Fetch current weather for the 'location' argument."""
        location = arguments.get("location")
        if not isinstance(location, str) or not location.strip():
            raise ValueError("Missing required argument: location")
        return weather_processor.fetch_current_weather(location.strip())

    return get_current_weather


def build_server(config):
    server_config = config.get("server", {})
    weather_config = config.get("weather", {})
    weather_processor = WeatherApiProcessor(
        geocoding_url=weather_config.get("geocoding_url"),
        forecast_url=weather_config.get("forecast_url"),
        timeout=weather_config.get("timeout", 10),
        ssl_verify=weather_config.get("ssl_verify", "true"),
    )
    server = McpServer(server_config.get("name", "weather-mcp"), server_config.get("version", "1.0.0"))
    server.add_tool(WEATHER_TOOL["name"], WEATHER_TOOL["description"], WEATHER_TOOL["inputSchema"], make_weather_handler(weather_processor))
    return server


def configure_logging(level):
    log_level = getattr(logging, level, None)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    # stdout carries the protocol, so logs go to stderr
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )


def main():
    config = load_config()
    configure_logging(config["server"]["log_level"])
    server = build_server(config)
    server.run()


if __name__ == "__main__":
    main()
