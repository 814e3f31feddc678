import os

import yaml

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")


class ConfigError(Exception):
    pass


def _section(config, name):
    section = config.get(name) if isinstance(config, dict) else None
    return section if isinstance(section, dict) else {}


# Load configuration from environment variables, then YAML as fallback
def load_config(config_path=None):
    config_path = config_path or os.environ.get("WEATHER_MCP_CONFIG") or DEFAULT_CONFIG_PATH
    config = {}
    try:
        with open(config_path) as file:
            config = yaml.safe_load(file) or {}
    except FileNotFoundError:
        config = {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML configuration: {e}") from e

    server = _section(config, "server")
    weather = _section(config, "weather")

    # Environment variable overrides
    server_name = os.environ.get("MCP_SERVER_NAME") or server.get("name", "weather-mcp")
    server_version = os.environ.get("MCP_SERVER_VERSION") or str(server.get("version", "1.0.0"))
    log_level = str(os.environ.get("MCP_LOG_LEVEL") or server.get("log_level", "INFO")).upper()

    geocoding_url = os.environ.get("WEATHER_GEOCODING_URL") or weather.get("geocoding_url", "https://geocoding-api.open-meteo.com/v1/search")
    forecast_url = os.environ.get("WEATHER_FORECAST_URL") or weather.get("forecast_url", "https://api.open-meteo.com/v1/forecast")
    ssl_verify = os.environ.get("WEATHER_SSL_VERIFY") or str(weather.get("ssl_verify", "true"))
    timeout = os.environ.get("WEATHER_TIMEOUT") or weather.get("timeout", 10)
    try:
        timeout = float(timeout)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid weather timeout: {timeout}") from e

    return {
        "server": {"name": server_name, "version": server_version, "log_level": log_level},
        "weather": {"geocoding_url": geocoding_url, "forecast_url": forecast_url, "timeout": timeout, "ssl_verify": ssl_verify},
    }
