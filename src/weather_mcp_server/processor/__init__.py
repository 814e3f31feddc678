from weather_mcp_server.processor.weather_processor import WeatherApiError, WeatherApiProcessor

__all__ = ["WeatherApiError", "WeatherApiProcessor"]
