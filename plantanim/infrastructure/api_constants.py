"""
Weather API endpoint constants and location data.

This module contains the Open-Meteo endpoint paths, the requested variables,
the weather code tables and the municipality coordinates used to resolve a
farmer's location.
"""
from typing import Dict, Tuple


# Open-Meteo API Endpoints
class OpenMeteoEndpoints:
    """Open-Meteo endpoint paths."""

    FORECAST = "/v1/forecast"

    DAILY_VARIABLES = ",".join([
        "weathercode",
        "temperature_2m_max",
        "temperature_2m_min",
        "precipitation_probability_max",
        "precipitation_sum",
        "windspeed_10m_max",
    ])

    @classmethod
    def forecast_params(
        cls, latitude: float, longitude: float, forecast_days: int, timezone: str = "auto"
    ) -> Dict[str, object]:
        """
        Query parameters for a forecast request.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees
            forecast_days: Number of daily entries to request
            timezone: IANA zone for daily boundaries ("auto" uses the coordinates)

        Returns:
            Query parameter mapping
        """
        return {
            "latitude": latitude,
            "longitude": longitude,
            "daily": cls.DAILY_VARIABLES,
            "current_weather": "true",
            "windspeed_unit": "kmh",
            "forecast_days": forecast_days,
            "timezone": timezone,
        }


# API Configuration Constants
class APIConstants:
    """General API configuration constants."""

    CONTENT_TYPE_JSON = "application/json"


# WMO weather codes → icon names
WEATHER_CODE_ICONS: Dict[int, str] = {
    0: "wb-sunny",
    1: "wb-cloudy", 2: "wb-cloudy", 3: "wb-cloudy",
    45: "blur-on", 48: "blur-on",
    51: "grain", 53: "grain", 55: "grain",
    56: "ac-unit", 57: "ac-unit",
    61: "grain", 63: "grain", 65: "grain",
    66: "ac-unit", 67: "ac-unit",
    71: "ac-unit", 73: "ac-unit", 75: "ac-unit", 77: "ac-unit",
    80: "grain", 81: "grain", 82: "grain",
    85: "ac-unit", 86: "ac-unit",
    95: "flash-on", 96: "flash-on", 99: "flash-on",
}
DEFAULT_ICON = "wb-cloudy"

# WMO weather codes → short summaries
WEATHER_CODE_SUMMARIES: Dict[int, str] = {
    0: "Clear sky",
    1: "Partly cloudy", 2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy conditions", 48: "Foggy conditions",
    51: "Light drizzle", 53: "Light drizzle", 55: "Light drizzle",
    56: "Freezing drizzle", 57: "Freezing drizzle",
    61: "Rain showers", 63: "Rain showers", 65: "Rain showers",
    66: "Freezing rain", 67: "Freezing rain",
    71: "Snowfall", 73: "Snowfall", 75: "Snowfall",
    80: "Heavy rain showers", 81: "Heavy rain showers", 82: "Heavy rain showers",
    95: "Thunderstorm",
    96: "Thunderstorm with hail", 99: "Thunderstorm with hail",
}
DEFAULT_SUMMARY = "Changing conditions"


# Municipalities of Bataan → (latitude, longitude)
MUNICIPALITY_COORDS: Dict[str, Tuple[float, float]] = {
    "Abucay": (14.7357, 120.5332),
    "Bagac": (14.6019, 120.4015),
    "Balanga City": (14.676, 120.5389),
    "Dinalupihan": (14.8797, 120.4656),
    "Hermosa": (14.8283, 120.5498),
    "Limay": (14.5634, 120.5984),
    "Mariveles": (14.4333, 120.4833),
    "Morong": (14.7062, 120.2663),
    "Orani": (14.8, 120.5333),
    "Orion": (14.6203, 120.5814),
    "Pilar": (14.6656, 120.565),
    "Samal": (14.7667, 120.542),
}
DEFAULT_MUNICIPALITY = "Balanga City"


def resolve_coordinates(municipality: str) -> Tuple[float, float]:
    """Coordinates for a municipality, falling back to Balanga City."""
    return MUNICIPALITY_COORDS.get(municipality, MUNICIPALITY_COORDS[DEFAULT_MUNICIPALITY])
