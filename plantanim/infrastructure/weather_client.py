"""
Infrastructure layer: Open-Meteo weather client with retry logic.
"""
from datetime import date
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from plantanim.config import settings
from plantanim.domain.models import CurrentWeather, ForecastDay, WeatherSnapshot
from plantanim.infrastructure.api_constants import (
    DEFAULT_ICON,
    DEFAULT_SUMMARY,
    APIConstants,
    WEATHER_CODE_ICONS,
    WEATHER_CODE_SUMMARIES,
    OpenMeteoEndpoints,
    resolve_coordinates,
)


# Pydantic models for API responses
class OpenMeteoCurrent(BaseModel):
    """``current_weather`` block of a forecast response."""
    time: Optional[str] = None
    temperature: float
    windspeed: Optional[float] = None
    winddirection: Optional[float] = None
    weathercode: int = -1


class OpenMeteoDaily(BaseModel):
    """``daily`` block of a forecast response (parallel arrays)."""
    time: List[date]
    weathercode: List[Optional[int]] = Field(default_factory=list)
    temperature_2m_max: List[Optional[float]] = Field(default_factory=list)
    temperature_2m_min: List[Optional[float]] = Field(default_factory=list)
    precipitation_probability_max: List[Optional[float]] = Field(default_factory=list)
    precipitation_sum: List[Optional[float]] = Field(default_factory=list)
    windspeed_10m_max: List[Optional[float]] = Field(default_factory=list)


class OpenMeteoForecastResponse(BaseModel):
    """Response from the forecast endpoint."""
    latitude: float
    longitude: float
    current_weather: Optional[OpenMeteoCurrent] = None
    daily: Optional[OpenMeteoDaily] = None


class WeatherAPIError(Exception):
    """Custom exception for weather API errors."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _at(values: List[Any], index: int) -> Any:
    return values[index] if index < len(values) else None


def weather_code_icon(code: Optional[int]) -> str:
    return WEATHER_CODE_ICONS.get(code, DEFAULT_ICON)


def weather_code_summary(code: Optional[int]) -> str:
    return WEATHER_CODE_SUMMARIES.get(code, DEFAULT_SUMMARY)


class WeatherClient:
    """
    Client for the Open-Meteo forecast API.
    Implements retry logic with exponential backoff.
    """

    def __init__(self):
        """Initialize the API client with configuration."""
        self.base_url = settings.weather_api_base_url
        self.forecast_days = settings.forecast_days
        self.timezone = settings.timezone
        self.typhoon_wind_threshold = settings.typhoon_wind_threshold_kmh
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"accept": APIConstants.CONTENT_TYPE_JSON},
            timeout=settings.weather_api_timeout,
        )

    async def __aenter__(self) -> "WeatherClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(settings.max_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_multiplier,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.RequestError)),
        reraise=True,
    )
    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Make an HTTP request with retry logic.

        Server errors (5xx) and transport errors are retried; client errors
        (4xx) fail immediately.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments for the request

        Returns:
            Response data as dictionary

        Raises:
            WeatherAPIError: On a 4xx response
            httpx.HTTPStatusError: On a 5xx response after retries
            httpx.RequestError: On a transport error after retries
        """
        try:
            response = await self.client.request(method, endpoint, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code >= 500:
                raise
            raise WeatherAPIError(
                f"Weather API request failed: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            )

    async def get_forecast(self, latitude: float, longitude: float) -> WeatherSnapshot:
        """
        Fetch current conditions and the daily forecast for a location.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees

        Returns:
            WeatherSnapshot with today at index 0

        Raises:
            WeatherAPIError: If the request fails after retries
        """
        try:
            data = await self._make_request(
                "GET",
                OpenMeteoEndpoints.FORECAST,
                params=OpenMeteoEndpoints.forecast_params(
                    latitude, longitude, self.forecast_days, self.timezone
                ),
            )
        except httpx.HTTPStatusError as e:
            raise WeatherAPIError(
                f"Weather API unavailable: {e.response.status_code}",
                status_code=502,
            )
        except httpx.RequestError as e:
            raise WeatherAPIError(f"Weather API request error: {str(e)}", status_code=502)

        response = OpenMeteoForecastResponse(**data)
        return self.to_snapshot(response)

    async def get_forecast_for_municipality(self, municipality: str) -> WeatherSnapshot:
        """Fetch the forecast for a municipality's coordinates."""
        latitude, longitude = resolve_coordinates(municipality)
        return await self.get_forecast(latitude, longitude)

    def to_snapshot(self, response: OpenMeteoForecastResponse) -> WeatherSnapshot:
        """
        Map an Open-Meteo response to a WeatherSnapshot.

        The provider has no alert feed, so the typhoon flag is raised when
        today's max wind speed (or the current wind) reaches typhoon force.
        """
        current = None
        if response.current_weather is not None:
            cw = response.current_weather
            current = CurrentWeather(
                temperature=round(cw.temperature),
                apparent_temperature=None,
                wind_speed_kmh=round(cw.windspeed) if cw.windspeed is not None else None,
                wind_direction=cw.winddirection,
                icon=weather_code_icon(cw.weathercode),
                summary=weather_code_summary(cw.weathercode),
            )

        days: List[ForecastDay] = []
        rain_volume = None
        max_wind_today = None
        if response.daily is not None:
            daily = response.daily
            for i, day in enumerate(daily.time[: self.forecast_days]):
                high = _at(daily.temperature_2m_max, i)
                low = _at(daily.temperature_2m_min, i)
                if high is None or low is None:
                    # Forecast must stay gap-free; stop at the first incomplete day
                    break
                precipitation = _at(daily.precipitation_probability_max, i)
                days.append(ForecastDay(
                    forecast_date=day,
                    precipitation=round(precipitation) if precipitation is not None else None,
                    high=round(high),
                    low=round(low),
                    icon=weather_code_icon(_at(daily.weathercode, i)),
                    day_label="Today" if i == 0 else day.strftime("%a"),
                ))
            rain_volume = _at(daily.precipitation_sum, 0)
            max_wind_today = _at(daily.windspeed_10m_max, 0)

        winds = [w for w in (max_wind_today, current and current.wind_speed_kmh) if w is not None]
        typhoon_alert = any(w >= self.typhoon_wind_threshold for w in winds)

        return WeatherSnapshot(
            current_weather=current,
            daily_forecast=days,
            typhoon_alert=typhoon_alert,
            rain_volume_mm=rain_volume,
        )


# Singleton instance
_weather_client: Optional[WeatherClient] = None


def get_weather_client() -> WeatherClient:
    """
    Get or create the singleton weather client instance.

    Returns:
        WeatherClient instance
    """
    global _weather_client
    if _weather_client is None:
        _weather_client = WeatherClient()
    return _weather_client
