"""
Application configuration using Pydantic settings.
"""
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Weather API Configuration
    weather_api_base_url: str = Field(
        default="https://api.open-meteo.com",
        description="Base URL for the Open-Meteo forecast API"
    )
    weather_api_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for weather API calls"
    )
    forecast_days: int = Field(
        default=7,
        description="Number of daily forecast entries to request"
    )
    typhoon_wind_threshold_kmh: float = Field(
        default=118.0,
        description="Max daily wind speed (km/h) treated as a typhoon alert"
    )

    # Farm Locale
    timezone: str = Field(
        default="Asia/Manila",
        description="IANA timezone of the farm; sets the local day and reminder hour"
    )

    # Retry Configuration
    max_retry_attempts: int = Field(
        default=3,
        description="Maximum number of retry attempts for API calls"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=4,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=10,
        description="Maximum wait time in seconds between retries"
    )

    # Suggestion Rule Parameters
    suggestion_validity_hours: int = Field(
        default=24,
        description="Default lifetime of a generated suggestion in hours"
    )
    heavy_rain_probability: int = Field(
        default=70,
        description="Precipitation probability (%) that counts as heavy rain"
    )
    heavy_rain_volume_mm: float = Field(
        default=30.0,
        description="Rain volume (mm) above which rain counts as heavy"
    )
    moderate_rain_probability: int = Field(
        default=40,
        description="Precipitation probability (%) for the moderate rain advisory"
    )
    continuous_rain_days: int = Field(
        default=3,
        description="Consecutive rainy days needed for the continuous rain advisory"
    )
    strong_wind_kmh: float = Field(
        default=30.0,
        description="Wind speed (km/h) above which spraying is discouraged"
    )
    heat_stress_temperature: float = Field(
        default=34.0,
        description="Daily high (°C) at or above which heat stress is flagged"
    )
    heat_stress_max_precipitation: int = Field(
        default=15,
        description="Precipitation probability (%) below which heat stress applies"
    )
    schedule_conflict_probability: int = Field(
        default=60,
        description="Precipitation probability (%) that conflicts with a manual task"
    )
    schedule_conflict_high_probability: int = Field(
        default=80,
        description="Precipitation probability (%) at which rescheduling becomes urgent"
    )

    # Task Generation
    default_look_ahead_days: int = Field(
        default=30,
        description="Days ahead of today to project crop-cycle tasks"
    )

    # Notifications
    task_notification_hour: int = Field(
        default=8,
        description="Local hour at which task reminders fire on their due date"
    )

    # Persistence
    state_file_path: Optional[str] = Field(
        default=None,
        description="JSON file backing the key-value store (in-memory when unset)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Whether request rate limiting is active"
    )
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="PlantAnim Advisory Engine",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
