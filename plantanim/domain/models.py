"""
Domain models for weather, suggestions, crop cycles and notifications.

These models represent the core domain entities and should be independent
of any infrastructure concerns (API clients, storage, notification channels).
"""
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


# ============================================================
# Weather
# ============================================================

class CurrentWeather(BaseModel):
    """Current conditions at the farmer's location."""
    temperature: float = Field(description="Air temperature in °C")
    apparent_temperature: Optional[float] = None
    wind_speed_kmh: Optional[float] = None
    wind_direction: Optional[float] = Field(
        default=None,
        description="Wind direction in degrees"
    )
    icon: str = "wb-cloudy"
    summary: str = ""


class ForecastDay(BaseModel):
    """A single day of the daily forecast."""
    forecast_date: date
    precipitation: Optional[int] = Field(
        default=None,
        ge=0,
        le=100,
        description="Max precipitation probability for the day (%)"
    )
    high: float
    low: float
    icon: str = "wb-cloudy"
    day_label: Optional[str] = None

    @property
    def precipitation_or_zero(self) -> int:
        return self.precipitation or 0

    @property
    def label(self) -> str:
        return self.day_label or self.forecast_date.strftime("%a %b %d")


class WeatherSnapshot(BaseModel):
    """Current conditions plus a date-ordered daily forecast (index 0 is today)."""
    current_weather: Optional[CurrentWeather] = None
    daily_forecast: List[ForecastDay] = Field(default_factory=list)
    typhoon_alert: bool = False
    rain_volume_mm: Optional[float] = None


# ============================================================
# Farmer context
# ============================================================

class LocationContext(BaseModel):
    """Where the farmer is; only used to localize messages."""
    municipality: str
    barangay: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.barangay:
            return f"{self.barangay}, {self.municipality}"
        return self.municipality


class CropContext(BaseModel):
    """Crops the farmer has selected."""
    selected_crop_ids: frozenset[str] = Field(default_factory=frozenset)


class FarmTask(BaseModel):
    """A manually scheduled task reference."""
    id: str
    title: str
    date_key: str = Field(description="Task date in YYYY-MM-DD format")
    task_type: Optional[str] = None


class FarmTasksContext(BaseModel):
    """Manually scheduled farm tasks."""
    tasks: List[FarmTask] = Field(default_factory=list)


# ============================================================
# Suggestions
# ============================================================

class SuggestionType(str, Enum):
    RISK_WARNING = "RiskWarning"
    FARMING_ADVICE = "FarmingAdvice"
    SCHEDULE_SUGGESTION = "ScheduleSuggestion"


class SuggestionPriority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def weight(self) -> int:
        """Sort weight: lower sorts first."""
        return _PRIORITY_WEIGHTS[self]


_PRIORITY_WEIGHTS = {
    SuggestionPriority.HIGH: 0,
    SuggestionPriority.MEDIUM: 1,
    SuggestionPriority.LOW: 2,
}


class Suggestion(BaseModel):
    """A prioritized, human-readable advisory derived from weather rules."""
    id: str = Field(description="Stable id derived from the rule and its trigger")
    type: SuggestionType
    priority: SuggestionPriority
    title: str
    message: str
    reason: str = Field(description="Why this suggestion exists")
    recommended_action: str
    valid_until: datetime
    dismissible: bool = True


# ============================================================
# Crop cycles
# ============================================================

class TaskType(str, Enum):
    PLANTING = "Planting"
    FERTILIZING = "Fertilizing"
    WEEDING = "Weeding"
    MONITORING = "Monitoring"
    HARVEST_PREP = "HarvestPrep"
    IRRIGATION = "Irrigation"
    PEST_CONTROL = "PestControl"
    LAND_PREPARATION = "LandPreparation"


class GrowthStage(str, Enum):
    SEEDLING = "Seedling"
    VEGETATIVE = "Vegetative"
    FLOWERING = "Flowering"
    FRUITING = "Fruiting"
    MATURATION = "Maturation"
    HARVEST = "Harvest"


class TaskStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    SKIPPED = "Skipped"


class DayRange(BaseModel):
    """Recurrence range for a template, in cycle days (inclusive)."""
    start: int = Field(ge=1)
    end: int = Field(ge=1)
    interval: int = Field(default=1, ge=1)

    class Config:
        frozen = True


class TaskTemplate(BaseModel):
    """When a task occurs in a crop cycle and what it looks like."""
    day: int = Field(ge=1, description="Day in cycle (1 = planting day)")
    task_type: TaskType
    title: str = Field(description="Title template, may contain {day}")
    description: str
    growth_stage: GrowthStage
    is_weather_sensitive: bool
    calendar_color: str
    day_range: Optional[DayRange] = None

    class Config:
        frozen = True

    def occurrence_days(self) -> List[int]:
        """Cycle days on which this template produces a task."""
        if self.day_range is None:
            return [self.day]
        return list(range(
            self.day_range.start,
            self.day_range.end + 1,
            self.day_range.interval,
        ))


class CropConfig(BaseModel):
    """Static crop-cycle template."""
    id: str
    name: str
    duration_days: int = Field(ge=1)
    task_templates: tuple[TaskTemplate, ...]

    class Config:
        frozen = True


class DailyTask(BaseModel):
    """A dated, crop-specific farming activity."""
    id: str
    date: str = Field(description="Task date in YYYY-MM-DD format")
    crop_type: str
    crop_name: str
    growth_stage: GrowthStage
    day_in_cycle: int
    task_type: TaskType
    title: str
    description: str
    is_weather_sensitive: bool
    status: TaskStatus = TaskStatus.PENDING
    calendar_color: str
    skip_reason: Optional[str] = None
    related_suggestion_id: Optional[str] = None


class CropPlanting(BaseModel):
    """Planting date recorded for a selected crop."""
    crop_id: str = Field(alias="cropId")
    planting_date: date = Field(alias="plantingDate")

    class Config:
        populate_by_name = True


# ============================================================
# Notifications
# ============================================================

class NotificationKind(str, Enum):
    TASK = "task"
    SUGGESTION = "suggestion"


class NotificationRequest(BaseModel):
    """What the notification channel is asked to deliver."""
    title: str
    body: str
    fire_at: Optional[datetime] = Field(
        default=None,
        description="When to deliver; immediate when unset"
    )
    data: dict[str, str] = Field(default_factory=dict)


class ScheduledNotification(BaseModel):
    """Bookkeeping record for a notification handed to the channel."""
    id: str
    kind: NotificationKind = Field(alias="type")
    entity_id: str = Field(alias="entityId")
    scheduled_for: datetime = Field(alias="scheduledFor")
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")
    title: str
    body: str
    delivery_id: Optional[str] = Field(default=None, alias="deliveryId")

    class Config:
        populate_by_name = True

    @property
    def expiry(self) -> datetime:
        """When the record may be pruned; older records fall back to their fire time."""
        return self.expires_at or self.scheduled_for
