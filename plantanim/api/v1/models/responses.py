"""
API response models using Pydantic.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from plantanim.domain.models import (
    CropConfig,
    DailyTask,
    ScheduledNotification,
    Suggestion,
    WeatherSnapshot,
)


class SuggestionsResponse(BaseModel):
    """Response model for suggestion endpoints."""
    suggestions: List[Suggestion] = Field(
        description="Visible suggestions, highest priority first"
    )
    disclaimer: str = Field(
        description="Transparency note to show alongside suggestions"
    )
    weather: Optional[WeatherSnapshot] = Field(
        default=None,
        description="Forecast the suggestions were derived from (live endpoint only)"
    )


class TasksResponse(BaseModel):
    """Response model for the tasks endpoint."""
    task_count: int
    tasks: List[DailyTask]


class CropsResponse(BaseModel):
    crops: List[CropConfig]


class ReconcileResponse(BaseModel):
    """Outcome of a reconciliation pass."""
    scheduled: List[ScheduledNotification]
    already_scheduled: int
    failed: int
    cleared: bool


class CleanupResponse(BaseModel):
    pruned: int


class NotificationsResponse(BaseModel):
    notifications: List[ScheduledNotification]


class NotificationSettingsResponse(BaseModel):
    enabled: bool


class AckResponse(BaseModel):
    """Acknowledgement of a state change."""
    id: str
    saved: bool
