"""
API request models using Pydantic.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from plantanim.domain.models import (
    CropPlanting,
    DailyTask,
    FarmTask,
    LocationContext,
    Suggestion,
    TaskStatus,
    WeatherSnapshot,
)


class SuggestionsRequest(BaseModel):
    """Weather and context to evaluate."""
    weather: WeatherSnapshot
    location: LocationContext
    crop_ids: Optional[List[str]] = Field(
        default=None,
        description="Selected crops; stored plantings are used when omitted"
    )
    farm_tasks: List[FarmTask] = Field(
        default_factory=list,
        description="Manually scheduled tasks checked for rain conflicts"
    )
    now: Optional[datetime] = Field(
        default=None,
        description="Reference time (defaults to the server's current time)"
    )


class TasksRequest(BaseModel):
    """Plantings to project into daily tasks."""
    plantings: Optional[List[CropPlanting]] = Field(
        default=None,
        description="Plantings to use; stored plantings are used when omitted"
    )
    look_ahead_days: Optional[int] = Field(default=None, ge=0, le=365)
    now: Optional[datetime] = None
    save: bool = Field(
        default=False,
        description="Persist the posted plantings as the farmer's schedule"
    )


class TaskStatusUpdate(BaseModel):
    """New status for a generated task."""
    status: TaskStatus


class ReconcileRequest(BaseModel):
    """Items to reconcile against scheduled notifications."""
    tasks: List[DailyTask] = Field(default_factory=list)
    suggestions: List[Suggestion] = Field(default_factory=list)
    enabled: Optional[bool] = Field(
        default=None,
        description="Override the stored notifications-enabled setting"
    )
    now: Optional[datetime] = None


class NotificationSettingsUpdate(BaseModel):
    enabled: bool
