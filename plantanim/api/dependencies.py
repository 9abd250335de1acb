"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import Depends

from plantanim.config import settings
from plantanim.infrastructure.key_value_store import get_key_value_store
from plantanim.infrastructure.notification_channel import get_notification_scheduler
from plantanim.infrastructure.ports import KeyValueStore, NotificationScheduler
from plantanim.infrastructure.state_store import AdvisoryStateStore
from plantanim.infrastructure.weather_client import WeatherClient, get_weather_client
from plantanim.services.application.advisory_service import AdvisoryService
from plantanim.services.domain.notification_reconciler import NotificationReconciler
from plantanim.services.domain.suggestion_engine import SuggestionEngine
from plantanim.services.domain.suggestion_rules import RuleThresholds
from plantanim.services.domain.task_generator import CropCycleTaskGenerator


def get_farm_timezone() -> ZoneInfo:
    """Timezone in which the farm's days and reminder hours are counted."""
    return ZoneInfo(settings.timezone)


def get_suggestion_engine() -> SuggestionEngine:
    """
    Dependency factory for SuggestionEngine.

    Returns:
        SuggestionEngine configured from settings
    """
    return SuggestionEngine(
        thresholds=RuleThresholds.from_settings(settings),
        validity_hours=settings.suggestion_validity_hours,
        tz=get_farm_timezone(),
    )


def get_task_generator() -> CropCycleTaskGenerator:
    return CropCycleTaskGenerator(
        default_look_ahead_days=settings.default_look_ahead_days,
        tz=get_farm_timezone(),
    )


def get_state_store(
    store: Annotated[KeyValueStore, Depends(get_key_value_store)],
) -> AdvisoryStateStore:
    return AdvisoryStateStore(store)


def get_notification_reconciler(
    state: Annotated[AdvisoryStateStore, Depends(get_state_store)],
    scheduler: Annotated[NotificationScheduler, Depends(get_notification_scheduler)],
) -> NotificationReconciler:
    return NotificationReconciler(
        state=state,
        scheduler=scheduler,
        task_notification_hour=settings.task_notification_hour,
        tz=get_farm_timezone(),
    )


def get_advisory_service(
    weather_client: Annotated[WeatherClient, Depends(get_weather_client)],
    state: Annotated[AdvisoryStateStore, Depends(get_state_store)],
    engine: Annotated[SuggestionEngine, Depends(get_suggestion_engine)],
    generator: Annotated[CropCycleTaskGenerator, Depends(get_task_generator)],
    reconciler: Annotated[NotificationReconciler, Depends(get_notification_reconciler)],
) -> AdvisoryService:
    """
    Dependency factory for AdvisoryService.

    Args:
        weather_client: Weather API client (injected)
        state: Persisted advisory state (injected)
        engine: Suggestion engine (injected)
        generator: Task generator (injected)
        reconciler: Notification reconciler (injected)

    Returns:
        AdvisoryService instance
    """
    return AdvisoryService(
        weather_client=weather_client,
        state=state,
        engine=engine,
        generator=generator,
        reconciler=reconciler,
        tz=get_farm_timezone(),
    )


# Type aliases for cleaner route signatures
AdvisoryServiceDep = Annotated[AdvisoryService, Depends(get_advisory_service)]
