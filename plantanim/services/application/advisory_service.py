"""
Application service: Orchestration layer for advisory operations.
"""
import logging
from datetime import datetime, tzinfo
from typing import Iterable, List, Optional, Tuple

from plantanim.domain.models import (
    CropContext,
    CropPlanting,
    DailyTask,
    FarmTasksContext,
    LocationContext,
    NotificationKind,
    ScheduledNotification,
    Suggestion,
    TaskStatus,
    WeatherSnapshot,
)
from plantanim.infrastructure.state_store import AdvisoryStateStore
from plantanim.infrastructure.weather_client import WeatherClient
from plantanim.services.domain.notification_reconciler import (
    NotificationReconciler,
    ReconcileResult,
)
from plantanim.services.domain.suggestion_engine import SuggestionEngine, filter_visible
from plantanim.services.domain.task_generator import CropCycleTaskGenerator, merge_statuses
from plantanim.utils.date_helpers import reference_time

logger = logging.getLogger(__name__)


class AdvisoryService:
    """
    Application service for suggestions, crop tasks and notifications.

    Coordinates the weather client, the persisted state and the domain
    services. No business rules live here.
    """

    def __init__(
        self,
        weather_client: WeatherClient,
        state: AdvisoryStateStore,
        engine: SuggestionEngine,
        generator: CropCycleTaskGenerator,
        reconciler: NotificationReconciler,
        tz: Optional[tzinfo] = None,
    ):
        """
        Initialize the service with dependencies.

        Args:
            weather_client: Forecast provider adapter
            state: Persisted advisory state
            engine: Suggestion engine
            generator: Crop-cycle task generator
            reconciler: Notification reconciler
            tz: Farm timezone; every reference time is expressed in it
        """
        self.weather_client = weather_client
        self.state = state
        self.engine = engine
        self.generator = generator
        self.reconciler = reconciler
        self.tz = tz

    # ── Suggestions ──────────────────────────────────────────────────────────

    async def get_suggestions(
        self,
        weather: WeatherSnapshot,
        location: LocationContext,
        crop_context: Optional[CropContext] = None,
        farm_tasks: Optional[FarmTasksContext] = None,
        now: Optional[datetime] = None,
    ) -> List[Suggestion]:
        """
        Run the engine and hide what the farmer has dismissed.

        Args:
            weather: Weather snapshot to evaluate
            location: Farmer location
            crop_context: Selected crops; the stored plantings are used when omitted
            farm_tasks: Manually scheduled tasks
            now: Reference time (defaults to the current local time)

        Returns:
            Visible suggestions, highest priority first
        """
        now = reference_time(now, self.tz)
        if crop_context is None:
            crop_context = await self._stored_crop_context()

        suggestions = self.engine.generate(weather, location, crop_context, farm_tasks, now)
        dismissed = await self.state.get_dismissed_ids()
        return filter_visible(suggestions, dismissed, now)

    async def get_live_suggestions(
        self,
        location: LocationContext,
        farm_tasks: Optional[FarmTasksContext] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[WeatherSnapshot, List[Suggestion]]:
        """
        Fetch the forecast for the farmer's municipality, then run the engine.

        Raises:
            WeatherAPIError: If the forecast cannot be fetched
        """
        weather = await self.weather_client.get_forecast_for_municipality(
            location.municipality
        )
        suggestions = await self.get_suggestions(weather, location, None, farm_tasks, now)
        return weather, suggestions

    async def dismiss_suggestion(self, suggestion_id: str) -> bool:
        return await self.state.dismiss_suggestion(suggestion_id)

    # ── Tasks ────────────────────────────────────────────────────────────────

    async def get_tasks(
        self,
        plantings: Optional[Iterable[CropPlanting]] = None,
        now: Optional[datetime] = None,
        look_ahead_days: Optional[int] = None,
    ) -> List[DailyTask]:
        """
        Generate tasks for the plantings with persisted statuses merged in.

        Plantings whose cycle has finished are skipped. When no plantings are
        given the stored ones are used.
        """
        now = reference_time(now, self.tz)
        if plantings is None:
            plantings = await self.state.get_plantings()

        active = [
            p for p in plantings
            if not self.generator.is_cycle_complete(p.crop_id, p.planting_date, now)
        ]
        tasks = self.generator.generate_for_plantings(active, now, look_ahead_days)
        statuses = await self.state.get_task_statuses()
        return merge_statuses(tasks, statuses)

    async def save_plantings(self, plantings: List[CropPlanting]) -> bool:
        return await self.state.save_plantings(plantings)

    async def update_task_status(self, task_id: str, status: TaskStatus) -> bool:
        """Persist a task status; finished tasks lose their pending reminder."""
        saved = await self.state.set_task_status(task_id, status)
        if status != TaskStatus.PENDING:
            await self.reconciler.cancel_for(NotificationKind.TASK, task_id)
        return saved

    # ── Notifications ────────────────────────────────────────────────────────

    async def reconcile_notifications(
        self,
        tasks: List[DailyTask],
        suggestions: List[Suggestion],
        enabled: Optional[bool] = None,
        now: Optional[datetime] = None,
    ) -> ReconcileResult:
        now = reference_time(now, self.tz)
        if enabled is None:
            enabled = await self.state.notifications_enabled()
        return await self.reconciler.reconcile(tasks, suggestions, enabled, now)

    async def cleanup_notifications(self, now: Optional[datetime] = None) -> int:
        return await self.reconciler.cleanup_expired(reference_time(now, self.tz))

    async def list_notifications(self) -> List[ScheduledNotification]:
        return await self.state.get_scheduled_notifications()

    async def notifications_enabled(self) -> bool:
        return await self.state.notifications_enabled()

    async def set_notifications_enabled(self, enabled: bool) -> bool:
        saved = await self.state.set_notifications_enabled(enabled)
        if not enabled:
            await self.reconciler.reconcile([], [], enabled=False)
        return saved

    async def _stored_crop_context(self) -> Optional[CropContext]:
        plantings = await self.state.get_plantings()
        if not plantings:
            return None
        return CropContext(selected_crop_ids=frozenset(p.crop_id for p in plantings))
