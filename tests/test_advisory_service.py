"""
Unit tests for the advisory application service.

The service only orchestrates, so these tests check that state flows between
the store, the domain services and the weather client as expected.
"""
import pytest
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock
from zoneinfo import ZoneInfo

from plantanim.domain.models import (
    CropPlanting,
    LocationContext,
    TaskStatus,
    TaskType,
)
from plantanim.infrastructure.weather_client import WeatherAPIError, WeatherClient
from plantanim.services.application.advisory_service import AdvisoryService
from plantanim.services.domain.notification_reconciler import NotificationReconciler
from plantanim.services.domain.suggestion_engine import SuggestionEngine
from plantanim.services.domain.task_generator import CropCycleTaskGenerator


MANILA = ZoneInfo("Asia/Manila")


@pytest.fixture
def weather_client():
    return AsyncMock(spec=WeatherClient)


@pytest.fixture
def service(weather_client, state_store, fake_scheduler) -> AdvisoryService:
    return AdvisoryService(
        weather_client=weather_client,
        state=state_store,
        engine=SuggestionEngine(),
        generator=CropCycleTaskGenerator(),
        reconciler=NotificationReconciler(state_store, fake_scheduler),
    )


# ============================================================
# Suggestion Tests
# ============================================================

class TestSuggestions:
    """Tests for suggestion orchestration."""

    @pytest.mark.asyncio
    async def test_dismissed_suggestions_are_hidden(self, service, make_weather, location, now):
        weather = make_weather(precipitation=[50, 10, 10], wind_kmh=40.0)
        before = await service.get_suggestions(weather, location, now=now)
        rain = next(s for s in before if s.title == "Rain Likely Today")

        await service.dismiss_suggestion(rain.id)
        after = await service.get_suggestions(weather, location, now=now)

        assert rain.id not in {s.id for s in after}
        assert len(after) == len(before) - 1

    @pytest.mark.asyncio
    async def test_stored_plantings_become_crop_context(
        self, service, make_weather, location, now, today
    ):
        await service.save_plantings([CropPlanting(crop_id="corn", planting_date=today)])

        suggestions = await service.get_suggestions(
            make_weather(wind_kmh=45.0), location, now=now
        )

        assert "Corn" in suggestions[0].message

    @pytest.mark.asyncio
    async def test_live_suggestions_fetch_by_municipality(
        self, service, weather_client, make_weather, now
    ):
        weather_client.get_forecast_for_municipality.return_value = make_weather(typhoon=True)
        location = LocationContext(municipality="Limay")

        weather, suggestions = await service.get_live_suggestions(location, now=now)

        weather_client.get_forecast_for_municipality.assert_awaited_once_with("Limay")
        assert weather.typhoon_alert is True
        assert suggestions[0].title == "Typhoon Alert Active"

    @pytest.mark.asyncio
    async def test_live_suggestions_propagate_fetch_errors(self, service, weather_client):
        weather_client.get_forecast_for_municipality.side_effect = WeatherAPIError("down")

        with pytest.raises(WeatherAPIError):
            await service.get_live_suggestions(LocationContext(municipality="Limay"))


# ============================================================
# Task Tests
# ============================================================

class TestTasks:
    """Tests for task orchestration."""

    @pytest.mark.asyncio
    async def test_tasks_from_stored_plantings_with_statuses(self, service, now, today):
        await service.save_plantings([CropPlanting(crop_id="rice", planting_date=today)])
        tasks = await service.get_tasks(now=now, look_ahead_days=0)
        planting = next(t for t in tasks if t.task_type == TaskType.PLANTING)

        await service.update_task_status(planting.id, TaskStatus.COMPLETED)
        refreshed = await service.get_tasks(now=now, look_ahead_days=0)

        statuses = {t.id: t.status for t in refreshed}
        assert statuses[planting.id] == TaskStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_finished_cycles_are_skipped(self, service, now, today):
        plantings = [
            CropPlanting(crop_id="corn", planting_date=today - timedelta(days=200)),
            CropPlanting(crop_id="rice", planting_date=today),
        ]

        tasks = await service.get_tasks(plantings, now=now, look_ahead_days=0)

        assert {t.crop_type for t in tasks} == {"rice"}

    @pytest.mark.asyncio
    async def test_completing_a_task_cancels_its_reminder(
        self, service, fake_scheduler, state_store, now, today
    ):
        tasks = await service.get_tasks(
            [CropPlanting(crop_id="rice", planting_date=today)], now=now, look_ahead_days=0
        )
        await service.reconcile_notifications(tasks, [], now=now)
        target = tasks[0]

        await service.update_task_status(target.id, TaskStatus.SKIPPED)

        remaining = {r.entity_id for r in await state_store.get_scheduled_notifications()}
        assert target.id not in remaining
        assert len(fake_scheduler.cancelled) == 1


# ============================================================
# Farm Timezone Tests
# ============================================================

class TestFarmTimezone:
    """A UTC reference time is read as the farm's local time."""

    @pytest.fixture
    def local_service(self, weather_client, state_store, fake_scheduler) -> AdvisoryService:
        return AdvisoryService(
            weather_client=weather_client,
            state=state_store,
            engine=SuggestionEngine(),
            generator=CropCycleTaskGenerator(),
            reconciler=NotificationReconciler(state_store, fake_scheduler),
            tz=MANILA,
        )

    @pytest.mark.asyncio
    async def test_tasks_use_local_date(self, local_service):
        # 02:00 on 10 June in Manila
        now = datetime(2025, 6, 9, 18, 0, tzinfo=timezone.utc)
        plantings = [CropPlanting(crop_id="corn", planting_date=date(2025, 6, 1))]

        tasks = await local_service.get_tasks(plantings, now=now, look_ahead_days=0)

        assert [(t.date, t.day_in_cycle) for t in tasks] == [("2025-06-10", 10)]

    @pytest.mark.asyncio
    async def test_reminders_use_local_hour(self, local_service, fake_scheduler):
        now = datetime(2025, 6, 9, 18, 0, tzinfo=timezone.utc)
        plantings = [CropPlanting(crop_id="corn", planting_date=date(2025, 6, 1))]
        tasks = await local_service.get_tasks(plantings, now=now, look_ahead_days=1)

        result = await local_service.reconcile_notifications(tasks, [], enabled=True, now=now)

        assert len(result.scheduled) == 1
        assert fake_scheduler.scheduled[0].fire_at == datetime(2025, 6, 10, 8, 0, tzinfo=MANILA)

    @pytest.mark.asyncio
    async def test_cleanup_defaults_to_current_time(self, local_service, state_store):
        tasks = await local_service.get_tasks(
            [CropPlanting(crop_id="rice", planting_date=date(2025, 6, 10))],
            now=datetime(2025, 6, 10, 6, 0, tzinfo=MANILA),
            look_ahead_days=0,
        )
        await local_service.reconcile_notifications(
            tasks, [], enabled=True, now=datetime(2025, 6, 10, 6, 0, tzinfo=MANILA)
        )

        assert await local_service.cleanup_notifications() == 2
        assert await state_store.get_scheduled_notifications() == []


# ============================================================
# Notification Settings Tests
# ============================================================

class TestNotificationSettings:
    """Tests for the enabled flag."""

    @pytest.mark.asyncio
    async def test_stored_flag_is_used_by_default(self, service, fake_scheduler, now, today):
        await service.set_notifications_enabled(False)
        tasks = await service.get_tasks(
            [CropPlanting(crop_id="rice", planting_date=today)], now=now, look_ahead_days=0
        )

        result = await service.reconcile_notifications(tasks, [], now=now)

        assert result.cleared is True
        assert fake_scheduler.scheduled == []

    @pytest.mark.asyncio
    async def test_disabling_cancels_pending(self, service, fake_scheduler, now, today):
        tasks = await service.get_tasks(
            [CropPlanting(crop_id="rice", planting_date=today)], now=now, look_ahead_days=0
        )
        await service.reconcile_notifications(tasks, [], enabled=True, now=now)
        assert await service.list_notifications()

        await service.set_notifications_enabled(False)

        assert await service.notifications_enabled() is False
        assert await service.list_notifications() == []
        assert fake_scheduler.cancel_all_calls == 1

    @pytest.mark.asyncio
    async def test_cleanup_delegates_to_reconciler(self, service, now):
        assert await service.cleanup_notifications(now) == 0
