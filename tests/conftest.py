"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- A fixed reference time
- Weather snapshot builders
- In-memory fakes for the storage and notification ports
- FastAPI test client
"""
import pytest
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Sequence

from fastapi.testclient import TestClient

from plantanim.main import app
from plantanim.domain.models import (
    CurrentWeather,
    ForecastDay,
    LocationContext,
    NotificationRequest,
    WeatherSnapshot,
)
from plantanim.infrastructure.key_value_store import InMemoryKeyValueStore
from plantanim.infrastructure.ports import NotificationChannelError, StorageError
from plantanim.infrastructure.state_store import AdvisoryStateStore


# ============================================================
# Time and Location Fixtures
# ============================================================

@pytest.fixture
def now() -> datetime:
    """Early morning on a fixed day, before the 08:00 reminder hour."""
    return datetime(2025, 6, 10, 6, 30, tzinfo=timezone.utc)


@pytest.fixture
def today(now) -> date:
    return now.date()


@pytest.fixture
def location() -> LocationContext:
    return LocationContext(municipality="Balanga City", barangay="Tuyo")


# ============================================================
# Weather Fixtures
# ============================================================

def build_weather(
    start: date,
    precipitation: Sequence[Optional[int]] = (10, 10, 10, 10, 10, 10, 10),
    highs: Optional[Sequence[float]] = None,
    wind_kmh: Optional[float] = 10.0,
    typhoon: bool = False,
    rain_volume: Optional[float] = None,
) -> WeatherSnapshot:
    """Build a snapshot with one forecast day per precipitation value."""
    highs = list(highs) if highs is not None else [30.0] * len(precipitation)
    days = [
        ForecastDay(
            forecast_date=start + timedelta(days=i),
            precipitation=p,
            high=highs[i],
            low=24.0,
            day_label="Today" if i == 0 else None,
        )
        for i, p in enumerate(precipitation)
    ]
    return WeatherSnapshot(
        current_weather=CurrentWeather(temperature=29.0, wind_speed_kmh=wind_kmh),
        daily_forecast=days,
        typhoon_alert=typhoon,
        rain_volume_mm=rain_volume,
    )


@pytest.fixture
def make_weather(today):
    """Factory fixture: weather starting today."""
    def _make(**kwargs) -> WeatherSnapshot:
        return build_weather(today, **kwargs)
    return _make


@pytest.fixture
def calm_weather(make_weather) -> WeatherSnapshot:
    """Dry, mild week that triggers no rule."""
    return make_weather()


# ============================================================
# Port Fakes
# ============================================================

class FakeNotificationScheduler:
    """Records every call made through the NotificationScheduler port."""

    def __init__(self):
        self.scheduled: List[NotificationRequest] = []
        self.cancelled: List[str] = []
        self.cancel_all_calls = 0

    async def schedule(self, request: NotificationRequest) -> str:
        self.scheduled.append(request)
        return f"delivery-{len(self.scheduled)}"

    async def cancel(self, delivery_id: str) -> None:
        self.cancelled.append(delivery_id)

    async def cancel_all(self) -> None:
        self.cancel_all_calls += 1


class FailingNotificationScheduler(FakeNotificationScheduler):
    """Rejects requests whose body contains one of the given markers."""

    def __init__(self, reject: Sequence[str] = ("",)):
        super().__init__()
        self.reject = tuple(reject)

    async def schedule(self, request: NotificationRequest) -> str:
        if any(marker in request.body for marker in self.reject):
            raise NotificationChannelError("channel unavailable")
        return await super().schedule(request)

    async def cancel_all(self) -> None:
        raise NotificationChannelError("channel unavailable")


class BrokenKeyValueStore:
    """Store whose every operation fails."""

    async def get(self, key: str) -> Optional[str]:
        raise StorageError("disk unavailable")

    async def set(self, key: str, value: str) -> None:
        raise StorageError("disk unavailable")

    async def remove(self, key: str) -> None:
        raise StorageError("disk unavailable")


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def state_store(memory_store) -> AdvisoryStateStore:
    return AdvisoryStateStore(memory_store)


@pytest.fixture
def fake_scheduler() -> FakeNotificationScheduler:
    return FakeNotificationScheduler()


@pytest.fixture
def failing_scheduler():
    """Factory fixture: scheduler rejecting bodies that contain a marker."""
    def _make(*reject: str) -> FailingNotificationScheduler:
        return FailingNotificationScheduler(reject or ("",))
    return _make


@pytest.fixture
def broken_store() -> BrokenKeyValueStore:
    return BrokenKeyValueStore()


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)


@pytest.fixture
def isolated_ports(memory_store, fake_scheduler):
    """Route the app's storage and notification ports to fresh fakes."""
    from plantanim.infrastructure.key_value_store import get_key_value_store
    from plantanim.infrastructure.notification_channel import get_notification_scheduler

    app.dependency_overrides[get_key_value_store] = lambda: memory_store
    app.dependency_overrides[get_notification_scheduler] = lambda: fake_scheduler
    yield memory_store, fake_scheduler
    app.dependency_overrides.clear()
