"""
Infrastructure layer: typed access to persisted advisory state.

Wraps a KeyValueStore with the record formats the app has always written, so
state survives across runs and versions. Storage failures never propagate:
reads fall back to defaults and writes report ``False``.
"""
import json
import logging
from typing import Dict, List

from pydantic import TypeAdapter

from plantanim.domain.models import CropPlanting, ScheduledNotification, TaskStatus
from plantanim.infrastructure.ports import KeyValueStore

logger = logging.getLogger(__name__)


class StorageKeys:
    """Persisted key names."""

    DISMISSED_SUGGESTIONS = "@plantanim:dismissed_suggestions"
    TASK_STATUSES = "@plantanim:task_statuses"
    SCHEDULED_NOTIFICATIONS = "@plantanim:scheduled_notifications"
    NOTIFICATIONS_ENABLED = "@plantanim:notifications_enabled"
    CROP_PLANTING_DATES = "@plantanim:crop_planting_dates"


_notifications_adapter = TypeAdapter(List[ScheduledNotification])
_plantings_adapter = TypeAdapter(List[CropPlanting])
_statuses_adapter = TypeAdapter(Dict[str, TaskStatus])


class AdvisoryStateStore:
    """Reads and writes dismissed ids, task statuses, notification records and settings."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def _read(self, key: str):
        try:
            return await self.store.get(key)
        except Exception as e:
            logger.error(f"Failed to read {key}: {e}")
            return None

    async def _write(self, key: str, value: str) -> bool:
        try:
            await self.store.set(key, value)
            return True
        except Exception as e:
            logger.error(f"Failed to write {key}: {e}")
            return False

    async def _remove(self, key: str) -> bool:
        try:
            await self.store.remove(key)
            return True
        except Exception as e:
            logger.error(f"Failed to remove {key}: {e}")
            return False

    # ── Dismissed suggestions ────────────────────────────────────────────────

    async def get_dismissed_ids(self) -> List[str]:
        raw = await self._read(StorageKeys.DISMISSED_SUGGESTIONS)
        if not raw:
            return []
        try:
            ids = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable dismissed suggestions: {e}")
            return []
        if not isinstance(ids, list):
            return []
        return [str(i) for i in ids]

    async def dismiss_suggestion(self, suggestion_id: str) -> bool:
        ids = await self.get_dismissed_ids()
        if suggestion_id in ids:
            return True
        ids.append(suggestion_id)
        return await self._write(StorageKeys.DISMISSED_SUGGESTIONS, json.dumps(ids))

    # ── Task statuses ────────────────────────────────────────────────────────

    async def get_task_statuses(self) -> Dict[str, TaskStatus]:
        raw = await self._read(StorageKeys.TASK_STATUSES)
        if not raw:
            return {}
        try:
            return _statuses_adapter.validate_json(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable task statuses: {e}")
            return {}

    async def set_task_status(self, task_id: str, status: TaskStatus) -> bool:
        statuses = await self.get_task_statuses()
        statuses[task_id] = status
        payload = {key: value.value for key, value in statuses.items()}
        return await self._write(StorageKeys.TASK_STATUSES, json.dumps(payload))

    # ── Scheduled notifications ──────────────────────────────────────────────

    async def get_scheduled_notifications(self) -> List[ScheduledNotification]:
        raw = await self._read(StorageKeys.SCHEDULED_NOTIFICATIONS)
        if not raw:
            return []
        try:
            return _notifications_adapter.validate_json(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable notification records: {e}")
            return []

    async def save_scheduled_notifications(
        self, notifications: List[ScheduledNotification]
    ) -> bool:
        payload = _notifications_adapter.dump_json(notifications, by_alias=True)
        return await self._write(StorageKeys.SCHEDULED_NOTIFICATIONS, payload.decode())

    async def clear_scheduled_notifications(self) -> bool:
        return await self._remove(StorageKeys.SCHEDULED_NOTIFICATIONS)

    # ── Notification settings ────────────────────────────────────────────────

    async def notifications_enabled(self) -> bool:
        raw = await self._read(StorageKeys.NOTIFICATIONS_ENABLED)
        # Enabled unless explicitly switched off
        return raw != "false"

    async def set_notifications_enabled(self, enabled: bool) -> bool:
        return await self._write(
            StorageKeys.NOTIFICATIONS_ENABLED, "true" if enabled else "false"
        )

    # ── Crop plantings ───────────────────────────────────────────────────────

    async def get_plantings(self) -> List[CropPlanting]:
        raw = await self._read(StorageKeys.CROP_PLANTING_DATES)
        if not raw:
            return []
        try:
            return _plantings_adapter.validate_json(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable planting dates: {e}")
            return []

    async def save_plantings(self, plantings: List[CropPlanting]) -> bool:
        payload = _plantings_adapter.dump_json(plantings, by_alias=True)
        return await self._write(StorageKeys.CROP_PLANTING_DATES, payload.decode())
