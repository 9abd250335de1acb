"""
Infrastructure layer: local notification channel.

Holds scheduled notifications in an in-process outbox, standing in for the
device's notification subsystem when the engine runs as a service. Delivery
itself is out of scope; queued requests are available from ``pending()``.
"""
import logging
import uuid
from typing import Dict, List, Optional

from plantanim.domain.models import NotificationRequest

logger = logging.getLogger(__name__)


class LocalNotificationScheduler:
    """NotificationScheduler adapter backed by an in-memory outbox."""

    def __init__(self):
        self._pending: Dict[str, NotificationRequest] = {}

    async def schedule(self, request: NotificationRequest) -> str:
        delivery_id = str(uuid.uuid4())
        self._pending[delivery_id] = request
        when = request.fire_at.isoformat() if request.fire_at else "immediately"
        logger.info(f"Scheduled notification {delivery_id} '{request.title}' for {when}")
        return delivery_id

    async def cancel(self, delivery_id: str) -> None:
        if self._pending.pop(delivery_id, None) is not None:
            logger.info(f"Cancelled notification {delivery_id}")

    async def cancel_all(self) -> None:
        count = len(self._pending)
        self._pending.clear()
        logger.info(f"Cancelled all {count} scheduled notification(s)")

    def pending(self) -> List[NotificationRequest]:
        return list(self._pending.values())


# Singleton instance
_scheduler: Optional[LocalNotificationScheduler] = None


def get_notification_scheduler() -> LocalNotificationScheduler:
    """Get or create the singleton notification scheduler."""
    global _scheduler
    if _scheduler is None:
        _scheduler = LocalNotificationScheduler()
    return _scheduler
