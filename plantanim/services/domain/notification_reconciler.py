"""
Domain service: notification reconciliation.

Decides which tasks and suggestions deserve a device notification and
reconciles them against the persisted notification records, so that the same
item is never scheduled twice. All side effects go through the state store
and the NotificationScheduler port.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, Iterator, List, Optional, Tuple

from plantanim.domain.models import (
    DailyTask,
    NotificationKind,
    NotificationRequest,
    ScheduledNotification,
    Suggestion,
    SuggestionPriority,
    TaskStatus,
)
from plantanim.infrastructure.ports import NotificationScheduler
from plantanim.infrastructure.state_store import AdvisoryStateStore
from plantanim.utils.date_helpers import (
    align_tz,
    at_local_time,
    date_key,
    parse_date_key,
    reference_time,
)

logger = logging.getLogger(__name__)

TASK_NOTIFICATION_TITLE = "Farming Task Reminder"
SUGGESTION_NOTIFICATION_TITLE = "Farming Alert"


def notification_id(kind: NotificationKind, entity_id: str) -> str:
    """Deterministic scheduling id for an item."""
    return f"{kind.value}:{entity_id}"


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation pass."""
    scheduled: List[ScheduledNotification] = field(default_factory=list)
    already_scheduled: int = 0
    failed: int = 0
    cleared: bool = False


# (kind, entity id, request, scheduled_for, expires_at)
_Candidate = Tuple[NotificationKind, str, NotificationRequest, datetime, datetime]


class NotificationReconciler:
    """
    Schedules notifications for urgent suggestions and tasks due soon.

    Idempotent: an item whose deterministic id is already recorded is left
    alone, so repeated calls never produce duplicate notifications.
    """

    def __init__(
        self,
        state: AdvisoryStateStore,
        scheduler: NotificationScheduler,
        task_notification_hour: int = 8,
        tz: Optional[tzinfo] = None,
    ):
        """
        Initialize the reconciler.

        Args:
            state: Persisted advisory state
            scheduler: Notification channel port
            task_notification_hour: Local hour at which task reminders fire
            tz: Farm timezone; reference times are converted to it so that
                "today" and the reminder hour are local
        """
        self.state = state
        self.scheduler = scheduler
        self.task_notification_hour = task_notification_hour
        self.tz = tz

    async def reconcile(
        self,
        daily_tasks: Iterable[DailyTask],
        suggestions: Iterable[Suggestion],
        enabled: bool,
        now: Optional[datetime] = None,
    ) -> ReconcileResult:
        """
        Reconcile notification-worthy items with the persisted records.

        Args:
            daily_tasks: Generated tasks (statuses already merged)
            suggestions: Engine output
            enabled: Whether notifications are switched on
            now: Reference time (defaults to the current time)

        Returns:
            ReconcileResult describing what was scheduled
        """
        now = reference_time(now, self.tz)

        if not enabled:
            await self._cancel_everything()
            return ReconcileResult(cleared=True)

        records = await self.state.get_scheduled_notifications()
        known = {record.id for record in records}
        result = ReconcileResult()

        for kind, entity_id, request, scheduled_for, expires_at in self._candidates(
            daily_tasks, suggestions, now
        ):
            nid = notification_id(kind, entity_id)
            if nid in known:
                result.already_scheduled += 1
                continue

            try:
                delivery_id = await self.scheduler.schedule(request)
            except Exception as e:
                logger.warning(f"Could not schedule notification {nid}: {e}")
                result.failed += 1
                continue

            record = ScheduledNotification(
                id=nid,
                kind=kind,
                entity_id=entity_id,
                scheduled_for=scheduled_for,
                expires_at=expires_at,
                title=request.title,
                body=request.body,
                delivery_id=delivery_id,
            )
            records.append(record)
            known.add(nid)
            result.scheduled.append(record)
            await self.state.save_scheduled_notifications(records)

        logger.info(
            f"Reconciled notifications: {len(result.scheduled)} scheduled, "
            f"{result.already_scheduled} already scheduled, {result.failed} failed"
        )
        return result

    async def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        """
        Prune records that have expired.

        A task reminder expires at its fire time. An immediate alert stays
        recorded until its suggestion expires, so that reconciling again
        with the same suggestion does not resend it. Only bookkeeping is
        removed; nothing is cancelled.

        Returns:
            Number of records pruned
        """
        now = reference_time(now, self.tz)
        records = await self.state.get_scheduled_notifications()
        active = [r for r in records if align_tz(r.expiry, now) >= now]
        pruned = len(records) - len(active)
        if pruned:
            await self.state.save_scheduled_notifications(active)
            logger.info(f"Pruned {pruned} expired notification record(s)")
        return pruned

    async def cancel_for(self, kind: NotificationKind, entity_id: str) -> bool:
        """
        Cancel one item's notification and drop its record.

        Returns:
            True if a record existed for the item
        """
        nid = notification_id(kind, entity_id)
        records = await self.state.get_scheduled_notifications()
        match = next((r for r in records if r.id == nid), None)
        if match is None:
            return False

        if match.delivery_id:
            try:
                await self.scheduler.cancel(match.delivery_id)
            except Exception as e:
                logger.warning(f"Could not cancel notification {nid}: {e}")

        await self.state.save_scheduled_notifications(
            [r for r in records if r.id != nid]
        )
        return True

    async def _cancel_everything(self) -> None:
        try:
            await self.scheduler.cancel_all()
        except Exception as e:
            logger.warning(f"Could not cancel scheduled notifications: {e}")
        await self.state.clear_scheduled_notifications()
        logger.info("Notifications disabled, cleared all scheduled notifications")

    def _candidates(
        self,
        daily_tasks: Iterable[DailyTask],
        suggestions: Iterable[Suggestion],
        now: datetime,
    ) -> Iterator[_Candidate]:
        today = now.date()
        due_keys = {date_key(today), date_key(today + timedelta(days=1))}

        for task in daily_tasks:
            if task.status != TaskStatus.PENDING or task.date not in due_keys:
                continue
            fire_at = at_local_time(
                parse_date_key(task.date), self.task_notification_hour, tzinfo=now.tzinfo
            )
            if fire_at < now:
                logger.debug(f"Reminder time for task {task.id} has passed, skipping")
                continue
            body = f"{task.title} - {task.crop_name}"
            request = NotificationRequest(
                title=TASK_NOTIFICATION_TITLE,
                body=body,
                fire_at=fire_at,
                data={"type": NotificationKind.TASK.value, "taskId": task.id, "date": task.date},
            )
            yield NotificationKind.TASK, task.id, request, fire_at, fire_at

        for suggestion in suggestions:
            if suggestion.priority != SuggestionPriority.HIGH:
                continue
            if align_tz(suggestion.valid_until, now) < now:
                continue
            request = NotificationRequest(
                title=SUGGESTION_NOTIFICATION_TITLE,
                body=suggestion.title,
                data={
                    "type": NotificationKind.SUGGESTION.value,
                    "suggestionId": suggestion.id,
                },
            )
            yield (
                NotificationKind.SUGGESTION, suggestion.id, request, now, suggestion.valid_until
            )
