"""
API router for notification endpoints.
"""
from fastapi import APIRouter

from plantanim.api.dependencies import AdvisoryServiceDep
from plantanim.api.v1.models.requests import NotificationSettingsUpdate, ReconcileRequest
from plantanim.api.v1.models.responses import (
    CleanupResponse,
    NotificationSettingsResponse,
    NotificationsResponse,
    ReconcileResponse,
)


router = APIRouter(tags=["notifications"])


@router.post(
    "/notifications/reconcile",
    response_model=ReconcileResponse,
    summary="Schedule reminders for due tasks and urgent suggestions",
    description="""
    Bring scheduled notifications in line with the current tasks and
    suggestions. Pending tasks dated today or tomorrow get an 08:00 reminder
    and unexpired HIGH-priority suggestions are sent immediately. Items that
    already have a notification are not scheduled again. With notifications
    disabled every pending notification is cancelled instead.
    """,
)
async def reconcile_notifications(
    body: ReconcileRequest,
    advisory_service: AdvisoryServiceDep,
) -> ReconcileResponse:
    result = await advisory_service.reconcile_notifications(
        tasks=body.tasks,
        suggestions=body.suggestions,
        enabled=body.enabled,
        now=body.now,
    )
    return ReconcileResponse(
        scheduled=result.scheduled,
        already_scheduled=result.already_scheduled,
        failed=result.failed,
        cleared=result.cleared,
    )


@router.post(
    "/notifications/cleanup",
    response_model=CleanupResponse,
    summary="Forget notification records whose time has passed",
)
async def cleanup_notifications(advisory_service: AdvisoryServiceDep) -> CleanupResponse:
    pruned = await advisory_service.cleanup_notifications()
    return CleanupResponse(pruned=pruned)


@router.get(
    "/notifications",
    response_model=NotificationsResponse,
    summary="List scheduled notifications",
)
async def list_notifications(advisory_service: AdvisoryServiceDep) -> NotificationsResponse:
    notifications = await advisory_service.list_notifications()
    return NotificationsResponse(notifications=notifications)


@router.get(
    "/settings/notifications",
    response_model=NotificationSettingsResponse,
    summary="Whether notifications are enabled",
)
async def get_notification_settings(
    advisory_service: AdvisoryServiceDep,
) -> NotificationSettingsResponse:
    enabled = await advisory_service.notifications_enabled()
    return NotificationSettingsResponse(enabled=enabled)


@router.put(
    "/settings/notifications",
    response_model=NotificationSettingsResponse,
    summary="Enable or disable notifications",
    description="Disabling cancels every pending notification.",
)
async def update_notification_settings(
    body: NotificationSettingsUpdate,
    advisory_service: AdvisoryServiceDep,
) -> NotificationSettingsResponse:
    await advisory_service.set_notifications_enabled(body.enabled)
    return NotificationSettingsResponse(enabled=body.enabled)
