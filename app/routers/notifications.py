# =============================================================================
# app/routers/notifications.py - Notification Endpoints
# =============================================================================
# The caller's notification inbox. All endpoints require authentication.
# /mark-all-read is declared before /{notification_id}/read.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import CurrentUser, Page
from core.models.envelope import success_response
from core.services.notification_service import NotificationService

router = APIRouter()


@router.get("")
def list_notifications(
    user: CurrentUser,
    page: Page,
    unread_only: Annotated[bool, Query(description="Only unread notifications")] = False,
):
    result = NotificationService.list_notifications(user.id, page, unread_only)
    return success_response(result, "Notifications retrieved successfully")


@router.patch("/mark-all-read")
def mark_all_read(user: CurrentUser):
    updated = NotificationService.mark_all_read(user.id)
    return success_response(
        {
            "updatedCount": updated,
            "message": f"{updated} notification(s) marked as read",
        },
        "All notifications marked as read",
    )


@router.patch("/{notification_id}/read")
def mark_read(
    notification_id: Annotated[str, Path(description="Notification id")],
    user: CurrentUser,
):
    notification = NotificationService.mark_read(user.id, notification_id)
    return success_response(notification, "Notification marked as read")
