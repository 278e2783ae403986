# =============================================================================
# core/services/notification_service.py - Notification Inbox
# =============================================================================
# Reads and updates the caller's notifications, and creates notifications on
# behalf of other services (a new application, a status change, ...).
#
# Creating a notification is a side effect: `notify` logs and swallows
# failures so the action that triggered it still succeeds.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import NotFoundError
from core.models.envelope import PageRequest
from core.models.social import NotificationCreate
from core.services.guards import database_operation
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now_iso

logger = logging.getLogger(__name__)

NOTIFICATION_COLUMNS = (
    "id, user_id, type, title, message, is_read, metadata, actor_id, "
    "related_gig_id, related_application_id, created_at, updated_at"
)


class NotificationService:
    """Service for the per-user notification inbox."""

    @staticmethod
    def notify(notification: NotificationCreate) -> dict[str, Any] | None:
        """
        Insert a notification row.

        Never raises: a failed insert is logged and None is returned.

        Example:
            NotificationService.notify(NotificationCreate(
                user_id=gig["created_by"],
                type=NotificationType.APPLICATION_RECEIVED,
                title="New Application Received",
                message='Sam has applied to your gig "Gaffer"',
            ))
        """
        row = notification.model_dump(mode="json")
        row["is_read"] = False

        try:
            client = SupabaseClient.get_client()
            response = client.table("notifications").insert(row).execute()
        except Exception as e:
            logger.warning(f"Notification for {notification.user_id} not created: {e}")
            return None

        return (response.data or [None])[0]

    @staticmethod
    def list_notifications(
        user_id: UUID | str,
        page: PageRequest,
        unread_only: bool = False,
    ) -> dict[str, Any]:
        """
        List the caller's notifications, newest first.

        Returns:
            Dict with notifications, pagination and unreadCount
        """
        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        query = (
            client.table("notifications")
            .select(NOTIFICATION_COLUMNS, count="exact")
            .eq("user_id", user_id_str)
        )
        if unread_only:
            query = query.eq("is_read", False)

        with database_operation("Failed to fetch notifications"):
            response = (
                query.order("created_at", desc=True)
                .range(page.offset, page.end)
                .execute()
            )
            unread_count = SupabaseClient.count_rows(
                "notifications", user_id=user_id_str, is_read=False
            )

        notifications = [
            NotificationService._to_response(row) for row in response.data or []
        ]

        return {
            "notifications": notifications,
            "pagination": page.summary(response.count or 0),
            "unreadCount": unread_count,
        }

    @staticmethod
    def mark_read(user_id: UUID | str, notification_id: str) -> dict[str, Any]:
        """
        Mark one notification as read.

        The update is scoped to the caller, so someone else's notification
        id is indistinguishable from a missing one.
        """
        client = SupabaseClient.get_client()

        with database_operation("Failed to update notification"):
            response = (
                client.table("notifications")
                .update({"is_read": True, "updated_at": utc_now_iso()})
                .eq("id", notification_id)
                .eq("user_id", normalize_uuid(user_id))
                .execute()
            )

        if not response.data:
            raise NotFoundError("Notification not found or unauthorized")

        row = response.data[0]
        return {"id": row["id"], "isRead": row.get("is_read", True)}

    @staticmethod
    def mark_all_read(user_id: UUID | str) -> int:
        """Mark every unread notification as read. Returns how many changed."""
        client = SupabaseClient.get_client()

        with database_operation("Failed to mark all notifications as read"):
            response = (
                client.table("notifications")
                .update({"is_read": True, "updated_at": utc_now_iso()})
                .eq("user_id", normalize_uuid(user_id))
                .eq("is_read", False)
                .execute()
            )

        updated = len(response.data or [])
        logger.info(f"Marked {updated} notification(s) read for user: {user_id}")
        return updated

    @staticmethod
    def _to_response(row: dict[str, Any]) -> dict[str, Any]:
        actor = None
        if row.get("actor_id"):
            actor = SupabaseClient.fetch_author(row["actor_id"])

        return {
            "id": row["id"],
            "type": row.get("type"),
            "title": row.get("title"),
            "message": row.get("message"),
            "isRead": bool(row.get("is_read")),
            "metadata": row.get("metadata"),
            "relatedGigId": row.get("related_gig_id"),
            "relatedApplicationId": row.get("related_application_id"),
            "actor": actor,
            "createdAt": row.get("created_at"),
            "updatedAt": row.get("updated_at"),
        }
