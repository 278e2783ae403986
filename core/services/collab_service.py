# =============================================================================
# core/services/collab_service.py - Collab Post Business Logic
# =============================================================================
# A collab is a creative project posted by one user (the owner, `user_id`).
# Other users can express interest; the owner can add collaborators.
#
# Tables:
#   collab_posts          the post itself
#   collab_tags           one row per tag
#   collab_interests      one row per (collab, interested user)
#   collab_collaborators  one row per (collab, collaborator)
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import NotFoundError, OperationFailedError, ValidationFailedError
from core.models.envelope import PageRequest
from core.models.social import (
    CollabCreate,
    CollaboratorAdd,
    CollabStatus,
    CollabUpdate,
    NotificationCreate,
    NotificationType,
)
from core.services.guards import (
    database_operation,
    ensure_found,
    ensure_owner,
    is_unique_violation,
)
from core.services.notification_service import NotificationService
from lib.supabase_client import SupabaseClient
from lib.utils import (
    COLLAB_SLUG_MAX_LENGTH,
    ilike_any,
    normalize_uuid,
    same_user,
    slugify,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = ("created_at", "updated_at", "title")
PUBLIC_STATUSES = (CollabStatus.OPEN.value, CollabStatus.CLOSED.value)
MAX_TAGS = 10


def _validate_title(title: str | None) -> None:
    if not title or not 3 <= len(title) <= 200:
        raise ValidationFailedError("Title must be between 3 and 200 characters")


def _validate_summary(summary: str | None) -> None:
    if not summary or not 10 <= len(summary) <= 5000:
        raise ValidationFailedError("Summary must be between 10 and 5000 characters")


def _validate_tags(tags: list[str] | None) -> None:
    if tags is not None and len(tags) > MAX_TAGS:
        raise ValidationFailedError("Tags must be an array with maximum 10 items")


class CollabService:
    """
    Service for collab posts, interests and collaborators.

    All methods are static - no instance state needed.
    """

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------

    @staticmethod
    def list_feed(
        page: PageRequest,
        status: str | None = None,
        tag: str | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> dict[str, Any]:
        """
        Public collab feed.

        Drafts never appear unless `status=draft` is asked for explicitly.
        Sorting by `interests` orders the current page by interest count.
        """
        client = SupabaseClient.get_client()
        descending = sort_order != "asc"

        query = client.table("collab_posts").select("*", count="exact")

        if status and status != "all":
            query = query.eq("status", status)
        else:
            query = query.in_("status", list(PUBLIC_STATUSES))

        if search:
            query = query.or_(ilike_any(["title", "summary"], search))

        if tag:
            with database_operation("Failed to fetch collabs"):
                tagged = (
                    client.table("collab_tags")
                    .select("collab_id")
                    .ilike("tag_name", tag)
                    .execute()
                ).data or []
            query = query.in_("id", [row["collab_id"] for row in tagged])

        if sort_by in SORTABLE_COLUMNS:
            query = query.order(sort_by, desc=descending)
        else:
            query = query.order("created_at", desc=True)

        with database_operation("Failed to fetch collabs"):
            response = query.range(page.offset, page.end).execute()

        collabs = [CollabService._to_summary(row) for row in response.data or []]
        if sort_by == "interests":
            collabs.sort(key=lambda collab: collab["interests"], reverse=descending)

        return {
            "collabs": collabs,
            "pagination": page.summary(response.count or 0),
        }

    @staticmethod
    def list_mine(
        user_id: UUID | str,
        page: PageRequest,
        status: str | None = None,
    ) -> dict[str, Any]:
        """The caller's collabs in every status, with interest and collaborator counts."""
        client = SupabaseClient.get_client()

        query = (
            client.table("collab_posts")
            .select("*", count="exact")
            .eq("user_id", normalize_uuid(user_id))
        )
        if status:
            query = query.eq("status", status)

        with database_operation("Failed to fetch collabs"):
            response = (
                query.order("created_at", desc=True)
                .range(page.offset, page.end)
                .execute()
            )

        collabs = []
        for row in response.data or []:
            summary = CollabService._to_summary(row, with_author=False)
            with database_operation("Failed to fetch collabs"):
                summary["collaborators"] = SupabaseClient.count_rows(
                    "collab_collaborators", collab_id=row["id"]
                )
            collabs.append(summary)

        return {
            "collabs": collabs,
            "pagination": page.summary(response.count or 0),
        }

    @staticmethod
    def create_collab(user_id: UUID | str, body: CollabCreate) -> dict[str, Any]:
        _validate_title(body.title)
        _validate_summary(body.summary)
        _validate_tags(body.tags)

        client = SupabaseClient.get_client()

        with database_operation("Failed to create collab"):
            response = (
                client.table("collab_posts")
                .insert({
                    "user_id": normalize_uuid(user_id),
                    "title": body.title,
                    "slug": slugify(body.title, COLLAB_SLUG_MAX_LENGTH),
                    "summary": body.summary,
                    "cover_image_url": body.cover_image_url,
                    "status": (body.status or CollabStatus.OPEN).value,
                })
                .execute()
            )
        collab = response.data[0]

        logger.info(f"Created collab {collab['id']} for user: {user_id}")

        CollabService._write_tags(collab["id"], body.tags)
        return {**CollabService._to_response(collab), "tags": body.tags or []}

    @staticmethod
    def get_collab(collab_id: str, user_id: UUID | str | None = None) -> dict[str, Any]:
        """
        Collab detail.

        Authenticated callers also get `userHasInterest` and `isOwner`;
        the owner additionally gets the collaborator list.
        """
        with database_operation("Failed to fetch collab"):
            collab = SupabaseClient.fetch_one("collab_posts", id=collab_id)
        collab = ensure_found(collab, "Collab not found")

        detail = CollabService._to_summary(collab)

        if user_id:
            is_owner = same_user(collab.get("user_id"), user_id)
            with database_operation("Failed to fetch collab"):
                interest = SupabaseClient.fetch_one(
                    "collab_interests",
                    "id",
                    collab_id=collab_id,
                    user_id=normalize_uuid(user_id),
                )
            detail["userHasInterest"] = interest is not None
            detail["isOwner"] = is_owner
            if is_owner:
                detail["collaborators"] = CollabService.list_collaborators(collab_id)

        return detail

    @staticmethod
    def update_collab(
        collab_id: str,
        user_id: UUID | str,
        body: CollabUpdate,
    ) -> dict[str, Any]:
        """Partial update by the owner. Tags in the body replace stored tags."""
        CollabService._get_owned(collab_id, user_id, "Forbidden: You do not own this collab")

        changes = body.model_dump(exclude_unset=True, exclude={"tags"})
        if "title" in changes:
            _validate_title(body.title)
            changes["slug"] = slugify(body.title, COLLAB_SLUG_MAX_LENGTH)
        if "summary" in changes:
            _validate_summary(body.summary)
        if "status" in changes and changes["status"] is not None:
            changes["status"] = CollabStatus(changes["status"]).value
        _validate_tags(body.tags)

        client = SupabaseClient.get_client()
        changes["updated_at"] = utc_now_iso()

        with database_operation("Failed to update collab"):
            response = (
                client.table("collab_posts")
                .update(changes)
                .eq("id", collab_id)
                .execute()
            )
        collab = response.data[0]

        if body.tags is not None:
            CollabService._write_tags(collab_id, body.tags, replace=True)

        return {**CollabService._to_response(collab), "tags": CollabService._fetch_tags(collab_id)}

    @staticmethod
    def delete_collab(collab_id: str, user_id: UUID | str) -> None:
        CollabService._get_owned(collab_id, user_id, "Forbidden: You do not own this collab")
        client = SupabaseClient.get_client()

        with database_operation("Failed to delete collab"):
            client.table("collab_posts").delete().eq("id", collab_id).execute()

        logger.info(f"Deleted collab {collab_id}")

    @staticmethod
    def close_collab(collab_id: str, user_id: UUID | str) -> dict[str, Any]:
        CollabService._get_owned(
            collab_id, user_id, "Forbidden: Only the owner can close this collab"
        )
        client = SupabaseClient.get_client()

        with database_operation("Failed to close collab"):
            response = (
                client.table("collab_posts")
                .update({"status": CollabStatus.CLOSED.value, "updated_at": utc_now_iso()})
                .eq("id", collab_id)
                .execute()
            )
        collab = response.data[0]

        return {
            "id": collab["id"],
            "status": collab["status"],
            "updated_at": collab.get("updated_at"),
        }

    # -------------------------------------------------------------------------
    # Interests
    # -------------------------------------------------------------------------

    @staticmethod
    def add_interest(collab_id: str, user_id: UUID | str) -> dict[str, Any]:
        """
        Express interest in someone else's collab. The owner is notified.

        Raises:
            ValidationFailedError: Own collab, or interest already expressed
        """
        with database_operation("Failed to fetch collab"):
            collab = SupabaseClient.fetch_one("collab_posts", "id, user_id, title", id=collab_id)
        collab = ensure_found(collab, "Collab not found")

        if same_user(collab.get("user_id"), user_id):
            raise ValidationFailedError("Cannot express interest in your own collab")

        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        with database_operation("Failed to express interest"):
            existing = SupabaseClient.fetch_one(
                "collab_interests", "id", collab_id=collab_id, user_id=user_id_str
            )
        if existing:
            raise ValidationFailedError("You have already expressed interest in this collab")

        try:
            response = (
                client.table("collab_interests")
                .insert({"collab_id": collab_id, "user_id": user_id_str})
                .execute()
            )
        except Exception as e:
            if is_unique_violation(e):
                raise ValidationFailedError("You have already expressed interest in this collab")
            logger.error(f"Failed to express interest: {e}")
            raise OperationFailedError("Failed to express interest", e) from e
        interest = response.data[0]

        NotificationService.notify(NotificationCreate(
            user_id=collab["user_id"],
            type=NotificationType.COLLAB_INTEREST,
            title="New Interest in Your Collab",
            message=f'{SupabaseClient.fetch_author(user_id_str)["name"]} is interested in "{collab.get("title")}"',
            actor_id=user_id_str,
            metadata={"collab_id": collab_id},
        ))

        with database_operation("Failed to count interests"):
            total = SupabaseClient.count_rows("collab_interests", collab_id=collab_id)

        return {
            "collab_id": interest["collab_id"],
            "user_id": interest["user_id"],
            "created_at": interest.get("created_at"),
            "totalInterests": total,
        }

    @staticmethod
    def remove_interest(collab_id: str, user_id: UUID | str) -> dict[str, Any]:
        client = SupabaseClient.get_client()

        with database_operation("Failed to remove interest"):
            client.table("collab_interests").delete().eq("collab_id", collab_id).eq(
                "user_id", normalize_uuid(user_id)
            ).execute()
            total = SupabaseClient.count_rows("collab_interests", collab_id=collab_id)

        return {"totalInterests": total}

    @staticmethod
    def list_interests(
        collab_id: str,
        user_id: UUID | str,
        page: PageRequest,
    ) -> dict[str, Any]:
        """Interested users of a collab. Owner only."""
        CollabService._get_owned(
            collab_id, user_id, "Forbidden: Only the owner can view interested users"
        )
        client = SupabaseClient.get_client()

        with database_operation("Failed to fetch interested users"):
            response = (
                client.table("collab_interests")
                .select("id, user_id, created_at", count="exact")
                .eq("collab_id", collab_id)
                .order("created_at", desc=True)
                .range(page.offset, page.end)
                .execute()
            )

        interests = [
            {
                "id": row["id"],
                "user": SupabaseClient.fetch_author(row["user_id"]),
                "created_at": row.get("created_at"),
            }
            for row in response.data or []
        ]

        return {
            "interests": interests,
            "pagination": page.summary(response.count or 0),
        }

    # -------------------------------------------------------------------------
    # Collaborators
    # -------------------------------------------------------------------------

    @staticmethod
    def list_collaborators(collab_id: str) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()

        with database_operation("Failed to fetch collaborators"):
            response = (
                client.table("collab_collaborators")
                .select("id, user_id, role, department, added_at, added_by")
                .eq("collab_id", collab_id)
                .order("added_at")
                .execute()
            )

        return [
            {
                "id": row["id"],
                "user": SupabaseClient.fetch_author(row["user_id"]),
                "role": row.get("role"),
                "department": row.get("department"),
                "added_at": row.get("added_at"),
                "added_by": row.get("added_by"),
            }
            for row in response.data or []
        ]

    @staticmethod
    def add_collaborator(
        collab_id: str,
        user_id: UUID | str,
        body: CollaboratorAdd,
    ) -> dict[str, Any]:
        """
        Add a user to a collab. Owner only.

        Raises:
            ValidationFailedError: Missing user_id or already a collaborator
            NotFoundError: Unknown collab or target user without a profile
        """
        if not body.user_id:
            raise ValidationFailedError("user_id is required")

        collab = CollabService._get_owned(
            collab_id, user_id, "Forbidden: Only the owner can add collaborators"
        )

        with database_operation("Failed to add collaborator"):
            target = SupabaseClient.fetch_user_profile(body.user_id, "user_id")
            if not target:
                raise NotFoundError("User not found")
            existing = SupabaseClient.fetch_one(
                "collab_collaborators", "id", collab_id=collab_id, user_id=body.user_id
            )
        if existing:
            raise ValidationFailedError("User is already a collaborator")

        client = SupabaseClient.get_client()
        owner_id = normalize_uuid(user_id)

        with database_operation("Failed to add collaborator"):
            response = (
                client.table("collab_collaborators")
                .insert({
                    "collab_id": collab_id,
                    "user_id": body.user_id,
                    "role": body.role,
                    "department": body.department,
                    "added_by": owner_id,
                })
                .execute()
            )
        collaborator = response.data[0]

        NotificationService.notify(NotificationCreate(
            user_id=body.user_id,
            type=NotificationType.COLLABORATOR_ADDED,
            title="Added as Collaborator",
            message=f'You have been added to "{collab.get("title")}"',
            actor_id=owner_id,
            metadata={"collab_id": collab_id},
        ))

        return {
            "id": collaborator["id"],
            "collab_id": collaborator["collab_id"],
            "user_id": collaborator["user_id"],
            "role": collaborator.get("role"),
            "department": collaborator.get("department"),
            "added_at": collaborator.get("added_at"),
            "added_by": collaborator.get("added_by"),
        }

    @staticmethod
    def remove_collaborator(
        collab_id: str,
        user_id: UUID | str,
        collaborator_user_id: str,
    ) -> None:
        CollabService._get_owned(
            collab_id, user_id, "Forbidden: Only the owner can remove collaborators"
        )
        client = SupabaseClient.get_client()

        with database_operation("Failed to remove collaborator"):
            client.table("collab_collaborators").delete().eq("collab_id", collab_id).eq(
                "user_id", collaborator_user_id
            ).execute()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _get_owned(collab_id: str, user_id: UUID | str, forbidden: str) -> dict[str, Any]:
        with database_operation("Failed to fetch collab"):
            collab = SupabaseClient.fetch_one("collab_posts", id=collab_id)
        return ensure_owner(collab, user_id, "user_id", "Collab not found", forbidden)

    @staticmethod
    def _fetch_tags(collab_id: str) -> list[str]:
        client = SupabaseClient.get_client()
        with database_operation("Failed to fetch tags"):
            rows = (
                client.table("collab_tags")
                .select("tag_name")
                .eq("collab_id", collab_id)
                .execute()
            ).data or []
        return [row["tag_name"] for row in rows]

    @staticmethod
    def _write_tags(collab_id: str, tags: list[str] | None, replace: bool = False) -> None:
        """Store tags for a collab. Failures are logged, never raised."""
        client = SupabaseClient.get_client()
        try:
            if replace:
                client.table("collab_tags").delete().eq("collab_id", collab_id).execute()
            if tags:
                client.table("collab_tags").insert(
                    [{"collab_id": collab_id, "tag_name": tag} for tag in tags]
                ).execute()
        except Exception as e:
            logger.warning(f"Failed to write tags for collab {collab_id}: {e}")

    @staticmethod
    def _to_response(collab: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": collab["id"],
            "user_id": collab.get("user_id"),
            "title": collab.get("title"),
            "slug": collab.get("slug"),
            "summary": collab.get("summary"),
            "cover_image_url": collab.get("cover_image_url"),
            "status": collab.get("status"),
            "created_at": collab.get("created_at"),
            "updated_at": collab.get("updated_at"),
        }

    @staticmethod
    def _to_summary(collab: dict[str, Any], with_author: bool = True) -> dict[str, Any]:
        """Feed card: the post, its tags, interest count and author."""
        summary = CollabService._to_response(collab)
        summary["tags"] = CollabService._fetch_tags(collab["id"])
        with database_operation("Failed to count interests"):
            summary["interests"] = SupabaseClient.count_rows(
                "collab_interests", collab_id=collab["id"]
            )
        if with_author:
            summary["author"] = SupabaseClient.fetch_author(collab.get("user_id"))
        return summary
