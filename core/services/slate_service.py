# =============================================================================
# core/services/slate_service.py - Slate Feed Business Logic
# =============================================================================
# Slate is the social feed: short text posts with optional media, likes,
# comments, saves and shares.
#
#   slate_posts     the post (owner: user_id); counters are kept in sync here
#   slate_media     ordered media attached to a post
#   slate_likes     one row per (post, user)
#   slate_comments  comments and replies (parent_comment_id)
#   slate_saved     bookmarks, one row per (post, user)
#   slate_shares    reposts, one row per (post, user)
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import OperationFailedError, ValidationFailedError
from core.models.envelope import PageRequest
from core.models.social import (
    SlateCommentCreate,
    SlateCommentUpdate,
    SlateCreate,
    SlateStatus,
    SlateUpdate,
)
from core.services.guards import (
    database_operation,
    ensure_found,
    ensure_owner,
    is_unique_violation,
)
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, post_slug, utc_now_iso

logger = logging.getLogger(__name__)

POST_COLUMNS = (
    "id, user_id, content, slug, status, likes_count, comments_count, "
    "shares_count, created_at, updated_at"
)
COMMENT_COLUMNS = "id, post_id, user_id, content, parent_comment_id, created_at, updated_at"
VIDEO_EXTENSIONS = (".mp4", ".mov", ".avi")
MAX_FEED_LIMIT = 50
MAX_COMMENT_LENGTH = 2000
STATUS_ERROR = "Invalid status. Must be: published, draft, or archived"

# reaction table -> counter column on slate_posts
COUNTERS = {
    "slate_likes": "likes_count",
    "slate_comments": "comments_count",
    "slate_shares": "shares_count",
}


def media_type_for(url: str) -> str:
    """'video' for .mp4/.mov/.avi URLs, otherwise 'image'."""
    lowered = url.lower()
    return "video" if any(ext in lowered for ext in VIDEO_EXTENSIONS) else "image"


def _validate_content(content: str | None) -> None:
    if not content or not isinstance(content, str):
        raise ValidationFailedError("Content is required")
    if len(content) > 5000:
        raise ValidationFailedError("Content must be between 1 and 5000 characters")


def _feed_pagination(page: PageRequest, total: int) -> dict[str, Any]:
    return {
        "page": page.page,
        "limit": page.limit,
        "total": total,
        "hasMore": total > page.offset + page.limit,
    }


def _validate_comment(content: str | None) -> None:
    if not content or not isinstance(content, str):
        raise ValidationFailedError("Content is required")
    if len(content) > MAX_COMMENT_LENGTH:
        raise ValidationFailedError("Content must be between 1 and 2000 characters")


class SlateService:
    """Service for slate posts and the reactions on them."""

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------

    @staticmethod
    def list_feed(
        page: PageRequest,
        sort: str = "latest",
        search: str | None = None,
        viewer_id: UUID | str | None = None,
    ) -> dict[str, Any]:
        """
        Published posts, newest or most liked first.

        Args:
            page: Page and limit (limit is capped at 50)
            sort: "latest" or "popular"
            search: Case-insensitive match on content
            viewer_id: Optional caller, used to fill in user_has_liked/user_has_saved
        """
        client = SupabaseClient.get_client()

        query = (
            client.table("slate_posts")
            .select(POST_COLUMNS, count="exact")
            .eq("status", SlateStatus.PUBLISHED.value)
        )
        if search:
            query = query.ilike("content", f"%{search}%")

        if sort == "popular":
            query = query.order("likes_count", desc=True)
        else:
            query = query.order("created_at", desc=True)

        with database_operation("Failed to fetch posts"):
            response = query.range(page.offset, page.end).execute()

        posts = response.data or []
        post_ids = [post["id"] for post in posts]
        liked = SlateService._viewer_post_ids("slate_likes", viewer_id, post_ids)
        saved = SlateService._viewer_post_ids("slate_saved", viewer_id, post_ids)

        return {
            "posts": [
                {
                    **SlateService._to_response(post),
                    "user_has_liked": post["id"] in liked,
                    "user_has_saved": post["id"] in saved,
                }
                for post in posts
            ],
            "pagination": _feed_pagination(page, response.count or 0),
        }

    @staticmethod
    def list_mine(
        user_id: UUID | str,
        page: PageRequest,
        status: str | None = None,
    ) -> dict[str, Any]:
        client = SupabaseClient.get_client()

        query = (
            client.table("slate_posts")
            .select(POST_COLUMNS, count="exact")
            .eq("user_id", normalize_uuid(user_id))
        )
        if status:
            query = query.eq("status", status)

        with database_operation("Failed to fetch posts"):
            response = (
                query.order("created_at", desc=True)
                .range(page.offset, page.end)
                .execute()
            )

        return {
            "posts": [SlateService._to_response(post) for post in response.data or []],
            "pagination": _feed_pagination(page, response.count or 0),
        }

    @staticmethod
    def create_post(user_id: UUID | str, body: SlateCreate) -> dict[str, Any]:
        """
        Create a post with optional media.

        Media rows are written best effort; the post is returned even if
        they fail.
        """
        _validate_content(body.content)
        if body.status not in SlateStatus.values():
            raise ValidationFailedError(STATUS_ERROR)

        client = SupabaseClient.get_client()

        with database_operation("Failed to create post"):
            response = (
                client.table("slate_posts")
                .insert({
                    "user_id": normalize_uuid(user_id),
                    "content": body.content,
                    "status": body.status,
                    "slug": post_slug(body.content),
                })
                .execute()
            )
        post = response.data[0]

        if body.media_urls:
            media = [
                {
                    "post_id": post["id"],
                    "media_url": url,
                    "media_type": media_type_for(url),
                    "sort_order": index,
                }
                for index, url in enumerate(body.media_urls)
            ]
            try:
                client.table("slate_media").insert(media).execute()
            except Exception as e:
                logger.warning(f"Failed to attach media to post {post['id']}: {e}")

        logger.info(f"Created slate post {post['id']} for user: {user_id}")
        return SlateService._to_response(post)

    @staticmethod
    def get_post(post_id: str, viewer_id: UUID | str | None = None) -> dict[str, Any]:
        with database_operation("Failed to fetch post"):
            post = SupabaseClient.fetch_one("slate_posts", POST_COLUMNS, id=post_id)
        post = ensure_found(post, "Post not found")

        liked = SlateService._viewer_post_ids("slate_likes", viewer_id, [post["id"]])
        saved = SlateService._viewer_post_ids("slate_saved", viewer_id, [post["id"]])
        return {
            **SlateService._to_response(post),
            "user_has_liked": post["id"] in liked,
            "user_has_saved": post["id"] in saved,
        }

    @staticmethod
    def update_post(post_id: str, user_id: UUID | str, body: SlateUpdate) -> dict[str, Any]:
        """
        Update content and/or status of the caller's post.

        Raises:
            ValidationFailedError: Nothing to update, bad content or status
        """
        SlateService._get_owned(post_id, user_id, "You do not have permission to update this post")

        changes: dict[str, Any] = {}
        if body.content is not None:
            if not body.content or len(body.content) > 5000:
                raise ValidationFailedError("Content must be between 1 and 5000 characters")
            changes["content"] = body.content
        if body.status is not None:
            if body.status not in SlateStatus.values():
                raise ValidationFailedError(STATUS_ERROR)
            changes["status"] = body.status

        if not changes:
            raise ValidationFailedError("No valid fields to update")

        client = SupabaseClient.get_client()
        changes["updated_at"] = utc_now_iso()

        with database_operation("Failed to update post"):
            response = (
                client.table("slate_posts")
                .update(changes)
                .eq("id", post_id)
                .execute()
            )
        return SlateService._to_response(response.data[0])

    @staticmethod
    def delete_post(post_id: str, user_id: UUID | str) -> None:
        SlateService._get_owned(post_id, user_id, "You do not have permission to delete this post")
        client = SupabaseClient.get_client()

        with database_operation("Failed to delete post"):
            client.table("slate_posts").delete().eq("id", post_id).execute()

        logger.info(f"Deleted slate post {post_id}")

    # -------------------------------------------------------------------------
    # Likes
    # -------------------------------------------------------------------------

    @staticmethod
    def like_post(post_id: str, user_id: UUID | str) -> dict[str, Any]:
        """
        Like a post.

        Raises:
            NotFoundError: If the post doesn't exist
            ValidationFailedError: If the caller already liked it
        """
        SlateService._require_post(post_id)
        SlateService._add_reaction("slate_likes", post_id, user_id, "like", "Post already liked")
        return {"likes_count": SlateService._sync_counter(post_id, "slate_likes")}

    @staticmethod
    def unlike_post(post_id: str, user_id: UUID | str) -> dict[str, Any]:
        SlateService._remove_reaction("slate_likes", post_id, user_id, "Failed to unlike post")
        return {"likes_count": SlateService._sync_counter(post_id, "slate_likes")}

    @staticmethod
    def list_likes(post_id: str, page: PageRequest) -> dict[str, Any]:
        """Users who liked a post, newest first."""
        SlateService._require_post(post_id)
        client = SupabaseClient.get_client()

        with database_operation("Failed to fetch likes"):
            response = (
                client.table("slate_likes")
                .select("id, user_id, created_at", count="exact")
                .eq("post_id", post_id)
                .order("created_at", desc=True)
                .range(page.offset, page.end)
                .execute()
            )

        likes = [
            {
                "id": row["id"],
                "user": SupabaseClient.fetch_author(row["user_id"]),
                "created_at": row.get("created_at"),
            }
            for row in response.data or []
        ]

        return {
            "likes": likes,
            "pagination": _feed_pagination(page, response.count or 0),
        }

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------

    @staticmethod
    def list_comments(post_id: str, page: PageRequest) -> dict[str, Any]:
        """Comments on a post, newest first, replies included."""
        SlateService._require_post(post_id)
        client = SupabaseClient.get_client()

        with database_operation("Failed to fetch comments"):
            response = (
                client.table("slate_comments")
                .select(COMMENT_COLUMNS, count="exact")
                .eq("post_id", post_id)
                .order("created_at", desc=True)
                .range(page.offset, page.end)
                .execute()
            )

        return {
            "comments": [SlateService._comment_response(row) for row in response.data or []],
            "pagination": _feed_pagination(page, response.count or 0),
        }

    @staticmethod
    def add_comment(post_id: str, user_id: UUID | str, body: SlateCommentCreate) -> dict[str, Any]:
        """
        Comment on a post, or reply to one of its comments.

        Raises:
            ValidationFailedError: Missing or over-long content
            NotFoundError: Post or parent comment doesn't exist
        """
        _validate_comment(body.content)
        SlateService._require_post(post_id)

        if body.parent_comment_id:
            with database_operation("Failed to fetch comment"):
                parent = SupabaseClient.fetch_one(
                    "slate_comments", "id", id=body.parent_comment_id, post_id=post_id
                )
            ensure_found(parent, "Parent comment not found")

        client = SupabaseClient.get_client()

        with database_operation("Failed to add comment"):
            response = (
                client.table("slate_comments")
                .insert({
                    "post_id": post_id,
                    "user_id": normalize_uuid(user_id),
                    "content": body.content,
                    "parent_comment_id": body.parent_comment_id or None,
                })
                .execute()
            )
        comment = response.data[0]

        SlateService._sync_counter(post_id, "slate_comments")
        logger.info(f"User {user_id} commented on slate post {post_id}")
        return SlateService._comment_response(comment)

    @staticmethod
    def update_comment(comment_id: str, user_id: UUID | str, body: SlateCommentUpdate) -> dict[str, Any]:
        _validate_comment(body.content)
        SlateService._get_owned_comment(
            comment_id, user_id, "You do not have permission to edit this comment"
        )
        client = SupabaseClient.get_client()

        with database_operation("Failed to update comment"):
            response = (
                client.table("slate_comments")
                .update({"content": body.content, "updated_at": utc_now_iso()})
                .eq("id", comment_id)
                .execute()
            )
        return SlateService._comment_response(response.data[0])

    @staticmethod
    def delete_comment(comment_id: str, user_id: UUID | str) -> None:
        """Delete the caller's comment; replies go with it (ON DELETE CASCADE)."""
        comment = SlateService._get_owned_comment(
            comment_id, user_id, "You do not have permission to delete this comment"
        )
        client = SupabaseClient.get_client()

        with database_operation("Failed to delete comment"):
            client.table("slate_comments").delete().eq("id", comment_id).execute()

        SlateService._sync_counter(comment["post_id"], "slate_comments")
        logger.info(f"Deleted slate comment {comment_id}")

    # -------------------------------------------------------------------------
    # Saves
    # -------------------------------------------------------------------------

    @staticmethod
    def save_post(post_id: str, user_id: UUID | str) -> None:
        SlateService._require_post(post_id)
        SlateService._add_reaction("slate_saved", post_id, user_id, "save", "Post already saved")

    @staticmethod
    def unsave_post(post_id: str, user_id: UUID | str) -> None:
        SlateService._remove_reaction("slate_saved", post_id, user_id, "Failed to unsave post")

    @staticmethod
    def list_saved(user_id: UUID | str, page: PageRequest) -> dict[str, Any]:
        """
        Posts the caller saved, most recently saved first.

        Saves pointing at deleted posts are skipped.
        """
        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        with database_operation("Failed to fetch saved posts"):
            response = (
                client.table("slate_saved")
                .select("id, post_id, created_at", count="exact")
                .eq("user_id", user_id_str)
                .order("created_at", desc=True)
                .range(page.offset, page.end)
                .execute()
            )
        saves = response.data or []

        post_ids = [save["post_id"] for save in saves]
        posts: dict[str, dict[str, Any]] = {}
        if post_ids:
            with database_operation("Failed to fetch saved posts"):
                rows = (
                    client.table("slate_posts")
                    .select(POST_COLUMNS)
                    .in_("id", post_ids)
                    .execute()
                ).data or []
            posts = {row["id"]: row for row in rows}

        liked = SlateService._viewer_post_ids("slate_likes", user_id_str, list(posts))

        return {
            "posts": [
                {
                    **SlateService._to_response(posts[save["post_id"]]),
                    "saved_at": save.get("created_at"),
                    "user_has_liked": save["post_id"] in liked,
                    "user_has_saved": True,
                }
                for save in saves
                if save["post_id"] in posts
            ],
            "pagination": _feed_pagination(page, response.count or 0),
        }

    # -------------------------------------------------------------------------
    # Shares
    # -------------------------------------------------------------------------

    @staticmethod
    def share_post(post_id: str, user_id: UUID | str) -> dict[str, Any]:
        SlateService._require_post(post_id)
        SlateService._add_reaction("slate_shares", post_id, user_id, "share", "Post already shared")
        return {"shares_count": SlateService._sync_counter(post_id, "slate_shares")}

    @staticmethod
    def unshare_post(post_id: str, user_id: UUID | str) -> dict[str, Any]:
        SlateService._remove_reaction("slate_shares", post_id, user_id, "Failed to unshare post")
        return {"shares_count": SlateService._sync_counter(post_id, "slate_shares")}

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_post(post_id: str) -> dict[str, Any]:
        with database_operation("Failed to fetch post"):
            post = SupabaseClient.fetch_one("slate_posts", "id", id=post_id)
        return ensure_found(post, "Post not found")

    @staticmethod
    def _get_owned(post_id: str, user_id: UUID | str, forbidden: str) -> dict[str, Any]:
        with database_operation("Failed to fetch post"):
            post = SupabaseClient.fetch_one("slate_posts", "id, user_id", id=post_id)
        return ensure_owner(post, user_id, "user_id", "Post not found", forbidden)

    @staticmethod
    def _get_owned_comment(comment_id: str, user_id: UUID | str, forbidden: str) -> dict[str, Any]:
        with database_operation("Failed to fetch comment"):
            comment = SupabaseClient.fetch_one("slate_comments", "id, post_id, user_id", id=comment_id)
        return ensure_owner(comment, user_id, "user_id", "Comment not found", forbidden)

    @staticmethod
    def _add_reaction(table: str, post_id: str, user_id: UUID | str, verb: str, duplicate: str) -> None:
        """Insert a (post, user) row; a unique violation means the caller already did it."""
        client = SupabaseClient.get_client()

        try:
            client.table(table).insert({
                "post_id": post_id,
                "user_id": normalize_uuid(user_id),
            }).execute()
        except Exception as e:
            if is_unique_violation(e):
                raise ValidationFailedError(duplicate)
            logger.error(f"Failed to {verb} post: {e}")
            raise OperationFailedError(f"Failed to {verb} post", e) from e

    @staticmethod
    def _remove_reaction(table: str, post_id: str, user_id: UUID | str, action: str) -> None:
        client = SupabaseClient.get_client()

        with database_operation(action):
            client.table(table).delete().eq("post_id", post_id).eq(
                "user_id", normalize_uuid(user_id)
            ).execute()

    @staticmethod
    def _sync_counter(post_id: str, table: str) -> int:
        """Recount a reaction table and store the total on the post."""
        column = COUNTERS[table]
        client = SupabaseClient.get_client()

        with database_operation(f"Failed to update {column}"):
            total = SupabaseClient.count_rows(table, post_id=post_id)
            client.table("slate_posts").update({column: total}).eq("id", post_id).execute()
        return total

    @staticmethod
    def _viewer_post_ids(table: str, viewer_id: UUID | str | None, post_ids: list[str]) -> set[str]:
        """Which of `post_ids` the viewer has a row for in `table`."""
        if not viewer_id or not post_ids:
            return set()

        client = SupabaseClient.get_client()
        with database_operation("Failed to fetch post state"):
            rows = (
                client.table(table)
                .select("post_id")
                .eq("user_id", normalize_uuid(viewer_id))
                .in_("post_id", post_ids)
                .execute()
            ).data or []
        return {row["post_id"] for row in rows}

    @staticmethod
    def _fetch_media(post_id: str) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        with database_operation("Failed to fetch media"):
            return (
                client.table("slate_media")
                .select("id, media_url, media_type, sort_order")
                .eq("post_id", post_id)
                .order("sort_order")
                .execute()
            ).data or []

    @staticmethod
    def _comment_response(comment: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": comment["id"],
            "content": comment.get("content"),
            "parent_comment_id": comment.get("parent_comment_id"),
            "created_at": comment.get("created_at"),
            "updated_at": comment.get("updated_at"),
            "author": SupabaseClient.fetch_author(comment.get("user_id")),
        }

    @staticmethod
    def _to_response(post: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": post["id"],
            "content": post.get("content"),
            "slug": post.get("slug"),
            "status": post.get("status"),
            "likes_count": post.get("likes_count") or 0,
            "comments_count": post.get("comments_count") or 0,
            "shares_count": post.get("shares_count") or 0,
            "created_at": post.get("created_at"),
            "updated_at": post.get("updated_at"),
            "author": SupabaseClient.fetch_author(post.get("user_id")),
            "media": SlateService._fetch_media(post["id"]),
        }
