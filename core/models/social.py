# =============================================================================
# core/models/social.py - Collab, Slate & Notification Schemas
# =============================================================================
# The social side of the marketplace:
# - Collab posts: creative projects others can show interest in / join
# - Slate posts: short feed posts with media, likes, comments, saves and shares
# - Notifications: per-user inbox entries created by other actions
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class CollabStatus(str, Enum):
    """
    Possible states for a collab post.

    The public feed shows `open` and `closed`; drafts are visible to the
    owner only (GET /collab/my).
    """
    DRAFT = "draft"
    OPEN = "open"
    CLOSED = "closed"


class SlateStatus(str, Enum):
    """Possible states for a slate post. Only `published` shows in the feed."""
    PUBLISHED = "published"
    DRAFT = "draft"
    ARCHIVED = "archived"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


class NotificationType(str, Enum):
    """Kinds of notification the API creates."""
    APPLICATION_RECEIVED = "application_received"
    STATUS_CHANGED = "status_changed"
    COLLAB_INTEREST = "collab_interest"
    COLLABORATOR_ADDED = "collaborator_added"


# -----------------------------------------------------------------------------
# Collab
# -----------------------------------------------------------------------------

class CollabCreate(BaseModel):
    """
    Body for POST /collab.

    Lengths are checked in the service so errors carry a readable message.

    Example:
        {
            "title": "Short film: The Last Reel",
            "summary": "Looking for a DOP and sound recordist for a weekend shoot...",
            "tags": ["short-film", "dop"]
        }
    """
    title: str | None = None
    summary: str | None = None
    tags: list[str] | None = None
    cover_image_url: str | None = None
    status: CollabStatus | None = None


class CollabUpdate(CollabCreate):
    """Body for PATCH /collab/{id}. Only the fields sent are changed."""


class CollaboratorAdd(BaseModel):
    """Body for POST /collab/{id}/collaborators."""
    user_id: str | None = None
    role: str | None = None
    department: str | None = None


# -----------------------------------------------------------------------------
# Slate
# -----------------------------------------------------------------------------

class SlateCreate(BaseModel):
    """Body for POST /slate."""
    content: str | None = None
    status: str = SlateStatus.PUBLISHED.value
    media_urls: list[str] | None = None


class SlateUpdate(BaseModel):
    """Body for PATCH /slate/{id}."""
    content: str | None = None
    status: str | None = None


class SlateCommentCreate(BaseModel):
    """Body for POST /slate/{id}/comment. Set parent_comment_id to reply."""
    content: str | None = None
    parent_comment_id: str | None = None


class SlateCommentUpdate(BaseModel):
    """Body for PATCH /slate/comment/{commentId}."""
    content: str | None = None


# -----------------------------------------------------------------------------
# Notifications
# -----------------------------------------------------------------------------

class NotificationCreate(BaseModel):
    """Internal: a notification row to insert for `user_id`."""
    user_id: str
    type: NotificationType
    title: str
    message: str
    actor_id: str | None = None
    related_gig_id: str | None = None
    related_application_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
