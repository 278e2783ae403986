# =============================================================================
# app/routers/slate.py - Slate Feed Endpoints
# =============================================================================
# Public feed of published posts, plus owner management and reactions:
#   likes, comments (with replies), saves and shares.
# Feed pages are capped at 50 posts.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import CurrentUser, FeedPage, InterestPage, OptionalUser
from core.models.envelope import success_response
from core.models.social import (
    SlateCommentCreate,
    SlateCommentUpdate,
    SlateCreate,
    SlateUpdate,
)
from core.services.slate_service import SlateService

router = APIRouter()

PostId = Annotated[str, Path(description="Slate post id")]
CommentId = Annotated[str, Path(description="Slate comment id")]


@router.get("")
def get_feed(
    page: FeedPage,
    viewer: OptionalUser,
    sort: Annotated[str, Query(description="latest or popular")] = "latest",
    search: Annotated[str | None, Query(description="Match post content")] = None,
):
    result = SlateService.list_feed(
        page=page,
        sort=sort,
        search=search,
        viewer_id=viewer.id if viewer else None,
    )
    return success_response(result, "Slate feed retrieved")


@router.get("/my")
def list_my_posts(
    user: CurrentUser,
    page: FeedPage,
    status: Annotated[str | None, Query()] = None,
):
    result = SlateService.list_mine(user.id, page, status)
    return success_response(result, "User posts retrieved")


@router.get("/saved")
def list_saved_posts(user: CurrentUser, page: FeedPage):
    """The caller's bookmarked posts, most recently saved first."""
    result = SlateService.list_saved(user.id, page)
    return success_response(result, "Saved posts retrieved")


@router.post("", status_code=201)
def create_post(user: CurrentUser, request: SlateCreate):
    """
    Create a post. `media_urls` are attached in order; .mp4/.mov/.avi URLs
    are stored as video, anything else as image.
    """
    post = SlateService.create_post(user.id, request)
    return success_response(post, "Post created successfully")


@router.get("/{post_id}")
def get_post(post_id: PostId, viewer: OptionalUser):
    post = SlateService.get_post(post_id, viewer.id if viewer else None)
    return success_response(post, "Slate post retrieved")


@router.patch("/{post_id}")
def update_post(post_id: PostId, request: SlateUpdate, user: CurrentUser):
    post = SlateService.update_post(post_id, user.id, request)
    return success_response(post, "Slate post updated")


@router.delete("/{post_id}")
def delete_post(post_id: PostId, user: CurrentUser):
    SlateService.delete_post(post_id, user.id)
    return success_response(None, "Slate post deleted")


# =============================================================================
# Likes
# =============================================================================

@router.post("/{post_id}/like", status_code=201)
def like_post(post_id: PostId, user: CurrentUser):
    result = SlateService.like_post(post_id, user.id)
    return success_response(result, "Post liked")


@router.delete("/{post_id}/like")
def unlike_post(post_id: PostId, user: CurrentUser):
    result = SlateService.unlike_post(post_id, user.id)
    return success_response(result, "Post unliked")


@router.get("/{post_id}/likes")
def list_likes(post_id: PostId, page: FeedPage):
    result = SlateService.list_likes(post_id, page)
    return success_response(result, "Likes retrieved")


# =============================================================================
# Comments
# =============================================================================

@router.get("/{post_id}/comment")
def list_comments(post_id: PostId, page: InterestPage):
    result = SlateService.list_comments(post_id, page)
    return success_response(result, "Comments retrieved")


@router.post("/{post_id}/comment", status_code=201)
def add_comment(post_id: PostId, request: SlateCommentCreate, user: CurrentUser):
    """
    Comment on a post. Pass `parent_comment_id` to reply to an existing
    comment on the same post.
    """
    comment = SlateService.add_comment(post_id, user.id, request)
    return success_response(comment, "Comment added")


@router.patch("/comment/{comment_id}")
def update_comment(comment_id: CommentId, request: SlateCommentUpdate, user: CurrentUser):
    comment = SlateService.update_comment(comment_id, user.id, request)
    return success_response(comment, "Comment updated")


@router.delete("/comment/{comment_id}")
def delete_comment(comment_id: CommentId, user: CurrentUser):
    SlateService.delete_comment(comment_id, user.id)
    return success_response(None, "Comment deleted")


# =============================================================================
# Saves & Shares
# =============================================================================

@router.post("/{post_id}/save", status_code=201)
def save_post(post_id: PostId, user: CurrentUser):
    SlateService.save_post(post_id, user.id)
    return success_response(None, "Post saved")


@router.delete("/{post_id}/save")
def unsave_post(post_id: PostId, user: CurrentUser):
    SlateService.unsave_post(post_id, user.id)
    return success_response(None, "Post unsaved")


@router.post("/{post_id}/share", status_code=201)
def share_post(post_id: PostId, user: CurrentUser):
    result = SlateService.share_post(post_id, user.id)
    return success_response(result, "Post shared")


@router.delete("/{post_id}/share")
def unshare_post(post_id: PostId, user: CurrentUser):
    result = SlateService.unshare_post(post_id, user.id)
    return success_response(result, "Post unshared")
