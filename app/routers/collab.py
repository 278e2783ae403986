# =============================================================================
# app/routers/collab.py - Collab Endpoints
# =============================================================================
# Public collab feed, owner management, interests and collaborators.
# Static paths (/my) are declared before /{collab_id} so they win.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import CurrentUser, InterestPage, OptionalUser, Page
from core.models.envelope import success_response
from core.models.social import CollabCreate, CollaboratorAdd, CollabUpdate
from core.services.collab_service import CollabService

router = APIRouter()

CollabId = Annotated[str, Path(description="Collab id")]


# =============================================================================
# Posts
# =============================================================================

@router.get("")
def list_collabs(
    page: Page,
    status: Annotated[str | None, Query(description="Status, or 'all' for open+closed")] = None,
    tag: Annotated[str | None, Query(description="Tag (case-insensitive)")] = None,
    search: Annotated[str | None, Query(description="Match title or summary")] = None,
    sort_by: Annotated[str, Query(alias="sortBy")] = "created_at",
    sort_order: Annotated[str, Query(alias="sortOrder")] = "desc",
):
    """
    Public collab feed.

    Sort by created_at, updated_at, title or interests.
    """
    result = CollabService.list_feed(
        page=page,
        status=status,
        tag=tag,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return success_response(result, "Collabs retrieved successfully")


@router.get("/my")
def list_my_collabs(
    user: CurrentUser,
    page: Page,
    status: Annotated[str | None, Query()] = None,
):
    result = CollabService.list_mine(user.id, page, status)
    return success_response(result, "User collabs retrieved successfully")


@router.post("", status_code=201)
def create_collab(user: CurrentUser, request: CollabCreate):
    collab = CollabService.create_collab(user.id, request)
    return success_response(collab, "Collab post created successfully")


@router.get("/{collab_id}")
def get_collab(collab_id: CollabId, viewer: OptionalUser):
    """
    Collab detail.

    Signed-in callers also see whether they are interested and whether they
    own it; the owner also sees collaborators.
    """
    collab = CollabService.get_collab(collab_id, viewer.id if viewer else None)
    return success_response(collab, "Collab post retrieved successfully")


@router.patch("/{collab_id}")
def update_collab(collab_id: CollabId, request: CollabUpdate, user: CurrentUser):
    collab = CollabService.update_collab(collab_id, user.id, request)
    return success_response(collab, "Collab post updated successfully")


@router.delete("/{collab_id}")
def delete_collab(collab_id: CollabId, user: CurrentUser):
    CollabService.delete_collab(collab_id, user.id)
    return success_response(None, "Collab post deleted successfully")


@router.patch("/{collab_id}/close")
def close_collab(collab_id: CollabId, user: CurrentUser):
    collab = CollabService.close_collab(collab_id, user.id)
    return success_response(collab, "Collab closed successfully")


# =============================================================================
# Interests
# =============================================================================

@router.post("/{collab_id}/interest", status_code=201)
def express_interest(collab_id: CollabId, user: CurrentUser):
    result = CollabService.add_interest(collab_id, user.id)
    return success_response(result, "Interest expressed successfully")


@router.delete("/{collab_id}/interest")
def remove_interest(collab_id: CollabId, user: CurrentUser):
    result = CollabService.remove_interest(collab_id, user.id)
    return success_response(result, "Interest removed successfully")


@router.get("/{collab_id}/interests")
def list_interests(collab_id: CollabId, user: CurrentUser, page: InterestPage):
    """Interested users. Owner only."""
    result = CollabService.list_interests(collab_id, user.id, page)
    return success_response(result, "Interested users retrieved successfully")


# =============================================================================
# Collaborators
# =============================================================================

@router.get("/{collab_id}/collaborators")
def list_collaborators(collab_id: CollabId):
    collaborators = CollabService.list_collaborators(collab_id)
    return success_response(
        {"collaborators": collaborators},
        "Collaborators retrieved successfully",
    )


@router.post("/{collab_id}/collaborators", status_code=201)
def add_collaborator(
    collab_id: CollabId,
    request: CollaboratorAdd,
    user: CurrentUser,
):
    collaborator = CollabService.add_collaborator(collab_id, user.id, request)
    return success_response(collaborator, "Collaborator added successfully")


@router.delete("/{collab_id}/collaborators/{user_id}")
def remove_collaborator(
    collab_id: CollabId,
    user_id: Annotated[str, Path(description="Collaborator's user id")],
    user: CurrentUser,
):
    CollabService.remove_collaborator(collab_id, user.id, user_id)
    return success_response(None, "Collaborator removed successfully")
