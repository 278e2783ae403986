# =============================================================================
# app/routers/gigs.py - Gig Endpoints
# =============================================================================
# Public gig browsing plus creator-only management:
#   GET    /gigs                                   list (public)
#   GET    /gigs/slug/{slug}                       detail by slug (public)
#   GET    /gigs/{id}                              detail (public)
#   POST   /gigs                                   create
#   PATCH  /gigs/{id}                              update (creator)
#   DELETE /gigs/{id}                              delete (creator)
#   POST   /gigs/{id}/apply                        apply
#   GET    /gigs/{id}/applications                 list applications (creator)
#   PATCH  /gigs/{id}/applications/{aid}/status    change status (creator)
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import CurrentUser, OptionalUser, Page
from core.models.envelope import success_response
from core.models.gig import ApplicationStatusUpdate, GigApply, GigCreate, GigUpdate
from core.services.application_service import ApplicationService
from core.services.gig_service import GigService

router = APIRouter()


# =============================================================================
# Gigs
# =============================================================================

@router.get("")
def list_gigs(
    page: Page,
    viewer: OptionalUser,
    search: Annotated[str | None, Query(description="Match title or description")] = None,
    role: Annotated[str | None, Query()] = None,
    gig_type: Annotated[str | None, Query(alias="type")] = None,
    created_by: Annotated[
        str | None,
        Query(alias="createdBy", description="User id, or 'me' for the caller"),
    ] = None,
):
    """
    List active, non-expired gigs, newest first.

    `createdBy=me` filters to the caller's gigs; it is ignored for
    anonymous requests.
    """
    if created_by == "me":
        created_by = str(viewer.id) if viewer else None

    result = GigService.list_gigs(
        page=page,
        search=search,
        role=role,
        gig_type=gig_type,
        created_by=created_by,
    )
    return success_response(result, "Gigs retrieved successfully")


@router.get("/slug/{slug}")
def get_gig_by_slug(slug: Annotated[str, Path(description="Gig slug")]):
    gig = GigService.get_gig_by_slug(slug)
    return success_response(gig, "Gig retrieved successfully")


@router.get("/{gig_id}")
def get_gig(gig_id: Annotated[str, Path(description="Gig id")]):
    gig = GigService.get_gig(gig_id)
    return success_response(gig, "Gig retrieved successfully")


@router.post("", status_code=201)
def create_gig(user: CurrentUser, request: GigCreate):
    """
    Create a gig.

    The caller's profile must be complete. `title` and `description` are
    required; everything else is optional.
    """
    gig = GigService.create_gig(user.id, request)
    return success_response(gig, "Gig created successfully")


@router.patch("/{gig_id}")
def update_gig(
    gig_id: Annotated[str, Path(description="Gig id")],
    request: GigUpdate,
    user: CurrentUser,
):
    gig = GigService.update_gig(gig_id, user.id, request)
    return success_response(gig, "Gig updated successfully")


@router.delete("/{gig_id}")
def delete_gig(
    gig_id: Annotated[str, Path(description="Gig id")],
    user: CurrentUser,
):
    GigService.delete_gig(gig_id, user.id)
    return success_response(None, "Gig deleted successfully")


# =============================================================================
# Applications
# =============================================================================

@router.post("/{gig_id}/apply", status_code=201)
def apply_to_gig(
    gig_id: Annotated[str, Path(description="Gig id")],
    user: CurrentUser,
    request: GigApply | None = None,
):
    """
    Apply to an active gig.

    The gig's creator is notified.
    """
    application = ApplicationService.apply(gig_id, user.id, request or GigApply())
    return success_response(application, "Application submitted successfully")


@router.get("/{gig_id}/applications")
def list_gig_applications(
    gig_id: Annotated[str, Path(description="Gig id")],
    user: CurrentUser,
    status: Annotated[str | None, Query(description="Filter by application status")] = None,
):
    result = ApplicationService.list_for_gig(gig_id, user.id, status)
    return success_response(result, "Applications retrieved successfully")


@router.patch("/{gig_id}/applications/{application_id}/status")
def update_application_status(
    gig_id: Annotated[str, Path(description="Gig id")],
    application_id: Annotated[str, Path(description="Application id")],
    request: ApplicationStatusUpdate,
    user: CurrentUser,
):
    """
    Change an application's status (pending, shortlisted, confirmed, released).

    The applicant is notified when the status changes.
    """
    application = ApplicationService.update_status(
        gig_id, application_id, user.id, request.status
    )
    return success_response(application, "Application status updated successfully")
