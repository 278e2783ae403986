# =============================================================================
# app/routers/applications.py - Applicant-side Application Endpoints
# =============================================================================
# Creator-side application routes live under /gigs/{id}/applications.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import CurrentUser, Page
from core.models.envelope import success_response
from core.services.application_service import ApplicationService

router = APIRouter()


@router.get("/my")
def list_my_applications(
    user: CurrentUser,
    page: Page,
    status: Annotated[str | None, Query(description="Filter by application status")] = None,
):
    """
    List the caller's applications with gig summaries and per-status stats.
    """
    result = ApplicationService.list_my_applications(user.id, page, status)
    return success_response(result, "Applications retrieved successfully")


@router.get("/{application_id}")
def get_application(
    application_id: Annotated[str, Path(description="Application id")],
    user: CurrentUser,
):
    """Visible to the applicant and to the gig's creator."""
    application = ApplicationService.get_application(application_id, user.id)
    return success_response(application, "Application retrieved successfully")


@router.delete("/{application_id}")
def withdraw_application(
    application_id: Annotated[str, Path(description="Application id")],
    user: CurrentUser,
):
    """Withdraw a pending application."""
    ApplicationService.withdraw(application_id, user.id)
    return success_response(None, "Application withdrawn successfully")
