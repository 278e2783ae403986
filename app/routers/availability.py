# =============================================================================
# app/routers/availability.py - Crew Availability Endpoints
# =============================================================================
# The caller's own availability calendar. All endpoints require auth.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import CurrentUser
from core.models.crew import AvailabilitySet, AvailabilityUpdate
from core.models.envelope import success_response
from core.services.availability_service import AvailabilityService

router = APIRouter()


@router.get("")
def list_availability(
    user: CurrentUser,
    month: Annotated[str | None, Query(description="YYYY-MM")] = None,
    year: Annotated[str | None, Query(description="YYYY")] = None,
):
    entries = AvailabilityService.list_availability(user.id, month=month, year=year)
    return success_response(entries, "Availability retrieved successfully")


@router.post("", status_code=201)
def set_availability(user: CurrentUser, request: AvailabilitySet):
    """Set the caller's status for one day, replacing any existing entry."""
    entry = AvailabilityService.set_availability(
        user.id, request.availability_date, request.status
    )
    return success_response(entry, "Availability set successfully")


@router.get("/check")
def check_availability(
    user: CurrentUser,
    from_date: Annotated[str | None, Query(description="YYYY-MM-DD")] = None,
    to_date: Annotated[str | None, Query(description="YYYY-MM-DD")] = None,
):
    """List hold / na days between from_date and to_date (inclusive)."""
    result = AvailabilityService.check_conflicts(user.id, from_date, to_date)
    return success_response(result, "Conflict check completed")


@router.patch("/{availability_id}")
def update_availability(
    availability_id: Annotated[str, Path(description="Availability entry id")],
    request: AvailabilityUpdate,
    user: CurrentUser,
):
    entry = AvailabilityService.update_availability(user.id, availability_id, request.status)
    return success_response(entry, "Availability updated successfully")
