# =============================================================================
# core/services/availability_service.py - Crew Availability Calendar
# =============================================================================
# One row per (user, day) in `crew_availability`, marked available, hold or na.
# Every query is scoped to the caller; nobody reads another user's calendar.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import NotFoundError, ValidationFailedError
from core.models.crew import CONFLICT_STATUSES, AvailabilityStatus
from core.services.guards import database_operation
from lib.supabase_client import SupabaseClient
from lib.utils import (
    MONTH_RE,
    YEAR_RE,
    is_iso_date,
    month_bounds,
    normalize_uuid,
    utc_now_iso,
    year_bounds,
)

logger = logging.getLogger(__name__)

STATUS_ERROR = "Status must be one of: available, hold, na"


def _check_status(status: str | None) -> str:
    if not status or status not in AvailabilityStatus.values():
        raise ValidationFailedError(STATUS_ERROR)
    return status


class AvailabilityService:
    """Service for the caller's availability calendar."""

    @staticmethod
    def list_availability(
        user_id: UUID | str,
        month: str | None = None,
        year: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        List the caller's calendar in date order.

        Args:
            month: Optional YYYY-MM filter (takes precedence over year)
            year: Optional YYYY filter
        """
        client = SupabaseClient.get_client()

        query = (
            client.table("crew_availability")
            .select("*")
            .eq("user_id", normalize_uuid(user_id))
        )

        if month:
            if not MONTH_RE.match(month) or not 1 <= int(month[5:]) <= 12:
                raise ValidationFailedError("Month must be in YYYY-MM format")
            start, end = month_bounds(month)
            query = query.gte("availability_date", start).lte("availability_date", end)
        elif year:
            if not YEAR_RE.match(year):
                raise ValidationFailedError("Year must be in YYYY format")
            start, end = year_bounds(year)
            query = query.gte("availability_date", start).lte("availability_date", end)

        with database_operation("Failed to fetch availability"):
            response = query.order("availability_date").execute()
        return response.data or []

    @staticmethod
    def set_availability(
        user_id: UUID | str,
        availability_date: str | None,
        status: str | None,
    ) -> dict[str, Any]:
        """
        Insert or replace the caller's status for one day.

        Raises:
            ValidationFailedError: Missing date, bad status or bad date format
        """
        if not availability_date:
            raise ValidationFailedError("Availability date is required")
        _check_status(status)
        if not is_iso_date(availability_date):
            raise ValidationFailedError("Date must be in YYYY-MM-DD format")

        client = SupabaseClient.get_client()

        with database_operation("Failed to set availability"):
            response = (
                client.table("crew_availability")
                .upsert(
                    {
                        "user_id": normalize_uuid(user_id),
                        "availability_date": availability_date,
                        "status": status,
                    },
                    on_conflict="user_id,availability_date",
                )
                .execute()
            )

        logger.info(f"Availability {availability_date}={status} for user: {user_id}")
        return response.data[0]

    @staticmethod
    def update_availability(
        user_id: UUID | str,
        availability_id: str,
        status: str | None,
    ) -> dict[str, Any]:
        """Change the status of one of the caller's calendar entries."""
        _check_status(status)
        client = SupabaseClient.get_client()

        with database_operation("Failed to update availability"):
            response = (
                client.table("crew_availability")
                .update({"status": status, "updated_at": utc_now_iso()})
                .eq("id", availability_id)
                .eq("user_id", normalize_uuid(user_id))
                .execute()
            )

        if not response.data:
            raise NotFoundError("Availability not found or unauthorized")
        return response.data[0]

    @staticmethod
    def check_conflicts(
        user_id: UUID | str,
        from_date: str | None,
        to_date: str | None,
    ) -> dict[str, Any]:
        """
        Report hold/na days in an inclusive date range.

        Returns:
            {"hasConflict": bool, "conflictCount": int,
             "conflicts": [{"date": "YYYY-MM-DD", "status": "hold"}]}
        """
        if not from_date or not to_date:
            raise ValidationFailedError("Both from_date and to_date are required")
        if not is_iso_date(from_date) or not is_iso_date(to_date):
            raise ValidationFailedError("Dates must be in YYYY-MM-DD format")

        client = SupabaseClient.get_client()

        with database_operation("Failed to check availability"):
            response = (
                client.table("crew_availability")
                .select("*")
                .eq("user_id", normalize_uuid(user_id))
                .gte("availability_date", from_date)
                .lte("availability_date", to_date)
                .in_("status", list(CONFLICT_STATUSES))
                .order("availability_date")
                .execute()
            )

        conflicts = [
            {"date": row["availability_date"], "status": row["status"]}
            for row in response.data or []
        ]
        return {
            "hasConflict": bool(conflicts),
            "conflictCount": len(conflicts),
            "conflicts": conflicts,
        }
