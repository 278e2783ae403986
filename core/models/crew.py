# =============================================================================
# core/models/crew.py - Availability & Contact Schemas
# =============================================================================
# Crew-side scheduling data:
# - AvailabilityStatus: what a crew member marked a day as
# - AvailabilitySet / AvailabilityUpdate: calendar writes
# - ContactCreate: a contact attached to a gig by its creator
# =============================================================================

from enum import Enum

from pydantic import BaseModel


class AvailabilityStatus(str, Enum):
    """
    Per-day availability.

    - available: free to book
    - hold: pencilled in, not confirmed
    - na: not available

    `hold` and `na` count as conflicts when checking a date range.
    """
    AVAILABLE = "available"
    HOLD = "hold"
    NA = "na"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


CONFLICT_STATUSES = (AvailabilityStatus.HOLD.value, AvailabilityStatus.NA.value)


class AvailabilitySet(BaseModel):
    """
    Body for POST /availability (insert or replace one day).

    Example:
        {"availability_date": "2025-03-14", "status": "hold"}
    """
    availability_date: str | None = None
    status: str | None = None


class AvailabilityUpdate(BaseModel):
    """Body for PATCH /availability/{id}."""
    status: str | None = None


class ContactCreate(BaseModel):
    """Body for POST /contacts."""
    gig_id: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    role: str | None = None
