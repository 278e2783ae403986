# =============================================================================
# core/models/gig.py - Gig & Application Schemas
# =============================================================================
# These models define the API contract for the gig marketplace:
# - GigStatus / ApplicationStatus: allowed lifecycle values
# - GigCreate / GigUpdate: request bodies (camelCase on the wire)
# - GigApply / ApplicationStatusUpdate: applicant and creator actions
#
# A gig is a job posted by one user (the creator) that other users apply to.
# Only the creator may edit it, see its applications, or manage its contacts.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class GigStatus(str, Enum):
    """
    Possible states for a gig.

    Only `active` gigs appear in the public listing and accept applications.
    """
    ACTIVE = "active"
    DRAFT = "draft"
    CLOSED = "closed"
    EXPIRED = "expired"


class ApplicationStatus(str, Enum):
    """
    Possible states for an application.

    Flow: pending -> shortlisted -> confirmed
                                \\-> released
    Applicants may only withdraw while pending.
    """
    PENDING = "pending"
    SHORTLISTED = "shortlisted"
    CONFIRMED = "confirmed"
    RELEASED = "released"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


class DateWindow(BaseModel):
    """A labelled span of shoot days, e.g. {"label": "March", "range": "3-7"}."""
    label: str
    range: str


class GigReference(BaseModel):
    """A link attached to a gig (moodboard, script, etc.)."""
    label: str | None = None
    url: str
    type: str | None = None


class GigBase(BaseModel):
    """Fields shared by create and update bodies."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    qualifying_criteria: str | None = Field(default=None, alias="qualifyingCriteria")
    amount: float | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, max_length=3)
    crew_count: int | None = Field(default=None, ge=1, alias="crewCount")
    role: str | None = None
    type: str | None = None
    department: str | None = None
    company: str | None = None
    is_tbc: bool | None = Field(default=None, alias="isTbc")
    request_quote: bool | None = Field(default=None, alias="requestQuote")
    expiry_date: str | None = Field(default=None, alias="expiryDate")
    supporting_file_label: str | None = Field(default=None, alias="supportingFileLabel")
    reference_url: str | None = Field(default=None, alias="referenceUrl")
    status: GigStatus | None = None
    date_windows: list[DateWindow] | None = Field(default=None, alias="dateWindows")
    locations: list[str] | None = None
    references: list[GigReference] | None = None


class GigCreate(GigBase):
    """
    Body for POST /gigs.

    `title` and `description` are required; they are checked in the service
    so the error names every missing field at once.

    Example:
        {
            "title": "Gaffer for 3-day commercial",
            "description": "Looking for an experienced gaffer...",
            "amount": 4500,
            "currency": "AED",
            "dateWindows": [{"label": "March", "range": "3-5"}],
            "locations": ["Dubai"]
        }
    """


class GigUpdate(GigBase):
    """Body for PATCH /gigs/{id}. Only the fields sent are changed."""


class GigApply(BaseModel):
    """Body for POST /gigs/{id}/apply."""

    model_config = ConfigDict(populate_by_name=True)

    cover_letter: str | None = Field(default=None, max_length=5000, alias="coverLetter")
    portfolio_links: list[str] | None = Field(default=None, alias="portfolioLinks")
    resume_url: str | None = Field(default=None, alias="resumeUrl")


class ApplicationStatusUpdate(BaseModel):
    """Body for PATCH /gigs/{id}/applications/{applicationId}/status."""
    status: str | None = None


# Column mapping between request fields and gigs table columns. Child
# collections (date windows, locations, references) live in their own tables.
GIG_COLUMNS = (
    "title",
    "description",
    "qualifying_criteria",
    "amount",
    "currency",
    "crew_count",
    "role",
    "type",
    "department",
    "company",
    "is_tbc",
    "request_quote",
    "expiry_date",
    "supporting_file_label",
    "reference_url",
    "status",
)
