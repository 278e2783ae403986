# =============================================================================
# core/models/profile.py - User Profile Schemas
# =============================================================================
# These models define the API contract for profile operations:
# - ProfileCompletion: whether a user may post/apply to gigs
# - RoleCreate: a professional role on the user's profile
#
# The profile row itself is free-form (the client owns its layout), so
# PATCH /profile accepts any JSON object and writes it through.
# =============================================================================

from pydantic import BaseModel, Field

# A profile is complete once these are non-empty. Gig creation and
# applications are gated on it.
REQUIRED_PROFILE_FIELDS = ("firstname", "surname", "country", "city")

# Columns a client may never set through PATCH /profile
PROTECTED_PROFILE_FIELDS = ("id", "user_id", "created_at")


class ProfileCompletion(BaseModel):
    """
    Profile completion status.

    Example:
        {"isComplete": false, "completionPercentage": 40}
    """
    is_complete: bool = Field(default=False, serialization_alias="isComplete")
    completion_percentage: int = Field(
        default=0,
        ge=0,
        le=100,
        serialization_alias="completionPercentage",
    )


class RoleCreate(BaseModel):
    """
    Body for POST /profile/roles.

    Example:
        {"role_name": "Director of Photography", "sort_order": 1}
    """
    role_name: str | None = Field(default=None, max_length=100)
    sort_order: int | None = None
