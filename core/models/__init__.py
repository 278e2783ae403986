# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - envelope.py: Response envelope and pagination
# - profile.py: Profile completion and roles
# - gig.py: Gigs and applications
# - crew.py: Availability and crew contacts
# - social.py: Collabs, slate posts and notifications
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Envelope - Response wrapper and pagination
# -----------------------------------------------------------------------------
from .envelope import (
    PageRequest,
    error_response,
    success_response,
)

# -----------------------------------------------------------------------------
# Profile Models
# -----------------------------------------------------------------------------
from .profile import (
    PROTECTED_PROFILE_FIELDS,
    REQUIRED_PROFILE_FIELDS,
    ProfileCompletion,
    RoleCreate,
)

# -----------------------------------------------------------------------------
# Gig Models - Gigs and applications
# -----------------------------------------------------------------------------
from .gig import (
    ApplicationStatus,
    ApplicationStatusUpdate,
    DateWindow,
    GigApply,
    GigCreate,
    GigReference,
    GigStatus,
    GigUpdate,
)

# -----------------------------------------------------------------------------
# Crew Models - Availability and contacts
# -----------------------------------------------------------------------------
from .crew import (
    AvailabilitySet,
    AvailabilityStatus,
    AvailabilityUpdate,
    ContactCreate,
)

# -----------------------------------------------------------------------------
# Social Models - Collabs, slate, notifications
# -----------------------------------------------------------------------------
from .social import (
    CollabCreate,
    CollaboratorAdd,
    CollabStatus,
    CollabUpdate,
    NotificationCreate,
    NotificationType,
    SlateCommentCreate,
    SlateCommentUpdate,
    SlateCreate,
    SlateStatus,
    SlateUpdate,
)

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # Envelope
    "PageRequest",
    "error_response",
    "success_response",
    # Profile
    "PROTECTED_PROFILE_FIELDS",
    "REQUIRED_PROFILE_FIELDS",
    "ProfileCompletion",
    "RoleCreate",
    # Gig
    "ApplicationStatus",
    "ApplicationStatusUpdate",
    "DateWindow",
    "GigApply",
    "GigCreate",
    "GigReference",
    "GigStatus",
    "GigUpdate",
    # Crew
    "AvailabilitySet",
    "AvailabilityStatus",
    "AvailabilityUpdate",
    "ContactCreate",
    # Social
    "CollabCreate",
    "CollaboratorAdd",
    "CollabStatus",
    "CollabUpdate",
    "NotificationCreate",
    "NotificationType",
    "SlateCommentCreate",
    "SlateCommentUpdate",
    "SlateCreate",
    "SlateStatus",
    "SlateUpdate",
]
