# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by resource:
# - health.py: Health check endpoints
# - profile.py: Caller's profile and roles
# - gigs.py: Gig listing, management, applying and creator-side applications
# - applications.py: Applicant-side application endpoints
# - availability.py: Crew availability calendar
# - contacts.py: Crew contacts per gig
# - collab.py: Collab posts, interests and collaborators
# - notifications.py: Notification inbox
# - slate.py: Slate feed, likes, comments, saves and shares
# - upload.py: Profile photo, slate media, collab cover and resume uploads
#
# Each router is mounted in main.py under /api with a URL prefix.
#
# Handlers are plain `def`: the Supabase client is synchronous, so FastAPI
# runs them in its threadpool.
# =============================================================================

from . import health
from . import profile
from . import gigs
from . import applications
from . import availability
from . import contacts
from . import collab
from . import notifications
from . import slate
from . import upload

__all__ = [
    "health",
    "profile",
    "gigs",
    "applications",
    "availability",
    "contacts",
    "collab",
    "notifications",
    "slate",
    "upload",
]
