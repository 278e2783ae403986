# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .profile_service import ProfileService
from .gig_service import GigService
from .application_service import ApplicationService
from .availability_service import AvailabilityService
from .contact_service import ContactService
from .collab_service import CollabService
from .notification_service import NotificationService
from .slate_service import SlateService
from .storage_service import StorageService

__all__ = [
    "ProfileService",
    "GigService",
    "ApplicationService",
    "AvailabilityService",
    "ContactService",
    "CollabService",
    "NotificationService",
    "SlateService",
    "StorageService",
]
