# =============================================================================
# core/services/contact_service.py - Gig Crew Contacts
# =============================================================================
# A gig's creator keeps a list of crew contacts for it. Contacts have no
# owner column of their own: access is decided by the parent gig's creator.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import ValidationFailedError
from core.models.crew import ContactCreate
from core.services.gig_service import GigService
from core.services.guards import database_operation, ensure_found
from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_email, sanitize_string

logger = logging.getLogger(__name__)


class ContactService:

    @staticmethod
    def add_contact(user_id: UUID | str, body: ContactCreate) -> dict[str, Any]:
        """
        Add a contact to a gig the caller created.

        Raises:
            ValidationFailedError: Missing gig id / name, or a bad email
            NotFoundError: If the gig doesn't exist
            ForbiddenError: If the caller didn't create the gig
        """
        if not body.gig_id or not body.contact_name or not body.contact_name.strip():
            raise ValidationFailedError("Gig ID and contact name are required")
        if body.contact_email and not is_valid_email(body.contact_email):
            raise ValidationFailedError("Invalid email address")

        GigService.get_owned_gig(body.gig_id, user_id, "Only the gig creator can add contacts")
        client = SupabaseClient.get_client()

        with database_operation("Failed to add contact"):
            response = (
                client.table("crew_contacts")
                .insert({
                    "gig_id": body.gig_id,
                    "contact_name": sanitize_string(body.contact_name),
                    "contact_email": body.contact_email,
                    "contact_phone": body.contact_phone,
                    "role": body.role,
                })
                .execute()
            )

        logger.info(f"Added contact to gig {body.gig_id}")
        return response.data[0]

    @staticmethod
    def list_for_gig(gig_id: str, user_id: UUID | str) -> list[dict[str, Any]]:
        """Contacts of a gig the caller created, newest first."""
        GigService.get_owned_gig(gig_id, user_id, "Only the gig creator can view contacts")
        client = SupabaseClient.get_client()

        with database_operation("Failed to fetch contacts"):
            response = (
                client.table("crew_contacts")
                .select("*")
                .eq("gig_id", gig_id)
                .order("created_at", desc=True)
                .execute()
            )
        return response.data or []

    @staticmethod
    def delete_contact(contact_id: str, user_id: UUID | str) -> None:
        with database_operation("Failed to fetch contact"):
            contact = SupabaseClient.fetch_one("crew_contacts", "id, gig_id", id=contact_id)
        contact = ensure_found(contact, "Contact not found")

        GigService.get_owned_gig(
            contact["gig_id"], user_id, "Only the gig creator can delete contacts"
        )
        client = SupabaseClient.get_client()

        with database_operation("Failed to delete contact"):
            client.table("crew_contacts").delete().eq("id", contact_id).execute()

        logger.info(f"Deleted contact {contact_id}")
