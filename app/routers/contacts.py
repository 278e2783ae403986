# =============================================================================
# app/routers/contacts.py - Gig Contact Endpoints
# =============================================================================
# Crew contacts attached to a gig. Only the gig's creator may use these.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import CurrentUser
from core.models.crew import ContactCreate
from core.models.envelope import success_response
from core.services.contact_service import ContactService

router = APIRouter()


@router.post("", status_code=201)
def add_contact(user: CurrentUser, request: ContactCreate):
    contact = ContactService.add_contact(user.id, request)
    return success_response(contact, "Contact added successfully")


@router.get("/gig/{gig_id}")
def list_gig_contacts(
    gig_id: Annotated[str, Path(description="Gig id")],
    user: CurrentUser,
):
    contacts = ContactService.list_for_gig(gig_id, user.id)
    return success_response(contacts, "Contacts retrieved successfully")


@router.delete("/{contact_id}")
def delete_contact(
    contact_id: Annotated[str, Path(description="Contact id")],
    user: CurrentUser,
):
    ContactService.delete_contact(contact_id, user.id)
    return success_response(None, "Contact deleted successfully")
