# =============================================================================
# core/services/application_service.py - Gig Application Business Logic
# =============================================================================
# Applications connect two users: the applicant and the gig's creator.
#
#   applicant: apply, list own applications, view, withdraw (pending only)
#   creator:   list applications for a gig, change an application's status
#
# Both sides are notified through NotificationService; a failed notification
# never fails the action itself.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import ForbiddenError, ValidationFailedError
from core.models.envelope import PageRequest
from core.models.gig import ApplicationStatus, GigApply, GigStatus
from core.models.social import NotificationCreate, NotificationType
from core.services.gig_service import GigService
from core.services.guards import database_operation, ensure_found, ensure_owner
from core.services.notification_service import NotificationService
from core.services.profile_service import ProfileService
from lib.supabase_client import UNKNOWN_NAME, SupabaseClient
from lib.utils import format_budget_label, is_expired, normalize_uuid, same_user, utc_now_iso

logger = logging.getLogger(__name__)

APPLICATION_COLUMNS = (
    "id, gig_id, applicant_user_id, status, cover_letter, portfolio_links, "
    "resume_url, created_at, updated_at"
)

# Message shown to the applicant for each status change
STATUS_MESSAGES = {
    ApplicationStatus.PENDING.value: "Your application status has been updated to pending.",
    ApplicationStatus.SHORTLISTED.value: "Great news! Your application has been shortlisted.",
    ApplicationStatus.CONFIRMED.value: "Congratulations! Your application has been confirmed.",
    ApplicationStatus.RELEASED.value: "Your application status has been updated to released.",
}


class ApplicationService:
    """
    Service for gig applications.

    All methods are static - no instance state needed.
    """

    # -------------------------------------------------------------------------
    # Applicant actions
    # -------------------------------------------------------------------------

    @staticmethod
    def apply(gig_id: str, user_id: UUID | str, body: GigApply) -> dict[str, Any]:
        """
        Apply to a gig.

        Args:
            gig_id: Gig to apply to
            user_id: Authenticated applicant
            body: Cover letter, portfolio links, resume URL

        Returns:
            The new application summary

        Raises:
            ForbiddenError: If the applicant's profile is incomplete
            NotFoundError: If the gig doesn't exist
            ValidationFailedError: Own gig, inactive/expired gig, or duplicate
        """
        if not ProfileService.is_profile_complete(user_id):
            raise ForbiddenError("Please complete your profile before applying to gigs")

        with database_operation("Failed to fetch gig"):
            gig = SupabaseClient.fetch_one("gigs", id=gig_id)
        gig = ensure_found(gig, "Gig not found")

        if same_user(gig.get("created_by"), user_id):
            raise ValidationFailedError("You cannot apply to your own gig")
        if gig.get("status") != GigStatus.ACTIVE.value:
            raise ValidationFailedError("This gig is no longer accepting applications")
        if is_expired(gig.get("expiry_date")):
            raise ValidationFailedError("This gig has expired")

        user_id_str = normalize_uuid(user_id)

        with database_operation("Failed to check existing application"):
            existing = SupabaseClient.fetch_one(
                "applications", "id", gig_id=gig_id, applicant_user_id=user_id_str
            )
        if existing:
            raise ValidationFailedError("You have already applied to this gig")

        client = SupabaseClient.get_client()

        with database_operation("Failed to submit application"):
            response = (
                client.table("applications")
                .insert({
                    "gig_id": gig_id,
                    "applicant_user_id": user_id_str,
                    "cover_letter": body.cover_letter,
                    "portfolio_links": body.portfolio_links,
                    "resume_url": body.resume_url,
                    "status": ApplicationStatus.PENDING.value,
                })
                .execute()
            )
        application = response.data[0]

        logger.info(f"User {user_id_str} applied to gig {gig_id}")

        applicant = SupabaseClient.fetch_author(user_id_str)
        applicant_name = applicant["name"] if applicant["name"] != UNKNOWN_NAME else "Someone"

        NotificationService.notify(NotificationCreate(
            user_id=gig["created_by"],
            type=NotificationType.APPLICATION_RECEIVED,
            title="New Application Received",
            message=f'{applicant_name} has applied to your gig "{gig.get("title")}"',
            actor_id=user_id_str,
            related_gig_id=gig_id,
            related_application_id=application["id"],
        ))

        return {
            "id": application["id"],
            "gigId": application["gig_id"],
            "status": application["status"],
            "appliedAt": application.get("created_at"),
        }

    @staticmethod
    def list_my_applications(
        user_id: UUID | str,
        page: PageRequest,
        status: str | None = None,
    ) -> dict[str, Any]:
        """
        List the caller's applications with a summary of each gig.

        Applications whose gig has been deleted are skipped. `stats` counts
        every application of the caller per status, regardless of filter.
        """
        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        query = (
            client.table("applications")
            .select(APPLICATION_COLUMNS, count="exact")
            .eq("applicant_user_id", user_id_str)
        )
        if status in ApplicationStatus.values():
            query = query.eq("status", status)

        with database_operation("Failed to fetch applications"):
            response = (
                query.order("created_at", desc=True)
                .range(page.offset, page.end)
                .execute()
            )
            all_statuses = (
                client.table("applications")
                .select("status")
                .eq("applicant_user_id", user_id_str)
                .execute()
            ).data or []

        applications = []
        for application in response.data or []:
            with database_operation("Failed to fetch gig"):
                gig = SupabaseClient.fetch_one("gigs", id=application["gig_id"])
            if not gig:
                continue
            applications.append({
                **ApplicationService._to_response(application),
                "gig": ApplicationService._gig_summary(gig),
            })

        return {
            "applications": applications,
            "pagination": page.summary(response.count or 0),
            "stats": ApplicationService._stats(all_statuses),
        }

    @staticmethod
    def get_application(application_id: str, user_id: UUID | str) -> dict[str, Any]:
        """
        View one application as its applicant or as the gig's creator.

        The applicant's email and phone are only shown to the creator.
        """
        with database_operation("Failed to fetch application"):
            application = SupabaseClient.fetch_one(
                "applications", APPLICATION_COLUMNS, id=application_id
            )
        application = ensure_found(application, "Application not found")

        with database_operation("Failed to fetch gig"):
            gig = SupabaseClient.fetch_one("gigs", id=application["gig_id"])
        gig = ensure_found(gig, "Associated gig not found")

        is_applicant = same_user(application["applicant_user_id"], user_id)
        is_creator = same_user(gig.get("created_by"), user_id)

        if not is_applicant and not is_creator:
            raise ForbiddenError("You do not have permission to view this application")

        return {
            **ApplicationService._to_response(application),
            "applicant": ApplicationService._applicant(
                application["applicant_user_id"], show_contact=is_creator
            ),
            "gig": ApplicationService._gig_summary(gig),
            "permissions": {
                "canUpdateStatus": is_creator,
                "canWithdraw": (
                    is_applicant
                    and application["status"] == ApplicationStatus.PENDING.value
                ),
            },
        }

    @staticmethod
    def withdraw(application_id: str, user_id: UUID | str) -> None:
        """
        Withdraw (delete) a pending application. Applicant only.

        Raises:
            ValidationFailedError: If the application is past pending
        """
        with database_operation("Failed to fetch application"):
            application = SupabaseClient.fetch_one(
                "applications", "id, applicant_user_id, status, gig_id", id=application_id
            )
        application = ensure_owner(
            application,
            user_id,
            "applicant_user_id",
            "Application not found",
            "You do not have permission to withdraw this application",
        )

        if application["status"] != ApplicationStatus.PENDING.value:
            raise ValidationFailedError(
                f"Cannot withdraw application with status: {application['status']}"
            )

        client = SupabaseClient.get_client()
        with database_operation("Failed to withdraw application"):
            client.table("applications").delete().eq("id", application_id).execute()

        logger.info(f"Application {application_id} withdrawn by {user_id}")

    # -------------------------------------------------------------------------
    # Creator actions
    # -------------------------------------------------------------------------

    @staticmethod
    def list_for_gig(
        gig_id: str,
        user_id: UUID | str,
        status: str | None = None,
    ) -> dict[str, Any]:
        """
        List applications for a gig the caller created.

        An unknown status filter is ignored rather than rejected.
        """
        gig = GigService.get_owned_gig(
            gig_id, user_id, "You do not have permission to view applications for this gig"
        )
        client = SupabaseClient.get_client()

        query = (
            client.table("applications")
            .select(APPLICATION_COLUMNS)
            .eq("gig_id", gig_id)
        )
        if status in ApplicationStatus.values():
            query = query.eq("status", status)

        with database_operation("Failed to fetch applications"):
            response = query.order("created_at", desc=True).execute()

        rows = response.data or []
        applications = [
            {
                **ApplicationService._to_response(row),
                "applicant": ApplicationService._applicant(
                    row["applicant_user_id"], show_contact=True
                ),
            }
            for row in rows
        ]

        return {
            "applications": applications,
            "stats": ApplicationService._stats(rows),
            "gigTitle": gig.get("title"),
        }

    @staticmethod
    def update_status(
        gig_id: str,
        application_id: str,
        user_id: UUID | str,
        new_status: str | None,
    ) -> dict[str, Any]:
        """
        Change an application's status as the gig's creator.

        The applicant is notified only when the status actually changes.
        """
        if not new_status:
            raise ValidationFailedError("Status is required")
        if new_status not in ApplicationStatus.values():
            raise ValidationFailedError(
                f"Invalid status. Must be one of: {', '.join(ApplicationStatus.values())}"
            )

        gig = GigService.get_owned_gig(
            gig_id, user_id, "You do not have permission to update applications for this gig"
        )

        with database_operation("Failed to fetch application"):
            existing = SupabaseClient.fetch_one(
                "applications",
                "id, applicant_user_id, status",
                id=application_id,
                gig_id=gig_id,
            )
        existing = ensure_found(existing, "Application not found")

        client = SupabaseClient.get_client()
        with database_operation("Failed to update application status"):
            response = (
                client.table("applications")
                .update({"status": new_status, "updated_at": utc_now_iso()})
                .eq("id", application_id)
                .execute()
            )
        updated = (response.data or [{**existing, "gig_id": gig_id, "status": new_status}])[0]

        logger.info(f"Application {application_id}: {existing['status']} -> {new_status}")

        if new_status != existing["status"]:
            NotificationService.notify(NotificationCreate(
                user_id=existing["applicant_user_id"],
                type=NotificationType.STATUS_CHANGED,
                title="Application Status Updated",
                message=f'{STATUS_MESSAGES[new_status]} - "{gig.get("title")}"',
                actor_id=normalize_uuid(user_id),
                related_gig_id=gig_id,
                related_application_id=application_id,
            ))

        return {
            "id": updated["id"],
            "gigId": updated.get("gig_id", gig_id),
            "status": updated["status"],
            "updatedAt": updated.get("updated_at"),
        }

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _to_response(row: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": row["id"],
            "gigId": row.get("gig_id"),
            "status": row.get("status"),
            "coverLetter": row.get("cover_letter"),
            "portfolioLinks": row.get("portfolio_links"),
            "resumeUrl": row.get("resume_url"),
            "appliedAt": row.get("created_at"),
            "updatedAt": row.get("updated_at"),
        }

    @staticmethod
    def _stats(rows: list[dict[str, Any]]) -> dict[str, int]:
        stats = {"total": len(rows)}
        for status in ApplicationStatus.values():
            stats[status] = sum(1 for row in rows if row.get("status") == status)
        return stats

    @staticmethod
    def _applicant(applicant_id: str, show_contact: bool) -> dict[str, Any]:
        """Applicant card; email and phone only when show_contact is set."""
        with database_operation("Failed to fetch applicant profile"):
            profile = SupabaseClient.fetch_user_profile(applicant_id) or {}

        if profile.get("city") and profile.get("country"):
            location = f"{profile['city']}, {profile['country']}"
        else:
            location = profile.get("country") or "Not specified"

        return {
            "id": applicant_id,
            "name": profile.get("name") or UNKNOWN_NAME,
            "profilePhoto": profile.get("profile_photo_url"),
            "bio": profile.get("bio"),
            "location": location,
            "email": profile.get("email") if show_contact else None,
            "phone": profile.get("phone") if show_contact else None,
        }

    @staticmethod
    def _gig_summary(gig: dict[str, Any]) -> dict[str, Any]:
        client = SupabaseClient.get_client()

        with database_operation("Failed to fetch gig details"):
            locations = [
                row.get("location_name")
                for row in (
                    client.table("gig_locations")
                    .select("location_name")
                    .eq("gig_id", gig["id"])
                    .order("created_at")
                    .execute()
                ).data or []
            ]
            total_applications = SupabaseClient.count_rows("applications", gig_id=gig["id"])
        author = SupabaseClient.fetch_author(gig.get("created_by"))

        return {
            "id": gig["id"],
            "slug": gig.get("slug"),
            "title": gig.get("title"),
            "description": gig.get("description"),
            "company": gig.get("company"),
            "budgetLabel": format_budget_label(
                gig.get("amount"), gig.get("currency"), bool(gig.get("request_quote"))
            ),
            "role": gig.get("role"),
            "type": gig.get("type"),
            "department": gig.get("department"),
            "status": gig.get("status"),
            "expiryDate": gig.get("expiry_date"),
            "postedOn": gig.get("created_at"),
            "locations": locations,
            "location": ", ".join(locations),
            "postedBy": {"name": author["name"], "avatar": author["avatar"]},
            "totalApplications": total_applications,
        }
