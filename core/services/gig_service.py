# =============================================================================
# core/services/gig_service.py - Gig Business Logic
# =============================================================================
# This service handles all gig-related operations:
# - Public listing with search and filters
# - Detail lookups by id or slug
# - Create / update / delete by the gig's creator
#
# A gig row lives in `gigs`; its date windows, locations and references live
# in child tables keyed by gig_id. Child writes are best effort: a failure is
# logged and the gig itself is still returned.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import ForbiddenError, ValidationFailedError
from core.models.envelope import PageRequest
from core.models.gig import GIG_COLUMNS, GigCreate, GigStatus, GigUpdate
from core.services.guards import database_operation, ensure_found, ensure_owner
from core.services.profile_service import ProfileService
from lib.supabase_client import SupabaseClient
from lib.utils import (
    format_budget_label,
    generate_unique_slug,
    ilike_any,
    normalize_uuid,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

REQUIRED_GIG_FIELDS = ("title", "description")


class GigService:
    """
    Service for managing gigs.

    All methods are static - no instance state needed.
    Ownership is always checked against the `created_by` column.
    """

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def list_gigs(
        page: PageRequest,
        search: str | None = None,
        role: str | None = None,
        gig_type: str | None = None,
        created_by: UUID | str | None = None,
    ) -> dict[str, Any]:
        """
        List active, non-expired gigs, newest first.

        Args:
            page: Page and limit
            search: Matched case-insensitively against title and description
            role: Exact role filter
            gig_type: Exact type filter
            created_by: Only gigs posted by this user

        Returns:
            Dict with gigs and pagination
        """
        client = SupabaseClient.get_client()
        now = utc_now_iso()

        query = (
            client.table("gigs")
            .select("*", count="exact")
            .eq("status", GigStatus.ACTIVE.value)
            .or_(f"expiry_date.is.null,expiry_date.gt.{now}")
        )

        if search:
            query = query.or_(ilike_any(["title", "description"], search))
        if role:
            query = query.eq("role", role)
        if gig_type:
            query = query.eq("type", gig_type)
        if created_by:
            query = query.eq("created_by", normalize_uuid(created_by))

        with database_operation("Failed to fetch gigs"):
            response = (
                query.order("created_at", desc=True)
                .range(page.offset, page.end)
                .execute()
            )

        gigs = [GigService._to_summary(gig) for gig in response.data or []]

        return {
            "gigs": gigs,
            "pagination": page.summary(response.count or 0),
        }

    @staticmethod
    def get_gig(gig_id: str) -> dict[str, Any]:
        """
        Get full gig detail by id.

        Raises:
            NotFoundError: If the gig doesn't exist
        """
        with database_operation("Failed to fetch gig"):
            gig = SupabaseClient.fetch_one("gigs", id=gig_id)
        return GigService._to_detail(ensure_found(gig, "Gig not found"))

    @staticmethod
    def get_gig_by_slug(slug: str) -> dict[str, Any]:
        with database_operation("Failed to fetch gig"):
            gig = SupabaseClient.fetch_one("gigs", slug=slug)
        return GigService._to_detail(ensure_found(gig, "Gig not found"))

    @staticmethod
    def get_owned_gig(
        gig_id: str,
        user_id: UUID | str,
        forbidden: str,
    ) -> dict[str, Any]:
        """
        Fetch a gig and check the caller created it.

        Used by every creator-only action (edit, delete, applications,
        contacts), each with its own 403 message.
        """
        with database_operation("Failed to fetch gig"):
            gig = SupabaseClient.fetch_one("gigs", id=gig_id)
        return ensure_owner(gig, user_id, "created_by", "Gig not found", forbidden)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_gig(user_id: UUID | str, body: GigCreate) -> dict[str, Any]:
        """
        Create a gig for the caller.

        Raises:
            ForbiddenError: If the caller's profile is incomplete
            ValidationFailedError: If title or description is missing
        """
        if not ProfileService.is_profile_complete(user_id):
            raise ForbiddenError("Please complete your profile before creating gigs")

        missing = [field for field in REQUIRED_GIG_FIELDS if not getattr(body, field)]
        if missing:
            raise ValidationFailedError(f"Missing required fields: {', '.join(missing)}")

        client = SupabaseClient.get_client()
        slug = GigService._unique_slug(body.title)

        row = {column: getattr(body, column) for column in GIG_COLUMNS}
        row.update({
            "slug": slug,
            "currency": body.currency or settings.DEFAULT_CURRENCY,
            "crew_count": body.crew_count or 1,
            "is_tbc": bool(body.is_tbc),
            "request_quote": bool(body.request_quote),
            "status": (body.status or GigStatus.ACTIVE).value,
            "created_by": normalize_uuid(user_id),
        })

        with database_operation("Failed to create gig"):
            response = client.table("gigs").insert(row).execute()
        gig = response.data[0]

        logger.info(f"Created gig {gig['id']} ({slug}) for user: {user_id}")

        GigService._write_children(gig["id"], body)
        return GigService._to_detail(gig)

    @staticmethod
    def update_gig(gig_id: str, user_id: UUID | str, body: GigUpdate) -> dict[str, Any]:
        """
        Partially update a gig. Only its creator may do this.

        A changed title regenerates the slug. Child collections present in
        the body replace the stored ones.
        """
        existing = GigService.get_owned_gig(
            gig_id, user_id, "You do not have permission to update this gig"
        )
        client = SupabaseClient.get_client()

        changes = body.model_dump(exclude_unset=True)
        data: dict[str, Any] = {
            column: changes[column] for column in GIG_COLUMNS if column in changes
        }
        if "status" in data and data["status"] is not None:
            data["status"] = GigStatus(data["status"]).value

        if body.title and body.title != existing.get("title"):
            data["slug"] = GigService._unique_slug(body.title)

        data["updated_at"] = utc_now_iso()

        with database_operation("Failed to update gig"):
            response = client.table("gigs").update(data).eq("id", gig_id).execute()
        gig = (response.data or [{**existing, **data}])[0]

        logger.info(f"Updated gig {gig_id}: {sorted(data)}")

        GigService._write_children(gig_id, body, replace=True)
        return GigService._to_detail(gig)

    @staticmethod
    def delete_gig(gig_id: str, user_id: UUID | str) -> None:
        GigService.get_owned_gig(
            gig_id, user_id, "You do not have permission to delete this gig"
        )
        client = SupabaseClient.get_client()

        with database_operation("Failed to delete gig"):
            client.table("gigs").delete().eq("id", gig_id).execute()

        logger.info(f"Deleted gig {gig_id}")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _unique_slug(title: str) -> str:
        def slug_exists(candidate: str) -> bool:
            return SupabaseClient.fetch_one("gigs", "id", slug=candidate) is not None

        with database_operation("Failed to generate slug"):
            return generate_unique_slug(title, slug_exists)

    @staticmethod
    def _write_children(gig_id: str, body: GigCreate | GigUpdate, replace: bool = False) -> None:
        """
        Write date windows, locations and references for a gig.

        With replace=True, a collection present in the body (even empty)
        first clears the stored rows. Failures are logged, never raised.
        """
        client = SupabaseClient.get_client()

        children = {
            "gig_dates": None if body.date_windows is None else [
                {"gig_id": gig_id, "month": window.label, "days": window.range}
                for window in body.date_windows
            ],
            "gig_locations": None if body.locations is None else [
                {"gig_id": gig_id, "location_name": location}
                for location in body.locations
            ],
            "gig_references": None if body.references is None else [
                {"gig_id": gig_id, "label": ref.label, "url": ref.url, "type": ref.type}
                for ref in body.references
            ],
        }

        for table, rows in children.items():
            if rows is None:
                continue
            try:
                if replace:
                    client.table(table).delete().eq("gig_id", gig_id).execute()
                if rows:
                    client.table(table).insert(rows).execute()
            except Exception as e:
                logger.warning(f"Failed to write {table} for gig {gig_id}: {e}")

    @staticmethod
    def _fetch_children(gig_id: str) -> tuple[list[dict], list[str], list[dict]]:
        client = SupabaseClient.get_client()

        dates = (
            client.table("gig_dates")
            .select("month, days")
            .eq("gig_id", gig_id)
            .order("created_at")
            .execute()
        ).data or []
        locations = (
            client.table("gig_locations")
            .select("location_name")
            .eq("gig_id", gig_id)
            .order("created_at")
            .execute()
        ).data or []
        references = (
            client.table("gig_references")
            .select("id, label, url, type")
            .eq("gig_id", gig_id)
            .execute()
        ).data or []

        date_windows = [{"label": d.get("month"), "range": d.get("days")} for d in dates]
        location_names = [loc.get("location_name") for loc in locations]
        return date_windows, location_names, references

    @staticmethod
    def _to_summary(
        gig: dict[str, Any],
        children: tuple[list[dict], list[str], list[dict]] | None = None,
    ) -> dict[str, Any]:
        """Listing card for a gig."""
        with database_operation("Failed to fetch gig details"):
            date_windows, locations, _ = children or GigService._fetch_children(gig["id"])
            application_count = SupabaseClient.count_rows("applications", gig_id=gig["id"])
        author = SupabaseClient.fetch_author(gig.get("created_by"))

        return {
            "id": gig["id"],
            "slug": gig.get("slug"),
            "title": gig.get("title"),
            "description": gig.get("description"),
            "qualifyingCriteria": gig.get("qualifying_criteria"),
            "budgetLabel": format_budget_label(
                gig.get("amount"), gig.get("currency"), bool(gig.get("request_quote"))
            ),
            "amount": gig.get("amount"),
            "currency": gig.get("currency"),
            "crewCount": gig.get("crew_count"),
            "role": gig.get("role"),
            "type": gig.get("type"),
            "department": gig.get("department"),
            "company": gig.get("company"),
            "isTbc": gig.get("is_tbc"),
            "requestQuote": gig.get("request_quote"),
            "supportingFileLabel": gig.get("supporting_file_label"),
            "referenceUrl": gig.get("reference_url"),
            "postedOn": gig.get("created_at"),
            "postedBy": {"name": author["name"], "avatar": author["avatar"]},
            "dateWindows": date_windows,
            "location": ", ".join(locations),
            "applyBefore": gig.get("expiry_date"),
            "applicationCount": application_count,
        }

    @staticmethod
    def _to_detail(gig: dict[str, Any]) -> dict[str, Any]:
        """Full gig view: the listing card plus status, owner and children."""
        with database_operation("Failed to fetch gig details"):
            children = GigService._fetch_children(gig["id"])
        _, locations, references = children

        detail = GigService._to_summary(gig, children)
        detail.update({
            "expiryDate": gig.get("expiry_date"),
            "status": gig.get("status"),
            "createdBy": gig.get("created_by"),
            "createdAt": gig.get("created_at"),
            "updatedAt": gig.get("updated_at"),
            "locations": locations,
            "references": references,
        })
        return detail
