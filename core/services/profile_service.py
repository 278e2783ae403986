# =============================================================================
# core/services/profile_service.py - Profile Business Logic
# =============================================================================
# Handles the caller's profile row, completion status and professional roles.
# Every query here is scoped to the authenticated user's id.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import NotFoundError, OperationFailedError, ValidationFailedError
from core.models.profile import (
    PROTECTED_PROFILE_FIELDS,
    REQUIRED_PROFILE_FIELDS,
    ProfileCompletion,
)
from core.services.guards import database_operation, is_unique_violation
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now_iso

logger = logging.getLogger(__name__)


class ProfileService:
    """
    Service for the caller's own profile.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def get_profile(user_id: UUID | str) -> dict[str, Any] | None:
        """Return the caller's profile row, or None if they have none yet."""
        with database_operation("Failed to fetch profile"):
            return SupabaseClient.fetch_user_profile(user_id)

    @staticmethod
    def save_profile(user_id: UUID | str, changes: dict[str, Any]) -> dict[str, Any]:
        """
        Create or update the caller's profile.

        Args:
            user_id: Authenticated caller
            changes: Arbitrary profile columns from the request body

        Returns:
            The saved profile row
        """
        data = {k: v for k, v in changes.items() if k not in PROTECTED_PROFILE_FIELDS}
        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(user_id)

        existing = ProfileService.get_profile(user_id)

        if existing:
            with database_operation("Failed to update profile"):
                response = (
                    client.table("user_profiles")
                    .update({**data, "updated_at": utc_now_iso()})
                    .eq("user_id", user_id_str)
                    .execute()
                )
            logger.info(f"Updated profile for user: {user_id_str}")
        else:
            with database_operation("Failed to create profile"):
                response = (
                    client.table("user_profiles")
                    .insert({**data, "user_id": user_id_str})
                    .execute()
                )
            logger.info(f"Created profile for user: {user_id_str}")

        return (response.data or [existing or {}])[0]

    @staticmethod
    def is_profile_complete(user_id: UUID | str) -> bool:
        """
        Check the fields required before posting or applying to gigs.

        Returns:
            True when firstname, surname, country and city are all filled
        """
        with database_operation("Failed to check profile status"):
            profile = SupabaseClient.fetch_user_profile(
                user_id, ", ".join(REQUIRED_PROFILE_FIELDS)
            )

        if not profile:
            return False
        return all(profile.get(field) for field in REQUIRED_PROFILE_FIELDS)

    @staticmethod
    def get_completion(user_id: UUID | str) -> ProfileCompletion:
        """Stored completion flags for the caller's profile."""
        with database_operation("Failed to check profile status"):
            profile = SupabaseClient.fetch_user_profile(
                user_id, "is_profile_complete, profile_completion_percentage"
            )

        if not profile:
            return ProfileCompletion()

        return ProfileCompletion(
            is_complete=bool(profile.get("is_profile_complete")),
            completion_percentage=profile.get("profile_completion_percentage") or 0,
        )

    # -------------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------------

    @staticmethod
    def list_roles(user_id: UUID | str) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()

        with database_operation("Failed to fetch roles"):
            response = (
                client.table("user_roles")
                .select("*")
                .eq("user_id", normalize_uuid(user_id))
                .order("sort_order")
                .execute()
            )
        return response.data or []

    @staticmethod
    def add_role(
        user_id: UUID | str,
        role_name: str | None,
        sort_order: int | None = None,
    ) -> dict[str, Any]:
        """
        Add a professional role to the caller's profile.

        Raises:
            ValidationFailedError: If role_name is missing or already present
        """
        if not role_name or not role_name.strip():
            raise ValidationFailedError("Role name is required")

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("user_roles")
                .insert({
                    "user_id": normalize_uuid(user_id),
                    "role_name": role_name.strip(),
                    "sort_order": sort_order or 0,
                })
                .execute()
            )
        except Exception as e:
            if is_unique_violation(e):
                raise ValidationFailedError("This role already exists for the user")
            logger.error(f"Failed to add role: {e}")
            raise OperationFailedError("Failed to add role", e) from e

        logger.info(f"Added role '{role_name}' for user: {user_id}")
        return response.data[0]

    @staticmethod
    def delete_role(user_id: UUID | str, role_id: str | None) -> None:
        """
        Delete one of the caller's roles.

        The delete is filtered by user_id too, so another user's role id
        simply matches nothing.
        """
        if not role_id:
            raise ValidationFailedError("Role ID is required")

        client = SupabaseClient.get_client()

        with database_operation("Failed to delete role"):
            response = (
                client.table("user_roles")
                .delete()
                .eq("id", role_id)
                .eq("user_id", normalize_uuid(user_id))
                .execute()
            )

        if not response.data:
            raise NotFoundError("Role not found")
