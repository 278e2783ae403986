# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides small helpers for the lookups every route repeats:
# - Single-row fetches by filter
# - Row counts
# - User profile summaries (author / creator display info)
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   gig = SupabaseClient.fetch_one("gigs", id=gig_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: what failed and how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        gig = SupabaseClient.fetch_one("gigs", "id, created_by", id=gig_id)
        count = SupabaseClient.count_rows("applications", gig_id=gig_id)
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS), so
        every query issued through it must be scoped by the caller's identity.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests and on credential rotation)."""
        cls._instance = None

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Generic Lookups
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_one(
        cls,
        table: str,
        columns: str = "*",
        **filters: Any,
    ) -> dict[str, Any] | None:
        """
        Fetch the first row matching equality filters.

        Uses limit(1) instead of single()/maybe_single() so that a missing
        row is None rather than a PGRST116 error.

        Args:
            table: Table name
            columns: PostgREST column list
            **filters: column=value equality filters

        Returns:
            Row dict, or None if nothing matched

        Example:
            gig = SupabaseClient.fetch_one("gigs", "id, created_by", id=gig_id)
        """
        client = cls.get_client()

        query = client.table(table).select(columns)
        for column, value in filters.items():
            query = query.eq(column, cls._normalize_uuid(value))

        response = query.limit(1).execute()
        rows = response.data or []
        return rows[0] if rows else None

    @classmethod
    def count_rows(cls, table: str, **filters: Any) -> int:
        """
        Count rows matching equality filters.

        Example:
            total = SupabaseClient.count_rows("collab_interests", collab_id=collab_id)
        """
        client = cls.get_client()

        query = client.table(table).select("id", count="exact")
        for column, value in filters.items():
            query = query.eq(column, cls._normalize_uuid(value))

        response = query.execute()
        return response.count or 0

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_user_profile(
        cls,
        user_id: str | UUID,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """Fetch a user's profile row, or None if they haven't created one."""
        return cls.fetch_one("user_profiles", columns, user_id=user_id)

    @classmethod
    def fetch_author(cls, user_id: str | UUID | None) -> dict[str, Any]:
        """
        Build the display block for a content author.

        Missing profiles degrade to {"name": "Unknown", "avatar": None} so
        that listings never fail because one author is incomplete.

        Returns:
            Dict with id, name, avatar
        """
        if not user_id:
            return {"id": None, "name": UNKNOWN_NAME, "avatar": None}

        try:
            profile = cls.fetch_user_profile(user_id, "user_id, name, profile_photo_url")
        except Exception as e:
            logger.warning(f"Could not fetch profile for {user_id}: {e}")
            profile = None

        return {
            "id": cls._normalize_uuid(user_id),
            "name": (profile or {}).get("name") or UNKNOWN_NAME,
            "avatar": (profile or {}).get("profile_photo_url"),
        }
