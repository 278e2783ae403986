# =============================================================================
# core/services/guards.py - Request Contract Guards
# =============================================================================
# The checks every handler runs between "who is calling" and "do the work":
# - ensure_found: a looked-up row exists (404 otherwise)
# - ensure_owner: the caller owns the row (403 otherwise)
# - database_operation: map driver failures to a 500 with context
# =============================================================================

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from app.exceptions import (
    ForbiddenError,
    HeyProException,
    NotFoundError,
    OperationFailedError,
)
from lib.utils import same_user

logger = logging.getLogger(__name__)


def ensure_found(row: dict[str, Any] | None, message: str) -> dict[str, Any]:
    """
    Return `row`, or raise NotFoundError(message) when it's missing.

    Example:
        gig = ensure_found(SupabaseClient.fetch_one("gigs", id=gig_id), "Gig not found")
    """
    if not row:
        raise NotFoundError(message)
    return row


def ensure_owner(
    row: dict[str, Any] | None,
    user_id: UUID | str,
    owner_field: str,
    not_found: str,
    forbidden: str,
) -> dict[str, Any]:
    """
    Return `row` if `user_id` owns it.

    Args:
        row: The looked-up resource (None if it doesn't exist)
        user_id: Authenticated caller
        owner_field: Column holding the owning user's id (e.g. "created_by")
        not_found: Message for a missing row (404)
        forbidden: Message for an ownership mismatch (403)

    Raises:
        NotFoundError: If row is None
        ForbiddenError: If the owner field doesn't match the caller
    """
    row = ensure_found(row, not_found)
    if not same_user(row.get(owner_field), user_id):
        logger.info(f"Ownership check failed on {owner_field}: caller {user_id}")
        raise ForbiddenError(forbidden)
    return row


@contextmanager
def database_operation(action: str) -> Iterator[None]:
    """
    Wrap database calls so failures surface as OperationFailedError.

    Contract exceptions raised inside the block pass through untouched.

    Example:
        with database_operation("Failed to fetch gigs"):
            response = query.execute()
    """
    try:
        yield
    except HeyProException:
        raise
    except Exception as e:
        logger.error(f"{action}: {e}")
        raise OperationFailedError(action, e) from e


# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: Exception) -> bool:
    """True if a PostgREST error came from a unique constraint."""
    return getattr(error, "code", None) == UNIQUE_VIOLATION or UNIQUE_VIOLATION in str(error)
