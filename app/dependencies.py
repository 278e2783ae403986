# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared request state.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, Query

from app.auth import AuthUser, get_current_user, get_current_user_optional
from app.config import settings
from core.models.envelope import PageRequest


def get_page(
    page: Annotated[int | None, Query(description="Page number (from 1)")] = None,
    limit: Annotated[int | None, Query(description="Items per page")] = None,
) -> PageRequest:
    """
    Standard list pagination.

    Out-of-range values are clamped to 1..MAX_PAGE_SIZE, not rejected.
    """
    return PageRequest.clamp(page, limit, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)


def get_feed_page(
    page: Annotated[int | None, Query(description="Page number (from 1)")] = None,
    limit: Annotated[int | None, Query(description="Items per page (max 50)")] = None,
) -> PageRequest:
    """Pagination for slate feeds, capped at 50 per page."""
    return PageRequest.clamp(page, limit, settings.DEFAULT_PAGE_SIZE, 50)


def get_interest_page(
    page: Annotated[int | None, Query(description="Page number (from 1)")] = None,
    limit: Annotated[int | None, Query(description="Items per page")] = None,
) -> PageRequest:
    """Pagination for collab interest and slate comment lists, 50 per page by default."""
    return PageRequest.clamp(page, limit, 50, settings.MAX_PAGE_SIZE)


# Type aliases for dependency injection
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
OptionalUser = Annotated[AuthUser | None, Depends(get_current_user_optional)]
Page = Annotated[PageRequest, Depends(get_page)]
FeedPage = Annotated[PageRequest, Depends(get_feed_page)]
InterestPage = Annotated[PageRequest, Depends(get_interest_page)]
