# =============================================================================
# core/models/envelope.py - Response Envelope & Pagination
# =============================================================================
# Every API response is wrapped in one of two shapes:
#
#   success: {"success": true,  "message": "...", "data": ...}
#   failure: {"success": false, "error": "...",   "details": ...}
#
# `details` is omitted when there is nothing to report.
# =============================================================================

import math
from typing import Any

from pydantic import BaseModel, Field


def success_response(data: Any, message: str = "Operation successful") -> dict[str, Any]:
    """
    Build a success envelope.

    Example:
        return success_response(gig, "Gig retrieved successfully")
    """
    return {
        "success": True,
        "message": message,
        "data": data,
    }


def error_response(error: str, details: Any = None) -> dict[str, Any]:
    """Build an error envelope, leaving out empty details."""
    result: dict[str, Any] = {
        "success": False,
        "error": error,
    }
    if details:
        result["details"] = details
    return result


# =============================================================================
# Pagination
# =============================================================================

class PageRequest(BaseModel):
    """
    Normalized page/limit pair.

    Out-of-range values are clamped rather than rejected, so
    `?page=0&limit=1000` behaves like `?page=1&limit=<max>`.
    """
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)

    @classmethod
    def clamp(cls, page: int | None, limit: int | None, default_limit: int, max_limit: int) -> "PageRequest":
        page = max(1, page or 1)
        limit = min(max_limit, max(1, limit or default_limit))
        return cls(page=page, limit=limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def end(self) -> int:
        """Inclusive end index for PostgREST range()."""
        return self.offset + self.limit - 1

    def summary(self, total: int) -> dict[str, Any]:
        """Pagination block returned alongside list data."""
        total_pages = math.ceil(total / self.limit) if total else 0
        return {
            "currentPage": self.page,
            "totalPages": total_pages,
            "total": total,
            "limit": self.limit,
            "hasNextPage": self.page < total_pages,
            "hasPrevPage": self.page > 1,
        }
