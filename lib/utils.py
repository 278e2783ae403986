# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Small pure helpers shared by the services:
# - UUID normalization
# - Slug generation
# - Budget labels for gigs
# - Input sanitizing and format checks
# =============================================================================

import calendar
import re
import time
from collections.abc import Callable
from datetime import date, datetime, timezone
from uuid import UUID

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_RE = re.compile(r"^\d{4}-\d{2}$")
YEAR_RE = re.compile(r"^\d{4}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

GIG_SLUG_MAX_LENGTH = 50
COLLAB_SLUG_MAX_LENGTH = 100


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        gig_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        gig_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def same_user(left: str | UUID | None, right: str | UUID | None) -> bool:
    """Compare two user ids regardless of whether they're str or UUID."""
    if left is None or right is None:
        return False
    return normalize_uuid(left) == normalize_uuid(right)


# =============================================================================
# Slugs
# =============================================================================

def slugify(title: str, max_length: int = GIG_SLUG_MAX_LENGTH) -> str:
    """
    Turn a title into a URL slug.

    Lowercases, drops anything that isn't a word character, space or hyphen,
    turns whitespace into hyphens and collapses repeated hyphens.

    Example:
        slugify("Gaffer needed!  Dubai -- 3 days")  # "gaffer-needed-dubai-3-days"
    """
    slug = title.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug[:max_length]


def generate_unique_slug(
    title: str,
    slug_exists: Callable[[str], bool],
    max_length: int = GIG_SLUG_MAX_LENGTH,
) -> str:
    """
    Generate a slug that `slug_exists` reports as free.

    Appends -1, -2, ... to the base slug until a free one is found.
    """
    base = slugify(title, max_length)
    candidate = base
    counter = 1

    while slug_exists(candidate):
        candidate = f"{base}-{counter}"
        counter += 1

    return candidate


def post_slug(content: str, now: float | None = None) -> str:
    """
    Slug for a slate post: first eight words plus a base36 millisecond stamp.

    Example:
        post_slug("Wrapped day 3 on set!")  # "wrapped-day-3-on-set-lx2k9a1b"
    """
    words = re.sub(r"[^a-z0-9\s]", "", content.lower()).split()
    millis = int((now if now is not None else time.time()) * 1000)
    return "-".join(words[:8]) + "-" + _base36(millis)


def _base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


# =============================================================================
# Display Formatting
# =============================================================================

def format_budget_label(
    amount: float | int | None,
    currency: str | None,
    request_quote: bool,
) -> str:
    """
    Human-readable budget for a gig.

    Example:
        format_budget_label(12500, "AED", False)  # "AED 12,500"
        format_budget_label(None, "AED", False)   # "Budget TBD"
        format_budget_label(500, "USD", True)     # "Request Quote"
    """
    if request_quote:
        return "Request Quote"

    if not amount or not currency:
        return "Budget TBD"

    if float(amount).is_integer():
        formatted = f"{int(amount):,}"
    else:
        formatted = f"{amount:,.2f}".rstrip("0").rstrip(".")
    return f"{currency} {formatted}"


def sanitize_string(value: str) -> str:
    """Trim and collapse internal whitespace."""
    return re.sub(r"\s+", " ", value.strip())


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def ilike_any(columns: list[str], search: str) -> str:
    """
    PostgREST or-filter matching `search` in any of `columns`.

    The pattern is double-quoted so commas and parentheses in user input
    stay part of the value.

    Example:
        ilike_any(["title", "description"], "Dubai, UAE")
        # 'title.ilike."%Dubai, UAE%",description.ilike."%Dubai, UAE%"'
    """
    escaped = search.replace("\\", "\\\\").replace('"', '\\"')
    return ",".join(f'{column}.ilike."%{escaped}%"' for column in columns)


def utc_now_iso() -> str:
    """Current UTC timestamp as ISO-8601, the format the database stores."""
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Dates
# =============================================================================

def is_iso_date(value: str) -> bool:
    """
    Check a YYYY-MM-DD string names a real calendar date.

    Example:
        is_iso_date("2025-02-28")  # True
        is_iso_date("2025-02-30")  # False
    """
    if not isinstance(value, str) or not ISO_DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def month_bounds(month: str) -> tuple[str, str]:
    """
    First and last day of a YYYY-MM month.

    Example:
        month_bounds("2025-02")  # ("2025-02-01", "2025-02-28")
    """
    year, month_number = (int(part) for part in month.split("-"))
    last_day = calendar.monthrange(year, month_number)[1]
    return f"{year:04d}-{month_number:02d}-01", f"{year:04d}-{month_number:02d}-{last_day:02d}"


def year_bounds(year: str) -> tuple[str, str]:
    return f"{year}-01-01", f"{year}-12-31"


def is_expired(expiry: str | None, now: datetime | None = None) -> bool:
    """True if an ISO timestamp/date lies in the past."""
    if not expiry:
        return False
    parsed = datetime.fromisoformat(expiry.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed < (now or datetime.now(timezone.utc))
