# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error leaves the API in the same envelope:
#   {"success": false, "error": "<message>", "details": <optional>}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.models.envelope import error_response

logger = logging.getLogger(__name__)


class HeyProException(Exception):
    """
    Base exception for the HeyProData API.

    All custom exceptions inherit from this class. Services raise these
    and the handlers below turn them into error envelopes.
    """

    def __init__(
        self,
        message: str,
        code: str = "HEYPRO_ERROR",
        status_code: int = 500,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        return error_response(self.message, self.details)


# =============================================================================
# Request Contract Exceptions
# =============================================================================

class AuthenticationRequiredError(HeyProException):
    """Raised when a route needs an identity and none could be resolved."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            code="AUTHENTICATION_REQUIRED",
            status_code=401,
        )


class ValidationFailedError(HeyProException):
    """Raised when request input is missing or malformed."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(
            message=message,
            code="VALIDATION_FAILED",
            status_code=400,
            details=details,
        )


class ForbiddenError(HeyProException):
    """Raised when the caller does not own the resource they're acting on."""

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
        )


class NotFoundError(HeyProException):
    """Raised when a resource doesn't exist (or isn't visible to the caller)."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
        )


class OperationFailedError(HeyProException):
    """Raised when the database rejects an operation."""

    def __init__(self, message: str, error: Any = None):
        super().__init__(
            message=message,
            code="OPERATION_FAILED",
            status_code=500,
            details=str(error) if error is not None else None,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def heypro_exception_handler(
    request: Request,
    exc: HeyProException
) -> JSONResponse:
    """Convert HeyProException to an error envelope."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Malformed bodies and query parameters are client errors (400), reported
    with the field-level errors under `details`.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=error_response("Invalid request body", errors)
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap framework-raised HTTP errors (404 routes, 405 methods) in the envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=error_response("Internal server error", str(exc))
    )
