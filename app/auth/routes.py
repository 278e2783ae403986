# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login/OAuth is handled by Supabase Auth client-side.
# These routes are for getting user info after authentication.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from core.models.envelope import success_response
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me")
def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
):
    """
    Get the current authenticated user with their profile display fields.

    Raises:
        401: If not authenticated
    """
    try:
        profile = SupabaseClient.fetch_user_profile(user.id)
    except Exception as e:
        logger.warning(f"Could not fetch user profile: {e}")
        profile = None

    # User exists in auth but hasn't saved a profile yet
    profile = profile or {}
    response = UserResponse(
        id=user.id,
        email=user.email,
        name=profile.get("name"),
        profile_photo_url=profile.get("profile_photo_url"),
        is_profile_complete=bool(profile.get("is_profile_complete")),
        created_at=profile.get("created_at"),
        updated_at=profile.get("updated_at"),
    )

    return success_response(response.model_dump(mode="json"), "User retrieved successfully")


@router.get("/verify")
def verify_token(
    user: AuthUser = Depends(get_current_user)
):
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return success_response(
        {
            "valid": True,
            "user_id": str(user.id),
            "email": user.email,
        },
        "Token is valid",
    )
