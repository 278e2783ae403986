# =============================================================================
# app/routers/profile.py - Profile Endpoints
# =============================================================================
# The caller's own profile, its completion status and professional roles.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query

from app.dependencies import CurrentUser
from core.models.envelope import success_response
from core.models.profile import RoleCreate
from core.services.profile_service import ProfileService

router = APIRouter()


@router.get("")
def get_profile(user: CurrentUser):
    """
    Get the caller's profile.

    Returns `data: null` if the caller has not created a profile yet.
    """
    profile = ProfileService.get_profile(user.id)

    if profile is None:
        return success_response(None, "No profile found")
    return success_response(profile, "Profile retrieved successfully")


@router.patch("")
def update_profile(
    user: CurrentUser,
    changes: Annotated[dict[str, Any], Body(description="Profile columns to set")],
):
    """
    Create or update the caller's profile.

    Any JSON object is accepted; `id`, `user_id` and `created_at` are ignored.
    """
    profile = ProfileService.save_profile(user.id, changes)
    return success_response(profile, "Profile updated successfully")


@router.get("/check")
def check_profile(user: CurrentUser):
    """Report whether the caller's profile is complete."""
    completion = ProfileService.get_completion(user.id)
    return success_response(
        completion.model_dump(by_alias=True),
        "Profile status retrieved successfully",
    )


# =============================================================================
# Roles
# =============================================================================

@router.get("/roles")
def list_roles(user: CurrentUser):
    roles = ProfileService.list_roles(user.id)
    return success_response(roles, "Roles retrieved successfully")


@router.post("/roles", status_code=201)
def add_role(user: CurrentUser, request: RoleCreate):
    """Add a professional role. Role names are unique per user."""
    role = ProfileService.add_role(user.id, request.role_name, request.sort_order)
    return success_response(role, "Role added successfully")


@router.delete("/roles")
def delete_role(
    user: CurrentUser,
    role_id: Annotated[str | None, Query(alias="id", description="Role id")] = None,
):
    ProfileService.delete_role(user.id, role_id)
    return success_response(None, "Role deleted successfully")
