# =============================================================================
# app/routers/upload.py - File Upload Endpoints
# =============================================================================
# Multipart uploads to Supabase Storage. Every endpoint takes a `file` field
# and returns the object's public URL:
#   POST /upload/profile-photo   profile photo or banner (type=profile|banner)
#   POST /upload/slate-media     slate image or video (optional post_id)
#   POST /upload/collab-cover    collab cover image (optional collab_id)
#   POST /upload/resume          PDF / DOC / DOCX resume
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile

from app.dependencies import CurrentUser
from app.exceptions import ValidationFailedError
from core.models.envelope import success_response
from core.services.storage_service import (
    StorageService,
    UploadRule,
    collab_cover_rule,
    profile_photo_rule,
    resume_rule,
    slate_media_rule,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def read_checked(file: UploadFile | None, rule: UploadRule) -> bytes:
    """
    Read an uploaded file after checking its declared type and size.

    Oversized files are rejected from the size recorded while parsing the
    form, before the spooled body is read into memory.
    """
    if file is None:
        raise ValidationFailedError("No file provided")
    StorageService.validate(rule, file.content_type, file.size)
    return file.file.read()


@router.post("/profile-photo")
def upload_profile_photo(
    user: CurrentUser,
    file: Annotated[UploadFile | None, File(description="JPEG, PNG or WebP image")] = None,
    photo_type: Annotated[str | None, Form(alias="type", description="profile or banner")] = None,
):
    """
    Upload a profile photo or banner.

    Max 2 MB. Stored at <user>/<profile|banner>/<timestamp>-<random>.<ext>
    in the profile-photos bucket.
    """
    content = read_checked(file, profile_photo_rule())

    result = StorageService.upload_profile_photo(
        user.id,
        filename=file.filename,
        content=content,
        content_type=file.content_type,
        photo_type=photo_type,
    )
    return success_response(result, "Profile photo uploaded successfully")


@router.post("/slate-media")
def upload_slate_media(
    user: CurrentUser,
    file: Annotated[UploadFile | None, File(description="Image or MP4/MOV/AVI video")] = None,
    post_id: Annotated[str | None, Form()] = None,
):
    """Upload an image or video for a slate post to the slate-media bucket."""
    content = read_checked(file, slate_media_rule())

    result = StorageService.upload_slate_media(
        user.id,
        filename=file.filename,
        content=content,
        content_type=file.content_type,
        post_id=post_id,
    )
    return success_response(result, "Media uploaded successfully")


@router.post("/collab-cover")
def upload_collab_cover(
    user: CurrentUser,
    file: Annotated[UploadFile | None, File(description="JPEG or PNG image")] = None,
    collab_id: Annotated[str | None, Form()] = None,
):
    """Upload a collab cover image (max 5 MB) to the collab-covers bucket."""
    content = read_checked(file, collab_cover_rule())

    result = StorageService.upload_collab_cover(
        user.id,
        filename=file.filename,
        content=content,
        content_type=file.content_type,
        collab_id=collab_id,
    )
    return success_response(result, "Cover image uploaded successfully")


@router.post("/resume")
def upload_resume(
    user: CurrentUser,
    file: Annotated[UploadFile | None, File(description="PDF, DOC or DOCX")] = None,
):
    content = read_checked(file, resume_rule())

    result = StorageService.upload_resume(
        user.id,
        filename=file.filename,
        content=content,
        content_type=file.content_type,
    )
    return success_response(result, "Resume uploaded successfully")
