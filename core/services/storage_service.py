# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles file uploads to Supabase Storage:
# - Profile photos and banners (profile-photos bucket)
# - Slate post media (slate-media bucket)
# - Collab cover images (collab-covers bucket)
# - Resumes (resumes bucket)
#
# Files are stored under the uploader's user id and never overwrite an
# existing object.
# =============================================================================

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import OperationFailedError, ValidationFailedError
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")
VIDEO_TYPES = ("video/mp4", "video/quicktime", "video/x-msvideo")
COVER_TYPES = ("image/jpeg", "image/jpg", "image/png")
DOCUMENT_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)


@dataclass(frozen=True)
class UploadRule:
    """What a bucket accepts."""
    bucket: str
    content_types: tuple[str, ...]
    max_bytes: int
    type_error: str
    size_error: str


def profile_photo_rule() -> UploadRule:
    return UploadRule(
        bucket=settings.PROFILE_PHOTO_BUCKET,
        content_types=IMAGE_TYPES,
        max_bytes=settings.max_profile_photo_bytes,
        type_error="Invalid file type. Allowed: JPEG, PNG, WebP",
        size_error=f"File too large. Maximum size is {settings.MAX_PROFILE_PHOTO_MB}MB",
    )


def slate_media_rule() -> UploadRule:
    return UploadRule(
        bucket=settings.SLATE_MEDIA_BUCKET,
        content_types=IMAGE_TYPES + VIDEO_TYPES,
        max_bytes=settings.max_slate_media_bytes,
        type_error="Invalid file type. Allowed: JPEG, PNG, WebP, MP4, MOV, AVI",
        size_error=f"File too large. Maximum size is {settings.MAX_SLATE_MEDIA_MB}MB",
    )


def collab_cover_rule() -> UploadRule:
    return UploadRule(
        bucket=settings.COLLAB_COVER_BUCKET,
        content_types=COVER_TYPES,
        max_bytes=settings.max_collab_cover_bytes,
        type_error="Invalid file type. Only JPEG, JPG, and PNG are allowed.",
        size_error=f"File too large. Maximum size is {settings.MAX_COLLAB_COVER_MB} MB.",
    )


def resume_rule() -> UploadRule:
    return UploadRule(
        bucket=settings.RESUME_BUCKET,
        content_types=DOCUMENT_TYPES,
        max_bytes=settings.max_resume_bytes,
        type_error="Invalid file type. Allowed: PDF, DOC, DOCX",
        size_error=f"File too large. Maximum size is {settings.MAX_RESUME_MB}MB",
    )


def build_object_name(
    filename: str | None,
    now: float | None = None,
    default_extension: str = "jpg",
) -> str:
    """
    Unique object name: <millis>-<random>.<ext>.

    Example:
        build_object_name("me.png")  # "1718000000000-k3j9x0a2bq.png"
    """
    extension = default_extension
    if filename and "." in filename:
        extension = filename.rsplit(".", 1)[1].lower() or extension
    millis = int((now if now is not None else time.time()) * 1000)
    return f"{millis}-{secrets.token_hex(6)}.{extension}"


class StorageService:
    """
    Service for Supabase Storage operations.

    Validates content type and size, uploads, and returns the public URL.
    """

    @staticmethod
    def validate(rule: UploadRule, content_type: str | None, size: int | None) -> None:
        """
        Check type and size against a rule.

        `size` may be the size the client declared, so oversized uploads
        are rejected before the body is read. None skips the size check.

        Raises:
            ValidationFailedError: Wrong type or too large
        """
        if content_type not in rule.content_types:
            raise ValidationFailedError(rule.type_error)
        if size is not None and size > rule.max_bytes:
            raise ValidationFailedError(rule.size_error)

    @staticmethod
    def upload(
        rule: UploadRule,
        path: str,
        content: bytes,
        content_type: str | None,
    ) -> dict[str, Any]:
        """
        Validate and upload a file.

        Args:
            rule: Bucket and limits to apply
            path: Object path inside the bucket
            content: File bytes
            content_type: MIME type reported by the client

        Returns:
            Dict with url, path, size, mimeType

        Raises:
            ValidationFailedError: Empty file, wrong type or too large
            OperationFailedError: If the storage upload fails
        """
        if not content:
            raise ValidationFailedError("No file provided")
        StorageService.validate(rule, content_type, len(content))

        client = SupabaseClient.get_client()
        bucket = client.storage.from_(rule.bucket)

        try:
            bucket.upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type,
                    "cache-control": "3600",
                    "upsert": "false",
                },
            )
        except Exception as e:
            logger.error(f"Storage upload failed for {rule.bucket}/{path}: {e}")
            raise OperationFailedError("Failed to upload file", e) from e

        logger.info(f"Uploaded {len(content)} bytes to {rule.bucket}/{path}")

        return {
            "url": bucket.get_public_url(path),
            "path": path,
            "size": len(content),
            "mimeType": content_type,
        }

    @staticmethod
    def upload_profile_photo(
        user_id: UUID | str,
        filename: str | None,
        content: bytes,
        content_type: str | None,
        photo_type: str | None = "profile",
    ) -> dict[str, Any]:
        """Upload a profile photo or banner to <user>/<profile|banner>/<name>."""
        kind = "banner" if photo_type == "banner" else "profile"
        path = f"{normalize_uuid(user_id)}/{kind}/{build_object_name(filename)}"

        result = StorageService.upload(profile_photo_rule(), path, content, content_type)
        return {**result, "type": kind}

    @staticmethod
    def upload_slate_media(
        user_id: UUID | str,
        filename: str | None,
        content: bytes,
        content_type: str | None,
        post_id: str | None = None,
    ) -> dict[str, Any]:
        """Upload slate media to <user>/[<post>/]<name>."""
        path = StorageService._owned_path(user_id, post_id, build_object_name(filename))

        result = StorageService.upload(slate_media_rule(), path, content, content_type)
        media_type = "video" if content_type in VIDEO_TYPES else "image"
        return {**result, "mediaType": media_type}

    @staticmethod
    def upload_collab_cover(
        user_id: UUID | str,
        filename: str | None,
        content: bytes,
        content_type: str | None,
        collab_id: str | None = None,
    ) -> dict[str, Any]:
        """Upload a collab cover image to <user>/[<collab>/]<name>."""
        path = StorageService._owned_path(user_id, collab_id, build_object_name(filename))
        return StorageService.upload(collab_cover_rule(), path, content, content_type)

    @staticmethod
    def upload_resume(
        user_id: UUID | str,
        filename: str | None,
        content: bytes,
        content_type: str | None,
    ) -> dict[str, Any]:
        """Upload a resume document to <user>/<name>; the original file name is echoed back."""
        name = build_object_name(filename, default_extension="pdf")
        path = StorageService._owned_path(user_id, None, name)

        result = StorageService.upload(resume_rule(), path, content, content_type)
        return {**result, "fileName": filename}

    @staticmethod
    def _owned_path(user_id: UUID | str, folder: str | None, name: str) -> str:
        prefix = normalize_uuid(user_id)
        if folder:
            prefix = f"{prefix}/{folder}"
        return f"{prefix}/{name}"
