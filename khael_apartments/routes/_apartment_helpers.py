"""
Internal helper functions for apartment and media route handlers.

Validation and loading helpers shared by the listing and media routes, kept
here to keep the handlers short.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import UploadFile
from sqlalchemy.engine import Connection

from khael_apartments.db.readers.apartments import (
    apartment_exists,
    get_apartment,
    get_images_for,
    get_videos_for,
)
from khael_apartments.errors import NotFoundError, ValidationError
from khael_apartments.normalizers.apartments import normalize_apartment

MB = 1024 * 1024

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")
ALLOWED_VIDEO_TYPES = ("video/mp4", "video/webm", "video/ogg")

MAX_IMAGE_BYTES = 10 * MB
MAX_VIDEO_BYTES = 50 * MB
MAX_IMAGES_PER_UPLOAD = 10


def validate_apartment_exists_or_404(conn: Connection, apartment_id: int) -> None:
    """
    Validate that an apartment exists, raise 404 if not.

    Raises:
        NotFoundError: If the apartment doesn't exist
    """
    if not apartment_exists(conn, apartment_id):
        raise NotFoundError(
            "Apartment not found",
            f"No apartment found with ID: {apartment_id}",
        )


def load_apartment_or_404(conn: Connection, apartment_id: int) -> dict[str, Any]:
    """
    Load one apartment with its images and videos, shaped for the API.

    Raises:
        NotFoundError: If the apartment doesn't exist
    """
    row = get_apartment(conn, apartment_id)
    if row is None:
        raise NotFoundError(
            "Apartment not found",
            f"No apartment found with ID: {apartment_id}",
        )

    images = get_images_for(conn, [apartment_id])
    videos = get_videos_for(conn, [apartment_id])
    return normalize_apartment(row, images.get(apartment_id, []), videos.get(apartment_id, []))


def _too_large(filename: str, max_bytes: int) -> ValidationError:
    return ValidationError(
        "File too large",
        f"{filename} exceeds the {max_bytes // MB}MB limit",
    )


def read_upload(
    upload: UploadFile,
    allowed_types: tuple[str, ...],
    max_bytes: int,
) -> tuple[bytes, str]:
    """
    Read an uploaded file after checking its MIME type, then its size.

    Args:
        upload: Multipart file from the request
        allowed_types: Accepted content types
        max_bytes: Size ceiling for a single file

    Returns:
        tuple[bytes, str]: File contents and the filename to report back

    Raises:
        ValidationError: Wrong type, empty file or over the size ceiling
    """
    filename = (upload.filename or "").strip() or "upload"
    content_type = (upload.content_type or "").lower().strip()

    if content_type not in allowed_types:
        raise ValidationError(
            "Invalid file type",
            f"{filename}: only {', '.join(allowed_types)} files are allowed",
        )

    if upload.size is not None and upload.size > max_bytes:
        raise _too_large(filename, max_bytes)

    # Never pull more than one byte past the ceiling into memory
    data = upload.file.read(max_bytes + 1)
    if not data:
        raise ValidationError("Empty upload", f"{filename} is empty")
    if len(data) > max_bytes:
        raise _too_large(filename, max_bytes)

    return data, filename


def collect_uploads(*groups: Optional[list[UploadFile]]) -> list[UploadFile]:
    """Merge files sent under alternative form field names (``images`` / ``images[]``)."""
    files: list[UploadFile] = []
    for group in groups:
        if group:
            files.extend(group)
    return files
