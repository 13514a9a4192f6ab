"""
External media host integration (Cloudinary).

Uploads return a durable URL that is the only thing persisted for an image or
video. Remote deletion is advisory: the store is the source of truth, and a
failed remote delete is logged and counted but never blocks the local change.
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional
from urllib.parse import urlparse

import cloudinary
import cloudinary.uploader
import structlog

from khael_apartments.config import (
    CLOUDINARY_API_KEY,
    CLOUDINARY_API_SECRET,
    CLOUDINARY_CLOUD_NAME,
    MEDIA_ROOT_FOLDER,
)
from khael_apartments.metrics import media_remote_deletes

logger = structlog.get_logger(__name__)

IMAGE_FOLDER = f"{MEDIA_ROOT_FOLDER}/images"
VIDEO_FOLDER = f"{MEDIA_ROOT_FOLDER}/videos"

# Large images are scaled down on the host, never up
IMAGE_TRANSFORMATION = [{"width": 1200, "height": 900, "crop": "limit"}]

_VERSION_SEGMENT = re.compile(r"^v\d+$")


@dataclass(frozen=True)
class UploadedMedia:
    url: str
    public_id: str
    size: int
    filename: str


class CloudinaryMediaHost:
    """
    Thin wrapper over the Cloudinary uploader.

    Configured lazily on first use so importing the app does not require
    Cloudinary credentials.

    Example:
        >>> host = CloudinaryMediaHost("demo", "key", "secret")
        >>> uploaded = host.upload(data, folder=IMAGE_FOLDER, filename="living-room.jpg")
        >>> host.destroy(uploaded.public_id)
    """

    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self._configured = False

    def _configure(self) -> None:
        if self._configured:
            return
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise RuntimeError(
                "Cloudinary is not configured: set CLOUDINARY_CLOUD_NAME, "
                "CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET"
            )
        cloudinary.config(
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            secure=True,
        )
        self._configured = True

    def upload(
        self,
        data: bytes,
        folder: str,
        filename: str,
        resource_type: str = "image",
        transformation: Optional[list[dict[str, Any]]] = None,
    ) -> UploadedMedia:
        """
        Upload raw bytes and return the hosted URL.

        Args:
            data: File contents
            folder: Destination folder on the host
            filename: Original filename, kept for the response payload
            resource_type: "image" or "video"
            transformation: Incoming transformation applied by the host

        Returns:
            UploadedMedia: Durable URL, host public id, stored size and filename
        """
        self._configure()

        options: dict[str, Any] = {"folder": folder, "resource_type": resource_type}
        if transformation:
            options["transformation"] = transformation

        result = cloudinary.uploader.upload(io.BytesIO(data), **options)

        url = result.get("secure_url") or result.get("url")
        if not isinstance(url, str):
            raise RuntimeError("No URL in media host upload response")

        return UploadedMedia(
            url=url,
            public_id=str(result.get("public_id", "")),
            size=int(result.get("bytes", len(data))),
            filename=filename,
        )

    def destroy(self, public_id: str, resource_type: str = "image") -> None:
        """
        Delete a hosted object.

        Raises:
            RuntimeError: The host reported something other than ok / not found.
        """
        self._configure()

        result = cloudinary.uploader.destroy(public_id, resource_type=resource_type)
        outcome = result.get("result") if isinstance(result, dict) else None
        if outcome not in ("ok", "not found"):
            raise RuntimeError(f"Media host refused delete of {public_id}: {outcome}")


media_host = CloudinaryMediaHost(
    cloud_name=CLOUDINARY_CLOUD_NAME,
    api_key=CLOUDINARY_API_KEY,
    api_secret=CLOUDINARY_API_SECRET,
)


def public_id_from_url(url: str) -> Optional[str]:
    """
    Derive the host's public id (folder path + filename without extension) from a stored URL.

    For Cloudinary delivery URLs everything after ``/upload/`` (minus an
    optional ``v<digits>`` version segment) is the public id. For any other
    URL the last two path segments are used.

    Example:
        >>> public_id_from_url(
        ...     "https://res.cloudinary.com/demo/image/upload/v1712/khael-apartments/images/abc.jpg"
        ... )
        'khael-apartments/images/abc'

    Returns:
        Optional[str]: Public id, or None if the URL has too few path segments.
    """
    segments = [segment for segment in urlparse(url).path.split("/") if segment]

    if "upload" in segments:
        segments = segments[segments.index("upload") + 1 :]
        if segments and _VERSION_SEGMENT.match(segments[0]):
            segments = segments[1:]
        if not segments:
            return None
    elif len(segments) < 2:
        return None
    else:
        segments = segments[-2:]

    filename = segments[-1].split(".")[0]
    if not filename:
        return None

    return "/".join(segments[:-1] + [filename])


def remove_remote_media(host: Any, url: str, resource_type: str = "image") -> bool:
    """
    Best-effort deletion of one hosted object.

    Never raises: failures are logged and counted so the caller's local state
    change goes ahead regardless.

    Args:
        host: Media host exposing ``destroy(public_id, resource_type=...)``
        url: Stored URL of the object
        resource_type: "image" or "video"

    Returns:
        bool: True if the host confirmed the delete, False if skipped or failed.
    """
    public_id = public_id_from_url(url)
    if not public_id:
        logger.warning("remote_media_delete_skipped", url=url, reason="no_public_id")
        media_remote_deletes.labels(media_type=resource_type, status="skipped").inc()
        return False

    try:
        host.destroy(public_id, resource_type=resource_type)
    except Exception as e:
        logger.warning(
            "remote_media_delete_failed",
            public_id=public_id,
            resource_type=resource_type,
            error=str(e),
        )
        media_remote_deletes.labels(media_type=resource_type, status="failure").inc()
        return False

    media_remote_deletes.labels(media_type=resource_type, status="success").inc()
    return True


def purge_remote_media(host: Any, image_urls: Iterable[str], video_urls: Iterable[str]) -> int:
    """
    Advisory cleanup of every hosted object belonging to a deleted apartment.

    Returns:
        int: Number of objects that could not be removed.
    """
    failures = 0
    for url in image_urls:
        if not remove_remote_media(host, url, "image"):
            failures += 1
    for url in video_urls:
        if not remove_remote_media(host, url, "video"):
            failures += 1

    if failures:
        logger.warning("remote_media_orphaned", count=failures)
    return failures
