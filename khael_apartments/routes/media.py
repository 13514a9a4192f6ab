"""
Image and video sub-resources of an apartment.

Binaries go to the external media host; only the returned URL plus ordering
and primary-flag metadata is stored. Remote deletes are advisory: the row is
removed even if the host refuses.
"""

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.engine import Engine

from khael_apartments.db.readers.apartments import get_image, get_max_display_order, get_video
from khael_apartments.db.writers.media import (
    delete_image,
    delete_video,
    insert_image,
    insert_video,
    set_primary_image,
)
from khael_apartments.dependencies import get_db_engine, get_media_host, require_admin
from khael_apartments.errors import ApiError, NotFoundError, ServerError, ValidationError
from khael_apartments.metrics import apartment_mutations, media_upload_duration, media_uploads
from khael_apartments.routes._apartment_helpers import (
    ALLOWED_IMAGE_TYPES,
    ALLOWED_VIDEO_TYPES,
    MAX_IMAGE_BYTES,
    MAX_IMAGES_PER_UPLOAD,
    MAX_VIDEO_BYTES,
    collect_uploads,
    read_upload,
    validate_apartment_exists_or_404,
)
from khael_apartments.services.auth import AdminIdentity
from khael_apartments.services.media import (
    IMAGE_FOLDER,
    IMAGE_TRANSFORMATION,
    VIDEO_FOLDER,
    UploadedMedia,
    remove_remote_media,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


def _discard_uploads(media_host: Any, uploaded: list[UploadedMedia], resource_type: str) -> None:
    for item in uploaded:
        remove_remote_media(media_host, item.url, resource_type)


@router.post("/apartments/{apartment_id}/images")
def upload_images(
    apartment_id: int,
    images: Optional[list[UploadFile]] = File(None),
    bracketed_images: Optional[list[UploadFile]] = File(None, alias="images[]"),
    engine: Engine = Depends(get_db_engine),
    media_host: Any = Depends(get_media_host),
    admin: AdminIdentity = Depends(require_admin),
) -> dict[str, Any]:
    """
    Upload 1-10 images for an apartment.

    Every file is type- and size-checked before anything is sent to the host.
    New images are appended after the current highest display_order and are
    never primary.

    Args:
        apartment_id: Apartment ID
        images: Files sent as ``images``
        bracketed_images: Files sent as ``images[]``

    Returns:
        dict: success flag, message and the stored images
    """
    with engine.connect() as conn:
        validate_apartment_exists_or_404(conn, apartment_id)

    files = collect_uploads(images, bracketed_images)
    if not files:
        raise ValidationError("No files uploaded", "Please select at least one image")
    if len(files) > MAX_IMAGES_PER_UPLOAD:
        raise ValidationError(
            "Too many files",
            f"You can upload at most {MAX_IMAGES_PER_UPLOAD} images at once",
        )

    payloads = [read_upload(upload, ALLOWED_IMAGE_TYPES, MAX_IMAGE_BYTES) for upload in files]

    uploaded: list[UploadedMedia] = []
    try:
        for data, filename in payloads:
            with media_upload_duration.labels(media_type="image").time():
                item = media_host.upload(
                    data,
                    folder=IMAGE_FOLDER,
                    filename=filename,
                    resource_type="image",
                    transformation=IMAGE_TRANSFORMATION,
                )
            media_uploads.labels(media_type="image", status="success").inc()
            uploaded.append(item)

        stored = []
        with engine.begin() as conn:
            current_max = get_max_display_order(conn, apartment_id)
            start = 0 if current_max is None else current_max + 1
            for index, item in enumerate(uploaded):
                display_order = start + index
                image_id = insert_image(conn, apartment_id, item.url, display_order)
                stored.append(
                    {
                        "id": image_id,
                        "url": item.url,
                        "filename": item.filename,
                        "size": item.size,
                        "display_order": display_order,
                        "is_primary": False,
                    }
                )

    except Exception as e:
        if len(uploaded) < len(payloads):
            media_uploads.labels(media_type="image", status="failure").inc()
        logger.exception(
            "image_upload_failed",
            apartment_id=apartment_id,
            uploaded=len(uploaded),
            requested=len(payloads),
            error=str(e),
        )
        _discard_uploads(media_host, uploaded, "image")
        raise ServerError("Failed to upload images", str(e)) from e

    apartment_mutations.labels(entity="image", operation="create").inc(len(stored))
    logger.info(
        "images_uploaded",
        apartment_id=apartment_id,
        count=len(stored),
        admin=admin.username,
    )

    return {
        "success": True,
        "message": f"{len(stored)} image(s) uploaded successfully",
        "images": stored,
    }


@router.post("/apartments/{apartment_id}/videos")
def upload_video(
    apartment_id: int,
    video: Optional[UploadFile] = File(None),
    engine: Engine = Depends(get_db_engine),
    media_host: Any = Depends(get_media_host),
    admin: AdminIdentity = Depends(require_admin),
) -> dict[str, Any]:
    """
    Upload a single video for an apartment.

    Args:
        apartment_id: Apartment ID
        video: File sent as ``video``

    Returns:
        dict: success flag, message and the stored video
    """
    with engine.connect() as conn:
        validate_apartment_exists_or_404(conn, apartment_id)

    if video is None:
        raise ValidationError("No file uploaded", "Please select a video")

    data, filename = read_upload(video, ALLOWED_VIDEO_TYPES, MAX_VIDEO_BYTES)

    item: Optional[UploadedMedia] = None
    try:
        with media_upload_duration.labels(media_type="video").time():
            item = media_host.upload(
                data,
                folder=VIDEO_FOLDER,
                filename=filename,
                resource_type="video",
            )
        media_uploads.labels(media_type="video", status="success").inc()

        with engine.begin() as conn:
            video_id = insert_video(conn, apartment_id, item.url)

    except Exception as e:
        if item is None:
            media_uploads.labels(media_type="video", status="failure").inc()
        else:
            _discard_uploads(media_host, [item], "video")
        logger.exception("video_upload_failed", apartment_id=apartment_id, error=str(e))
        raise ServerError("Failed to upload video", str(e)) from e

    apartment_mutations.labels(entity="video", operation="create").inc()
    logger.info("video_uploaded", apartment_id=apartment_id, video_id=video_id, admin=admin.username)

    return {
        "success": True,
        "message": "Video uploaded successfully",
        "video": {
            "id": video_id,
            "url": item.url,
            "filename": item.filename,
            "size": item.size,
        },
    }


@router.delete("/apartments/{apartment_id}/images/{image_id}")
def delete_image_endpoint(
    apartment_id: int,
    image_id: int,
    engine: Engine = Depends(get_db_engine),
    media_host: Any = Depends(get_media_host),
    admin: AdminIdentity = Depends(require_admin),
) -> dict[str, Any]:
    """
    Delete one image of an apartment.

    Raises:
        NotFoundError: If the image does not exist or belongs to another apartment
    """
    try:
        with engine.connect() as conn:
            image = get_image(conn, apartment_id, image_id)
        if image is None:
            raise NotFoundError("Image not found", f"No image {image_id} on apartment {apartment_id}")

        remove_remote_media(media_host, image["image_url"], "image")

        with engine.begin() as conn:
            delete_image(conn, image_id)

        apartment_mutations.labels(entity="image", operation="delete").inc()
        logger.info(
            "image_deleted", apartment_id=apartment_id, image_id=image_id, admin=admin.username
        )
        return {"success": True, "message": "Image deleted successfully"}

    except ApiError:
        raise
    except Exception as e:
        logger.exception("image_deletion_failed", image_id=image_id, error=str(e))
        raise ServerError("Failed to delete image", str(e)) from e


@router.delete("/apartments/{apartment_id}/videos/{video_id}")
def delete_video_endpoint(
    apartment_id: int,
    video_id: int,
    engine: Engine = Depends(get_db_engine),
    media_host: Any = Depends(get_media_host),
    admin: AdminIdentity = Depends(require_admin),
) -> dict[str, Any]:
    """
    Delete one video of an apartment.

    Raises:
        NotFoundError: If the video does not exist or belongs to another apartment
    """
    try:
        with engine.connect() as conn:
            video = get_video(conn, apartment_id, video_id)
        if video is None:
            raise NotFoundError("Video not found", f"No video {video_id} on apartment {apartment_id}")

        remove_remote_media(media_host, video["video_url"], "video")

        with engine.begin() as conn:
            delete_video(conn, video_id)

        apartment_mutations.labels(entity="video", operation="delete").inc()
        logger.info(
            "video_deleted", apartment_id=apartment_id, video_id=video_id, admin=admin.username
        )
        return {"success": True, "message": "Video deleted successfully"}

    except ApiError:
        raise
    except Exception as e:
        logger.exception("video_deletion_failed", video_id=video_id, error=str(e))
        raise ServerError("Failed to delete video", str(e)) from e


@router.put("/apartments/{apartment_id}/images/{image_id}/primary")
def set_primary_image_endpoint(
    apartment_id: int,
    image_id: int,
    engine: Engine = Depends(get_db_engine),
    admin: AdminIdentity = Depends(require_admin),
) -> dict[str, Any]:
    """
    Make one image the apartment's preview image.

    Clearing the siblings and flagging the target share one transaction.
    """
    try:
        with engine.begin() as conn:
            if get_image(conn, apartment_id, image_id) is None:
                raise NotFoundError(
                    "Image not found", f"No image {image_id} on apartment {apartment_id}"
                )
            set_primary_image(conn, apartment_id, image_id)

        apartment_mutations.labels(entity="image", operation="set_primary").inc()
        logger.info(
            "primary_image_set", apartment_id=apartment_id, image_id=image_id, admin=admin.username
        )
        return {"success": True, "message": "Primary image updated successfully"}

    except ApiError:
        raise
    except Exception as e:
        logger.exception("set_primary_image_failed", image_id=image_id, error=str(e))
        raise ServerError("Failed to set primary image", str(e)) from e
