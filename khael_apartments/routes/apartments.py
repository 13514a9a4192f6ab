from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.engine import Engine

from khael_apartments.db.readers.apartments import (
    get_images_for,
    get_media_urls,
    get_statistics,
    get_videos_for,
    list_apartments,
)
from khael_apartments.db.writers.apartments import (
    delete_apartment,
    insert_apartment,
    update_apartment,
)
from khael_apartments.dependencies import (
    get_db_engine,
    get_media_host,
    optional_admin,
    require_admin,
)
from khael_apartments.errors import ApiError, ServerError, ValidationError
from khael_apartments.metrics import apartment_mutations
from khael_apartments.normalizers.apartments import normalize_apartment
from khael_apartments.routes._apartment_helpers import (
    load_apartment_or_404,
    validate_apartment_exists_or_404,
)
from khael_apartments.schemas.apartments import ApartmentCreatePayload, ApartmentPatch
from khael_apartments.services.auth import AdminIdentity
from khael_apartments.services.media import purge_remote_media

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/apartments")
def list_apartments_endpoint(
    min_price: Optional[float] = Query(None, ge=0, description="Minimum nightly price"),
    max_price: Optional[float] = Query(None, ge=0, description="Maximum nightly price"),
    bedrooms: Optional[int] = Query(None, ge=0, description="Exact number of bedrooms"),
    city: Optional[str] = Query(None, description="City (case-insensitive)"),
    featured: Optional[bool] = Query(None, description="Only featured / non-featured"),
    featured_first: bool = Query(False, description="Order featured listings first"),
    engine: Engine = Depends(get_db_engine),
    admin: Optional[AdminIdentity] = Depends(optional_admin),
) -> dict[str, Any]:
    """
    List apartments for the catalog.

    Admin callers see every listing; everyone else sees available ones only.

    Returns:
        dict: success flag, count and shaped apartments (newest first)
    """
    try:
        with engine.connect() as conn:
            rows = list_apartments(
                conn,
                include_unavailable=admin is not None,
                min_price=min_price,
                max_price=max_price,
                bedrooms=bedrooms,
                city=city,
                featured=featured,
                featured_first=featured_first,
            )
            ids = [row["id"] for row in rows]
            images = get_images_for(conn, ids)
            videos = get_videos_for(conn, ids)

        apartments = [
            normalize_apartment(row, images.get(row["id"], []), videos.get(row["id"], []))
            for row in rows
        ]
        return {"success": True, "count": len(apartments), "apartments": apartments}

    except ApiError:
        raise
    except Exception as e:
        logger.exception("apartment_list_failed", error=str(e))
        raise ServerError("Failed to fetch apartments", str(e)) from e


@router.get("/apartments/statistics")
def statistics_endpoint(
    engine: Engine = Depends(get_db_engine),
    admin: AdminIdentity = Depends(require_admin),
) -> dict[str, Any]:
    """
    Dashboard counters: total, available, reserved and featured apartments,
    plus total images and videos.
    """
    try:
        with engine.connect() as conn:
            statistics = get_statistics(conn)
        return {"success": True, "statistics": statistics}

    except ApiError:
        raise
    except Exception as e:
        logger.exception("statistics_failed", error=str(e))
        raise ServerError("Failed to fetch statistics", str(e)) from e


@router.get("/apartments/{apartment_id}")
def get_apartment_endpoint(
    apartment_id: int,
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Fetch a single apartment with its images and videos.

    Args:
        apartment_id: Apartment ID

    Returns:
        dict: success flag and the shaped apartment
    """
    try:
        with engine.connect() as conn:
            apartment = load_apartment_or_404(conn, apartment_id)
        return {"success": True, "apartment": apartment}

    except ApiError:
        raise
    except Exception as e:
        logger.exception("apartment_fetch_failed", apartment_id=apartment_id, error=str(e))
        raise ServerError("Failed to fetch apartment", str(e)) from e


@router.post("/apartments", status_code=status.HTTP_201_CREATED)
def create_apartment_endpoint(
    payload: ApartmentCreatePayload,
    engine: Engine = Depends(get_db_engine),
    admin: AdminIdentity = Depends(require_admin),
) -> dict[str, Any]:
    """
    Create an apartment.

    Args:
        payload: Listing fields; title, bedrooms, bathrooms, max_guests,
            price_per_night, address, city and state are required

    Returns:
        dict: success flag, message and the new apartment (no media yet)
    """
    missing = payload.missing_fields()
    if missing:
        raise ValidationError(
            "Missing required fields",
            "Title, bedrooms, bathrooms, max_guests, price_per_night, address, "
            "city, and state are required",
            details={"missing": missing},
        )

    try:
        with engine.begin() as conn:
            apartment_id = insert_apartment(conn, payload.model_dump())
            apartment = load_apartment_or_404(conn, apartment_id)

        apartment_mutations.labels(entity="apartment", operation="create").inc()
        logger.info("apartment_created", apartment_id=apartment_id, admin=admin.username)

        return {
            "success": True,
            "message": "Apartment created successfully",
            "apartment": apartment,
        }

    except ApiError:
        raise
    except Exception as e:
        logger.exception("apartment_creation_failed", error=str(e))
        raise ServerError("Failed to create apartment", str(e)) from e


@router.put("/apartments/{apartment_id}")
def update_apartment_endpoint(
    apartment_id: int,
    payload: ApartmentPatch,
    engine: Engine = Depends(get_db_engine),
    admin: AdminIdentity = Depends(require_admin),
) -> dict[str, Any]:
    """
    Partially update an apartment. Only allow-listed fields are applied.

    Args:
        apartment_id: Apartment ID
        payload: Fields to change

    Returns:
        dict: success flag, message and the updated apartment
    """
    try:
        with engine.begin() as conn:
            validate_apartment_exists_or_404(conn, apartment_id)

            changes = payload.changes()
            if not changes:
                raise ValidationError(
                    "No valid fields to update",
                    "Provide at least one valid field to update",
                )

            null_fields = payload.null_violations()
            if null_fields:
                raise ValidationError(
                    "Invalid field values",
                    f"These fields cannot be null: {', '.join(null_fields)}",
                )

            update_apartment(conn, apartment_id, changes)
            apartment = load_apartment_or_404(conn, apartment_id)

        apartment_mutations.labels(entity="apartment", operation="update").inc()
        logger.info(
            "apartment_updated",
            apartment_id=apartment_id,
            fields=sorted(changes),
            admin=admin.username,
        )

        return {
            "success": True,
            "message": "Apartment updated successfully",
            "apartment": apartment,
        }

    except ApiError:
        raise
    except Exception as e:
        logger.exception("apartment_update_failed", apartment_id=apartment_id, error=str(e))
        raise ServerError("Failed to update apartment", str(e)) from e


@router.delete("/apartments/{apartment_id}")
def delete_apartment_endpoint(
    apartment_id: int,
    engine: Engine = Depends(get_db_engine),
    media_host: Any = Depends(get_media_host),
    admin: AdminIdentity = Depends(require_admin),
) -> dict[str, Any]:
    """
    Delete an apartment and, best-effort, its hosted media.

    The store change commits first and is authoritative; remote deletions run
    afterwards and their failures are only logged.

    Args:
        apartment_id: Apartment ID

    Returns:
        dict: success flag and message
    """
    try:
        with engine.begin() as conn:
            validate_apartment_exists_or_404(conn, apartment_id)
            image_urls, video_urls = get_media_urls(conn, apartment_id)
            delete_apartment(conn, apartment_id)

        apartment_mutations.labels(entity="apartment", operation="delete").inc()
        logger.info(
            "apartment_deleted",
            apartment_id=apartment_id,
            images=len(image_urls),
            videos=len(video_urls),
            admin=admin.username,
        )

    except ApiError:
        raise
    except Exception as e:
        logger.exception("apartment_deletion_failed", apartment_id=apartment_id, error=str(e))
        raise ServerError("Failed to delete apartment", str(e)) from e

    purge_remote_media(media_host, image_urls, video_urls)

    return {"success": True, "message": "Apartment deleted successfully"}
