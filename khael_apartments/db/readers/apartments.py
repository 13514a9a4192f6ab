from collections import defaultdict
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from khael_apartments.models.apartments import Apartment, ApartmentImage, ApartmentVideo


def apartment_exists(conn: Connection, apartment_id: int) -> bool:
    """
    Check if an apartment exists in the store.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        apartment_id (int): Apartment ID to check.

    Returns:
        bool: True if the apartment exists, False otherwise.
    """
    result = conn.execute(select(Apartment.id).where(Apartment.id == apartment_id))
    return result.first() is not None


def get_apartment(conn: Connection, apartment_id: int) -> Optional[dict[str, Any]]:
    """
    Fetch a single apartment row.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        apartment_id (int): Apartment ID.

    Returns:
        Optional[dict]: Column values keyed by name, or None if not found.
    """
    row = conn.execute(select(Apartment).where(Apartment.id == apartment_id)).mappings().first()
    return dict(row) if row else None


def list_apartments(
    conn: Connection,
    include_unavailable: bool = False,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    bedrooms: Optional[int] = None,
    city: Optional[str] = None,
    featured: Optional[bool] = None,
    featured_first: bool = False,
) -> list[dict[str, Any]]:
    """
    Fetch apartment rows for the catalog, newest first.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        include_unavailable (bool): Admin view; when False only available rows are returned.
        min_price (Optional[float]): Inclusive lower bound on price_per_night.
        max_price (Optional[float]): Inclusive upper bound on price_per_night.
        bedrooms (Optional[int]): Exact bedroom count.
        city (Optional[str]): City name, compared case-insensitively.
        featured (Optional[bool]): Restrict to featured (True) or non-featured (False) rows.
        featured_first (bool): Order featured rows ahead of the rest.

    Returns:
        list[dict]: Apartment rows.
    """
    stmt = select(Apartment)

    if not include_unavailable:
        stmt = stmt.where(Apartment.available.is_(True))
    if min_price is not None:
        stmt = stmt.where(Apartment.price_per_night >= min_price)
    if max_price is not None:
        stmt = stmt.where(Apartment.price_per_night <= max_price)
    if bedrooms is not None:
        stmt = stmt.where(Apartment.bedrooms == bedrooms)
    if city:
        stmt = stmt.where(func.lower(Apartment.city) == city.strip().lower())
    if featured is not None:
        stmt = stmt.where(Apartment.featured.is_(featured))

    ordering = [Apartment.created_at.desc(), Apartment.id.desc()]
    if featured_first:
        ordering.insert(0, Apartment.featured.desc())

    rows = conn.execute(stmt.order_by(*ordering)).mappings().all()
    return [dict(row) for row in rows]


def get_images_for(conn: Connection, apartment_ids: list[int]) -> dict[int, list[dict[str, Any]]]:
    """
    Fetch images for several apartments in one query.

    Images come back primary first, then by ascending display_order.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        apartment_ids (list[int]): Apartments to fetch images for.

    Returns:
        dict[int, list[dict]]: Image rows grouped by apartment_id.
    """
    grouped: dict[int, list[dict[str, Any]]] = defaultdict(list)
    if not apartment_ids:
        return grouped

    rows = conn.execute(
        select(ApartmentImage)
        .where(ApartmentImage.apartment_id.in_(apartment_ids))
        .order_by(
            ApartmentImage.is_primary.desc(),
            ApartmentImage.display_order.asc(),
            ApartmentImage.id.asc(),
        )
    ).mappings()
    for row in rows:
        grouped[row["apartment_id"]].append(dict(row))
    return grouped


def get_videos_for(conn: Connection, apartment_ids: list[int]) -> dict[int, list[dict[str, Any]]]:
    """
    Fetch videos for several apartments in one query, oldest first.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        apartment_ids (list[int]): Apartments to fetch videos for.

    Returns:
        dict[int, list[dict]]: Video rows grouped by apartment_id.
    """
    grouped: dict[int, list[dict[str, Any]]] = defaultdict(list)
    if not apartment_ids:
        return grouped

    rows = conn.execute(
        select(ApartmentVideo)
        .where(ApartmentVideo.apartment_id.in_(apartment_ids))
        .order_by(ApartmentVideo.id.asc())
    ).mappings()
    for row in rows:
        grouped[row["apartment_id"]].append(dict(row))
    return grouped


def get_image(conn: Connection, apartment_id: int, image_id: int) -> Optional[dict[str, Any]]:
    """Fetch an image only if it belongs to the given apartment."""
    row = (
        conn.execute(
            select(ApartmentImage).where(
                ApartmentImage.id == image_id,
                ApartmentImage.apartment_id == apartment_id,
            )
        )
        .mappings()
        .first()
    )
    return dict(row) if row else None


def get_video(conn: Connection, apartment_id: int, video_id: int) -> Optional[dict[str, Any]]:
    """Fetch a video only if it belongs to the given apartment."""
    row = (
        conn.execute(
            select(ApartmentVideo).where(
                ApartmentVideo.id == video_id,
                ApartmentVideo.apartment_id == apartment_id,
            )
        )
        .mappings()
        .first()
    )
    return dict(row) if row else None


def get_max_display_order(conn: Connection, apartment_id: int) -> Optional[int]:
    """
    Get the highest display_order used by an apartment's images.

    Returns:
        Optional[int]: Highest display_order, or None if the apartment has no images.
    """
    return conn.execute(
        select(func.max(ApartmentImage.display_order)).where(
            ApartmentImage.apartment_id == apartment_id
        )
    ).scalar()


def get_media_urls(conn: Connection, apartment_id: int) -> tuple[list[str], list[str]]:
    """
    Collect the stored media URLs of an apartment before it is deleted.

    Returns:
        tuple[list[str], list[str]]: (image URLs, video URLs)
    """
    image_urls = conn.execute(
        select(ApartmentImage.image_url).where(ApartmentImage.apartment_id == apartment_id)
    ).scalars()
    video_urls = conn.execute(
        select(ApartmentVideo.video_url).where(ApartmentVideo.apartment_id == apartment_id)
    ).scalars()
    return list(image_urls), list(video_urls)


def get_statistics(conn: Connection) -> dict[str, int]:
    """
    Aggregate counts for the admin dashboard.

    Returns:
        dict[str, int]: totalApartments, availableApartments, reservedApartments,
            featuredApartments, totalImages and totalVideos.
    """

    def count(stmt: Any) -> int:
        return int(conn.execute(stmt).scalar() or 0)

    return {
        "totalApartments": count(select(func.count(Apartment.id))),
        "availableApartments": count(
            select(func.count(Apartment.id)).where(Apartment.available.is_(True))
        ),
        "reservedApartments": count(
            select(func.count(Apartment.id)).where(Apartment.available.is_(False))
        ),
        "featuredApartments": count(
            select(func.count(Apartment.id)).where(Apartment.featured.is_(True))
        ),
        "totalImages": count(select(func.count(ApartmentImage.id))),
        "totalVideos": count(select(func.count(ApartmentVideo.id))),
    }
