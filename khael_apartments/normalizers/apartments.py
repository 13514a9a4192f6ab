from typing import Any, Optional

from khael_apartments.utils.datetime import to_iso


def normalize_image(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row["id"],
        "apartment_id": row["apartment_id"],
        "image_url": row["image_url"],
        "is_primary": bool(row["is_primary"]),
        "display_order": row["display_order"],
    }


def normalize_video(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row["id"],
        "apartment_id": row["apartment_id"],
        "video_url": row["video_url"],
    }


def pick_primary_image(images: list[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """
    Choose the image used for previews.

    The flagged primary image wins; otherwise the image with the lowest
    display_order (ties broken by id).
    """
    if not images:
        return None
    for image in images:
        if image["is_primary"]:
            return image
    return min(images, key=lambda image: (image["display_order"], image["id"]))


def normalize_apartment(
    row: dict[str, Any],
    images: Optional[list[dict[str, Any]]] = None,
    videos: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    """
    Shape a stored apartment row into its API representation.

    Booleans stored as integers become real booleans, a null amenities column
    becomes an empty list, and timestamps become ISO-8601 strings.

    Args:
        row: Apartment row from the store
        images: Image rows, already ordered primary first then by display_order
        videos: Video rows

    Returns:
        dict: Apartment payload with nested images, videos and primary_image
    """
    shaped_images = [normalize_image(image) for image in images or []]
    shaped_videos = [normalize_video(video) for video in videos or []]
    amenities = row.get("amenities")

    return {
        "id": row["id"],
        "title": row["title"],
        "description": row.get("description"),
        "bedrooms": row["bedrooms"],
        "bathrooms": row["bathrooms"],
        "max_guests": row["max_guests"],
        "price_per_night": row["price_per_night"],
        "address": row["address"],
        "city": row["city"],
        "state": row["state"],
        "available": bool(row["available"]),
        "featured": bool(row["featured"]),
        "amenities": list(amenities) if isinstance(amenities, list) else [],
        "created_at": to_iso(row.get("created_at")),
        "updated_at": to_iso(row.get("updated_at")),
        "images": shaped_images,
        "videos": shaped_videos,
        "primary_image": pick_primary_image(shaped_images),
    }
