from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from khael_apartments.models.apartments import ApartmentImage, ApartmentVideo


def insert_image(conn: Connection, apartment_id: int, image_url: str, display_order: int) -> int:
    """
    Record an uploaded image. New images are never primary.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        apartment_id (int): Owning apartment.
        image_url (str): Durable URL returned by the media host.
        display_order (int): Position in the gallery.

    Returns:
        int: ID of the new image row.
    """
    result = conn.execute(
        insert(ApartmentImage).values(
            apartment_id=apartment_id,
            image_url=image_url,
            is_primary=False,
            display_order=display_order,
        )
    )
    return int(result.inserted_primary_key[0])


def insert_video(conn: Connection, apartment_id: int, video_url: str) -> int:
    """
    Record an uploaded video.

    Returns:
        int: ID of the new video row.
    """
    result = conn.execute(
        insert(ApartmentVideo).values(apartment_id=apartment_id, video_url=video_url)
    )
    return int(result.inserted_primary_key[0])


def delete_image(conn: Connection, image_id: int) -> None:
    conn.execute(delete(ApartmentImage).where(ApartmentImage.id == image_id))


def delete_video(conn: Connection, video_id: int) -> None:
    conn.execute(delete(ApartmentVideo).where(ApartmentVideo.id == video_id))


def set_primary_image(conn: Connection, apartment_id: int, image_id: int) -> None:
    """
    Make one image the apartment's primary image.

    Clears the flag on every sibling first, then sets it on the target. Both
    statements run on the caller's connection, so they share its transaction.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        apartment_id (int): Owning apartment.
        image_id (int): Image to promote.
    """
    conn.execute(
        update(ApartmentImage)
        .where(ApartmentImage.apartment_id == apartment_id)
        .values(is_primary=False)
    )
    conn.execute(
        update(ApartmentImage)
        .where(ApartmentImage.id == image_id, ApartmentImage.apartment_id == apartment_id)
        .values(is_primary=True)
    )
