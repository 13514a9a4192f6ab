"""SQLAlchemy models for apartment listings and their media."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    false,
    true,
)
from sqlalchemy.sql import func

from khael_apartments.models.base import Base


class Apartment(Base):
    """
    ORM model for a rentable apartment listing.

    ``available`` separates listings shown in the public catalog from reserved
    ones; ``featured`` pins a listing to the top of the catalog. ``amenities``
    holds an ordered list of free-text labels.
    """

    __tablename__ = "apartments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    bedrooms = Column(Integer, nullable=False)
    bathrooms = Column(Integer, nullable=False)
    max_guests = Column(Integer, nullable=False)
    price_per_night = Column(Float, nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(120), nullable=False, index=True)
    state = Column(String(120), nullable=False)
    available = Column(Boolean, nullable=False, server_default=true(), index=True)
    featured = Column(Boolean, nullable=False, server_default=false())
    amenities = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class ApartmentImage(Base):
    """
    ORM model for an image stored on the media host.

    Rows are removed with their apartment (ON DELETE CASCADE). At most one
    image per apartment carries ``is_primary``.
    """

    __tablename__ = "apartment_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    apartment_id = Column(
        Integer,
        ForeignKey("apartments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url = Column(Text, nullable=False)
    is_primary = Column(Boolean, nullable=False, server_default=false())
    display_order = Column(Integer, nullable=False, server_default="0")


class ApartmentVideo(Base):
    """ORM model for a video stored on the media host."""

    __tablename__ = "apartment_videos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    apartment_id = Column(
        Integer,
        ForeignKey("apartments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    video_url = Column(Text, nullable=False)
