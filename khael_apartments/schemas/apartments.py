from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_FIELDS = (
    "title",
    "bedrooms",
    "bathrooms",
    "max_guests",
    "price_per_night",
    "address",
    "city",
    "state",
)

# Columns an admin may change through a partial update
ALLOWED_UPDATE_FIELDS = REQUIRED_FIELDS + ("description", "available", "featured", "amenities")

# Patch fields that may be cleared by sending null
NULLABLE_FIELDS = ("description", "amenities")


class ApartmentCreatePayload(BaseModel):
    """
    Schema for creating an apartment.

    Required fields are declared optional so a missing one surfaces as a
    single "Missing required fields" error listing every gap, instead of one
    pydantic error per field.
    """

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(None, description="Listing headline")
    description: Optional[str] = Field(None, description="Long-form description")
    bedrooms: Optional[int] = Field(None, ge=0, description="Number of bedrooms")
    bathrooms: Optional[int] = Field(None, ge=0, description="Number of bathrooms")
    max_guests: Optional[int] = Field(None, ge=0, description="Maximum number of guests")
    price_per_night: Optional[float] = Field(None, ge=0, description="Nightly price")
    address: Optional[str] = Field(None, description="Street address")
    city: Optional[str] = Field(None, description="City")
    state: Optional[str] = Field(None, description="State")
    available: bool = Field(True, description="Shown in the public catalog")
    featured: bool = Field(False, description="Pinned to the top of the catalog")
    amenities: list[str] = Field(default_factory=list, description="Free-text amenity labels")

    def missing_fields(self) -> list[str]:
        """Return the required fields that are absent, null or blank."""
        missing = []
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing


class ApartmentPatch(BaseModel):
    """
    Schema for a partial apartment update. All fields are optional.

    Only fields present in the request body are applied; keys outside the
    allow-list are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    max_guests: Optional[int] = Field(None, ge=0)
    price_per_night: Optional[float] = Field(None, ge=0)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    available: Optional[bool] = None
    featured: Optional[bool] = None
    amenities: Optional[list[str]] = None

    def changes(self) -> dict[str, Any]:
        """Return the allow-listed fields the caller actually sent."""
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if name in ALLOWED_UPDATE_FIELDS
        }

    def null_violations(self) -> list[str]:
        """Return sent fields that are null but backed by NOT NULL columns."""
        return [
            name
            for name, value in self.changes().items()
            if value is None and name not in NULLABLE_FIELDS
        ]
