"""Venue data models using Pydantic."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Sentinel text for a price field the venue does not offer
PRICE_UNAVAILABLE = "Unavailable"


class SortOption(str, Enum):
    """Sort keys offered by the venue list."""
    ALPHABETIC = "alphabetic"
    DISTANCE = "distance"
    PRICE_SATURDAY = "price_saturday"


class Venue(BaseModel):
    """A wedding venue record as stored in the venue store.

    A record without an id is a draft that has never been persisted.
    """

    id: Optional[int] = None
    name: str = ""
    location: Optional[str] = None
    website_url: Optional[str] = None
    brochure_url: Optional[str] = None

    # Free-form pricing: a number, "Unavailable" or empty
    price_saturday: Optional[str] = None
    price_sunday: Optional[str] = None
    price_midweek: Optional[str] = None

    status: Optional[str] = None
    status_color: Optional[str] = None
    notes: Optional[str] = None

    # Derived from the directions API on save
    drive_time_minutes: Optional[int] = None

    active: Optional[bool] = True
    # Position 0 is the hero image
    images: list[str] = Field(default_factory=list)

    created_at: Optional[datetime] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("images", mode="before")
    @classmethod
    def none_images_to_empty(cls, v):
        """Rows written by older clients may carry a null images column."""
        return [] if v is None else v

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def hero_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    def __str__(self) -> str:
        return f"Venue(id={self.id}, name={self.name}, location={self.location})"


class VenueCard(BaseModel):
    """Presentation of a venue for the list view."""

    id: Optional[int] = None
    name: str
    status_display: str
    status_color: Optional[str] = None
    active: bool = True

    hero_image: Optional[str] = None
    # Up to three images after the hero
    gallery: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)

    # Either the drive time is shown, or the raw location as a fallback
    drive_time_display: Optional[str] = None
    location_display: Optional[str] = None
    location: Optional[str] = None
    drive_time_minutes: Optional[int] = None
    map_embed_url: Optional[str] = None

    website_url: Optional[str] = None
    brochure_url: Optional[str] = None

    price_saturday_display: str = "-"
    price_sunday_display: str = "-"
    price_midweek_display: str = "-"

    notes: Optional[str] = None


class VenueListResponse(BaseModel):
    """Sorted venue list."""

    sort: SortOption
    loading: bool = False
    count: int
    venues: list[VenueCard]
