"""Models for venue form sessions."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.models.venue import Venue


class StatusSwatch(str, Enum):
    """Predefined status colors offered by the color picker."""
    SLATE = "slate"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


SWATCH_COLORS: dict[StatusSwatch, str] = {
    StatusSwatch.SLATE: "#64748b",
    StatusSwatch.BLUE: "#3b82f6",
    StatusSwatch.GREEN: "#22c55e",
    StatusSwatch.YELLOW: "#eab308",
    StatusSwatch.RED: "#ef4444",
}


class ImageMoveDirection(str, Enum):
    """Direction of an adjacent image swap (left = towards the hero)."""
    LEFT = "left"
    RIGHT = "right"


# Scalar draft attributes a field edit may replace
EDITABLE_FIELDS = frozenset({
    "name",
    "location",
    "website_url",
    "price_saturday",
    "price_sunday",
    "price_midweek",
    "status",
    "status_color",
    "notes",
})

# Editable attributes that may be blanked but never cleared to null
REQUIRED_FIELDS = frozenset({"name"})


@dataclass
class UploadedFile:
    """A file received from the client, held in memory until stored."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def extension(self) -> str:
        # Text after the last dot, or the whole name when there is none
        return self.filename.rsplit(".", 1)[-1]

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")


class FieldEditRequest(BaseModel):
    """One or more scalar field edits, applied in order."""

    name: Optional[str] = None
    location: Optional[str] = None
    website_url: Optional[str] = None
    price_saturday: Optional[str] = None
    price_sunday: Optional[str] = None
    price_midweek: Optional[str] = None
    status: Optional[str] = None
    status_color: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class ColorPickRequest(BaseModel):
    swatch: StatusSwatch


class FormSessionResponse(BaseModel):
    """State of an open form session."""

    session_id: str
    mode: str  # "create" or "edit"
    draft: Venue
    image_count: int
    max_images: int
    images_maxed: bool
    loading: bool = False
    searching: bool = False


class SaveResponse(BaseModel):
    """Result of a successful save; the session is closed afterwards."""

    session_id: str
    venue: Venue
    inserted: bool
