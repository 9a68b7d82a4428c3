"""Data models package for venue-planner."""
from app.models.venue import (
    PRICE_UNAVAILABLE,
    SortOption,
    Venue,
    VenueCard,
    VenueListResponse,
)
from app.models.forms import (
    EDITABLE_FIELDS,
    REQUIRED_FIELDS,
    SWATCH_COLORS,
    ColorPickRequest,
    FieldEditRequest,
    FormSessionResponse,
    ImageMoveDirection,
    SaveResponse,
    StatusSwatch,
    UploadedFile,
)

__all__ = [
    # Venue models
    "PRICE_UNAVAILABLE",
    "SortOption",
    "Venue",
    "VenueCard",
    "VenueListResponse",
    # Form models
    "EDITABLE_FIELDS",
    "REQUIRED_FIELDS",
    "SWATCH_COLORS",
    "ColorPickRequest",
    "FieldEditRequest",
    "FormSessionResponse",
    "ImageMoveDirection",
    "SaveResponse",
    "StatusSwatch",
    "UploadedFile",
]
