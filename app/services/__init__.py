"""Services package."""
from app.services.errors import VenueFormError
from app.services.venue_list_service import VenueListService, parse_price, sort_venues
from app.services.venue_form_service import FormSessionRegistry, VenueForm

__all__ = [
    "FormSessionRegistry",
    "VenueForm",
    "VenueFormError",
    "VenueListService",
    "parse_price",
    "sort_venues",
]
