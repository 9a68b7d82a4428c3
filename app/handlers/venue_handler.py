"""Venue handler for list requests and card presentation."""
import logging
from typing import Optional
from urllib.parse import quote

from app.models import PRICE_UNAVAILABLE, SortOption, Venue, VenueCard, VenueListResponse
from app.services import VenueListService

logger = logging.getLogger(__name__)

GALLERY_SIZE = 3
MAP_EMBED_ZOOM = 8


def format_drive_time(minutes: Optional[int]) -> Optional[str]:
    """Human-readable drive time; None or 0 displays nothing.

    Exact hours keep the minutes part: 120 -> "2 hr 0 mins".
    """
    if not minutes:
        return None
    if minutes < 60:
        return f"{minutes} mins"
    hours, mins = divmod(minutes, 60)
    return f"{hours} hr {mins} mins"


def format_price(price: Optional[str]) -> str:
    """Price cell text: "-" when empty, the sentinel as is, otherwise in GBP."""
    if not price:
        return "-"
    if price == PRICE_UNAVAILABLE:
        return price
    return f"£{price}"


def map_embed_url(location: Optional[str]) -> Optional[str]:
    if not location:
        return None
    return (
        f"https://maps.google.com/maps?q={quote(location, safe='')}"
        f"&t=&z={MAP_EMBED_ZOOM}&ie=UTF8&iwloc=&output=embed"
    )


class VenueHandler:
    """Handler for venue list HTTP requests."""

    def __init__(self, list_service: VenueListService, drive_time_origin_label: str = ""):
        """Initialize venue handler.

        Args:
            list_service: Venue list snapshot holder
            drive_time_origin_label: Place name appended to drive times ("from Edinburgh")
        """
        self.list_service = list_service
        self.drive_time_origin_label = drive_time_origin_label

    def get_venues(
        self,
        sort: SortOption = SortOption.ALPHABETIC,
        active_only: bool = False,
        refresh: bool = False,
    ) -> VenueListResponse:
        """Sorted venue cards from the current snapshot.

        Args:
            sort: Sort key
            active_only: Hide inactive venues
            refresh: Refetch the snapshot from the store first

        Returns:
            VenueListResponse
        """
        if refresh:
            self.list_service.refresh()

        venues = self.list_service.sorted_view(sort, active_only=active_only)
        cards = [self.to_card(v) for v in venues]
        logger.info(f"[VenueHandler] Returning {len(cards)} venues sorted by {sort.value}")

        return VenueListResponse(
            sort=sort,
            loading=self.list_service.loading,
            count=len(cards),
            venues=cards,
        )

    def refresh(self) -> dict[str, int]:
        venues = self.list_service.refresh()
        return {"count": len(venues)}

    def ping(self) -> dict[str, str]:
        """Health check endpoint.

        Returns:
            {"status": "pong"}
        """
        logger.debug("[VenueHandler] Ping")
        return {"status": "pong"}

    def to_card(self, venue: Venue) -> VenueCard:
        """Project a venue onto the fields the list card displays."""
        images = venue.images or []

        drive_time_display = format_drive_time(venue.drive_time_minutes)
        if drive_time_display and self.drive_time_origin_label:
            drive_time_display = f"{drive_time_display} from {self.drive_time_origin_label}"

        return VenueCard(
            id=venue.id,
            name=venue.name,
            status_display=venue.status or "Status Unknown",
            status_color=venue.status_color,
            active=venue.active is not False,
            hero_image=venue.hero_image,
            gallery=images[1:1 + GALLERY_SIZE],
            images=images,
            drive_time_display=drive_time_display,
            # The raw location only shows when there is no drive time
            location_display=None if drive_time_display else venue.location,
            location=venue.location,
            drive_time_minutes=venue.drive_time_minutes,
            map_embed_url=map_embed_url(venue.location),
            website_url=venue.website_url or None,
            brochure_url=venue.brochure_url or None,
            price_saturday_display=format_price(venue.price_saturday),
            price_sunday_display=format_price(venue.price_sunday),
            price_midweek_display=format_price(venue.price_midweek),
            notes=venue.notes or None,
        )
