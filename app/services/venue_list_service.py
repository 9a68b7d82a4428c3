"""Venue list: in-memory snapshot of the store and its sorted views."""
import logging
import math
import re
import unicodedata
from typing import Optional

from app.dao import RedisVenueDAO
from app.metrics import VENUES_IN_SNAPSHOT
from app.models import PRICE_UNAVAILABLE, SortOption, Venue

logger = logging.getLogger(__name__)

_DIGIT_RUN = re.compile(r"(\d+)")


def parse_price(price: Optional[str]) -> float:
    """Extract a sortable number from a free-text price.

    Commas are stripped and the first digit run is taken, so "1,200" is 1200
    and "1000-2000" is 1000. Empty, missing, "Unavailable" or digit-free
    values sort last as infinity.
    """
    if not price or price == PRICE_UNAVAILABLE:
        return math.inf
    match = _DIGIT_RUN.search(price.replace(",", ""))
    return int(match.group(1)) if match else math.inf


def _name_collation_key(name: Optional[str]) -> tuple[str, str]:
    """Locale-style collation key: accent and case blind first, then lowercase before uppercase."""
    text = name or ""
    base = unicodedata.normalize("NFKD", text.casefold())
    base = "".join(c for c in base if not unicodedata.combining(c))
    return base, text.swapcase()


def _drive_time_key(venue: Venue) -> float:
    if venue.drive_time_minutes is None:
        return math.inf
    return venue.drive_time_minutes


def sort_venues(venues: list[Venue], sort_option: SortOption) -> list[Venue]:
    """Return a sorted copy of venues. Pure; the input list is untouched.

    Python's sort is stable, so ties keep their fetch order.
    """
    if sort_option == SortOption.ALPHABETIC:
        return sorted(venues, key=lambda v: _name_collation_key(v.name))
    if sort_option == SortOption.DISTANCE:
        return sorted(venues, key=_drive_time_key)
    if sort_option == SortOption.PRICE_SATURDAY:
        return sorted(venues, key=lambda v: parse_price(v.price_saturday))
    return list(venues)


class VenueListService:
    """Holds the last fetched venue rows until explicitly refetched."""

    def __init__(self, venue_dao: RedisVenueDAO):
        """Initialize VenueListService.

        Args:
            venue_dao: Venue store access
        """
        self.venue_dao = venue_dao
        self.venues: list[Venue] = []
        self.loading = False

    def refresh(self) -> list[Venue]:
        """Refetch every venue row from the store.

        A failed fetch is logged and leaves the snapshot empty; there is no
        retry and no partial result.
        """
        self.loading = True
        try:
            self.venues = self.venue_dao.list_venues()
        except Exception as e:
            logger.error(f"[VenueListService] Error fetching venues: {e}")
            self.venues = []
        finally:
            self.loading = False

        VENUES_IN_SNAPSHOT.set(len(self.venues))
        logger.info(f"[VenueListService] Snapshot holds {len(self.venues)} venues")
        return self.venues

    def sorted_view(
        self,
        sort_option: SortOption = SortOption.ALPHABETIC,
        active_only: bool = False,
    ) -> list[Venue]:
        """Sorted copy of the snapshot, re-derived on every call.

        Args:
            sort_option: Sort key
            active_only: If True, hide venues whose active flag is False

        Returns:
            Sorted list of venues
        """
        venues = self.venues
        if active_only:
            venues = [v for v in venues if v.active is not False]
        return sort_venues(venues, sort_option)
