"""Redis-based Data Access Object for the venue table."""
import logging
from datetime import datetime, timezone
from typing import Optional

from app.db.indexed_redis_client import IndexedRedisClient
from app.metrics import VENUE_STORE_OPERATIONS_TOTAL
from app.models import Venue

logger = logging.getLogger(__name__)

VENUES_INDEX_KEY_V1 = "venues_index_v1"
VENUE_KEY_FORMAT_V1 = "venue_v1:{}"
VENUE_ID_SEQUENCE_KEY_V1 = "venue_id_seq_v1"


class VenueNotFoundError(LookupError):
    """Raised when an update targets a venue id that is not stored."""


class RedisVenueDAO:
    """Data Access Object for venue rows using Redis.

    Rows get sequential integer ids on insert; the index is scored by id so
    list_venues returns rows in insertion order.
    """

    def __init__(self, client: IndexedRedisClient):
        """Initialize RedisVenueDAO.

        Args:
            client: IndexedRedisClient instance
        """
        self.client = client

    def list_venues(self) -> list[Venue]:
        """Retrieve every venue row.

        Rows that fail to parse are logged and skipped. Redis errors propagate.

        Returns:
            List of Venue objects in insertion order
        """
        try:
            venues_json = self.client.get_all_indexed_json(VENUES_INDEX_KEY_V1)
        except Exception:
            VENUE_STORE_OPERATIONS_TOTAL.labels(operation="list", status="error").inc()
            raise

        venues = []
        for venue_json in venues_json:
            try:
                venues.append(Venue.model_validate_json(venue_json))
            except ValueError as e:
                logger.error(f"[RedisVenueDAO] Failed to unmarshal venue JSON: {e}")
                continue

        VENUE_STORE_OPERATIONS_TOTAL.labels(operation="list", status="success").inc()
        logger.info(f"[RedisVenueDAO] Listed {len(venues)} venues")
        return venues

    def get_venue(self, venue_id: int) -> Optional[Venue]:
        """Retrieve a venue by its ID.

        Args:
            venue_id: Venue identifier

        Returns:
            Venue object or None if not found
        """
        json_str = self.client.get(VENUE_KEY_FORMAT_V1.format(venue_id))
        VENUE_STORE_OPERATIONS_TOTAL.labels(operation="get", status="success").inc()
        if json_str is None:
            return None
        return Venue.model_validate_json(json_str)

    def insert_venue(self, venue: Venue) -> Venue:
        """Insert a new venue row.

        Any id on the given venue is ignored; the store assigns the next one.

        Args:
            venue: Venue to insert

        Returns:
            The stored Venue, with id and created_at set
        """
        try:
            venue_id = self.client.incr(VENUE_ID_SEQUENCE_KEY_V1)
            stored = venue.model_copy(
                update={"id": venue_id, "created_at": datetime.now(timezone.utc)}
            )
            self.client.add_indexed_json(
                index_key=VENUES_INDEX_KEY_V1,
                member_key=VENUE_KEY_FORMAT_V1.format(venue_id),
                score=venue_id,
                data=stored,
            )
        except Exception:
            VENUE_STORE_OPERATIONS_TOTAL.labels(operation="insert", status="error").inc()
            raise

        VENUE_STORE_OPERATIONS_TOTAL.labels(operation="insert", status="success").inc()
        logger.info(f"[RedisVenueDAO] Inserted venue {venue_id} ({venue.name})")
        return stored

    def update_venue(self, venue_id: int, venue: Venue) -> Venue:
        """Replace the row stored under venue_id.

        The stored created_at is kept.

        Args:
            venue_id: Venue identifier
            venue: New row contents

        Returns:
            The stored Venue

        Raises:
            VenueNotFoundError: If no row exists for venue_id
        """
        try:
            existing = self.get_venue(venue_id)
            if existing is None:
                raise VenueNotFoundError(f"Venue {venue_id} not found")

            stored = venue.model_copy(
                update={"id": venue_id, "created_at": existing.created_at}
            )
            self.client.add_indexed_json(
                index_key=VENUES_INDEX_KEY_V1,
                member_key=VENUE_KEY_FORMAT_V1.format(venue_id),
                score=venue_id,
                data=stored,
            )
        except Exception:
            VENUE_STORE_OPERATIONS_TOTAL.labels(operation="update", status="error").inc()
            raise

        VENUE_STORE_OPERATIONS_TOTAL.labels(operation="update", status="success").inc()
        logger.info(f"[RedisVenueDAO] Updated venue {venue_id} ({venue.name})")
        return stored
