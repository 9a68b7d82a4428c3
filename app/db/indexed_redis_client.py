"""Redis client with ordered JSON document indexing."""
import json
import logging
from typing import Any, Optional

import redis

logger = logging.getLogger(__name__)


class IndexedRedisClient:
    """Redis client storing JSON documents behind an ordered index.

    Each document lives under its own key; a sorted set keeps the member
    keys ordered by a numeric score so the whole table can be read back in
    insertion order.
    """

    def __init__(self, client):
        """Initialize Redis client wrapper.

        Args:
            client: Redis client
        """
        self.client = client

        try:
            self.ping()
            logger.info("Connected to Redis")
        except redis.ConnectionError as e:
            logger.error(f"Could not connect to Redis: {e}")
            raise

    def set(self, key: str, value: str) -> None:
        """Set a key-value pair in Redis.

        Args:
            key: Redis key
            value: String value to store
        """
        self.client.set(key, value)

    def get(self, key: str) -> Optional[str]:
        """Get value for a given key from Redis.

        Args:
            key: Redis key

        Returns:
            String value or None if key doesn't exist
        """
        return self.client.get(key)

    def incr(self, key: str) -> int:
        """Atomically increment a counter and return the new value."""
        return self.client.incr(key)

    def add_indexed_json(
        self,
        index_key: str,
        member_key: str,
        score: float,
        data: Any,
    ) -> None:
        """Store JSON data and register it in an ordered index.

        This method:
        1. Stores the JSON data using SET
        2. Adds the member to the sorted-set index using ZADD

        Both commands run in one MULTI/EXEC pipeline so a document is never
        indexed without its body.

        Args:
            index_key: Redis sorted set key (e.g., "venues_index_v1")
            member_key: Key holding the document (e.g., "venue_v1:42")
            score: Ordering score within the index
            data: Python object to serialize as JSON
        """
        if hasattr(data, "model_dump_json"):
            json_data = data.model_dump_json(by_alias=True)
        else:
            json_data = json.dumps(data)

        pipe = self.client.pipeline(transaction=True)
        pipe.set(member_key, json_data)
        pipe.zadd(index_key, {member_key: score})
        pipe.execute()

        logger.debug(f"Stored indexed JSON for member: {member_key}")

    def get_all_indexed_json(self, index_key: str) -> list[str]:
        """Return every indexed document's JSON, in index order.

        Members whose document has gone missing are skipped.

        Args:
            index_key: Redis sorted set key

        Returns:
            List of JSON strings
        """
        members = self.client.zrange(index_key, 0, -1)
        if not members:
            return []

        values = self.client.mget(members)
        objects = []
        for member, data in zip(members, values):
            if data is None:
                logger.warning(f"Index {index_key} references missing member {member}")
                continue
            objects.append(data)

        return objects

    def ping(self) -> bool:
        """Check connectivity to Redis.

        Returns:
            True if connected

        Raises:
            redis.ConnectionError if connection fails
        """
        return self.client.ping()
