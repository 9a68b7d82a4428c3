"""Data access package."""
from app.dao.redis_venue_dao import RedisVenueDAO, VenueNotFoundError

__all__ = ["RedisVenueDAO", "VenueNotFoundError"]
