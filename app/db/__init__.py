"""Database clients package."""
from app.db.indexed_redis_client import IndexedRedisClient

__all__ = ["IndexedRedisClient"]
