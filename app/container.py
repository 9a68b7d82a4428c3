"""Dependency injection container for application components."""
import logging

import redis

from app.api import GoogleMapsAPIClient, S3Client
from app.config import Settings
from app.dao import RedisVenueDAO
from app.db import IndexedRedisClient
from app.handlers import FormHandler, VenueHandler
from app.services import FormSessionRegistry, VenueListService

logger = logging.getLogger(__name__)


class Container:
    """Dependency injection container.

    Initializes and wires up all application dependencies.
    """

    def __init__(self, settings: Settings):
        """Initialize container with all dependencies.

        Args:
            settings: Application settings
        """
        logger.info("[Container] Initializing container")
        self.settings = settings

        logger.info(f"[Container] Connecting to Redis at {settings.redis_address}")
        redis_internal_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password or None,
            db=settings.redis_db,
            decode_responses=True,
        )

        self.redis_client = IndexedRedisClient(redis_internal_client)
        self.venue_dao = RedisVenueDAO(self.redis_client)

        self.storage = S3Client(
            region=settings.storage_region,
            access_key_id=settings.storage_access_key_id,
            secret_access_key=settings.storage_secret_access_key,
            endpoint_url=settings.storage_endpoint_url or None,
            public_base_url=settings.storage_public_base_url or None,
        )
        logger.info(
            f"[Container] Object storage ready (images={settings.images_bucket}, "
            f"brochures={settings.brochures_bucket})"
        )

        self.google_maps_api = None
        if settings.google_maps_api_key:
            self.google_maps_api = GoogleMapsAPIClient(
                api_key=settings.google_maps_api_key,
                timeout=settings.google_maps_timeout_seconds,
            )
            logger.info("[Container] Google Maps API client initialized")
        else:
            logger.warning(
                "[Container] Google Maps API key not configured. "
                "Location auto-fill and drive-time computation are disabled."
            )

        self.venue_list_service = VenueListService(self.venue_dao)

        # A save reloads the list snapshot
        self.form_sessions = FormSessionRegistry(
            venue_dao=self.venue_dao,
            storage=self.storage,
            maps_client=self.google_maps_api,
            images_bucket=settings.images_bucket,
            brochures_bucket=settings.brochures_bucket,
            drive_time_origin=settings.drive_time_origin,
            max_images=settings.max_images,
            on_saved=lambda venue: self.venue_list_service.refresh(),
        )

        self.venue_handler = VenueHandler(
            self.venue_list_service,
            drive_time_origin_label=settings.drive_time_origin_label,
        )
        self.form_handler = FormHandler(self.form_sessions)

        logger.info("[Container] Container initialized")

    async def shutdown(self):
        """Clean up resources on shutdown."""
        logger.info("[Container] Shutting down container")

        if self.google_maps_api:
            try:
                await self.google_maps_api.close()
                logger.info("[Container] Google Maps API client closed")
            except Exception as e:
                logger.error(f"[Container] Error closing Google Maps API client: {e}")

        try:
            await self.storage.close()
        except Exception as e:
            logger.error(f"[Container] Error closing storage client: {e}")

        try:
            self.redis_client.client.close()
            logger.info("[Container] Redis connection closed")
        except Exception as e:
            logger.error(f"[Container] Error closing Redis connection: {e}")
