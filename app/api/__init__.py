"""External API clients package."""
from app.api.google_maps_client import GoogleMapsAPIClient, parse_duration_minutes
from app.api.s3_client import S3Client

__all__ = ["GoogleMapsAPIClient", "S3Client", "parse_duration_minutes"]
