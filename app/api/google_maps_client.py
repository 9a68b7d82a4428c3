"""Google Maps Platform client: Places Text Search and Routes drive time."""
import logging
import math
import re
import time
from typing import Optional

import httpx

from app.metrics import (
    GOOGLE_MAPS_API_CALLS_TOTAL,
    GOOGLE_MAPS_API_CALL_DURATION_SECONDS,
    GOOGLE_MAPS_API_ERRORS_TOTAL,
)

logger = logging.getLogger(__name__)

GOOGLE_PLACES_API_BASE = "https://places.googleapis.com/v1"
GOOGLE_ROUTES_API_BASE = "https://routes.googleapis.com/directions/v2"

# Routes returns durations such as "1234s"
_DURATION_DIGITS = re.compile(r"^(\d+)")


def parse_duration_minutes(duration: Optional[str]) -> Optional[int]:
    """Convert a Routes API duration string to whole minutes.

    Takes the leading digit run as seconds and rounds half up.

    Args:
        duration: Duration string like "1234s"

    Returns:
        Minutes, or None if the value has no leading digits
    """
    if not isinstance(duration, str):
        return None
    match = _DURATION_DIGITS.match(duration)
    if not match:
        return None
    seconds = int(match.group(1))
    return math.floor(seconds / 60 + 0.5)


class GoogleMapsAPIClient:
    """Async HTTP client for the Google Places (New) and Routes APIs."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 15.0,
    ):
        """Initialize Google Maps API client.

        Args:
            api_key: Google Maps Platform API key
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.timeout = timeout

        self.client = httpx.AsyncClient(
            timeout=timeout,
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )

    async def close(self):
        """Close the HTTP client and clean up resources."""
        await self.client.aclose()

    def _headers(self, field_mask: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": field_mask,
        }

    def _record(self, endpoint: str, start_time: float, status: str, error_type: Optional[str] = None):
        duration = time.perf_counter() - start_time
        GOOGLE_MAPS_API_CALL_DURATION_SECONDS.labels(endpoint=endpoint).observe(duration)
        GOOGLE_MAPS_API_CALLS_TOTAL.labels(endpoint=endpoint, status=status).inc()
        if error_type:
            GOOGLE_MAPS_API_ERRORS_TOTAL.labels(endpoint=endpoint, error_type=error_type).inc()

    async def search_first_address(self, query: str) -> Optional[str]:
        """Search places by free text and return the top candidate's address.

        Uses Text Search (New). Only the most relevant candidate is considered;
        when it carries no formatted address there is no result.

        Args:
            query: Free-text query, typically the venue name

        Returns:
            Formatted address of the first place, or None

        Raises:
            httpx.HTTPStatusError: If response status is not 2xx
            httpx.RequestError: If the request fails
        """
        endpoint = "text_search"
        url = f"{GOOGLE_PLACES_API_BASE}/places:searchText"

        logger.debug(f"[GoogleMapsAPIClient] Searching for: {query}")
        start_time = time.perf_counter()

        try:
            response = await self.client.post(
                url,
                headers=self._headers("places.formattedAddress"),
                json={"textQuery": query},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            self._record(endpoint, start_time, "error", "http_error")
            logger.error(f"[GoogleMapsAPIClient] Text search error: {e}")
            raise
        except httpx.TimeoutException as e:
            self._record(endpoint, start_time, "error", "timeout")
            logger.error(f"[GoogleMapsAPIClient] Text search timeout: {e}")
            raise
        except httpx.RequestError as e:
            self._record(endpoint, start_time, "error", "connection_error")
            logger.error(f"[GoogleMapsAPIClient] Text search request error: {e}")
            raise

        self._record(endpoint, start_time, "success")

        places = data.get("places") or []
        first = places[0] if places else None
        address = first.get("formattedAddress") if isinstance(first, dict) else None
        if not address:
            logger.warning(f"[GoogleMapsAPIClient] No place found for: {query}")
            return None
        return address

    async def compute_drive_time_minutes(
        self,
        origin: str,
        destination: str,
    ) -> Optional[int]:
        """Compute a traffic-aware driving time between two addresses.

        Only the first route is consulted. Never raises: any failure or
        unusable response yields None.

        Args:
            origin: Origin address
            destination: Destination address

        Returns:
            Drive time in whole minutes, or None
        """
        endpoint = "compute_routes"
        url = f"{GOOGLE_ROUTES_API_BASE}:computeRoutes"
        body = {
            "origin": {"address": origin},
            "destination": {"address": destination},
            "travelMode": "DRIVE",
            "routingPreference": "TRAFFIC_AWARE",
        }

        logger.debug(f"[GoogleMapsAPIClient] Computing route {origin} -> {destination}")
        start_time = time.perf_counter()

        try:
            response = await self.client.post(
                url,
                headers=self._headers("routes.duration"),
                json=body,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            self._record(endpoint, start_time, "error", "http_error")
            logger.error(f"[GoogleMapsAPIClient] Compute routes error: {e}")
            return None
        except httpx.TimeoutException as e:
            self._record(endpoint, start_time, "error", "timeout")
            logger.error(f"[GoogleMapsAPIClient] Compute routes timeout: {e}")
            return None
        except httpx.RequestError as e:
            self._record(endpoint, start_time, "error", "connection_error")
            logger.error(f"[GoogleMapsAPIClient] Compute routes request error: {e}")
            return None
        except ValueError as e:
            self._record(endpoint, start_time, "error", "invalid_json")
            logger.error(f"[GoogleMapsAPIClient] Compute routes returned invalid JSON: {e}")
            return None

        self._record(endpoint, start_time, "success")

        routes = data.get("routes") if isinstance(data, dict) else None
        if not routes or not isinstance(routes[0], dict):
            logger.warning(f"[GoogleMapsAPIClient] No route found to: {destination}")
            return None

        minutes = parse_duration_minutes(routes[0].get("duration"))
        if minutes is None:
            logger.warning(
                f"[GoogleMapsAPIClient] Unusable route duration for {destination}: "
                f"{routes[0].get('duration')!r}"
            )
        return minutes
