"""FastAPI routes for venue list endpoints."""
import logging

from fastapi import APIRouter, HTTPException, Query

from app.models import SortOption, VenueListResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# Global handler reference - set during startup
_venue_handler = None


def set_venue_handler(handler):
    """Set the venue handler instance (called during startup)."""
    global _venue_handler
    _venue_handler = handler
    logger.info("[VenueRouter] Handler injected successfully")


def get_handler():
    """Get the venue handler, raising error if not initialized."""
    if _venue_handler is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _venue_handler


@router.get(
    "/v1/venues",
    response_model=VenueListResponse,
    summary="List venues",
    description="Venue cards from the last fetched snapshot, sorted by the given key",
)
def get_venues(
    sort: SortOption = Query(SortOption.ALPHABETIC, description="Sort key"),
    active_only: bool = Query(False, description="Hide inactive venues"),
    refresh: bool = Query(False, description="Refetch from the store before sorting"),
) -> VenueListResponse:
    """Get sorted venue cards."""
    try:
        handler = get_handler()
        return handler.get_venues(sort=sort, active_only=active_only, refresh=refresh)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[VenueRouter] Error in get_venues: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post(
    "/v1/venues/refresh",
    summary="Refetch venues",
    description="Reload the venue snapshot from the store",
)
def refresh_venues() -> dict[str, int]:
    try:
        handler = get_handler()
        return handler.refresh()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[VenueRouter] Error in refresh_venues: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/ping",
    summary="Health check",
    description="Health check endpoint",
)
def ping() -> dict[str, str]:
    """Health check endpoint."""
    handler = get_handler()
    return handler.ping()
