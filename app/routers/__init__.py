"""Routers package."""
from app.routers.venue_router import router as venue_router, set_venue_handler
from app.routers.form_router import router as form_router, set_form_handler

__all__ = ["venue_router", "set_venue_handler", "form_router", "set_form_handler"]
