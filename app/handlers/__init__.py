"""Handlers package."""
from app.handlers.venue_handler import VenueHandler, format_drive_time, format_price
from app.handlers.form_handler import FormHandler

__all__ = ["FormHandler", "VenueHandler", "format_drive_time", "format_price"]
