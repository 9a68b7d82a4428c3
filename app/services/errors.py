"""User-facing errors raised by venue form actions.

Each carries the message shown to the user and the HTTP status the routers
answer with.
"""


class VenueFormError(Exception):
    """Base class for a failed form action. The draft is left as it was."""

    status_code = 400
    default_message = "Form action failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class FormBusyError(VenueFormError):
    status_code = 409
    default_message = "Another action is still in progress"


class ImageLimitError(VenueFormError):
    status_code = 400

    def __init__(self, max_images: int):
        super().__init__(f"Maximum {max_images} images allowed")
        self.max_images = max_images


class UploadError(VenueFormError):
    status_code = 502
    default_message = "Error uploading file"


class MissingApiKeyError(VenueFormError):
    status_code = 503
    default_message = "Google Maps API Key is missing"


class LocationNotFoundError(VenueFormError):
    status_code = 404
    default_message = "No location found for this venue name"


class LocationSearchError(VenueFormError):
    status_code = 502
    default_message = "Failed to find location"


class VenueSaveError(VenueFormError):
    status_code = 502
    default_message = "Error saving venue"


class FormSessionNotFoundError(VenueFormError):
    status_code = 404
    default_message = "Form session not found"


class InvalidFormInputError(VenueFormError):
    status_code = 422
    default_message = "Invalid form input"


class UnknownVenueError(VenueFormError):
    status_code = 404
    default_message = "Venue not found"
