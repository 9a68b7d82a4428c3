"""Venue form sessions: draft editing, file uploads and save reconciliation."""
import logging
import uuid
from contextlib import contextmanager
from typing import Callable, Optional

from app.api.google_maps_client import GoogleMapsAPIClient
from app.api.s3_client import S3Client
from app.dao import RedisVenueDAO
from app.metrics import (
    DRIVE_TIME_COMPUTATIONS_TOTAL,
    OPEN_FORM_SESSIONS,
    VENUE_FORM_SAVES_TOTAL,
)
from app.models import (
    EDITABLE_FIELDS,
    REQUIRED_FIELDS,
    SWATCH_COLORS,
    ImageMoveDirection,
    StatusSwatch,
    UploadedFile,
    Venue,
)
from app.services.errors import (
    FormBusyError,
    FormSessionNotFoundError,
    ImageLimitError,
    InvalidFormInputError,
    LocationNotFoundError,
    LocationSearchError,
    MissingApiKeyError,
    UploadError,
    VenueSaveError,
    UnknownVenueError,
)

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "Pending"
DEFAULT_STATUS_COLOR = SWATCH_COLORS[StatusSwatch.SLATE]

# In-flight flags. Uploads and save share one; location search has its own.
LOADING = "loading"
SEARCHING = "searching"


def new_draft() -> Venue:
    """Empty draft used by the create form."""
    return Venue(
        name="",
        location="",
        website_url="",
        brochure_url="",
        price_saturday="",
        price_sunday="",
        price_midweek="",
        status=DEFAULT_STATUS,
        status_color=DEFAULT_STATUS_COLOR,
        notes="",
        drive_time_minutes=None,
        active=True,
        images=[],
    )


class VenueForm:
    """One form session's draft venue and the actions that mutate it.

    The draft is a private copy; nothing reaches the store until save().
    """

    def __init__(
        self,
        venue_dao: RedisVenueDAO,
        storage: S3Client,
        maps_client: Optional[GoogleMapsAPIClient],
        images_bucket: str,
        brochures_bucket: str,
        drive_time_origin: str,
        max_images: int = 10,
        initial: Optional[Venue] = None,
        on_saved: Optional[Callable[[Venue], None]] = None,
    ):
        """Initialize a form for a new venue (initial=None) or an existing one.

        Args:
            venue_dao: Venue store access
            storage: Object storage for images and brochures
            maps_client: Google Maps client, None when no API key is configured
            images_bucket: Bucket receiving image uploads
            brochures_bucket: Bucket receiving brochure uploads
            drive_time_origin: Fixed origin address for drive times
            max_images: Cap on the draft's image count
            initial: Existing record to edit
            on_saved: Called with the stored venue after a successful save
        """
        self.venue_dao = venue_dao
        self.storage = storage
        self.maps_client = maps_client
        self.images_bucket = images_bucket
        self.brochures_bucket = brochures_bucket
        self.drive_time_origin = drive_time_origin
        self.max_images = max_images
        self.on_saved = on_saved

        if initial is None:
            self.draft = new_draft()
            self.initial_location: Optional[str] = None
        else:
            self.draft = initial.model_copy(deep=True)
            if self.draft.active is None:
                self.draft.active = True
            self.initial_location = initial.location

        self._in_flight_flags: set[str] = set()

    @property
    def mode(self) -> str:
        return "create" if self.draft.is_new else "edit"

    @property
    def loading(self) -> bool:
        return LOADING in self._in_flight_flags

    @property
    def searching(self) -> bool:
        return SEARCHING in self._in_flight_flags

    @property
    def images_maxed(self) -> bool:
        return len(self.draft.images) >= self.max_images

    @contextmanager
    def _in_flight(self, flag: str):
        if flag in self._in_flight_flags:
            raise FormBusyError()
        self._in_flight_flags.add(flag)
        try:
            yield
        finally:
            self._in_flight_flags.discard(flag)

    # ------------------------------------------------------------------
    # Scalar edits
    # ------------------------------------------------------------------

    def set_field(self, name: str, value: Optional[str]) -> Venue:
        """Replace one scalar attribute of the draft.

        Every field but ``name`` may be cleared to None; the name is always a
        string, possibly empty, or the stored row would no longer load.
        """
        if name not in EDITABLE_FIELDS:
            raise InvalidFormInputError(f"Field '{name}' cannot be edited")
        if value is None and name in REQUIRED_FIELDS:
            raise InvalidFormInputError(f"Field '{name}' cannot be null")
        setattr(self.draft, name, value)
        return self.draft

    def pick_color(self, swatch: StatusSwatch) -> Venue:
        """Set status_color to one of the predefined swatches."""
        self.draft.status_color = SWATCH_COLORS[StatusSwatch(swatch)]
        return self.draft

    def set_active(self, active: bool) -> Venue:
        self.draft.active = active
        return self.draft

    def toggle_active(self) -> Venue:
        # An unset flag counts as active
        return self.set_active(not (self.draft.active is not False))

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def upload_images(self, files: list[UploadedFile]) -> Venue:
        """Upload a batch of images and append their URLs to the draft.

        Non-image files are ignored. A full draft rejects the whole batch
        before anything is uploaded; otherwise only as many files as fit are
        uploaded and the rest are dropped. If any upload fails the draft is
        left unchanged; objects stored before the failure stay in storage.

        Raises:
            ImageLimitError: If the draft already holds max_images
            UploadError: If an upload fails
        """
        files = [f for f in files if f.is_image]
        if not files:
            return self.draft

        with self._in_flight(LOADING):
            remaining_slots = self.max_images - len(self.draft.images)
            if remaining_slots <= 0:
                raise ImageLimitError(self.max_images)

            files_to_upload = files[:remaining_slots]
            if len(files_to_upload) < len(files):
                logger.info(
                    f"[VenueForm] Dropping {len(files) - len(files_to_upload)} images over the cap"
                )

            new_image_urls: list[str] = []
            try:
                for f in files_to_upload:
                    url = await self.storage.upload_file(
                        bucket=self.images_bucket,
                        extension=f.extension,
                        content=f.content,
                        content_type=f.content_type,
                    )
                    new_image_urls.append(url)
            except Exception as e:
                logger.error(f"[VenueForm] Error uploading images: {e}")
                raise UploadError("Error uploading images") from e

            self.draft.images = [*self.draft.images, *new_image_urls]
            logger.info(
                f"[VenueForm] Added {len(new_image_urls)} images "
                f"({len(self.draft.images)}/{self.max_images})"
            )
            return self.draft

    def _check_image_index(self, index: int):
        if not 0 <= index < len(self.draft.images):
            raise InvalidFormInputError(f"No image at position {index}")

    def move_image(self, index: int, direction: ImageMoveDirection) -> Venue:
        """Swap an image with its neighbour. No-op at either boundary."""
        self._check_image_index(index)
        images = list(self.draft.images)
        target = index - 1 if ImageMoveDirection(direction) == ImageMoveDirection.LEFT else index + 1
        if not 0 <= target < len(images):
            return self.draft

        images[index], images[target] = images[target], images[index]
        self.draft.images = images
        return self.draft

    def remove_image(self, index: int) -> Venue:
        """Drop the image at a position. The stored object is left alone."""
        self._check_image_index(index)
        self.draft.images = [url for i, url in enumerate(self.draft.images) if i != index]
        return self.draft

    # ------------------------------------------------------------------
    # Brochure
    # ------------------------------------------------------------------

    async def upload_brochure(self, file: Optional[UploadedFile]) -> Venue:
        """Upload a brochure and point brochure_url at it.

        Raises:
            UploadError: If the upload fails; brochure_url keeps its old value
        """
        if file is None:
            return self.draft

        with self._in_flight(LOADING):
            try:
                url = await self.storage.upload_file(
                    bucket=self.brochures_bucket,
                    extension=file.extension,
                    content=file.content,
                    content_type=file.content_type,
                )
            except Exception as e:
                logger.error(f"[VenueForm] Error uploading file: {e}")
                raise UploadError("Error uploading file") from e

            self.draft.brochure_url = url
            return self.draft

    # ------------------------------------------------------------------
    # Location & drive time
    # ------------------------------------------------------------------

    async def auto_fill_location(self) -> Venue:
        """Overwrite location with the first place matching the venue name.

        Does nothing when the draft has no name.

        Raises:
            MissingApiKeyError: If no Google Maps API key is configured
            LocationNotFoundError: If the search returns no place
            LocationSearchError: If the search fails
        """
        if not self.draft.name:
            return self.draft

        with self._in_flight(SEARCHING):
            if self.maps_client is None:
                raise MissingApiKeyError()

            try:
                address = await self.maps_client.search_first_address(self.draft.name)
            except Exception as e:
                logger.error(f"[VenueForm] Failed to auto-fill location: {e}")
                raise LocationSearchError() from e

            if not address:
                raise LocationNotFoundError()

            self.draft.location = address
            return self.draft

    async def _calculate_drive_time(self, destination: str) -> Optional[int]:
        if self.maps_client is None:
            DRIVE_TIME_COMPUTATIONS_TOTAL.labels(result="skipped_no_client").inc()
            return None

        minutes = await self.maps_client.compute_drive_time_minutes(
            origin=self.drive_time_origin,
            destination=destination,
        )
        result = "no_value" if minutes is None else "computed"
        DRIVE_TIME_COMPUTATIONS_TOTAL.labels(result=result).inc()
        return minutes

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    async def save(self) -> Venue:
        """Write the draft to the store as an insert or an update.

        The drive time is recomputed first when the draft has a location and
        it is new or its location changed; a failed computation keeps the
        previous value.

        Returns:
            The stored venue

        Raises:
            VenueSaveError: If the store write fails; the draft is untouched
        """
        with self._in_flight(LOADING):
            drive_time = self.draft.drive_time_minutes
            location_changed = self.draft.location != self.initial_location
            is_new = self.draft.is_new

            if self.draft.location and (location_changed or is_new):
                calculated_time = await self._calculate_drive_time(self.draft.location)
                if calculated_time is not None:
                    drive_time = calculated_time

            data_to_save = self.draft.model_copy(
                update={
                    "active": True if self.draft.active is None else self.draft.active,
                    "drive_time_minutes": drive_time,
                },
                deep=True,
            )

            mode = "insert" if is_new else "update"
            try:
                if is_new:
                    saved = self.venue_dao.insert_venue(data_to_save)
                else:
                    saved = self.venue_dao.update_venue(self.draft.id, data_to_save)
            except Exception as e:
                VENUE_FORM_SAVES_TOTAL.labels(mode=mode, status="error").inc()
                logger.error(f"[VenueForm] Error saving venue: {e}")
                raise VenueSaveError() from e

            VENUE_FORM_SAVES_TOTAL.labels(mode=mode, status="success").inc()
            logger.info(f"[VenueForm] Saved venue {saved.id} ({mode})")

            if self.on_saved is not None:
                self.on_saved(saved)
            return saved


class FormSessionRegistry:
    """Open form sessions, addressed by generated session id."""

    def __init__(
        self,
        venue_dao: RedisVenueDAO,
        storage: S3Client,
        maps_client: Optional[GoogleMapsAPIClient],
        images_bucket: str,
        brochures_bucket: str,
        drive_time_origin: str,
        max_images: int = 10,
        on_saved: Optional[Callable[[Venue], None]] = None,
    ):
        self.venue_dao = venue_dao
        self.storage = storage
        self.maps_client = maps_client
        self.images_bucket = images_bucket
        self.brochures_bucket = brochures_bucket
        self.drive_time_origin = drive_time_origin
        self.max_images = max_images
        self.on_saved = on_saved
        self._sessions: dict[str, VenueForm] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def _open(self, initial: Optional[Venue]) -> tuple[str, VenueForm]:
        session_id = uuid.uuid4().hex
        form = VenueForm(
            venue_dao=self.venue_dao,
            storage=self.storage,
            maps_client=self.maps_client,
            images_bucket=self.images_bucket,
            brochures_bucket=self.brochures_bucket,
            drive_time_origin=self.drive_time_origin,
            max_images=self.max_images,
            initial=initial,
            on_saved=self.on_saved,
        )
        self._sessions[session_id] = form
        OPEN_FORM_SESSIONS.set(len(self._sessions))
        logger.info(f"[FormSessionRegistry] Opened {form.mode} session {session_id}")
        return session_id, form

    def open_create(self) -> tuple[str, VenueForm]:
        """Open a form on an empty draft."""
        return self._open(None)

    def open_edit(self, venue_id: int) -> tuple[str, VenueForm]:
        """Open a form on the stored venue with the given id.

        Raises:
            UnknownVenueError: If the venue is not stored
        """
        venue = self.venue_dao.get_venue(venue_id)
        if venue is None:
            raise UnknownVenueError(f"Venue {venue_id} not found")
        return self._open(venue)

    def get(self, session_id: str) -> VenueForm:
        """Look up an open session.

        Raises:
            FormSessionNotFoundError: If the session is unknown or closed
        """
        form = self._sessions.get(session_id)
        if form is None:
            raise FormSessionNotFoundError()
        return form

    def close(self, session_id: str) -> bool:
        """Drop a session without touching the store."""
        removed = self._sessions.pop(session_id, None) is not None
        OPEN_FORM_SESSIONS.set(len(self._sessions))
        if removed:
            logger.info(f"[FormSessionRegistry] Closed session {session_id}")
        return removed

    async def save(self, session_id: str) -> Venue:
        """Save a session's draft and close the session on success.

        On failure the session stays open with its draft intact.
        """
        form = self.get(session_id)
        saved = await form.save()
        self.close(session_id)
        return saved
