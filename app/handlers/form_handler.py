"""Form handler: venue form session requests."""
import logging

from app.models import (
    FieldEditRequest,
    FormSessionResponse,
    ImageMoveDirection,
    SaveResponse,
    StatusSwatch,
    UploadedFile,
)
from app.services import FormSessionRegistry, VenueForm

logger = logging.getLogger(__name__)


class FormHandler:
    """Handler for venue form HTTP requests."""

    def __init__(self, sessions: FormSessionRegistry):
        """Initialize form handler.

        Args:
            sessions: Registry of open form sessions
        """
        self.sessions = sessions

    def _response(self, session_id: str, form: VenueForm) -> FormSessionResponse:
        return FormSessionResponse(
            session_id=session_id,
            mode=form.mode,
            draft=form.draft,
            image_count=len(form.draft.images),
            max_images=form.max_images,
            images_maxed=form.images_maxed,
            loading=form.loading,
            searching=form.searching,
        )

    def open_create(self) -> FormSessionResponse:
        session_id, form = self.sessions.open_create()
        return self._response(session_id, form)

    def open_edit(self, venue_id: int) -> FormSessionResponse:
        session_id, form = self.sessions.open_edit(venue_id)
        return self._response(session_id, form)

    def get_form(self, session_id: str) -> FormSessionResponse:
        return self._response(session_id, self.sessions.get(session_id))

    def edit_fields(self, session_id: str, edits: FieldEditRequest) -> FormSessionResponse:
        """Apply the fields present in the request, in declaration order."""
        form = self.sessions.get(session_id)
        for name, value in edits.model_dump(exclude_unset=True).items():
            form.set_field(name, value)
        return self._response(session_id, form)

    def pick_color(self, session_id: str, swatch: StatusSwatch) -> FormSessionResponse:
        form = self.sessions.get(session_id)
        form.pick_color(swatch)
        return self._response(session_id, form)

    def toggle_active(self, session_id: str) -> FormSessionResponse:
        form = self.sessions.get(session_id)
        form.toggle_active()
        return self._response(session_id, form)

    async def upload_images(self, session_id: str, files: list[UploadedFile]) -> FormSessionResponse:
        form = self.sessions.get(session_id)
        logger.info(f"[FormHandler] Uploading {len(files)} images to session {session_id}")
        await form.upload_images(files)
        return self._response(session_id, form)

    def move_image(
        self, session_id: str, index: int, direction: ImageMoveDirection
    ) -> FormSessionResponse:
        form = self.sessions.get(session_id)
        form.move_image(index, direction)
        return self._response(session_id, form)

    def remove_image(self, session_id: str, index: int) -> FormSessionResponse:
        form = self.sessions.get(session_id)
        form.remove_image(index)
        return self._response(session_id, form)

    async def upload_brochure(self, session_id: str, file: UploadedFile) -> FormSessionResponse:
        form = self.sessions.get(session_id)
        await form.upload_brochure(file)
        return self._response(session_id, form)

    async def auto_fill_location(self, session_id: str) -> FormSessionResponse:
        form = self.sessions.get(session_id)
        await form.auto_fill_location()
        return self._response(session_id, form)

    async def save(self, session_id: str) -> SaveResponse:
        form = self.sessions.get(session_id)
        inserted = form.draft.is_new
        venue = await self.sessions.save(session_id)
        return SaveResponse(session_id=session_id, venue=venue, inserted=inserted)

    def cancel(self, session_id: str) -> dict[str, str]:
        self.sessions.get(session_id)
        self.sessions.close(session_id)
        return {"status": "cancelled"}
