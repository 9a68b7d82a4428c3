"""FastAPI routes for venue form sessions."""
import logging
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Path, Query, UploadFile

from app.models import (
    ColorPickRequest,
    FieldEditRequest,
    FormSessionResponse,
    ImageMoveDirection,
    SaveResponse,
    UploadedFile,
)
from app.services import VenueFormError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["forms"])

# Global handler reference - set during startup
_form_handler = None


def set_form_handler(handler):
    """Set the form handler instance (called during startup)."""
    global _form_handler
    _form_handler = handler
    logger.info("[FormRouter] Handler injected successfully")


def get_handler():
    """Get the form handler, raising error if not initialized."""
    if _form_handler is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _form_handler


def _to_http_error(e: Exception, operation: str) -> HTTPException:
    """Map a failed form action onto the response the client sees."""
    if isinstance(e, HTTPException):
        return e
    if isinstance(e, VenueFormError):
        logger.warning(f"[FormRouter] {operation}: {e.message}")
        return HTTPException(status_code=e.status_code, detail=e.message)
    logger.error(f"[FormRouter] Error in {operation}: {e}")
    return HTTPException(status_code=500, detail="Internal server error")


async def _read_upload(upload: UploadFile) -> UploadedFile:
    return UploadedFile(
        filename=upload.filename or "",
        content=await upload.read(),
        content_type=upload.content_type or "application/octet-stream",
    )


@router.post("/v1/forms", response_model=FormSessionResponse, summary="Open a create form")
def open_create_form() -> FormSessionResponse:
    try:
        return get_handler().open_create()
    except Exception as e:
        raise _to_http_error(e, "open_create_form")


@router.post(
    "/v1/venues/{venue_id}/form",
    response_model=FormSessionResponse,
    summary="Open an edit form",
)
def open_edit_form(venue_id: int = Path(..., ge=1)) -> FormSessionResponse:
    try:
        return get_handler().open_edit(venue_id)
    except Exception as e:
        raise _to_http_error(e, "open_edit_form")


@router.get("/v1/forms/{session_id}", response_model=FormSessionResponse, summary="Get draft")
def get_form(session_id: str) -> FormSessionResponse:
    try:
        return get_handler().get_form(session_id)
    except Exception as e:
        raise _to_http_error(e, "get_form")


@router.patch("/v1/forms/{session_id}", response_model=FormSessionResponse, summary="Edit fields")
def edit_fields(session_id: str, edits: FieldEditRequest) -> FormSessionResponse:
    try:
        return get_handler().edit_fields(session_id, edits)
    except Exception as e:
        raise _to_http_error(e, "edit_fields")


@router.post(
    "/v1/forms/{session_id}/status-color",
    response_model=FormSessionResponse,
    summary="Pick a status color",
)
def pick_color(session_id: str, body: ColorPickRequest) -> FormSessionResponse:
    try:
        return get_handler().pick_color(session_id, body.swatch)
    except Exception as e:
        raise _to_http_error(e, "pick_color")


@router.post(
    "/v1/forms/{session_id}/active/toggle",
    response_model=FormSessionResponse,
    summary="Toggle visibility",
)
def toggle_active(session_id: str) -> FormSessionResponse:
    try:
        return get_handler().toggle_active(session_id)
    except Exception as e:
        raise _to_http_error(e, "toggle_active")


@router.post(
    "/v1/forms/{session_id}/images",
    response_model=FormSessionResponse,
    summary="Upload images",
    description="Upload a batch of images; files beyond the image cap are dropped",
)
async def upload_images(
    session_id: str,
    files: list[UploadFile] = File(...),
) -> FormSessionResponse:
    try:
        uploaded = [await _read_upload(f) for f in files]
        return await get_handler().upload_images(session_id, uploaded)
    except Exception as e:
        raise _to_http_error(e, "upload_images")


@router.post(
    "/v1/forms/{session_id}/images/{index}/move",
    response_model=FormSessionResponse,
    summary="Move an image",
)
def move_image(
    session_id: str,
    index: int = Path(..., ge=0),
    direction: ImageMoveDirection = Query(..., description="left or right"),
) -> FormSessionResponse:
    try:
        return get_handler().move_image(session_id, index, direction)
    except Exception as e:
        raise _to_http_error(e, "move_image")


@router.delete(
    "/v1/forms/{session_id}/images/{index}",
    response_model=FormSessionResponse,
    summary="Remove an image",
)
def remove_image(session_id: str, index: int = Path(..., ge=0)) -> FormSessionResponse:
    try:
        return get_handler().remove_image(session_id, index)
    except Exception as e:
        raise _to_http_error(e, "remove_image")


@router.post(
    "/v1/forms/{session_id}/brochure",
    response_model=FormSessionResponse,
    summary="Upload a brochure",
)
async def upload_brochure(
    session_id: str,
    file: Optional[UploadFile] = File(None),
) -> FormSessionResponse:
    try:
        uploaded = await _read_upload(file) if file is not None else None
        return await get_handler().upload_brochure(session_id, uploaded)
    except Exception as e:
        raise _to_http_error(e, "upload_brochure")


@router.post(
    "/v1/forms/{session_id}/location/autofill",
    response_model=FormSessionResponse,
    summary="Auto-fill location from the venue name",
)
async def auto_fill_location(session_id: str) -> FormSessionResponse:
    try:
        return await get_handler().auto_fill_location(session_id)
    except Exception as e:
        raise _to_http_error(e, "auto_fill_location")


@router.post("/v1/forms/{session_id}/save", response_model=SaveResponse, summary="Save the draft")
async def save_form(session_id: str) -> SaveResponse:
    try:
        return await get_handler().save(session_id)
    except Exception as e:
        raise _to_http_error(e, "save_form")


@router.delete("/v1/forms/{session_id}", summary="Cancel the form")
def cancel_form(session_id: str) -> dict[str, str]:
    try:
        return get_handler().cancel(session_id)
    except Exception as e:
        raise _to_http_error(e, "cancel_form")
