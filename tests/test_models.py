"""Unit tests for Pydantic data models."""
import json
import pytest
from pydantic import ValidationError

from app.models import (
    ColorPickRequest,
    FieldEditRequest,
    UploadedFile,
    Venue,
)


class TestVenueModels:
    """Test venue-related models."""

    def test_venue_defaults(self):
        venue = Venue()

        assert venue.id is None
        assert venue.is_new is True
        assert venue.active is True
        assert venue.images == []
        assert venue.hero_image is None

    def test_null_images_become_empty(self):
        """Test rows stored with a null images column."""
        venue = Venue.model_validate_json(json.dumps({"id": 3, "name": "Barn", "images": None}))

        assert venue.images == []
        assert venue.is_new is False

    def test_hero_image_is_first(self):
        venue = Venue(id=1, name="X", images=["hero", "second"])

        assert venue.hero_image == "hero"

    def test_json_round_trip_keeps_image_order(self):
        venue = Venue(id=1, name="X", images=["c", "a", "b"], created_at="2024-05-01T10:00:00Z")

        restored = Venue.model_validate_json(venue.model_dump_json())

        assert restored.images == ["c", "a", "b"]
        assert restored.created_at == venue.created_at

    def test_venue_to_string(self):
        venue = Venue(id=2, name="Oxenfoord Castle", location="Pathhead")

        assert str(venue) == "Venue(id=2, name=Oxenfoord Castle, location=Pathhead)"


class TestFormModels:
    """Test form request models."""

    @pytest.mark.parametrize(
        "filename, extension",
        [("photo.JPG", "JPG"), ("archive.tar.gz", "gz"), ("noext", "noext")],
    )
    def test_uploaded_file_extension(self, filename, extension):
        assert UploadedFile(filename=filename, content=b"").extension == extension

    def test_uploaded_file_is_image(self):
        assert UploadedFile("a.png", b"", "image/png").is_image is True
        assert UploadedFile("a.pdf", b"", "application/pdf").is_image is False
        assert UploadedFile("a.bin", b"").is_image is False

    def test_field_edit_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            FieldEditRequest(images=["x"])

    def test_field_edit_tracks_sent_fields(self):
        edits = FieldEditRequest(name="Barn", notes="")

        assert edits.model_dump(exclude_unset=True) == {"name": "Barn", "notes": ""}

    def test_color_pick_rejects_unknown_swatch(self):
        with pytest.raises(ValidationError):
            ColorPickRequest(swatch="purple")
