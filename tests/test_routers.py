"""HTTP-level tests for the venue and form routers."""
import pytest
from unittest.mock import AsyncMock, Mock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.handlers import FormHandler, VenueHandler
from app.models import Venue
from app.routers import form_router, set_form_handler, set_venue_handler, venue_router
from app.services import FormSessionRegistry, VenueListService


@pytest.fixture
def mock_venue_dao():
    dao = Mock()
    dao.list_venues.return_value = []
    dao.insert_venue.side_effect = lambda v: v.model_copy(update={"id": 1})
    dao.update_venue.side_effect = lambda venue_id, v: v.model_copy(update={"id": venue_id})
    return dao


@pytest.fixture
def mock_storage():
    storage = Mock()
    counter = {"n": 0}

    async def upload_file(bucket, extension, content, content_type="application/octet-stream"):
        counter["n"] += 1
        return f"https://cdn.test/{bucket}/file{counter['n']}.{extension}"

    storage.upload_file = AsyncMock(side_effect=upload_file)
    return storage


@pytest.fixture
def mock_maps():
    maps = Mock()
    maps.search_first_address = AsyncMock(return_value="Dalhousie Castle, Bonnyrigg")
    maps.compute_drive_time_minutes = AsyncMock(return_value=30)
    return maps


@pytest.fixture
def client(mock_venue_dao, mock_storage, mock_maps):
    """Test client over real handlers with mocked collaborators."""
    list_service = VenueListService(mock_venue_dao)
    sessions = FormSessionRegistry(
        venue_dao=mock_venue_dao,
        storage=mock_storage,
        maps_client=mock_maps,
        images_bucket="images",
        brochures_bucket="brochures",
        drive_time_origin="Edinburgh Airport",
        max_images=3,
        on_saved=lambda venue: list_service.refresh(),
    )
    set_venue_handler(VenueHandler(list_service, drive_time_origin_label="Edinburgh"))
    set_form_handler(FormHandler(sessions))

    app = FastAPI()
    app.include_router(venue_router)
    app.include_router(form_router)
    yield TestClient(app)

    set_venue_handler(None)
    set_form_handler(None)


def image(name):
    return ("files", (name, b"image-bytes", "image/jpeg"))


class TestVenueRoutes:
    """Test the venue list endpoints."""

    def test_list_venues_refresh(self, client, mock_venue_dao):
        mock_venue_dao.list_venues.return_value = [
            Venue(id=1, name="b venue", price_saturday="900"),
            Venue(id=2, name="A venue", price_saturday="Unavailable"),
        ]

        response = client.get("/v1/venues", params={"refresh": "true"})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [v["name"] for v in data["venues"]] == ["A venue", "b venue"]

    def test_list_venues_by_price(self, client, mock_venue_dao):
        mock_venue_dao.list_venues.return_value = [
            Venue(id=1, name="A", price_saturday="Unavailable"),
            Venue(id=2, name="B", price_saturday="5,000"),
        ]

        response = client.get("/v1/venues", params={"refresh": "true", "sort": "price_saturday"})

        assert [v["name"] for v in response.json()["venues"]] == ["B", "A"]

    def test_invalid_sort_rejected(self, client):
        response = client.get("/v1/venues", params={"sort": "rating"})

        assert response.status_code == 422

    def test_refresh_endpoint(self, client, mock_venue_dao):
        mock_venue_dao.list_venues.return_value = [Venue(id=1, name="A")]

        response = client.post("/v1/venues/refresh")

        assert response.json() == {"count": 1}

    def test_ping(self, client):
        assert client.get("/ping").json() == {"status": "pong"}

    def test_service_not_ready(self, client):
        set_venue_handler(None)

        response = client.get("/v1/venues")

        assert response.status_code == 503


class TestFormRoutes:
    """Test form session endpoints end to end."""

    def test_create_flow(self, client, mock_venue_dao, mock_maps):
        session_id = client.post("/v1/forms").json()["session_id"]

        response = client.patch(
            f"/v1/forms/{session_id}", json={"name": "Dalhousie Castle", "price_saturday": "8,000"}
        )
        assert response.status_code == 200
        assert response.json()["draft"]["name"] == "Dalhousie Castle"

        response = client.post(f"/v1/forms/{session_id}/location/autofill")
        assert response.json()["draft"]["location"] == "Dalhousie Castle, Bonnyrigg"

        response = client.post(f"/v1/forms/{session_id}/save")
        assert response.status_code == 200
        data = response.json()
        assert data["inserted"] is True
        assert data["venue"]["id"] == 1
        assert data["venue"]["drive_time_minutes"] == 30
        mock_maps.compute_drive_time_minutes.assert_awaited_once_with(
            origin="Edinburgh Airport", destination="Dalhousie Castle, Bonnyrigg"
        )

        # Session is gone once saved
        assert client.get(f"/v1/forms/{session_id}").status_code == 404

    def test_unknown_field_rejected(self, client):
        session_id = client.post("/v1/forms").json()["session_id"]

        response = client.patch(f"/v1/forms/{session_id}", json={"id": 5})

        assert response.status_code == 422

    def test_unknown_session(self, client):
        response = client.get("/v1/forms/missing")

        assert response.status_code == 404

    def test_open_edit_unknown_venue(self, client, mock_venue_dao):
        mock_venue_dao.get_venue.return_value = None

        response = client.post("/v1/venues/9/form")

        assert response.status_code == 404
        assert response.json()["detail"] == "Venue 9 not found"

    def test_image_upload_order_and_cap(self, client, mock_storage):
        session_id = client.post("/v1/forms").json()["session_id"]

        response = client.post(
            f"/v1/forms/{session_id}/images",
            files=[image("a.jpg"), image("b.jpg"), image("c.jpg"), image("d.jpg")],
        )

        data = response.json()
        assert response.status_code == 200
        assert data["draft"]["images"] == [
            "https://cdn.test/images/file1.jpg",
            "https://cdn.test/images/file2.jpg",
            "https://cdn.test/images/file3.jpg",
        ]
        assert data["images_maxed"] is True

        response = client.post(f"/v1/forms/{session_id}/images", files=[image("e.jpg")])
        assert response.status_code == 400
        assert response.json()["detail"] == "Maximum 3 images allowed"
        assert mock_storage.upload_file.await_count == 3

    def test_move_and_remove_image(self, client):
        session_id = client.post("/v1/forms").json()["session_id"]
        client.post(f"/v1/forms/{session_id}/images", files=[image("a.jpg"), image("b.jpg")])

        response = client.post(
            f"/v1/forms/{session_id}/images/1/move", params={"direction": "left"}
        )
        assert response.json()["draft"]["images"] == [
            "https://cdn.test/images/file2.jpg",
            "https://cdn.test/images/file1.jpg",
        ]

        response = client.delete(f"/v1/forms/{session_id}/images/0")
        assert response.json()["draft"]["images"] == ["https://cdn.test/images/file1.jpg"]

        response = client.delete(f"/v1/forms/{session_id}/images/5")
        assert response.status_code == 422

    def test_upload_failure_maps_to_bad_gateway(self, client, mock_storage):
        mock_storage.upload_file.side_effect = RuntimeError("bucket missing")
        session_id = client.post("/v1/forms").json()["session_id"]

        response = client.post(
            f"/v1/forms/{session_id}/brochure",
            files={"file": ("brochure.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 502
        assert response.json()["detail"] == "Error uploading file"

    def test_status_color_and_toggle(self, client):
        session_id = client.post("/v1/forms").json()["session_id"]

        response = client.post(f"/v1/forms/{session_id}/status-color", json={"swatch": "red"})
        assert response.json()["draft"]["status_color"] == "#ef4444"

        response = client.post(f"/v1/forms/{session_id}/active/toggle")
        assert response.json()["draft"]["active"] is False

    def test_cancel(self, client, mock_venue_dao):
        session_id = client.post("/v1/forms").json()["session_id"]

        response = client.delete(f"/v1/forms/{session_id}")

        assert response.json() == {"status": "cancelled"}
        assert client.get(f"/v1/forms/{session_id}").status_code == 404
        mock_venue_dao.insert_venue.assert_not_called()

    def test_edit_save_updates_same_id(self, client, mock_venue_dao, mock_maps):
        mock_venue_dao.get_venue.return_value = Venue(
            id=4, name="Old Name", location="Peebles", drive_time_minutes=50
        )
        session_id = client.post("/v1/venues/4/form").json()["session_id"]

        client.patch(f"/v1/forms/{session_id}", json={"name": "New Name"})
        response = client.post(f"/v1/forms/{session_id}/save")

        data = response.json()
        assert data["inserted"] is False
        assert data["venue"]["id"] == 4
        assert data["venue"]["drive_time_minutes"] == 50
        mock_maps.compute_drive_time_minutes.assert_not_awaited()
        assert mock_venue_dao.update_venue.call_args[0][0] == 4

    def test_null_name_rejected(self, client, mock_venue_dao):
        session_id = client.post("/v1/forms").json()["session_id"]

        response = client.patch(f"/v1/forms/{session_id}", json={"name": None, "location": ""})

        assert response.status_code == 422
        assert response.json()["detail"] == "Field 'name' cannot be null"
        assert client.get(f"/v1/forms/{session_id}").json()["draft"]["name"] == ""

    def test_autofill_top_candidate_without_address(self, client, mock_maps):
        mock_maps.search_first_address.return_value = None
        session_id = client.post("/v1/forms").json()["session_id"]
        client.patch(f"/v1/forms/{session_id}", json={"name": "Oxenfoord"})

        response = client.post(f"/v1/forms/{session_id}/location/autofill")

        assert response.status_code == 404
        assert response.json()["detail"] == "No location found for this venue name"


class TestSavedVenueListing:
    """Saved drafts stay listable through the real DAO."""

    @pytest.fixture
    def stored_client(self, mock_storage, mock_maps):
        from app.dao import RedisVenueDAO

        docs = {}
        index = []
        indexed = Mock()
        indexed.incr.side_effect = lambda key: len(index) + 1
        indexed.get.side_effect = lambda key: docs.get(key)

        def add_indexed_json(index_key, member_key, score, data):
            docs[member_key] = data.model_dump_json()
            if member_key not in index:
                index.append(member_key)

        indexed.add_indexed_json.side_effect = add_indexed_json
        indexed.get_all_indexed_json.side_effect = lambda key: [docs[m] for m in index]

        dao = RedisVenueDAO(indexed)
        list_service = VenueListService(dao)
        sessions = FormSessionRegistry(
            venue_dao=dao,
            storage=mock_storage,
            maps_client=mock_maps,
            images_bucket="images",
            brochures_bucket="brochures",
            drive_time_origin="Edinburgh Airport",
            on_saved=lambda venue: list_service.refresh(),
        )
        set_venue_handler(VenueHandler(list_service))
        set_form_handler(FormHandler(sessions))

        app = FastAPI()
        app.include_router(venue_router)
        app.include_router(form_router)
        yield TestClient(app)

        set_venue_handler(None)
        set_form_handler(None)

    def test_venue_listed_after_rejected_null_name(self, stored_client):
        session_id = stored_client.post("/v1/forms").json()["session_id"]

        stored_client.patch(f"/v1/forms/{session_id}", json={"name": None, "location": ""})
        assert stored_client.post(f"/v1/forms/{session_id}/save").status_code == 200

        response = stored_client.get("/v1/venues", params={"refresh": "true"})

        assert response.json()["count"] == 1
        assert response.json()["venues"][0]["name"] == ""
