"""Unit tests for the Google Maps API client."""
import pytest
from unittest.mock import AsyncMock, Mock, patch

import httpx

from app.api import GoogleMapsAPIClient, parse_duration_minutes


@pytest.fixture
def api_client():
    """Create Google Maps API client for testing."""
    client = GoogleMapsAPIClient(api_key="test_key", timeout=5.0)
    yield client


def ok_response(data):
    response = Mock()
    response.status_code = 200
    response.json.return_value = data
    return response


def error_response(status_code):
    response = Mock()
    response.status_code = status_code
    response.raise_for_status.side_effect = httpx.HTTPStatusError(
        f"HTTP {status_code}", request=Mock(), response=response
    )
    return response


class TestParseDurationMinutes:
    """Test the Routes duration parser."""

    @pytest.mark.parametrize(
        "duration, expected",
        [
            ("1234s", 21),
            ("2700s", 45),
            ("90s", 2),  # 1.5 rounds half up
            ("150s", 3),
            ("29s", 0),
            ("0s", 0),
        ],
    )
    def test_parses_seconds(self, duration, expected):
        assert parse_duration_minutes(duration) == expected

    @pytest.mark.parametrize("duration", [None, "", "s", "abc", 1234])
    def test_non_conforming_values(self, duration):
        assert parse_duration_minutes(duration) is None


class TestGoogleMapsAPIClient:
    """Unit tests for GoogleMapsAPIClient."""

    @pytest.mark.asyncio
    async def test_search_returns_first_address(self, api_client):
        data = {
            "places": [
                {"formattedAddress": "Oxenfoord Castle, Pathhead EH37 5UB, UK"},
                {"formattedAddress": "Somewhere else"},
            ]
        }
        with patch.object(api_client.client, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = ok_response(data)

            result = await api_client.search_first_address("Oxenfoord Castle")

            assert result == "Oxenfoord Castle, Pathhead EH37 5UB, UK"
            call_args = mock_post.call_args
            assert call_args[0][0] == "https://places.googleapis.com/v1/places:searchText"
            assert call_args.kwargs["json"] == {"textQuery": "Oxenfoord Castle"}
            assert call_args.kwargs["headers"]["X-Goog-Api-Key"] == "test_key"
            assert call_args.kwargs["headers"]["X-Goog-FieldMask"] == "places.formattedAddress"

    @pytest.mark.asyncio
    async def test_search_no_places(self, api_client):
        with patch.object(api_client.client, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = ok_response({})

            assert await api_client.search_first_address("Nowhere") is None

    @pytest.mark.asyncio
    async def test_search_only_considers_top_candidate(self, api_client):
        """A top candidate without an address is no result, even if a later one has one."""
        data = {
            "places": [
                {"displayName": {"text": "Oxenfoord"}},
                {"formattedAddress": "Somewhere else"},
            ]
        }
        with patch.object(api_client.client, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = ok_response(data)

            assert await api_client.search_first_address("Oxenfoord") is None

    @pytest.mark.asyncio
    async def test_search_http_error_raises(self, api_client):
        with patch.object(api_client.client, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = error_response(403)

            with pytest.raises(httpx.HTTPStatusError):
                await api_client.search_first_address("Anything")

    @pytest.mark.asyncio
    async def test_search_timeout_raises(self, api_client):
        with patch.object(api_client.client, "post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = httpx.ReadTimeout("slow")

            with pytest.raises(httpx.TimeoutException):
                await api_client.search_first_address("Anything")

    @pytest.mark.asyncio
    async def test_drive_time_success(self, api_client):
        with patch.object(api_client.client, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = ok_response({"routes": [{"duration": "2712s"}]})

            minutes = await api_client.compute_drive_time_minutes("Edinburgh Airport", "Pathhead")

            assert minutes == 45
            call_args = mock_post.call_args
            assert call_args[0][0] == "https://routes.googleapis.com/directions/v2:computeRoutes"
            assert call_args.kwargs["json"] == {
                "origin": {"address": "Edinburgh Airport"},
                "destination": {"address": "Pathhead"},
                "travelMode": "DRIVE",
                "routingPreference": "TRAFFIC_AWARE",
            }
            assert call_args.kwargs["headers"]["X-Goog-FieldMask"] == "routes.duration"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data",
        [{}, {"routes": []}, {"routes": [{}]}, {"routes": [{"duration": "unknown"}]}],
    )
    async def test_drive_time_unusable_response(self, api_client, data):
        with patch.object(api_client.client, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = ok_response(data)

            assert await api_client.compute_drive_time_minutes("A", "B") is None

    @pytest.mark.asyncio
    async def test_drive_time_http_error_is_none(self, api_client):
        with patch.object(api_client.client, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = error_response(500)

            assert await api_client.compute_drive_time_minutes("A", "B") is None

    @pytest.mark.asyncio
    async def test_drive_time_network_error_is_none(self, api_client):
        with patch.object(api_client.client, "post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = httpx.ConnectError("offline")

            assert await api_client.compute_drive_time_minutes("A", "B") is None
