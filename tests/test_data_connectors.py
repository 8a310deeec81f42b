import pytest
import requests

import data_connectors
from conftest import FakeResponse
from data_connectors import PlacesClient, geocode_address
from errors import ConfigurationError, NotFoundError, UpstreamError, UpstreamTimeoutError

AUTOCOMPLETE_REPLY = {
    "suggestions": [
        {
            "placePrediction": {
                "placeId": "abc123",
                "text": {"text": "123 Main St, Phoenix, AZ, USA"},
                "structuredFormat": {
                    "mainText": {"text": "123 Main St"},
                    "secondaryText": {"text": "Phoenix, AZ, USA"},
                },
            }
        },
        {"placePrediction": {"placeId": "", "text": {"text": "no id"}}},
        {"queryPrediction": {"text": {"text": "main st"}}},
    ]
}

DETAILS_REPLY = {
    "location": {"latitude": 33.45, "longitude": -112.07},
    "formattedAddress": "123 Main St, Phoenix, AZ 85004, USA",
    "addressComponents": [
        {"longText": "Phoenix", "shortText": "Phoenix", "types": ["locality", "political"]},
        {"longText": "Arizona", "shortText": "AZ", "types": ["administrative_area_level_1", "political"]},
    ],
}


@pytest.fixture
def requests_seen(monkeypatch):
    seen = []
    replies = {}

    def fake_request(method, url, **kwargs):
        seen.append({"method": method, "url": url, **kwargs})
        return replies[url] if url in replies else replies["*"]

    monkeypatch.setattr(data_connectors.requests, "request", fake_request)
    return seen, replies


class TestAutocomplete:
    def test_short_input(self):
        assert PlacesClient(api_key="").autocomplete("1") == []

    def test_requires_key(self):
        with pytest.raises(ConfigurationError, match="Places API not configured"):
            PlacesClient(api_key="").autocomplete("123 Main")

    def test_suggestions(self, requests_seen):
        seen, replies = requests_seen
        replies["*"] = FakeResponse(AUTOCOMPLETE_REPLY)
        suggestions = PlacesClient(api_key="p-key").autocomplete("123 Main")
        assert len(suggestions) == 1
        assert suggestions[0].place_id == "abc123"
        assert suggestions[0].main_text == "123 Main St"
        assert seen[0]["method"] == "POST"
        assert seen[0]["headers"]["X-Goog-Api-Key"] == "p-key"
        assert seen[0]["json"]["includedRegionCodes"] == ["us"]

    def test_empty_reply(self, requests_seen):
        _, replies = requests_seen
        replies["*"] = FakeResponse({})
        assert PlacesClient(api_key="p-key").autocomplete("123 Main") == []


class TestDetails:
    def test_details(self, requests_seen):
        seen, replies = requests_seen
        replies["*"] = FakeResponse(DETAILS_REPLY)
        details = PlacesClient(api_key="p-key").details("abc123")
        assert (details.lat, details.lng) == (33.45, -112.07)
        assert details.region_code == "AZ"
        assert seen[0]["url"].endswith("/places/abc123")

    def test_missing_location(self, requests_seen):
        _, replies = requests_seen
        replies["*"] = FakeResponse({"formattedAddress": "somewhere"})
        with pytest.raises(NotFoundError):
            PlacesClient(api_key="p-key").details("abc123")

    def test_place_id_required(self):
        with pytest.raises(NotFoundError):
            PlacesClient(api_key="p-key").details("")

    def test_http_error(self, requests_seen):
        _, replies = requests_seen
        replies["*"] = FakeResponse({"error": "denied"}, status_code=403)
        with pytest.raises(UpstreamError) as info:
            PlacesClient(api_key="p-key").details("abc123")
        assert not info.value.is_network


class TestGeocodeAddress:
    def test_geocode(self, requests_seen):
        seen, replies = requests_seen
        replies["*"] = FakeResponse(
            [
                {
                    "lat": "33.4484",
                    "lon": "-112.0740",
                    "display_name": "Phoenix, Maricopa County, Arizona, United States",
                    "address": {"ISO3166-2-lvl4": "US-AZ"},
                }
            ]
        )
        details = geocode_address("Phoenix AZ")
        assert details.lat == pytest.approx(33.4484)
        assert details.region_code == "AZ"
        assert seen[0]["params"]["q"] == "Phoenix AZ"
        assert "User-Agent" in seen[0]["headers"]

    def test_outside_us_has_no_region(self, requests_seen):
        _, replies = requests_seen
        replies["*"] = FakeResponse([{"lat": "51.5", "lon": "-0.12", "address": {"ISO3166-2-lvl4": "GB-ENG"}}])
        assert geocode_address("London").region_code == ""

    def test_blank(self):
        with pytest.raises(NotFoundError, match="Please enter your address"):
            geocode_address("   ")

    def test_no_results(self, requests_seen):
        _, replies = requests_seen
        replies["*"] = FakeResponse([])
        with pytest.raises(NotFoundError, match="Address not found"):
            geocode_address("zzzz nowhere")

    def test_timeout(self, monkeypatch):
        def slow(*args, **kwargs):
            raise requests.exceptions.Timeout()

        monkeypatch.setattr(data_connectors.requests, "request", slow)
        with pytest.raises(UpstreamTimeoutError):
            geocode_address("Phoenix AZ")
