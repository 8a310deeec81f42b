# data_connectors.py
"""Address lookup: Google Places (autocomplete + details) and Nominatim free-text geocoding."""
from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests

from config import PLACES_TIMEOUT_SECONDS, get_secret
from errors import ConfigurationError, MalformedUpstreamResponse, NotFoundError, UpstreamError, UpstreamTimeoutError
from models import PlaceDetails, PlaceSuggestion

log = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
NOMINATIM_USER_AGENT = "SunScoreSolarCalculator/1.0 (contact@sunscore.io)"


def _send(method: str, url: str, service: str, **kwargs: Any) -> Any:
    """Issue a request and translate transport problems into the app's error types."""
    try:
        resp = requests.request(method, url, **kwargs)
        resp.raise_for_status()
        return resp.json()
    except requests.exceptions.Timeout:
        log.error("%s request timed out: %s", service, url)
        raise UpstreamTimeoutError(f"{service} request timed out.")
    except requests.exceptions.ConnectionError as e:
        log.error("%s connection error: %s", service, e)
        raise UpstreamError(f"Unable to connect to {service}.", is_network=True) from e
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "?"
        body = e.response.text if e.response is not None else ""
        log.error("%s API error: %s %s", service, status, body[:200])
        raise UpstreamError(f"{service} returned HTTP {status}.") from e
    except requests.exceptions.RequestException as e:
        log.error("%s request error: %s", service, e)
        raise UpstreamError(f"{service} request failed.", is_network=True) from e
    except ValueError as e:
        raise MalformedUpstreamResponse(f"{service} returned a non-JSON response.") from e


class PlacesClient:
    """
    Google Places API (New).

    Docs: https://developers.google.com/maps/documentation/places/web-service/op-overview
    """

    AUTOCOMPLETE_URL = "https://places.googleapis.com/v1/places:autocomplete"
    DETAILS_URL = "https://places.googleapis.com/v1/places/{place_id}"
    MIN_INPUT_LENGTH = 2

    def __init__(self, api_key: str | None = None, timeout: float = PLACES_TIMEOUT_SECONDS):
        if api_key is None:
            api_key = get_secret("GOOGLE_PLACES_API_KEY")
        self.api_key = api_key
        self.timeout = timeout

    def available(self) -> bool:
        return bool(self.api_key)

    def _require_key(self) -> None:
        if not self.available():
            log.error("GOOGLE_PLACES_API_KEY not set")
            raise ConfigurationError("Places API not configured")

    def autocomplete(self, text: str) -> List[PlaceSuggestion]:
        """US street-address suggestions for a partial address; [] for very short input."""
        if not text or len(text) < self.MIN_INPUT_LENGTH:
            return []
        self._require_key()

        data = _send(
            "POST",
            self.AUTOCOMPLETE_URL,
            "Places",
            headers={"Content-Type": "application/json", "X-Goog-Api-Key": self.api_key},
            json={
                "input": text,
                "includedRegionCodes": ["us"],
                "includedPrimaryTypes": ["street_address", "premise", "subpremise"],
            },
            timeout=self.timeout,
        )

        out: List[PlaceSuggestion] = []
        for suggestion in data.get("suggestions") or []:
            pred = suggestion.get("placePrediction") or {}
            place_id = pred.get("placeId")
            description = (pred.get("text") or {}).get("text")
            if not place_id or not description:
                continue
            fmt = pred.get("structuredFormat") or {}
            out.append(
                PlaceSuggestion(
                    place_id=place_id,
                    description=description,
                    main_text=(fmt.get("mainText") or {}).get("text", ""),
                    secondary_text=(fmt.get("secondaryText") or {}).get("text", ""),
                )
            )
        return out

    def details(self, place_id: str) -> PlaceDetails:
        if not place_id:
            raise NotFoundError("placeId is required")
        self._require_key()

        data = _send(
            "GET",
            self.DETAILS_URL.format(place_id=place_id),
            "Places",
            headers={"X-Goog-Api-Key": self.api_key},
            params={"fields": "location,formattedAddress,addressComponents"},
            timeout=self.timeout,
        )

        location = data.get("location") or {}
        if location.get("latitude") is None or location.get("longitude") is None:
            raise NotFoundError("Could not locate that address. Please pick another suggestion.")

        return PlaceDetails(
            lat=float(location["latitude"]),
            lng=float(location["longitude"]),
            formatted_address=data.get("formattedAddress", ""),
            region_code=_region_from_components(data.get("addressComponents") or []),
        )


def _region_from_components(components: List[Dict[str, Any]]) -> str:
    for comp in components:
        if "administrative_area_level_1" in (comp.get("types") or []):
            return comp.get("shortText", "") or ""
    return ""


def geocode_address(address: str, timeout: float = PLACES_TIMEOUT_SECONDS) -> PlaceDetails:
    """Free-text geocoding through OpenStreetMap Nominatim (no key needed)."""
    if not address or not address.strip():
        raise NotFoundError("Please enter your address")

    results = _send(
        "GET",
        NOMINATIM_URL,
        "Geocoding service",
        params={"format": "json", "q": address, "limit": 1, "addressdetails": 1},
        headers={"User-Agent": NOMINATIM_USER_AGENT},
        timeout=timeout,
    )
    if not results:
        raise NotFoundError("Address not found. Please enter a more specific address.")

    top = results[0]
    iso = (top.get("address") or {}).get("ISO3166-2-lvl4", "")
    region = iso.split("-", 1)[1] if iso.startswith("US-") else ""

    return PlaceDetails(
        lat=float(top["lat"]),
        lng=float(top["lon"]),
        formatted_address=top.get("display_name", address),
        region_code=region,
    )
