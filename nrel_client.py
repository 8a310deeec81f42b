# nrel_client.py
from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from cache import TTLCache
from config import IRRADIANCE_TIMEOUT_SECONDS, IRRADIANCE_TTL_SECONDS, SYSTEM_SIZE_WATTS, get_secret
from errors import ConfigurationError, MalformedUpstreamResponse, UpstreamError, UpstreamTimeoutError
from irradiance import irradiance_from_response
from models import IrradianceResult

log = logging.getLogger(__name__)


class NRELClient:
    """
    PVWatts v8 client for the fixed residential system used across the app.

    Docs: https://developer.nrel.gov/docs/solar/pvwatts/v8/

    Responses are cached per rounded coordinate; PVWatts is rate limited and
    the answer for a location does not change between visits.
    """

    BASE_URL = "https://developer.nrel.gov/api/pvwatts/v8.json"

    SYSTEM_CAPACITY_KW = SYSTEM_SIZE_WATTS / 1000
    AZIMUTH_DEG = 180
    TILT_DEG = 20
    ARRAY_TYPE = 1  # fixed roof mount
    MODULE_TYPE = 1  # premium
    LOSSES_PCT = 14

    def __init__(
        self,
        api_key: str | None = None,
        cache: TTLCache | None = None,
        timeout: float = IRRADIANCE_TIMEOUT_SECONDS,
    ):
        if api_key is None:
            api_key = get_secret("NREL_API_KEY")
        self.api_key = api_key
        self.cache = cache if cache is not None else TTLCache(IRRADIANCE_TTL_SECONDS)
        self.timeout = timeout
        self.last_error: str | None = None

    def available(self) -> bool:
        return bool(self.api_key)

    @staticmethod
    def _cache_key(lat: float, lon: float) -> tuple:
        return (round(float(lat), 4), round(float(lon), 4))

    def _params(self, lat: float, lon: float) -> Dict[str, Any]:
        return {
            "format": "json",
            "api_key": self.api_key,
            "lat": lat,
            "lon": lon,
            "system_capacity": self.SYSTEM_CAPACITY_KW,
            "azimuth": self.AZIMUTH_DEG,
            "tilt": self.TILT_DEG,
            "array_type": self.ARRAY_TYPE,
            "module_type": self.MODULE_TYPE,
            "losses": self.LOSSES_PCT,
        }

    def pvwatts(self, lat: float, lon: float) -> Dict[str, Any]:
        """
        Return the raw PVWatts payload for (lat, lon), from cache when fresh.

        Raises ConfigurationError without a key and UpstreamError (or a subclass)
        for anything that prevents a usable answer. Failures are never cached.
        """
        self.last_error = None

        if not self.available():
            self.last_error = "No NREL_API_KEY found in secrets or environment."
            raise ConfigurationError(self.last_error)

        key = self._cache_key(lat, lon)
        return self.cache.get_or_set(key, lambda: self._request(lat, lon))

    def _request(self, lat: float, lon: float) -> Dict[str, Any]:
        log.info("Fetching PVWatts for (%.4f, %.4f)", lat, lon)
        try:
            resp = requests.get(self.BASE_URL, params=self._params(lat, lon), timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.Timeout:
            self.last_error = f"PVWatts request timed out after {self.timeout:g}s."
            log.error("PVWatts timeout for (%.4f, %.4f)", lat, lon)
            raise UpstreamTimeoutError(self.last_error)
        except requests.exceptions.ConnectionError as e:
            self.last_error = f"Could not reach PVWatts: {e}"
            log.error("PVWatts connection error for (%.4f, %.4f): %s", lat, lon, e)
            raise UpstreamError(self.last_error, is_network=True) from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            self.last_error = f"PVWatts returned HTTP {status}."
            log.error("PVWatts HTTP %s for (%.4f, %.4f)", status, lat, lon)
            raise UpstreamError(self.last_error) from e
        except requests.exceptions.RequestException as e:
            self.last_error = f"Exception calling PVWatts: {e}"
            log.error("PVWatts request error: %s", e)
            raise UpstreamError(self.last_error, is_network=True) from e
        except ValueError as e:
            self.last_error = "PVWatts returned a non-JSON response."
            log.error("PVWatts JSON decode error: %s", e)
            raise MalformedUpstreamResponse(self.last_error) from e

        if not isinstance(data, dict):
            self.last_error = "PVWatts returned an unexpected payload."
            raise MalformedUpstreamResponse(self.last_error)

        # If the API returns an error message, capture it
        errors = data.get("errors") or data.get("error")
        if errors:
            if isinstance(errors, list):
                self.last_error = "; ".join(str(x) for x in errors)
            else:
                self.last_error = str(errors)
            log.error("PVWatts returned errors: %s", self.last_error)
            raise UpstreamError(f"Solar data unavailable: {self.last_error}")

        # A 200 without usable production must not reach the cache
        try:
            irradiance_from_response(data)
        except UpstreamError as e:
            self.last_error = str(e)
            log.error("PVWatts payload unusable for (%.4f, %.4f): %s", lat, lon, e)
            raise

        return data

    def fetch_irradiance(self, lat: float, lon: float) -> IrradianceResult:
        return irradiance_from_response(self.pvwatts(lat, lon))
