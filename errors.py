# errors.py
from __future__ import annotations


class SunScoreError(Exception):
    """Base class for every error raised by this app."""


class ConfigurationError(SunScoreError):
    """A required credential or setting is missing (e.g. NREL_API_KEY)."""


class NotFoundError(SunScoreError):
    """Unknown city slug or an address the geocoder could not resolve."""


class UpstreamError(SunScoreError):
    """
    An external service (PVWatts, Places, Nominatim, Gemini) failed.

    `is_network` is True when the request never got a usable HTTP answer
    (connection refused, DNS, timeout), so the UI can use connectivity wording.
    """

    def __init__(self, message: str, is_network: bool = False):
        super().__init__(message)
        self.is_network = is_network


class UpstreamTimeoutError(UpstreamError):
    def __init__(self, message: str):
        super().__init__(message, is_network=True)


class MalformedUpstreamResponse(UpstreamError):
    """Upstream answered, but the payload could not be used."""


class InvariantViolation(SunScoreError, ValueError):
    """An input that should have been clamped upstream reached a calculation."""


class InvalidLeadError(SunScoreError, ValueError):
    def __init__(self, problems: list[str]):
        super().__init__("; ".join(problems))
        self.problems = problems
