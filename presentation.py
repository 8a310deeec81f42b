# presentation.py
"""Display helpers and the recompute loop behind the calculator page."""
from __future__ import annotations

import json
import logging
import math
import re
import time
from datetime import datetime
from typing import Any, Callable, MutableMapping, Optional

from config import DEBOUNCE_SECONDS, MIN_MONTHLY_BILL
from errors import ConfigurationError, NotFoundError, UpstreamError
from models import AdjustedLocationInputs, SavingsProjection, SessionSnapshot
from savings import project_for_location, round_half_up

log = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."
GENERIC_ERROR_MESSAGE = "Unable to fetch solar data. Please try again later."


# ---------------- Formatting ----------------


def format_currency(value: float) -> str:
    """18000 -> '$18,000'; -1234.5 -> '-$1,235'"""
    if math.isinf(value):
        return "N/A"
    amount = int(round_half_up(abs(value)))
    sign = "-" if value < 0 and amount else ""
    return f"{sign}${amount:,}"


def format_number(value: float) -> str:
    if math.isinf(value):
        return "N/A"
    amount = int(round_half_up(abs(value)))
    sign = "-" if value < 0 and amount else ""
    return f"{sign}{amount:,}"


def format_years(value: float) -> str:
    return "N/A" if math.isinf(value) else f"{value:.1f} yrs"


def format_phone_number(value: str) -> str:
    """Progressive (XXX) XXX-XXXX formatting while typing."""
    digits = re.sub(r"\D", "", value or "")
    if not digits:
        return ""
    if len(digits) <= 3:
        return f"({digits}"
    if len(digits) <= 6:
        return f"({digits[:3]}) {digits[3:]}"
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:10]}"


def clamp_monthly_bill(value: Any) -> int:
    """Parse a bill entry (number or text like '$1,200') and enforce the $50 floor."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = int(value) if math.isfinite(value) else 0
    else:
        digits = re.sub(r"[^0-9]", "", str(value or ""))
        number = int(digits) if digits else 0
    if not number:
        number = MIN_MONTHLY_BILL
    return max(MIN_MONTHLY_BILL, number)


def user_error_message(exc: BaseException) -> str:
    if isinstance(exc, ConfigurationError):
        return "Solar data service is not configured. Please try again later."
    if isinstance(exc, NotFoundError):
        return str(exc) or "Location not found. Please refine your search."
    if isinstance(exc, UpstreamError):
        if exc.is_network:
            return NETWORK_ERROR_MESSAGE
        return str(exc) or GENERIC_ERROR_MESSAGE
    return "An unexpected error occurred."


def neighbor_count(city_name: str, now: datetime) -> int:
    """
    'N neighbors checked today' counter.

    Same number for every visitor of a city at a given time: a daily baseline
    from a city+date hash, growing through the day.
    """
    date_str = f"{now.month}/{now.day}/{now.year}"
    base_hash = sum(ord(ch) for ch in city_name + date_str)
    baseline = 40 + (base_hash % 100)
    growth = now.hour * 3 + now.minute // 10
    return baseline + growth


# ---------------- Debounced recompute ----------------


class DebouncedValue:
    """
    Holds a settled value plus at most one pending one.

    `set` schedules a value to settle after `delay` seconds; a newer `set`
    replaces the pending value and restarts the window (last write wins).
    """

    def __init__(self, initial: Any, delay: float = DEBOUNCE_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.value = initial
        self.delay = delay
        self._clock = clock
        self._pending: Any = None
        self._deadline: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def set(self, value: Any) -> None:
        if value == self.value and not self.pending:
            return
        self._pending = value
        self._deadline = self._clock() + self.delay

    def remaining(self) -> float:
        if self._deadline is None:
            return 0.0
        return max(0.0, self._deadline - self._clock())

    def cancel(self) -> None:
        self._pending = None
        self._deadline = None

    def poll(self) -> bool:
        """Settle the pending value if its window has passed. True if the value changed."""
        if self._deadline is None or self._clock() < self._deadline:
            return False
        changed = self._pending != self.value
        self.value = self._pending
        self.cancel()
        return changed


class BillRecomputer:
    """
    Re-runs the savings projection when the bill input settles.

    Irradiance and rates come from the cached `inputs`; nothing here calls an
    external service.
    """

    def __init__(
        self,
        inputs: AdjustedLocationInputs,
        monthly_bill: Any,
        delay: float = DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.inputs = inputs
        self._bill = DebouncedValue(clamp_monthly_bill(monthly_bill), delay=delay, clock=clock)
        self.projection: SavingsProjection = project_for_location(inputs, self._bill.value)

    @property
    def monthly_bill(self) -> int:
        return self._bill.value

    @property
    def pending(self) -> bool:
        return self._bill.pending

    def remaining(self) -> float:
        return self._bill.remaining()

    def submit(self, monthly_bill: Any) -> None:
        self._bill.set(clamp_monthly_bill(monthly_bill))

    def poll(self) -> Optional[SavingsProjection]:
        """Return a fresh projection when the bill settled on a new value."""
        if not self._bill.poll():
            return None
        self.projection = project_for_location(self.inputs, self._bill.value)
        return self.projection

    def restore(self, monthly_bill: int, projection: Optional[SavingsProjection]) -> None:
        self._bill.cancel()
        self._bill.value = clamp_monthly_bill(monthly_bill)
        self.projection = projection or project_for_location(self.inputs, self._bill.value)


# ---------------- Session persistence ----------------


class SessionStore:
    """
    save/load/clear for the calculator snapshot, on top of any str->str mapping.

    The app hands in `st.session_state`; tests hand in a dict.
    """

    KEY = "sunscore_session"

    def __init__(self, backend: MutableMapping[str, Any]):
        self.backend = backend

    def save(self, snapshot: SessionSnapshot) -> None:
        self.backend[self.KEY] = json.dumps(snapshot.to_dict())

    def load(self) -> Optional[SessionSnapshot]:
        raw = self.backend.get(self.KEY)
        if not raw:
            return None
        try:
            return SessionSnapshot.from_dict(json.loads(raw))
        except (TypeError, ValueError, KeyError) as e:
            log.warning("Discarding unreadable session snapshot: %s", e)
            self.clear()
            return None

    def clear(self) -> None:
        if self.KEY in self.backend:
            del self.backend[self.KEY]

    def restore_for(self, city_slug: str) -> Optional[SessionSnapshot]:
        """One-time restore: returns the snapshot if it belongs to this city, and always clears it."""
        snapshot = self.load()
        if snapshot is None:
            return None
        self.clear()
        if snapshot.city_slug != city_slug:
            return None
        return snapshot
