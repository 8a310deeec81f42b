# variance.py
"""
Deterministic per-location adjustment factors.

The same slug always yields the same multipliers, so two visits to one city
page show identical numbers while neighbouring cities in the same state differ.
"""
from __future__ import annotations

from models import LocationVariance

COST_FLOOR = 0.92
COST_SPAN = 0.16  # +/- 8% around 1.0
RATE_FLOOR = 0.95
RATE_SPAN = 0.10  # +/- 5% around 1.0


def string_hash(text: str) -> int:
    """Order-sensitive polynomial hash (h*31 + code), wrapped to signed 32 bits."""
    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def variance_for(slug: str) -> LocationVariance:
    v = (string_hash(slug) % 100) / 100  # 0.00 .. 0.99

    # Cost and rate move in opposite directions
    return LocationVariance(
        cost_multiplier=COST_FLOOR + v * COST_SPAN,
        rate_multiplier=RATE_FLOOR + (1 - v) * RATE_SPAN,
    )
