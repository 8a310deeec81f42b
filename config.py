# config.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import streamlit as st

log = logging.getLogger(__name__)

# ---------------------------------
# Model constants
# ---------------------------------

SYSTEM_SIZE_WATTS = 6000
YEARS_ANALYZED = 25
UTILITY_INFLATION_RATE = 0.04

MIN_MONTHLY_BILL = 50
MAX_SLIDER_BILL = 1200

# Debounce window for the bill input (seconds)
DEBOUNCE_SECONDS = 0.3

# ---------------------------------
# External services
# ---------------------------------

IRRADIANCE_TIMEOUT_SECONDS = 15
IRRADIANCE_TTL_SECONDS = 30 * 24 * 60 * 60  # 30 days
CONTENT_TTL_SECONDS = 7 * 24 * 60 * 60  # 7 days
CONTENT_TIMEOUT_SECONDS = 8
PLACES_TIMEOUT_SECONDS = 10

# ---------------------------------
# Data
# ---------------------------------

DATA_DIR = Path(__file__).resolve().parent / "data"
CITIES_CSV = DATA_DIR / "uscities.csv"

# Number of featured cities on the home page (sorted by population)
BUILD_TIME_CITY_LIMIT = 50


def get_secret(name: str) -> Optional[str]:
    """
    Look up a credential: Streamlit secrets first, then the environment.

    st.secrets raises when no secrets.toml exists, so that lookup is guarded.
    """
    value = None
    try:
        value = st.secrets.get(name, None)
    except Exception:
        value = None
    if not value:
        value = os.getenv(name)
    return value or None


_logging_configured = False


def configure_logging(level: int = logging.INFO) -> None:
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _logging_configured = True
