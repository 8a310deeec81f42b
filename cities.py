# cities.py
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from config import BUILD_TIME_CITY_LIMIT, CITIES_CSV
from errors import NotFoundError
from models import CityRecord

log = logging.getLogger(__name__)

STATE_NAMES: Dict[str, str] = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
    "CA": "California", "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware",
    "DC": "District of Columbia", "FL": "Florida", "GA": "Georgia", "HI": "Hawaii",
    "ID": "Idaho", "IL": "Illinois", "IN": "Indiana", "IA": "Iowa",
    "KS": "Kansas", "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine",
    "MD": "Maryland", "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota",
    "MS": "Mississippi", "MO": "Missouri", "MT": "Montana", "NE": "Nebraska",
    "NV": "Nevada", "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico",
    "NY": "New York", "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio",
    "OK": "Oklahoma", "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island",
    "SC": "South Carolina", "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas",
    "UT": "Utah", "VT": "Vermont", "VA": "Virginia", "WA": "Washington",
    "WV": "West Virginia", "WI": "Wisconsin", "WY": "Wyoming",
}

_SLUG_RE = re.compile(r"^(.+)-([a-z]{2})$", re.IGNORECASE)

REQUIRED_COLUMNS = ["city", "city_ascii", "state_id", "state_name", "lat", "lng", "population"]


def _slugify(name: str) -> str:
    name = re.sub(r"\s+", "-", name.lower())
    return re.sub(r"[^a-z0-9-]", "", name)


def city_slug(city: str, state_id: str) -> str:
    """'St. Louis', 'MO' -> 'st-louis-mo'"""
    return f"{_slugify(city)}-{state_id.lower()}"


def parse_slug(slug: str) -> Optional[Tuple[str, str]]:
    match = _SLUG_RE.match(slug or "")
    if not match:
        return None
    return match.group(1).lower(), match.group(2).upper()


class CityDirectory:
    """
    Read-only view over the US cities table.

    The CSV is parsed on first use and kept for the life of the process;
    rows are sorted by population, largest first.
    """

    def __init__(self, csv_path: Path | str = CITIES_CSV):
        self.csv_path = Path(csv_path)
        self._cities: Optional[List[CityRecord]] = None

    def _load(self) -> List[CityRecord]:
        if self._cities is not None:
            return self._cities

        log.info("Loading city dataset from %s", self.csv_path)
        df = pd.read_csv(self.csv_path, dtype=str, keep_default_na=False)
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"City dataset is missing column(s): {missing}")

        df["population"] = pd.to_numeric(df["population"], errors="coerce").fillna(0).astype(int)
        df["lat"] = pd.to_numeric(df["lat"], errors="coerce")
        df["lng"] = pd.to_numeric(df["lng"], errors="coerce")
        df = df.dropna(subset=["lat", "lng"])
        df = df.sort_values("population", ascending=False, kind="stable")

        self._cities = [
            CityRecord(
                city=row.city,
                city_ascii=row.city_ascii or row.city,
                state_id=row.state_id.upper(),
                state_name=row.state_name,
                lat=float(row.lat),
                lng=float(row.lng),
                population=int(row.population),
            )
            for row in df.itertuples(index=False)
        ]
        return self._cities

    def all(self) -> List[CityRecord]:
        return list(self._load())

    def top(self, limit: int = BUILD_TIME_CITY_LIMIT) -> List[CityRecord]:
        return self._load()[:limit]

    def by_slug(self, slug: str) -> CityRecord:
        parsed = parse_slug(slug)
        if parsed is None:
            raise NotFoundError(f"Unknown city: {slug!r}")
        city_part, state_id = parsed

        for city in self._load():
            if city.state_id == state_id and _slugify(city.city_ascii) == city_part:
                return city
        raise NotFoundError(f"Unknown city: {slug!r}")

    def by_state(self, state_id: str, limit: Optional[int] = None) -> List[CityRecord]:
        code = state_id.strip().upper()
        rows = [c for c in self._load() if c.state_id == code]
        return rows if limit is None else rows[:limit]

    def states(self) -> List[str]:
        return sorted({c.state_id for c in self._load()})

    @staticmethod
    def slug_for(city: CityRecord) -> str:
        return city_slug(city.city_ascii, city.state_id)
