# regional_rates.py
"""
State-level reference tables: installed solar price, residential electricity
rate and a typical monthly electric bill.

Every lookup is total: unknown or blank codes fall back to the US_AVG row.
"""
from __future__ import annotations

from typing import Dict, Optional

from models import RegionalRates

FALLBACK_REGION = "US_AVG"

# Average installed price per watt (USD/W), 2025/2026 estimates
PRICE_PER_WATT: Dict[str, float] = {
    "AL": 3.42, "AK": 3.52, "AZ": 2.79, "AR": 2.63,
    "CA": 3.33, "CO": 3.41, "CT": 2.93, "DE": 2.94,
    "DC": 3.53, "FL": 2.61, "GA": 3.17, "HI": 3.13,
    "ID": 3.08, "IL": 3.14, "IN": 3.14, "IA": 2.77,
    "KS": 2.97, "KY": 2.74, "LA": 3.37, "ME": 3.10,
    "MD": 2.91, "MA": 3.12, "MI": 3.44, "MN": 2.96,
    "MS": 3.14, "MO": 2.68, "MT": 2.91, "NE": 2.79,
    "NV": 2.85, "NH": 2.97, "NJ": 3.12, "NM": 3.12,
    "NY": 3.33, "NC": 3.10, "ND": 3.13, "OH": 2.90,
    "OK": 2.64, "OR": 3.18, "PA": 3.10, "RI": 3.04,
    "SC": 3.06, "SD": 2.78, "TN": 2.97, "TX": 2.85,
    "UT": 3.19, "VT": 2.79, "VA": 3.05, "WA": 3.20,
    "WV": 2.83, "WI": 3.01, "WY": 3.18,
    FALLBACK_REGION: 3.00,
}

# Average residential electricity price (USD/kWh), EIA 2024/2025
ELECTRICITY_RATE: Dict[str, float] = {
    "AL": 0.16, "AK": 0.26, "AZ": 0.15, "AR": 0.13,
    "CA": 0.32, "CO": 0.16, "CT": 0.29, "DE": 0.17,
    "DC": 0.19, "FL": 0.15, "GA": 0.15, "HI": 0.42,
    "ID": 0.12, "IL": 0.18, "IN": 0.17, "IA": 0.14,
    "KS": 0.15, "KY": 0.13, "LA": 0.12, "ME": 0.28,
    "MD": 0.19, "MA": 0.31, "MI": 0.20, "MN": 0.16,
    "MS": 0.14, "MO": 0.13, "MT": 0.14, "NE": 0.12,
    "NV": 0.16, "NH": 0.26, "NJ": 0.21, "NM": 0.15,
    "NY": 0.25, "NC": 0.15, "ND": 0.12, "OH": 0.17,
    "OK": 0.14, "OR": 0.15, "PA": 0.19, "RI": 0.30,
    "SC": 0.15, "SD": 0.14, "TN": 0.13, "TX": 0.15,
    "UT": 0.12, "VT": 0.22, "VA": 0.15, "WA": 0.13,
    "WV": 0.16, "WI": 0.18, "WY": 0.14,
    FALLBACK_REGION: 0.18,
}

# Average residential monthly bill (USD), EIA sales & revenue data
BASELINE_MONTHLY_BILL: Dict[str, float] = {
    "AL": 163, "AK": 144, "AZ": 153, "AR": 131,
    "CA": 143, "CO": 99, "CT": 170, "DE": 144,
    "DC": 102, "FL": 159, "GA": 152, "HI": 205,
    "ID": 110, "IL": 114, "IN": 138, "IA": 127,
    "KS": 129, "KY": 133, "LA": 143, "ME": 127,
    "MD": 150, "MA": 168, "MI": 118, "MN": 115,
    "MS": 148, "MO": 135, "MT": 108, "NE": 120,
    "NV": 132, "NH": 146, "NJ": 122, "NM": 86,
    "NY": 125, "NC": 144, "ND": 131, "OH": 132,
    "OK": 139, "OR": 115, "PA": 134, "RI": 141,
    "SC": 155, "SD": 132, "TN": 145, "TX": 158,
    "UT": 94, "VT": 110, "VA": 148, "WA": 110,
    "WV": 140, "WI": 116, "WY": 106,
    FALLBACK_REGION: 137,
}


def _normalize(region: Optional[str]) -> str:
    return (region or "").strip().upper()


def _lookup(table: Dict[str, float], region: Optional[str]) -> float:
    return table.get(_normalize(region), table[FALLBACK_REGION])


def price_per_watt(region: Optional[str]) -> float:
    return _lookup(PRICE_PER_WATT, region)


def electricity_rate(region: Optional[str]) -> float:
    return _lookup(ELECTRICITY_RATE, region)


def baseline_monthly_bill(region: Optional[str]) -> float:
    return _lookup(BASELINE_MONTHLY_BILL, region)


def regional_rates(region: Optional[str]) -> RegionalRates:
    return RegionalRates(
        price_per_watt_usd=price_per_watt(region),
        electricity_rate_per_kwh_usd=electricity_rate(region),
        baseline_monthly_bill_usd=baseline_monthly_bill(region),
    )


def is_known_region(region: Optional[str]) -> bool:
    code = _normalize(region)
    return code != FALLBACK_REGION and code in PRICE_PER_WATT
