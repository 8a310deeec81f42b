# savings.py
"""
25-year savings projection for one fixed-size rooftop system.

Model assumptions (kept deliberately simple):
  - the system offsets the whole electric bill from year 1,
  - the utility bill grows with a flat inflation rate,
  - solar has one upfront cost and no recurring cost.

`project` is pure; the calculator page calls it on every settled bill change.
"""
from __future__ import annotations

import math

from config import SYSTEM_SIZE_WATTS, UTILITY_INFLATION_RATE, YEARS_ANALYZED
from errors import InvariantViolation
from models import AdjustedLocationInputs, SavingsProjection, YearlyCost

DEFAULT_PEAK_SUN_HOURS = 5.0
CO2_TONS_PER_KWH = 0.0007
TREES_PER_TON_CO2 = 16.5
HOME_VALUE_PER_KW = 4000


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _round_int(value: float) -> int:
    return int(round_half_up(value))


def sun_score(peak_sun_hours: float) -> int:
    """0-100 solar suitability score; bands are half-open [low, high)."""
    hrs = peak_sun_hours
    if hrs >= 5.5:
        return min(100, _round_int(90 + (hrs - 5.5) / 1.5 * 10))
    if hrs >= 5.0:
        return _round_int(80 + (hrs - 5.0) / 0.5 * 10)
    if hrs >= 4.5:
        return _round_int(70 + (hrs - 4.5) / 0.5 * 10)
    if hrs >= 4.0:
        return _round_int(60 + (hrs - 4.0) / 0.5 * 10)
    return max(40, _round_int(50 + (hrs - 3.5) / 0.5 * 10))


def yearly_cost_series(
    monthly_bill_usd: float,
    system_cost_usd: float,
    years: int = YEARS_ANALYZED,
    inflation: float = UTILITY_INFLATION_RATE,
) -> tuple[YearlyCost, ...]:
    annual_bill = monthly_bill_usd * 12
    rows = []
    cumulative = 0.0
    for year in range(years + 1):
        if year > 0:
            cumulative += annual_bill * (1 + inflation) ** (year - 1)
        rows.append(
            YearlyCost(
                year=year,
                cumulative_utility_cost_usd=cumulative,
                flat_solar_cost_usd=system_cost_usd,
            )
        )
    return tuple(rows)


def bill_offset_percent(annual_production_kwh: float, annual_bill_usd: float, rate_per_kwh: float) -> int:
    """Production as a share of the consumption implied by bill / rate, clamped to [0, 100]."""
    if annual_bill_usd <= 0 or rate_per_kwh <= 0:
        return 0
    yearly_consumption_kwh = annual_bill_usd / rate_per_kwh
    pct = _round_int(annual_production_kwh / yearly_consumption_kwh * 100)
    return max(0, min(100, pct))


def project(
    annual_production_kwh: float,
    peak_sun_hours: float,
    monthly_bill_usd: float,
    price_per_watt: float,
    electricity_rate_per_kwh: float,
    system_size_watts: int = SYSTEM_SIZE_WATTS,
    years_analyzed: int = YEARS_ANALYZED,
    utility_inflation_rate: float = UTILITY_INFLATION_RATE,
) -> SavingsProjection:
    if years_analyzed < 1:
        raise InvariantViolation(f"years_analyzed must be >= 1, got {years_analyzed}")

    sun_hours = peak_sun_hours or DEFAULT_PEAK_SUN_HOURS
    system_cost = system_size_watts * price_per_watt
    annual_bill = monthly_bill_usd * 12

    series = yearly_cost_series(monthly_bill_usd, system_cost, years_analyzed, utility_inflation_rate)
    utility_cost = series[-1].cumulative_utility_cost_usd

    # A zero bill should have been clamped by the caller; keep the page renderable.
    if annual_bill > 0:
        payback = round_half_up(system_cost / annual_bill, 1)
    else:
        payback = math.inf

    co2_tons = annual_production_kwh * CO2_TONS_PER_KWH * years_analyzed

    return SavingsProjection(
        annual_production_kwh=annual_production_kwh,
        system_cost_usd=system_cost,
        first_year_savings_usd=annual_bill,
        twenty_five_year_savings_usd=utility_cost - system_cost,
        twenty_five_year_utility_cost_usd=utility_cost,
        payback_years=payback,
        monthly_equivalent_payment_usd=_round_int(system_cost / (years_analyzed * 12)),
        co2_offset_tons=_round_int(co2_tons),
        trees_equivalent=_round_int(co2_tons * TREES_PER_TON_CO2),
        sun_score=sun_score(sun_hours),
        peak_sun_hours=sun_hours,
        bill_offset_percent=bill_offset_percent(annual_production_kwh, annual_bill, electricity_rate_per_kwh),
        home_value_increase_usd=(system_size_watts / 1000) * HOME_VALUE_PER_KW,
        yearly_cost_series=series,
    )


def project_for_location(inputs: AdjustedLocationInputs, monthly_bill_usd: float) -> SavingsProjection:
    """Run `project` with the adjusted inputs of one location."""
    return project(
        annual_production_kwh=inputs.annual_production_kwh,
        peak_sun_hours=inputs.peak_sun_hours,
        monthly_bill_usd=monthly_bill_usd,
        price_per_watt=inputs.adjusted_price_per_watt,
        electricity_rate_per_kwh=inputs.adjusted_electricity_rate,
    )
