# irradiance.py
"""
Turn a PVWatts answer plus a state code into location-specific inputs for the
savings engine.

Steps:
  1. Normalize the raw payload (annual AC output, solar radiation, station distance).
  2. Scale the state's typical bill by a climate factor: sunnier places run more
     A/C, so the bill is blended 50/50 between the raw state average and a
     sun-ratio-scaled one.
  3. Apply the per-location variance to bill, rate and price per watt.
"""
from __future__ import annotations

import math
from typing import Any, Mapping, Union

from errors import UpstreamError
from models import AdjustedLocationInputs, IrradianceResult, LocationVariance
from regional_rates import regional_rates
from variance import variance_for

NATIONAL_AVG_SUN_HOURS = 4.5
CLIMATE_WEIGHT = 0.5
DEFAULT_PEAK_SUN_HOURS = 5.0
KM_TO_MILES = 0.621371


def _as_float(value: Any) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def irradiance_from_response(raw: Mapping[str, Any]) -> IrradianceResult:
    """
    Normalize a PVWatts v8 payload.

    Raises UpstreamError when there is no usable annual production figure;
    financial math never runs on a made-up production number.
    """
    outputs = (raw or {}).get("outputs") or {}
    ac_annual = _as_float(outputs.get("ac_annual"))
    if ac_annual is None or ac_annual <= 0:
        raise UpstreamError("Invalid solar data received.")

    peak_sun_hours = _as_float(outputs.get("solrad_annual")) or DEFAULT_PEAK_SUN_HOURS

    station = raw.get("station_info") or {}
    distance_km = _as_float(station.get("distance")) or 0.0
    distance_miles = round(distance_km * KM_TO_MILES, 1)

    # Keep the monthly series only when all twelve months are usable
    raw_monthly = outputs.get("ac_monthly")
    monthly_values = [_as_float(x) for x in raw_monthly] if isinstance(raw_monthly, list) else []
    if len(monthly_values) == 12 and all(x is not None for x in monthly_values):
        monthly = tuple(monthly_values)
    else:
        monthly = ()

    return IrradianceResult(
        annual_production_kwh=ac_annual,
        peak_sun_hours=peak_sun_hours,
        station_distance_miles=distance_miles,
        monthly_production_kwh=monthly,
    )


def climate_multiplier(peak_sun_hours: float) -> float:
    sun_ratio = peak_sun_hours / NATIONAL_AVG_SUN_HOURS
    return 1 + (sun_ratio - 1) * CLIMATE_WEIGHT


def adapt(
    raw: Union[Mapping[str, Any], IrradianceResult],
    region: str | None,
    location_slug: str = "",
) -> AdjustedLocationInputs:
    if isinstance(raw, IrradianceResult):
        irradiance = raw
    else:
        irradiance = irradiance_from_response(raw)

    peak_sun_hours = irradiance.peak_sun_hours or DEFAULT_PEAK_SUN_HOURS
    rates = regional_rates(region)

    bill = rates.baseline_monthly_bill_usd * climate_multiplier(peak_sun_hours)

    if location_slug:
        v = variance_for(location_slug)
    else:
        v = LocationVariance(cost_multiplier=1.0, rate_multiplier=1.0)

    return AdjustedLocationInputs(
        annual_production_kwh=irradiance.annual_production_kwh,
        peak_sun_hours=peak_sun_hours,
        adjusted_baseline_bill_usd=bill * v.rate_multiplier,
        adjusted_electricity_rate=rates.electricity_rate_per_kwh_usd * v.rate_multiplier,
        adjusted_price_per_watt=rates.price_per_watt_usd * v.cost_multiplier,
        station_distance_miles=irradiance.station_distance_miles,
    )
