# models.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class CityRecord:
    city: str
    city_ascii: str
    state_id: str
    state_name: str
    lat: float
    lng: float
    population: int = 0


@dataclass(frozen=True)
class RegionalRates:
    price_per_watt_usd: float
    electricity_rate_per_kwh_usd: float
    baseline_monthly_bill_usd: float


@dataclass(frozen=True)
class LocationVariance:
    cost_multiplier: float
    rate_multiplier: float


@dataclass(frozen=True)
class IrradianceResult:
    """Normalized PVWatts output for the fixed 6 kW system at one location."""

    annual_production_kwh: float
    peak_sun_hours: float
    station_distance_miles: float = 0.0
    monthly_production_kwh: Tuple[float, ...] = ()


@dataclass(frozen=True)
class AdjustedLocationInputs:
    """Irradiance plus region rates after climate scaling and local variance."""

    annual_production_kwh: float
    peak_sun_hours: float
    adjusted_baseline_bill_usd: float
    adjusted_electricity_rate: float
    adjusted_price_per_watt: float
    station_distance_miles: float = 0.0

    @property
    def default_monthly_bill(self) -> int:
        return int(self.adjusted_baseline_bill_usd + 0.5)


@dataclass(frozen=True)
class YearlyCost:
    year: int
    cumulative_utility_cost_usd: float
    flat_solar_cost_usd: float


@dataclass(frozen=True)
class SavingsProjection:
    annual_production_kwh: float
    system_cost_usd: float
    first_year_savings_usd: float
    twenty_five_year_savings_usd: float
    twenty_five_year_utility_cost_usd: float
    payback_years: float
    monthly_equivalent_payment_usd: int
    co2_offset_tons: int
    trees_equivalent: int
    sun_score: int
    peak_sun_hours: float
    bill_offset_percent: int
    home_value_increase_usd: float
    yearly_cost_series: Tuple[YearlyCost, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["yearly_cost_series"] = [asdict(row) for row in self.yearly_cost_series]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavingsProjection":
        values = dict(data)
        values["yearly_cost_series"] = tuple(
            YearlyCost(**row) for row in values.get("yearly_cost_series", [])
        )
        return cls(**values)


@dataclass(frozen=True)
class SessionSnapshot:
    """Calculator state kept across the trip to the quote page and back."""

    city_slug: str
    monthly_bill: int
    address: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    projection: Optional[SavingsProjection] = None
    has_interacted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["projection"] = self.projection.to_dict() if self.projection else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionSnapshot":
        values = dict(data)
        projection = values.get("projection")
        values["projection"] = SavingsProjection.from_dict(projection) if projection else None
        return cls(**values)


@dataclass(frozen=True)
class PlaceSuggestion:
    place_id: str
    description: str
    main_text: str = ""
    secondary_text: str = ""


@dataclass(frozen=True)
class PlaceDetails:
    lat: float
    lng: float
    formatted_address: str
    region_code: str = ""


@dataclass(frozen=True)
class GeneratedContent:
    title: str
    meta_description: str
    h1: str
    intro_content: str
    detailed_content: str
    from_fallback: bool = False


@dataclass(frozen=True)
class SavingsRange:
    low: int
    high: int

    @property
    def low_formatted(self) -> str:
        return f"{self.low:,}"

    @property
    def high_formatted(self) -> str:
        return f"{self.high:,}"
