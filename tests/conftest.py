import pytest

from models import AdjustedLocationInputs, CityRecord


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=False):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error
        self.text = "" if payload is None else str(payload)

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}", response=self)

    def json(self):
        if self.json_error:
            raise ValueError("No JSON object could be decoded")
        return self.payload


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def phoenix():
    return CityRecord(
        city="Phoenix",
        city_ascii="Phoenix",
        state_id="AZ",
        state_name="Arizona",
        lat=33.5722,
        lng=-112.0892,
        population=4047095,
    )


@pytest.fixture
def us_avg_inputs():
    """US-average rates, 5.0 peak sun hours, 9000 kWh/yr, no local variance."""
    return AdjustedLocationInputs(
        annual_production_kwh=9000,
        peak_sun_hours=5.0,
        adjusted_baseline_bill_usd=150,
        adjusted_electricity_rate=0.18,
        adjusted_price_per_watt=3.00,
    )


@pytest.fixture
def pvwatts_payload():
    return {
        "inputs": {"system_capacity": "6"},
        "outputs": {
            "ac_annual": 10250.4,
            "solrad_annual": 6.12,
            "ac_monthly": [700.1, 760.2, 900.3, 950.4, 1000.5, 980.6, 930.7, 920.8, 880.9, 820.0, 720.1, 680.2],
        },
        "station_info": {"distance": 10, "city": "PHOENIX", "state": "AZ"},
    }
