import pytest

from regional_rates import (
    FALLBACK_REGION,
    baseline_monthly_bill,
    electricity_rate,
    is_known_region,
    price_per_watt,
    regional_rates,
)


class TestLookups:
    def test_known_state(self):
        assert price_per_watt("AZ") == 2.79
        assert electricity_rate("CA") == 0.32
        assert baseline_monthly_bill("HI") == 205

    def test_code_is_normalized(self):
        assert price_per_watt(" az ") == price_per_watt("AZ")
        assert electricity_rate("tx") == electricity_rate("TX")

    @pytest.mark.parametrize("region", ["ZZ", "", None, "Arizona"])
    def test_unknown_region_falls_back_to_us_average(self, region):
        rates = regional_rates(region)
        assert rates.price_per_watt_usd == 3.00
        assert rates.electricity_rate_per_kwh_usd == 0.18
        assert rates.baseline_monthly_bill_usd == 137

    def test_tables_cover_dc_and_fifty_states(self):
        for code in ["DC", "AK", "WY", "NH"]:
            assert is_known_region(code)

    def test_fallback_row_is_not_a_region(self):
        assert not is_known_region(FALLBACK_REGION)
        assert not is_known_region("ZZ")
