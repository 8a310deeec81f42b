from datetime import datetime

import pytest

from errors import ConfigurationError, NotFoundError, UpstreamError, UpstreamTimeoutError
from models import SessionSnapshot
from presentation import (
    GENERIC_ERROR_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    BillRecomputer,
    DebouncedValue,
    SessionStore,
    clamp_monthly_bill,
    format_currency,
    format_number,
    format_phone_number,
    format_years,
    neighbor_count,
    user_error_message,
)
from savings import project_for_location


class TestFormatting:
    def test_currency(self):
        assert format_currency(18000) == "$18,000"
        assert format_currency(56962.63) == "$56,963"
        assert format_currency(-1234.5) == "-$1,235"
        assert format_currency(0) == "$0"
        assert format_currency(float("inf")) == "N/A"

    def test_number(self):
        assert format_number(2887.5) == "2,888"
        assert format_number(12) == "12"

    def test_years(self):
        assert format_years(10.0) == "10.0 yrs"
        assert format_years(float("inf")) == "N/A"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("", ""),
            ("5", "(5"),
            ("555", "(555"),
            ("55512", "(555) 12"),
            ("5551234567", "(555) 123-4567"),
            ("(555) 123-45678", "(555) 123-4567"),
            ("abc", ""),
        ],
    )
    def test_phone(self, raw, expected):
        assert format_phone_number(raw) == expected


class TestClampMonthlyBill:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (150, 150),
            (75.9, 75),
            ("$1,200", 1200),
            ("20", 50),
            (0, 50),
            ("", 50),
            (None, 50),
            (float("nan"), 50),
        ],
    )
    def test_clamp(self, raw, expected):
        assert clamp_monthly_bill(raw) == expected


class TestUserErrorMessage:
    def test_network(self):
        assert user_error_message(UpstreamTimeoutError("timed out")) == NETWORK_ERROR_MESSAGE
        assert user_error_message(UpstreamError("refused", is_network=True)) == NETWORK_ERROR_MESSAGE

    def test_upstream_message_passes_through(self):
        assert user_error_message(UpstreamError("Invalid solar data received.")) == "Invalid solar data received."
        assert user_error_message(UpstreamError("")) == GENERIC_ERROR_MESSAGE

    def test_not_found_and_config(self):
        assert user_error_message(NotFoundError("Address not found.")) == "Address not found."
        assert "not configured" in user_error_message(ConfigurationError("no key"))

    def test_unexpected(self):
        assert user_error_message(RuntimeError("boom")) == "An unexpected error occurred."


class TestNeighborCount:
    def test_stable_within_a_minute(self):
        now = datetime(2026, 3, 14, 9, 30)
        assert neighbor_count("Phoenix", now) == neighbor_count("Phoenix", now.replace(second=59))

    def test_baseline_range(self):
        assert 40 <= neighbor_count("Phoenix", datetime(2026, 3, 14)) < 140

    def test_grows_through_the_day(self):
        start = neighbor_count("Phoenix", datetime(2026, 3, 14, 0, 0))
        later = neighbor_count("Phoenix", datetime(2026, 3, 14, 10, 25))
        assert later - start == 10 * 3 + 2


class TestDebouncedValue:
    def test_settles_after_delay(self, clock):
        d = DebouncedValue(100, delay=0.3, clock=clock)
        d.set(120)
        assert d.pending
        assert d.remaining() == pytest.approx(0.3)
        assert not d.poll()
        clock.advance(0.5)
        assert d.poll()
        assert d.value == 120
        assert not d.pending

    def test_last_write_wins(self, clock):
        d = DebouncedValue(100, delay=0.3, clock=clock)
        d.set(120)
        clock.advance(0.2)
        d.set(130)
        clock.advance(0.2)
        assert not d.poll()
        assert d.value == 100
        clock.advance(0.2)
        assert d.poll()
        assert d.value == 130

    def test_same_value_is_a_no_op(self, clock):
        d = DebouncedValue(100, delay=0.3, clock=clock)
        d.set(100)
        assert not d.pending

    def test_reverting_before_settle(self, clock):
        d = DebouncedValue(100, delay=0.3, clock=clock)
        d.set(120)
        d.set(100)
        clock.advance(1)
        assert not d.poll()
        assert d.value == 100
        assert not d.pending


class TestBillRecomputer:
    def test_initial_projection(self, us_avg_inputs, clock):
        r = BillRecomputer(us_avg_inputs, 150, clock=clock)
        assert r.monthly_bill == 150
        assert r.projection.first_year_savings_usd == 1800

    def test_recompute_after_settle(self, us_avg_inputs, clock):
        r = BillRecomputer(us_avg_inputs, 150, delay=0.3, clock=clock)
        r.submit("$200")
        assert r.pending
        assert r.poll() is None
        assert r.projection.first_year_savings_usd == 1800

        clock.advance(0.5)
        fresh = r.poll()
        assert fresh is not None
        assert fresh.first_year_savings_usd == 2400
        assert r.monthly_bill == 200

    def test_low_input_is_clamped(self, us_avg_inputs, clock):
        r = BillRecomputer(us_avg_inputs, 150, delay=0.3, clock=clock)
        r.submit("10")
        clock.advance(1)
        r.poll()
        assert r.monthly_bill == 50

    def test_restore(self, us_avg_inputs, clock):
        r = BillRecomputer(us_avg_inputs, 150, delay=0.3, clock=clock)
        r.submit(400)
        saved = project_for_location(us_avg_inputs, 275)
        r.restore(275, saved)
        assert r.monthly_bill == 275
        assert r.projection is saved
        assert not r.pending

    def test_restore_without_projection_recomputes(self, us_avg_inputs, clock):
        r = BillRecomputer(us_avg_inputs, 150, clock=clock)
        r.restore(300, None)
        assert r.projection.first_year_savings_usd == 3600


class TestSessionStore:
    def _snapshot(self, inputs, slug="phoenix-az"):
        return SessionSnapshot(
            city_slug=slug,
            monthly_bill=220,
            address="123 Main St, Phoenix, AZ",
            lat=33.57,
            lng=-112.09,
            projection=project_for_location(inputs, 220),
            has_interacted=True,
        )

    def test_save_and_load(self, us_avg_inputs):
        backend = {}
        store = SessionStore(backend)
        snapshot = self._snapshot(us_avg_inputs)
        store.save(snapshot)
        assert isinstance(backend[SessionStore.KEY], str)
        assert store.load() == snapshot

    def test_load_empty(self):
        assert SessionStore({}).load() is None

    def test_restore_for_matching_city_is_one_time(self, us_avg_inputs):
        store = SessionStore({})
        snapshot = self._snapshot(us_avg_inputs)
        store.save(snapshot)
        assert store.restore_for("phoenix-az") == snapshot
        assert store.restore_for("phoenix-az") is None

    def test_restore_for_other_city_discards(self, us_avg_inputs):
        backend = {}
        store = SessionStore(backend)
        store.save(self._snapshot(us_avg_inputs))
        assert store.restore_for("tucson-az") is None
        assert SessionStore.KEY not in backend

    def test_unreadable_snapshot_is_cleared(self):
        backend = {SessionStore.KEY: "{not json"}
        assert SessionStore(backend).load() is None
        assert backend == {}

    def test_clear_when_empty(self):
        SessionStore({}).clear()
