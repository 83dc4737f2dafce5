"""Tests for the fare calculator and result formatting."""

import pytest
from pydantic import ValidationError

from fare_estimator import Coordinate, PricingConfig, PricingMode, Route, compute_fare
from fare_estimator.fare import round_half_up
from fare_estimator.formatting import fare_lines, format_currency


def _route(distance_m: float, duration_s: float = 600) -> Route:
    return Route(
        geometry=(Coordinate(lat=0, lon=0), Coordinate(lat=0.1, lon=0.1)),
        distance_m=distance_m,
        duration_s=duration_s,
    )


class TestRoundTripWithBase:
    def test_monas_scenario(self, round_trip_pricing):
        fare = compute_fare(_route(25000, 1800), round_trip_pricing)
        assert fare.distance_km == 25
        assert fare.billed_km == 50
        assert fare.distance_fee == 90000
        assert fare.subtotal == 110000
        assert fare.total == 110000
        assert fare.duration_min == 30

    @pytest.mark.parametrize("distance_m", [0, 1, 499, 1234, 7777, 25000, 98765.4, 250000])
    def test_total_is_multiple_of_rounding_unit(self, round_trip_pricing, distance_m):
        fare = compute_fare(_route(distance_m), round_trip_pricing)
        assert fare.total % round_trip_pricing.rounding_unit == 0
        assert fare.total >= round_trip_pricing.base_fee

    @pytest.mark.parametrize("base_fee, unit", [(0, 1000), (20000, 1000), (7500, 500), (3, 1)])
    def test_empty_route_never_below_base_fee(self, base_fee, unit):
        pricing = PricingConfig(base_fee=base_fee, per_km_rate=1800, rounding_unit=unit)
        assert compute_fare(_route(0), pricing).total >= base_fee

    def test_rounds_half_up(self):
        # 20000 + 2 * 0.25 km * 1000 = 20500 -> 21000
        pricing = PricingConfig(base_fee=20000, per_km_rate=1000, rounding_unit=1000)
        fare = compute_fare(_route(250), pricing)
        assert fare.subtotal == 20500
        assert fare.total == 21000

    def test_custom_rounding_unit(self):
        pricing = PricingConfig(base_fee=5000, per_km_rate=1800, rounding_unit=500)
        fare = compute_fare(_route(3100), pricing)
        # 5000 + 6.2 * 1800 = 16160 -> 16000
        assert fare.total == 16000


class TestOneWay:
    @pytest.mark.parametrize("distance_m", [0, 1000, 12345, 25000, 87654.3])
    def test_total_is_distance_times_rate(self, distance_m):
        pricing = PricingConfig(mode=PricingMode.ONE_WAY, per_km_rate=4000)
        fare = compute_fare(_route(distance_m), pricing)
        assert fare.total == pytest.approx(distance_m / 1000 * 4000)
        assert fare.base_fee == 0

    def test_ignores_base_fee_and_rounding(self):
        pricing = PricingConfig(mode=PricingMode.ONE_WAY, base_fee=20000, per_km_rate=4000)
        fare = compute_fare(_route(1234), pricing)
        assert fare.total == pytest.approx(4936)
        assert fare.billed_km == pytest.approx(1.234)


class TestDuration:
    @pytest.mark.parametrize(
        "seconds, minutes",
        [(0, 0), (29, 0), (30, 1), (89, 1), (90, 2), (1800, 30)],
    )
    def test_minutes_round_half_up(self, round_trip_pricing, seconds, minutes):
        assert compute_fare(_route(1000, seconds), round_trip_pricing).duration_min == minutes

    def test_round_half_up_negative(self):
        assert round_half_up(-2.5) == -3
        assert round_half_up(2.5) == 3


class TestPricingConfig:
    def test_rejects_base_fee_off_rounding_grid(self):
        with pytest.raises(ValidationError):
            PricingConfig(base_fee=20400, per_km_rate=1800, rounding_unit=1000)

    def test_one_way_accepts_any_base_fee(self):
        pricing = PricingConfig(mode=PricingMode.ONE_WAY, base_fee=20400, rounding_unit=1000)
        assert pricing.base_fee == 20400

    def test_rejects_negative_rate(self):
        with pytest.raises(ValidationError):
            PricingConfig(per_km_rate=-1)

    def test_rejects_zero_rounding_unit(self):
        with pytest.raises(ValidationError):
            PricingConfig(rounding_unit=0)

    def test_mode_from_string(self):
        assert PricingConfig(mode="one-way").mode is PricingMode.ONE_WAY


class TestFormatting:
    def test_currency(self):
        assert format_currency(110000) == "Rp 110.000"
        assert format_currency(4936.4) == "Rp 4.936"
        assert format_currency(0) == "Rp 0"

    def test_round_trip_lines(self, round_trip_pricing):
        lines = fare_lines(compute_fare(_route(25000, 1800), round_trip_pricing))
        assert lines[0] == "Distance: 25.00 km"
        assert lines[1] == "Estimated time: 30 min"
        assert "Base fee: Rp 20.000" in lines
        assert lines[-1] == "Estimated fare: Rp 110.000"

    def test_one_way_lines_have_no_base_fee(self):
        pricing = PricingConfig(mode=PricingMode.ONE_WAY, per_km_rate=4000)
        lines = fare_lines(compute_fare(_route(10000), pricing))
        assert not any(line.startswith("Base fee") for line in lines)
        assert lines[-1] == "Estimated fare: Rp 40.000"
