"""Fare computation from a route distance."""

import math

from .models import FareBreakdown, PricingConfig, PricingMode, Route


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def compute_fare(route: Route, pricing: PricingConfig) -> FareBreakdown:
    """Price a route under the given billing policy.

    ``one-way`` bills the one-way distance with no base fee and no rounding.
    ``round-trip-with-base`` bills twice the distance plus the base fee and
    rounds the total to the nearest ``rounding_unit``.
    """
    distance_km = route.distance_m / 1000
    duration_min = round_half_up(route.duration_s / 60)

    if pricing.mode is PricingMode.ONE_WAY:
        distance_fee = distance_km * pricing.per_km_rate
        return FareBreakdown(
            mode=pricing.mode,
            base_fee=0.0,
            distance_fee=distance_fee,
            subtotal=distance_fee,
            total=distance_fee,
            distance_km=distance_km,
            billed_km=distance_km,
            duration_min=duration_min,
        )

    billed_km = distance_km * 2
    distance_fee = billed_km * pricing.per_km_rate
    subtotal = pricing.base_fee + distance_fee
    total = round_half_up(subtotal / pricing.rounding_unit) * pricing.rounding_unit

    return FareBreakdown(
        mode=pricing.mode,
        base_fee=pricing.base_fee,
        distance_fee=distance_fee,
        subtotal=subtotal,
        total=total,
        distance_km=distance_km,
        billed_km=billed_km,
        duration_min=duration_min,
    )
