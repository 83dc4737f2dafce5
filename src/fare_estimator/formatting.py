"""Presentation helpers for the result-display region."""

from .models import FareBreakdown, PricingMode


def format_currency(amount: float, symbol: str = "Rp") -> str:
    """Format like ``id-ID`` IDR with no decimals, e.g. ``Rp 110.000``."""
    rounded = round(amount)
    sign = "-" if rounded < 0 else ""
    grouped = f"{abs(rounded):,}".replace(",", ".")
    return f"{sign}{symbol} {grouped}"


def format_distance(km: float) -> str:
    return f"{km:.2f} km"


def format_duration(minutes: int) -> str:
    return f"{minutes} min"


def fare_lines(fare: FareBreakdown) -> list[str]:
    lines = [
        f"Distance: {format_distance(fare.distance_km)}",
        f"Estimated time: {format_duration(fare.duration_min)}",
    ]
    if fare.mode is PricingMode.ROUND_TRIP_WITH_BASE:
        lines += [
            f"Base fee: {format_currency(fare.base_fee)}",
            f"Distance fee ({format_distance(fare.billed_km)} round trip): "
            f"{format_currency(fare.distance_fee)}",
        ]
    lines.append(f"Estimated fare: {format_currency(fare.total)}")
    return lines
