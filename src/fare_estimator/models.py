"""Pydantic data models for the fare estimator."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Coordinate(BaseModel):
    """A WGS84 point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class GeocodeCandidate(BaseModel):
    """One match returned by a forward geocoding search."""

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    label: str
    rank: int


class Route(BaseModel):
    """A driving route between two points."""

    model_config = ConfigDict(frozen=True)

    geometry: tuple[Coordinate, ...]
    distance_m: float = Field(ge=0)
    duration_s: float = Field(ge=0)


class PricingMode(str, Enum):
    ONE_WAY = "one-way"
    ROUND_TRIP_WITH_BASE = "round-trip-with-base"


class PricingConfig(BaseModel):
    """Billing policy applied to a route distance."""

    model_config = ConfigDict(frozen=True)

    mode: PricingMode = PricingMode.ROUND_TRIP_WITH_BASE
    base_fee: float = Field(default=20000, ge=0)
    per_km_rate: float = Field(default=1800, ge=0)
    rounding_unit: float = Field(default=1000, gt=0)

    @model_validator(mode="after")
    def _base_fee_on_rounding_grid(self):
        # Rounding a subtotal to the unit must never drop it below the base fee
        if self.mode is PricingMode.ROUND_TRIP_WITH_BASE and self.base_fee % self.rounding_unit:
            raise ValueError("base_fee must be a multiple of rounding_unit")
        return self


class FareBreakdown(BaseModel):
    """Itemized price for a single route."""

    mode: PricingMode
    base_fee: float
    distance_fee: float
    subtotal: float
    total: float
    distance_km: float
    billed_km: float
    duration_min: int


class OverlayState(BaseModel):
    """Layer ids of the overlays currently on the map."""

    start_marker: str | None = None
    end_marker: str | None = None
    polyline: str | None = None


class InteractionState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    ROUTING = "routing"
    READY = "ready"
    ERROR = "error"


class DisplayOption(BaseModel):
    """A selectable entry in the disambiguation list."""

    index: int
    label: str
    handle: str


class DisplayState(BaseModel):
    """Contents of the result-display region."""

    kind: Literal["text", "options"] = "text"
    message: str = ""
    lines: list[str] = []
    options: list[DisplayOption] = []
    fare: FareBreakdown | None = None
    destination_input: str = ""
    state: InteractionState = InteractionState.IDLE
