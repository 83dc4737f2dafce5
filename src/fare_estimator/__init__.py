"""Route-based fare estimator: geocode a destination, route to it and price the trip."""

from .fare import compute_fare
from .geocoding import GeocodingClient
from .models import (
    Coordinate,
    DisplayState,
    FareBreakdown,
    GeocodeCandidate,
    InteractionState,
    OverlayState,
    PricingConfig,
    PricingMode,
    Route,
)
from .orchestrator import InteractionOrchestrator
from .overlays import FoliumMap, OverlayManager
from .routing import RoutingClient
from .session import CandidateHandle, SearchSession

__all__ = [
    "CandidateHandle",
    "Coordinate",
    "DisplayState",
    "FareBreakdown",
    "FoliumMap",
    "GeocodeCandidate",
    "GeocodingClient",
    "InteractionOrchestrator",
    "InteractionState",
    "OverlayManager",
    "OverlayState",
    "PricingConfig",
    "PricingMode",
    "Route",
    "RoutingClient",
    "SearchSession",
    "compute_fare",
]
