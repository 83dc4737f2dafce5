"""Device geolocation as an awaitable single-result operation."""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from .errors import GeolocationDenied, GeolocationUnavailable, GeolocationUnsupported
from .models import Coordinate


class GeolocationProvider(Protocol):
    async def locate(self) -> Coordinate:
        """Return the device position or raise a GeolocationError."""
        ...


class GeolocationFailure(str, Enum):
    # Mirrors the browser's GeolocationPositionError codes, plus a missing API
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"


class ReportedGeolocation:
    """A position (or failure) already reported by the browser."""

    def __init__(
        self,
        position: Coordinate | None = None,
        failure: GeolocationFailure | None = None,
    ):
        if (position is None) == (failure is None):
            raise ValueError("Exactly one of position or failure is required")
        self.position = position
        self.failure = failure

    async def locate(self) -> Coordinate:
        if self.failure is GeolocationFailure.PERMISSION_DENIED:
            raise GeolocationDenied()
        if self.failure is GeolocationFailure.UNSUPPORTED:
            raise GeolocationUnsupported()
        if self.failure is not None:
            raise GeolocationUnavailable()
        return self.position
