"""Exception types raised inside an interaction pipeline."""


class FareEstimatorError(Exception):
    """Base class for failures surfaced to the user as a display message."""

    message = "Something went wrong."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class DestinationNotFound(FareEstimatorError):
    message = "destination not found"


class RouteUnavailable(FareEstimatorError):
    message = "route unavailable"


class GeolocationError(FareEstimatorError):
    message = "Could not get your location."


class GeolocationDenied(GeolocationError):
    message = "You denied location permission. Allow it in your browser settings."


class GeolocationUnavailable(GeolocationError):
    message = "Could not get your location."


class GeolocationUnsupported(GeolocationError):
    message = "Your browser does not support geolocation."


class InvalidTransition(RuntimeError):
    """Raised when an interaction attempts a state change the pipeline forbids."""


class SelectionUnavailable(FareEstimatorError):
    message = "That option is no longer available. Please search again."
