import httpx
import pytest

from fare_estimator import (
    Coordinate,
    FoliumMap,
    GeocodingClient,
    InteractionOrchestrator,
    OverlayManager,
    PricingConfig,
    PricingMode,
    RoutingClient,
)

NOMINATIM = "http://nominatim.test"
OSRM = "http://osrm.test"

HOME = Coordinate(lat=-6.2425, lon=107.0719)
MONAS = Coordinate(lat=-6.1754, lon=106.8272)

JAKARTA_PLACES = [
    {"lat": "-6.1753942", "lon": "106.827183", "display_name": "Jakarta, Indonesia"},
    {"lat": "-6.2297465", "lon": "106.829518", "display_name": "South Jakarta, Jakarta"},
    {"lat": "-6.1352", "lon": "106.8133", "display_name": "North Jakarta, Jakarta"},
]


def nominatim_place(coord: Coordinate, name: str) -> dict:
    # Nominatim returns coordinates as strings
    return {"lat": str(coord.lat), "lon": str(coord.lon), "display_name": name}


def osrm_route(origin: Coordinate, destination: Coordinate, distance: float, duration: float) -> dict:
    mid = [(origin.lon + destination.lon) / 2, (origin.lat + destination.lat) / 2]
    return {
        "code": "Ok",
        "routes": [
            {
                "distance": distance,
                "duration": duration,
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[origin.lon, origin.lat], mid, [destination.lon, destination.lat]],
                },
            }
        ],
    }


class FakeBackend:
    """In-process stand-in for Nominatim and OSRM."""

    def __init__(self):
        self.places: dict[str, list[dict]] = {
            "Monas": [nominatim_place(MONAS, "Monumen Nasional, Jakarta")],
            "Jakarta": JAKARTA_PLACES,
        }
        self.reverse_label: str | None = "Jalan Medan Merdeka, Jakarta"
        self.route_distance = 25000.0
        self.route_duration = 1800.0
        self.route_code = "Ok"
        self.down: set[str] = set()
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/search":
            if "search" in self.down:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=self.places.get(request.url.params["q"], []))
        if path == "/reverse":
            if "reverse" in self.down:
                raise httpx.ConnectError("connection refused", request=request)
            if self.reverse_label is None:
                return httpx.Response(200, json={"error": "Unable to geocode"})
            return httpx.Response(200, json={"display_name": self.reverse_label})
        if path.startswith("/route/v1/driving/"):
            if "route" in self.down:
                raise httpx.ConnectError("connection refused", request=request)
            if self.route_code != "Ok":
                return httpx.Response(400, json={"code": self.route_code, "message": "Impossible route"})
            (olon, olat), (dlon, dlat) = [
                map(float, pair.split(",")) for pair in path.rsplit("/", 1)[1].split(";")
            ]
            body = osrm_route(
                Coordinate(lat=olat, lon=olon),
                Coordinate(lat=dlat, lon=dlon),
                self.route_distance,
                self.route_duration,
            )
            return httpx.Response(200, json=body)
        return httpx.Response(404)

    def calls(self, path_prefix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith(path_prefix)]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def http(backend):
    return httpx.AsyncClient(transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def geocoder(http):
    return GeocodingClient(http, NOMINATIM)


@pytest.fixture
def router(http):
    return RoutingClient(http, OSRM)


@pytest.fixture
def map_widget():
    return FoliumMap(center=Coordinate(lat=-6.2088, lon=106.8456), zoom=10)


@pytest.fixture
def round_trip_pricing():
    return PricingConfig(
        mode=PricingMode.ROUND_TRIP_WITH_BASE, base_fee=20000, per_km_rate=1800, rounding_unit=1000
    )


@pytest.fixture
def orchestrator(geocoder, router, map_widget, round_trip_pricing):
    return InteractionOrchestrator(
        origin=HOME,
        geocoder=geocoder,
        router=router,
        overlays=OverlayManager(map_widget),
        pricing=round_trip_pricing,
    )
