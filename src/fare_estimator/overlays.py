"""Map widget abstraction and the manager that owns the route overlays."""

from __future__ import annotations

import html
import itertools
import logging
from dataclasses import dataclass, field
from typing import Protocol

import folium

from .models import Coordinate, OverlayState, Route

logger = logging.getLogger(__name__)

Bounds = tuple[Coordinate, Coordinate]

TILES = "OpenStreetMap"
ROUTE_COLOR = "blue"


class MapWidget(Protocol):
    """The primitives the overlay manager needs from a map."""

    def set_view(self, center: Coordinate, zoom: int) -> None: ...

    def add_marker(self, location: Coordinate, popup: str, open_popup: bool = False) -> str: ...

    def add_polyline(self, path: tuple[Coordinate, ...], color: str) -> str: ...

    def remove_layer(self, layer_id: str) -> None: ...

    def fit_bounds(self, bounds: Bounds) -> None: ...


@dataclass
class Layer:
    id: str
    kind: str
    path: tuple[Coordinate, ...]
    popup: str | None = None
    open_popup: bool = False
    color: str | None = None


@dataclass
class FoliumMap:
    """Layer registry rendered to Leaflet HTML through folium."""

    center: Coordinate
    zoom: int
    layers: dict[str, Layer] = field(default_factory=dict)
    bounds: Bounds | None = None
    _ids: itertools.count = field(default_factory=itertools.count, repr=False)

    def _next_id(self, kind: str) -> str:
        return f"{kind}-{next(self._ids)}"

    def set_view(self, center: Coordinate, zoom: int) -> None:
        self.center = center
        self.zoom = zoom
        self.bounds = None

    def add_marker(self, location: Coordinate, popup: str, open_popup: bool = False) -> str:
        layer = Layer(self._next_id("marker"), "marker", (location,), popup, open_popup)
        self.layers[layer.id] = layer
        return layer.id

    def add_polyline(self, path: tuple[Coordinate, ...], color: str) -> str:
        layer = Layer(self._next_id("polyline"), "polyline", tuple(path), color=color)
        self.layers[layer.id] = layer
        return layer.id

    def remove_layer(self, layer_id: str) -> None:
        self.layers.pop(layer_id, None)

    def fit_bounds(self, bounds: Bounds) -> None:
        self.bounds = bounds

    def build(self) -> folium.Map:
        """Return a folium map holding the current view and layers."""
        m = folium.Map(
            location=[self.center.lat, self.center.lon],
            zoom_start=self.zoom,
            tiles=TILES,
        )
        for layer in self.layers.values():
            points = [[c.lat, c.lon] for c in layer.path]
            if layer.kind == "marker":
                folium.Marker(
                    points[0],
                    popup=folium.Popup(layer.popup, show=layer.open_popup),
                ).add_to(m)
            else:
                folium.PolyLine(points, color=layer.color).add_to(m)

        if self.bounds is not None:
            south_west, north_east = self.bounds
            m.fit_bounds([[south_west.lat, south_west.lon], [north_east.lat, north_east.lon]])

        return m

    def render(self) -> str:
        """Return a standalone HTML document for the current view and layers."""
        return self.build().get_root().render()


def path_bounds(path: tuple[Coordinate, ...]) -> Bounds:
    lats = [c.lat for c in path]
    lons = [c.lon for c in path]
    return Coordinate(lat=min(lats), lon=min(lons)), Coordinate(lat=max(lats), lon=max(lons))


class OverlayManager:
    """Owns the start marker, end marker and route polyline on a map.

    ``show_route`` never suspends, so on a single event loop the removal of the
    old overlays and the addition of the new ones cannot interleave with
    another pipeline.
    """

    def __init__(self, map_widget: MapWidget):
        self.map = map_widget
        self.state = OverlayState()

    def show_route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        destination_label: str,
        route: Route,
    ) -> OverlayState:
        self.clear()

        path = route.geometry or (origin, destination)
        self.state = OverlayState(
            start_marker=self.map.add_marker(origin, "<b>From:</b> Your home"),
            end_marker=self.map.add_marker(
                destination,
                f"<b>To:</b> {html.escape(destination_label)}",
                open_popup=True,
            ),
            polyline=self.map.add_polyline(path, ROUTE_COLOR),
        )
        self.map.fit_bounds(path_bounds(path))
        logger.debug(f"Overlays replaced: {self.state}")
        return self.state

    def clear(self) -> None:
        for layer_id in (self.state.start_marker, self.state.end_marker, self.state.polyline):
            if layer_id is not None:
                self.map.remove_layer(layer_id)
        self.state = OverlayState()
