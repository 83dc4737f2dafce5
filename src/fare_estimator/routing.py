"""OSRM client returning full-geometry driving routes."""

from __future__ import annotations

import logging

import httpx

from .models import Coordinate, Route

logger = logging.getLogger(__name__)


def _fmt_coords(coords: list[Coordinate]) -> str:
    # OSRM wants lon,lat
    return ";".join(f"{c.lon},{c.lat}" for c in coords)


class RoutingClient:
    def __init__(self, http: httpx.AsyncClient, base_url: str, profile: str = "driving"):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.profile = profile

    async def route(self, origin: Coordinate, destination: Coordinate) -> Route | None:
        """Fetch the first route from origin to destination, or None when there is none."""
        url = f"{self.base_url}/route/v1/{self.profile}/{_fmt_coords([origin, destination])}"
        params = {"overview": "full", "geometries": "geojson"}
        try:
            response = await self.http.get(url, params=params)
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error routing: {e}")
            return None
        except ValueError as e:
            logger.error(f"Error parsing routing response: {e}")
            return None

        if not isinstance(data, dict) or data.get("code") != "Ok" or not data.get("routes"):
            message = data.get("message", "Unknown error") if isinstance(data, dict) else data
            logger.warning(f"No route found: {message}")
            return None

        route = data["routes"][0]
        try:
            geometry = tuple(
                Coordinate(lat=lat, lon=lon) for lon, lat, *_ in route["geometry"]["coordinates"]
            )
            return Route(
                geometry=geometry,
                distance_m=float(route["distance"]),
                duration_s=float(route["duration"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed route in routing response: {e}")
            return None
