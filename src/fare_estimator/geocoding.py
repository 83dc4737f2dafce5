"""Nominatim client: free text to candidate coordinates and back."""

from __future__ import annotations

import logging

import httpx

from .models import Coordinate, GeocodeCandidate

logger = logging.getLogger(__name__)

MAX_RESULTS = 5
FALLBACK_LABEL = "point on map"


class GeocodingClient:
    """Forward and reverse geocoding against a Nominatim-compatible service.

    Failures never propagate: ``search`` degrades to an empty list and
    ``reverse_geocode`` to :data:`FALLBACK_LABEL`.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        accept_language: str | None = None,
    ):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.accept_language = accept_language

    def _params(self, **params) -> dict:
        params["format"] = "json"
        if self.accept_language:
            params["accept-language"] = self.accept_language
        return params

    async def search(self, query: str) -> list[GeocodeCandidate]:
        logger.debug(f"Geocoding '{query}'")
        try:
            response = await self.http.get(
                f"{self.base_url}/search",
                params=self._params(q=query, limit=MAX_RESULTS),
            )
            response.raise_for_status()
            data = response.json()
            candidates = [
                GeocodeCandidate(
                    coordinate=Coordinate(lat=float(item["lat"]), lon=float(item["lon"])),
                    label=item.get("display_name") or query,
                    rank=rank,
                )
                for rank, item in enumerate(data[:MAX_RESULTS])
            ]
        except httpx.HTTPError as e:
            logger.error(f"Error geocoding '{query}': {e}")
            return []
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Error parsing geocoding response for '{query}': {e}")
            return []

        logger.info(f"Geocoding '{query}' returned {len(candidates)} candidate(s)")
        return candidates

    async def reverse_geocode(self, coordinate: Coordinate) -> str:
        try:
            response = await self.http.get(
                f"{self.base_url}/reverse",
                params=self._params(lat=coordinate.lat, lon=coordinate.lon),
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error reverse geocoding ({coordinate.lat}, {coordinate.lon}): {e}")
            return FALLBACK_LABEL
        except ValueError as e:
            logger.error(f"Error parsing reverse geocoding response: {e}")
            return FALLBACK_LABEL

        if isinstance(data, dict) and data.get("display_name"):
            return data["display_name"]
        return FALLBACK_LABEL
