"""FastAPI server exposing the fare estimator's interactions."""

from __future__ import annotations

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, model_validator

from .config import Settings, configure_logging
from .geocoding import GeocodingClient
from .geolocation import GeolocationFailure, ReportedGeolocation
from .models import Coordinate, DisplayState, OverlayState
from .orchestrator import InteractionOrchestrator
from .overlays import FoliumMap, OverlayManager
from .page import render_page
from .routing import RoutingClient


class SearchRequest(BaseModel):
    query: str


class SelectRequest(BaseModel):
    index: int | None = None
    handle: str | None = None


class LocateRequest(BaseModel):
    lat: float | None = None
    lon: float | None = None
    error: GeolocationFailure | None = None

    @model_validator(mode="after")
    def _position_or_error(self):
        has_position = self.lat is not None and self.lon is not None
        if has_position == (self.error is not None):
            raise ValueError("Provide either lat/lon or error")
        return self


def create_app(
    settings: Settings | None = None,
    *,
    geocoder: GeocodingClient | None = None,
    router: RoutingClient | None = None,
    map_widget: FoliumMap | None = None,
) -> FastAPI:
    """Build the app. Collaborators not passed in are created from ``settings``."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    # Shared by whichever remote clients are built here; None when both were injected
    http = None
    if geocoder is None or router is None:
        headers = {"User-Agent": settings.user_agent}
        http = httpx.AsyncClient(timeout=settings.request_timeout, headers=headers)
    geocoder = geocoder or GeocodingClient(http, settings.nominatim_url, settings.accept_language)
    router = router or RoutingClient(http, settings.osrm_url)
    map_widget = map_widget or FoliumMap(center=settings.map_center, zoom=settings.map_zoom)

    orchestrator = InteractionOrchestrator(
        origin=settings.home,
        geocoder=geocoder,
        router=router,
        overlays=OverlayManager(map_widget),
        pricing=settings.pricing,
        latest_only=settings.latest_only,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if http is not None:
            await http.aclose()

    app = FastAPI(title="Fare Estimator", version="0.1.0", lifespan=lifespan)
    app.state.orchestrator = orchestrator
    app.state.map = map_widget
    app.state.http = http

    @app.get("/", response_class=HTMLResponse)
    async def show_map():
        """Render the map, the current route overlays and the input controls."""
        return render_page(map_widget)

    @app.get("/result")
    async def current_result() -> DisplayState:
        return orchestrator.display

    @app.get("/overlays")
    async def current_overlays() -> OverlayState:
        return orchestrator.overlays.state

    @app.post("/search")
    async def search(body: SearchRequest) -> DisplayState:
        return await orchestrator.search(body.query)

    @app.post("/select")
    async def select(body: SelectRequest) -> DisplayState:
        if body.handle is not None:
            return await orchestrator.select(body.handle)
        if body.index is not None:
            return await orchestrator.select(body.index)
        raise HTTPException(status_code=400, detail="Missing index or handle")

    @app.post("/click")
    async def click(point: Coordinate) -> DisplayState:
        """Route to a point clicked on the map."""
        return await orchestrator.click(point)

    @app.post("/locate")
    async def locate(body: LocateRequest) -> DisplayState:
        if body.error is not None:
            provider = ReportedGeolocation(failure=body.error)
        else:
            provider = ReportedGeolocation(position=Coordinate(lat=body.lat, lon=body.lon))
        return await orchestrator.locate(provider)

    return app


app = create_app()
