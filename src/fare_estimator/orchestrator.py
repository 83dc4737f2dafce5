"""Drives each user interaction through resolve -> route -> fare -> display."""

from __future__ import annotations

import logging

from .errors import (
    DestinationNotFound,
    FareEstimatorError,
    InvalidTransition,
    RouteUnavailable,
    SelectionUnavailable,
)
from .fare import compute_fare
from .formatting import fare_lines
from .geocoding import GeocodingClient
from .geolocation import GeolocationProvider
from .models import (
    Coordinate,
    DisplayOption,
    DisplayState,
    InteractionState,
    PricingConfig,
)
from .overlays import OverlayManager
from .routing import RoutingClient
from .session import CandidateHandle, SearchSession

logger = logging.getLogger(__name__)

EMPTY_QUERY_MESSAGE = "Please enter a destination in the search box."
SEARCHING_MESSAGE = "Searching for location..."
CHOOSE_MESSAGE = "Multiple locations found. Choose one:"
REVERSE_MESSAGE = "Looking up address..."
LOCATING_MESSAGE = "Requesting your location..."
ROUTING_MESSAGE = "Calculating route..."

_TRANSITIONS = {
    InteractionState.IDLE: {InteractionState.RESOLVING},
    InteractionState.RESOLVING: {InteractionState.ROUTING, InteractionState.ERROR},
    InteractionState.ROUTING: {InteractionState.READY, InteractionState.ERROR},
    InteractionState.READY: set(),
    InteractionState.ERROR: set(),
}


class Interaction:
    """State of one pipeline run. A new one is created for every user event."""

    def __init__(self, generation: int, kind: str):
        self.generation = generation
        self.kind = kind
        self.state = InteractionState.IDLE

    def advance(self, state: InteractionState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise InvalidTransition(
                f"{self.kind} #{self.generation}: cannot go from {self.state.value} to {state.value}"
            )
        logger.debug(f"{self.kind} #{self.generation}: {self.state.value} -> {state.value}")
        self.state = state


class InteractionOrchestrator:
    """Coordinates geocoding, routing, pricing and overlays for every entry point.

    Interactions are independent: a second event arriving while the first is
    still awaiting the network does not cancel it. By default the last one to
    finish wins the display and the overlays. With ``latest_only`` set, an
    interaction that has been superseded by a newer one drops its result.
    """

    def __init__(
        self,
        origin: Coordinate,
        geocoder: GeocodingClient,
        router: RoutingClient,
        overlays: OverlayManager,
        pricing: PricingConfig,
        session: SearchSession | None = None,
        latest_only: bool = False,
    ):
        self.origin = origin
        self.geocoder = geocoder
        self.router = router
        self.overlays = overlays
        self.pricing = pricing
        self.session = session or SearchSession()
        self.latest_only = latest_only
        self.display = DisplayState()
        self.destination_input = ""
        self.current: Interaction | None = None
        self._generation = 0

    @property
    def state(self) -> InteractionState:
        return self.current.state if self.current else InteractionState.IDLE

    # ---------- Entry points ----------

    async def search(self, query: str) -> DisplayState:
        interaction = self._begin("search")
        # A new request supersedes the previous candidate list right away
        self.session.record_search([])
        query = query.strip()
        if not query:
            return self._publish(interaction, message=EMPTY_QUERY_MESSAGE)

        self.destination_input = query
        try:
            interaction.advance(InteractionState.RESOLVING)
            self._publish(interaction, message=SEARCHING_MESSAGE)
            candidates = await self.geocoder.search(query)
            if not candidates:
                raise DestinationNotFound()
            if self._is_stale(interaction):
                return self._publish(interaction, message=SEARCHING_MESSAGE)

            handles = self.session.record_search(candidates)
            if len(candidates) == 1:
                return await self._route_to(interaction, candidates[0].coordinate, query)

            options = [
                DisplayOption(index=c.rank, label=c.label, handle=h.token)
                for c, h in zip(candidates, handles)
            ]
            return self._publish(interaction, kind="options", message=CHOOSE_MESSAGE, options=options)
        except FareEstimatorError as e:
            return self._fail(interaction, e)

    async def select(self, choice: int | CandidateHandle | str) -> DisplayState:
        """Continue a multi-result search with the chosen candidate."""
        interaction = self._begin("select")
        try:
            interaction.advance(InteractionState.RESOLVING)
            if isinstance(choice, int):
                candidate = self.session.resolve(choice)
            else:
                candidate = self.session.resolve_handle(choice)
            if candidate is None:
                raise SelectionUnavailable()

            self.destination_input = candidate.label
            return await self._route_to(interaction, candidate.coordinate, candidate.label)
        except FareEstimatorError as e:
            return self._fail(interaction, e)

    async def click(self, point: Coordinate) -> DisplayState:
        """Route to a point clicked on the map."""
        interaction = self._begin("click")
        try:
            interaction.advance(InteractionState.RESOLVING)
            return await self._route_to_point(interaction, point)
        except FareEstimatorError as e:
            return self._fail(interaction, e)

    async def locate(self, provider: GeolocationProvider) -> DisplayState:
        """Route to the device's current position."""
        interaction = self._begin("locate")
        try:
            interaction.advance(InteractionState.RESOLVING)
            self._publish(interaction, message=LOCATING_MESSAGE)
            point = await provider.locate()
            return await self._route_to_point(interaction, point)
        except FareEstimatorError as e:
            return self._fail(interaction, e)

    # ---------- Pipeline steps ----------

    async def _route_to_point(self, interaction: Interaction, point: Coordinate) -> DisplayState:
        self._publish(interaction, message=REVERSE_MESSAGE)
        label = await self.geocoder.reverse_geocode(point)
        if not self._is_stale(interaction):
            self.destination_input = label
        return await self._route_to(interaction, point, label)

    async def _route_to(
        self, interaction: Interaction, destination: Coordinate, label: str
    ) -> DisplayState:
        interaction.advance(InteractionState.ROUTING)
        self._publish(interaction, message=ROUTING_MESSAGE)

        route = await self.router.route(self.origin, destination)
        if route is None:
            raise RouteUnavailable()

        fare = compute_fare(route, self.pricing)
        interaction.advance(InteractionState.READY)
        if not self._is_stale(interaction):
            self.overlays.show_route(self.origin, destination, label, route)

        logger.info(
            f"Route to '{label}': {fare.distance_km:.2f} km, {fare.duration_min} min, fare {fare.total}"
        )
        return self._publish(interaction, message=label, lines=fare_lines(fare), fare=fare)

    # ---------- Bookkeeping ----------

    def _begin(self, kind: str) -> Interaction:
        self._generation += 1
        self.current = Interaction(self._generation, kind)
        return self.current

    def _is_stale(self, interaction: Interaction) -> bool:
        return self.latest_only and interaction.generation != self._generation

    def _fail(self, interaction: Interaction, error: FareEstimatorError) -> DisplayState:
        interaction.advance(InteractionState.ERROR)
        logger.info(f"{interaction.kind} #{interaction.generation} failed: {error.message}")
        return self._publish(interaction, message=error.message)

    def _publish(self, interaction: Interaction, **fields) -> DisplayState:
        """Build the display for ``interaction`` and show it unless it was superseded."""
        display = DisplayState(
            state=interaction.state,
            destination_input=self.destination_input,
            **fields,
        )
        if self._is_stale(interaction):
            logger.debug(f"Dropping display of superseded {interaction.kind} #{interaction.generation}")
            return display
        self.display = display
        return display
