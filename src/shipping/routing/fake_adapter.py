"""Fake routing adapter — deterministic route proposals for testing and development.

Proposes a direct itinerary and, when neither end is the hub, a
transshipment itinerary through the hub. Departure times are computed from
an injectable clock.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from shipping.cargo.itinerary import Itinerary, Leg, RouteSpecification
from shipping.routing.port import RoutingPort


class FakeRoutingService(RoutingPort):
    """Fake routing service that always finds a route."""

    def __init__(
        self,
        now: Callable[[], datetime] | None = None,
        hub: str = "NLRTM",
        direct_voyage: str = "0100S",
        feeder_voyage: str = "0200T",
        mainline_voyage: str = "0300A",
    ):
        self._now = now or (lambda: datetime.now(UTC))
        self.hub = hub
        self.direct_voyage = direct_voyage
        self.feeder_voyage = feeder_voyage
        self.mainline_voyage = mainline_voyage
        self.should_succeed = True

    def configure(self, should_succeed: bool = True):
        """Configure the fake routing behavior for testing."""
        self.should_succeed = should_succeed

    def fetch_routes_for_specification(self, route_specification: RouteSpecification) -> list[Itinerary]:
        if not self.should_succeed:
            return []

        origin = route_specification.origin
        destination = route_specification.destination
        departure = self._now().replace(microsecond=0) + timedelta(days=1)

        candidates = [
            Itinerary(
                [
                    Leg(
                        voyage_number=self.direct_voyage,
                        load_location=origin,
                        unload_location=destination,
                        load_time=departure,
                        unload_time=departure + timedelta(days=10),
                    )
                ]
            )
        ]

        if self.hub not in (origin, destination):
            arrival_at_hub = departure + timedelta(days=4)
            onward = arrival_at_hub + timedelta(days=1)
            candidates.append(
                Itinerary(
                    [
                        Leg(
                            voyage_number=self.feeder_voyage,
                            load_location=origin,
                            unload_location=self.hub,
                            load_time=departure,
                            unload_time=arrival_at_hub,
                        ),
                        Leg(
                            voyage_number=self.mainline_voyage,
                            load_location=self.hub,
                            unload_location=destination,
                            load_time=onward,
                            unload_time=onward + timedelta(days=4),
                        ),
                    ]
                )
            )

        return candidates
