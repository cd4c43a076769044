"""Routing port — abstract interface for route-finding services.

The shipping core never generates itineraries. It asks a routing service for
candidates and judges them with ``Itinerary.satisfies``. Adapters are passed
to the booking service explicitly.
"""

from abc import ABC, abstractmethod

from shipping.cargo.itinerary import Itinerary, RouteSpecification


class RoutingPort(ABC):
    """Abstract interface for routing adapters."""

    @abstractmethod
    def fetch_routes_for_specification(self, route_specification: RouteSpecification) -> list[Itinerary]:
        """Propose candidate itineraries for a route specification.

        Returns:
            list of Itinerary, possibly empty. Candidates are not guaranteed
            to satisfy the specification.
        """
        ...
