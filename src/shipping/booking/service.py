"""Booking service — the use cases an administrator's booking views rely on.

Writes go through commands processed by the domain; reads assemble plain
read models from the repositories. The routing adapter and the icon picker
are injected, never looked up from module state.
"""

import json
from dataclasses import dataclass
from datetime import datetime

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from shipping.booking.icons import IconPicker
from shipping.cargo.assignment import AssignCargoToRoute
from shipping.cargo.booking import BookNewCargo
from shipping.cargo.cargo import Cargo
from shipping.cargo.delivery import Delivery, RoutingStatus
from shipping.cargo.destination import ChangeDestination
from shipping.cargo.itinerary import Itinerary, Leg
from shipping.cargo.unbooking import UnbookCargo
from shipping.location.location import Location
from shipping.routing.port import RoutingPort

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CargoView:
    """Read model of a cargo for booking and tracking views."""

    tracking_id: str
    origin: str
    destination: str
    arrival_deadline: datetime | None
    misrouted: bool
    routed: bool
    legs: tuple[Leg, ...]
    delivery: Delivery


@dataclass(frozen=True)
class LocationView:
    """Read model of a registered location."""

    unlocode: str
    name: str


def assemble(cargo: Cargo) -> CargoView:
    itinerary = cargo.itinerary
    return CargoView(
        tracking_id=cargo.tracking_id,
        origin=cargo.route_specification.origin,
        destination=cargo.route_specification.destination,
        arrival_deadline=cargo.route_specification.arrival_deadline,
        misrouted=cargo.delivery.routing_status == RoutingStatus.MISROUTED.value,
        routed=not itinerary.is_empty,
        legs=itinerary.legs,
        delivery=cargo.delivery,
    )


def _require_tracking_id(tracking_id: str) -> None:
    if not tracking_id:
        raise ValidationError({"tracking_id": ["Tracking id is required"]})


class BookingService:
    def __init__(self, routing: RoutingPort, pick_icon: IconPicker | None = None):
        self._routing = routing
        self._pick_icon = pick_icon

    def book_new_cargo(self, origin: str, destination: str, arrival_deadline: datetime) -> str:
        return current_domain.process(
            BookNewCargo(origin=origin, destination=destination, arrival_deadline=arrival_deadline),
            asynchronous=False,
        )

    def load_cargo(self, tracking_id: str) -> CargoView:
        _require_tracking_id(tracking_id)
        return assemble(current_domain.repository_for(Cargo).find(tracking_id))

    def request_possible_routes_for_cargo(self, tracking_id: str) -> list[Itinerary]:
        """Candidate itineraries for the cargo, or an empty list if it is unknown."""
        if not tracking_id:
            return []
        try:
            cargo = current_domain.repository_for(Cargo).find(tracking_id)
        except ObjectNotFoundError:
            logger.warning("Unable to find cargo when requesting routes", tracking_id=tracking_id)
            return []
        return self._routing.fetch_routes_for_specification(cargo.route_specification)

    def assign_cargo_to_route(self, tracking_id: str, itinerary: Itinerary) -> None:
        _require_tracking_id(tracking_id)
        if itinerary.is_empty:
            raise ValidationError({"legs": ["An itinerary must contain at least one leg"]})
        current_domain.process(
            AssignCargoToRoute(tracking_id=tracking_id, legs=json.dumps(itinerary.to_dicts())),
            asynchronous=False,
        )

    def change_destination(self, tracking_id: str, destination: str) -> None:
        current_domain.process(
            ChangeDestination(tracking_id=tracking_id, destination=destination),
            asynchronous=False,
        )

    def unbook_cargo(self, tracking_id: str) -> bytes | None:
        """Remove the cargo and return a display icon, if any are configured."""
        current_domain.process(UnbookCargo(tracking_id=tracking_id), asynchronous=False)
        return self._pick_icon() if self._pick_icon else None

    def cargos(self) -> list[CargoView]:
        return [assemble(cargo) for cargo in current_domain.repository_for(Cargo).find_all()]

    def locations(self) -> list[LocationView]:
        return [
            LocationView(unlocode=location.unlocode, name=location.name)
            for location in current_domain.repository_for(Location).find_all()
        ]
