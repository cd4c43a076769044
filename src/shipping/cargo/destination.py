"""Destination change — command and handler.

Keeps the origin and arrival deadline, replaces the destination. The current
itinerary is not touched; if it no longer satisfies the new specification the
cargo shows up as misrouted.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from shipping.cargo.cargo import Cargo
from shipping.cargo.itinerary import RouteSpecification
from shipping.domain import shipping
from shipping.handling.handling_event import HandlingEvent
from shipping.location.location import Location

logger = structlog.get_logger(__name__)


@shipping.command(part_of="Cargo")
class ChangeDestination:
    """Change the destination of a booked cargo."""

    tracking_id = Identifier(required=True)
    destination = String(required=True, max_length=5)


@shipping.command_handler(part_of=Cargo)
class DestinationHandler:
    @handle(ChangeDestination)
    def change_destination(self, command):
        repo = current_domain.repository_for(Cargo)
        cargo = repo.find(command.tracking_id)
        location = current_domain.repository_for(Location).find(command.destination)

        current = cargo.route_specification
        cargo.specify_new_route(
            RouteSpecification(
                origin=current.origin,
                destination=location.unlocode,
                arrival_deadline=current.arrival_deadline,
            ),
            current_domain.repository_for(HandlingEvent).query_history(cargo.tracking_id),
        )
        repo.store(cargo)
        logger.info(
            "Cargo destination changed",
            tracking_id=cargo.tracking_id,
            destination=location.unlocode,
            routing_status=cargo.delivery.routing_status,
        )
