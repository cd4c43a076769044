"""Route assignment — command and handler.

Assigns a cargo to one of the itineraries proposed by the routing service.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from shipping.cargo.cargo import Cargo
from shipping.cargo.itinerary import Itinerary
from shipping.domain import shipping
from shipping.handling.handling_event import HandlingEvent

logger = structlog.get_logger(__name__)


@shipping.command(part_of="Cargo")
class AssignCargoToRoute:
    """Assign a cargo to the route described by an itinerary."""

    tracking_id = Identifier(required=True)
    legs = Text(required=True)  # JSON list of leg dicts


@shipping.command_handler(part_of=Cargo)
class RouteAssignmentHandler:
    @handle(AssignCargoToRoute)
    def assign_cargo_to_route(self, command):
        rows = json.loads(command.legs) if isinstance(command.legs, str) else command.legs
        itinerary = Itinerary.from_dicts(rows)
        if itinerary.is_empty:
            raise ValidationError({"legs": ["An itinerary must contain at least one leg"]})

        repo = current_domain.repository_for(Cargo)
        cargo = repo.find(command.tracking_id)
        history = current_domain.repository_for(HandlingEvent).query_history(cargo.tracking_id)
        cargo.assign_to_route(itinerary, history)
        repo.store(cargo)
        logger.info(
            "Cargo assigned to route",
            tracking_id=cargo.tracking_id,
            itinerary=repr(itinerary),
            routing_status=cargo.delivery.routing_status,
        )
