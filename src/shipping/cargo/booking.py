"""Cargo booking — command and handler."""

import structlog
from protean import handle
from protean.fields import DateTime, String
from protean.utils.globals import current_domain

from shipping.cargo.cargo import Cargo
from shipping.domain import shipping
from shipping.location.location import Location

logger = structlog.get_logger(__name__)


@shipping.command(part_of="Cargo")
class BookNewCargo:
    """Register a new cargo in the tracking system, not yet routed."""

    origin = String(required=True, max_length=5)
    destination = String(required=True, max_length=5)
    arrival_deadline = DateTime(required=True)


@shipping.command_handler(part_of=Cargo)
class BookCargoHandler:
    @handle(BookNewCargo)
    def book_new_cargo(self, command):
        locations = current_domain.repository_for(Location)
        locations.find(command.origin)
        locations.find(command.destination)

        cargo = Cargo.book(
            origin=command.origin,
            destination=command.destination,
            arrival_deadline=command.arrival_deadline,
        )
        current_domain.repository_for(Cargo).store(cargo)
        logger.info(
            "Cargo booked",
            tracking_id=cargo.tracking_id,
            origin=command.origin,
            destination=command.destination,
        )
        return cargo.tracking_id
