"""Handling event registration — command and handler.

Receives handling reports (from port staff, carriers or scanners), admits
them into the cargo's history and brings the cargo's Delivery up to date.
"""

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from shipping.cargo.cargo import Cargo
from shipping.domain import shipping
from shipping.handling.admission import validate_handling_event
from shipping.handling.handling_event import HandlingEvent, HandlingEventType
from shipping.location.location import Location
from shipping.utils.logging import add_context, clear_context
from shipping.voyage.voyage import Voyage

logger = structlog.get_logger(__name__)


@shipping.command(part_of="HandlingEvent")
class RegisterHandlingEvent:
    """Report that a cargo was handled at a location."""

    tracking_id = Identifier(required=True)
    event_type = String(required=True, max_length=20, choices=HandlingEventType)
    location = String(required=True, max_length=5)
    voyage_number = String(max_length=20)
    completed_at = DateTime(required=True)


@shipping.command_handler(part_of=HandlingEvent)
class HandlingEventRegistrationHandler:
    @handle(RegisterHandlingEvent)
    def register_handling_event(self, command):
        add_context(tracking_id=command.tracking_id)
        try:
            validate_handling_event(
                command.event_type,
                command.location,
                command.voyage_number,
                known_locations=current_domain.repository_for(Location),
                known_voyages=current_domain.repository_for(Voyage),
            )

            cargo_repo = current_domain.repository_for(Cargo)
            cargo = cargo_repo.find(command.tracking_id)

            event_repo = current_domain.repository_for(HandlingEvent)
            history = event_repo.query_history(cargo.tracking_id)
            event = HandlingEvent.register(
                tracking_id=cargo.tracking_id,
                event_type=command.event_type,
                location=command.location,
                voyage_number=command.voyage_number,
                completed_at=command.completed_at,
            )
            event_repo.store(event)

            # The new event is not visible to queries until the unit of work
            # commits, so it is inserted into the already loaded history.
            cargo.derive_delivery_progress(history.with_event(event))
            cargo_repo.store(cargo)

            logger.info(
                "Handling event registered",
                event_type=command.event_type,
                location=command.location,
                voyage_number=command.voyage_number,
                transport_status=cargo.delivery.transport_status,
                misdirected=cargo.delivery.is_misdirected,
            )
            return str(event.id)
        finally:
            clear_context()
