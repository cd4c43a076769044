"""Cargo domain events — immutable facts about booking, routing and progress.

All events are past tense and versioned. Itineraries travel as JSON text
(list of leg dicts with ISO-8601 times).
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from shipping.domain import shipping


@shipping.event(part_of="Cargo")
class CargoBooked:
    """A new cargo was booked for transport between two locations."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    origin = String(required=True)
    destination = String(required=True)
    arrival_deadline = DateTime()
    booked_at = DateTime(required=True)


@shipping.event(part_of="Cargo")
class CargoAssignedToRoute:
    """The cargo was assigned to a new itinerary, replacing any previous one."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    legs = Text(required=True)  # JSON list of leg dicts
    leg_count = Integer(required=True)
    routing_status = String(required=True)
    assigned_at = DateTime(required=True)


@shipping.event(part_of="Cargo")
class RouteSpecified:
    """The cargo's route specification was replaced (e.g. destination changed)."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    origin = String(required=True)
    destination = String(required=True)
    arrival_deadline = DateTime()
    routing_status = String(required=True)
    specified_at = DateTime(required=True)


@shipping.event(part_of="Cargo")
class CargoMisdirected:
    """Handling of the cargo diverged from its assigned itinerary."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    last_known_location = String()
    detected_at = DateTime(required=True)


@shipping.event(part_of="Cargo")
class CargoArrivedAtDestination:
    """The cargo was unloaded at the final location of its itinerary."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    location = String(required=True)
    arrived_at = DateTime(required=True)
