"""Handling domain events."""

from protean.fields import DateTime, Identifier, String

from shipping.domain import shipping


@shipping.event(part_of="HandlingEvent")
class HandlingEventRegistered:
    """A handling event passed admission and was appended to a cargo's history."""

    __version__ = 1

    handling_event_id = Identifier(required=True)
    tracking_id = Identifier(required=True)
    event_type = String(required=True)
    location = String(required=True)
    voyage_number = String()
    completed_at = DateTime(required=True)
    registered_at = DateTime(required=True)
