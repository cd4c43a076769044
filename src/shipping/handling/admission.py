"""Handling event admission — referential legality before an event is logged.

Admission only checks that an event refers to things that exist and carries
the data its type requires. Whether the event fits the cargo's plan is not
checked here: unexpected events are admitted and surface as misdirection
when Delivery is derived.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError

from shipping.handling.handling_event import CARRIER_EVENT_TYPES, HandlingEventType


def validate_handling_event(event_type, location, voyage_number, known_locations, known_voyages) -> None:
    """Raise ValidationError if the proposed event may not enter the log.

    ``known_locations`` and ``known_voyages`` are registries exposing
    ``find(key)`` that raises ObjectNotFoundError for unknown keys.
    """
    if HandlingEventType(event_type) in CARRIER_EVENT_TYPES and not voyage_number:
        raise ValidationError({"voyage_number": [f"{event_type} events must name the voyage"]})

    try:
        known_locations.find(location)
    except ObjectNotFoundError as exc:
        raise ValidationError({"location": [f"Unknown location: {location}"]}) from exc

    if voyage_number:
        try:
            known_voyages.find(voyage_number)
        except ObjectNotFoundError as exc:
            raise ValidationError({"voyage_number": [f"Unknown voyage: {voyage_number}"]}) from exc
