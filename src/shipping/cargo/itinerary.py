"""Route specification, legs and itineraries — the plan side of a cargo.

A RouteSpecification is what the shipper asked for. An Itinerary is the plan
the cargo was assigned to: an ordered sequence of legs, each carried by one
voyage from a load location to an unload location. Both are immutable;
changing either means replacing it wholesale.
"""

from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from shipping.domain import shipping
from shipping.handling.handling_event import HandlingEventType
from shipping.utils.timestamps import as_utc


@shipping.value_object
class RouteSpecification:
    """The shipper's requirement: where from, where to, and by when."""

    origin = String(required=True, max_length=5)
    destination = String(required=True, max_length=5)
    arrival_deadline = DateTime()

    @invariant.post
    def origin_and_destination_must_differ(self):
        if self.origin == self.destination:
            raise ValidationError({"route_specification": ["Origin and destination must be different locations"]})

    def is_satisfied_by(self, itinerary: "Itinerary") -> bool:
        return itinerary.satisfies(self)


@shipping.value_object
class Leg:
    """One voyage segment of an itinerary."""

    voyage_number = String(required=True, max_length=20)
    load_location = String(required=True, max_length=5)
    unload_location = String(required=True, max_length=5)
    load_time = DateTime(required=True)
    unload_time = DateTime(required=True)

    @invariant.post
    def locations_must_differ(self):
        if self.load_location == self.unload_location:
            raise ValidationError({"leg": ["Load and unload locations must be different"]})

    @invariant.post
    def load_must_precede_unload(self):
        if self.load_time and self.unload_time and as_utc(self.load_time) >= as_utc(self.unload_time):
            raise ValidationError({"leg": ["Load time must be before unload time"]})


def _parse_time(value):
    return as_utc(value if isinstance(value, datetime) else datetime.fromisoformat(value))


class Itinerary:
    """An immutable, physically ordered sequence of legs.

    Consecutive legs must connect: each leg unloads where the next one loads,
    and never after the next one departs. An empty itinerary means the cargo
    has not been routed yet.
    """

    __slots__ = ("_legs",)

    def __init__(self, legs=()):
        legs = tuple(legs)
        for index, (current, following) in enumerate(zip(legs, legs[1:]), start=1):
            if current.unload_location != following.load_location:
                raise ValidationError(
                    {"itinerary": [f"Leg {index} unloads at {current.unload_location} but leg {index + 1} loads at {following.load_location}"]}
                )
            if as_utc(current.unload_time) > as_utc(following.load_time):
                raise ValidationError({"itinerary": [f"Leg {index + 1} departs before leg {index} arrives"]})
        self._legs = legs

    # -------------------------------------------------------------------
    # Sequence behaviour
    # -------------------------------------------------------------------
    def __iter__(self):
        return iter(self._legs)

    def __len__(self) -> int:
        return len(self._legs)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Itinerary):
            return NotImplemented
        return self._legs == other._legs

    def __repr__(self) -> str:
        route = " -> ".join([self._legs[0].load_location, *(leg.unload_location for leg in self._legs)]) if self._legs else "unrouted"
        return f"Itinerary({route})"

    @property
    def legs(self) -> tuple:
        return self._legs

    @property
    def is_empty(self) -> bool:
        return not self._legs

    @property
    def first_leg(self) -> Leg | None:
        return self._legs[0] if self._legs else None

    @property
    def last_leg(self) -> Leg | None:
        return self._legs[-1] if self._legs else None

    @property
    def final_arrival_location(self) -> str | None:
        return self._legs[-1].unload_location if self._legs else None

    @property
    def final_arrival_time(self) -> datetime | None:
        return self._legs[-1].unload_time if self._legs else None

    # -------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------
    def satisfies(self, route_specification: RouteSpecification) -> bool:
        """True if this plan gets the cargo from origin to destination in time."""
        if self.is_empty:
            return False
        if self.first_leg.load_location != route_specification.origin:
            return False
        if self.last_leg.unload_location != route_specification.destination:
            return False
        deadline = route_specification.arrival_deadline
        return deadline is None or as_utc(self.final_arrival_time) <= as_utc(deadline)

    def is_expected(self, event) -> bool:
        """True if ``event`` is consistent with this plan, ignoring replay position."""
        event_type = HandlingEventType(event.event_type)
        if self.is_empty:
            return event_type == HandlingEventType.RECEIVE

        if event_type == HandlingEventType.RECEIVE:
            return self.first_leg.load_location == event.location
        if event_type == HandlingEventType.LOAD:
            return any(
                leg.voyage_number == event.voyage_number and leg.load_location == event.location for leg in self._legs
            )
        if event_type == HandlingEventType.UNLOAD:
            return any(
                leg.voyage_number == event.voyage_number and leg.unload_location == event.location
                for leg in self._legs
            )
        if event_type == HandlingEventType.CLAIM:
            return self.last_leg.unload_location == event.location
        # Customs may happen anywhere along a routed plan
        return True

    # -------------------------------------------------------------------
    # Serialization for commands and events
    # -------------------------------------------------------------------
    def to_dicts(self) -> list[dict]:
        return [
            {
                "voyage_number": leg.voyage_number,
                "load_location": leg.load_location,
                "unload_location": leg.unload_location,
                "load_time": leg.load_time.isoformat(),
                "unload_time": leg.unload_time.isoformat(),
            }
            for leg in self._legs
        ]

    @classmethod
    def from_dicts(cls, rows: list[dict]) -> "Itinerary":
        return cls(
            Leg(
                voyage_number=row["voyage_number"],
                load_location=row["load_location"],
                unload_location=row["unload_location"],
                load_time=_parse_time(row["load_time"]),
                unload_time=_parse_time(row["unload_time"]),
            )
            for row in rows
        )
