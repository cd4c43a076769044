"""Delivery snapshot and the derivation engine that produces it.

Delivery is never authored. ``derive_delivery`` replays a cargo's handling
history against its itinerary and route specification and returns a fresh
snapshot. It reads no clock, performs no I/O and holds no state between
calls, so the same inputs always produce an equal Delivery.

Replay:
    Legs are consumed in itinerary order. A Load binds the cargo to the
    earliest unconsumed leg with the same voyage and load location; an Unload
    consumes the earliest unconsumed leg with the same voyage and unload
    location, together with every leg before it. Events that match nothing,
    including a Load or Unload whose only match is an already consumed leg,
    leave the position untouched but mark the cargo misdirected. Misdirection
    is never cleared by later events.
"""

from enum import Enum

from protean.fields import Boolean, DateTime, String, ValueObject

from shipping.cargo.itinerary import Itinerary, RouteSpecification
from shipping.domain import shipping
from shipping.handling.handling_event import HandlingEventType, HandlingHistory
from shipping.utils.timestamps import as_utc


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class TransportStatus(Enum):
    NOT_RECEIVED = "Not_Received"
    IN_PORT = "In_Port"
    ONBOARD_CARRIER = "Onboard_Carrier"
    CLAIMED = "Claimed"
    UNKNOWN = "Unknown"


class RoutingStatus(Enum):
    NOT_ROUTED = "Not_Routed"
    ROUTED = "Routed"
    MISROUTED = "Misrouted"


_TRANSPORT_STATUS_AFTER = {
    HandlingEventType.RECEIVE: TransportStatus.IN_PORT,
    HandlingEventType.LOAD: TransportStatus.ONBOARD_CARRIER,
    HandlingEventType.UNLOAD: TransportStatus.IN_PORT,
    HandlingEventType.CUSTOMS: TransportStatus.IN_PORT,
    HandlingEventType.CLAIM: TransportStatus.CLAIMED,
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@shipping.value_object
class HandlingActivity:
    """A handling step the cargo is expected to go through next."""

    event_type = String(required=True, max_length=20, choices=HandlingEventType)
    location = String(required=True, max_length=5)
    voyage_number = String(max_length=20)


@shipping.value_object
class Delivery:
    """Point-in-time summary of where a cargo is and how it is doing."""

    transport_status = String(
        max_length=20,
        choices=TransportStatus,
        default=TransportStatus.NOT_RECEIVED.value,
    )
    last_known_location = String(max_length=5)
    current_voyage = String(max_length=20)
    is_misdirected = Boolean(default=False)
    eta = DateTime()
    next_expected_activity = ValueObject(HandlingActivity)
    is_unloaded_at_destination = Boolean(default=False)
    routing_status = String(
        max_length=20,
        choices=RoutingStatus,
        default=RoutingStatus.NOT_ROUTED.value,
    )
    calculated_at = DateTime()


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------
def routing_status_of(route_specification: RouteSpecification, itinerary: Itinerary) -> RoutingStatus:
    if itinerary.is_empty:
        return RoutingStatus.NOT_ROUTED
    if not itinerary.satisfies(route_specification):
        return RoutingStatus.MISROUTED
    return RoutingStatus.ROUTED


class _Replay:
    """Mutable cursor over an itinerary while a history is replayed."""

    def __init__(self, itinerary: Itinerary):
        self.itinerary = itinerary
        self.consumed = 0  # legs before this index are done with
        self.aboard = None  # index of the leg the cargo is loaded onto
        self.misdirected = False
        self.unloaded_at_destination = False

    def _earliest_unconsumed(self, matches) -> int | None:
        legs = self.itinerary.legs
        return next((i for i in range(self.consumed, len(legs)) if matches(legs[i])), None)

    def step(self, event) -> None:
        if not self.itinerary.is_expected(event):
            self.misdirected = True

        event_type = HandlingEventType(event.event_type)
        if event_type == HandlingEventType.LOAD:
            index = self._earliest_unconsumed(
                lambda leg: leg.voyage_number == event.voyage_number and leg.load_location == event.location
            )
            if index is None:
                self.misdirected = True
            else:
                self.consumed = index
                self.aboard = index
            self.unloaded_at_destination = False
        elif event_type == HandlingEventType.UNLOAD:
            index = self._earliest_unconsumed(
                lambda leg: leg.voyage_number == event.voyage_number and leg.unload_location == event.location
            )
            if index is None:
                self.misdirected = True
            else:
                self.consumed = index + 1
                self.aboard = None
            self.unloaded_at_destination = (
                not self.itinerary.is_empty and event.location == self.itinerary.final_arrival_location
            )
        elif event_type == HandlingEventType.RECEIVE:
            self.unloaded_at_destination = False

    def next_expected_activity(self) -> HandlingActivity | None:
        legs = self.itinerary.legs
        if self.aboard is not None:
            leg = legs[self.aboard]
            return HandlingActivity(
                event_type=HandlingEventType.UNLOAD.value,
                location=leg.unload_location,
                voyage_number=leg.voyage_number,
            )
        if self.consumed < len(legs):
            leg = legs[self.consumed]
            return HandlingActivity(
                event_type=HandlingEventType.LOAD.value,
                location=leg.load_location,
                voyage_number=leg.voyage_number,
            )
        return HandlingActivity(
            event_type=HandlingEventType.CLAIM.value,
            location=self.itinerary.final_arrival_location,
        )


def derive_delivery(
    route_specification: RouteSpecification,
    itinerary: Itinerary,
    history: HandlingHistory,
) -> Delivery:
    """Compute the Delivery of a cargo from its plan and its full handling history."""
    routing_status = routing_status_of(route_specification, itinerary)
    eta = itinerary.final_arrival_time if routing_status == RoutingStatus.ROUTED else None

    if history.is_empty:
        return Delivery(
            transport_status=TransportStatus.NOT_RECEIVED.value,
            is_misdirected=False,
            eta=eta,
            next_expected_activity=HandlingActivity(
                event_type=HandlingEventType.RECEIVE.value,
                location=route_specification.origin,
            ),
            is_unloaded_at_destination=False,
            routing_status=routing_status.value,
        )

    replay = _Replay(itinerary)
    for event in history:
        replay.step(event)

    current = history.most_recent
    transport_status = _TRANSPORT_STATUS_AFTER[HandlingEventType(current.event_type)]

    next_expected = None
    on_track = routing_status == RoutingStatus.ROUTED and not replay.misdirected
    if on_track and HandlingEventType(current.event_type) != HandlingEventType.CLAIM:
        next_expected = replay.next_expected_activity()

    return Delivery(
        transport_status=transport_status.value,
        last_known_location=current.location,
        current_voyage=current.voyage_number if transport_status == TransportStatus.ONBOARD_CARRIER else None,
        is_misdirected=replay.misdirected,
        eta=eta,
        next_expected_activity=next_expected,
        is_unloaded_at_destination=replay.unloaded_at_destination,
        routing_status=routing_status.value,
        calculated_at=max(as_utc(event.registered_at) for event in history),
    )
