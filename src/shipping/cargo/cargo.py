"""Cargo aggregate (CQRS) — the core of the shipping domain.

A Cargo owns its route specification, the itinerary it is assigned to, and
the Delivery derived from both plus the cargo's handling history. Handling
events live in their own store; every mutation here receives the cargo's
full current history and re-derives Delivery from scratch, so Delivery is
never stale relative to the other fields.

Lifecycle:
    booked (unrouted, not received) → assigned to routes / re-specified /
    handled any number of times → unbooked (removed from the store)
"""

import json
from datetime import UTC, datetime
from uuid import uuid4

from protean.fields import DateTime, HasMany, Identifier, Integer, ValueObject

from shipping.cargo.delivery import Delivery, derive_delivery
from shipping.cargo.events import (
    CargoArrivedAtDestination,
    CargoAssignedToRoute,
    CargoBooked,
    CargoMisdirected,
    RouteSpecified,
)
from shipping.cargo.itinerary import Itinerary, Leg, RouteSpecification
from shipping.domain import shipping
from shipping.handling.handling_event import HandlingHistory
from shipping.utils.timestamps import as_utc


def next_tracking_id() -> str:
    """Generate a fresh tracking identity, e.g. ``"9F3A27C1"``."""
    return uuid4().hex[:8].upper()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@shipping.entity(part_of="Cargo")
class ItineraryLeg:
    """Position of one leg within the cargo's current itinerary."""

    sequence = Integer(required=True, min_value=0)
    leg = ValueObject(Leg, required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@shipping.aggregate
class Cargo:
    tracking_id = Identifier(identifier=True)
    route_specification = ValueObject(RouteSpecification, required=True)
    legs = HasMany(ItineraryLeg)
    delivery = ValueObject(Delivery)
    booked_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def book(
        cls,
        origin: str,
        destination: str,
        arrival_deadline: datetime | None = None,
        tracking_id: str | None = None,
    ):
        """Book a new, unrouted cargo."""
        arrival_deadline = as_utc(arrival_deadline)
        route_specification = RouteSpecification(
            origin=origin,
            destination=destination,
            arrival_deadline=arrival_deadline,
        )
        now = datetime.now(UTC)
        cargo = cls(
            tracking_id=tracking_id or next_tracking_id(),
            route_specification=route_specification,
            delivery=derive_delivery(route_specification, Itinerary(), HandlingHistory()),
            booked_at=now,
            updated_at=now,
        )
        cargo.raise_(
            CargoBooked(
                tracking_id=cargo.tracking_id,
                origin=origin,
                destination=destination,
                arrival_deadline=arrival_deadline,
                booked_at=now,
            )
        )
        return cargo

    @property
    def itinerary(self) -> Itinerary:
        ordered = sorted(self.legs or [], key=lambda item: item.sequence)
        return Itinerary(item.leg for item in ordered)

    # -------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------
    def assign_to_route(self, itinerary: Itinerary, history: HandlingHistory) -> None:
        """Replace the itinerary, whether or not it satisfies the route specification."""
        for item in list(self.legs or []):
            self.remove_legs(item)
        for sequence, leg in enumerate(itinerary.legs):
            self.add_legs(ItineraryLeg(sequence=sequence, leg=leg))

        now = datetime.now(UTC)
        self.updated_at = now
        self.derive_delivery_progress(history)
        self.raise_(
            CargoAssignedToRoute(
                tracking_id=self.tracking_id,
                legs=json.dumps(itinerary.to_dicts()),
                leg_count=len(itinerary),
                routing_status=self.delivery.routing_status,
                assigned_at=now,
            )
        )

    def specify_new_route(self, route_specification: RouteSpecification, history: HandlingHistory) -> None:
        """Replace the route specification; the itinerary is left untouched."""
        now = datetime.now(UTC)
        self.route_specification = route_specification
        self.updated_at = now
        self.derive_delivery_progress(history)
        self.raise_(
            RouteSpecified(
                tracking_id=self.tracking_id,
                origin=route_specification.origin,
                destination=route_specification.destination,
                arrival_deadline=route_specification.arrival_deadline,
                routing_status=self.delivery.routing_status,
                specified_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Delivery
    # -------------------------------------------------------------------
    def derive_delivery_progress(self, history: HandlingHistory) -> None:
        """Recompute Delivery from the full history of this cargo."""
        previous = self.delivery
        delivery = derive_delivery(self.route_specification, self.itinerary, history)
        self.delivery = delivery

        now = datetime.now(UTC)
        if delivery.is_misdirected and not (previous and previous.is_misdirected):
            self.raise_(
                CargoMisdirected(
                    tracking_id=self.tracking_id,
                    last_known_location=delivery.last_known_location,
                    detected_at=now,
                )
            )
        if delivery.is_unloaded_at_destination and not (previous and previous.is_unloaded_at_destination):
            self.raise_(
                CargoArrivedAtDestination(
                    tracking_id=self.tracking_id,
                    location=delivery.last_known_location,
                    arrived_at=now,
                )
            )


@shipping.repository(part_of=Cargo)
class CargoRepository:
    """Cargo store keyed by tracking identity."""

    def find(self, tracking_id: str) -> Cargo:
        """Raises ObjectNotFoundError when no cargo has this tracking id."""
        return self.get(tracking_id)

    def store(self, cargo: Cargo) -> None:
        self.add(cargo)

    def remove(self, cargo: Cargo) -> None:
        self._dao.delete(cargo)

    def find_all(self) -> list[Cargo]:
        return self._dao.query.all().items
