"""HandlingEvent aggregate and the ordered HandlingHistory of a cargo.

A handling event is one observed real-world fact about a cargo: it was
received, loaded onto a voyage, unloaded from one, cleared customs, or was
claimed. Events are append-only. ``completed_at`` is when the fact happened,
``registered_at`` is when it was recorded; the two may arrive out of order.

History Ordering:
    completed_at ascending, ties broken by registered_at ascending, so that
    replaying the same set of events always visits them in the same order.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String

from shipping.domain import shipping
from shipping.handling.events import HandlingEventRegistered
from shipping.utils.timestamps import as_utc


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class HandlingEventType(Enum):
    RECEIVE = "Receive"
    LOAD = "Load"
    UNLOAD = "Unload"
    CUSTOMS = "Customs"
    CLAIM = "Claim"


# Event types that always happen on board a specific voyage
CARRIER_EVENT_TYPES = {HandlingEventType.LOAD, HandlingEventType.UNLOAD}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@shipping.aggregate
class HandlingEvent:
    tracking_id = Identifier(required=True)
    event_type = String(required=True, max_length=20, choices=HandlingEventType)
    location = String(required=True, max_length=5)
    voyage_number = String(max_length=20)
    completed_at = DateTime(required=True)
    registered_at = DateTime(required=True)

    @classmethod
    def register(
        cls,
        tracking_id: str,
        event_type: str,
        location: str,
        completed_at: datetime,
        voyage_number: str | None = None,
        registered_at: datetime | None = None,
    ):
        """Record a new handling event. ``registered_at`` defaults to now."""
        completed_at = as_utc(completed_at)
        registered_at = as_utc(registered_at) or datetime.now(UTC)
        event = cls(
            tracking_id=tracking_id,
            event_type=event_type,
            location=location,
            voyage_number=voyage_number,
            completed_at=completed_at,
            registered_at=registered_at,
        )
        event.raise_(
            HandlingEventRegistered(
                handling_event_id=str(event.id),
                tracking_id=tracking_id,
                event_type=event_type,
                location=location,
                voyage_number=voyage_number or "",
                completed_at=completed_at,
                registered_at=registered_at,
            )
        )
        return event


# ---------------------------------------------------------------------------
# Handling History
# ---------------------------------------------------------------------------
def _chronological(event) -> tuple:
    return (as_utc(event.completed_at), as_utc(event.registered_at))


class HandlingHistory:
    """Immutable, chronologically ordered handling events of one cargo."""

    __slots__ = ("_events",)

    def __init__(self, events=()):
        self._events = tuple(sorted(events, key=_chronological))

    def __iter__(self):
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __repr__(self) -> str:
        return f"HandlingHistory({len(self._events)} events)"

    @property
    def events(self) -> tuple:
        return self._events

    @property
    def is_empty(self) -> bool:
        return not self._events

    @property
    def most_recent(self):
        """The event that determines the cargo's current state, or None."""
        return self._events[-1] if self._events else None

    def with_event(self, event) -> "HandlingHistory":
        """Return a new history with ``event`` inserted at its chronological position."""
        return HandlingHistory((*self._events, event))


@shipping.repository(part_of=HandlingEvent)
class HandlingEventRepository:
    """Append-only store of handling events, queried per cargo."""

    def store(self, event: HandlingEvent) -> None:
        self.add(event)

    def query_history(self, tracking_id: str) -> HandlingHistory:
        results = self._dao.query.filter(tracking_id=tracking_id).all()
        return HandlingHistory(results.items)
