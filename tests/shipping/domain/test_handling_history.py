"""Tests for HandlingEvent registration and HandlingHistory ordering."""

from datetime import UTC, datetime

from shipping.handling.events import HandlingEventRegistered
from shipping.handling.handling_event import HandlingEvent, HandlingHistory


def _at(day, hour=0):
    return datetime(2026, 3, day, hour, tzinfo=UTC)


def _event(event_type, location, completed_day, registered_day, voyage=None, hour=0):
    return HandlingEvent.register(
        tracking_id="ABC123",
        event_type=event_type,
        location=location,
        voyage_number=voyage,
        completed_at=_at(completed_day, hour),
        registered_at=_at(registered_day, hour),
    )


class TestRegister:
    def test_raises_registered_event(self):
        event = _event("Load", "CNSHA", 1, 2, voyage="0200T")
        assert len(event._events) == 1
        registered = event._events[0]
        assert isinstance(registered, HandlingEventRegistered)
        assert registered.tracking_id == "ABC123"
        assert registered.event_type == "Load"
        assert registered.voyage_number == "0200T"
        assert registered.handling_event_id == str(event.id)

    def test_registered_at_defaults_to_now(self):
        before = datetime.now(UTC)
        event = HandlingEvent.register(
            tracking_id="ABC123",
            event_type="Receive",
            location="CNSHA",
            completed_at=_at(1),
        )
        assert event.registered_at >= before


class TestHandlingHistory:
    def test_empty_history(self):
        history = HandlingHistory()
        assert history.is_empty
        assert len(history) == 0
        assert history.most_recent is None

    def test_orders_by_completion_time(self):
        receive = _event("Receive", "CNSHA", 1, 5)
        load = _event("Load", "CNSHA", 2, 3, voyage="0200T")
        history = HandlingHistory([load, receive])
        assert list(history) == [receive, load]
        assert history.most_recent is load

    def test_ties_broken_by_registration_time(self):
        first = _event("Customs", "CNSHA", 1, 2)
        second = _event("Receive", "CNSHA", 1, 3)
        assert HandlingHistory([second, first]).events == (first, second)

    def test_insertion_order_does_not_matter(self):
        events = [
            _event("Receive", "CNSHA", 1, 1),
            _event("Load", "CNSHA", 2, 9, voyage="0200T"),
            _event("Unload", "NLRTM", 5, 6, voyage="0200T"),
        ]
        assert HandlingHistory(events).events == HandlingHistory(reversed(events)).events

    def test_with_event_returns_a_new_history(self):
        receive = _event("Receive", "CNSHA", 2, 2)
        history = HandlingHistory([receive])
        earlier = _event("Customs", "CNSHA", 1, 3)

        extended = history.with_event(earlier)

        assert len(history) == 1
        assert extended.events == (earlier, receive)
