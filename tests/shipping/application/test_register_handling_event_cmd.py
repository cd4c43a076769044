"""Application tests for registering handling events via domain.process()."""

import json
from datetime import UTC, datetime

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from shipping.cargo.assignment import AssignCargoToRoute
from shipping.cargo.booking import BookNewCargo
from shipping.cargo.cargo import Cargo
from shipping.cargo.delivery import TransportStatus
from shipping.handling.handling_event import HandlingEvent
from shipping.handling.registration import RegisterHandlingEvent


def _at(day, hour=0):
    return datetime(2026, 3, day, hour, tzinfo=UTC)


def _routed_cargo():
    tracking_id = current_domain.process(
        BookNewCargo(origin="CNHKG", destination="USCHI", arrival_deadline=_at(20)),
        asynchronous=False,
    )
    legs = [
        {
            "voyage_number": "V100",
            "load_location": "CNHKG",
            "unload_location": "USNYC",
            "load_time": _at(1).isoformat(),
            "unload_time": _at(6).isoformat(),
        },
        {
            "voyage_number": "V300",
            "load_location": "USNYC",
            "unload_location": "USCHI",
            "load_time": _at(7).isoformat(),
            "unload_time": _at(8).isoformat(),
        },
    ]
    current_domain.process(
        AssignCargoToRoute(tracking_id=tracking_id, legs=json.dumps(legs)),
        asynchronous=False,
    )
    return tracking_id


def _register(tracking_id, event_type, location, day, voyage_number=None, hour=0):
    return current_domain.process(
        RegisterHandlingEvent(
            tracking_id=tracking_id,
            event_type=event_type,
            location=location,
            voyage_number=voyage_number,
            completed_at=_at(day, hour),
        ),
        asynchronous=False,
    )


def _delivery(tracking_id):
    return current_domain.repository_for(Cargo).find(tracking_id).delivery


class TestRegistration:
    def test_event_is_stored_in_history(self):
        tracking_id = _routed_cargo()
        event_id = _register(tracking_id, "Receive", "CNHKG", 1)
        history = current_domain.repository_for(HandlingEvent).query_history(tracking_id)
        assert [str(event.id) for event in history] == [event_id]

    def test_history_is_per_cargo(self):
        first = _routed_cargo()
        second = _routed_cargo()
        _register(first, "Receive", "CNHKG", 1)
        assert current_domain.repository_for(HandlingEvent).query_history(second).is_empty

    def test_delivery_follows_each_event(self):
        tracking_id = _routed_cargo()
        _register(tracking_id, "Receive", "CNHKG", 1)
        assert _delivery(tracking_id).transport_status == TransportStatus.IN_PORT.value

        _register(tracking_id, "Load", "CNHKG", 1, voyage_number="V100", hour=6)
        delivery = _delivery(tracking_id)
        assert delivery.transport_status == TransportStatus.ONBOARD_CARRIER.value
        assert delivery.current_voyage == "V100"
        assert delivery.next_expected_activity.event_type == "Unload"
        assert delivery.next_expected_activity.location == "USNYC"

    def test_full_journey_ends_claimed(self):
        tracking_id = _routed_cargo()
        _register(tracking_id, "Receive", "CNHKG", 1)
        _register(tracking_id, "Load", "CNHKG", 1, voyage_number="V100", hour=6)
        _register(tracking_id, "Unload", "USNYC", 6, voyage_number="V100")
        _register(tracking_id, "Load", "USNYC", 7, voyage_number="V300")
        _register(tracking_id, "Unload", "USCHI", 8, voyage_number="V300")
        _register(tracking_id, "Claim", "USCHI", 9)

        delivery = _delivery(tracking_id)
        assert delivery.transport_status == TransportStatus.CLAIMED.value
        assert delivery.is_unloaded_at_destination is True
        assert delivery.is_misdirected is False
        assert delivery.next_expected_activity is None

    def test_late_registration_is_replayed_in_completion_order(self):
        tracking_id = _routed_cargo()
        _register(tracking_id, "Load", "CNHKG", 2, voyage_number="V100")
        _register(tracking_id, "Receive", "CNHKG", 1)

        delivery = _delivery(tracking_id)
        assert delivery.transport_status == TransportStatus.ONBOARD_CARRIER.value
        assert delivery.last_known_location == "CNHKG"

    def test_unplanned_port_marks_cargo_misdirected(self):
        tracking_id = _routed_cargo()
        _register(tracking_id, "Receive", "CNHKG", 1)
        _register(tracking_id, "Load", "CNHKG", 1, voyage_number="V100", hour=6)
        _register(tracking_id, "Unload", "DEHAM", 5, voyage_number="V100")

        delivery = _delivery(tracking_id)
        assert delivery.is_misdirected is True
        assert delivery.last_known_location == "DEHAM"
        assert delivery.next_expected_activity is None


class TestAdmission:
    def test_unknown_cargo_raises_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            _register("UNKNOWN1", "Receive", "CNHKG", 1)

    def test_unknown_location_rejected(self):
        tracking_id = _routed_cargo()
        with pytest.raises(ValidationError) as exc:
            _register(tracking_id, "Receive", "XXXXX", 1)
        assert "location" in exc.value.messages

    def test_unknown_voyage_rejected(self):
        tracking_id = _routed_cargo()
        with pytest.raises(ValidationError) as exc:
            _register(tracking_id, "Load", "CNHKG", 1, voyage_number="V999")
        assert "voyage_number" in exc.value.messages

    def test_load_without_voyage_rejected(self):
        tracking_id = _routed_cargo()
        with pytest.raises(ValidationError) as exc:
            _register(tracking_id, "Load", "CNHKG", 1)
        assert "voyage_number" in exc.value.messages

    def test_unknown_event_type_rejected(self):
        tracking_id = _routed_cargo()
        with pytest.raises(ValidationError):
            _register(tracking_id, "Teleport", "CNHKG", 1)

    def test_rejected_event_is_not_logged(self):
        tracking_id = _routed_cargo()
        with pytest.raises(ValidationError):
            _register(tracking_id, "Receive", "XXXXX", 1)
        assert current_domain.repository_for(HandlingEvent).query_history(tracking_id).is_empty
        assert _delivery(tracking_id).transport_status == TransportStatus.NOT_RECEIVED.value
