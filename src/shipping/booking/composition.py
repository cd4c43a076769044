"""Composition root for the booking service.

Builds a BookingService with its collaborators and applies timing
instrumentation. Configuration:

    SHIPPING_ICON_DIR   directory of ``.jpg`` icons (default ``booking/icons``)
"""

import os
import random

from shipping.booking.icons import load_icons, make_icon_picker
from shipping.booking.service import BookingService
from shipping.location.location import seed_locations
from shipping.routing.fake_adapter import FakeRoutingService
from shipping.routing.port import RoutingPort
from shipping.utils.timing import instrument
from shipping.voyage.voyage import seed_voyages

_TIMED_OPERATIONS = (
    "book_new_cargo",
    "load_cargo",
    "request_possible_routes_for_cargo",
    "assign_cargo_to_route",
    "change_destination",
    "unbook_cargo",
    "cargos",
    "locations",
)

ICON_SEED = 99


def seed_registries() -> None:
    """Make sure the sample locations and voyages are registered."""
    seed_locations()
    seed_voyages()


def create_booking_service(
    routing: RoutingPort | None = None,
    icon_dir: str | None = None,
    rng: random.Random | None = None,
    timed: bool = True,
) -> BookingService:
    """Wire a BookingService with its routing adapter and icon picker."""
    icons = load_icons(icon_dir or os.getenv("SHIPPING_ICON_DIR", "booking/icons"))
    service = BookingService(
        routing=routing or FakeRoutingService(),
        pick_icon=make_icon_picker(icons, rng or random.Random(ICON_SEED)),
    )
    if timed:
        instrument(service, *_TIMED_OPERATIONS)
    return service
