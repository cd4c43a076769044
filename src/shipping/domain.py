"""Shipping bounded context — cargo booking, routing and delivery tracking.

Tracks cargo through a network of ports and voyages. A cargo's delivery
status is never authored directly: it is re-derived from the route
specification, the assigned itinerary and the full handling history every
time one of them changes.
"""

from protean.domain import Domain

from shipping.utils.logging import configure_logging

configure_logging()

shipping = Domain(name="shipping")
