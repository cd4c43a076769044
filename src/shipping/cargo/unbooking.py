"""Cargo unbooking — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from shipping.cargo.cargo import Cargo
from shipping.domain import shipping

logger = structlog.get_logger(__name__)


@shipping.command(part_of="Cargo")
class UnbookCargo:
    """Remove a cargo from the tracking system."""

    tracking_id = Identifier(required=True)


@shipping.command_handler(part_of=Cargo)
class UnbookCargoHandler:
    @handle(UnbookCargo)
    def unbook_cargo(self, command):
        repo = current_domain.repository_for(Cargo)
        cargo = repo.find(command.tracking_id)
        repo.remove(cargo)
        logger.info("Cargo unbooked", tracking_id=command.tracking_id)
