"""Voyage registry — voyages identified by their voyage number.

Schedules are not modelled; the core only needs to know a voyage exists.
"""

from protean.exceptions import ObjectNotFoundError
from protean.fields import String
from protean.utils.globals import current_domain

from shipping.domain import shipping

SAMPLE_VOYAGES = ("V100", "V300", "V400", "0100S", "0200T", "0300A", "0301S", "0400S")


@shipping.aggregate
class Voyage:
    number = String(identifier=True, max_length=20)


@shipping.repository(part_of=Voyage)
class VoyageRepository:
    def find(self, number: str) -> Voyage:
        """Raises ObjectNotFoundError for an unregistered voyage number."""
        return self.get(number)

    def find_all(self) -> list[Voyage]:
        return self._dao.query.all().items

    def store(self, voyage: Voyage) -> None:
        self.add(voyage)


def seed_voyages(numbers=SAMPLE_VOYAGES) -> None:
    """Register the sample voyages (or the given numbers) that are not yet known."""
    repo = current_domain.repository_for(Voyage)
    for number in numbers:
        try:
            repo.find(number)
        except ObjectNotFoundError:
            repo.store(Voyage(number=number))
