"""Location registry — ports identified by their UN/LOCODE.

The shipping core treats locations as opaque keys. The registry only answers
whether a key exists, for booking and for handling-event admission.
"""

from protean.exceptions import ObjectNotFoundError
from protean.fields import String
from protean.utils.globals import current_domain

from shipping.domain import shipping

SAMPLE_LOCATIONS = {
    "SESTO": "Stockholm",
    "AUMEL": "Melbourne",
    "CNHKG": "Hongkong",
    "JNTKO": "Tokyo",
    "NLRTM": "Rotterdam",
    "DEHAM": "Hamburg",
    "CNSHA": "Shanghai",
    "SEGOT": "Gothenburg",
    "USNYC": "New York",
    "USCHI": "Chicago",
    "FIHEL": "Helsinki",
}


@shipping.aggregate
class Location:
    unlocode = String(identifier=True, max_length=5)
    name = String(required=True, max_length=100)


@shipping.repository(part_of=Location)
class LocationRepository:
    def find(self, unlocode: str) -> Location:
        """Raises ObjectNotFoundError for an unregistered UN/LOCODE."""
        return self.get(unlocode)

    def find_all(self) -> list[Location]:
        return self._dao.query.all().items

    def store(self, location: Location) -> None:
        self.add(location)


def seed_locations(locations: dict[str, str] | None = None) -> None:
    """Register the sample locations (or the given ones) that are not yet known."""
    repo = current_domain.repository_for(Location)
    for unlocode, name in (locations or SAMPLE_LOCATIONS).items():
        try:
            repo.find(unlocode)
        except ObjectNotFoundError:
            repo.store(Location(unlocode=unlocode, name=name))
