"""Trip reference domain model."""

from dataclasses import dataclass, field

from transit_trips.domain.models.location import Location
from transit_trips.domain.models.network_id import NetworkId


@dataclass(eq=False)
class TripReference:
    """Pointer from a trip back to the query that produced it.

    Backends subclass this to carry their own reload tokens.

    Equality and hashing consider the network only, so two references to
    different journeys on the same network compare equal. Kept as observed in
    existing providers; do not rely on it to tell journeys apart.
    """

    network: NetworkId
    from_location: Location
    via_location: Location | None
    to_location: Location
    extra: dict[str, str] = field(default_factory=dict)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, TripReference):
            return NotImplemented
        return self.network == other.network

    def __hash__(self) -> int:
        return hash(self.network)
