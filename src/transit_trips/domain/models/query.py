"""Canonical query options and result types shared by all providers."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from transit_trips.domain.models.error_details import ErrorDetails
from transit_trips.domain.models.line import Line
from transit_trips.domain.models.location import Location
from transit_trips.domain.models.network_id import NetworkId
from transit_trips.domain.models.pagination_context import PaginationContext
from transit_trips.domain.models.position import Position
from transit_trips.domain.models.product import Product
from transit_trips.domain.models.temporal_value import TemporalValue
from transit_trips.domain.models.trip import Trip


class WalkSpeed(Enum):
    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"


class Optimize(Enum):
    LEAST_DURATION = "least_duration"
    LEAST_CHANGES = "least_changes"
    LEAST_WALKING = "least_walking"


class Accessibility(Enum):
    NEUTRAL = "neutral"
    LIMITED = "limited"
    BARRIER_FREE = "barrier_free"


class TripFlag(Enum):
    BIKE = "bike"


@dataclass(frozen=True)
class TripOptions:
    """Optional knobs of a trip query. None means the backend default."""

    products: frozenset[Product] | None = None
    optimize: Optimize | None = None
    walk_speed: WalkSpeed | None = None
    max_changes: int | None = None
    accessibility: Accessibility | None = None
    flags: frozenset[TripFlag] | None = None

    def __post_init__(self) -> None:
        if self.max_changes is not None and self.max_changes < 0:
            raise ValueError("max_changes must not be negative")


@dataclass(frozen=True)
class ResultHeader:
    """Where a result came from."""

    network: NetworkId
    server_product: str
    server_time: datetime | None = None


class QueryTripsStatus(Enum):
    OK = "ok"
    NO_TRIPS = "no_trips"
    AMBIGUOUS = "ambiguous"
    UNKNOWN_FROM = "unknown_from"
    UNKNOWN_VIA = "unknown_via"
    UNKNOWN_TO = "unknown_to"
    UNKNOWN_LOCATION = "unknown_location"
    INVALID_DATE = "invalid_date"
    TOO_CLOSE = "too_close"
    SERVICE_DOWN = "service_down"


@dataclass
class QueryTripsResult:
    """Outcome of a trip query.

    Unknown or ambiguous locations are statuses rather than exceptions; for
    AMBIGUOUS the candidate lists are filled.
    """

    header: ResultHeader | None
    status: QueryTripsStatus
    from_location: Location | None = None
    via_location: Location | None = None
    to_location: Location | None = None
    context: PaginationContext | None = None
    trips: list[Trip] = field(default_factory=list)
    ambiguous_from: list[Location] | None = None
    ambiguous_via: list[Location] | None = None
    ambiguous_to: list[Location] | None = None
    error: ErrorDetails | None = None

    @classmethod
    def with_status(
        cls,
        header: ResultHeader | None,
        status: QueryTripsStatus,
        error: ErrorDetails | None = None,
    ) -> "QueryTripsResult":
        if status == QueryTripsStatus.OK:
            raise ValueError("an OK result needs trips; use the constructor")
        return cls(header=header, status=status, error=error)

    @classmethod
    def ambiguous(
        cls,
        header: ResultHeader | None,
        ambiguous_from: list[Location] | None,
        ambiguous_via: list[Location] | None,
        ambiguous_to: list[Location] | None,
    ) -> "QueryTripsResult":
        return cls(
            header=header,
            status=QueryTripsStatus.AMBIGUOUS,
            ambiguous_from=ambiguous_from,
            ambiguous_via=ambiguous_via,
            ambiguous_to=ambiguous_to,
        )


class SuggestLocationsStatus(Enum):
    OK = "ok"
    SERVICE_DOWN = "service_down"


@dataclass
class SuggestLocationsResult:
    header: ResultHeader | None
    status: SuggestLocationsStatus = SuggestLocationsStatus.OK
    locations: list[Location] = field(default_factory=list)


class NearbyLocationsStatus(Enum):
    OK = "ok"
    INVALID_ID = "invalid_id"
    SERVICE_DOWN = "service_down"


@dataclass
class NearbyLocationsResult:
    header: ResultHeader | None
    status: NearbyLocationsStatus = NearbyLocationsStatus.OK
    locations: list[Location] = field(default_factory=list)


@dataclass(frozen=True)
class Departure:
    """One departure from a station board."""

    planned_time: TemporalValue | None
    predicted_time: TemporalValue | None
    line: Line
    position: Position | None
    destination: Location | None
    cancelled: bool = False
    message: str | None = None

    def time(self) -> TemporalValue | None:
        return self.predicted_time or self.planned_time


@dataclass(frozen=True)
class LineDestination:
    line: Line
    destination: Location | None


@dataclass
class StationDepartures:
    """Departures grouped by the stop they leave from."""

    location: Location
    departures: list[Departure] = field(default_factory=list)
    lines: list[LineDestination] | None = None


class QueryDeparturesStatus(Enum):
    OK = "ok"
    INVALID_STATION = "invalid_station"
    SERVICE_DOWN = "service_down"


@dataclass
class QueryDeparturesResult:
    header: ResultHeader | None
    status: QueryDeparturesStatus = QueryDeparturesStatus.OK
    station_departures: list[StationDepartures] = field(default_factory=list)

    def find_station_departures(self, station_id: str) -> StationDepartures | None:
        for station in self.station_departures:
            if station.location.id == station_id:
                return station
        return None
