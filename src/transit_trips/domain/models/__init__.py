"""Domain models for transit trips."""

from transit_trips.domain.models.error_details import ErrorDetails
from transit_trips.domain.models.fare import Fare, FareType
from transit_trips.domain.models.leg import (
    IndividualLeg,
    IndividualType,
    Leg,
    LegKind,
    PublicLeg,
    leg_arrival_time,
    leg_departure_time,
    leg_max_time,
    leg_min_time,
)
from transit_trips.domain.models.line import JourneyRef, Line
from transit_trips.domain.models.location import Location, LocationType, Point
from transit_trips.domain.models.network_id import Capability, NetworkId
from transit_trips.domain.models.pagination_context import PaginationContext
from transit_trips.domain.models.position import Position
from transit_trips.domain.models.product import Product
from transit_trips.domain.models.query import (
    Accessibility,
    Departure,
    LineDestination,
    NearbyLocationsResult,
    NearbyLocationsStatus,
    Optimize,
    QueryDeparturesResult,
    QueryDeparturesStatus,
    QueryTripsResult,
    QueryTripsStatus,
    ResultHeader,
    StationDepartures,
    SuggestLocationsResult,
    SuggestLocationsStatus,
    TripFlag,
    TripOptions,
    WalkSpeed,
)
from transit_trips.domain.models.stop import Stop
from transit_trips.domain.models.temporal_value import TemporalValue
from transit_trips.domain.models.transfer_details import TransferDetails
from transit_trips.domain.models.trip import Trip
from transit_trips.domain.models.trip_reference import TripReference

__all__ = [
    "Accessibility",
    "Capability",
    "Departure",
    "ErrorDetails",
    "Fare",
    "FareType",
    "IndividualLeg",
    "IndividualType",
    "JourneyRef",
    "Leg",
    "LegKind",
    "Line",
    "LineDestination",
    "Location",
    "LocationType",
    "NearbyLocationsResult",
    "NearbyLocationsStatus",
    "NetworkId",
    "Optimize",
    "PaginationContext",
    "Point",
    "Position",
    "Product",
    "PublicLeg",
    "QueryDeparturesResult",
    "QueryDeparturesStatus",
    "QueryTripsResult",
    "QueryTripsStatus",
    "ResultHeader",
    "StationDepartures",
    "Stop",
    "SuggestLocationsResult",
    "SuggestLocationsStatus",
    "TemporalValue",
    "TransferDetails",
    "Trip",
    "TripFlag",
    "TripOptions",
    "TripReference",
    "WalkSpeed",
    "leg_arrival_time",
    "leg_departure_time",
    "leg_max_time",
    "leg_min_time",
]
