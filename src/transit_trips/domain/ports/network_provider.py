"""Network provider port: the contract every backend integration implements."""

from datetime import datetime
from typing import Protocol

from transit_trips.domain.models.location import Location, LocationType
from transit_trips.domain.models.network_id import Capability, NetworkId
from transit_trips.domain.models.pagination_context import PaginationContext
from transit_trips.domain.models.product import Product
from transit_trips.domain.models.query import (
    NearbyLocationsResult,
    QueryDeparturesResult,
    QueryTripsResult,
    SuggestLocationsResult,
    TripOptions,
)
from transit_trips.domain.models.trip import Trip


class NetworkProvider(Protocol):
    """Port for querying one transit backend.

    Providers keep only read-only configuration and a shared HTTP session, so
    independent queries may run concurrently against one instance. Network
    failures surface as TransportFailure, malformed responses as
    UpstreamFormatError.
    """

    @property
    def network(self) -> NetworkId:
        """Network this provider serves."""
        ...

    def has_capabilities(self, *capabilities: Capability) -> bool:
        """Whether all given capabilities are supported."""
        ...

    def default_products(self) -> frozenset[Product]:
        """Products queried when the caller doesn't restrict them."""
        ...

    async def suggest_locations(
        self,
        text: str,
        types: set[LocationType] | None = None,
        max_locations: int = 0,
    ) -> SuggestLocationsResult:
        """Suggest locations matching free text, best match first."""
        ...

    async def query_trips(
        self,
        from_location: Location,
        via_location: Location | None,
        to_location: Location,
        date: datetime,
        dep: bool = True,
        options: TripOptions | None = None,
    ) -> QueryTripsResult:
        """Query trips departing after (dep=True) or arriving by (dep=False) date."""
        ...

    async def query_more_trips(self, context: PaginationContext, later: bool) -> QueryTripsResult:
        """Fetch the adjacent page, mutating context in place.

        Callers must serialize calls on one context and check
        can_query_earlier()/can_query_later() first.
        """
        ...

    async def query_departures(
        self,
        station_id: str,
        date: datetime | None = None,
        max_departures: int = 0,
        equivs: bool = False,
    ) -> QueryDeparturesResult:
        """Departures at a station, grouped by stop."""
        ...

    async def query_nearby_locations(
        self,
        types: set[LocationType],
        location: Location,
        max_distance: int = 0,
        max_locations: int = 0,
    ) -> NearbyLocationsResult:
        """Locations around a reference location, nearest first."""
        ...

    async def query_trip_details(self, trip: Trip) -> Trip:
        """Load fuller details (e.g. transfer feasibility) for a summarized trip."""
        ...
