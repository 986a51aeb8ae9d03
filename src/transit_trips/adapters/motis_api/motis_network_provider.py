"""MOTIS network provider adapter.

Implements the NetworkProvider port on top of a MOTIS routing server, as run
for instance by Transitous.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from transit_trips.adapters.abstract_network_provider import (
    DEFAULT_TIMEZONE,
    AbstractNetworkProvider,
)
from transit_trips.adapters.motis_api.constants import (
    ALL_TRANSIT_MODES,
    GEOCODE_PATH,
    PLAN_PATH,
    REVERSE_GEOCODE_PATH,
    SERVER_PRODUCT,
    STOPTIMES_PATH,
    STOPTIMES_RADIUS_METERS,
)
from transit_trips.adapters.motis_api.http_client import MotisHttpClient
from transit_trips.adapters.motis_api.trip_parser import (
    MotisTripParser,
    motis_type_for,
    transit_modes_for,
)
from transit_trips.domain.errors import UpstreamFormatError
from transit_trips.domain.models import (
    Capability,
    Location,
    LocationType,
    NearbyLocationsResult,
    NearbyLocationsStatus,
    NetworkId,
    PaginationContext,
    QueryDeparturesResult,
    QueryDeparturesStatus,
    QueryTripsResult,
    QueryTripsStatus,
    ResultHeader,
    SuggestLocationsResult,
    TripOptions,
)

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class MotisQueryTripsContext(PaginationContext):
    """Pagination state plus the plan request it continues."""

    params: dict[str, Any] = field(default_factory=dict)


def _is_coordinate(text: str) -> bool:
    lat, comma, lon = text.partition(",")
    if not comma:
        return False
    try:
        float(lat)
        float(lon)
    except ValueError:
        return False
    return True


def place_for(location: Location) -> str:
    """MOTIS place parameter for a location: coordinate, stop id or "lat,lon" name.

    Raises:
        ValueError: If the location has neither coordinate, id nor a
            coordinate-like name.
    """
    if location.coord is not None:
        return f"{location.coord.lat:f},{location.coord.lon:f}"
    if location.name and _is_coordinate(location.name):
        return location.name
    if location.id:
        return location.id
    raise ValueError(f"location {location} can't be used as a MOTIS place")


def _format_instant(date: datetime) -> str:
    if date.tzinfo is None:
        raise ValueError("query date must be timezone aware")
    return date.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


class MotisNetworkProvider(AbstractNetworkProvider):
    """Network provider backed by a MOTIS API server."""

    capabilities = frozenset(
        {
            Capability.SUGGEST_LOCATIONS,
            Capability.NEARBY_LOCATIONS,
            Capability.DEPARTURES,
            Capability.TRIPS,
        }
    )

    def __init__(
        self,
        http_client: MotisHttpClient,
        network: NetworkId,
        timezone: str = DEFAULT_TIMEZONE,
        num_trips: int | None = None,
    ) -> None:
        super().__init__(network, timezone)
        self._http = http_client
        self._parser = MotisTripParser(network)
        self._num_trips = num_trips

    def _header(self) -> ResultHeader:
        return ResultHeader(self.network, SERVER_PRODUCT, datetime.now(UTC))

    async def suggest_locations(
        self,
        text: str,
        types: set[LocationType] | None = None,
        max_locations: int = 0,
    ) -> SuggestLocationsResult:
        params: dict[str, Any] = {"text": text}
        motis_type = motis_type_for(types)
        if motis_type is not None:
            params["type"] = motis_type

        doc = await self._http.get_json(GEOCODE_PATH, params)
        header = self._header()
        if doc is None:
            return SuggestLocationsResult(header)

        locations = self._parser.parse_suggestions(doc, self._http.url_for(GEOCODE_PATH))
        if max_locations > 0:
            locations = locations[:max_locations]
        logger.debug(f"Geocoding '{text}' returned {len(locations)} locations")
        return SuggestLocationsResult(header, locations=locations)

    def _plan_params(
        self,
        from_location: Location,
        to_location: Location,
        date: datetime,
        dep: bool,
        options: TripOptions | None,
    ) -> dict[str, Any]:
        transit_modes = ALL_TRANSIT_MODES
        if options is not None and options.products is not None:
            transit_modes = transit_modes_for(options.products)

        params: dict[str, Any] = {
            "time": _format_instant(date),
            "fromPlace": place_for(from_location),
            "toPlace": place_for(to_location),
            "transitModes": transit_modes,
        }
        if not dep:
            params["arriveBy"] = "true"
        if options is not None and options.max_changes is not None:
            params["maxTransfers"] = options.max_changes
        if self._num_trips is not None:
            params["numItineraries"] = self._num_trips
        return params

    async def _fetch_plan(
        self, context: MotisQueryTripsContext, params: dict[str, Any], later: bool | None
    ) -> QueryTripsResult:
        doc = await self._http.get_json(PLAN_PATH, params)
        header = self._header()
        if doc is None:
            return QueryTripsResult.with_status(header, QueryTripsStatus.UNKNOWN_LOCATION)

        trips, previous_cursor, next_cursor = self._parser.parse_plan(
            doc, context.from_location, context.to_location, self._http.url_for(PLAN_PATH)
        )
        if later is None:
            context.reset_tokens(previous_cursor, next_cursor)
        else:
            context.advance(later, next_cursor if later else previous_cursor)

        if not trips:
            return QueryTripsResult.with_status(header, QueryTripsStatus.NO_TRIPS)

        return QueryTripsResult(
            header=header,
            status=QueryTripsStatus.OK,
            from_location=context.from_location,
            via_location=context.via_location,
            to_location=context.to_location,
            context=context,
            trips=trips,
        )

    async def query_trips(
        self,
        from_location: Location,
        via_location: Location | None,
        to_location: Location,
        date: datetime,
        dep: bool = True,
        options: TripOptions | None = None,
    ) -> QueryTripsResult:
        if via_location is not None:
            logger.warning("MOTIS provider ignores the via location")
        if date.tzinfo is None:
            return QueryTripsResult.with_status(self._header(), QueryTripsStatus.INVALID_DATE)

        for location, unknown in (
            (from_location, QueryTripsStatus.UNKNOWN_FROM),
            (to_location, QueryTripsStatus.UNKNOWN_TO),
        ):
            try:
                place_for(location)
            except ValueError as e:
                logger.warning(f"Can't build plan request: {e}")
                return QueryTripsResult.with_status(self._header(), unknown)

        params = self._plan_params(from_location, to_location, date, dep, options)

        context = MotisQueryTripsContext(
            from_location=from_location,
            via_location=via_location,
            to_location=to_location,
            date=date,
            params=params,
        )
        return await self._fetch_plan(context, params, later=None)

    async def query_more_trips(self, context: PaginationContext, later: bool) -> QueryTripsResult:
        if not isinstance(context, MotisQueryTripsContext):
            raise TypeError(f"expected a MOTIS context, got {type(context).__name__}")

        cursor = context.later_token if later else context.earlier_token
        if not cursor:
            logger.info(f"No {'later' if later else 'earlier'} trips to query")
            return QueryTripsResult.with_status(self._header(), QueryTripsStatus.NO_TRIPS)

        params = dict(context.params)
        params["pageCursor"] = cursor
        return await self._fetch_plan(context, params, later=later)

    async def _query_stop_times(
        self, station_id: str, date: datetime | None, max_departures: int
    ) -> tuple[Location, QueryDeparturesResult] | None:
        params: dict[str, Any] = {
            "stopId": station_id,
            "time": _format_instant(date or datetime.now(UTC)),
            "n": max_departures if max_departures > 0 else 10,
            "radius": STOPTIMES_RADIUS_METERS,
        }
        doc = await self._http.get_json(STOPTIMES_PATH, params)
        if doc is None:
            return None

        requested, stations = self._parser.parse_stop_times(doc, self._http.url_for(STOPTIMES_PATH))
        return requested, QueryDeparturesResult(self._header(), station_departures=stations)

    async def query_departures(
        self,
        station_id: str,
        date: datetime | None = None,
        max_departures: int = 0,
        equivs: bool = False,
    ) -> QueryDeparturesResult:
        result = await self._query_stop_times(station_id, date, max_departures)
        if result is None:
            return QueryDeparturesResult(self._header(), QueryDeparturesStatus.INVALID_STATION)

        _, departures = result
        if not equivs:
            own = departures.find_station_departures(station_id)
            departures.station_departures = [own] if own is not None else []
        return departures

    async def query_nearby_locations(
        self,
        types: set[LocationType],
        location: Location,
        max_distance: int = 0,
        max_locations: int = 0,
    ) -> NearbyLocationsResult:
        coord = location.coord
        if coord is None:
            if not location.id:
                return NearbyLocationsResult(self._header(), NearbyLocationsStatus.INVALID_ID)
            stop_times = await self._query_stop_times(location.id, None, 1)
            if stop_times is None:
                return NearbyLocationsResult(self._header(), NearbyLocationsStatus.INVALID_ID)
            coord = stop_times[0].coord

        params: dict[str, Any] = {"place": f"{coord.lat},{coord.lon}"}
        motis_type = motis_type_for(types)
        if motis_type is not None:
            params["type"] = motis_type

        doc = await self._http.get_json(REVERSE_GEOCODE_PATH, params)
        header = self._header()
        if doc is None:
            return NearbyLocationsResult(header, NearbyLocationsStatus.SERVICE_DOWN)
        if not isinstance(doc, list):
            raise UpstreamFormatError(
                self._http.url_for(REVERSE_GEOCODE_PATH), "expected a list of places"
            )

        locations = self._parser.parse_reverse_geocode(
            doc, max_locations, self._http.url_for(REVERSE_GEOCODE_PATH)
        )
        return NearbyLocationsResult(header, locations=locations)
