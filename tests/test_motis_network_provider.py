"""Tests for MotisNetworkProvider with a mocked HTTP client."""

from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest

from transit_trips.adapters.motis_api import MotisNetworkProvider, MotisQueryTripsContext
from transit_trips.adapters.motis_api.motis_network_provider import place_for
from transit_trips.domain.errors import UpstreamFormatError
from transit_trips.domain.models import (
    Capability,
    Location,
    LocationType,
    NearbyLocationsStatus,
    NetworkId,
    PaginationContext,
    Point,
    Product,
    QueryDeparturesStatus,
    QueryTripsStatus,
    SuggestLocationsStatus,
    TripOptions,
)

HAUPTBAHNHOF = Location(LocationType.STATION, id="de:11000:900003201", name="Hauptbahnhof")
ZOO = Location.from_coord(Point.from_double(52.507, 13.332))
MORNING = datetime(2024, 3, 4, 8, 0, tzinfo=ZoneInfo("Europe/Berlin"))


def bus_itinerary(departure: str, arrival: str, trip_id: str) -> dict[str, Any]:
    return {
        "transfers": 0,
        "legs": [
            {
                "mode": "BUS",
                "tripId": trip_id,
                "routeId": "100",
                "displayName": "100",
                "headsign": "Zoologischer Garten",
                "from": {
                    "name": "Hauptbahnhof",
                    "stopId": "de:11000:900003201",
                    "lat": 52.525,
                    "lon": 13.369,
                    "scheduledDeparture": departure,
                },
                "to": {
                    "name": "Zoologischer Garten",
                    "stopId": "de:11000:900023201",
                    "lat": 52.507,
                    "lon": 13.332,
                    "scheduledArrival": arrival,
                },
            }
        ],
    }


def plan_doc(
    itineraries: list[dict[str, Any]], previous: str | None, following: str | None
) -> dict[str, Any]:
    return {
        "itineraries": itineraries,
        "direct": [],
        "previousPageCursor": previous,
        "nextPageCursor": following,
    }


FIRST_PAGE = plan_doc(
    [
        bus_itinerary("2024-03-04T07:05:00Z", "2024-03-04T07:20:00Z", "bus-1"),
        bus_itinerary("2024-03-04T07:15:00Z", "2024-03-04T07:30:00Z", "bus-2"),
    ],
    "EARLIER-1",
    "LATER-1",
)


def board(stop_ids: list[str]) -> dict[str, Any]:
    return {
        "place": {
            "name": "Hauptbahnhof",
            "stopId": "de:11000:900003201",
            "lat": 52.525,
            "lon": 13.369,
        },
        "stopTimes": [
            {
                "mode": "BUS",
                "realTime": False,
                "displayName": "100",
                "headsign": "Zoologischer Garten",
                "place": {
                    "name": "Hauptbahnhof",
                    "stopId": stop_id,
                    "lat": 52.525,
                    "lon": 13.369,
                    "scheduledDeparture": "2024-03-04T07:05:00Z",
                    "departure": "2024-03-04T07:05:00Z",
                },
            }
            for stop_id in stop_ids
        ],
    }


def mock_http_client(*docs: Any) -> MagicMock:
    """HTTP client whose get_json returns the given documents in order."""
    client = MagicMock()
    client.get_json = AsyncMock(side_effect=list(docs))
    client.url_for.side_effect = lambda path: f"https://motis.test/api/{path}"
    return client


def provider_for(client: MagicMock, num_trips: int | None = None) -> MotisNetworkProvider:
    return MotisNetworkProvider(client, NetworkId.TRANSITOUS, num_trips=num_trips)


class TestCapabilities:
    """Tests for advertised capabilities."""

    def test_supports_queries_but_not_via(self) -> None:
        """Given the MOTIS provider, when checking capabilities, then via is unsupported."""
        provider = provider_for(mock_http_client())

        assert provider.has_capabilities(Capability.TRIPS, Capability.DEPARTURES)
        assert not provider.has_capabilities(Capability.TRIPS, Capability.TRIPS_VIA)
        assert provider.default_products() == Product.ALL_EXCEPT_HIGHSPEED


class TestPlaceFor:
    """Tests for place_for."""

    def test_coordinate_wins(self) -> None:
        """Given a station with coordinate, when building the place, then lat,lon is used."""
        location = Location(LocationType.STATION, id="x", coord=Point.from_double(52.5, 13.4))

        assert place_for(location) == "52.500000,13.400000"

    def test_coordinate_like_name(self) -> None:
        """Given a name of the form lat,lon, when building the place, then it is passed on."""
        assert place_for(Location(LocationType.ANY, name="52.5,13.4")) == "52.5,13.4"

    def test_station_id(self) -> None:
        """Given a station without coordinate, when building the place, then the id is used."""
        assert place_for(HAUPTBAHNHOF) == "de:11000:900003201"

    def test_comma_in_station_name_falls_back_to_id(self) -> None:
        """Given a station name with a comma, when building the place, then the id is used."""
        location = Location(LocationType.STATION, id="de:09162:6", name="München, Hauptbahnhof")

        assert place_for(location) == "de:09162:6"

    def test_when_nothing_usable_then_raises(self) -> None:
        """Given only a plain name, when building the place, then ValueError."""
        with pytest.raises(ValueError):
            place_for(Location(LocationType.ANY, name="Somewhere"))


class TestSuggestLocations:
    """Tests for suggest_locations."""

    @pytest.mark.asyncio
    async def test_passes_type_filter_and_truncates(self) -> None:
        """Given station-only suggestions and a limit, when querying, then filter and limit apply."""
        doc = [
            {"type": "STOP", "id": f"s{i}", "name": f"Stop {i}", "lat": 52.5, "lon": 13.4}
            for i in range(5)
        ]
        client = mock_http_client(doc)

        result = await provider_for(client).suggest_locations(
            "Haupt", {LocationType.STATION}, max_locations=3
        )

        assert result.status is SuggestLocationsStatus.OK
        assert [location.id for location in result.locations] == ["s0", "s1", "s2"]
        client.get_json.assert_awaited_once_with("v1/geocode", {"text": "Haupt", "type": "STOP"})

    @pytest.mark.asyncio
    async def test_when_rejected_then_empty(self) -> None:
        """Given a rejected request, when querying, then no locations."""
        result = await provider_for(mock_http_client(None)).suggest_locations("?")

        assert result.locations == []
        assert result.header.server_product == "MOTIS"


class TestQueryTrips:
    """Tests for query_trips."""

    @pytest.mark.asyncio
    async def test_first_page(self) -> None:
        """Given a plan with cursors, when querying, then trips and both cursors are returned."""
        client = mock_http_client(FIRST_PAGE)

        result = await provider_for(client, num_trips=6).query_trips(
            HAUPTBAHNHOF, None, ZOO, MORNING
        )

        assert result.status is QueryTripsStatus.OK
        assert len(result.trips) == 2
        assert result.context.can_query_earlier()
        assert result.context.can_query_later()
        path, params = client.get_json.call_args.args
        assert path == "v4/plan"
        assert params == {
            "time": "2024-03-04T07:00:00Z",
            "fromPlace": "de:11000:900003201",
            "toPlace": "52.507000,13.332000",
            "transitModes": "TRANSIT",
            "numItineraries": 6,
        }

    @pytest.mark.asyncio
    async def test_options_are_passed(self) -> None:
        """Given arrival mode, products and max changes, when querying, then they reach the request."""
        client = mock_http_client(FIRST_PAGE)
        options = TripOptions(products=frozenset({Product.BUS, Product.TRAM}), max_changes=1)

        await provider_for(client).query_trips(
            HAUPTBAHNHOF, None, ZOO, MORNING, dep=False, options=options
        )

        params = client.get_json.call_args.args[1]
        assert params["arriveBy"] == "true"
        assert params["transitModes"] == "TRAM,BUS,COACH"
        assert params["maxTransfers"] == 1
        assert "numItineraries" not in params

    @pytest.mark.asyncio
    async def test_when_origin_has_comma_in_name_then_request_uses_its_id(self) -> None:
        """Given an origin named "City, Station", when querying, then its stop id is sent."""
        client = mock_http_client(plan_doc([], None, None))
        origin = Location(LocationType.STATION, id="de:09162:6", name="München, Hauptbahnhof")

        await provider_for(client).query_trips(origin, None, ZOO, MORNING)

        assert client.get_json.call_args.args[1]["fromPlace"] == "de:09162:6"

    @pytest.mark.asyncio
    async def test_when_origin_unusable_then_unknown_from(self) -> None:
        """Given an origin with only a plain name, when querying, then UNKNOWN_FROM without a request."""
        client = mock_http_client()

        result = await provider_for(client).query_trips(
            Location(LocationType.ANY, name="Somewhere"), None, ZOO, MORNING
        )

        assert result.status is QueryTripsStatus.UNKNOWN_FROM
        client.get_json.assert_not_called()

    @pytest.mark.asyncio
    async def test_when_destination_unusable_then_unknown_to(self) -> None:
        """Given a destination with only a plain name, when querying, then UNKNOWN_TO."""
        client = mock_http_client()

        result = await provider_for(client).query_trips(
            HAUPTBAHNHOF, None, Location(LocationType.ANY, name="Somewhere, Else"), MORNING
        )

        assert result.status is QueryTripsStatus.UNKNOWN_TO
        client.get_json.assert_not_called()

    @pytest.mark.asyncio
    async def test_when_rejected_then_unknown_location(self) -> None:
        """Given a 4xx answer, when querying, then UNKNOWN_LOCATION."""
        result = await provider_for(mock_http_client(None)).query_trips(
            HAUPTBAHNHOF, None, ZOO, MORNING
        )

        assert result.status is QueryTripsStatus.UNKNOWN_LOCATION

    @pytest.mark.asyncio
    async def test_when_no_itineraries_then_no_trips(self) -> None:
        """Given an empty plan, when querying, then NO_TRIPS."""
        result = await provider_for(mock_http_client(plan_doc([], None, None))).query_trips(
            HAUPTBAHNHOF, None, ZOO, MORNING
        )

        assert result.status is QueryTripsStatus.NO_TRIPS

    @pytest.mark.asyncio
    async def test_when_date_naive_then_invalid_date(self) -> None:
        """Given a date without zone, when querying, then INVALID_DATE without a request."""
        client = mock_http_client()

        result = await provider_for(client).query_trips(
            HAUPTBAHNHOF, None, ZOO, datetime(2024, 3, 4, 8, 0)
        )

        assert result.status is QueryTripsStatus.INVALID_DATE
        client.get_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_when_location_unusable_then_unknown_location(self) -> None:
        """Given a destination without id or coordinate, when querying, then UNKNOWN_LOCATION."""
        client = mock_http_client()

        result = await provider_for(client).query_trips(
            HAUPTBAHNHOF, None, Location(LocationType.ANY, name="Somewhere"), MORNING
        )

        assert result.status is QueryTripsStatus.UNKNOWN_LOCATION
        client.get_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_when_response_malformed_then_raises(self) -> None:
        """Given a plan without itineraries, when querying, then UpstreamFormatError."""
        with pytest.raises(UpstreamFormatError):
            await provider_for(mock_http_client({"direct": []})).query_trips(
                HAUPTBAHNHOF, None, ZOO, MORNING
            )


class TestQueryMoreTrips:
    """Tests for query_more_trips."""

    @pytest.mark.asyncio
    async def test_later_page_moves_only_later_cursor(self) -> None:
        """Given a first page, when paging later, then the later cursor is sent and replaced."""
        second_page = plan_doc(
            [bus_itinerary("2024-03-04T07:25:00Z", "2024-03-04T07:40:00Z", "bus-3")],
            "EARLIER-2",
            "LATER-2",
        )
        client = mock_http_client(FIRST_PAGE, second_page)
        provider = provider_for(client)
        first = await provider.query_trips(HAUPTBAHNHOF, None, ZOO, MORNING)

        result = await provider.query_more_trips(first.context, later=True)

        assert result.status is QueryTripsStatus.OK
        assert len(result.trips) == 1
        assert client.get_json.call_args.args[1]["pageCursor"] == "LATER-1"
        assert first.context.later_token == "LATER-2"
        assert first.context.earlier_token == "EARLIER-1"

    @pytest.mark.asyncio
    async def test_when_page_lacks_cursor_then_direction_is_exhausted(self) -> None:
        """Given an earlier page without a backward cursor, when paging, then earlier is exhausted."""
        earlier_page = plan_doc(
            [bus_itinerary("2024-03-04T06:55:00Z", "2024-03-04T07:10:00Z", "bus-0")],
            None,
            "LATER-0",
        )
        client = mock_http_client(FIRST_PAGE, earlier_page)
        provider = provider_for(client)
        first = await provider.query_trips(HAUPTBAHNHOF, None, ZOO, MORNING)

        await provider.query_more_trips(first.context, later=False)

        assert first.context.can_query_earlier() is False
        assert first.context.later_token == "LATER-1"

    @pytest.mark.asyncio
    async def test_when_exhausted_then_no_request(self) -> None:
        """Given a context without later cursor, when paging later, then NO_TRIPS offline."""
        client = mock_http_client()
        context = MotisQueryTripsContext(HAUPTBAHNHOF, None, ZOO, MORNING, earlier_token="E")

        result = await provider_for(client).query_more_trips(context, later=True)

        assert result.status is QueryTripsStatus.NO_TRIPS
        client.get_json.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_when_context_foreign_then_raises(self) -> None:
        """Given a context from another provider, when paging, then TypeError."""
        context = PaginationContext(HAUPTBAHNHOF, None, ZOO, MORNING, later_token="L")

        with pytest.raises(TypeError):
            await provider_for(mock_http_client()).query_more_trips(context, later=True)


class TestQueryDepartures:
    """Tests for query_departures."""

    @pytest.mark.asyncio
    async def test_without_equivs_only_own_stop(self) -> None:
        """Given departures at the station and a neighbour, when querying, then only the station."""
        client = mock_http_client(board(["de:11000:900003201", "de:11000:900003201:2"]))

        result = await provider_for(client).query_departures(
            "de:11000:900003201", MORNING, max_departures=5
        )

        assert result.status is QueryDeparturesStatus.OK
        assert [s.location.id for s in result.station_departures] == ["de:11000:900003201"]
        params = client.get_json.call_args.args[1]
        assert params["n"] == 5
        assert params["time"] == "2024-03-04T07:00:00Z"

    @pytest.mark.asyncio
    async def test_with_equivs_all_stops(self) -> None:
        """Given equivs, when querying, then departures of nearby stops are kept."""
        client = mock_http_client(board(["de:11000:900003201", "de:11000:900003201:2"]))

        result = await provider_for(client).query_departures(
            "de:11000:900003201", MORNING, equivs=True
        )

        assert len(result.station_departures) == 2
        assert client.get_json.call_args.args[1]["n"] == 10

    @pytest.mark.asyncio
    async def test_when_rejected_then_invalid_station(self) -> None:
        """Given an unknown stop, when querying, then INVALID_STATION."""
        result = await provider_for(mock_http_client(None)).query_departures("nope")

        assert result.status is QueryDeparturesStatus.INVALID_STATION


class TestQueryNearbyLocations:
    """Tests for query_nearby_locations."""

    REVERSE = [
        {"type": "STOP", "id": "a", "name": "A", "lat": 52.52, "lon": 13.37},
        {"type": "STOP", "id": "b", "name": "B", "lat": 52.53, "lon": 13.38},
    ]

    @pytest.mark.asyncio
    async def test_by_coordinate(self) -> None:
        """Given a coordinate, when querying, then reverse geocoding is used directly."""
        client = mock_http_client(self.REVERSE)
        location = Location.from_coord(Point.from_double(52.52, 13.37))

        result = await provider_for(client).query_nearby_locations(
            {LocationType.STATION}, location, max_locations=1
        )

        assert [location.id for location in result.locations] == ["a"]
        client.get_json.assert_awaited_once_with(
            "v1/reverse-geocode", {"place": "52.52,13.37", "type": "STOP"}
        )

    @pytest.mark.asyncio
    async def test_by_station_id(self) -> None:
        """Given a station id, when querying, then its coordinate is looked up first."""
        client = mock_http_client(board(["de:11000:900003201"]), self.REVERSE)

        result = await provider_for(client).query_nearby_locations(
            {LocationType.STATION}, Location(LocationType.STATION, id="de:11000:900003201")
        )

        assert result.status is NearbyLocationsStatus.OK
        assert len(result.locations) == 2
        assert client.get_json.call_args.args[1]["place"] == "52.525,13.369"

    @pytest.mark.asyncio
    async def test_when_no_id_and_no_coord_then_invalid_id(self) -> None:
        """Given a location without id or coordinate, when querying, then INVALID_ID."""
        result = await provider_for(mock_http_client()).query_nearby_locations(
            set(), Location(LocationType.ANY, name="Somewhere")
        )

        assert result.status is NearbyLocationsStatus.INVALID_ID

    @pytest.mark.asyncio
    async def test_when_response_not_list_then_raises(self) -> None:
        """Given an object instead of a list, when querying, then UpstreamFormatError."""
        location = Location.from_coord(Point.from_double(52.52, 13.37))

        with pytest.raises(UpstreamFormatError):
            await provider_for(mock_http_client({"error": "x"})).query_nearby_locations(
                set(), location
            )


class TestQueryTripDetails:
    """Tests for query_trip_details."""

    @pytest.mark.asyncio
    async def test_marks_details_loaded(self) -> None:
        """Given a summarized trip, when loading details, then it is flagged and timestamped."""
        client = mock_http_client(FIRST_PAGE)
        provider = provider_for(client)
        trip = (await provider.query_trips(HAUPTBAHNHOF, None, ZOO, MORNING)).trips[0]
        before = datetime.now(UTC)

        loaded = await provider.query_trip_details(trip)

        assert loaded is trip
        assert trip.is_details_loaded is True
        assert trip.transfer_details == []
        assert trip.updated_at >= before

    @pytest.mark.asyncio
    async def test_when_already_loaded_then_untouched(self) -> None:
        """Given a trip with details, when loading again, then updated_at is kept."""
        client = mock_http_client(FIRST_PAGE)
        provider = provider_for(client)
        trip = (await provider.query_trips(HAUPTBAHNHOF, None, ZOO, MORNING)).trips[0]
        await provider.query_trip_details(trip)
        updated_at = trip.updated_at

        await provider.query_trip_details(trip)

        assert trip.updated_at == updated_at
