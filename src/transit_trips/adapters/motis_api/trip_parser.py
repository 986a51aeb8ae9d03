"""Parser for MOTIS API responses into the canonical trip model."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from transit_trips.adapters.motis_api.constants import (
    CITY_ADMIN_LEVEL,
    COUNTRY_ADMIN_LEVEL,
    END_PLACE_NAME,
    START_PLACE_NAME,
)
from transit_trips.domain.errors import UpstreamFormatError
from transit_trips.domain.models import (
    Departure,
    IndividualLeg,
    IndividualType,
    JourneyRef,
    Leg,
    Line,
    LineDestination,
    Location,
    LocationType,
    NetworkId,
    Point,
    Position,
    Product,
    PublicLeg,
    StationDepartures,
    Stop,
    TemporalValue,
    Trip,
)

logger = logging.getLogger(__name__)

# MOTIS mode -> product. Modes missing here are unknown public modes.
PRODUCT_BY_MODE: dict[str, Product] = {
    "BUS": Product.BUS,
    "COACH": Product.BUS,
    "SUBWAY": Product.SUBWAY,
    "METRO": Product.SUBURBAN_TRAIN,
    "SUBURBAN": Product.SUBURBAN_TRAIN,
    "REGIONAL_RAIL": Product.REGIONAL_TRAIN,
    "REGIONAL_FAST_RAIL": Product.REGIONAL_TRAIN,
    "TRAM": Product.TRAM,
    "FERRY": Product.FERRY,
    "NIGHT_RAIL": Product.HIGH_SPEED_TRAIN,
    "LONG_DISTANCE": Product.HIGH_SPEED_TRAIN,
    "HIGHSPEED_RAIL": Product.HIGH_SPEED_TRAIN,
    "ODM": Product.ON_DEMAND,
    "FLEX": Product.ON_DEMAND,
    "CABLE_CAR": Product.CABLECAR,
    "FUNICULAR": Product.CABLECAR,
    "AERIAL_LIFT": Product.CABLECAR,
    "AREAL_LIFT": Product.CABLECAR,
}

# MOTIS modes that are not bound to a timetable
INDIVIDUAL_TYPE_BY_MODE: dict[str, IndividualType] = {
    "WALK": IndividualType.WALK,
    "BIKE": IndividualType.BIKE,
    "RENTAL": IndividualType.BIKE,
    "CAR": IndividualType.CAR,
    "CAR_PARKING": IndividualType.CAR,
    "CAR_DROPOFF": IndividualType.CAR,
    "RIDE_SHARING": IndividualType.CAR,
}

# Product -> transitModes values of a plan request
TRANSIT_MODES_BY_PRODUCT: dict[Product, tuple[str, ...]] = {
    Product.TRAM: ("TRAM",),
    Product.SUBWAY: ("SUBWAY",),
    Product.FERRY: ("FERRY",),
    Product.BUS: ("BUS", "COACH"),
    Product.REGIONAL_TRAIN: ("REGIONAL_RAIL", "REGIONAL_FAST_RAIL"),
    Product.SUBURBAN_TRAIN: ("SUBURBAN",),
    Product.HIGH_SPEED_TRAIN: ("HIGHSPEED_RAIL", "LONG_DISTANCE", "NIGHT_RAIL"),
}

LOCATION_TYPE_BY_MOTIS_TYPE: dict[str, LocationType] = {
    "STOP": LocationType.STATION,
    "PLACE": LocationType.POI,
    "ADDRESS": LocationType.ADDRESS,
}

MOTIS_TYPE_BY_LOCATION_TYPE: dict[LocationType, str] = {
    v: k for k, v in LOCATION_TYPE_BY_MOTIS_TYPE.items()
}


def transit_modes_for(products: frozenset[Product] | set[Product]) -> str:
    """Comma-separated transitModes for a product selection, in product declaration order."""
    modes: list[str] = []
    for product in Product:
        if product in products:
            modes.extend(TRANSIT_MODES_BY_PRODUCT.get(product, ()))
    return ",".join(modes)


def motis_type_for(types: set[LocationType] | None) -> str | None:
    """Single MOTIS place type filter, or None to search all types."""
    if not types or len(types) != 1:
        return None
    return MOTIS_TYPE_BY_LOCATION_TYPE.get(next(iter(types)))


@contextmanager
def _upstream_format(source: str) -> Iterator[None]:
    """Turn shape mismatches while reading a response into UpstreamFormatError."""
    try:
        yield
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise UpstreamFormatError(source, f"{type(e).__name__}: {e}") from e


class MotisTripParser:
    """Parses MOTIS JSON documents into canonical domain objects."""

    def __init__(self, network: NetworkId) -> None:
        self._network = network

    @staticmethod
    def parse_time(value: str, timezone: str | None) -> TemporalValue:
        """Parse an ISO instant, with the stop's IANA zone when MOTIS sends one."""
        instant = datetime.fromisoformat(value)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        time_ms = round(instant.timestamp() * 1000)
        if timezone is None:
            return TemporalValue.with_unknown_location_specific_offset(time_ms)
        return TemporalValue.from_timezone(time_ms, timezone)

    @staticmethod
    def _optional_time(obj: dict[str, Any], key: str) -> TemporalValue | None:
        value = obj.get(key)
        if not value:
            return None
        return MotisTripParser.parse_time(value, obj.get("tz"))

    @staticmethod
    def parse_location(obj: dict[str, Any], name: str | None) -> Location:
        coord = Point.from_double(float(obj["lat"]), float(obj["lon"]))
        stop_id = obj.get("stopId")
        if stop_id:
            return Location(LocationType.STATION, id=stop_id, coord=coord, name=name)
        return Location(LocationType.ANY, coord=coord, name=name)

    @staticmethod
    def parse_stop(obj: dict[str, Any], real_time: bool) -> Stop:
        """Parse a from/to/intermediate place of a transit leg.

        Predicted times and tracks are only taken when the leg is real-time.
        """
        location = MotisTripParser.parse_location(obj, obj["name"])
        cancelled = bool(obj.get("cancelled", False))
        planned_track = Position.parse(obj.get("scheduledTrack"))
        predicted_track = Position.parse(obj.get("track")) if real_time else None

        return Stop(
            location=location,
            planned_arrival_time=MotisTripParser._optional_time(obj, "scheduledArrival"),
            predicted_arrival_time=(
                MotisTripParser._optional_time(obj, "arrival") if real_time else None
            ),
            planned_arrival_position=planned_track,
            predicted_arrival_position=predicted_track,
            arrival_cancelled=cancelled,
            planned_departure_time=MotisTripParser._optional_time(obj, "scheduledDeparture"),
            predicted_departure_time=(
                MotisTripParser._optional_time(obj, "departure") if real_time else None
            ),
            planned_departure_position=planned_track,
            predicted_departure_position=predicted_track,
            departure_cancelled=cancelled,
        )

    @staticmethod
    def parse_line(obj: dict[str, Any]) -> Line:
        mode = obj["mode"]
        product = PRODUCT_BY_MODE.get(mode)
        if product is None:
            logger.debug(f"Unknown MOTIS mode '{mode}', line product left unknown")
        return Line(
            id=obj.get("routeId") or None,
            network=obj.get("agencyName") or None,
            product=product,
            label=obj.get("displayName") or None,
            name=obj.get("routeShortName") or None,
        )

    @staticmethod
    def _endpoint_name(name: str, placeholder: str, query_location: Location) -> str | None:
        if name != placeholder:
            return name
        if query_location.name:
            return query_location.name
        if query_location.coord is not None:
            return str(query_location.coord)
        return None

    def _parse_individual_leg(
        self,
        obj: dict[str, Any],
        individual_type: IndividualType,
        from_location: Location,
        to_location: Location,
    ) -> IndividualLeg:
        leg_from = obj["from"]
        leg_to = obj["to"]
        departure = self.parse_location(
            leg_from, self._endpoint_name(leg_from["name"], START_PLACE_NAME, from_location)
        )
        arrival = self.parse_location(
            leg_to, self._endpoint_name(leg_to["name"], END_PLACE_NAME, to_location)
        )
        return IndividualLeg(
            type=individual_type,
            departure=departure,
            departure_time=self.parse_time(leg_from["departure"], leg_from.get("tz")),
            arrival=arrival,
            arrival_time=self.parse_time(leg_to["arrival"], leg_to.get("tz")),
            distance=int(obj.get("distance") or 0),
        )

    def _parse_public_leg(self, obj: dict[str, Any]) -> PublicLeg:
        real_time = bool(obj.get("realTime", False))
        headsign = obj.get("headsign")
        trip_id = obj.get("tripId")
        return PublicLeg(
            line=self.parse_line(obj),
            destination=Location(LocationType.STATION, name=headsign) if headsign else None,
            departure_stop=self.parse_stop(obj["from"], real_time),
            arrival_stop=self.parse_stop(obj["to"], real_time),
            intermediate_stops=tuple(
                self.parse_stop(stop, real_time) for stop in obj.get("intermediateStops") or []
            ),
            journey_ref=JourneyRef(self._network.value, trip_id) if trip_id else None,
        )

    def parse_leg(self, obj: dict[str, Any], from_location: Location, to_location: Location) -> Leg:
        individual_type = INDIVIDUAL_TYPE_BY_MODE.get(obj["mode"])
        if individual_type is not None:
            return self._parse_individual_leg(obj, individual_type, from_location, to_location)
        return self._parse_public_leg(obj)

    def parse_itinerary(
        self, obj: dict[str, Any], from_location: Location, to_location: Location
    ) -> Trip:
        legs = [self.parse_leg(leg, from_location, to_location) for leg in obj["legs"]]
        transfers = obj.get("transfers")
        return Trip(
            legs=legs,
            from_location=from_location,
            to_location=to_location,
            explicit_num_changes=int(transfers) if transfers is not None else None,
        )

    def parse_plan(
        self, doc: dict[str, Any], from_location: Location, to_location: Location, source: str
    ) -> tuple[list[Trip], str | None, str | None]:
        """Parse a plan response.

        Returns:
            Tuple of (trips, previous page cursor, next page cursor). Direct
            connections (e.g. walking only) follow the transit itineraries.
        """
        with _upstream_format(source):
            itineraries = list(doc["itineraries"]) + list(doc.get("direct") or [])
            trips = [self.parse_itinerary(it, from_location, to_location) for it in itineraries]
            previous_cursor = doc.get("previousPageCursor") or None
            next_cursor = doc.get("nextPageCursor") or None
        return trips, previous_cursor, next_cursor

    @staticmethod
    def _area_name(areas: list[dict[str, Any]], max_admin_level: int) -> str | None:
        for area in reversed(areas):
            if int(area["adminLevel"]) <= max_admin_level:
                return area["name"]
        return None

    def parse_suggestions(self, doc: list[dict[str, Any]], source: str) -> list[Location]:
        """Parse geocode matches, best match first."""
        with _upstream_format(source):
            locations = []
            for match in doc:
                areas = match.get("areas") or []
                city = self._area_name(areas, CITY_ADMIN_LEVEL)
                country = self._area_name(areas, COUNTRY_ADMIN_LEVEL)
                location_type = LOCATION_TYPE_BY_MOTIS_TYPE.get(match["type"], LocationType.ANY)
                locations.append(
                    Location(
                        location_type,
                        id=match["id"] if location_type == LocationType.STATION else None,
                        coord=Point.from_double(float(match["lat"]), float(match["lon"])),
                        place=f"{city}, {country}" if city and country else None,
                        name=match["name"],
                    )
                )
        return locations

    def parse_reverse_geocode(
        self, doc: list[dict[str, Any]], max_locations: int, source: str
    ) -> list[Location]:
        """Parse places around a coordinate, nearest first."""
        matches = doc[:max_locations] if max_locations > 0 else doc
        with _upstream_format(source):
            return [
                Location(
                    LOCATION_TYPE_BY_MOTIS_TYPE.get(match["type"], LocationType.ANY),
                    id=match.get("id") or None,
                    coord=Point.from_double(float(match["lat"]), float(match["lon"])),
                    name=match["name"],
                )
                for match in matches
            ]

    def parse_stop_times(
        self, doc: dict[str, Any], source: str
    ) -> tuple[Location, list[StationDepartures]]:
        """Parse a stop-times board into departures grouped by stop.

        Arrivals without a departure are skipped. Stops keep the order of
        their first departure.

        Returns:
            Tuple of (the requested stop, departures per stop).
        """
        with _upstream_format(source):
            place = doc["place"]
            requested = Location(
                LocationType.STATION,
                id=place["stopId"],
                coord=Point.from_double(float(place["lat"]), float(place["lon"])),
                name=place.get("name"),
            )

            stations: dict[str, StationDepartures] = {}
            for stop_time in doc["stopTimes"]:
                stop_place = stop_time["place"]
                if not stop_place.get("scheduledDeparture") or not stop_place.get("departure"):
                    continue

                stop_id = stop_place["stopId"]
                station = stations.get(stop_id)
                if station is None:
                    station = StationDepartures(
                        location=self.parse_location(stop_place, stop_place["name"]), lines=[]
                    )
                    stations[stop_id] = station

                line = self.parse_line(stop_time)
                headsign = stop_time.get("headsign")
                destination = Location(LocationType.STATION, name=headsign) if headsign else None
                line_destination = LineDestination(line, destination)
                if station.lines is not None and line_destination not in station.lines:
                    station.lines.append(line_destination)

                real_time = bool(stop_time.get("realTime", False))
                station.departures.append(
                    Departure(
                        planned_time=self._optional_time(stop_place, "scheduledDeparture"),
                        predicted_time=(
                            self._optional_time(stop_place, "departure") if real_time else None
                        ),
                        line=line,
                        position=Position.parse(
                            stop_place.get("track") or stop_place.get("scheduledTrack")
                        ),
                        destination=destination,
                        cancelled=bool(stop_place.get("cancelled", False)),
                    )
                )

        return requested, list(stations.values())
