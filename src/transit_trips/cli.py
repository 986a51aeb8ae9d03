"""Command line interface for trip planning against a MOTIS backend."""

import argparse
import asyncio
import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo

import aiohttp

from transit_trips.adapters.api_request_logger import LOG_REQUESTS_ENV
from transit_trips.adapters.config import AppConfig
from transit_trips.adapters.motis_api import TransitousProvider
from transit_trips.application.services import TripQueryService
from transit_trips.domain.errors import TransportFailure, UpstreamFormatError
from transit_trips.domain.models import (
    Departure,
    IndividualLeg,
    Location,
    LocationType,
    Point,
    Product,
    QueryTripsStatus,
    TemporalValue,
    Trip,
    TripOptions,
    leg_arrival_time,
    leg_departure_time,
)

logger = logging.getLogger(__name__)


def parse_location_arg(text: str) -> Location:
    """A "lat,lon" pair becomes a coordinate, anything else a stop id."""
    lat, sep, lon = text.partition(",")
    if sep:
        try:
            return Location.from_coord(Point.from_double(float(lat), float(lon)))
        except ValueError:
            pass
    return Location(LocationType.STATION, id=text)


def format_time(value: TemporalValue | None, tz: ZoneInfo) -> str | None:
    """ISO timestamp, shown in tz when the value has no offset of its own."""
    if value is None:
        return None
    moment = value.to_datetime()
    if not value.has_concrete_offset():
        moment = moment.astimezone(tz)
    return moment.isoformat(timespec="minutes")


def location_to_dict(location: Location | None) -> dict[str, Any] | None:
    if location is None:
        return None
    return {
        "type": location.type.value,
        "id": location.id,
        "name": location.name,
        "place": location.place,
        "coord": str(location.coord) if location.coord else None,
    }


def trip_to_dict(trip: Trip, tz: ZoneInfo) -> dict[str, Any]:
    legs = []
    for leg in trip.legs:
        entry: dict[str, Any] = {
            "departure": location_to_dict(leg.departure),
            "arrival": location_to_dict(leg.arrival),
            "departure_time": format_time(leg_departure_time(leg), tz),
            "arrival_time": format_time(leg_arrival_time(leg), tz),
        }
        if isinstance(leg, IndividualLeg):
            entry["type"] = leg.type.value
            entry["distance"] = leg.distance
        else:
            entry["type"] = "public"
            entry["line"] = str(leg.line)
            entry["destination"] = leg.destination.name if leg.destination else None
            entry["departure_delay_ms"] = leg.departure_delay()
            entry["arrival_delay_ms"] = leg.arrival_delay()
            position = leg.departure_position()
            entry["departure_position"] = str(position) if position else None
        legs.append(entry)

    return {
        "id": trip.id,
        "unique_id": trip.unique_id,
        "duration_ms": trip.duration(),
        "num_changes": trip.num_changes(),
        "travelable": trip.is_travelable(),
        "products": Product.to_codes(trip.products()),
        "legs": legs,
    }


def departure_to_dict(departure: Departure, tz: ZoneInfo) -> dict[str, Any]:
    return {
        "line": str(departure.line),
        "destination": departure.destination.name if departure.destination else None,
        "planned_time": format_time(departure.planned_time, tz),
        "predicted_time": format_time(departure.predicted_time, tz),
        "position": str(departure.position) if departure.position else None,
        "cancelled": departure.cancelled,
    }


def print_trip(trip: Trip, tz: ZoneInfo) -> None:
    data = trip_to_dict(trip, tz)
    duration_min = data["duration_ms"] // 60000
    flag = "" if data["travelable"] else "  (not travelable)"
    first, last = data["legs"][0], data["legs"][-1]
    print(
        f"{first['departure_time']} -> {last['arrival_time']}"
        f"  {duration_min} min, {data['num_changes']} changes{flag}"
    )
    for leg in data["legs"]:
        via = leg.get("line") or leg["type"]
        start = (leg["departure"] or {}).get("name") or "?"
        end = (leg["arrival"] or {}).get("name") or "?"
        print(f"    {via:>10}  {leg['departure_time']} {start} -> {leg['arrival_time']} {end}")


async def run_suggest(provider: TransitousProvider, text: str, as_json: bool) -> int:
    result = await provider.suggest_locations(text)
    if as_json:
        locations = [location_to_dict(loc) for loc in result.locations]
        print(json.dumps(locations, indent=2, ensure_ascii=False))
        return 0

    if not result.locations:
        print(f"No locations found for '{text}'", file=sys.stderr)
        return 1
    print(f"\nFound {len(result.locations)} location(s):\n")
    for location in result.locations:
        print(f"  {location.unique_short_name()} [{location.type.value}]")
        if location.id:
            print(f"    ID: {location.id}")
    return 0


async def run_trips(provider: TransitousProvider, args: argparse.Namespace, tz: ZoneInfo) -> int:
    options = None
    if args.products:
        options = TripOptions(products=frozenset(Product.from_codes(args.products) or ()))
    date = datetime.fromisoformat(args.time) if args.time else datetime.now(UTC)
    if date.tzinfo is None:
        date = date.replace(tzinfo=tz)

    service = TripQueryService(provider)
    result = await service.plan(
        parse_location_arg(args.from_id),
        parse_location_arg(args.via) if args.via else None,
        parse_location_arg(args.to_id),
        date,
        dep=not args.arrive,
        options=options,
    )
    if result.status != QueryTripsStatus.OK:
        reason = f" ({result.error})" if result.error else ""
        print(f"No trips: {result.status.value}{reason}", file=sys.stderr)
        return 1

    for _ in range(args.earlier):
        if await service.more(later=False) is None:
            break
    for _ in range(args.later):
        if await service.more(later=True) is None:
            break

    trips = service.trips
    if args.json:
        print(json.dumps([trip_to_dict(trip, tz) for trip in trips], indent=2, ensure_ascii=False))
        return 0

    for trip in trips:
        print_trip(trip, tz)
        print()
    return 0 if trips else 1


async def run_departures(
    provider: TransitousProvider, stop_id: str, limit: int, as_json: bool, tz: ZoneInfo
) -> int:
    result = await provider.query_departures(stop_id, max_departures=limit, equivs=True)
    if as_json:
        print(
            json.dumps(
                {
                    "status": result.status.value,
                    "stations": [
                        {
                            "location": location_to_dict(station.location),
                            "departures": [departure_to_dict(d, tz) for d in station.departures],
                        }
                        for station in result.station_departures
                    ],
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return 0

    if not result.station_departures:
        print(f"No departures for stop {stop_id} ({result.status.value})", file=sys.stderr)
        return 1
    for station in result.station_departures:
        print(f"\n{station.location.unique_short_name()} ({station.location.id})")
        for departure in station.departures:
            data = departure_to_dict(departure, tz)
            when = data["predicted_time"] or data["planned_time"]
            cancelled = "  CANCELLED" if data["cancelled"] else ""
            print(f"  {when}  {data['line']:>8} -> {data['destination'] or '?'}{cancelled}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Plan public transport trips via Transitous / MOTIS",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Find stop ids
  transit-trips suggest "München Hbf"

  # Plan trips, plus one page of later connections
  transit-trips trips STOP_A STOP_B --later 1

  # Trips between two coordinates, trains only
  transit-trips trips 48.1402,11.5601 48.2,11.6 --products IRS

  # Departure board
  transit-trips departures STOP_A --limit 20
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    suggest_parser = subparsers.add_parser("suggest", help="Suggest locations for a text")
    suggest_parser.add_argument("text", help="Free text to geocode")
    suggest_parser.add_argument("--json", action="store_true", help="Output as JSON")

    trips_parser = subparsers.add_parser("trips", help="Plan trips between two locations")
    trips_parser.add_argument("from_id", help="Origin stop id or lat,lon")
    trips_parser.add_argument("to_id", help="Destination stop id or lat,lon")
    trips_parser.add_argument("--via", help="Via stop id or lat,lon")
    trips_parser.add_argument("--time", help="ISO date/time (default: now)")
    trips_parser.add_argument(
        "--arrive", action="store_true", help="Treat --time as the latest arrival"
    )
    trips_parser.add_argument(
        "--products", help="Product codes to use, e.g. 'RSUTB' (default: all)"
    )
    trips_parser.add_argument(
        "--later", type=int, default=0, help="Number of later pages to fetch"
    )
    trips_parser.add_argument(
        "--earlier", type=int, default=0, help="Number of earlier pages to fetch"
    )
    trips_parser.add_argument("--json", action="store_true", help="Output as JSON")

    departures_parser = subparsers.add_parser("departures", help="Show a departure board")
    departures_parser.add_argument("stop_id", help="Stop id")
    departures_parser.add_argument(
        "--limit", type=int, default=10, help="Maximum number of departures"
    )
    departures_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def configure_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    if config.log_requests:
        os.environ[LOG_REQUESTS_ENV] = "true"


async def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "trips" and args.products:
        try:
            Product.from_codes(args.products)
        except ValueError as e:
            parser.error(str(e))
    if args.command == "trips" and args.time:
        try:
            datetime.fromisoformat(args.time)
        except ValueError:
            parser.error(f"invalid --time '{args.time}', expected ISO format like 2024-03-04T08:00")

    config = AppConfig()
    configure_logging(config)
    tz = ZoneInfo(config.timezone)

    async with aiohttp.ClientSession() as session:
        provider = TransitousProvider(
            session,
            api_url=config.motis_api_url,
            user_agent=config.user_agent,
            timeout_seconds=config.http_timeout_seconds,
            timezone=config.timezone,
            num_trips=config.num_trips_requested,
        )
        try:
            if args.command == "suggest":
                return await run_suggest(provider, args.text, args.json)
            if args.command == "trips":
                return await run_trips(provider, args, tz)
            return await run_departures(provider, args.stop_id, args.limit, args.json, tz)
        except (TransportFailure, UpstreamFormatError) as e:
            logger.error(f"Query failed: {e}")
            print(f"Error: {e}", file=sys.stderr)
            return 1


def run() -> None:
    """Synchronous entry point for the console script."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
