"""Application services (use cases) for trip planning."""

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from transit_trips.domain.errors import TransportFailure
from transit_trips.domain.models import (
    ErrorDetails,
    Location,
    PaginationContext,
    QueryTripsResult,
    QueryTripsStatus,
    Trip,
    TripOptions,
)

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from transit_trips.domain.ports import NetworkProvider


class TripQueryService:
    """Plans a trip and pages through earlier and later connections.

    Keeps the collected trips of one query in time order, free of duplicates
    by ``Trip.unique_id``. One service instance handles one query at a time;
    ``plan`` starts over.
    """

    def __init__(self, provider: "NetworkProvider") -> None:
        """Initialize with the provider to query."""
        self._provider = provider
        self._context: PaginationContext | None = None
        self._trips: list[Trip] = []
        self._seen: set[str] = set()

    @property
    def context(self) -> PaginationContext | None:
        return self._context

    @property
    def trips(self) -> list[Trip]:
        return list(self._trips)

    def can_query_earlier(self) -> bool:
        return self._context is not None and self._context.can_query_earlier()

    def can_query_later(self) -> bool:
        return self._context is not None and self._context.can_query_later()

    def _merge(self, trips: list[Trip], later: bool) -> list[Trip]:
        """Add trips not seen before; returns the newly added ones."""
        added: list[Trip] = []
        for trip in trips:
            shifted = trip.repair_individual_overlaps()
            if shifted:
                logger.debug(f"Shifted {shifted} individual legs of trip {trip.id}")
            if trip.unique_id in self._seen:
                logger.debug(f"Dropping duplicate trip {trip.unique_id}")
                continue
            self._seen.add(trip.unique_id)
            added.append(trip)

        if later:
            self._trips.extend(added)
        else:
            self._trips[:0] = added
        return added

    async def plan(
        self,
        from_location: Location,
        via_location: Location | None,
        to_location: Location,
        date: datetime,
        dep: bool = True,
        options: TripOptions | None = None,
    ) -> QueryTripsResult:
        """Query the first page of trips, replacing any earlier query."""
        self._context = None
        self._trips = []
        self._seen = set()

        try:
            result = await self._provider.query_trips(
                from_location, via_location, to_location, date, dep, options
            )
        except TransportFailure as e:
            logger.warning(f"Trip query failed: {e}")
            return QueryTripsResult.with_status(
                None, QueryTripsStatus.SERVICE_DOWN, ErrorDetails.from_failure(e)
            )
        if result.status != QueryTripsStatus.OK:
            logger.info(f"Trip query returned {result.status.value}")
            return result

        self._context = result.context
        self._merge(result.trips, later=True)
        logger.info(
            f"Found {len(self._trips)} trips from {from_location.unique_short_name()} "
            f"to {to_location.unique_short_name()}"
        )
        return result

    async def more(self, later: bool) -> list[Trip] | None:
        """Fetch the next page in one direction.

        Returns:
            The trips that were new on that page, or None if there is no
            query yet or the direction is exhausted.

        Raises:
            TransportFailure: If the backend could not be reached. Trips
                collected so far are kept.
        """
        if self._context is None:
            logger.warning("No trip query to continue")
            return None

        can_query = self._context.can_query_later() if later else self._context.can_query_earlier()
        direction = "later" if later else "earlier"
        if not can_query:
            logger.info(f"No {direction} trips available")
            return None

        result = await self._provider.query_more_trips(self._context, later)
        if result.status != QueryTripsStatus.OK:
            logger.info(f"Query for {direction} trips returned {result.status.value}")
            return []

        added = self._merge(result.trips, later)
        logger.info(f"Added {len(added)} {direction} trips ({len(self._trips)} total)")
        return added

    def travelable_trips(self) -> list[Trip]:
        """Collected trips that can actually be ridden."""
        return [trip for trip in self._trips if trip.is_travelable()]

    async def load_details(self, trip: Trip) -> Trip:
        """Load fuller details of a collected trip."""
        return await self._provider.query_trip_details(trip)
