"""Shared behaviour of network provider adapters."""

import logging
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from transit_trips.domain.models import (
    Capability,
    LegKind,
    NetworkId,
    Product,
    TransferDetails,
    Trip,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Europe/Berlin"


class AbstractNetworkProvider:
    """Base class for NetworkProvider implementations.

    Subclasses declare their capabilities and implement the query methods.
    """

    capabilities: frozenset[Capability] = frozenset()

    def __init__(self, network: NetworkId, timezone: str = DEFAULT_TIMEZONE) -> None:
        self._network = network
        self._timezone = ZoneInfo(timezone)

    @property
    def network(self) -> NetworkId:
        return self._network

    @property
    def timezone(self) -> ZoneInfo:
        return self._timezone

    def has_capabilities(self, *capabilities: Capability) -> bool:
        return set(capabilities) <= self.capabilities

    def default_products(self) -> frozenset[Product]:
        return Product.ALL_EXCEPT_HIGHSPEED

    async def query_trip_details(self, trip: Trip) -> Trip:
        """Mark a trip's details as loaded.

        Backends without a details endpoint can't say how feasible a
        changeover is, so each one gets a TransferDetails with an unknown
        probability.
        """
        if trip.is_details_loaded:
            return trip

        changeovers = 0
        seen_public = False
        for leg in trip.legs:
            if leg.kind is LegKind.PUBLIC:
                if seen_public:
                    changeovers += 1
                seen_public = True

        trip.transfer_details = [TransferDetails() for _ in range(changeovers)]
        trip.updated_at = datetime.now(UTC)
        trip.is_details_loaded = True
        logger.debug(f"Loaded details for trip {trip.id} on {self._network.value}")
        return trip
