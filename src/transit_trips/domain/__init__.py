"""Domain layer - canonical trip model and provider contract."""

from transit_trips.domain.errors import TransportFailure, UpstreamFormatError
from transit_trips.domain.models import (
    Location,
    PaginationContext,
    Product,
    Stop,
    TemporalValue,
    Trip,
)
from transit_trips.domain.ports import NetworkProvider

__all__ = [
    "Location",
    "NetworkProvider",
    "PaginationContext",
    "Product",
    "Stop",
    "TemporalValue",
    "TransportFailure",
    "Trip",
    "UpstreamFormatError",
]
