"""MOTIS API adapters (Transitous and self-hosted instances)."""

from transit_trips.adapters.motis_api.http_client import MotisHttpClient
from transit_trips.adapters.motis_api.motis_network_provider import (
    MotisNetworkProvider,
    MotisQueryTripsContext,
)
from transit_trips.adapters.motis_api.transitous_provider import TransitousProvider
from transit_trips.adapters.motis_api.trip_parser import MotisTripParser

__all__ = [
    "MotisHttpClient",
    "MotisNetworkProvider",
    "MotisQueryTripsContext",
    "MotisTripParser",
    "TransitousProvider",
]
