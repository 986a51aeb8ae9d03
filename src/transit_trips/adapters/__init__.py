"""Adapters implementing the domain ports against real backends."""

from transit_trips.adapters.abstract_network_provider import AbstractNetworkProvider
from transit_trips.adapters.motis_api import MotisNetworkProvider, TransitousProvider

__all__ = ["AbstractNetworkProvider", "MotisNetworkProvider", "TransitousProvider"]
