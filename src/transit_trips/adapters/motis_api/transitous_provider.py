"""Transitous: the community-run public MOTIS instance."""

from typing import TYPE_CHECKING

from transit_trips.adapters.abstract_network_provider import DEFAULT_TIMEZONE
from transit_trips.adapters.motis_api.constants import TRANSITOUS_API_URL
from transit_trips.adapters.motis_api.http_client import DEFAULT_TIMEOUT_SECONDS, MotisHttpClient
from transit_trips.adapters.motis_api.motis_network_provider import MotisNetworkProvider
from transit_trips.domain.models import NetworkId

if TYPE_CHECKING:
    from aiohttp import ClientSession


class TransitousProvider(MotisNetworkProvider):
    """MOTIS provider preset for api.transitous.org."""

    def __init__(
        self,
        session: "ClientSession",
        api_url: str = TRANSITOUS_API_URL,
        user_agent: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        timezone: str = DEFAULT_TIMEZONE,
        num_trips: int | None = None,
    ) -> None:
        super().__init__(
            MotisHttpClient(session, api_url, user_agent, timeout_seconds),
            NetworkId.TRANSITOUS,
            timezone=timezone,
            num_trips=num_trips,
        )
