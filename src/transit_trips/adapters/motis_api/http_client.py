"""HTTP client for MOTIS API requests."""

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from transit_trips.adapters.api_request_logger import log_api_request, log_api_response
from transit_trips.adapters.motis_api.constants import DEFAULT_HEADERS, TRANSITOUS_API_URL
from transit_trips.domain.errors import TransportFailure, UpstreamFormatError

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

DEFAULT_TIMEOUT_SECONDS = 15.0


class MotisHttpClient:
    """Thin JSON-over-HTTP client for one MOTIS instance.

    Holds no per-request state, so one instance can serve concurrent queries
    over the shared session.
    """

    def __init__(
        self,
        session: "ClientSession",
        base_url: str = TRANSITOUS_API_URL,
        user_agent: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._headers = dict(DEFAULT_HEADERS)
        if user_agent:
            self._headers["User-Agent"] = user_agent
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        """Absolute URL of an endpoint path such as ``v4/plan``."""
        return f"{self._base_url}/{path}"

    async def _read_body(self, response: "ClientResponse", url: str) -> str | None:
        """Read the body, or None on a client error status.

        Raises:
            TransportFailure: On a server error status.
        """
        body = await response.text()
        log_api_response(url, response.status, body)

        if response.status >= 500:
            raise TransportFailure(url, body[:200] or response.reason or "server error", response.status)
        if response.status >= 400:
            logger.warning(f"MOTIS API returned status {response.status} for {url}: {body[:200]}")
            return None
        return body

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any | None:
        """GET an endpoint and decode its JSON body.

        Args:
            path: Endpoint path relative to the base URL.
            params: Query parameters.

        Returns:
            The decoded JSON document, or None if the backend rejected the
            request with a 4xx status (unknown stop, bad place, ...).

        Raises:
            TransportFailure: If the request could not be completed or the
                backend answered with a 5xx status.
            UpstreamFormatError: If the body is not JSON.
        """
        url = self.url_for(path)
        log_api_request("GET", url, params=params, headers=self._headers)

        try:
            async with self._session.get(
                url, params=params, headers=self._headers, timeout=self._timeout
            ) as response:
                body = await self._read_body(response, url)
        except aiohttp.ClientError as e:
            logger.warning(f"Error requesting {url}: {e}")
            raise TransportFailure(url, str(e)) from e
        except asyncio.TimeoutError as e:
            logger.warning(f"Timeout requesting {url}")
            raise TransportFailure(url, "timed out") from e

        if body is None:
            return None

        try:
            return json.loads(body)
        except ValueError as e:
            raise UpstreamFormatError(url, f"body is not JSON: {e}") from e
