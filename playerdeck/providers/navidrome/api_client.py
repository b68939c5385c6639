"""API Client for the Navidrome native api."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from playerdeck.constants import VERBOSE_LOG_LEVEL
from playerdeck.helpers.json import JSON_DECODE_EXCEPTIONS, json_loads
from playerdeck.helpers.util import try_parse_int
from playerdeck.models.errors import BackendError, MediaNotFoundError

from .constants import API_PATH, AUTH_HEADER, TOTAL_COUNT_HEADER

if TYPE_CHECKING:
    from playerdeck.models.server import ServerContext


class NavidromeAPIClient:
    """Client for interacting with the Navidrome native api."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        server: ServerContext,
        logger: logging.Logger,
    ) -> None:
        """Initialize API client."""
        self.http_session = http_session
        self.server = server
        self.logger = logger

    @property
    def headers(self) -> dict[str, str]:
        """Return the headers (authorization) of every request."""
        if not self.server.nd_credential:
            return {}
        return {AUTH_HEADER: f"Bearer {self.server.nd_credential}"}

    async def get(self, path: str, **params: Any) -> Any:
        """Get data from the Navidrome api."""
        data, _ = await self._request(path, params)
        return data

    async def get_list(self, path: str, **params: Any) -> tuple[list[Any], int | None]:
        """Get a list from the Navidrome api, together with its reported total count."""
        data, total_count = await self._request(path, params)
        if not isinstance(data, list):
            raise BackendError(f"Expected a list from {path}")
        return data, total_count

    async def _request(self, path: str, params: dict[str, Any]) -> tuple[Any, int | None]:
        """Handle API requests internally."""
        url = f"{self.server.base_url}/{API_PATH}/{path}"
        query = {key: str(value) for key, value in params.items() if value is not None}
        if self.logger.isEnabledFor(VERBOSE_LOG_LEVEL):
            self.logger.log(VERBOSE_LOG_LEVEL, "Making request to Navidrome api: %s", path)
        try:
            async with self.http_session.get(url, headers=self.headers, params=query) as response:
                if response.status == 404:
                    raise MediaNotFoundError(f"Item not found: {path}", status=404)
                if response.status >= 400:
                    text = await response.text()
                    self.logger.error("API error: %s - %s", response.status, text)
                    raise BackendError(text or response.reason or "", status=response.status)
                raw = await response.read()
                total_count = try_parse_int(response.headers.get(TOTAL_COUNT_HEADER), None)
                status = response.status
        except (aiohttp.ClientError, TimeoutError) as err:
            self.logger.error("Request to %s failed: %s", path, err)
            raise BackendError(str(err) or type(err).__name__) from err
        try:
            return json_loads(raw), total_count
        except JSON_DECODE_EXCEPTIONS as err:
            raise BackendError("Failed to parse response", status=status) from err
