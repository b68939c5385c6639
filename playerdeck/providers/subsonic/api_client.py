"""API Client for Subsonic (compatible) servers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl

import aiohttp

from playerdeck.constants import (
    DEFAULT_CLIENT_NAME,
    SUBSONIC_API_VERSION,
    SUBSONIC_RESPONSE_KEY,
    VERBOSE_LOG_LEVEL,
)
from playerdeck.helpers.json import JSON_DECODE_EXCEPTIONS, json_loads
from playerdeck.helpers.validation import validate_response
from playerdeck.models.errors import BackendError, MediaNotFoundError

from .constants import ERROR_NOT_FOUND, REST_PATH
from .schemas import SubsonicResponse

if TYPE_CHECKING:
    from collections.abc import Iterable

    from playerdeck.models.server import ServerContext

# a parameter value, lists are sent as repeated parameters (id=1&id=2)
type ParamValue = str | int | float | bool | Iterable[str | int] | None


class SubsonicAPIClient:
    """Client for interacting with the Subsonic REST api of a server."""

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
        self._auth_params = parse_qsl(server.credential, keep_blank_values=True)

    def build_params(self, params: dict[str, ParamValue]) -> list[tuple[str, str]]:
        """Return the full (repeated) query parameters of a request."""
        result: list[tuple[str, str]] = [
            *self._auth_params,
            ("c", DEFAULT_CLIENT_NAME),
            ("f", "json"),
            ("v", SUBSONIC_API_VERSION),
        ]
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, bool):
                result.append((key, "true" if value else "false"))
            elif isinstance(value, str | int | float):
                result.append((key, str(value)))
            else:
                result.extend((key, str(x)) for x in value)
        return result

    async def get(self, endpoint: str, **params: ParamValue) -> dict[str, Any]:
        """Invoke an endpoint and return the (unwrapped) subsonic-response body."""
        return await self.invoke(endpoint, params)

    async def invoke(self, endpoint: str, params: dict[str, ParamValue]) -> dict[str, Any]:
        """Invoke an endpoint of the Subsonic api.

        Raises BackendError when the request fails or the server reports an error.
        """
        url = f"{self.server.base_url}/{REST_PATH}/{endpoint}.view"
        if self.logger.isEnabledFor(VERBOSE_LOG_LEVEL):
            self.logger.log(VERBOSE_LOG_LEVEL, "Invoking %s with %s", endpoint, params)
        try:
            async with self.http_session.get(url, params=self.build_params(params)) as response:
                if response.status == 404:
                    raise MediaNotFoundError(
                        f"Endpoint not found: {endpoint}", status=response.status
                    )
                if response.status >= 400:
                    text = await response.text()
                    self.logger.error("API error: %s - %s", response.status, text)
                    raise BackendError(text or response.reason or "", status=response.status)
                raw = await response.read()
                status = response.status
        except (aiohttp.ClientError, TimeoutError) as err:
            self.logger.error("Request to %s failed: %s", endpoint, err)
            raise BackendError(str(err) or type(err).__name__) from err

        try:
            data = json_loads(raw)
        except JSON_DECODE_EXCEPTIONS as err:
            raise BackendError("Failed to parse response", status=status) from err
        if not isinstance(data, dict) or SUBSONIC_RESPONSE_KEY not in data:
            raise BackendError(f"Invalid response for {endpoint}", status=status)
        body: dict[str, Any] = data[SUBSONIC_RESPONSE_KEY]
        envelope = validate_response(SubsonicResponse, body, endpoint)
        if envelope.status != "ok":
            error = envelope.error
            code = error.code if error else None
            message = error.message if error else f"{endpoint} failed"
            self.logger.debug("%s returned error %s: %s", endpoint, code, message)
            if code == ERROR_NOT_FOUND:
                raise MediaNotFoundError(message, status=status, code=code)
            raise BackendError(message, status=status, code=code)
        return body
