"""Helpers for setting up a aiohttp session (and related)."""

from __future__ import annotations

import sys
from types import MappingProxyType
from typing import Any

import aiohttp
from aiohttp.hdrs import USER_AGENT

from playerdeck.constants import APPLICATION_NAME

from .json import json_dumps

MAXIMUM_CONNECTIONS = 100
MAXIMUM_CONNECTIONS_PER_HOST = 10


def create_clientsession(
    version: str,
    verify_ssl: bool = True,
    timeout: float | None = None,
    **kwargs: Any,
) -> aiohttp.ClientSession:
    """Create a new ClientSession with kwargs, i.e. for cookies."""
    if timeout is not None:
        kwargs.setdefault("timeout", aiohttp.ClientTimeout(total=timeout))
    clientsession = aiohttp.ClientSession(
        connector=aiohttp.TCPConnector(
            limit=MAXIMUM_CONNECTIONS,
            limit_per_host=MAXIMUM_CONNECTIONS_PER_HOST,
            ssl=verify_ssl,
        ),
        json_serialize=json_dumps,
        **kwargs,
    )
    # Prevent packages accidentally overriding our default headers
    user_agent = (
        f"{APPLICATION_NAME}/{version} "
        f"aiohttp/{aiohttp.__version__} Python/{sys.version_info[0]}.{sys.version_info[1]}"
    )
    clientsession._default_headers = MappingProxyType(  # type: ignore[assignment]
        {USER_AGENT: user_agent},
    )
    return clientsession
