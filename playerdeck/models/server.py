"""Model for the server (backend) descriptor every entity is routed through."""

from __future__ import annotations

from dataclasses import dataclass

from mashumaro import DataClassDictMixin

from .enums import ServerType


@dataclass(kw_only=True)
class ServerContext(DataClassDictMixin):
    """Descriptor of one configured music server.

    `credential` is the Subsonic query fragment (`u=..&s=..&t=..` or
    `u=..&p=..`) that gets appended to synthesized cover art and stream urls.
    `nd_credential` is the bearer token for the Navidrome native api.
    """

    id: str
    name: str
    url: str
    type: ServerType
    username: str
    credential: str
    nd_credential: str | None = None
    user_id: str | None = None

    @property
    def base_url(self) -> str:
        """Return the server url without trailing slash."""
        return self.url.rstrip("/")
