"""Models for the remote-control channel."""

from __future__ import annotations

from dataclasses import dataclass, field

from mashumaro import DataClassDictMixin
from mashumaro.config import BaseConfig

from .enums import RemoteEventType


@dataclass(kw_only=True)
class RemoteEvent(DataClassDictMixin):
    """Inbound event as sent by a remote control."""

    event: RemoteEventType
    id: str | None = None
    ids: list[str] = field(default_factory=list)
    server_id: str | None = None
    favorite: bool | None = None
    rating: int | None = None
    offset: float | None = None
    position: float | None = None
    volume: float | None = None

    class Config(BaseConfig):
        """Accept the camelCase keys used on the wire."""

        aliases = {"server_id": "serverId"}  # noqa: RUF012
        allow_deserialization_not_by_alias = True

    @property
    def song_ids(self) -> list[str]:
        """Return all song ids this event refers to."""
        if self.ids:
            return self.ids
        return [self.id] if self.id else []


@dataclass(kw_only=True)
class RemoteAck(DataClassDictMixin):
    """Outbound acknowledgement for a remote event."""

    event: str
    success: bool
    error: str | None = None
    error_code: int | None = None
