"""Models for the intents handed to the (external) playback engine."""

from __future__ import annotations

from dataclasses import dataclass

from mashumaro import DataClassDictMixin

from .enums import PlaybackCommand


@dataclass(kw_only=True)
class PlaybackIntent(DataClassDictMixin):
    """Request for the playback engine.

    - SEEK: value is the absolute position in milliseconds.
    - VOLUME: value is the volume level (0-100).
    - PLAY: stream_url holds the url of the song to (re)start, if it changed.
    """

    command: PlaybackCommand
    value: float | None = None
    stream_url: str | None = None
