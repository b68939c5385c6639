"""All enums used by the PlayerDeck models."""

from __future__ import annotations

from enum import StrEnum


class ServerType(StrEnum):
    """Enum for the supported server (backend) protocol families."""

    NAVIDROME = "navidrome"
    SUBSONIC = "subsonic"


class LibraryItem(StrEnum):
    """Enum for the type of a library item."""

    SONG = "song"
    ALBUM = "album"
    ALBUM_ARTIST = "album_artist"
    PLAYLIST = "playlist"
    GENRE = "genre"


class RepeatMode(StrEnum):
    """Enum with repeat modes."""

    OFF = "off"  # no repeat at all
    ONE = "one"  # repeat one/single track
    ALL = "all"  # repeat entire queue

    def cycle(self) -> RepeatMode:
        """Return the mode that follows this one (off -> all -> one -> off)."""
        if self == RepeatMode.OFF:
            return RepeatMode.ALL
        if self == RepeatMode.ALL:
            return RepeatMode.ONE
        return RepeatMode.OFF


class QueuePosition(StrEnum):
    """Enum with the positions where songs can be added to the queue."""

    START = "start"
    END = "end"
    AFTER_CURRENT = "after_current"


class PlaybackCommand(StrEnum):
    """Enum with the intents the core can hand to the playback engine."""

    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"
    SEEK = "seek"
    VOLUME = "volume"


class RemoteEventType(StrEnum):
    """Enum with the events a remote control channel can send."""

    FAVORITE = "favorite"
    RATING = "rating"
    SEEK = "seek"
    POSITION = "position"
    VOLUME = "volume"
    SAVE_QUEUE = "saveQueue"
    RESTORE_QUEUE = "restoreQueue"
    REPEAT = "repeat"
    SHUFFLE = "shuffle"
    NEXT = "next"
    PREVIOUS = "previous"
    PLAY = "play"
    PAUSE = "pause"


class EventType(StrEnum):
    """Enum with possible events signaled on the PlayerDeck event bus."""

    QUEUE_UPDATED = "queue_updated"
    QUEUE_ITEMS_UPDATED = "queue_items_updated"
    QUEUE_TIME_UPDATED = "queue_time_updated"
    QUEUE_RESTORED = "queue_restored"
    QUEUE_SAVED = "queue_saved"
    PLAYBACK_INTENT = "playback_intent"
    SERVER_CHANGED = "server_changed"
    SONG_UPDATED = "song_updated"
    SHUTDOWN = "application_shutdown"
