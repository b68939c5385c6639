"""Models for the playback queue state and its persisted snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field

from mashumaro import DataClassDictMixin

from .enums import RepeatMode
from .errors import PartialResolutionWarning
from .media_items import QueueSong


@dataclass(kw_only=True)
class CurrentItem(DataClassDictMixin):
    """Pointer to the current song within the active ordering of the queue."""

    song: QueueSong | None = None
    # index within the shuffled ordering if shuffle is active, else within default.
    # Without song it points at the song that plays next, len(ordering) when exhausted.
    index: int = 0
    # elapsed time of the current song in milliseconds
    time: int = 0


@dataclass(kw_only=True)
class PlayQueue(DataClassDictMixin):
    """State of the (single) playback queue.

    Only the PlayerQueueController mutates this object.
    """

    default: list[QueueSong] = field(default_factory=list)
    # permutation of unique_ids of `default`, empty means "not shuffled"
    shuffled: list[str] = field(default_factory=list)
    current: CurrentItem = field(default_factory=CurrentItem)
    repeat: RepeatMode = RepeatMode.OFF

    @property
    def shuffle_enabled(self) -> bool:
        """Return if the shuffled ordering is active."""
        return bool(self.shuffled)

    @property
    def items(self) -> int:
        """Return the number of songs in the queue."""
        return len(self.default)

    def ordering(self) -> list[str]:
        """Return the unique_ids of the queue in the currently active order."""
        if self.shuffled:
            return list(self.shuffled)
        return [x.unique_id for x in self.default]

    def ordered_songs(self) -> list[QueueSong]:
        """Return the songs of the queue in the currently active order."""
        if not self.shuffled:
            return list(self.default)
        mapping = {x.unique_id: x for x in self.default}
        return [mapping[unique_id] for unique_id in self.shuffled]


@dataclass(kw_only=True)
class QueueSnapshot(DataClassDictMixin):
    """Persisted form of the queue: ordered song ids plus position."""

    song_ids: list[str] = field(default_factory=list)
    current_index: int = 0
    position_ms: int = 0


@dataclass(kw_only=True)
class RestoreResult:
    """Outcome of a queue restore."""

    restored: int
    dropped_ids: list[str] = field(default_factory=list)

    @property
    def warning(self) -> PartialResolutionWarning | None:
        """Return the warning describing the dropped ids (if any were dropped)."""
        if not self.dropped_ids:
            return None
        return PartialResolutionWarning(self.dropped_ids)
