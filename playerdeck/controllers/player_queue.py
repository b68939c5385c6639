"""
PlayerDeck PlayerQueueController.

Owns the (single) playback queue: ordering (default and shuffled), the
current position, save/restore of the queue and the playback intents that
follow from queue transitions. All mutations of the queue go through this
controller.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING

from playerdeck.constants import (
    CONF_PREVIOUS_RESTART_THRESHOLD,
    CONF_SMART_SHUFFLE,
    DECK_LOGGER_NAME,
    DEFAULT_PREVIOUS_RESTART_THRESHOLD,
)
from playerdeck.helpers.api import api_command
from playerdeck.helpers.identity import ShortUuidGenerator, UniqueIdGenerator
from playerdeck.models.enums import EventType, PlaybackCommand, QueuePosition, RepeatMode
from playerdeck.models.errors import OperationSuperseded, PlayerDeckError, QueueIndexError
from playerdeck.models.media_items import QueueSong, Song
from playerdeck.models.playback import PlaybackIntent
from playerdeck.models.queue import CurrentItem, PlayQueue, QueueSnapshot, RestoreResult

if TYPE_CHECKING:
    from playerdeck.deck import PlayerDeck


class PlayerQueueController:
    """Controller holding the playback queue state."""

    def __init__(
        self,
        deck: PlayerDeck,
        id_generator: UniqueIdGenerator | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize class."""
        self.deck = deck
        self.logger = logging.getLogger(f"{DECK_LOGGER_NAME}.player_queue")
        self.id_generator: UniqueIdGenerator = id_generator or ShortUuidGenerator()
        self._random = rng or random.Random()
        self._queue = PlayQueue()
        self._restore_generation = 0

    @property
    def queue(self) -> PlayQueue:
        """Return the (read only) queue state."""
        return self._queue

    @api_command("player_queue/get")
    def get(self) -> PlayQueue:
        """Return the queue state."""
        return self._queue

    @api_command("player_queue/items")
    def items(self) -> list[QueueSong]:
        """Return the songs of the queue in the active order."""
        return self._queue.ordered_songs()

    # Queue commands

    @api_command("player_queue/set")
    def set_queue(self, songs: list[Song], start_index: int = 0) -> None:
        """Replace the queue with the given songs and start at the given index."""
        if songs and not 0 <= start_index < len(songs):
            msg = f"Start index {start_index} out of range for {len(songs)} song(s)"
            raise QueueIndexError(msg)
        queue_songs = self._to_queue_songs(songs)
        self._queue.default = queue_songs
        self._queue.shuffled = []
        if queue_songs:
            self._queue.current = CurrentItem(
                song=queue_songs[start_index], index=start_index, time=0
            )
        else:
            self._queue.current = CurrentItem()
        self.signal_update(items_changed=True)
        self._signal_play()

    @api_command("player_queue/add")
    def add_to_queue(
        self, songs: list[Song], position: QueuePosition = QueuePosition.END
    ) -> None:
        """
        Add songs to the queue.

        - position: where to insert the songs in the default ordering.
        While shuffled, added songs are always appended to the shuffled
        ordering so the order of the upcoming songs is not disturbed.
        """
        if not songs:
            return
        queue = self._queue
        current = queue.current
        new_songs = self._to_queue_songs(songs)
        default = list(queue.default)
        was_empty = not default
        if position == QueuePosition.START:
            insert_at = 0
        elif position == QueuePosition.AFTER_CURRENT and current.song is not None:
            insert_at = self._default_index(current.song.unique_id) + 1
        else:
            insert_at = len(default)
        default[insert_at:insert_at] = new_songs

        shuffled = queue.shuffled
        index = current.index
        if shuffled:
            shuffled = [*shuffled, *(x.unique_id for x in new_songs)]
        elif current.song is not None:
            index = [x.unique_id for x in default].index(current.song.unique_id)
        elif not was_empty and insert_at <= current.index < len(queue.default):
            index += len(new_songs)

        queue.default = default
        queue.shuffled = shuffled
        if was_empty:
            queue.current = CurrentItem(song=default[0], index=0, time=0)
        else:
            queue.current = CurrentItem(song=current.song, index=index, time=current.time)
        self.logger.debug("Added %s song(s) to the queue (%s)", len(new_songs), position.value)
        self.signal_update(items_changed=True)

    @api_command("player_queue/shuffle")
    def shuffle(self) -> None:
        """Shuffle the queue, the current song stays current (at the top of the ordering)."""
        queue = self._queue
        if not queue.default:
            return
        current = queue.current
        if current.song is not None:
            current_id: str | None = current.song.unique_id
        else:
            current_id = _pending_id(queue.ordering(), current.index)
        remaining = [x for x in queue.default if x.unique_id != current_id]
        if self.deck.config.get(CONF_SMART_SHUFFLE, True):
            remaining = _smart_shuffle(remaining, self._random)
        else:
            remaining = self._random.sample(remaining, len(remaining))
        shuffled = [x.unique_id for x in remaining]
        index = current.index
        if current_id is not None:
            shuffled.insert(0, current_id)
            index = 0
        queue.shuffled = shuffled
        queue.current = CurrentItem(song=current.song, index=index, time=current.time)
        self.signal_update(items_changed=True)

    @api_command("player_queue/unshuffle")
    def unshuffle(self) -> None:
        """Restore the default (curated) ordering of the queue."""
        queue = self._queue
        if not queue.shuffled:
            return
        current = queue.current
        if current.song is not None:
            index = self._default_index(current.song.unique_id)
        else:
            pending_id = _pending_id(queue.shuffled, current.index)
            index = _remap_cursor(pending_id, [x.unique_id for x in queue.default])
        queue.shuffled = []
        queue.current = CurrentItem(song=current.song, index=index, time=current.time)
        self.signal_update(items_changed=True)

    @api_command("player_queue/set_shuffle")
    def set_shuffle(self, shuffle_enabled: bool) -> None:
        """Configure shuffle setting on the the queue."""
        if self._queue.shuffle_enabled == shuffle_enabled:
            return  # no change
        if shuffle_enabled:
            self.shuffle()
        else:
            self.unshuffle()

    @api_command("player_queue/repeat")
    def set_repeat(self, repeat_mode: RepeatMode) -> None:
        """Configure repeat setting on the the queue."""
        if self._queue.repeat == repeat_mode:
            return  # no change
        self._queue.repeat = repeat_mode
        self.signal_update()

    @api_command("player_queue/next")
    def next(self) -> QueueSong | None:
        """
        Advance to the next song of the active ordering.

        Returns the new current song or None when the queue is exhausted,
        in which case the queue is left untouched.
        """
        songs = self._queue.ordered_songs()
        current = self._queue.current
        next_index: int | None
        if current.song is None:
            # no current song (it was dropped or removed): resume at the cursor
            if current.index < len(songs):
                next_index = current.index
            elif songs and self._queue.repeat == RepeatMode.ALL:
                next_index = 0
            else:
                next_index = None
        else:
            next_index = self._get_next_index(current.index, len(songs))
        if next_index is None:
            self.logger.debug("Queue exhausted")
            return None
        self._queue.current = CurrentItem(song=songs[next_index], index=next_index, time=0)
        self.signal_update()
        self._signal_play()
        return songs[next_index]

    @api_command("player_queue/previous")
    def previous(self) -> QueueSong | None:
        """
        Go back to the previous song of the active ordering.

        Restarts the current song instead when it played longer than the
        configured threshold (or when it is the first song without repeat all).
        """
        songs = self._queue.ordered_songs()
        if not songs:
            return None
        current = self._queue.current
        threshold = self.deck.config.get(
            CONF_PREVIOUS_RESTART_THRESHOLD, DEFAULT_PREVIOUS_RESTART_THRESHOLD
        )
        if current.song is None:
            prev_index = min(current.index, len(songs) - 1)
        elif current.time > threshold:
            prev_index = current.index
        elif current.index > 0:
            prev_index = current.index - 1
        elif self._queue.repeat == RepeatMode.ALL:
            prev_index = len(songs) - 1
        else:
            prev_index = current.index
        self._queue.current = CurrentItem(song=songs[prev_index], index=prev_index, time=0)
        self.signal_update()
        self._signal_play()
        return songs[prev_index]

    @api_command("player_queue/play_index")
    def play_index(self, index: int) -> QueueSong:
        """Jump to the song at the given index of the active ordering."""
        songs = self._queue.ordered_songs()
        if not 0 <= index < len(songs):
            msg = f"Index {index} out of range for {len(songs)} song(s)"
            raise QueueIndexError(msg)
        self._queue.current = CurrentItem(song=songs[index], index=index, time=0)
        self.signal_update()
        self._signal_play()
        return songs[index]

    @api_command("player_queue/set_current")
    def set_current(self, unique_id: str) -> QueueSong:
        """Jump to the song with the given unique_id."""
        return self.play_index(self._ordering_index(unique_id))

    @api_command("player_queue/update_time")
    def update_time(self, time_ms: int) -> None:
        """Handle a time (progress) update of the playback engine."""
        self._queue.current.time = max(0, int(time_ms))
        self.deck.signal_event(EventType.QUEUE_TIME_UPDATED, data=self._queue.current.time)

    @api_command("player_queue/seek")
    def seek(self, position_ms: int) -> None:
        """Seek the current song to the given (absolute) position."""
        if self._queue.current.song is None:
            return
        duration = self._queue.current.song.duration
        position_ms = max(0, int(position_ms))
        if duration:
            position_ms = min(position_ms, duration)
        self.update_time(position_ms)
        self._signal_intent(PlaybackCommand.SEEK, value=position_ms)

    @api_command("player_queue/move_item")
    def move_item(self, unique_id: str, new_position: int) -> None:
        """
        Move a song to a new position within the active ordering.

        While shuffled only the shuffled ordering changes, the default
        (curated) ordering is left as is.
        """
        queue = self._queue
        ordering = queue.ordering()
        old_position = self._ordering_index(unique_id)
        if not 0 <= new_position < len(ordering):
            msg = f"Position {new_position} out of range for {len(ordering)} song(s)"
            raise QueueIndexError(msg)
        if old_position == new_position:
            return
        current = queue.current
        pending_id = _pending_id(ordering, current.index)
        ordering.insert(new_position, ordering.pop(old_position))
        if current.song is not None:
            index = ordering.index(current.song.unique_id)
        else:
            index = _remap_cursor(pending_id, ordering)
        if queue.shuffled:
            queue.shuffled = ordering
        else:
            mapping = {x.unique_id: x for x in queue.default}
            queue.default = [mapping[x] for x in ordering]
        queue.current = CurrentItem(song=current.song, index=index, time=current.time)
        self.signal_update(items_changed=True)

    @api_command("player_queue/remove_item")
    def remove_item(self, unique_id: str) -> None:
        """
        Remove a song from the queue.

        Removing the current song advances to the song that next() would
        have picked (or leaves the queue without current song).
        """
        queue = self._queue
        ordering = queue.ordering()
        position = self._ordering_index(unique_id)
        default = [x for x in queue.default if x.unique_id != unique_id]
        shuffled = [x for x in queue.shuffled if x != unique_id]
        new_ordering = shuffled or [x.unique_id for x in default]
        songs = {x.unique_id: x for x in default}
        current = queue.current
        is_current = current.song is not None and current.song.unique_id == unique_id

        if is_current:
            next_index = self._get_next_index(position, len(ordering), is_skip=True)
            if next_index is not None and ordering[next_index] != unique_id:
                next_id = ordering[next_index]
                new_current = CurrentItem(
                    song=songs[next_id], index=new_ordering.index(next_id), time=0
                )
            else:
                # nothing follows: the cursor ends up past the last song
                new_current = CurrentItem(song=None, index=len(new_ordering), time=0)
        elif current.song is not None:
            new_current = CurrentItem(
                song=current.song,
                index=new_ordering.index(current.song.unique_id),
                time=current.time,
            )
        else:
            pending_id = _pending_id(ordering, current.index)
            if pending_id == unique_id:
                # the removed song was up next, its successor takes its place
                pending_id = _pending_id(ordering, current.index + 1)
            new_current = CurrentItem(
                song=None, index=_remap_cursor(pending_id, new_ordering), time=0
            )

        queue.default = default
        queue.shuffled = shuffled
        queue.current = new_current
        self.signal_update(items_changed=True)
        if is_current:
            if new_current.song is None:
                self._signal_intent(PlaybackCommand.STOP)
            else:
                self._signal_play()

    @api_command("player_queue/clear")
    def clear(self) -> None:
        """Clear all songs in the queue."""
        had_song = self._queue.current.song is not None
        self._queue.default = []
        self._queue.shuffled = []
        self._queue.current = CurrentItem()
        self.signal_update(items_changed=True)
        if had_song:
            self._signal_intent(PlaybackCommand.STOP)

    def update_song_state(
        self,
        server_id: str,
        song_ids: list[str],
        favorite: bool | None = None,
        rating: int | None = None,
    ) -> None:
        """Propagate a favorite/rating change of songs to the queued copies."""
        changed = False
        for song in self._queue.default:
            if song.server_id != server_id or song.id not in song_ids:
                continue
            if favorite is not None:
                song.user_favorite = favorite
            if rating is not None:
                song.user_rating = rating or None
            changed = True
        if changed:
            self.signal_update(items_changed=True)

    # Persistence

    @api_command("player_queue/serialize")
    def serialize(self) -> QueueSnapshot:
        """Return the snapshot of the queue (song ids in the active order plus position)."""
        songs = self._queue.ordered_songs()
        if not songs:
            return QueueSnapshot()
        current = self._queue.current
        return QueueSnapshot(
            song_ids=[x.id for x in songs],
            current_index=min(current.index, len(songs) - 1),
            position_ms=current.time if current.song is not None else 0,
        )

    @api_command("player_queue/restore")
    async def restore(self, snapshot: QueueSnapshot) -> RestoreResult:
        """
        Rebuild the queue from a snapshot, re-resolving every song on the active server.

        Songs that can not be resolved are skipped (and reported in the result).
        A restore that is still in flight when a newer one starts, or when the
        active server changes, raises OperationSuperseded and leaves the queue as is.
        """
        generation = self._next_restore_generation()
        server_id = self._active_server_id()
        return await self._restore(snapshot, generation, server_id)

    @api_command("player_queue/save")
    async def save(self) -> QueueSnapshot:
        """Store the queue on the active server."""
        snapshot = self.serialize()
        await self.deck.music.save_queue(snapshot)
        self.logger.debug("Saved queue with %s song(s)", len(snapshot.song_ids))
        self.deck.signal_event(EventType.QUEUE_SAVED, data=snapshot)
        return snapshot

    @api_command("player_queue/load_saved")
    async def load_saved(self) -> RestoreResult | None:
        """Restore the queue stored on the active server (and seek to its position)."""
        generation = self._next_restore_generation()
        server_id = self._active_server_id()
        snapshot = await self.deck.music.get_saved_queue()
        self._check_restore_current(generation, server_id)
        if snapshot is None:
            self.logger.debug("No saved queue on server %s", server_id)
            return None
        result = await self._restore(snapshot, generation, server_id)
        if self._queue.current.song is not None:
            self._signal_play()
            self._signal_intent(PlaybackCommand.SEEK, value=self._queue.current.time)
        return result

    def signal_update(self, items_changed: bool = False) -> None:
        """Signal state changed of the queue."""
        if items_changed:
            self.deck.signal_event(EventType.QUEUE_ITEMS_UPDATED, data=self._queue)
        # always send the base event
        self.deck.signal_event(EventType.QUEUE_UPDATED, data=self._queue)

    # Helper methods

    async def _restore(
        self, snapshot: QueueSnapshot, generation: int, server_id: str
    ) -> RestoreResult:
        results = await asyncio.gather(
            *(self._resolve_song(server_id, song_id) for song_id in snapshot.song_ids)
        )
        self._check_restore_current(generation, server_id)

        kept: list[Song] = []
        dropped_ids: list[str] = []
        current_song: QueueSong | None = None
        current_index = snapshot.current_index
        for index, (song_id, song) in enumerate(zip(snapshot.song_ids, results, strict=True)):
            if index == snapshot.current_index:
                current_index = len(kept)
            if song is None:
                dropped_ids.append(song_id)
                continue
            kept.append(song)
        if current_index > len(kept):
            current_index = len(kept)

        queue_songs = self._to_queue_songs(kept)
        if (
            0 <= snapshot.current_index < len(results)
            and results[snapshot.current_index] is not None
        ):
            current_song = queue_songs[current_index]
        else:
            # the current song itself could not be restored, point at its successor
            current_index = max(0, current_index)

        self._queue.default = queue_songs
        self._queue.shuffled = []
        self._queue.current = CurrentItem(
            song=current_song,
            index=current_index,
            time=snapshot.position_ms if current_song is not None else 0,
        )
        result = RestoreResult(restored=len(queue_songs), dropped_ids=dropped_ids)
        if dropped_ids:
            self.logger.warning(
                "Restored queue without %s song(s) that could not be resolved: %s",
                len(dropped_ids),
                ", ".join(dropped_ids),
            )
        else:
            self.logger.debug("Restored queue with %s song(s)", len(queue_songs))
        self.signal_update(items_changed=True)
        self.deck.signal_event(EventType.QUEUE_RESTORED, data=result)
        return result

    async def _resolve_song(self, server_id: str, song_id: str) -> Song | None:
        """Resolve a song id on the given server (None if that is not possible)."""
        try:
            return await self.deck.music.get_song(song_id, server_id=server_id)
        except PlayerDeckError as err:
            self.logger.debug("Unable to resolve song %s: %s", song_id, err)
            return None

    def _next_restore_generation(self) -> int:
        self._restore_generation += 1
        return self._restore_generation

    def _active_server_id(self) -> str:
        return self.deck.music.get_active_server().id

    def _check_restore_current(self, generation: int, server_id: str) -> None:
        """Raise when the restore with the given generation went stale."""
        if generation != self._restore_generation:
            raise OperationSuperseded("Queue restore superseded by a newer restore")
        active = self.deck.active_server
        if active is None or active.id != server_id:
            raise OperationSuperseded("Active server changed during queue restore")

    def _to_queue_songs(self, songs: list[Song]) -> list[QueueSong]:
        """Return queue copies of the given songs, each with a new unique_id."""
        return [QueueSong.from_song(x, self.id_generator.next()) for x in songs]

    def _default_index(self, unique_id: str) -> int:
        for index, song in enumerate(self._queue.default):
            if song.unique_id == unique_id:
                return index
        raise QueueIndexError(f"Song {unique_id} not found in queue")

    def _ordering_index(self, unique_id: str) -> int:
        ordering = self._queue.ordering()
        if unique_id not in ordering:
            raise QueueIndexError(f"Song {unique_id} not found in queue")
        return ordering.index(unique_id)

    def _get_next_index(
        self,
        cur_index: int,
        count: int,
        is_skip: bool = False,
    ) -> int | None:
        """
        Return the next index for the queue, accounting for repeat settings.

        Will return None if there are no (more) items in the queue.
        """
        if not count:
            # queue is empty
            return None
        # handle repeat single track
        if self._queue.repeat == RepeatMode.ONE and not is_skip and 0 <= cur_index < count:
            return cur_index
        # handle cur_index is last index of the queue
        if cur_index >= (count - 1):
            if self._queue.repeat == RepeatMode.ALL:
                # if repeat all is enabled, we simply start again from the beginning
                return 0
            return None
        # all other: just the next index
        return cur_index + 1

    def _signal_play(self) -> None:
        """Ask the playback engine to play the current song."""
        if (song := self._queue.current.song) is None:
            return
        self._signal_intent(PlaybackCommand.PLAY, stream_url=song.stream_url)

    def _signal_intent(
        self,
        command: PlaybackCommand,
        value: float | None = None,
        stream_url: str | None = None,
    ) -> None:
        intent = PlaybackIntent(command=command, value=value, stream_url=stream_url)
        self.deck.signal_event(EventType.PLAYBACK_INTENT, data=intent)


def _pending_id(ordering: list[str], index: int) -> str | None:
    """Return the unique_id the cursor points at, None when it is past the end."""
    if 0 <= index < len(ordering):
        return ordering[index]
    return None


def _remap_cursor(pending_id: str | None, ordering: list[str]) -> int:
    """Return the cursor position of the pending song within a (changed) ordering."""
    if pending_id is None:
        return len(ordering)
    return ordering.index(pending_id)


def _smart_shuffle[SongT: Song](items: list[SongT], rng: random.Random) -> list[SongT]:
    """Shuffle songs, avoiding the same song next to each other.

    Best-effort approach to prevent the same song from appearing adjacent.
    Does a random shuffle first, then makes a limited number of passes to
    swap adjacent duplicates with a random item further in the list.

    :param items: List of songs to shuffle.
    :param rng: Random generator to shuffle with.
    """
    if len(items) <= 2:
        return rng.sample(items, len(items))

    # Start with a random shuffle
    shuffled = rng.sample(items, len(items))

    # Make a few passes to fix adjacent duplicates
    max_passes = 3
    for _ in range(max_passes):
        swapped = False
        for i in range(len(shuffled) - 1):
            if shuffled[i].id == shuffled[i + 1].id:
                # Found adjacent duplicate - swap with random position at least 2 away
                swap_candidates = [j for j in range(len(shuffled)) if abs(j - i - 1) >= 2]
                if swap_candidates:
                    swap_pos = rng.choice(swap_candidates)
                    shuffled[i + 1], shuffled[swap_pos] = shuffled[swap_pos], shuffled[i + 1]
                    swapped = True
        if not swapped:
            break

    return shuffled
