"""RemoteController: handles events received from a remote control channel."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mashumaro.exceptions import InvalidFieldValue, MissingField

from playerdeck.constants import DECK_LOGGER_NAME, VERBOSE_LOG_LEVEL
from playerdeck.models.enums import EventType, LibraryItem, PlaybackCommand, RemoteEventType
from playerdeck.models.errors import InvalidCommand, PlayerDeckError
from playerdeck.models.playback import PlaybackIntent
from playerdeck.models.remote import RemoteAck, RemoteEvent

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from playerdeck.deck import PlayerDeck

MAX_VOLUME = 100


class RemoteController:
    """Controller that applies remote control events to the deck."""

    def __init__(self, deck: PlayerDeck) -> None:
        """Initialize class."""
        self.deck = deck
        self.logger = logging.getLogger(f"{DECK_LOGGER_NAME}.remote")
        self._handlers: dict[RemoteEventType, Callable[[RemoteEvent], Awaitable[None]]] = {
            RemoteEventType.FAVORITE: self._handle_favorite,
            RemoteEventType.RATING: self._handle_rating,
            RemoteEventType.SEEK: self._handle_seek,
            RemoteEventType.POSITION: self._handle_position,
            RemoteEventType.VOLUME: self._handle_volume,
            RemoteEventType.SAVE_QUEUE: self._handle_save_queue,
            RemoteEventType.RESTORE_QUEUE: self._handle_restore_queue,
            RemoteEventType.REPEAT: self._handle_repeat,
            RemoteEventType.SHUFFLE: self._handle_shuffle,
            RemoteEventType.NEXT: self._handle_next,
            RemoteEventType.PREVIOUS: self._handle_previous,
            RemoteEventType.PLAY: self._handle_play,
            RemoteEventType.PAUSE: self._handle_pause,
        }

    async def handle_event(self, raw_event: dict[str, Any]) -> RemoteAck:
        """
        Handle a (raw) event from the remote control channel.

        Always returns an acknowledgement, failures are reported in it.
        """
        event_name = str(raw_event.get("event", ""))
        try:
            event = RemoteEvent.from_dict(raw_event)
        except (MissingField, InvalidFieldValue, ValueError, TypeError) as err:
            self.logger.warning("Ignoring malformed remote event %s: %s", event_name, err)
            return RemoteAck(
                event=event_name,
                success=False,
                error=str(err),
                error_code=InvalidCommand.error_code,
            )
        if self.logger.isEnabledFor(VERBOSE_LOG_LEVEL):
            self.logger.log(VERBOSE_LOG_LEVEL, "Received remote event %s", raw_event)
        try:
            await self._handlers[event.event](event)
        except PlayerDeckError as err:
            self.logger.warning("Remote event %s failed: %s", event.event.value, err)
            return RemoteAck(
                event=event_name, success=False, error=str(err), error_code=err.error_code
            )
        return RemoteAck(event=event_name, success=True)

    async def _handle_favorite(self, event: RemoteEvent) -> None:
        if event.favorite is None or not event.song_ids:
            raise InvalidCommand("favorite requires ids and a favorite value")
        await self.deck.music.set_favorite(
            event.song_ids, event.favorite, LibraryItem.SONG, server_id=event.server_id
        )

    async def _handle_rating(self, event: RemoteEvent) -> None:
        if event.rating is None or not event.song_ids:
            raise InvalidCommand("rating requires ids and a rating value")
        await self.deck.music.set_rating(event.song_ids, event.rating, server_id=event.server_id)

    async def _handle_seek(self, event: RemoteEvent) -> None:
        # relative seek, offset in seconds
        if event.offset is None:
            raise InvalidCommand("seek requires an offset")
        current_time = self.deck.player_queue.queue.current.time
        self.deck.player_queue.seek(current_time + int(event.offset * 1000))

    async def _handle_position(self, event: RemoteEvent) -> None:
        # absolute seek, position in seconds
        if event.position is None:
            raise InvalidCommand("position requires a position")
        self.deck.player_queue.seek(int(event.position * 1000))

    async def _handle_volume(self, event: RemoteEvent) -> None:
        if event.volume is None:
            raise InvalidCommand("volume requires a volume")
        volume = max(0.0, min(float(event.volume), MAX_VOLUME))
        self._signal_intent(PlaybackCommand.VOLUME, volume)

    async def _handle_save_queue(self, event: RemoteEvent) -> None:
        await self.deck.player_queue.save()

    async def _handle_restore_queue(self, event: RemoteEvent) -> None:
        await self.deck.player_queue.load_saved()

    async def _handle_repeat(self, event: RemoteEvent) -> None:
        player_queue = self.deck.player_queue
        player_queue.set_repeat(player_queue.queue.repeat.cycle())

    async def _handle_shuffle(self, event: RemoteEvent) -> None:
        player_queue = self.deck.player_queue
        player_queue.set_shuffle(not player_queue.queue.shuffle_enabled)

    async def _handle_next(self, event: RemoteEvent) -> None:
        self.deck.player_queue.next()

    async def _handle_previous(self, event: RemoteEvent) -> None:
        self.deck.player_queue.previous()

    async def _handle_play(self, event: RemoteEvent) -> None:
        self._signal_intent(PlaybackCommand.PLAY)

    async def _handle_pause(self, event: RemoteEvent) -> None:
        self._signal_intent(PlaybackCommand.PAUSE)

    def _signal_intent(self, command: PlaybackCommand, value: float | None = None) -> None:
        intent = PlaybackIntent(command=command, value=value)
        self.deck.signal_event(EventType.PLAYBACK_INTENT, data=intent)
