"""Tests for saving and restoring the playback queue."""

import asyncio
import logging
from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest

from playerdeck.deck import PlayerDeck
from playerdeck.models.enums import EventType, PlaybackCommand
from playerdeck.models.errors import (
    InvalidCommand,
    MediaNotFoundError,
    OperationSuperseded,
    PartialResolutionWarning,
)
from playerdeck.models.event import DeckEvent
from playerdeck.models.media_items import Song
from playerdeck.models.queue import QueueSnapshot
from playerdeck.models.server import ServerContext

UNKNOWN_IDS = ("X", "Y")


@pytest.fixture
def active_deck(
    deck: PlayerDeck, subsonic_server: ServerContext, make_song: Callable[..., Song]
) -> PlayerDeck:
    """Return a deck with an active server that resolves all ids but the unknown ones."""

    async def get_song(song_id: str, server_id: str | None = None) -> Song:
        if song_id in UNKNOWN_IDS:
            raise MediaNotFoundError(f"Song {song_id} not found", code=70)
        return make_song(song_id)

    deck.add_server(subsonic_server)
    deck.set_active_server(subsonic_server.id)
    deck.music.get_song = AsyncMock(side_effect=get_song)  # type: ignore[method-assign]
    return deck


def _ids(deck: PlayerDeck) -> list[str]:
    return [x.id for x in deck.player_queue.items()]


async def test_restore(active_deck: PlayerDeck) -> None:
    """Test restoring a snapshot of resolvable ids."""
    player_queue = active_deck.player_queue
    snapshot = QueueSnapshot(song_ids=["A", "B", "C"], current_index=1, position_ms=3000)

    result = await player_queue.restore(snapshot)

    assert result.restored == 3
    assert result.dropped_ids == []
    assert result.warning is None
    assert _ids(active_deck) == ["A", "B", "C"]
    current = player_queue.queue.current
    assert current.index == 1
    assert current.song is not None
    assert current.song.id == "B"
    assert current.time == 3000
    get_song: AsyncMock = active_deck.music.get_song  # type: ignore[assignment]
    get_song.assert_any_await("A", server_id="srv-sub")


async def test_serialize_restore_roundtrip(
    active_deck: PlayerDeck, make_song: Callable[..., Song]
) -> None:
    """Test a serialized queue restores to the same ordering and position."""
    player_queue = active_deck.player_queue
    player_queue.set_queue([make_song(x) for x in "ABCA"], 3)
    player_queue.update_time(1500)
    snapshot = player_queue.serialize()

    await player_queue.restore(snapshot)

    assert player_queue.serialize() == snapshot
    # restored songs get a new identity
    assert len({x.unique_id for x in player_queue.queue.default}) == 4


async def test_restore_drops_unresolvable(
    active_deck: PlayerDeck, caplog: pytest.LogCaptureFixture
) -> None:
    """Test unresolvable ids are skipped and the current index is shifted."""
    player_queue = active_deck.player_queue
    snapshot = QueueSnapshot(song_ids=["A", "X", "B", "Y", "C"], current_index=2)

    result = await player_queue.restore(snapshot)

    assert _ids(active_deck) == ["A", "B", "C"]
    assert player_queue.queue.current.index == 1
    assert player_queue.queue.current.song is not None
    assert player_queue.queue.current.song.id == "B"
    assert result.restored == 3
    assert result.dropped_ids == ["X", "Y"]
    assert isinstance(result.warning, PartialResolutionWarning)
    assert result.warning.dropped_ids == ["X", "Y"]
    assert any(
        x.levelno == logging.WARNING and "could not be resolved" in x.getMessage()
        for x in caplog.records
    )


async def test_restore_current_dropped(active_deck: PlayerDeck) -> None:
    """Test the queue has no current song when the current id could not be resolved."""
    player_queue = active_deck.player_queue
    snapshot = QueueSnapshot(song_ids=["A", "X", "B"], current_index=1, position_ms=5000)

    await player_queue.restore(snapshot)

    assert _ids(active_deck) == ["A", "B"]
    current = player_queue.queue.current
    assert current.song is None
    assert current.index == 1
    assert current.time == 0
    # playback resumes with the song that took the place of the dropped one
    song = player_queue.next()
    assert song is not None
    assert song.id == "B"


async def test_restore_last_current_dropped(active_deck: PlayerDeck) -> None:
    """Test a dropped current song without successor leaves the queue exhausted."""
    player_queue = active_deck.player_queue
    await player_queue.restore(QueueSnapshot(song_ids=["A", "B", "X"], current_index=2))

    assert _ids(active_deck) == ["A", "B"]
    assert player_queue.queue.current.song is None
    assert player_queue.queue.current.index == 2
    assert player_queue.next() is None


async def test_remove_pending_song(active_deck: PlayerDeck) -> None:
    """Test removing songs keeps the cursor on the song that plays next."""
    player_queue = active_deck.player_queue
    snapshot = QueueSnapshot(song_ids=["A", "X", "B", "C"], current_index=1)
    await player_queue.restore(snapshot)
    # B (q2) is up next
    assert player_queue.queue.current.index == 1

    player_queue.remove_item("q1")
    assert player_queue.queue.current.index == 0
    # removing the pending song moves the cursor to its successor
    player_queue.remove_item("q2")
    assert player_queue.queue.current.index == 0

    song = player_queue.next()
    assert song is not None
    assert song.id == "C"


async def test_move_pending_song(active_deck: PlayerDeck) -> None:
    """Test moving songs keeps the cursor on the song that plays next."""
    player_queue = active_deck.player_queue
    snapshot = QueueSnapshot(song_ids=["A", "X", "B", "C", "D"], current_index=1)
    await player_queue.restore(snapshot)

    player_queue.move_item("q2", 3)
    assert _ids(active_deck) == ["A", "C", "D", "B"]
    assert player_queue.queue.current.index == 3

    player_queue.move_item("q4", 0)
    assert player_queue.queue.current.index == 3

    song = player_queue.next()
    assert song is not None
    assert song.id == "B"


async def test_shuffle_pending_song(active_deck: PlayerDeck) -> None:
    """Test shuffle/unshuffle keep the cursor on the song that plays next."""
    player_queue = active_deck.player_queue
    snapshot = QueueSnapshot(song_ids=["A", "X", "B", "C", "D"], current_index=1)
    await player_queue.restore(snapshot)

    player_queue.shuffle()
    assert player_queue.queue.shuffled[0] == "q2"
    assert player_queue.queue.current.index == 0
    player_queue.move_item("q2", 2)
    assert player_queue.queue.current.index == 2

    player_queue.unshuffle()
    assert player_queue.queue.current.index == 1
    song = player_queue.next()
    assert song is not None
    assert song.id == "B"


async def test_restore_all_dropped(active_deck: PlayerDeck) -> None:
    """Test a snapshot without any resolvable id results in an empty queue."""
    player_queue = active_deck.player_queue
    result = await player_queue.restore(QueueSnapshot(song_ids=["X", "Y"], current_index=1))
    assert result.restored == 0
    assert player_queue.queue.items == 0
    assert player_queue.queue.current.song is None
    assert player_queue.queue.current.index == 0


async def test_restore_superseded(
    active_deck: PlayerDeck, make_song: Callable[..., Song]
) -> None:
    """Test a restore that is overtaken by a newer one is discarded."""
    gate = asyncio.Event()

    async def get_song(song_id: str, server_id: str | None = None) -> Song:
        if song_id == "slow":
            await gate.wait()
        return make_song(song_id)

    active_deck.music.get_song = AsyncMock(side_effect=get_song)  # type: ignore[method-assign]
    player_queue = active_deck.player_queue

    first = asyncio.create_task(player_queue.restore(QueueSnapshot(song_ids=["slow"])))
    await asyncio.sleep(0)
    await player_queue.restore(QueueSnapshot(song_ids=["A", "B"]))
    gate.set()

    with pytest.raises(OperationSuperseded):
        await first
    assert _ids(active_deck) == ["A", "B"]


async def test_restore_server_changed(
    active_deck: PlayerDeck, navidrome_server: ServerContext, make_song: Callable[..., Song]
) -> None:
    """Test a restore is discarded when the active server changes while it is in flight."""
    gate = asyncio.Event()

    async def get_song(song_id: str, server_id: str | None = None) -> Song:
        await gate.wait()
        return make_song(song_id)

    active_deck.music.get_song = AsyncMock(side_effect=get_song)  # type: ignore[method-assign]
    player_queue = active_deck.player_queue
    player_queue.set_queue([make_song("Z")], 0)

    task = asyncio.create_task(player_queue.restore(QueueSnapshot(song_ids=["A"])))
    await asyncio.sleep(0)
    active_deck.add_server(navidrome_server)
    active_deck.set_active_server(navidrome_server.id)
    gate.set()

    with pytest.raises(OperationSuperseded):
        await task
    assert _ids(active_deck) == ["Z"]


async def test_restore_without_server(deck: PlayerDeck) -> None:
    """Test a restore requires an active server."""
    with pytest.raises(InvalidCommand):
        await deck.player_queue.restore(QueueSnapshot(song_ids=["A"]))


async def test_save(active_deck: PlayerDeck, make_song: Callable[..., Song]) -> None:
    """Test the queue is stored on the active server."""
    active_deck.music.save_queue = AsyncMock()  # type: ignore[method-assign]
    player_queue = active_deck.player_queue
    player_queue.set_queue([make_song(x) for x in "AB"], 1)
    player_queue.update_time(2500)

    snapshot = await player_queue.save()

    assert snapshot == QueueSnapshot(song_ids=["A", "B"], current_index=1, position_ms=2500)
    active_deck.music.save_queue.assert_awaited_once_with(snapshot)


async def test_load_saved(active_deck: PlayerDeck) -> None:
    """Test loading the queue stored on the server resumes playback at its position."""
    events: list[DeckEvent] = []
    active_deck.music.get_saved_queue = AsyncMock(  # type: ignore[method-assign]
        return_value=QueueSnapshot(song_ids=["A", "B"], current_index=1, position_ms=7000)
    )
    active_deck.subscribe(events.append, EventType.PLAYBACK_INTENT)

    result = await active_deck.player_queue.load_saved()
    await asyncio.sleep(0)

    assert result is not None
    assert result.restored == 2
    assert _ids(active_deck) == ["A", "B"]
    assert [(x.data.command, x.data.value) for x in events] == [
        (PlaybackCommand.PLAY, None),
        (PlaybackCommand.SEEK, 7000),
    ]


async def test_load_saved_nothing_stored(
    active_deck: PlayerDeck, make_song: Callable[..., Song]
) -> None:
    """Test loading leaves the queue alone when nothing is stored on the server."""
    active_deck.music.get_saved_queue = AsyncMock(return_value=None)  # type: ignore[method-assign]
    active_deck.player_queue.set_queue([make_song("A")], 0)
    assert await active_deck.player_queue.load_saved() is None
    assert _ids(active_deck) == ["A"]
