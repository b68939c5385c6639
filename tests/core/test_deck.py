"""Tests for the PlayerDeck main object."""

import asyncio
from collections.abc import Callable

import pytest

from playerdeck.deck import PlayerDeck
from playerdeck.models.enums import EventType, RepeatMode
from playerdeck.models.errors import InvalidCommand
from playerdeck.models.event import DeckEvent
from playerdeck.models.media_items import Song
from playerdeck.models.server import ServerContext


async def test_execute_unknown_command(deck: PlayerDeck) -> None:
    """Test an unknown command is rejected."""
    with pytest.raises(InvalidCommand):
        await deck.execute("player_queue/explode")


async def test_execute_queue_commands(
    deck: PlayerDeck, make_song: Callable[..., Song]
) -> None:
    """Test queue operations can be invoked with raw (json) arguments."""
    songs = [make_song("A").to_dict(), make_song("B").to_dict()]
    await deck.execute("player_queue/set", {"songs": songs, "start_index": 1})
    assert deck.player_queue.queue.current.song is not None
    assert deck.player_queue.queue.current.song.id == "B"

    await deck.execute("player_queue/repeat", {"repeat_mode": "all"})
    assert deck.player_queue.queue.repeat == RepeatMode.ALL

    items = await deck.execute("player_queue/items")
    assert [x.unique_id for x in items] == ["q1", "q2"]


async def test_execute_invalid_arguments(deck: PlayerDeck) -> None:
    """Test unknown or malformed arguments are rejected."""
    with pytest.raises(InvalidCommand):
        await deck.execute("player_queue/repeat", {"mode": "all"})
    with pytest.raises(InvalidCommand):
        await deck.execute("player_queue/repeat", {"repeat_mode": "sometimes"})
    with pytest.raises(InvalidCommand):
        await deck.execute("player_queue/play_index", {})


async def test_active_server(deck: PlayerDeck, subsonic_server: ServerContext) -> None:
    """Test switching the active server."""
    events: list[DeckEvent] = []
    deck.subscribe(events.append, EventType.SERVER_CHANGED)

    with pytest.raises(InvalidCommand):
        deck.set_active_server("unknown")
    assert deck.active_server is None

    deck.add_server(subsonic_server)
    deck.set_active_server(subsonic_server.id)
    # switching to the same server is a no-op
    deck.set_active_server(subsonic_server.id)
    await asyncio.sleep(0)

    assert deck.active_server == subsonic_server
    assert len(events) == 1
    assert events[0].object_id == subsonic_server.id
    assert events[0].data == subsonic_server


async def test_remove_active_server(deck: PlayerDeck, subsonic_server: ServerContext) -> None:
    """Test removing the active server leaves no active server."""
    deck.add_server(subsonic_server)
    deck.set_active_server(subsonic_server.id)

    deck.remove_server(subsonic_server.id)

    assert deck.active_server is None
    assert deck.get_servers() == []
    assert deck.get_server(subsonic_server.id) is None


async def test_subscribe(deck: PlayerDeck) -> None:
    """Test (async) subscribers and event filters."""
    received: list[DeckEvent] = []
    done = asyncio.Event()

    async def on_event(event: DeckEvent) -> None:
        received.append(event)
        done.set()

    remove = deck.subscribe(on_event, (EventType.QUEUE_UPDATED, EventType.SERVER_CHANGED))
    deck.signal_event(EventType.QUEUE_TIME_UPDATED, data=10)
    deck.signal_event(EventType.QUEUE_UPDATED, object_id="queue")
    await asyncio.wait_for(done.wait(), 1)

    assert [x.event for x in received] == [EventType.QUEUE_UPDATED]

    remove()
    deck.signal_event(EventType.QUEUE_UPDATED)
    await asyncio.sleep(0)
    assert len(received) == 1


async def test_create_task(deck: PlayerDeck) -> None:
    """Test tasks with the same id are not started twice."""
    gate = asyncio.Event()

    async def wait_for_gate() -> str:
        await gate.wait()
        return "done"

    task = deck.create_task(wait_for_gate, task_id="gate")
    assert deck.create_task(wait_for_gate, task_id="gate") is task

    gate.set()
    assert await task == "done"

    with pytest.raises(RuntimeError):
        deck.create_task(lambda: None)  # type: ignore[arg-type]
