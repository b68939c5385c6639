"""Fixtures for testing PlayerDeck."""

import logging
import pathlib
from collections.abc import AsyncGenerator, Callable

import pytest

from playerdeck.deck import PlayerDeck
from playerdeck.helpers.identity import SequentialIdGenerator
from playerdeck.models.enums import ServerType
from playerdeck.models.media_items import Song
from playerdeck.models.server import ServerContext


@pytest.fixture(name="caplog")
def caplog_fixture(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Set log level to debug for tests using the caplog fixture."""
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def subsonic_server() -> ServerContext:
    """Return the descriptor of a (fake) Subsonic server."""
    return ServerContext(
        id="srv-sub",
        name="Subsonic",
        url="https://music.example.com/",
        type=ServerType.SUBSONIC,
        username="alice",
        credential="u=alice&s=salt&t=token",
    )


@pytest.fixture
def navidrome_server() -> ServerContext:
    """Return the descriptor of a (fake) Navidrome server."""
    return ServerContext(
        id="srv-nd",
        name="Navidrome",
        url="https://nd.example.com",
        type=ServerType.NAVIDROME,
        username="bob",
        credential="u=bob&s=salt&t=token",
        nd_credential="jwt-token",
        user_id="user-1",
    )


@pytest.fixture
def make_song(subsonic_server: ServerContext) -> Callable[..., Song]:
    """Return a factory for (library) songs of the Subsonic server."""

    def _make_song(song_id: str, **kwargs: object) -> Song:
        kwargs.setdefault("name", f"Song {song_id}")
        kwargs.setdefault("duration", 180000)
        return Song(
            id=song_id,
            server_id=subsonic_server.id,
            server_type=subsonic_server.type,
            stream_url=f"https://music.example.com/rest/stream.view?id={song_id}",
            **kwargs,  # type: ignore[arg-type]
        )

    return _make_song


@pytest.fixture
async def deck(tmp_path: pathlib.Path) -> AsyncGenerator[PlayerDeck, None]:
    """Start a PlayerDeck with predictable queue identities.

    :param tmp_path: Temporary directory for test data.
    """
    storage_path = tmp_path / "data"
    deck_instance = PlayerDeck(str(storage_path), id_generator=SequentialIdGenerator())

    await deck_instance.start()

    try:
        yield deck_instance
    finally:
        await deck_instance.stop()
