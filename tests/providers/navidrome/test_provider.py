"""Test the Navidrome backend and its api client."""

import json
import logging
import pathlib
from typing import Any
from unittest.mock import AsyncMock, MagicMock, Mock

import aiohttp
import orjson
import pytest
from aiohttp import ClientResponse

from playerdeck.models.enums import LibraryItem
from playerdeck.models.errors import BackendError, MediaNotFoundError
from playerdeck.models.server import ServerContext
from playerdeck.providers.navidrome.api_client import NavidromeAPIClient
from playerdeck.providers.navidrome.provider import NavidromeBackend

FIXTURES_DIR = pathlib.Path(__file__).parent / "fixtures"


def _load(name: str) -> Any:
    return json.loads((FIXTURES_DIR / name).read_text())


@pytest.fixture
def backend(navidrome_server: ServerContext) -> NavidromeBackend:
    """Return a NavidromeBackend with mocked api clients."""
    deck = Mock()
    deck.http_session = MagicMock()
    deck.config.get = MagicMock(side_effect=lambda key, default=None: default)
    backend = NavidromeBackend(deck, navidrome_server)
    backend.api.get = AsyncMock()  # type: ignore[method-assign]
    backend.api.get_list = AsyncMock()  # type: ignore[method-assign]
    backend.subsonic.get = AsyncMock()  # type: ignore[method-assign]
    backend.subsonic.invoke = AsyncMock()  # type: ignore[method-assign]
    return backend


async def test_get_song(backend: NavidromeBackend) -> None:
    """Test a song is fetched from the native api."""
    backend.api.get.return_value = _load("songs/song.json")  # type: ignore[attr-defined]
    song = await backend.get_song("2f1c0a9e")
    backend.api.get.assert_awaited_once_with("song/2f1c0a9e")  # type: ignore[attr-defined]
    assert song.name == "Midnight Drive"
    assert song.server_id == "srv-nd"


async def test_get_album(backend: NavidromeBackend) -> None:
    """Test an album is fetched together with its songs."""
    backend.api.get.return_value = _load("albums/album.json")  # type: ignore[attr-defined]
    backend.api.get_list.return_value = (  # type: ignore[attr-defined]
        [_load("songs/song.json"), _load("songs/never_played.json")],
        2,
    )
    album = await backend.get_album("al-1")
    backend.api.get_list.assert_awaited_once_with(  # type: ignore[attr-defined]
        "song", album_id="al-1", _sort="album", _order="ASC"
    )
    assert album.name == "Night Lines"
    assert [x.id for x in album.songs] == ["2f1c0a9e", "7c8d9e0f"]


async def test_get_album_artist(backend: NavidromeBackend) -> None:
    """Test an artist is enriched with the (Subsonic) artist info."""
    artist_raw = {"id": "a-10", "name": "The Commuters"}
    backend.api.get.return_value = artist_raw  # type: ignore[attr-defined]
    backend.subsonic.get.return_value = {  # type: ignore[attr-defined]
        "status": "ok",
        "artistInfo2": {"similarArtist": [{"id": "a-50", "name": "Other"}]},
    }
    artist = await backend.get_album_artist("a-10")
    backend.subsonic.get.assert_awaited_once_with(  # type: ignore[attr-defined]
        "getArtistInfo2", id="a-10"
    )
    assert artist.similar_artists is not None
    assert [x.id for x in artist.similar_artists] == ["a-50"]


async def test_get_playlist_songs(backend: NavidromeBackend) -> None:
    """Test playlist entries keep their row id."""
    backend.api.get_list.return_value = (  # type: ignore[attr-defined]
        [_load("playlist_songs/entry.json")],
        1,
    )
    songs = await backend.get_playlist_songs("pl-1")
    backend.api.get_list.assert_awaited_once_with(  # type: ignore[attr-defined]
        "playlist/pl-1/tracks", _sort="id"
    )
    assert [(x.id, x.playlist_item_id) for x in songs] == [("2f1c0a9e", "5")]


async def test_get_genres(backend: NavidromeBackend) -> None:
    """Test genres."""
    backend.api.get_list.return_value = (  # type: ignore[attr-defined]
        [{"id": "g-1", "name": "Rock"}, {"id": "g-2", "name": "Jazz"}],
        2,
    )
    genres = await backend.get_genres()
    assert [x.id for x in genres] == ["g-1", "g-2"]


async def test_set_favorite_uses_subsonic(backend: NavidromeBackend) -> None:
    """Test favorites go through the Subsonic endpoints of the server."""
    await backend.set_favorite(["2f1c0a9e"], True, LibraryItem.SONG)
    backend.subsonic.invoke.assert_awaited_once_with(  # type: ignore[attr-defined]
        "star", {"id": ["2f1c0a9e"]}
    )


def _response(status: int = 200, body: Any = None, headers: dict[str, str] | None = None) -> Any:
    response = AsyncMock(spec=ClientResponse)
    response.status = status
    response.reason = "Error"
    response.headers = headers or {}
    response.read.return_value = orjson.dumps(body)
    response.text.return_value = ""
    return response


@pytest.fixture
def http_session() -> MagicMock:
    """Return a mocked http session."""
    return MagicMock(spec=aiohttp.ClientSession)


@pytest.fixture
def api_client(http_session: MagicMock, navidrome_server: ServerContext) -> NavidromeAPIClient:
    """Return a NavidromeAPIClient instance."""
    return NavidromeAPIClient(http_session, navidrome_server, logging.getLogger("test"))


def _mock_request(http_session: MagicMock, response: Any) -> None:
    request_ctx = AsyncMock()
    request_ctx.__aenter__.return_value = response
    http_session.get = MagicMock(return_value=request_ctx)


async def test_api_get(api_client: NavidromeAPIClient, http_session: MagicMock) -> None:
    """Test a request is authorized with the bearer token."""
    _mock_request(http_session, _response(body={"id": "a-10", "name": "x"}))

    result = await api_client.get("artist/a-10")

    assert result == {"id": "a-10", "name": "x"}
    args, kwargs = http_session.get.call_args
    assert args[0] == "https://nd.example.com/api/artist/a-10"
    assert kwargs["headers"] == {"x-nd-authorization": "Bearer jwt-token"}


async def test_api_get_list(api_client: NavidromeAPIClient, http_session: MagicMock) -> None:
    """Test a list is returned together with the total count header."""
    response = _response(body=[{"id": "1"}], headers={"x-total-count": "42"})
    _mock_request(http_session, response)

    items, total_count = await api_client.get_list("song", _start=0, _end=1, album_id=None)

    assert items == [{"id": "1"}]
    assert total_count == 42
    assert http_session.get.call_args.kwargs["params"] == {"_start": "0", "_end": "1"}


async def test_api_get_list_not_a_list(
    api_client: NavidromeAPIClient, http_session: MagicMock
) -> None:
    """Test a non list payload raises BackendError."""
    _mock_request(http_session, _response(body={"id": "1"}))

    with pytest.raises(BackendError):
        await api_client.get_list("song")


async def test_api_404(api_client: NavidromeAPIClient, http_session: MagicMock) -> None:
    """Test GET request with 404 error."""
    _mock_request(http_session, _response(status=404))

    with pytest.raises(MediaNotFoundError):
        await api_client.get("song/unknown")


async def test_api_unauthorized(api_client: NavidromeAPIClient, http_session: MagicMock) -> None:
    """Test GET request with 401 error."""
    _mock_request(http_session, _response(status=401))

    with pytest.raises(BackendError) as exc_info:
        await api_client.get("song/1")

    assert exc_info.value.status == 401
    assert not isinstance(exc_info.value, MediaNotFoundError)
