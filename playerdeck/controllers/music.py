"""MusicController: routes logical library operations to the backend of a server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from playerdeck.constants import DECK_LOGGER_NAME
from playerdeck.helpers.api import api_command
from playerdeck.models.enums import EventType, LibraryItem, ServerType
from playerdeck.models.errors import InvalidCommand
from playerdeck.models.media_items import (
    Album,
    AlbumArtist,
    Genre,
    Playlist,
    SearchResult,
    Song,
    User,
)
from playerdeck.models.queue import QueueSnapshot
from playerdeck.models.server import ServerContext
from playerdeck.providers.navidrome.provider import NavidromeBackend
from playerdeck.providers.subsonic.constants import (
    DEFAULT_RANDOM_SONG_COUNT,
    DEFAULT_SEARCH_LIMIT,
    DEFAULT_TOP_SONG_COUNT,
)
from playerdeck.providers.subsonic.provider import SubsonicBackend

if TYPE_CHECKING:
    from playerdeck.deck import PlayerDeck
    from playerdeck.models.backend import Backend

BACKEND_TYPES: dict[ServerType, type[Backend]] = {
    ServerType.SUBSONIC: SubsonicBackend,
    ServerType.NAVIDROME: NavidromeBackend,
}


class MusicController:
    """Facade for all library operations, whatever the backend of the server is."""

    def __init__(self, deck: PlayerDeck) -> None:
        """Initialize class."""
        self.deck = deck
        self.logger = logging.getLogger(f"{DECK_LOGGER_NAME}.music")
        self._backends: dict[str, Backend] = {}

    def get_active_server(self) -> ServerContext:
        """Return the active server, raise if no server is active."""
        if (server := self.deck.active_server) is None:
            raise InvalidCommand("No active server")
        return server

    def get_backend(self, server_id: str | None = None) -> Backend:
        """Return the backend for the given server (defaults to the active server)."""
        if server_id is None:
            server = self.get_active_server()
        elif (server := self.deck.get_server(server_id)) is None:
            raise InvalidCommand(f"Unknown server: {server_id}")
        backend = self._backends.get(server.id)
        if backend is None or backend.server != server:
            backend = BACKEND_TYPES[server.type](self.deck, server)
            self._backends[server.id] = backend
            self.logger.debug("Created %s backend for server %s", server.type.value, server.name)
        return backend

    def remove_backend(self, server_id: str) -> None:
        """Forget the (cached) backend of a server."""
        self._backends.pop(server_id, None)

    @api_command("music/song")
    async def get_song(self, song_id: str, server_id: str | None = None) -> Song:
        """Get a single song."""
        return await self.get_backend(server_id).get_song(song_id)

    @api_command("music/album")
    async def get_album(self, album_id: str, server_id: str | None = None) -> Album:
        """Get a single album (including its songs)."""
        return await self.get_backend(server_id).get_album(album_id)

    @api_command("music/album_artist")
    async def get_album_artist(self, artist_id: str, server_id: str | None = None) -> AlbumArtist:
        """Get a single (album) artist."""
        return await self.get_backend(server_id).get_album_artist(artist_id)

    @api_command("music/playlist")
    async def get_playlist(self, playlist_id: str, server_id: str | None = None) -> Playlist:
        """Get a single playlist."""
        return await self.get_backend(server_id).get_playlist(playlist_id)

    @api_command("music/playlist_songs")
    async def get_playlist_songs(
        self, playlist_id: str, server_id: str | None = None
    ) -> list[Song]:
        """Get the songs of a playlist."""
        return await self.get_backend(server_id).get_playlist_songs(playlist_id)

    @api_command("music/genres")
    async def get_genres(self, server_id: str | None = None) -> list[Genre]:
        """Get all genres."""
        return await self.get_backend(server_id).get_genres()

    @api_command("music/user")
    async def get_user(self, user_id: str, server_id: str | None = None) -> User:
        """Get a user of the server."""
        return await self.get_backend(server_id).get_user(user_id)

    @api_command("music/search")
    async def search(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT, server_id: str | None = None
    ) -> SearchResult:
        """Search the library for songs, albums and artists."""
        return await self.get_backend(server_id).search(query, limit)

    @api_command("music/random_songs")
    async def get_random_songs(
        self,
        count: int = DEFAULT_RANDOM_SONG_COUNT,
        genre: str | None = None,
        server_id: str | None = None,
    ) -> list[Song]:
        """Get random songs."""
        return await self.get_backend(server_id).get_random_songs(count, genre)

    @api_command("music/top_songs")
    async def get_top_songs(
        self, artist: str, count: int = DEFAULT_TOP_SONG_COUNT, server_id: str | None = None
    ) -> list[Song]:
        """Get the top songs of an artist."""
        return await self.get_backend(server_id).get_top_songs(artist, count)

    @api_command("music/favorite")
    async def set_favorite(
        self,
        item_ids: list[str],
        favorite: bool,
        item_type: LibraryItem = LibraryItem.SONG,
        server_id: str | None = None,
    ) -> None:
        """Mark (or unmark) items as favorite."""
        backend = self.get_backend(server_id)
        await backend.set_favorite(item_ids, favorite, item_type)
        if item_type == LibraryItem.SONG:
            self.deck.player_queue.update_song_state(
                backend.server_id, item_ids, favorite=favorite
            )
        self.deck.signal_event(
            EventType.SONG_UPDATED,
            object_id=backend.server_id,
            data={"ids": item_ids, "item_type": item_type, "favorite": favorite},
        )

    @api_command("music/rating")
    async def set_rating(
        self, item_ids: list[str], rating: int, server_id: str | None = None
    ) -> None:
        """Set the rating (0-5, 0 clears it) of songs."""
        if not 0 <= rating <= 5:
            raise InvalidCommand(f"Invalid rating: {rating}")
        backend = self.get_backend(server_id)
        await backend.set_rating(item_ids, rating)
        self.deck.player_queue.update_song_state(backend.server_id, item_ids, rating=rating)
        self.deck.signal_event(
            EventType.SONG_UPDATED,
            object_id=backend.server_id,
            data={"ids": item_ids, "item_type": LibraryItem.SONG, "rating": rating},
        )

    @api_command("music/scrobble")
    async def scrobble(
        self,
        song_id: str,
        submission: bool = False,
        timestamp: int | None = None,
        server_id: str | None = None,
    ) -> None:
        """Report a song as now playing (or as played when submission is set)."""
        await self.get_backend(server_id).scrobble(song_id, submission, timestamp)

    @api_command("music/save_queue")
    async def save_queue(self, snapshot: QueueSnapshot, server_id: str | None = None) -> None:
        """Store a queue snapshot on the server."""
        await self.get_backend(server_id).save_queue(snapshot)

    @api_command("music/saved_queue")
    async def get_saved_queue(self, server_id: str | None = None) -> QueueSnapshot | None:
        """Return the queue snapshot stored on the server."""
        return await self.get_backend(server_id).get_saved_queue()
