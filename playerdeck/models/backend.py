"""Model/base for a Backend (server protocol) implementation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from playerdeck.constants import DECK_LOGGER_NAME
from playerdeck.models.errors import UnsupportedOperation

if TYPE_CHECKING:
    from playerdeck.deck import PlayerDeck

    from .enums import LibraryItem
    from .media_items import Album, AlbumArtist, Genre, Playlist, SearchResult, Song, User
    from .queue import QueueSnapshot
    from .server import ServerContext


class Backend:
    """
    Base representation of a Backend.

    Backend implementations should inherit from this base model and override
    the operations the server protocol supports, everything else is reported
    as UnsupportedOperation.
    """

    def __init__(self, deck: PlayerDeck, server: ServerContext) -> None:
        """Initialize the Backend for the given server."""
        self.deck = deck
        self.server = server
        self.logger = logging.getLogger(f"{DECK_LOGGER_NAME}.{server.type.value}")

    @property
    def server_id(self) -> str:
        """Return the id of the server this backend talks to."""
        return self.server.id

    def _unsupported(self, operation: str) -> UnsupportedOperation:
        return UnsupportedOperation(f"{operation} is not supported by {self.server.type.value}")

    async def get_song(self, song_id: str) -> Song:
        """Get a single song by its (server) id."""
        raise self._unsupported("get_song")

    async def get_album(self, album_id: str) -> Album:
        """Get a single album (including its songs) by its id."""
        raise self._unsupported("get_album")

    async def get_album_artist(self, artist_id: str) -> AlbumArtist:
        """Get a single (album) artist by its id."""
        raise self._unsupported("get_album_artist")

    async def get_playlist(self, playlist_id: str) -> Playlist:
        """Get a single playlist by its id."""
        raise self._unsupported("get_playlist")

    async def get_playlist_songs(self, playlist_id: str) -> list[Song]:
        """Get the songs of a playlist."""
        raise self._unsupported("get_playlist_songs")

    async def get_genres(self) -> list[Genre]:
        """Get all genres of the library."""
        raise self._unsupported("get_genres")

    async def get_user(self, user_id: str) -> User:
        """Get a user of the server."""
        raise self._unsupported("get_user")

    async def search(self, query: str, limit: int) -> SearchResult:
        """Search the library for songs, albums and artists."""
        raise self._unsupported("search")

    async def get_random_songs(self, count: int, genre: str | None = None) -> list[Song]:
        """Get random songs (optionally limited to a genre)."""
        raise self._unsupported("get_random_songs")

    async def get_top_songs(self, artist: str, count: int) -> list[Song]:
        """Get the top songs of an artist (by name)."""
        raise self._unsupported("get_top_songs")

    async def set_favorite(
        self, item_ids: list[str], favorite: bool, item_type: LibraryItem
    ) -> None:
        """Mark (or unmark) items as favorite."""
        raise self._unsupported("set_favorite")

    async def set_rating(self, item_ids: list[str], rating: int) -> None:
        """Set the user rating (0 clears it) of items."""
        raise self._unsupported("set_rating")

    async def scrobble(self, song_id: str, submission: bool, timestamp: int | None = None) -> None:
        """Report a song as now playing (or as played when submission is set)."""
        raise self._unsupported("scrobble")

    async def save_queue(self, snapshot: QueueSnapshot) -> None:
        """Store the queue snapshot on the server."""
        raise self._unsupported("save_queue")

    async def get_saved_queue(self) -> QueueSnapshot | None:
        """Return the queue snapshot stored on the server (None if there is none)."""
        raise self._unsupported("get_saved_queue")
