"""Navidrome server backend.

Library lookups use the native api, everything else (favorites, ratings,
scrobbles, search, the saved play queue) goes through the Subsonic compatible
endpoints of the same server.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from playerdeck.helpers.validation import validate_list, validate_response
from playerdeck.providers.subsonic.provider import SubsonicBackend

from . import schemas
from .api_client import NavidromeAPIClient
from .parsers import (
    parse_album,
    parse_album_artist,
    parse_genre,
    parse_playlist,
    parse_song,
    parse_user,
)

if TYPE_CHECKING:
    from playerdeck.deck import PlayerDeck
    from playerdeck.models.media_items import Album, AlbumArtist, Genre, Playlist, Song, User
    from playerdeck.models.server import ServerContext


class NavidromeBackend(SubsonicBackend):
    """Backend talking the Navidrome native api (and Subsonic for the rest)."""

    def __init__(self, deck: PlayerDeck, server: ServerContext) -> None:
        """Initialize the Backend for the given server."""
        super().__init__(deck, server)
        self.api = NavidromeAPIClient(deck.http_session, server, self.logger)

    async def get_song(self, song_id: str) -> Song:
        """Get a single song by its (server) id."""
        raw = await self.api.get(f"song/{song_id}")
        return parse_song(self.server, validate_response(schemas.Song, raw, "song"))

    async def get_album(self, album_id: str) -> Album:
        """Get a single album (including its songs) by its id."""
        raw_album, (raw_songs, _) = await asyncio.gather(
            self.api.get(f"album/{album_id}"),
            self.api.get_list("song", album_id=album_id, _sort="album", _order="ASC"),
        )
        album = validate_response(schemas.Album, raw_album, "album")
        songs = validate_list(schemas.Song, raw_songs, "song")
        return parse_album(self.server, album, songs=songs)

    async def get_album_artist(self, artist_id: str) -> AlbumArtist:
        """Get a single (album) artist by its id, enriched with similar artists."""
        raw, artist_info = await asyncio.gather(
            self.api.get(f"artist/{artist_id}"), self.get_artist_info(artist_id)
        )
        artist = validate_response(schemas.Artist, raw, "artist")
        return parse_album_artist(self.server, artist, artist_info=artist_info)

    async def get_playlist(self, playlist_id: str) -> Playlist:
        """Get a single playlist by its id."""
        raw = await self.api.get(f"playlist/{playlist_id}")
        return parse_playlist(self.server, validate_response(schemas.Playlist, raw, "playlist"))

    async def get_playlist_songs(self, playlist_id: str) -> list[Song]:
        """Get the songs of a playlist (with their playlist row ids)."""
        raw, _ = await self.api.get_list(f"playlist/{playlist_id}/tracks", _sort="id")
        entries = validate_list(schemas.PlaylistSong, raw, "playlist/tracks")
        return [parse_song(self.server, x) for x in entries]

    async def get_genres(self) -> list[Genre]:
        """Get all genres of the library."""
        raw, _ = await self.api.get_list("genre", _sort="name", _order="ASC")
        return [parse_genre(x) for x in validate_list(schemas.Genre, raw, "genre")]

    async def get_user(self, user_id: str) -> User:
        """Get a user of the server."""
        raw = await self.api.get(f"user/{user_id}")
        return parse_user(validate_response(schemas.User, raw, "user"))
