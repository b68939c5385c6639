"""Subsonic (compatible) server backend."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from playerdeck.constants import CONF_INDEX_BASED_QUEUE, DEFAULT_ARTIST_IMAGE_SIZE
from playerdeck.helpers.validation import validate_response
from playerdeck.models.backend import Backend
from playerdeck.models.enums import LibraryItem
from playerdeck.models.errors import BackendError
from playerdeck.models.media_items import SearchResult
from playerdeck.models.queue import QueueSnapshot

from . import schemas
from .api_client import SubsonicAPIClient
from .constants import DEFAULT_SEARCH_LIMIT
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
    from playerdeck.models.media_items import (
        Album,
        AlbumArtist,
        Genre,
        Playlist,
        Song,
        User,
    )
    from playerdeck.models.server import ServerContext

# star/unstar take a different id parameter per item type
STAR_ID_PARAMS = {
    LibraryItem.SONG: "id",
    LibraryItem.ALBUM: "albumId",
    LibraryItem.ALBUM_ARTIST: "artistId",
}


class SubsonicBackend(Backend):
    """Backend talking the Subsonic REST protocol."""

    def __init__(self, deck: PlayerDeck, server: ServerContext) -> None:
        """Initialize the Backend for the given server."""
        super().__init__(deck, server)
        self.subsonic = SubsonicAPIClient(deck.http_session, server, self.logger)

    async def _get(self, endpoint: str, key: str, **params: Any) -> Any:
        """Invoke an endpoint and return the (raw) payload under the given key."""
        body = await self.subsonic.get(endpoint, **params)
        if key not in body:
            raise BackendError(f"Missing {key} in {endpoint} response")
        return body[key]

    async def get_song(self, song_id: str) -> Song:
        """Get a single song by its (server) id."""
        raw = await self._get("getSong", "song", id=song_id)
        return parse_song(self.server, validate_response(schemas.Song, raw, "getSong"))

    async def get_album(self, album_id: str) -> Album:
        """Get a single album (including its songs) by its id."""
        raw = await self._get("getAlbum", "album", id=album_id)
        return parse_album(self.server, validate_response(schemas.Album, raw, "getAlbum"))

    async def get_album_artist(self, artist_id: str) -> AlbumArtist:
        """Get a single (album) artist by its id, enriched with its artist info."""
        raw = await self._get("getArtist", "artist", id=artist_id)
        artist = validate_response(schemas.AlbumArtist, raw, "getArtist")
        artist_info = await self.get_artist_info(artist_id)
        return parse_album_artist(
            self.server, artist, DEFAULT_ARTIST_IMAGE_SIZE, artist_info=artist_info
        )

    async def get_artist_info(self, artist_id: str) -> schemas.ArtistInfo | None:
        """Return the (biography, similar artists) info of an artist, if available."""
        try:
            raw = await self._get("getArtistInfo2", "artistInfo2", id=artist_id)
        except BackendError as err:
            # artist info is an optional extension, not every server implements it
            self.logger.debug("No artist info for %s: %s", artist_id, err)
            return None
        return validate_response(schemas.ArtistInfo, raw, "getArtistInfo2")

    async def get_playlist(self, playlist_id: str) -> Playlist:
        """Get a single playlist by its id."""
        raw = await self._get("getPlaylist", "playlist", id=playlist_id)
        return parse_playlist(self.server, validate_response(schemas.Playlist, raw, "getPlaylist"))

    async def get_playlist_songs(self, playlist_id: str) -> list[Song]:
        """Get the songs of a playlist."""
        raw = await self._get("getPlaylist", "playlist", id=playlist_id)
        playlist = validate_response(schemas.Playlist, raw, "getPlaylist")
        return [parse_song(self.server, x) for x in playlist.entry or []]

    async def get_genres(self) -> list[Genre]:
        """Get all genres of the library."""
        raw = await self._get("getGenres", "genres")
        genres = validate_response(schemas.GenreList, raw, "getGenres")
        return [parse_genre(x) for x in genres.genre]

    async def get_user(self, user_id: str) -> User:
        """Get a user of the server (Subsonic users are identified by name)."""
        raw = await self._get("getUser", "user", username=user_id)
        return parse_user(validate_response(schemas.User, raw, "getUser"))

    async def search(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> SearchResult:
        """Search the library for songs, albums and artists."""
        raw = await self._get(
            "search3",
            "searchResult3",
            query=query,
            songCount=limit,
            albumCount=limit,
            artistCount=limit,
        )
        result = validate_response(schemas.SearchResult3, raw, "search3")
        return SearchResult(
            album_artists=[parse_album_artist(self.server, x) for x in result.artist],
            albums=[parse_album(self.server, x) for x in result.album],
            songs=[parse_song(self.server, x) for x in result.song],
        )

    async def get_random_songs(self, count: int, genre: str | None = None) -> list[Song]:
        """Get random songs (optionally limited to a genre)."""
        raw = await self._get("getRandomSongs", "randomSongs", size=count, genre=genre)
        songs = validate_response(schemas.SongList, raw, "getRandomSongs")
        return [parse_song(self.server, x) for x in songs.song]

    async def get_top_songs(self, artist: str, count: int) -> list[Song]:
        """Get the top songs of an artist (by name)."""
        raw = await self._get("getTopSongs", "topSongs", artist=artist, count=count)
        songs = validate_response(schemas.SongList, raw, "getTopSongs")
        return [parse_song(self.server, x) for x in songs.song]

    async def set_favorite(
        self, item_ids: list[str], favorite: bool, item_type: LibraryItem
    ) -> None:
        """Mark (or unmark) items as favorite."""
        if item_type not in STAR_ID_PARAMS:
            raise self._unsupported(f"set_favorite for {item_type.value}")
        endpoint = "star" if favorite else "unstar"
        await self.subsonic.invoke(endpoint, {STAR_ID_PARAMS[item_type]: item_ids})

    async def set_rating(self, item_ids: list[str], rating: int) -> None:
        """Set the user rating (0 clears it) of items."""
        await asyncio.gather(
            *(self.subsonic.get("setRating", id=item_id, rating=rating) for item_id in item_ids)
        )

    async def scrobble(self, song_id: str, submission: bool, timestamp: int | None = None) -> None:
        """Report a song as now playing (or as played when submission is set)."""
        await self.subsonic.get("scrobble", id=song_id, submission=submission, time=timestamp)

    @property
    def index_based_queue(self) -> bool:
        """Return if the (OpenSubsonic) index based play queue endpoints are used."""
        return bool(self.deck.config.get(CONF_INDEX_BASED_QUEUE, False))

    async def save_queue(self, snapshot: QueueSnapshot) -> None:
        """Store the queue snapshot on the server."""
        if self.index_based_queue:
            await self.subsonic.get(
                "savePlayQueueByIndex",
                id=snapshot.song_ids,
                currentIndex=snapshot.current_index if snapshot.song_ids else None,
                position=snapshot.position_ms,
            )
            return
        current = None
        if snapshot.song_ids:
            current = snapshot.song_ids[min(snapshot.current_index, len(snapshot.song_ids) - 1)]
        await self.subsonic.get(
            "savePlayQueue", id=snapshot.song_ids, current=current, position=snapshot.position_ms
        )

    async def get_saved_queue(self) -> QueueSnapshot | None:
        """Return the queue snapshot stored on the server (None if there is none)."""
        if self.index_based_queue:
            body = await self.subsonic.get("getPlayQueueByIndex")
            if not body.get("playQueueByIndex"):
                return None
            by_index = validate_response(
                schemas.PlayQueueByIndex, body["playQueueByIndex"], "getPlayQueueByIndex"
            )
            return QueueSnapshot(
                song_ids=[x.id for x in by_index.entry],
                current_index=by_index.current_index or 0,
                position_ms=by_index.position or 0,
            )
        body = await self.subsonic.get("getPlayQueue")
        if not body.get("playQueue"):
            return None
        play_queue = validate_response(schemas.PlayQueue, body["playQueue"], "getPlayQueue")
        song_ids = [x.id for x in play_queue.entry]
        current_index = 0
        if play_queue.current in song_ids:
            # duplicates are ambiguous by id, the first occurrence wins
            current_index = song_ids.index(play_queue.current)
        return QueueSnapshot(
            song_ids=song_ids,
            current_index=current_index,
            position_ms=play_queue.position or 0,
        )
