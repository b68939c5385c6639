"""Models for the unified (backend-agnostic) library items."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Self

from mashumaro import DataClassDictMixin

from .enums import LibraryItem, ServerType


@dataclass(kw_only=True)
class RelatedArtist(DataClassDictMixin):
    """Minimal artist reference as used on songs and albums."""

    id: str
    name: str
    image_url: str | None = None


@dataclass(kw_only=True)
class Genre(DataClassDictMixin):
    """Model for a Genre."""

    id: str
    name: str
    image_url: str | None = None
    item_type: LibraryItem = LibraryItem.GENRE
    album_count: int | None = None
    song_count: int | None = None


@dataclass(kw_only=True)
class GainPair(DataClassDictMixin):
    """ReplayGain album/track value pair (gain in dB or peak amplitude)."""

    album: float | None = None
    track: float | None = None


# role name (optionally suffixed with " (<subRole>)") -> contributors
Participants = dict[str, list[RelatedArtist]]


@dataclass(kw_only=True)
class Song(DataClassDictMixin):
    """Model for a Song as returned by any backend."""

    id: str
    name: str
    server_id: str
    server_type: ServerType
    item_type: LibraryItem = LibraryItem.SONG
    # process-local identity, only assigned once a song enters the queue
    unique_id: str | None = None
    # row identity of the song within a (Navidrome) playlist
    playlist_item_id: str | None = None
    album: str = ""
    album_id: str = ""
    artist_name: str = ""
    artists: list[RelatedArtist] = field(default_factory=list)
    album_artists: list[RelatedArtist] = field(default_factory=list)
    # None means the backend has no notion of contributors
    participants: Participants | None = None
    track_number: int = 1
    disc_number: int = 1
    disc_subtitle: str | None = None
    # duration in milliseconds
    duration: int = 0
    genres: list[Genre] = field(default_factory=list)
    gain: GainPair | None = None
    peak: GainPair | None = None
    bit_rate: int = 0
    bpm: int | None = None
    channels: int | None = None
    comment: str | None = None
    compilation: bool | None = None
    container: str | None = None
    lyrics: str | None = None
    path: str | None = None
    size: int | None = None
    release_date: str | None = None
    release_year: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    user_favorite: bool = False
    user_rating: int | None = None
    play_count: int = 0
    last_played_at: str | None = None
    image_url: str | None = None
    stream_url: str | None = None


@dataclass(kw_only=True)
class QueueSong(Song):
    """Song with a guaranteed positional identity, the type queue operations require."""

    unique_id: str

    @classmethod
    def from_song(cls, song: Song, unique_id: str) -> Self:
        """Create a QueueSong from a (library) Song with the given unique id."""
        values: dict[str, Any] = {x.name: getattr(song, x.name) for x in fields(song)}
        values["unique_id"] = unique_id
        return cls(**values)


@dataclass(kw_only=True)
class Album(DataClassDictMixin):
    """Model for an Album."""

    id: str
    name: str
    server_id: str
    server_type: ServerType
    item_type: LibraryItem = LibraryItem.ALBUM
    album_artist: str = ""
    artists: list[RelatedArtist] = field(default_factory=list)
    album_artists: list[RelatedArtist] = field(default_factory=list)
    participants: Participants | None = None
    # duration in milliseconds (None if the backend did not report it)
    duration: int | None = None
    genres: list[Genre] = field(default_factory=list)
    comment: str | None = None
    is_compilation: bool | None = None
    mbz_id: str | None = None
    original_date: str | None = None
    release_date: str | None = None
    release_year: int | None = None
    song_count: int = 0
    songs: list[Song] = field(default_factory=list)
    size: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
    user_favorite: bool = False
    user_rating: int | None = None
    play_count: int | None = None
    last_played_at: str | None = None
    image_url: str | None = None
    backdrop_image_url: str | None = None


@dataclass(kw_only=True)
class AlbumArtist(DataClassDictMixin):
    """Model for an (album) Artist."""

    id: str
    name: str
    server_id: str
    server_type: ServerType
    item_type: LibraryItem = LibraryItem.ALBUM_ARTIST
    album_count: int = 0
    song_count: int | None = None
    biography: str | None = None
    duration: int | None = None
    genres: list[Genre] = field(default_factory=list)
    mbz: str | None = None
    # None means the backend did not report similar artists
    similar_artists: list[RelatedArtist] | None = None
    user_favorite: bool = False
    user_rating: int | None = None
    play_count: int | None = None
    last_played_at: str | None = None
    image_url: str | None = None
    background_image_url: str | None = None


@dataclass(kw_only=True)
class Playlist(DataClassDictMixin):
    """Model for a Playlist."""

    id: str
    name: str
    server_id: str
    server_type: ServerType
    item_type: LibraryItem = LibraryItem.PLAYLIST
    description: str | None = None
    # duration in milliseconds
    duration: int = 0
    genres: list[Genre] = field(default_factory=list)
    owner: str | None = None
    owner_id: str | None = None
    public: bool = False
    rules: dict[str, Any] | None = None
    sync: bool | None = None
    size: int | None = None
    song_count: int = 0
    image_url: str | None = None


@dataclass(kw_only=True)
class User(DataClassDictMixin):
    """Model for a server User."""

    id: str
    name: str
    email: str | None = None
    is_admin: bool = False
    created_at: str | None = None
    updated_at: str | None = None
    last_login_at: str | None = None


@dataclass(kw_only=True)
class SearchResult(DataClassDictMixin):
    """Model for a search result."""

    album_artists: list[AlbumArtist] = field(default_factory=list)
    albums: list[Album] = field(default_factory=list)
    songs: list[Song] = field(default_factory=list)
