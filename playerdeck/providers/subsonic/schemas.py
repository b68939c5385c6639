"""Wire schemas for Subsonic API responses.

Every field a server may omit is optional, servers (and versions of the same
server) are inconsistent in what they return.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _to_str(value: Any) -> Any:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return value


Id = Annotated[str, BeforeValidator(_to_str)]


class SubsonicModel(BaseModel):
    """Base model for all Subsonic payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class SubsonicError(SubsonicModel):
    """Error object of a failed response."""

    code: int = 0
    message: str = ""


class SubsonicResponse(SubsonicModel):
    """Envelope of every Subsonic response (the `subsonic-response` object)."""

    status: str
    version: str | None = None
    type: str | None = None
    server_version: str | None = None
    open_subsonic: bool = False
    error: SubsonicError | None = None


class ArtistRef(SubsonicModel):
    """Artist reference (OpenSubsonic `artists`/`albumArtists` entries)."""

    id: Id
    name: str


class ContributorArtist(SubsonicModel):
    """Artist of an OpenSubsonic contributor entry."""

    id: Id | None = None
    name: str | None = None


class Contributor(SubsonicModel):
    """OpenSubsonic contributor (role + optional sub role)."""

    role: str
    sub_role: str | None = None
    artist: ContributorArtist


class GenreRef(SubsonicModel):
    """OpenSubsonic genre reference."""

    name: str


class ReplayGain(SubsonicModel):
    """OpenSubsonic ReplayGain values."""

    album_gain: float | None = None
    album_peak: float | None = None
    track_gain: float | None = None
    track_peak: float | None = None


class Song(SubsonicModel):
    """Subsonic `child` object describing a song."""

    id: Id
    title: str
    album: str | None = None
    album_id: Id | None = None
    artist: str | None = None
    artist_id: Id | None = None
    artists: list[ArtistRef] | None = None
    album_artists: list[ArtistRef] | None = None
    contributors: list[Contributor] | None = None
    bit_rate: int | None = None
    bpm: int | None = None
    channel_count: int | None = None
    comment: str | None = None
    content_type: str | None = None
    suffix: str | None = None
    cover_art: Id | None = None
    created: str | None = None
    disc_number: int | None = None
    duration: int | None = None
    genre: str | None = None
    genres: list[GenreRef] | None = None
    path: str | None = None
    play_count: int | None = None
    played: str | None = None
    replay_gain: ReplayGain | None = None
    size: int | None = None
    # timestamp the song was starred at (some servers send a boolean)
    starred: str | bool | None = None
    track: int | None = None
    user_rating: int | None = None
    year: int | None = None


class Album(SubsonicModel):
    """Subsonic album (`getAlbum`) or album list entry (`getAlbumList2`)."""

    id: Id
    name: str
    artist: str | None = None
    artist_id: Id | None = None
    artists: list[ArtistRef] | None = None
    album_artists: list[ArtistRef] | None = None
    contributors: list[Contributor] | None = None
    cover_art: Id | None = None
    created: str | None = None
    duration: int = 0
    genre: str | None = None
    genres: list[GenreRef] | None = None
    is_compilation: bool | None = None
    music_brainz_id: str | None = None
    play_count: int | None = None
    played: str | None = None
    song_count: int = 0
    starred: str | bool | None = None
    user_rating: int | None = None
    year: int | None = None
    song: list[Song] | None = None


class AlbumArtist(SubsonicModel):
    """Subsonic artist (`getArtist`) or artist index entry (`getArtists`)."""

    id: Id
    name: str
    album_count: int | None = None
    artist_image_url: str | None = None
    cover_art: Id | None = None
    music_brainz_id: str | None = None
    starred: str | bool | None = None
    user_rating: int | None = None
    album: list[Album] | None = None


class SimilarArtist(SubsonicModel):
    """Similar artist entry of `getArtistInfo`."""

    id: Id
    name: str
    artist_image_url: str | None = None


class ArtistInfo(SubsonicModel):
    """Subsonic `artistInfo` object."""

    biography: str | None = None
    music_brainz_id: str | None = None
    large_image_url: str | None = None
    similar_artist: list[SimilarArtist] = Field(default_factory=list)


class Playlist(SubsonicModel):
    """Subsonic playlist (`getPlaylist`) or playlist list entry (`getPlaylists`)."""

    id: Id
    name: str
    comment: str | None = None
    cover_art: Id | None = None
    created: str | None = None
    changed: str | None = None
    duration: int = 0
    owner: str | None = None
    public: bool = False
    song_count: int = 0
    entry: list[Song] | None = None


class Genre(SubsonicModel):
    """Subsonic genre (`getGenres`)."""

    value: str
    album_count: int | None = None
    song_count: int | None = None


class User(SubsonicModel):
    """Subsonic user (`getUser`)."""

    username: str
    email: str | None = None
    admin_role: bool = False


class PlayQueue(SubsonicModel):
    """Saved play queue (`getPlayQueue`), current is the song id."""

    current: Id | None = None
    position: int | None = None
    username: str | None = None
    changed: str | None = None
    changed_by: str | None = None
    entry: list[Song] = Field(default_factory=list)


class PlayQueueByIndex(SubsonicModel):
    """Saved play queue (OpenSubsonic `getPlayQueueByIndex`)."""

    current_index: int | None = None
    position: int | None = None
    username: str | None = None
    changed: str | None = None
    changed_by: str | None = None
    entry: list[Song] = Field(default_factory=list)


class SearchResult3(SubsonicModel):
    """Result of `search3`."""

    artist: list[AlbumArtist] = Field(default_factory=list)
    album: list[Album] = Field(default_factory=list)
    song: list[Song] = Field(default_factory=list)


class SongList(SubsonicModel):
    """Wrapper for `randomSongs`/`topSongs`/`songsByGenre` results."""

    song: list[Song] = Field(default_factory=list)


class GenreList(SubsonicModel):
    """Wrapper for the `genres` result."""

    genre: list[Genre] = Field(default_factory=list)


class PlaylistList(SubsonicModel):
    """Wrapper for the `playlists` result."""

    playlist: list[Playlist] = Field(default_factory=list)
