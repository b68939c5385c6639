"""Wire schemas for the Navidrome native api.

Library songs and playlist entries share most of their shape, they are
validated into two distinct models so the parsers never have to sniff fields.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class NavidromeModel(BaseModel):
    """Base model for all Navidrome payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Participant(NavidromeModel):
    """Participant (contributor) of a song or album."""

    id: str
    name: str
    sub_role: str | None = None


class GenreRef(NavidromeModel):
    """Genre reference of a song, album or artist."""

    id: str
    name: str


class Song(NavidromeModel):
    """Navidrome media file (`/api/song`)."""

    id: str
    title: str
    album: str = ""
    album_id: str = ""
    album_artist: str = ""
    album_artist_id: str = ""
    artist: str = ""
    artist_id: str = ""
    participants: dict[str, list[Participant]] | None = None
    bit_rate: int = 0
    bpm: int | None = None
    channels: int | None = None
    comment: str | None = None
    compilation: bool | None = None
    suffix: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    disc_number: int = 1
    disc_subtitle: str | None = None
    # seconds, with sub second precision
    duration: float = 0
    genres: list[GenreRef] | None = None
    lyrics: str | None = None
    path: str | None = None
    play_count: int | None = None
    play_date: str | None = None
    release_date: str | None = None
    rg_album_gain: float | None = None
    rg_album_peak: float | None = None
    rg_track_gain: float | None = None
    rg_track_peak: float | None = None
    size: int | None = None
    starred: bool = False
    rating: int | None = None
    track_number: int = 1
    year: int | None = None


class PlaylistSong(Song):
    """Entry of a playlist (`/api/playlist/{id}/tracks`).

    `id` is the row id within the playlist, `media_file_id` the library song id.
    """

    media_file_id: str
    playlist_id: str


class Album(NavidromeModel):
    """Navidrome album (`/api/album`)."""

    id: str
    name: str
    album_artist: str = ""
    album_artist_id: str = ""
    artist: str = ""
    artist_id: str = ""
    participants: dict[str, list[Participant]] | None = None
    comment: str | None = None
    compilation: bool | None = None
    cover_art_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    duration: float | None = None
    genres: list[GenreRef] | None = None
    mbz_album_id: str | None = None
    min_year: int | None = None
    max_year: int | None = None
    original_date: str | None = None
    original_year: int | None = None
    release_date: str | None = None
    play_count: int | None = None
    play_date: str | None = None
    size: int | None = None
    song_count: int = 0
    starred: bool = False
    rating: int | None = None


class Artist(NavidromeModel):
    """Navidrome artist (`/api/artist`)."""

    id: str
    name: str
    album_count: int = 0
    song_count: int | None = None
    biography: str | None = None
    large_image_url: str | None = None
    mbz_artist_id: str | None = None
    genres: list[GenreRef] | None = None
    play_count: int | None = None
    play_date: str | None = None
    starred: bool = False
    rating: int | None = None


class Playlist(NavidromeModel):
    """Navidrome playlist (`/api/playlist`)."""

    id: str
    name: str
    comment: str | None = None
    duration: float = 0
    owner_name: str | None = None
    owner_id: str | None = None
    public: bool = False
    # smart playlist criteria
    rules: dict[str, Any] | None = None
    size: int | None = None
    song_count: int = 0
    sync: bool | None = None


class Genre(NavidromeModel):
    """Navidrome genre (`/api/genre`)."""

    id: str
    name: str


class User(NavidromeModel):
    """Navidrome user (`/api/user`)."""

    id: str
    user_name: str
    name: str | None = None
    email: str | None = None
    is_admin: bool = False
    created_at: str | None = None
    updated_at: str | None = None
    last_login_at: str | None = None
