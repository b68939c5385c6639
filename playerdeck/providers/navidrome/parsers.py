"""Parsers (normalizers) for Navidrome native api responses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from playerdeck.constants import BACKDROP_IMAGE_SIZE, NAVIDROME_ARTIST_PLACEHOLDER
from playerdeck.helpers.util import (
    date_only,
    get_cover_art_url,
    get_stream_url,
    normalize_play_date,
    parse_date,
)
from playerdeck.models.media_items import (
    Album,
    AlbumArtist,
    GainPair,
    Genre,
    Participants,
    Playlist,
    RelatedArtist,
    Song,
    User,
)

from .constants import (
    ALBUM_IMAGE_SIZE,
    ARTIST_COVER_ART_PREFIX,
    ARTIST_IMAGE_SIZE,
    PLAYLIST_IMAGE_SIZE,
    ROLE_ALBUM_ARTIST,
    ROLE_ARTIST,
    SONG_IMAGE_SIZE,
)
from .schemas import PlaylistSong

if TYPE_CHECKING:
    from playerdeck.models.server import ServerContext
    from playerdeck.providers.subsonic.schemas import ArtistInfo

    from . import schemas


def parse_artists(
    item: schemas.Song | schemas.Album,
) -> tuple[list[RelatedArtist], list[RelatedArtist], Participants | None]:
    """Return (album_artists, artists, participants) of a song or album.

    The albumartist/artist participant roles win over the flat
    albumArtist/artist fields, all other roles end up in the participants
    mapping, one key per role and sub role.
    """
    album_artists: list[RelatedArtist] | None = None
    artists: list[RelatedArtist] | None = None
    participants: Participants | None = None

    if item.participants is not None:
        participants = {}
        for role, contributors in item.participants.items():
            if role in (ROLE_ALBUM_ARTIST, ROLE_ARTIST):
                role_list = [RelatedArtist(id=x.id, name=x.name) for x in contributors]
                if role == ROLE_ALBUM_ARTIST:
                    album_artists = role_list
                else:
                    artists = role_list
                continue
            sub_roles: dict[str | None, list[RelatedArtist]] = {}
            for contributor in contributors:
                sub_roles.setdefault(contributor.sub_role, []).append(
                    RelatedArtist(id=contributor.id, name=contributor.name)
                )
            for sub_role, role_artists in sub_roles.items():
                participants[f"{role} ({sub_role})" if sub_role else role] = role_artists

    if album_artists is None:
        album_artists = [RelatedArtist(id=item.album_artist_id, name=item.album_artist)]
    if artists is None:
        artists = [RelatedArtist(id=item.artist_id, name=item.artist)]
    return album_artists, artists, participants


def parse_genres(genres: list[schemas.GenreRef] | None) -> list[Genre]:
    """Parse the genres of a song, album or artist."""
    return [Genre(id=x.id, name=x.name) for x in genres or []]


def _to_ms(duration: float | None) -> int | None:
    if duration is None:
        return None
    return round(duration * 1000)


def parse_song(
    server: ServerContext,
    item: schemas.Song | schemas.PlaylistSong,
    image_size: int | None = None,
) -> Song:
    """Parse a Navidrome song (or playlist entry) to the generic layout."""
    playlist_item_id = None
    song_id = item.id
    if isinstance(item, PlaylistSong):
        song_id = item.media_file_id
        playlist_item_id = item.id
    album_artists, artists, participants = parse_artists(item)
    gain = peak = None
    if item.rg_album_gain or item.rg_track_gain:
        gain = GainPair(album=item.rg_album_gain, track=item.rg_track_gain)
    if item.rg_album_peak or item.rg_track_peak:
        peak = GainPair(album=item.rg_album_peak, track=item.rg_track_peak)
    return Song(
        id=song_id,
        name=item.title,
        server_id=server.id,
        server_type=server.type,
        playlist_item_id=playlist_item_id,
        album=item.album,
        album_id=item.album_id,
        artist_name=item.artist,
        artists=artists,
        album_artists=album_artists,
        participants=participants,
        track_number=item.track_number,
        disc_number=item.disc_number,
        disc_subtitle=item.disc_subtitle or None,
        duration=_to_ms(item.duration) or 0,
        genres=parse_genres(item.genres),
        gain=gain,
        peak=peak,
        bit_rate=item.bit_rate,
        bpm=item.bpm or None,
        channels=item.channels or None,
        comment=item.comment or None,
        compilation=item.compilation,
        container=item.suffix,
        lyrics=item.lyrics or None,
        path=item.path,
        size=item.size,
        release_date=parse_date(item.release_date, item.year),
        release_year=str(item.year) if item.year else None,
        created_at=date_only(item.created_at),
        updated_at=item.updated_at,
        user_favorite=item.starred,
        user_rating=item.rating or None,
        play_count=item.play_count or 0,
        last_played_at=normalize_play_date(item.play_date),
        image_url=get_cover_art_url(server, song_id, image_size or SONG_IMAGE_SIZE),
        stream_url=get_stream_url(server, song_id),
    )


def parse_album(
    server: ServerContext,
    item: schemas.Album,
    image_size: int | None = None,
    songs: list[schemas.Song] | None = None,
) -> Album:
    """Parse a Navidrome album (and optionally its songs) to the generic layout."""
    album_artists, artists, participants = parse_artists(item)
    cover_art_id = item.cover_art_id or item.id
    return Album(
        id=item.id,
        name=item.name,
        server_id=server.id,
        server_type=server.type,
        album_artist=item.album_artist,
        artists=artists,
        album_artists=album_artists,
        participants=participants,
        duration=_to_ms(item.duration),
        genres=parse_genres(item.genres),
        comment=item.comment or None,
        is_compilation=item.compilation,
        mbz_id=item.mbz_album_id or None,
        original_date=parse_date(item.original_date, item.original_year),
        release_date=parse_date(item.release_date, item.min_year),
        release_year=item.min_year or None,
        song_count=item.song_count,
        songs=[parse_song(server, x) for x in songs or []],
        size=item.size,
        created_at=date_only(item.created_at),
        updated_at=item.updated_at,
        user_favorite=item.starred,
        user_rating=item.rating or None,
        play_count=item.play_count or 0,
        last_played_at=normalize_play_date(item.play_date),
        image_url=get_cover_art_url(server, cover_art_id, image_size or ALBUM_IMAGE_SIZE),
        backdrop_image_url=get_cover_art_url(server, cover_art_id, BACKDROP_IMAGE_SIZE),
    )


def parse_album_artist(
    server: ServerContext,
    item: schemas.Artist,
    image_size: int | None = None,
    artist_info: ArtistInfo | None = None,
) -> AlbumArtist:
    """Parse a Navidrome artist to the generic layout.

    Similar artists are only known when the (Subsonic) artist info is passed in.
    """
    image_url = item.large_image_url
    if not image_url or image_url == NAVIDROME_ARTIST_PLACEHOLDER:
        image_url = get_cover_art_url(
            server, f"{ARTIST_COVER_ART_PREFIX}{item.id}", image_size or ARTIST_IMAGE_SIZE
        )
    similar_artists = None
    if artist_info is not None:
        similar_artists = [
            RelatedArtist(id=x.id, name=x.name, image_url=x.artist_image_url or None)
            for x in artist_info.similar_artist
        ]
    return AlbumArtist(
        id=item.id,
        name=item.name,
        server_id=server.id,
        server_type=server.type,
        album_count=item.album_count,
        song_count=item.song_count,
        biography=item.biography or None,
        genres=parse_genres(item.genres),
        mbz=item.mbz_artist_id or None,
        similar_artists=similar_artists,
        user_favorite=item.starred,
        user_rating=item.rating or None,
        play_count=item.play_count or 0,
        last_played_at=normalize_play_date(item.play_date),
        image_url=image_url,
    )


def parse_playlist(
    server: ServerContext, item: schemas.Playlist, image_size: int | None = None
) -> Playlist:
    """Parse a Navidrome playlist to the generic layout."""
    return Playlist(
        id=item.id,
        name=item.name,
        server_id=server.id,
        server_type=server.type,
        description=item.comment or None,
        duration=_to_ms(item.duration) or 0,
        owner=item.owner_name,
        owner_id=item.owner_id,
        public=item.public,
        rules=item.rules or None,
        sync=item.sync,
        size=item.size,
        song_count=item.song_count,
        image_url=get_cover_art_url(server, item.id, image_size or PLAYLIST_IMAGE_SIZE),
    )


def parse_genre(item: schemas.Genre) -> Genre:
    """Parse a Navidrome genre to the generic layout."""
    return Genre(id=item.id, name=item.name)


def parse_user(item: schemas.User) -> User:
    """Parse a Navidrome user to the generic layout."""
    return User(
        id=item.id,
        name=item.user_name,
        email=item.email or None,
        is_admin=item.is_admin,
        created_at=item.created_at,
        updated_at=item.updated_at,
        last_login_at=item.last_login_at,
    )
