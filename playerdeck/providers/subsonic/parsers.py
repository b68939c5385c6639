"""Parsers (normalizers) for Subsonic API responses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from playerdeck.helpers.util import (
    get_cover_art_url,
    get_stream_url,
    normalize_play_date,
    year_to_date,
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

from .constants import ALBUM_IMAGE_SIZE, ARTIST_IMAGE_SIZE, PLAYLIST_IMAGE_SIZE, SONG_IMAGE_SIZE

if TYPE_CHECKING:
    from playerdeck.models.server import ServerContext

    from . import schemas


def parse_artists(
    item: schemas.Song | schemas.Album,
) -> tuple[list[RelatedArtist], list[RelatedArtist], Participants | None]:
    """Return (album_artists, artists, participants) of a song or album.

    The OpenSubsonic artist lists win over the flat artist/artistId pair,
    which is only used as (single element) fallback.
    """
    fallback = [RelatedArtist(id=item.artist_id or "", name=item.artist or "")]
    if item.album_artists:
        album_artists = [RelatedArtist(id=x.id, name=x.name) for x in item.album_artists]
    else:
        album_artists = list(fallback)
    if item.artists:
        artists = [RelatedArtist(id=x.id, name=x.name) for x in item.artists]
    else:
        artists = list(fallback)

    participants: Participants | None = None
    if item.contributors is not None:
        participants = {}
        for contributor in item.contributors:
            role = (
                f"{contributor.role} ({contributor.sub_role})"
                if contributor.sub_role
                else contributor.role
            )
            participants.setdefault(role, []).append(
                RelatedArtist(
                    id=contributor.artist.id or "",
                    name=contributor.artist.name or "",
                )
            )
    return album_artists, artists, participants


def parse_genres(item: schemas.Song | schemas.Album) -> list[Genre]:
    """Parse the genre(s) of a song or album."""
    if item.genres:
        return [Genre(id=x.name, name=x.name) for x in item.genres]
    if item.genre:
        return [Genre(id=item.genre, name=item.genre)]
    return []


def _parse_replay_gain(item: schemas.Song) -> tuple[GainPair | None, GainPair | None]:
    replay_gain = item.replay_gain
    if replay_gain is None:
        return None, None
    gain = peak = None
    if replay_gain.album_gain or replay_gain.track_gain:
        gain = GainPair(album=replay_gain.album_gain, track=replay_gain.track_gain)
    if replay_gain.album_peak or replay_gain.track_peak:
        peak = GainPair(album=replay_gain.album_peak, track=replay_gain.track_peak)
    return gain, peak


def parse_song(
    server: ServerContext, item: schemas.Song, image_size: int | None = None
) -> Song:
    """Parse a Subsonic song (child) object to the generic layout."""
    album_artists, artists, participants = parse_artists(item)
    gain, peak = _parse_replay_gain(item)
    return Song(
        id=item.id,
        name=item.title,
        server_id=server.id,
        server_type=server.type,
        album=item.album or "",
        album_id=item.album_id or "",
        artist_name=item.artist or "",
        artists=artists,
        album_artists=album_artists,
        participants=participants,
        track_number=item.track or 1,
        disc_number=item.disc_number or 1,
        duration=item.duration * 1000 if item.duration else 0,
        genres=parse_genres(item),
        gain=gain,
        peak=peak,
        bit_rate=item.bit_rate or 0,
        bpm=item.bpm or None,
        channels=item.channel_count or None,
        comment=item.comment or None,
        container=item.content_type,
        path=item.path,
        size=item.size,
        release_date=year_to_date(item.year),
        release_year=str(item.year) if item.year else None,
        created_at=item.created,
        user_favorite=bool(item.starred),
        user_rating=item.user_rating or None,
        play_count=item.play_count or 0,
        last_played_at=normalize_play_date(item.played),
        image_url=get_cover_art_url(server, item.cover_art, image_size or SONG_IMAGE_SIZE),
        stream_url=get_stream_url(server, item.id),
    )


def parse_album(
    server: ServerContext, item: schemas.Album, image_size: int | None = None
) -> Album:
    """Parse a Subsonic album object to the generic layout."""
    album_artists, artists, participants = parse_artists(item)
    return Album(
        id=item.id,
        name=item.name,
        server_id=server.id,
        server_type=server.type,
        album_artist=item.artist or "",
        artists=artists,
        album_artists=album_artists,
        participants=participants,
        duration=item.duration * 1000,
        genres=parse_genres(item),
        is_compilation=item.is_compilation,
        mbz_id=item.music_brainz_id or None,
        release_date=year_to_date(item.year),
        release_year=item.year or None,
        song_count=item.song_count,
        songs=[parse_song(server, song) for song in item.song or []],
        created_at=item.created,
        updated_at=item.created,
        user_favorite=bool(item.starred),
        user_rating=item.user_rating or None,
        play_count=item.play_count,
        last_played_at=normalize_play_date(item.played),
        image_url=get_cover_art_url(server, item.cover_art, image_size or ALBUM_IMAGE_SIZE),
    )


def parse_album_artist(
    server: ServerContext,
    item: schemas.AlbumArtist,
    image_size: int | None = None,
    artist_info: schemas.ArtistInfo | None = None,
) -> AlbumArtist:
    """Parse a Subsonic artist object to the generic layout."""
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
        album_count=item.album_count or 0,
        biography=artist_info.biography if artist_info else None,
        mbz=item.music_brainz_id or None,
        similar_artists=similar_artists,
        user_favorite=bool(item.starred),
        user_rating=item.user_rating or None,
        image_url=get_cover_art_url(server, item.cover_art, image_size or ARTIST_IMAGE_SIZE),
    )


def parse_playlist(
    server: ServerContext, item: schemas.Playlist, image_size: int | None = None
) -> Playlist:
    """Parse a Subsonic playlist object to the generic layout."""
    return Playlist(
        id=item.id,
        name=item.name,
        server_id=server.id,
        server_type=server.type,
        description=item.comment or None,
        duration=item.duration * 1000,
        owner=item.owner,
        owner_id=item.owner,
        public=item.public,
        song_count=item.song_count,
        image_url=get_cover_art_url(server, item.cover_art, image_size or PLAYLIST_IMAGE_SIZE),
    )


def parse_genre(item: schemas.Genre) -> Genre:
    """Parse a Subsonic genre object to the generic layout."""
    return Genre(
        id=item.value,
        name=item.value,
        album_count=item.album_count,
        song_count=item.song_count,
    )


def parse_user(item: schemas.User) -> User:
    """Parse a Subsonic user object to the generic layout."""
    return User(
        id=item.username,
        name=item.username,
        email=item.email or None,
        is_admin=item.admin_role,
    )
