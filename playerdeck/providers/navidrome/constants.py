"""Constants for the Navidrome backend."""

from typing import Final

API_PATH: Final = "api"
AUTH_HEADER: Final = "x-nd-authorization"
TOTAL_COUNT_HEADER: Final = "x-total-count"

# participant roles that map to the artist lists instead of the participants mapping
ROLE_ALBUM_ARTIST: Final = "albumartist"
ROLE_ARTIST: Final = "artist"

# artist image artwork ids are prefixed on Navidrome
ARTIST_COVER_ART_PREFIX: Final = "ar-"

SONG_IMAGE_SIZE: Final = 100
ALBUM_IMAGE_SIZE: Final = 300
ARTIST_IMAGE_SIZE: Final = 300
PLAYLIST_IMAGE_SIZE: Final = 300
