"""Constants for the Subsonic backend."""

from typing import Final

REST_PATH: Final = "rest"

# Subsonic protocol error code for "data not found"
ERROR_NOT_FOUND: Final = 70

DEFAULT_RANDOM_SONG_COUNT: Final = 50
DEFAULT_TOP_SONG_COUNT: Final = 50
DEFAULT_SEARCH_LIMIT: Final = 20

# image sizes used when the caller does not ask for a specific size
SONG_IMAGE_SIZE: Final = 300
ALBUM_IMAGE_SIZE: Final = 300
ARTIST_IMAGE_SIZE: Final = 100
PLAYLIST_IMAGE_SIZE: Final = 300
