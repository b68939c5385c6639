"""All constants for PlayerDeck."""

from typing import Final

APPLICATION_NAME: Final = "PlayerDeck"

DECK_LOGGER_NAME: Final = "playerdeck"
VERBOSE_LOG_LEVEL: Final = 5

# Subsonic protocol
SUBSONIC_API_VERSION: Final = "1.13.0"
SUBSONIC_RESPONSE_KEY: Final = "subsonic-response"
DEFAULT_CLIENT_NAME: Final = APPLICATION_NAME

# artwork id servers hand out for "no cover art available"
PLACEHOLDER_COVER_ART_ID: Final = "2a96cbd8b46e442fc41c2b86b821562f"
NAVIDROME_ARTIST_PLACEHOLDER: Final = "/app/artist-placeholder.webp"

# both backends report "never played" with a year 0001 timestamp
NEVER_PLAYED_SENTINEL: Final = "0001-"

DEFAULT_ARTIST_IMAGE_SIZE: Final = 300
BACKDROP_IMAGE_SIZE: Final = 1000

# config keys
CONF_REQUEST_TIMEOUT: Final = "core/request_timeout"
CONF_SMART_SHUFFLE: Final = "player_queue/smart_shuffle"
CONF_PREVIOUS_RESTART_THRESHOLD: Final = "player_queue/previous_restart_threshold"
CONF_INDEX_BASED_QUEUE: Final = "music/index_based_queue"

DEFAULT_REQUEST_TIMEOUT: Final = 30
DEFAULT_PREVIOUS_RESTART_THRESHOLD: Final = 5000
DEFAULT_SAVE_DELAY: Final = 5

# persisted (non config) storage keys
CONF_DECK_ID: Final = "core/deck_id"
CONF_ACTIVE_SERVER: Final = "core/active_server"
CONF_SERVERS: Final = "servers"

# marker of values stored encrypted (server credentials)
ENCRYPT_SUFFIX: Final = "_encrypted_"
