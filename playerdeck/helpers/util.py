"""Various (server related) utils and helpers."""

from __future__ import annotations

from contextlib import suppress
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from playerdeck.constants import (
    DEFAULT_CLIENT_NAME,
    NEVER_PLAYED_SENTINEL,
    PLACEHOLDER_COVER_ART_ID,
    SUBSONIC_API_VERSION,
)

if TYPE_CHECKING:
    from playerdeck.models.server import ServerContext


def try_parse_int(possible_int: Any, default: int | None = 0) -> int | None:
    """Try to parse an int."""
    try:
        return int(float(possible_int))
    except (TypeError, ValueError):
        return default


def get_cover_art_url(
    server: ServerContext,
    cover_art_id: str | None,
    size: int,
) -> str | None:
    """Return the (Subsonic) cover art url for the given artwork id.

    Returns None for a missing id or the well-known placeholder artwork,
    which the server would answer with a 404.
    """
    if not cover_art_id or PLACEHOLDER_COVER_ART_ID in cover_art_id:
        return None
    query = urlencode({"id": cover_art_id})
    return (
        f"{server.base_url}/rest/getCoverArt.view"
        f"?{query}"
        f"&{server.credential}"
        f"&v={SUBSONIC_API_VERSION}"
        f"&c={DEFAULT_CLIENT_NAME}"
        f"&size={size}"
    )


def get_stream_url(server: ServerContext, song_id: str) -> str:
    """Return the (Subsonic) stream url for the given song id."""
    query = urlencode({"id": song_id})
    return (
        f"{server.base_url}/rest/stream.view"
        f"?{query}"
        f"&v={SUBSONIC_API_VERSION}"
        f"&c={DEFAULT_CLIENT_NAME}"
        f"&{server.credential}"
    )


def normalize_play_date(play_date: str | None) -> str | None:
    """Return the last played date or None if the server reported "never played"."""
    # NOTE: the sentinel is matched on its year prefix only,
    # a server changing its representation would slip through here.
    if not play_date or NEVER_PLAYED_SENTINEL in play_date:
        return None
    return play_date


def year_to_date(year: int | None) -> str | None:
    """Return January 1 (UTC) of the given year as ISO date, None for unknown years."""
    if not year or year < 1:
        return None
    return datetime(year, 1, 1, tzinfo=UTC).isoformat()


def parse_date(date_str: str | None, fallback_year: int | None = None) -> str | None:
    """Parse a (possibly partial) release date into an ISO date in UTC.

    Accepts full ISO timestamps as well as "YYYY-MM-DD", "YYYY-MM" and "YYYY".
    Falls back to January 1 of `fallback_year` when no usable date is given.
    """
    if date_str:
        with suppress(ValueError):
            parsed = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=UTC)
            return parsed.isoformat()
        parts = date_str.split("-")
        with suppress(ValueError, IndexError):
            year = int(parts[0])
            month = int(parts[1]) if len(parts) > 1 and parts[1] else 1
            if year > 0:
                return datetime(year, month, 1, tzinfo=UTC).isoformat()
    return year_to_date(fallback_year)


def date_only(timestamp: str | None) -> str | None:
    """Return the date part of an ISO timestamp."""
    if not timestamp:
        return None
    return timestamp.split("T")[0]
