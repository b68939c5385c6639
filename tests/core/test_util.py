"""Tests for utility/helper functions."""

from typing import Any

import pytest

from playerdeck.constants import PLACEHOLDER_COVER_ART_ID
from playerdeck.helpers import util
from playerdeck.helpers.api import parse_value
from playerdeck.models.enums import RepeatMode
from playerdeck.models.queue import QueueSnapshot
from playerdeck.models.server import ServerContext


@pytest.mark.parametrize(
    ("date_str", "fallback_year", "expected"),
    [
        ("2020-05-01T10:00:00Z", None, "2020-05-01T10:00:00+00:00"),
        ("2019-06-15", None, "2019-06-15T00:00:00+00:00"),
        ("2019-06", None, "2019-06-01T00:00:00+00:00"),
        ("2019", None, "2019-01-01T00:00:00+00:00"),
        (None, 1999, "1999-01-01T00:00:00+00:00"),
        ("", 1999, "1999-01-01T00:00:00+00:00"),
        ("unknown", None, None),
        (None, 0, None),
    ],
)
def test_parse_date(date_str: str | None, fallback_year: int | None, expected: str | None) -> None:
    """Test parsing of (partial) release dates."""
    assert util.parse_date(date_str, fallback_year) == expected


def test_play_date() -> None:
    """Test the never played sentinel is mapped to None."""
    assert util.normalize_play_date("0001-01-01T00:00:00Z") is None
    assert util.normalize_play_date(None) is None
    assert util.normalize_play_date("2024-03-01T12:00:00Z") == "2024-03-01T12:00:00Z"
    assert util.year_to_date(0) is None
    assert util.year_to_date(2001) == "2001-01-01T00:00:00+00:00"
    assert util.date_only("2023-11-02T08:15:00Z") == "2023-11-02"
    assert util.date_only(None) is None


def test_try_parse() -> None:
    """Test the lenient number parser."""
    assert util.try_parse_int("3.7") == 3
    assert util.try_parse_int("abc") == 0
    assert util.try_parse_int(None, None) is None


def test_urls(subsonic_server: ServerContext) -> None:
    """Test synthesized cover art and stream urls."""
    assert util.get_cover_art_url(subsonic_server, "al-1", 300) == (
        "https://music.example.com/rest/getCoverArt.view?id=al-1"
        "&u=alice&s=salt&t=token&v=1.13.0&c=PlayerDeck&size=300"
    )
    assert util.get_cover_art_url(subsonic_server, None, 300) is None
    assert util.get_cover_art_url(subsonic_server, f"pl-{PLACEHOLDER_COVER_ART_ID}", 300) is None
    assert util.get_stream_url(subsonic_server, "42") == (
        "https://music.example.com/rest/stream.view?id=42"
        "&v=1.13.0&c=PlayerDeck&u=alice&s=salt&t=token"
    )


@pytest.mark.parametrize(
    ("value", "value_type", "expected"),
    [
        ("all", RepeatMode, RepeatMode.ALL),
        (3, float, 3.0),
        (None, str | None, None),
        (["a", "b"], list[str], ["a", "b"]),
        (5, int | str, 5),
        ({"x": 1}, Any, {"x": 1}),
    ],
)
def test_parse_value(value: Any, value_type: Any, expected: Any) -> None:
    """Test conversion of raw (json) arguments."""
    assert parse_value("arg", value, value_type) == expected


def test_parse_value_dataclass() -> None:
    """Test dicts are converted into models."""
    snapshot = parse_value(
        "snapshot", {"song_ids": ["1"], "current_index": 0, "position_ms": 10}, QueueSnapshot
    )
    assert snapshot == QueueSnapshot(song_ids=["1"], current_index=0, position_ms=10)


def test_parse_value_invalid() -> None:
    """Test invalid values raise."""
    with pytest.raises(TypeError):
        parse_value("arg", "1", int)
    with pytest.raises(KeyError):
        parse_value("arg", None, int)
    with pytest.raises(ValueError):
        parse_value("arg", "sometimes", RepeatMode)
