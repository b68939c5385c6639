"""Tests for the persistent configuration storage."""

import pathlib

import pytest

from playerdeck.constants import CONF_DECK_ID, ENCRYPT_SUFFIX
from playerdeck.deck import PlayerDeck
from playerdeck.models.errors import ValidationError
from playerdeck.models.server import ServerContext


async def test_get_set(deck: PlayerDeck) -> None:
    """Test nested keys are stored as a hierarchy."""
    config = deck.config
    assert config.get("player_queue/smart_shuffle", True) is True
    config.set("player_queue/smart_shuffle", False)
    assert config.get("player_queue/smart_shuffle", True) is False
    assert config.get("player_queue") == {"smart_shuffle": False}

    config.set_default("player_queue/smart_shuffle", True)
    assert config.get("player_queue/smart_shuffle") is False

    config.remove("player_queue/smart_shuffle")
    assert config.get("player_queue/smart_shuffle", "default") == "default"
    # removing an unknown key is a no-op
    config.remove("unknown/key")


async def test_deck_id(deck: PlayerDeck) -> None:
    """Test a unique id is generated for the installation."""
    deck_id = deck.config.get(CONF_DECK_ID)
    assert isinstance(deck_id, str)
    assert len(deck_id) == 32


async def test_server_credentials_encrypted(
    deck: PlayerDeck, navidrome_server: ServerContext
) -> None:
    """Test server credentials are stored encrypted and returned decrypted."""
    deck.config.save_server(navidrome_server)

    stored = deck.config.get(f"servers/{navidrome_server.id}")
    assert stored["credential"].startswith(ENCRYPT_SUFFIX)
    assert stored["nd_credential"].startswith(ENCRYPT_SUFFIX)
    assert "token" not in stored["credential"]
    assert stored["url"] == navidrome_server.url

    assert deck.config.get_server(navidrome_server.id) == navidrome_server
    assert deck.config.get_servers() == [navidrome_server]

    deck.config.remove_server(navidrome_server.id)
    assert deck.config.get_server(navidrome_server.id) is None


async def test_encrypt_string(deck: PlayerDeck) -> None:
    """Test the encryption helpers."""
    encrypted = deck.config.encrypt_string("secret")
    assert encrypted != "secret"
    # already encrypted values are left alone
    assert deck.config.encrypt_string(encrypted) == encrypted
    assert deck.config.decrypt_string(encrypted) == "secret"
    # plain values pass through
    assert deck.config.decrypt_string("plain") == "plain"
    with pytest.raises(ValidationError):
        deck.config.decrypt_string(f"{ENCRYPT_SUFFIX}garbage")


async def test_persistence(
    tmp_path: pathlib.Path,
    subsonic_server: ServerContext,
    navidrome_server: ServerContext,
) -> None:
    """Test servers and the active server survive a restart."""
    storage_path = str(tmp_path / "data")
    async with PlayerDeck(storage_path) as deck:
        deck.add_server(subsonic_server)
        deck.add_server(navidrome_server)
        deck.set_active_server(navidrome_server.id)
        deck.config.set("player_queue/previous_restart_threshold", 3000)

    async with PlayerDeck(storage_path) as deck:
        assert deck.active_server == navidrome_server
        assert sorted(x.id for x in deck.get_servers()) == ["srv-nd", "srv-sub"]
        assert deck.config.get("player_queue/previous_restart_threshold") == 3000

    assert (tmp_path / "data" / "settings.json").is_file()
