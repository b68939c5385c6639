"""Logic to handle storage of persistent (configuration) settings."""

from __future__ import annotations

import asyncio
import base64
import contextlib
import logging
import os
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import aiofiles
from aiofiles.os import wrap
from cryptography.fernet import Fernet, InvalidToken

from playerdeck.constants import (
    CONF_DECK_ID,
    CONF_SERVERS,
    DECK_LOGGER_NAME,
    DEFAULT_SAVE_DELAY,
    ENCRYPT_SUFFIX,
)
from playerdeck.helpers.json import JSON_DECODE_EXCEPTIONS, async_json_dumps, async_json_loads
from playerdeck.models.errors import ValidationError
from playerdeck.models.server import ServerContext

if TYPE_CHECKING:
    from playerdeck.deck import PlayerDeck

LOGGER = logging.getLogger(f"{DECK_LOGGER_NAME}.config")

# server fields that are stored encrypted
SECRET_SERVER_KEYS = ("credential", "nd_credential")

isfile = wrap(os.path.isfile)
remove = wrap(os.remove)
rename = wrap(os.rename)


class ConfigController:
    """Controller that handles storage of persistent configuration settings."""

    _fernet: Fernet | None = None

    def __init__(self, deck: PlayerDeck) -> None:
        """Initialize storage controller."""
        self.deck = deck
        self.initialized = False
        self._data: dict[str, Any] = {}
        self.filename = os.path.join(self.deck.storage_path, "settings.json")
        self._timer_handle: asyncio.TimerHandle | None = None

    async def setup(self) -> None:
        """Async initialize of controller."""
        await self._load()
        self.initialized = True
        # create a unique id for this installation (also used for encrypting credentials)
        self.set_default(CONF_DECK_ID, uuid4().hex)
        deck_id: str = self.get(CONF_DECK_ID)
        fernet_key = base64.urlsafe_b64encode(deck_id.encode()[:32])
        self._fernet = Fernet(fernet_key)
        LOGGER.debug("Started.")

    async def close(self) -> None:
        """Handle logic on stop."""
        if not self._timer_handle:
            # no point in forcing a save when there are no changes pending
            return
        self._timer_handle.cancel()
        self._timer_handle = None
        await self._async_save()
        LOGGER.debug("Stopped.")

    def get(self, key: str, default: Any = None) -> Any:
        """Get value(s) for a specific key/path in persistent storage."""
        assert self.initialized, "Not yet (async) initialized"
        # we support a multi level hierarchy by providing the key as path,
        # with a slash (/) as splitter. Sort that out here.
        parent = self._data
        subkeys = key.split("/")
        for index, subkey in enumerate(subkeys):
            if index == (len(subkeys) - 1):
                value = parent.get(subkey, default)
                if value is None:
                    # replace None with default
                    return default
                return value
            if subkey not in parent:
                # requesting subkey from a non existing parent
                return default
            parent = parent[subkey]
        return default

    def set(self, key: str, value: Any) -> None:
        """Set value(s) for a specific key/path in persistent storage."""
        assert self.initialized, "Not yet (async) initialized"
        parent = self._data
        subkeys = key.split("/")
        for index, subkey in enumerate(subkeys):
            if index == (len(subkeys) - 1):
                parent[subkey] = value
            else:
                parent.setdefault(subkey, {})
                parent = parent[subkey]
        self.save()

    def set_default(self, key: str, default_value: Any) -> None:
        """Set default value(s) for a specific key/path in persistent storage."""
        assert self.initialized, "Not yet (async) initialized"
        cur_value = self.get(key, "__MISSING__")
        if cur_value == "__MISSING__":
            self.set(key, default_value)

    def remove(self, key: str) -> None:
        """Remove value(s) for a specific key/path in persistent storage."""
        assert self.initialized, "Not yet (async) initialized"
        parent = self._data
        subkeys = key.split("/")
        for index, subkey in enumerate(subkeys):
            if subkey not in parent:
                return
            if index == (len(subkeys) - 1):
                parent.pop(subkey)
            else:
                parent = parent[subkey]
        self.save()

    def get_servers(self) -> list[ServerContext]:
        """Return all stored server descriptors."""
        raw_servers: dict[str, dict[str, Any]] = self.get(CONF_SERVERS, {})
        return [self._server_from_storage(x) for x in raw_servers.values()]

    def get_server(self, server_id: str) -> ServerContext | None:
        """Return a stored server descriptor by its id."""
        raw_server = self.get(f"{CONF_SERVERS}/{server_id}")
        if raw_server is None:
            return None
        return self._server_from_storage(raw_server)

    def save_server(self, server: ServerContext) -> None:
        """Store a server descriptor, its credentials are stored encrypted."""
        raw_server = server.to_dict()
        for key in SECRET_SERVER_KEYS:
            if raw_server.get(key):
                raw_server[key] = self.encrypt_string(raw_server[key])
        self.set(f"{CONF_SERVERS}/{server.id}", raw_server)

    def remove_server(self, server_id: str) -> None:
        """Remove a stored server descriptor."""
        self.remove(f"{CONF_SERVERS}/{server_id}")

    def save(self) -> None:
        """Schedule save of data to disk."""
        if self._timer_handle is not None:
            self._timer_handle.cancel()
        self._timer_handle = self.deck.loop.call_later(
            DEFAULT_SAVE_DELAY, self.deck.create_task, self._async_save
        )

    def encrypt_string(self, str_value: str) -> str:
        """Encrypt a (credential)string with Fernet."""
        if str_value.startswith(ENCRYPT_SUFFIX):
            return str_value
        assert self._fernet is not None
        return ENCRYPT_SUFFIX + self._fernet.encrypt(str_value.encode()).decode()

    def decrypt_string(self, encrypted_str: str) -> str:
        """Decrypt a (credential)string with Fernet."""
        if not encrypted_str:
            return encrypted_str
        if not encrypted_str.startswith(ENCRYPT_SUFFIX):
            return encrypted_str
        assert self._fernet is not None
        try:
            return self._fernet.decrypt(encrypted_str.replace(ENCRYPT_SUFFIX, "").encode()).decode()
        except InvalidToken as err:
            msg = "Credential decryption failed"
            raise ValidationError(msg) from err

    def _server_from_storage(self, raw_server: dict[str, Any]) -> ServerContext:
        raw_server = dict(raw_server)
        for key in SECRET_SERVER_KEYS:
            if raw_server.get(key):
                raw_server[key] = self.decrypt_string(raw_server[key])
        return ServerContext.from_dict(raw_server)

    async def _load(self) -> None:
        """Load data from persistent storage."""
        assert not self._data, "Already loaded"

        for filename in (self.filename, f"{self.filename}.backup"):
            try:
                async with aiofiles.open(filename, encoding="utf-8") as _file:
                    self._data = await async_json_loads(await _file.read())
                    LOGGER.debug("Loaded persistent settings from %s", filename)
                    return
            except FileNotFoundError:
                pass
            except JSON_DECODE_EXCEPTIONS:
                LOGGER.exception("Error while reading persistent storage file %s", filename)
        LOGGER.debug("Started with empty storage: No persistent storage file found.")

    async def _async_save(self) -> None:
        """Save persistent data to disk."""
        self._timer_handle = None
        filename_backup = f"{self.filename}.backup"
        # make backup before we write a new file
        if await isfile(self.filename):
            with contextlib.suppress(FileNotFoundError):
                await remove(filename_backup)
            await rename(self.filename, filename_backup)

        async with aiofiles.open(self.filename, "w", encoding="utf-8") as _file:
            await _file.write(await async_json_dumps(self._data, indent=True))
        LOGGER.debug("Saved data to persistent storage")
