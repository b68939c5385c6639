"""Main PlayerDeck class."""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
from collections.abc import Awaitable, Callable, Coroutine
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING, Any, Self, TypeVar, cast
from uuid import uuid4

from aiofiles.os import wrap

from playerdeck.constants import (
    CONF_ACTIVE_SERVER,
    CONF_REQUEST_TIMEOUT,
    DECK_LOGGER_NAME,
    DEFAULT_REQUEST_TIMEOUT,
    VERBOSE_LOG_LEVEL,
)
from playerdeck.controllers.config import ConfigController
from playerdeck.controllers.music import MusicController
from playerdeck.controllers.player_queue import PlayerQueueController
from playerdeck.controllers.remote import RemoteController
from playerdeck.helpers.aiohttp_client import create_clientsession
from playerdeck.helpers.api import APICommandHandler, collect_api_commands
from playerdeck.models.enums import EventType
from playerdeck.models.errors import InvalidCommand
from playerdeck.models.event import DeckEvent

if TYPE_CHECKING:
    from types import TracebackType

    from aiohttp import ClientSession

    from playerdeck.helpers.identity import UniqueIdGenerator
    from playerdeck.models.server import ServerContext

isdir = wrap(os.path.isdir)
mkdirs = wrap(os.makedirs)

EventCallBackType = (
    Callable[[DeckEvent], None] | Callable[[DeckEvent], Coroutine[Any, Any, None]]
)
EventSubscriptionType = tuple[EventCallBackType, tuple[EventType, ...] | None]

LOGGER = logging.getLogger(DECK_LOGGER_NAME)

_R = TypeVar("_R")


class PlayerDeck:
    """Main PlayerDeck object, owner of the controllers and the shared state."""

    loop: asyncio.AbstractEventLoop
    config: ConfigController
    music: MusicController
    player_queue: PlayerQueueController
    remote: RemoteController

    def __init__(
        self, storage_path: str, id_generator: UniqueIdGenerator | None = None
    ) -> None:
        """Initialize PlayerDeck."""
        self.storage_path = storage_path
        self._id_generator = id_generator
        # logical commands which can be invoked by name (see execute)
        self.command_handlers: dict[str, APICommandHandler] = {}
        self._subscribers: set[EventSubscriptionType] = set()
        self._tracked_tasks: dict[str, asyncio.Task[Any]] = {}
        self._active_server: ServerContext | None = None
        self._http_session: ClientSession | None = None
        self.closing = False
        self.version: str = "0.0.0"

    async def start(self) -> None:
        """Start running PlayerDeck."""
        self.loop = asyncio.get_running_loop()
        logging.addLevelName(VERBOSE_LOG_LEVEL, "VERBOSE")
        try:
            self.version = version("playerdeck")
        except PackageNotFoundError:
            self.version = "0.0.0"
        if not await isdir(self.storage_path):
            await mkdirs(self.storage_path)
        # setup config controller first and fetch important config values
        self.config = ConfigController(self)
        await self.config.setup()
        LOGGER.info("Starting PlayerDeck version %s", self.version)
        self.music = MusicController(self)
        self.player_queue = PlayerQueueController(self, id_generator=self._id_generator)
        self.remote = RemoteController(self)
        self.command_handlers = collect_api_commands(self.music, self.player_queue)
        if (server_id := self.config.get(CONF_ACTIVE_SERVER)) is not None:
            self._active_server = self.config.get_server(server_id)

    async def stop(self) -> None:
        """Stop running PlayerDeck."""
        LOGGER.info("Stop called, cleaning up...")
        self.signal_event(EventType.SHUTDOWN)
        self.closing = True
        # cancel all running tasks
        for task in self._tracked_tasks.values():
            task.cancel()
        await self.config.close()
        # close/cleanup shared http session
        if self._http_session:
            await self._http_session.close()
            self._http_session = None

    @property
    def http_session(self) -> ClientSession:
        """
        Return the shared HTTP Client session.

        NOTE: May only be called from the event loop.
        """
        if self._http_session is None:
            timeout = self.config.get(CONF_REQUEST_TIMEOUT, DEFAULT_REQUEST_TIMEOUT)
            self._http_session = create_clientsession(self.version, timeout=timeout)
        return self._http_session

    @property
    def active_server(self) -> ServerContext | None:
        """Return the server all (default) operations are routed to."""
        return self._active_server

    def get_servers(self) -> list[ServerContext]:
        """Return all configured servers."""
        return self.config.get_servers()

    def get_server(self, server_id: str) -> ServerContext | None:
        """Return a configured server by its id."""
        if self._active_server is not None and self._active_server.id == server_id:
            return self._active_server
        return self.config.get_server(server_id)

    def add_server(self, server: ServerContext) -> None:
        """Add (or update) a server."""
        self.config.save_server(server)
        if self._active_server is not None and self._active_server.id == server.id:
            self._active_server = server

    def remove_server(self, server_id: str) -> None:
        """Remove a server."""
        if self._active_server is not None and self._active_server.id == server_id:
            self.set_active_server(None)
        self.config.remove_server(server_id)
        self.music.remove_backend(server_id)

    def set_active_server(self, server_id: str | None) -> None:
        """Switch the active server.

        In-flight queue restores computed against the previous server are discarded.
        """
        server = None
        if server_id is not None and (server := self.get_server(server_id)) is None:
            raise InvalidCommand(f"Unknown server: {server_id}")
        if server == self._active_server:
            return
        self._active_server = server
        if server_id is None:
            self.config.remove(CONF_ACTIVE_SERVER)
        else:
            self.config.set(CONF_ACTIVE_SERVER, server_id)
        LOGGER.debug("Active server changed to %s", server.name if server else None)
        self.signal_event(EventType.SERVER_CHANGED, object_id=server_id, data=server)

    async def execute(self, command: str, args: dict[str, Any] | None = None) -> Any:
        """Execute a logical command by name (e.g. "music/album") with (raw) arguments."""
        if (handler := self.command_handlers.get(command)) is None:
            raise InvalidCommand(f"Unknown command: {command}")
        return await handler.execute(args)

    def signal_event(
        self,
        event: EventType,
        object_id: str | None = None,
        data: Any = None,
    ) -> None:
        """Signal event to subscribers."""
        if self.closing:
            return

        if LOGGER.isEnabledFor(VERBOSE_LOG_LEVEL) and event != EventType.QUEUE_TIME_UPDATED:
            # do not log queue time updated events because that is too chatty
            LOGGER.getChild("event").log(VERBOSE_LOG_LEVEL, "%s %s", event.value, object_id or "")

        event_obj = DeckEvent(event=event, object_id=object_id, data=data)
        for cb_func, event_filter in self._subscribers:
            if not (event_filter is None or event in event_filter):
                continue
            if inspect.iscoroutinefunction(cb_func):
                if TYPE_CHECKING:
                    cb_func = cast("Callable[[DeckEvent], Coroutine[Any, Any, None]]", cb_func)
                self.create_task(cb_func, event_obj)
            else:
                if TYPE_CHECKING:
                    cb_func = cast("Callable[[DeckEvent], None]", cb_func)
                self.loop.call_soon(cb_func, event_obj)

    def subscribe(
        self,
        cb_func: EventCallBackType,
        event_filter: EventType | tuple[EventType, ...] | None = None,
    ) -> Callable[[], None]:
        """Add callback to event listeners.

        Returns function to remove the listener.
            :param cb_func: callback function or coroutine
            :param event_filter: Optionally only listen for these events
        """
        if isinstance(event_filter, EventType):
            event_filter = (event_filter,)
        listener = (cb_func, event_filter)
        self._subscribers.add(listener)

        def remove_listener() -> None:
            self._subscribers.remove(listener)

        return remove_listener

    def create_task(
        self,
        target: Callable[..., Coroutine[Any, Any, _R]] | Awaitable[_R],
        *args: Any,
        task_id: str | None = None,
        abort_existing: bool = False,
        **kwargs: Any,
    ) -> asyncio.Task[_R]:
        """Create Task on (main) event loop from Coroutine(function).

        Tasks created by this helper will be properly cancelled on stop.
        """
        if task_id and (existing := self._tracked_tasks.get(task_id)) and not existing.done():
            # prevent duplicate tasks if task_id is given and already present
            if abort_existing:
                existing.cancel()
            else:
                return existing

        if inspect.iscoroutinefunction(target):
            # coroutine function
            task = self.loop.create_task(target(*args, **kwargs))
        elif asyncio.iscoroutine(target):
            # coroutine
            task = self.loop.create_task(target)
        elif callable(target):
            raise RuntimeError("Function is not a coroutine or coroutine function")
        else:
            raise RuntimeError("Target is missing")

        if task_id is None:
            task_id = uuid4().hex

        def task_done_callback(_task: asyncio.Task[Any]) -> None:
            if self._tracked_tasks.get(task_id) is _task:
                self._tracked_tasks.pop(task_id, None)
            # log unhandled exceptions
            if not _task.cancelled() and (err := _task.exception()):
                LOGGER.warning(
                    "Exception in task %s - target: %s: %s",
                    _task.get_name(),
                    str(target),
                    str(err),
                    exc_info=err if LOGGER.isEnabledFor(logging.DEBUG) else None,
                )

        self._tracked_tasks[task_id] = task
        task.add_done_callback(task_done_callback)
        return task

    async def __aenter__(self) -> Self:
        """Return Context manager."""
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        """Exit context manager."""
        await self.stop()
        return None
