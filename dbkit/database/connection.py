"""
Named MongoDB connection.

Wraps one Motor client bound to one database name. The client is created
lazily by Motor, so constructing a Connection never blocks; ``open``
schedules a ping in the background and reports the outcome through the
caller's callbacks.

Example:
    connection = await registry.create_connection(config)
    if await connection.wait_open():
        users = connection.get_collection("users")
"""

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Callable, Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from dbkit.utils.exceptions import ConnectionOpenError

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    FAILED = "failed"
    CLOSED = "closed"


async def _notify(callback: Callable[..., Any], *args: Any) -> None:
    try:
        result = callback(*args)
        if inspect.isawaitable(result):
            await result
    except Exception:
        # Nobody awaits the open task, so report callback failures here
        logger.exception(f"Connection callback {callback!r} failed")


class Connection:
    """One live Motor client for one database name. Owned by a ConnectionRegistry."""

    def __init__(self, name: str, client: AsyncIOMotorClient):
        self._name = name
        self._client = client
        self._state = ConnectionState.CONNECTING
        self._error: Optional[ConnectionOpenError] = None
        self._open_task: Optional[asyncio.Task] = None

    @property
    def name(self) -> str:
        """Database name, also the registry key."""
        return self._name

    @property
    def client(self) -> AsyncIOMotorClient:
        """Get the underlying Motor client."""
        return self._client

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def error(self) -> Optional[ConnectionOpenError]:
        """The open failure, if any."""
        return self._error

    @property
    def is_open(self) -> bool:
        return self._state == ConnectionState.OPEN

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """Get the underlying Motor database instance."""
        return self._client[self._name]

    def get_collection(self, name: str) -> AsyncIOMotorCollection:
        """Get a raw Motor collection for direct access."""
        logger.debug(f"Getting collection {name} from {self._name}")
        return self.db[name]

    def open(
        self,
        on_connection: Callable[..., Any],
        on_error: Callable[..., Any],
    ) -> asyncio.Task:
        """
        Start opening the connection without waiting for it.

        Must be called from a running event loop. Calling it again returns
        the task already in flight.
        """
        if self._open_task is None:
            self._open_task = asyncio.get_running_loop().create_task(
                self._open(on_connection, on_error)
            )
        return self._open_task

    async def _open(
        self,
        on_connection: Callable[..., Any],
        on_error: Callable[..., Any],
    ) -> None:
        logger.debug(f"Pinging MongoDB for database: {self._name}")
        try:
            await self._client.admin.command("ping")
        except Exception as e:
            # Background task: on_error is the only way out
            self._state = ConnectionState.FAILED
            self._error = ConnectionOpenError(
                f"Failed to connect to MongoDB database {self._name}: {e}",
                db_name=self._name,
            )
            self._error.__cause__ = e
            logger.error(f"Failed to connect to MongoDB: {e}")
            await _notify(on_error, self._error)
            return

        self._state = ConnectionState.OPEN
        logger.info(f"Successfully connected to MongoDB database: {self._name}")
        await _notify(on_connection, self)

    async def wait_open(self) -> bool:
        """Wait for the open attempt to finish. True when the connection is open."""
        task = self._open_task
        if task is not None and not task.cancelled():
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                # close() cancelled the open; anything else is our own cancellation
                if not task.cancelled():
                    raise
        return self.is_open

    def close(self) -> None:
        """Close the Motor client. Only the owning registry should call this."""
        if self._state == ConnectionState.CLOSED:
            return
        logger.info(f"Disconnecting from MongoDB database: {self._name}")
        if self._open_task is not None and not self._open_task.done():
            self._open_task.cancel()
        self._client.close()
        self._state = ConnectionState.CLOSED
        logger.debug("MongoDB connection closed")

    def __repr__(self) -> str:
        return f"Connection(name={self._name!r}, state={self._state.value})"
