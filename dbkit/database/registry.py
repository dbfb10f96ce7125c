"""
Connection registry.

Owns every named Connection of an application. Create one registry at
startup, pass it to the accessors that need it, and tear it down at
shutdown.

Example:
    from dbkit.database import ConnectionRegistry
    from dbkit.config import ConnectionConfig

    async with ConnectionRegistry() as registry:
        await registry.create_connection(ConnectionConfig(
            connection_string="mongodb://localhost:27017",
            db_name="shop",
            on_connection=lambda conn: print("ready"),
        ))
        products = registry.create_accessor({"name": "string"}, "products", "shop")

Singleton access:
    from dbkit.database import set_default_registry, get_default_registry

    set_default_registry(registry)
    registry = get_default_registry()
"""

import logging
import threading
from typing import Any, Callable, Dict, Mapping, Optional, TYPE_CHECKING, Union

from motor.motor_asyncio import AsyncIOMotorClient

from dbkit.config.settings import ConnectionConfig, DEFAULT_DB_NAME
from dbkit.database.connection import Connection
from dbkit.utils.log import mask_uri

if TYPE_CHECKING:
    from dbkit.database.accessor import CollectionAccessor

logger = logging.getLogger(__name__)

_default_registry: Optional["ConnectionRegistry"] = None


class ConnectionRegistry:
    """Named connection table. At most one Connection per database name."""

    def __init__(self, client_factory: Callable[..., Any] = AsyncIOMotorClient):
        self._client_factory = client_factory
        self._connections: Dict[str, Connection] = {}
        self._lock = threading.Lock()

    async def create_connection(
        self,
        config: Union[ConnectionConfig, Mapping[str, Any]],
    ) -> Connection:
        """
        Get or open the connection for ``config.db_name``.

        Returns immediately: an existing connection is returned as is,
        without callbacks; a new one is registered and opened in the
        background, calling ``on_connection`` or ``on_error`` when done.

        Args:
            config: ConnectionConfig or a mapping of its fields

        Returns:
            The Connection registered under the database name
        """
        if not isinstance(config, ConnectionConfig):
            config = ConnectionConfig.model_validate(dict(config))

        db_name = config.db_name

        # Check and insert under one lock, with no await in between
        with self._lock:
            existing = self._connections.get(db_name)
            if existing is not None:
                logger.debug(f"Reusing connection for database: {db_name}")
                return existing

            logger.info(f"Connecting to MongoDB: {mask_uri(config.connection_string)}")
            logger.debug(f"Database name: {db_name}")
            client = self._client_factory(config.connection_string, **config.client_options())
            connection = Connection(db_name, client)
            self._connections[db_name] = connection

        connection.open(config.on_connection, config.on_error)
        return connection

    def get_connection(self, db_name: str = DEFAULT_DB_NAME) -> Optional[Connection]:
        """Get the connection registered under ``db_name``, or None."""
        with self._lock:
            return self._connections.get(db_name)

    def delete_connection(self, db_name: str, close: bool = False) -> bool:
        """
        Remove a connection from the registry.

        The Motor client is only closed when ``close`` is True; otherwise
        releasing its resources is up to the driver.

        Returns:
            True if a connection was registered under ``db_name``
        """
        with self._lock:
            connection = self._connections.pop(db_name, None)

        if connection is None:
            return False

        logger.info(f"Removed connection for database: {db_name}")
        if close:
            connection.close()
        return True

    def clear_connections(self) -> None:
        """Forget every connection without closing them."""
        with self._lock:
            self._connections = {}
        logger.debug("Connection registry cleared")

    def connection_names(self) -> list:
        with self._lock:
            return list(self._connections)

    def create_accessor(
        self,
        schema: Mapping[str, Any],
        collection_name: str,
        db_name: str = DEFAULT_DB_NAME,
    ) -> Optional["CollectionAccessor"]:
        """
        Bind a schema and collection to a registered connection.

        Returns:
            CollectionAccessor, or None when ``db_name`` has no connection
        """
        from dbkit.database.accessor import CollectionAccessor

        if self.get_connection(db_name) is None:
            logger.warning(f"No connection for database {db_name}, accessor for {collection_name} not created")
            return None
        return CollectionAccessor(self, schema, collection_name, db_name)

    async def teardown(self) -> None:
        """Close every connection and empty the registry."""
        with self._lock:
            connections = list(self._connections.values())
            self._connections = {}

        for connection in connections:
            connection.close()
        logger.info(f"Closed {len(connections)} MongoDB connection(s)")

    async def __aenter__(self) -> "ConnectionRegistry":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.teardown()


# ─────────────────────────────────────────────────────────────────
# Singleton initialization and getters
# ─────────────────────────────────────────────────────────────────

def set_default_registry(registry: ConnectionRegistry) -> None:
    """
    Set the application-wide registry.

    Args:
        registry: ConnectionRegistry to hand out from get_default_registry()
    """
    global _default_registry
    _default_registry = registry
    logger.info("Default connection registry set")


def get_default_registry() -> ConnectionRegistry:
    """
    Get the application-wide registry.

    Raises:
        RuntimeError: If no registry was set
    """
    if _default_registry is None:
        raise RuntimeError("Connection registry not initialized. Call set_default_registry() first.")
    return _default_registry
