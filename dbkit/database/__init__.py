"""
Database module - Named async MongoDB connections and collection accessors.

Usage:
    from dbkit.database import ConnectionRegistry, CollectionAccessor

    registry = ConnectionRegistry()
    await registry.create_connection({"connectionString": uri, "dbName": "main"})

    users = CollectionAccessor(registry, {"name": "string"}, "users", "main")
    page = await users.find_listable({"take": 20})
"""

from dbkit.database.connection import Connection, ConnectionState
from dbkit.database.registry import (
    ConnectionRegistry,
    # Singleton management
    set_default_registry,
    get_default_registry,
)
from dbkit.database.accessor import CollectionAccessor
from dbkit.database.schema import FieldType, build_schema

__all__ = [
    "Connection",
    "ConnectionState",
    "ConnectionRegistry",
    "CollectionAccessor",
    "FieldType",
    "build_schema",
    # Singleton management
    "set_default_registry",
    "get_default_registry",
]
