"""
dbkit - Generic async data access over MongoDB.

- database: Named connections, registry and collection accessors
- query: Listing query builder and update payload sanitizing
- config: Environment settings and connection options
- utils: Exceptions, id generation and logging setup
"""

from dbkit.database import (
    Connection,
    ConnectionState,
    ConnectionRegistry,
    CollectionAccessor,
    FieldType,
    set_default_registry,
    get_default_registry,
)
from dbkit.query import (
    ListQuery,
    ListQueryBuilder,
    SearchSpec,
    SortSpec,
    DateFilter,
    UNDEFINED,
    sanitize_update,
)
from dbkit.config import DatabaseSettings, ConnectionConfig
from dbkit.utils import (
    DbKitError,
    ConnectionOpenError,
    NotConnectedError,
    CustomFunctionNotFoundError,
    generate_id,
    configure_logging,
)

__version__ = "0.1.0"

__all__ = [
    # Database
    "Connection",
    "ConnectionState",
    "ConnectionRegistry",
    "CollectionAccessor",
    "FieldType",
    "set_default_registry",
    "get_default_registry",
    # Query
    "ListQuery",
    "ListQueryBuilder",
    "SearchSpec",
    "SortSpec",
    "DateFilter",
    "UNDEFINED",
    "sanitize_update",
    # Config
    "DatabaseSettings",
    "ConnectionConfig",
    # Utils
    "DbKitError",
    "ConnectionOpenError",
    "NotConnectedError",
    "CustomFunctionNotFoundError",
    "generate_id",
    "configure_logging",
]
