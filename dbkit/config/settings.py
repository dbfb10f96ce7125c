"""
Settings for database connections.

``DatabaseSettings`` uses Pydantic Settings for automatic environment
variable loading. ``ConnectionConfig`` is the explicit per-call structure
accepted by ``ConnectionRegistry.create_connection``.

Example:
    from dbkit.config import DatabaseSettings

    settings = DatabaseSettings()
    settings.validate_required()
    connection = await registry.create_connection(settings.to_connection_config())
"""

from datetime import timezone
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_NAME = "default"
DEFAULT_TIMEOUT_MS = 10000

# Decode BSON dates as UTC-aware datetimes, matching the stamps we write
CODEC_OPTIONS = {"tz_aware": True, "tzinfo": timezone.utc}


def _noop(*args: Any) -> None:
    return None


class ConnectionConfig(BaseModel):
    """
    Options for opening a named connection.

    Attributes:
        connection_string: MongoDB URI (required)
        db_name: Registry key and database name, defaults to "default"
        user: Username, overrides credentials in the URI when set
        password: Password, overrides credentials in the URI when set
        connect_timeout_ms: Driver connectTimeoutMS, defaults to 10000
        socket_timeout_ms: Driver socketTimeoutMS, defaults to 10000
        on_connection: Called with the Connection once it is open
        on_error: Called with a ConnectionOpenError when opening fails
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    connection_string: str = Field(alias="connectionString")
    db_name: str = Field(default=DEFAULT_DB_NAME, alias="dbName")
    user: Optional[str] = None
    password: Optional[str] = Field(default=None, alias="pass")
    connect_timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, alias="connectTimeoutMS")
    socket_timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, alias="socketTimeoutMS")
    on_connection: Callable[..., Any] = Field(default=_noop, alias="onConnection")
    on_error: Callable[..., Any] = Field(default=_noop, alias="onError")

    def client_options(self) -> dict:
        """Keyword arguments for the Motor client."""
        options = {
            "connectTimeoutMS": self.connect_timeout_ms,
            "socketTimeoutMS": self.socket_timeout_ms,
            **CODEC_OPTIONS,
        }
        if self.user is not None:
            options["username"] = self.user
        if self.password is not None:
            options["password"] = self.password
        return options


class DatabaseSettings(BaseSettings):
    """
    Database settings loaded from environment variables.

    Extend this class for application-specific settings.
    """

    # ==========================================================================
    # Connection Settings
    # ==========================================================================
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = DEFAULT_DB_NAME
    MONGODB_USER: Optional[str] = None
    MONGODB_PASSWORD: Optional[str] = None
    MONGODB_CONNECT_TIMEOUT_MS: int = DEFAULT_TIMEOUT_MS
    MONGODB_SOCKET_TIMEOUT_MS: int = DEFAULT_TIMEOUT_MS

    # ==========================================================================
    # Listing Settings
    # ==========================================================================
    # Keep the historical sort mapping where "desc" sorts ascending
    DBKIT_LEGACY_SORT_DIRECTION: bool = False

    # ==========================================================================
    # Logging
    # ==========================================================================
    LOG_LEVEL: str = "INFO"

    # ==========================================================================
    # Pydantic Settings Configuration
    # ==========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
        case_sensitive=True,
    )

    def to_connection_config(
        self,
        on_connection: Optional[Callable[..., Any]] = None,
        on_error: Optional[Callable[..., Any]] = None,
    ) -> ConnectionConfig:
        """Build a ConnectionConfig from these settings."""
        return ConnectionConfig(
            connection_string=self.MONGODB_URI,
            db_name=self.MONGODB_DATABASE,
            user=self.MONGODB_USER,
            password=self.MONGODB_PASSWORD,
            connect_timeout_ms=self.MONGODB_CONNECT_TIMEOUT_MS,
            socket_timeout_ms=self.MONGODB_SOCKET_TIMEOUT_MS,
            on_connection=on_connection or _noop,
            on_error=on_error or _noop,
        )

    def validate_required(self) -> None:
        """
        Validate that required settings are configured.

        Raises:
            ValueError: If required settings are missing
        """
        errors = []

        if not self.MONGODB_URI:
            errors.append("MONGODB_URI is required")

        if not self.MONGODB_DATABASE:
            errors.append("MONGODB_DATABASE is required")

        if bool(self.MONGODB_USER) != bool(self.MONGODB_PASSWORD):
            errors.append("MONGODB_USER and MONGODB_PASSWORD must be set together")

        if self.MONGODB_CONNECT_TIMEOUT_MS <= 0 or self.MONGODB_SOCKET_TIMEOUT_MS <= 0:
            errors.append("MongoDB timeouts must be positive")

        if errors:
            raise ValueError("Configuration errors:\n- " + "\n- ".join(errors))
