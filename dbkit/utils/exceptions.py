"""
Data-access exceptions with error codes.

Every exception carries a human-readable message, a machine-readable code
and optional details, so host applications can map them onto their own
error responses.

Driver failures (network, duplicate key, ...) are not wrapped: they reach
the caller as the original ``pymongo.errors.PyMongoError``.

Example:
    from dbkit.utils import NotConnectedError

    try:
        user = await users.find_by_id(user_id)
    except NotConnectedError as e:
        logger.error(f"{e.code}: {e.message}")
"""

from typing import Optional, Any, Dict


class DbKitError(Exception):
    """
    Base data-access exception with error code support.

    Provides a consistent error shape across the library.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        """
        Create a data-access exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
        """
        self.message = message
        self.code = code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error the way API layers usually report it."""
        detail: Dict[str, Any] = {"message": self.message}

        if self.code:
            detail["code"] = self.code

        if self.details is not None:
            detail["details"] = self.details

        return detail


class ConnectionOpenError(DbKitError):
    """Opening a named connection failed. Delivered through ``on_error`` only."""

    def __init__(
        self,
        message: str = "Failed to open database connection",
        code: str = "CONNECTION_FAILED",
        db_name: Optional[str] = None,
    ):
        super().__init__(message, code, {"dbName": db_name} if db_name else None)
        self.db_name = db_name


class NotConnectedError(DbKitError):
    """An accessor was used against a database name with no registered connection."""

    def __init__(
        self,
        db_name: str,
        message: Optional[str] = None,
        code: str = "NOT_CONNECTED",
    ):
        super().__init__(
            message or f"No connection registered for database '{db_name}'",
            code,
            {"dbName": db_name},
        )
        self.db_name = db_name


class CustomFunctionNotFoundError(DbKitError):
    """No custom function is registered on the accessor under the given name."""

    def __init__(
        self,
        name: str,
        code: str = "CUSTOM_FUNCTION_NOT_FOUND",
    ):
        super().__init__(f"Custom function '{name}' is not registered", code, {"name": name})
        self.name = name
