"""
Utilities module - Exceptions, identity helpers and logging setup.
"""

from dbkit.utils.exceptions import (
    DbKitError,
    ConnectionOpenError,
    NotConnectedError,
    CustomFunctionNotFoundError,
)
from dbkit.utils.identity import generate_id, utcnow
from dbkit.utils.log import configure_logging, mask_uri

__all__ = [
    "DbKitError",
    "ConnectionOpenError",
    "NotConnectedError",
    "CustomFunctionNotFoundError",
    "generate_id",
    "utcnow",
    "configure_logging",
    "mask_uri",
]
