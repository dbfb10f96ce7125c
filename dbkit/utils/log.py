"""
Logging helpers.

Library modules only call ``logging.getLogger(__name__)``; hosts that do
not configure logging themselves can call ``configure_logging``.
"""

import logging
from typing import Union


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure root logging with the standard dbkit format."""
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def mask_uri(uri: str) -> str:
    """Strip credentials from a connection string before logging it."""
    return uri.split("@")[-1] if "@" in uri else uri
