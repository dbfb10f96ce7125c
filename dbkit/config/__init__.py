"""
Configuration module - Environment settings and per-operation config models.
"""

from dbkit.config.settings import DatabaseSettings, ConnectionConfig

__all__ = ["DatabaseSettings", "ConnectionConfig"]
