"""Unit tests for settings, connection options and error shapes."""

import logging
import pytest
from datetime import timezone
from bson import ObjectId

from dbkit.config import ConnectionConfig, DatabaseSettings
from dbkit.utils import (
    ConnectionOpenError,
    NotConnectedError,
    DbKitError,
    configure_logging,
    generate_id,
    mask_uri,
    utcnow,
)


# ─────────────────────────────────────────────────────────────────
# DatabaseSettings
# ─────────────────────────────────────────────────────────────────


class TestDatabaseSettings:
    def test_defaults(self, monkeypatch):
        for name in ("MONGODB_URI", "MONGODB_DATABASE", "MONGODB_USER", "MONGODB_PASSWORD"):
            monkeypatch.delenv(name, raising=False)

        settings = DatabaseSettings(_env_file=None)

        assert settings.MONGODB_DATABASE == "default"
        assert settings.MONGODB_CONNECT_TIMEOUT_MS == 10000
        assert settings.MONGODB_SOCKET_TIMEOUT_MS == 10000
        assert settings.DBKIT_LEGACY_SORT_DIRECTION is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MONGODB_URI", "mongodb://db:27017")
        monkeypatch.setenv("MONGODB_DATABASE", "shop")
        monkeypatch.setenv("MONGODB_CONNECT_TIMEOUT_MS", "2000")

        settings = DatabaseSettings(_env_file=None)

        assert settings.MONGODB_URI == "mongodb://db:27017"
        assert settings.MONGODB_DATABASE == "shop"
        assert settings.MONGODB_CONNECT_TIMEOUT_MS == 2000

    def test_to_connection_config(self):
        on_error = lambda err: None
        settings = DatabaseSettings(
            _env_file=None,
            MONGODB_URI="mongodb://db:27017",
            MONGODB_DATABASE="shop",
            MONGODB_USER="app",
            MONGODB_PASSWORD="pw",
        )

        config = settings.to_connection_config(on_error=on_error)

        assert config.connection_string == "mongodb://db:27017"
        assert config.db_name == "shop"
        assert config.on_error is on_error
        assert config.client_options()["username"] == "app"

    def test_validate_required_reports_every_problem(self):
        settings = DatabaseSettings(
            _env_file=None,
            MONGODB_URI="",
            MONGODB_USER="app",
            MONGODB_PASSWORD=None,
            MONGODB_SOCKET_TIMEOUT_MS=0,
        )

        with pytest.raises(ValueError) as exc_info:
            settings.validate_required()

        message = str(exc_info.value)
        assert "MONGODB_URI" in message
        assert "MONGODB_USER and MONGODB_PASSWORD" in message
        assert "timeouts" in message

    def test_validate_required_passes(self):
        DatabaseSettings(_env_file=None, MONGODB_URI="mongodb://db").validate_required()


class TestConnectionConfig:
    def test_client_options_without_credentials(self):
        config = ConnectionConfig(connection_string="mongodb://db")

        assert config.client_options() == {
            "connectTimeoutMS": 10000,
            "socketTimeoutMS": 10000,
            "tz_aware": True,
            "tzinfo": timezone.utc,
        }

    def test_default_callbacks_are_noops(self):
        config = ConnectionConfig(connection_string="mongodb://db")

        assert config.on_connection(object()) is None
        assert config.on_error(Exception()) is None


# ─────────────────────────────────────────────────────────────────
# Errors and utilities
# ─────────────────────────────────────────────────────────────────


class TestErrors:
    def test_not_connected_shape(self):
        error = NotConnectedError("main")

        assert isinstance(error, DbKitError)
        assert error.to_dict() == {
            "message": "No connection registered for database 'main'",
            "code": "NOT_CONNECTED",
            "details": {"dbName": "main"},
        }

    def test_connection_open_error_defaults(self):
        error = ConnectionOpenError()

        assert error.code == "CONNECTION_FAILED"
        assert error.to_dict() == {
            "message": "Failed to open database connection",
            "code": "CONNECTION_FAILED",
        }


class TestUtilities:
    def test_generate_id_is_unique_object_id(self):
        first, second = generate_id(), generate_id()

        assert first != second
        assert ObjectId.is_valid(first)

    def test_utcnow_is_utc_with_millisecond_precision(self):
        now = utcnow()

        assert now.tzinfo == timezone.utc
        assert now.microsecond % 1000 == 0

    def test_mask_uri_hides_credentials(self):
        assert mask_uri("mongodb://user:secret@db:27017/app") == "db:27017/app"
        assert mask_uri("mongodb://db:27017") == "mongodb://db:27017"

    def test_configure_logging_accepts_level_names(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging("debug")

        assert calls[0]["level"] == "DEBUG"
