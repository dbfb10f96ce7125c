"""Unit tests for update payload sanitizing."""

import pytest
from datetime import datetime, timezone

from dbkit.query import UNDEFINED, sanitize_update


NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestSanitizeUpdate:
    def test_stamps_updated_date(self):
        result = sanitize_update({"name": "x"}, now=NOW)

        assert result == {"updatedDate": NOW, "name": "x"}

    def test_stamps_current_time_by_default(self):
        before = datetime.now(timezone.utc)

        result = sanitize_update({})

        assert before <= result["updatedDate"] <= datetime.now(timezone.utc)

    @pytest.mark.parametrize("payload", [
        {"id": "abc"},
        {"id": "abc", "name": "x"},
        {"id": None, "status": "done"},
    ])
    def test_identity_field_never_survives(self, payload):
        assert "id" not in sanitize_update(payload, now=NOW)

    def test_custom_identity_field(self):
        result = sanitize_update({"uuid": "1", "id": "2"}, identity_field="uuid", now=NOW)

        assert "uuid" not in result
        assert result["id"] == "2"

    def test_undefined_values_are_dropped(self):
        result = sanitize_update({"name": UNDEFINED, "age": 3}, now=NOW)

        assert "name" not in result
        assert result["age"] == 3

    def test_none_is_kept(self):
        result = sanitize_update({"nickname": None}, now=NOW)

        assert "nickname" in result
        assert result["nickname"] is None

    def test_caller_updated_date_wins(self):
        explicit = datetime(2020, 1, 1, tzinfo=timezone.utc)

        result = sanitize_update({"updatedDate": explicit}, now=NOW)

        assert result["updatedDate"] == explicit

    def test_input_not_mutated(self):
        payload = {"id": "1", "name": UNDEFINED}

        sanitize_update(payload, now=NOW)

        assert payload == {"id": "1", "name": UNDEFINED}

    def test_undefined_sentinel_is_singleton_and_falsy(self):
        assert type(UNDEFINED)() is UNDEFINED
        assert not UNDEFINED
        assert repr(UNDEFINED) == "UNDEFINED"
