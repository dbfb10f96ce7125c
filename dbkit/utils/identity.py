"""Identity and timestamp helpers shared by accessors and the update sanitizer."""

from datetime import datetime, timezone

from bson import ObjectId


def generate_id() -> str:
    """Generate a globally unique opaque id (ObjectId hex string)."""
    return str(ObjectId())


def utcnow() -> datetime:
    """
    Get current UTC time (timezone-aware), truncated to milliseconds.

    BSON dates carry millisecond precision, so a stamp returned to the
    caller equals the one read back from the store.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)
