"""Update payload sanitizing."""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from dbkit.utils.identity import utcnow

IDENTITY_FIELD = "id"
CREATED_FIELD = "createdDate"
UPDATED_FIELD = "updatedDate"


class _Undefined:
    """Marks a field the caller left out on purpose. Never stored."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Any = _Undefined()


def sanitize_update(
    data: Mapping[str, Any],
    identity_field: str = IDENTITY_FIELD,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the ``$set`` payload for a partial update.

    Drops keys mapped to ``UNDEFINED`` and the identity field, and stamps
    ``updatedDate``. ``None`` is a real value and is kept. A caller supplied
    ``updatedDate`` wins over the stamp.
    """
    update_data: Dict[str, Any] = {UPDATED_FIELD: now or utcnow()}

    for key, value in data.items():
        if value is UNDEFINED or key == identity_field:
            continue
        update_data[key] = value

    return update_data
