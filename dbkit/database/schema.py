"""
Advisory field schemas.

A schema maps field names to a FieldType. Types document the shape of a
collection; they are never checked against stored data.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping

from dbkit.query.sanitizer import CREATED_FIELD, IDENTITY_FIELD, UPDATED_FIELD


class FieldType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    OBJECT = "object"
    ARRAY = "array"


_PYTHON_TYPES = {
    str: FieldType.STRING,
    int: FieldType.NUMBER,
    float: FieldType.NUMBER,
    bool: FieldType.BOOLEAN,
    datetime: FieldType.DATE,
    dict: FieldType.OBJECT,
    list: FieldType.ARRAY,
}

# Maintained by every accessor
MANAGED_FIELDS = {
    IDENTITY_FIELD: FieldType.STRING,
    CREATED_FIELD: FieldType.DATE,
    UPDATED_FIELD: FieldType.DATE,
}


def to_field_type(tag: Any) -> FieldType:
    """Accept a FieldType, its string tag, or a Python type."""
    if isinstance(tag, FieldType):
        return tag
    if isinstance(tag, type) and tag in _PYTHON_TYPES:
        return _PYTHON_TYPES[tag]
    if isinstance(tag, str):
        return FieldType(tag.lower())
    raise ValueError(f"Unsupported field type: {tag!r}")


def build_schema(fields: Mapping[str, Any]) -> Dict[str, FieldType]:
    """Normalize declared fields and add the managed ones."""
    schema = {name: to_field_type(tag) for name, tag in fields.items()}
    for name, field_type in MANAGED_FIELDS.items():
        schema.setdefault(name, field_type)
    return schema
