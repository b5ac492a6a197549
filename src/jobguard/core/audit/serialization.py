"""Conversion of snapshot values to JSON-compatible primitives."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel


def serialize_value(value: Any) -> Any:
    """Serialize a value to JSON-compatible primitives.

    Recursively converts non-JSON-serializable types to their
    string or primitive representations.

    Args:
        value: Any value to serialize

    Returns:
        JSON-serializable representation of the value
    """
    # Enums first: str and int enums would otherwise pass as primitives
    if isinstance(value, Enum):
        return serialize_value(value.value)
    if value is None or isinstance(value, str | int | float | bool):
        return value

    result: Any
    if isinstance(value, UUID):
        result = str(value)
    elif isinstance(value, datetime | date):
        result = value.isoformat()
    elif isinstance(value, Decimal):
        result = str(value)
    elif isinstance(value, BaseModel):
        result = serialize_value(value.model_dump())
    elif isinstance(value, dict):
        result = {str(k): serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list | tuple | set | frozenset):
        result = [serialize_value(item) for item in value]
    else:
        # Fallback: convert to string
        result = str(value)

    return result


def snapshot(before: Any = None, after: Any = None) -> dict[str, Any] | None:
    """Build a ``{"before": ..., "after": ...}`` changes payload.

    Returns None when neither side is given.
    """
    if before is None and after is None:
        return None
    return {"before": serialize_value(before), "after": serialize_value(after)}
