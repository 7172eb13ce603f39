"""
Module 01 - Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic serialization of transcripts, rubrics and ledger
snapshots. The transcript hash anchored on the ledger is computed over
the output of dumps_canonical, so this output must not vary across runs.
"""

import json
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def ensure_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime; naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime_canonical(dt: datetime) -> str:
    """
    Format a datetime as ISO-8601 with a Z suffix.

    Microseconds are only written when non-zero, e.g. "2026-01-27T21:35:00Z".
    """
    utc_dt = ensure_utc(dt)
    if utc_dt.microsecond:
        return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return utc_dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively reduce a value to plain JSON types.

    Rules:
        - dict entries whose value is None are dropped
        - datetimes become ISO-8601 Z strings
        - enums become their values
        - pydantic models are dumped field by field, excluding None
        - NaN / Infinity raise CanonicalizationException

    Raises:
        CanonicalizationException: If the value has no canonical form.
    """
    if isinstance(value, Enum):
        return value.value

    if value is None or isinstance(value, (bool, int, str)):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise CanonicalizationException(
                message=f"Non-finite float value encountered: {value}",
                details={"path": path, "value": str(value)},
            )
        return value

    if isinstance(value, datetime):
        return format_datetime_canonical(value)

    if isinstance(value, BaseModel):
        return canonicalize_value(
            value.model_dump(mode="python", by_alias=True, exclude_none=True),
            path,
        )

    if isinstance(value, dict):
        return {
            str(k): canonicalize_value(v, f"{path}.{k}" if path else str(k))
            for k, v in value.items()
            if v is not None
        }

    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, f"{path}[{i}]") for i, item in enumerate(value)]

    if isinstance(value, bytes):
        return value.hex()

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string (sorted keys, no whitespace).

    Example:
        >>> dumps_canonical({"b": 2, "a": 1, "at": datetime(2026, 1, 27, 21, 35)})
        '{"a":1,"at":"2026-01-27T21:35:00Z","b":2}'
    """
    try:
        return json.dumps(
            canonicalize_value(obj),
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
        )
    except CanonicalizationException:
        raise
    except (TypeError, ValueError) as e:
        raise CanonicalizationException(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e


def loads_canonical(json_str: str) -> Any:
    """Parse a canonical JSON string. Datetimes stay as strings."""
    return json.loads(json_str)


def canonical_equals(obj1: Any, obj2: Any) -> bool:
    """True if both objects have the same canonical JSON form."""
    try:
        return dumps_canonical(obj1) == dumps_canonical(obj2)
    except CanonicalizationException:
        return False
