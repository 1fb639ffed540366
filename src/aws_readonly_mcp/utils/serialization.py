"""JSON serialization utilities."""

from __future__ import annotations

import base64
import datetime
import decimal
import json


def json_default(obj: object) -> object:
    """JSON serializer for objects not serializable by default json code."""
    if isinstance(obj, (datetime.date, datetime.datetime)):
        return obj.isoformat()
    if isinstance(obj, decimal.Decimal):
        if obj == obj.to_integral_value():
            return int(obj)
        return float(obj)
    if isinstance(obj, bytes):
        try:
            return obj.decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(obj).decode("utf-8")
    return str(obj)


def to_json_text(payload: object) -> str:
    """Human-readable JSON used for tool response text."""
    return json.dumps(payload, ensure_ascii=True, indent=2, default=json_default)


def iso_or_none(value: object) -> str | None:
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return None


def compact(record: dict[str, object]) -> dict[str, object]:
    """Drop keys whose value is ``None``."""
    return {key: value for key, value in record.items() if value is not None}
