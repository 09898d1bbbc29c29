"""
Schema-driven coercion between storage rows and application records.

- `to_application(record, schema)`: row values -> application values
- `to_storage(record, schema)`:     application values -> query parameters
- `project(record, schema)`:        keep only the keys the schema declares

All three accept a single dict or a list of dicts. Per-field parse failures
never fail the call; the field is set to None instead.

`is_outermost` separates the top-level call from the recursive calls made for
nested entities: a nested entity lives in a single text column at the top
level (JSON encoded), and as a plain dict once we are inside it.
"""

from __future__ import annotations

import copy
import json
import math
import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import CoercionFailure
from .fields import (
    ArrayOfString,
    Boolean,
    Computed,
    Date,
    Enum,
    Field,
    Json,
    Literal,
    NestedEntity,
    Number,
    Record,
    Schema,
    String,
    Transient,
)

_MISSING = object()
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any) -> int | None:
    """
    Integer parse in the lenient sense: "42" -> 42, "42px" -> 42, 3.9 -> 3,
    anything non-numeric -> None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, Decimal):
        try:
            return int(value)
        except (ValueError, OverflowError, InvalidOperation):
            return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        return int(match.group(1)) if match else None
    return None


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse a datetime/date, an ISO-8601 string or epoch milliseconds into an
    aware UTC datetime. Naive values are taken as UTC.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_datetime(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_json(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return value
    if not isinstance(value, (str, bytes, bytearray)):
        raise CoercionFailure(f"Cannot parse JSON from {type(value).__name__}.")
    try:
        return json.loads(value)
    except ValueError as exc:
        raise CoercionFailure(str(exc)) from exc


def _dump_json(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as exc:
        raise CoercionFailure(str(exc)) from exc


def _application_value(
    rule: Any,
    value: Any,
    *,
    is_outermost: bool,
    record: Record,
) -> Any:
    match rule:
        case Boolean():
            return None if value is None else bool(value)
        case ArrayOfString():
            return value.split(",") if isinstance(value, str) and value else []
        case Number():
            return parse_int(value)
        case Date():
            parsed = parse_datetime(value)
            return format_datetime(parsed) if parsed is not None else None
        case Json():
            if not value:
                return None
            try:
                return _parse_json(value)
            except CoercionFailure:
                return None
        case String():
            return None if value is None else str(value)
        case NestedEntity(schema=schema):
            if not value:
                return value
            try:
                nested = _parse_json(value) if is_outermost and not isinstance(value, dict) else value
                if not isinstance(nested, (dict, list)):
                    raise CoercionFailure("Nested entity is not an object.")
                return to_application(nested, schema, is_outermost=False, parent=record)
            except (CoercionFailure, TypeError, ValueError, AttributeError):
                return None
        case Enum():
            return rule.to_application(value)
    return value


def _apply_application_field(
    record: Record,
    key: str,
    spec: Field,
    *,
    is_outermost: bool,
    parent: Record | None,
) -> None:
    rule = spec.entity
    if rule is None:
        return

    value = record.get(key, _MISSING)
    if value is not _MISSING:
        value = _application_value(rule, value, is_outermost=is_outermost, record=record)

    match rule:
        case Computed(fn=fn):
            try:
                value = fn(record, parent)
            except Exception:
                value = None
        case Literal(text=text):
            value = text

    if value is not _MISSING:
        record[key] = value


def to_application(
    record: Any,
    schema: Schema,
    *,
    is_outermost: bool = True,
    parent: Record | None = None,
) -> Any:
    """
    Coerce a row (already translated to application keys) in place.

    Keys missing from the row stay missing; keys not in the schema are left
    untouched.
    """
    if isinstance(record, list):
        for item in record:
            to_application(item, schema, is_outermost=is_outermost, parent=parent)
        return record
    if not record:
        return record

    for key, spec in schema.items():
        _apply_application_field(record, key, spec, is_outermost=is_outermost, parent=parent)
    return record


def _storage_value(rule: Any, value: Any, *, is_outermost: bool) -> Any:
    match rule:
        case Boolean():
            return None if value is None else bool(value)
        case Number():
            return parse_int(value)
        case Date():
            return parse_datetime(value)
        case Json():
            if value is None:
                return None
            try:
                return _dump_json(value)
            except CoercionFailure:
                return None
        case String() | ArrayOfString():
            if isinstance(value, (list, tuple)):
                return ",".join(str(item) for item in value)
            return value
        case NestedEntity(schema=schema):
            if not value:
                return value
            try:
                if not isinstance(value, (dict, list)):
                    raise CoercionFailure("Nested entity is not an object.")
                nested = to_storage(value, schema, is_outermost=False)
                return _dump_json(nested) if is_outermost else nested
            except (CoercionFailure, TypeError, ValueError, AttributeError):
                return None
        case Enum():
            return rule.to_storage(value)
        case Literal(text=text):
            return text
    return value


def _apply_storage_field(record: Record, key: str, spec: Field, *, is_outermost: bool) -> None:
    rule = spec.db

    if rule is None:
        if isinstance(spec.entity, Computed):
            record.pop(key, None)
        return

    if isinstance(rule, Transient):
        record.pop(key, None)
        return

    value = record.get(key, _MISSING)
    if value is not _MISSING:
        value = _storage_value(rule, value, is_outermost=is_outermost)

    if isinstance(rule, Computed):
        value = rule.fn(record, None)

    if value is not _MISSING:
        record[key] = value


def to_storage(record: Any, schema: Schema, *, is_outermost: bool = True) -> Any:
    """
    Build the storage form of an application record.

    Works on a deep copy that is strict-projected first, so undeclared keys
    never reach a write.
    """
    if record is None:
        return None

    result = project(copy.deepcopy(record), schema)
    rows = result if isinstance(result, list) else [result]
    for row in rows:
        if not isinstance(row, dict):
            continue
        for key, spec in schema.items():
            _apply_storage_field(row, key, spec, is_outermost=is_outermost)
    return result


def project(record: Any, schema: Schema) -> Any:
    """
    Return a new record holding only the keys declared by `schema`.

    Nested entities are projected against their own schema. Absent keys stay
    absent.
    """
    if isinstance(record, list):
        return [project(item, schema) for item in record]
    if not isinstance(record, dict):
        return record

    projected: Record = {}
    for key, spec in schema.items():
        if key not in record:
            continue
        value = record[key]
        if isinstance(spec.entity, NestedEntity):
            projected[key] = project(value, spec.entity.schema)
        else:
            projected[key] = value
    return projected
