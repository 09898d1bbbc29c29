"""
Key naming translation between storage rows and application records.

Storage:      USER_ID, CONTACT_INFO, ADDRESS_2  (rows come back as user_id, ...)
Application:  userId,  contactInfo,  address2

Only top-level keys are translated; nested values are left alone.
"""

from __future__ import annotations

import re
from typing import Any

_UNDERSCORE_RE = re.compile(r"_([^_]?)")
_INTERNAL_RUN_RE = re.compile(r"(?<=[^_])([A-Z0-9]+)")


def application_key(key: str) -> str:
    return _UNDERSCORE_RE.sub(lambda m: m.group(1).upper(), key.lower())


def storage_key(key: str) -> str:
    return _INTERNAL_RUN_RE.sub(r"_\1", key).upper()


def _translate(record: Any, convert) -> Any:
    if not record:
        return record
    if isinstance(record, list):
        return [_translate(item, convert) for item in record]
    return {convert(k): v for k, v in record.items()}


def to_application_keys(record: Any) -> Any:
    return _translate(record, application_key)


def to_storage_keys(record: Any) -> Any:
    return _translate(record, storage_key)
