"""Helpers for safe debug logging.

Requests to the alarm service carry the account password, the session
token and the keypad PIN in plain form fields. Secrets are replaced
outright. Identifiers (token, IMEI, e-mail) keep their last characters so
token rotation and device mix-ups stay visible in a debug log.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

REDACTED = "<redacted>"

_SECRET_KEYS: frozenset[str] = frozenset({"password", "pin", "keypadpin", "authorization", "cookie"})
_IDENTIFIER_KEYS: frozenset[str] = frozenset({"token", "imei", "clientimei", "email"})

_VISIBLE_TAIL = 4
_MAX_DEPTH = 8


def mask_identifier(value: Any) -> str:
    """Keep the last few characters of *value*; short values are fully hidden."""
    text = str(value)
    if len(text) <= _VISIBLE_TAIL * 2:
        return REDACTED
    return f"{REDACTED}{text[-_VISIBLE_TAIL:]}"


def _redact_field(key: str, value: Any, max_string: int, depth: int) -> Any:
    folded = key.lower()
    if folded in _SECRET_KEYS:
        return REDACTED
    if folded in _IDENTIFIER_KEYS and value is not None:
        return mask_identifier(value)
    return _redact(value, max_string, depth + 1)


def _redact(value: Any, max_string: int, depth: int) -> Any:
    if depth > _MAX_DEPTH:
        return "<nested>"
    if isinstance(value, BaseModel):
        value = {name: getattr(value, name) for name in type(value).model_fields if name != "raw"}
    if isinstance(value, Mapping):
        return {str(k): _redact_field(str(k), v, max_string, depth) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_redact(item, max_string, depth + 1) for item in value]
    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}...<{len(value) - max_string} more chars>"
    return value


def redact_for_log(value: Any, *, max_string: int = 256) -> Any:
    """Return a copy of a request or response payload that is safe to log.

    Accepts form/query mappings, decoded JSON bodies and response models.
    """
    return _redact(value, max_string, 0)
