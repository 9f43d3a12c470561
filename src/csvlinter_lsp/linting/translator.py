# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Convert csvlinter JSON reports into diagnostics.

The validator's report schema changed across releases. The error list is
looked up with :data:`ERROR_LIST_RULES`, tried in order; the first path that
exists wins:

1. ``errors``
2. ``validation.errors``
3. ``results.errors``

Reports may be surrounded by banner text, so only the span between the first
``{`` and the last ``}`` is decoded.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any, Final

from ..errors import MalformedOutputError
from ..models import DiagnosticEntry, ErrorRecord

ERROR_LIST_RULES: Final[tuple[tuple[str, ...], ...]] = (
    ("errors",),
    ("validation", "errors"),
    ("results", "errors"),
)

_LINE_KEYS: Final[tuple[str, ...]] = ("line_number", "line")
_MESSAGE_KEYS: Final[tuple[str, ...]] = ("message", "description")
_KIND_KEYS: Final[tuple[str, ...]] = ("type", "kind")


def extract_json_object(raw_text: str) -> dict[str, Any]:
    """Decode the outermost JSON object embedded in ``raw_text``.

    Raises:
        MalformedOutputError: If no brace pair exists or the span is not valid JSON.
    """

    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start == -1 or end < start:
        raise MalformedOutputError("linter output does not contain a JSON object", raw=raw_text)
    try:
        payload = json.loads(raw_text[start : end + 1])
    except (ValueError, RecursionError) as exc:
        raise MalformedOutputError(f"linter output is not valid JSON: {exc}", raw=raw_text) from exc
    if not isinstance(payload, dict):
        raise MalformedOutputError("linter output is not a JSON object", raw=raw_text)
    return payload


def find_error_list(payload: Mapping[str, Any]) -> Sequence[Any]:
    """Return the error list from the first matching rule, or an empty list."""

    for path in ERROR_LIST_RULES:
        node: Any = payload
        for key in path:
            if not isinstance(node, Mapping):
                node = None
                break
            node = node.get(key)
        if node is None:
            continue
        if not isinstance(node, list):
            dotted = ".".join(path)
            raise MalformedOutputError(f"'{dotted}' in linter output is not a list")
        return node
    return []


def _coerce_line(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def _first_text(item: Mapping[str, Any], keys: Sequence[str]) -> str | None:
    for key in keys:
        value = item.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def parse_record(item: Any) -> ErrorRecord:
    """Convert one entry of the error list into an :class:`ErrorRecord`."""

    if not isinstance(item, Mapping):
        return ErrorRecord(message=json.dumps(item))
    line: int | None = None
    for key in _LINE_KEYS:
        line = _coerce_line(item.get(key))
        if line is not None:
            break
    message = _first_text(item, _MESSAGE_KEYS)
    if message is None:
        message = json.dumps(item, sort_keys=True, default=str)
    return ErrorRecord(line_number=line, message=message, kind=_first_text(item, _KIND_KEYS))


def translate(raw_text: str) -> list[DiagnosticEntry]:
    """Translate validator output into diagnostics.

    Args:
        raw_text: Standard output (or error) of a validator run.

    Returns:
        list[DiagnosticEntry]: One error-severity diagnostic per record; empty
        when the document is valid.

    Raises:
        MalformedOutputError: If the output holds no usable JSON report.
    """

    payload = extract_json_object(raw_text)
    return [DiagnosticEntry.from_record(parse_record(item)) for item in find_error_list(payload)]


__all__ = [
    "ERROR_LIST_RULES",
    "extract_json_object",
    "find_error_list",
    "parse_record",
    "translate",
]
