"""Locate and decode JSON payloads embedded in engine output."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, TypeAlias

_PAYLOAD_RE = re.compile(r"(\[[\s\S]*\]|\{[\s\S]*\})")


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class ParseFailed:
    reason: str


Decoded: TypeAlias = Ok | ParseFailed


def decode_payload(text: str) -> Decoded:
    """Decode the structured payload in ``text``.

    Engine output often carries warnings around the JSON body, so the first
    bracket- or brace-delimited span is tried before the whole text. Failure
    is an expected outcome and is returned, never raised.
    """

    trimmed = text.strip()
    if not trimmed:
        return ParseFailed("empty output")

    match = _PAYLOAD_RE.search(trimmed)
    if match is not None:
        try:
            return Ok(json.loads(match.group(1)))
        except json.JSONDecodeError:
            pass

    try:
        return Ok(json.loads(trimmed))
    except json.JSONDecodeError as exc:
        return ParseFailed(str(exc))


def decode_list(text: str) -> list[Any]:
    """Decode a JSON array payload; anything else yields an empty list."""

    decoded = decode_payload(text)
    if isinstance(decoded, Ok) and isinstance(decoded.value, list):
        return decoded.value
    return []
