from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

_FENCE_RE = re.compile(r"^```(?:json)?\s*|```\s*$", re.IGNORECASE)


class InvalidAIResponseError(RuntimeError):
    """The AI service returned something we cannot use (bad JSON or wrong shape)."""


@dataclass(frozen=True, slots=True)
class JsonOk:
    data: Any


@dataclass(frozen=True, slots=True)
class JsonParseError:
    reason: str
    raw: str


JsonResult = JsonOk | JsonParseError


def strip_code_fence(text: str) -> str:
    return _FENCE_RE.sub("", text.strip()).strip()


def parse_ai_json(text: str | None) -> JsonResult:
    """Parse model output as JSON, tolerating a surrounding ```json fence.

    Never raises; callers decide what a parse error means.
    """

    if not text or not text.strip():
        return JsonParseError(reason="Received empty response from AI", raw=text or "")

    cleaned = strip_code_fence(text)
    try:
        return JsonOk(data=json.loads(cleaned))
    except json.JSONDecodeError as e:
        return JsonParseError(reason=f"Invalid JSON: {e}", raw=text)


def extract_items(data: Any, *, items_key: str | None) -> list[Any]:
    """Return the list payload from a wrapped object or a bare array.

    Raises InvalidAIResponseError if neither shape matches.
    """

    if isinstance(data, list):
        return data
    if isinstance(data, dict) and items_key is not None:
        items = data.get(items_key)
        if isinstance(items, list):
            return items
        raise InvalidAIResponseError(f"Expected a list under '{items_key}'")
    raise InvalidAIResponseError("Expected a JSON array")
