from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class JsonSchema:
    """Minimal JSON Schema wrapper for OpenAI-style structured outputs."""

    name: str
    schema: dict[str, Any]
    strict: bool = True

    @property
    def items_key(self) -> str | None:
        """Key of the wrapped array, for schemas built by `array_schema`."""

        props = self.schema.get("properties", {})
        if len(props) == 1:
            return next(iter(props))
        return None


def array_schema(*, name: str, items_key: str, item_properties: dict[str, Any]) -> JsonSchema:
    """Build a strict schema for a list of flat objects.

    OpenAI structured outputs require an object at the root, so the array is
    wrapped under a single key.
    """

    item = {
        "type": "object",
        "additionalProperties": False,
        "properties": item_properties,
        "required": list(item_properties),
    }
    return JsonSchema(
        name=name,
        schema={
            "type": "object",
            "additionalProperties": False,
            "properties": {items_key: {"type": "array", "items": item}},
            "required": [items_key],
        },
        strict=True,
    )


DESTINATIONS_SCHEMA = array_schema(
    name="travel_destinations",
    items_key="destinations",
    item_properties={
        "city": {"type": "string"},
        "country": {"type": "string"},
        "latitude": {"type": "number"},
        "longitude": {"type": "number"},
    },
)

JOBS_SCHEMA = array_schema(
    name="backpacker_jobs",
    items_key="jobs",
    item_properties={
        "title": {"type": "string"},
        "description": {"type": "string"},
        "wikipediaSearchTerm": {"type": "string"},
    },
)

QUIZ_SCHEMA = array_schema(
    name="quiz_questions",
    items_key="questions",
    item_properties={
        "question": {"type": "string"},
        "options": {"type": "array", "items": {"type": "string"}},
        "answer": {"type": "string"},
    },
)
