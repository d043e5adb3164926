from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from backpacker.agents.base import Agent
from backpacker.agents.json_output import InvalidAIResponseError, JsonParseError, extract_items, parse_ai_json
from backpacker.agents.json_schema import DESTINATIONS_SCHEMA, JOBS_SCHEMA, QUIZ_SCHEMA, JsonSchema
from backpacker.api.models import Location
from backpacker.contexts import make_guide_context
from backpacker.core.rules import DESTINATION_COUNT, JOB_CANDIDATES_PER_ATTEMPT, QUIZ_QUESTION_COUNT
from backpacker.prompts import render_prompt

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ContentGenerator:
    """Structured-output requests to the guide agent.

    Every call returns the raw list of objects the model produced. Bad JSON or
    the wrong top-level shape raises InvalidAIResponseError; item-level
    validation is left to the callers.
    """

    agent: Agent

    async def generate(self, *, prompt: str, schema: JsonSchema, location: Location | None = None) -> list[Any]:
        ctx = make_guide_context(location=location, activity=schema.name)
        action = await self.agent.propose_action(prompt=prompt, ctx=ctx, structured_output=schema)

        parsed = parse_ai_json(action.content)
        if isinstance(parsed, JsonParseError):
            logger.error("AI returned unparseable %s output: %s", schema.name, parsed.reason)
            raise InvalidAIResponseError(f"AI returned an invalid response format ({parsed.reason})")

        return extract_items(parsed.data, items_key=schema.items_key)

    async def generate_destinations(self, location: Location, *, count: int = DESTINATION_COUNT) -> list[Any]:
        prompt = render_prompt("destinations.txt", city=location.city, country=location.country, count=count)
        return await self.generate(prompt=prompt, schema=DESTINATIONS_SCHEMA, location=location)

    async def generate_jobs(self, location: Location, *, count: int = JOB_CANDIDATES_PER_ATTEMPT) -> list[Any]:
        prompt = render_prompt("jobs.txt", city=location.city, country=location.country, count=count)
        return await self.generate(prompt=prompt, schema=JOBS_SCHEMA, location=location)

    async def generate_quiz(self, *, context: str, topic: str, count: int = QUIZ_QUESTION_COUNT) -> list[Any]:
        prompt = render_prompt("quiz.txt", topic=topic, context=context, count=count)
        return await self.generate(prompt=prompt, schema=QUIZ_SCHEMA)
