from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from backpacker.agents.generator import ContentGenerator
from backpacker.api.models import Job, Location, QuizQuestion
from backpacker.infra.wikipedia_client import Encyclopedia


def parse_quiz_question(raw: Any) -> QuizQuestion | None:
    """Return a question only if it is usable as-is.

    Requirements: non-empty question text, at least two distinct options, and
    an answer that is exactly one of the options. Nothing is repaired.
    """

    if not isinstance(raw, dict):
        return None

    question = raw.get("question")
    options = raw.get("options")
    answer = raw.get("answer")

    if not isinstance(question, str) or not question.strip():
        return None
    if not isinstance(options, list) or len(options) < 2:
        return None
    if not all(isinstance(o, str) for o in options):
        return None
    if len(set(options)) != len(options):
        return None
    if not isinstance(answer, str) or not answer or answer not in options:
        return None

    return QuizQuestion(question=question, options=list(options), answer=answer)


@dataclass(slots=True)
class QuizMaster:
    """Builds multiple-choice quizzes grounded in encyclopedia text.

    An empty list means "no quiz": either no article was found or no generated
    question survived validation.
    """

    generator: ContentGenerator
    encyclopedia: Encyclopedia

    async def generate_quiz(self, *, context: str, topic: str) -> list[QuizQuestion]:
        raw = await self.generator.generate_quiz(context=context, topic=topic)
        return [q for q in (parse_quiz_question(r) for r in raw) if q is not None]

    async def generate_location_quiz(self, location: Location) -> list[QuizQuestion]:
        context = await self.encyclopedia.fetch_article_content(location.label)
        if not context:
            return []
        return await self.generate_quiz(context=context, topic=location.label)

    async def generate_job_quiz(self, job: Job) -> list[QuizQuestion]:
        context = await self.encyclopedia.fetch_article_content(job.wikipedia_search_term)
        if not context:
            return []
        return await self.generate_quiz(context=context, topic=job.title)
