from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from backpacker.agents.generator import ContentGenerator
from backpacker.api.models import Job, Location
from backpacker.core.rules import JOB_CANDIDATES_PER_ATTEMPT, MAX_JOB_ATTEMPTS, MAX_JOBS
from backpacker.infra.wikipedia_client import Encyclopedia

logger = logging.getLogger(__name__)


def _coerce_job(raw: object) -> Job | None:
    try:
        job = Job.model_validate(raw)
    except ValidationError:
        return None
    if not job.title.strip() or not job.wikipedia_search_term.strip():
        return None
    return job


@dataclass(slots=True)
class JobFinder:
    """Finds backpacker jobs whose topic has a real encyclopedia article.

    Each attempt asks the AI for a batch of candidates and checks them all
    concurrently; attempts repeat until enough jobs pass or the budget runs out.
    """

    generator: ContentGenerator
    encyclopedia: Encyclopedia
    max_jobs: int = MAX_JOBS
    max_attempts: int = MAX_JOB_ATTEMPTS
    candidates_per_attempt: int = JOB_CANDIDATES_PER_ATTEMPT

    async def _has_article(self, job: Job) -> bool:
        context = await self.encyclopedia.fetch_article_content(job.wikipedia_search_term)
        return bool(context)

    async def find_jobs(self, location: Location) -> list[Job]:
        valid_jobs: list[Job] = []
        attempts = 0

        while len(valid_jobs) < self.max_jobs and attempts < self.max_attempts:
            attempts += 1
            raw_jobs = await self.generator.generate_jobs(location, count=self.candidates_per_attempt)
            candidates = [job for job in (_coerce_job(r) for r in raw_jobs) if job is not None]

            results = await asyncio.gather(*(self._has_article(job) for job in candidates))

            seen = {j.title for j in valid_jobs}
            for job, is_valid in zip(candidates, results):
                if is_valid and len(valid_jobs) < self.max_jobs and job.title not in seen:
                    valid_jobs.append(job)
                    seen.add(job.title)

            logger.info(
                "job search attempt %d/%d in %s: %d/%d candidates valid, %d collected",
                attempts,
                self.max_attempts,
                location.label,
                sum(results),
                len(candidates),
                len(valid_jobs),
            )

        return valid_jobs
