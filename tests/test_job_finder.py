from __future__ import annotations

import httpx
import pytest

from backpacker.agents.generator import ContentGenerator
from backpacker.agents.job_finder import JobFinder
from backpacker.api.models import Location
from backpacker.infra.wikipedia_client import WikipediaClient
from tests.fakes import FakeEncyclopedia, ScriptedAgent, jobs_payload

LISBON = Location(city="Lisbon", country="Portugal", latitude=38.7223, longitude=-9.1393)


def _finder(agent: ScriptedAgent, encyclopedia: FakeEncyclopedia) -> JobFinder:
    return JobFinder(generator=ContentGenerator(agent=agent), encyclopedia=encyclopedia)


async def test_collects_at_most_five_valid_jobs_in_one_attempt() -> None:
    titles = [f"Job {i}" for i in range(8)]
    agent = ScriptedAgent().always("backpacker_jobs", jobs_payload(*titles))
    encyclopedia = FakeEncyclopedia(default="Some article text.")

    jobs = await _finder(agent, encyclopedia).find_jobs(LISBON)

    assert [j.title for j in jobs] == titles[:5]
    assert len(agent.calls_for("backpacker_jobs")) == 1


async def test_drops_jobs_without_an_article() -> None:
    agent = ScriptedAgent().always("backpacker_jobs", jobs_payload("Tour Guide", "Barista", "Surf Instructor"))
    encyclopedia = FakeEncyclopedia(articles={"Tour Guide": "Guides lead tours.", "Barista": "Coffee."})

    jobs = await _finder(agent, encyclopedia).find_jobs(LISBON)

    assert sorted(j.title for j in jobs) == ["Barista", "Tour Guide"]


async def test_never_returns_duplicate_titles_across_attempts() -> None:
    agent = (
        ScriptedAgent()
        .queue("backpacker_jobs", jobs_payload("Tour Guide", "Tour Guide", "Barista"))
        .queue("backpacker_jobs", jobs_payload("Barista", "Cook"))
        .queue("backpacker_jobs", jobs_payload("Tour Guide", "Cook", "Waiter"))
    )
    encyclopedia = FakeEncyclopedia(default="article")

    jobs = await _finder(agent, encyclopedia).find_jobs(LISBON)

    titles = [j.title for j in jobs]
    assert titles == ["Tour Guide", "Barista", "Cook", "Waiter"]
    assert len(titles) == len(set(titles))


async def test_stops_after_exactly_three_attempts_when_short() -> None:
    agent = ScriptedAgent().always("backpacker_jobs", jobs_payload("Tour Guide", "Barista"))
    encyclopedia = FakeEncyclopedia(articles={"Tour Guide": "article"})

    jobs = await _finder(agent, encyclopedia).find_jobs(LISBON)

    assert [j.title for j in jobs] == ["Tour Guide"]
    assert len(agent.calls_for("backpacker_jobs")) == 3


async def test_returns_empty_when_nothing_validates() -> None:
    agent = ScriptedAgent().always("backpacker_jobs", jobs_payload("Ghost Hunter"))
    encyclopedia = FakeEncyclopedia()

    assert await _finder(agent, encyclopedia).find_jobs(LISBON) == []
    assert len(agent.calls_for("backpacker_jobs")) == 3


async def test_lookups_run_concurrently_within_an_attempt() -> None:
    titles = [f"Job {i}" for i in range(8)]
    agent = ScriptedAgent().always("backpacker_jobs", jobs_payload(*titles, term_suffix=" (occupation)"))
    encyclopedia = FakeEncyclopedia(default="article")

    await _finder(agent, encyclopedia).find_jobs(LISBON)

    assert encyclopedia.max_in_flight == 8
    assert encyclopedia.calls[0] == "Job 0 (occupation)"


async def test_skips_malformed_job_entries() -> None:
    payload = {
        "jobs": [
            {"title": "", "description": "x", "wikipediaSearchTerm": "Blank"},
            {"title": "No Term", "description": "x"},
            {"title": "Cook", "description": "x", "wikipediaSearchTerm": "Cooking"},
        ]
    }
    agent = ScriptedAgent().always("backpacker_jobs", payload)
    encyclopedia = FakeEncyclopedia(default="article")

    jobs = await _finder(agent, encyclopedia).find_jobs(LISBON)

    assert [j.title for j in jobs] == ["Cook"]
    assert jobs[0].wikipedia_search_term == "Cooking"
    assert encyclopedia.calls.count("Blank") == 0


async def test_ai_failure_propagates() -> None:
    agent = ScriptedAgent().queue("backpacker_jobs", "nope")

    with pytest.raises(RuntimeError):
        await _finder(agent, FakeEncyclopedia()).find_jobs(LISBON)


async def test_odd_wikipedia_payload_counts_as_no_article() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["titles"] == "Barista":
            return httpx.Response(200, json={"query": ["unexpected"]})
        return httpx.Response(200, json={"query": {"pages": {"7": {"extract": "Some article text."}}}})

    agent = ScriptedAgent().always("backpacker_jobs", jobs_payload("Tour Guide", "Barista"))
    encyclopedia = WikipediaClient(api_url="https://wiki.test/w/api.php", transport=httpx.MockTransport(handler))
    finder = JobFinder(generator=ContentGenerator(agent=agent), encyclopedia=encyclopedia)

    jobs = await finder.find_jobs(LISBON)

    assert [j.title for j in jobs] == ["Tour Guide"]
