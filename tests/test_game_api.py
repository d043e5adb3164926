from __future__ import annotations

import pytest

from backpacker.api.models import Location
from backpacker.core.rules import STARTING_CITIES
from tests.fakes import destinations_payload, quiz_payload

LONDON_INDEX = 1
FAR_SIDE = Location(city="Far Side", country="Pacific", latitude=38.4926, longitude=179.8722)
NEXT_HOP = Location(city="Next Hop", country="Pacific", latitude=38.4926, longitude=179.0)
# Half the Earth's circumference from London: a ticket costs 5004, more than the starting 5000.
LONDON_ANTIPODE = Location(city="Antipodes", country="Ocean", latitude=-51.5074, longitude=179.8722)


def test_cities_lists_starting_cities(client_and_fakes) -> None:  # type: ignore[no-untyped-def]
    client, _, _ = client_and_fakes
    resp = client.get("/cities")
    assert resp.status_code == 200
    assert [c["city"] for c in resp.json()["cities"]] == [c.city for c in STARTING_CITIES]


def test_post_game_starts_at_city_selection(client_and_fakes) -> None:  # type: ignore[no-untyped-def]
    client, _, _ = client_and_fakes

    resp = client.post("/game")
    assert resp.status_code == 201
    data = resp.json()

    assert data["phase"] == "select_start_city"
    assert data["dashboard"]["status"] == "Select a Starting City"
    assert data["dashboard"]["money"] is None
    assert [i["action"] for i in data["panel"]["items"]] == ["select-city"] * len(STARTING_CITIES)
    assert data["map"]["markers"] == []

    again = client.get(f"/game/{data['game_id']}")
    assert again.status_code == 200
    assert again.json()["game_id"] == data["game_id"]


def test_post_game_blocked_without_credentials(client_and_fakes, monkeypatch: pytest.MonkeyPatch) -> None:  # type: ignore[no-untyped-def]
    client, _, _ = client_and_fakes
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)

    resp = client.post("/game")
    assert resp.status_code == 503
    assert resp.json()["detail"].startswith("AI API key is missing.")

    info = client.get("/info").json()
    assert info["ready"] is False


def test_local_base_url_counts_as_credentials(client_and_fakes, monkeypatch: pytest.MonkeyPatch) -> None:  # type: ignore[no-untyped-def]
    client, _, _ = client_and_fakes
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_BASE_URL", "http://127.0.0.1:11434/v1")

    assert client.post("/game").status_code == 201
    assert client.get("/info").json()["ready"] is True


def test_full_round_through_the_api(client_and_fakes) -> None:  # type: ignore[no-untyped-def]
    client, agent, encyclopedia = client_and_fakes
    encyclopedia.articles = {"London, UK": "London is the capital of the UK."}
    agent.queue("quiz_questions", quiz_payload(1))
    agent.always("backpacker_jobs", {"jobs": []})
    agent.queue("travel_destinations", destinations_payload(FAR_SIDE), destinations_payload(NEXT_HOP))

    gid = client.post("/game").json()["game_id"]

    quiz = client.post(f"/game/{gid}/city", json={"index": LONDON_INDEX})
    assert quiz.status_code == 200
    data = quiz.json()
    assert data["phase"] == "location_quiz"
    assert data["panel"]["title"] == "Welcome to London!"
    assert data["panel"]["question"] == "Question 1?"
    assert data["panel"]["description"] == "Question 1 of 1 | Score: 0"
    assert data["dashboard"]["money"] == 5000
    assert data["dashboard"]["location"] == "London, UK"
    assert data["map"]["markers"][0]["label"] == "London, UK"

    travel = client.post(f"/game/{gid}/answer", json={"answer": "A"})
    assert travel.status_code == 200
    data = travel.json()
    assert data["last_answer"]["correct"] is True
    # No jobs anywhere, so Select-Job is skipped.
    assert data["phase"] == "travel_planning"
    assert data["dashboard"]["money"] == 5100
    item = data["panel"]["items"][0]
    assert item["action"] == "select-destination"
    assert item["title"] == "Far Side, Pacific"
    assert item["subtitle"] == "Plane"
    assert item["cost"] == 2502
    assert item["disabled"] is False

    moved = client.post(f"/game/{gid}/destination", json={"index": 0})
    assert moved.status_code == 200
    data = moved.json()
    assert data["dashboard"]["money"] == 2598
    assert data["dashboard"]["progress_text"] == "180°/360°"
    assert data["dashboard"]["progress_percent"] == pytest.approx(50)
    assert len(data["map"]["polylines"]) == 1
    assert [m["label"] for m in data["map"]["markers"]] == ["London, UK", "Far Side, Pacific"]
    # No article for Far Side and still no jobs: straight on to the next leg.
    assert data["phase"] == "travel_planning"
    item = data["panel"]["items"][0]
    assert item["title"] == "Next Hop, Pacific"
    assert item["subtitle"] == "Bus"
    assert item["disabled"] is False


def test_stranded_player_sees_game_over_and_can_restart(client_and_fakes) -> None:  # type: ignore[no-untyped-def]
    client, agent, _ = client_and_fakes
    agent.always("backpacker_jobs", {"jobs": []})
    agent.queue("travel_destinations", destinations_payload(LONDON_ANTIPODE))

    gid = client.post("/game").json()["game_id"]
    data = client.post(f"/game/{gid}/city", json={"index": LONDON_INDEX}).json()

    assert data["phase"] == "game_over"
    assert data["dashboard"]["status"] == "Game Over"
    assert data["panel"]["items"] == [
        {
            "action": "restart",
            "index": None,
            "title": "Start a New Journey",
            "subtitle": None,
            "description": None,
            "cost": None,
            "disabled": False,
        }
    ]

    restarted = client.post(f"/game/{gid}/restart")
    assert restarted.status_code == 200
    data = restarted.json()
    assert data["phase"] == "select_start_city"
    assert data["dashboard"]["money"] is None
    assert data["map"]["markers"] == []
    assert data["map"]["polylines"] == []


def test_intents_out_of_phase_are_422(client_and_fakes) -> None:  # type: ignore[no-untyped-def]
    client, _, _ = client_and_fakes
    gid = client.post("/game").json()["game_id"]

    assert client.post(f"/game/{gid}/answer", json={"answer": "A"}).status_code == 422
    assert client.post(f"/game/{gid}/job", json={"index": 0}).status_code == 422
    assert client.post(f"/game/{gid}/destination", json={"index": 0}).status_code == 422
    assert client.post(f"/game/{gid}/city", json={"index": 99}).status_code == 422
    assert client.post(f"/game/{gid}/city", json={"index": -1}).status_code == 422


def test_unknown_game_is_404(client_and_fakes) -> None:  # type: ignore[no-untyped-def]
    client, _, _ = client_and_fakes
    missing = "00000000-0000-0000-0000-000000000000"
    assert client.get(f"/game/{missing}").status_code == 404
    assert client.post(f"/game/{missing}/restart").status_code == 404
    assert client.delete(f"/game/{missing}").status_code == 404


def test_delete_game_forgets_session(client_and_fakes) -> None:  # type: ignore[no-untyped-def]
    client, _, _ = client_and_fakes
    gid = client.post("/game").json()["game_id"]
    assert client.delete(f"/game/{gid}").status_code == 204
    assert client.get(f"/game/{gid}").status_code == 404


def test_healthcheck_and_root_redirect(client_and_fakes) -> None:  # type: ignore[no-untyped-def]
    client, _, _ = client_and_fakes
    assert client.get("/healthcheck").json() == {"status": "ok"}
    resp = client.get("/", follow_redirects=False)
    assert resp.status_code == 307
    assert resp.headers["location"] == "/docs"
