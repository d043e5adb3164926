from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from tests.fakes import FakeEncyclopedia, ScriptedAgent


@pytest.fixture(scope="session", autouse=True)
def _load_dotenv_for_tests() -> None:
    """Load repo .env for local runs so env-gated integration tests can see OPENAI_*.

    Opt-in only: set BACKPACKER_LOAD_DOTENV_FOR_TESTS=1. Unit tests never need it.
    """

    if os.environ.get("BACKPACKER_LOAD_DOTENV_FOR_TESTS") != "1":
        return

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=env_path, override=False)

    # If using a local OpenAI-compatible endpoint, some clients require a key string.
    if os.environ.get("OPENAI_BASE_URL") and not os.environ.get("OPENAI_API_KEY"):
        os.environ["OPENAI_API_KEY"] = "ollama"


@pytest.fixture()
def agent() -> ScriptedAgent:
    return ScriptedAgent()


@pytest.fixture()
def encyclopedia() -> FakeEncyclopedia:
    return FakeEncyclopedia()


@pytest.fixture()
def client_and_fakes(
    monkeypatch: pytest.MonkeyPatch, agent: ScriptedAgent, encyclopedia: FakeEncyclopedia
) -> Generator[tuple[object, ScriptedAgent, FakeEncyclopedia], None, None]:
    """FastAPI TestClient wired to scripted AI + encyclopedia doubles and a fresh session store."""

    from fastapi.testclient import TestClient

    from backpacker.api.deps import get_game_loop, get_store
    from backpacker.game_loop import GameLoop
    from backpacker.main import app
    from backpacker.session_store import SessionStore

    monkeypatch.setenv("OPENAI_API_KEY", "test-key")

    store = SessionStore()
    loop = GameLoop.from_services(agent=agent, encyclopedia=encyclopedia)

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_game_loop] = lambda: loop
    with TestClient(app) as c:
        yield c, agent, encyclopedia
    app.dependency_overrides.clear()
