from __future__ import annotations

from functools import lru_cache

from backpacker.agents.factory import create_default_agent
from backpacker.game_loop import GameLoop
from backpacker.infra.wikipedia_client import WikipediaClient
from backpacker.session_store import SessionStore, store


def get_store() -> SessionStore:
    return store


@lru_cache(maxsize=1)
def get_game_loop() -> GameLoop:
    return GameLoop.from_services(agent=create_default_agent(name="guide"), encyclopedia=WikipediaClient())
