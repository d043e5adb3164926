from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from backpacker.game_loop import GameSession


class GameBusyError(ValueError):
    pass


@asynccontextmanager
async def session_lock(session: GameSession) -> AsyncIterator[GameSession]:
    """Per-session exclusive lock that rejects instead of waiting.

    A player intent that arrives while another transition is still running
    (e.g. waiting on the AI) is refused, so two transitions never interleave.
    """

    if session.lock.locked():
        raise GameBusyError("Game is busy")
    async with session.lock:
        yield session
