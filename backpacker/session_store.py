from __future__ import annotations

from uuid import UUID

from backpacker.game_loop import GameSession


class GameNotFoundError(LookupError):
    pass


class SessionStore:
    """In-process registry of live game sessions.

    Nothing is persisted; a server restart forgets every game.
    """

    def __init__(self) -> None:
        self._sessions: dict[UUID, GameSession] = {}

    def create(self) -> GameSession:
        session = GameSession()
        self._sessions[session.game_id] = session
        return session

    def get(self, game_id: UUID) -> GameSession | None:
        return self._sessions.get(game_id)

    def require(self, game_id: UUID) -> GameSession:
        session = self.get(game_id)
        if session is None:
            raise GameNotFoundError("Game not found")
        return session

    def discard(self, game_id: UUID) -> None:
        self._sessions.pop(game_id, None)


store = SessionStore()
