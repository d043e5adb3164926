from __future__ import annotations

import logging

from fastapi import WebSocket

from backpacker.api.models import GameView

logger = logging.getLogger(__name__)


class GameUpdatesHub:
    """Pushes a `game_updated` notice to every socket watching a game.

    The notice carries only the phase and status; clients re-fetch
    `GET /game/{id}` for the full view.
    """

    def __init__(self) -> None:
        self._watchers: dict[str, set[WebSocket]] = {}

    async def subscribe(self, game_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        self._watchers.setdefault(game_id, set()).add(websocket)

    def unsubscribe(self, game_id: str, websocket: WebSocket) -> None:
        watchers = self._watchers.get(game_id)
        if watchers is None:
            return
        watchers.discard(websocket)
        if not watchers:
            del self._watchers[game_id]

    def watcher_count(self, game_id: str) -> int:
        return len(self._watchers.get(game_id, ()))

    async def game_updated(self, view: GameView) -> None:
        game_id = str(view.game_id)
        notice = {
            "type": "game_updated",
            "game_id": game_id,
            "phase": view.phase.value,
            "status": view.dashboard.status,
        }
        # Copy: unsubscribe may shrink the set while we iterate.
        for ws in list(self._watchers.get(game_id, ())):
            try:
                await ws.send_json(notice)
            except Exception:
                logger.debug("dropping closed websocket for game %s", game_id, exc_info=True)
                self.unsubscribe(game_id, ws)


hub = GameUpdatesHub()
