from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status

from backpacker.agents.autogen_config import MISSING_CREDENTIALS_MESSAGE, has_credentials
from backpacker.api.deps import get_game_loop, get_store
from backpacker.api.models import (
    AnswerRequest,
    CityListResponse,
    GameView,
    SelectCityRequest,
    SelectDestinationRequest,
    SelectJobRequest,
)
from backpacker.core.game_view import render_game_view
from backpacker.core.rules import STARTING_CITIES
from backpacker.game_loop import GameLoop, GameSession
from backpacker.lock import GameBusyError, session_lock
from backpacker.session_store import GameNotFoundError, SessionStore
from backpacker.websocket_hub import hub

logger = logging.getLogger(__name__)

router = APIRouter()

Intent = Callable[[GameSession], Awaitable[None]]


def _require_session(store: SessionStore, game_id: UUID) -> GameSession:
    try:
        return store.require(game_id)
    except GameNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


async def _apply_intent(*, store: SessionStore, game_id: UUID, intent: Intent) -> GameView:
    session = _require_session(store, game_id)
    try:
        async with session_lock(session):
            await intent(session)
    except GameBusyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    view = render_game_view(session)
    await hub.game_updated(view)
    return view


@router.websocket("/ws/game/{game_id}")
async def game_updates_ws(websocket: WebSocket, game_id: UUID) -> None:
    gid = str(game_id)
    await hub.subscribe(gid, websocket)
    logger.info("game %s: %d watcher(s)", gid, hub.watcher_count(gid))

    try:
        # Incoming frames are ignored; the socket only receives updates.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        hub.unsubscribe(gid, websocket)


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/cities", response_model=CityListResponse)
async def list_cities_route() -> CityListResponse:
    return CityListResponse(cities=list(STARTING_CITIES))


@router.post("/game", response_model=GameView, status_code=status.HTTP_201_CREATED)
async def create_game_route(store: SessionStore = Depends(get_store)) -> GameView:
    if not has_credentials():
        logger.warning("refusing to start a game: no AI credentials configured")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=MISSING_CREDENTIALS_MESSAGE)

    session = store.create()
    return render_game_view(session)


@router.get("/game/{game_id}", response_model=GameView)
async def get_game_route(game_id: UUID, store: SessionStore = Depends(get_store)) -> GameView:
    return render_game_view(_require_session(store, game_id))


@router.delete("/game/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_game_route(game_id: UUID, store: SessionStore = Depends(get_store)) -> None:
    _require_session(store, game_id)
    store.discard(game_id)


@router.post("/game/{game_id}/city", response_model=GameView)
async def select_city_route(
    game_id: UUID,
    payload: SelectCityRequest,
    store: SessionStore = Depends(get_store),
    loop: GameLoop = Depends(get_game_loop),
) -> GameView:
    return await _apply_intent(store=store, game_id=game_id, intent=lambda s: loop.select_city(s, payload.index))


@router.post("/game/{game_id}/answer", response_model=GameView)
async def answer_quiz_route(
    game_id: UUID,
    payload: AnswerRequest,
    store: SessionStore = Depends(get_store),
    loop: GameLoop = Depends(get_game_loop),
) -> GameView:
    return await _apply_intent(store=store, game_id=game_id, intent=lambda s: loop.answer_quiz(s, payload.answer))


@router.post("/game/{game_id}/job", response_model=GameView)
async def select_job_route(
    game_id: UUID,
    payload: SelectJobRequest,
    store: SessionStore = Depends(get_store),
    loop: GameLoop = Depends(get_game_loop),
) -> GameView:
    return await _apply_intent(store=store, game_id=game_id, intent=lambda s: loop.select_job(s, payload.index))


@router.post("/game/{game_id}/destination", response_model=GameView)
async def select_destination_route(
    game_id: UUID,
    payload: SelectDestinationRequest,
    store: SessionStore = Depends(get_store),
    loop: GameLoop = Depends(get_game_loop),
) -> GameView:
    return await _apply_intent(
        store=store, game_id=game_id, intent=lambda s: loop.select_destination(s, payload.index)
    )


@router.post("/game/{game_id}/restart", response_model=GameView)
async def restart_route(
    game_id: UUID,
    store: SessionStore = Depends(get_store),
    loop: GameLoop = Depends(get_game_loop),
) -> GameView:
    return await _apply_intent(store=store, game_id=game_id, intent=loop.restart)
