"""FastAPI service hosting Tic-Tac-Toe sessions against a human or the minimax AI."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from .ai import Difficulty, MinimaxAI
from .config import Settings
from .game import Player, TicTacToeGame, other

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    PVP = "pvp"
    PVE = "pve"


class Mark(str, Enum):
    X = "X"
    O = "O"


@dataclass
class GameSession:
    """Container for an active game, its settings, tally and AI opponent."""

    game: TicTacToeGame
    mode: Mode
    difficulty: Difficulty
    first_player: Player
    ai: Optional[MinimaxAI] = None
    scores: Dict[str, int] = field(
        default_factory=lambda: {"X": 0, "O": 0, "draw": 0}
    )
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SETTINGS = Settings.from_env()
SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-Tac-Toe against a minimax opponent")

AI_THINK_DELAY: Tuple[float, float] = SETTINGS.think_delay


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    mode: Mode = Mode.PVE
    difficulty: Difficulty = Field(
        default=SETTINGS.default_difficulty,
        description="easy plays randomly, medium searches 2 plies, hard searches fully",
    )
    first_player: Mark = Field(default=Mark.X, alias="firstPlayer")


class RestartRequest(BaseModel):
    """Optional settings changes applied when starting the next round."""

    model_config = ConfigDict(populate_by_name=True)

    mode: Optional[Mode] = None
    difficulty: Optional[Difficulty] = None
    first_player: Optional[Mark] = Field(default=None, alias="firstPlayer")


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _build_ai(mode: Mode, difficulty: Difficulty, first_player: Player) -> Optional[MinimaxAI]:
    # The human always takes the first player's mark; the computer answers.
    if mode is not Mode.PVE:
        return None
    return MinimaxAI(player=other(first_player), difficulty=difficulty)


def _create_session(
    mode: Mode, difficulty: Difficulty, first_player: Player
) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(
        game=TicTacToeGame(current_player=first_player),
        mode=mode,
        difficulty=difficulty,
        first_player=first_player,
        ai=_build_ai(mode, difficulty, first_player),
    )
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "Created game %s (mode=%s, difficulty=%s, first=%s)",
        session_id,
        mode.value,
        difficulty.value,
        first_player,
    )
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _record_move(game_id: str, session: GameSession, player: Player, cell: int) -> None:
    """Log a move that was just played and settle the tally if it ended the game.

    Caller must hold ``session.lock``.
    """
    game = session.game
    session.move_log.append({"player": player, "cellIndex": cell})
    if game.winner:
        session.scores[game.winner] += 1
        logger.info("Game %s won by %s", game_id, game.winner)
    elif game.drawn:
        session.scores["draw"] += 1
        logger.info("Game %s drawn", game_id)


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            if not session.ai:
                return
            game = session.game
            if game.is_over:
                return
            if game.current_player != session.ai.player:
                return
            cell_index = session.ai.choose(game)
            game.play_move(cell_index)
            _record_move(game_id, session, session.ai.player, cell_index)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        line = game.winning_line

        state: Dict[str, object] = {
            "id": game_id,
            "mode": session.mode.value,
            "difficulty": session.difficulty.value,
            "firstPlayer": session.first_player,
            "aiPlayer": session.ai.player if session.ai else None,
            "currentPlayer": game.current_player,
            "cells": [c if c in ("X", "O") else "" for c in game.board.cells],
            "winner": game.winner,
            "winningLine": list(line) if line else None,
            "drawn": game.drawn,
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "scores": dict(session.scores),
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if game.is_over:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if session.ai and game.current_player == session.ai.player:
            raise HTTPException(status_code=400, detail="It is the computer's turn")

        player = game.current_player
        try:
            game.play_move(cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        _record_move(game_id, session, player, cell_index)

        should_schedule_ai = bool(
            session.ai
            and not game.is_over
            and game.current_player == session.ai.player
        )
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


def _restart_session(game_id: str, session: GameSession, request: RestartRequest) -> None:
    with session.lock:
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")
        if request.mode is not None:
            session.mode = request.mode
        if request.difficulty is not None:
            session.difficulty = request.difficulty
        if request.first_player is not None:
            session.first_player = request.first_player.value

        session.game.reset(session.first_player)
        session.ai = _build_ai(session.mode, session.difficulty, session.first_player)
        session.move_log.clear()
    logger.info(
        "Restarted game %s (mode=%s, difficulty=%s, first=%s)",
        game_id,
        session.mode.value,
        session.difficulty.value,
        session.first_player,
    )


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(
        request.mode, request.difficulty, request.first_player.value
    )
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
def restart_game(game_id: str, request: Optional[RestartRequest] = None) -> Dict[str, object]:
    session = _get_session(game_id)
    _restart_session(game_id, session, request or RestartRequest())
    return _serialize_session(game_id, session)
