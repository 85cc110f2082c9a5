"""Minimax AI for Tic-Tac-Toe: static evaluation, search and difficulty dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional
import logging
import math
import random
import time

from .game import Board, Player, TicTacToeGame, WINNING_LINES, other

logger = logging.getLogger(__name__)

# Terminal scores are WIN_SCORE minus the ply at which the game ended.
WIN_SCORE = 10


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# None means search all the way to terminal positions.
DEPTH_LIMITS: Dict[Difficulty, Optional[int]] = {
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: None,
}


# ---- heuristics & eval ----


def evaluate(board: Board, player: Player, opponent: Player) -> int:
    """Score a non-terminal board from ``player``'s point of view.

    Each line still open to exactly one side is worth ``2**k`` for that side,
    where ``k`` is how many of its cells that side holds. Lines holding both
    marks are dead and count for nothing.
    """
    score = 0
    cells = board.cells
    for a, b, c in WINNING_LINES:
        trio = (cells[a], cells[b], cells[c])
        mine = trio.count(player)
        theirs = trio.count(opponent)
        if mine and theirs:
            continue
        if mine:
            score += 2**mine
        elif theirs:
            score -= 2**theirs
    return score


# ---- core search ----


def minimax(
    board: Board,
    maximizing: bool,
    player: Player,
    opponent: Player,
    depth_limit: Optional[int] = None,
    current_depth: int = 0,
    alpha: float = -math.inf,
    beta: float = math.inf,
) -> float:
    """Return the minimax value of ``board`` for ``player``.

    Cells are placed and cleared in place; the board is left exactly as it
    was passed in. With the default window the value is exact; a narrower
    ``alpha``/``beta`` window only guarantees the value on its inside.
    """
    line = board.winning_line()
    if line:
        if board.cells[line[0]] == player:
            return WIN_SCORE - current_depth  # faster wins are better
        return current_depth - WIN_SCORE  # slower losses are better
    if board.is_full():
        return 0
    if depth_limit is not None and current_depth >= depth_limit:
        return evaluate(board, player, opponent)

    symbol = player if maximizing else opponent
    best = -math.inf if maximizing else math.inf
    for idx in board.empty_cells():
        board.cells[idx] = symbol
        try:
            score = minimax(
                board,
                not maximizing,
                player,
                opponent,
                depth_limit,
                current_depth + 1,
                alpha,
                beta,
            )
        finally:
            board.clear(idx)

        if maximizing:
            if score > best:
                best = score
            alpha = max(alpha, best)
        else:
            if score < best:
                best = score
            beta = min(beta, best)
        if alpha >= beta:
            break
    return best


def best_move(
    board: Board, player: Player, depth_limit: Optional[int] = None
) -> Optional[int]:
    """Pick the highest scoring empty cell for ``player``.

    Ties go to the lowest index. Returns ``None`` only when the board has no
    empty cell.
    """
    opponent = other(player)
    best_score = -math.inf
    move: Optional[int] = None

    for idx in board.empty_cells():
        board.cells[idx] = player
        try:
            # Anything at or below best_score cannot replace the current move,
            # so the child only needs to be exact above it.
            score = minimax(
                board, False, player, opponent, depth_limit, 0, best_score, math.inf
            )
        finally:
            board.clear(idx)
        if score > best_score:
            best_score, move = score, idx

    if move is not None:
        logger.debug(
            "best_move player=%s depth_limit=%s -> %d (score %s)",
            player,
            depth_limit,
            move,
            best_score,
        )
    return move


def random_move(board: Board, rng: Optional[random.Random] = None) -> int:
    """Uniformly random empty cell."""
    candidates = board.empty_cells()
    if not candidates:
        raise RuntimeError("No valid moves available")
    return (rng or random).choice(candidates)


# ---- move selection ----


def choose_move(
    board: Board,
    player: Player,
    difficulty: Difficulty = Difficulty.HARD,
    rng: Optional[random.Random] = None,
) -> int:
    """Select the computer's move for ``player`` at the given difficulty."""
    difficulty = Difficulty(difficulty)
    if difficulty is Difficulty.EASY:
        return random_move(board, rng)

    started = time.perf_counter()
    move = best_move(board, player, DEPTH_LIMITS[difficulty])
    logger.debug(
        "%s search for %s took %.1f ms",
        difficulty.value,
        player,
        (time.perf_counter() - started) * 1000,
    )
    if move is None:
        logger.warning("Search found no move for %s, falling back to random", player)
        return random_move(board, rng)
    return move


@dataclass
class MinimaxAI:
    """Computer opponent owned by a single game session.

      - MinimaxAI(player="O", difficulty=Difficulty.HARD)
      - choose(game) -> cell_index
    """

    player: Player
    difficulty: Difficulty = Difficulty.HARD
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def __post_init__(self) -> None:
        self.difficulty = Difficulty(self.difficulty)
        other(self.player)  # validates the mark

    def choose(self, game: TicTacToeGame) -> int:
        if game.is_over:
            raise RuntimeError("No valid moves available")
        if game.current_player != self.player:
            raise ValueError("It is not this AI player's turn")

        # Search a private copy so the live board is never touched mid-search.
        return choose_move(game.board.copy(), self.player, self.difficulty, self.rng)
