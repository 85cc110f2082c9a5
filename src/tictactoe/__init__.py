"""Tic-Tac-Toe package exposing game logic and the minimax AI.

The web service lives in :mod:`tictactoe.api` and is imported on demand.
"""

from .ai import Difficulty, MinimaxAI, best_move, choose_move, evaluate, minimax
from .game import Board, TicTacToeGame, WINNING_LINES

__all__ = [
    "Board",
    "Difficulty",
    "MinimaxAI",
    "TicTacToeGame",
    "WINNING_LINES",
    "best_move",
    "choose_move",
    "evaluate",
    "minimax",
]
