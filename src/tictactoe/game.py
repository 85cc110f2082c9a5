"""Core rules for classic 3x3 Tic-Tac-Toe."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

Player = str  # "X" or "O"
Line = Tuple[int, int, int]

EMPTY = " "
MARKS: Tuple[Player, Player] = ("X", "O")

# Rows, then columns, then diagonals. Order decides which line is reported.
WINNING_LINES: Tuple[Line, ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def other(player: Player) -> Player:
    """Return the adversary of ``player``."""
    if player not in MARKS:
        raise ValueError(f"Unknown player mark {player!r}")
    return "O" if player == "X" else "X"


# ---------- Board ----------


@dataclass
class Board:
    # Server-internal: 'X', 'O', or ' ' (space) for empty
    cells: List[str] = field(default_factory=lambda: [EMPTY] * 9)

    def __post_init__(self) -> None:
        self.cells = list(self.cells)
        if len(self.cells) != 9:
            raise ValueError("A board has exactly 9 cells")
        for c in self.cells:
            if c != EMPTY and c not in MARKS:
                raise ValueError(f"Invalid cell value {c!r}")

    @classmethod
    def from_string(cls, layout: str) -> "Board":
        """Build a board from a layout like ``"XX. OO. ..."``.

        '.' or '_' mark empty cells; whitespace and '|' separators are ignored.
        """
        chars = [c for c in layout if not c.isspace() and c != "|"]
        return cls(cells=[EMPTY if c in "._" else c.upper() for c in chars])

    # Outcome is always derived from the cells, never cached.

    def winning_line(self) -> Optional[Line]:
        for line in WINNING_LINES:
            a, b, c = line
            v = self.cells[a]
            if v != EMPTY and v == self.cells[b] == self.cells[c]:
                return line
        return None

    @property
    def winner(self) -> Optional[Player]:
        line = self.winning_line()
        return self.cells[line[0]] if line else None

    def is_full(self) -> bool:
        return all(c != EMPTY for c in self.cells)

    @property
    def drawn(self) -> bool:
        return self.winning_line() is None and self.is_full()

    @property
    def is_over(self) -> bool:
        return self.winning_line() is not None or self.is_full()

    def empty_cells(self) -> List[int]:
        return [i for i, c in enumerate(self.cells) if c == EMPTY]

    def place(self, idx: int, player: Player) -> None:
        if not 0 <= idx < 9:
            raise ValueError(f"Cell index {idx} is out of range")
        if player not in MARKS:
            raise ValueError(f"Unknown player mark {player!r}")
        if self.cells[idx] != EMPTY:
            raise ValueError("Cell already occupied")
        self.cells[idx] = player

    def clear(self, idx: int) -> None:
        self.cells[idx] = EMPTY

    def copy(self) -> "Board":
        return Board(cells=self.cells.copy())

    def __str__(self) -> str:
        rows = (self.cells[r * 3 : r * 3 + 3] for r in range(3))
        return "\n".join("".join(c if c != EMPTY else "." for c in row) for row in rows)


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    board: Board = field(default_factory=Board)
    current_player: Player = "X"

    def __post_init__(self) -> None:
        if self.current_player not in MARKS:
            raise ValueError(f"Unknown player mark {self.current_player!r}")

    # ---- API used by the service & AI ----

    @property
    def winner(self) -> Optional[Player]:
        return self.board.winner

    @property
    def winning_line(self) -> Optional[Line]:
        return self.board.winning_line()

    @property
    def drawn(self) -> bool:
        return self.board.drawn

    @property
    def is_over(self) -> bool:
        return self.board.is_over

    def available_moves(self) -> List[int]:
        """Empty cells in index order, or nothing once the game is decided."""
        if self.is_over:
            return []
        return self.board.empty_cells()

    def play_move(self, idx: int) -> None:
        """Place the current mark and hand the turn over while play continues."""
        if self.is_over:
            raise ValueError("Game already finished")
        if idx not in self.available_moves():
            raise ValueError("Cell is not available")

        self.board.place(idx, self.current_player)

        if not self.is_over:
            self.current_player = other(self.current_player)

    def reset(self, first_player: Player = "X") -> None:
        if first_player not in MARKS:
            raise ValueError(f"Unknown player mark {first_player!r}")
        self.board = Board()
        self.current_player = first_player

    def clone(self) -> "TicTacToeGame":
        return TicTacToeGame(board=self.board.copy(), current_player=self.current_player)

    @classmethod
    def from_cells(
        cls, cells: Iterable[str], current_player: Player = "X"
    ) -> "TicTacToeGame":
        return cls(board=Board(cells=list(cells)), current_player=current_player)
