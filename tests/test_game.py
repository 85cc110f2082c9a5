"""Unit tests for Tic-Tac-Toe game logic."""

import itertools

import pytest

from tictactoe.game import EMPTY, WINNING_LINES, Board, TicTacToeGame, other


def test_initial_state_allows_every_cell():
    game = TicTacToeGame()
    assert game.available_moves() == list(range(9))
    assert game.current_player == "X"
    assert game.winner is None
    assert not game.drawn


def test_turn_passes_after_move():
    game = TicTacToeGame()
    game.play_move(4)
    assert game.current_player == "O"
    assert 4 not in game.available_moves()


def test_occupied_cell_rejected():
    game = TicTacToeGame()
    game.play_move(0)
    with pytest.raises(ValueError):
        game.play_move(0)


def test_rows_are_reported_before_columns():
    board = Board.from_string("XXX X.. X..")
    assert board.winning_line() == (0, 1, 2)
    assert board.winner == "X"


def test_every_line_is_detected():
    for line in WINNING_LINES:
        board = Board()
        for idx in line:
            board.cells[idx] = "O"
        assert board.winning_line() == line
        assert board.winner == "O"


def test_two_marks_in_a_line_is_not_a_win():
    board = Board.from_string("XX. OO. ...")
    assert board.winning_line() is None
    assert not board.is_over


def test_mixed_line_is_not_a_win():
    board = Board.from_string("XOX ... ...")
    assert board.winning_line() is None


def test_full_board_without_line_is_draw():
    board = Board.from_string("XOX XOO OXX")
    assert board.is_full()
    assert board.winning_line() is None
    assert board.drawn
    assert board.is_over


def test_full_board_with_line_reports_winner():
    board = Board.from_string("XXX OOX OXO")
    assert board.is_full()
    assert board.winning_line() == (0, 1, 2)
    assert board.winner == "X"
    assert not board.drawn


def test_every_full_board_without_line_is_draw():
    for xs in itertools.combinations(range(9), 5):
        board = Board(cells=["X" if i in xs else "O" for i in range(9)])
        if board.winning_line() is None:
            assert board.drawn
        else:
            assert not board.drawn


def test_outcome_follows_board_changes():
    board = Board.from_string("XX. ... ...")
    board.place(2, "X")
    assert board.winner == "X"
    board.clear(2)
    assert board.winner is None


def test_game_finishes_on_win_and_keeps_winner_to_move():
    game = TicTacToeGame()
    for idx in (0, 3, 1, 4, 2):
        game.play_move(idx)
    assert game.winner == "X"
    assert game.winning_line == (0, 1, 2)
    assert game.current_player == "X"
    assert game.available_moves() == []
    with pytest.raises(ValueError):
        game.play_move(8)


def test_reset_clears_board_and_sets_first_player():
    game = TicTacToeGame()
    game.play_move(0)
    game.reset("O")
    assert game.board.cells == [EMPTY] * 9
    assert game.current_player == "O"


def test_clone_is_independent():
    game = TicTacToeGame()
    game.play_move(4)
    copy = game.clone()
    copy.play_move(0)
    assert game.board.cells[0] == EMPTY
    assert game.current_player == "O"


def test_board_rejects_malformed_cells():
    with pytest.raises(ValueError):
        Board(cells=[EMPTY] * 8)
    with pytest.raises(ValueError):
        Board(cells=["Z"] + [EMPTY] * 8)
    with pytest.raises(ValueError):
        Board().place(9, "X")


def test_other_mark():
    assert other("X") == "O"
    assert other("O") == "X"
    with pytest.raises(ValueError):
        other("Z")
