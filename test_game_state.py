"""
Tests for the board, game state, win checker, and move validator.
"""

import random

import pytest

from logic.board import Board, Move, Player
from logic.game_state import GameState
from logic.move_validator import MoveValidator
from logic.win_checker import WinChecker


def play(moves, starting_player=Player.X):
    game = GameState(starting_player=starting_player)
    for row, col in moves:
        game.apply_move(row, col)
    return game


def test_new_game():
    game = GameState()
    assert game.current_player == Player.X
    assert game.turns_played == 0
    assert game.winner is None
    assert not game.is_finished()
    assert not game.is_draw()
    assert all(game.cell_at(r, c) is None for r in range(3) for c in range(3))
    assert len(game.available_moves()) == 9


def test_apply_move_places_and_flips_turn():
    game = GameState()
    assert game.apply_move(1, 1)
    assert game.cell_at(1, 1) == Player.X
    assert game.current_player == Player.O
    assert game.turns_played == 1
    assert game.moves[-1].player == Player.X
    assert game.moves[-1].move_number == 0


def test_occupied_cell_is_ignored():
    game = play([(1, 1)])
    assert not game.apply_move(1, 1)
    assert game.cell_at(1, 1) == Player.X
    assert game.current_player == Player.O
    assert game.turns_played == 1


def test_out_of_range_is_ignored():
    game = GameState()
    assert not game.apply_move(3, 0)
    assert not game.apply_move(0, -1)
    assert game.turns_played == 0


@pytest.mark.parametrize("moves, winner", [
    # Row
    ([(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)], Player.X),
    # Column
    ([(0, 0), (0, 1), (1, 0), (1, 1), (2, 2), (2, 1)], Player.O),
    # Diagonal
    ([(0, 0), (0, 1), (1, 1), (0, 2), (2, 2)], Player.X),
    # Anti-diagonal
    ([(1, 1), (0, 0), (0, 2), (2, 2), (2, 0)], Player.X),
])
def test_winning_lines(moves, winner):
    game = play(moves)
    assert game.winner == winner
    assert game.is_finished()
    assert not game.is_draw()


def test_no_moves_after_win():
    game = play([(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)])
    assert game.winner == Player.X

    assert not game.apply_move(1, 2)
    assert game.cell_at(1, 2) is None
    assert game.winner == Player.X
    assert game.available_moves() == []


def test_draw():
    game = play([
        (0, 0), (0, 1), (0, 2),
        (1, 1), (1, 0), (1, 2),
        (2, 1), (2, 0), (2, 2),
    ])
    assert game.turns_played == 9
    assert game.winner is None
    assert game.is_draw()
    assert game.is_finished()


def test_win_on_last_cell_is_not_a_draw():
    game = play([
        (0, 0), (0, 1), (0, 2),
        (1, 1), (1, 2), (1, 0),
        (2, 1), (2, 0), (2, 2),
    ])
    assert game.turns_played == 9
    assert game.winner == Player.X
    assert not game.is_draw()


def test_o_can_open():
    game = GameState(starting_player=Player.O)
    assert game.current_player == Player.O
    game.apply_move(0, 0)
    assert game.cell_at(0, 0) == Player.O
    assert game.current_player == Player.X


def test_finished_invariant_over_random_games():
    rng = random.Random(7)
    for _ in range(200):
        game = GameState(starting_player=rng.choice([Player.X, Player.O]))
        while True:
            assert game.is_finished() == (game.winner is not None or game.turns_played == 9)
            assert len(WinChecker.all_winners(game.board)) <= 1
            if game.is_finished():
                break
            row, col = rng.choice(game.available_moves())
            assert game.apply_move(row, col)

        # Local win check agrees with a full scan
        assert WinChecker.check_winner(game.board) == game.winner


def test_is_win_at_only_counts_lines_through_cell():
    board = Board([
        [Player.X, Player.X, Player.X],
        [Player.O, Player.O, None],
        [None, None, None],
    ])
    assert WinChecker.is_win_at(board, 0, 1)
    assert not WinChecker.is_win_at(board, 1, 0)
    assert not WinChecker.is_win_at(board, 2, 2)


def test_lines_through_cells():
    assert len(WinChecker.LINES_THROUGH[(1, 1)]) == 4
    assert len(WinChecker.LINES_THROUGH[(0, 0)]) == 3
    assert len(WinChecker.LINES_THROUGH[(0, 1)]) == 2


def test_board_trial_restores_cell():
    board = Board()
    with board.trial(2, 2, Player.O):
        assert board.get(2, 2) == Player.O
    assert board.is_empty(2, 2)

    with pytest.raises(RuntimeError):
        with board.trial(0, 0, Player.X):
            raise RuntimeError("boom")
    assert board.is_empty(0, 0)


def test_board_encode():
    board = Board([
        [Player.X, None, None],
        [None, Player.O, None],
        [None, None, Player.X],
    ])
    assert board.encode() == "100020001"


def test_from_rows():
    game = GameState.from_rows([
        ["x", "x", None],
        ["o", "o", None],
        [None, None, None],
    ], current_player=Player.O)
    assert game.current_player == Player.O
    assert game.starting_player == Player.O
    assert game.turns_played == 4
    assert game.winner is None


def test_from_rows_infers_turn():
    game = GameState.from_rows([
        ["x", "_", "_"],
        ["_", "_", "_"],
        ["_", "_", "_"],
    ])
    assert game.current_player == Player.O
    assert game.starting_player == Player.X


def test_from_rows_detects_winner():
    game = GameState.from_rows([
        ["x", "x", "x"],
        ["o", "o", None],
        [None, None, None],
    ])
    assert game.winner == Player.X
    assert game.is_finished()


@pytest.mark.parametrize("rows", [
    [["x", "x", "x"], [None] * 3, [None] * 3],                 # count skew
    [["x", "x", "x"], ["o", "o", "o"], [None] * 3],            # double win
    [["x", "x", "x"], ["o", "o", None], ["o", None, None]],    # play after win
    [["x", "q", None], [None] * 3, [None] * 3],                # bad symbol
    [["x", None], [None] * 3, [None] * 3],                     # bad shape
])
def test_from_rows_rejects_impossible_boards(rows):
    with pytest.raises(ValueError):
        GameState.from_rows(rows)


def test_copy_is_independent():
    game = play([(1, 1)])
    clone = game.copy()
    clone.apply_move(0, 0)
    assert game.cell_at(0, 0) is None
    assert game.turns_played == 1
    assert clone.turns_played == 2


def test_move_validator():
    validator = MoveValidator()
    game = play([(1, 1)])

    assert validator.validate_move(game, 0, 0).is_valid

    result = validator.validate_move(game, 1, 1)
    assert not result.is_valid
    assert "occupied" in result.error_message

    result = validator.validate_move(game, 5, 5)
    assert not result.is_valid
    assert "Invalid position" in result.error_message

    finished = play([(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)])
    result = validator.validate_move(finished, 2, 2)
    assert not result.is_valid
    assert "over" in result.error_message
    assert validator.get_valid_moves(finished) == []
    assert Move(0, 0) in validator.get_valid_moves(game)
