"""
Heuristic evaluation for TicTacToe.

Threat counting, fork detection and positional values. These rank moves
that the search considers equal and drive the weaker difficulty levels.

Every function that tries a move on the board puts the cell back before
returning.
"""

from typing import Iterable, List, Optional

from logic.board import Board, Move, Player
from logic.win_checker import WINNING_LINES, WinChecker

from .config import AIConfig


CENTER = Move(1, 1)
CORNERS = (Move(0, 0), Move(0, 2), Move(2, 0), Move(2, 2))
EDGES = (Move(0, 1), Move(1, 0), Move(1, 2), Move(2, 1))


def position_value(move: Move) -> int:
    """3 for the center, 2 for a corner, 1 for an edge."""
    if move == CENTER:
        return 3
    if move in CORNERS:
        return 2
    return 1


def prioritize_moves(moves: Iterable[Move]) -> List[Move]:
    """Order moves center first, then corners, then the rest (stable)."""
    return sorted(moves, key=position_value, reverse=True)


def count_threats(board: Board, player: Player) -> int:
    """Number of lines holding exactly 2 of `player` and 1 empty cell."""
    cells = board.cells
    count = 0
    for line in WINNING_LINES:
        values = [cells[r][c] for r, c in line]
        if values.count(player) == 2 and values.count(None) == 1:
            count += 1
    return count


def count_winning_opportunities(board: Board, player: Player) -> int:
    """Number of empty cells where `player` would win immediately."""
    count = 0
    for row, col in board.empty_cells():
        with board.trial(row, col, player):
            if WinChecker.is_win_at(board, row, col):
                count += 1
    return count


def count_fork_opportunities(board: Board, player: Player) -> int:
    """Number of empty cells that would give `player` 2 or more threats."""
    forks = 0
    for row, col in board.empty_cells():
        with board.trial(row, col, player):
            if count_threats(board, player) >= 2:
                forks += 1
    return forks


def immediate_winning_move(board: Board, player: Player) -> Optional[Move]:
    """First empty cell (row-major) that wins the game for `player`."""
    for move in board.empty_cells():
        with board.trial(move.row, move.col, player):
            if WinChecker.is_win_at(board, move.row, move.col):
                return move
    return None


def immediate_blocking_threat_move(board: Board, opponent: Player) -> Optional[Move]:
    """
    Cell that blocks an open two-in-a-row of `opponent`.

    Looks for a line with 2 opponent pieces, 1 empty cell and nothing of
    the other side. Left unblocked, such a line loses next turn, so this
    check comes before any fork logic.
    """
    cells = board.cells
    for line in WINNING_LINES:
        values = [cells[r][c] for r, c in line]
        if values.count(opponent) == 2 and values.count(None) == 1:
            row, col = line[values.index(None)]
            return Move(row, col)
    return None


def fork_move(board: Board, player: Player) -> Optional[Move]:
    """First move that leaves `player` with 2 or more ways to win next turn."""
    cells = fork_cells(board, player)
    return cells[0] if cells else None


def fork_cells(board: Board, player: Player) -> List[Move]:
    """Every empty cell that would give `player` a fork."""
    cells = []
    for move in board.empty_cells():
        with board.trial(move.row, move.col, player):
            if count_winning_opportunities(board, player) >= 2:
                cells.append(move)
    return cells


def block_fork_move(board: Board, player: Player) -> Optional[Move]:
    """
    Move for `player` that keeps the opponent from forking.

    With a single fork cell, take it. With several, taking one can still
    lose to the others, so first look for a move that makes our own
    two-in-a-row and forces a block on a cell that does not hand the
    opponent a fork. Only if there is none, take the first fork cell.
    """
    opponent = player.opposite()
    cells = fork_cells(board, opponent)
    if not cells:
        return None
    if len(cells) == 1:
        return cells[0]

    for move in prioritize_moves(board.empty_cells()):
        with board.trial(move.row, move.col, player):
            forced = immediate_winning_move(board, player)
            if forced is None:
                continue
            with board.trial(forced.row, forced.col, opponent):
                opponent_wins = count_winning_opportunities(board, opponent)
        if opponent_wins < 2:
            return move

    return cells[0]


def threats_blocked(board: Board, move: Move, player: Player) -> int:
    """How many opponent threats disappear when `player` plays `move`."""
    opponent = player.opposite()
    before = count_threats(board, opponent)
    with board.trial(move.row, move.col, player):
        after = count_threats(board, opponent)
    return before - after


def strategic_score(board: Board, move: Move, player: Player,
                    config: Optional[AIConfig] = None) -> int:
    """
    Composite heuristic value of `player` playing `move`.

    threats created x4 + threats blocked x5 + fork opportunities x6
    + center bonus, capped at 50.
    """
    config = config or AIConfig()

    blocked = threats_blocked(board, move, player)
    with board.trial(move.row, move.col, player):
        created = count_threats(board, player)
        forks = count_fork_opportunities(board, player)

    score = (
        created * config.THREAT_WEIGHT
        + blocked * config.BLOCK_WEIGHT
        + forks * config.FORK_WEIGHT
    )
    if move == CENTER:
        score += config.CENTER_BONUS

    return min(score, config.STRATEGIC_CAP)
