"""
Win checker for TicTacToe.
Knows the 8 winning lines and which of them pass through each cell.
"""

from typing import Dict, List, Optional, Tuple

from .board import Board, Player


Line = Tuple[Tuple[int, int], Tuple[int, int], Tuple[int, int]]

# All possible winning lines (as tuples of (row, col))
WINNING_LINES: List[Line] = [
    # Rows
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    # Columns
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    # Diagonals
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
]

# Lines through each cell: 2 for edges, 3 for corners, 4 for the center
LINES_THROUGH: Dict[Tuple[int, int], List[Line]] = {
    (row, col): [line for line in WINNING_LINES if (row, col) in line]
    for row in range(3)
    for col in range(3)
}


class WinChecker:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 pieces of the same symbol in a row
    (horizontally, vertically, or diagonally)
    """

    WINNING_LINES = WINNING_LINES
    LINES_THROUGH = LINES_THROUGH

    @staticmethod
    def is_win_at(board: Board, row: int, col: int) -> bool:
        """
        Check whether the piece at (row, col) completes a line.

        Only the lines through that cell are looked at, so this is the
        check to run right after a move.
        """
        cells = board.cells
        player = cells[row][col]
        if player is None:
            return False

        for line in LINES_THROUGH[(row, col)]:
            if all(cells[r][c] == player for r, c in line):
                return True
        return False

    @classmethod
    def check_winner(cls, board: Board) -> Optional[Player]:
        """
        Scan all 8 lines for a winner.

        Used when a board is built from scratch rather than played move by
        move. Returns the first winner found.
        """
        winners = cls.all_winners(board)
        return winners[0] if winners else None

    @classmethod
    def all_winners(cls, board: Board) -> List[Player]:
        """Every symbol that owns a complete line (at most one when legal)."""
        winners: List[Player] = []
        for line in WINNING_LINES:
            winner = cls._check_line(board, line)
            if winner is not None and winner not in winners:
                winners.append(winner)
        return winners

    @classmethod
    def get_winning_line(cls, board: Board) -> Optional[Line]:
        """
        Get the winning line if there is one.

        Args:
            board: The board to inspect.

        Returns:
            The winning line as a tuple of (row, col), or None.
        """
        for line in WINNING_LINES:
            if cls._check_line(board, line) is not None:
                return line
        return None

    @staticmethod
    def _check_line(board: Board, line: Line) -> Optional[Player]:
        first = board.cells[line[0][0]][line[0][1]]
        if first is None:
            return None
        for row, col in line[1:]:
            if board.cells[row][col] != first:
                return None
        return first
