"""
The 3x3 board and the two symbols that can be placed on it.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional


class Player(Enum):
    """The two symbols in the game."""
    X = "x"
    O = "o"

    def opposite(self) -> "Player":
        """Get the opposite player."""
        return Player.O if self == Player.X else Player.X


class Move(NamedTuple):
    """A (row, col) coordinate pair into an empty cell."""
    row: int
    col: int


# Base-3 digit for each cell value, used by the state encoding
CELL_DIGITS = {None: "0", Player.X: "1", Player.O: "2"}


class Board:
    """
    A 3x3 grid of cells, each None (empty) or a Player.

    The board is only ever changed by placing into an empty cell. Search
    code tries moves with `trial()`, which puts the cell back on the way
    out no matter how the block is left.
    """

    SIZE = 3

    def __init__(self, cells: Optional[List[List[Optional[Player]]]] = None):
        if cells is None:
            cells = [[None for _ in range(self.SIZE)] for _ in range(self.SIZE)]
        self.cells = cells

    def get(self, row: int, col: int) -> Optional[Player]:
        return self.cells[row][col]

    def is_empty(self, row: int, col: int) -> bool:
        return self.cells[row][col] is None

    def place(self, row: int, col: int, player: Player):
        self.cells[row][col] = player

    def clear(self, row: int, col: int):
        self.cells[row][col] = None

    @contextmanager
    def trial(self, row: int, col: int, player: Player) -> Iterator["Board"]:
        """
        Temporarily place `player` at (row, col).

        The cell is emptied again when the with-block exits, including on
        early return or break from inside it.
        """
        self.cells[row][col] = player
        try:
            yield self
        finally:
            self.cells[row][col] = None

    def empty_cells(self) -> List[Move]:
        """
        Get all empty cells on the board.

        Returns:
            List of Move tuples in row-major order.
        """
        return [
            Move(row, col)
            for row in range(self.SIZE)
            for col in range(self.SIZE)
            if self.cells[row][col] is None
        ]

    def count(self, player: Player) -> int:
        """How many cells hold `player`."""
        return sum(row.count(player) for row in self.cells)

    def is_full(self) -> bool:
        return all(cell is not None for row in self.cells for cell in row)

    def encode(self) -> str:
        """The 9 cells as a base-3 digit string (empty=0, X=1, O=2)."""
        return "".join(CELL_DIGITS[cell] for row in self.cells for cell in row)

    def copy(self) -> "Board":
        return Board([list(row) for row in self.cells])

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells == other.cells

    def __repr__(self) -> str:
        return f"Board({self.encode()})"
