"""
Game state management for TicTacToe.
Tracks the board, whose turn it is, and how the game ended.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .board import Board, Move, Player
from .win_checker import WinChecker


@dataclass
class PlayedMove:
    """
    A move that was applied to the game.
    """
    player: Player          # Who made the move
    row: int                # Row (0-2)
    col: int                # Column (0-2)
    move_number: int        # Turn index (0-8)


@dataclass
class GameState:
    """
    The complete state of the TicTacToe game.

    Tracks:
    - The 3x3 board
    - Current player
    - How many turns have been played (0-9)
    - Move history
    - The winner, once a line is completed

    The game is finished once there is a winner or all 9 turns are played.
    """

    board: Board = field(default_factory=Board)

    # Who opened the game; the opener never has fewer pieces than the other side
    starting_player: Player = Player.X

    # Current player's turn (defaults to the starting player)
    current_player: Optional[Player] = None

    turns_played: int = 0

    # Move history
    moves: List[PlayedMove] = field(default_factory=list)

    # Set once, by the move that completes a line
    winner: Optional[Player] = None

    def __post_init__(self):
        if self.current_player is None:
            self.current_player = self.starting_player

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Optional[str]]],
        current_player: Optional[Player] = None,
    ) -> "GameState":
        """
        Build a state from a picture of the board.

        Args:
            rows: 3 rows of 3 cells, each "x", "o", or None/"" / "_" for empty.
            current_player: Who moves next. Only needed when both symbols
                have the same count; otherwise it is implied by the counts.

        Returns:
            The GameState.

        Raises:
            ValueError: If the board could not come from legal alternating play.
        """
        if len(rows) != Board.SIZE or any(len(row) != Board.SIZE for row in rows):
            raise ValueError("Board must be 3x3")

        cells = []
        for row in rows:
            cells.append([cls._parse_cell(value) for value in row])
        board = Board(cells)

        x_count = board.count(Player.X)
        o_count = board.count(Player.O)
        if abs(x_count - o_count) > 1:
            raise ValueError(f"Impossible piece counts: x={x_count}, o={o_count}")

        if x_count > o_count:
            starting, to_move = Player.X, Player.O
        elif o_count > x_count:
            starting, to_move = Player.O, Player.X
        else:
            to_move = current_player or Player.X
            starting = to_move

        if current_player is not None and current_player != to_move:
            raise ValueError(f"It cannot be {current_player.value}'s turn on this board")

        winners = WinChecker.all_winners(board)
        if len(winners) > 1:
            raise ValueError("Both players cannot have a winning line")
        if winners and winners[0] == to_move:
            raise ValueError("Moves were played after the game was won")

        return cls(
            board=board,
            starting_player=starting,
            current_player=to_move,
            turns_played=x_count + o_count,
            winner=winners[0] if winners else None,
        )

    @staticmethod
    def _parse_cell(value) -> Optional[Player]:
        if value is None or value in ("", "_", " ", "."):
            return None
        if isinstance(value, Player):
            return value
        try:
            return Player(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown cell value: {value!r}") from None

    def apply_move(self, row: int, col: int) -> bool:
        """
        Make a move at the given position for the current player.

        Occupied cells, out-of-range cells, and moves after the game is over
        are ignored. Callers that need to know why should use MoveValidator
        first.

        Args:
            row: Row index (0-2).
            col: Column index (0-2).

        Returns:
            True if the move was applied, False if it was ignored.
        """
        if self.is_finished():
            return False
        if not (0 <= row < Board.SIZE and 0 <= col < Board.SIZE):
            return False
        if not self.board.is_empty(row, col):
            return False

        player = self.current_player
        self.board.place(row, col, player)
        self.moves.append(PlayedMove(
            player=player,
            row=row,
            col=col,
            move_number=self.turns_played,
        ))
        self.turns_played += 1

        # Only the lines through the new piece can have changed
        if WinChecker.is_win_at(self.board, row, col):
            self.winner = player

        self.current_player = player.opposite()
        return True

    def is_finished(self) -> bool:
        return self.winner is not None or self.turns_played >= 9

    def is_draw(self) -> bool:
        return self.winner is None and self.turns_played >= 9

    def cell_at(self, row: int, col: int) -> Optional[Player]:
        return self.board.get(row, col)

    def get_empty_cells(self) -> List[Move]:
        """
        Get all empty cells on the board.

        Returns:
            List of Move tuples.
        """
        return self.board.empty_cells()

    def available_moves(self) -> List[Move]:
        """Legal moves for the current player (none once the game is over)."""
        if self.is_finished():
            return []
        return self.board.empty_cells()

    def copy(self) -> "GameState":
        """Create a deep copy of the game state."""
        return GameState(
            board=self.board.copy(),
            starting_player=self.starting_player,
            current_player=self.current_player,
            turns_played=self.turns_played,
            moves=list(self.moves),
            winner=self.winner,
        )

    def print_board(self):
        """Print the board to console."""
        print("\n    0   1   2")
        print("  +---+---+---+")

        for row in range(3):
            row_str = "|"
            for col in range(3):
                cell = self.board.get(row, col)
                mark = cell.value.upper() if cell is not None else " "
                row_str += f" {mark} |"
            print(f"{row} {row_str}")
            print("  +---+---+---+")

        # Print game info
        if self.winner:
            print(f"\n{self.winner.value.upper()} WINS!")
        elif self.is_draw():
            print("\nIt's a DRAW!")
        else:
            print(f"\nCurrent turn: {self.current_player.value.upper()}")


# Quick demo
if __name__ == "__main__":
    game = GameState()

    moves = [
        (1, 1),  # X center
        (0, 0),  # O top-left
        (0, 2),  # X top-right
        (2, 2),  # O bottom-right
        (2, 0),  # X bottom-left - completes the anti-diagonal
    ]

    for row, col in moves:
        print(f"\n{game.current_player.value} moves to ({row}, {col})")
        game.apply_move(row, col)
        game.print_board()
