"""
Move validator for TicTacToe.
Tells a caller why a move would be rejected before it is applied.
"""

from dataclasses import dataclass
from typing import List, Optional

from .board import Move
from .game_state import GameState


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveValidator:
    """
    Validates TicTacToe moves.

    GameState.apply_move ignores bad moves silently; front ends that want
    to tell the player what went wrong check here first.

    Rules:
    1. Game must not be over
    2. Position must be on the board
    3. Can only place on empty cells
    """

    def validate_move(
        self,
        game_state: GameState,
        row: int,
        col: int
    ) -> ValidationResult:
        """
        Validate a move.

        Args:
            game_state: Current game state.
            row: Row to place piece (0-2).
            col: Column to place piece (0-2).

        Returns:
            ValidationResult with is_valid and error_message.
        """
        if game_state.is_finished():
            return ValidationResult(
                is_valid=False,
                error_message="Game is already over!"
            )

        if not (0 <= row <= 2 and 0 <= col <= 2):
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid position ({row}, {col}). Must be 0-2."
            )

        occupant = game_state.cell_at(row, col)
        if occupant is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell ({row}, {col}) is already occupied by {occupant.value.upper()}"
            )

        return ValidationResult(is_valid=True)

    def get_valid_moves(self, game_state: GameState) -> List[Move]:
        """
        Get all valid moves for the current player.

        Args:
            game_state: Current game state.

        Returns:
            List of valid Move positions.
        """
        return game_state.available_moves()
