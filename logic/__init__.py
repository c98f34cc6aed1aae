"""
Logic module for TicTacToe.
Handles the board, game state, and rules.
"""

from .board import Board, Move, Player
from .game_state import GameState, PlayedMove
from .move_validator import MoveValidator, ValidationResult
from .win_checker import WinChecker
