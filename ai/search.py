"""
Exact game-tree search for TicTacToe.
Uses the Minimax algorithm with alpha-beta pruning to score every move.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from logic.board import Board, Move, Player
from logic.game_state import GameState
from logic.win_checker import WinChecker

from .config import AIConfig


@dataclass
class SearchResult:
    """Outcome of a search from one position."""
    score: int                                   # Best score for the searched-for player
    moves: List[Move] = field(default_factory=list)  # All moves reaching that score


class MinimaxSearch:
    """
    Minimax with alpha-beta pruning over a Board.

    Scores are from the point of view of the player passed in:
    a win is WIN_SCORE - depth, a loss is depth - WIN_SCORE, a draw is 0,
    so faster wins and slower losses are preferred.

    The board is changed in place while searching and put back before
    each call returns. Do not run two searches on the same board at once.
    """

    def __init__(self, config: Optional[AIConfig] = None):
        self.config = config or AIConfig()

        # Keep track of how many positions we've evaluated (for debugging)
        self.moves_evaluated = 0

    def best_moves(self, state: Union[GameState, Board], player: Player,
                   to_move: Optional[Player] = None) -> SearchResult:
        """
        Find the optimal score and every move that achieves it.

        Args:
            state: Position to search (a GameState, or a bare Board plus `to_move`).
            player: The symbol whose outcome is being maximized.
            to_move: Who moves next; taken from the GameState when not given.

        Returns:
            SearchResult. On a finished game the move list is empty.
        """
        board, to_move, winner, finished = self._unpack(state, to_move)

        if finished:
            return SearchResult(score=self._terminal_score(winner, player, 0))

        scores = self.score_moves(board, player, to_move)
        if to_move == player:
            best = max(scores.values())
        else:
            best = min(scores.values())

        return SearchResult(
            score=best,
            moves=[move for move, score in scores.items() if score == best],
        )

    def score_moves(self, board: Board, player: Player,
                    to_move: Optional[Player] = None) -> Dict[Move, int]:
        """
        Exact minimax score of every empty cell.

        Each root move is searched with a full window so the scores can be
        compared with each other, not just the best one.

        Args:
            board: Position to search (must not be finished).
            player: The symbol whose outcome is being maximized.
            to_move: Who plays the scored moves (default: `player`).

        Returns:
            Dict of Move -> score, in row-major order.
        """
        if to_move is None:
            to_move = player

        self.moves_evaluated = 0
        scores: Dict[Move, int] = {}
        for move in board.empty_cells():
            scores[move] = self.score_move(board, move, player, to_move)
        return scores

    def score_move(self, board: Board, move: Move, player: Player,
                   to_move: Optional[Player] = None) -> int:
        """Exact minimax score of `to_move` playing `move`."""
        if to_move is None:
            to_move = player

        row, col = move
        with board.trial(row, col, to_move):
            return self._minimax(
                board, player, move,
                depth=0,
                is_maximizing=(to_move != player),
                alpha=float('-inf'),
                beta=float('inf'),
            )

    def _minimax(
        self,
        board: Board,
        player: Player,
        last_move: Move,
        depth: int,
        is_maximizing: bool,
        alpha: float,
        beta: float
    ) -> int:
        """
        Minimax algorithm with alpha-beta pruning.

        Args:
            board: Position after `last_move` was played.
            player: The symbol being maximized.
            last_move: The move that produced this position.
            depth: Plies since the root move.
            is_maximizing: True if `player` moves next.
            alpha: Alpha value for pruning.
            beta: Beta value for pruning.

        Returns:
            The score of the position.
        """
        self.moves_evaluated += 1

        # Only the piece just placed can have finished the game
        row, col = last_move
        if WinChecker.is_win_at(board, row, col):
            winner = board.get(row, col)
            return self._terminal_score(winner, player, depth)

        valid_moves = board.empty_cells()
        if not valid_moves:
            return 0  # Draw

        if is_maximizing:
            max_score = float('-inf')
            for move in valid_moves:
                with board.trial(move.row, move.col, player):
                    score = self._minimax(board, player, move, depth + 1, False, alpha, beta)
                max_score = max(max_score, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break  # Prune
            return max_score
        else:
            opponent = player.opposite()
            min_score = float('inf')
            for move in valid_moves:
                with board.trial(move.row, move.col, opponent):
                    score = self._minimax(board, player, move, depth + 1, True, alpha, beta)
                min_score = min(min_score, score)
                beta = min(beta, score)
                if beta <= alpha:
                    break  # Prune
            return min_score

    def _terminal_score(self, winner: Optional[Player], player: Player, depth: int) -> int:
        if winner is None:
            return 0
        if winner == player:
            return self.config.WIN_SCORE - depth
        return depth - self.config.WIN_SCORE

    @staticmethod
    def _unpack(state: Union[GameState, Board], to_move: Optional[Player]):
        if isinstance(state, GameState):
            return (
                state.board,
                to_move or state.current_player,
                state.winner,
                state.is_finished(),
            )

        if to_move is None:
            raise ValueError("to_move is required when searching a bare Board")
        winner = WinChecker.check_winner(state)
        return state, to_move, winner, winner is not None or state.is_full()


# Quick demo
if __name__ == "__main__":
    search = MinimaxSearch()

    game = GameState.from_rows([
        ["x", "x", None],
        [None, "o", None],
        [None, None, None],
    ])
    game.print_board()

    result = search.best_moves(game, Player.O)
    print(f"O must play one of {result.moves} (score: {result.score}, "
          f"{search.moves_evaluated} positions evaluated)")
