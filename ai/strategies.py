"""
Difficulty levels for the TicTacToe opponent.

Each level is a strategy object that picks one move once the forced
win/block/fork checks have found nothing. The opponent builds the one
matching its difficulty and calls `select()` once per turn.
"""

import random
from enum import Enum
from typing import Dict, List, Optional, Sequence, Type

import numpy as np

from logic.board import Move, Player
from logic.game_state import GameState

from .config import AIConfig
from .heuristics import position_value, strategic_score, threats_blocked
from .q_agent import QLearningAgent
from .search import MinimaxSearch


class Difficulty(Enum):
    """AI difficulty levels."""
    EASY = "easy"        # Blended heuristics, sometimes suboptimal
    MEDIUM = "medium"    # Minimax with occasional variety
    HARD = "hard"        # Full minimax, never loses


class MoveStrategy:
    """Base class for the per-difficulty move choice."""

    def __init__(
        self,
        player: Player,
        search: MinimaxSearch,
        agent: QLearningAgent,
        rng: random.Random,
        config: Optional[AIConfig] = None
    ):
        self.player = player
        self.search = search
        self.agent = agent
        self.rng = rng
        self.config = config or AIConfig()

    def select(self, state: GameState, moves: List[Move],
               recent_moves: Sequence[Move] = ()) -> Move:
        """
        Choose one of `moves` for the current position.

        Args:
            state: Current game state (our turn, not finished).
            moves: Legal moves, never empty.
            recent_moves: Our last few moves, avoided where possible.
        """
        raise NotImplementedError

    def _tie_break(self, state: GameState, moves: Sequence[Move]) -> Move:
        """Center, then corners, then edges; learned value decides the rest."""
        key = self.agent.state_key(state)
        return max(moves, key=lambda m: (position_value(m), self.agent.value_of(key, m)))

    @staticmethod
    def _avoid_recent(moves: Sequence[Move], recent_moves: Sequence[Move]) -> List[Move]:
        fresh = [move for move in moves if move not in recent_moves]
        return fresh or list(moves)


class HardStrategy(MoveStrategy):
    """Always an optimal move; no randomness."""

    def select(self, state, moves, recent_moves=()):
        result = self.search.best_moves(state, self.player)
        return self._tie_break(state, result.moves)


class MediumStrategy(MoveStrategy):
    """
    Minimax, but now and then a move that is merely close to the best.

    With MEDIUM_VARIETY_RATE probability a move within MEDIUM_MARGIN points
    of the best score is sampled instead of taking an exactly-best one.
    """

    def select(self, state, moves, recent_moves=()):
        scores = self.search.score_moves(state.board, self.player)
        best_score = max(scores.values())

        best_moves = [m for m, s in scores.items() if s == best_score]
        good_moves = [m for m, s in scores.items() if s >= best_score - self.config.MEDIUM_MARGIN]

        best_moves = self._avoid_recent(best_moves, recent_moves)
        good_moves = self._avoid_recent(good_moves, recent_moves)

        if (self.rng.random() < self.config.MEDIUM_VARIETY_RATE
                and len(good_moves) > len(best_moves)):
            return self.rng.choice(good_moves)

        return self._tie_break(state, best_moves)


class EasyStrategy(MoveStrategy):
    """
    Blend of search score and hand-made heuristics.

    Per move: 70% minimax score, 20% strategic score (x2), 5% position
    value (x5), 5% defensive bonus (x10 per opponent threat removed).
    A move that removes an opponent threat is always taken first.
    Otherwise the top move is played with EASY_BEST_PROBABILITY, else one
    of the top EASY_TOP_CANDIDATES at random.
    """

    def select(self, state, moves, recent_moves=()):
        board = state.board
        candidates = self._avoid_recent(moves, recent_moves)

        blocked = {move: threats_blocked(board, move, self.player) for move in candidates}
        blocking = [move for move in candidates if blocked[move] > 0]
        if blocking:
            return max(blocking, key=lambda m: (blocked[m], position_value(m)))

        scores = self.search.score_moves(board, self.player)
        blended = self.blend(state, candidates, scores, blocked)

        # Highest blend first, minimax score breaks near-ties
        order = sorted(
            range(len(candidates)),
            key=lambda i: (-blended[i], -scores[candidates[i]])
        )

        if self.rng.random() < self.config.EASY_BEST_PROBABILITY:
            top_score = blended[order[0]]
            tied = [
                candidates[i] for i in order
                if top_score - blended[i] <= self.config.EASY_TIE_TOLERANCE
            ]
            if len(tied) == 1:
                return tied[0]
            # The learning agent settles ties, exploring now and then
            return self.agent.choose_action(state, tied, exploring=True)

        top = [candidates[i] for i in order[:self.config.EASY_TOP_CANDIDATES]]
        return self.rng.choice(top)

    def blend(self, state: GameState, moves: Sequence[Move],
              scores: Dict[Move, int], blocked: Dict[Move, int]) -> np.ndarray:
        """
        Blended score of each move, in the order of `moves`.

        Returns:
            Array of shape (len(moves),).
        """
        config = self.config
        features = np.array([
            [
                scores[move],
                strategic_score(state.board, move, self.player, config) * config.STRATEGIC_SCALE,
                position_value(move) * config.POSITION_SCALE,
                blocked[move] * config.DEFENSIVE_SCALE,
            ]
            for move in moves
        ], dtype=np.float64)

        return features @ np.asarray(config.EASY_WEIGHTS, dtype=np.float64)


STRATEGIES: Dict[Difficulty, Type[MoveStrategy]] = {
    Difficulty.EASY: EasyStrategy,
    Difficulty.MEDIUM: MediumStrategy,
    Difficulty.HARD: HardStrategy,
}
