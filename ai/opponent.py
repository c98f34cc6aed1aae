"""
Computer opponent for TicTacToe.

Ties the search, heuristics, and learning agent into one move choice:
1. Win now if possible
2. Block the opponent's immediate win
3. Block an open two-in-a-row
4. Create a fork
5. Block the opponent's fork
6. Otherwise let the difficulty strategy decide
"""

import random
from collections import deque
from typing import Optional, Union

from logic.board import Move, Player
from logic.game_state import GameState

from . import heuristics
from .config import AIConfig
from .q_agent import GameResult, QLearningAgent
from .search import MinimaxSearch
from .strategies import STRATEGIES, Difficulty


class Opponent:
    """
    An AI that plays TicTacToe at a chosen difficulty.

    Every move it makes is recorded with its learning agent. The caller
    must report the result of each finished game once, through
    `notify_outcome()`, so the agent can learn from it.
    """

    def __init__(
        self,
        player: Player = Player.O,
        difficulty: Union[Difficulty, str] = Difficulty.MEDIUM,
        agent: Optional[QLearningAgent] = None,
        rng: Optional[random.Random] = None,
        config: Optional[AIConfig] = None,
        verbose: bool = False
    ):
        """
        Initialize the opponent.

        Args:
            player: Which symbol the AI plays (default: O)
            difficulty: EASY, MEDIUM or HARD (enum or its string value)
            agent: Learning agent; an in-memory one is created if None
            rng: Random source for the randomized difficulty levels
            config: Tuning values (default: AIConfig())
            verbose: Print a line per move with the search effort
        """
        self.player = player
        self.config = config or AIConfig()
        self.rng = rng or random.Random()
        self.verbose = verbose

        self.search = MinimaxSearch(self.config)
        self.agent = agent or QLearningAgent(config=self.config, rng=self.rng)

        # Own recent moves, avoided by the randomized levels
        self.recent_moves = deque(maxlen=self.config.RECENT_MOVES)

        self.difficulty = None
        self.strategy = None
        self.set_difficulty(difficulty)

    @property
    def opponent(self) -> Player:
        return self.player.opposite()

    def set_difficulty(self, difficulty: Union[Difficulty, str]):
        """Switch difficulty level; takes effect on the next move."""
        self.difficulty = Difficulty(difficulty)
        strategy_cls = STRATEGIES[self.difficulty]
        self.strategy = strategy_cls(
            self.player, self.search, self.agent, self.rng, self.config
        )

    def choose_move(self, game_state: GameState) -> Optional[Move]:
        """
        Get the move to play in the current position.

        Args:
            game_state: Current game state. It is searched in place and
                left exactly as it was.

        Returns:
            (row, col) Move, or None if the game is over or it is not our turn.
        """
        if game_state.is_finished():
            return None

        if game_state.current_player != self.player:
            print(f"Warning: It's not {self.player.value}'s turn!")
            return None

        valid_moves = game_state.available_moves()
        if not valid_moves:
            return None

        self.search.moves_evaluated = 0
        move, reason = self._forced_move(game_state)
        if move is None:
            move = self.strategy.select(game_state, valid_moves, tuple(self.recent_moves))
            reason = self.difficulty.value

        move = Move(*move)
        self.recent_moves.append(move)
        self.agent.record_transition(self.agent.state_key(game_state), move)

        if self.verbose:
            print(f"AI ({self.player.value}) plays {tuple(move)} [{reason}], "
                  f"{self.search.moves_evaluated} positions evaluated")

        return move

    def _forced_move(self, game_state: GameState):
        """The first of the fixed-priority checks that fires, with its name."""
        board = game_state.board

        move = heuristics.immediate_winning_move(board, self.player)
        if move is not None:
            return move, "win"

        move = heuristics.immediate_winning_move(board, self.opponent)
        if move is not None:
            return move, "block"

        move = heuristics.immediate_blocking_threat_move(board, self.opponent)
        if move is not None:
            return move, "block threat"

        move = heuristics.fork_move(board, self.player)
        if move is not None:
            return move, "fork"

        move = heuristics.block_fork_move(board, self.player)
        if move is not None:
            return move, "block fork"

        return None, None

    def result_for(self, game_state: GameState) -> Optional[GameResult]:
        """
        The result of a finished game from this AI's point of view.

        Returns:
            GameResult, or None while the game is still going.
        """
        if not game_state.is_finished():
            return None
        if game_state.winner is None:
            return GameResult.DRAW
        if game_state.winner == self.player:
            return GameResult.WIN
        return GameResult.LOSS

    def abandon_game(self):
        """Forget the current game without learning from it."""
        self.agent.discard_episode()
        self.recent_moves.clear()

    def notify_outcome(self, result: Union[GameResult, str]):
        """
        Learn from a finished game. Call exactly once per game.

        Args:
            result: "win", "loss" or "draw" from this AI's point of view.

        Raises:
            ValueError: If the result is not one of those.
        """
        result = GameResult(result)
        self.agent.finalize_episode(result)
        self.recent_moves.clear()
