"""
Reinforcement learning agent for the TicTacToe opponent.

Tabular Q-learning over (state, move) keys. The table is trained once per
finished game from the moves the opponent made, saved every few games,
and only consulted to choose between moves the search rates equally.
"""

import json
import random
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from logic.board import Board, Move, Player
from logic.game_state import GameState

from .config import AIConfig
from .heuristics import position_value


class GameResult(Enum):
    """Outcome of a game from one player's point of view."""
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


StateLike = Union[str, Board, GameState]


class QLearningAgent:
    """
    Q-learning agent with a persistent table.

    State keys are the 9 cells as base-3 digits, a mover flag and the two
    piece counts, e.g. "100020000_1_1_1". Boards are not folded by rotation
    or reflection. An action key appends the move: "100020000_1_1_1_0_2".
    """

    def __init__(self, storage=None, config: Optional[AIConfig] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize the agent and load any saved table.

        Args:
            storage: Blob store with load/save/delete, or None to keep
                everything in memory.
            config: Tuning values (default: AIConfig()).
            rng: Random source for exploration.
        """
        self.config = config or AIConfig()
        self.storage = storage
        self.rng = rng or random.Random()

        self.q_table: Dict[str, float] = {}
        self.exploration_rate = self.config.EXPLORATION_RATE
        self.games_played = 0

        # (state key, move) pairs of the game in progress
        self.episode: List[Tuple[str, Move]] = []

        self.load()

    # ==================== KEYS ====================

    @staticmethod
    def state_key(state: Union[Board, GameState], own_turn: bool = True) -> str:
        """
        Encode a position.

        Args:
            state: Board or GameState to encode.
            own_turn: Whether the agent is the side to move.
        """
        board = state.board if isinstance(state, GameState) else state
        x_count = board.count(Player.X)
        o_count = board.count(Player.O)
        flag = "1" if own_turn else "0"
        return f"{board.encode()}_{flag}_{x_count}_{o_count}"

    @staticmethod
    def action_key(state_key: str, move: Move) -> str:
        return f"{state_key}_{move[0]}_{move[1]}"

    def _key_of(self, state: StateLike) -> str:
        if isinstance(state, str):
            return state
        return self.state_key(state)

    # ==================== POLICY ====================

    def value_of(self, state: StateLike, move: Move) -> float:
        """Stored value of playing `move` in `state` (0 if never seen)."""
        return self.q_table.get(self.action_key(self._key_of(state), move), 0.0)

    def choose_action(self, state: StateLike, available_moves: Sequence[Move],
                      exploring: bool = True) -> Optional[Move]:
        """
        Epsilon-greedy choice among `available_moves`.

        With probability `exploration_rate` (when exploring) a random move is
        returned. Otherwise the highest-valued move; ties, including moves
        never seen before, go to the center, then a corner, then an edge.
        """
        if not available_moves:
            return None

        if exploring and self.rng.random() < self.exploration_rate:
            return self.rng.choice(list(available_moves))

        key = self._key_of(state)
        values = {move: self.value_of(key, move) for move in available_moves}
        best_value = max(values.values())
        best = [move for move in available_moves if values[move] == best_value]

        return max(best, key=position_value)

    # ==================== LEARNING ====================

    def record_transition(self, state: StateLike, move: Move):
        """Remember a move made this game. Nothing is learned until the game ends."""
        self.episode.append((self._key_of(state), Move(*move)))

    def discard_episode(self):
        """Drop the moves of a game that was abandoned before it finished."""
        self.episode = []

    def finalize_episode(self, outcome: Union[GameResult, str]):
        """
        Learn from the finished game.

        The last recorded move gets the game reward, every earlier one a
        small step reward. The trace is walked backward so each update can
        bootstrap from the already-updated value of the move after it.

        Args:
            outcome: Result from this agent's own point of view.
        """
        outcome = GameResult(outcome)
        final_reward = {
            GameResult.WIN: self.config.REWARD_WIN,
            GameResult.LOSS: self.config.REWARD_LOSS,
            GameResult.DRAW: self.config.REWARD_DRAW,
        }[outcome]

        self.games_played += 1

        last = len(self.episode) - 1
        for i in range(last, -1, -1):
            state, move = self.episode[i]
            reward = final_reward if i == last else self.config.REWARD_STEP
            next_step = self.episode[i + 1] if i < last else None
            self._update(state, move, reward, next_step)

        self.exploration_rate = max(
            self.config.MIN_EXPLORATION_RATE,
            self.exploration_rate * self.config.EXPLORATION_DECAY
        )

        self.episode = []

        if self.games_played % self.config.SAVE_INTERVAL == 0:
            self.save()

    def _update(self, state: str, move: Move, reward: float,
                next_step: Optional[Tuple[str, Move]]):
        # Q(s,a) <- Q(s,a) + alpha * (r + gamma * Q(s',a') - Q(s,a))
        key = self.action_key(state, move)
        current = self.q_table.get(key, 0.0)

        next_value = 0.0
        if next_step is not None:
            next_value = self.value_of(*next_step)

        target = reward + self.config.DISCOUNT_FACTOR * next_value
        self.q_table[key] = current + self.config.LEARNING_RATE * (target - current)

    # ==================== PERSISTENCE ====================

    def to_blob(self) -> str:
        """Serialize the whole table, exploration rate and game counter."""
        return json.dumps({
            "q_table": [[key, value] for key, value in self.q_table.items()],
            "games_played": self.games_played,
            "exploration_rate": self.exploration_rate,
        })

    def from_blob(self, blob: str):
        """
        Replace the agent's learned state with a serialized one.

        Raises:
            ValueError, TypeError, KeyError, OverflowError: If the blob is
                malformed.
        """
        data = json.loads(blob)
        q_table = {str(key): float(value) for key, value in data["q_table"]}
        games_played = max(0, int(data.get("games_played", 0)))

        self.q_table = q_table
        self.games_played = games_played
        # Rebuilt from the game count rather than trusted from the blob
        self.exploration_rate = max(
            self.config.MIN_EXPLORATION_RATE,
            self.config.EXPLORATION_RATE
            * self.config.LOAD_DECAY ** min(games_played, self.config.LOAD_DECAY_GAMES_CAP)
        )

    def save(self) -> bool:
        """
        Save the learned state. Failures are reported and swallowed.

        Returns:
            True if the state was written.
        """
        if self.storage is None:
            return False
        try:
            self.storage.save(self.config.STORAGE_KEY, self.to_blob())
            return True
        except (OSError, ValueError, TypeError) as e:
            print(f"Warning: Could not save learned data: {e}")
            return False

    def load(self) -> bool:
        """
        Load the learned state. On any failure the agent starts fresh.

        Returns:
            True if saved state was found and restored.
        """
        if self.storage is None:
            return False
        try:
            blob = self.storage.load(self.config.STORAGE_KEY)
            if blob is None:
                return False
            self.from_blob(blob)
            return True
        except (OSError, ValueError, TypeError, KeyError, OverflowError) as e:
            print(f"Warning: Could not load learned data: {e}")
            self._clear()
            return False

    def reset(self):
        """Forget everything, including the saved copy."""
        self._clear()
        if self.storage is not None:
            try:
                self.storage.delete(self.config.STORAGE_KEY)
            except (OSError, ValueError) as e:
                print(f"Warning: Could not delete learned data: {e}")

    def _clear(self):
        self.q_table = {}
        self.games_played = 0
        self.exploration_rate = self.config.EXPLORATION_RATE
        self.episode = []
