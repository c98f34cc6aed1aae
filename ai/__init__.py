"""
AI module for TicTacToe.
Search, heuristics, learning agent, and the opponent that combines them.
"""

from .config import AIConfig
from .opponent import Opponent
from .q_agent import GameResult, QLearningAgent
from .search import MinimaxSearch, SearchResult
from .storage import JsonFileStorage, MemoryStorage
from .strategies import Difficulty

__version__ = "1.0.0"
