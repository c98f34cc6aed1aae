"""
AI configuration for the TicTacToe opponent.
All the tuning values for search, heuristics, learning, and persistence.
"""


class AIConfig:
    """
    Configuration class for the opponent and its learning agent.

    The Easy blend weights and the reward values define how the opponent
    plays. Changing them changes its strength.
    """

    # ==================== SEARCH ====================
    # Terminal score for a win; the search depth is subtracted from it
    WIN_SCORE = 100

    # ==================== HEURISTIC SCORING ====================
    # Composite "strategic" score of a single move
    THREAT_WEIGHT = 4         # per two-in-a-row created
    BLOCK_WEIGHT = 5          # per opponent two-in-a-row removed
    FORK_WEIGHT = 6           # per fork opportunity left on the board
    CENTER_BONUS = 2
    STRATEGIC_CAP = 50

    # ==================== EASY DIFFICULTY ====================
    # Each feature is scaled to roughly the minimax range before blending
    STRATEGIC_SCALE = 2       # 0-50  -> 0-100
    POSITION_SCALE = 5        # 1-3   -> 5-15
    DEFENSIVE_SCALE = 10      # per opponent threat removed

    # Blend weights: minimax, strategic, position, defensive
    EASY_WEIGHTS = (0.70, 0.20, 0.05, 0.05)

    EASY_BEST_PROBABILITY = 0.90   # otherwise sample from the top few
    EASY_TOP_CANDIDATES = 3
    EASY_TIE_TOLERANCE = 0.1

    # ==================== MEDIUM DIFFICULTY ====================
    MEDIUM_VARIETY_RATE = 0.05     # chance to pick a near-best move
    MEDIUM_MARGIN = 3              # "near-best" = within this many points

    # Own moves remembered to avoid cycling through the same cells
    RECENT_MOVES = 6

    # ==================== Q-LEARNING ====================
    LEARNING_RATE = 0.3       # alpha
    DISCOUNT_FACTOR = 0.9     # gamma

    EXPLORATION_RATE = 0.1    # epsilon at the start
    MIN_EXPLORATION_RATE = 0.05
    EXPLORATION_DECAY = 0.995  # per finished game

    # Rate rebuilt on load: max(min, start * LOAD_DECAY ** min(games, cap))
    LOAD_DECAY = 0.99
    LOAD_DECAY_GAMES_CAP = 1000

    REWARD_WIN = 100.0
    REWARD_LOSS = -100.0
    REWARD_DRAW = 10.0
    REWARD_STEP = 0.1         # every move before the last

    SAVE_INTERVAL = 10        # games between saves

    # ==================== PERSISTENCE ====================
    STORAGE_KEY = "ticTacToeRL"
    DEFAULT_STORE_PATH = "data/learned_data.json"
