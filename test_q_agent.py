"""
Tests for the Q-learning agent and its blob stores.
"""

import json
import random

import pytest

from ai.config import AIConfig
from ai.q_agent import GameResult, QLearningAgent
from ai.storage import JsonFileStorage, MemoryStorage
from logic.board import Board, Move, Player
from logic.game_state import GameState


KEY = AIConfig.STORAGE_KEY


def make_agent(storage=None, seed=0):
    return QLearningAgent(storage=storage, rng=random.Random(seed))


def test_state_key_format():
    assert QLearningAgent.state_key(Board()) == "000000000_1_0_0"

    game = GameState.from_rows([
        ["x", None, None],
        [None, "o", None],
        [None, None, None],
    ])
    assert QLearningAgent.state_key(game) == "100020000_1_1_1"
    assert QLearningAgent.state_key(game, own_turn=False) == "100020000_0_1_1"
    assert QLearningAgent.action_key("100020000_1_1_1", Move(0, 2)) == "100020000_1_1_1_0_2"


def test_unseen_moves_are_worth_zero():
    agent = make_agent()
    assert agent.value_of(Board(), Move(1, 1)) == 0.0


def test_finalize_win_updates_backward():
    agent = make_agent()
    agent.record_transition("s1", Move(1, 1))
    agent.record_transition("s2", Move(0, 0))
    agent.finalize_episode(GameResult.WIN)

    # Last move: 0 + 0.3 * (100 - 0)
    assert agent.value_of("s2", Move(0, 0)) == pytest.approx(30.0)
    # Earlier move bootstraps from the updated last one: 0.3 * (0.1 + 0.9 * 30)
    assert agent.value_of("s1", Move(1, 1)) == pytest.approx(8.13)
    assert agent.games_played == 1
    assert agent.episode == []


@pytest.mark.parametrize("outcome, expected", [
    ("loss", -30.0),
    ("draw", 3.0),
])
def test_finalize_other_outcomes(outcome, expected):
    agent = make_agent()
    agent.record_transition("s", Move(2, 2))
    agent.finalize_episode(outcome)
    assert agent.value_of("s", Move(2, 2)) == pytest.approx(expected)


def test_win_raises_existing_value():
    agent = make_agent()
    agent.q_table[QLearningAgent.action_key("s", Move(0, 0))] = 50.0
    agent.record_transition("s", Move(0, 0))
    agent.finalize_episode(GameResult.WIN)
    assert agent.value_of("s", Move(0, 0)) == pytest.approx(65.0)


def test_exploration_decays_to_floor():
    agent = make_agent()
    agent.finalize_episode(GameResult.DRAW)
    assert agent.exploration_rate == pytest.approx(0.1 * 0.995)

    for _ in range(500):
        agent.finalize_episode(GameResult.DRAW)
    assert agent.exploration_rate == pytest.approx(0.05)


def test_invalid_outcome_rejected():
    agent = make_agent()
    with pytest.raises(ValueError):
        agent.finalize_episode("victory")


def test_saves_every_ten_games():
    storage = MemoryStorage()
    agent = make_agent(storage)

    for _ in range(9):
        agent.finalize_episode(GameResult.DRAW)
    assert storage.load(KEY) is None

    agent.finalize_episode(GameResult.DRAW)
    saved = json.loads(storage.load(KEY))
    assert saved["games_played"] == 10
    assert set(saved) == {"q_table", "games_played", "exploration_rate"}


def test_round_trip_keeps_exact_values():
    storage = MemoryStorage()
    agent = make_agent(storage)
    agent.q_table = {
        "000000000_1_0_0_1_1": 0.1 + 0.2,
        "100020000_1_1_1_0_2": -33.333333333333336,
        "120000000_1_1_1_2_2": 1e-12,
    }
    agent.games_played = 42
    assert agent.save()

    restored = make_agent(storage)
    assert restored.q_table == agent.q_table
    assert restored.games_played == 42


@pytest.mark.parametrize("games, expected", [
    (0, 0.1),
    (10, 0.1 * 0.99 ** 10),
    (100, 0.05),
    (5000, 0.05),
])
def test_exploration_rebuilt_on_load(games, expected):
    blob = json.dumps({"q_table": [], "games_played": games, "exploration_rate": 0.9})
    agent = make_agent(MemoryStorage({KEY: blob}))
    assert agent.games_played == games
    assert agent.exploration_rate == pytest.approx(expected)


def test_negative_game_count_is_clamped():
    blob = json.dumps({"q_table": [], "games_played": -5})
    agent = make_agent(MemoryStorage({KEY: blob}))
    assert agent.games_played == 0
    assert agent.exploration_rate == pytest.approx(0.1)


@pytest.mark.parametrize("blob", [
    "not json",
    json.dumps([1, 2, 3]),
    json.dumps({"games_played": 3}),
    json.dumps({"q_table": [["k"]], "games_played": 3}),
    json.dumps({"q_table": [["k", "abc"]], "games_played": 3}),
    '{"q_table": [], "games_played": Infinity}',
    '{"q_table": [], "games_played": 1e400}',
    '{"q_table": [], "games_played": NaN}',
])
def test_malformed_blob_starts_fresh(blob):
    agent = make_agent(MemoryStorage({KEY: blob}))
    assert agent.q_table == {}
    assert agent.games_played == 0
    assert agent.exploration_rate == pytest.approx(0.1)


def test_save_failure_is_swallowed():
    class BrokenStorage(MemoryStorage):
        def save(self, key, blob):
            raise OSError("disk full")

    agent = make_agent(BrokenStorage())
    assert not agent.save()

    for _ in range(10):
        agent.finalize_episode(GameResult.WIN)
    assert agent.games_played == 10


def test_choose_action_prefers_center_when_untrained():
    agent = make_agent()
    moves = Board().empty_cells()
    assert agent.choose_action(Board(), moves, exploring=False) == Move(1, 1)


def test_choose_action_uses_learned_values():
    agent = make_agent()
    key = QLearningAgent.state_key(Board())
    agent.q_table[QLearningAgent.action_key(key, Move(2, 1))] = 5.0
    agent.q_table[QLearningAgent.action_key(key, Move(1, 1))] = -5.0
    assert agent.choose_action(key, Board().empty_cells(), exploring=False) == Move(2, 1)


def test_choose_action_explores():
    agent = make_agent(seed=3)
    agent.exploration_rate = 1.0
    moves = [Move(0, 1), Move(2, 1)]
    picks = {agent.choose_action(Board(), moves) for _ in range(50)}
    assert picks == set(moves)
    assert agent.choose_action(Board(), []) is None


def test_discard_episode():
    agent = make_agent()
    agent.record_transition("s", Move(0, 0))
    agent.discard_episode()
    agent.finalize_episode(GameResult.WIN)
    assert agent.q_table == {}


def test_reset_clears_saved_state():
    storage = MemoryStorage()
    agent = make_agent(storage)
    agent.record_transition("s", Move(0, 0))
    agent.finalize_episode(GameResult.WIN)
    agent.save()

    agent.reset()
    assert agent.q_table == {}
    assert agent.games_played == 0
    assert storage.load(KEY) is None


def test_json_file_storage(tmp_path):
    path = tmp_path / "nested" / "learned.json"
    storage = JsonFileStorage(str(path))

    assert storage.load(KEY) is None
    storage.save(KEY, "blob-1")
    storage.save("other", "blob-2")
    assert path.exists()
    assert storage.load(KEY) == "blob-1"

    storage.delete(KEY)
    assert storage.load(KEY) is None
    assert storage.load("other") == "blob-2"


def test_agent_persists_to_file(tmp_path):
    storage = JsonFileStorage(str(tmp_path / "learned.json"))
    agent = make_agent(storage)
    agent.record_transition("s", Move(1, 1))
    agent.finalize_episode(GameResult.WIN)
    agent.save()

    restored = make_agent(JsonFileStorage(str(tmp_path / "learned.json")))
    assert restored.value_of("s", Move(1, 1)) == agent.value_of("s", Move(1, 1))


def test_corrupt_file_starts_fresh(tmp_path):
    path = tmp_path / "learned.json"
    path.write_text("[]", encoding="utf-8")

    agent = make_agent(JsonFileStorage(str(path)))
    assert agent.q_table == {}
    assert agent.games_played == 0
