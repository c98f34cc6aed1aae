"""
Main script for TicTacToe against the computer.

This script ties together:
- Logic (board, game state, move validation)
- AI (search, heuristics, learning agent, opponent)

Run this script to play TicTacToe against the AI!
"""

from typing import Optional

# Logic imports
from logic.game_state import GameState
from logic.board import Player
from logic.move_validator import MoveValidator

# AI imports
from ai.config import AIConfig
from ai.opponent import Opponent
from ai.q_agent import GameResult, QLearningAgent
from ai.storage import JsonFileStorage
from ai.strategies import Difficulty


class ConsoleGame:
    """
    Console controller for a human-vs-AI session.

    Game flow:
    1. Whoever starts places a symbol
    2. Human moves are typed as "row col"
    3. The AI answers with its move
    4. Repeat until someone wins or it's a draw
    5. The AI learns from the result, the score is updated
    """

    def __init__(
        self,
        human_player: Player = Player.X,
        difficulty: Difficulty = Difficulty.MEDIUM,
        ai_first: bool = False,
        store_path: Optional[str] = None,
        verbose: bool = False
    ):
        """
        Initialize the game.

        Args:
            human_player: Which symbol the human plays.
            difficulty: AI difficulty level.
            ai_first: If True, the AI opens every game.
            store_path: JSON file for the AI's learned data.
            verbose: Print AI search details.
        """
        print("\n" + "="*60)
        print("   TicTacToe - Initializing...")
        print("="*60 + "\n")

        self.human_player = human_player
        self.ai_player = human_player.opposite()
        self.ai_first = ai_first

        config = AIConfig()
        storage = JsonFileStorage(store_path or config.DEFAULT_STORE_PATH)
        self.agent = QLearningAgent(storage=storage, config=config)
        print(f"Loaded learned data: {len(self.agent.q_table)} entries, "
              f"{self.agent.games_played} games played")

        self.ai = Opponent(
            self.ai_player, difficulty,
            agent=self.agent, config=config, verbose=verbose
        )
        self.validator = MoveValidator()
        self.game_state = self._new_game()

        # Score bookkeeping belongs to the front end, not the AI
        self.scores = {Player.X: 0, Player.O: 0, None: 0}

        print("\n" + "="*60)
        print("   TicTacToe - Ready!")
        print(f"   Human plays: {human_player.value.upper()}")
        print(f"   AI plays: {self.ai_player.value.upper()} ({difficulty.value})")
        print("="*60 + "\n")

    def _new_game(self) -> GameState:
        starting = self.ai_player if self.ai_first else self.human_player
        return GameState(starting_player=starting)

    def start(self):
        """Play games until the human quits."""
        print("Enter moves as 'row col' (0-2). Type 'q' to quit.\n")

        while True:
            if not self._play_one_game():
                break
            self._show_game_result()

            answer = input("\nPlay again? [Y/n] ").strip().lower()
            if answer in ("n", "no", "q"):
                break
            self.game_state = self._new_game()

        # Keep whatever was learned since the last periodic save
        self.agent.save()

    def _play_one_game(self) -> bool:
        """Run one game. Returns False if the human quit midway."""
        self.game_state.print_board()

        while not self.game_state.is_finished():
            if self.game_state.current_player == self.ai_player:
                self._ai_move()
            elif not self._human_move():
                return False
            self.game_state.print_board()

        result = self.ai.result_for(self.game_state)
        self.ai.notify_outcome(result)
        self.scores[self.game_state.winner] += 1
        return True

    def _human_move(self) -> bool:
        """Ask for a move until a valid one is entered. False on quit."""
        while True:
            text = input(f"\nYour move ({self.human_player.value.upper()}): ").strip().lower()
            if text in ("q", "quit", "exit"):
                return False

            parts = text.replace(",", " ").split()
            if len(parts) != 2 or not all(p.isdigit() for p in parts):
                print("Please enter two numbers, e.g. '1 1'")
                continue

            row, col = int(parts[0]), int(parts[1])
            result = self.validator.validate_move(self.game_state, row, col)
            if not result.is_valid:
                print(result.error_message)
                continue

            self.game_state.apply_move(row, col)
            return True

    def _ai_move(self):
        """Let the AI play its move."""
        print("\n>>> AI is thinking...")

        move = self.ai.choose_move(self.game_state)
        if move is None:
            print("ERROR: AI could not find a move!")
            return

        print(f">>> AI places {self.ai_player.value.upper()} at ({move.row}, {move.col})")
        self.game_state.apply_move(move.row, move.col)

    def _show_game_result(self):
        """Show the final game result and running score."""
        print("\n" + "="*60)
        print("   GAME OVER!")
        print("="*60)

        winner = self.game_state.winner
        if winner is None:
            print("\nIt's a draw! Good game!")
        elif winner == self.human_player:
            print("\nCongratulations! You won!")
        else:
            print("\nAI wins! Better luck next time!")

        print(f"\nScore  You: {self.scores[self.human_player]}  "
              f"AI: {self.scores[self.ai_player]}  Draws: {self.scores[None]}")
        print("\n" + "="*60)


def self_play(games: int, difficulty: Difficulty, store_path: Optional[str] = None):
    """
    Train the learning agent by letting the AI play itself.

    The saved agent plays against a sparring partner whose learning is
    thrown away. The agent switches symbol every game and the two sides
    take turns opening.

    Args:
        games: Number of games to play.
        difficulty: Difficulty used by both sides.
        store_path: JSON file for the learned data.
    """
    config = AIConfig()
    storage = JsonFileStorage(store_path or config.DEFAULT_STORE_PATH)
    agent = QLearningAgent(storage=storage, config=config)

    tally = {result: 0 for result in GameResult}
    for i in range(games):
        learner_symbol = Player.X if i % 2 == 0 else Player.O
        learner = Opponent(learner_symbol, difficulty, agent=agent, config=config)
        sparring = Opponent(learner_symbol.opposite(), difficulty, config=config)
        players = {learner.player: learner, sparring.player: sparring}

        game = GameState(starting_player=Player.X if (i // 2) % 2 == 0 else Player.O)
        while not game.is_finished():
            move = players[game.current_player].choose_move(game)
            game.apply_move(move.row, move.col)

        result = learner.result_for(game)
        tally[result] += 1
        learner.notify_outcome(result)
        sparring.notify_outcome(sparring.result_for(game))

    agent.save()
    print(f"Self-play finished: {games} games "
          f"(wins: {tally[GameResult.WIN]}, losses: {tally[GameResult.LOSS]}, "
          f"draws: {tally[GameResult.DRAW]})")
    print(f"Learned entries: {len(agent.q_table)}, exploration rate: {agent.exploration_rate:.4f}")


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="TicTacToe vs AI")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.MEDIUM.value,
        help="AI difficulty level"
    )
    parser.add_argument(
        "--play-as",
        choices=["x", "o"],
        default="x",
        help="Symbol the human plays"
    )
    parser.add_argument(
        "--ai-first",
        action="store_true",
        help="Let the AI open every game"
    )
    parser.add_argument(
        "--store",
        default=None,
        help="JSON file for the AI's learned data"
    )
    parser.add_argument(
        "--self-play",
        type=int,
        metavar="N",
        help="Train by letting the AI play itself N times, then exit"
    )
    parser.add_argument(
        "--reset-learning",
        action="store_true",
        help="Forget everything the AI has learned, then exit"
    )
    parser.add_argument(
        "--no-ui",
        action="store_true",
        help="Run without UI (console mode)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print AI search details"
    )

    args = parser.parse_args()
    difficulty = Difficulty(args.difficulty)

    if args.reset_learning:
        config = AIConfig()
        storage = JsonFileStorage(args.store or config.DEFAULT_STORE_PATH)
        QLearningAgent(storage=storage, config=config).reset()
        print("Learned data cleared.")
        return

    if args.self_play:
        self_play(args.self_play, difficulty, args.store)
        return

    # Launch UI by default
    if not args.no_ui:
        from ui import TicTacToeUI
        print("\n" + "="*60)
        print("   TicTacToe UI")
        print("="*60 + "\n")
        ui = TicTacToeUI(difficulty=difficulty, store_path=args.store)
        ui.run()
        return

    game = ConsoleGame(
        human_player=Player(args.play_as),
        difficulty=difficulty,
        ai_first=args.ai_first,
        store_path=args.store,
        verbose=args.verbose
    )

    try:
        game.start()
    except (KeyboardInterrupt, EOFError):
        print("\n\nGame interrupted by user.")
        game.agent.save()
    finally:
        print("Goodbye!")


if __name__ == "__main__":
    main()
