"""
TicTacToe UI
A graphical interface for playing against the AI using Tkinter.

Shows:
- Clickable 3x3 board (X and O)
- Game status and the AI's last move
- Running score
- Difficulty level selection
"""

import tkinter as tk
from tkinter import ttk
from typing import Optional

# Logic imports
from logic.game_state import GameState
from logic.board import Player
from logic.move_validator import MoveValidator

# AI imports
from ai.config import AIConfig
from ai.opponent import Opponent
from ai.q_agent import QLearningAgent
from ai.storage import JsonFileStorage
from ai.strategies import Difficulty


# Delay before the AI answers, so its move doesn't appear instantly (ms)
AI_MOVE_DELAY = 400

SYMBOL_COLORS = {
    Player.X: ('#7f1d1d', '#f87171'),
    Player.O: ('#065f46', '#10b981'),
}


class TicTacToeUI:
    """
    Main UI class for TicTacToe against the AI.
    """

    def __init__(self, difficulty: Difficulty = Difficulty.HARD,
                 store_path: Optional[str] = None):
        """Initialize the UI."""
        self.difficulty = difficulty
        self.human_player = Player.X
        self.ai_player = Player.O
        self.ai_first = False

        config = AIConfig()
        self.agent = QLearningAgent(
            storage=JsonFileStorage(store_path or config.DEFAULT_STORE_PATH),
            config=config
        )
        self.ai = Opponent(self.ai_player, difficulty, agent=self.agent, config=config)
        self.validator = MoveValidator()
        self.game_state = GameState(starting_player=self.human_player)

        # Score bookkeeping belongs to the front end, not the AI
        self.scores = {"human": 0, "ai": 0, "draw": 0}
        self.outcome_reported = False

        # Id of the scheduled AI move, cancelled when a new game starts
        self.pending_ai_move = None

        # Create UI
        self._create_ui()

    def _create_ui(self):
        """Create the Tkinter UI."""
        self.root = tk.Tk()
        self.root.title("TicTacToe")
        self.root.configure(bg='#1a1a2e')
        self.root.resizable(False, False)

        main_frame = ttk.Frame(self.root)
        main_frame.pack(fill=tk.BOTH, expand=True, padx=20, pady=20)

        # Configure style
        style = ttk.Style()
        style.theme_use('clam')
        style.configure('TFrame', background='#1a1a2e')
        style.configure('TLabel', background='#1a1a2e', foreground='white', font=('Segoe UI', 11))
        style.configure('Title.TLabel', font=('Segoe UI', 16, 'bold'), foreground='#00d4ff')
        style.configure('Status.TLabel', font=('Segoe UI', 12), foreground='#ffd700')
        style.configure('Move.TLabel', font=('Segoe UI', 11), foreground='#00ff88')

        # Board section
        ttk.Label(main_frame, text="🎮 Game Board", style='Title.TLabel').pack(pady=(0, 10))

        self.board_frame = ttk.Frame(main_frame)
        self.board_frame.pack(pady=10)

        self.board_cells = []
        for row in range(3):
            row_cells = []
            for col in range(3):
                cell = tk.Button(
                    self.board_frame,
                    text="",
                    font=('Segoe UI', 24, 'bold'),
                    width=4,
                    height=2,
                    bg='#16213e',
                    fg='white',
                    relief='ridge',
                    borderwidth=2,
                    command=lambda r=row, c=col: self._on_cell_click(r, c)
                )
                cell.grid(row=row, column=col, padx=2, pady=2)
                row_cells.append(cell)
            self.board_cells.append(row_cells)

        # Game status section
        ttk.Separator(main_frame, orient='horizontal').pack(fill=tk.X, pady=15)
        ttk.Label(main_frame, text="📊 Game Status", style='Title.TLabel').pack()

        self.status_label = ttk.Label(main_frame, text="Your turn", style='Status.TLabel')
        self.status_label.pack(pady=5)

        self.ai_move_label = ttk.Label(main_frame, text="AI is waiting...", style='Move.TLabel')
        self.ai_move_label.pack()

        self.score_label = ttk.Label(main_frame, text="")
        self.score_label.pack(pady=5)

        # Difficulty section
        ttk.Separator(main_frame, orient='horizontal').pack(fill=tk.X, pady=15)
        ttk.Label(main_frame, text="⚙️ Difficulty", style='Title.TLabel').pack()

        diff_frame = ttk.Frame(main_frame)
        diff_frame.pack(pady=10)

        self.diff_colors = {
            "EASY": "#4ade80",
            "MEDIUM": "#fbbf24",
            "HARD": "#f87171",
        }
        for value, color in self.diff_colors.items():
            selected = self.difficulty.name == value
            btn = tk.Button(
                diff_frame,
                text=value.capitalize(),
                font=('Segoe UI', 10, 'bold'),
                width=8,
                bg=color if selected else '#2d3748',
                fg='black' if selected else 'white',
                activebackground=color,
                command=lambda v=value: self._set_difficulty(v)
            )
            btn.pack(side=tk.LEFT, padx=5)
            setattr(self, f'btn_{value.lower()}', btn)

        # Control buttons
        ttk.Separator(main_frame, orient='horizontal').pack(fill=tk.X, pady=15)

        control_frame = ttk.Frame(main_frame)
        control_frame.pack(pady=10)

        self.first_var = tk.BooleanVar(value=self.ai_first)
        tk.Checkbutton(
            control_frame,
            text="AI plays first",
            variable=self.first_var,
            bg='#1a1a2e',
            fg='white',
            selectcolor='#2d3748',
            activebackground='#1a1a2e',
        ).pack(side=tk.LEFT, padx=5)

        tk.Button(
            control_frame,
            text="🔄 New Game",
            font=('Segoe UI', 11, 'bold'),
            bg='#6366f1',
            fg='white',
            width=12,
            command=self._reset_game
        ).pack(side=tk.LEFT, padx=5)

        tk.Button(
            main_frame,
            text="✕ Quit",
            font=('Segoe UI', 10),
            bg='#ef4444',
            fg='white',
            width=26,
            command=self._quit
        ).pack(pady=10)

        # Bind close event
        self.root.protocol("WM_DELETE_WINDOW", self._quit)

        self._update_display()

    def _set_difficulty(self, value: str):
        """Set the AI difficulty level."""
        self.difficulty = Difficulty[value]
        self.ai.set_difficulty(self.difficulty)

        # Update button colors
        for diff_name, color in self.diff_colors.items():
            btn = getattr(self, f'btn_{diff_name.lower()}')
            if diff_name == value:
                btn.configure(bg=color, fg='black')
            else:
                btn.configure(bg='#2d3748', fg='white')

        print(f"Difficulty set to: {value}")

    def _on_cell_click(self, row: int, col: int):
        """Handle a human move."""
        if self.game_state.current_player != self.human_player:
            return

        result = self.validator.validate_move(self.game_state, row, col)
        if not result.is_valid:
            self.status_label.configure(text=result.error_message)
            return

        self.game_state.apply_move(row, col)
        self._after_move()

    def _schedule_ai_move(self):
        self.status_label.configure(text="AI is thinking...")
        self.pending_ai_move = self.root.after(AI_MOVE_DELAY, self._ai_move)

    def _ai_move(self):
        """Let the AI play its move."""
        self.pending_ai_move = None
        move = self.ai.choose_move(self.game_state)
        if move is None:
            return

        self.game_state.apply_move(move.row, move.col)
        self.ai_move_label.configure(text=f"→ AI played ({move.row}, {move.col})")
        self._after_move()

    def _after_move(self):
        """Refresh the board and hand the turn over."""
        if self.game_state.is_finished():
            self._finish_game()
        elif self.game_state.current_player == self.ai_player:
            self._schedule_ai_move()
        self._update_display()

    def _finish_game(self):
        """Report the result to the AI once and update the score."""
        if self.outcome_reported:
            return
        self.outcome_reported = True

        winner = self.game_state.winner
        if winner is None:
            self.scores["draw"] += 1
        elif winner == self.human_player:
            self.scores["human"] += 1
        else:
            self.scores["ai"] += 1

        self.ai.notify_outcome(self.ai.result_for(self.game_state))

    def _update_display(self):
        """Update the board grid and the labels."""
        for row in range(3):
            for col in range(3):
                piece = self.game_state.cell_at(row, col)
                cell = self.board_cells[row][col]
                if piece is None:
                    cell.configure(text="", bg='#16213e')
                else:
                    bg_color, fg_color = SYMBOL_COLORS[piece]
                    cell.configure(text=piece.value.upper(), bg=bg_color, fg=fg_color)

        if self.game_state.is_finished():
            winner = self.game_state.winner
            if winner is None:
                self.status_label.configure(text="🤝 It's a DRAW!")
            elif winner == self.human_player:
                self.status_label.configure(text="🏆 You WIN!")
            else:
                self.status_label.configure(text="🏆 AI WINS!")
        elif self.game_state.current_player == self.human_player:
            self.status_label.configure(text=f"Your turn ({self.human_player.value.upper()})")

        self.score_label.configure(
            text=f"You: {self.scores['human']}   AI: {self.scores['ai']}   Draws: {self.scores['draw']}"
        )

    def _reset_game(self):
        """Start a new game, keeping the score."""
        print("Resetting game...")
        self.ai_first = self.first_var.get()
        starting = self.ai_player if self.ai_first else self.human_player
        if self.pending_ai_move is not None:
            self.root.after_cancel(self.pending_ai_move)
            self.pending_ai_move = None
        if not self.game_state.is_finished():
            self.ai.abandon_game()
        self.game_state = GameState(starting_player=starting)
        self.outcome_reported = False
        self.ai_move_label.configure(text="AI is waiting...")

        self._update_display()
        if self.ai_first:
            self._schedule_ai_move()

    def _quit(self):
        """Quit the application."""
        print("Quitting...")
        self.agent.save()
        self.root.quit()
        self.root.destroy()

    def run(self):
        """Run the UI main loop."""
        self.root.mainloop()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="TicTacToe UI")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.HARD.value,
        help="AI difficulty level"
    )
    parser.add_argument(
        "--store",
        default=None,
        help="JSON file for the AI's learned data"
    )

    args = parser.parse_args()

    ui = TicTacToeUI(difficulty=Difficulty(args.difficulty), store_path=args.store)
    ui.run()


if __name__ == "__main__":
    main()
