# Tkinter board view + key input for the wrap-around Snake game and its autopilot.
from __future__ import annotations

import time
import tkinter as tk
from tkinter import messagebox

# Support both package imports and running this file directly.
try:
    from .game_logic import (
        MAX_CELL_SIZE,
        MAX_TICK_MS,
        MIN_CELL_SIZE,
        MIN_TICK_MS,
        Command,
        FoodModel,
        GameSnapshot,
        Phase,
        RenderModel,
        SnakeConfig,
        SnakeModel,
        SpecialFoodModel,
        StatusModel,
    )
    from .autoplayer import Decision
    from .game_session import GameSession
    from .utils import TILE_COUNT_CHOICES, command_for_key
except ImportError:
    from game_logic import (
        MAX_CELL_SIZE,
        MAX_TICK_MS,
        MIN_CELL_SIZE,
        MIN_TICK_MS,
        Command,
        FoodModel,
        GameSnapshot,
        Phase,
        RenderModel,
        SnakeConfig,
        SnakeModel,
        SpecialFoodModel,
        StatusModel,
    )
    from autoplayer import Decision
    from game_session import GameSession
    from utils import TILE_COUNT_CHOICES, command_for_key


FRAME_MS = 16  # frame pump period; the game tick itself is gated by tick_ms


def describe_decision(decision: Decision | None) -> str:
    """Sidebar line for the autopilot's latest choice."""
    if decision is None:
        return ""
    if decision.direction is None:
        return "AI: boxed in"
    if decision.target == "survival":
        return f"AI: no path, surviving {decision.direction}"
    return f"AI: {decision.target} in {decision.path_length}, heading {decision.direction}"


class SnakeApp:
    """Tkinter presentation layer: draws snapshots and forwards commands."""
    UI_SCALE = 1.2
    FONT = "Courier"
    BACKGROUND = "#121212"
    BOARD_BG = "#1a1a1a"
    PANEL_BG = "#202124"
    GRID_LINES = "#262626"
    PRIMARY = "#39ff88"
    PRIMARY_DIM = "#21b866"
    SECONDARY = "#f5d142"
    SPECIAL_COLOR = "red"
    TEXT = "#f0f0f0"
    TEXT_DIM = "#9a9a9a"
    BUTTON = "#3b82f6"

    GRID_PRESETS = {f"{size}x{size}": size for size in TILE_COUNT_CHOICES}
    PHASE_LABELS = {
        Phase.NOT_STARTED: "Ready",
        Phase.RUNNING: "Running",
        Phase.PAUSED: "Paused",
        Phase.GAME_OVER: "Game Over",
    }

    def __init__(self, root: tk.Tk) -> None:
        self.root = root
        self.root.title("Snake Autopilot")
        self.root.configure(bg=self.BACKGROUND)

        self.config = SnakeConfig()
        self.session = GameSession(self.config)
        self.after_id: str | None = None  # Tkinter timer id for the frame pump

        self._build_layout()
        self._bind_keys()
        self._apply_canvas_size()
        self._frame()

    def _s(self, value: int) -> int:
        return int(round(value * self.UI_SCALE))

    def _build_layout(self) -> None:
        container = tk.Frame(self.root, bg=self.BACKGROUND)
        container.pack(fill="both", expand=True, padx=self._s(12), pady=self._s(12))

        self.canvas = tk.Canvas(container, bg=self.BOARD_BG, highlightthickness=0, bd=0)
        self.canvas.pack(side="left", padx=(0, self._s(12)))

        self.sidebar = tk.Frame(container, bg=self.PANEL_BG, width=self._s(300))
        self.sidebar.pack(side="right", fill="y")
        self.sidebar.pack_propagate(False)

        self.message_var = tk.StringVar()
        self.state_var = tk.StringVar()
        self.length_var = tk.StringVar()
        self.decision_var = tk.StringVar()
        for var, size in (
            (self.message_var, 11),
            (self.state_var, 10),
            (self.length_var, 10),
            (self.decision_var, 10),
        ):
            tk.Label(
                self.sidebar,
                textvariable=var,
                fg=self.TEXT,
                bg=self.PANEL_BG,
                font=(self.FONT, self._s(size)),
                anchor="w",
                justify="left",
                wraplength=self._s(270),
            ).pack(fill="x", padx=self._s(12), pady=self._s(4))

        self._build_controls()
        self._build_buttons()

    def _build_controls(self) -> None:
        """Settings section for values that rebuild the game."""
        frame = tk.LabelFrame(
            self.sidebar,
            text="Settings",
            fg=self.TEXT,
            bg=self.PANEL_BG,
            bd=1,
            font=(self.FONT, self._s(10), "bold"),
            labelanchor="n",
        )
        frame.pack(fill="x", padx=self._s(12), pady=self._s(10))

        self.grid_size_var = tk.StringVar(value=f"{self.config.tile_count}x{self.config.tile_count}")
        self.cell_size_var = tk.StringVar(value=str(self.config.cell_size))
        self.speed_var = tk.StringVar(value=str(self.config.tick_ms))

        row = tk.Frame(frame, bg=self.PANEL_BG)
        row.pack(fill="x", padx=self._s(8), pady=self._s(4))
        tk.Label(row, text="Grid Size", fg=self.TEXT, bg=self.PANEL_BG).pack(side="left")
        tk.OptionMenu(row, self.grid_size_var, *self.GRID_PRESETS.keys()).pack(side="right")

        for label, var in (("Cell Size", self.cell_size_var), ("Tick (ms)", self.speed_var)):
            row = tk.Frame(frame, bg=self.PANEL_BG)
            row.pack(fill="x", padx=self._s(8), pady=self._s(4))
            tk.Label(row, text=label, fg=self.TEXT, bg=self.PANEL_BG).pack(side="left")
            tk.Spinbox(row, from_=0, to=9999, textvariable=var, width=8, justify="center").pack(side="right")

    def _build_buttons(self) -> None:
        frame = tk.Frame(self.sidebar, bg=self.PANEL_BG)
        frame.pack(fill="x", padx=self._s(12), pady=self._s(6))

        self._make_button(frame, "Start", self.session.start).pack(fill="x", pady=self._s(3))
        self._make_button(frame, "Pause / Resume", lambda: self._send(Command.TOGGLE_PAUSE)).pack(
            fill="x", pady=self._s(3)
        )
        self._make_button(frame, "Restart", lambda: self._send(Command.RESTART)).pack(fill="x", pady=self._s(3))
        self.autoplay_btn = self._make_button(frame, "Lazy? Start AI", self.toggle_autoplay, color=self.PRIMARY)
        self.autoplay_btn.pack(fill="x", pady=self._s(3))
        self._make_button(frame, "Apply Settings", self.apply_settings).pack(fill="x", pady=self._s(3))

        tk.Label(
            self.sidebar,
            text="Move: WASD / HJKL / arrows\nP pause, R restart",
            fg=self.TEXT_DIM,
            bg=self.PANEL_BG,
            justify="left",
            font=(self.FONT, self._s(9)),
        ).pack(anchor="w", padx=self._s(12), pady=self._s(6))

    def _make_button(self, parent: tk.Widget, text: str, command, color: str | None = None) -> tk.Button:
        return tk.Button(
            parent,
            text=text,
            command=command,
            fg="black" if color else self.TEXT,
            bg=color or self.BUTTON,
            bd=0,
            font=(self.FONT, self._s(10), "bold"),
            pady=self._s(6),
        )

    def _bind_keys(self) -> None:
        self.root.bind("<KeyPress>", self._on_key)

    def _on_key(self, event: tk.Event) -> None:
        command = command_for_key(event.keysym)
        if command is not None:
            self._send(command)

    def _send(self, command: Command) -> None:
        self.session.handle_command(command)

    def toggle_autoplay(self) -> None:
        enabled = self.session.toggle_autoplay()
        if enabled:
            self.autoplay_btn.configure(text="Stop AI", bg=self.SPECIAL_COLOR)
        else:
            self.autoplay_btn.configure(text="Lazy? Start AI", bg=self.PRIMARY)

    def _parse_int(self, raw: str, low: int, high: int, label: str) -> int:
        """Parse and range-check integer settings with a clear error message."""
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"{label} must be an integer.")
        if not (low <= value <= high):
            raise ValueError(f"{label} must be between {low} and {high}.")
        return value

    def apply_settings(self) -> None:
        """Validate sidebar values, then rebuild the game with the new config."""
        try:
            config = SnakeConfig(
                tile_count=self.GRID_PRESETS[self.grid_size_var.get()],
                cell_size=self._parse_int(self.cell_size_var.get(), MIN_CELL_SIZE, MAX_CELL_SIZE, "Cell size"),
                tick_ms=self._parse_int(self.speed_var.get(), MIN_TICK_MS, MAX_TICK_MS, "Tick"),
            )
        except (ValueError, KeyError) as exc:
            messagebox.showerror("Invalid Setting", str(exc))
            return

        self.config = config
        self.session.reconfigure(config)
        self._apply_canvas_size()

    def _apply_canvas_size(self) -> None:
        side_pixels = self.config.tile_count * self.config.cell_size
        self.canvas.configure(width=side_pixels, height=side_pixels)

    def _frame(self) -> None:
        """One pump of the game loop; re-arms itself like a next-frame callback."""
        snapshot = self.session.pump(time.monotonic() * 1000.0)
        self.draw(snapshot)
        self.after_id = self.root.after(FRAME_MS, self._frame)

    def _cell(self, x: int, y: int, inset: int) -> tuple[int, int, int, int]:
        cell = self.config.cell_size
        return x * cell + inset, y * cell + inset, (x + 1) * cell - inset, (y + 1) * cell - inset

    def draw(self, snapshot: GameSnapshot) -> None:
        """Render the grid, then each render model in draw order."""
        self.canvas.delete("all")
        size = snapshot.tile_count
        cell = self.config.cell_size

        for i in range(size + 1):
            pos = i * cell
            self.canvas.create_line(0, pos, size * cell, pos, fill=self.GRID_LINES)
            self.canvas.create_line(pos, 0, pos, size * cell, fill=self.GRID_LINES)

        for model in snapshot.models:
            self._draw_model(model)

        autopilot = " (AI)" if snapshot.autoplay else ""
        self.state_var.set(f"State: {self.PHASE_LABELS[snapshot.phase]}{autopilot}")
        self.length_var.set(f"Length: {len(snapshot.snake)}")
        self.decision_var.set(describe_decision(self.session.last_decision))

    def _draw_model(self, model: RenderModel) -> None:
        if isinstance(model, SnakeModel):
            for idx, (x, y) in enumerate(model.segments):
                color = self.PRIMARY if idx == 0 else self.PRIMARY_DIM
                self.canvas.create_rectangle(*self._cell(x, y, 1), fill=color, outline="")
        elif isinstance(model, FoodModel):
            if model.position is not None:
                self.canvas.create_rectangle(*self._cell(*model.position, 3), fill=self.SECONDARY, outline="")
        elif isinstance(model, SpecialFoodModel):
            if model.active and model.position is not None:
                self.canvas.create_oval(*self._cell(*model.position, 2), fill=self.SPECIAL_COLOR, outline="")
        elif isinstance(model, StatusModel):
            self.message_var.set(model.text)


def run_player_gui() -> None:
    """Launch the Snake window."""
    root = tk.Tk()
    SnakeApp(root)
    root.mainloop()


if __name__ == "__main__":
    run_player_gui()
