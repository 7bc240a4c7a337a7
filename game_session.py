# Single owner of one game and its autopilot; the GUI and CLI only talk to this.
from __future__ import annotations

import logging

try:
    from .autoplayer import AutoPlayer, Decision
    from .game_logic import MOVEMENT_COMMANDS, Command, GameSnapshot, Phase, SnakeConfig, SnakeGame
except ImportError:
    from autoplayer import AutoPlayer, Decision
    from game_logic import MOVEMENT_COMMANDS, Command, GameSnapshot, Phase, SnakeConfig, SnakeGame

logger = logging.getLogger(__name__)


class GameSession:
    """
    Routes input commands, owns the autoplay switch and drives the frame pump.

    The session is the only writer of its game: callers get snapshots back,
    never the game object itself.
    """

    def __init__(
        self,
        config: SnakeConfig | None = None,
        game: SnakeGame | None = None,
        autoplayer: AutoPlayer | None = None,
    ) -> None:
        if game is not None:
            self.config = game.config
            self._game = game
        else:
            self.config = config or SnakeConfig()
            self._game = SnakeGame(self.config)
        self.autoplayer = autoplayer or AutoPlayer(self.config.autoplay_ms)
        self.autoplay = False

    @property
    def phase(self) -> Phase:
        return self._game.phase

    def snapshot(self) -> GameSnapshot:
        return self._game.snapshot(autoplay=self.autoplay)

    @property
    def last_decision(self) -> Decision | None:
        """Most recent autopilot choice; None while the player drives."""
        if not self.autoplay:
            return None
        return self.autoplayer.last_decision

    def start(self) -> bool:
        return self._game.start()

    def handle_command(self, command: Command) -> bool:
        """Directional input is dropped while the autopilot drives."""
        if self.autoplay and command in MOVEMENT_COMMANDS:
            logger.debug("Ignored %s: autoplay is on.", command.value)
            return False
        handled = self._game.handle(command)
        if command is Command.RESTART:
            self.autoplayer.reset()
        return handled

    def set_autoplay(self, enabled: bool) -> None:
        if enabled == self.autoplay:
            return
        self.autoplay = enabled
        self.autoplayer.reset()
        logger.info("Autoplay %s.", "on" if enabled else "off")
        if enabled:
            self._game.start()

    def toggle_autoplay(self) -> bool:
        self.set_autoplay(not self.autoplay)
        return self.autoplay

    def reconfigure(self, config: SnakeConfig) -> GameSnapshot:
        """Replace the game with one built from new settings."""
        self.config = config
        self._game = SnakeGame(config)
        self.autoplayer = AutoPlayer(config.autoplay_ms)
        if self.autoplay:
            self._game.start()
        return self.snapshot()

    def pump(self, now_ms: float) -> GameSnapshot:
        """One frame: autopilot decision first, then the (gated) simulation tick."""
        if self.autoplay:
            if self._game.phase is Phase.NOT_STARTED:
                self._game.start()
            self.autoplayer.on_frame(self._game, now_ms)
        self._game.advance(now_ms)
        return self.snapshot()
