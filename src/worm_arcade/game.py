"""Game controller: owns the worm, apple, score, and the state machine."""

from __future__ import annotations

import enum
import logging
from collections import deque

import numpy as np

from worm_arcade.animator import Animator
from worm_arcade.config import GameConfig
from worm_arcade.entity import Direction, Entity, apple, collides
from worm_arcade.fps import FpsMeter
from worm_arcade.log import trace
from worm_arcade.painting import (
    HELP_LINES,
    background,
    game_over_lines,
    hud,
    paint_entity,
    paint_worm,
    popover,
    settings_bar,
)
from worm_arcade.scheduler import AsyncioScheduler, Scheduler
from worm_arcade.surface import Surface
from worm_arcade.worm import Worm


class GameState(enum.Enum):
    """Top-level game states. Exactly one is active at a time."""

    PLAYING = "playing"
    PAUSED = "paused"
    GAMEOVER = "gameover"


_MOVEMENT_KEYS: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
}
_TOGGLE_KEYS = frozenset({" ", "Space"})
_DEBUG_KEYS = frozenset({"d", "KeyD"})
_MUTE_KEYS = frozenset({"s", "KeyS"})


class WormGame(Animator):
    """Single-player worm game driven by the dual-loop :class:`Animator`.

    The game is the single owner of all mutable state. The logic loop
    calls :meth:`frame` (one simulation tick), the render loop calls
    :meth:`render`, and the input collaborator calls :meth:`handle_key`.
    Transports read state through :meth:`snapshot`.
    """

    def __init__(
        self,
        surface: Surface,
        config: GameConfig | None = None,
        scheduler: Scheduler | None = None,
        logger: logging.Logger | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        if scheduler is None:
            scheduler = AsyncioScheduler(self.config.refresh_rate)
        super().__init__(
            fps=self.config.base_fps,
            scheduler=scheduler,
            logger=logger if logger is not None else logging.getLogger(__name__),
            contain_faults=self.config.contain_faults,
        )
        self.surface = surface
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        cfg = self.config
        self.background = background(cfg.board_width, cfg.board_height)
        self.help_popover = popover(
            10, 10, cfg.board_width - 20, cfg.board_height - 20, HELP_LINES,
        )
        self.game_over_popover = popover(
            10, 10, cfg.board_width - 20, cfg.board_height - 20, game_over_lines(0),
        )
        self.hud = hud(5, 5)
        self.settings_bar = settings_bar(
            0, cfg.board_height, cfg.canvas_width, cfg.status_bar_height,
        )

        self.fps_meter = FpsMeter(cfg.fps_sample_window, clock=self.scheduler.clock)
        self.add_frame_listener(self.fps_meter.frame)

        self.state = GameState.PAUSED
        self.debug = False
        self.mute = True
        self.game_over_score = 0
        self.movement_queue: deque[Direction] = deque()
        self.score = 0
        self.worm: Worm
        self.apple: Entity
        self.reset()

    # --- lifecycle -------------------------------------------------------

    def start(self) -> None:
        self.logger.info("Starting worm game")
        self.fps_meter.reset()
        super().start()
        self.logger.debug("Worm game started")

    def reset(self) -> None:
        """Restore score, pace, worm, and apple to their starting values."""
        self.logger.info("Resetting game")
        cfg = self.config
        self.movement_queue.clear()
        self.score = 0
        self.fps = cfg.base_fps
        self.worm = Worm.starting(
            cfg.start_x, cfg.start_y, cfg.start_length, Direction.RIGHT, cfg.scale,
        )
        self.apple = self.random_apple()
        trace(self.logger, "New score: %d", self.score)
        trace(self.logger, "New fps: %s", self.fps)
        self.logger.debug("New apple: (%d, %d)", self.apple.x, self.apple.y)

    def pause(self) -> None:
        self.logger.info("Pausing game")
        self.state = GameState.PAUSED

    def resume(self) -> None:
        self.logger.info("Resuming game")
        self.state = GameState.PLAYING

    def game_over(self) -> None:
        self.logger.info("Game over with score %d", self.score)
        self.state = GameState.GAMEOVER
        self.game_over_score = self.score
        self.game_over_popover.data["lines"] = game_over_lines(self.score)

    def level_up(self) -> None:
        self.logger.info("Level up!")
        self.apple = self.random_apple()
        self.score += 1
        self.fps += self.config.fps_step
        self.logger.debug("New score: %d", self.score)
        self.logger.debug("New fps: %s", self.fps)
        self.logger.debug("New apple: (%d, %d)", self.apple.x, self.apple.y)

    # --- simulation ------------------------------------------------------

    def random_apple(self) -> Entity:
        """Place an apple on a uniformly random cell.

        With ``apple_avoids_worm`` the choice is restricted to cells the
        worm does not occupy; a board with no free cell falls back to any
        cell.
        """
        cfg = self.config
        trace(self.logger, "Creating a new random apple")
        if cfg.apple_avoids_worm:
            free = np.ones((cfg.rows, cfg.columns), dtype=bool)
            for x, y in self.worm.positions():
                if 0 <= x < cfg.columns and 0 <= y < cfg.rows:
                    free[y, x] = False
            rows, cols = np.nonzero(free)
            if len(rows):
                idx = int(self.rng.integers(len(rows)))
                return apple(int(cols[idx]), int(rows[idx]), cfg.scale)
            self.logger.warning("No free cell for the apple; placing it anywhere.")
        x = int(self.rng.integers(cfg.columns))
        y = int(self.rng.integers(cfg.rows))
        return apple(x, y, cfg.scale)

    def process_keys(self) -> None:
        """Apply the first queued direction that turns off the current axis.

        Entries on the worm's current axis are discarded. Draining stops at
        the first accepted entry; later entries wait for the next tick.
        """
        trace(self.logger, "Processing key presses")
        while self.movement_queue:
            movement = self.movement_queue.popleft()
            if movement.shares_axis(self.worm.direction) or movement is Direction.NONE:
                trace(self.logger, "Skipping key press %s", movement.name)
                continue
            trace(self.logger, "Accepting key press %s", movement.name)
            self.worm.direction = movement
            break

    def frame(self, frame_count: int) -> None:
        trace(self.logger, "Starting game frame %d", frame_count)
        if self.state is not GameState.PLAYING:
            return
        self.process_keys()

        self.worm.move_forward()
        if collides(self.worm.head, self.apple):
            self.logger.debug("Detected collision with apple")
            self.level_up()
        else:
            self.worm.drop_tail()

        if self.worm.bites_itself():
            self.logger.debug("Detected collision with self")
            self.game_over()
            return

        if not self.on_board(*self.worm.head_position()):
            self.logger.debug("Detected collision with wall")
            self.game_over()

    def on_board(self, x: int, y: int) -> bool:
        cfg = self.config
        return 0 <= x < cfg.board_width / cfg.scale and 0 <= y < cfg.board_height / cfg.scale

    # --- presentation ----------------------------------------------------

    def render(self, frame_count: int) -> None:
        trace(self.logger, "Painting frame %d", frame_count)
        surface = self.surface
        paint_entity(surface, self.background, self)
        if self.debug:
            paint_entity(surface, self.hud, self)
        paint_worm(surface, self.worm)
        paint_entity(surface, self.apple, self)
        if self.state is GameState.PAUSED:
            paint_entity(surface, self.help_popover, self)
        elif self.state is GameState.GAMEOVER:
            paint_entity(surface, self.game_over_popover, self)
        paint_entity(surface, self.settings_bar, self)
        surface.present()

    def snapshot(self) -> dict:
        """Return a JSON-serializable view of the current game."""
        return {
            "state": self.state.value,
            "score": self.score,
            "game_over_score": self.game_over_score,
            "fps": self.fps,
            "measured_fps": self.fps_meter.current_fps,
            "frame": self.frame_count,
            "running": self.running,
            "debug": self.debug,
            "mute": self.mute,
            "queued": [d.name for d in self.movement_queue],
            "worm": self.worm.to_dict(),
            "apple": [self.apple.x, self.apple.y],
            "board": {"columns": self.config.columns, "rows": self.config.rows},
        }

    # --- input -----------------------------------------------------------

    def handle_key(self, symbol: str) -> None:
        """Dispatch one key symbol; unknown symbols are ignored."""
        self.logger.debug("Handling key press: %r", symbol)
        direction = _MOVEMENT_KEYS.get(symbol)
        if direction is not None:
            self.movement_queue.append(direction)
        elif symbol in _TOGGLE_KEYS:
            self.toggle()
        elif symbol in _DEBUG_KEYS:
            self.debug = not self.debug
            self.logger.debug("Debug is now %s", self.debug)
        elif symbol in _MUTE_KEYS:
            self.mute = not self.mute
            self.logger.debug("Mute is now %s", self.mute)
        else:
            trace(self.logger, "Ignoring key %r", symbol)

    def toggle(self) -> None:
        """Pause, resume, or acknowledge game over and restart in one step."""
        trace(self.logger, "Current game state: %s", self.state.value)
        if self.state is GameState.PLAYING:
            self.pause()
        elif self.state is GameState.GAMEOVER:
            self.reset()
            self.resume()
        else:
            self.resume()
