"""Worm Arcade: dual-loop worm game core."""

from worm_arcade.animator import Animator
from worm_arcade.config import GameConfig
from worm_arcade.entity import Direction, Entity, EntityKind, advance, collides
from worm_arcade.fps import FpsMeter
from worm_arcade.game import GameState, WormGame
from worm_arcade.scheduler import (
    AsyncioScheduler,
    CancelToken,
    ManualScheduler,
    Scheduler,
)
from worm_arcade.surface import RecordingSurface, Surface
from worm_arcade.worm import Worm

__version__ = "0.1.0"

__all__ = [
    "Animator",
    "AsyncioScheduler",
    "CancelToken",
    "Direction",
    "Entity",
    "EntityKind",
    "FpsMeter",
    "GameConfig",
    "GameState",
    "ManualScheduler",
    "RecordingSurface",
    "Scheduler",
    "Surface",
    "Worm",
    "WormGame",
    "advance",
    "collides",
]
