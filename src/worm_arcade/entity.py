"""Grid entities, directions, and the movement/collision primitives."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field


class Direction(enum.Enum):
    """Unit movement vectors as (dx, dy) in grid cells."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    NONE = (0, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def axis(self) -> str | None:
        """Return ``"horizontal"``, ``"vertical"``, or ``None`` for NONE."""
        if self.dx:
            return "horizontal"
        if self.dy:
            return "vertical"
        return None

    def shares_axis(self, other: Direction) -> bool:
        """True when both directions move along the same axis."""
        return self.axis is not None and self.axis == other.axis


class EntityKind(enum.Enum):
    """Tags for every drawable the game knows how to paint."""

    WORM_PART = "worm_part"
    APPLE = "apple"
    CURSOR = "cursor"
    BACKGROUND = "background"
    HUD = "hud"
    POPOVER = "popover"
    SETTINGS = "settings"


# Kinds that are painted but never take part in collision checks.
DECORATIVE_KINDS: frozenset[EntityKind] = frozenset({
    EntityKind.BACKGROUND,
    EntityKind.HUD,
    EntityKind.POPOVER,
    EntityKind.SETTINGS,
})


@dataclass
class Entity:
    """A rectangular drawable occupying one position on the grid.

    ``x`` and ``y`` are grid coordinates; the pixel rectangle is the grid
    rectangle multiplied by ``scale``. Coordinates are floored to ints on
    construction and only stepped by whole cells afterwards. ``data`` holds
    kind-specific payload such as popover text lines.
    """

    kind: EntityKind
    x: int = 0
    y: int = 0
    width: int = 1
    height: int = 1
    color: str = "#000000"
    scale: int = 1
    direction: Direction = Direction.NONE
    data: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.x = math.floor(self.x)
        self.y = math.floor(self.y)

    @property
    def position(self) -> tuple[int, int]:
        return self.x, self.y

    @property
    def collidable(self) -> bool:
        return self.kind not in DECORATIVE_KINDS

    def to_dict(self) -> dict:
        """Serialize entity state to a dictionary."""
        return {
            "kind": self.kind.value,
            "x": self.x,
            "y": self.y,
            "color": self.color,
        }


def worm_part(x: int, y: int, scale: int, color: str = "#0000ff") -> Entity:
    return Entity(EntityKind.WORM_PART, x, y, color=color, scale=scale)


def apple(x: int, y: int, scale: int, color: str = "#ff0000") -> Entity:
    return Entity(EntityKind.APPLE, x, y, color=color, scale=scale)


def advance(entity: Entity) -> tuple[int, int]:
    """Move *entity* one step along its direction and return the new position."""
    entity.x += entity.direction.dx * entity.scale
    entity.y += entity.direction.dy * entity.scale
    return entity.position


def collides(a: Entity, b: Entity) -> bool:
    """Two entities collide when both are collidable and share a grid cell."""
    if not (a.collidable and b.collidable):
        return False
    return a.x == b.x and a.y == b.y
