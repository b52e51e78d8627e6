"""Worm representation: an ordered chain of body segments."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from worm_arcade.entity import Direction, Entity, EntityKind, advance, collides, worm_part


class Worm:
    """A worm stored as a deque of segment entities.

    The tail is ``parts[0]``; the head is ``parts[-1]``. Movement is driven
    by a separate head cursor that steps one cell per call to
    :meth:`move_forward`, so a direction change only takes effect on the
    next move.
    """

    def __init__(
        self,
        parts: Iterable[Entity],
        direction: Direction = Direction.RIGHT,
    ) -> None:
        self.parts: deque[Entity] = deque(parts)
        if not self.parts:
            raise ValueError("Worm must have at least 1 segment.")
        head = self.parts[-1]
        self._cursor = Entity(
            EntityKind.CURSOR, head.x, head.y, direction=direction,
        )

    @classmethod
    def starting(
        cls,
        x: int,
        y: int,
        length: int = 3,
        direction: Direction = Direction.RIGHT,
        scale: int = 1,
    ) -> Worm:
        """Build a worm with its head at (x, y), trailing behind *direction*."""
        if length < 1:
            raise ValueError("Worm length must be at least 1.")
        parts = [
            worm_part(x - direction.dx * i, y - direction.dy * i, scale)
            for i in range(length - 1, -1, -1)
        ]
        return cls(parts, direction)

    @property
    def direction(self) -> Direction:
        return self._cursor.direction

    @direction.setter
    def direction(self, direction: Direction) -> None:
        self._cursor.direction = direction

    @property
    def head(self) -> Entity:
        return self.parts[-1]

    @property
    def tail(self) -> Entity:
        return self.parts[0]

    def head_position(self) -> tuple[int, int]:
        return self._cursor.position

    def length(self) -> int:
        return len(self.parts)

    def __len__(self) -> int:
        return len(self.parts)

    def positions(self) -> list[tuple[int, int]]:
        """Segment positions from tail to head."""
        return [p.position for p in self.parts]

    def occupies(self, x: int, y: int) -> bool:
        return any(p.x == x and p.y == y for p in self.parts)

    def move_forward(self) -> Entity:
        """Step the head one cell and append a new head segment."""
        x, y = advance(self._cursor)
        part = worm_part(x, y, self.head.scale, self.head.color)
        self.parts.append(part)
        return part

    def drop_tail(self) -> Entity:
        """Remove and return the oldest segment."""
        if len(self.parts) == 1:
            raise ValueError("Cannot drop the last remaining segment.")
        return self.parts.popleft()

    def bites_itself(self) -> bool:
        """True when any segment other than the head sits on the head position."""
        head = self.head
        return any(collides(self.parts[i], head) for i in range(len(self.parts) - 1))

    def to_dict(self) -> dict:
        """Serialize worm state to a dictionary."""
        return {
            "segments": [list(p) for p in self.positions()],
            "direction": self.direction.name,
            "head": list(self.head_position()),
        }
