"""Tests for entities and the movement/collision primitives."""

import pytest

from worm_arcade.entity import (
    Direction,
    Entity,
    EntityKind,
    advance,
    apple,
    collides,
    worm_part,
)


class TestDirection:
    def test_unit_vectors(self):
        assert Direction.UP.value == (0, -1)
        assert Direction.DOWN.value == (0, 1)
        assert Direction.LEFT.value == (-1, 0)
        assert Direction.RIGHT.value == (1, 0)
        assert Direction.NONE.value == (0, 0)

    def test_axes(self):
        assert Direction.LEFT.axis == "horizontal"
        assert Direction.RIGHT.axis == "horizontal"
        assert Direction.UP.axis == "vertical"
        assert Direction.DOWN.axis == "vertical"
        assert Direction.NONE.axis is None

    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            (Direction.LEFT, Direction.RIGHT, True),
            (Direction.RIGHT, Direction.RIGHT, True),
            (Direction.UP, Direction.DOWN, True),
            (Direction.UP, Direction.LEFT, False),
            (Direction.NONE, Direction.NONE, False),
            (Direction.NONE, Direction.UP, False),
        ],
    )
    def test_shares_axis(self, a, b, expected):
        assert a.shares_axis(b) is expected


class TestEntity:
    def test_coordinates_are_floored(self):
        e = Entity(EntityKind.APPLE, 3.7, -0.5)
        assert e.position == (3, -1)
        assert isinstance(e.x, int)

    def test_decorative_kinds_not_collidable(self):
        for kind in (
            EntityKind.BACKGROUND, EntityKind.HUD,
            EntityKind.POPOVER, EntityKind.SETTINGS,
        ):
            assert not Entity(kind).collidable
        assert Entity(EntityKind.WORM_PART).collidable
        assert Entity(EntityKind.APPLE).collidable

    def test_to_dict(self):
        d = apple(2, 3, scale=10).to_dict()
        assert d == {"kind": "apple", "x": 2, "y": 3, "color": "#ff0000"}


class TestAdvance:
    def test_moves_by_direction(self):
        e = Entity(EntityKind.CURSOR, 5, 5, direction=Direction.UP)
        assert advance(e) == (5, 4)
        assert advance(e) == (5, 3)

    def test_moves_by_direction_times_scale(self):
        e = Entity(EntityKind.CURSOR, 0, 0, scale=3, direction=Direction.RIGHT)
        advance(e)
        assert e.position == (3, 0)

    def test_none_direction_stays_put(self):
        e = Entity(EntityKind.CURSOR, 4, 4)
        advance(e)
        assert e.position == (4, 4)


class TestCollides:
    def test_same_cell_collides(self):
        assert collides(worm_part(1, 2, 5), apple(1, 2, 5))

    def test_symmetric(self):
        a, b = worm_part(1, 2, 5), apple(1, 3, 5)
        assert collides(a, b) == collides(b, a)
        assert not collides(a, b)

    def test_scale_does_not_matter(self):
        assert collides(worm_part(4, 4, 1), apple(4, 4, 10))

    def test_decorative_never_collides(self):
        bg = Entity(EntityKind.BACKGROUND, 0, 0)
        part = worm_part(0, 0, 1)
        assert not collides(bg, part)
        assert not collides(part, bg)
