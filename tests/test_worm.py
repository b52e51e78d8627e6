"""Tests for the Worm module."""

import pytest

from worm_arcade.entity import Direction, worm_part
from worm_arcade.worm import Worm


class TestWormInit:
    def test_starting_worm(self):
        worm = Worm.starting(10, 10)
        assert worm.head_position() == (10, 10)
        assert worm.length() == 3
        assert worm.direction == Direction.RIGHT

    def test_segments_trail_behind_head(self):
        worm = Worm.starting(10, 10, 3, Direction.RIGHT)
        assert worm.positions() == [(8, 10), (9, 10), (10, 10)]

    def test_segments_trail_behind_upward_head(self):
        worm = Worm.starting(5, 5, 3, Direction.UP)
        assert worm.positions() == [(5, 7), (5, 6), (5, 5)]

    def test_minimum_length(self):
        with pytest.raises(ValueError, match="at least 1"):
            Worm.starting(0, 0, length=0)

    def test_empty_parts_rejected(self):
        with pytest.raises(ValueError, match="at least 1"):
            Worm([])

    def test_parts_keep_scale(self):
        worm = Worm.starting(4, 4, scale=7)
        assert all(p.scale == 7 for p in worm.parts)


class TestWormMovement:
    def test_move_forward_appends_head(self):
        worm = Worm.starting(10, 10)
        head = worm.move_forward()
        assert head.position == (11, 10)
        assert worm.head_position() == (11, 10)
        assert worm.length() == 4

    def test_move_forward_steps_one_cell_regardless_of_scale(self):
        worm = Worm.starting(10, 10, scale=10)
        worm.move_forward()
        assert worm.head_position() == (11, 10)

    def test_drop_tail_returns_oldest(self):
        worm = Worm.starting(10, 10)
        worm.move_forward()
        tail = worm.drop_tail()
        assert tail.position == (8, 10)
        assert worm.positions() == [(9, 10), (10, 10), (11, 10)]

    def test_growth_invariant(self):
        worm = Worm.starting(10, 10)
        for _ in range(4):
            worm.move_forward()
        worm.drop_tail()
        assert worm.length() == 3 + 4 - 1

    def test_direction_applies_on_next_move(self):
        worm = Worm.starting(10, 10)
        worm.direction = Direction.UP
        assert worm.head_position() == (10, 10)
        worm.move_forward()
        assert worm.head_position() == (10, 9)

    def test_cannot_drop_last_segment(self):
        worm = Worm([worm_part(0, 0, 1)])
        with pytest.raises(ValueError):
            worm.drop_tail()


class TestWormCollision:
    def test_occupies(self):
        worm = Worm.starting(10, 10)
        assert worm.occupies(10, 10)
        assert worm.occupies(8, 10)
        assert not worm.occupies(0, 0)

    def test_no_self_collision_when_straight(self):
        worm = Worm.starting(10, 10, length=5)
        assert not worm.bites_itself()

    def test_self_collision_on_loop(self):
        worm = Worm.starting(10, 10, length=5)
        for direction in (Direction.DOWN, Direction.LEFT, Direction.UP):
            worm.direction = direction
            worm.move_forward()
            worm.drop_tail()
        # Head re-entered (9, 10), still occupied by an older segment.
        assert worm.head_position() == (9, 10)
        assert worm.bites_itself()


class TestWormSerialization:
    def test_to_dict(self):
        worm = Worm.starting(3, 3, length=2)
        d = worm.to_dict()
        assert d["segments"] == [[2, 3], [3, 3]]
        assert d["direction"] == "RIGHT"
        assert d["head"] == [3, 3]
