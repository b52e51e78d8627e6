"""Tests for the dual-loop Animator."""

from __future__ import annotations

import asyncio
import logging

import pytest

from worm_arcade.animator import Animator
from worm_arcade.scheduler import AsyncioScheduler, ManualScheduler


class Recorder(Animator):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.frames: list[int] = []
        self.renders: list[int] = []

    def frame(self, frame_count):
        self.frames.append(frame_count)

    def render(self, frame_count):
        self.renders.append(frame_count)


@pytest.fixture()
def scheduler():
    return ManualScheduler(refresh_rate=60)


class TestAnimatorLifecycle:
    def test_invalid_fps(self):
        with pytest.raises(ValueError):
            Animator(fps=0)

    def test_not_running_until_started(self, scheduler):
        anim = Recorder(fps=10, scheduler=scheduler)
        assert not anim.running
        scheduler.advance(1.0)
        assert anim.frames == []
        assert anim.renders == []

    def test_start_runs_both_loops(self, scheduler):
        anim = Recorder(fps=10, scheduler=scheduler)
        anim.start()
        assert anim.running
        scheduler.advance(0)
        assert anim.frames == [1]
        assert len(anim.renders) == 1

    def test_logic_runs_at_fps(self, scheduler):
        anim = Recorder(fps=10, scheduler=scheduler)
        anim.start()
        scheduler.advance(1.0)
        assert anim.frames == list(range(1, 12))
        assert anim.frame_count == 11

    def test_render_runs_at_refresh_rate(self, scheduler):
        anim = Recorder(fps=1, scheduler=scheduler)
        anim.start()
        scheduler.advance(0.5)
        assert len(anim.renders) == 31
        # Render sees whatever frame the logic loop has reached.
        assert set(anim.renders) == {0, 1}

    def test_fps_change_applies_to_next_tick(self, scheduler):
        class Speedup(Recorder):
            def frame(self, frame_count):
                super().frame(frame_count)
                self.fps = 20

        anim = Speedup(fps=10, scheduler=scheduler)
        anim.start()
        scheduler.advance(0.1)
        assert anim.frames == [1, 2, 3]

    def test_fps_change_between_ticks_applies_after_pending_sleep(self, scheduler):
        anim = Recorder(fps=10, scheduler=scheduler)
        anim.start()
        scheduler.advance(0)
        anim.fps = 20
        scheduler.advance(0.15)
        # t = 0, 0.1 (old interval already scheduled), then 0.15.
        assert anim.frames == [1, 2, 3]

    def test_stop_is_cooperative(self, scheduler):
        anim = Recorder(fps=10, scheduler=scheduler)
        anim.start()
        scheduler.advance(0.25)
        anim.stop()
        assert not anim.running
        frames = list(anim.frames)
        renders = len(anim.renders)
        scheduler.advance(1.0)
        assert anim.frames == frames
        assert len(anim.renders) == renders

    def test_restart_keeps_frame_counter(self, scheduler):
        anim = Recorder(fps=10, scheduler=scheduler)
        anim.start()
        scheduler.advance(0.2)
        anim.stop()
        scheduler.advance(0.5)
        anim.start()
        scheduler.advance(0)
        assert anim.frames == [1, 2, 3, 4]

    def test_double_start_is_ignored(self, scheduler, caplog):
        anim = Recorder(fps=10, scheduler=scheduler)
        anim.start()
        with caplog.at_level(logging.WARNING):
            anim.start()
        scheduler.advance(0)
        assert anim.frames == [1]
        assert "already running" in caplog.text

    def test_default_callbacks_are_noops(self, scheduler):
        anim = Animator(fps=10, scheduler=scheduler)
        anim.start()
        scheduler.advance(0.5)
        assert anim.frame_count == 6


class TestFrameListeners:
    def test_listeners_run_after_frame_in_order(self, scheduler):
        calls = []

        class Logic(Animator):
            def frame(self, frame_count):
                calls.append(("frame", frame_count))

        anim = Logic(fps=10, scheduler=scheduler)
        anim.add_frame_listener(lambda: calls.append(("first", anim.frame_count)))
        anim.add_frame_listener(lambda: calls.append(("second", anim.frame_count)))
        anim.start()
        scheduler.advance(0)
        assert calls == [("frame", 1), ("first", 1), ("second", 1)]

    def test_remove_listener(self, scheduler):
        calls = []
        anim = Animator(fps=10, scheduler=scheduler)

        def listener():
            calls.append(1)

        anim.add_frame_listener(listener)
        anim.remove_frame_listener(listener)
        anim.start()
        scheduler.advance(0.3)
        assert calls == []


class TestFaultHandling:
    def test_contained_fault_is_logged_and_loop_continues(self, scheduler, caplog):
        class Faulty(Recorder):
            def frame(self, frame_count):
                super().frame(frame_count)
                if frame_count == 1:
                    raise RuntimeError("bad tick")

        anim = Faulty(fps=10, scheduler=scheduler, contain_faults=True)
        with caplog.at_level(logging.ERROR):
            anim.start()
            scheduler.advance(0.2)
        assert anim.frames == [1, 2, 3]
        assert anim.faults == 1
        assert "bad tick" in caplog.text

    def test_contained_listener_fault_does_not_skip_others(self, scheduler):
        calls = []
        anim = Animator(fps=10, scheduler=scheduler)

        def broken():
            raise ValueError("listener")

        anim.add_frame_listener(broken)
        anim.add_frame_listener(lambda: calls.append(anim.frame_count))
        anim.start()
        scheduler.advance(0.1)
        assert calls == [1, 2]
        assert anim.faults == 2

    def test_uncontained_fault_ends_logic_loop_only(self, scheduler):
        class Faulty(Recorder):
            def frame(self, frame_count):
                super().frame(frame_count)
                raise RuntimeError("fatal")

        anim = Faulty(fps=10, scheduler=scheduler, contain_faults=False)
        anim.start()
        with pytest.raises(RuntimeError, match="fatal"):
            scheduler.advance(0)
        renders = len(anim.renders)
        scheduler.advance(0.5)
        assert anim.frames == [1]
        assert len(anim.renders) > renders


class TestAnimatorAsyncio:
    @pytest.mark.asyncio
    async def test_runs_on_event_loop(self):
        scheduler = AsyncioScheduler(refresh_rate=100)
        anim = Recorder(fps=50, scheduler=scheduler)
        anim.start()
        await asyncio.sleep(0.15)
        anim.stop()
        await asyncio.wait_for(scheduler.join(), timeout=1.0)
        assert len(anim.frames) >= 2
        assert anim.frames == list(range(1, len(anim.frames) + 1))
        assert len(anim.renders) >= 2

    @pytest.mark.asyncio
    async def test_uncontained_fault_surfaces_on_join(self):
        class Faulty(Animator):
            def render(self, frame_count):
                raise RuntimeError("render failed")

        scheduler = AsyncioScheduler(refresh_rate=100)
        anim = Faulty(fps=50, scheduler=scheduler, contain_faults=False)
        anim.start()
        await asyncio.sleep(0.05)
        anim.stop()
        with pytest.raises(RuntimeError, match="render failed"):
            await asyncio.wait_for(scheduler.join(), timeout=1.0)
