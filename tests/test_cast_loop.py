"""
Test suite for automation/cast_loop.py
======================================
Tests for the cast -> bite -> reel -> cooldown state machine.
"""

import random

import pytest

from automation.cast_loop import CastLoop
from core.state import LoopPhase
from tracking.bobber_tracker import BobberTracker


def make_loop(env, settings, **overrides):
    s = dict(settings)
    s.update(overrides)
    return CastLoop(env, BobberTracker(s), s, random.Random(7))


def cast(loop, tick=1, now=0):
    loop.step(tick, now, session_active=False)
    return tick


def run_with_bobber(loop, env, ys, start_tick, step_ms=100):
    """Step once per tick with the bobber at each y; returns the last tick"""
    tick = start_tick
    for y in ys:
        env.set_bobber(y)
        loop.step(tick, tick * step_ms, session_active=False)
        tick += 1
    return tick - 1


class TestCasting:
    """Tests for the IDLE phase"""

    def test_single_cast(self, env, settings):
        loop = make_loop(env, settings)
        cast(loop, tick=1)
        assert env.mouse.clicks == 1
        assert loop.phase == LoopPhase.WAIT_BITE
        assert loop.last_cast_tick == 1
        assert loop.cast_resolve_deadline_tick == 1 + 12 + 28
        assert loop.bobber.armed_at == 41

    def test_no_second_cast_while_waiting_for_bobber(self, env, settings):
        loop = make_loop(env, settings)
        cast(loop, tick=1)
        for tick in range(2, 30):
            loop.step(tick, tick * 100, session_active=False)
        assert env.mouse.clicks == 1
        assert loop.phase == LoopPhase.WAIT_BITE

    def test_no_rod_retries_later(self, env, settings):
        env.has_rod = False
        loop = make_loop(env, settings)
        cast(loop, tick=1, now=1000)
        assert env.mouse.clicks == 0
        assert loop.phase == LoopPhase.IDLE
        assert loop.next_action_at_ms == 1000 + 750

    def test_cast_failure_retries(self, env, settings):
        env.mouse.fail = True
        loop = make_loop(env, settings)
        cast(loop, tick=1, now=1000)
        assert loop.phase == LoopPhase.IDLE
        assert loop.next_action_at_ms == 1000 + 500
        assert loop.last_cast_tick < 0

    def test_missing_bobber_after_deadline_is_failed_cast(self, env, settings):
        loop = make_loop(env, settings)
        cast(loop, tick=1)
        loop.step(41, 4100, session_active=False)
        assert loop.phase == LoopPhase.WAIT_BITE
        loop.step(42, 4200, session_active=False)
        assert loop.phase == LoopPhase.IDLE
        assert loop.next_action_at_ms == 4200 + 500

    def test_schedule_gates_evaluation(self, env, settings):
        loop = make_loop(env, settings)
        loop.next_action_at_ms = 5000
        loop.step(1, 4999, session_active=False)
        assert env.mouse.clicks == 0
        loop.step(2, 5000, session_active=False)
        assert env.mouse.clicks == 1

    def test_humanized_cast_delay(self, env, settings):
        loop = make_loop(env, settings, humanize_delays=True)
        cast(loop, tick=1, now=10_000)
        assert 10_000 + 120 <= loop.next_action_at_ms <= 10_000 + 380

    def test_session_goes_to_minigame(self, env, settings):
        loop = make_loop(env, settings)
        loop.step(1, 0, session_active=True)
        assert loop.phase == LoopPhase.MINIGAME
        assert env.mouse.clicks == 0


class TestBite:
    """Tests for heuristic bite detection in WAIT_BITE"""

    def test_tug_reels(self, env, settings):
        loop = make_loop(env, settings)
        env.in_fluid = True
        cast(loop, tick=1)
        run_with_bobber(loop, env, [64.0] * 43, start_tick=2)
        assert env.mouse.clicks == 1
        run_with_bobber(loop, env, [63.8], start_tick=45)
        assert env.mouse.clicks == 2
        assert loop.phase == LoopPhase.REELING
        assert loop.last_reel_tick == 45

    def test_tug_before_arming_is_ignored(self, env, settings):
        loop = make_loop(env, settings)
        env.in_fluid = True
        cast(loop, tick=1)
        run_with_bobber(loop, env, [64.0] * 18 + [63.5] + [63.5] * 5, start_tick=2)
        assert env.mouse.clicks == 1
        assert loop.phase == LoopPhase.WAIT_BITE

    def test_no_bite_timeout_recasts(self, env, settings):
        loop = make_loop(env, settings, no_bite_timeout_ticks=100)
        env.in_fluid = True
        cast(loop, tick=1)
        last = run_with_bobber(loop, env, [64.0] * 99, start_tick=2)
        assert last == 100
        assert env.mouse.clicks == 1
        run_with_bobber(loop, env, [64.0], start_tick=101)
        assert env.mouse.clicks == 2
        assert loop.phase == LoopPhase.REELING

    def test_no_bite_timeout_waits_grace_only(self, env, settings):
        loop = make_loop(env, settings, no_bite_timeout_ticks=100, humanize_delays=True)
        env.in_fluid = True
        cast(loop, tick=1)
        run_with_bobber(loop, env, [64.0] * 99, start_tick=2, step_ms=1000)
        run_with_bobber(loop, env, [64.0], start_tick=101, step_ms=1000)
        assert env.mouse.clicks == 2
        assert loop.next_action_at_ms == 101 * 1000 + 120


class TestReeling:
    """Tests for the REELING phase"""

    def _reel(self, env, settings):
        loop = make_loop(env, settings)
        env.in_fluid = True
        cast(loop, tick=1)
        run_with_bobber(loop, env, [64.0] * 43 + [63.8], start_tick=2)
        assert loop.phase == LoopPhase.REELING
        return loop

    def test_reel_schedules_grace(self, env, settings):
        loop = self._reel(env, settings)
        assert loop.next_action_at_ms == 45 * 100 + 120

    def test_minigame_follows_reel(self, env, settings):
        loop = self._reel(env, settings)
        loop.step(50, 10_000, session_active=True)
        assert loop.phase == LoopPhase.MINIGAME

    def test_bobber_gone_returns_to_idle(self, env, settings):
        loop = self._reel(env, settings)
        env.projectile = None
        loop.step(50, 10_000, session_active=False)
        assert loop.phase == LoopPhase.IDLE

    def test_false_bite_returns_to_waiting(self, env, settings):
        loop = self._reel(env, settings)
        loop.step(50, 10_000, session_active=False)
        assert loop.phase == LoopPhase.WAIT_BITE


class TestSplash:
    """Tests for the splash sound path"""

    def test_splash_reels_when_armed(self, env, settings):
        loop = make_loop(env, settings)
        cast(loop, tick=1)
        env.set_bobber(64.0)
        assert loop.on_splash(45, 4500)
        assert env.mouse.clicks == 2
        assert loop.phase == LoopPhase.REELING

    def test_splash_before_arming_ignored(self, env, settings):
        loop = make_loop(env, settings)
        cast(loop, tick=1)
        assert not loop.on_splash(20, 2000)
        assert env.mouse.clicks == 1

    def test_splash_outside_wait_bite_ignored(self, env, settings):
        loop = make_loop(env, settings)
        assert not loop.on_splash(100, 10_000)
        assert env.mouse.clicks == 0


class TestJointConfirmation:
    """Tests for bite_confirmation = "both" """

    def test_heuristic_alone_does_not_reel(self, env, settings):
        loop = make_loop(env, settings, bite_confirmation="both")
        env.in_fluid = True
        cast(loop, tick=1)
        run_with_bobber(loop, env, [64.0] * 43 + [63.8], start_tick=2)
        assert env.mouse.clicks == 1
        assert loop.last_heuristic_bite_tick == 45

    def test_splash_after_heuristic_reels(self, env, settings):
        loop = make_loop(env, settings, bite_confirmation="both")
        env.in_fluid = True
        cast(loop, tick=1)
        run_with_bobber(loop, env, [64.0] * 43 + [63.8], start_tick=2)
        assert loop.on_splash(47, 4700)
        assert env.mouse.clicks == 2

    def test_splash_alone_does_not_reel(self, env, settings):
        loop = make_loop(env, settings, bite_confirmation="both")
        cast(loop, tick=1)
        assert not loop.on_splash(45, 4500)
        assert loop.last_splash_tick == 45
        assert env.mouse.clicks == 1

    def test_heuristic_after_splash_reels(self, env, settings):
        loop = make_loop(env, settings, bite_confirmation="both")
        env.in_fluid = True
        cast(loop, tick=1)
        run_with_bobber(loop, env, [64.0] * 42, start_tick=2)
        loop.on_splash(43, 4300)
        run_with_bobber(loop, env, [64.0, 63.8], start_tick=44)
        assert env.mouse.clicks == 2


class TestSessionEnd:
    """Tests for end_session"""

    def test_cooldown_then_idle(self, env, settings):
        loop = make_loop(env, settings, humanize_delays=True)
        loop.enter_minigame()
        loop.end_session(10_000, auto_loop=True)
        assert loop.phase == LoopPhase.COOLDOWN
        assert 10_000 + 250 <= loop.next_action_at_ms <= 10_000 + 700
        loop.step(300, loop.next_action_at_ms, session_active=False)
        assert loop.phase == LoopPhase.IDLE

    def test_without_auto_loop_goes_idle(self, env, settings):
        loop = make_loop(env, settings)
        loop.enter_minigame()
        loop.end_session(10_000, auto_loop=False)
        assert loop.phase == LoopPhase.IDLE

    def test_reset(self, env, settings):
        loop = make_loop(env, settings)
        cast(loop, tick=1)
        loop.reset()
        assert loop.phase == LoopPhase.IDLE
        assert loop.bobber.armed_at == -1
        assert loop.next_action_at_ms == 0
