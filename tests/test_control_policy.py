"""
Test suite for automation/control_policy.py
===========================================
Tests for the hysteresis controller, model delegation and jitter.
"""

import pytest

from automation.control_policy import ControlPolicy
from learning.model import ThresholdModel


class FixedRandom:
    """randrange() always returns its upper bound - 1"""

    def randrange(self, stop):
        return stop - 1


def make_policy(env, settings, rng=None, **overrides):
    s = dict(settings)
    s.update(overrides)
    return ControlPolicy(env, s, rng=rng)


class TestHysteresis:
    """Tests for the two-band fallback controller"""

    def test_press_above_high_band(self, env, settings):
        p = make_policy(env, settings)
        assert p.step(0.2, 0.0, 0.0, tick=1, now_ms=0)
        assert p.held
        assert env.keyboard.held

    def test_no_press_inside_bands(self, env, settings):
        p = make_policy(env, settings)
        assert not p.step(0.1, 0.0, 0.0, tick=1, now_ms=0)
        assert not p.held

    def test_negative_error_uses_magnitude(self, env, settings):
        p = make_policy(env, settings)
        p.step(-0.2, 0.0, 0.0, tick=1, now_ms=0)
        assert p.held

    def test_min_press_ticks(self, env, settings):
        p = make_policy(env, settings)
        p.step(0.2, 0.0, 0.0, tick=1, now_ms=0)
        for tick in (2, 3, 4):
            p.step(0.0, 0.0, 0.0, tick=tick, now_ms=tick * 50)
            assert p.held
        p.step(0.0, 0.0, 0.0, tick=5, now_ms=250)
        assert not p.held

    def test_min_release_ticks(self, env, settings):
        p = make_policy(env, settings)
        p.step(0.2, 0.0, 0.0, tick=1, now_ms=0)
        p.step(0.0, 0.0, 0.0, tick=5, now_ms=250)
        assert not p.held
        for tick in (6, 7):
            p.step(0.3, 0.0, 0.0, tick=tick, now_ms=tick * 50)
            assert not p.held
        p.step(0.3, 0.0, 0.0, tick=8, now_ms=400)
        assert p.held

    def test_held_inside_bands_stays_held(self, env, settings):
        p = make_policy(env, settings)
        p.step(0.2, 0.0, 0.0, tick=1, now_ms=0)
        p.step(0.1, 0.0, 0.0, tick=20, now_ms=1000)
        assert p.held

    def test_monotonic_ramp_toggles_once_each_way(self, env, settings):
        p = make_policy(env, settings)
        errors = [0.0, 0.05, 0.1, 0.16, 0.2, 0.2, 0.1, 0.06, 0.04, 0.0, 0.0]
        for tick, error in enumerate(errors, start=1):
            p.step(error, 0.0, 0.0, tick=tick, now_ms=tick * 50)
        assert len(env.keyboard.presses) == 1
        assert env.keyboard.events[-1][0] == "release"


class TestModelDelegation:
    """Tests for model-driven decisions"""

    def test_model_overrides_hysteresis(self, env, settings):
        p = make_policy(env, settings)
        p.model = ThresholdModel(error_threshold=0.1, velocity_threshold=0.0, accuracy=1.0)
        assert p.decide(0.12, 0.5, 0.0, tick=1)
        assert not p.decide(0.12, -0.5, 0.0, tick=1)

    def test_model_ignores_min_ticks(self, env, settings):
        p = make_policy(env, settings)
        p.model = ThresholdModel(error_threshold=0.1, velocity_threshold=0.0, accuracy=1.0)
        p.step(0.2, 0.5, 0.0, tick=1, now_ms=0)
        p.step(0.2, -0.5, 0.0, tick=2, now_ms=50)
        assert not p.held
        assert len(env.keyboard.presses) == 1


class TestJitter:
    """Tests for the post-toggle jitter window"""

    def test_no_decision_inside_jitter(self, env, settings):
        p = make_policy(env, settings, rng=FixedRandom(), jitter_ms=30)
        p.model = ThresholdModel(error_threshold=0.1, velocity_threshold=0.0, accuracy=1.0)
        p.step(0.2, 0.5, 0.0, tick=1, now_ms=1000)
        assert p.delay_until_ms == 1029
        assert not p.step(0.0, 0.0, 0.0, tick=2, now_ms=1028)
        assert p.held
        assert p.step(0.0, 0.0, 0.0, tick=3, now_ms=1029)
        assert not p.held

    def test_no_jitter_without_change(self, env, settings):
        p = make_policy(env, settings, rng=FixedRandom(), jitter_ms=30)
        p.step(0.0, 0.0, 0.0, tick=1, now_ms=1000)
        assert p.delay_until_ms == 0


class TestRelease:
    """Tests for forced release and reset"""

    def test_release_is_noop_when_not_held(self, env, settings):
        p = make_policy(env, settings)
        p.release(tick=1)
        assert env.keyboard.events == []

    def test_forced_release(self, env, settings):
        p = make_policy(env, settings)
        p.release(tick=1, force=True)
        assert env.keyboard.events == [("release", "shift")]

    def test_reset_releases_and_clears(self, env, settings):
        p = make_policy(env, settings)
        p.step(0.2, 0.0, 0.0, tick=1, now_ms=0)
        p.reset(tick=2)
        assert not p.held
        assert not env.keyboard.held
        assert p.delay_until_ms == 0
        # cooldowns are cleared too
        assert p.step(0.2, 0.0, 0.0, tick=3, now_ms=100)


class TestInputFailures:
    """Tests for hold key actions that raise"""

    def test_failed_press_is_retried_next_tick(self, env, settings):
        p = make_policy(env, settings)
        env.keyboard.fail_presses = 1
        assert not p.step(0.5, 0.0, 0.0, tick=10, now_ms=0)
        assert not p.held
        assert p.last_press_tick < 0

        assert p.step(0.5, 0.0, 0.0, tick=11, now_ms=50)
        assert p.held
        assert p.last_press_tick == 11
        assert env.keyboard.presses == [("press", "shift")]

    def test_failed_release_keeps_held(self, env, settings):
        p = make_policy(env, settings)
        p.step(0.2, 0.0, 0.0, tick=1, now_ms=0)
        env.keyboard.fail_releases = 1
        assert not p.step(0.0, 0.0, 0.0, tick=6, now_ms=300)
        assert p.held

        assert p.step(0.0, 0.0, 0.0, tick=7, now_ms=350)
        assert not p.held
        assert not env.keyboard.held

    def test_failed_press_starts_no_jitter_window(self, env, settings):
        p = make_policy(env, settings, jitter_ms=1000)
        env.keyboard.fail_presses = 1
        p.step(0.5, 0.0, 0.0, tick=1, now_ms=0)
        assert p.delay_until_ms == 0
