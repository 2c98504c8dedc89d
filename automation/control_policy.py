"""
Control Policy
==============
Turns the live fish/box position error into a hold/release decision.

With a model loaded the decision comes from learning.predict(); without one a
two-band hysteresis controller is used:

    released -> hold     when |error| > err_hi and >= min_release_ticks since release
    held     -> release  when |error| < err_lo and >= min_press_ticks since press

Each change of hold state starts a short random jitter window during which
no new decision is taken.
"""

import logging
import random

from learning.model import predict
from utils.timing import jitter_ms

logger = logging.getLogger("AutoFish.policy")

NEVER = -1000


class ControlPolicy:
    """Owns the hold state of the minigame input"""

    def __init__(self, environment, settings: dict, rng=None, log_events=True):
        self.environment = environment
        self.err_hi = settings.get("err_hi", 0.15)
        self.err_lo = settings.get("err_lo", 0.05)
        self.min_press_ticks = settings.get("min_press_ticks", 4)
        self.min_release_ticks = settings.get("min_release_ticks", 3)
        self.jitter_ms = settings.get("jitter_ms", 30)
        self.rng = rng or random.Random()
        self.log_events = log_events

        self.model = None
        self.held = False
        self.last_press_tick = NEVER
        self.last_release_tick = NEVER
        self.delay_until_ms = 0

    def hysteresis_decision(self, error: float, tick: int) -> bool:
        magnitude = abs(error)
        if not self.held:
            return magnitude > self.err_hi and (tick - self.last_release_tick) >= self.min_release_ticks
        return not (magnitude < self.err_lo and (tick - self.last_press_tick) >= self.min_press_ticks)

    def decide(self, error: float, target_velocity: float, goal_velocity: float, tick: int) -> bool:
        """Desired hold state (no side effects)"""
        if self.model is not None:
            return predict(self.model, error, target_velocity, goal_velocity)
        return self.hysteresis_decision(error, tick)

    def step(self, error: float, target_velocity: float, goal_velocity: float, tick: int, now_ms: int):
        """
        Decide and apply for one tick.

        Returns:
            True if the hold state changed
        """
        if now_ms < self.delay_until_ms:
            return False

        should_hold = self.decide(error, target_velocity, goal_velocity, tick)
        if should_hold == self.held:
            return False
        try:
            if should_hold:
                self.press(tick)
            else:
                self.release(tick)
        except Exception as e:
            # held is unchanged, so the next tick decides again
            logger.warning(f"[Policy] Hold key {'press' if should_hold else 'release'} failed: {e}")
            return False
        self.delay_until_ms = now_ms + jitter_ms(self.rng, self.jitter_ms)
        return True

    def press(self, tick: int):
        if self.held:
            return
        self.environment.press_hold()
        self.held = True
        self.last_press_tick = tick
        if self.log_events:
            logger.debug("sneak: PRESS")

    def release(self, tick: int, force: bool = False):
        if not self.held and not force:
            return
        self.environment.release_hold()
        self.held = False
        self.last_release_tick = tick
        if self.log_events:
            logger.debug("sneak: RELEASE")

    def reset(self, tick: int = NEVER):
        """Release the hold key whatever the current state and clear timers"""
        try:
            self.release(tick, force=True)
        finally:
            self.last_press_tick = NEVER
            self.last_release_tick = NEVER
            self.delay_until_ms = 0
