"""
Cast Loop
=========
The outer auto-fishing state machine:

    IDLE -> (cast) -> WAIT_BITE -> (bite / no-bite timeout) -> REELING
         -> MINIGAME -> stop_cycle -> COOLDOWN -> IDLE

step() is called once per tick but only does work when the wall clock has
reached the scheduled next_action_at_ms. Humanized delays only ever push
that schedule forward; nothing here blocks.

Deadlines that must survive host frame-rate swings (arming, cast resolution,
no-bite timeout) are counted in ticks.
"""

import logging
import random

from core.state import LoopPhase
from utils.timing import humanized_delay_ms

logger = logging.getLogger("AutoFish.loop")

NEVER = -10000


class CastLoop:
    """Single process-wide loop state, mutated only by its own methods"""

    def __init__(self, environment, bobber, settings: dict, rng=None):
        """
        Args:
            environment: EnvironmentAdapter
            bobber: BobberTracker (re-armed on every cast)
            settings: Flattened cycle settings dict
            rng: random.Random for humanized delays
        """
        self.environment = environment
        self.bobber = bobber
        self.rng = rng or random.Random()

        self.humanize_delays = settings.get("humanize_delays", True)
        self.chat_log = settings.get("chat_log", True)
        self.reel_delay_min_ms = settings.get("reel_delay_min_ms", 110)
        self.reel_delay_max_ms = settings.get("reel_delay_max_ms", 360)
        self.recast_cooldown_min_ms = settings.get("recast_cooldown_min_ms", 250)
        self.recast_cooldown_max_ms = settings.get("recast_cooldown_max_ms", 700)
        self.cast_delay_min_ms = settings.get("cast_delay_min_ms", 120)
        self.cast_delay_max_ms = settings.get("cast_delay_max_ms", 380)
        self.fail_retry_delay_ms = settings.get("fail_retry_delay_ms", 500)
        self.no_rod_retry_delay_ms = settings.get("no_rod_retry_delay_ms", 750)
        self.poll_delay_ms = settings.get("poll_delay_ms", 60)
        self.reel_grace_ms = settings.get("reel_grace_ms", 120)
        self.cast_spawn_grace_ticks = settings.get("cast_spawn_grace_ticks", 12)
        self.cast_resolve_extra_ticks = settings.get("cast_resolve_extra_ticks", 28)
        self.no_bite_timeout_ticks = settings.get("no_bite_timeout_ticks", 60 * 20)
        self.bite_min_ticks_after_cast = settings.get("bite_min_ticks_after_cast", 10)
        self.joint_confirmation = settings.get("bite_confirmation", "either") == "both"
        self.joint_window_ticks = settings.get("joint_confirmation_window_ticks", 10)

        self.reset()

    def reset(self):
        self.phase = LoopPhase.IDLE
        self.next_action_at_ms = 0
        self.last_cast_tick = NEVER
        self.cast_resolve_deadline_tick = NEVER
        self.last_reel_tick = NEVER
        self.last_heuristic_bite_tick = NEVER
        self.last_splash_tick = NEVER
        self.bobber.reset()

    # ========== HELPERS ==========

    def _log(self, message):
        logger.log(logging.INFO if self.chat_log else logging.DEBUG, message)

    def schedule_next(self, now_ms: int, delay_ms: int):
        self.next_action_at_ms = now_ms + max(0, int(delay_ms))

    def _set_phase(self, phase: LoopPhase):
        if phase != self.phase:
            logger.debug(f"Loop phase: {self.phase} -> {phase}")
        self.phase = phase

    def _use_item(self, action: str) -> bool:
        """One use-item effect; failures are logged and reported as False"""
        try:
            self.environment.use_item()
            return True
        except Exception as e:
            logger.warning(f"[Loop] Could not {action}: {e}")
            return False

    def has_bobber_out(self) -> bool:
        return self.bobber.bobber_id is not None

    def ticks_since_cast(self, tick: int) -> int:
        return tick - self.last_cast_tick

    def _reel(self, tick: int, now_ms: int, reason: str, humanized: bool = True) -> bool:
        """Reel in; a bite reel waits the reel delay first, a timeout reel only the grace"""
        if not self._use_item("reel"):
            return False
        delay = 0
        if humanized:
            delay = humanized_delay_ms(
                self.rng, self.humanize_delays, self.reel_delay_min_ms, self.reel_delay_max_ms
            )
        self.last_reel_tick = tick
        self._set_phase(LoopPhase.REELING)
        self.schedule_next(now_ms, delay + self.reel_grace_ms)
        self._log(f"{reason} -> reeling ({delay + self.reel_grace_ms} ms).")
        return True

    # ========== FSM ==========

    def step(self, tick: int, now_ms: int, session_active: bool):
        """Evaluate the loop once if its schedule allows"""
        if now_ms < self.next_action_at_ms:
            return

        if self.phase != LoopPhase.MINIGAME:
            self.bobber.update(self.environment.try_get_own_projectile(), tick)

        if self.phase == LoopPhase.IDLE:
            self._step_idle(tick, now_ms, session_active)
        elif self.phase == LoopPhase.CASTING:
            self._set_phase(LoopPhase.WAIT_BITE)
        elif self.phase == LoopPhase.WAIT_BITE:
            self._step_wait_bite(tick, now_ms, session_active)
        elif self.phase == LoopPhase.REELING:
            self._step_reeling(now_ms, session_active)
        elif self.phase == LoopPhase.COOLDOWN:
            self._set_phase(LoopPhase.IDLE)
        # MINIGAME is left only through end_session()

    def _step_idle(self, tick, now_ms, session_active):
        if session_active:
            self._set_phase(LoopPhase.MINIGAME)
            return

        if self.has_bobber_out():
            self._set_phase(LoopPhase.WAIT_BITE)
            return

        try:
            rod_ready = self.environment.try_equip_rod()
        except Exception as e:
            logger.warning(f"[Loop] Could not equip rod: {e}")
            rod_ready = False
        if not rod_ready:
            self.schedule_next(now_ms, self.no_rod_retry_delay_ms)
            return

        self._set_phase(LoopPhase.CASTING)
        if not self._use_item("cast"):
            self._set_phase(LoopPhase.IDLE)
            self.schedule_next(now_ms, self.fail_retry_delay_ms)
            return

        self.last_cast_tick = tick
        self.bobber.arm(tick)
        self.cast_resolve_deadline_tick = tick + self.cast_spawn_grace_ticks + self.cast_resolve_extra_ticks
        self.schedule_next(now_ms, humanized_delay_ms(
            self.rng, self.humanize_delays, self.cast_delay_min_ms, self.cast_delay_max_ms
        ))
        self._log("Casting fishing rod.")
        self._set_phase(LoopPhase.WAIT_BITE)

    def _step_wait_bite(self, tick, now_ms, session_active):
        if session_active:
            self._set_phase(LoopPhase.MINIGAME)
            return

        if not self.has_bobber_out():
            if tick <= self.cast_resolve_deadline_tick:
                # bobber may not have spawned yet
                self.schedule_next(now_ms, self.poll_delay_ms)
                return
            logger.debug("[Loop] No bobber after cast deadline, treating cast as failed")
            self._set_phase(LoopPhase.IDLE)
            self.schedule_next(now_ms, self.fail_retry_delay_ms)
            return

        if self.last_cast_tick >= 0 and self.ticks_since_cast(tick) >= self.no_bite_timeout_ticks:
            reason = f"No bite for {self.no_bite_timeout_ticks} ticks, recasting"
            if self._reel(tick, now_ms, reason, humanized=False):
                return

        in_fluid = self._projectile_in_fluid()
        heuristic = self.bobber.detect_bite(tick, in_fluid)
        if heuristic:
            self.last_heuristic_bite_tick = tick

        if heuristic and self.ticks_since_cast(tick) >= self.bite_min_ticks_after_cast:
            if not self.joint_confirmation or self._recent(self.last_splash_tick, tick):
                if self._reel(tick, now_ms, "Bite detected!"):
                    return

        self.schedule_next(now_ms, self.poll_delay_ms)

    def _step_reeling(self, now_ms, session_active):
        if session_active:
            self._set_phase(LoopPhase.MINIGAME)
        elif not self.has_bobber_out():
            self._set_phase(LoopPhase.IDLE)
            self.schedule_next(now_ms, self.fail_retry_delay_ms)
        else:
            # bite was a false read, bobber still out
            self._set_phase(LoopPhase.WAIT_BITE)
            self.schedule_next(now_ms, self.poll_delay_ms)

    def _projectile_in_fluid(self) -> bool:
        try:
            return bool(self.environment.is_projectile_in_fluid())
        except Exception as e:
            logger.debug(f"[Loop] Fluid check failed: {e}")
            return False

    def _recent(self, event_tick: int, tick: int) -> bool:
        return event_tick != NEVER and (tick - event_tick) <= self.joint_window_ticks

    # ========== EXTERNAL EVENTS ==========

    def on_splash(self, tick: int, now_ms: int) -> bool:
        """
        Splash sound heard. Reels when waiting for a bite, armed, and past the
        minimum ticks since cast (with joint confirmation, only when the
        heuristic also fired recently).

        Returns:
            True if a reel was issued
        """
        if self.phase != LoopPhase.WAIT_BITE:
            return False
        if not self.bobber.is_armed(tick) or self.ticks_since_cast(tick) < self.bite_min_ticks_after_cast:
            return False
        self.last_splash_tick = tick
        if self.joint_confirmation and not self._recent(self.last_heuristic_bite_tick, tick):
            return False
        return self._reel(tick, now_ms, "Splash sound")

    def enter_minigame(self):
        self._set_phase(LoopPhase.MINIGAME)

    def end_session(self, now_ms: int, auto_loop: bool):
        """Minigame finished: cool down before the next cast (or go idle)"""
        if auto_loop:
            self._set_phase(LoopPhase.COOLDOWN)
            cooldown = humanized_delay_ms(
                self.rng, self.humanize_delays, self.recast_cooldown_min_ms, self.recast_cooldown_max_ms
            )
            self.schedule_next(now_ms, cooldown)
            self._log(f"Cooldown {cooldown} ms before next cast.")
        else:
            self._set_phase(LoopPhase.IDLE)
