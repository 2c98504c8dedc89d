"""
Tick Engine
===========
Runs a FishingCycle on a background thread at a fixed rate.

The cycle holds every bit of fishing behavior; this module only knows how to
bring it up, tick it, and bring it down again with the hold and use keys
released. Runtime toggles coming from other threads are serialized with the
ticks through a single re-entrant lock.

    engine = FishingEngine(cycle, {"tick_rate_hz": 20})
    engine.start()
    ...
    engine.stop()
"""

import logging
import threading
import time
from typing import Callable, Optional

from core.state import MacroState
from core.exceptions import EngineStateError

DEFAULT_TICK_RATE_HZ = 20


class FishingEngine:
    """
    Fixed-rate driver for a FishingCycle.

    Callbacks (all optional, keyed by name):
        on_state_change(old, new), on_start(), on_stop(), on_error(exc)
    """

    def __init__(
        self,
        fishing_cycle,
        settings: Optional[dict] = None,
        logger: Optional[logging.Logger] = None,
        callbacks: Optional[dict] = None,
    ):
        self._cycle = fishing_cycle
        self._logger = logger or logging.getLogger("AutoFish.engine")
        self._callbacks = callbacks or {}

        rate = (settings or {}).get("tick_rate_hz", DEFAULT_TICK_RATE_HZ)
        if isinstance(rate, bool) or not isinstance(rate, (int, float)) or rate <= 0:
            raise EngineStateError(f"tick_rate_hz must be positive, got {rate!r}")
        self._tick_interval = 1.0 / rate

        self._state = MacroState.STOPPED
        self._lifecycle_lock = threading.Lock()
        self._tick_lock = threading.RLock()
        self._halt = threading.Event()
        self._halt.set()
        self._thread: Optional[threading.Thread] = None

        self._started_at: Optional[float] = None
        self._tick_errors = 0

    # ========== LIFECYCLE ==========

    def start(self) -> bool:
        """
        Activate the cycle and spawn the tick thread. Returns at once.

        Returns:
            False when the engine was not stopped or activation failed
        """
        if not self._transition(MacroState.STARTING, require="can_start"):
            return False

        try:
            with self._tick_lock:
                self._cycle.activate()
            self._tick_errors = 0
            self._halt.clear()
            self._thread = threading.Thread(target=self._run, name="AutoFish-Tick", daemon=True)
            self._started_at = time.time()
            self._thread.start()
        except Exception as e:
            self._logger.error(f"Engine start aborted: {e}", exc_info=True)
            self._halt.set()
            self._started_at = None
            self._deactivate_cycle()
            self._transition(MacroState.ERROR)
            self._fire("on_error", e)
            return False

        self._transition(MacroState.RUNNING)
        self._fire("on_start")
        self._logger.info(f"Ticking every {self._tick_interval * 1000:.0f} ms")
        return True

    def stop(self, timeout: float = 5.0) -> bool:
        """
        Halt the tick thread and deactivate the cycle.

        Waits at most `timeout` seconds for the thread. Deactivation runs even
        if the join times out.

        Returns:
            False only when the thread outlived the timeout
        """
        if not self._transition(MacroState.STOPPING, require="can_stop"):
            return True

        clean = True
        try:
            self._halt.set()
            thread, self._thread = self._thread, None
            if thread is not None and thread is not threading.current_thread():
                thread.join(timeout=timeout)
                clean = not thread.is_alive()
            self._started_at = None
        finally:
            self._deactivate_cycle()
            self._transition(MacroState.STOPPED)

        self._fire("on_stop")
        if clean:
            self._logger.info("Engine stopped")
        else:
            self._logger.warning(f"Tick thread still alive after {timeout}s; left to die with the process")
        return clean

    # ========== QUERIES ==========

    def is_running(self) -> bool:
        return not self._halt.is_set()

    def get_state(self) -> MacroState:
        with self._lifecycle_lock:
            return self._state

    def get_uptime(self) -> Optional[float]:
        """Seconds since start, or None while stopped"""
        started = self._started_at
        if started is None or not self.is_running():
            return None
        return time.time() - started

    @property
    def tick_errors(self) -> int:
        """Exceptions that escaped a tick since the last start"""
        return self._tick_errors

    @property
    def tick_interval(self) -> float:
        return self._tick_interval

    # ========== TOGGLES ==========

    def set_use_default_model(self, enabled: bool):
        with self._tick_lock:
            self._cycle.set_use_default_model(enabled)

    def set_training_mode(self, enabled: bool):
        with self._tick_lock:
            self._cycle.set_training_mode(enabled)

    # ========== TICKING ==========

    def tick_once(self):
        """Run a single tick; an escaping exception is counted, never raised"""
        with self._tick_lock:
            try:
                self._cycle.on_tick()
            except Exception as e:
                self._tick_errors += 1
                self._logger.error(f"Tick raised: {e}", exc_info=True)
                self._fire("on_error", e)

    def _run(self):
        # Missed deadlines are dropped, not caught up.
        deadline = time.monotonic()
        while not self._halt.is_set():
            self.tick_once()
            deadline += self._tick_interval
            remaining = deadline - time.monotonic()
            if remaining < 0:
                deadline = time.monotonic()
                remaining = 0
            self._halt.wait(remaining)
        self._logger.debug("Tick thread finished")

    # ========== HELPERS ==========

    def _deactivate_cycle(self):
        try:
            with self._tick_lock:
                self._cycle.deactivate()
        except Exception as e:
            self._logger.error(f"Cycle deactivation failed: {e}", exc_info=True)

    def _transition(self, new_state: MacroState, require: Optional[str] = None) -> bool:
        """
        Move to new_state. With `require`, the named MacroState property
        must hold for the current state or nothing changes.
        """
        with self._lifecycle_lock:
            old_state = self._state
            if require is not None and not getattr(old_state, require):
                self._logger.warning(f"Ignoring {new_state.name.lower()} request while {old_state}")
                return False
            self._state = new_state

        self._logger.debug(f"{old_state} -> {new_state}")
        notify: Optional[Callable] = self._callbacks.get("on_state_change")
        if notify is not None:
            try:
                notify(old_state, new_state)
            except Exception as e:
                self._logger.error(f"on_state_change callback failed: {e}")
        return True

    def _fire(self, name: str, *args):
        handler = self._callbacks.get(name)
        if handler is not None:
            handler(*args)
