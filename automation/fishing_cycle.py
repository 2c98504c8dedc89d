"""
Fishing Cycle Module
--------------------
Per-tick orchestration of the fishing minigame automation.

One FishingCycle instance owns every piece of mutable state (tracked
entities, roles, bobber history, loop phase, hold state, training buffer)
and mutates it only inside on_tick() or the explicit lifecycle/toggle
methods. The host calls on_tick() at a fixed rate (nominally 20 Hz), either
directly or through core.FishingEngine.

Each tick:
    1. Poll the overlay text (terminal outcome ends the cycle)
    2. Feed splash sound cues to the cast loop
    3. Step the cast loop (auto-loop only)
    4. Track display entities near the player
    5. Detect a new minigame session and classify fish/box
    6. Control (or record training samples) while both roles are live
    7. End the cycle when the tracked entities are gone

Dependencies are injected: an EnvironmentAdapter, the flattened settings dict
(see SettingsManager.build_cycle_settings) and optionally a ModelStore,
callbacks, a random.Random and a millisecond clock.
"""

import logging
import random

from config.defaults import get_default_cycle_settings
from core.exceptions import ModelStoreError, TrainingRefusedError
from learning.model import DEFAULT_MODEL, describe
from learning.model_store import ModelStore
from learning.trainer import OnlineTrainer
from sensing.status_signals import OverlayWatcher, is_splash_cue
from tracking.bobber_tracker import BobberTracker
from tracking.entity_classifier import EntityClassifier
from utils.path_helpers import get_model_dir
from utils.timing import now_ms
from .cast_loop import CastLoop
from .control_policy import ControlPolicy

logger = logging.getLogger("AutoFish.cycle")


class FishingCycle:
    """Tick handler tying tracking, the cast loop, control and training together"""

    def __init__(self, environment, settings=None, model_store=None, callbacks=None, rng=None, clock=None):
        """
        Initialize FishingCycle with all dependencies.

        Args:
            environment: EnvironmentAdapter for the host client
            settings: Flattened settings dict (defaults fill missing keys)
            model_store: ModelStore for the trained model and training data
            callbacks: Optional dict of callbacks:
                - set_status: (str) -> None
                - on_cycle_end: (reason) -> None
                - on_model_changed: (model or None) -> None
            rng: random.Random for humanized delays and jitter
            clock: Callable returning wall-clock milliseconds
        """
        merged = get_default_cycle_settings()
        merged.update(settings or {})
        self.settings = merged
        self.environment = environment
        self.rng = rng or random.Random()
        self.clock = clock or now_ms

        self.radius = merged["radius"]
        self.auto_loop = merged["auto_loop"]
        self.chat_log = merged["chat_log"]
        self.log_every = max(1, int(merged["log_every_n_ticks"]))
        self.spawn_window_ticks = merged["spawn_window_ticks"]
        self.invert_error = merged["invert_error"]
        self.use_default_model = merged["use_default_model"]
        self.training_mode = merged["training_mode"]

        self.model_store = model_store or ModelStore(get_model_dir(merged.get("model_dir")))

        # Callbacks
        self.callbacks = callbacks or {}
        self.set_status = self.callbacks.get("set_status", lambda status: None)

        # Components
        self.classifier = EntityClassifier(merged)
        self.bobber = BobberTracker(merged)
        self.loop = CastLoop(environment, self.bobber, merged, self.rng)
        self.policy = ControlPolicy(environment, merged, self.rng, log_events=self.chat_log)
        self.trainer = OnlineTrainer(merged)
        self.overlay = OverlayWatcher()

        # Runtime
        self.active = False
        self.tick = 0
        self.session_active = False
        self._stale_ids = set()
        self._announced = False

    # ========== LOGGING ==========

    def _log(self, message):
        logger.log(logging.INFO if self.chat_log else logging.DEBUG, message)

    # ========== MODEL ==========

    @property
    def model(self):
        return self.policy.model

    def _set_model(self, model):
        self.policy.model = model
        if "on_model_changed" in self.callbacks:
            self.callbacks["on_model_changed"](model)

    def _load_saved(self):
        """Saved model + dataset; any failure leaves hysteresis control"""
        self._set_model(self.model_store.load_model())
        self.trainer.load(self.model_store.load_samples())

    # ========== LIFECYCLE ==========

    def _reset_runtime(self):
        self.tick = 0
        self.session_active = False
        self._stale_ids.clear()
        self._announced = False
        self.classifier.reset()
        self.loop.reset()
        self.overlay.reset()

    def activate(self):
        """Reset all state and pick the model; persistence is read here"""
        self._reset_runtime()
        self.policy.reset(self.tick)

        if self.use_default_model:
            self._set_model(DEFAULT_MODEL)
            self.trainer.reset()
            self._log(f"Using built-in default model ({describe(DEFAULT_MODEL)}).")
        else:
            self._load_saved()
            if self.training_mode:
                self._start_training()

        self.active = True
        self.set_status("Watching for minigame")
        self._log("Watching for minigame...")

    def deactivate(self):
        """Reset every FSM/timer/classifier value and release held inputs"""
        self.active = False
        if self.trainer.active:
            self._finish_training()
        try:
            self.policy.reset(self.tick)
        except Exception as e:
            logger.warning(f"Could not release hold key: {e}")
        try:
            self.environment.release_use()
        except Exception as e:
            logger.warning(f"Could not release use key: {e}")
        self._reset_runtime()
        self.set_status("Stopped")

    # ========== TOGGLES ==========

    def set_use_default_model(self, enabled: bool):
        enabled = bool(enabled)
        if enabled == self.use_default_model:
            return
        self.use_default_model = enabled
        self.training_mode = False
        if self.trainer.active:
            logger.info("Training session discarded (model source changed).")
            self.trainer.reset()

        if enabled:
            self._set_model(DEFAULT_MODEL)
            self._log("Switched to built-in default model.")
        else:
            self._set_model(None)
            self._load_saved()
            self._log("Default model disabled. Using saved/trained model if available.")

    def set_training_mode(self, enabled: bool):
        enabled = bool(enabled)
        if self.use_default_model:
            if enabled:
                self._log("Default model is enabled; disable it to train your own model.")
            self.training_mode = False
            return
        if enabled == self.training_mode:
            return
        self.training_mode = enabled
        if enabled:
            self._start_training()
        else:
            self._finish_training()

    def _start_training(self):
        self.training_mode = True
        # operator takes over the hold key
        self.policy.release(self.tick, force=True)
        self.trainer.start()
        self.set_status("Training")

    def _finish_training(self):
        """Fit, install and persist a model from the collected samples"""
        self.training_mode = False
        try:
            model = self.trainer.finish()
        except TrainingRefusedError as e:
            self._log(str(e))
            return None

        self._set_model(model)
        samples = list(self.trainer.samples)
        try:
            self.model_store.save_model(model, len(samples))
            self.model_store.save_samples(samples)
        except ModelStoreError as e:
            logger.warning(str(e))

        self._log(f"Training complete: {len(samples)} rows, model type={model.model_type}, "
                  f"accuracy={model.accuracy * 100:.1f} pct")
        return model

    # ========== EXTERNAL SIGNALS ==========

    def handle_overlay(self, text):
        """Overlay / title text pushed by the host"""
        terminal = self.overlay.feed(text)
        if terminal is not None and self.session_active:
            self._log(f"Overlay: {terminal}")
            self.stop_cycle("overlay")

    def handle_sound(self, sound_id):
        """Sound id pushed by the host"""
        if not self.active or not self.auto_loop or not is_splash_cue(sound_id):
            return
        self.loop.on_splash(self.tick, self.clock())

    # ========== TICK ==========

    def on_tick(self):
        """One fixed-rate tick; any failure skips the rest of this tick"""
        if not self.active:
            return
        try:
            self._tick()
        except Exception as e:
            logger.error(f"[Cycle] Tick {self.tick} failed: {e}", exc_info=True)

    def _tick(self):
        self.tick += 1
        now = self.clock()

        self.handle_overlay(self.environment.read_overlay_text())
        for sound_id in self.environment.drain_sound_cues():
            self.handle_sound(sound_id)

        if self.auto_loop:
            self.loop.step(self.tick, now, self.session_active)

        self._observe_entities()

        if not self.session_active and len(self.classifier.recent(self.tick, self.spawn_window_ticks)) >= 2:
            self._start_session()

        if self.session_active and not self.classifier.is_classified:
            self.classifier.classify(self.tick)

        if self.session_active and self.classifier.is_classified:
            pair = self.classifier.assigned_tracks()
            if pair is None:
                self.stop_cycle("entity lost")
                return
            self._control(*pair, now)

        if self.session_active and not self.classifier.tracks:
            self.stop_cycle("entities gone")

    def _observe_entities(self):
        sightings = self.environment.nearby_entities(self.radius)
        if self._stale_ids:
            # entities of the finished minigame must not start a new session
            self._stale_ids &= {s.entity_id for s in sightings}
            sightings = [s for s in sightings if s.entity_id not in self._stale_ids]
        self.classifier.observe(sightings, self.tick, self.environment.try_get_local_y)

    def _start_session(self):
        self.session_active = True
        self.classifier.assignment = None
        self.loop.enter_minigame()
        self.set_status("Minigame")
        self._log("Minigame detected. Classifying...")

    def _control(self, target, goal, now):
        use_local = target.has_local and goal.has_local
        target_pos = target.position(use_local)
        goal_pos = goal.position(use_local)
        target_vel = target.velocity(use_local)
        goal_vel = goal.velocity(use_local)
        error = (goal_pos - target_pos) if self.invert_error else (target_pos - goal_pos)

        training = not self.use_default_model and self.trainer.active
        if training:
            self.trainer.add_sample(error, target_vel, goal_vel, self.environment.is_hold_pressed())
            mode = "TRAINING"
        else:
            if not self._announced:
                self._announced = True
                if self.model is not None:
                    self._log("Using trained model to control box.")
                else:
                    self._log("No trained model available, falling back to hysteresis control.")
            self.policy.step(error, target_vel, goal_vel, self.tick, now)
            mode = "MODEL" if self.model is not None else "HYST"

        if self.chat_log and self.tick % self.log_every == 0:
            frame = "L" if use_local else "W"
            held = self.environment.is_hold_pressed() if training else self.policy.held
            logger.info(
                f"[{mode}] {frame}: fish={target_pos:.3f}(v={target_vel:.3f}) "
                f"box={goal_pos:.3f}(v={goal_vel:.3f}) diff={error:.3f} | sneak={held}"
            )

    def stop_cycle(self, reason: str = ""):
        """End the minigame session and hand over to cooldown (or idle)"""
        self._log(f"Cycle end.{' (' + reason + ')' if reason else ''}")
        try:
            self.policy.release(self.tick, force=True)
        except Exception as e:
            logger.warning(f"Could not release hold key: {e}")
        self.session_active = False
        self._announced = False
        self._stale_ids = set(self.classifier.tracks)
        self.classifier.reset()
        self.loop.end_session(self.clock(), self.auto_loop)
        self.set_status("Cooldown" if self.auto_loop else "Idle")
        if "on_cycle_end" in self.callbacks:
            self.callbacks["on_cycle_end"](reason)
