"""
Shared fixtures for the test suite
==================================
A scriptable in-memory host (FakeEnvironment), recording input devices and a
manual millisecond clock, so the cycle can be driven tick by tick without a
game client or an input backend.
"""

import random

import pytest

from config.defaults import get_default_cycle_settings
from core.exceptions import EnvironmentActionError
from sensing.environment import EnvironmentAdapter, EntitySighting, ProjectileSighting


class FakeKeyboard:
    """Records synthetic presses; `physical` is what the operator holds"""

    hold_key = "shift"

    def __init__(self):
        self.events = []
        self.held = False
        self.physical = False
        self.fail_presses = 0
        self.fail_releases = 0

    def press(self, key):
        if self.fail_presses:
            self.fail_presses -= 1
            raise EnvironmentActionError("hold key press failed")
        self.events.append(("press", key))
        self.held = True

    def release(self, key):
        if self.fail_releases:
            self.fail_releases -= 1
            raise EnvironmentActionError("hold key release failed")
        self.events.append(("release", key))
        self.held = False

    def is_pressed(self, key):
        return self.physical

    @property
    def presses(self):
        return [e for e in self.events if e[0] == "press"]


class FakeMouse:
    def __init__(self):
        self.clicks = 0
        self.releases = 0
        self.fail = False

    def right_click(self):
        if self.fail:
            raise EnvironmentActionError("use item failed")
        self.clicks += 1

    def release_right(self):
        self.releases += 1


class FakeEnvironment(EnvironmentAdapter):
    """Host state set directly by the test"""

    def __init__(self):
        super().__init__(keyboard=FakeKeyboard(), mouse=FakeMouse())
        self.entities = {}     # id -> world y
        self.local_ys = {}     # id -> local y
        self.projectile = None
        self.in_fluid = False
        self.has_rod = True
        self.overlay = None
        self.sounds = []
        self.fail_sensing = False

    def set_entities(self, **ys):
        """set_entities(fish=10.0, box=9.5) with ids fish=1, box=2, a=3, b=4"""
        ids = {"fish": 1, "box": 2, "a": 3, "b": 4}
        self.entities = {ids[name]: y for name, y in ys.items()}

    def nearby_entities(self, radius):
        if self.fail_sensing:
            raise RuntimeError("sensing failed")
        return [EntitySighting(eid, 0.0, y, 0.0) for eid, y in self.entities.items()]

    def try_get_local_y(self, entity_id):
        return self.local_ys.get(entity_id)

    def try_get_own_projectile(self):
        return self.projectile

    def set_bobber(self, y, entity_id=77):
        self.projectile = ProjectileSighting(entity_id, y)

    def is_projectile_in_fluid(self):
        return self.in_fluid

    def try_equip_rod(self):
        return self.has_rod

    def read_overlay_text(self):
        return self.overlay

    def drain_sound_cues(self):
        sounds, self.sounds = self.sounds, []
        return sounds


class ManualClock:
    """Millisecond clock advanced by hand"""

    def __init__(self, start=1_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def env():
    return FakeEnvironment()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def settings():
    """Default cycle settings with deterministic timing"""
    s = get_default_cycle_settings()
    s.update({
        "humanize_delays": False,
        "jitter_ms": 0,
        "min_candidates": 2,
    })
    return s
