# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Tracks our own fishing bobber and detects bites from its vertical motion

from collections import deque
from typing import Optional

BOBBER_HISTORY_SIZE = 6
SETTLE_SAMPLES = 4


class BobberTracker:
    """
    Short vertical-position history of the automation's own bobber plus the
    bite heuristic.

    Bite detection is disarmed until `armed_at` (cast tick + arm delay) so the
    launch impulse of the cast is never read as a tug. After arming it only
    runs once the bobber is in water or looks settled.

    Settings keys (flattened cycle settings):
        bite_arm_ticks, bite_vel_down_thr, bite_drop_thr, bite_window_ticks,
        settle_step_thr, settle_range_thr
    """

    def __init__(self, settings: dict):
        self.arm_ticks = settings.get("bite_arm_ticks", 40)
        self.vel_down_thr = settings.get("bite_vel_down_thr", -0.14)
        self.drop_thr = settings.get("bite_drop_thr", 0.20)
        self.window_ticks = settings.get("bite_window_ticks", 3)
        self.settle_step_thr = settings.get("settle_step_thr", 0.06)
        self.settle_range_thr = settings.get("settle_range_thr", 0.12)

        self.bobber_id: Optional[int] = None
        self.samples = deque(maxlen=BOBBER_HISTORY_SIZE)  # (tick, y)
        self.armed_at = -1

    def arm(self, cast_tick: int):
        """Start a new cast: drop the old history and arm after the delay"""
        self.bobber_id = None
        self.samples.clear()
        self.armed_at = cast_tick + self.arm_ticks

    def reset(self):
        self.bobber_id = None
        self.samples.clear()
        self.armed_at = -1

    def update(self, projectile, tick: int):
        """Sample the bobber; projectile is None when none of ours is out"""
        if projectile is None:
            self.bobber_id = None
            self.samples.clear()
            return
        if self.bobber_id is not None and projectile.entity_id != self.bobber_id:
            self.samples.clear()
        self.bobber_id = projectile.entity_id
        self.samples.append((tick, projectile.y))

    @property
    def ys(self):
        return [y for _, y in self.samples]

    def is_armed(self, tick: int) -> bool:
        return tick >= self.armed_at

    def looks_settled(self) -> bool:
        """Last 4 samples move little step to step and span a small range"""
        ys = self.ys
        if len(ys) < SETTLE_SAMPLES:
            return False
        tail = ys[-SETTLE_SAMPLES:]
        steps = [abs(tail[i + 1] - tail[i]) for i in range(len(tail) - 1)]
        if any(step >= self.settle_step_thr for step in steps):
            return False
        return (max(tail) - min(tail)) < self.settle_range_thr

    def is_ready(self, in_fluid: bool) -> bool:
        """Bobber is on/in water or no longer in flight"""
        return bool(in_fluid) or self.looks_settled()

    def detect_bite(self, tick: int, in_fluid: bool) -> bool:
        if not self.is_armed(tick):
            return False
        ys = self.ys
        if len(ys) < 2:
            return False
        if not self.is_ready(in_fluid):
            return False

        # Downward tug
        vy = ys[-1] - ys[-2]
        if vy < self.vel_down_thr:
            return True

        # Sudden drop over a short window
        window = ys[-self.window_ticks:]
        return (max(window) - min(window)) > self.drop_thr and ys[-1] < ys[-2]
