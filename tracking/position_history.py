# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Per-entity position history with range and velocity statistics

from collections import deque
from typing import Optional

LOCAL_RANGE_EPSILON = 1e-5
DEGENERATE_DENOMINATOR = 1e-10
DEFAULT_HISTORY_SIZE = 5


def least_squares_slope(values):
    """Ordinary least-squares slope of values against x = 0..n-1

    slope = (n*Sxy - Sx*Sy) / (n*Sxx - Sx^2)

    Returns 0.0 for fewer than two values or a degenerate denominator.
    """
    n = len(values)
    if n < 2:
        return 0.0
    sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for i, y in enumerate(values):
        x = float(i)
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_x2 += x * x
    denominator = n * sum_x2 - sum_x * sum_x
    if abs(denominator) < DEGENERATE_DENOMINATOR:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


class PositionHistory:
    """Bounded-memory vertical position aggregate in two frames

    The world frame is always recorded. The object-local frame is only
    tracked once the environment has reported a local value at least once;
    it is noisier but follows the minigame layout, so it wins when present.
    """

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE):
        self.last_world_y = None
        self.min_world_y = float("inf")
        self.max_world_y = float("-inf")
        self.last_local_y = None
        self.min_local_y = float("inf")
        self.max_local_y = float("-inf")
        self._world_recent = deque(maxlen=history_size)
        self._local_recent = deque(maxlen=history_size)

    def record(self, world_y: float, local_y: Optional[float] = None):
        """Append one sample; local_y is None when the frame is unavailable"""
        self.last_world_y = world_y
        if world_y < self.min_world_y:
            self.min_world_y = world_y
        if world_y > self.max_world_y:
            self.max_world_y = world_y
        self._world_recent.append(world_y)

        if local_y is None:
            return
        self.last_local_y = local_y
        if local_y < self.min_local_y:
            self.min_local_y = local_y
        if local_y > self.max_local_y:
            self.max_local_y = local_y
        self._local_recent.append(local_y)

    @property
    def has_local(self) -> bool:
        return self.last_local_y is not None

    def world_range(self) -> float:
        if self.last_world_y is None:
            return 0.0
        return self.max_world_y - self.min_world_y

    def local_range(self) -> float:
        if not self.has_local:
            return 0.0
        return self.max_local_y - self.min_local_y

    def range(self) -> float:
        """World-frame max - min"""
        return self.world_range()

    def effective_range(self) -> float:
        """Local range if a local value was ever seen and it moved, else world range"""
        local = self.local_range()
        if self.has_local and local > LOCAL_RANGE_EPSILON:
            return local
        return self.world_range()

    def world_velocity(self) -> float:
        return least_squares_slope(list(self._world_recent))

    def local_velocity(self) -> float:
        return least_squares_slope(list(self._local_recent))


class TrackedEntity:
    """An anonymous display entity observed near the player"""

    def __init__(self, entity_id: int, world_y: float, local_y: Optional[float], tick: int,
                 history_size: int = DEFAULT_HISTORY_SIZE):
        self.entity_id = entity_id
        self.first_seen_tick = tick
        self.last_seen_tick = tick
        self.history = PositionHistory(history_size)
        self.history.record(world_y, local_y)

    def update(self, world_y: float, local_y: Optional[float], tick: int):
        self.last_seen_tick = tick
        self.history.record(world_y, local_y)

    # Shortcuts used by the classifier and the control loop
    @property
    def min_world_y(self) -> float:
        return self.history.min_world_y

    @property
    def last_world_y(self) -> float:
        return self.history.last_world_y

    @property
    def last_local_y(self) -> Optional[float]:
        return self.history.last_local_y

    @property
    def has_local(self) -> bool:
        return self.history.has_local

    def effective_range(self) -> float:
        return self.history.effective_range()

    def position(self, use_local: bool) -> float:
        return self.history.last_local_y if use_local else self.history.last_world_y

    def velocity(self, use_local: bool) -> float:
        return self.history.local_velocity() if use_local else self.history.world_velocity()

    def __repr__(self):
        return (f"TrackedEntity(id={self.entity_id}, first={self.first_seen_tick}, "
                f"minY={self.min_world_y:.3f}, range={self.effective_range():.3f})")


def record(tracks, entity_id: int, world_y: float, local_y: Optional[float], tick: int,
           history_size: int = DEFAULT_HISTORY_SIZE) -> TrackedEntity:
    """Create or update the track for entity_id in a {id: TrackedEntity} map"""
    track = tracks.get(entity_id)
    if track is None:
        track = TrackedEntity(entity_id, world_y, local_y, tick, history_size)
        tracks[entity_id] = track
    else:
        track.update(world_y, local_y, tick)
    return track
