# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Assigns TARGET (fish) / GOAL (box) roles to anonymous tracked entities

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .position_history import TrackedEntity, DEFAULT_HISTORY_SIZE, record

logger = logging.getLogger("AutoFish.classifier")


class Role(Enum):
    TARGET = "target"  # moving fish
    GOAL = "goal"      # still box


@dataclass(frozen=True)
class RoleAssignment:
    target_id: int
    goal_id: int

    def role_of(self, entity_id) -> Optional[Role]:
        if entity_id == self.target_id:
            return Role.TARGET
        if entity_id == self.goal_id:
            return Role.GOAL
        return None


class EntityClassifier:
    """
    Owns the working set of tracked minigame entities and freezes one
    TARGET/GOAL assignment per session.

    Settings keys (flattened cycle settings):
        classify_min_ticks, min_candidates, fish_move_local_range,
        fish_move_world_range, history_size
    """

    def __init__(self, settings: dict):
        self.classify_min_ticks = settings.get("classify_min_ticks", 6)
        self.min_candidates = settings.get("min_candidates", 4)
        self.move_local_range = settings.get("fish_move_local_range", 0.12)
        self.move_world_range = settings.get("fish_move_world_range", 0.18)
        self.history_size = settings.get("history_size", DEFAULT_HISTORY_SIZE)

        self.tracks: Dict[int, TrackedEntity] = {}
        self.assignment: Optional[RoleAssignment] = None

    # ========== WORKING SET ==========

    def observe(self, sightings, tick: int, local_y_of=None) -> List[int]:
        """
        Update tracks from this tick's sightings and evict the rest.

        Args:
            sightings: Iterable of objects with entity_id and y attributes
            tick: Current tick
            local_y_of: Optional callable entity_id -> Optional[float]

        Returns:
            Ids evicted this tick
        """
        present = set()
        for sighting in sightings:
            local_y = local_y_of(sighting.entity_id) if local_y_of else None
            record(self.tracks, sighting.entity_id, sighting.y, local_y, tick, self.history_size)
            present.add(sighting.entity_id)

        evicted = [eid for eid in self.tracks if eid not in present]
        for eid in evicted:
            del self.tracks[eid]
        return evicted

    def recent(self, tick: int, window: int) -> List[TrackedEntity]:
        """Tracks first seen within the last `window` ticks"""
        return [t for t in self.tracks.values() if tick - t.first_seen_tick <= window]

    def reset(self):
        self.tracks.clear()
        self.assignment = None

    # ========== ROLES ==========

    @property
    def is_classified(self) -> bool:
        return self.assignment is not None

    def assigned_tracks(self):
        """(target, goal) tracks, or None if unresolved or either is gone"""
        if self.assignment is None:
            return None
        target = self.tracks.get(self.assignment.target_id)
        goal = self.tracks.get(self.assignment.goal_id)
        if target is None or goal is None:
            return None
        return target, goal

    def _is_moving(self, track: TrackedEntity) -> bool:
        if track.has_local:
            return track.history.local_range() >= self.move_local_range
        return track.history.world_range() >= self.move_world_range

    def classify(self, tick: int) -> Optional[RoleAssignment]:
        """
        Try to assign TARGET and GOAL. Frozen once made.

        Returns:
            The assignment, or None while deferring
        """
        if self.assignment is not None:
            return self.assignment

        live = list(self.tracks.values())
        if len(live) < max(2, self.min_candidates):
            return None

        earliest = min(t.first_seen_tick for t in live)
        observed = tick - earliest
        if observed < self.classify_min_ticks:
            return None

        # Entities spawn in a stable low-to-high order: the fish and box are the lowest two
        live.sort(key=lambda t: t.min_world_y)
        candidates = live[:2] if len(live) >= 4 else live

        target = None
        goal = None
        for candidate in candidates:
            moving = self._is_moving(candidate)
            if moving and target is None:
                target = candidate
            elif not moving and goal is None:
                goal = candidate

        if target is None or goal is None:
            by_range = sorted(candidates, key=lambda t: t.effective_range())
            goal, target = by_range[0], by_range[1]

        if target.entity_id == goal.entity_id:
            return None

        self.assignment = RoleAssignment(target_id=target.entity_id, goal_id=goal.entity_id)
        logger.info(
            "Classified: BOX id=%d Y=%.3f range=%.3f | FISH id=%d Y=%.3f range=%.3f | (obs=%d)",
            goal.entity_id, goal.min_world_y, goal.effective_range(),
            target.entity_id, target.min_world_y, target.effective_range(), observed,
        )
        return self.assignment
