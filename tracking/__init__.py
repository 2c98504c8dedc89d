"""
Tracking Module
===============
Motion bookkeeping for the fishing minigame.

Modules:
    - position_history: Per-entity position aggregates, range and OLS velocity
    - entity_classifier: Working set of minigame entities and TARGET/GOAL roles
    - bobber_tracker: Own bobber history and bite heuristic
"""

from .position_history import PositionHistory, TrackedEntity, least_squares_slope
from .entity_classifier import EntityClassifier, Role, RoleAssignment
from .bobber_tracker import BobberTracker

__all__ = [
    'PositionHistory',
    'TrackedEntity',
    'least_squares_slope',
    'EntityClassifier',
    'Role',
    'RoleAssignment',
    'BobberTracker',
]
