"""
Sensing Module
==============
Everything the fishing loop reads from the host.

Modules:
    - environment: EnvironmentAdapter interface and sighting types
    - status_signals: Overlay outcome text and splash sound cues
"""

from .environment import EnvironmentAdapter, EntitySighting, ProjectileSighting
from .status_signals import OverlayWatcher, is_terminal_overlay, is_splash_cue

__all__ = [
    'EnvironmentAdapter',
    'EntitySighting',
    'ProjectileSighting',
    'OverlayWatcher',
    'is_terminal_overlay',
    'is_splash_cue',
]
