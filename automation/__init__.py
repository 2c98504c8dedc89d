"""
Automation Module
=================
High-level fishing automation orchestration.

This module contains all gameplay automation logic:
- Cast loop (cast, bite detection, reel, cooldown)
- Control policy (model or hysteresis hold decisions)
- Fishing cycle orchestration (per-tick tracking, control and training)

All automation components use dependency injection and do not directly
access settings files or low-level I/O. They receive a pre-configured
EnvironmentAdapter and the flattened settings dict from the host.

Modules:
    - cast_loop: Outer cast -> bite -> reel -> cooldown state machine
    - control_policy: Hold/release decisions with hysteresis fallback
    - fishing_cycle: Per-tick orchestration and runtime toggles

Usage:
    from automation import FishingCycle

    cycle = FishingCycle(environment, settings_manager.build_cycle_settings())
    cycle.activate()
    cycle.on_tick()  # once per host tick
"""

from .cast_loop import CastLoop
from .control_policy import ControlPolicy
from .fishing_cycle import FishingCycle

__all__ = [
    'CastLoop',
    'ControlPolicy',
    'FishingCycle',
]
