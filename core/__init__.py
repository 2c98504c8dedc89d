"""
Core package: engine lifecycle, shared enums and exceptions.

Nothing here knows about entities, inputs or bites. FishingEngine only
activates a FishingCycle, ticks it from a worker thread and deactivates it.

    from core import FishingEngine, MacroState

    engine = FishingEngine(fishing_cycle, {"tick_rate_hz": 20})
    engine.start()
    engine.stop()
"""

from core.state import MacroState, LoopPhase
from core.exceptions import (
    EngineException,
    EngineStateError,
    AutoFishError,
    EnvironmentActionError,
    ModelStoreError,
    TrainingRefusedError,
)
from core.engine import FishingEngine

__all__ = [
    'FishingEngine',
    'MacroState',
    'LoopPhase',
    'EngineException',
    'EngineStateError',
    'AutoFishError',
    'EnvironmentActionError',
    'ModelStoreError',
    'TrainingRefusedError',
]
