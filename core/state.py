"""
State Definitions

Defines the lifecycle states of the engine and the phases of the
cast -> bite -> reel -> minigame -> cooldown loop.
"""

from enum import Enum, auto


class MacroState(Enum):
    """Engine execution states"""

    STOPPED = auto()    # Engine is stopped, no ticks running
    STARTING = auto()   # Engine is activating the cycle (transitional)
    RUNNING = auto()    # Tick thread is driving the cycle
    STOPPING = auto()   # Engine is shutting down (transitional)
    ERROR = auto()      # Engine failed to start or stop cleanly

    def __str__(self):
        return self.name.title()

    @property
    def can_start(self):
        """Returns True if engine can be started from this state"""
        return self in (MacroState.STOPPED, MacroState.ERROR)

    @property
    def can_stop(self):
        """Returns True if engine can be stopped from this state"""
        return self in (MacroState.STARTING, MacroState.RUNNING)


class LoopPhase(Enum):
    """Phases of the auto-fishing loop"""

    IDLE = auto()       # Nothing out, decide whether to cast
    CASTING = auto()    # Cast issued (transitional)
    WAIT_BITE = auto()  # Bobber out, watching for a bite
    REELING = auto()    # Reel issued, waiting for minigame or bobber removal
    MINIGAME = auto()   # Minigame session is being played
    COOLDOWN = auto()   # Humanized pause before the next cast

    def __str__(self):
        return self.name
