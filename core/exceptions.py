"""
Core Exceptions

Custom exceptions for engine lifecycle control and for the recoverable
failures of the fishing loop. None of these are meant to reach the host:
the cycle catches them, logs, and degrades to a simpler behavior.
"""


class EngineException(Exception):
    """Base exception for FishingEngine errors"""
    pass


class EngineStateError(EngineException):
    """Raised when engine operation is invalid for current state"""
    pass



class AutoFishError(Exception):
    """Base exception for recoverable fishing loop errors"""
    pass


class EnvironmentActionError(AutoFishError):
    """
    Raised by an environment adapter when an action (use item, hold key)
    cannot be issued.

    The loop logs it and retries on its next scheduled tick.
    """
    pass


class ModelStoreError(AutoFishError):
    """Raised when the model or training data file cannot be read or written"""
    pass


class TrainingRefusedError(AutoFishError):
    """Raised when training is refused (too few samples)"""
    pass
