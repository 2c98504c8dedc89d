# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Services Module - Public Interface

from .logging_service import LoggingService, LOGGER_NAME

__all__ = [
    "LoggingService",
    "LOGGER_NAME",
]
