# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Path utilities for settings, logs and model files

import os
import sys


def get_app_dir():
    """Get the directory where the executable/script is located (for settings/logs)

    For non-frozen runs this is the project root (parent of utils/).
    """
    if getattr(sys, 'frozen', False):
        # Running as compiled executable
        return os.path.dirname(sys.executable)
    return os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


def get_model_dir(configured_dir=None):
    """Directory holding the trained model and training data

    Args:
        configured_dir: Explicit directory from settings, or None for the
            default <app dir>/config/autofish
    """
    if configured_dir:
        return os.path.abspath(configured_dir)
    return os.path.join(get_app_dir(), 'config', 'autofish')
