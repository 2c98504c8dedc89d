# Config module for Minigame AutoFish

from .settings_manager import SettingsManager
from .defaults import get_default_settings, get_default_cycle_settings

__all__ = ['SettingsManager', 'get_default_settings', 'get_default_cycle_settings']
