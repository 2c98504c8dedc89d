# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Settings persistence: one JSON document split into named groups

import os
import json
import logging
import threading
from .defaults import (
    DEFAULT_GENERAL_SETTINGS,
    DEFAULT_LOG_SETTINGS,
    DEFAULT_TRAINING_SETTINGS,
    DEFAULT_ADVANCED_SETTINGS,
    get_default_settings,
    get_default_cycle_settings,
)
from utils.validators import sanitize_cycle_settings

logger = logging.getLogger("AutoFish")

GROUP_DEFAULTS = {
    "general_settings": DEFAULT_GENERAL_SETTINGS,
    "log_settings": DEFAULT_LOG_SETTINGS,
    "training_settings": DEFAULT_TRAINING_SETTINGS,
    "advanced_settings": DEFAULT_ADVANCED_SETTINGS,
}


class SettingsManager:
    """Reads and writes the AutoFish settings file

    Groups: general, log, training, advanced. A stored group is always merged
    over its defaults, so files from older versions pick up new keys.
    """

    def __init__(self, settings_file: str):
        self.settings_file = settings_file
        self._lock = threading.Lock()
        self._data = self._read_file()
        if self._data is None:
            self._data = get_default_settings()
            with self._lock:
                self._write_file()
            logger.info(f"Wrote default settings to {self.settings_file}")

    # ========================================================================
    # FILE I/O
    # ========================================================================

    def _read_file(self):
        """Parsed document, {} when unreadable, None when missing"""
        if not os.path.exists(self.settings_file):
            return None
        try:
            with open(self.settings_file, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Settings file {self.settings_file} unreadable, using defaults: {e}")
            return {}
        return document if isinstance(document, dict) else {}

    def _write_file(self):
        """Atomic replace of the settings file (caller holds the lock)"""
        directory = os.path.dirname(self.settings_file)
        tmp_path = self.settings_file + ".tmp"
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=4, ensure_ascii=False)
            os.replace(tmp_path, self.settings_file)
        except OSError as e:
            logger.error(f"Could not write {self.settings_file}: {e}")

    # ========================================================================
    # GROUPS
    # ========================================================================

    def load_group(self, name):
        merged = dict(GROUP_DEFAULTS[name])
        with self._lock:
            stored = self._data.get(name)
            if isinstance(stored, dict):
                merged.update(stored)
        return merged

    def save_group(self, name, values):
        if name not in GROUP_DEFAULTS:
            raise KeyError(f"Unknown settings group: {name}")
        with self._lock:
            self._data[name] = dict(values)
            self._write_file()

    def load_general_settings(self):
        """Radius, auto loop, humanized delay ranges, bite confirmation"""
        return self.load_group("general_settings")

    def load_log_settings(self):
        return self.load_group("log_settings")

    def load_training_settings(self):
        return self.load_group("training_settings")

    def load_advanced_settings(self):
        """Tracking, bite heuristic, hysteresis and training constants"""
        return self.load_group("advanced_settings")

    def save_general_settings(self, settings_dict):
        self.save_group("general_settings", settings_dict)

    def save_log_settings(self, chat_log, log_every_n_ticks, log_level="INFO"):
        self.save_group("log_settings", {
            "chat_log": chat_log,
            "log_every_n_ticks": log_every_n_ticks,
            "log_level": log_level,
        })

    def save_training_settings(self, use_default_model, training_mode, model_dir=None):
        self.save_group("training_settings", {
            "use_default_model": use_default_model,
            "training_mode": training_mode,
            "model_dir": model_dir,
        })
        logger.info("Training settings saved")

    def save_advanced_settings(self, settings_dict):
        self.save_group("advanced_settings", settings_dict)

    # ========================================================================
    # CYCLE SETTINGS
    # ========================================================================

    def build_cycle_settings(self):
        """Flatten all groups into the settings dict handed to FishingCycle

        Invalid values are logged and replaced by their defaults.
        """
        flat = {}
        for name in GROUP_DEFAULTS:
            flat.update(self.load_group(name))
        return sanitize_cycle_settings(flat, get_default_cycle_settings())
