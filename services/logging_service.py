# Copyright (C) 2026 BPS
# This file is part of Minigame AutoFish.
#
# Services Module - Logging Service

import logging
import os

from utils.path_helpers import get_app_dir

LOGGER_NAME = 'AutoFish'
LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'


class LoggingService:
    """
    Owns the 'AutoFish' logger tree.

    A file handler and a console handler are attached to the 'AutoFish'
    logger; modules log through logging.getLogger('AutoFish.<part>') and
    inherit them. Creating a second service swaps the handlers instead of
    stacking duplicates.
    """

    def __init__(self, log_file: str = None, log_level=logging.INFO):
        """
        Args:
            log_file: Log file path (default: autofish.log in the app dir)
            log_level: Level as int or name; unknown names fall back to INFO
        """
        self.log_file = log_file or os.path.join(get_app_dir(), 'autofish.log')
        self.log_level = self._parse_level(log_level)
        self.logger = logging.getLogger(LOGGER_NAME)
        self._install_handlers()

    @staticmethod
    def _parse_level(level):
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
        return level if isinstance(level, int) else logging.INFO

    def _install_handlers(self):
        self.close()
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in (logging.FileHandler(self.log_file, encoding='utf-8'), logging.StreamHandler()):
            handler.setFormatter(formatter)
            handler._autofish = True
            self.logger.addHandler(handler)
        self.logger.setLevel(self.log_level)

    def get_logger(self, child: str = None):
        """The application logger, or AutoFish.<child>"""
        return self.logger.getChild(child) if child else self.logger

    def close(self):
        """Detach and close the handlers this service installed"""
        for handler in [h for h in self.logger.handlers if getattr(h, '_autofish', False)]:
            self.logger.removeHandler(handler)
            handler.close()
