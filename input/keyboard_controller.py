"""
Keyboard Controller
===================
Handles all keyboard input operations.

This module centralizes keyboard input using pynput.keyboard.Controller for
the hold key the minigame is played with, and a pynput.keyboard.Listener
that tracks which keys the operator is physically holding (training labels).
"""

import threading
from pynput.keyboard import Controller, Key, KeyCode, Listener

# Left/right variants report as distinct keys; fold them onto the generic one
_KEY_ALIASES = {
    Key.shift_l: Key.shift,
    Key.shift_r: Key.shift,
    Key.ctrl_l: Key.ctrl,
    Key.ctrl_r: Key.ctrl,
    Key.alt_l: Key.alt,
    Key.alt_r: Key.alt,
}


def _normalize(key):
    if isinstance(key, str):
        return KeyCode.from_char(key.lower())
    if isinstance(key, KeyCode) and key.char:
        return KeyCode.from_char(key.char.lower())
    return _KEY_ALIASES.get(key, key)


class KeyboardController:
    """
    Centralized keyboard control using pynput.

    Provides methods for pressing and releasing keys, and for
    querying whether a key is currently held down.
    Supports both character keys ('5', 'q') and special keys (Key.shift).
    """

    def __init__(self, hold_key=Key.shift):
        """
        Args:
            hold_key: Key held to raise the box in the minigame (default: shift/sneak)
        """
        self.kb = Controller()
        self.hold_key = hold_key
        self._pressed = set()
        self._lock = threading.Lock()
        self._listener = None

    def press(self, key=None):
        """
        Press and hold a key.

        Args:
            key: Key to press (defaults to the hold key)
        """
        self.kb.press(self.hold_key if key is None else key)

    def release(self, key=None):
        """
        Release a previously pressed key.

        Args:
            key: Key to release (defaults to the hold key)
        """
        self.kb.release(self.hold_key if key is None else key)

    # ========== KEY STATE ==========

    def start_listener(self):
        """Start tracking physical key state (idempotent)"""
        if self._listener is not None:
            return
        self._listener = Listener(on_press=self._on_press, on_release=self._on_release)
        self._listener.daemon = True
        self._listener.start()

    def stop_listener(self):
        if self._listener is None:
            return
        self._listener.stop()
        self._listener = None
        with self._lock:
            self._pressed.clear()

    def _on_press(self, key):
        with self._lock:
            self._pressed.add(_normalize(key))

    def _on_release(self, key):
        with self._lock:
            self._pressed.discard(_normalize(key))

    def is_pressed(self, key=None) -> bool:
        """
        True while the key is held down. Starts the listener on first use,
        so the very first query always reports False.
        """
        self.start_listener()
        with self._lock:
            return _normalize(self.hold_key if key is None else key) in self._pressed
