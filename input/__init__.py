"""
Input Module
============
Input abstraction layer for the mouse and keyboard.

This module isolates pynput from the rest of the codebase. Importing it
needs a display/input backend, so the automation core never imports it;
hosts pass the controllers to their EnvironmentAdapter.

Modules:
    - mouse_controller: Right click (use item) for casting and reeling
    - keyboard_controller: Hold key press/release and physical key state

Usage:
    from input import MouseController, KeyboardController

    mouse = MouseController()
    keyboard = KeyboardController()

    keyboard.press()            # hold the sneak key
    keyboard.is_pressed()       # operator is holding it?
    mouse.right_click()         # cast / reel
"""

from .mouse_controller import MouseController
from .keyboard_controller import KeyboardController

__all__ = [
    'MouseController',
    'KeyboardController',
]
