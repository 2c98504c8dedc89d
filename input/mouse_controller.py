"""
Mouse Controller
================
Handles the mouse actions of the fishing loop.

Casting and reeling are both a single right click ("use item"); this module
issues them through pynput.mouse.Controller so the host sees ordinary input.
The click is sent as press + release back to back and never waits.
"""

from pynput.mouse import Button, Controller


class MouseController:
    """
    Centralized mouse control using pynput.

    Tracks whether the right button is held by us so release_right() can be
    called unconditionally on shutdown.
    """

    def __init__(self):
        self.mouse = Controller()
        self._right_down = False

    def right_click(self):
        """Press and release the right button (cast / reel)"""
        self.mouse.press(Button.right)
        self._right_down = True
        self.release_right()

    def release_right(self):
        """Release the right button if we are holding it"""
        if not self._right_down:
            return
        self.mouse.release(Button.right)
        self._right_down = False
