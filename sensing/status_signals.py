"""
Status Signals
==============
String-level interpretation of the host's out-of-band signals: the overlay
(action bar / title) text that announces the minigame outcome, and the sound
ids that announce a splash on the bobber.
"""

from typing import Optional

TERMINAL_KEYWORDS = ("caught", "failed")


def is_terminal_overlay(text: Optional[str]) -> bool:
    """True when the overlay reports a finished minigame"""
    if not text:
        return False
    low = text.lower()
    return any(word in low for word in TERMINAL_KEYWORDS)


def is_splash_cue(sound_id: Optional[str]) -> bool:
    """True for the fishing bobber splash sound"""
    if not sound_id:
        return False
    low = sound_id.lower()
    return "fishing" in low and "splash" in low


class OverlayWatcher:
    """
    De-duplicates overlay text so one outcome message that stays on screen
    for several ticks ends the cycle only once.
    """

    def __init__(self):
        self.last_seen = ""

    def feed(self, text: Optional[str]) -> Optional[str]:
        """
        Returns:
            The text if it is new and terminal, else None
        """
        if not text or text == self.last_seen:
            return None
        self.last_seen = text
        return text if is_terminal_overlay(text) else None

    def reset(self):
        self.last_seen = ""
