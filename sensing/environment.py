"""
Environment Adapter
===================
The narrow interface between the fishing loop and the host client.

Everything version-sensitive about the host (how display entities expose a
local transform, where the player's hook lives, how an item use is issued)
belongs in a subclass of EnvironmentAdapter. The core only sees the typed
accessors below.

Input actions (hold key, use item) default to the injected keyboard and mouse
controllers, so a host that only needs to provide sensing can reuse the
pynput controllers from the input package:

    from input import KeyboardController, MouseController

    class MyHost(EnvironmentAdapter):
        ...sensing methods...

    env = MyHost(keyboard=KeyboardController(), mouse=MouseController())
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from core.exceptions import EnvironmentActionError


@dataclass(frozen=True)
class EntitySighting:
    """One dynamic display entity seen this tick (world frame)"""
    entity_id: int
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class ProjectileSighting:
    """The player's own fishing bobber"""
    entity_id: int
    y: float


class EnvironmentAdapter(ABC):
    """Host-facing accessors consumed by FishingCycle"""

    def __init__(self, keyboard=None, mouse=None, hold_key=None):
        """
        Args:
            keyboard: Object with press(key)/release(key)/is_pressed(key),
                e.g. input.KeyboardController
            mouse: Object with right_click()/release_right(),
                e.g. input.MouseController
            hold_key: Key passed to the keyboard for the hold action
                (defaults to the keyboard's own hold key)
        """
        self.keyboard = keyboard
        self.mouse = mouse
        self.hold_key = hold_key if hold_key is not None else getattr(keyboard, "hold_key", None)

    # ========== SENSING ==========

    @abstractmethod
    def nearby_entities(self, radius: float) -> List[EntitySighting]:
        """Display entities within radius of the player"""

    @abstractmethod
    def try_get_local_y(self, entity_id: int) -> Optional[float]:
        """Object-local vertical translation, or None if not discoverable"""

    @abstractmethod
    def try_get_own_projectile(self) -> Optional[ProjectileSighting]:
        """Our own bobber, or None if no cast is out"""

    @abstractmethod
    def is_projectile_in_fluid(self) -> bool:
        """True when our bobber touches water"""

    @abstractmethod
    def try_equip_rod(self) -> bool:
        """Make sure a fishing rod is in hand; False if none is available"""

    def read_overlay_text(self) -> Optional[str]:
        """Current action bar / title text, if any"""
        return None

    def drain_sound_cues(self) -> List[str]:
        """Sound ids heard since the last call"""
        return []

    # ========== INPUT ==========

    def _require(self, device, name):
        if device is None:
            raise EnvironmentActionError(f"No {name} controller configured")
        return device

    def use_item(self):
        """Issue one use/interact action (cast or reel)"""
        self._require(self.mouse, "mouse").right_click()

    def release_use(self):
        """Make sure the use action is not left pressed"""
        if self.mouse is not None:
            self.mouse.release_right()

    def press_hold(self):
        self._require(self.keyboard, "keyboard").press(self.hold_key)

    def release_hold(self):
        self._require(self.keyboard, "keyboard").release(self.hold_key)

    def is_hold_pressed(self) -> bool:
        """Operator's actual hold state (training label)"""
        if self.keyboard is None:
            return False
        return bool(self.keyboard.is_pressed(self.hold_key))
