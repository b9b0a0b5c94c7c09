from dataclasses import dataclass, field

from .action import Action


@dataclass(frozen=True)
class KeyEvent:
    # Names of the modifiers held when the key changed state,
    # in whatever order the event source reported them
    modifiers: tuple            = field(default_factory=tuple)
    # X11 style key name: the effective character ("a", "A", "!", " ")
    # or a keysym name ("Return", "Super_L", "F1")
    key: str                    = ""
    action: Action              = Action.PRESS

    @property
    def is_release(self):
        return self.action.is_released
