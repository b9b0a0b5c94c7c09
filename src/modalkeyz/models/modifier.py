from enum import Enum, unique

from evdev import ecodes


@unique
class Modifier(Enum):
    """
    Modifier vocabulary, named the way X11 keygrabbers report it.

    Physical modifier keys and lock LEDs are mapped onto members below.
    """

    CONTROL     = "Control"
    SHIFT       = "Shift"
    ALT         = "Mod1"
    NUMLOCK     = "Mod2"
    MOD3        = "Mod3"
    SUPER       = "Mod4"
    ALTGR       = "Mod5"
    CAPSLOCK    = "Lock"

    def __str__(self):
        return self.value

    @classmethod
    def is_key_modifier(cls, code):
        return code in _KEY_TO_MODIFIER

    @classmethod
    def from_key(cls, code):
        return _KEY_TO_MODIFIER[code]

    @classmethod
    def from_led(cls, led):
        for modifier, mod_led in _MODIFIER_LEDS.items():
            if mod_led == led:
                return modifier
        return None


_MODIFIER_KEYS = {
    Modifier.CONTROL:   [ecodes.KEY_LEFTCTRL, ecodes.KEY_RIGHTCTRL],
    Modifier.SHIFT:     [ecodes.KEY_LEFTSHIFT, ecodes.KEY_RIGHTSHIFT],
    Modifier.ALT:       [ecodes.KEY_LEFTALT],
    Modifier.SUPER:     [ecodes.KEY_LEFTMETA, ecodes.KEY_RIGHTMETA],
    Modifier.ALTGR:     [ecodes.KEY_RIGHTALT],
}

_MODIFIER_LEDS = {
    Modifier.NUMLOCK:   ecodes.LED_NUML,
    Modifier.CAPSLOCK:  ecodes.LED_CAPSL,
}

_KEY_TO_MODIFIER = {
    code: modifier
    for modifier, codes in _MODIFIER_KEYS.items()
    for code in codes
}
