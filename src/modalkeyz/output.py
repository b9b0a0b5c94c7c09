from evdev import ecodes
from evdev.uinput import UInput

from .lib.logger import debug
from .models.action import RELEASE, Action


VIRT_DEVICE_PREFIX = "ModalKeyz (virtual)"

# Remove all buttons so udev doesn't think virtual keyboard is a joystick
_KEYBOARD_KEYS: set = set(ecodes.keys.keys()) - set(ecodes.BTN)

_uinput = None


def real_uinput():
    return UInput(
        name=f"{VIRT_DEVICE_PREFIX} Keyboard",
        events={ecodes.EV_KEY: _KEYBOARD_KEYS},
    )


def setup_uinput(uinput=None):
    global _uinput
    _uinput = uinput or real_uinput()


class Output:
    """
    Virtual keyboard used to settle key state on the desktop side.

    Keys already held when the grab is taken were seen pressed by the
    desktop, but their releases are read by us while grabbed. After the
    grab is given back those releases are replayed here.
    """

    def __init__(self):
        self._pending_release = set()

    def hold_on_grab(self, codes):
        self._pending_release.update(codes)

    def send_key_action(self, code, action: Action):
        if not isinstance(action, Action):
            raise TypeError(f'Expected type Action, received {type(action)}.')
        _uinput.write(ecodes.EV_KEY, code, action)
        _uinput.syn()
        debug(action, code, ctx="OO")

    def release_held(self):
        for code in sorted(self._pending_release):
            self.send_key_action(code, RELEASE)
        self._pending_release.clear()

    def shutdown(self):
        if _uinput is not None:
            _uinput.close()
