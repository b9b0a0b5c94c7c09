import os

from asyncio import AbstractEventLoop
from evdev import InputDevice, ecodes, list_devices
from time import sleep
from typing import List

from .lib.logger import debug, error, info
from .output import VIRT_DEVICE_PREFIX

INPUT_DIR = "/dev/input"

# a device reporting all of these is taken for a keyboard
KEYBOARD_KEYS = frozenset((
    ecodes.KEY_Q, ecodes.KEY_W, ecodes.KEY_E, ecodes.KEY_R, ecodes.KEY_T, ecodes.KEY_Y,
    ecodes.KEY_A, ecodes.KEY_Z, ecodes.KEY_SPACE,
))

GRAB_TRIES          = 5
GRAB_DELAY          = 0.01


def is_keyboard(device) -> bool:
    keys = device.capabilities(verbose=False).get(ecodes.EV_KEY, [])
    return KEYBOARD_KEYS.issubset(keys)


def unreadable_event_nodes(input_dir=INPUT_DIR) -> List[str]:
    """Event nodes in ``input_dir`` the current user can't open"""
    nodes = sorted(name for name in os.listdir(input_dir) if name.startswith("event"))
    paths = (os.path.join(input_dir, name) for name in nodes)
    return [path for path in paths if not os.access(path, os.R_OK)]


def open_devices(paths=None) -> List[InputDevice]:
    return [InputDevice(path) for path in sorted(paths or list_devices())]


def device_table(devices) -> List[str]:
    """Lines printed by ``--list-devices``, keyboards are starred"""
    if not devices:
        return [f"No input devices found (do you have read permission on {INPUT_DIR}/*?)"]

    path_width = max(len(device.path) for device in devices)
    name_width = max(len(device.name) for device in devices)
    header = f"  {'Path':<{path_width}}  {'Name':<{name_width}}  Phys"
    lines = [header, "-" * (len(header) + 20)]
    for device in devices:
        mark = "*" if is_keyboard(device) else " "
        lines.append(f"{mark} {device.path:<{path_width}}  {device.name:<{name_width}}  "
                     f"{device.phys or ''}")
    return lines


class DeviceGrabError(IOError):
    pass


class DeviceFilter:
    """
    Picks the devices to read: the ones named on the command line or by
    ``devices_api()``, or else every keyboard except our own virtual one.
    """

    def __init__(self, matches=None):
        self.matches = list(matches or ())
        if not self.matches:
            info("Autodetecting all keyboards (no '--devices' option or 'devices_api' used)")

    def __call__(self, device: InputDevice) -> bool:
        if self.matches:
            return device.path in self.matches or device.name in self.matches
        return VIRT_DEVICE_PREFIX not in device.name and is_keyboard(device)


class DeviceRegistry:
    """
    Keyboards being read from.

    Devices are attached (read passively, events still reach the
    desktop) as soon as they are found. ``grab_all()`` takes every
    attached keyboard exclusively for the length of a modal session and
    ``ungrab_all()`` gives them back. A keyboard attached while a
    session runs is grabbed straight away.
    """

    def __init__(self, loop, input_cb, filterer):
        self._devices: List[InputDevice] = []
        self._grabbed: List[InputDevice] = []
        self._loop: AbstractEventLoop = loop
        self._input_cb = input_cb
        self._filter: DeviceFilter = filterer
        self._in_session = False

    def __contains__(self, device):
        return device in self._devices

    def __len__(self):
        return len(self._devices)

    @property
    def is_grabbed(self):
        return len(self._grabbed) > 0

    def has_path(self, path):
        return any(device.path == path for device in self._devices)

    def cares_about(self, device):
        return self._filter(device)

    def autodetect(self):
        try:
            unreadable = unreadable_event_nodes()
        except OSError as os_err:
            error(f"Can't list {INPUT_DIR}: {os_err}")
            info("Waiting for devices to be connected...")
            return
        for path in unreadable:
            error(f"No read permission on '{path}'")

        found = [device for device in open_devices() if self.cares_about(device)]
        if not found:
            if self._filter.matches:
                error(f"Specified device(s) not found: {', '.join(self._filter.matches)}")
            else:
                error("No keyboard devices detected among available input devices")
            info("Waiting for compatible devices to be connected...")
            return

        for device in found:
            self.attach(device)

    def attach(self, device: InputDevice):
        info(f"Watching '{device.name}' ({device.path})", ctx="+D")
        self._loop.add_reader(device, self._input_cb, device)
        self._devices.append(device)
        if self._in_session:
            self.grab(device)

    def detach(self, device: InputDevice):
        info(f"No longer watching '{device.name}' ({device.path})", ctx="-D")
        self._loop.remove_reader(device)
        self._devices.remove(device)
        if device in self._grabbed:
            self._grabbed.remove(device)
            self._release(device)

    def detach_by_filename(self, filename):
        for device in list(self._devices):
            if device.path == filename:
                self.detach(device)
                return

    def detach_all(self):
        for device in list(self._devices):
            self.detach(device)

    def grab(self, device: InputDevice):
        delay = GRAB_DELAY
        for attempt in range(1, GRAB_TRIES + 1):
            try:
                device.grab()
            except OSError as os_err:
                error(f"Grab attempt {attempt} of {GRAB_TRIES} on '{device.name}' "
                      f"({device.path}) failed:\n\t{os_err}")
                sleep(delay)
                delay *= 2
                continue
            self._grabbed.append(device)
            debug(f"Grabbed '{device.name}' ({device.path})", ctx="+K")
            return True
        error(f"Session continues without '{device.name}' ({device.path})")
        return False

    def grab_all(self):
        self._in_session = True
        grabbed = [self.grab(device) for device in self._devices if device not in self._grabbed]
        if self._devices and not self._grabbed:
            raise DeviceGrabError("Could not grab any keyboard, maybe another program has it?")
        return grabbed

    def ungrab_all(self):
        self._in_session = False
        for device in self._grabbed:
            self._release(device)
        self._grabbed.clear()

    def _release(self, device):
        try:
            device.ungrab()
            debug(f"Ungrabbed '{device.name}' ({device.path})", ctx="-K")
        except OSError as os_err:
            # an unplugged device can't be ungrabbed, nothing is lost
            debug(f"Ungrab of '{device.name}' failed: {os_err}", ctx="-K")
