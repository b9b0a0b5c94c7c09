import os
import errno
import signal
import asyncio
import traceback

from asyncio import Task, TimerHandle
from inotify_simple import INotify, flags
from inotify_simple import Event as inotify_Event
from typing import Dict, List, Optional, Set

from evdev import InputDevice, InputEvent, ecodes
from evdev.eventio import EventIO

from . import config_api
from .controller import SessionController
from .devices import INPUT_DIR, DeviceFilter, DeviceGrabError, DeviceRegistry
from .hints import OverlayMetrics
from .keyid import key_to_string
from .keynames import key_name
from .lib.logger import debug, error, info
from .lib.screen_context import ScreenContextProvider
from .models.action import Action
from .models.key_event import KeyEvent
from .models.modifier import Modifier
from .notify import Notifier
from .output import Output, setup_uinput
from .presenter import ConsolePresenter


class KeyDecoder:
    """
    Turns raw evdev key events into ``KeyEvent``s: the modifiers held
    before the event plus the name of the key, shifted as it would be
    typed.
    """

    def __init__(self):
        self._held = set()

    def held_codes(self):
        return set(self._held)

    def modifiers(self, device):
        mods = {Modifier.from_key(code) for code in self._held if Modifier.is_key_modifier(code)}
        for led in device.leds():
            modifier = Modifier.from_led(led)
            if modifier is not None:
                mods.add(modifier)
        return mods

    def decode(self, event: InputEvent, device) -> Optional[KeyEvent]:
        if event.type != ecodes.EV_KEY:
            return None
        action = Action(event.value)
        # the reported modifier state is the one before this key changed
        mods = self.modifiers(device)

        if action.is_pressed:
            self._held.add(event.code)
        else:
            self._held.discard(event.code)

        name = key_name(event.code,
                        shift=Modifier.SHIFT in mods,
                        capslock=Modifier.CAPSLOCK in mods)
        if name is None:
            debug(f"No name for key code {event.code}", ctx="II")
            return None
        return KeyEvent(tuple(str(mod) for mod in mods), name, action)


class KeyboardSource:
    """
    Feeds decoded keyboard events to a SessionController.

    While idle it only looks for the trigger of a registered modal and
    starts that session. While a session runs every event goes to the
    controller. It is also the controller's key grab: the keyboards are
    grabbed for exactly the length of a session.
    """

    def __init__(self, modals, output: Output = None, decoder: KeyDecoder = None):
        self.registry: Optional[DeviceRegistry] = None
        self.controller: Optional[SessionController] = None
        self._output = output
        self._decoder = decoder or KeyDecoder()
        self._by_trigger: Dict[str, config_api.ModalConfig] = {
            modal.trigger_key: modal for modal in modals
        }

    def connect(self, controller: SessionController, registry: DeviceRegistry = None):
        self.controller = controller
        self.registry = registry

    # ─── key grab ───────────────────────────────────────────────────────────────

    def grab(self):
        if self._output is not None:
            self._output.hold_on_grab(self._decoder.held_codes())
        if self.registry is not None:
            self.registry.grab_all()

    def ungrab(self):
        if self.registry is not None:
            self.registry.ungrab_all()
        if self._output is not None:
            self._output.release_held()

    # ─── events ─────────────────────────────────────────────────────────────────

    def on_event(self, event: InputEvent, device):
        key_event = self._decoder.decode(event, device)
        if key_event is None:
            return

        if self.controller.is_active:
            self.controller.on_key_event(key_event)
            return

        if key_event.action != Action.PRESS:
            return
        # triggers match whatever the CapsLock state is, like a WM key binding
        identifier = key_to_string(key_event.modifiers, key_event.key,
                                   ignored_mod=Modifier.CAPSLOCK)
        modal = self._by_trigger.get(identifier)
        if modal is None:
            return
        debug(f"Trigger '{modal.trigger_key}' pressed", ctx="II")
        try:
            self.controller.start(**modal.start_kwargs())
        except DeviceGrabError as grab_err:
            self.ungrab()
            error(f"Not starting session: {grab_err}")

    def on_readable(self, device: EventIO):
        try:
            for event in device.read():
                self.on_event(event, device)
        except OSError as os_err:
            # an unplugged device can still have queued events
            if os_err.errno != errno.ENODEV:
                raise


class Hotplug:
    """
    Follows the input directory so keyboards plugged in later are read
    as well, and grabbed at once when a session is running.
    """

    # udev fixes node permissions a little after the node appears
    SETTLE_DELAY            = 0.5
    OPEN_TRIES              = 9
    OPEN_DELAY              = 0.2

    def __init__(self, registry: DeviceRegistry, loop):
        self.registry = registry
        self._loop = loop
        self._inotify: Optional[INotify] = None
        self._pending: List[inotify_Event] = []
        self._timer: Optional[TimerHandle] = None
        self._tasks: Set[Task] = set()

    def start(self):
        self._inotify = INotify()
        self._inotify.add_watch(INPUT_DIR, flags.CREATE | flags.ATTRIB | flags.DELETE)
        self._loop.add_reader(self._inotify.fd, self._on_readable)

    def close(self):
        if self._timer is not None:
            self._timer.cancel()
        for task in self._tasks:
            task.cancel()
        if self._inotify is not None:
            self._loop.remove_reader(self._inotify.fd)
            self._inotify.close()
            self._inotify = None

    def _on_readable(self):
        self._pending.extend(self._inotify.read(0))
        # one plug produces a burst of events, act once it is over
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self._loop.call_later(self.SETTLE_DELAY, self._flush)

    def _flush(self):
        self._timer = None
        events, self._pending = self._pending, []
        task = self._loop.create_task(self.apply(events))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: Task):
        self._tasks.discard(task)
        if task.cancelled() or task.exception() is None:
            return
        exc = task.exception()
        error(f"Handling device changes failed: {exc!r}")
        traceback.print_exception(type(exc), exc, exc.__traceback__)

    async def apply(self, events: List[inotify_Event]):
        # the last event seen for a node decides what happened to it
        latest: Dict[str, int] = {}
        for event in events:
            if event.name.startswith("event"):
                latest[event.name] = event.mask

        for name, mask in latest.items():
            path = os.path.join(INPUT_DIR, name)
            if mask & flags.DELETE:
                self.registry.detach_by_filename(path)
                continue
            if self.registry.has_path(path):
                continue
            device = await self.open_device(path)
            if device is None:
                self.registry.detach_by_filename(path)
            elif self.registry.cares_about(device):
                self.registry.attach(device)
            else:
                device.close()

    async def open_device(self, path) -> Optional[InputDevice]:
        delay = self.OPEN_DELAY
        for attempt in range(1, self.OPEN_TRIES + 1):
            try:
                return InputDevice(path)
            except FileNotFoundError:
                return None
            except PermissionError as perm_err:
                if attempt == self.OPEN_TRIES:
                    error(f"Giving up on '{path}' after {attempt} attempts:\n\t{perm_err}")
                    return None
                debug(f"No permission on '{path}' yet, attempt {attempt}", ctx="+D")
            await asyncio.sleep(delay)
            delay *= 2
        return None


def build_source(modals, scale=1.0, output=None):
    screen = ScreenContextProvider.detect()
    presenter = ConsolePresenter(screen, OverlayMetrics().scaled(scale))
    source = KeyboardSource(modals, output=output)
    source.connect(SessionController(presenter, Notifier(), key_grab=source))
    return source


def _stop_on_signal(loop, signum):
    info(f"{signal.Signals(signum).name} received, exiting")
    loop.stop()


def main_loop(arg_devices, device_watch):
    modals, only_devices, scale = config_api.get_configuration()
    if not modals:
        error("No modal registered in config, nothing to do.")
        return

    setup_uinput()
    output = Output()
    source = build_source(modals, scale, output=output)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    registry = DeviceRegistry(loop, input_cb=source.on_readable,
                              filterer=DeviceFilter(arg_devices or only_devices))
    source.connect(source.controller, registry)
    hotplug = Hotplug(registry, loop) if device_watch else None

    try:
        registry.autodetect()
        if hotplug is not None:
            hotplug.start()
        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(signum, _stop_on_signal, loop, signum)
        for modal in modals:
            info(f"Modal '{modal.activation_key}' on trigger '{modal.trigger_key}'")
        info("Ready to process input.")
        loop.run_forever()
    finally:
        # ends a running session: hides the hints, ungrabs, replays releases
        source.controller.stop()
        if hotplug is not None:
            hotplug.close()
        registry.detach_all()
        output.shutdown()
        loop.close()
