import pytest

from evdev import ecodes

from modalkeyz import devices
from modalkeyz.devices import (DeviceFilter, DeviceGrabError, DeviceRegistry, device_table,
                               is_keyboard, unreadable_event_nodes)


class LoopStub:
    def __init__(self):
        self.readers = {}

    def add_reader(self, fd, callback, *args):
        self.readers[fd] = (callback, args)

    def remove_reader(self, fd):
        self.readers.pop(fd, None)


class InputDeviceStub:
    def __init__(self, name="kbd", path="/dev/input/event3", keys=None, grab_fails=False):
        self.name = name
        self.path = path
        self.phys = "usb-0000:00:14.0-1/input0"
        self.keys = keys if keys is not None else list(range(1, 120))
        self.grab_fails = grab_fails
        self.grabbed = False

    def capabilities(self, verbose=False):
        return {ecodes.EV_KEY: self.keys}

    def grab(self):
        if self.grab_fails:
            raise OSError(16, "Device or resource busy")
        self.grabbed = True

    def ungrab(self):
        self.grabbed = False


def registry_with(*devs):
    loop = LoopStub()
    registry = DeviceRegistry(loop, input_cb=lambda device: None, filterer=DeviceFilter(None))
    for dev in devs:
        registry.attach(dev)
    return registry, loop


def test_is_keyboard():
    assert is_keyboard(InputDeviceStub())
    assert not is_keyboard(InputDeviceStub(keys=[ecodes.BTN_LEFT]))

def test_filter_by_name_or_path():
    flt = DeviceFilter(["/dev/input/event3", "Other Keyboard"])
    assert flt(InputDeviceStub())
    assert flt(InputDeviceStub(name="Other Keyboard", path="/dev/input/event9"))
    assert not flt(InputDeviceStub(name="mouse", path="/dev/input/event1"))

def test_filter_skips_virtual_device():
    flt = DeviceFilter(None)
    assert not flt(InputDeviceStub(name="ModalKeyz (virtual) Keyboard"))

def test_attach_reads_without_grabbing():
    dev = InputDeviceStub()
    registry, loop = registry_with(dev)
    assert dev in registry
    assert dev in loop.readers
    assert not dev.grabbed
    assert not registry.is_grabbed

def test_grab_all_and_ungrab_all():
    first, second = InputDeviceStub(), InputDeviceStub(path="/dev/input/event4")
    registry, _ = registry_with(first, second)
    registry.grab_all()
    assert first.grabbed and second.grabbed
    registry.ungrab_all()
    assert not first.grabbed and not second.grabbed
    assert not registry.is_grabbed

def test_grab_all_fails_when_nothing_grabbed(monkeypatch):
    monkeypatch.setattr(devices, "sleep", lambda delay: None)
    registry, _ = registry_with(InputDeviceStub(grab_fails=True))
    with pytest.raises(DeviceGrabError):
        registry.grab_all()

def test_partial_grab_is_not_fatal(monkeypatch):
    monkeypatch.setattr(devices, "sleep", lambda delay: None)
    good = InputDeviceStub(path="/dev/input/event4")
    registry, _ = registry_with(InputDeviceStub(grab_fails=True), good)
    assert [False, True] == registry.grab_all()
    assert good.grabbed

def test_detach_ungrabs():
    dev = InputDeviceStub()
    registry, loop = registry_with(dev)
    registry.grab_all()
    registry.detach_by_filename("/dev/input/event3")
    assert dev not in registry
    assert dev not in loop.readers
    assert not dev.grabbed
    assert 0 == len(registry)

def test_filter_autodetects_keyboards():
    flt = DeviceFilter(None)
    assert flt(InputDeviceStub())
    assert not flt(InputDeviceStub(name="mouse", keys=[ecodes.BTN_LEFT]))

def test_attach_during_session_grabs():
    first = InputDeviceStub()
    registry, _ = registry_with(first)
    registry.grab_all()
    late = InputDeviceStub(name="late kbd", path="/dev/input/event8")
    registry.attach(late)
    assert late.grabbed
    assert registry.has_path("/dev/input/event8")
    registry.ungrab_all()
    assert not late.grabbed

def test_attach_after_session_does_not_grab():
    registry, _ = registry_with(InputDeviceStub())
    registry.grab_all()
    registry.ungrab_all()
    late = InputDeviceStub(path="/dev/input/event8")
    registry.attach(late)
    assert not late.grabbed

def test_unreadable_event_nodes(tmp_path, monkeypatch):
    for name in ("event0", "event1", "mice"):
        (tmp_path / name).write_text("")
    monkeypatch.setattr(devices.os, "access",
                        lambda path, mode: not path.endswith("event1"))
    assert [str(tmp_path / "event1")] == unreadable_event_nodes(str(tmp_path))

def test_autodetect_attaches_matching(monkeypatch):
    kbd = InputDeviceStub()
    mouse = InputDeviceStub(name="mouse", path="/dev/input/event1", keys=[ecodes.BTN_LEFT])
    monkeypatch.setattr(devices, "unreadable_event_nodes", lambda: [])
    monkeypatch.setattr(devices, "open_devices", lambda: [kbd, mouse])
    registry, loop = registry_with()
    registry.autodetect()
    assert kbd in registry
    assert mouse not in registry

def test_autodetect_without_input_dir(monkeypatch):
    def missing():
        raise FileNotFoundError("/dev/input")

    monkeypatch.setattr(devices, "unreadable_event_nodes", missing)
    registry, _ = registry_with()
    registry.autodetect()
    assert 0 == len(registry)

def test_device_table_marks_keyboards():
    lines = device_table([InputDeviceStub(),
                          InputDeviceStub(name="mouse", path="/dev/input/event1",
                                          keys=[ecodes.BTN_LEFT])])
    assert lines[2].startswith("* /dev/input/event3")
    assert lines[3].startswith("  /dev/input/event1")
    assert "No input devices" in device_table([])[0]
