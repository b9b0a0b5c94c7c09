from evdev import InputEvent, ecodes

from modalkeyz.models.action import Action


class PresenterStub:
    def __init__(self):
        self.shown = []
        self.hidden = 0

    @property
    def last(self):
        return self.shown[-1] if self.shown else None

    def show(self, model):
        self.shown.append(model)

    def hide(self):
        self.hidden += 1


class NotifierStub:
    def __init__(self):
        self.errors = []

    def notify_error(self, text):
        self.errors.append(text)


class KeyGrabStub:
    def __init__(self):
        self.grabs = 0
        self.ungrabs = 0

    @property
    def held(self):
        return self.grabs > self.ungrabs

    def grab(self):
        self.grabs += 1

    def ungrab(self):
        self.ungrabs += 1


class DeviceStub:
    def __init__(self, name="stub keyboard", path="/dev/input/event99", leds=None):
        self.name = name
        self.path = path
        self._leds = set(leds or ())

    def leds(self):
        return list(self._leds)

    def set_led(self, led_code, state=True):
        if state:
            self._leds.add(led_code)
        else:
            self._leds.discard(led_code)


def key_event(code, action=Action.PRESS):
    return InputEvent(0, 0, ecodes.EV_KEY, code, int(action))
