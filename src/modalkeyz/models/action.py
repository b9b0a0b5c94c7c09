from enum import IntEnum, unique


@unique
class Action(IntEnum):
    """Key event action, numbered like the evdev EV_KEY value"""

    RELEASE, PRESS, REPEAT = range(3)

    @property
    def is_pressed(self):
        # autorepeat is delivered to the navigator exactly like a press
        return self in (Action.PRESS, Action.REPEAT)

    @property
    def is_released(self):
        return self == Action.RELEASE

    def __str__(self):
        return self.name.lower()


PRESS                           = Action.PRESS
RELEASE                         = Action.RELEASE
REPEAT                          = Action.REPEAT
