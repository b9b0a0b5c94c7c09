import dbus

from dbus.exceptions import DBusException

from .lib.logger import error

NOTIFY_SVC_NAME     = 'org.freedesktop.Notifications'
NOTIFY_SVC_PATH     = '/org/freedesktop/Notifications'
NOTIFY_SVC_IFACE    = 'org.freedesktop.Notifications'

URGENCY_NORMAL      = 1
URGENCY_CRITICAL    = 2


class Notifier:
    """User visible notifications over the session bus"""

    def __init__(self, app_name="modalkeyz", session_bus=None):
        self.app_name = app_name
        self._bus = session_bus
        self._iface = None

    def _interface(self):
        if self._iface is None:
            self._bus = self._bus or dbus.SessionBus()
            proxy = self._bus.get_object(NOTIFY_SVC_NAME, NOTIFY_SVC_PATH)
            self._iface = dbus.Interface(proxy, NOTIFY_SVC_IFACE)
        return self._iface

    def notify(self, title, text, urgency=URGENCY_NORMAL):
        try:
            self._interface().Notify(
                self.app_name, dbus.UInt32(0), "", title, text,
                dbus.Array([], signature='s'),
                {"urgency": dbus.Byte(urgency)},
                dbus.Int32(-1))
        except DBusException as dbus_error:
            # no notification daemon, make sure the message is not lost
            self._iface = None
            error(f"Notification failed ({dbus_error.get_dbus_name()}): {title}: {text}")

    def notify_error(self, text):
        self.notify("Error", text, urgency=URGENCY_CRITICAL)
