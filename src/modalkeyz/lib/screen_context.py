import os
import abc
import i3ipc

from ..hints import DEFAULT_WORKAREA, Workarea
from .logger import debug, error

# Provider classes for the usable screen area (the overlay is
# positioned inside it).

# Place new provider classes above the generic class at the end so
# they are picked up by the environment map automatically.


class ScreenContextProviderInterface(abc.ABC):
    """Abstract base class for all screen context provider classes"""

    @classmethod
    @abc.abstractmethod
    def get_supported_environments(cls):
        """
        Return a list of ``(session_type, desktop)`` tuples the provider
        supports, e.g. ``[('x11', None)]`` or ``[('wayland', 'sway')]``.
        """

    @abc.abstractmethod
    def get_workarea(self) -> Workarea:
        """
        Return the usable area of the focused screen. On any error the
        provider returns ``DEFAULT_WORKAREA`` instead of raising.
        """


class Wl_sway_ScreenContext(ScreenContextProviderInterface):
    """Screen context provider for Wayland+sway environments"""

    def __init__(self):
        self.cnxn_obj = None

    @classmethod
    def get_supported_environments(cls):
        return [
            ('wayland', 'sway'),
            ('wayland', 'swaywm'),
        ]

    def _connection(self):
        if self.cnxn_obj is None:
            self.cnxn_obj = i3ipc.Connection(auto_reconnect=True)
            debug('SCR_SWAY: Connection object created.')
        return self.cnxn_obj

    def get_workarea(self):
        try:
            outputs = self._connection().get_outputs()
        # i3ipc.Connection() may raise a generic Exception as well as ConnectionError
        except (ConnectionError, Exception) as cnxn_err:
            error(f'Problem querying sway outputs via i3ipc:\n\t{cnxn_err}')
            self.cnxn_obj = None
            return DEFAULT_WORKAREA

        for output in outputs:
            if output.focused:
                rect = output.rect
                return Workarea(rect.x, rect.y, rect.width, rect.height)
        debug("No focused output reported by sway.")
        return DEFAULT_WORKAREA


class Xorg_ScreenContext(ScreenContextProviderInterface):
    """Screen context provider for X11/Xorg environments"""

    def __init__(self):
        self._display = None

        # Import Xlib modules here
        from Xlib.display import Display
        from Xlib.error import (
                            ConnectionClosedError,
                            DisplayConnectionError,
                            DisplayNameError,
                            XError,
                            )
        self.Display                = Display
        # DisplayNameError: DISPLAY is most likely not set
        # DisplayConnectionError: no permission to the X display
        self.x_errors               = (ConnectionClosedError, DisplayConnectionError,
                                       DisplayNameError, XError)

    @classmethod
    def get_supported_environments(cls):
        return [('x11', None)]

    def get_workarea(self):
        try:
            self._display = self._display or self.Display()
            root = self._display.screen().root
            # _NET_WORKAREA holds x, y, width, height per desktop
            prop = root.get_full_property(self._display.get_atom("_NET_WORKAREA"), 0)
            if prop is not None and len(prop.value) >= 4:
                x, y, width, height = (int(v) for v in prop.value[:4])
                return Workarea(x, y, width, height)
            geom = root.get_geometry()
            return Workarea(0, 0, geom.width, geom.height)

        except self.x_errors as xerror:
            error(f"Problem reading the X11 workarea:\n\t{xerror}")
            self._display = None
            return DEFAULT_WORKAREA


###############################################################################################
# ALL SPECIFIC PROVIDER CLASSES MUST BE DEFINED BEFORE/ABOVE THIS GENERIC PROVIDER!!!

class ScreenContextProvider(ScreenContextProviderInterface):
    """generic object redirecting to the provider for the running environment"""

    environment_class_map = {
        env: cls for cls in ScreenContextProviderInterface.__subclasses__()
        for env in cls.get_supported_environments()
    }

    def __init__(self, session_type=None, desktop=None):
        session_type = session_type or os.environ.get("XDG_SESSION_TYPE", "x11")
        env = (session_type, desktop)
        if env not in self.environment_class_map:
            raise ValueError(f"Unsupported environment: {env}")
        self._provider = self.environment_class_map[env]()

    @classmethod
    def detect(cls):
        """Best guess at the environment; never raises"""
        session_type = os.environ.get("XDG_SESSION_TYPE", "x11").lower()
        desktop = None
        if session_type == "wayland" and os.environ.get("SWAYSOCK"):
            desktop = "sway"
        try:
            return cls(session_type, desktop)
        except ValueError as err:
            error(f"{err}. Using a default workarea.")
            return None

    def get_workarea(self):
        return self._provider.get_workarea()

    @classmethod
    def get_supported_environments(cls):
        # This generic class does not directly support any environments
        return []
